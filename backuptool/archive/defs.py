"""Archive layout: directory names, file names and entry keys."""

from __future__ import annotations

import os
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from ..dirwalk import DirWalk
from ..helpers import is_dir, is_file

CONTENT_DIR = "content"
CHANNEL_DIR = "channels"
LOCK_FILE = "lock"
SETTINGS_FILE = "settings.json"

KEY_FILE = "file"
KEY_DIR = "dir"
KEY_HASH = "hash"

PathLike = Union[str, os.PathLike]


def settings_file(archive_dir: PathLike) -> Path:
    return Path(archive_dir) / SETTINGS_FILE


def content_dir(archive_dir: PathLike) -> Path:
    return Path(archive_dir) / CONTENT_DIR


def content_file(archive_dir: PathLike, digest: bytes) -> Path:
    """Path of the stored content whose digest is given."""
    return content_dir(archive_dir) / bytes(digest).hex()


def channel_dir(archive_dir: PathLike, channel: str) -> Path:
    return Path(archive_dir) / CHANNEL_DIR / channel


def channel_file(archive_dir: PathLike, channel: str, channel_rev: str) -> Path:
    return channel_dir(archive_dir, channel) / channel_rev


def lock_file(archive_dir: PathLike) -> Path:
    return Path(archive_dir) / LOCK_FILE


def next_channel_file(archive_dir: PathLike, channel: str) -> Path:
    """A fresh revision file name built from the UTC time and a random suffix."""
    now = datetime.now(timezone.utc)
    name = (
        f"{now.year}{now.month}{now.day}"
        f"_{now.hour:02}{now.minute:02}"
        f"_{now.second:02}"
        f"_{secrets.randbits(64):016x}"
    )
    return channel_dir(archive_dir, channel) / name


def content_paths(archive_dir: PathLike) -> DirWalk:
    return DirWalk(content_dir(archive_dir), recursive=False, path_filter=is_file)


def channel_rev_paths(archive_dir: PathLike, channel: str) -> DirWalk:
    return DirWalk(channel_dir(archive_dir, channel), recursive=False, path_filter=is_file)


def channel_paths(archive_dir: PathLike) -> DirWalk:
    return DirWalk(Path(archive_dir) / CHANNEL_DIR, recursive=False, path_filter=is_dir)


def channel_rev_last(archive_dir: PathLike, channel: str) -> Path:
    """The newest revision file of a channel; LookupError if there is none."""
    latest = max(channel_rev_paths(archive_dir, channel), default=None)
    if latest is None:
        raise LookupError(f"cannot get latest revision in channel {channel}")
    return latest