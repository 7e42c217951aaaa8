"""Opening, creating and locking a backup archive."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Union

from ..helpers import expect_dir, is_file_or_dir
from . import defs
from .content import ContentSettings

PathLike = Union[str, os.PathLike]


class ArchiveError(Exception):
    """The archive is missing, malformed or in use."""


class ArchiveLock:
    """Exclusive lock on an archive, held by a lock file inside it."""

    def __init__(self, archive_dir: PathLike) -> None:
        archive_dir = Path(archive_dir)
        try:
            with open(defs.lock_file(archive_dir), "x"):
                pass
        except OSError as exc:
            raise ArchiveError("backup storage is locked") from exc
        self.archive_dir: Optional[Path] = archive_dir

    def unlock(self) -> None:
        if self.archive_dir is None:
            return
        try:
            os.remove(defs.lock_file(self.archive_dir))
        except OSError:
            print(f"cannot unlock {self.archive_dir}")
        else:
            self.archive_dir = None

    def __enter__(self) -> ArchiveLock:
        return self

    def __exit__(self, *args) -> None:
        self.unlock()


class BackupSession:
    """An opened archive: its directory, settings and lock."""

    def __init__(self, archive_dir: PathLike) -> None:
        archive_dir = Path(archive_dir)
        checks = (
            (archive_dir, "archive dir does not exist"),
            (archive_dir / defs.CHANNEL_DIR, "channel dir does not exist"),
            (defs.content_dir(archive_dir), "content dir does not exist"),
        )
        for path, message in checks:
            try:
                expect_dir(path, message)
            except NotADirectoryError as exc:
                raise ArchiveError(message) from exc

        try:
            raw = defs.settings_file(archive_dir).read_bytes()
        except OSError as exc:
            raise ArchiveError("cannot read settings file") from exc
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ArchiveError("settings file is not valid Utf-8") from exc
        try:
            settings = ContentSettings.from_json(json.loads(text))
        except ValueError as exc:
            raise ArchiveError("invalid settings file") from exc

        self.archive_dir = archive_dir
        self.settings = settings
        self.lock = ArchiveLock(archive_dir)

    @classmethod
    def init_archive(cls, archive_dir: PathLike, settings: ContentSettings) -> None:
        """Create a new, empty archive; the path must not exist yet."""
        archive_dir = Path(archive_dir)
        if is_file_or_dir(archive_dir):
            raise ArchiveError("init archive failed")
        try:
            archive_dir.mkdir()
            (archive_dir / defs.CHANNEL_DIR).mkdir()
            defs.content_dir(archive_dir).mkdir()
        except OSError as exc:
            raise ArchiveError("init archive failed") from exc
        path = defs.settings_file(archive_dir)
        try:
            path.write_text(json.dumps(settings.to_json(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ArchiveError(f"cannot write settings file {path}") from exc

    def channel_names(self) -> list[str]:
        return [path.name for path in defs.channel_paths(self.archive_dir)]

    def close(self) -> None:
        self.lock.unlock()

    def __enter__(self) -> BackupSession:
        return self

    def __exit__(self, *args) -> None:
        self.close()