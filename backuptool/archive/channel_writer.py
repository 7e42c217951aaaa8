"""Recording a new revision of a channel."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..checksum import HashResult
from ..helpers import create_dir_when_missing, is_file
from ..meta_format import Writer
from . import defs
from .session import BackupSession

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class AddFileResult:
    """Where the content of an added file belongs and whether it is stored already."""

    content_path: Path
    already_exists: bool


class ChannelWriter:
    """Writes a fresh revision file for a channel.

    The writer takes over the session; closing seals the revision and
    releases the session.
    """

    def __init__(self, session: BackupSession, channel: str) -> None:
        self.session = session
        self.channel = channel
        try:
            archive_dir = session.archive_dir
            create_dir_when_missing(defs.channel_dir(archive_dir, channel))
            create_dir_when_missing(defs.content_dir(archive_dir))
            handle = open(defs.next_channel_file(archive_dir, channel), "wb")
        except BaseException:
            session.close()
            raise
        self._writer = Writer(handle, owns_stream=True)

    def add_file(self, path: PathLike, checksum: HashResult) -> AddFileResult:
        self._writer.add_entry(defs.KEY_FILE, str(path))
        self._writer.increase_depth()
        self._writer.add_entry(defs.KEY_HASH, checksum.hex())
        self._writer.decrease_depth()

        target = defs.content_file(self.session.archive_dir, checksum.digest)
        return AddFileResult(content_path=target, already_exists=is_file(target))

    def add_dir(self, path: PathLike) -> None:
        self._writer.add_entry(defs.KEY_DIR, str(path))

    def close(self) -> None:
        try:
            self._writer.close()
        finally:
            self.session.close()

    def __enter__(self) -> ChannelWriter:
        return self

    def __exit__(self, *args) -> None:
        self.close()