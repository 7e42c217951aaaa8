"""Line based key/value metadata format with a trailing checksum line."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator, Optional, Union

from .checksum import HashResult

SEPARATOR = ":"
END_MARKER = "__end"


class MetaFormatError(ValueError):
    """Malformed or corrupted metadata."""


@dataclass(frozen=True)
class ReaderEntry:
    key: str
    value: str
    depth: int


def _text_lines(stream: Iterable[Union[str, bytes]]) -> Iterator[str]:
    for line in stream:
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MetaFormatError("cannot read line") from exc
        yield line


def parse_line(line: str) -> Optional[ReaderEntry]:
    """Split a line into depth, key and value; None if it has no separator."""
    body = line.lstrip("\t")
    depth = len(line) - len(body)
    key, found, value = body.partition(SEPARATOR)
    if not found:
        return None
    if value.endswith("\n"):
        value = value[:-1]
    return ReaderEntry(key=key, value=value, depth=depth)


class Reader:
    """Iterates the entries of a metadata stream (text or binary lines)."""

    def __init__(self, stream: Iterable[Union[str, bytes]]) -> None:
        self._stream = stream
        self.depth = 0

    def __iter__(self) -> Iterator[ReaderEntry]:
        for line in _text_lines(self._stream):
            entry = parse_line(line)
            if entry is None:
                raise MetaFormatError(f"invalid line: {line!r}")
            if entry.depth > self.depth + 1:
                raise MetaFormatError("every element needs a parent element")
            self.depth = entry.depth
            yield entry


class Writer:
    """Writes indented entries to a binary stream and seals them on close.

    Closing appends an end-marker line holding the SHA-256 of all entry lines.
    The underlying stream is closed only when owns_stream is true.
    """

    def __init__(self, stream: BinaryIO, *, owns_stream: bool = False) -> None:
        self._stream = stream
        self._owns_stream = owns_stream
        self._digest = hashlib.sha256()
        self._closed = False
        self.depth = 0
        self.bytes_written = 0

    def _write_raw(self, text: str) -> None:
        data = text.encode("utf-8")
        self._digest.update(data)
        self._stream.write(data + b"\n")
        self.bytes_written += len(data)

    def add_entry(self, key: str, value: str) -> None:
        if self._closed:
            raise MetaFormatError("writer is closed")
        self._write_raw("\t" * self.depth + f"{key}{SEPARATOR}{value}")

    def increase_depth(self) -> None:
        self.depth += 1

    def decrease_depth(self) -> None:
        if self.depth == 0:
            raise MetaFormatError("invalid depth")
        self.depth -= 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self.bytes_written:
                checksum = HashResult.from_data(self._digest.digest())
                self._write_raw(f"{END_MARKER}{SEPARATOR}{checksum.hex()}")
            self._stream.flush()
        finally:
            if self._owns_stream:
                self._stream.close()

    def __enter__(self) -> Writer:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def verify(reader: Iterable[Union[str, bytes]]) -> None:
    """Check the end-marker checksum of a metadata stream; raise MetaFormatError on failure."""
    hasher = hashlib.sha256()
    marker = END_MARKER + SEPARATOR
    stored: Optional[str] = None

    for line in _text_lines(reader):
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        _, found, rest = line.partition(marker)
        if found:
            stored = rest
            break
        hasher.update(line.encode("utf-8"))

    if stored is None:
        raise MetaFormatError(f"cannot read {END_MARKER} marker")
    try:
        expected = HashResult.from_hex_string(stored)
    except ValueError as exc:
        raise MetaFormatError("invalid checksum in end marker") from exc
    if expected.digest != hasher.digest():
        raise MetaFormatError("hashsum mismatch")