"""Content storage settings and compressing stream wrappers."""

from __future__ import annotations

import bz2
import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Optional

from ..checksum import HashAlgo, HashResult


class CompressionKind(Enum):
    NONE = "None"
    BZIP2 = "Bzip2"


@dataclass(frozen=True)
class ContentCompression:
    """How stored content is compressed; bzip2 carries a level from 1 to 9."""

    kind: CompressionKind
    level: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is CompressionKind.BZIP2:
            if not isinstance(self.level, int) or not 1 <= self.level <= 9:
                raise ValueError(f"invalid bzip2 level: {self.level!r}")
        elif self.level is not None:
            raise ValueError("uncompressed content takes no level")

    def to_json(self) -> Any:
        if self.kind is CompressionKind.NONE:
            return CompressionKind.NONE.value
        return {CompressionKind.BZIP2.value: {"level": self.level}}

    @classmethod
    def from_json(cls, data: Any) -> ContentCompression:
        if data == CompressionKind.NONE.value:
            return cls(CompressionKind.NONE)
        if isinstance(data, dict) and set(data) == {CompressionKind.BZIP2.value}:
            body = data[CompressionKind.BZIP2.value]
            if isinstance(body, dict) and isinstance(body.get("level"), int):
                return cls(CompressionKind.BZIP2, body["level"])
        raise ValueError(f"invalid compression setting: {data!r}")


@dataclass(frozen=True)
class ContentSettings:
    compression: ContentCompression
    hash_algo: HashAlgo

    def to_json(self) -> dict:
        return {"compression": self.compression.to_json(), "hash_algo": self.hash_algo.value}

    @classmethod
    def from_json(cls, data: Any) -> ContentSettings:
        if not isinstance(data, dict):
            raise ValueError("settings must be an object")
        try:
            compression = data["compression"]
            hash_algo = data["hash_algo"]
        except KeyError as exc:
            raise ValueError(f"missing setting {exc.args[0]}") from exc
        return cls(ContentCompression.from_json(compression), HashAlgo(hash_algo))


class ContentWriter:
    """Writes content through the configured compression, counting raw bytes."""

    def __init__(
        self, stream: BinaryIO, settings: ContentSettings, *, owns_stream: bool = False
    ) -> None:
        self._stream = stream
        self._owns_stream = owns_stream
        compression = settings.compression
        self._compressor: Optional[bz2.BZ2File] = None
        if compression.kind is CompressionKind.BZIP2:
            self._compressor = bz2.BZ2File(stream, "wb", compresslevel=compression.level)
        self._count = 0
        self._closed = False

    def write(self, data: bytes) -> int:
        self._count += len(data)
        (self._compressor or self._stream).write(data)
        return len(data)

    def flush(self) -> None:
        if self._compressor is not None:
            self._compressor.flush()
        self._stream.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._compressor is not None:
                self._compressor.close()
            self._stream.flush()
        finally:
            if self._owns_stream:
                self._stream.close()

    def bytes_written(self) -> int:
        return self._count

    def __enter__(self) -> ContentWriter:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class ContentReader:
    """Reads content back through the configured decompression."""

    def __init__(
        self,
        stream: BinaryIO,
        settings: ContentSettings,
        with_hash: bool = False,
        *,
        owns_stream: bool = False,
    ) -> None:
        self._stream = stream
        self._owns_stream = owns_stream
        self._decompressor: Optional[bz2.BZ2File] = None
        if settings.compression.kind is CompressionKind.BZIP2:
            self._decompressor = bz2.BZ2File(stream, "rb")
        self._digest = hashlib.sha256() if with_hash else None

    def read(self, size: int = -1) -> bytes:
        data = (self._decompressor or self._stream).read(size)
        if self._digest is not None:
            self._digest.update(data)
        return data

    @property
    def digest(self) -> Optional[HashResult]:
        """SHA-256 of everything read so far, when hashing was requested."""
        if self._digest is None:
            return None
        return HashResult.from_data(self._digest.digest())

    def close(self) -> None:
        try:
            if self._decompressor is not None:
                self._decompressor.close()
        finally:
            if self._owns_stream:
                self._stream.close()

    def __enter__(self) -> ContentReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()