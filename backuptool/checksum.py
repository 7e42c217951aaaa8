"""Content hashing and digest values."""

from __future__ import annotations

import hashlib
import string
from dataclasses import dataclass
from enum import Enum
from os import PathLike
from typing import BinaryIO, Callable, Union

OUTPUT_SIZE_SHORT = 4
_CHUNK_SIZE = 1024
_HEX_DIGITS = frozenset(string.hexdigits)


class HashAlgo(Enum):
    """Supported hash algorithms, valued by their name in settings files."""

    SHA256 = "Sha256"


_FACTORIES: dict[HashAlgo, Callable[[], "hashlib._Hash"]] = {
    HashAlgo.SHA256: hashlib.sha256,
}


@dataclass(frozen=True)
class HashResult:
    """A finished digest."""

    digest: bytes

    @classmethod
    def from_data(cls, data: bytes) -> HashResult:
        return cls(bytes(data))

    @classmethod
    def from_hex_string(cls, digest: str) -> HashResult:
        """Parse a hex encoded digest; raise ValueError if it is not valid hex."""
        if len(digest) % 2 or not set(digest) <= _HEX_DIGITS:
            raise ValueError(f"invalid hex digest: {digest!r}")
        return cls(bytes.fromhex(digest))

    def hex(self) -> str:
        return self.digest.hex()

    def short(self) -> str:
        """The first few bytes of the digest in hex, followed by an ellipsis."""
        return f"{self.digest[:OUTPUT_SIZE_SHORT].hex()}..."

    def __str__(self) -> str:
        return self.hex()


class Hasher:
    """Incremental hasher that resets itself after each result."""

    def __init__(self, algo: HashAlgo = HashAlgo.SHA256) -> None:
        self.algo = algo
        self._factory = _FACTORIES[algo]
        self._state = self._factory()

    def update(self, data: bytes) -> None:
        self._state.update(data)

    def finalize(self) -> HashResult:
        result = HashResult(self._state.digest())
        self._state = self._factory()
        return result

    def stream(self, reader: BinaryIO) -> HashResult:
        """Hash everything left in a binary stream."""
        for chunk in iter(lambda: reader.read(_CHUNK_SIZE), b""):
            self.update(chunk)
        return self.finalize()

    def file(self, path: Union[str, PathLike]) -> HashResult:
        with open(path, "rb") as handle:
            return self.stream(handle)


def new_hasher(algo: HashAlgo) -> Hasher:
    return Hasher(algo)