"""Filesystem helpers shared across the tool."""

from __future__ import annotations

import bz2
import os
from enum import Enum
from pathlib import Path
from typing import Callable, Union

BUFFER_SIZE = 1024 * 1024

PathLike = Union[str, os.PathLike]


def relative_path(base_path: PathLike, sub_path: PathLike) -> Path:
    """Return sub_path relative to base_path; raise ValueError if it lies outside."""
    try:
        return Path(sub_path).relative_to(Path(base_path))
    except ValueError as exc:
        raise ValueError(f"{sub_path} is not below {base_path}") from exc


def is_file(path: PathLike) -> bool:
    return os.path.isfile(path)


def is_dir(path: PathLike) -> bool:
    return os.path.isdir(path)


def is_file_or_dir(path: PathLike) -> bool:
    return is_file(path) or is_dir(path)


def expect_dir(path: PathLike, message: str) -> None:
    """Raise NotADirectoryError with the given message unless path is a directory."""
    if not is_dir(path):
        raise NotADirectoryError(message)


def create_dir_when_missing(path: PathLike) -> None:
    if not is_dir(path):
        os.makedirs(path)


class CopyAction(Enum):
    COMPRESS = "compress"
    UNCOMPRESS = "uncompress"


def _pump(read: Callable[[int], bytes], write: Callable[[bytes], object], src: Path) -> None:
    while True:
        try:
            chunk = read(BUFFER_SIZE)
        except (OSError, EOFError) as exc:
            raise OSError(f"cannot read from source file {src}") from exc
        if not chunk:
            return
        write(chunk)


def copy_convert(src: PathLike, dst: PathLike, action: CopyAction) -> None:
    """Copy src to dst, bzip2-compressing or decompressing on the way."""
    src, dst = Path(src), Path(dst)
    try:
        src_file = open(src, "rb")
    except OSError as exc:
        raise OSError(f"cannot open source file {src}") from exc
    with src_file:
        try:
            dst_file = open(dst, "wb")
        except OSError as exc:
            raise OSError(f"cannot open destination file {dst}") from exc
        with dst_file:
            if action is CopyAction.COMPRESS:
                with bz2.BZ2File(dst_file, "wb", compresslevel=9) as compressed:
                    _pump(src_file.read, compressed.write, src)
            else:
                with bz2.BZ2File(src_file, "rb") as decompressed:
                    _pump(decompressed.read, dst_file.write, src)


def format_error_chain(err: BaseException) -> str:
    """Render an exception and its causes, each cause indented one tab deeper."""
    lines = []
    current: BaseException | None = err
    depth = 0
    while current is not None:
        lines.append("\t" * depth + str(current))
        depth += 1
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return "\n".join(lines)