"""Sorted, depth-first directory walking."""

from __future__ import annotations

import os
from collections import deque
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

PathFilter = Callable[[Path], bool]


def _list_dir(path: Path) -> list[tuple[Path, bool]]:
    with os.scandir(path) as entries:
        listing = [(Path(entry.path), entry.is_dir(follow_symlinks=False)) for entry in entries]
    listing.sort(key=lambda item: item[0])
    return listing


class DirWalk:
    """Walks a directory, yielding each entry before the entries below it.

    Entries in one directory come in sorted order. The root directory is read
    on construction, so an unreadable root raises OSError right away.
    Subdirectories that cannot be read are skipped.
    """

    def __init__(
        self,
        root_dir: Union[str, os.PathLike],
        recursive: bool = True,
        path_filter: Optional[PathFilter] = None,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.recursive = recursive
        self.path_filter = path_filter
        self._root_entries = _list_dir(self.root_dir)

    def __iter__(self) -> Iterator[Path]:
        pending = [deque(self._root_entries)]
        while pending:
            entries = pending[-1]
            if not entries:
                pending.pop()
                continue
            path, is_dir = entries.popleft()
            if is_dir and self.recursive:
                try:
                    pending.append(deque(_list_dir(path)))
                except OSError:
                    pass
            if self.path_filter is not None and not self.path_filter(path):
                continue
            yield path


def walk_recursive(root_dir: Union[str, os.PathLike]) -> DirWalk:
    return DirWalk(root_dir, recursive=True)