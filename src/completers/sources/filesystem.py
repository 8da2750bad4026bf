from __future__ import annotations

import enum
import logging
import os
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Deque, Iterator, List, Optional, Tuple

from ..config import DIRECTORY_DEPTH_LIMIT
from ..core import Batch, BackgroundCompleter, Completer
from ..models import Completion

__all__ = ["FsCompleter", "FsCompletion", "FsEntryType", "scan_directory", "walk"]

log = logging.getLogger(__name__)

BLUE = "34"


class FsEntryType(enum.Enum):
    DIRECTORY = "directory"
    FILE = "file"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class FsCompletion(Completion):
    """A path found by the walk, relative to the process cwd when the walk started at '.'."""
    path: Path
    entry_type: FsEntryType

    def result_string(self) -> str:
        return str(self.path)

    def color(self) -> Optional[str]:
        return BLUE if self.entry_type is FsEntryType.DIRECTORY else None


def _entry_type(entry: os.DirEntry) -> FsEntryType:
    try:
        return FsEntryType.DIRECTORY if entry.is_dir(follow_symlinks=False) else FsEntryType.FILE
    except OSError:
        return FsEntryType.ERROR


def scan_directory(queue: Deque[Tuple[Path, int]], depth_limit: int) -> List[FsCompletion]:
    """
    One BFS step: list the directory at the head of ``queue``, enqueue its
    subdirectories (while under ``depth_limit``) and return its entries sorted
    by path. Hidden entries are skipped; unreadable directories yield nothing.
    """
    if not queue:
        return []
    dir_path, depth = queue.popleft()
    out: List[FsCompletion] = []
    try:
        with os.scandir(dir_path) as it:
            for entry in it:
                if entry.name.startswith("."):
                    continue
                kind = _entry_type(entry)
                path = dir_path / entry.name
                if kind is FsEntryType.DIRECTORY and depth < depth_limit:
                    queue.append((path, depth + 1))
                out.append(FsCompletion(path=path, entry_type=kind))
    except OSError as e:
        log.debug("skipping %s: %s", dir_path, e)
        return []
    out.sort(key=lambda c: c.result_string())
    return out


def walk(root: Path, depth_limit: int) -> Iterator[Batch]:
    """Breadth-first walk below ``root``, one directory per batch."""
    queue: Deque[Tuple[Path, int]] = deque([(root, 0)])
    while queue:
        yield scan_directory(queue, depth_limit)


class FsCompleter(BackgroundCompleter):
    """
    Completes file names below ``dir_path``.

    The directory tree is walked breadth-first on a worker thread, one
    directory per unit of work, so the chooser fills level by level while
    deeper levels are still being scanned.
    """

    def __init__(self, dir_path: str | Path = ".", depth_limit: int = DIRECTORY_DEPTH_LIMIT) -> None:
        self.dir_path = Path(dir_path)
        self.depth_limit = depth_limit
        super().__init__(walk(self.dir_path, depth_limit))

    def name(self) -> str:
        return "fs"

    def descend(self, completion: Completion) -> Optional[Completer]:
        if isinstance(completion, FsCompletion) and completion.entry_type is FsEntryType.DIRECTORY:
            return FsCompleter(completion.path, self.depth_limit)
        return None

    def ascend(self) -> Optional[Completer]:
        current = self.dir_path
        if current == Path("."):
            return FsCompleter(Path(".."), self.depth_limit)
        if current.name == "..":
            parent = current / ".."
            if parent.resolve() == Path("/"):
                parent = Path("/")
            return FsCompleter(parent, self.depth_limit)
        if current.is_absolute():
            if current.parent == current:
                return None
            return FsCompleter(current.parent, self.depth_limit)
        return None

    def __repr__(self) -> str:
        return f"FsCompleter({str(self.dir_path)!r})"
