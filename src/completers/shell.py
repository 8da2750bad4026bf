from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Callable, List, Optional, Sequence, Tuple

from .config import WORD_BOUNDARIES
from .core import Completer
from .sources import FsCompleter, GitBranchCompleter


def initial_query_range(line: str, point: int,
                        boundaries: AbstractSet[str] = WORD_BOUNDARIES) -> Tuple[int, int]:
    """
    The [start, end) range of the word under ``point`` in ``line``; this is
    the text a completion replaces. (0, 0) for an empty line.
    """
    start = 0
    for i in range(len(line) + 1):
        if i == len(line) or line[i] in boundaries:
            if start <= point <= i:
                return start, i
            start = i + 1
    return 0, 0


def completers_for_query(query: str, cwd: Optional[str] = None) -> List[Completer]:
    """
    Completers for a session started on ``query``: the filesystem (rooted at
    the query itself when it is an absolute path, else at the current
    directory) and the git refs.
    """
    query_path = Path(query)
    fs_root = query_path if query and query_path.is_absolute() else Path(cwd or ".")
    return [FsCompleter(fs_root), GitBranchCompleter(cwd=cwd)]


def complete_line(line: str, point: int,
                  choose: Callable[[str, Sequence[Completer]], str],
                  boundaries: AbstractSet[str] = WORD_BOUNDARIES,
                  cwd: Optional[str] = None) -> Tuple[str, int]:
    """
    Replace the word under ``point`` with the result of ``choose(query,
    completers)`` and return the new line and cursor position.
    """
    start, end = initial_query_range(line, point, boundaries)
    query = line[start:end]
    completion = choose(query, completers_for_query(query, cwd))
    return line[:start] + completion + line[end:], start + len(completion)
