"""Concrete completion sources: filesystem, git refs/commits and a number generator."""
from __future__ import annotations

from typing import Optional

from ..core import Completer
from .filesystem import FsCompleter
from .git import GitBranchCompleter, GitCommitCompleter
from .numbers import NumCompleter

__all__ = ["FsCompleter", "GitBranchCompleter", "GitCommitCompleter", "NumCompleter",
           "SOURCE_KINDS", "make_completer"]

SOURCE_KINDS = ("fs", "branches", "numbers")


def make_completer(kind: str, root: Optional[str] = None, count: int = 100) -> Completer:
    """
    Factory:
      - "fs"        -> FsCompleter rooted at ``root`` (default ".")
      - "branches"  -> GitBranchCompleter for the repository at ``root``
      - "numbers"   -> NumCompleter(count)
    """
    if kind == "fs":
        return FsCompleter(root or ".")
    if kind == "branches":
        return GitBranchCompleter(cwd=root)
    if kind == "numbers":
        return NumCompleter(count)
    raise ValueError(f"Unsupported source: {kind!r} (expected one of {', '.join(SOURCE_KINDS)})")
