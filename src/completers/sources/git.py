"""
Git completers: refs (branches, remote branches, tags, HEAD) and the commits of
one ref. Both shell out to ``git`` once, on the first fetch. A missing git
binary, a directory outside a repository or any other git failure simply
yields no completions.
"""
from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ..core import Batch, Completer, SyncCompleter
from ..models import Completion

__all__ = [
    "GitBranchCompleter", "GitBranchCompletion", "GitRefKind",
    "GitCommitCompleter", "GitCommitCompletion", "run_git",
]

log = logging.getLogger(__name__)


def run_git(args: List[str], cwd: Optional[str] = None) -> Optional[str]:
    """Run ``git <args>`` and return stdout, or None if it could not run or failed."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        log.warning("git %s: could not start: %s", args[0], e)
        return None
    if result.returncode != 0:
        log.warning("git %s: exit %d: %s", args[0], result.returncode, result.stderr.strip())
        return None
    return result.stdout


class GitRefKind(enum.Enum):
    HEAD = "head"
    BRANCH = "branch"
    REMOTE_BRANCH = "remote"
    TAG = "tag"


_REF_COLORS = {
    GitRefKind.HEAD: "31",           # red
    GitRefKind.REMOTE_BRANCH: "90",  # bright black
    GitRefKind.TAG: "33",            # yellow
}


@dataclass(frozen=True, slots=True)
class GitBranchCompletion(Completion):
    kind: GitRefKind
    ref_name: str

    def result_string(self) -> str:
        return self.ref_name

    def color(self) -> Optional[str]:
        return _REF_COLORS.get(self.kind)


def parse_refs(output: str) -> List[GitBranchCompletion]:
    """Parse ``git for-each-ref --format='%(objecttype) %(refname:strip=2)'`` output."""
    refs: List[GitBranchCompletion] = []
    for line in output.splitlines():
        parts = line.split(None, 1)
        if len(parts) != 2:
            continue
        ref_type, ref_name = parts[0], parts[1].strip()
        if ref_type == "commit":
            kind = GitRefKind.REMOTE_BRANCH if "/" in ref_name else GitRefKind.BRANCH
        else:
            kind = GitRefKind.TAG
        refs.append(GitBranchCompletion(kind=kind, ref_name=ref_name))
    return refs


class GitBranchCompleter(SyncCompleter):
    """HEAD plus every ref of the repository containing ``cwd``."""

    def __init__(self, cwd: Optional[str] = None) -> None:
        super().__init__()
        self.cwd = cwd

    def name(self) -> str:
        return "br"

    def _fetch_all(self) -> Batch:
        out = run_git(["for-each-ref", "--format=%(objecttype) %(refname:strip=2)"], cwd=self.cwd)
        if out is None:
            return []
        return [GitBranchCompletion(kind=GitRefKind.HEAD, ref_name="HEAD"), *parse_refs(out)]

    def descend(self, completion: Completion) -> Optional[Completer]:
        if isinstance(completion, GitBranchCompletion):
            return GitCommitCompleter(completion.ref_name, cwd=self.cwd)
        return None


@dataclass(frozen=True, slots=True)
class GitCommitCompletion(Completion):
    hash: str
    date: str
    author: str
    subject: str

    def result_string(self) -> str:
        return self.hash

    def display_string(self) -> str:
        return f"{self.hash:10} {self.date:12} {self.author:25} {self.subject}"

    def search_string(self) -> str:
        return self.subject


def parse_log(output: str) -> List[GitCommitCompletion]:
    """Parse ``git log --format=%h%x09%ad%x09%an%x09%s`` output."""
    commits: List[GitCommitCompletion] = []
    for line in output.splitlines():
        fields = line.split("\t", 3)
        if len(fields) != 4:
            continue
        h, date, author, subject = fields
        commits.append(GitCommitCompletion(hash=h, date=date, author=author, subject=subject))
    return commits


class GitCommitCompleter(SyncCompleter):
    """Commits reachable from ``ref``, newest first. Searched by subject."""

    def __init__(self, ref: str, cwd: Optional[str] = None) -> None:
        super().__init__()
        self.ref = ref
        self.cwd = cwd

    def name(self) -> str:
        return "co"

    def _fetch_all(self) -> Batch:
        out = run_git(
            ["log", "--format=%h%x09%ad%x09%an%x09%s", "--date=short", self.ref, "--"],
            cwd=self.cwd,
        )
        if out is None:
            return []
        return parse_log(out)
