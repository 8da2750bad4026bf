import shutil
import subprocess
from pathlib import Path

import pytest

import completers.sources.git as git_mod
from completers.sources.git import (
    GitBranchCompleter, GitCommitCompleter, GitCommitCompletion, GitRefKind, parse_log, parse_refs,
)

needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(repo: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", "-c", "tag.gpgsign=false", *args],
        cwd=repo, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
    )


def _seed(tmp: Path) -> Path:
    repo = tmp / "repo"; repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "checkout", "-q", "-b", "main")
    (repo / "README.md").write_text("hello\n", encoding="utf-8")
    _git(repo, "add", "README.md")
    _git(repo, "commit", "-q", "-m", "initial commit")
    _git(repo, "branch", "feature")
    _git(repo, "tag", "-a", "v1", "-m", "release v1")
    return repo


def test_parse_refs_kinds():
    refs = parse_refs("commit main\ncommit origin/main\ntag v1.0\n\nbogus\n")
    assert [(r.kind, r.ref_name) for r in refs] == [
        (GitRefKind.BRANCH, "main"),
        (GitRefKind.REMOTE_BRANCH, "origin/main"),
        (GitRefKind.TAG, "v1.0"),
    ]
    assert refs[0].color() is None
    assert refs[1].color() == "90"
    assert refs[2].color() == "33"


def test_parse_log_and_commit_strings():
    commits = parse_log("abc1234\t2024-01-02\tAda Lovelace\tFix the parser\nbroken line\n")
    assert len(commits) == 1
    c = commits[0]
    assert c.result_string() == "abc1234"
    assert c.search_string() == "Fix the parser"
    assert c.display_string() == f"{'abc1234':10} {'2024-01-02':12} {'Ada Lovelace':25} Fix the parser"


def test_missing_git_binary_yields_nothing(monkeypatch):
    def boom(*args, **kwargs):
        raise FileNotFoundError("git")
    monkeypatch.setattr(git_mod.subprocess, "run", boom)
    c = GitBranchCompleter()
    assert c.fetch_completions() == []
    assert c.fetching_finished()
    assert GitCommitCompleter("HEAD").fetch_completions() == []


@needs_git
def test_outside_a_repository_yields_nothing(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    assert GitBranchCompleter(cwd=str(tmp_path)).fetch_completions() == []


@pytest.mark.e2e
@needs_git
def test_branches_then_commits(tmp_path: Path):
    repo = _seed(tmp_path)
    branches = GitBranchCompleter(cwd=str(repo))
    refs = branches.fetch_completions()
    assert refs[0].result_string() == "HEAD"
    assert refs[0].kind is GitRefKind.HEAD and refs[0].color() == "31"
    kinds = {r.result_string(): r.kind for r in refs[1:]}
    assert kinds == {"feature": GitRefKind.BRANCH, "main": GitRefKind.BRANCH, "v1": GitRefKind.TAG}
    assert branches.fetch_completions() == []

    main = next(r for r in refs if r.result_string() == "main")
    commits = branches.descend(main)
    assert isinstance(commits, GitCommitCompleter)
    assert commits.name() == "co"
    log = commits.fetch_completions()
    assert len(log) == 1
    assert isinstance(log[0], GitCommitCompletion)
    assert log[0].subject == "initial commit"
    assert log[0].author == "Test"
    assert commits.descend(log[0]) is None
