from collections import deque
from pathlib import Path

import pytest

from completers.sources.filesystem import FsCompleter, FsCompletion, FsEntryType, scan_directory


def _seed(tmp: Path) -> Path:
    root = tmp / "Project"; root.mkdir()
    (root / "a").mkdir()
    (root / "a" / "x.txt").write_text("x\n", encoding="utf-8")
    (root / "a" / "sub").mkdir()
    (root / "a" / "sub" / "deep.txt").write_text("deep\n", encoding="utf-8")
    (root / "b.txt").write_text("b\n", encoding="utf-8")
    (root / ".hidden").mkdir()
    (root / ".hidden" / "h.txt").write_text("h\n", encoding="utf-8")
    (root / ".dot.txt").write_text("dot\n", encoding="utf-8")
    return root


def _drain(completer):
    out = []
    try:
        while not completer.fetching_finished():
            out.extend(completer.fetch_completions())
    finally:
        completer.close()
    return out


def test_walk_is_breadth_first_sorted_and_skips_hidden(tmp_path: Path):
    root = _seed(tmp_path)
    found = [c.result_string() for c in _drain(FsCompleter(root))]
    assert found == [
        str(root / "a"), str(root / "b.txt"),
        str(root / "a" / "sub"), str(root / "a" / "x.txt"),
        str(root / "a" / "sub" / "deep.txt"),
    ]


def test_walk_from_dot_yields_relative_paths(tmp_path: Path, monkeypatch):
    root = _seed(tmp_path)
    monkeypatch.chdir(root)
    found = [c.result_string() for c in _drain(FsCompleter("."))]
    assert found[:2] == ["a", "b.txt"]
    assert str(Path("a") / "sub" / "deep.txt") in found


@pytest.mark.parametrize("limit,expected", [(0, 2), (1, 4), (4, 5)])
def test_depth_limit(tmp_path: Path, limit, expected):
    root = _seed(tmp_path)
    assert len(_drain(FsCompleter(root, depth_limit=limit))) == expected


def test_directories_are_blue(tmp_path: Path):
    root = _seed(tmp_path)
    by_name = {Path(c.result_string()).name: c for c in _drain(FsCompleter(root))}
    assert by_name["a"].entry_type is FsEntryType.DIRECTORY
    assert by_name["a"].color() == "34"
    assert by_name["b.txt"].entry_type is FsEntryType.FILE
    assert by_name["b.txt"].color() is None


def test_unreadable_directory_yields_nothing(tmp_path: Path):
    queue = deque([(tmp_path / "missing", 0)])
    assert scan_directory(queue, 4) == []
    assert not queue


def test_descend_into_directories_only(tmp_path: Path):
    root = _seed(tmp_path)
    fs = FsCompleter(root)
    try:
        child = fs.descend(FsCompletion(path=root / "a", entry_type=FsEntryType.DIRECTORY))
        assert child is not None and child.dir_path == root / "a"
        assert [c.result_string() for c in _drain(child)][:2] == [
            str(root / "a" / "sub"), str(root / "a" / "x.txt"),
        ]
        assert fs.descend(FsCompletion(path=root / "b.txt", entry_type=FsEntryType.FILE)) is None
    finally:
        fs.close()


def _ascend(start):
    fs = FsCompleter(start)
    fs.close()
    parent = fs.ascend()
    if parent is not None:
        parent.close()
    return parent


def test_ascend_from_dot_and_dotdot(tmp_path: Path, monkeypatch):
    deep = tmp_path / "one" / "two"; deep.mkdir(parents=True)
    monkeypatch.chdir(deep)
    assert _ascend(".").dir_path == Path("..")
    assert _ascend("..").dir_path == Path("..") / ".."


def test_ascend_collapses_to_filesystem_root(monkeypatch):
    monkeypatch.chdir("/")
    assert _ascend("..").dir_path == Path("/")


def test_ascend_absolute_and_relative(tmp_path: Path):
    root = _seed(tmp_path)
    assert _ascend(root / "a").dir_path == root
    assert _ascend(Path("/")) is None
    assert _ascend(Path("some") / "where") is None
