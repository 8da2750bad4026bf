from __future__ import annotations
from typing import Callable, Dict, List, Optional

import pytest

from completers.core import Batch, Completer
from completers.models import Completion, TextCompletion


class ScriptedCompleter(Completer):
    """
    In-memory completer double: hands out one scripted batch per fetch tick,
    optionally descends (by result string) and ascends through factories.
    """

    def __init__(self, batches: List[List[str]], name: str = "t",
                 children: Optional[Dict[str, Callable[[], Completer]]] = None,
                 parent: Optional[Callable[[], Completer]] = None) -> None:
        self.batches = [[TextCompletion(t) for t in b] for b in batches]
        self._name = name
        self.children = children or {}
        self.parent = parent
        self.closed = False
        self.fetches = 0

    def name(self) -> str:
        return self._name

    def fetch_completions(self) -> Batch:
        self.fetches += 1
        return self.batches.pop(0) if self.batches else []

    def fetching_finished(self) -> bool:
        return not self.batches

    def descend(self, completion: Completion) -> Optional[Completer]:
        factory = self.children.get(completion.result_string())
        return factory() if factory else None

    def ascend(self) -> Optional[Completer]:
        return self.parent() if self.parent else None

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted():
    return ScriptedCompleter
