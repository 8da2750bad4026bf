from __future__ import annotations

from ..core import Batch, SyncCompleter
from ..models import TextCompletion


class NumCompleter(SyncCompleter):
    """Offers "0" .. str(count - 1). Handy for trying out the chooser."""

    def __init__(self, count: int) -> None:
        super().__init__()
        self.count = count

    def name(self) -> str:
        return "num"

    def _fetch_all(self) -> Batch:
        return [TextCompletion(str(n)) for n in range(self.count)]
