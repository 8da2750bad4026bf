from __future__ import annotations

import heapq
import logging
from typing import Iterable, List, Optional, Tuple

from .config import Settings
from .core import Completer
from .models import Completion, CompletionScore
from .scoring import score, subsequence_match

log = logging.getLogger(__name__)


class CompleterView:
    """
    One navigation level: a completer plus everything the chooser needs to
    show it.

    all_completions
        Every completion fetched so far, in arrival order. Append-only.
    ranked
        CompletionScore entries for the current query, sorted by score
        descending; equal scores keep arrival order.
    selection / view_offset
        Selected row and first visible row of ``ranked``. Always
        ``view_offset <= selection < view_offset + page_height`` and both
        inside the list (0 when it is empty).
    """

    def __init__(self, completer: Completer, settings: Optional[Settings] = None) -> None:
        self.completer = completer
        self.settings = settings or Settings()
        self.query: str = ""
        self.selection: int = 0
        self.view_offset: int = 0
        self.all_completions: List[Completion] = []
        self.ranked: List[CompletionScore] = []

    # ------------- ranking -------------

    def _rank(self, start: int, completions: Iterable[Completion]) -> List[CompletionScore]:
        """Filter and score ``completions`` (numbered from ``start``), best first."""
        weights = self.settings.scoring
        scored = [
            CompletionScore(index=i, score=score(c.search_string(), self.query, weights))
            for i, c in enumerate(completions, start=start)
            if subsequence_match(self.query, c.search_string())
        ]
        # sorted() is stable: equal scores stay in arrival order
        return sorted(scored, key=lambda cs: -cs.score)

    def set_query(self, query: str) -> None:
        """Re-rank every accumulated completion for ``query`` and reset the selection."""
        self.query = query
        self.ranked = self._rank(0, self.all_completions)
        self.selection = 0
        self.view_offset = 0

    def absorb(self, new_completions: List[Completion]) -> None:
        """
        Add a freshly fetched batch: append it, score only the batch and merge
        it into the ranked list. On equal scores existing entries stay first.
        """
        if not new_completions:
            return
        start = len(self.all_completions)
        self.all_completions.extend(new_completions)
        fresh = self._rank(start, new_completions)
        if fresh:
            # heapq.merge favours the earlier iterable on ties
            self.ranked = list(heapq.merge(self.ranked, fresh, key=lambda cs: -cs.score))

    def fetch_completions(self) -> None:
        """One fetch tick: pull the next batch from the completer and absorb it."""
        self.absorb(self.completer.fetch_completions())

    def fetching_finished(self) -> bool:
        return self.completer.fetching_finished()

    def close(self) -> None:
        # close() is optional for completers
        close = getattr(self.completer, "close", None)
        if close is not None:
            close()

    # ------------- access -------------

    def __len__(self) -> int:
        return len(self.ranked)

    def completion_at(self, i: int) -> Tuple[Completion, int]:
        """The i-th ranked completion and its score."""
        cs = self.ranked[i]
        return self.all_completions[cs.index], cs.score

    def page(self) -> List[Tuple[Completion, int]]:
        """The visible slice of the ranked list."""
        end = min(self.view_offset + self.settings.page_height, len(self.ranked))
        return [self.completion_at(i) for i in range(self.view_offset, end)]

    def selected(self) -> Optional[Completion]:
        if self.selection < len(self.ranked):
            return self.completion_at(self.selection)[0]
        return None

    # ------------- selection / paging -------------

    @property
    def _page(self) -> int:
        return self.settings.page_height

    def _last(self) -> int:
        return max(len(self.ranked) - 1, 0)

    def select_previous(self) -> None:
        self.selection = max(self.selection - 1, 0)
        if self.selection < self.view_offset:
            self.view_offset = self.selection

    def select_next(self) -> None:
        self.selection = min(self.selection + 1, self._last())
        if self.selection >= self.view_offset + self._page:
            self.view_offset = self.selection - self._page + 1

    def previous_page(self) -> None:
        self.selection = max(self.selection - self._page, 0)
        if self.selection < self.view_offset:
            self.view_offset = self.selection

    def next_page(self) -> None:
        self.selection = min(self.selection + self._page, self._last())
        if self.selection >= self.view_offset + self._page:
            self.view_offset = self.selection - self._page + 1

    def select_first(self) -> None:
        self.selection = 0
        self.view_offset = 0

    def select_last(self) -> None:
        self.selection = self._last()
        self.view_offset = max(self.selection - self._page + 1, 0)
