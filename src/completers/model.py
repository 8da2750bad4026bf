# src/completers/model.py
"""
Navigation state: completer stacks (one per tab) and the session Model.

A CompleterStack is the path of levels opened in one tab; descending pushes a
new CompleterView, ascending pops it (or, at the root, swaps the root for the
completer's parent). The Model owns all tabs, the active tab index and the
query the user is typing, and is the only object the interaction loop and the
renderers talk to.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .config import Settings
from .core import Completer
from .models import Completion
from .view import CompleterView

log = logging.getLogger(__name__)


class CompleterStack:
    """Non-empty sequence of views; the last one is the active level."""

    def __init__(self, completer: Completer, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self.levels: List[CompleterView] = [CompleterView(completer, self.settings)]

    def __len__(self) -> int:
        return len(self.levels)

    def top(self) -> CompleterView:
        return self.levels[-1]

    def _open(self, completer: Completer) -> CompleterView:
        level = CompleterView(completer, self.settings)
        level.fetch_completions()
        return level

    def descend(self) -> bool:
        """
        Push a level for the selected completion if its completer allows it.
        Returns True if a level was pushed.
        """
        top = self.top()
        selected = top.selected()
        if selected is None:
            return False
        child = top.completer.descend(selected)
        if child is None:
            return False
        log.debug("descend %s -> %s", selected.result_string(), child.name())
        self.levels.append(self._open(child))
        return True

    def ascend(self) -> bool:
        """
        Pop the active level; at the root, replace it with the completer's
        parent when there is one. Returns True if anything changed.
        """
        if len(self.levels) > 1:
            self.levels.pop().close()
            log.debug("ascend: popped to depth %d", len(self.levels))
            return True
        parent = self.top().completer.ascend()
        if parent is None:
            return False
        self.levels[0].close()
        self.levels[0] = self._open(parent)
        log.debug("ascend: root replaced by %s", parent.name())
        return True

    def close(self) -> None:
        for level in self.levels:
            level.close()


class Model:
    """
    Whole session state: tabs (one CompleterStack per initial completer), the
    active tab and the session query.

    Only the active level of the active tab sees query changes; switching tabs
    re-applies the session query to the newly active level.
    """

    def __init__(self, completers: Sequence[Completer], settings: Optional[Settings] = None) -> None:
        if not completers:
            raise ValueError("Model needs at least one completer")
        self.settings = settings or Settings()
        self.stacks: List[CompleterStack] = [CompleterStack(c, self.settings) for c in completers]
        self.tab: int = 0
        self.query: str = ""

    # ------------- active level -------------

    def current_stack(self) -> CompleterStack:
        return self.stacks[self.tab]

    def current_view(self) -> CompleterView:
        return self.current_stack().top()

    def completer_name(self) -> str:
        return self.current_view().completer.name()

    def completions_count(self) -> int:
        return len(self.current_view())

    def completion_at(self, i: int) -> Tuple[Completion, int]:
        return self.current_view().completion_at(i)

    def page(self) -> List[Tuple[Completion, int]]:
        return self.current_view().page()

    def selected_result(self) -> Optional[str]:
        selected = self.current_view().selected()
        return selected.result_string() if selected is not None else None

    def view_offset(self) -> int:
        return self.current_view().view_offset

    def selection(self) -> int:
        return self.current_view().selection

    # ------------- selection -------------

    def select_previous(self) -> None:
        self.current_view().select_previous()

    def select_next(self) -> None:
        self.current_view().select_next()

    def previous_page(self) -> None:
        self.current_view().previous_page()

    def next_page(self) -> None:
        self.current_view().next_page()

    def select_first(self) -> None:
        self.current_view().select_first()

    def select_last(self) -> None:
        self.current_view().select_last()

    # ------------- query -------------

    def _update_query(self) -> None:
        self.current_view().set_query(self.query)

    def query_append(self, ch: str) -> None:
        self.query += ch
        self._update_query()

    def query_backspace(self) -> None:
        self.query = self.query[:-1]
        self._update_query()

    def query_set(self, query: str) -> None:
        self.query = query
        self._update_query()

    # ------------- navigation -------------

    def descend(self) -> bool:
        descended = self.current_stack().descend()
        if descended:
            self.query_set("")
        return descended

    def ascend(self) -> bool:
        return self.current_stack().ascend()

    def next_tab(self) -> None:
        # the session query follows the user across tabs
        self.tab = (self.tab + 1) % len(self.stacks)
        log.debug("tab %d (%s)", self.tab, self.completer_name())
        self._update_query()

    # ------------- fetching -------------

    def start_fetching_completions(self) -> None:
        """One fetch tick on every tab, so all sources start working."""
        for stack in self.stacks:
            stack.top().fetch_completions()

    def fetch_completions(self) -> None:
        """One fetch tick on the active level of the active tab only."""
        self.current_view().fetch_completions()

    def fetching_finished(self) -> bool:
        return self.current_view().fetching_finished()

    def close(self) -> None:
        for stack in self.stacks:
            stack.close()

    def __enter__(self) -> "Model":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
