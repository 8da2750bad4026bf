# src/completers/models.py
"""
Data models for the completion engine.

This module defines the small value types shared by every layer:

- Completion: one candidate offered by a completer (immutable, shared by
  reference between a view's accumulated list and its ranked list).
- CompletionScore: a ranked-list entry pointing back into the accumulated list.
- ScoringSettings: the three weights used by the fuzzy scorer.

These classes carry no ranking logic; scoring lives in scoring.py and the
ranking/merging in view.py.
"""

from dataclasses import dataclass
from typing import Optional


class Completion:
    """
    Base class for a single candidate.

    Subclasses provide ``result_string``; the other accessors fall back to it.

    result_string()
        The text substituted into the command line when accepted.
    display_string()
        The text shown in the chooser. Plain text only; presentation
        variants are expressed through ``color``.
    search_string()
        The text the scorer runs against, e.g. a commit subject while the
        result is its hash.
    color()
        An ANSI SGR code (e.g. ``"34"`` for blue) or ``None``.
    """
    __slots__ = ()

    def result_string(self) -> str:
        raise NotImplementedError

    def display_string(self) -> str:
        return self.result_string()

    def search_string(self) -> str:
        return self.result_string()

    def color(self) -> Optional[str]:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.result_string()!r})"


@dataclass(frozen=True, slots=True)
class TextCompletion(Completion):
    """A completion that is nothing but its text."""
    text: str

    def result_string(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class CompletionScore:
    """
    One entry of a view's ranked list.

    Attributes
    ----------
    index : int
        Position of the completion in the owning view's accumulated list
        (its arrival order). The completion itself is looked up there, never
        copied.
    score : int
        Non-negative relevance computed by scoring.score().
    """
    index: int
    score: int


@dataclass(frozen=True, slots=True)
class ScoringSettings:
    """
    Weights for scoring.score(). All are non-negative integers.

    letter_match      flat credit per matched character
    subsequent_bonus  extra credit when a match directly follows the previous match
    word_start_bonus  extra credit when a match falls on a word start
    """
    letter_match: int
    subsequent_bonus: int
    word_start_bonus: int

    def __post_init__(self) -> None:
        if min(self.letter_match, self.subsequent_bonus, self.word_start_bonus) < 0:
            raise ValueError("scoring weights must be non-negative")
