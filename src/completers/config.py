from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import FrozenSet

from .models import ScoringSettings

# number of completion rows shown under the prompt (one page)
CHOOSER_HEIGHT: int = 10

# characters that delimit the word under the cursor in a shell line
WORD_BOUNDARIES: FrozenSet[str] = frozenset(" \t=;|&<>()")

# filesystem walk: how many directory levels below the root are scanned
DIRECTORY_DEPTH_LIMIT: int = 4

# how long the interaction loop waits for a key while a source is still fetching
FETCH_POLL_SECONDS: float = 0.01

# scoring weights
LETTER_MATCH: int = 1
WORD_START_BONUS: int = 2
SUBSEQUENT_BONUS: int = 3

# logging (the terminal belongs to the chooser, so logs go to a file)
LOG_PATH: str = os.environ.get("COMPLETERS_LOG", "/tmp/completers.log")
DEBUG: bool = os.environ.get("COMPLETERS_DEBUG") == "1"

# web frontend
TOP_K: int = 20
FETCH_TICK_LIMIT: int = 10_000

DEFAULT_SCORING = ScoringSettings(
    letter_match=LETTER_MATCH,
    word_start_bonus=WORD_START_BONUS,
    subsequent_bonus=SUBSEQUENT_BONUS,
)


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Session-wide knobs handed to the Model, views, the interaction loop and
    the renderer. ``Settings()`` uses the module defaults above.
    """
    page_height: int = CHOOSER_HEIGHT
    scoring: ScoringSettings = field(default_factory=lambda: DEFAULT_SCORING)
    poll_seconds: float = FETCH_POLL_SECONDS
    word_boundaries: FrozenSet[str] = WORD_BOUNDARIES

    def __post_init__(self) -> None:
        if self.page_height < 1:
            raise ValueError("page_height must be at least 1")
