"""
Completers: interactive fuzzy completion for the command line.

Given the word under the cursor and a set of completion sources
("completers"), the engine fetches candidates incrementally, ranks them by a
fuzzy subsequence score, lets the user browse nested levels (directories,
branches -> commits) in several tabs, and returns the chosen result.

Layers, leaves first:
- scoring:  subsequence_match() filter and score() dynamic program
- core:     the Completer protocol; SyncCompleter / BackgroundCompleter
- view:     CompleterView, one level's accumulated and ranked completions
- model:    CompleterStack (one tab's levels) and the session Model
- engine:   the interaction loop tying keys, fetch ticks and drawing together

Example Usage:
    from completers import get_completion
    from completers.sources import FsCompleter, GitBranchCompleter

    result = get_completion("src", [FsCompleter("."), GitBranchCompleter()])
"""

from .config import Settings
from .engine import get_completion, run_session
from .model import CompleterStack, Model
from .models import Completion, CompletionScore, ScoringSettings, TextCompletion
from .scoring import score, subsequence_match
from .view import CompleterView

__version__ = "1.0.0"
__all__ = [
    "Settings", "get_completion", "run_session", "CompleterStack", "Model",
    "Completion", "CompletionScore", "ScoringSettings", "TextCompletion",
    "score", "subsequence_match", "CompleterView",
]
