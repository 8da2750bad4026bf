from __future__ import annotations
from typing import List


def _fold_char(ch: str) -> str:
    # one character in, one out: "ß" or "İ" would grow under casefold()/lower()
    low = ch.lower()
    return low if len(low) == 1 else ch


def fold(text: str) -> str:
    """Lowercase text for comparison, one character at a time (length is preserved)."""
    return "".join(_fold_char(ch) for ch in text)


def fold_query(query: str) -> str:
    """
    Normalize a query for matching:
      * case-insensitive via fold()
      * whitespace characters are dropped entirely (not collapsed)
    """
    return "".join(_fold_char(ch) for ch in query if not ch.isspace())


def _is_word_char(ch: str) -> bool:
    """Letters and digits form words; everything else separates them."""
    return ch.isalnum()


def word_starts(text: str) -> List[bool]:
    """
    Mark word starts: position 0 if alphanumeric, and every alphanumeric
    position whose predecessor is not (first letter after spaces, punctuation
    or path separators).
    """
    out: List[bool] = []
    prev_word = False
    for ch in text:
        cur_word = _is_word_char(ch)
        out.append(cur_word and not prev_word)
        prev_word = cur_word
    return out
