"""
Fuzzy matching and scoring.

``subsequence_match`` is the cheap filter deciding whether a candidate is shown
at all; ``score`` ranks the candidates that pass it.

Scoring is a dynamic program over (query position i, candidate position j):

    take[i][j]   best score for query[:i+1] in candidate[:j+1] when
                 candidate[j] is the match for query[i] (0 if they differ)
    leave[i][j]  best score for query[:i+1] in candidate[:j+1] without
                 using candidate[j]

    take[i][j]  = letter_match + word_start_bonus(j)
                  + max(carry, leave[i-1][j-1])
    carry       = take[i-1][j-1] + subsequent_bonus   if take[i-1][j-1] > 0
                  0                                   otherwise
    leave[i][j] = max(take[i][j-1], leave[i][j-1])

with the "from previous" term taken as 0 on the first row and column. Only the
previous query row is kept, so memory is O(len(candidate)).
"""
from __future__ import annotations
from typing import List

from .models import ScoringSettings
from .normalize import fold, fold_query, word_starts

Score = int


def subsequence_match(query: str, candidate: str) -> bool:
    """
    True iff every non-whitespace character of ``query`` occurs in
    ``candidate`` in order, ignoring case. The empty query matches anything.
    """
    q = fold_query(query)
    if not q:
        return True
    s = fold(candidate)
    pos = 0
    for ch in q:
        pos = s.find(ch, pos)
        if pos == -1:
            return False
        pos += 1
    return True


def score(candidate: str, query: str, settings: ScoringSettings) -> Score:
    """
    Relevance of ``candidate`` for ``query``; 0 when the query (as typed,
    whitespace included) is longer than the candidate or is not a subsequence
    of it.
    """
    if len(query) > len(candidate):
        return 0
    q = fold_query(query)
    s = fold(candidate)
    m, n = len(q), len(s)
    if m == 0 or n == 0:
        return 0
    if not subsequence_match(q, s):
        return 0

    starts = word_starts(s)
    bonus: List[int] = [settings.word_start_bonus if ws else 0 for ws in starts]
    letter = settings.letter_match
    subsequent = settings.subsequent_bonus

    prev_take: List[int] = [0] * n
    prev_leave: List[int] = [0] * n
    take: List[int] = [0] * n
    leave: List[int] = [0] * n
    for i in range(m):
        qc = q[i]
        for j in range(n):
            if s[j] != qc:
                take[j] = 0
            else:
                from_prev = 0
                if i > 0 and j > 0:
                    diag = prev_take[j - 1]
                    carry = diag + subsequent if diag > 0 else 0
                    from_prev = max(carry, prev_leave[j - 1])
                take[j] = letter + bonus[j] + from_prev
            leave[j] = max(take[j - 1], leave[j - 1]) if j > 0 else 0
        prev_take, take = take, prev_take
        prev_leave, leave = leave, prev_leave

    return max(prev_take[n - 1], prev_leave[n - 1])
