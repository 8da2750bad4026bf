import pytest

from completers.config import DEFAULT_SCORING
from completers.models import ScoringSettings
from completers.normalize import fold_query, word_starts
from completers.scoring import score, subsequence_match

FLAT = ScoringSettings(letter_match=1, subsequent_bonus=0, word_start_bonus=0)
WORDY = ScoringSettings(letter_match=1, subsequent_bonus=0, word_start_bonus=3)


def test_flat_weights_count_matched_letters():
    assert score("foo", "f", FLAT) == 1
    assert score("foo", "fo", FLAT) == 2


def test_query_longer_than_candidate_scores_zero():
    assert score("foo", "fooo", FLAT) == 0
    assert score("", "a", DEFAULT_SCORING) == 0


def test_word_start_bonus_path_example():
    assert score("foo/bar", "foba", WORDY) == 10


def test_non_subsequence_scores_zero():
    assert not subsequence_match("ca", "abc")
    assert score("abc", "ca", DEFAULT_SCORING) == 0


def test_empty_query_matches_everything_with_zero():
    assert subsequence_match("", "anything")
    assert subsequence_match("", "")
    assert score("anything", "", DEFAULT_SCORING) == 0


@pytest.mark.parametrize("query,candidate,expected", [
    ("fb", "foo/bar", True),
    ("FB", "foo/bar", True),
    ("bf", "foo/bar", False),
    ("f b", "foobar", True),
    ("x", "", False),
])
def test_subsequence_match(query, candidate, expected):
    assert subsequence_match(query, candidate) is expected


def test_word_starts_rank_higher():
    assert score("foo_bar", "fb", DEFAULT_SCORING) > score("fxxbxx", "fb", DEFAULT_SCORING)


def test_contiguous_matches_rank_higher():
    assert score("fob", "fo", DEFAULT_SCORING) > score("fxo", "fo", DEFAULT_SCORING)


def test_case_and_query_whitespace_are_ignored():
    assert score("FOO", "fo", DEFAULT_SCORING) == score("foo", "fo", DEFAULT_SCORING)
    assert score("foo bar", "f b", DEFAULT_SCORING) == score("foo bar", "fb", DEFAULT_SCORING)


def test_scores_are_never_negative():
    for candidate in ("", "a", "src/main.py", "README.md", "feature/login-form"):
        for query in ("", "m", "smp", "rdm", "zz", "feature/login-form!"):
            assert score(candidate, query, DEFAULT_SCORING) >= 0


def test_word_starts_marks_first_alnum_after_separators():
    assert word_starts("foo/bar") == [True, False, False, False, True, False, False]
    assert word_starts("_a b") == [False, True, False, True]
    assert word_starts("") == []


def test_fold_query_drops_whitespace():
    assert fold_query(" A b\t") == "ab"


def test_negative_weights_rejected():
    with pytest.raises(ValueError):
        ScoringSettings(letter_match=-1, subsequent_bonus=0, word_start_bonus=0)


def test_length_rule_uses_the_query_as_typed():
    # whitespace is ignored for matching but still counts towards the length
    assert subsequence_match("a b c", "abc")
    assert score("abc", "a b c", FLAT) == 0
    assert score("abc ", "a b", FLAT) == 2


def test_folding_never_expands_characters():
    assert not subsequence_match("ss", "ß")
    assert score("ß", "ss", FLAT) == 0
    assert score("Straße", "STRASSE", FLAT) == 0
    assert score("STRAẞE", "straße", FLAT) == 6


@pytest.mark.parametrize("text", ["a", "foo/bar", "Feature/Login-Form", "src main.py", "x_y_z"])
def test_string_matches_itself(text):
    assert subsequence_match(text, text)
    assert score(text, text, DEFAULT_SCORING) > 0


_CANDIDATES = ["foo/bar", "src/main.py", "feature/login-form", "README.md", "a_b_c", "fbfbfb", "xfoobar"]
_QUERIES = ["f", "fb", "foba", "smp", "rdm", "abc", "fff", "ob", "login"]


@pytest.mark.parametrize("weight", ["letter_match", "subsequent_bonus", "word_start_bonus"])
def test_raising_one_weight_never_lowers_a_score(weight):
    for base in (0, 1, 2):
        for candidate in _CANDIDATES:
            for query in _QUERIES:
                values = {"letter_match": 1, "subsequent_bonus": base, "word_start_bonus": base}
                low = ScoringSettings(**values)
                values[weight] += 3
                high = ScoringSettings(**values)
                assert score(candidate, query, high) >= score(candidate, query, low), (candidate, query)
