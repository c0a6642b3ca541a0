"""Fuzzy matching for typo-tolerant field scoring.

This module provides edit distance calculation and the per-field fuzzy score
that the query engine combines across weighted fields.

Scoring ladder for a single field:
- Whole query found as a substring: 1.0, boosted toward the start of the field
- Otherwise per query word: exact word 1.0, prefix 0.9, substring 0.7,
  close edit distance ``similarity * 0.6``
- Unmatched query words pull the score down through the match ratio
"""

from __future__ import annotations


EXACT_WORD_SCORE = 1.0
PREFIX_WORD_SCORE = 0.9
SUBSTRING_WORD_SCORE = 0.7
EDIT_DISTANCE_WEIGHT = 0.6
MIN_SIMILARITY = 0.6
MIN_FUZZY_WORD_LENGTH = 3
POSITION_BOOST_RANGE = 0.3


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Plain dynamic programming with insertion, deletion, and substitution each
    costing 1. No early termination: indexed fields are short enough that an
    exact distance is always affordable.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("kubernets", "kubernetes")
        1
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Use shorter string as columns for space efficiency
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)
    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def similarity(word: str, other: str) -> float:
    """Return ``1 - distance / longer_length`` for two words."""
    longest = max(len(word), len(other))
    if longest == 0:
        return 1.0
    return 1 - levenshtein_distance(word, other) / longest


def query_words(query: str, min_length: int = 2) -> list[str]:
    """Split a query into lowercase whitespace-separated words of at least ``min_length``."""
    return [word for word in query.lower().split() if len(word) >= min_length]


def word_score(query_word: str, text_word: str) -> float:
    """Score one lowercase query word against one lowercase field word."""
    if text_word == query_word:
        return EXACT_WORD_SCORE
    if text_word.startswith(query_word):
        return PREFIX_WORD_SCORE
    if query_word in text_word:
        return SUBSTRING_WORD_SCORE
    if len(query_word) >= MIN_FUZZY_WORD_LENGTH and len(text_word) >= MIN_FUZZY_WORD_LENGTH:
        ratio = similarity(query_word, text_word)
        if ratio > MIN_SIMILARITY:
            return ratio * EDIT_DISTANCE_WEIGHT
    return 0.0


def fuzzy_score(query: str, text: str) -> float:
    """Calculate how well ``text`` matches ``query``.

    A contiguous case-insensitive match scores ``1 - (index / len(text)) * 0.3``.
    Otherwise each query word takes its best score against the field's words
    and the mean is multiplied by the fraction of words that matched at all.

    The substring branch returns its position boost as is: it is
    not normalized against the word branch, so a contiguous hit anywhere in the
    field (0.7 to 1.0) can outrank an exact-word match elsewhere. Callers weight
    and threshold the raw value.

    Args:
        query: Raw query text.
        text: Field text to score.

    Returns:
        The field score, 0.0 when nothing qualifies.
    """
    query_lower = query.lower()
    text_lower = text.lower()

    if query_lower and text_lower:
        index = text_lower.find(query_lower)
        if index != -1:
            position_boost = 1 - (index / len(text_lower)) * POSITION_BOOST_RANGE
            return position_boost

    words = query_words(query_lower)
    if not words:
        return 0.0

    text_words = text_lower.split()
    matched_words = 0
    total_score = 0.0

    for query_word in words:
        best_word_score = max((word_score(query_word, text_word) for text_word in text_words), default=0.0)
        if best_word_score > 0:
            matched_words += 1
            total_score += best_word_score

    match_ratio = matched_words / len(words)
    return (total_score / len(words)) * match_ratio
