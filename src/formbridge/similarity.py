"""Normalized edit-distance similarity between field names."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def similarity(a: str, b: str) -> float:
    """Return the normalized Levenshtein similarity of two strings.

    The score is `(max_len - distance) / max_len`, so identical strings score 1.0 and
    two empty strings are treated as identical. Comparison is case-sensitive; callers
    lower-case both inputs when they want case-insensitive matching.

    Args:
        a (str): First string.
        b (str): Second string.

    Returns:
        float: Similarity in [0, 1].
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    distance = Levenshtein.distance(a, b)
    return (longest - distance) / longest
