from __future__ import annotations

from rapidfuzz.distance import Levenshtein


# -----------------------------------------------------------------------------
def levenshtein_distance(first: str, second: str) -> int:
    """Unit-cost insert/delete/substitute edit distance over code points."""
    return int(Levenshtein.distance(first or "", second or ""))


# -----------------------------------------------------------------------------
def length_similarity(first: str, second: str) -> float:
    max_length = max(len(first), len(second))
    if max_length == 0:
        return 1.0
    return 1.0 - levenshtein_distance(first, second) / max_length


__all__ = ["length_similarity", "levenshtein_distance"]
