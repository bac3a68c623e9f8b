from __future__ import annotations

from MEDBOX.server.utils.services.text.distance import length_similarity

PREFIX_WEIGHT = 0.8
SUBSTRING_WEIGHT = 0.6
WORD_EXACT_WEIGHT = 0.4
WORD_PREFIX_WEIGHT = 0.3
LENGTH_WEIGHT = 0.2


# -----------------------------------------------------------------------------
def split_words(value: str) -> list[str]:
    return [word for word in value.split(" ") if word]


# -----------------------------------------------------------------------------
def score_match(query: str, candidate: str) -> float:
    """
    Composite similarity between a lowercased query and a lowercased name.

    Partial credit from the prefix, substring, word and edit-distance
    components accumulates and is clamped to ``[0, 1]``; an identical pair
    short-circuits to 1.0.

    """
    if candidate == query:
        return 1.0
    score = 0.0
    if candidate.startswith(query):
        score += PREFIX_WEIGHT
    if query in candidate:
        score += SUBSTRING_WEIGHT

    candidate_words = split_words(candidate)
    for query_word in split_words(query):
        for candidate_word in candidate_words:
            if candidate_word == query_word:
                score += WORD_EXACT_WEIGHT
            elif candidate_word.startswith(query_word):
                score += WORD_PREFIX_WEIGHT

    score += length_similarity(query, candidate) * LENGTH_WEIGHT
    return min(max(score, 0.0), 1.0)
