#!/usr/bin/env python3
"""
Edit-Distance Matcher
=====================
Levenshtein distance and similarity-gated fuzzy suggestions against the
KBBI lexicon.

Candidates are limited to words within two characters of the input length,
then gated by a distance threshold and by character overlap. Suggestions are
ordered by (distance, word) so results do not depend on set iteration order.
"""

from typing import List, Tuple

from lexicon import Lexicon

__version__ = "1.2.0"

LENGTH_SPREAD = 2
SHORT_WORD_LENGTH = 4
MIN_CHARACTER_OVERLAP = 0.5
MAX_SUGGESTIONS = 2


def levenshtein(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def max_distance_for(word: str) -> int:
    """Allowed edit distance: 1 for words of up to four letters, else 2."""
    return 1 if len(word) <= SHORT_WORD_LENGTH else 2


def character_overlap(word: str, candidate: str) -> float:
    """Fraction of the distinct characters of `word` that also occur in `candidate`."""
    distinct = set(word)
    if not distinct:
        return 0.0
    return len(distinct & set(candidate)) / len(distinct)


def find_closest_matches(word: str, lexicon: Lexicon,
                         max_results: int = MAX_SUGGESTIONS) -> List[str]:
    """
    Suggest up to `max_results` lexicon words close to `word`.

    Returns an empty list when the lexicon is empty or nothing passes the
    distance and overlap gates. Exact matches (distance 0) are never returned.
    """
    if lexicon.is_empty or not word:
        return []

    word = word.lower()
    limit = max_distance_for(word)
    candidates: List[Tuple[int, str]] = []

    for entry in lexicon.words_near_length(len(word), LENGTH_SPREAD):
        distance = levenshtein(word, entry)
        if distance == 0 or distance > limit:
            continue
        if character_overlap(word, entry) < MIN_CHARACTER_OVERLAP:
            continue
        candidates.append((distance, entry))

    candidates.sort()
    return [entry for _, entry in candidates[:max_results]]
