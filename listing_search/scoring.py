"""Fuzzy relevance scoring of a canonical field against query tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .text import tokenize

MIN_PARTIAL_LENGTH = 2
MIN_NEAR_LENGTH = 3
NEAR_DISTANCE = 1


@dataclass(frozen=True, slots=True)
class MatchWeights:
    """Increment contributed by one query token for each match kind."""

    exact: float = 40.0
    partial: float = 25.0
    near: float = 10.0


DEFAULT_WEIGHTS = MatchWeights()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between *a* and *b*."""

    if not a:
        return len(b)
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        previous, row[0] = row[0], i
        for j, char_b in enumerate(b, start=1):
            current = row[j]
            cost = 0 if char_a == char_b else 1
            row[j] = min(row[j] + 1, row[j - 1] + 1, previous + cost)
            previous = current
    return row[-1]


def token_score(token: str, words: Sequence[str], weights: MatchWeights = DEFAULT_WEIGHTS) -> float:
    """Return the increment earned by *token* against the field *words*."""

    if not token or not words:
        return 0.0
    if token in words:
        return weights.exact
    if len(token) >= MIN_PARTIAL_LENGTH and any(token in word for word in words):
        return weights.partial
    if len(token) >= MIN_NEAR_LENGTH and any(
        abs(len(word) - len(token)) <= NEAR_DISTANCE and edit_distance(word, token) <= NEAR_DISTANCE
        for word in words
    ):
        return weights.near
    return 0.0


def score(field: str, query_tokens: Sequence[str], weights: MatchWeights = DEFAULT_WEIGHTS) -> float:
    """Sum of per-token increments of *query_tokens* against *field*.

    Exact whole-word hits earn the most, substring hits less, and words within
    one edit the least. Returns ``0`` for an empty token list or empty field.
    """

    if not query_tokens:
        return 0.0
    words: List[str] = tokenize(field)
    if not words:
        return 0.0
    return sum(token_score(token, words, weights) for token in query_tokens)


__all__ = ["MatchWeights", "DEFAULT_WEIGHTS", "edit_distance", "score", "token_score"]
