"""Query completions for the search box."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import IndexedListing
from .scoring import DEFAULT_WEIGHTS, MatchWeights, score
from .text import normalize, tokenize

DEFAULT_TEMPLATES = (
    "under 800 near campus",
    "under 1000",
    "self con Ayensu",
    "Amamoma single room",
    "wifi + security",
    "near campus",
    "shared room",
    "self-contained",
    "budget",
)
MAX_SUGGESTIONS = 10
MAX_LOCATION_SUGGESTIONS = 12


def _dedupe(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    unique: List[str] = []
    for value in values:
        cleaned = (value or "").strip()
        key = cleaned.casefold()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        unique.append(cleaned)
    return unique


def known_locations(listings: Iterable[IndexedListing]) -> List[str]:
    """Return the distinct place names of *listings*, sorted case-insensitively.

    The place is the first comma-separated part of the location, falling back
    to the address.
    """

    names = []
    for listing in listings:
        raw = (listing.location or listing.address or "").strip()
        if raw:
            names.append(raw.split(",")[0].strip())
    return sorted(_dedupe(names), key=lambda name: (name.casefold(), name))


def suggest(
    search_text: Optional[str],
    locations: Sequence[str] = (),
    *,
    templates: Sequence[str] = DEFAULT_TEMPLATES,
    limit: int = MAX_SUGGESTIONS,
    weights: MatchWeights = DEFAULT_WEIGHTS,
) -> List[str]:
    """Return up to *limit* suggested queries for *search_text*."""

    pool = _dedupe([*templates, *_dedupe(locations)[:MAX_LOCATION_SUGGESTIONS]])
    query = normalize(search_text)
    if not query:
        return pool[:limit]

    tokens = tokenize(query)
    scored = [(candidate, score(candidate, tokens, weights)) for candidate in pool]
    kept = [(candidate, value) for candidate, value in scored if value > 0 or query in normalize(candidate)]
    kept.sort(key=lambda item: -item[1])
    return [candidate for candidate, _ in kept[:limit]]


__all__ = ["DEFAULT_TEMPLATES", "known_locations", "suggest"]
