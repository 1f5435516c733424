"""Amenity vocabulary mapping canonical keys to literal synonym phrases."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

from .text import normalize

logger = logging.getLogger(__name__)

DEFAULT_AMENITY_SYNONYMS: Dict[str, List[str]] = {
    "wifi": ["wifi", "wi-fi", "internet", "wireless", "hotspot"],
    "water": ["water", "running water", "pipe borne", "pipe-borne"],
    "security": ["security", "guard", "security man", "watchman", "gated", "secure", "cctv"],
    "cctv": ["cctv", "camera", "surveillance"],
    "generator": ["generator", "backup", "power backup", "light backup", "inverter"],
    "kitchen": ["kitchen", "shared kitchen", "kitchenette", "cooking"],
    "laundry": ["laundry", "washing", "washing area", "washing machine"],
    "ac": ["ac", "aircon", "air con", "air-condition", "air conditioning"],
}


class AmenityThesaurus:
    """Read-only lookup of amenity synonyms.

    Instances are passed explicitly to the parser and ranker; tests can build
    a minimal one with only the keys they care about.
    """

    def __init__(self, synonyms: Mapping[str, Sequence[str]]) -> None:
        entries: Dict[str, Tuple[str, ...]] = {}
        for key, phrases in synonyms.items():
            canonical_key = normalize(key)
            if not canonical_key:
                logger.debug("Skipping blank amenity key %r", key)
                continue
            literal = tuple(dict.fromkeys(p for p in (normalize(phrase) for phrase in phrases) if p))
            entries[canonical_key] = literal or (canonical_key,)
        self._entries = entries

    @classmethod
    def default(cls) -> "AmenityThesaurus":
        return cls(DEFAULT_AMENITY_SYNONYMS)

    def keys(self) -> List[str]:
        return list(self._entries)

    def synonyms(self, key: str) -> List[str]:
        """Return canonical synonym phrases for *key*, or the key itself if unknown."""

        canonical_key = normalize(key)
        known = self._entries.get(canonical_key)
        if known is not None:
            return list(known)
        return [canonical_key] if canonical_key else []

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for key, phrases in self._entries.items():
            yield key, list(phrases)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["AmenityThesaurus", "DEFAULT_AMENITY_SYNONYMS"]
