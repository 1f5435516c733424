"""Extraction of structured search signals from free-text queries."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .text import normalize, tokenize
from .thesaurus import AmenityThesaurus

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

_NUMBER = r"(\d{1,7}(?:\.\d+)?)(k?)"
_MAX_PATTERNS = (
    re.compile(rf"\b(?:under|below|max|less than|up to|cheaper than|within)\s+{_NUMBER}\b"),
)
_MIN_PATTERNS = (
    re.compile(rf"\b(?:over|above|min|more than|at least|from)\s+{_NUMBER}\b"),
)
_RANGE_PATTERNS = (
    re.compile(rf"\bbetween\s+{_NUMBER}\s+and\s+{_NUMBER}\b"),
    re.compile(rf"\b{_NUMBER}\s*(?:-|to)\s*{_NUMBER}\b"),
)
SHORT_SYNONYM_LENGTH = 2

_CHEAP_PATTERN = re.compile(r"\b(?:cheap|cheapest|budget|affordable)\b")
_COMPARATORS = (
    (re.compile(r"<=?|≤"), " under "),
    (re.compile(r">=?|≥"), " over "),
)

DEFAULT_PROXIMITY_PHRASES = (
    "near campus",
    "close to campus",
    "walking distance to campus",
    "walking distance from campus",
    "walking distance",
    "on campus",
)

DEFAULT_ROOM_TYPE_HINTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("self", "con"), "self-contained"),
    (("self", "contained"), "self-contained"),
    (("selfcontained",), "self-contained"),
    (("single",), "single"),
    (("shared",), "shared"),
    (("2", "in", "1"), "shared"),
    (("two", "in", "one"), "shared"),
    (("chamber",), "chamber & hall"),
    (("hall",), "chamber & hall"),
)


@dataclass(frozen=True, slots=True)
class Intent:
    """Structured signals derived from one query string."""

    price_min: Optional[float] = None
    price_max: Optional[float] = None
    amenity_hints: Tuple[str, ...] = ()
    wants_near_campus: bool = False
    wants_cheap: bool = False
    query_tokens: Tuple[str, ...] = ()
    room_type_hints: Tuple[str, ...] = ()

    @property
    def has_price_bound(self) -> bool:
        return self.price_min is not None or self.price_max is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "price_min": self.price_min,
            "price_max": self.price_max,
            "amenity_hints": list(self.amenity_hints),
            "wants_near_campus": self.wants_near_campus,
            "wants_cheap": self.wants_cheap,
            "query_tokens": list(self.query_tokens),
            "room_type_hints": list(self.room_type_hints),
        }


@dataclass(frozen=True, slots=True)
class RuleMatch:
    """Outcome of one extraction rule: consumed spans plus extracted values."""

    spans: Tuple[Span, ...] = ()
    values: Dict[str, Any] = field(default_factory=dict)


def _to_amount(digits: str, suffix: str) -> Optional[float]:
    try:
        amount = float(digits)
    except ValueError:
        logger.debug("Ignoring malformed price bound %r", digits)
        return None
    return amount * 1000 if suffix == "k" else amount


def _phrase_pattern(phrase: str) -> "re.Pattern[str]":
    words = [re.escape(word) for word in phrase.split()]
    return re.compile(r"(?<![\w-])" + r"\s+".join(words) + r"(?![\w-])")


def _substring_pattern(phrase: str) -> "re.Pattern[str]":
    """Match *phrase* anywhere, spanning the whole words it touches.

    Phrases of ``SHORT_SYNONYM_LENGTH`` characters or fewer (``ac``) must
    stand alone as words.
    """

    if len(phrase) <= SHORT_SYNONYM_LENGTH:
        return _phrase_pattern(phrase)
    words = [re.escape(word) for word in phrase.split()]
    return re.compile(r"[\w-]*" + r"\s+".join(words) + r"[\w-]*")


class PriceRule:
    """Price bounds from ``under N``, ``over N``, ``N-M`` and cheapness words."""

    name = "price"

    def apply(self, text: str) -> Optional[RuleMatch]:
        spans: List[Span] = []
        values: Dict[str, Any] = {}

        for pattern in _RANGE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            low = _to_amount(match.group(1), match.group(2))
            high = _to_amount(match.group(3), match.group(4))
            if low is None or high is None:
                continue
            if low > high:
                low, high = high, low
            values["price_min"], values["price_max"] = low, high
            spans.append(match.span())
            break

        if "price_max" not in values:
            values.update(self._single_bound(text, _MAX_PATTERNS, "price_max", spans))
        if "price_min" not in values:
            values.update(self._single_bound(text, _MIN_PATTERNS, "price_min", spans))

        cheap_matches = list(_CHEAP_PATTERN.finditer(text))
        if cheap_matches:
            spans.extend(match.span() for match in cheap_matches)
            if "price_min" not in values and "price_max" not in values:
                values["wants_cheap"] = True

        if not spans:
            return None
        return RuleMatch(tuple(spans), values)

    @staticmethod
    def _single_bound(text: str, patterns, key: str, spans: List[Span]) -> Dict[str, Any]:
        for pattern in patterns:
            for match in pattern.finditer(text):
                if any(start < match.end() and match.start() < end for start, end in spans):
                    continue
                amount = _to_amount(match.group(1), match.group(2))
                if amount is None:
                    continue
                spans.append(match.span())
                return {key: amount}
        return {}


class ProximityRule:
    """Detects "near campus" style phrases."""

    name = "proximity"

    def __init__(self, phrases: Sequence[str] = DEFAULT_PROXIMITY_PHRASES) -> None:
        canonical = [normalize(phrase) for phrase in phrases]
        ordered = sorted({phrase for phrase in canonical if phrase}, key=lambda p: (-len(p), p))
        self._patterns = [_phrase_pattern(phrase) for phrase in ordered]

    def apply(self, text: str) -> Optional[RuleMatch]:
        spans: List[Span] = []
        for pattern in self._patterns:
            for match in pattern.finditer(text):
                if any(start <= match.start() and match.end() <= end for start, end in spans):
                    continue
                spans.append(match.span())
        if not spans:
            return None
        return RuleMatch(tuple(spans), {"wants_near_campus": True})


class AmenityRule:
    """Adds an amenity key when any of its synonyms occurs in the query."""

    name = "amenity"

    def __init__(self, thesaurus: AmenityThesaurus) -> None:
        self._patterns = [
            (key, [_substring_pattern(phrase) for phrase in phrases]) for key, phrases in thesaurus.items()
        ]

    def apply(self, text: str) -> Optional[RuleMatch]:
        spans: List[Span] = []
        hints: List[str] = []
        for key, patterns in self._patterns:
            for pattern in patterns:
                found = [match.span() for match in pattern.finditer(text)]
                if not found:
                    continue
                spans.extend(found)
                if key not in hints:
                    hints.append(key)
        if not hints:
            return None
        return RuleMatch(tuple(spans), {"amenity_hints": tuple(hints)})


class RoomTypeRule:
    """Records room-type hints; leaves the words in place for text scoring."""

    name = "room_type"

    def __init__(self, hints: Sequence[Tuple[Sequence[str], str]] = DEFAULT_ROOM_TYPE_HINTS) -> None:
        self._hints = [(tuple(words), label) for words, label in hints]

    def apply(self, text: str) -> Optional[RuleMatch]:
        tokens = set(tokenize(text))
        labels: List[str] = []
        for words, label in self._hints:
            if all(word in tokens for word in words) and label not in labels:
                labels.append(label)
        if not labels:
            return None
        return RuleMatch((), {"room_type_hints": tuple(labels)})


def _rewrite_comparators(query: str) -> str:
    for pattern, replacement in _COMPARATORS:
        query = pattern.sub(replacement, query)
    return query


def _residual_tokens(text: str, spans: Sequence[Span]) -> List[str]:
    chars = list(text)
    for start, end in spans:
        for index in range(start, end):
            chars[index] = " "
    return tokenize("".join(chars))


class IntentParser:
    """Runs an ordered list of extraction rules over a normalized query.

    Each rule sees the full canonical query, reports the spans it consumed and
    the values it extracted; the first rule to set a value wins. Words not
    consumed by any rule become the residual ``query_tokens``.
    """

    def __init__(
        self,
        thesaurus: AmenityThesaurus,
        *,
        proximity_phrases: Sequence[str] = DEFAULT_PROXIMITY_PHRASES,
        rules: Optional[Sequence[Any]] = None,
    ) -> None:
        self.thesaurus = thesaurus
        if rules is None:
            rules = [
                PriceRule(),
                ProximityRule(proximity_phrases),
                AmenityRule(thesaurus),
                RoomTypeRule(),
            ]
        self.rules = list(rules)

    def parse(self, query: Optional[str]) -> Intent:
        text = normalize(_rewrite_comparators(query or ""))
        if not text:
            return Intent()

        consumed: List[Span] = []
        values: Dict[str, Any] = {}
        for rule in self.rules:
            result = rule.apply(text)
            if result is None:
                continue
            logger.debug("Rule '%s' matched %r -> %s", rule.name, text, result.values)
            consumed.extend(result.spans)
            for key, value in result.values.items():
                values.setdefault(key, value)

        return Intent(
            price_min=values.get("price_min"),
            price_max=values.get("price_max"),
            amenity_hints=values.get("amenity_hints", ()),
            wants_near_campus=bool(values.get("wants_near_campus", False)),
            wants_cheap=bool(values.get("wants_cheap", False)),
            query_tokens=tuple(_residual_tokens(text, consumed)),
            room_type_hints=values.get("room_type_hints", ()),
        )


__all__ = [
    "Intent",
    "IntentParser",
    "RuleMatch",
    "PriceRule",
    "ProximityRule",
    "AmenityRule",
    "RoomTypeRule",
    "DEFAULT_PROXIMITY_PHRASES",
]
