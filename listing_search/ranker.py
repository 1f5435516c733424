"""Filter, score and order indexed listings for one search pass."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .heuristics import parse_price_input
from .intent import Intent
from .models import IndexedListing
from .scoring import DEFAULT_WEIGHTS, MatchWeights, score
from .text import normalize
from .thesaurus import AmenityThesaurus

logger = logging.getLogger(__name__)

ALL_LOCATIONS = "All"

NAME_WEIGHT = 3
LOCATION_WEIGHT = 2
ADDRESS_WEIGHT = 1
FEATURES_WEIGHT = 1
IMAGES_BONUS = 60
PRICE_BONUS = 40
INTENT_NEAR_CAMPUS_BONUS = 80
DISTANCE_FILTER_BONUS = 60
ROOM_TYPE_BONUS = 40
AMENITY_BONUS = 30
CHEAP_REFERENCE_PRICE = 8000
CHEAP_DIVISOR = 50


class SortMode(str, Enum):
    RECOMMENDED = "recommended"
    NAME_AZ = "name_az"
    PRICE_LOW = "price_low"


class RoomType(str, Enum):
    ANY = "Any"
    SELF_CONTAINED = "Self-contained"
    SINGLE = "Single"
    SHARED = "Shared"
    CHAMBER_AND_HALL = "Chamber & Hall"


class Distance(str, Enum):
    ANY = "Any"
    NEAR_CAMPUS = "Near campus"


ROOM_TYPE_NEEDLES: Dict[RoomType, Tuple[str, ...]] = {
    RoomType.ANY: (),
    RoomType.SELF_CONTAINED: ("self-contained", "self con", "selfcontained"),
    RoomType.SINGLE: ("single",),
    RoomType.SHARED: ("shared", "2 in 1", "two in one"),
    RoomType.CHAMBER_AND_HALL: ("chamber", "hall", "chamber & hall"),
}


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """Discrete filter values owned by the UI."""

    location: str = ALL_LOCATIONS
    sort: SortMode = SortMode.RECOMMENDED
    room_type: RoomType = RoomType.ANY
    distance: Distance = Distance.ANY
    amenities: FrozenSet[str] = field(default_factory=frozenset)
    price_min: Optional[str] = None
    price_max: Optional[str] = None


@dataclass(slots=True)
class ScoredCandidate:
    """Pairing of a listing with its score for a single ranking pass."""

    listing: IndexedListing
    score: float
    passes: bool


@dataclass(frozen=True, slots=True)
class _ActiveFilters:
    location_n: Optional[str]
    near_campus_only: bool
    room_needles: Tuple[str, ...]
    amenity_keys: Tuple[str, ...]
    price_min: Optional[float]
    price_max: Optional[float]

    @property
    def structured(self) -> bool:
        return bool(
            self.amenity_keys
            or self.room_needles
            or self.price_min is not None
            or self.price_max is not None
            or self.near_campus_only
        )


class Ranker:
    """Combines UI filters, parsed intent and field scores into an ordering."""

    def __init__(
        self,
        thesaurus: AmenityThesaurus,
        *,
        weights: MatchWeights = DEFAULT_WEIGHTS,
        room_type_needles: Optional[Mapping[RoomType, Sequence[str]]] = None,
    ) -> None:
        self.thesaurus = thesaurus
        self.weights = weights
        needles = room_type_needles if room_type_needles is not None else ROOM_TYPE_NEEDLES
        self.room_type_needles = {
            RoomType(key): tuple(normalize(needle) for needle in values) for key, values in needles.items()
        }

    def _resolve(self, intent: Intent, filters: SearchFilters) -> _ActiveFilters:
        location_n = normalize(filters.location)
        if location_n in {"", normalize(ALL_LOCATIONS)}:
            location_n = None

        manual_min = parse_price_input(filters.price_min)
        manual_max = parse_price_input(filters.price_max)
        requested = (normalize(key) for key in (*sorted(filters.amenities), *intent.amenity_hints))
        amenity_keys = tuple(dict.fromkeys(key for key in requested if key))
        return _ActiveFilters(
            location_n=location_n,
            near_campus_only=filters.distance == Distance.NEAR_CAMPUS,
            room_needles=self.room_type_needles.get(RoomType(filters.room_type), ()),
            amenity_keys=amenity_keys,
            price_min=manual_min if manual_min is not None else intent.price_min,
            price_max=manual_max if manual_max is not None else intent.price_max,
        )

    def _has_amenity(self, listing: IndexedListing, key: str) -> bool:
        return any(phrase in listing.amenity_n for phrase in self.thesaurus.synonyms(key))

    def evaluate(self, listing: IndexedListing, intent: Intent, active: _ActiveFilters) -> ScoredCandidate:
        """Score *listing* and decide whether it passes every filter."""

        if active.location_n is None:
            matches_location = True
        else:
            matches_location = bool(active.location_n) and (
                active.location_n in listing.location_n or active.location_n in listing.address_n
            )
        matches_distance = listing.near_campus if active.near_campus_only else True
        matches_room = (
            any(needle in listing.room_type_n for needle in active.room_needles) if active.room_needles else True
        )
        matches_amenities = all(self._has_amenity(listing, key) for key in active.amenity_keys)

        price = listing.price
        matches_min = active.price_min is None or price is None or price >= active.price_min
        matches_max = active.price_max is None or price is None or price <= active.price_max

        tokens = intent.query_tokens
        s_name = score(listing.name_n, tokens, self.weights)
        s_loc = score(listing.location_n, tokens, self.weights)
        s_addr = score(listing.address_n, tokens, self.weights)
        s_feat = score(listing.features_n, tokens, self.weights)

        any_text_hit = s_name > 0 or s_loc > 0 or s_addr > 0 or s_feat > 0
        passes_gate = not tokens or any_text_hit or active.structured

        completeness = IMAGES_BONUS * listing.has_images + PRICE_BONUS * listing.has_price
        if tokens:
            total = (
                NAME_WEIGHT * s_name
                + LOCATION_WEIGHT * s_loc
                + ADDRESS_WEIGHT * s_addr
                + FEATURES_WEIGHT * s_feat
                + completeness
            )
        else:
            total = float(completeness)

        if intent.wants_near_campus and listing.near_campus:
            total += INTENT_NEAR_CAMPUS_BONUS
        if intent.wants_cheap and price is not None:
            total += max(0.0, (CHEAP_REFERENCE_PRICE - price) / CHEAP_DIVISOR)
        if active.near_campus_only and listing.near_campus:
            total += DISTANCE_FILTER_BONUS
        if active.room_needles and matches_room:
            total += ROOM_TYPE_BONUS
        if active.amenity_keys and matches_amenities:
            total += AMENITY_BONUS

        checks = {
            "location": matches_location,
            "distance": matches_distance,
            "room_type": matches_room,
            "amenities": matches_amenities,
            "price_min": matches_min,
            "price_max": matches_max,
            "query_gate": passes_gate,
        }
        failed = [name for name, ok in checks.items() if not ok]
        if failed:
            logger.debug("FILTER %s: %s", listing.listing_id, ", ".join(failed))
        return ScoredCandidate(listing=listing, score=total, passes=not failed)

    def score_candidates(
        self, listings: Iterable[IndexedListing], intent: Intent, filters: SearchFilters
    ) -> List[ScoredCandidate]:
        active = self._resolve(intent, filters)
        return [self.evaluate(listing, intent, active) for listing in listings]

    def rank(
        self, listings: Iterable[IndexedListing], intent: Intent, filters: Optional[SearchFilters] = None
    ) -> List[IndexedListing]:
        """Return the listings passing every filter, ordered by *filters.sort*."""

        filters = filters or SearchFilters()
        candidates = [c for c in self.score_candidates(listings, intent, filters) if c.passes]
        mode = SortMode(filters.sort)

        if mode == SortMode.NAME_AZ:
            candidates.sort(key=lambda c: c.listing.name_n)
        elif mode == SortMode.PRICE_LOW:
            candidates.sort(
                key=lambda c: (c.listing.price if c.listing.price is not None else math.inf, -c.score)
            )
        else:
            candidates.sort(key=lambda c: -c.score)

        logger.debug("Ranked %d candidate(s) with sort mode %s", len(candidates), mode.value)
        return [candidate.listing for candidate in candidates]


__all__ = [
    "ALL_LOCATIONS",
    "Distance",
    "Ranker",
    "RoomType",
    "ROOM_TYPE_NEEDLES",
    "ScoredCandidate",
    "SearchFilters",
    "SortMode",
]
