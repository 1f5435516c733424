"""Build indexed listings with precomputed canonical search fields."""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from jsonpath_ng.ext import parse as jsonpath_parse
from pydantic import ValidationError

from .heuristics import coerce_flag, infer_price_unit, parse_price
from .models import IndexedListing, RawListing, as_mapping
from .text import normalize, tokenize

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Hostel"
CAMPUS_ABBREVIATION = "ucc"

# Ordered groups of image locations; the first group that yields URLs wins.
IMAGE_PATH_GROUPS: Tuple[Tuple[str, ...], ...] = (
    ("images[*].image_url", "images[*].url", "images[*].src"),
    ("image_urls[*]", "images[*]"),
    ("photos[*].image_url", "photos[*].url", "photos[*].src", "photos[*]"),
    ("main_image",),
    ("cover_image",),
    ("image",),
    ("image_url",),
)

# Fields carrying an explicit billing period, in priority order.
UNIT_PRICE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("price_per_night", "night"),
    ("price_per_month", "month"),
    ("price_per_semester", "semester"),
    ("price_per_year", "year"),
    ("price_per_day", "day"),
)
GENERIC_PRICE_FIELDS: Tuple[str, ...] = ("price", "price_from", "min_price")

_COMPILED_PATHS: dict = {}


def _compiled(expression: str):
    expr = _COMPILED_PATHS.get(expression)
    if expr is None:
        expr = jsonpath_parse(expression)
        _COMPILED_PATHS[expression] = expr
    return expr


def _find_strings(record: Mapping[str, Any], expression: str) -> List[str]:
    try:
        matches = _compiled(expression).find(record)
    except Exception as exc:  # pragma: no cover - jsonpath internals on odd shapes
        logger.debug("Image lookup %s failed: %s", expression, exc)
        return []
    urls: List[str] = []
    for match in matches:
        value = match.value
        if isinstance(value, str) and value.strip():
            urls.append(value.strip())
    return urls


def get_image_urls(raw_listing: Any) -> List[str]:
    """Return image URLs of *raw_listing* from the first shape that has any.

    Tries lists of objects carrying a URL, lists of plain URL strings, lists of
    photo objects, then single main/cover/generic image fields. Missing or
    malformed shapes give an empty list.
    """

    record = as_mapping(raw_listing)
    if not record:
        return []
    for group in IMAGE_PATH_GROUPS:
        urls: List[str] = []
        for expression in group:
            urls = _find_strings(record, expression)
            if urls:
                break
        if urls:
            return urls
    return []


def extract_price(raw_listing: Any, unit_hint: Optional[str] = None) -> Tuple[Optional[float], Optional[str]]:
    """Return ``(price, unit)`` from the first usable price field of *raw_listing*."""

    record = as_mapping(raw_listing)
    for key, unit in UNIT_PRICE_FIELDS:
        price = parse_price(record.get(key))
        if price is not None:
            return price, unit

    for key in GENERIC_PRICE_FIELDS:
        value = record.get(key)
        price = parse_price(value)
        if price is None:
            continue
        unit = infer_price_unit(unit_hint) or infer_price_unit(value if isinstance(value, str) else None)
        return price, unit
    return None, None


def stable_id(name: str, location: str) -> str:
    digest = hashlib.sha256(normalize(f"{name}|{location}").encode("utf-8")).hexdigest()[:16]
    return f"listing_{digest}"


def _read(record: Any) -> RawListing:
    if not isinstance(record, Mapping):
        logger.debug("Skipping non-mapping catalog record of type %s", type(record).__name__)
        return RawListing.empty()
    try:
        return RawListing.model_validate(dict(record))
    except ValidationError as exc:
        logger.debug("Catalog record failed validation: %s", exc)
        return RawListing.empty()


class CatalogIndexer:
    """Turns raw catalog records into :class:`IndexedListing` snapshots.

    *near_campus_areas* are place names that count as near campus when they
    appear in a listing's location, address or feature text.
    """

    def __init__(self, near_campus_areas: Sequence[str] = ()) -> None:
        self.near_campus_areas = tuple(area for area in (normalize(a) for a in near_campus_areas) if area)

    def is_near_campus(self, location_n: str, address_n: str, features_n: str = "", flag: Any = None) -> bool:
        if coerce_flag(flag):
            return True
        combined = f"{location_n} {address_n} {features_n}"
        if "campus" in combined or CAMPUS_ABBREVIATION in tokenize(combined):
            return True
        return any(area in combined for area in self.near_campus_areas)

    def index(self, record: Any) -> IndexedListing:
        raw = _read(record)
        name = raw.name or DEFAULT_NAME
        location = raw.location or ""
        address = raw.address or ""

        location_n = normalize(location)
        address_n = normalize(address)
        features = " ".join(
            part for part in (raw.features, raw.description, raw.tags, raw.category) if part
        )
        features_n = normalize(features)
        images = tuple(get_image_urls(record))
        price, unit = extract_price(record, raw.price_unit)

        return IndexedListing(
            listing_id=raw.listing_id or stable_id(name, location or address),
            name=name,
            location=location,
            address=address,
            name_n=normalize(name),
            location_n=location_n,
            address_n=address_n,
            room_type_n=normalize(raw.room_type),
            amenity_n=normalize(raw.amenities),
            features_n=features_n,
            price=price,
            price_unit=unit,
            near_campus=self.is_near_campus(location_n, address_n, features_n, flag=raw.near_campus_flag),
            image_urls=images,
            has_images=1 if images else 0,
            has_price=1 if price is not None else 0,
            raw=record,
        )

    def build(self, raw_listings: Optional[Iterable[Any]]) -> List[IndexedListing]:
        """Index every record of *raw_listings*, preserving order."""

        listings = [self.index(record) for record in (raw_listings or [])]
        logger.debug("Indexed %d catalog record(s)", len(listings))
        return listings


__all__ = [
    "CatalogIndexer",
    "extract_price",
    "get_image_urls",
    "stable_id",
    "IMAGE_PATH_GROUPS",
]
