"""Best-effort parsing of prices and price units from loosely typed values."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

PRICE_UNITS = ("night", "month", "semester", "year", "day")

_NUMBER_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")
_THOUSANDS_PATTERN = re.compile(r"(?<=\d),(?=\d{3}\b)")
_UNIT_PATTERNS = (
    ("night", re.compile(r"\b(?:night|nights|nightly)\b")),
    ("semester", re.compile(r"\b(?:semester|semesters|sem|term)\b")),
    ("month", re.compile(r"\b(?:month|months|monthly|mo|mth)\b")),
    ("year", re.compile(r"\b(?:year|years|yearly|annum|annual|annually|yr)\b")),
    ("day", re.compile(r"\b(?:day|days|daily)\b")),
)


def parse_price(value: Any) -> Optional[float]:
    """Return a numeric price from *value* or ``None``.

    Numbers are accepted as-is when finite; strings yield their first number
    after thousands separators are removed (``"GHS 1,200 / sem"`` -> 1200).
    Booleans and other types are rejected.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    text = _THOUSANDS_PATTERN.sub("", value.replace("\xa0", " "))
    match = _NUMBER_PATTERN.search(text)
    if not match:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        logger.debug("Unable to parse price from %r", value)
        return None
    return number if math.isfinite(number) else None


def infer_price_unit(text: Any) -> Optional[str]:
    """Infer a billing period from free text such as ``"per semester"``."""

    if not isinstance(text, str) or not text:
        return None
    lowered = text.lower()
    if lowered.strip() in PRICE_UNITS:
        return lowered.strip()
    for unit, pattern in _UNIT_PATTERNS:
        if pattern.search(lowered):
            return unit
    return None


def parse_price_input(text: Optional[str]) -> Optional[float]:
    """Parse a manual min/max price field; blank or malformed input gives ``None``."""

    if text is None:
        return None
    cleaned = str(text).replace(",", "").strip()
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        logger.debug("Ignoring malformed price input %r", text)
        return None
    return number if math.isfinite(number) else None


def coerce_flag(value: Any) -> bool:
    """Interpret a loosely typed boolean flag (``True``, ``1``, ``"yes"``)."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "y", "1"}
    return False


__all__ = ["PRICE_UNITS", "parse_price", "infer_price_unit", "parse_price_input", "coerce_flag"]
