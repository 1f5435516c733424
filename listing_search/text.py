"""Text canonicalisation helpers shared by every search component."""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache
from typing import Any, List, Optional, Tuple

_DASHES = {"‐", "‑", "‒", "–", "—", "―", "−"}
_APOSTROPHES = {"'", "‘", "’", "ʼ", "`"}
_TOKEN_SPLIT_PATTERN = re.compile(r"[\s\-]+")


@lru_cache(maxsize=4096)
def _fold(char: str) -> str:
    """Lower-case *char* and strip its diacritics until the result is stable."""

    folded = char
    for _ in range(4):
        decomposed = unicodedata.normalize("NFKD", folded.lower())
        nxt = "".join(piece for piece in decomposed if not unicodedata.combining(piece))
        if nxt == folded:
            break
        folded = nxt
    return folded


def _is_digit_separator(text: str, index: int) -> bool:
    return 0 < index < len(text) - 1 and text[index - 1].isdigit() and text[index + 1].isdigit()


def canonical_chars(text: Optional[str]) -> List[Tuple[str, int]]:
    """Return the canonical characters of *text* paired with their source offsets.

    The joined characters are exactly :func:`normalize` of *text*; the offsets
    point back into the original string so matches found in canonical form can
    be mapped onto the display text.
    """

    if not text:
        return []

    emitted: List[Tuple[str, int]] = []
    for index, char in enumerate(text):
        if char == "," and _is_digit_separator(text, index):
            continue
        if char == "." and _is_digit_separator(text, index):
            emitted.append((char, index))
            continue
        if char in _APOSTROPHES:
            continue
        if char in _DASHES:
            char = "-"

        for piece in _fold(char):
            if piece.isspace():
                piece = " "
            elif not (piece.isalnum() or piece == "-"):
                piece = " "
            if piece == " " and (not emitted or emitted[-1][0] == " "):
                continue
            emitted.append((piece, index))

    while emitted and emitted[-1][0] == " ":
        emitted.pop()
    return emitted


def normalize(text: Optional[str]) -> str:
    """Return the canonical comparison form of *text*.

    Lower-cased, diacritics stripped, punctuation replaced by single spaces
    (hyphens survive so ``self-contained`` stays one unit, decimal points
    survive between digits), whitespace runs collapsed and trimmed. ``None``
    and empty strings give ``""``.
    """

    return "".join(char for char, _ in canonical_chars(text))


def tokenize(text: Optional[str]) -> List[str]:
    """Split *text* into canonical tokens on whitespace and hyphens.

    Order and duplicates are preserved; empty tokens are never returned.
    """

    canonical = normalize(text)
    if not canonical:
        return []
    return [token for token in _TOKEN_SPLIT_PATTERN.split(canonical) if token]


def to_text(value: Any, *, limit: int = 30) -> str:
    """Flatten a loosely typed value (string, number, list, mapping) to text."""

    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, dict):
        return " ".join(filter(None, (to_text(item, limit=limit) for item in list(value.values())[:limit])))
    if isinstance(value, (list, tuple, set, frozenset)):
        return " ".join(filter(None, (to_text(item, limit=limit) for item in value)))
    return ""


__all__ = ["canonical_chars", "normalize", "tokenize", "to_text"]
