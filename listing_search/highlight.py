"""Split display strings into matched and plain runs for a query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .text import canonical_chars, tokenize


@dataclass(frozen=True, slots=True)
class Segment:
    """A contiguous run of a display string."""

    text: str
    matched: bool = False

    def to_dict(self) -> dict:
        return {"text": self.text, "matched": self.matched}


def highlight(display_text: Optional[str], query: Optional[str]) -> List[Segment]:
    """Return segments of *display_text* marking occurrences of *query* tokens.

    Tokens are located in the canonical form of the text, longest first, and
    mapped back to the original characters. Joining the segment texts always
    yields *display_text* unchanged.
    """

    text = display_text or ""
    if not text:
        return []

    tokens = sorted(set(tokenize(query)), key=lambda token: (-len(token), token))
    if not tokens:
        return [Segment(text)]

    chars = canonical_chars(text)
    canonical = "".join(char for char, _ in chars)
    covered = [False] * len(canonical)

    for token in tokens:
        start = canonical.find(token)
        while start != -1:
            end = start + len(token)
            if not all(covered[start:end]):
                for index in range(start, end):
                    covered[index] = True
            start = canonical.find(token, start + 1)

    marked = [False] * len(text)
    index = 0
    while index < len(covered):
        if not covered[index]:
            index += 1
            continue
        run_end = index
        while run_end < len(covered) and covered[run_end]:
            run_end += 1
        first = chars[index][1]
        last = chars[run_end - 1][1]
        for position in range(first, last + 1):
            marked[position] = True
        index = run_end

    segments: List[Segment] = []
    run_start = 0
    for position in range(1, len(text) + 1):
        if position == len(text) or marked[position] != marked[run_start]:
            segments.append(Segment(text[run_start:position], marked[run_start]))
            run_start = position
    return segments


__all__ = ["Segment", "highlight"]
