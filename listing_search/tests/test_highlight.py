"""Tests for highlight segment generation."""

from __future__ import annotations

import pytest

from listing_search.highlight import Segment, highlight


def _pairs(segments: list[Segment]) -> list[tuple[str, bool]]:
    return [(segment.text, segment.matched) for segment in segments]


def test_empty_query_returns_single_plain_segment() -> None:
    assert _pairs(highlight("Riverside Hostel", "")) == [("Riverside Hostel", False)]
    assert _pairs(highlight("Riverside Hostel", " !! ")) == [("Riverside Hostel", False)]


def test_empty_text_has_no_segments() -> None:
    assert highlight("", "hostel") == []


def test_marks_case_insensitive_match() -> None:
    assert _pairs(highlight("Riverside Hostel", "hostel")) == [
        ("Riverside ", False),
        ("Hostel", True),
    ]


def test_maps_accented_characters_back_to_original() -> None:
    assert _pairs(highlight("Café Royale", "cafe")) == [("Café", True), (" Royale", False)]


def test_longer_token_is_not_split_by_shorter_one() -> None:
    assert _pairs(highlight("Amamoma", "ama amamoma")) == [("Amamoma", True)]


def test_digit_separators_are_covered() -> None:
    assert _pairs(highlight("1,200 per month", "1200")) == [("1,200", True), (" per month", False)]


def test_hyphenated_words_match_per_token() -> None:
    assert _pairs(highlight("Self-Contained rooms", "self contained")) == [
        ("Self", True),
        ("-", False),
        ("Contained", True),
        (" rooms", False),
    ]


@pytest.mark.parametrize(
    "text,query",
    [
        ("Riverside Hostel", ""),
        ("Riverside Hostel", "side hos"),
        ("  Ünïcödé,  Résidence!! ", "residence unicode"),
        ("Don't stop", "dont"),
        ("ﬁne lodge", "fine"),
        ("under 800 near campus", "under 800 near campus"),
        ("GH₵1,200", "1200 gh"),
        ("x", "zzz"),
    ],
)
def test_segments_reproduce_text(text: str, query: str) -> None:
    assert "".join(segment.text for segment in highlight(text, query)) == text
