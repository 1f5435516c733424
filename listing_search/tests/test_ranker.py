"""Tests for filtering, scoring and ordering of listings."""

from __future__ import annotations

import pytest

from listing_search.indexer import CatalogIndexer
from listing_search.intent import IntentParser
from listing_search.ranker import Distance, Ranker, RoomType, SearchFilters, SortMode
from listing_search.thesaurus import AmenityThesaurus


@pytest.fixture()
def thesaurus() -> AmenityThesaurus:
    return AmenityThesaurus.default()


@pytest.fixture()
def parser(thesaurus: AmenityThesaurus) -> IntentParser:
    return IntentParser(thesaurus)


@pytest.fixture()
def ranker(thesaurus: AmenityThesaurus) -> Ranker:
    return Ranker(thesaurus)


def make_listings(*records):
    return CatalogIndexer().build(list(records))


def names(listings):
    return [listing.name for listing in listings]


def test_price_bound_passes_listing_without_text_match(parser, ranker):
    listings = make_listings(
        {"name": "Riverside Hostel", "price": 700},
        {"name": "Hilltop Lodge", "price": 1500},
    )
    intent = parser.parse("under 800")

    assert names(ranker.rank(listings, intent)) == ["Riverside Hostel"]

    candidates = ranker.score_candidates(listings, intent, SearchFilters())
    assert [candidate.passes for candidate in candidates] == [True, False]


def test_free_text_without_hits_or_filters_returns_nothing(parser, ranker):
    listings = make_listings(
        {"name": "Riverside Hostel", "location": "Amamoma"},
        {"name": "Hilltop Lodge", "location": "Kwaprow"},
    )

    assert ranker.rank(listings, parser.parse("zzzznomatch")) == []


def test_structured_filter_keeps_listing_through_query_gate(parser, ranker):
    listings = make_listings(
        {"name": "Riverside Hostel", "amenities": ["WiFi"]},
        {"name": "Hilltop Lodge", "amenities": ["Water"]},
    )
    filters = SearchFilters(amenities=frozenset({"wifi"}))

    assert names(ranker.rank(listings, parser.parse("zzzznomatch"), filters)) == ["Riverside Hostel"]


def test_text_query_keeps_only_matching_listings(parser, ranker):
    listings = make_listings(
        {"name": "Riverside Hostel"},
        {"name": "Hilltop Lodge", "address": "Riverside Road"},
        {"name": "Campus View"},
    )

    result = ranker.rank(listings, parser.parse("riverside"))

    assert names(result) == ["Riverside Hostel", "Hilltop Lodge"]


def test_price_low_puts_unknown_price_last(parser, ranker):
    listings = make_listings(
        {"name": "Unknown"},
        {"name": "Mid", "price": 500},
        {"name": "Low", "price": 300},
    )
    filters = SearchFilters(sort=SortMode.PRICE_LOW)

    result = ranker.rank(listings, parser.parse(""), filters)

    assert [listing.price for listing in result] == [300, 500, None]


def test_price_low_breaks_ties_by_score(parser, ranker):
    listings = make_listings(
        {"name": "Bare", "price": 500},
        {"name": "Pictured", "price": 500, "image": "https://img/x.jpg"},
    )
    filters = SearchFilters(sort=SortMode.PRICE_LOW)

    assert names(ranker.rank(listings, parser.parse(""), filters)) == ["Pictured", "Bare"]


def test_name_sort(parser, ranker):
    listings = make_listings({"name": "zeta"}, {"name": "Alpha"}, {"name": "mid"})
    filters = SearchFilters(sort=SortMode.NAME_AZ)

    assert names(ranker.rank(listings, parser.parse(""), filters)) == ["Alpha", "mid", "zeta"]


def test_recommended_without_query_ranks_by_completeness(parser, ranker):
    listings = make_listings(
        {"name": "B"},
        {"name": "C", "price": 100},
        {"name": "A", "price": 500, "image": "https://img/a.jpg"},
    )

    assert names(ranker.rank(listings, parser.parse(""))) == ["A", "C", "B"]


def test_amenity_hint_matches_synonym_in_listing(parser, ranker):
    listings = make_listings(
        {"name": "Connected", "amenities": ["Wi-Fi", "Kitchen"]},
        {"name": "Offline", "amenities": ["Water"]},
    )

    assert names(ranker.rank(listings, parser.parse("wifi"))) == ["Connected"]


def test_every_requested_amenity_is_required(parser, ranker):
    listings = make_listings(
        {"name": "Both", "amenities": ["internet", "security guard"]},
        {"name": "One", "amenities": ["internet"]},
    )

    assert names(ranker.rank(listings, parser.parse("wifi + security"))) == ["Both"]


def test_manual_price_overrides_intent(parser, ranker):
    listings = make_listings({"name": "Seven", "price": 700}, {"name": "Five", "price": 500})
    intent = parser.parse("under 800")

    assert names(ranker.rank(listings, intent, SearchFilters(price_max="600"))) == ["Five"]
    assert names(ranker.rank(listings, intent, SearchFilters(price_max="abc"))) == ["Seven", "Five"]


def test_unknown_price_passes_bounds(parser, ranker):
    listings = make_listings({"name": "Mystery"}, {"name": "Pricey", "price": 5000})
    filters = SearchFilters(price_min="100", price_max="1,000")

    assert names(ranker.rank(listings, parser.parse(""), filters)) == ["Mystery"]


def test_location_filter_matches_location_or_address(parser, ranker):
    listings = make_listings(
        {"name": "One", "location": "Amamoma, Cape Coast"},
        {"name": "Two", "address": "12 Amamoma Street"},
        {"name": "Three", "location": "Kwaprow"},
    )

    assert names(ranker.rank(listings, parser.parse(""), SearchFilters(location="Amamoma"))) == ["One", "Two"]
    assert len(ranker.rank(listings, parser.parse(""), SearchFilters(location="All"))) == 3


def test_distance_filter_keeps_near_campus(parser, ranker):
    listings = make_listings(
        {"name": "Far", "location": "Town centre"},
        {"name": "Close", "location": "Campus gate"},
    )
    filters = SearchFilters(distance=Distance.NEAR_CAMPUS)

    assert names(ranker.rank(listings, parser.parse(""), filters)) == ["Close"]


def test_room_type_filter_uses_needles(parser, ranker):
    listings = make_listings(
        {"name": "A", "room_type": "Self Con"},
        {"name": "B", "room_type": "Self-contained"},
        {"name": "C", "room_type": "Single"},
    )
    filters = SearchFilters(room_type=RoomType.SELF_CONTAINED)

    assert names(ranker.rank(listings, parser.parse(""), filters)) == ["A", "B"]


def test_near_campus_intent_adds_bonus(parser, ranker):
    listings = make_listings(
        {"name": "Far", "location": "Town"},
        {"name": "Near", "location": "Campus"},
    )

    assert names(ranker.rank(listings, parser.parse("near campus"))) == ["Near", "Far"]


def test_cheap_intent_prefers_lower_prices(parser, ranker):
    listings = make_listings({"name": "Dear", "price": 7000}, {"name": "Cheap", "price": 1000})

    candidates = ranker.score_candidates(listings, parser.parse("cheap"), SearchFilters())

    assert [candidate.score for candidate in candidates] == [40 + 20, 40 + 140]
    assert names(ranker.rank(listings, parser.parse("cheap"))) == ["Cheap", "Dear"]


def test_composite_score_weights_fields(parser, ranker):
    [listing] = make_listings({"name": "Riverside", "location": "Riverside"})
    [candidate] = ranker.score_candidates([listing], parser.parse("riverside"), SearchFilters())

    assert candidate.score == 3 * 40 + 2 * 40


def test_decimal_thousands_bound_keeps_cheaper_listings(parser, ranker):
    listings = make_listings(
        {"name": "Nine", "price": 900},
        {"name": "Twelve", "price": 1200},
        {"name": "Two", "price": 2000},
    )

    assert names(ranker.rank(listings, parser.parse("under 1.5k"))) == ["Nine", "Twelve"]
