import json

import pytest
from typer.testing import CliRunner

from listing_search.cli import app

runner = CliRunner()
ENV = {"LOG_LEVEL": "WARNING"}

CATALOG = [
    {"id": "a", "name": "Riverside Hostel", "location": "Amamoma", "price": 700, "amenities": ["Wi-Fi"]},
    {"id": "b", "name": "Hilltop Lodge", "location": "Kwaprow", "price": 1500, "image": "https://img/b.jpg"},
    {"id": "c", "name": "Campus View", "address": "Campus Road"},
]


@pytest.fixture()
def catalog_path(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"listings": CATALOG}), encoding="utf-8")
    return path


def invoke(*args):
    result = runner.invoke(app, [str(arg) for arg in args], env=ENV)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_search_applies_intent(catalog_path):
    payload = invoke("search", catalog_path, "under 800")

    assert payload["intent"]["price_max"] == 800
    assert payload["total"] == 2
    assert [item["id"] for item in payload["results"]] == ["a", "c"]


def test_search_highlights_names(catalog_path):
    payload = invoke("search", catalog_path, "hostel")

    [item] = payload["results"]
    assert item["name_segments"] == [
        {"text": "Riverside ", "matched": False},
        {"text": "Hostel", "matched": True},
    ]


def test_search_filters_and_sort(catalog_path):
    payload = invoke("search", catalog_path, "", "--sort", "price_low", "--distance", "Near campus")

    assert [item["id"] for item in payload["results"]] == ["c"]

    payload = invoke("search", catalog_path, "", "--amenity", "wifi", "--limit", "1")
    assert [item["id"] for item in payload["results"]] == ["a"]


def test_search_accepts_bare_list(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")

    payload = invoke("search", path, "", "--sort", "name_az")

    assert [item["name"] for item in payload["results"]] == ["Campus View", "Hilltop Lodge", "Riverside Hostel"]


def test_suggest_command(catalog_path):
    assert invoke("suggest", catalog_path, "kwap") == ["Kwaprow"]


def test_intent_command():
    payload = invoke("intent", "cheap wifi near campus")

    assert payload["wants_cheap"] is True
    assert payload["wants_near_campus"] is True
    assert payload["amenity_hints"] == ["wifi"]
    assert payload["query_tokens"] == []


def test_highlight_command():
    assert invoke("highlight", "Café Royale", "cafe") == [
        {"text": "Café", "matched": True},
        {"text": " Royale", "matched": False},
    ]


def test_missing_catalog_exits_with_error(tmp_path):
    result = runner.invoke(app, ["search", str(tmp_path / "nope.json"), "x"], env=ENV)

    assert result.exit_code == 1
    assert "Catalog not found" in result.output


def test_bad_config_exits_with_error(catalog_path, tmp_path):
    config = tmp_path / "bad.yml"
    config.write_text("unknown_key: 1\n", encoding="utf-8")

    result = runner.invoke(app, ["search", str(catalog_path), "x", "--config", str(config)], env=ENV)

    assert result.exit_code == 1
    assert "Invalid search config" in result.output
