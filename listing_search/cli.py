"""Command line interface for listing search."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import typer

from .config import ConfigError, SearchConfig, load_config
from .highlight import highlight as highlight_text
from .ranker import Distance, RoomType, SearchFilters, SortMode
from .suggest import known_locations, suggest as suggest_queries

app = typer.Typer(add_completion=False, help="Search a listing catalog snapshot")
logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"), format="%(levelname)s: %(message)s")


def _config(path: Optional[Path]) -> SearchConfig:
    if path is None:
        return SearchConfig()
    try:
        return load_config(path)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def load_catalog(path: Path) -> List[Any]:
    """Read a JSON catalog: either a list of records or ``{"listings": [...]}``."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        typer.echo(f"Catalog not found: {path}", err=True)
        raise typer.Exit(code=1) from exc
    except json.JSONDecodeError as exc:
        typer.echo(f"Catalog is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if isinstance(payload, dict):
        payload = payload.get("listings", payload.get("hostels", []))
    if not isinstance(payload, list):
        typer.echo("Catalog must be a JSON list of listings", err=True)
        raise typer.Exit(code=1)
    return payload


def _emit(data: Any, pretty: bool) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2 if pretty else None))


@app.command()
def search(
    catalog: Path = typer.Argument(..., help="JSON file holding the catalog snapshot"),
    query: str = typer.Argument("", help="Free-text query"),
    location: str = typer.Option("All", help="Location filter or 'All'"),
    sort: SortMode = typer.Option(SortMode.RECOMMENDED, help="Sort mode"),
    room_type: RoomType = typer.Option(RoomType.ANY, "--room-type", help="Room type filter"),
    distance: Distance = typer.Option(Distance.ANY, help="Distance filter"),
    amenity: List[str] = typer.Option([], "--amenity", "-a", help="Required amenity key (repeatable)"),
    min_price: Optional[str] = typer.Option(None, "--min-price", help="Manual minimum price"),
    max_price: Optional[str] = typer.Option(None, "--max-price", help="Manual maximum price"),
    limit: int = typer.Option(20, min=1, help="Maximum number of results"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML search config"),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print JSON output"),
) -> None:
    """Rank the catalog for QUERY and the given filters."""

    _configure_logging()
    settings = _config(config)
    records = load_catalog(catalog)

    listings = settings.indexer().build(records)
    intent = settings.intent_parser().parse(query)
    filters = SearchFilters(
        location=location,
        sort=sort,
        room_type=room_type,
        distance=distance,
        amenities=frozenset(amenity),
        price_min=min_price,
        price_max=max_price,
    )
    ranked = settings.ranker().rank(listings, intent, filters)
    logger.info("%d of %d listing(s) match", len(ranked), len(listings))

    results = []
    for listing in ranked[:limit]:
        item = listing.to_dict()
        item["name_segments"] = [segment.to_dict() for segment in highlight_text(listing.name, query)]
        results.append(item)
    _emit({"intent": intent.to_dict(), "total": len(ranked), "results": results}, pretty)


@app.command()
def suggest(
    catalog: Path = typer.Argument(..., help="JSON file holding the catalog snapshot"),
    text: str = typer.Argument("", help="Current search-box text"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML search config"),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print JSON output"),
) -> None:
    """Print query suggestions for TEXT."""

    _configure_logging()
    settings = _config(config)
    listings = settings.indexer().build(load_catalog(catalog))
    suggestions = suggest_queries(
        text,
        known_locations(listings),
        templates=settings.suggestion_templates,
        weights=settings.weights(),
    )
    _emit(suggestions, pretty)


@app.command()
def intent(
    query: str = typer.Argument(..., help="Free-text query"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML search config"),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print JSON output"),
) -> None:
    """Show the structured signals extracted from QUERY."""

    _configure_logging()
    parsed = _config(config).intent_parser().parse(query)
    _emit(parsed.to_dict(), pretty)


@app.command()
def highlight(
    text: str = typer.Argument(..., help="Display text"),
    query: str = typer.Argument("", help="Query to highlight"),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print JSON output"),
) -> None:
    """Split TEXT into matched and plain segments for QUERY."""

    _emit([segment.to_dict() for segment in highlight_text(text, query)], pretty)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
