"""Stateful search session: debounced query, filters and cached index."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from .config import SearchConfig
from .highlight import Segment, highlight
from .intent import Intent
from .models import IndexedListing
from .ranker import SearchFilters
from .suggest import known_locations, suggest

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Debouncer(Generic[T]):
    """Holds back a value until no newer one has arrived for *quiet_period* seconds.

    Every :meth:`push` replaces the pending value and restarts the wait, so
    only the most recent value ever settles.
    """

    quiet_period: float
    clock: Callable[[], float] = time.monotonic
    settled: Optional[T] = None
    _pending: Optional[T] = field(default=None, init=False, repr=False)
    _deadline: Optional[float] = field(default=None, init=False, repr=False)

    def push(self, value: T) -> None:
        self._pending = value
        self._deadline = self.clock() + self.quiet_period

    @property
    def is_pending(self) -> bool:
        return self._deadline is not None

    def poll(self) -> bool:
        """Settle the pending value if its quiet period has elapsed."""

        if self._deadline is None or self.clock() < self._deadline:
            return False
        self.settled = self._pending
        self._pending = None
        self._deadline = None
        return True

    def flush(self) -> None:
        """Settle the pending value immediately."""

        if self._deadline is not None:
            self.settled = self._pending
            self._pending = None
            self._deadline = None


class SearchSession:
    """Ties the catalog snapshot, query box and filters to ranked output."""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or SearchConfig()
        self.parser = self.config.intent_parser()
        self.indexer = self.config.indexer()
        self.ranker = self.config.ranker()
        self.search_text = ""
        self.filters = SearchFilters()
        self._query = Debouncer[str](quiet_period=self.config.debounce_ms / 1000.0, clock=clock, settled="")
        self._records: Optional[Sequence[Any]] = None
        self._indexed: List[IndexedListing] = []
        self._intent_query: Optional[str] = None
        self._intent = Intent()

    # catalog -----------------------------------------------------------
    def set_catalog(self, records: Sequence[Any]) -> None:
        """Use *records* as the catalog; re-index only when the reference changes."""

        if records is self._records:
            return
        self._records = records
        self._indexed = self.indexer.build(records)
        logger.info("Indexed %d listing(s)", len(self._indexed))

    @property
    def indexed(self) -> List[IndexedListing]:
        return list(self._indexed)

    # query -------------------------------------------------------------
    def set_search_text(self, text: str) -> None:
        self.search_text = text
        self._query.push(text)

    @property
    def is_typing(self) -> bool:
        self._query.poll()
        return self._query.is_pending

    @property
    def debounced_query(self) -> str:
        self._query.poll()
        return self._query.settled or ""

    def flush(self) -> None:
        self._query.flush()

    @property
    def intent(self) -> Intent:
        query = self.debounced_query
        if query != self._intent_query:
            self._intent = self.parser.parse(query)
            self._intent_query = query
        return self._intent

    # filters -----------------------------------------------------------
    def update_filters(self, **changes: Any) -> None:
        self.filters = replace(self.filters, **changes)

    def toggle_amenity(self, key: str) -> None:
        selected = set(self.filters.amenities)
        selected.symmetric_difference_update({key})
        self.filters = replace(self.filters, amenities=frozenset(selected))

    def clear_all(self) -> None:
        self.search_text = ""
        self._query.push("")
        self._query.flush()
        self.filters = SearchFilters()

    # output ------------------------------------------------------------
    def results(self) -> List[IndexedListing]:
        return self.ranker.rank(self._indexed, self.intent, self.filters)

    def locations(self) -> List[str]:
        return known_locations(self._indexed)

    def suggestions(self) -> List[str]:
        return suggest(
            self.search_text,
            self.locations(),
            templates=self.config.suggestion_templates,
            weights=self.config.weights(),
        )

    def highlight(self, text: str) -> List[Segment]:
        return highlight(text, self.debounced_query)


__all__ = ["Debouncer", "SearchSession"]
