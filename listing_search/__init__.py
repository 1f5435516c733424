"""Query interpretation and ranking for listing catalogs."""

from .config import ConfigError, SearchConfig, load_config, parse_config
from .highlight import Segment, highlight
from .indexer import CatalogIndexer, get_image_urls
from .intent import Intent, IntentParser
from .models import IndexedListing, RawListing
from .ranker import Distance, Ranker, RoomType, ScoredCandidate, SearchFilters, SortMode
from .scoring import MatchWeights, score
from .session import Debouncer, SearchSession
from .suggest import known_locations, suggest
from .text import normalize, tokenize
from .thesaurus import DEFAULT_AMENITY_SYNONYMS, AmenityThesaurus

__all__ = [
    "normalize",
    "tokenize",
    "AmenityThesaurus",
    "DEFAULT_AMENITY_SYNONYMS",
    "Segment",
    "highlight",
    "Intent",
    "IntentParser",
    "RawListing",
    "IndexedListing",
    "CatalogIndexer",
    "get_image_urls",
    "MatchWeights",
    "score",
    "Ranker",
    "SearchFilters",
    "ScoredCandidate",
    "SortMode",
    "RoomType",
    "Distance",
    "suggest",
    "known_locations",
    "Debouncer",
    "SearchSession",
    "SearchConfig",
    "ConfigError",
    "load_config",
    "parse_config",
]
