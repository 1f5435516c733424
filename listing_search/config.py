"""Loading of search configuration from YAML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .indexer import CatalogIndexer
from .intent import DEFAULT_PROXIMITY_PHRASES, IntentParser
from .ranker import Ranker
from .scoring import MatchWeights
from .suggest import DEFAULT_TEMPLATES
from .thesaurus import DEFAULT_AMENITY_SYNONYMS, AmenityThesaurus

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or validated."""


class WeightsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    exact: float = Field(default=40.0, gt=0)
    partial: float = Field(default=25.0, gt=0)
    near: float = Field(default=10.0, gt=0)


class SearchConfig(BaseModel):
    """Static inputs of the search engine."""

    model_config = ConfigDict(extra="forbid")

    debounce_ms: int = Field(default=180, ge=0)
    amenity_synonyms: Dict[str, List[str]] = Field(
        default_factory=lambda: {key: list(values) for key, values in DEFAULT_AMENITY_SYNONYMS.items()}
    )
    proximity_phrases: List[str] = Field(default_factory=lambda: list(DEFAULT_PROXIMITY_PHRASES))
    suggestion_templates: List[str] = Field(default_factory=lambda: list(DEFAULT_TEMPLATES))
    near_campus_areas: List[str] = Field(default_factory=list)
    match_weights: WeightsConfig = Field(default_factory=WeightsConfig)

    def thesaurus(self) -> AmenityThesaurus:
        return AmenityThesaurus(self.amenity_synonyms)

    def weights(self) -> MatchWeights:
        return MatchWeights(
            exact=self.match_weights.exact,
            partial=self.match_weights.partial,
            near=self.match_weights.near,
        )

    def intent_parser(self) -> IntentParser:
        return IntentParser(self.thesaurus(), proximity_phrases=self.proximity_phrases)

    def indexer(self) -> CatalogIndexer:
        return CatalogIndexer(near_campus_areas=self.near_campus_areas)

    def ranker(self) -> Ranker:
        return Ranker(self.thesaurus(), weights=self.weights())


def parse_config(text: str) -> SearchConfig:
    """Parse YAML *text* into a :class:`SearchConfig`."""

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in search config: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Search config must be a mapping at the top level.")
    try:
        return SearchConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid search config: {exc}") from exc


def load_config(path: str | Path) -> SearchConfig:
    """Load search configuration from the YAML file at *path*."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigError(f"Config not found: {file_path}")
    config = parse_config(file_path.read_text(encoding="utf-8"))
    logger.debug("Loaded search config from %s", file_path)
    return config


__all__ = ["ConfigError", "SearchConfig", "load_config", "parse_config"]
