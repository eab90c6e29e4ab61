"""Catalog models - entities, search requests and discovery results.

These are the value objects passed between the catalog store, the
discovery components and their callers (HTTP API, CLI). Entities are
immutable once built; every other model is an ephemeral result.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogEntity(BaseModel):
    """One discoverable integration node."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1, description="Stable unique key, e.g. n8n-nodes-base.slack")
    display_name: str = Field(..., description="Human-readable label")
    description: str = Field("", description="Free-text description")
    category: str = Field("", description="Primary category as provided by the source")
    subcategory: Optional[str] = Field(None, description="Optional secondary category")
    tags: list[str] = Field(default_factory=list, description="Aliases used for matching")
    is_trigger: bool = Field(False, description="Event source rather than an action")
    is_ai: bool = Field(False, description="Set once at ingestion time")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("display_name")
    @classmethod
    def display_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("display_name must not be empty")
        return v

    def search_text(self) -> str:
        """Text used by fuzzy matching."""
        return f"{self.display_name} {self.description}".lower()


class SearchOptions(BaseModel):
    """Filters and limits for a text search."""

    categories: list[str] = Field(default_factory=list)
    subcategories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    max_results: int = Field(50, ge=0)
    fuzzy_search: bool = True
    include_ai_optimized: bool = True
    include_regular: bool = True


class SearchResult(BaseModel):
    """Search result with enhanced metadata."""

    query: str
    nodes: list[CatalogEntity] = Field(default_factory=list)
    total_count: int = 0
    # The first exact_match_count nodes matched by substring, the rest are fuzzy
    exact_match_count: int = 0
    categories: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    related_nodes: list[CatalogEntity] = Field(default_factory=list)
    ai_optimized_variants: list[CatalogEntity] = Field(default_factory=list)

    @property
    def exact_matches(self) -> list[CatalogEntity]:
        return self.nodes[: self.exact_match_count]

    @property
    def fuzzy_matches(self) -> list[CatalogEntity]:
        return self.nodes[self.exact_match_count:]


class WorkflowPreferences(BaseModel):
    """Caller preferences for chain suggestions."""

    speed: Optional[Literal["fast", "balanced", "thorough"]] = None
    reliability: Optional[Literal["high", "medium", "low"]] = None
    cost: Optional[Literal["low", "medium", "high"]] = None


class WorkflowIntent(BaseModel):
    """Natural-language description of a workflow to compose."""

    text: str
    preferences: Optional[WorkflowPreferences] = None
    constraints: list[str] = Field(default_factory=list)


class Complexity(str, Enum):
    """Coarse complexity label for a chain."""
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class ChainSuggestion(BaseModel):
    """Node chain suggestion with reasoning."""

    chain: list[CatalogEntity]
    reasoning: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    estimated_time: str
    complexity: Complexity
    alternatives: list[list[CatalogEntity]] = Field(default_factory=list)
    # Display names that were not found in the catalog
    missing_entities: list[str] = Field(default_factory=list)


class CategoryCount(BaseModel):
    name: str
    count: int


class CatalogStatistics(BaseModel):
    """Aggregate counts over the catalog."""

    total_nodes: int
    ai_nodes: int
    regular_nodes: int
    trigger_nodes: int
    categories: dict[str, int]
    top_integrations: list[CategoryCount]
    coverage: dict[str, int]


class CatalogSnapshot(BaseModel):
    """A persisted, successfully loaded catalog."""

    revision: Optional[str] = None
    saved_at: datetime
    entities: list[CatalogEntity]


class SkippedRecord(BaseModel):
    record: str
    reason: str


class RefreshOutcome(BaseModel):
    """Result of one refresh attempt."""

    status: Literal["refreshed", "unchanged", "fallback"]
    revision: Optional[str] = None
    entity_count: int = 0
    skipped: list[SkippedRecord] = Field(default_factory=list)
    error: Optional[str] = None
