"""Pydantic models for the node atlas."""
from node_atlas.models.catalog import (
    CatalogEntity,
    CatalogSnapshot,
    CatalogStatistics,
    ChainSuggestion,
    Complexity,
    RefreshOutcome,
    SearchOptions,
    SearchResult,
    WorkflowIntent,
    WorkflowPreferences,
)
from node_atlas.models.workflows import (
    CleanupMode,
    DeploymentResult,
    SyncDirection,
    SyncReport,
    UnusedAnalysis,
    UnusedAnalysisOptions,
)

__all__ = [
    "CatalogEntity",
    "CatalogSnapshot",
    "CatalogStatistics",
    "ChainSuggestion",
    "Complexity",
    "RefreshOutcome",
    "SearchOptions",
    "SearchResult",
    "WorkflowIntent",
    "WorkflowPreferences",
    "CleanupMode",
    "DeploymentResult",
    "SyncDirection",
    "SyncReport",
    "UnusedAnalysis",
    "UnusedAnalysisOptions",
]
