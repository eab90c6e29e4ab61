"""Node catalog service - the discovery API surface.

One NodeCatalog wraps one CatalogStore. It is constructed explicitly and
passed to its callers (HTTP routes, CLI), so tests can build isolated
catalogs from fixtures.
"""
from typing import Optional, Union

import structlog

from node_atlas.catalog.chains import ChainComposer, ChainMissPolicy
from node_atlas.catalog.errors import NotFoundError
from node_atlas.catalog.index import CategoryIndex
from node_atlas.catalog.search import SearchEngine
from node_atlas.catalog.statistics import StatisticsReporter
from node_atlas.catalog.store import CatalogStore
from node_atlas.models.catalog import (
    CatalogEntity,
    CatalogStatistics,
    ChainSuggestion,
    SearchOptions,
    SearchResult,
    WorkflowIntent,
)

logger = structlog.get_logger()


class NodeCatalog:
    """Discovery, search and suggestions over a catalog store."""

    def __init__(
        self,
        store: CatalogStore,
        miss_policy: Union[ChainMissPolicy, str] = ChainMissPolicy.FLAG,
        default_max_results: int = 50,
    ):
        self.store = store
        self.index = CategoryIndex(store)
        self.search_engine = SearchEngine(store, default_max_results=default_max_results)
        self.composer = ChainComposer(store, miss_policy=miss_policy)
        self.reporter = StatisticsReporter(store)

    # =========================================================================
    # Core discovery
    # =========================================================================

    def discover_by_category(self, category: str) -> list[CatalogEntity]:
        nodes = self.index.by_category(category)
        logger.debug("discover_by_category", category=category, count=len(nodes))
        return nodes

    def discover_by_intent(self, phrase: str) -> list[CatalogEntity]:
        nodes = self.index.by_intent(phrase)
        logger.debug("discover_by_intent", intent=phrase, count=len(nodes))
        return nodes

    def search_nodes(self, query: str, options: Optional[SearchOptions] = None) -> SearchResult:
        return self.search_engine.search(query, options)

    def suggest_chains(self, intent: Union[WorkflowIntent, str]) -> list[ChainSuggestion]:
        return self.composer.suggest(intent)

    def statistics(self) -> CatalogStatistics:
        return self.reporter.statistics()

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_node(self, identifier: str) -> CatalogEntity:
        """Get a node by identifier, falling back to a case-insensitive display name.

        Raises:
            NotFoundError: no node matches.
        """
        node = self.store.by_identifier(identifier)
        if node is not None:
            return node

        lowered = identifier.lower()
        for entity in self.store.all():
            if entity.identifier.lower() == lowered or entity.display_name.lower() == lowered:
                return entity
        raise NotFoundError(identifier)

    def all_nodes(self) -> list[CatalogEntity]:
        return list(self.store.all())

    def categories(self) -> list[str]:
        return sorted({e.category for e in self.store.all()})

    # =========================================================================
    # Ecosystem views
    # =========================================================================

    def ai_ecosystem(self) -> dict[str, list[CatalogEntity]]:
        """Group AI nodes by role."""
        ai_nodes = [e for e in self.store.all() if e.is_ai]

        def described(fragment: str) -> list[CatalogEntity]:
            return [e for e in ai_nodes if fragment in e.description.lower()]

        return {
            "chat_models": [
                e for e in ai_nodes
                if e.subcategory == "Language Models" or "GPT" in e.display_name or "Claude" in e.display_name
            ],
            "vector_stores": [e for e in ai_nodes if e.subcategory == "Vector Databases"],
            "embeddings": [e for e in ai_nodes if e.subcategory == "Embeddings"],
            "chains": described("chain"),
            "retrievers": described("retriev"),
            "memory": described("memory"),
            "agents": described("agent"),
            "tools": described("tool"),
        }

    def core_workflow(self) -> dict[str, list[CatalogEntity]]:
        """Group the nodes every workflow is built from."""
        entities = self.store.all()

        def named(*names: str) -> list[CatalogEntity]:
            return [e for e in entities if e.display_name in names]

        return {
            "triggers": [e for e in entities if e.is_trigger or e.category == "Trigger Nodes"],
            "utilities": [e for e in entities if e.category == "Core Utilities"],
            "flow": named("IF", "Switch", "Merge"),
            "data_transformation": named("Set", "Function", "Code"),
            "conditions": named("IF"),
            "loops": named("Split In Batches"),
            "error_handling": [e for e in entities if "error" in e.description.lower()],
        }

    # =========================================================================
    # Health
    # =========================================================================

    def validate(self) -> list[str]:
        """List data-quality issues that degrade discovery."""
        issues = []
        for entity in self.store.all():
            if not entity.description.strip():
                issues.append(f"{entity.identifier}: empty description")
            if not entity.category.strip():
                issues.append(f"{entity.identifier}: missing category")

        for name in sorted(self.composer.referenced_names()):
            if self.store.by_display_name(name) is None:
                issues.append(f"chain suggestions reference missing node '{name}'")

        return issues
