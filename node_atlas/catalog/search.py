"""Text search over the catalog.

Search runs in two passes over the (optionally filtered) catalog:

1. Exact matches - the lowercased query is a substring of an entity's
   display name, description, identifier or one of its tags.
2. Fuzzy matches - only when exact matches do not fill the result cap.
   A remaining entity qualifies when a query word is a substring of its
   text, or is close to it by normalized edit distance.

Exact matches always come before fuzzy ones.
"""
from typing import Optional

import structlog

from node_atlas.catalog.similarity import is_fuzzy_match
from node_atlas.catalog.store import CatalogStore
from node_atlas.models.catalog import CatalogEntity, SearchOptions, SearchResult

logger = structlog.get_logger()

FUZZY_LIMIT = 10
RELATED_LIMIT = 10
SUGGESTION_LIMIT = 5

SEARCH_SUGGESTIONS = [
    "AI language models",
    "database operations",
    "communication tools",
    "cloud storage",
    "workflow automation",
    "data transformation",
    "email marketing",
    "social media",
    "project management",
    "customer support",
]


def _any_contains(values: list[str], text: Optional[str]) -> bool:
    if text is None:
        return False
    lowered = text.lower()
    return any(v.lower() in lowered for v in values)


class SearchEngine:
    """Substring and edit-distance search over a catalog store."""

    def __init__(self, store: CatalogStore, default_max_results: int = 50):
        self.store = store
        self.default_max_results = default_max_results

    def search(self, query: str, options: Optional[SearchOptions] = None) -> SearchResult:
        """Search the catalog.

        An empty or blank query matches every entity that passes the
        filters, up to the result cap.
        """
        if options is None:
            options = SearchOptions(max_results=self.default_max_results)

        catalog = self.store.all()
        candidates = self._apply_filters(catalog, options)

        lowered = query.strip().lower()
        exact = [e for e in candidates if self._is_exact_match(lowered, e)]

        fuzzy: list[CatalogEntity] = []
        if options.fuzzy_search and len(exact) < options.max_results:
            fuzzy = self._fuzzy_matches(lowered, candidates, exact)

        nodes = (exact + fuzzy)[: options.max_results]
        exact_count = min(len(exact), len(nodes))

        logger.debug(
            "catalog_search",
            query=query,
            candidates=len(candidates),
            exact=len(exact),
            fuzzy=len(fuzzy),
            returned=len(nodes),
        )

        return SearchResult(
            query=query,
            nodes=nodes,
            total_count=len(nodes),
            exact_match_count=exact_count,
            categories=list(dict.fromkeys(e.category for e in nodes)),
            suggestions=self._suggestions(lowered),
            related_nodes=self._related(nodes, catalog),
            ai_optimized_variants=[e for e in nodes if e.is_ai],
        )

    def _apply_filters(
        self,
        entities: tuple[CatalogEntity, ...],
        options: SearchOptions,
    ) -> list[CatalogEntity]:
        result = list(entities)

        if options.categories:
            result = [e for e in result if _any_contains(options.categories, e.category)]

        if options.subcategories:
            result = [e for e in result if _any_contains(options.subcategories, e.subcategory)]

        if options.tags:
            wanted = {t.lower() for t in options.tags}
            result = [e for e in result if wanted & {t.lower() for t in e.tags}]

        if not options.include_ai_optimized:
            result = [e for e in result if not e.is_ai]
        if not options.include_regular:
            result = [e for e in result if e.is_ai]

        return result

    @staticmethod
    def _is_exact_match(lowered_query: str, entity: CatalogEntity) -> bool:
        return (
            lowered_query in entity.display_name.lower()
            or lowered_query in entity.description.lower()
            or lowered_query in entity.identifier.lower()
            or any(lowered_query in tag.lower() for tag in entity.tags)
        )

    def _fuzzy_matches(
        self,
        lowered_query: str,
        candidates: list[CatalogEntity],
        exclude: list[CatalogEntity],
    ) -> list[CatalogEntity]:
        words = lowered_query.split()
        if not words:
            return []

        excluded = {e.identifier for e in exclude}
        matches = []
        for entity in candidates:
            if entity.identifier in excluded:
                continue
            if self._is_fuzzy_match(words, entity):
                matches.append(entity)
                if len(matches) >= FUZZY_LIMIT:
                    break
        return matches

    @staticmethod
    def _is_fuzzy_match(words: list[str], entity: CatalogEntity) -> bool:
        text = entity.search_text()
        name_words = entity.display_name.lower().split()
        for word in words:
            if word in text or is_fuzzy_match(word, text):
                return True
            if any(is_fuzzy_match(word, name_word) for name_word in name_words):
                return True
        return False

    @staticmethod
    def _suggestions(lowered_query: str) -> list[str]:
        return [
            s for s in SEARCH_SUGGESTIONS
            if lowered_query not in s.lower()
        ][:SUGGESTION_LIMIT]

    @staticmethod
    def _related(nodes: list[CatalogEntity], catalog: tuple[CatalogEntity, ...]) -> list[CatalogEntity]:
        if not nodes:
            return []

        categories = {e.category for e in nodes}
        subcategories = {e.subcategory for e in nodes if e.subcategory}
        included = {e.identifier for e in nodes}

        related = []
        for entity in catalog:
            if entity.identifier in included:
                continue
            if entity.category in categories or (entity.subcategory and entity.subcategory in subcategories):
                related.append(entity)
                if len(related) >= RELATED_LIMIT:
                    break
        return related
