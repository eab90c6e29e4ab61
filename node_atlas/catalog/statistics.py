"""Catalog statistics."""
from collections import Counter

from node_atlas.catalog.index import GROUPS
from node_atlas.catalog.store import CatalogStore
from node_atlas.models.catalog import CatalogStatistics, CategoryCount

TOP_CATEGORIES = 10

COVERAGE_GROUPS = ("ai", "communication", "business", "database", "cloud", "developer")


class StatisticsReporter:
    """Aggregates counts over the current catalog snapshot."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def statistics(self) -> CatalogStatistics:
        entities = self.store.all()

        categories: Counter[str] = Counter()
        coverage = {group: 0 for group in COVERAGE_GROUPS}
        ai_nodes = 0
        trigger_nodes = 0

        for entity in entities:
            categories[entity.category] += 1
            if entity.is_ai:
                ai_nodes += 1
            if entity.is_trigger:
                trigger_nodes += 1
            for group in COVERAGE_GROUPS:
                if GROUPS[group](entity):
                    coverage[group] += 1

        # Counter.most_common keeps first-seen order for equal counts
        top = [
            CategoryCount(name=name, count=count)
            for name, count in categories.most_common(TOP_CATEGORIES)
        ]

        return CatalogStatistics(
            total_nodes=len(entities),
            ai_nodes=ai_nodes,
            regular_nodes=len(entities) - ai_nodes,
            trigger_nodes=trigger_nodes,
            categories=dict(categories),
            top_integrations=top,
            coverage=coverage,
        )
