"""Tests for catalog statistics."""
from node_atlas.catalog.statistics import StatisticsReporter
from node_atlas.catalog.store import CatalogStore


class TestStatistics:

    def test_small_catalog(self, chat_store):
        stats = StatisticsReporter(chat_store).statistics()

        assert stats.total_nodes == 3
        assert stats.ai_nodes == 0
        assert stats.regular_nodes == 3
        assert stats.trigger_nodes == 0
        assert stats.categories == {"Communication": 2, "Database": 1}
        assert [(c.name, c.count) for c in stats.top_integrations] == [
            ("Communication", 2),
            ("Database", 1),
        ]
        assert stats.coverage["communication"] == 2
        assert stats.coverage["database"] == 1
        assert stats.coverage["ai"] == 0

    def test_builtin_catalog(self, builtin_store):
        stats = StatisticsReporter(builtin_store).statistics()

        assert stats.total_nodes == len(builtin_store.all())
        assert stats.ai_nodes == 7
        assert stats.trigger_nodes == 4
        assert stats.ai_nodes + stats.regular_nodes == stats.total_nodes
        assert sum(stats.categories.values()) == stats.total_nodes

    def test_ties_keep_first_seen_order(self, builtin_store):
        stats = StatisticsReporter(builtin_store).statistics()

        top = [c.name for c in stats.top_integrations]
        assert top[:2] == ["Core Utilities", "Communication"]

    def test_coverage_groups(self, builtin_store):
        coverage = StatisticsReporter(builtin_store).statistics().coverage

        assert coverage == {
            "ai": 7,
            "communication": 10,
            "business": 10,
            "database": 5,
            "cloud": 6,
            "developer": 3,
        }

    def test_empty_catalog(self):
        stats = StatisticsReporter(CatalogStore([])).statistics()

        assert stats.total_nodes == 0
        assert stats.top_integrations == []
