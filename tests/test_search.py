"""Tests for the text search engine."""
import pytest

from node_atlas.catalog.errors import CatalogNotLoadedError
from node_atlas.catalog.search import FUZZY_LIMIT, SearchEngine
from node_atlas.catalog.store import CatalogStore
from node_atlas.models.catalog import SearchOptions


def names(entities):
    return [e.display_name for e in entities]


class TestSearchScenario:
    """Slack / Discord / PostgreSQL catalog."""

    @pytest.fixture
    def engine(self, chat_store):
        return SearchEngine(chat_store)

    def test_typo_finds_slack_by_fuzzy_match(self, engine):
        result = engine.search("slak", SearchOptions(fuzzy_search=True))

        assert names(result.nodes) == ["Slack"]
        assert result.exact_match_count == 0
        assert names(result.fuzzy_matches) == ["Slack"]

    def test_related_nodes_share_category(self, engine):
        result = engine.search("slak", SearchOptions(fuzzy_search=True))

        related = names(result.related_nodes)
        assert "Discord" in related
        assert "PostgreSQL" not in related
        assert "Slack" not in related

    def test_fuzzy_disabled(self, engine):
        result = engine.search("slak", SearchOptions(fuzzy_search=False))

        assert result.nodes == []
        assert result.total_count == 0
        assert result.related_nodes == []

    def test_exact_display_name_ranks_first(self, engine):
        result = engine.search("Slack")

        assert result.nodes[0].display_name == "Slack"
        assert "Slack" in names(result.exact_matches)

    def test_max_results_zero(self, engine):
        result = engine.search("slack", SearchOptions(max_results=0))

        assert result.nodes == []
        assert result.total_count == 0

    def test_blank_query_matches_everything(self, engine):
        result = engine.search("   ")

        assert names(result.nodes) == ["Slack", "Discord", "PostgreSQL"]
        assert result.exact_match_count == 3

    def test_categories_deduplicated_in_result_order(self, engine):
        result = engine.search("")

        assert result.categories == ["Communication", "Database"]

    def test_search_is_idempotent(self, engine):
        first = engine.search("send", SearchOptions(max_results=2))
        second = engine.search("send", SearchOptions(max_results=2))

        assert first == second

    def test_unloaded_store_raises(self):
        with pytest.raises(CatalogNotLoadedError):
            SearchEngine(CatalogStore()).search("slack")


class TestSearchFilters:

    @pytest.fixture
    def engine(self, builtin_store):
        return SearchEngine(builtin_store)

    def test_category_filter_is_substring(self, engine):
        result = engine.search("", SearchOptions(categories=["database"]))

        assert {e.category for e in result.nodes} == {"Database"}
        assert result.total_count == 5

    def test_subcategory_filter_is_substring(self, engine):
        result = engine.search("", SearchOptions(subcategories=["sql"]))

        assert names(result.nodes) == ["PostgreSQL", "MySQL", "MongoDB"]

    def test_tag_filter(self, engine):
        result = engine.search("", SearchOptions(tags=["SQL"]))

        assert names(result.nodes) == ["PostgreSQL", "MySQL"]

    def test_exclude_ai(self, engine):
        result = engine.search("openai", SearchOptions(include_ai_optimized=False))

        assert all(not e.is_ai for e in result.nodes)

    def test_only_ai(self, engine):
        result = engine.search("", SearchOptions(include_regular=False))

        assert result.total_count == 7
        assert result.ai_optimized_variants == result.nodes

    def test_tags_count_as_exact_match(self, engine):
        result = engine.search("smtp")

        assert names(result.exact_matches) == ["Send Email"]

    def test_ai_variants(self, engine):
        result = engine.search("openai")

        assert "OpenAI" in names(result.ai_optimized_variants)
        assert all(e.is_ai for e in result.ai_optimized_variants)


class TestSearchLimits:

    @pytest.fixture
    def widgets(self, entity_factory):
        return CatalogStore([
            entity_factory(f"widget{i}", "Widget", "Does widget things", "Widgets")
            for i in range(15)
        ])

    def test_fuzzy_matches_are_capped(self, widgets):
        result = SearchEngine(widgets).search("widgit")

        assert result.exact_match_count == 0
        assert result.total_count == FUZZY_LIMIT

    def test_max_results_caps_exact_matches(self, widgets):
        result = SearchEngine(widgets).search("widget", SearchOptions(max_results=5))

        assert result.total_count == 5
        assert result.exact_match_count == 5

    def test_related_nodes_are_capped(self, widgets):
        result = SearchEngine(widgets).search("widget", SearchOptions(max_results=1))

        assert len(result.related_nodes) == 10

    def test_default_max_results(self, widgets):
        result = SearchEngine(widgets, default_max_results=3).search("widget")

        assert result.total_count == 3


class TestSearchSuggestions:

    def test_suggestions_exclude_phrases_containing_query(self, chat_store):
        result = SearchEngine(chat_store).search("database")

        assert result.suggestions == [
            "AI language models",
            "communication tools",
            "cloud storage",
            "workflow automation",
            "data transformation",
        ]

    def test_at_most_five_suggestions(self, chat_store):
        assert len(SearchEngine(chat_store).search("zzz").suggestions) == 5
