"""Tests for the NodeCatalog service."""
import pytest

from node_atlas.catalog.errors import NotFoundError
from node_atlas.catalog.service import NodeCatalog
from node_atlas.catalog.store import CatalogStore


def names(entities):
    return [e.display_name for e in entities]


class TestLookups:

    def test_get_node_by_identifier(self, builtin_catalog):
        node = builtin_catalog.get_node("n8n-nodes-base.slack")

        assert node.display_name == "Slack"

    def test_get_node_by_display_name(self, builtin_catalog):
        node = builtin_catalog.get_node("google sheets")

        assert node.identifier == "n8n-nodes-base.googleSheets"

    def test_get_node_missing(self, builtin_catalog):
        with pytest.raises(NotFoundError) as exc_info:
            builtin_catalog.get_node("n8n-nodes-base.fax")

        assert exc_info.value.identifier == "n8n-nodes-base.fax"

    def test_categories_sorted(self, chat_catalog):
        assert chat_catalog.categories() == ["Communication", "Database"]

    def test_all_nodes(self, chat_catalog):
        assert names(chat_catalog.all_nodes()) == ["Slack", "Discord", "PostgreSQL"]


class TestDiscovery:

    def test_discover_by_category(self, builtin_catalog):
        assert names(builtin_catalog.discover_by_category("developer")) == ["GitHub", "GitLab", "Jenkins"]

    def test_discover_by_intent(self, builtin_catalog):
        assert names(builtin_catalog.discover_by_intent("send email")) == ["Gmail", "Send Email"]

    def test_search_nodes_uses_default_max_results(self, builtin_store):
        catalog = NodeCatalog(builtin_store, default_max_results=2)

        assert catalog.search_nodes("").total_count == 2

    def test_suggest_chains_respects_policy(self, chat_store):
        catalog = NodeCatalog(chat_store, miss_policy="drop")

        assert catalog.suggest_chains("alert") == []


class TestEcosystemViews:

    def test_ai_ecosystem(self, builtin_catalog):
        ecosystem = builtin_catalog.ai_ecosystem()

        assert names(ecosystem["chat_models"]) == ["OpenAI", "Anthropic Claude"]
        assert names(ecosystem["vector_stores"]) == ["Pinecone Vector Store"]
        assert names(ecosystem["embeddings"]) == ["Embeddings OpenAI"]
        assert names(ecosystem["agents"]) == ["AI Agent"]
        assert names(ecosystem["retrievers"]) == ["Pinecone Vector Store"]
        assert ecosystem["memory"] == []

    def test_core_workflow(self, builtin_catalog):
        core = builtin_catalog.core_workflow()

        assert len(core["triggers"]) == 4
        assert len(core["utilities"]) == 10
        assert names(core["flow"]) == ["IF", "Switch", "Merge"]
        assert names(core["data_transformation"]) == ["Set", "Function", "Code"]
        assert names(core["loops"]) == ["Split In Batches"]
        assert names(core["error_handling"]) == ["Stop and Error"]


class TestValidate:

    def test_builtin_catalog_is_clean(self, builtin_catalog):
        assert builtin_catalog.validate() == []

    def test_missing_chain_nodes_reported(self, chat_catalog):
        issues = chat_catalog.validate()

        assert "chain suggestions reference missing node 'IF'" in issues
        assert "chain suggestions reference missing node 'Slack'" not in issues

    def test_incomplete_entities_reported(self, entity_factory):
        catalog = NodeCatalog(CatalogStore([entity_factory("bare", "Bare")]))

        issues = catalog.validate()

        assert "n8n-nodes-base.bare: empty description" in issues
        assert "n8n-nodes-base.bare: missing category" in issues
