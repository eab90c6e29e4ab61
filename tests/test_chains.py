"""Tests for the chain composer."""
import pytest

from node_atlas.catalog.chains import ChainComposer, ChainMissPolicy, ChainTemplate
from node_atlas.catalog.errors import ChainEntityNotFoundError
from node_atlas.models.catalog import Complexity, WorkflowIntent, WorkflowPreferences


def names(entities):
    return [e.display_name for e in entities]


class TestBuiltinChains:

    def test_ai_chain(self, builtin_store):
        suggestions = ChainComposer(builtin_store).suggest("chat with ai")

        assert len(suggestions) == 1
        suggestion = suggestions[0]
        assert names(suggestion.chain) == ["OpenAI", "Set"]
        assert [names(alt) for alt in suggestion.alternatives] == [["Anthropic Claude"]]
        assert suggestion.confidence == 0.9
        assert suggestion.complexity == Complexity.SIMPLE
        assert suggestion.missing_entities == []

    def test_multiple_matches_sorted_by_confidence(self, builtin_store):
        suggestions = ChainComposer(builtin_store).suggest("send data alert")

        assert [names(s.chain) for s in suggestions] == [
            ["IF", "Slack"],
            ["PostgreSQL", "Function"],
        ]
        assert [s.confidence for s in suggestions] == [0.85, 0.8]

    def test_keywords_are_case_insensitive(self, builtin_store):
        suggestions = ChainComposer(builtin_store).suggest("DATABASE sync")

        assert names(suggestions[0].chain) == ["PostgreSQL", "Function"]

    def test_no_keyword_no_suggestions(self, builtin_store):
        assert ChainComposer(builtin_store).suggest("upload a file") == []

    def test_keywords_match_at_word_start(self, builtin_store):
        suggestions = ChainComposer(builtin_store).suggest("send an email alert")

        assert [names(s.chain) for s in suggestions] == [["IF", "Slack"]]

    @pytest.mark.parametrize("text", ["maintain the detail page", "daily backup"])
    def test_keyword_inside_a_word_does_not_match(self, builtin_store, text):
        assert ChainComposer(builtin_store).suggest(text) == []

    @pytest.mark.parametrize("text", ["notifications for new leads", "ai-powered summary"])
    def test_keyword_prefix_of_a_word_matches(self, builtin_store, text):
        assert len(ChainComposer(builtin_store).suggest(text)) == 1

    def test_accepts_intent_model(self, builtin_store):
        intent = WorkflowIntent(text="generate a summary", constraints=["cheap"])

        suggestions = ChainComposer(builtin_store).suggest(intent)

        assert names(suggestions[0].chain) == ["OpenAI", "Set"]


class TestFastPreference:

    @pytest.fixture
    def composer(self, builtin_store):
        templates = [
            ChainTemplate(
                name="thorough",
                keywords=("report",),
                chain=("PostgreSQL", "Code", "Gmail"),
                reasoning="Query, shape and mail",
                confidence=0.9,
                estimated_time="5-10 minutes",
                complexity=Complexity.COMPLEX,
            ),
            ChainTemplate(
                name="quick",
                keywords=("report",),
                chain=("Slack",),
                reasoning="Post straight to chat",
                confidence=0.5,
                estimated_time="< 30 seconds",
                complexity=Complexity.SIMPLE,
            ),
        ]
        return ChainComposer(builtin_store, templates=templates)

    def test_default_order_is_confidence(self, composer):
        suggestions = composer.suggest("daily report")

        assert [s.confidence for s in suggestions] == [0.9, 0.5]

    def test_fast_prefers_simpler_chains(self, composer):
        intent = WorkflowIntent(text="daily report", preferences=WorkflowPreferences(speed="fast"))

        suggestions = composer.suggest(intent)

        assert [s.complexity for s in suggestions] == [Complexity.SIMPLE, Complexity.COMPLEX]


class TestMissPolicies:
    """IF is missing from the Slack / Discord / PostgreSQL catalog."""

    def test_flag_keeps_partial_chain(self, chat_store):
        suggestions = ChainComposer(chat_store, miss_policy=ChainMissPolicy.FLAG).suggest("alert me")

        assert len(suggestions) == 1
        assert names(suggestions[0].chain) == ["Slack"]
        assert suggestions[0].missing_entities == ["IF"]
        assert [names(alt) for alt in suggestions[0].alternatives] == [["Discord"]]

    def test_drop_removes_suggestion(self, chat_store):
        suggestions = ChainComposer(chat_store, miss_policy="drop").suggest("alert me")

        assert suggestions == []

    def test_raise(self, chat_store):
        composer = ChainComposer(chat_store, miss_policy=ChainMissPolicy.RAISE)

        with pytest.raises(ChainEntityNotFoundError) as exc_info:
            composer.suggest("alert me")

        assert exc_info.value.display_name == "IF"
        assert exc_info.value.suggestion == "notification"

    def test_nothing_resolved_yields_no_suggestion(self, chat_store):
        assert ChainComposer(chat_store).suggest("chat with ai") == []

    def test_unknown_policy_rejected(self, chat_store):
        with pytest.raises(ValueError):
            ChainComposer(chat_store, miss_policy="ignore")


def test_referenced_names(builtin_store):
    referenced = ChainComposer(builtin_store).referenced_names()

    assert referenced == {
        "OpenAI", "Set", "Anthropic Claude",
        "PostgreSQL", "Function", "MySQL",
        "IF", "Slack", "Discord",
    }
