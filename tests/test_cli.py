"""Tests for the node-atlas command line."""
import json

import pytest

from node_atlas import cli
from node_atlas.catalog.errors import RefreshUnavailableError
from node_atlas.models.catalog import RefreshOutcome, SkippedRecord


class StubRefresher:

    def __init__(self, outcome=None, error=None):
        self.outcome = outcome
        self.error = error
        self.restored = False

    def restore(self):
        self.restored = True
        return False

    async def refresh(self, force=False):
        if self.error:
            raise self.error
        return self.outcome


class TestCommands:

    def test_search_json(self, capsys):
        assert cli.main(["--json", "search", "slack", "--max-results", "3"]) == 0

        body = json.loads(capsys.readouterr().out)
        assert body["nodes"][0]["display_name"] == "Slack"
        assert body["total_count"] <= 3

    def test_search_text(self, capsys):
        assert cli.main(["search", "postgres", "--exact"]) == 0

        out = capsys.readouterr().out
        assert "EXACT MATCHES" in out
        assert "PostgreSQL" in out

    def test_search_ai_only(self, capsys):
        cli.main(["--json", "search", "", "--ai-only"])

        body = json.loads(capsys.readouterr().out)
        assert body["total_count"] == 7

    def test_category(self, capsys):
        cli.main(["category", "developer"])

        out = capsys.readouterr().out
        assert "CATEGORY: developer (3)" in out
        assert "Jenkins" in out

    def test_intent_json(self, capsys):
        cli.main(["--json", "intent", "send email"])

        assert [n["display_name"] for n in json.loads(capsys.readouterr().out)] == ["Gmail", "Send Email"]

    def test_chains(self, capsys):
        cli.main(["chains", "notify with an alert", "--fast"])

        out = capsys.readouterr().out
        assert "IF" in out
        assert "Alternative: Discord" in out

    def test_stats_json(self, capsys):
        cli.main(["--json", "stats"])

        assert json.loads(capsys.readouterr().out)["ai_nodes"] == 7

    def test_validate_clean_catalog(self, capsys):
        assert cli.main(["validate"]) == 0
        assert "No issues found" in capsys.readouterr().out

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            cli.main([])


class TestRefreshCommand:

    def test_refresh(self, monkeypatch, capsys):
        outcome = RefreshOutcome(
            status="refreshed",
            revision="abc123",
            entity_count=2,
            skipped=[SkippedRecord(record="Broken", reason="empty content")],
        )
        stub = StubRefresher(outcome=outcome)
        monkeypatch.setattr(cli, "build_refresher", lambda store, settings: stub)

        assert cli.main(["refresh", "--force"]) == 0

        out = capsys.readouterr().out
        assert stub.restored is True
        assert "REFRESH: REFRESHED" in out
        assert "Broken: empty content" in out

    def test_refresh_unavailable(self, monkeypatch, capsys):
        stub = StubRefresher(error=RefreshUnavailableError("GitHub is down"))
        monkeypatch.setattr(cli, "build_refresher", lambda store, settings: stub)

        assert cli.main(["refresh"]) == 2
        assert "GitHub is down" in capsys.readouterr().err
