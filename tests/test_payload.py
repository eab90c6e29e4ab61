"""Tests for workflow JSON helpers."""
from datetime import datetime, timezone

from node_atlas.workflows.payload import (
    credential_names,
    last_updated,
    parse_timestamp,
    prepare_payload,
    tag_names,
)


class TestTimestamps:

    def test_zulu_suffix(self):
        assert parse_timestamp("2024-03-01T10:00:00.000Z") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)

    def test_missing_or_invalid(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("yesterday") is None

    def test_last_updated_falls_back_to_created(self):
        workflow = {"createdAt": "2024-01-01T00:00:00Z"}

        assert last_updated(workflow) == datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestTagsAndCredentials:

    def test_tag_objects_and_strings(self):
        workflow = {"tags": [{"id": "1", "name": "production"}, "legacy", {"id": "2"}]}

        assert tag_names(workflow) == ["production", "legacy"]

    def test_credential_names_are_distinct(self):
        workflow = {"nodes": [
            {"credentials": {"slackApi": {"id": "1", "name": "Team Slack"}}},
            {"credentials": {"slackApi": {"id": "1", "name": "Team Slack"}, "httpBasicAuth": {"id": "2"}}},
            {"parameters": {}},
        ]}

        assert credential_names(workflow) == ["Team Slack", "httpBasicAuth"]


class TestPreparePayload:

    def test_strips_instance_fields(self):
        workflow = {
            "id": "7",
            "name": "Flow",
            "active": True,
            "createdAt": "2024-01-01T00:00:00Z",
            "updatedAt": "2024-01-02T00:00:00Z",
            "versionId": "v1",
            "nodes": [],
            "connections": {},
        }

        payload = prepare_payload(workflow, "synced-to-staging")

        assert payload == {
            "name": "Flow",
            "nodes": [],
            "connections": {},
            "tags": [{"name": "synced-to-staging"}],
        }

    def test_marker_tag_added_once(self):
        workflow = {"name": "Flow", "tags": [{"id": "1", "name": "synced-to-staging"}]}

        payload = prepare_payload(workflow, "synced-to-staging")

        assert payload["tags"] == [{"name": "synced-to-staging"}]

    def test_input_not_modified(self):
        workflow = {"id": "7", "name": "Flow", "nodes": [{"parameters": {"path": "hook"}}]}

        payload = prepare_payload(workflow, "marker")
        payload["nodes"][0]["parameters"]["path"] = "changed"

        assert workflow["id"] == "7"
        assert workflow["nodes"][0]["parameters"]["path"] == "hook"
