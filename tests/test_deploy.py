"""Tests for cross-environment deployment."""
import pytest

from node_atlas.n8n.client import N8NClientError
from node_atlas.n8n.environments import EnvironmentRegistry, UnknownEnvironmentError
from node_atlas.workflows.deploy import (
    DEFAULT_HOST_MAPPINGS,
    WorkflowDeployer,
    api_url_for,
    summarize,
    webhook_path_for,
)
from node_atlas.workflows.errors import WorkflowConflictError, WorkflowNotFoundError

ORDER_FLOW = {
    "id": "wf-1",
    "name": "Order Intake",
    "active": True,
    "versionId": "abc",
    "nodes": [
        {
            "name": "Webhook",
            "type": "n8n-nodes-base.webhook",
            "parameters": {"path": "orders", "httpMethod": "POST"},
        },
        {
            "name": "Call API",
            "type": "n8n-nodes-base.httpRequest",
            "parameters": {"url": "https://dev-api.example.com/v1/orders"},
            "credentials": {"httpHeaderAuth": {"id": "3", "name": "API token"}},
        },
        {
            "name": "Nightly",
            "type": "n8n-nodes-base.scheduleTrigger",
            "parameters": {},
        },
    ],
    "connections": {"Webhook": {"main": [[{"node": "Call API"}]]}},
    "tags": [{"id": "1", "name": "orders"}],
}


@pytest.fixture
def environments(fake_client):
    return {
        "development": fake_client("development", [ORDER_FLOW]),
        "staging": fake_client("staging"),
        "production": fake_client("production"),
    }


@pytest.fixture
def deployer(environments):
    return WorkflowDeployer(EnvironmentRegistry(environments))


class TestAdjustments:

    @pytest.mark.parametrize("path,environment,expected", [
        ("orders", "staging", "staging-orders"),
        ("staging-orders", "staging", "staging-orders"),
        ("orders", "production", "orders"),
        ("orders", "development", "development-orders"),
    ])
    def test_webhook_path(self, path, environment, expected):
        assert webhook_path_for(path, environment) == expected

    @pytest.mark.parametrize("url,environment,expected", [
        ("https://dev-api.example.com/v1", "staging", "https://staging-api.example.com/v1"),
        ("https://staging-api.example.com/v1?x=1", "production", "https://api.example.com/v1?x=1"),
        ("https://api.example.com:8443/v1", "development", "https://dev-api.example.com:8443/v1"),
        ("https://user:pw@api.example.com/v1", "staging", "https://user:pw@staging-api.example.com/v1"),
        ("https://other.example.org/v1", "production", "https://other.example.org/v1"),
        ("https://dev-api.example.com/v1", "qa", "https://dev-api.example.com/v1"),
    ])
    def test_api_url(self, url, environment, expected):
        assert api_url_for(url, environment, DEFAULT_HOST_MAPPINGS) == expected

    def test_host_is_matched_exactly(self):
        # staging-api must not be rewritten through its "api.example.com" suffix
        url = "https://staging-api.example.com/v1"

        assert api_url_for(url, "staging", DEFAULT_HOST_MAPPINGS) == url

    def test_summary(self):
        summary = summarize(ORDER_FLOW)

        assert summary.node_count == 3
        assert summary.connection_count == 1
        assert summary.has_webhooks is True
        assert summary.has_schedule_triggers is True
        assert summary.requires_credentials is True

    def test_prepare(self, deployer):
        payload = deployer.prepare(ORDER_FLOW, "staging")

        nodes = {node["name"]: node for node in payload["nodes"]}
        assert nodes["Webhook"]["parameters"] == {"path": "staging-orders", "httpMethod": "POST"}
        assert nodes["Call API"]["parameters"]["url"] == "https://staging-api.example.com/v1/orders"
        assert {"name": "deployed-to-staging"} in payload["tags"]
        assert "id" not in payload
        assert "active" not in payload
        assert ORDER_FLOW["nodes"][0]["parameters"]["path"] == "orders"

    def test_custom_host_mappings(self, environments):
        deployer = WorkflowDeployer(
            EnvironmentRegistry(environments),
            host_mappings={"staging": {"dev-api.example.com": "api.staging.internal"}},
        )

        payload = deployer.prepare(ORDER_FLOW, "staging")

        assert payload["nodes"][1]["parameters"]["url"] == "https://api.staging.internal/v1/orders"


@pytest.mark.asyncio
class TestDeploy:

    async def test_creates_in_target(self, deployer, environments):
        result = await deployer.deploy("wf-1", "development", "staging")

        assert result.action == "created"
        assert result.source.id == "wf-1"
        assert result.deployed.environment == "staging"
        assert result.deployed.id == "staging-101"
        assert result.summary.node_count == 3
        assert environments["staging"].created[0]["name"] == "Order Intake"

    async def test_existing_workflow_conflicts(self, deployer, environments):
        environments["staging"].workflows["s-9"] = {"id": "s-9", "name": "Order Intake"}

        with pytest.raises(WorkflowConflictError) as exc_info:
            await deployer.deploy("wf-1", "development", "staging")

        assert exc_info.value.environment == "staging"
        assert environments["staging"].updated == []

    async def test_overwrite_updates_existing(self, deployer, environments):
        environments["staging"].workflows["s-9"] = {"id": "s-9", "name": "Order Intake"}

        result = await deployer.deploy("wf-1", "development", "staging", overwrite=True)

        assert result.action == "updated"
        assert result.deployed.id == "s-9"
        assert environments["staging"].updated[0][0] == "s-9"

    async def test_missing_workflow(self, deployer):
        with pytest.raises(WorkflowNotFoundError) as exc_info:
            await deployer.deploy("nope", "development", "staging")

        assert exc_info.value.environment == "development"

    async def test_unknown_environment(self, deployer):
        with pytest.raises(UnknownEnvironmentError):
            await deployer.deploy("wf-1", "development", "qa")

    async def test_target_api_error_propagates(self, deployer, environments):
        environments["production"].fail_on.add("Order Intake")

        with pytest.raises(N8NClientError) as exc_info:
            await deployer.deploy("wf-1", "development", "production")

        assert exc_info.value.status_code == 400
