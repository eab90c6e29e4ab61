"""Deploy a workflow from one environment to another.

The copy gets environment-specific adjustments on the way:
- webhook paths are prefixed with the environment name outside production
- known API hosts in HTTP Request nodes are swapped for the target's host
- the workflow is tagged ``deployed-to-<environment>``
"""
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import structlog

from node_atlas.models.workflows import DeploymentResult, DeploymentSummary, WorkflowRef
from node_atlas.n8n.client import N8NClient, N8NClientError
from node_atlas.n8n.environments import EnvironmentRegistry
from node_atlas.workflows.errors import WorkflowConflictError, WorkflowNotFoundError
from node_atlas.workflows.payload import prepare_payload

logger = structlog.get_logger()

PRODUCTION = "production"

WEBHOOK_NODE = "n8n-nodes-base.webhook"
HTTP_REQUEST_NODE = "n8n-nodes-base.httpRequest"

# target environment -> {source host: target host}
DEFAULT_HOST_MAPPINGS: dict[str, dict[str, str]] = {
    "development": {
        "api.example.com": "dev-api.example.com",
        "staging-api.example.com": "dev-api.example.com",
    },
    "staging": {
        "api.example.com": "staging-api.example.com",
        "dev-api.example.com": "staging-api.example.com",
    },
    "production": {
        "dev-api.example.com": "api.example.com",
        "staging-api.example.com": "api.example.com",
    },
}


def webhook_path_for(path: str, environment: str) -> str:
    if environment == PRODUCTION or path.startswith(f"{environment}-"):
        return path
    return f"{environment}-{path}"


def api_url_for(url: str, environment: str, mappings: dict[str, dict[str, str]]) -> str:
    """Swap the host of ``url`` according to the target environment's mapping."""
    host_map = mappings.get(environment)
    if not host_map:
        return url

    parts = urlsplit(url)
    host = parts.hostname
    if not host or host not in host_map:
        return url

    netloc = host_map[host]
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    if "@" in parts.netloc:
        netloc = f"{parts.netloc.rsplit('@', 1)[0]}@{netloc}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def summarize(workflow: dict) -> DeploymentSummary:
    nodes = workflow.get("nodes") or []
    return DeploymentSummary(
        node_count=len(nodes),
        connection_count=len(workflow.get("connections") or {}),
        has_webhooks=any("webhook" in node.get("type", "").lower() for node in nodes),
        has_schedule_triggers=any("scheduletrigger" in node.get("type", "").lower() for node in nodes),
        requires_credentials=any(bool(node.get("credentials")) for node in nodes),
    )


class WorkflowDeployer:
    """Copies workflows across the environments of a registry."""

    def __init__(
        self,
        registry: EnvironmentRegistry,
        host_mappings: Optional[dict[str, dict[str, str]]] = None,
    ):
        self.registry = registry
        self.host_mappings = DEFAULT_HOST_MAPPINGS if host_mappings is None else host_mappings

    def prepare(self, workflow: dict, target: str) -> dict:
        """Build the payload written to the target environment."""
        payload = prepare_payload(workflow, f"deployed-to-{target}")

        nodes = []
        for node in payload.get("nodes") or []:
            parameters = node.get("parameters") or {}
            node_type = node.get("type")
            if node_type == WEBHOOK_NODE and parameters.get("path"):
                node = {**node, "parameters": {**parameters, "path": webhook_path_for(parameters["path"], target)}}
            elif node_type == HTTP_REQUEST_NODE and isinstance(parameters.get("url"), str):
                node = {
                    **node,
                    "parameters": {**parameters, "url": api_url_for(parameters["url"], target, self.host_mappings)},
                }
            nodes.append(node)
        payload["nodes"] = nodes
        return payload

    async def deploy(
        self,
        workflow_id: str,
        source: str,
        target: str,
        overwrite: bool = False,
    ) -> DeploymentResult:
        """Deploy one workflow.

        Raises:
            UnknownEnvironmentError: source or target is not configured
            WorkflowNotFoundError: the workflow does not exist in source
            WorkflowConflictError: a same-named workflow exists in target
                and ``overwrite`` is False
            N8NClientError: any other API failure
        """
        source_client = self.registry.client_for(source)
        target_client = self.registry.client_for(target)

        logger.info("deploy_started", workflow_id=workflow_id, source=source, target=target, overwrite=overwrite)

        try:
            workflow = await source_client.get_workflow(workflow_id)
        except N8NClientError as e:
            if e.status_code == 404:
                raise WorkflowNotFoundError(workflow_id, source) from e
            raise

        name = workflow.get("name", "")
        existing = await self._find_by_name(target_client, name)
        if existing is not None and not overwrite:
            raise WorkflowConflictError(name, target)

        payload = self.prepare(workflow, target)
        if existing is not None:
            deployed = await target_client.update_workflow(existing["id"], payload)
            action = "updated"
        else:
            deployed = await target_client.create_workflow(payload)
            action = "created"

        logger.info(
            "workflow_deployed",
            name=name,
            source=source,
            target=target,
            action=action,
            deployed_id=deployed.get("id"),
        )

        return DeploymentResult(
            source=WorkflowRef(id=workflow.get("id", workflow_id), name=name, environment=source),
            deployed=WorkflowRef(id=deployed.get("id"), name=deployed.get("name", name), environment=target),
            action=action,
            summary=summarize(workflow),
        )

    @staticmethod
    async def _find_by_name(client: N8NClient, name: str) -> Optional[dict]:
        async for candidate in client.iter_workflows():
            if candidate.get("name") == name:
                return candidate
        return None
