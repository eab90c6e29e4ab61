"""n8n REST API client for workflow management.

Handles:
- Listing workflows (cursor pagination)
- Creating, updating and deleting workflows
- Activating and deactivating workflows
- Reading execution history
"""
from typing import Any, AsyncIterator, Optional

import httpx
import structlog

from node_atlas.config import get_settings

logger = structlog.get_logger()


class N8NClientError(Exception):
    """Exception for n8n API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class N8NClient:
    """Client for the n8n public REST API (``/api/v1``)."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        name: str = "default",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.n8n_base_url).rstrip("/")
        self.api_key = api_key or settings.n8n_api_key
        self.timeout = timeout or settings.n8n_timeout
        self.name = name
        self._transport = transport

        if not self.api_key:
            raise ValueError(f"n8n API key not configured for '{name}'")

        self.headers = {
            "X-N8N-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }

    @property
    def instance_url(self) -> str:
        """Base URL of the editor UI (API suffix removed)."""
        return self.base_url.replace("/api/v1", "")

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        """Make an HTTP request to the n8n API."""
        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    json=json,
                    params=params,
                    timeout=self.timeout,
                )
            except httpx.HTTPError as e:
                logger.error("n8n_api_error", environment=self.name, endpoint=endpoint, error=str(e))
                raise N8NClientError(f"HTTP error: {e}") from e

        # Log request (without sensitive data)
        logger.debug(
            "n8n_api_request",
            environment=self.name,
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        )

        if response.status_code >= 400:
            try:
                error_body = response.json() if response.content else {}
            except ValueError:
                error_body = response.text
            raise N8NClientError(
                f"n8n API error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body,
            )

        return response.json() if response.content else {}

    # ==========================================================================
    # Workflows
    # ==========================================================================

    async def list_workflows(
        self,
        limit: int = 100,
        cursor: Optional[str] = None,
        tags: Optional[list[str]] = None,
        active: Optional[bool] = None,
    ) -> dict:
        """List one page of workflows.

        Returns:
            ``{"data": [...], "nextCursor": str | None}``
        """
        params: dict[str, Any] = {"limit": limit}
        if cursor:
            params["cursor"] = cursor
        if tags:
            params["tags"] = ",".join(tags)
        if active is not None:
            params["active"] = "true" if active else "false"

        return await self._request(method="GET", endpoint="/workflows", params=params)

    async def iter_workflows(self, page_size: int = 100, **filters) -> AsyncIterator[dict]:
        """Yield every workflow, following ``nextCursor`` across pages."""
        cursor = None
        while True:
            page = await self.list_workflows(limit=page_size, cursor=cursor, **filters)
            for workflow in page.get("data", []):
                yield workflow
            cursor = page.get("nextCursor")
            if not cursor:
                break

    async def all_workflows(self, **filters) -> list[dict]:
        return [workflow async for workflow in self.iter_workflows(**filters)]

    async def get_workflow(self, workflow_id: str) -> dict:
        logger.debug("get_workflow", environment=self.name, workflow_id=workflow_id)
        return await self._request(method="GET", endpoint=f"/workflows/{workflow_id}")

    async def create_workflow(self, workflow_json: dict) -> dict:
        """Create a new workflow.

        Returns:
            The created workflow data including the assigned ID
        """
        logger.info("create_workflow", environment=self.name, name=workflow_json.get("name"))

        result = await self._request(method="POST", endpoint="/workflows", json=workflow_json)

        logger.info(
            "workflow_created",
            environment=self.name,
            workflow_id=result.get("id"),
            name=result.get("name"),
        )
        return result

    async def update_workflow(self, workflow_id: str, workflow_json: dict) -> dict:
        logger.info("update_workflow", environment=self.name, workflow_id=workflow_id)

        result = await self._request(
            method="PUT",
            endpoint=f"/workflows/{workflow_id}",
            json=workflow_json,
        )

        logger.info("workflow_updated", environment=self.name, workflow_id=workflow_id)
        return result

    async def delete_workflow(self, workflow_id: str) -> bool:
        logger.info("delete_workflow", environment=self.name, workflow_id=workflow_id)
        await self._request(method="DELETE", endpoint=f"/workflows/{workflow_id}")
        return True

    async def activate_workflow(self, workflow_id: str) -> dict:
        """Activate a workflow (enable triggers)."""
        logger.info("activate_workflow", environment=self.name, workflow_id=workflow_id)
        return await self._request(method="POST", endpoint=f"/workflows/{workflow_id}/activate")

    async def deactivate_workflow(self, workflow_id: str) -> dict:
        """Deactivate a workflow (disable triggers)."""
        logger.info("deactivate_workflow", environment=self.name, workflow_id=workflow_id)
        return await self._request(method="POST", endpoint=f"/workflows/{workflow_id}/deactivate")

    # ==========================================================================
    # Executions
    # ==========================================================================

    async def get_executions(
        self,
        workflow_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
    ) -> dict:
        """Get workflow executions, newest first.

        Args:
            workflow_id: Filter by workflow ID
            status: Filter by status (waiting, running, success, error)
            limit: Maximum number of executions
        """
        params: dict[str, Any] = {"limit": limit}
        if workflow_id:
            params["workflowId"] = workflow_id
        if status:
            params["status"] = status

        return await self._request(method="GET", endpoint="/executions", params=params)

    async def latest_execution(self, workflow_id: str) -> Optional[dict]:
        """Get the most recent execution of a workflow, if any."""
        result = await self.get_executions(workflow_id=workflow_id, limit=1)
        executions = result.get("data", [])
        return executions[0] if executions else None
