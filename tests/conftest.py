"""Shared fixtures: small catalogs, a built-in catalog and fake n8n clients."""
from typing import Optional

import pytest

from node_atlas.catalog.builtin import builtin_entities
from node_atlas.catalog.service import NodeCatalog
from node_atlas.catalog.store import CatalogStore
from node_atlas.models.catalog import CatalogEntity
from node_atlas.n8n.client import N8NClientError


def make_entity(
    name: str,
    display_name: Optional[str] = None,
    description: str = "",
    category: str = "",
    subcategory: Optional[str] = None,
    tags: Optional[list[str]] = None,
    is_trigger: bool = False,
    is_ai: bool = False,
) -> CatalogEntity:
    return CatalogEntity(
        identifier=f"n8n-nodes-base.{name}",
        display_name=display_name or name.capitalize(),
        description=description,
        category=category,
        subcategory=subcategory,
        tags=tags or [],
        is_trigger=is_trigger,
        is_ai=is_ai,
    )


@pytest.fixture
def entity_factory():
    return make_entity


@pytest.fixture
def chat_entities() -> list[CatalogEntity]:
    """Slack, Discord and PostgreSQL - the minimal mixed-category catalog."""
    return [
        make_entity("slack", "Slack", "Send messages to Slack channels", "Communication", "Chat"),
        make_entity("discord", "Discord", "Send messages to Discord servers", "Communication", "Chat"),
        make_entity("postgres", "PostgreSQL", "Query a PostgreSQL database", "Database", "SQL"),
    ]


@pytest.fixture
def chat_store(chat_entities) -> CatalogStore:
    return CatalogStore(chat_entities, revision="r1")


@pytest.fixture
def chat_catalog(chat_store) -> NodeCatalog:
    return NodeCatalog(chat_store)


@pytest.fixture
def builtin_store() -> CatalogStore:
    return CatalogStore(builtin_entities(), revision="builtin")


@pytest.fixture
def builtin_catalog(builtin_store) -> NodeCatalog:
    return NodeCatalog(builtin_store)


# =============================================================================
# n8n
# =============================================================================

class FakeN8NClient:
    """In-memory stand-in for N8NClient."""

    def __init__(self, name: str, workflows: Optional[list[dict]] = None, executions: Optional[dict] = None):
        self.name = name
        self.instance_url = f"https://{name}.n8n.test"
        self.workflows = {w["id"]: dict(w) for w in workflows or []}
        self.executions = executions or {}
        self.fail_on: set[str] = set()
        self.created: list[dict] = []
        self.updated: list[tuple[str, dict]] = []
        self.deleted: list[str] = []
        self.activated: list[str] = []
        self.deactivated: list[str] = []
        self._next_id = 100

    def _check(self, key: Optional[str]) -> None:
        if key in self.fail_on:
            raise N8NClientError("n8n API error: 400", status_code=400, response_body={"message": "rejected"})

    async def iter_workflows(self, page_size: int = 100, **filters):
        for workflow in list(self.workflows.values()):
            yield workflow

    async def all_workflows(self, **filters) -> list[dict]:
        return list(self.workflows.values())

    async def get_workflow(self, workflow_id: str) -> dict:
        if workflow_id not in self.workflows:
            raise N8NClientError("n8n API error: 404", status_code=404, response_body={"message": "Not Found"})
        return self.workflows[workflow_id]

    async def create_workflow(self, workflow_json: dict) -> dict:
        self._check(workflow_json.get("name"))
        self._next_id += 1
        created = {**workflow_json, "id": f"{self.name}-{self._next_id}"}
        self.workflows[created["id"]] = created
        self.created.append(workflow_json)
        return created

    async def update_workflow(self, workflow_id: str, workflow_json: dict) -> dict:
        self._check(workflow_json.get("name"))
        self.updated.append((workflow_id, workflow_json))
        self.workflows[workflow_id] = {**workflow_json, "id": workflow_id}
        return self.workflows[workflow_id]

    async def delete_workflow(self, workflow_id: str) -> bool:
        self._check(workflow_id)
        self.deleted.append(workflow_id)
        self.workflows.pop(workflow_id, None)
        return True

    async def activate_workflow(self, workflow_id: str) -> dict:
        self._check(workflow_id)
        self.activated.append(workflow_id)
        return {"id": workflow_id, "active": True}

    async def deactivate_workflow(self, workflow_id: str) -> dict:
        self._check(workflow_id)
        self.deactivated.append(workflow_id)
        return {"id": workflow_id, "active": False}

    async def latest_execution(self, workflow_id: str) -> Optional[dict]:
        return self.executions.get(workflow_id)


@pytest.fixture
def fake_client():
    """Factory for FakeN8NClient instances."""
    return FakeN8NClient
