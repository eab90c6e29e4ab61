"""Workflow management endpoints across n8n environments."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from node_atlas.models.workflows import (
    DeploymentResult,
    SyncDirection,
    SyncReport,
    UnusedAnalysis,
    UnusedAnalysisOptions,
)
from node_atlas.n8n.client import N8NClientError
from node_atlas.n8n.environments import EnvironmentRegistry, UnknownEnvironmentError
from node_atlas.workflows.deploy import WorkflowDeployer
from node_atlas.workflows.errors import WorkflowConflictError, WorkflowNotFoundError
from node_atlas.workflows.sync import WorkflowSynchronizer
from node_atlas.workflows.unused import UnusedWorkflowAnalyzer

logger = structlog.get_logger()

router = APIRouter()


def get_environments(request: Request) -> EnvironmentRegistry:
    return request.app.state.environments


def _client_error(e: N8NClientError, action: str) -> HTTPException:
    # Surface the n8n response body in the detail
    detail = str(e)
    if e.response_body:
        detail = f"{e}: {e.response_body}"
    logger.error("n8n_request_failed", action=action, status_code=e.status_code, response_body=e.response_body)
    return HTTPException(status_code=502, detail=f"Failed to {action}: {detail}")


class EnvironmentsResponse(BaseModel):
    environments: list[str]


class PushRequest(BaseModel):
    """Request to push a workflow to n8n."""

    workflow_json: dict = Field(..., description="The n8n workflow JSON")
    workflow_name: Optional[str] = Field(None, description="Override the workflow name")
    activate: bool = Field(False, description="Whether to activate the workflow after creation")


class PushResponse(BaseModel):
    success: bool
    n8n_workflow_id: Optional[str] = None
    n8n_workflow_url: Optional[str] = None
    activated: bool = False
    message: str


class DeployRequest(BaseModel):
    workflow_id: str
    source_environment: str
    target_environment: str
    overwrite: bool = Field(False, description="Replace a same-named workflow in the target")


class SyncRequest(BaseModel):
    source_environment: str
    target_environment: str
    direction: SyncDirection = SyncDirection.SOURCE_TO_TARGET
    include_inactive: bool = False
    dry_run: bool = False


@router.get("/workflows/environments", response_model=EnvironmentsResponse)
async def list_environments(registry: EnvironmentRegistry = Depends(get_environments)) -> EnvironmentsResponse:
    """Environments that have an API key configured."""
    return EnvironmentsResponse(environments=registry.names())


@router.post("/workflows/{environment}/push", response_model=PushResponse)
async def push_workflow(
    environment: str,
    request: PushRequest,
    registry: EnvironmentRegistry = Depends(get_environments),
) -> PushResponse:
    """
    Push a workflow to n8n.

    Creates a new workflow in the environment from the workflow JSON.
    Optionally activates the workflow after creation.
    """
    try:
        client = registry.client_for(environment)
    except UnknownEnvironmentError as e:
        raise HTTPException(status_code=404, detail=str(e))

    workflow_json = request.workflow_json.copy()
    if request.workflow_name:
        workflow_json["name"] = request.workflow_name

    try:
        result = await client.create_workflow(workflow_json)
    except N8NClientError as e:
        raise _client_error(e, "push to n8n")

    n8n_workflow_id = result.get("id")
    logger.info("workflow_pushed_to_n8n", environment=environment, n8n_workflow_id=n8n_workflow_id)

    activated = False
    if request.activate and n8n_workflow_id:
        try:
            await client.activate_workflow(n8n_workflow_id)
            activated = True
        except N8NClientError as e:
            logger.warning("workflow_activation_failed", n8n_workflow_id=n8n_workflow_id, error=str(e))

    return PushResponse(
        success=True,
        n8n_workflow_id=n8n_workflow_id,
        n8n_workflow_url=f"{client.instance_url}/workflow/{n8n_workflow_id}",
        activated=activated,
        message=f"Workflow created successfully in {environment}",
    )


@router.post("/workflows/deploy", response_model=DeploymentResult)
async def deploy_workflow(
    request: DeployRequest,
    registry: EnvironmentRegistry = Depends(get_environments),
) -> DeploymentResult:
    deployer = WorkflowDeployer(registry)
    try:
        return await deployer.deploy(
            request.workflow_id,
            request.source_environment,
            request.target_environment,
            overwrite=request.overwrite,
        )
    except (UnknownEnvironmentError, WorkflowNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except WorkflowConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except N8NClientError as e:
        raise _client_error(e, "deploy workflow")


@router.post("/workflows/sync", response_model=SyncReport)
async def sync_workflows(
    request: SyncRequest,
    registry: EnvironmentRegistry = Depends(get_environments),
) -> SyncReport:
    synchronizer = WorkflowSynchronizer(registry)
    try:
        return await synchronizer.sync(
            request.source_environment,
            request.target_environment,
            direction=request.direction,
            include_inactive=request.include_inactive,
            dry_run=request.dry_run,
        )
    except UnknownEnvironmentError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except N8NClientError as e:
        raise _client_error(e, "sync workflows")


@router.post("/workflows/{environment}/unused", response_model=UnusedAnalysis)
async def identify_unused(
    environment: str,
    options: Optional[UnusedAnalysisOptions] = None,
    registry: EnvironmentRegistry = Depends(get_environments),
) -> UnusedAnalysis:
    try:
        analyzer = UnusedWorkflowAnalyzer(registry.client_for(environment))
    except UnknownEnvironmentError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        return await analyzer.analyze(options)
    except N8NClientError as e:
        raise _client_error(e, "analyze workflows")
