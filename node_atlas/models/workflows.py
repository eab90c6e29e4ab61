"""Workflow tool models - deployment, sync and unused-workflow reports."""
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


# =============================================================================
# DEPLOYMENT
# =============================================================================

class WorkflowRef(BaseModel):
    """A workflow in a named environment."""

    id: Optional[str] = None
    name: str
    environment: str


class DeploymentSummary(BaseModel):
    node_count: int = 0
    connection_count: int = 0
    has_webhooks: bool = False
    has_schedule_triggers: bool = False
    requires_credentials: bool = False


class DeploymentResult(BaseModel):
    """Outcome of copying one workflow to another environment."""

    source: WorkflowRef
    deployed: WorkflowRef
    action: Literal["created", "updated"]
    summary: DeploymentSummary


# =============================================================================
# SYNC
# =============================================================================

class SyncDirection(str, Enum):
    SOURCE_TO_TARGET = "source-to-target"
    TARGET_TO_SOURCE = "target-to-source"
    BIDIRECTIONAL = "bidirectional"


class PlannedOperation(BaseModel):
    """One planned create/update/skip, keyed by workflow name."""

    name: str
    source_id: Optional[str] = None
    target_id: Optional[str] = None
    reason: str
    changes: list[str] = Field(default_factory=list)


class SyncPlan(BaseModel):
    create: list[PlannedOperation] = Field(default_factory=list)
    update: list[PlannedOperation] = Field(default_factory=list)
    skip: list[PlannedOperation] = Field(default_factory=list)


class ExecutedOperation(BaseModel):
    name: str
    workflow_id: Optional[str] = None
    changes: list[str] = Field(default_factory=list)


class SyncFailure(BaseModel):
    operation: Literal["create", "update"]
    workflow: str
    error: str


class SyncPass(BaseModel):
    """One direction of a sync run."""

    source_environment: str
    target_environment: str
    planned: SyncPlan
    created: list[ExecutedOperation] = Field(default_factory=list)
    updated: list[ExecutedOperation] = Field(default_factory=list)
    errors: list[SyncFailure] = Field(default_factory=list)

    @property
    def operation_count(self) -> int:
        return len(self.planned.create) + len(self.planned.update)


class SyncReport(BaseModel):
    source_environment: str
    target_environment: str
    direction: SyncDirection
    dry_run: bool
    passes: list[SyncPass]
    total_operations: int
    total_errors: int


# =============================================================================
# UNUSED WORKFLOWS
# =============================================================================

class AnalysisType(str, Enum):
    EXECUTION = "execution"
    ACCESS = "access"
    COMPREHENSIVE = "comprehensive"


class CleanupMode(str, Enum):
    REPORT_ONLY = "report_only"
    ARCHIVE = "archive"
    DELETE = "delete"


class UnusedAnalysisOptions(BaseModel):
    analysis_type: AnalysisType = AnalysisType.COMPREHENSIVE
    inactive_period_days: int = Field(30, ge=1, description="Days without activity before a workflow counts as unused")
    include_temporary: bool = False
    include_test: bool = False
    cleanup_mode: CleanupMode = CleanupMode.REPORT_ONLY
    preserve_critical: bool = Field(True, description="Never flag workflows tagged production/critical/essential")


class CleanupRecommendation(BaseModel):
    action: Literal["archive", "delete", "keep", "review"]
    priority: Literal["low", "medium", "high"]
    reasoning: str
    risks: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)


class UnusedWorkflow(BaseModel):
    id: str
    name: str
    active: bool
    last_modified: Optional[datetime] = None
    last_execution: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    reasons: list[str]
    tags: list[str] = Field(default_factory=list)
    credentials: list[str] = Field(default_factory=list)
    node_count: int = 0
    estimated_cost: Literal["Low", "Medium", "High"] = "Low"
    is_template: bool = False
    is_test: bool = False
    recommendation: CleanupRecommendation


class CleanupPhase(BaseModel):
    phase: int
    action: Literal["archive", "delete"]
    workflows: list[str]
    dependencies: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)


class ResourceSummary(BaseModel):
    total_nodes: int
    unused_nodes: int
    total_credentials: int
    unused_credentials: list[str]


class UnusedSummary(BaseModel):
    total_unused: int
    safe_to_delete: int
    needs_review: int
    recommendations: list[str]


class CleanupFailure(BaseModel):
    workflow_id: str
    error: str


class CleanupExecution(BaseModel):
    archived: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    errors: list[CleanupFailure] = Field(default_factory=list)


class UnusedAnalysis(BaseModel):
    total_workflows: int
    active_workflows: int
    inactive_workflows: int
    unused_workflows: list[UnusedWorkflow]
    resource_summary: ResourceSummary
    cleanup_plan: list[CleanupPhase]
    summary: UnusedSummary
    executed_cleanup: Optional[CleanupExecution] = None
