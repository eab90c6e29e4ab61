"""Workflow tools over the n8n REST API: deploy, sync, unused analysis."""
from node_atlas.workflows.deploy import WorkflowDeployer
from node_atlas.workflows.errors import WorkflowConflictError, WorkflowNotFoundError, WorkflowToolError
from node_atlas.workflows.sync import WorkflowSynchronizer
from node_atlas.workflows.unused import UnusedWorkflowAnalyzer

__all__ = [
    "WorkflowDeployer",
    "WorkflowSynchronizer",
    "UnusedWorkflowAnalyzer",
    "WorkflowToolError",
    "WorkflowNotFoundError",
    "WorkflowConflictError",
]
