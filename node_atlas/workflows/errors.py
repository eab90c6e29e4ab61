"""Workflow tool exceptions."""
from typing import Optional


class WorkflowToolError(Exception):
    """Base exception for deploy/sync/cleanup tools."""

    def __init__(self, message: str, environment: Optional[str] = None, workflow: Optional[str] = None):
        super().__init__(message)
        self.environment = environment
        self.workflow = workflow


class WorkflowNotFoundError(WorkflowToolError):
    def __init__(self, workflow_id: str, environment: str):
        super().__init__(
            f"Workflow '{workflow_id}' not found in {environment} environment",
            environment=environment,
            workflow=workflow_id,
        )


class WorkflowConflictError(WorkflowToolError):
    """A workflow with the same name already exists in the target."""

    def __init__(self, name: str, environment: str):
        super().__init__(
            f"Workflow '{name}' already exists in {environment}. Use overwrite=true to replace it.",
            environment=environment,
            workflow=name,
        )
