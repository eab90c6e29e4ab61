"""Synchronize workflows between two environments.

Workflows are matched by name. Each pass plans create/update/skip
operations for one direction and, unless it is a dry run, executes them.
A failing operation is recorded and the pass continues.
"""
import structlog

from node_atlas.models.workflows import (
    ExecutedOperation,
    PlannedOperation,
    SyncDirection,
    SyncFailure,
    SyncPass,
    SyncPlan,
    SyncReport,
)
from node_atlas.n8n.client import N8NClient, N8NClientError
from node_atlas.n8n.environments import EnvironmentRegistry
from node_atlas.workflows.payload import last_updated, prepare_payload

logger = structlog.get_logger()


def workflow_changes(source: dict, target: dict) -> list[str]:
    """List the differences that make ``target`` stale relative to ``source``."""
    changes = []

    if bool(source.get("active")) != bool(target.get("active")):
        changes.append("active_status")

    if len(source.get("nodes") or []) != len(target.get("nodes") or []):
        changes.append("node_count")

    if (source.get("settings") or {}) != (target.get("settings") or {}):
        changes.append("settings")

    source_updated = last_updated(source)
    target_updated = last_updated(target)
    if source_updated and target_updated and source_updated > target_updated:
        changes.append("timestamp")

    return changes


def plan_sync(source_workflows: list[dict], target_workflows: list[dict], include_inactive: bool = False) -> SyncPlan:
    targets = {w.get("name"): w for w in target_workflows}
    plan = SyncPlan()

    for workflow in source_workflows:
        if not include_inactive and not workflow.get("active"):
            continue

        name = workflow.get("name", "")
        target = targets.get(name)
        if target is None:
            plan.create.append(PlannedOperation(
                name=name,
                source_id=workflow.get("id"),
                reason="Not found in target environment",
            ))
            continue

        changes = workflow_changes(workflow, target)
        if changes:
            plan.update.append(PlannedOperation(
                name=name,
                source_id=workflow.get("id"),
                target_id=target.get("id"),
                reason=f"Differences found: {', '.join(changes)}",
                changes=changes,
            ))
        else:
            plan.skip.append(PlannedOperation(
                name=name,
                source_id=workflow.get("id"),
                target_id=target.get("id"),
                reason="Already up to date",
            ))

    return plan


class WorkflowSynchronizer:
    """Plans and applies name-keyed workflow sync between environments."""

    def __init__(self, registry: EnvironmentRegistry):
        self.registry = registry

    async def sync(
        self,
        source: str,
        target: str,
        direction: SyncDirection = SyncDirection.SOURCE_TO_TARGET,
        include_inactive: bool = False,
        dry_run: bool = False,
    ) -> SyncReport:
        """Run a sync in the given direction.

        Raises:
            UnknownEnvironmentError: source or target is not configured
            N8NClientError: listing the workflows of either side failed
        """
        direction = SyncDirection(direction)
        source_client = self.registry.client_for(source)
        target_client = self.registry.client_for(target)

        logger.info(
            "sync_started",
            source=source,
            target=target,
            direction=direction.value,
            include_inactive=include_inactive,
            dry_run=dry_run,
        )

        if direction == SyncDirection.SOURCE_TO_TARGET:
            pairs = [(source, source_client, target, target_client)]
        elif direction == SyncDirection.TARGET_TO_SOURCE:
            pairs = [(target, target_client, source, source_client)]
        else:
            pairs = [
                (source, source_client, target, target_client),
                (target, target_client, source, source_client),
            ]

        passes = []
        for from_env, from_client, to_env, to_client in pairs:
            passes.append(await self._run_pass(from_env, from_client, to_env, to_client, include_inactive, dry_run))

        report = SyncReport(
            source_environment=source,
            target_environment=target,
            direction=direction,
            dry_run=dry_run,
            passes=passes,
            total_operations=sum(p.operation_count for p in passes),
            total_errors=sum(len(p.errors) for p in passes),
        )
        logger.info(
            "sync_completed",
            source=source,
            target=target,
            total_operations=report.total_operations,
            total_errors=report.total_errors,
        )
        return report

    async def _run_pass(
        self,
        source: str,
        source_client: N8NClient,
        target: str,
        target_client: N8NClient,
        include_inactive: bool,
        dry_run: bool,
    ) -> SyncPass:
        source_workflows = await source_client.all_workflows()
        target_workflows = await target_client.all_workflows()

        plan = plan_sync(source_workflows, target_workflows, include_inactive=include_inactive)
        result = SyncPass(source_environment=source, target_environment=target, planned=plan)

        logger.info(
            "sync_planned",
            source=source,
            target=target,
            to_create=len(plan.create),
            to_update=len(plan.update),
            to_skip=len(plan.skip),
        )
        if dry_run:
            return result

        by_name = {w.get("name"): w for w in source_workflows}
        marker = f"synced-to-{target}"

        for op in plan.create:
            try:
                created = await target_client.create_workflow(prepare_payload(by_name[op.name], marker))
            except N8NClientError as e:
                logger.warning("sync_operation_failed", operation="create", workflow=op.name, error=str(e))
                result.errors.append(SyncFailure(operation="create", workflow=op.name, error=str(e)))
                continue
            result.created.append(ExecutedOperation(name=op.name, workflow_id=created.get("id")))

        for op in plan.update:
            try:
                updated = await target_client.update_workflow(op.target_id, prepare_payload(by_name[op.name], marker))
            except N8NClientError as e:
                logger.warning("sync_operation_failed", operation="update", workflow=op.name, error=str(e))
                result.errors.append(SyncFailure(operation="update", workflow=op.name, error=str(e)))
                continue
            result.updated.append(ExecutedOperation(
                name=op.name,
                workflow_id=updated.get("id", op.target_id),
                changes=op.changes,
            ))

        return result
