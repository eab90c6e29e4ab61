"""Identify unused workflows and plan their cleanup.

A workflow is a cleanup candidate when it collected at least one unused
reason (inactive, no recent executions, not touched recently, tagged
deprecated). Test, temporary and critical workflows are excluded unless
the options say otherwise. Cleanup runs only the first phase of the plan.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from node_atlas.models.workflows import (
    AnalysisType,
    CleanupExecution,
    CleanupFailure,
    CleanupMode,
    CleanupPhase,
    CleanupRecommendation,
    ResourceSummary,
    UnusedAnalysis,
    UnusedAnalysisOptions,
    UnusedSummary,
    UnusedWorkflow,
)
from node_atlas.n8n.client import N8NClient, N8NClientError
from node_atlas.workflows.payload import credential_names, parse_timestamp, tag_names

logger = structlog.get_logger()

CRITICAL_TAGS = {"production", "critical", "essential"}
TEMPORARY_TAGS = {"temp", "temporary"}

NEVER_EXECUTED = "Never executed"
DEPRECATED = "Marked as deprecated"

REASONING = {
    "delete": "Safe to delete - inactive and never executed",
    "archive": "Archive for safety - inactive but may have historical value",
    "keep": "Keep - still needed or critical",
    "review": "Requires manual review - unclear usage",
}


def estimate_cost(node_count: int, credential_count: int) -> str:
    cost = node_count * 0.5 + credential_count * 0.2
    if cost < 2:
        return "Low"
    if cost < 5:
        return "Medium"
    return "High"


def _older(moment: Optional[datetime], cutoff: datetime) -> bool:
    if moment is None:
        return False
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment < cutoff


def unused_reasons(
    workflow: UnusedWorkflow,
    cutoff: datetime,
    options: UnusedAnalysisOptions,
) -> list[str]:
    """Reasons the workflow looks unused; empty when it is in use or excluded."""
    tags = {t.lower() for t in workflow.tags}

    if workflow.is_test and not options.include_test:
        return []
    if tags & TEMPORARY_TAGS and not options.include_temporary:
        return []
    if options.preserve_critical and tags & CRITICAL_TAGS:
        return []

    reasons = []
    if not workflow.active:
        reasons.append("Workflow is inactive")

    if options.analysis_type in (AnalysisType.EXECUTION, AnalysisType.COMPREHENSIVE):
        if workflow.last_execution is None:
            reasons.append(NEVER_EXECUTED)
        elif _older(workflow.last_execution, cutoff):
            reasons.append(f"No executions in the last {options.inactive_period_days} days")

    if options.analysis_type in (AnalysisType.ACCESS, AnalysisType.COMPREHENSIVE):
        if workflow.last_accessed is None:
            reasons.append("Never accessed")
        elif _older(workflow.last_accessed, cutoff):
            reasons.append("Not accessed recently")

    if "deprecated" in tags:
        reasons.append(DEPRECATED)

    if _older(workflow.last_modified, cutoff):
        reasons.append("Not modified recently")

    return reasons


def recommend(workflow: UnusedWorkflow) -> CleanupRecommendation:
    benefits: list[str] = []
    if workflow.is_template:
        action, priority = "keep", "low"
    elif NEVER_EXECUTED in workflow.reasons and not workflow.active:
        action, priority = "delete", "high"
        benefits = ["Free up storage space", "Reduce workflow complexity"]
    elif DEPRECATED in workflow.reasons:
        action, priority = "archive", "medium"
        benefits = ["Clean up workflow list"]
    elif not workflow.active:
        action, priority = "archive", "low"
    else:
        action, priority = "review", "low"

    return CleanupRecommendation(
        action=action,
        priority=priority,
        reasoning=REASONING[action],
        benefits=benefits,
    )


def build_cleanup_plan(unused: list[UnusedWorkflow]) -> list[CleanupPhase]:
    phases: list[CleanupPhase] = []

    deletes = [w.id for w in unused if w.recommendation.action == "delete"]
    if deletes:
        phases.append(CleanupPhase(
            phase=1,
            action="delete",
            workflows=deletes,
            risks=["Minimal risk - workflows never executed"],
            prerequisites=["Backup workflows before deletion"],
        ))

    archives = [w.id for w in unused if w.recommendation.action == "archive"]
    if archives:
        phases.append(CleanupPhase(
            phase=len(phases) + 1,
            action="archive",
            workflows=archives,
            dependencies=[f"Complete phase {len(phases)}"] if phases else [],
            risks=["Low risk - workflows can be reactivated"],
            prerequisites=["Confirm no external callers rely on these workflows"],
        ))

    return phases


class UnusedWorkflowAnalyzer:
    """Finds cleanup candidates among the workflows of one n8n instance."""

    def __init__(self, client: N8NClient, now: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.client = client
        self._now = now

    async def analyze(self, options: Optional[UnusedAnalysisOptions] = None) -> UnusedAnalysis:
        """Analyze every workflow and optionally run the first cleanup phase.

        Raises:
            N8NClientError: listing workflows or reading executions failed
        """
        options = options or UnusedAnalysisOptions()
        cutoff = self._now() - timedelta(days=options.inactive_period_days)

        workflows = await self.client.all_workflows()
        logger.info(
            "unused_analysis_started",
            environment=self.client.name,
            workflow_count=len(workflows),
            analysis_type=options.analysis_type.value,
            inactive_period_days=options.inactive_period_days,
        )

        all_credentials: set[str] = set()
        total_nodes = 0
        unused: list[UnusedWorkflow] = []

        for workflow in workflows:
            view = await self._describe(workflow)
            all_credentials.update(view.credentials)
            total_nodes += view.node_count

            reasons = unused_reasons(view, cutoff, options)
            if not reasons:
                continue
            view = view.model_copy(update={"reasons": reasons})
            unused.append(view.model_copy(update={"recommendation": recommend(view)}))

        plan = build_cleanup_plan(unused)
        unused_credentials = sorted({c for w in unused for c in w.credentials})

        analysis = UnusedAnalysis(
            total_workflows=len(workflows),
            active_workflows=sum(1 for w in workflows if w.get("active")),
            inactive_workflows=sum(1 for w in workflows if not w.get("active")),
            unused_workflows=unused,
            resource_summary=ResourceSummary(
                total_nodes=total_nodes,
                unused_nodes=sum(w.node_count for w in unused),
                total_credentials=len(all_credentials),
                unused_credentials=unused_credentials,
            ),
            cleanup_plan=plan,
            summary=self._summarize(unused, plan),
        )

        if options.cleanup_mode != CleanupMode.REPORT_ONLY:
            analysis.executed_cleanup = await self.execute_cleanup(plan, options.cleanup_mode)

        logger.info(
            "unused_analysis_completed",
            environment=self.client.name,
            unused_count=len(unused),
            phases=len(plan),
        )
        return analysis

    async def execute_cleanup(self, plan: list[CleanupPhase], mode: CleanupMode) -> CleanupExecution:
        """Run the first phase: delete (delete mode only) or deactivate."""
        execution = CleanupExecution()
        if not plan:
            return execution

        phase = plan[0]
        for workflow_id in phase.workflows:
            try:
                if phase.action == "delete" and mode == CleanupMode.DELETE:
                    await self.client.delete_workflow(workflow_id)
                    execution.deleted.append(workflow_id)
                else:
                    await self.client.deactivate_workflow(workflow_id)
                    execution.archived.append(workflow_id)
            except N8NClientError as e:
                logger.warning("cleanup_failed", workflow_id=workflow_id, error=str(e))
                execution.errors.append(CleanupFailure(workflow_id=workflow_id, error=str(e)))

        return execution

    async def _describe(self, workflow: dict) -> UnusedWorkflow:
        workflow_id = str(workflow.get("id"))
        tags = tag_names(workflow)
        lowered = {t.lower() for t in tags}
        credentials = credential_names(workflow)
        nodes = workflow.get("nodes") or []

        execution = await self.client.latest_execution(workflow_id)
        last_execution = None
        if execution:
            last_execution = parse_timestamp(execution.get("startedAt") or execution.get("stoppedAt"))

        last_modified = parse_timestamp(workflow.get("updatedAt") or workflow.get("createdAt"))
        # The API exposes no access log; the latest edit or run stands in for it
        touched = [t for t in (last_modified, last_execution) if t is not None]
        last_accessed = max(touched) if touched else None

        return UnusedWorkflow(
            id=workflow_id,
            name=workflow.get("name", ""),
            active=bool(workflow.get("active")),
            last_modified=last_modified,
            last_execution=last_execution,
            last_accessed=last_accessed,
            reasons=[],
            tags=tags,
            credentials=credentials,
            node_count=len(nodes),
            estimated_cost=estimate_cost(len(nodes), len(credentials)),
            is_template="template" in lowered,
            is_test="test" in lowered,
            recommendation=CleanupRecommendation(action="review", priority="low", reasoning=REASONING["review"]),
        )

    @staticmethod
    def _summarize(unused: list[UnusedWorkflow], plan: list[CleanupPhase]) -> UnusedSummary:
        safe_to_delete = sum(1 for w in unused if w.recommendation.action == "delete")
        needs_review = sum(1 for w in unused if w.recommendation.action == "review")

        recommendations = []
        if safe_to_delete:
            recommendations.append(f"Delete {safe_to_delete} unused workflows")
        if needs_review:
            recommendations.append(f"Review {needs_review} workflows requiring manual attention")
        if plan:
            recommendations.append(f"Execute cleanup plan in {len(plan)} phases")

        return UnusedSummary(
            total_unused=len(unused),
            safe_to_delete=safe_to_delete,
            needs_review=needs_review,
            recommendations=recommendations,
        )
