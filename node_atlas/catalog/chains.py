"""Chain composer - canned node chains for workflow intents.

This is keyword matching, not a planner. Each keyword group maps to one
suggestion whose nodes are looked up by display name in the current
catalog. What happens when a named node is missing is decided by the
composer's ChainMissPolicy.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import structlog

from node_atlas.catalog.errors import ChainEntityNotFoundError
from node_atlas.catalog.store import CatalogStore
from node_atlas.models.catalog import (
    CatalogEntity,
    ChainSuggestion,
    Complexity,
    WorkflowIntent,
)

logger = structlog.get_logger()


class ChainMissPolicy(str, Enum):
    """What to do when a chain names a node the catalog does not have."""
    FLAG = "flag"    # keep the suggestion, report the name in missing_entities
    DROP = "drop"    # drop the whole suggestion
    RAISE = "raise"  # raise ChainEntityNotFoundError


@dataclass(frozen=True)
class ChainTemplate:
    """A canned suggestion triggered by any of its keywords."""

    name: str
    keywords: tuple[str, ...]
    chain: tuple[str, ...]
    reasoning: str
    confidence: float
    estimated_time: str
    complexity: Complexity
    alternatives: tuple[tuple[str, ...], ...] = field(default_factory=tuple)

    def matches(self, text: str) -> bool:
        # Keywords match at the start of a word: "ai" fires on "ai-powered", not "email"
        return any(re.search(rf"\b{re.escape(keyword)}", text) for keyword in self.keywords)


CHAIN_TEMPLATES: list[ChainTemplate] = [
    ChainTemplate(
        name="ai",
        keywords=("ai", "chat", "generate"),
        chain=("OpenAI", "Set"),
        reasoning="AI workflow typically starts with AI model and processes results",
        confidence=0.9,
        estimated_time="< 1 minute",
        complexity=Complexity.SIMPLE,
        alternatives=(("Anthropic Claude",),),
    ),
    ChainTemplate(
        name="data",
        keywords=("data", "database"),
        chain=("PostgreSQL", "Function"),
        reasoning="Data workflows benefit from database operations followed by processing",
        confidence=0.8,
        estimated_time="2-5 minutes",
        complexity=Complexity.MODERATE,
        alternatives=(("MySQL",),),
    ),
    ChainTemplate(
        name="notification",
        keywords=("notification", "alert"),
        chain=("IF", "Slack"),
        reasoning="Notification workflows typically check conditions before sending alerts",
        confidence=0.85,
        estimated_time="< 30 seconds",
        complexity=Complexity.SIMPLE,
        alternatives=(("Discord",),),
    ),
]

_COMPLEXITY_RANK = {
    Complexity.SIMPLE: 0,
    Complexity.MODERATE: 1,
    Complexity.COMPLEX: 2,
}


class ChainComposer:
    """Builds chain suggestions from the canned templates."""

    def __init__(
        self,
        store: CatalogStore,
        miss_policy: Union[ChainMissPolicy, str] = ChainMissPolicy.FLAG,
        templates: Optional[list[ChainTemplate]] = None,
    ):
        self.store = store
        self.miss_policy = ChainMissPolicy(miss_policy)
        self.templates = templates if templates is not None else CHAIN_TEMPLATES

    def referenced_names(self) -> set[str]:
        """All display names the templates refer to."""
        names: set[str] = set()
        for template in self.templates:
            names.update(template.chain)
            for alternative in template.alternatives:
                names.update(alternative)
        return names

    def suggest(self, intent: Union[WorkflowIntent, str]) -> list[ChainSuggestion]:
        """Get chain suggestions for an intent."""
        if isinstance(intent, str):
            intent = WorkflowIntent(text=intent)

        text = intent.text.lower()
        suggestions = []
        for template in self.templates:
            if not template.matches(text):
                continue
            suggestion = self._build(template)
            if suggestion is not None:
                suggestions.append(suggestion)

        suggestions.sort(key=lambda s: -s.confidence)
        if intent.preferences and intent.preferences.speed == "fast":
            suggestions.sort(key=lambda s: _COMPLEXITY_RANK[s.complexity])

        return suggestions

    def _resolve(self, names: tuple[str, ...], template: ChainTemplate) -> tuple[list[CatalogEntity], list[str]]:
        found: list[CatalogEntity] = []
        missing: list[str] = []
        for name in names:
            entity = self.store.by_display_name(name)
            if entity is None:
                if self.miss_policy is ChainMissPolicy.RAISE:
                    raise ChainEntityNotFoundError(name, template.name)
                missing.append(name)
            else:
                found.append(entity)
        return found, missing

    def _build(self, template: ChainTemplate) -> Optional[ChainSuggestion]:
        chain, missing = self._resolve(template.chain, template)

        alternatives = []
        for names in template.alternatives:
            alternative, alt_missing = self._resolve(names, template)
            missing.extend(alt_missing)
            if alternative:
                alternatives.append(alternative)

        if missing:
            logger.warning(
                "chain_entities_missing",
                suggestion=template.name,
                missing=missing,
                policy=self.miss_policy.value,
            )
            if self.miss_policy is ChainMissPolicy.DROP:
                return None

        if not chain:
            return None

        return ChainSuggestion(
            chain=chain,
            reasoning=template.reasoning,
            confidence=template.confidence,
            estimated_time=template.estimated_time,
            complexity=template.complexity,
            alternatives=alternatives,
            missing_entities=missing,
        )
