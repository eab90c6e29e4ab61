"""Render catalog results as clean text for the terminal."""
from typing import Optional

from node_atlas.models.catalog import (
    CatalogEntity,
    CatalogStatistics,
    ChainSuggestion,
    RefreshOutcome,
    SearchResult,
)

WIDTH = 60


def _header(title: str) -> list[str]:
    return ["=" * WIDTH, f"  {title}", "=" * WIDTH]


def _section(title: str) -> list[str]:
    return [f"  {title}:", "  " + "-" * (WIDTH - 4)]


def _get_node_icon(entity: CatalogEntity) -> str:
    """Get an icon for a catalog entity."""
    text = f"{entity.identifier} {entity.category}".lower()
    node_name = entity.identifier.rsplit(".", 1)[-1].lower()

    if entity.is_trigger:
        return "⚡"
    elif entity.is_ai:
        return "🤖"
    elif "webhook" in text:
        return "🔗"
    elif "http" in text:
        return "🌐"
    elif node_name in ("if", "switch"):
        return "🔀"
    elif "slack" in text or "discord" in text or "communication" in text:
        return "💬"
    elif "email" in text or "gmail" in text:
        return "📧"
    elif "database" in text or "postgres" in text or "mysql" in text:
        return "🗄️"
    elif "cloud" in text:
        return "☁️"
    else:
        return "⚙️"


def format_node(entity: CatalogEntity, index: Optional[int] = None) -> list[str]:
    prefix = f"[{index}] " if index is not None else ""
    lines = [f"  {_get_node_icon(entity)} {prefix}{entity.display_name}"]
    lines.append(f"       ID: {entity.identifier}")
    category = entity.category or "uncategorized"
    if entity.subcategory:
        category = f"{category} / {entity.subcategory}"
    lines.append(f"       Category: {category}")
    if entity.description:
        description = entity.description
        if len(description) > 70:
            description = f"{description[:70]}..."
        lines.append(f"       {description}")
    return lines


def print_nodes(entities: list[CatalogEntity], title: str) -> str:
    lines = _header(f"{title} ({len(entities)})")
    if not entities:
        lines.append("  (No matching nodes)")
    for i, entity in enumerate(entities, 1):
        lines.extend(format_node(entity, i))
    lines.append("=" * WIDTH)
    return "\n".join(lines)


def print_search_result(result: SearchResult) -> str:
    """
    Convert a search result to a text report.

    Exact matches come first, then fuzzy matches, then the extras
    (related nodes, AI variants, query suggestions).
    """
    lines = _header(f"SEARCH: {result.query!r} - {result.total_count} results")

    if result.exact_matches:
        lines.extend(_section("EXACT MATCHES"))
        for i, entity in enumerate(result.exact_matches, 1):
            lines.extend(format_node(entity, i))
        lines.append("")

    if result.fuzzy_matches:
        lines.extend(_section("FUZZY MATCHES"))
        for i, entity in enumerate(result.fuzzy_matches, result.exact_match_count + 1):
            lines.extend(format_node(entity, i))
        lines.append("")

    if not result.nodes:
        lines.append("  (No matching nodes)")
        lines.append("")

    if result.categories:
        lines.append(f"  Categories: {', '.join(result.categories)}")
    if result.ai_optimized_variants:
        lines.append(f"  AI variants: {', '.join(e.display_name for e in result.ai_optimized_variants)}")
    if result.related_nodes:
        lines.append(f"  Related: {', '.join(e.display_name for e in result.related_nodes)}")
    if result.suggestions:
        lines.append(f"  Try also: {'; '.join(result.suggestions)}")

    lines.append("=" * WIDTH)
    return "\n".join(lines)


def print_chains(suggestions: list[ChainSuggestion], intent: str) -> str:
    lines = _header(f"CHAINS FOR: {intent}")
    if not suggestions:
        lines.append("  (No chain suggestions)")

    for i, suggestion in enumerate(suggestions, 1):
        flow = " → ".join(f"{_get_node_icon(e)} {e.display_name}" for e in suggestion.chain)
        lines.append(f"  [{i}] {flow}")
        lines.append(f"       {suggestion.reasoning}")
        lines.append(
            f"       Confidence: {suggestion.confidence:.0%} | "
            f"Time: {suggestion.estimated_time} | "
            f"Complexity: {suggestion.complexity.value}"
        )
        for alternative in suggestion.alternatives:
            lines.append(f"       Alternative: {' → '.join(e.display_name for e in alternative)}")
        if suggestion.missing_entities:
            lines.append(f"       ⚠ Missing from catalog: {', '.join(suggestion.missing_entities)}")
        lines.append("")

    lines.append("=" * WIDTH)
    return "\n".join(lines)


def print_statistics(stats: CatalogStatistics) -> str:
    lines = _header("CATALOG STATISTICS")
    lines.append(f"  Total nodes:   {stats.total_nodes}")
    lines.append(f"  AI nodes:      {stats.ai_nodes}")
    lines.append(f"  Regular nodes: {stats.regular_nodes}")
    lines.append(f"  Triggers:      {stats.trigger_nodes}")
    lines.append("")

    lines.extend(_section("TOP CATEGORIES"))
    for entry in stats.top_integrations:
        lines.append(f"  {entry.count:>5}  {entry.name}")
    lines.append("")

    lines.extend(_section("COVERAGE"))
    for group, count in stats.coverage.items():
        lines.append(f"  {count:>5}  {group}")

    lines.append("=" * WIDTH)
    return "\n".join(lines)


def print_issues(issues: list[str]) -> str:
    lines = _header("CATALOG VALIDATION")
    if not issues:
        lines.append("  ✓ No issues found")
    for issue in issues:
        lines.append(f"  ✗ {issue}")
    lines.append("=" * WIDTH)
    return "\n".join(lines)


def print_refresh_outcome(outcome: RefreshOutcome) -> str:
    lines = _header(f"REFRESH: {outcome.status.upper()}")
    lines.append(f"  Revision: {outcome.revision or 'N/A'}")
    lines.append(f"  Nodes: {outcome.entity_count}")
    if outcome.error:
        lines.append(f"  Error: {outcome.error}")
    if outcome.skipped:
        lines.append("")
        lines.extend(_section(f"SKIPPED ({len(outcome.skipped)})"))
        for skipped in outcome.skipped:
            lines.append(f"  • {skipped.record}: {skipped.reason}")
    lines.append("=" * WIDTH)
    return "\n".join(lines)
