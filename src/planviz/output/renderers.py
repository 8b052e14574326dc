"""
Output renderers for different formats.

Separates presentation logic from analysis logic. JSON goes through the
schema.py Pydantic models; no manual dict construction.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from planviz.analyzer.links import strip_message_links
from planviz.output.schema import (
    DiffEntrySchema,
    DiffSchema,
    DiffSummarySchema,
    NodeSchema,
    ThresholdsSchema,
    VisualizationSchema,
    WarningSchema,
)

if TYPE_CHECKING:
    from planviz.analyzer.models import PlanWarning
    from planviz.engine import GenerateReport
    from planviz.parser.models import PlanNode
    from planviz.plan_diff import DiffEntry, PlanDiff


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"
    MERMAID = "mermaid"


def render(report: "GenerateReport", format: OutputFormat = OutputFormat.TEXT) -> str:
    """
    Render a generate report in the specified format.

    Args:
        report: Result of VisualizationService.generate()
        format: Output format

    Returns:
        Formatted string
    """
    if format == OutputFormat.TEXT:
        return render_text(report)
    elif format == OutputFormat.JSON:
        return render_json(report)
    elif format == OutputFormat.MARKDOWN:
        return render_markdown(report)
    elif format == OutputFormat.MERMAID:
        return report.visualization.mermaid
    else:
        raise ValueError(f"Unknown output format: {format}")


def render_diff(diff: "PlanDiff", format: OutputFormat = OutputFormat.TEXT) -> str:
    """Render a plan diff in the specified format."""
    if format == OutputFormat.TEXT:
        return render_diff_text(diff)
    elif format == OutputFormat.JSON:
        return diff_to_schema(diff).model_dump_json(indent=2)
    elif format == OutputFormat.MARKDOWN:
        return render_diff_markdown(diff)
    elif format == OutputFormat.MERMAID:
        return diff.combined_graph.to_mermaid()
    else:
        raise ValueError(f"Unknown output format: {format}")


# =============================================================================
# Schema-based serialization
# =============================================================================


def _node_to_schema(report: "GenerateReport", node: "PlanNode") -> NodeSchema:
    severity = report.visualization.annotated.severity_of(node)
    return NodeSchema(
        node_id=node.node_id,
        operator=node.operator,
        details=list(node.details),
        inclusive_cost=node.inclusive_cost,
        exclusive_cost=node.exclusive_cost or 0.0,
        severity=severity.value if severity else None,
        children=[report.visualization.plan.nodes[i].node_id for i in node.children],
    )


def _warning_to_schema(warning: "PlanWarning") -> WarningSchema:
    return WarningSchema(
        type=warning.type.value,
        severity=warning.severity.value,
        message=warning.message,
        node_id=warning.node_id,
        rule_id=warning.rule_id,
    )


def report_to_schema(report: "GenerateReport") -> VisualizationSchema:
    """Convert a generate report to the Pydantic schema model."""
    viz = report.visualization
    return VisualizationSchema(
        theme=viz.theme.value,
        node_count=viz.plan.node_count,
        edge_count=len(viz.edges),
        thresholds=ThresholdsSchema(high=viz.thresholds.high, medium=viz.thresholds.medium),
        nodes=[_node_to_schema(report, node) for node in viz.plan.nodes],
        warnings=[_warning_to_schema(w) for w in report.warnings],
        mermaid=viz.mermaid,
    )


def _entry_to_schema(entry: "DiffEntry") -> DiffEntrySchema:
    return DiffEntrySchema(
        status=entry.status.value,
        operator=entry.node.operator,
        before_node_id=entry.before.node_id if entry.before else None,
        after_node_id=entry.after.node_id if entry.after else None,
        before_exclusive_cost=entry.before.exclusive_cost if entry.before else None,
        after_exclusive_cost=entry.after.exclusive_cost if entry.after else None,
    )


def diff_to_schema(diff: "PlanDiff") -> DiffSchema:
    """Convert a plan diff to the Pydantic schema model."""
    return DiffSchema(
        summary=DiffSummarySchema(**diff.summary.to_dict()),
        entries=[_entry_to_schema(e) for e in diff.entries],
        mermaid=diff.combined_graph.to_mermaid(),
    )


def render_json(report: "GenerateReport") -> str:
    return report_to_schema(report).model_dump_json(indent=2)


# =============================================================================
# Text
# =============================================================================


def render_text(report: "GenerateReport") -> str:
    """Plain text: one line per node, then warnings with links flattened."""
    viz = report.visualization
    if viz.is_empty:
        return "Empty plan: nothing to analyze."

    lines = [f"Plan: {viz.plan.node_count} nodes, {len(viz.edges)} edges", ""]
    for node in viz.plan.iter_depth_first():
        indent = "  " * node.depth
        severity = viz.annotated.severity_of(node)
        marker = f" [{severity.value.upper()}]" if severity else ""
        lines.append(
            f"{indent}{node.node_id}: {node.operator} "
            f"(self cost {node.exclusive_cost or 0.0:.2f}){marker}"
        )

    if report.warnings:
        lines.append("")
        lines.append(f"Warnings ({len(report.warnings)}):")
        for warning in report.warnings:
            lines.append(
                f"  [{warning.severity.value.upper()}] {warning.node_id}: "
                f"{strip_message_links(warning.message)}"
            )

    return "\n".join(lines)


def render_diff_text(diff: "PlanDiff") -> str:
    lines = [diff.summary.to_text()]
    for entry in diff.entries:
        lines.append(f"  {entry.node_id}  {entry.label}")
    return "\n".join(lines)


# =============================================================================
# Markdown
# =============================================================================


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_markdown(report: "GenerateReport") -> str:
    """Markdown report with an embedded mermaid block."""
    viz = report.visualization
    lines = ["## Query Plan Analysis", ""]

    if viz.is_empty:
        lines.append("Empty plan: nothing to analyze.")
        return "\n".join(lines)

    lines.extend([
        "```mermaid",
        viz.mermaid,
        "```",
        "",
        "| Node | Operator | Total Cost | Self Cost | Severity |",
        "|------|----------|-----------:|----------:|----------|",
    ])
    for node in viz.plan.nodes:
        severity = viz.annotated.severity_of(node)
        lines.append(
            f"| {node.node_id} | {_md_cell(node.operator)} | {node.inclusive_cost:.2f} "
            f"| {node.exclusive_cost or 0.0:.2f} | {severity.value if severity else '-'} |"
        )

    lines.append("")
    if report.warnings:
        lines.append("### Performance Analysis")
        lines.append("")
        for warning in report.warnings:
            label = "Warning" if warning.type.value == "warning" else "Info"
            lines.append(f"- **{label}** (`{warning.node_id}`): {warning.message}")
    else:
        lines.append("No performance warnings.")

    return "\n".join(lines)


def render_diff_markdown(diff: "PlanDiff") -> str:
    summary = diff.summary
    lines = [
        "## Plan Comparison",
        "",
        "| Added | Removed | Changed | Unchanged |",
        "|------:|--------:|--------:|----------:|",
        f"| {summary.added} | {summary.removed} | {summary.changed} | {summary.unchanged} |",
        "",
        "```mermaid",
        diff.combined_graph.to_mermaid(),
        "```",
    ]
    return "\n".join(lines)
