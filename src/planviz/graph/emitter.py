"""
Graph emitter: annotated plan -> Mermaid flowchart description.

The output is three lists of line-oriented declarations:

    node0["XN Hash Join ...<br/><b>Self Cost: 0.00</b>"]     node
    node0 --> node1                                          edge
    style node1 fill:#ffcccc,stroke:#333,stroke-width:2px    style

Nothing is rendered here; the joined text is handed to an external
renderer (see planviz.render).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from planviz.cost import AnnotatedPlan
from planviz.graph.styles import StyleTable
from planviz.models import node_id_for

LINE_BREAK = "<br/>"


@dataclass(frozen=True)
class GraphDescription:
    """Mermaid declarations for one diagram."""

    nodes: tuple[str, ...] = ()
    edges: tuple[str, ...] = ()
    styles: tuple[str, ...] = ()
    direction: str = "TD"

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def to_mermaid(self) -> str:
        """Full diagram source: header, then nodes, edges and styles."""
        return "\n".join([
            f"graph {self.direction}",
            "\n".join(self.nodes),
            "\n".join(self.edges),
            "\n".join(self.styles),
        ])


def escape_label(text: str) -> str:
    """Escape double quotes with Mermaid's entity so labels stay quoted."""
    return text.replace('"', "#quot;")


def node_label(details: Iterable[str], exclusive_cost: float) -> str:
    """Detail lines plus a bold self-cost line, joined by line breaks."""
    lines = [*details, f"<b>Self Cost: {exclusive_cost:.2f}</b>"]
    return escape_label(LINE_BREAK.join(lines))


def node_declaration(node_id: str, label: str) -> str:
    return f'{node_id}["{label}"]'


def edge_declaration(parent_id: str, child_id: str) -> str:
    return f"{parent_id} --> {child_id}"


def emit_graph(annotated: AnnotatedPlan, styles: StyleTable) -> GraphDescription:
    """
    Emit node, edge and style declarations for an annotated plan.

    Only nodes with a positive self cost get a style declaration.

    Args:
        annotated: Plan after cost attribution
        styles: Severity colors for the active theme

    Returns:
        GraphDescription; empty for an empty plan
    """
    nodes: list[str] = []
    style_lines: list[str] = []

    for node in annotated.nodes:
        exclusive_cost = node.exclusive_cost or 0.0
        nodes.append(node_declaration(node.node_id, node_label(node.details, exclusive_cost)))

        severity = annotated.severity_of(node)
        if severity is not None:
            style_lines.append(styles.for_severity(severity).declaration(node.node_id))

    edges = tuple(
        edge_declaration(node_id_for(parent), node_id_for(child))
        for parent, child in annotated.plan.edges
    )

    return GraphDescription(nodes=tuple(nodes), edges=edges, styles=tuple(style_lines))
