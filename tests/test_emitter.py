"""Tests for the Mermaid graph emitter and theme style tables."""

from __future__ import annotations

import pytest

from planviz.cost import CostSeverity, attribute_costs
from planviz.graph import (
    DARK_STYLES,
    LIGHT_STYLES,
    GraphDescription,
    NodeStyle,
    emit_graph,
    escape_label,
    node_label,
    style_table_for,
)
from planviz.models import Theme
from planviz.parser import parse_plan_text


def emit(text: str, theme: Theme = Theme.LIGHT) -> GraphDescription:
    return emit_graph(attribute_costs(parse_plan_text(text)), style_table_for(theme))


class TestNodes:

    def test_one_declaration_per_node(self, broadcast_plan: str) -> None:
        graph = emit(broadcast_plan)

        assert len(graph.nodes) == 4
        assert [decl.split("[", 1)[0] for decl in graph.nodes] == [
            "node0", "node1", "node2", "node3",
        ]

    def test_label_joins_details_and_self_cost(self, broadcast_plan: str) -> None:
        graph = emit(broadcast_plan)

        root = graph.nodes[0]
        assert root.startswith('node0["XN Hash Join DS_BCAST_INNER')
        assert "<br/>Hash Cond: (a.id = b.id)<br/>" in root
        assert root.endswith('<b>Self Cost: 0.00</b>"]')
        assert graph.nodes[3].endswith('<br/><b>Self Cost: 59.00</b>"]')

    def test_node_label(self) -> None:
        label = node_label(["XN Seq Scan on a", "Filter: (x > 1)"], 12.5)

        assert label == "XN Seq Scan on a<br/>Filter: (x > 1)<br/><b>Self Cost: 12.50</b>"

    def test_quotes_escaped(self) -> None:
        text = '\n'.join([
            'XN Seq Scan on "Orders"  (cost=0.00..10.00 rows=1 width=4)',
            '  Filter: ((status)::text = "open"::text)',
        ])
        graph = emit(text)

        assert '"Orders"' not in graph.nodes[0]
        assert "#quot;Orders#quot;" in graph.nodes[0]
        assert graph.nodes[0].count('"') == 2

    def test_escape_label(self) -> None:
        assert escape_label('a "b" c') == "a #quot;b#quot; c"
        assert escape_label("plain") == "plain"


class TestEdges:

    def test_edges(self, broadcast_plan: str) -> None:
        graph = emit(broadcast_plan)

        assert graph.edges == ("node0 --> node1", "node0 --> node2", "node2 --> node3")

    def test_single_node_has_no_edges(self) -> None:
        assert emit("XN Seq Scan on a  (cost=0.00..1.00)").edges == ()


class TestStyles:

    def test_only_positive_costs_styled(self, broadcast_plan: str) -> None:
        graph = emit(broadcast_plan)

        assert graph.styles == (
            "style node1 fill:#ffcccc,stroke:#333,stroke-width:2px",
            "style node3 fill:#ffcccc,stroke:#333,stroke-width:2px",
        )

    def test_dark_theme(self, broadcast_plan: str) -> None:
        graph = emit(broadcast_plan, Theme.DARK)

        assert all("fill:#8B0000" in style for style in graph.styles)

    def test_severity_colors(self, nested_loop_plan: str) -> None:
        graph = emit(nested_loop_plan)

        assert graph.styles[0] == "style node0 fill:#ffcccc,stroke:#333,stroke-width:2px"
        assert graph.styles[1] == "style node1 fill:#ccffcc,stroke:#333,stroke-width:2px"

    def test_theme_does_not_change_nodes_or_edges(self, nested_loop_plan: str) -> None:
        light = emit(nested_loop_plan, Theme.LIGHT)
        dark = emit(nested_loop_plan, Theme.DARK)

        assert light.nodes == dark.nodes
        assert light.edges == dark.edges
        assert light.styles != dark.styles

    @pytest.mark.parametrize(
        "severity,light,dark",
        [
            (CostSeverity.HIGH, "#ffcccc", "#8B0000"),
            (CostSeverity.MEDIUM, "#ffffcc", "#BDB76B"),
            (CostSeverity.LOW, "#ccffcc", "#2E8B57"),
        ],
    )
    def test_palettes(self, severity: CostSeverity, light: str, dark: str) -> None:
        assert LIGHT_STYLES.for_severity(severity).fill == light
        assert DARK_STYLES.for_severity(severity).fill == dark

    def test_unknown_theme_falls_back_to_light(self) -> None:
        assert style_table_for("solarized") is LIGHT_STYLES
        assert style_table_for("DARK") is DARK_STYLES

    def test_style_declaration(self) -> None:
        style = NodeStyle(fill="#cce0ff", stroke="#2196F3")
        assert style.declaration("node7") == "style node7 fill:#cce0ff,stroke:#2196F3,stroke-width:2px"


class TestMermaidSource:

    def test_to_mermaid(self, broadcast_plan: str) -> None:
        graph = emit(broadcast_plan)
        lines = graph.to_mermaid().split("\n")

        assert lines[0] == "graph TD"
        assert lines[1:5] == list(graph.nodes)
        assert lines[5:8] == list(graph.edges)
        assert lines[8:] == list(graph.styles)

    def test_empty_plan(self) -> None:
        graph = emit("")

        assert graph.is_empty
        assert graph.nodes == ()
        assert graph.edges == ()
        assert graph.styles == ()

    def test_deterministic(self, nested_loop_plan: str) -> None:
        assert emit(nested_loop_plan).to_mermaid() == emit(nested_loop_plan).to_mermaid()
