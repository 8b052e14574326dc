"""Mermaid graph description emitter."""

from planviz.graph.emitter import (
    GraphDescription,
    edge_declaration,
    emit_graph,
    escape_label,
    node_declaration,
    node_label,
)
from planviz.graph.styles import (
    DARK_STYLES,
    LIGHT_STYLES,
    STYLE_TABLES,
    NodeStyle,
    StyleTable,
    style_table_for,
)

__all__ = [
    "GraphDescription",
    "emit_graph",
    "escape_label",
    "node_label",
    "node_declaration",
    "edge_declaration",
    "NodeStyle",
    "StyleTable",
    "LIGHT_STYLES",
    "DARK_STYLES",
    "STYLE_TABLES",
    "style_table_for",
]
