"""
Style tables for Mermaid diagrams.

Colors are looked up explicitly by theme and severity; nothing here reads
global state.
"""

from __future__ import annotations

from dataclasses import dataclass

from planviz.cost import CostSeverity
from planviz.models import Theme


@dataclass(frozen=True)
class NodeStyle:
    """Fill and stroke of one styled node."""

    fill: str
    stroke: str = "#333"
    stroke_width: str = "2px"

    def declaration(self, node_id: str) -> str:
        """Mermaid style declaration, e.g. `style node0 fill:#ffcccc,stroke:#333,stroke-width:2px`."""
        return f"style {node_id} fill:{self.fill},stroke:{self.stroke},stroke-width:{self.stroke_width}"


@dataclass(frozen=True)
class StyleTable:
    """Severity-to-style mapping for one theme."""

    high: NodeStyle
    medium: NodeStyle
    low: NodeStyle

    def for_severity(self, severity: CostSeverity) -> NodeStyle:
        if severity == CostSeverity.HIGH:
            return self.high
        if severity == CostSeverity.MEDIUM:
            return self.medium
        return self.low


LIGHT_STYLES = StyleTable(
    high=NodeStyle(fill="#ffcccc"),
    medium=NodeStyle(fill="#ffffcc"),
    low=NodeStyle(fill="#ccffcc"),
)

DARK_STYLES = StyleTable(
    high=NodeStyle(fill="#8B0000"),
    medium=NodeStyle(fill="#BDB76B"),
    low=NodeStyle(fill="#2E8B57"),
)

STYLE_TABLES: dict[Theme, StyleTable] = {
    Theme.LIGHT: LIGHT_STYLES,
    Theme.DARK: DARK_STYLES,
}


def style_table_for(theme: Theme | str) -> StyleTable:
    """Style table of a theme; unknown names fall back to light."""
    return STYLE_TABLES[Theme.from_string(theme)]
