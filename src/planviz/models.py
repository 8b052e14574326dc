"""
Shared value types used across the parser, analyzer, emitter and differ.

NodeDetails is the per-node record handed from cost attribution to every
downstream consumer: the warning analyzer, the plan differ and the CLI's
node inspector all read it instead of the raw plan arena.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Theme(str, Enum):
    """Diagram color theme."""

    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_string(cls, value: "Theme | str | None") -> "Theme":
        """Parse a theme name, defaulting to light."""
        if isinstance(value, Theme):
            return value
        if value is None:
            return cls.LIGHT
        try:
            return cls(value.lower())
        except ValueError:
            return cls.LIGHT


def node_id_for(index: int) -> str:
    """Public identifier for the node at an arena index."""
    return f"node{index}"


class NodeDetails(BaseModel):
    """
    Detail lines and self cost of one plan node.

    Attributes:
        node_id: Identifier of the node within its parse (e.g. "node3")
        details: Operator line followed by annotation lines
        exclusive_cost: Cost attributable to this node alone
    """

    model_config = ConfigDict(frozen=True)

    node_id: str
    details: tuple[str, ...] = Field(default_factory=tuple)
    exclusive_cost: float = 0.0

    @property
    def operator(self) -> str:
        """The operator line, or an empty string for a node without details."""
        return self.details[0] if self.details else ""
