"""
Data models for the warning analyzer.

Warnings are immutable and rebuilt on every analysis run. Equality of
`message` is what deduplication keys on.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WarningType(str, Enum):
    """How a warning is presented: a problem, or context worth knowing."""

    WARNING = "warning"
    INFO = "info"


class WarningSeverity(str, Enum):
    """
    Severity levels for warnings.

    HIGH: Likely to dominate query runtime
    MEDIUM: Worth checking, often benign
    """

    HIGH = "high"
    MEDIUM = "medium"


class PlanWarning(BaseModel):
    """
    A heuristic performance warning tied to one plan node.

    Attributes:
        type: warning or info
        message: Human-readable text, may embed one markdown link
        severity: high or medium
        node_id: Node the warning refers to (e.g. "node2")
        rule_id: Rule that produced the warning
    """

    model_config = ConfigDict(frozen=True)

    type: WarningType = WarningType.WARNING
    message: str
    severity: WarningSeverity
    node_id: str
    rule_id: str = Field(default="", description="Emitting rule")

    @property
    def is_info(self) -> bool:
        return self.type == WarningType.INFO
