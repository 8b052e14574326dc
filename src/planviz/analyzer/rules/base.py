"""
Base class for warning rules.

All rules inherit from Rule and implement check(). A rule looks at one
node's details at a time and returns at most one warning for it.

Rules should be:
- Deterministic: Same node always produces the same warning
- Independent: No rule depends on another rule's result
- Fixed: Thresholds come from config, never from the plan's data
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from planviz.analyzer.models import PlanWarning, WarningSeverity, WarningType
from planviz.models import NodeDetails


class RuleConfig(BaseModel):
    """
    Base configuration for all rules.

    Rules define their own thresholds by subclassing this.

    Example:
        class SeqScanConfig(RuleConfig):
            row_threshold: int = 10_000
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True


class Rule(ABC):
    """
    Abstract base class for warning rules.

    Attributes:
        rule_id: Unique identifier, UPPER_SNAKE_CASE (e.g., "NESTED_LOOP")
        version: Semver string, bump when detection logic changes
        severity: Severity of warnings from this rule
        warning_type: warning or info
        description: One-line description for `planviz rules`
        config_schema: Pydantic model for rule configuration
    """

    rule_id: str
    version: str = "1.0.0"
    severity: WarningSeverity
    warning_type: WarningType = WarningType.WARNING
    description: str = ""
    config_schema: type[RuleConfig] = RuleConfig

    def __init__(self, config: RuleConfig | dict[str, Any] | None = None) -> None:
        """
        Args:
            config: RuleConfig instance, dict validated against config_schema,
                or None for defaults.
        """
        if config is None:
            self.config = self.config_schema()
        elif isinstance(config, dict):
            self.config = self.config_schema(**config)
        else:
            self.config = config

    @abstractmethod
    def check(self, node: NodeDetails) -> PlanWarning | None:
        """
        Inspect one node and return a warning, or None.

        Only called for nodes with at least one detail line.
        """

    def make_warning(self, node: NodeDetails, message: str) -> PlanWarning:
        """Build a warning carrying this rule's type, severity and ID."""
        return PlanWarning(
            type=self.warning_type,
            message=message,
            severity=self.severity,
            node_id=node.node_id,
            rule_id=self.rule_id,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule_id={self.rule_id!r}, version={self.version!r})"
