"""
Rule: Expensive Hash Step

Detects Hash operators (Hash, Hash Join, HashAggregate) whose own cost,
excluding their inputs, is above a fixed threshold.
"""

from __future__ import annotations

from pydantic import Field

from planviz.analyzer.models import PlanWarning, WarningSeverity
from planviz.analyzer.registry import register_rule
from planviz.analyzer.rules.base import Rule, RuleConfig
from planviz.models import NodeDetails


class ExpensiveHashConfig(RuleConfig):
    """
    Configuration for expensive hash detection.

    Attributes:
        cost_threshold: Self cost above which a hash step is flagged (default 50)
    """

    cost_threshold: float = Field(
        default=50.0,
        ge=0,
        description="Self cost above which a hash step is flagged",
    )


@register_rule
class ExpensiveHash(Rule):
    """Flag hash steps with a high self cost."""

    rule_id = "EXPENSIVE_HASH"
    version = "1.0.0"
    severity = WarningSeverity.MEDIUM
    description = "Detects hash operations with a self cost above cost_threshold"
    config_schema = ExpensiveHashConfig

    def check(self, node: NodeDetails) -> PlanWarning | None:
        config: ExpensiveHashConfig = self.config  # type: ignore[assignment]

        if "Hash" not in node.operator or node.exclusive_cost <= config.cost_threshold:
            return None

        return self.make_warning(
            node,
            f"⚠️ Expensive Hash operation detected (exclusive cost: {node.exclusive_cost:.2f}). "
            "Consider if this hash step is necessary or if the data can be pre-sorted. "
            "[Learn more](https://docs.aws.amazon.com/redshift/latest/dg/c_Hash_join.html)",
        )
