"""
Rule: Nested Loop Join

Redshift falls back to a nested loop when a join has no usable equality
condition, which usually means a cross join filtered after the fact.

Why it matters:
- The inner side is scanned once per outer row
- Runtime grows with the product of both inputs
- Often caused by a missing or non-equi join condition
"""

from __future__ import annotations

from planviz.analyzer.models import PlanWarning, WarningSeverity
from planviz.analyzer.registry import register_rule
from planviz.analyzer.rules.base import Rule
from planviz.models import NodeDetails

NESTED_LOOP_MESSAGE = (
    "⚠️ Nested Loop join detected. This can be very slow if the inner table is large. "
    "Consider adding proper join conditions or indexes. "
    "[Learn more](https://docs.aws.amazon.com/redshift/latest/dg/c_Nested_loop_join.html)"
)


@register_rule
class NestedLoopJoin(Rule):
    """Flag every Nested Loop operator."""

    rule_id = "NESTED_LOOP"
    version = "1.0.0"
    severity = WarningSeverity.HIGH
    description = "Detects nested loop joins (inner side rescanned per outer row)"

    def check(self, node: NodeDetails) -> PlanWarning | None:
        if "Nested Loop" not in node.operator:
            return None
        return self.make_warning(node, NESTED_LOOP_MESSAGE)
