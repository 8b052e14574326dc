"""
Rule: Broadcast Redistribution

DS_BCAST_INNER copies the whole inner table to every compute node.
Cheap for a small dimension table, expensive for anything large.
"""

from __future__ import annotations

from planviz.analyzer.models import PlanWarning, WarningSeverity, WarningType
from planviz.analyzer.registry import register_rule
from planviz.analyzer.rules.base import Rule
from planviz.models import NodeDetails

BROADCAST_MESSAGE = (
    "ℹ️ Broadcast operation detected. Ensure the inner table being broadcast is small "
    "to avoid high network traffic. "
    "[Learn more](https://docs.aws.amazon.com/redshift/latest/dg/r_SVL_QUERY_REPORT.html#r_SVL_QUERY_REPORT-ds_bcast_inner)"
)


@register_rule
class BroadcastDistribution(Rule):
    """Report DS_BCAST redistribution steps."""

    rule_id = "BROADCAST"
    version = "1.0.0"
    severity = WarningSeverity.MEDIUM
    warning_type = WarningType.INFO
    description = "Reports DS_BCAST steps that copy a table to every node"

    def check(self, node: NodeDetails) -> PlanWarning | None:
        if "DS_BCAST" not in node.operator:
            return None
        return self.make_warning(node, BROADCAST_MESSAGE)
