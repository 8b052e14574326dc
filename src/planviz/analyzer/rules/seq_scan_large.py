"""
Rule: Large Sequential Scan

Detects Seq Scan operators whose row estimate exceeds a fixed threshold.

Why it matters:
- Every block of the table is read
- Sort keys and selective filters let Redshift skip blocks entirely

When it's okay:
- Small tables, or queries that really need every row
"""

from __future__ import annotations

from pydantic import Field

from planviz.analyzer.models import PlanWarning, WarningSeverity
from planviz.analyzer.registry import register_rule
from planviz.analyzer.rules.base import Rule, RuleConfig
from planviz.models import NodeDetails
from planviz.parser.grammar import extract_rows


class SeqScanConfig(RuleConfig):
    """
    Configuration for large sequential scan detection.

    Attributes:
        row_threshold: Rows above which a scan is flagged (default 10,000)
    """

    row_threshold: int = Field(
        default=10_000,
        ge=0,
        description="Row estimate above which a Seq Scan is flagged",
    )


@register_rule
class SeqScanLargeTable(Rule):
    """Flag Seq Scan operators estimated to read many rows."""

    rule_id = "SEQ_SCAN_LARGE"
    version = "1.0.0"
    severity = WarningSeverity.MEDIUM
    description = "Detects sequential scans with a row estimate above row_threshold"
    config_schema = SeqScanConfig

    def check(self, node: NodeDetails) -> PlanWarning | None:
        config: SeqScanConfig = self.config  # type: ignore[assignment]

        if "Seq Scan" not in node.operator:
            return None

        rows = extract_rows(node.operator)
        if rows is None or rows <= config.row_threshold:
            return None

        return self.make_warning(
            node,
            f"⚠️ Large Seq Scan detected ({rows:,} rows). Consider adding a sort key or "
            "filter conditions to reduce the scan size. "
            "[Learn more](https://docs.aws.amazon.com/redshift/latest/dg/t_Analyzing_tables.html)",
        )
