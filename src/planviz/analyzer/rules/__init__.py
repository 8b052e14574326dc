"""Warning rules. Import order is registration order."""

from planviz.analyzer.rules.base import Rule, RuleConfig
from planviz.analyzer.rules.nested_loop import NestedLoopJoin
from planviz.analyzer.rules.seq_scan_large import SeqScanConfig, SeqScanLargeTable
from planviz.analyzer.rules.broadcast import BroadcastDistribution
from planviz.analyzer.rules.expensive_hash import ExpensiveHash, ExpensiveHashConfig

__all__ = [
    "Rule",
    "RuleConfig",
    "NestedLoopJoin",
    "SeqScanLargeTable",
    "SeqScanConfig",
    "BroadcastDistribution",
    "ExpensiveHash",
    "ExpensiveHashConfig",
]
