"""Warning analyzer: heuristic anti-pattern detection over plan nodes."""

from planviz.analyzer.analyzer import (
    WarningAnalyzer,
    analyze_warnings,
    build_rules,
    deduplicate_warnings,
    rule_overrides,
)
from planviz.analyzer.links import MessageLink, split_message_links, strip_message_links
from planviz.analyzer.models import PlanWarning, WarningSeverity, WarningType
from planviz.analyzer.registry import RuleRegistry, get_registry, register_rule
from planviz.analyzer.rules import Rule, RuleConfig

__all__ = [
    "WarningAnalyzer",
    "analyze_warnings",
    "build_rules",
    "deduplicate_warnings",
    "rule_overrides",
    "PlanWarning",
    "WarningSeverity",
    "WarningType",
    "MessageLink",
    "split_message_links",
    "strip_message_links",
    "Rule",
    "RuleConfig",
    "RuleRegistry",
    "get_registry",
    "register_rule",
]
