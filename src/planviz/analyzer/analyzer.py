"""
Warning analyzer - runs warning rules over a plan's node details.

Every rule sees every node that has at least one detail line; no rule
short-circuits another. Warnings come out in node order, and within one
node in rule registration order, then are deduplicated by exact message
text (first occurrence wins).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from planviz.analyzer.models import PlanWarning
from planviz.analyzer.registry import get_registry
from planviz.analyzer.rules.base import Rule

if TYPE_CHECKING:
    from planviz.config import Config
    from planviz.models import NodeDetails

logger = logging.getLogger(__name__)


def deduplicate_warnings(warnings: Iterable[PlanWarning]) -> list[PlanWarning]:
    """Drop warnings whose message was already seen, preserving order."""
    seen: set[str] = set()
    unique: list[PlanWarning] = []
    for warning in warnings:
        if warning.message in seen:
            continue
        seen.add(warning.message)
        unique.append(warning)
    return unique


def rule_overrides(config: "Config") -> dict[str, dict[str, Any]]:
    """Rule config values taken from the global configuration."""
    return {
        "SEQ_SCAN_LARGE": {"row_threshold": config.seq_scan_row_threshold},
        "EXPENSIVE_HASH": {"cost_threshold": config.hash_cost_threshold},
    }


def build_rules(config: "Config | None" = None) -> list[Rule]:
    """
    Instantiate the registered rules that are enabled in config.

    Args:
        config: planviz configuration. If None, uses get_config().
    """
    if config is None:
        from planviz.config import get_config

        config = get_config()

    registry = get_registry()
    disabled = {rule_id for rule_id in registry.all_ids() if not config.is_rule_enabled(rule_id)}
    if disabled:
        logger.debug("Rules disabled by configuration: %s", ", ".join(sorted(disabled)))

    overrides = rule_overrides(config)
    return [rule_cls(overrides.get(rule_cls.rule_id)) for rule_cls in registry.filter(exclude=disabled)]


class WarningAnalyzer:
    """
    Runs warning rules against a node-details map.

    Example:
        analyzer = WarningAnalyzer()
        warnings = analyzer.analyze(annotated.node_details())

        # Only specific rules
        analyzer = WarningAnalyzer(rules=[NestedLoopJoin()])
    """

    def __init__(
        self,
        rules: list[Rule] | None = None,
        config: "Config | None" = None,
    ) -> None:
        self.rules = rules if rules is not None else build_rules(config)

    def analyze(self, node_details: Mapping[str, "NodeDetails"]) -> list[PlanWarning]:
        """
        Scan every node and return deduplicated warnings.

        Nodes without detail lines are skipped.
        """
        warnings: list[PlanWarning] = []

        for node in node_details.values():
            if not node.details:
                continue
            for rule in self.rules:
                if not rule.config.enabled:
                    continue
                warning = rule.check(node)
                if warning is not None:
                    warnings.append(warning)

        unique = deduplicate_warnings(warnings)
        logger.debug(
            "Analyzed %d nodes with %d rules: %d warnings (%d after dedupe)",
            len(node_details), len(self.rules), len(warnings), len(unique),
        )
        return unique


def analyze_warnings(
    node_details: Mapping[str, "NodeDetails"],
    config: "Config | None" = None,
) -> list[PlanWarning]:
    """Run all enabled rules over a node-details map."""
    return WarningAnalyzer(config=config).analyze(node_details)
