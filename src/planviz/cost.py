"""
Cost attribution for parsed plans.

Redshift reports inclusive costs: each node's total includes everything
below it. The interesting number for spotting hot spots is the exclusive
(self) cost, the part of the total that is not explained by children.

Severity thresholds are relative to the plan's own cost distribution, so
a plan always highlights its own worst offenders regardless of scale:

- high:   midway between the two largest distinct self costs
- medium: a third of the largest self cost
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from planviz.models import NodeDetails
from planviz.parser.models import ParsedPlan, PlanNode

logger = logging.getLogger(__name__)

# With a single distinct positive cost, anything above zero is high
HIGH_THRESHOLD_EPSILON = 1e-5
MEDIUM_THRESHOLD_RATIO = 0.33


class CostSeverity(str, Enum):
    """Self-cost classification of a node within its plan."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class CostThresholds:
    """Data-derived cutoffs separating low/medium/high self costs."""

    high: float = 0.0
    medium: float = 0.0

    def classify(self, exclusive_cost: float) -> CostSeverity | None:
        """
        Classify a self cost. Zero-cost nodes get no classification.

        Example:
            >>> CostThresholds(high=80.0, medium=33.0).classify(50.0)
            <CostSeverity.MEDIUM: 'medium'>
        """
        if exclusive_cost <= 0:
            return None
        if exclusive_cost >= self.high:
            return CostSeverity.HIGH
        if exclusive_cost >= self.medium:
            return CostSeverity.MEDIUM
        return CostSeverity.LOW


def exclusive_cost_of(node: PlanNode, plan: ParsedPlan) -> float:
    """
    Inclusive cost minus the children's inclusive costs, clamped to 0.

    Near-equal float costs can underflow slightly below zero; those and
    plans whose children declare more than their parent both yield 0.
    """
    children_total = sum(plan.nodes[i].inclusive_cost for i in node.children)
    return max(0.0, node.inclusive_cost - children_total)


def derive_thresholds(exclusive_costs: Iterable[float]) -> CostThresholds:
    """
    Derive severity thresholds from a plan's self costs.

    Args:
        exclusive_costs: Self cost of every node in the plan

    Returns:
        CostThresholds; both 0 when no cost is positive
    """
    distinct = sorted({c for c in exclusive_costs if c > 0}, reverse=True)
    if not distinct:
        return CostThresholds()

    max_cost = distinct[0]
    if len(distinct) > 1:
        high = (max_cost + distinct[1]) / 2
    else:
        high = HIGH_THRESHOLD_EPSILON

    return CostThresholds(high=high, medium=max_cost * MEDIUM_THRESHOLD_RATIO)


@dataclass(frozen=True)
class AnnotatedPlan:
    """
    A plan whose nodes all carry exclusive costs, plus its thresholds.

    This is the input of the graph emitter and the source of the
    node-details map consumed by the warning analyzer and the differ.
    """

    plan: ParsedPlan
    thresholds: CostThresholds

    @property
    def nodes(self) -> tuple[PlanNode, ...]:
        return self.plan.nodes

    @property
    def is_empty(self) -> bool:
        return self.plan.is_empty

    def severity_of(self, node: PlanNode) -> CostSeverity | None:
        return self.thresholds.classify(node.exclusive_cost or 0.0)

    def node_details(self) -> dict[str, NodeDetails]:
        """Map of node id to detail record, in encounter order."""
        return {node.node_id: node.to_details() for node in self.plan.nodes}


def attribute_costs(plan: ParsedPlan) -> AnnotatedPlan:
    """
    Compute every node's exclusive cost and the plan's thresholds.

    Runs as a single flat pass: the arena is complete, so every child's
    inclusive cost is already final when its parent is visited.
    """
    nodes = tuple(
        node.model_copy(update={"exclusive_cost": exclusive_cost_of(node, plan)})
        for node in plan.nodes
    )
    annotated = plan.model_copy(update={"nodes": nodes})
    thresholds = derive_thresholds(node.exclusive_cost or 0.0 for node in nodes)

    logger.debug(
        "Attributed costs for %d nodes (high >= %.5f, medium >= %.5f)",
        len(nodes), thresholds.high, thresholds.medium,
    )
    return AnnotatedPlan(plan=annotated, thresholds=thresholds)
