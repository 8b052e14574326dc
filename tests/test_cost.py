"""Tests for exclusive cost attribution and adaptive severity thresholds."""

from __future__ import annotations

import pytest

from planviz.cost import (
    HIGH_THRESHOLD_EPSILON,
    CostSeverity,
    CostThresholds,
    attribute_costs,
    derive_thresholds,
)
from planviz.parser import parse_plan_text


class TestExclusiveCost:

    def test_root_cost_fully_explained_by_children(self, broadcast_plan: str) -> None:
        annotated = attribute_costs(parse_plan_text(broadcast_plan))

        assert [n.exclusive_cost for n in annotated.nodes] == [0.0, 59.0, 0.0, 59.0]
        assert annotated.plan.is_costed

    def test_partial_attribution(self, expensive_hash_plan: str) -> None:
        annotated = attribute_costs(parse_plan_text(expensive_hash_plan))

        assert [n.exclusive_cost for n in annotated.nodes] == [80.0, 100.0, 80.0, 40.0]

    def test_clamped_at_zero(self) -> None:
        text = "\n".join([
            "XN Hash Join  (cost=0.00..50.00)",
            "  ->  XN Seq Scan on a  (cost=0.00..40.00)",
            "  ->  XN Seq Scan on b  (cost=0.00..40.00)",
        ])
        annotated = attribute_costs(parse_plan_text(text))

        assert annotated.nodes[0].exclusive_cost == 0.0

    def test_leaf_exclusive_equals_inclusive(self, nested_loop_plan: str) -> None:
        annotated = attribute_costs(parse_plan_text(nested_loop_plan))

        for node in annotated.nodes:
            if node.is_leaf:
                assert node.exclusive_cost == node.inclusive_cost

    def test_bounded_by_inclusive(self, broadcast_plan: str, nested_loop_plan: str) -> None:
        for text in (broadcast_plan, nested_loop_plan):
            annotated = attribute_costs(parse_plan_text(text))
            assert all(0 <= (n.exclusive_cost or 0.0) <= n.inclusive_cost for n in annotated.nodes)

    def test_deterministic(self, nested_loop_plan: str) -> None:
        plan = parse_plan_text(nested_loop_plan)

        assert attribute_costs(plan) == attribute_costs(plan)

    def test_input_plan_untouched(self, broadcast_plan: str) -> None:
        plan = parse_plan_text(broadcast_plan)
        attribute_costs(plan)

        assert not plan.is_costed

    def test_empty_plan(self) -> None:
        annotated = attribute_costs(parse_plan_text(""))

        assert annotated.is_empty
        assert annotated.thresholds == CostThresholds(high=0.0, medium=0.0)
        assert annotated.node_details() == {}


class TestThresholds:

    def test_no_positive_costs(self) -> None:
        assert derive_thresholds([]) == CostThresholds(0.0, 0.0)
        assert derive_thresholds([0.0, 0.0]) == CostThresholds(0.0, 0.0)

    def test_single_distinct_cost(self) -> None:
        thresholds = derive_thresholds([0.0, 59.0, 0.0, 59.0])

        assert thresholds.high == HIGH_THRESHOLD_EPSILON
        assert thresholds.medium == pytest.approx(59.0 * 0.33)

    def test_midpoint_of_top_two(self) -> None:
        thresholds = derive_thresholds([100.0, 50.0, 10.0, 0.0])

        assert thresholds.high == pytest.approx(75.0)
        assert thresholds.medium == pytest.approx(33.0)

    def test_duplicates_do_not_count_twice(self) -> None:
        thresholds = derive_thresholds([100.0, 100.0, 20.0])

        assert thresholds.high == pytest.approx(60.0)


class TestClassify:

    @pytest.mark.parametrize(
        "cost,expected",
        [
            (100.0, CostSeverity.HIGH),
            (75.0, CostSeverity.HIGH),
            (50.0, CostSeverity.MEDIUM),
            (33.0, CostSeverity.MEDIUM),
            (10.0, CostSeverity.LOW),
            (0.0, None),
        ],
    )
    def test_bands(self, cost: float, expected: CostSeverity | None) -> None:
        assert CostThresholds(high=75.0, medium=33.0).classify(cost) is expected

    def test_single_cost_plan_is_high(self, broadcast_plan: str) -> None:
        annotated = attribute_costs(parse_plan_text(broadcast_plan))

        severities = [annotated.severity_of(n) for n in annotated.nodes]
        assert severities == [None, CostSeverity.HIGH, None, CostSeverity.HIGH]

    def test_dominant_node_is_high(self, nested_loop_plan: str) -> None:
        annotated = attribute_costs(parse_plan_text(nested_loop_plan))

        severities = [annotated.severity_of(n) for n in annotated.nodes]
        assert severities == [CostSeverity.HIGH, CostSeverity.LOW, CostSeverity.LOW]


class TestNodeDetails:

    def test_encounter_order_and_values(self, broadcast_plan: str) -> None:
        details = attribute_costs(parse_plan_text(broadcast_plan)).node_details()

        assert list(details) == ["node0", "node1", "node2", "node3"]
        assert details["node0"].details[1] == "Hash Cond: (a.id = b.id)"
        assert details["node3"].exclusive_cost == 59.0
        assert details["node3"].operator.startswith("XN Seq Scan on b")
