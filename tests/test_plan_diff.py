"""
Tests for plan comparison.

Covers the four classifications, the combined diagram, and two behaviors
that follow from cost-stripped matching: matched nodes are still compared
on their full detail lines, and nodes sharing a key within one plan
collapse into one match.
"""

from __future__ import annotations

import pytest

from planviz.engine import COMPARISON_PRECONDITION_MESSAGE, diff_plans
from planviz.exceptions import ComparisonError
from planviz.models import NodeDetails
from planviz.plan_diff import (
    DIFF_STYLES,
    DiffEntry,
    DiffStatus,
    DiffSummary,
    diff_node_maps,
    normalize_key,
)


def replace_line(text: str, old: str, new: str) -> str:
    assert old in text
    return text.replace(old, new)


class TestClassification:

    def test_self_diff_is_all_unchanged(self, broadcast_plan: str) -> None:
        summary = diff_plans(broadcast_plan, broadcast_plan).summary

        assert summary == DiffSummary(added=0, removed=0, changed=0, unchanged=4)
        assert not summary.has_differences

    def test_self_diff_nested_loop(self, nested_loop_plan: str) -> None:
        summary = diff_plans(nested_loop_plan, nested_loop_plan).summary

        assert summary.unchanged == 3
        assert summary.total == 3

    def test_cost_change_is_changed_not_added(self, broadcast_plan: str) -> None:
        after = replace_line(
            broadcast_plan,
            "XN Hash Join DS_BCAST_INNER  (cost=0.00..118.00",
            "XN Hash Join DS_BCAST_INNER  (cost=0.00..139.00",
        )
        after = replace_line(
            after,
            "XN Seq Scan on a  (cost=0.00..59.00",
            "XN Seq Scan on a  (cost=0.00..80.00",
        )
        diff = diff_plans(broadcast_plan, after)

        assert diff.summary == DiffSummary(added=0, removed=0, changed=2, unchanged=2)
        assert [e.node_id for e in diff.changed] == ["node0", "node1"]
        assert diff.changed[1].before.exclusive_cost == 59.0
        assert diff.changed[1].after.exclusive_cost == 80.0

    def test_replaced_table_is_removed_and_added(self, broadcast_plan: str) -> None:
        after = replace_line(broadcast_plan, "XN Seq Scan on b", "XN Seq Scan on c")
        diff = diff_plans(broadcast_plan, after)

        assert diff.summary == DiffSummary(added=1, removed=1, changed=0, unchanged=3)
        assert diff.removed[0].node.operator.startswith("XN Seq Scan on b")
        assert diff.added[0].node.operator.startswith("XN Seq Scan on c")

    def test_extra_node_is_added(self, broadcast_plan: str) -> None:
        after = broadcast_plan.rstrip("\n") + "\n  ->  XN Seq Scan on d  (cost=0.00..1.00 rows=1 width=4)\n"
        diff = diff_plans(broadcast_plan, after)

        assert diff.summary.added == 1
        assert diff.summary.removed == 0
        assert diff.added[0].node_id == "node4"

    def test_shifted_self_cost_is_changed(self) -> None:
        before = {"node0": NodeDetails(node_id="node0", details=("XN Hash",), exclusive_cost=10.0)}
        after = {"node0": NodeDetails(node_id="node0", details=("XN Hash",), exclusive_cost=12.0)}

        assert diff_node_maps(before, after).summary.changed == 1


class TestMatchingKey:

    def test_key_ignores_costs(self) -> None:
        a = NodeDetails(node_id="node0", details=("XN Hash  (cost=0.00..59.00 rows=1 width=4)",))
        b = NodeDetails(node_id="node9", details=("XN Hash  (cost=5.00..590.00 rows=1 width=4)",))

        assert normalize_key(a) == normalize_key(b)

    def test_key_keeps_rows(self) -> None:
        a = NodeDetails(node_id="node0", details=("XN Hash  (cost=0.00..59.00 rows=1 width=4)",))
        b = NodeDetails(node_id="node0", details=("XN Hash  (cost=0.00..59.00 rows=2 width=4)",))

        assert normalize_key(a) != normalize_key(b)

    def test_cost_inside_detail_line_marks_changed(self) -> None:
        # Same key, but the full detail lines still differ
        operator = "XN Seq Scan on t  (cost=0.00..10.00 rows=5 width=4)"
        before = {"node0": NodeDetails(
            node_id="node0",
            details=(operator, "Filter: (note = 'cost=1.00..2.00')"),
            exclusive_cost=10.0,
        )}
        after = {"node0": NodeDetails(
            node_id="node0",
            details=(operator, "Filter: (note = 'cost=3.00..4.00')"),
            exclusive_cost=10.0,
        )}

        assert normalize_key(before["node0"]) == normalize_key(after["node0"])
        assert diff_node_maps(before, after).summary == DiffSummary(changed=1)

    def test_duplicate_keys_collapse_later_wins(self) -> None:
        scan = ("XN Seq Scan on a  (cost=0.00..59.00 rows=1000 width=4)",)
        nodes = {
            "node1": NodeDetails(node_id="node1", details=scan, exclusive_cost=59.0),
            "node3": NodeDetails(node_id="node3", details=scan, exclusive_cost=59.0),
        }
        diff = diff_node_maps(nodes, nodes)

        assert diff.summary == DiffSummary(unchanged=1)
        assert diff.unchanged[0].node_id == "node3"

    def test_self_diff_of_repeated_subtree_undercounts(self) -> None:
        text = "\n".join([
            "XN Append  (cost=0.00..20.00)",
            "  ->  XN Seq Scan on a  (cost=0.00..10.00 rows=1 width=4)",
            "  ->  XN Seq Scan on a  (cost=0.00..10.00 rows=1 width=4)",
        ])
        summary = diff_plans(text, text).summary

        assert summary.unchanged == 2
        assert summary.total == 2


class TestCombinedGraph:

    def test_self_diff_graph(self, broadcast_plan: str) -> None:
        graph = diff_plans(broadcast_plan, broadcast_plan).combined_graph

        assert len(graph.nodes) == 4
        assert graph.nodes[0].startswith('node0["Unchanged: XN Hash Join DS_BCAST_INNER')
        assert graph.edges == ("node0 --> node1", "node0 --> node2", "node2 --> node3")
        assert graph.styles[0] == "style node0 fill:#ccffcc,stroke:#4CAF50,stroke-width:2px"

    def test_entry_order_and_styles(self, broadcast_plan: str) -> None:
        after = replace_line(broadcast_plan, "XN Seq Scan on b", "XN Seq Scan on c")
        after = replace_line(
            after,
            "XN Seq Scan on a  (cost=0.00..59.00",
            "XN Seq Scan on a  (cost=0.00..60.00",
        )
        diff = diff_plans(broadcast_plan, after)

        statuses = [e.status for e in diff.entries]
        assert statuses[0] == DiffStatus.REMOVED
        assert statuses[-1] == DiffStatus.CHANGED
        assert statuses.index(DiffStatus.UNCHANGED) < statuses.index(DiffStatus.ADDED)

        labels = [decl.split('["', 1)[1] for decl in diff.combined_graph.nodes]
        assert labels[0].startswith("Removed: XN Seq Scan on b")

        fills = [s.split(" ", 2)[2] for s in diff.combined_graph.styles]
        assert fills[0] == "fill:#ffcccc,stroke:#f44336,stroke-width:2px"
        assert fills[-1] == "fill:#ffffcc,stroke:#FFC107,stroke-width:2px"

    def test_edges_are_union_of_both_plans(self, broadcast_plan: str, nested_loop_plan: str) -> None:
        graph = diff_plans(broadcast_plan, nested_loop_plan).combined_graph

        assert graph.edges == ("node0 --> node1", "node0 --> node2", "node2 --> node3")

    @pytest.mark.parametrize(
        "status,fill,stroke",
        [
            (DiffStatus.REMOVED, "#ffcccc", "#f44336"),
            (DiffStatus.UNCHANGED, "#ccffcc", "#4CAF50"),
            (DiffStatus.ADDED, "#cce0ff", "#2196F3"),
            (DiffStatus.CHANGED, "#ffffcc", "#FFC107"),
        ],
    )
    def test_diff_palette(self, status: DiffStatus, fill: str, stroke: str) -> None:
        assert DIFF_STYLES[status].fill == fill
        assert DIFF_STYLES[status].stroke == stroke


class TestEntries:

    def test_displayed_node(self) -> None:
        a = NodeDetails(node_id="node1", details=("XN Hash",))
        b = NodeDetails(node_id="node2", details=("XN Hash",))

        assert DiffEntry(DiffStatus.REMOVED, before=a).node_id == "node1"
        assert DiffEntry(DiffStatus.UNCHANGED, before=a, after=b).node_id == "node1"
        assert DiffEntry(DiffStatus.CHANGED, before=a, after=b).node_id == "node2"
        assert DiffEntry(DiffStatus.ADDED, after=b).label == "Added: XN Hash"


class TestPreconditions:

    @pytest.mark.parametrize(
        "text_a,text_b",
        [("", "plan"), ("plan", ""), (None, "plan"), ("plan", None), ("   ", "plan")],
    )
    def test_missing_plan(self, text_a: str | None, text_b: str | None) -> None:
        with pytest.raises(ComparisonError) as exc_info:
            diff_plans(text_a, text_b)

        assert exc_info.value.message == COMPARISON_PRECONDITION_MESSAGE


class TestSummary:

    def test_to_text(self) -> None:
        summary = DiffSummary(added=1, removed=2, changed=3, unchanged=4)

        assert summary.to_text() == (
            "Comparison Results:\n"
            "Added Nodes: 1\n"
            "Removed Nodes: 2\n"
            "Changed Nodes: 3\n"
            "Unchanged Nodes: 4\n"
        )
        assert summary.total == 10
        assert summary.to_dict() == {"added": 1, "removed": 2, "changed": 3, "unchanged": 4}
