"""
Structural diff between two plans.

Nodes are matched across plans by a normalization key: their detail lines
joined with every cost annotation stripped. Matched nodes are then
compared on their full detail lines and self cost, so a cost embedded in
a filter condition, or a shifted self cost, still marks them as changed.

Within one plan, nodes with the same key overwrite each other in the
lookup (the later node wins). Repeated identical subtrees therefore
collapse into one match.

Usage:
    from planviz.plan_diff import diff_node_maps

    diff = diff_node_maps(before.node_details(), after.node_details())
    print(diff.summary.to_text())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from planviz.graph.emitter import GraphDescription, escape_label, node_declaration
from planviz.graph.styles import NodeStyle
from planviz.models import NodeDetails
from planviz.parser.grammar import strip_costs

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "|"


class DiffStatus(str, Enum):
    """Classification of a node across two plans."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


DIFF_STYLES: dict[DiffStatus, NodeStyle] = {
    DiffStatus.REMOVED: NodeStyle(fill="#ffcccc", stroke="#f44336"),
    DiffStatus.UNCHANGED: NodeStyle(fill="#ccffcc", stroke="#4CAF50"),
    DiffStatus.ADDED: NodeStyle(fill="#cce0ff", stroke="#2196F3"),
    DiffStatus.CHANGED: NodeStyle(fill="#ffffcc", stroke="#FFC107"),
}


@dataclass(frozen=True)
class DiffEntry:
    """
    One classified node.

    `before` is set for removed/changed/unchanged, `after` for
    added/changed/unchanged.
    """

    status: DiffStatus
    before: NodeDetails | None = None
    after: NodeDetails | None = None

    @property
    def node(self) -> NodeDetails:
        """The node shown in the combined diagram."""
        if self.status in (DiffStatus.REMOVED, DiffStatus.UNCHANGED):
            assert self.before is not None
            return self.before
        assert self.after is not None
        return self.after

    @property
    def node_id(self) -> str:
        return self.node.node_id

    @property
    def label(self) -> str:
        return f"{self.status.value.capitalize()}: {self.node.operator}"


@dataclass(frozen=True)
class DiffSummary:
    """Counts per classification."""

    added: int = 0
    removed: int = 0
    changed: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed + self.changed + self.unchanged

    @property
    def has_differences(self) -> bool:
        return bool(self.added or self.removed or self.changed)

    def to_dict(self) -> dict[str, int]:
        return {
            "added": self.added,
            "removed": self.removed,
            "changed": self.changed,
            "unchanged": self.unchanged,
        }

    def to_text(self) -> str:
        return (
            "Comparison Results:\n"
            f"Added Nodes: {self.added}\n"
            f"Removed Nodes: {self.removed}\n"
            f"Changed Nodes: {self.changed}\n"
            f"Unchanged Nodes: {self.unchanged}\n"
        )


@dataclass(frozen=True)
class PlanDiff:
    """Result of comparing a baseline plan (A) with a candidate plan (B)."""

    added: tuple[DiffEntry, ...] = ()
    removed: tuple[DiffEntry, ...] = ()
    changed: tuple[DiffEntry, ...] = ()
    unchanged: tuple[DiffEntry, ...] = ()
    combined_graph: GraphDescription = field(default_factory=GraphDescription)

    @property
    def summary(self) -> DiffSummary:
        return DiffSummary(
            added=len(self.added),
            removed=len(self.removed),
            changed=len(self.changed),
            unchanged=len(self.unchanged),
        )

    @property
    def entries(self) -> list[DiffEntry]:
        """All entries in combined-diagram order."""
        return [*self.removed, *self.unchanged, *self.added, *self.changed]


def normalize_key(node: NodeDetails) -> str:
    """Cost-stripped structural fingerprint of a node."""
    return strip_costs(KEY_SEPARATOR.join(node.details))


def _index_by_key(node_map: Mapping[str, NodeDetails]) -> dict[str, NodeDetails]:
    index: dict[str, NodeDetails] = {}
    for node in node_map.values():
        # Later nodes overwrite earlier ones with the same key
        index[normalize_key(node)] = node
    return index


def _is_changed(before: NodeDetails, after: NodeDetails) -> bool:
    return before.details != after.details or before.exclusive_cost != after.exclusive_cost


def build_combined_graph(
    entries: Iterable[DiffEntry],
    edges_before: Iterable[str],
    edges_after: Iterable[str],
) -> GraphDescription:
    """
    Diagram of a diff: one styled node per entry, edges of both plans.

    Removed/unchanged nodes use plan A's ids, added/changed nodes plan B's.
    Edges are the literal-string union of both edge lists.
    """
    nodes: list[str] = []
    styles: list[str] = []
    for entry in entries:
        nodes.append(node_declaration(entry.node_id, escape_label(entry.label)))
        styles.append(DIFF_STYLES[entry.status].declaration(entry.node_id))

    edges = tuple(dict.fromkeys([*edges_before, *edges_after]))
    return GraphDescription(nodes=tuple(nodes), edges=edges, styles=tuple(styles))


def diff_node_maps(
    before: Mapping[str, NodeDetails],
    after: Mapping[str, NodeDetails],
    edges_before: Iterable[str] = (),
    edges_after: Iterable[str] = (),
) -> PlanDiff:
    """
    Classify the nodes of two plans as added / removed / changed / unchanged.

    Args:
        before: Node details of the baseline plan (A)
        after: Node details of the candidate plan (B)
        edges_before: Edge declarations of plan A, for the combined graph
        edges_after: Edge declarations of plan B, for the combined graph

    Returns:
        PlanDiff with the four lists, summary and combined graph
    """
    index_before = _index_by_key(before)
    index_after = _index_by_key(after)

    added: list[DiffEntry] = []
    changed: list[DiffEntry] = []
    unchanged: list[DiffEntry] = []

    for key, node_after in index_after.items():
        node_before = index_before.get(key)
        if node_before is None:
            added.append(DiffEntry(DiffStatus.ADDED, after=node_after))
        elif _is_changed(node_before, node_after):
            changed.append(DiffEntry(DiffStatus.CHANGED, before=node_before, after=node_after))
        else:
            unchanged.append(DiffEntry(DiffStatus.UNCHANGED, before=node_before, after=node_after))

    removed = [
        DiffEntry(DiffStatus.REMOVED, before=node_before)
        for key, node_before in index_before.items()
        if key not in index_after
    ]

    entries = [*removed, *unchanged, *added, *changed]
    diff = PlanDiff(
        added=tuple(added),
        removed=tuple(removed),
        changed=tuple(changed),
        unchanged=tuple(unchanged),
        combined_graph=build_combined_graph(entries, edges_before, edges_after),
    )

    logger.debug("Plan diff: %s", diff.summary.to_dict())
    return diff
