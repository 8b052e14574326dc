"""
Pydantic models for a parsed Redshift EXPLAIN plan.

The plan is an arena: nodes live in a tuple and refer to each other by
integer index. Index order is encounter order in the source text, which
is also the order every consumer iterates in.

- PlanNode: One operator with its detail lines and declared cost
- ParsedPlan: The arena plus the parent/child edges in encounter order
"""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field

from planviz.models import NodeDetails, node_id_for


class PlanNode(BaseModel):
    """
    A single node in the query plan tree.

    `inclusive_cost` is the planner's cumulative cost for this node and
    everything below it. `exclusive_cost` stays None until cost
    attribution has run over the whole arena.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Position in the plan arena")
    details: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Operator line followed by annotation lines",
    )
    inclusive_cost: float = Field(
        default=0.0,
        ge=0,
        description="Declared total cost (B of cost=A..B)",
    )
    exclusive_cost: float | None = Field(
        default=None,
        description="Self cost, set by cost attribution",
    )
    children: tuple[int, ...] = Field(
        default_factory=tuple,
        description="Child indices in encounter order",
    )
    parent: int | None = Field(default=None, description="Parent index, None for a root")
    indentation: int = Field(default=0, ge=0, description="Leading whitespace of the operator line")
    depth: int = Field(default=0, ge=0, description="Depth in the tree (0 = root)")
    from_child_line: bool = Field(default=False, description="Opened by a `->` line")

    @property
    def node_id(self) -> str:
        """Public identifier, e.g. "node3"."""
        return node_id_for(self.index)

    @property
    def operator(self) -> str:
        """The operator line (first detail line)."""
        return self.details[0] if self.details else ""

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def to_details(self) -> NodeDetails:
        """Detail record consumed by the analyzer and differ."""
        return NodeDetails(
            node_id=self.node_id,
            details=self.details,
            exclusive_cost=self.exclusive_cost or 0.0,
        )


class ParsedPlan(BaseModel):
    """
    Result of parsing one plan text.

    Attributes:
        nodes: Arena of nodes; `nodes[i].index == i`
        edges: (parent index, child index) pairs in encounter order
    """

    model_config = ConfigDict(frozen=True)

    nodes: tuple[PlanNode, ...] = Field(default_factory=tuple)
    edges: tuple[tuple[int, int], ...] = Field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> PlanNode | None:
        """
        The plan root, or None for an empty plan.

        A leading non-`->` line is always the root. Text made only of `->`
        lines is rooted at the least indented one, the first on ties.
        """
        roots = self.roots
        if not roots:
            return None
        if not roots[0].from_child_line:
            return roots[0]
        return min(roots, key=lambda node: node.indentation)

    @property
    def roots(self) -> list[PlanNode]:
        """
        All parentless nodes.

        Well-formed plans have exactly one. A `->` line indented no deeper
        than the first node closes the whole stack and starts another.
        """
        return [node for node in self.nodes if node.is_root]

    @property
    def is_costed(self) -> bool:
        """True once cost attribution has set every exclusive cost."""
        return all(node.exclusive_cost is not None for node in self.nodes)

    def get(self, node_id: str) -> PlanNode | None:
        """Look up a node by its public identifier."""
        if not node_id.startswith("node"):
            return None
        try:
            index = int(node_id[len("node"):])
        except ValueError:
            return None
        if 0 <= index < len(self.nodes):
            return self.nodes[index]
        return None

    def children_of(self, node: PlanNode) -> list[PlanNode]:
        return [self.nodes[i] for i in node.children]

    def iter_nodes(self) -> Iterator[PlanNode]:
        """Nodes in encounter order."""
        yield from self.nodes

    def iter_depth_first(self) -> Iterator[PlanNode]:
        """Nodes depth-first from each root, children in encounter order."""

        def _walk(node: PlanNode) -> Iterator[PlanNode]:
            yield node
            for child in self.children_of(node):
                yield from _walk(child)

        for root in self.roots:
            yield from _walk(root)
