"""
Parser for Redshift EXPLAIN text output.

The plan is indentation-delimited:

    XN Hash Join DS_BCAST_INNER  (cost=0.00..118.00 rows=1000 width=8)
      Hash Cond: (a.id = b.id)
      ->  XN Seq Scan on a  (cost=0.00..59.00 rows=1000 width=4)
      ->  XN Hash  (cost=0.00..59.00 rows=1000 width=4)
            ->  XN Seq Scan on b  (cost=0.00..59.00 rows=1000 width=4)

Lines starting with `->` open a node; the nearest open node with a
smaller indentation is its parent. Any other line is a detail of the most
recently opened node, except the very first one, which opens the root.

Error handling philosophy: malformed annotations are not errors. A line
without a recognizable cost just contributes cost 0. Anything that goes
wrong beyond that is reported as a ParseError with the original message,
and no partial plan is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from planviz.exceptions import ParseError
from planviz.parser.config import DEFAULT_CONFIG, ParserConfig
from planviz.parser.grammar import (
    extract_cost,
    indentation_of,
    is_child_line,
    strip_child_marker,
)
from planviz.parser.models import ParsedPlan, PlanNode

logger = logging.getLogger(__name__)


@dataclass
class _NodeDraft:
    """A node while its lines are still being collected."""

    index: int
    indentation: int
    depth: int
    parent: int | None
    details: list[str]
    inclusive_cost: float
    from_child_line: bool = False
    children: list[int] = field(default_factory=list)

    def freeze(self) -> PlanNode:
        return PlanNode(
            index=self.index,
            details=tuple(self.details),
            inclusive_cost=self.inclusive_cost,
            children=tuple(self.children),
            parent=self.parent,
            indentation=self.indentation,
            depth=self.depth,
            from_child_line=self.from_child_line,
        )


@dataclass(frozen=True)
class _Frame:
    """One entry of the open-node stack."""

    index: int
    indentation: int


class _PlanBuilder:
    """
    Stack-based tree builder.

    The stack holds the path from the root to the most recently opened
    node, root first.
    """

    def __init__(self, config: ParserConfig) -> None:
        self._config = config
        self._drafts: list[_NodeDraft] = []
        self._edges: list[tuple[int, int]] = []
        self._stack: list[_Frame] = []

    def feed(self, line: str) -> None:
        indentation = indentation_of(line)
        content = line.strip()

        if is_child_line(content):
            self._open_child(strip_child_marker(content), indentation, extract_cost(content))
        elif not self._stack:
            self._open_node(content, indentation, extract_cost(content), parent=None)
        else:
            self._append_detail(content)

    def _open_child(self, operator: str, indentation: int, cost: float) -> None:
        # >= so that a sibling closes the previous sibling
        while self._stack and self._stack[-1].indentation >= indentation:
            self._stack.pop()

        parent = self._stack[-1].index if self._stack else None
        self._open_node(operator, indentation, cost, parent=parent, from_child_line=True)

    def _open_node(
        self,
        first_line: str,
        indentation: int,
        cost: float,
        parent: int | None,
        from_child_line: bool = False,
    ) -> None:
        index = len(self._drafts)
        if index >= self._config.max_nodes:
            raise ParseError(
                f"Plan too large: more than {self._config.max_nodes:,} nodes",
                detail="Consider analyzing a smaller plan or increasing max_nodes",
                source="resource_limit",
            )

        depth = len(self._stack)
        if depth >= self._config.max_depth:
            raise ParseError(
                f"Plan too deeply nested: depth {depth + 1} (max {self._config.max_depth})",
                detail="This may indicate corrupted EXPLAIN output",
                source="resource_limit",
            )

        if parent is not None:
            self._edges.append((parent, index))
            self._drafts[parent].children.append(index)

        self._drafts.append(
            _NodeDraft(
                index=index,
                indentation=indentation,
                depth=depth,
                parent=parent,
                details=[first_line],
                inclusive_cost=cost,
                from_child_line=from_child_line,
            )
        )
        self._stack.append(_Frame(index=index, indentation=indentation))

    def _append_detail(self, content: str) -> None:
        draft = self._drafts[self._stack[-1].index]
        draft.details.append(content)
        # Operator lines without a cost take the first one found in their annotations
        if draft.inclusive_cost == 0:
            cost = extract_cost(content)
            if cost > 0:
                draft.inclusive_cost = cost

    def build(self) -> ParsedPlan:
        return ParsedPlan(
            nodes=tuple(draft.freeze() for draft in self._drafts),
            edges=tuple(self._edges),
        )


def parse_plan_text(
    text: str,
    config: ParserConfig | None = None,
) -> ParsedPlan:
    """
    Parse Redshift EXPLAIN text into a plan arena.

    Empty or whitespace-only input yields an empty plan, not an error.
    Exclusive costs are left unset; run attribute_costs() on the result.

    Args:
        text: Raw plan text
        config: Parser limits. If None, uses DEFAULT_CONFIG.

    Returns:
        ParsedPlan with nodes in encounter order

    Raises:
        ParseError: If a resource limit is exceeded or the scan fails

    Example:
        >>> plan = parse_plan_text("XN Seq Scan on a  (cost=0.00..59.00 rows=1 width=4)")
        >>> plan.root.inclusive_cost
        59.0
    """
    config = config or DEFAULT_CONFIG
    _check_input_size(text, config)

    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return ParsedPlan()

    builder = _PlanBuilder(config)
    try:
        for line in lines:
            builder.feed(line)
        plan = builder.build()
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(
            str(e),
            detail=f"{type(e).__name__} while scanning plan text",
            source="scan",
        ) from e

    logger.debug(
        "Parsed plan: %d lines, %d nodes, %d edges",
        len(lines), plan.node_count, len(plan.edges),
    )
    return plan


def parse_plan_file(path: str | Path, config: ParserConfig | None = None) -> ParsedPlan:
    """
    Parse EXPLAIN text from a file.

    Raises:
        ParseError: If the file cannot be read or parsed
    """
    filepath = Path(path)

    if not filepath.is_file():
        raise ParseError(
            f"File not found: {filepath}",
            source="file_read",
        )

    return parse_plan_text(read_plan_file(filepath), config=config)


def read_plan_file(path: Path) -> str:
    """Read plan text, converting OS errors into ParseError."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(
            f"Cannot read file: {path}",
            detail=str(e),
            source="file_read",
        ) from e


def _check_input_size(text: str, config: ParserConfig) -> None:
    size_mb = len(text.encode("utf-8")) / (1024 * 1024)
    if size_mb > config.max_input_size_mb:
        raise ParseError(
            f"Plan text too large: {size_mb:.1f}MB (max {config.max_input_size_mb}MB)",
            detail="Use a smaller EXPLAIN output or increase max_input_size_mb",
            source="resource_limit",
        )
