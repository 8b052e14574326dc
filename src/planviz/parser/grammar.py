"""
Annotation grammar for Redshift EXPLAIN text.

Two annotations carry numbers the engine cares about:

    cost=<startup>..<total>     e.g. cost=0.00..118.00, cost=1..2, cost=1.5e+06..2e6
    rows=<count>                e.g. rows=1000

Kept apart from tree building so numeric edge cases can be tested on
their own.
"""

from __future__ import annotations

import re

# A float without a trailing dot, so "1..2" splits into "1" and "2"
_NUMBER = r"(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?"

COST_PATTERN = re.compile(rf"cost=({_NUMBER})\.\.({_NUMBER})")
ROWS_PATTERN = re.compile(r"rows=(\d+)")

CHILD_MARKER = "->"


def extract_cost(line: str) -> float:
    """
    Total (inclusive) cost of the first cost annotation in a line.

    Returns 0.0 when the line has no recognizable annotation.

    Example:
        >>> extract_cost("XN Seq Scan on a  (cost=0.00..59.00 rows=1000 width=4)")
        59.0
    """
    match = COST_PATTERN.search(line)
    if match is None:
        return 0.0
    return float(match.group(2))


def extract_rows(line: str) -> int | None:
    """Row estimate of the first rows= annotation in a line, or None."""
    match = ROWS_PATTERN.search(line)
    if match is None:
        return None
    return int(match.group(1))


def strip_costs(text: str) -> str:
    """Remove every cost annotation from a string."""
    return COST_PATTERN.sub("", text)


def is_child_line(content: str) -> bool:
    """True for a stripped line that opens a child node."""
    return content.startswith(CHILD_MARKER)


def strip_child_marker(content: str) -> str:
    """Operator text of a child line: the marker and following whitespace removed."""
    return content[len(CHILD_MARKER):].lstrip()


def indentation_of(line: str) -> int:
    """Count of leading whitespace characters."""
    return len(line) - len(line.lstrip())
