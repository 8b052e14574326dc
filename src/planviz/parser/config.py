"""
Parser configuration with resource limits.

These limits stop pathological inputs (multi-megabyte pastes, runaway
indentation) from exhausting memory. The defaults are generous for
normal plans.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ParserConfig(BaseModel):
    """
    Configuration for the plan text parser.

    Attributes:
        max_input_size_mb: Maximum size of the plan text.
        max_nodes: Maximum number of `->` nodes (plus the root).
        max_depth: Maximum nesting depth of the node stack.

    Example:
        config = ParserConfig(max_nodes=1000)
        plan = parse_plan_text(text, config=config)
    """

    model_config = ConfigDict(frozen=True)

    max_input_size_mb: float = Field(
        default=10.0,
        gt=0,
        description="Maximum plan text size in megabytes",
    )

    max_nodes: int = Field(
        default=50_000,
        gt=0,
        description="Maximum number of plan nodes",
    )

    max_depth: int = Field(
        default=500,
        gt=0,
        description="Maximum tree depth (nesting level)",
    )


DEFAULT_CONFIG = ParserConfig()
