"""
JSON schema definitions for stable CLI output.

The schema is versioned; breaking changes only in major versions.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NodeSchema(BaseModel):
    """Schema for one plan node."""

    model_config = ConfigDict(frozen=True)

    node_id: str = Field(..., description="Node identifier within this plan")
    operator: str = Field(..., description="Operator line")
    details: list[str] = Field(default_factory=list, description="All detail lines")
    inclusive_cost: float = Field(0.0, description="Declared total cost")
    exclusive_cost: float = Field(0.0, description="Self cost")
    severity: str | None = Field(None, description="Self cost classification (high/medium/low)")
    children: list[str] = Field(default_factory=list, description="Child node ids")


class WarningSchema(BaseModel):
    """Schema for one performance warning."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="warning or info")
    severity: str = Field(..., description="high or medium")
    message: str = Field(..., description="Message, may embed a markdown link")
    node_id: str = Field(..., description="Node the warning refers to")
    rule_id: str = Field("", description="Rule that emitted the warning")


class ThresholdsSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    high: float = 0.0
    medium: float = 0.0


class VisualizationSchema(BaseModel):
    """Schema for `planviz generate --format json`."""

    model_config = ConfigDict(frozen=True)

    version: str = Field("1.0", description="Schema version")
    theme: str = Field(..., description="Diagram theme")
    node_count: int = 0
    edge_count: int = 0
    thresholds: ThresholdsSchema = Field(default_factory=ThresholdsSchema)
    nodes: list[NodeSchema] = Field(default_factory=list)
    warnings: list[WarningSchema] = Field(default_factory=list)
    mermaid: str = Field("", description="Mermaid diagram source")


class DiffEntrySchema(BaseModel):
    """Schema for one classified node of a plan diff."""

    model_config = ConfigDict(frozen=True)

    status: str = Field(..., description="added/removed/changed/unchanged")
    operator: str = Field(..., description="Operator line of the displayed node")
    before_node_id: str | None = Field(None, description="Node id in the baseline plan")
    after_node_id: str | None = Field(None, description="Node id in the candidate plan")
    before_exclusive_cost: float | None = None
    after_exclusive_cost: float | None = None


class DiffSummarySchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    added: int = 0
    removed: int = 0
    changed: int = 0
    unchanged: int = 0


class DiffSchema(BaseModel):
    """Schema for `planviz compare --format json`."""

    model_config = ConfigDict(frozen=True)

    version: str = Field("1.0", description="Schema version")
    summary: DiffSummarySchema = Field(default_factory=DiffSummarySchema)
    entries: list[DiffEntrySchema] = Field(default_factory=list)
    mermaid: str = Field("", description="Combined diagram source")
