"""planviz - Redshift EXPLAIN plan visualizer, cost attributor and differ."""

__version__ = "0.3.0"
__license__ = "MIT"

# Exception hierarchy (import first so other modules can use it)
from planviz.exceptions import (
    PlanVizError,
    ParseError,
    ComparisonError,
    RenderError,
    ConfigurationError,
)

# Public API exports
from planviz.analyzer.models import PlanWarning, WarningSeverity, WarningType
from planviz.config import Config, get_config, reset_config
from planviz.cost import AnnotatedPlan, CostSeverity, CostThresholds, attribute_costs
from planviz.engine import (
    GenerateReport,
    PlanVisualization,
    VisualizationService,
    analyze_warnings,
    diff_plans,
    parse_plan,
)
from planviz.graph.emitter import GraphDescription
from planviz.models import NodeDetails, Theme
from planviz.parser.models import ParsedPlan, PlanNode
from planviz.parser.parser import parse_plan_text
from planviz.plan_diff import DiffEntry, DiffStatus, DiffSummary, PlanDiff
from planviz.render import (
    DiagramRenderer,
    MermaidCliRenderer,
    RenderedDiagram,
    render_diagram,
)

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "PlanVizError",
    "ParseError",
    "ComparisonError",
    "RenderError",
    "ConfigurationError",
    # Pipeline
    "parse_plan",
    "analyze_warnings",
    "diff_plans",
    "VisualizationService",
    "PlanVisualization",
    "GenerateReport",
    # Parsing and costs
    "parse_plan_text",
    "ParsedPlan",
    "PlanNode",
    "NodeDetails",
    "attribute_costs",
    "AnnotatedPlan",
    "CostSeverity",
    "CostThresholds",
    # Diagrams
    "Theme",
    "GraphDescription",
    "DiagramRenderer",
    "MermaidCliRenderer",
    "RenderedDiagram",
    "render_diagram",
    # Warnings
    "PlanWarning",
    "WarningSeverity",
    "WarningType",
    # Diff
    "PlanDiff",
    "DiffEntry",
    "DiffStatus",
    "DiffSummary",
    # Configuration
    "Config",
    "get_config",
    "reset_config",
]
