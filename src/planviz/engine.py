"""
VisualizationService - orchestration layer for planviz.

The CLI and library callers should use this module rather than chaining
parser, cost attribution, emitter, analyzer and differ themselves.

Every call re-runs the whole pipeline from raw text; nothing is cached
or shared between calls.

Usage:
    from planviz.engine import VisualizationService, parse_plan, diff_plans

    viz = parse_plan(text, theme="dark")
    print(viz.mermaid)

    service = VisualizationService()
    report = service.generate(text)
    for warning in report.warnings:
        print(warning.message)

    diff = service.compare(text_a, text_b)
    print(diff.summary.to_text())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from planviz.analyzer.analyzer import WarningAnalyzer
from planviz.analyzer.models import PlanWarning
from planviz.config import Config, get_config
from planviz.cost import AnnotatedPlan, CostThresholds, attribute_costs
from planviz.exceptions import ComparisonError
from planviz.graph.emitter import GraphDescription, emit_graph
from planviz.graph.styles import style_table_for
from planviz.models import NodeDetails, Theme
from planviz.parser.config import ParserConfig
from planviz.parser.models import ParsedPlan
from planviz.parser.parser import parse_plan_text
from planviz.plan_diff import PlanDiff, diff_node_maps

logger = logging.getLogger(__name__)

COMPARISON_PRECONDITION_MESSAGE = "Please provide both Explain Plans for comparison."


@dataclass(frozen=True)
class PlanVisualization:
    """
    Everything derived from one plan text.

    `nodes`, `edges` and `styles` are the Mermaid declarations;
    `node_details` maps node ids to their detail lines and self cost.
    """

    theme: Theme
    annotated: AnnotatedPlan
    graph: GraphDescription
    node_details: dict[str, NodeDetails] = field(default_factory=dict)

    @property
    def nodes(self) -> tuple[str, ...]:
        return self.graph.nodes

    @property
    def edges(self) -> tuple[str, ...]:
        return self.graph.edges

    @property
    def styles(self) -> tuple[str, ...]:
        return self.graph.styles

    @property
    def plan(self) -> ParsedPlan:
        return self.annotated.plan

    @property
    def thresholds(self) -> CostThresholds:
        return self.annotated.thresholds

    @property
    def is_empty(self) -> bool:
        return self.annotated.is_empty

    @property
    def mermaid(self) -> str:
        """Diagram source, or an empty string for an empty plan."""
        if self.graph.is_empty:
            return ""
        return self.graph.to_mermaid()


@dataclass(frozen=True)
class GenerateReport:
    """Result of the "generate" pipeline: diagram plus warnings."""

    visualization: PlanVisualization
    warnings: tuple[PlanWarning, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def warnings_for(self, node_id: str) -> list[PlanWarning]:
        return [w for w in self.warnings if w.node_id == node_id]


def parse_plan(
    text: str,
    theme: Theme | str = Theme.LIGHT,
    parser_config: ParserConfig | None = None,
) -> PlanVisualization:
    """
    Parse plan text and derive its diagram and node details.

    The theme only selects diagram colors; it has no effect on parsing.

    Raises:
        ParseError: If the scan fails or a parser limit is exceeded
    """
    theme = Theme.from_string(theme)
    annotated = attribute_costs(parse_plan_text(text, config=parser_config))
    graph = emit_graph(annotated, style_table_for(theme))
    return PlanVisualization(
        theme=theme,
        annotated=annotated,
        graph=graph,
        node_details=annotated.node_details(),
    )


def analyze_warnings(
    node_details: dict[str, NodeDetails],
    config: Config | None = None,
) -> list[PlanWarning]:
    """Warnings for a node-details map, deduplicated by message."""
    return WarningAnalyzer(config=config).analyze(node_details)


def diff_plans(
    text_a: str | None,
    text_b: str | None,
    theme: Theme | str = Theme.LIGHT,
    parser_config: ParserConfig | None = None,
) -> PlanDiff:
    """
    Compare a baseline plan text (A) with a candidate plan text (B).

    Raises:
        ComparisonError: If either text is missing or blank
        ParseError: If either plan fails to parse
    """
    if not text_a or not text_a.strip() or not text_b or not text_b.strip():
        raise ComparisonError(COMPARISON_PRECONDITION_MESSAGE)

    before = parse_plan(text_a, theme, parser_config)
    after = parse_plan(text_b, theme, parser_config)
    return diff_node_maps(
        before.node_details,
        after.node_details,
        edges_before=before.edges,
        edges_after=after.edges,
    )


class VisualizationService:
    """
    Application layer for the "generate" and "compare" actions.

    Example:
        service = VisualizationService(theme=Theme.DARK)
        report = service.generate(text)
    """

    def __init__(
        self,
        config: Config | None = None,
        theme: Theme | str | None = None,
    ) -> None:
        self.config = config or get_config()
        self.theme = Theme.from_string(theme) if theme is not None else self.config.theme
        self._analyzer = WarningAnalyzer(config=self.config)

    def generate(self, text: str) -> GenerateReport:
        """
        Parse, attribute, emit and analyze one plan.

        Raises:
            ParseError: On failure; no partial report is produced
        """
        visualization = parse_plan(text, self.theme, self.config.parser_config())
        warnings = self._analyzer.analyze(visualization.node_details)
        logger.info(
            "Generated diagram: %d nodes, %d edges, %d warnings",
            len(visualization.nodes), len(visualization.edges), len(warnings),
        )
        return GenerateReport(visualization=visualization, warnings=tuple(warnings))

    def compare(self, text_a: str | None, text_b: str | None) -> PlanDiff:
        """
        Diff two plan texts.

        Raises:
            ComparisonError: If either plan is missing
            ParseError: If either plan fails to parse
        """
        diff = diff_plans(text_a, text_b, self.theme, self.config.parser_config())
        logger.info("Compared plans: %s", diff.summary.to_dict())
        return diff
