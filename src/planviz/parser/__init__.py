"""Redshift EXPLAIN text parsing module."""

from planviz.exceptions import ParseError
from planviz.parser.config import DEFAULT_CONFIG, ParserConfig
from planviz.parser.models import ParsedPlan, PlanNode
from planviz.parser.parser import parse_plan_file, parse_plan_text

__all__ = [
    "ParsedPlan",
    "PlanNode",
    "parse_plan_text",
    "parse_plan_file",
    "ParseError",
    "ParserConfig",
    "DEFAULT_CONFIG",
]
