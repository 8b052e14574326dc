"""Output formatting: text, JSON and Markdown renderers."""

from planviz.output.renderers import (
    OutputFormat,
    diff_to_schema,
    render,
    render_diff,
    report_to_schema,
)

__all__ = [
    "OutputFormat",
    "render",
    "render_diff",
    "report_to_schema",
    "diff_to_schema",
]
