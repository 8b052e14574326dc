"""Plan comparison command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from planviz.engine import VisualizationService
from planviz.exceptions import ComparisonError, ParseError, PlanVizError
from planviz.models import Theme
from planviz.output.renderers import OutputFormat, render_diff
from planviz.parser.parser import read_plan_file
from planviz.plan_diff import DiffStatus, PlanDiff

console = Console()
error_console = Console(stderr=True)

STATUS_STYLES = {
    DiffStatus.ADDED: "blue",
    DiffStatus.REMOVED: "red",
    DiffStatus.CHANGED: "yellow",
    DiffStatus.UNCHANGED: "green",
}


def print_diff(diff: PlanDiff) -> None:
    summary = diff.summary

    totals = Table(title="Comparison Results")
    totals.add_column("Added", justify="right", style=STATUS_STYLES[DiffStatus.ADDED])
    totals.add_column("Removed", justify="right", style=STATUS_STYLES[DiffStatus.REMOVED])
    totals.add_column("Changed", justify="right", style=STATUS_STYLES[DiffStatus.CHANGED])
    totals.add_column("Unchanged", justify="right", style=STATUS_STYLES[DiffStatus.UNCHANGED])
    totals.add_row(
        str(summary.added),
        str(summary.removed),
        str(summary.changed),
        str(summary.unchanged),
    )
    console.print(totals)

    if not diff.entries:
        return

    nodes = Table(show_header=True)
    nodes.add_column("Status")
    nodes.add_column("Node", style="cyan", no_wrap=True)
    nodes.add_column("Operator")
    nodes.add_column("Self Cost", justify="right")

    for entry in diff.entries:
        style = STATUS_STYLES[entry.status]
        if entry.status == DiffStatus.CHANGED and entry.before and entry.after:
            cost = f"{entry.before.exclusive_cost:.2f} -> {entry.after.exclusive_cost:.2f}"
        else:
            cost = f"{entry.node.exclusive_cost:.2f}"
        nodes.add_row(
            f"[{style}]{entry.status.value}[/{style}]",
            entry.node_id,
            escape(entry.node.operator),
            cost,
        )

    console.print(nodes)


def register(app: typer.Typer) -> None:
    """Register the compare command on the given Typer app."""

    @app.command()
    def compare(
        before_file: Annotated[
            Path,
            typer.Argument(
                help="Baseline EXPLAIN text file",
                exists=True,
                readable=True,
                resolve_path=True,
            ),
        ],
        after_file: Annotated[
            Path,
            typer.Argument(
                help="Candidate EXPLAIN text file",
                exists=True,
                readable=True,
                resolve_path=True,
            ),
        ],
        theme: Annotated[
            Optional[Theme],
            typer.Option("--theme", help="Diagram color theme (default from config)"),
        ] = None,
        output_format: Annotated[
            OutputFormat,
            typer.Option("--format", "-f", help="Output format"),
        ] = OutputFormat.TEXT,
    ) -> None:
        """
        Compare two plans node by node.

        Nodes are matched by their detail lines with costs stripped, then
        classified as added, removed, changed or unchanged.

        Examples:

            $ planviz compare before.txt after.txt
            $ planviz compare before.txt after.txt --format mermaid > diff.mmd
        """
        try:
            service = VisualizationService(theme=theme)
            diff = service.compare(
                read_plan_file(before_file),
                read_plan_file(after_file),
            )
        except ComparisonError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)
        except ParseError as e:
            error_console.print(f"[red]Parse error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)
        except PlanVizError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)

        if output_format == OutputFormat.TEXT:
            print_diff(diff)
        else:
            typer.echo(render_diff(diff, format=output_format))
