"""Single-plan commands: generate, node."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from planviz.analyzer.links import MessageLink, split_message_links
from planviz.analyzer.models import PlanWarning, WarningSeverity, WarningType
from planviz.cost import CostSeverity
from planviz.engine import GenerateReport, VisualizationService
from planviz.exceptions import ParseError, PlanVizError
from planviz.models import Theme
from planviz.output.renderers import OutputFormat, render
from planviz.parser.parser import read_plan_file
from planviz.render import (
    DEFAULT_EXPORT_NAME,
    MermaidCliRenderer,
    export_artifact,
    render_diagram,
)

console = Console()
error_console = Console(stderr=True)

SEVERITY_STYLES = {
    CostSeverity.HIGH: "red bold",
    CostSeverity.MEDIUM: "yellow",
    CostSeverity.LOW: "green",
}


def warning_markup(message: str) -> str:
    """Rich markup for a warning message with its markdown link made clickable."""
    parts: list[str] = []
    for part in split_message_links(message):
        if isinstance(part, MessageLink):
            parts.append(f"[link={part.url}][blue underline]{escape(part.text)}[/blue underline][/link]")
        else:
            parts.append(escape(part))
    return "".join(parts)


def print_warnings(warnings: list[PlanWarning] | tuple[PlanWarning, ...]) -> None:
    console.print("\n[bold]Performance Analysis[/bold]\n")
    for warning in warnings:
        if warning.type == WarningType.INFO:
            heading = "[blue]Info[/blue]"
        elif warning.severity == WarningSeverity.HIGH:
            heading = "[red bold]Warning[/red bold]"
        else:
            heading = "[yellow]Warning[/yellow]"
        console.print(f"{heading} [dim]({warning.node_id})[/dim]")
        console.print(f"   {warning_markup(warning.message)}\n")


def print_report(report: GenerateReport) -> None:
    viz = report.visualization

    if viz.is_empty:
        console.print(
            Panel(
                "[dim]Empty plan: nothing to analyze.[/dim]",
                title="planviz",
                border_style="dim",
            )
        )
        return

    table = Table(title=f"Query Plan ({viz.plan.node_count} nodes)")
    table.add_column("Node", style="cyan", no_wrap=True)
    table.add_column("Operator")
    table.add_column("Total Cost", justify="right")
    table.add_column("Self Cost", justify="right")

    for node in viz.plan.iter_depth_first():
        severity = viz.annotated.severity_of(node)
        self_cost = f"{node.exclusive_cost or 0.0:.2f}"
        if severity is not None:
            style = SEVERITY_STYLES[severity]
            self_cost = f"[{style}]{self_cost}[/{style}]"
        table.add_row(
            node.node_id,
            "  " * node.depth + escape(node.operator),
            f"{node.inclusive_cost:.2f}",
            self_cost,
        )

    console.print(table)

    if report.warnings:
        print_warnings(report.warnings)
    else:
        console.print("\n[green]No performance warnings.[/green]")


def register(app: typer.Typer) -> None:
    """Register single-plan commands on the given Typer app."""

    @app.command()
    def generate(
        plan_file: Annotated[
            Path,
            typer.Argument(
                help="Path to a Redshift EXPLAIN text file",
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
        render_to: Annotated[
            Optional[Path],
            typer.Option(
                "--render",
                "-r",
                help=f"Render the diagram to SVG with the Mermaid CLI (e.g. {DEFAULT_EXPORT_NAME})",
            ),
        ] = None,
    ) -> None:
        """
        Build the diagram, self costs and warnings for one plan.

        Examples:

            $ planviz generate plan.txt
            $ planviz generate plan.txt --format mermaid > plan.mmd
            $ planviz generate plan.txt --theme dark --render plan.svg
        """
        try:
            service = VisualizationService(theme=theme)
            report = service.generate(read_plan_file(plan_file))
        except ParseError as e:
            error_console.print(f"[red]Parse error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)
        except PlanVizError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)

        if output_format == OutputFormat.TEXT:
            print_report(report)
        else:
            typer.echo(render(report, format=output_format))

        if render_to is None:
            return

        renderer = MermaidCliRenderer(
            executable=service.config.mermaid_cli,
            theme=service.theme,
            timeout_seconds=service.config.render_timeout_seconds,
        )
        diagram = asyncio.run(render_diagram(report.visualization.graph, renderer))

        if diagram.is_error:
            error_console.print(f"[red]Render error:[/red] {escape(diagram.error or '')}")
            raise typer.Exit(code=1)

        try:
            target = export_artifact(diagram, render_to)
        except PlanVizError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)

        error_console.print(f"[green]Diagram written to {target}[/green]")

    @app.command()
    def node(
        plan_file: Annotated[
            Path,
            typer.Argument(
                help="Path to a Redshift EXPLAIN text file",
                exists=True,
                readable=True,
                resolve_path=True,
            ),
        ],
        node_id: Annotated[str, typer.Argument(help="Node identifier, e.g. node3")],
    ) -> None:
        """
        Show the details and self cost of one node.

        Examples:

            $ planviz node plan.txt node0
        """
        try:
            report = VisualizationService().generate(read_plan_file(plan_file))
        except ParseError as e:
            error_console.print(f"[red]Parse error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)
        except PlanVizError as e:
            error_console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(code=1)

        details = report.visualization.node_details.get(node_id)
        if details is None:
            known = ", ".join(report.visualization.node_details) or "none"
            error_console.print(
                f"[red]Error:[/red] Unknown node '{escape(node_id)}' (known: {known})"
            )
            raise typer.Exit(code=1)

        body = "\n".join(escape(line) for line in details.details)
        body += f"\n\n[bold]Self Cost: {details.exclusive_cost:.2f}[/bold]"
        console.print(Panel(body, title=f"Selected Node {node_id}", border_style="blue"))

        warnings = report.warnings_for(node_id)
        if warnings:
            print_warnings(warnings)
