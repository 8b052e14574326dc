"""
planviz CLI - Redshift EXPLAIN plan visualizer.

Usage:
    planviz generate plan.txt
    planviz generate plan.txt --theme dark --render plan.svg
    planviz compare before.txt after.txt
    planviz node plan.txt node3
    planviz rules
"""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from planviz import __version__
from planviz.analyzer.analyzer import rule_overrides
from planviz.analyzer.registry import get_registry
from planviz.cli.commands import compare as compare_commands
from planviz.cli.commands import generate as generate_commands
from planviz.config import get_config

app = typer.Typer(
    name="planviz",
    help="Redshift EXPLAIN plan visualizer: diagrams, self costs, warnings and plan diffs",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"planviz version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging on stderr."),
    ] = False,
) -> None:
    """planviz - Redshift EXPLAIN plan visualizer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


@app.command()
def rules(
    rule_id: Annotated[
        Optional[str],
        typer.Argument(help="Show a single rule, e.g. SEQ_SCAN_LARGE"),
    ] = None,
) -> None:
    """List the available warning rules and their configured settings."""
    config = get_config()
    registry = get_registry()

    if rule_id is None:
        rule_classes = registry.all()
    elif rule_id in registry:
        rule_classes = [registry.get(rule_id)]
    else:
        error_console.print(f"[red]Unknown rule:[/red] {escape(rule_id)}")
        raise typer.Exit(1)

    overrides = rule_overrides(config)

    table = Table(title=f"Warning Rules ({len(registry)} registered)")
    table.add_column("Rule ID", style="cyan")
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Enabled")
    table.add_column("Settings")
    table.add_column("Description")

    for rule_cls in rule_classes:
        enabled = config.is_rule_enabled(rule_cls.rule_id)
        settings = rule_cls(overrides.get(rule_cls.rule_id)).config.model_dump(exclude={"enabled"})
        table.add_row(
            rule_cls.rule_id,
            rule_cls.severity.value,
            rule_cls.warning_type.value,
            "[green]yes[/green]" if enabled else "[dim]no[/dim]",
            ", ".join(f"{key}: {value}" for key, value in settings.items()) or "-",
            rule_cls.description,
        )

    console.print(table)


generate_commands.register(app)
compare_commands.register(app)


if __name__ == "__main__":
    app()
