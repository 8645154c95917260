"""Exporter catalog CLI commands.

This module provides CLI commands for inspecting the exporter catalog:
listing available exporters and showing an exporter's template.
"""

import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config import get_config
from ..palette import ExporterNotFoundError, ExporterRegistry


@click.group()
def exporters():
    """Inspect available exporters."""
    pass


@exporters.command(name="list")
def list_exporters():
    """List all available exporters."""
    console = Console()
    config = get_config()
    registry = ExporterRegistry.from_config(config)

    table = Table(
        title="Available Exporters",
        show_header=True,
    )
    table.add_column("Name", style="cyan", min_width=12)
    table.add_column("Type", style="blue", width=8)
    table.add_column("Path")
    table.add_column("Extras", style="magenta")

    for info in registry.list_exporters():
        extras_text = ", ".join(f"{k}={v}" for k, v in info['extras'].items()) or "none"
        name_style = "cyan bold" if info['name'] == config.default_exporter else "cyan"
        table.add_row(
            f"[{name_style}]{info['name']}[/{name_style}]",
            info['type'],
            info['path'] or "",
            extras_text,
        )

    console.print(table)

    for error_path, message in registry.load_errors:
        console.print(f"[yellow]Skipped {error_path}: {message}[/yellow]")


@exporters.command()
@click.argument('name')
def show(name: str):
    """Show an exporter's template."""
    console = Console()
    registry = ExporterRegistry.from_config(get_config())

    try:
        exporter = registry.get(name)
    except ExporterNotFoundError as e:
        console.print(f"[red]Error: {e.args[0]}[/red]")
        sys.exit(1)

    subtitle = f"source: {registry.source(name)}"
    if exporter.path:
        subtitle += f" | path: {exporter.path}"
    console.print(Panel(
        Text(exporter.formatter),
        title=f"[cyan]{exporter.name}[/cyan]",
        subtitle=subtitle,
        border_style="blue",
    ))
