"""Command-line interface for Collurgy."""

import sys
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from ..config import Config, get_config
from ..palette import (
    ColorModel,
    DocumentFormat,
    ExporterNotFoundError,
    ExporterRegistry,
    RGBSpace,
    ThemeFormatError,
    ThemeRecord,
    compute,
    dumps,
    export as export_theme,
    hue_chroma_plane,
    load_theme,
    save_theme,
)
from ..palette.engine import SLOT_NAMES, quantize_channel
from .exporter_cmds import exporters

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

THEME_COLORS = ("foreground", "background", "spectrum", "spectrum_bright")


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    err_console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


def resolve_theme(theme_path: Optional[str]) -> Tuple[ThemeRecord, Optional[Path]]:
    """Load the theme at ``theme_path`` or the configured theme file.

    Falls back to the default theme when no path was given and the configured
    file does not exist.
    """
    path = Path(theme_path) if theme_path else get_config().get_theme_path()
    if path.exists():
        return load_theme(path), path
    if theme_path:
        raise FileNotFoundError(f"Theme file not found: {path}")
    logger.info(f"No theme at {path}, using the default theme")
    return ThemeRecord(), None


def swatch(hex_color: str, width: int = 6) -> Text:
    return Text(" " * width, style=f"on #{hex_color}")


@click.group()
@click.option("--config", type=click.Path(dir_okay=False), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config, verbose):
    """Collurgy - terminal color palettes from perceptual colors."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )

    # Load configuration
    if config:
        Config.reload(Path(config))
    else:
        get_config()


main.add_command(exporters)


@main.command()
@click.option("--model", "-m", type=click.Choice([m.value for m in ColorModel], case_sensitive=False),
              default=ColorModel.CIELCH.value, help="Perceptual color model")
@click.option("--high2023", type=float, default=0.0, help="Helmholtz-Kohlrausch compensation strength")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Theme file to write")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def new(model, high2023, output, force):
    """Write a default theme document."""
    path = Path(output) if output else get_config().get_theme_path()
    if path.exists() and not force:
        fail(f"{path} already exists, use --force to overwrite")

    theme = ThemeRecord(model=model, high2023=high2023)
    try:
        save_theme(theme, path)
    except (ThemeFormatError, OSError) as e:
        fail(str(e))
    console.print(f"[green]Wrote {theme.model.value} theme to {path}[/green]")


@main.command()
@click.argument("theme", required=False, type=click.Path(dir_okay=False))
@click.option("--space", type=click.Choice([s.value for s in RGBSpace]), default=None,
              help="RGB space to compute into")
def palette(theme, space):
    """Show the 16 computed colors of a theme."""
    try:
        record, path = resolve_theme(theme)
    except (ThemeFormatError, OSError) as e:
        fail(str(e))

    target = RGBSpace(space) if space else get_config().target_space
    colors = compute(record, target)

    table = Table(
        title=f"{path.name if path else 'default theme'} ({record.model.value}, {target.value})",
        show_header=True,
    )
    table.add_column("#", justify="right")
    table.add_column("Slot")
    table.add_column("Color")
    table.add_column("Hex")
    table.add_column("RGB")

    for n, name in enumerate(SLOT_NAMES):
        r, g, b = colors[n]
        rgb_text = f"{r:.3f} {g:.3f} {b:.3f}"
        if not colors.in_gamut(n):
            rgb_text = f"[yellow]{rgb_text} ![/yellow]"
        label = f"[bold]{name}[/bold]" if n == record.accent else name
        table.add_row(str(n), label, swatch(colors.hex(n)), colors.hex(n), rgb_text)

    console.print(table)


@main.command()
@click.argument("theme", required=False, type=click.Path(dir_okay=False))
@click.option("--exporter", "-e", "exporter_name", help="Exporter to render with")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file instead of stdout")
@click.option("--name", help="Theme name for {NAME} placeholders")
def export(theme, exporter_name, output, name):
    """Render a theme through an exporter template."""
    config = get_config()
    registry = ExporterRegistry.from_config(config)
    for error_path, message in registry.load_errors:
        err_console.print(f"[yellow]Skipped {error_path}: {message}[/yellow]")

    try:
        record, path = resolve_theme(theme)
        exporter = registry.get(exporter_name or registry.default_name(config.default_exporter))
    except (ThemeFormatError, OSError) as e:
        fail(str(e))
    except ExporterNotFoundError as e:
        fail(e.args[0])

    if name is None:
        name = path.stem if path else "collurgy"

    text = export_theme(exporter, record, name)

    if output:
        try:
            Path(output).write_text(text, encoding='utf-8')
        except OSError as e:
            fail(str(e))
        err_console.print(f"[green]Exported {exporter.name} to {output}[/green]")
    else:
        click.echo(text, nl=False)


@main.command()
@click.argument("theme", type=click.Path(exists=True, dir_okay=False))
@click.option("--to", "fmt", type=click.Choice([f.value for f in DocumentFormat]), default=None,
              help="Target document format")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file instead of stdout")
def convert(theme, fmt, output):
    """Re-serialize a theme document in another format."""
    try:
        record = load_theme(theme)
    except (ThemeFormatError, OSError) as e:
        fail(str(e))

    if output:
        try:
            save_theme(record, output, DocumentFormat(fmt) if fmt else None)
        except (ThemeFormatError, OSError) as e:
            fail(str(e))
        err_console.print(f"[green]Wrote {output}[/green]")
    else:
        target = DocumentFormat(fmt) if fmt else get_config().default_format
        click.echo(dumps(record, target), nl=False)


@main.command()
@click.argument("theme", required=False, type=click.Path(dir_okay=False))
@click.option("--color", "color_name", type=click.Choice(THEME_COLORS), default="spectrum",
              help="Base color whose lightness the plane is drawn at")
def plane(theme, color_name):
    """Draw the chroma/hue plane of a base color, out-of-gamut cells greyed."""
    try:
        record, _ = resolve_theme(theme)
    except (ThemeFormatError, OSError) as e:
        fail(str(e))

    lightness, chroma, hue = getattr(record, color_name)
    grid = hue_chroma_plane(record.model, lightness, record.high2023)

    console.print(f"{color_name} {lightness:.0f} {chroma:.0f} {hue:.0f} ({record.model.value})")
    # every 5th chroma row keeps the plane terminal-sized
    for row in grid[::5]:
        line = Text()
        for r, g, b in row:
            hex_color = "{:02X}{:02X}{:02X}".format(
                quantize_channel(r), quantize_channel(g), quantize_channel(b))
            line.append(" ", style=f"on #{hex_color}")
        console.print(line)
