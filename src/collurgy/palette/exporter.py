"""Template engine that renders palettes through exporter definitions.

Templates are free-form text with ``{TOKEN}`` placeholders. A lookup table is
built once per render and every ``{...}`` token is resolved against it in a
single pass, so a short token can never match inside a longer one. Tokens not
in the table are left untouched.
"""

import re
import logging
from typing import Dict, Mapping, Optional

from .schema import PALETTE_SIZE, ExporterRecord, ThemeRecord
from .engine import Palette, compute

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{([^{}\s]+)\}")

CHANNEL_SUFFIXES = ("R", "G", "B")
FLOAT_SUFFIXES = ("FR", "FG", "FB")
HEX_SUFFIX = "HEX"
ACCENT_PREFIX = "ACC"
NAME_TOKEN = "NAME"


def format_float(value: float) -> str:
    """Render a float channel, rounded to 6 places."""
    # + 0.0 folds -0.0 into 0.0
    return repr(round(float(value), 6) + 0.0)


def slot_values(palette: Palette, index: int) -> Dict[str, str]:
    """Placeholder suffix -> rendered value for one palette slot."""
    values = dict(zip(CHANNEL_SUFFIXES, (str(c) for c in palette.channels8(index))))
    values.update(zip(FLOAT_SUFFIXES, (format_float(c) for c in palette[index])))
    values[HEX_SUFFIX] = palette.hex(index)
    return values


def _valid_slot(index) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < PALETTE_SIZE


def _valid_symbol(symbol) -> bool:
    return isinstance(symbol, str) and TOKEN_PATTERN.fullmatch(f"{{{symbol}}}") is not None


def build_placeholders(palette: Palette, accent: int,
                       extras: Optional[Mapping[str, int]] = None,
                       name: Optional[str] = None) -> Dict[str, str]:
    """Build the token -> value table for a render.

    Args:
        palette: Computed palette
        accent: Slot used for ``ACC*`` tokens, ignored when out of range
        extras: Symbolic name -> slot bindings; out-of-range slots and names
            containing whitespace or braces are skipped
        name: Theme name for ``{NAME}``, omitted when None

    Returns:
        Dictionary mapping token names (without braces) to replacement text
    """
    table: Dict[str, str] = {}
    per_slot = [slot_values(palette, n) for n in range(PALETTE_SIZE)]

    for n, values in enumerate(per_slot):
        for suffix, value in values.items():
            table[f"{suffix}{n}"] = value

    if _valid_slot(accent):
        for suffix, value in per_slot[accent].items():
            table[f"{ACCENT_PREFIX}{suffix}"] = value
    else:
        logger.debug(f"Accent slot {accent!r} out of range, accent placeholders skipped")

    if name is not None:
        table[NAME_TOKEN] = name

    reserved = set(table)
    for symbol, index in (extras or {}).items():
        if not _valid_symbol(symbol):
            logger.debug(f"Extra {symbol!r} cannot appear in a placeholder, skipped")
            continue
        if not _valid_slot(index):
            logger.debug(f"Extra '{symbol}' bound to invalid slot {index!r}, skipped")
            continue
        for suffix, value in per_slot[index].items():
            token = f"{symbol}{suffix}"
            if token in reserved:
                logger.debug(f"Extra '{symbol}' would shadow {{{token}}}, skipped")
                continue
            table[token] = value

    return table


def substitute(template: str, table: Mapping[str, str]) -> str:
    """Replace every ``{TOKEN}`` found in ``table``; leave the rest verbatim."""
    def _replace(match: "re.Match[str]") -> str:
        return table.get(match.group(1), match.group(0))

    return TOKEN_PATTERN.sub(_replace, template)


def resolve_extras(exporter: ExporterRecord,
                   theme_extras: Optional[Mapping[str, Mapping[str, int]]] = None) -> Dict[str, int]:
    """Pick the extras bindings for an exporter.

    Theme-supplied bindings for the exporter's name win outright; the
    exporter's own defaults are used only when the theme has none for it.
    """
    if theme_extras and exporter.name in theme_extras:
        return dict(theme_extras[exporter.name])
    return dict(exporter.extras)


def render(exporter: ExporterRecord, palette: Palette, accent: int,
           extras: Optional[Mapping[str, int]] = None,
           name: Optional[str] = None) -> str:
    """Render an exporter template against a computed palette.

    Args:
        exporter: Exporter whose formatter is rendered
        palette: Computed palette
        accent: Accent slot index
        extras: Already-resolved symbolic bindings (see :func:`resolve_extras`)
        name: Optional theme name for ``{NAME}``

    Returns:
        The formatter text with recognized placeholders substituted
    """
    table = build_placeholders(palette, accent, extras, name)
    return substitute(exporter.formatter, table)


def export(exporter: ExporterRecord, theme: ThemeRecord, name: Optional[str] = None) -> str:
    """Compute a theme's palette and render it through ``exporter``."""
    palette = compute(theme)
    extras = resolve_extras(exporter, theme.extras)
    logger.debug(f"Exporting with '{exporter.name}' using {len(extras)} extras")
    return render(exporter, palette, theme.accent, extras, name)
