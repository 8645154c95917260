"""Collurgy palette package.

This package derives 16-color terminal palettes from perceptual color
parameters in HSV, CIE LCh, OKLCh or JzCzHz, and renders them into arbitrary
text formats through exporter templates.
"""

from .engine import Palette, compute, perceptual_slots, hue_rotations, quantize_channel
from .exporter import build_placeholders, export, render, resolve_extras, substitute
from .persistence import (
    ThemeFormatError,
    dumps,
    loads,
    try_loads,
    load_theme,
    save_theme,
)
from .registry import (
    ExporterRegistry,
    ExporterNotFoundError,
    ExporterFormatError,
    builtin_exporters,
)
from .schema import (
    # Core models
    ThemeRecord,
    ExporterRecord,

    # Enums
    ColorModel,
    RGBSpace,
    DocumentFormat,
)
from .spaces import apply_space, gamut_clip, hue_chroma_plane, hk_high2023

__all__ = [
    # Main entry points
    "compute",
    "render",
    "export",

    # Schema models
    "ThemeRecord",
    "ExporterRecord",
    "Palette",

    # Enums
    "ColorModel",
    "RGBSpace",
    "DocumentFormat",

    # Catalog
    "ExporterRegistry",
    "ExporterNotFoundError",
    "ExporterFormatError",
    "builtin_exporters",

    # Persistence
    "ThemeFormatError",
    "dumps",
    "loads",
    "try_loads",
    "load_theme",
    "save_theme",

    # Utilities
    "apply_space",
    "gamut_clip",
    "hue_chroma_plane",
    "hk_high2023",
    "perceptual_slots",
    "hue_rotations",
    "quantize_channel",
    "build_placeholders",
    "resolve_extras",
    "substitute",
]
