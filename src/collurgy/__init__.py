"""Collurgy - terminal color palettes from perceptual color parameters."""

__version__ = "0.2.0"
__author__ = "Collurgy Team"

from .palette import (
    ColorModel,
    ThemeRecord,
    ExporterRecord,
    Palette,
    compute,
    export,
    render,
)

__all__ = [
    "ColorModel",
    "ThemeRecord",
    "ExporterRecord",
    "Palette",
    "compute",
    "export",
    "render",
    "__version__",
]
