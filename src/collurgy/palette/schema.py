"""Schema definitions for the Collurgy palette system.

This module defines the enums and Pydantic models that describe a theme: the
perceptual color model it is edited in, its four base colors, the accent slot
and per-exporter symbolic bindings, plus the exporter definition records.
"""

from typing import Dict, Optional, Tuple
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ColorModel(str, Enum):
    """Perceptual color models a theme can be edited in"""
    HSV = "HSV"
    CIELCH = "CIELCH"
    OKLCH = "OKLCH"
    JZCZHZ = "JZCZHZ"


class RGBSpace(str, Enum):
    """Display spaces palettes are computed into. Never persisted."""
    SRGB = "srgb"
    LRGB = "lrgb"


class DocumentFormat(str, Enum):
    """Textual formats theme and exporter documents can be stored in"""
    TOML = "toml"
    JSON = "json"
    YAML = "yaml"


# (L or V, C or S, H) in model-native percent/degree units
PerceptualColor = Tuple[float, float, float]

# Display-ready (R, G, B) floats, nominally 0.0-1.0
RGBColor = Tuple[float, float, float]

PALETTE_SIZE = 16


class ThemeRecord(BaseModel):
    """Editable theme data and the input to palette generation"""

    model_config = ConfigDict(validate_assignment=True)

    model: ColorModel = Field(ColorModel.CIELCH, description="Active perceptual color model")
    high2023: float = Field(0.0, description="Helmholtz-Kohlrausch compensation strength, 0 disables")

    foreground: PerceptualColor = (100.0, 0.0, 0.0)
    background: PerceptualColor = (0.0, 0.0, 0.0)
    spectrum: PerceptualColor = (35.0, 35.0, 0.0)
    spectrum_bright: PerceptualColor = (65.0, 65.0, 0.0)

    accent: int = Field(11, description="Palette slot used for accent placeholders")  # Bright Yellow

    # exporter name -> symbolic name -> palette slot
    extras: Dict[str, Dict[str, int]] = Field(default_factory=dict)

    @field_validator('model', mode='before')
    @classmethod
    def normalize_model_tag(cls, v):
        """Accept model tags in any letter case"""
        if isinstance(v, str):
            return v.upper()
        return v


class ExporterRecord(BaseModel):
    """A named text template that renders a palette into a target format"""

    name: str = Field(..., min_length=1, description="Exporter name")
    formatter: str = Field(..., description="Template text containing placeholders")
    path: Optional[str] = Field(None, description="Conventional output file path hint")
    extras: Dict[str, int] = Field(default_factory=dict, description="Default symbolic slot bindings")
