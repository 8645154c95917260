"""Palette generator for the Collurgy palette system.

This module derives the 16 terminal colors of a theme: the two base colors,
their one-third blends, and two sets of six hue rotations, all converted to
RGB in a single batch so luminance compensation sees the whole palette.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

from .schema import (
    PALETTE_SIZE,
    PerceptualColor,
    RGBColor,
    RGBSpace,
    ThemeRecord,
)
from .spaces import apply_space

logger = logging.getLogger(__name__)

# Slots receiving hue rotations 0, 60, 120, 180, 240 and 300 degrees:
# Red, Yellow, Green, Cyan, Blue, Magenta
HUE_SLOTS: Tuple[int, ...] = (1, 3, 2, 6, 4, 5)
BRIGHT_HUE_SLOTS: Tuple[int, ...] = tuple(slot + 8 for slot in HUE_SLOTS)

SLOT_NAMES: Tuple[str, ...] = (
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
    "bright_black", "bright_red", "bright_green", "bright_yellow",
    "bright_blue", "bright_magenta", "bright_cyan", "bright_white",
)


def quantize_channel(value: float) -> int:
    """Quantize a float channel to 8 bits: round half up, clamp to 0-255."""
    return min(255, max(0, math.floor(float(value) * 255.0 + 0.5)))


@dataclass(frozen=True)
class Palette:
    """Ordered 16 display colors computed from a theme"""

    colors: Tuple[RGBColor, ...]
    space: RGBSpace = RGBSpace.SRGB

    def __post_init__(self):
        if len(self.colors) != PALETTE_SIZE:
            raise ValueError(f"Palette needs {PALETTE_SIZE} colors, got {len(self.colors)}")

    def __getitem__(self, index: int) -> RGBColor:
        return self.colors[index]

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[RGBColor]:
        return iter(self.colors)

    def channels8(self, index: int) -> Tuple[int, int, int]:
        """8-bit integer channels of a slot."""
        r, g, b = self.colors[index]
        return quantize_channel(r), quantize_channel(g), quantize_channel(b)

    def hex(self, index: int) -> str:
        """Uppercase ``RRGGBB`` of a slot, no prefix."""
        return "{:02X}{:02X}{:02X}".format(*self.channels8(index))

    def in_gamut(self, index: int) -> bool:
        return all(0.0 <= channel <= 1.0 for channel in self.colors[index])


def hue_rotations(base: PerceptualColor, count: int = 6, step: float = 60.0) -> List[PerceptualColor]:
    """Rotate the hue of ``base`` keeping lightness and chroma.

    Hues are not wrapped; conversion treats them modulo 360.
    """
    return [(base[0], base[1], base[2] + step * n) for n in range(count)]


def _blend_third(near: PerceptualColor, far: PerceptualColor) -> PerceptualColor:
    # 1/3 of the way from near to far, per axis
    return tuple((a * 2.0 + b) / 3.0 for a, b in zip(near, far))


def perceptual_slots(theme: ThemeRecord) -> List[PerceptualColor]:
    """Build the 16 palette entries in the theme's perceptual model.

    Args:
        theme: Theme to derive the palette from

    Returns:
        List of 16 perceptual triples in slot order, before any conversion
    """
    slots: List[PerceptualColor] = [(0.0, 0.0, 0.0)] * PALETTE_SIZE

    slots[0] = tuple(theme.background)
    slots[15] = tuple(theme.foreground)
    slots[8] = _blend_third(theme.background, theme.foreground)
    slots[7] = _blend_third(theme.foreground, theme.background)

    for slot, color in zip(HUE_SLOTS, hue_rotations(theme.spectrum)):
        slots[slot] = color
    for slot, color in zip(BRIGHT_HUE_SLOTS, hue_rotations(theme.spectrum_bright)):
        slots[slot] = color

    return slots


def compute(theme: ThemeRecord, target: RGBSpace = RGBSpace.SRGB) -> Palette:
    """Compute the RGB palette of a theme.

    Args:
        theme: Theme to compute
        target: RGB space of the result

    Returns:
        Palette of 16 colors; out-of-gamut channels are not clipped
    """
    rgb = apply_space(theme.model, perceptual_slots(theme), target, theme.high2023)
    colors = tuple(tuple(float(channel) for channel in row) for row in rgb)

    out_of_gamut = sum(1 for row in rgb if np.any(row < 0.0) or np.any(row > 1.0))
    if out_of_gamut:
        logger.debug(f"{out_of_gamut} of {PALETTE_SIZE} {theme.model.value} colors fall outside the sRGB gamut")

    return Palette(colors=colors, space=RGBSpace(target))
