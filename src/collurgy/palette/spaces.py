"""Color space adapter for the Collurgy palette system.

This module turns batches of model-tagged perceptual coordinates into display
RGB. Each perceptual model is rescaled from percent units into its native
range, optionally compensated for the Helmholtz-Kohlrausch effect, and then
converted through CIE XYZ (D65) into linear or gamma-encoded sRGB with
colour-science.

All helpers operate on ``(N, 3)`` numpy arrays and never mutate their input.
"""

import logging
from typing import Sequence, Tuple, Union

import colour
import numpy as np

from .schema import ColorModel, RGBSpace

logger = logging.getLogger(__name__)

ColorBatch = Union[np.ndarray, Sequence[Sequence[float]]]

D65 = colour.CCS_ILLUMINANTS["CIE 1931 2 Degree Standard Observer"]["D65"]
D65_WHITE = colour.xy_to_XYZ(D65)

# High et al. 2023 Helmholtz-Kohlrausch coefficients
HK_K1 = 0.1644
HK_K2 = 0.0603
HK_K3 = 0.1307
HK_K4 = 0.0060

# Shown in place of colors that fall outside the sRGB gamut
GAMUT_MARKER: Tuple[float, float, float] = (0.5, 0.5, 0.5)
GAMUT_EPSILON = 1e-6


def _as_batch(colors: ColorBatch) -> np.ndarray:
    return np.array(colors, dtype=np.float64).reshape(-1, 3)


# Per-model scaling, as (lightness, chroma) in native units. Hue is never
# rescaled. Both tables are percentiles over the gamma-encoded sRGB cube
# sampled at 101 steps per channel: QUANT100 is the maximum, QUANT95 the 95th
# percentile. tests/test_spaces.py recomputes them.

_JZ_WHITE = float(colour.XYZ_to_Jzazbz(D65_WHITE)[0])

SRGB_QUANT100 = {
    ColorModel.CIELCH: (100.0, 133.80762),
    ColorModel.OKLCH: (1.0, 0.32249096),
    ColorModel.JZCZHZ: (_JZ_WHITE, 0.02498),
}

SRGB_QUANT95 = {
    ColorModel.CIELCH: (88.675, 103.525),
    ColorModel.OKLCH: (0.8893, 0.2615),
    ColorModel.JZCZHZ: (0.01380, 0.01951),
}


def srgb_quant100(model: ColorModel) -> Tuple[float, float]:
    """Maximum (L, C) reached by sRGB colors in ``model``."""
    return SRGB_QUANT100[ColorModel(model)]


def srgb_quant95(model: ColorModel) -> Tuple[float, float]:
    """95th percentile (L, C) of sRGB colors in ``model``."""
    return SRGB_QUANT95[ColorModel(model)]


def model_to_xyz(model: ColorModel, lch: ColorBatch) -> np.ndarray:
    """Convert native-range LCh coordinates of a perceptual model to XYZ."""
    model = ColorModel(model)
    # LCHab_to_Lab is a plain polar conversion, hue in degrees
    lab = colour.LCHab_to_Lab(_as_batch(lch))
    if model is ColorModel.CIELCH:
        return colour.Lab_to_XYZ(lab, D65)
    if model is ColorModel.OKLCH:
        return colour.Oklab_to_XYZ(lab)
    if model is ColorModel.JZCZHZ:
        return colour.Jzazbz_to_XYZ(lab)
    raise ValueError(f"{model.value} has no XYZ pipeline")


def hk_high2023(lch: ColorBatch) -> np.ndarray:
    """Helmholtz-Kohlrausch lightness increase for CIE LCh colors.

    High et al. 2023. Returned in CIE L units; zero for neutral colors.
    """
    lch = _as_batch(lch)
    hue = lch[:, 2] % 360.0
    fby = HK_K1 * np.abs(np.sin(np.radians((hue - 90.0) / 2.0))) + HK_K2
    fr = np.where(
        (hue <= 90.0) | (hue >= 270.0),
        HK_K3 * np.abs(np.cos(np.radians(hue))) + HK_K4,
        0.0,
    )
    return (fby + fr) * lch[:, 1]


def perceptual_brightness(model: ColorModel, lch: ColorBatch) -> np.ndarray:
    """HK brightness increase of native-range colors, in the model's L units."""
    model = ColorModel(model)
    lch = _as_batch(lch)
    if model is ColorModel.CIELCH:
        cie = lch
    else:
        cie = colour.Lab_to_LCHab(colour.XYZ_to_Lab(model_to_xyz(model, lch), D65))
    return hk_high2023(cie) * srgb_quant100(model)[0] / 100.0


def apply_space(model: ColorModel, colors: ColorBatch,
                target: RGBSpace = RGBSpace.SRGB,
                high2023: float = 0.0) -> np.ndarray:
    """Convert a batch of perceptual colors to RGB.

    Args:
        model: Color model the coordinates are expressed in
        colors: ``(N, 3)`` percent-unit coordinates, hue last
        target: RGB space to produce
        high2023: Helmholtz-Kohlrausch compensation strength, 0 disables

    Returns:
        ``(N, 3)`` RGB array. Channels outside 0-1 are left as they are.
    """
    model = ColorModel(model)
    target = RGBSpace(target)
    batch = _as_batch(colors)

    if model is ColorModel.HSV:
        # stored as (V, S, H)
        hsv = np.stack([(batch[:, 2] / 360.0) % 1.0, batch[:, 1] / 100.0, batch[:, 0] / 100.0], axis=-1)
        rgb = colour.HSV_to_RGB(hsv)
        return rgb if target is RGBSpace.SRGB else colour.cctf_decoding(rgb, function="sRGB")

    quant100 = srgb_quant100(model)
    quant95 = srgb_quant95(model)

    batch[:, 0] = batch[:, 0] / 100.0 * quant100[0]
    batch[:, 1] = batch[:, 1] / 100.0 * quant95[1]

    if high2023 != 0.0:
        brightness = perceptual_brightness(model, batch)
        batch[:, 0] += (quant100[0] * 0.2 - brightness) * (batch[:, 1] / quant95[1]) * high2023
        logger.debug(f"Applied high2023={high2023} compensation to {len(batch)} {model.value} colors")

    return colour.XYZ_to_sRGB(
        model_to_xyz(model, batch), D65,
        apply_cctf_encoding=target is RGBSpace.SRGB,
    )


def gamut_clip(rgb: ColorBatch, marker: Tuple[float, float, float] = GAMUT_MARKER) -> np.ndarray:
    """Replace colors with any channel outside 0-1 by ``marker``.

    Visualization aid only; exported palettes are never clipped.
    """
    rgb = np.array(rgb, dtype=np.float64)
    outside = ((rgb < -GAMUT_EPSILON) | (rgb > 1.0 + GAMUT_EPSILON)).any(axis=-1)
    rgb[outside] = marker
    return rgb


def hue_chroma_plane(model: ColorModel, lightness: float, high2023: float = 0.0,
                     target: RGBSpace = RGBSpace.SRGB) -> np.ndarray:
    """Build the chroma/hue picker plane at a fixed lightness.

    Rows run from chroma 100 down to 0, columns from hue 0 to 355 in 5 degree
    steps. Out-of-gamut cells are replaced by :data:`GAMUT_MARKER`.

    Returns:
        ``(101, 72, 3)`` RGB array
    """
    chroma = np.repeat(np.arange(100, -1, -1, dtype=np.float64), 72)
    hue = np.tile(np.arange(72, dtype=np.float64) * 5.0, 101)
    coords = np.stack([np.full(chroma.shape, float(lightness)), chroma, hue], axis=-1)
    rgb = apply_space(model, coords, target, high2023)
    return gamut_clip(rgb).reshape(101, 72, 3)
