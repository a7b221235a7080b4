#!/usr/bin/env python3
"""gradient.py - two-tone radial gradient backgrounds

One base color -> two accent colors (brightness band rule) -> either
  - an SVG with two radial gradients over a solid fill (rasterized for PNGs), or
  - an Android <layer-list> drawable with the same look.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from PIL import Image, ImageColor

from .raster import svg_to_rgba

__all__ = [
    "DARK_BRIGHTNESS",
    "GradientVariant",
    "brightness",
    "lighten",
    "darken",
    "rotate",
    "gradient_variants",
    "gradient_svg",
    "gradient_image",
    "android_drawable_xml",
]

# Below this brightness the base counts as dark; at 1.0 it counts as white.
DARK_BRIGHTNESS = 0.3

# Peak opacity of both radial lights.
LIGHT_OPACITY = 0.6

RGB = Tuple[float, float, float]
HSL = Tuple[float, float, float]


@dataclass(frozen=True)
class GradientVariant:
    variant_a: str
    variant_b: str


# =========================
# Color helpers
# =========================
#
# Colors stay as unrounded (r, g, b) floats in 0..255 through a whole
# lighten/rotate chain; only _to_hex rounds. Hue is in degrees,
# saturation and lightness in percent; HSL goes through HSV both ways.

def _js_round(v: float) -> int:
    # Half-up rounding, so 178.5 -> 179 like most color libraries.
    return int(math.floor(v + 0.5))


def _parse(hex_color: str) -> RGB:
    r, g, b = ImageColor.getrgb(hex_color)[:3]
    return float(r), float(g), float(b)


def _to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(_js_round(v) for v in rgb))


def _to_hsl(rgb: RGB) -> HSL:
    r, g, b = rgb
    mx = max(r, g, b)
    delta = mx - min(r, g, b)
    if not delta:
        hh = 0.0
    elif mx == r:
        hh = (g - b) / delta
    elif mx == g:
        hh = 2 + (b - r) / delta
    else:
        hh = 4 + (r - g) / delta
    h = 60 * (hh + 6 if hh < 0 else hh)
    s = delta / mx * 100 if mx else 0.0
    v = mx / 255 * 100

    l = (200 - s) * v / 100
    sl = s * v / 100 / (l if l <= 100 else 200 - l) * 100 if 0 < l < 200 else 0.0
    return h, sl, l / 2


def _clamp_hue(h: float) -> float:
    h = math.fmod(h, 360) if math.isfinite(h) else 0.0
    return h if h > 0 else h + 360


def _from_hsl(h: float, s: float, l: float) -> RGB:
    h = _clamp_hue(h)
    s = min(100.0, max(0.0, s))
    l = min(100.0, max(0.0, l))

    # HSL -> HSV
    s *= (l if l < 50 else 100 - l) / 100
    sv = 2 * s / (l + s) * 100 if s > 0 else 0.0
    v = l + s

    # HSV -> RGB
    h = h / 360 * 6
    sv = sv / 100
    v = v / 100
    hh = math.floor(h)
    lo = v * (1 - sv)
    down = v * (1 - (h - hh) * sv)
    up = v * (1 - (1 - h + hh) * sv)
    i = hh % 6
    return (
        (v, down, lo, lo, up, v)[i] * 255,
        (up, v, v, down, lo, lo)[i] * 255,
        (lo, lo, up, v, v, down)[i] * 255,
    )


def _lighten(rgb: RGB, amount: float) -> RGB:
    h, s, l = _to_hsl(rgb)
    return _from_hsl(h, s, l + amount * 100)


def _rotate(rgb: RGB, degrees: float) -> RGB:
    h, s, l = _to_hsl(rgb)
    # The current hue is read back in whole degrees before shifting.
    return _from_hsl(_js_round(h) + degrees, s, l)


def brightness(hex_color: str) -> float:
    """Perceived brightness in 0..1, rounded to 2 decimals."""
    r, g, b = _parse(hex_color)
    return _js_round((r * 299 + g * 587 + b * 114) / 1000 / 255 * 100) / 100


def lighten(hex_color: str, amount: float) -> str:
    return _to_hex(_lighten(_parse(hex_color), amount))


def darken(hex_color: str, amount: float) -> str:
    return lighten(hex_color, -amount)


def rotate(hex_color: str, degrees: float) -> str:
    return _to_hex(_rotate(_parse(hex_color), degrees))


# =========================
# Variant derivation
# =========================

def gradient_variants(base_color: str) -> GradientVariant:
    """
    Derive the two accent colors from the base color's brightness band:
      dark  (< 0.3):  lighten 0.20 / +20deg   and  lighten 0.08 / -20deg
      white (>= 1.0): darken  0.15 / +20deg   and  darken  0.30 / -20deg
      else:           lighten 0.08 / +20deg   and  darken  0.08 / -20deg

    Each variant is one lighten-then-rotate chain, rounded to hex once.
    """
    b = brightness(base_color)
    if b < DARK_BRIGHTNESS:
        shifts = ((0.2, 20), (0.08, -20))
    elif b >= 1:
        shifts = ((-0.15, 20), (-0.3, -20))
    else:
        shifts = ((0.08, 20), (-0.08, -20))

    rgb = _parse(base_color)
    a, c = (_to_hex(_rotate(_lighten(rgb, amount), deg)) for amount, deg in shifts)
    return GradientVariant(variant_a=a, variant_b=c)


# =========================
# Emitters
# =========================

def gradient_svg(width: int, height: int, base_color: str) -> str:
    v = gradient_variants(base_color)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">\n'
        "  <defs>\n"
        '    <radialGradient id="topLeft" cx="0%" cy="10%" r="90%">\n'
        f'      <stop offset="0%" style="stop-color:{v.variant_a};stop-opacity:{LIGHT_OPACITY}" />\n'
        f'      <stop offset="100%" style="stop-color:{base_color};stop-opacity:0" />\n'
        "    </radialGradient>\n"
        '    <radialGradient id="bottomRight" cx="100%" cy="100%" r="80%">\n'
        f'      <stop offset="0%" style="stop-color:{v.variant_b};stop-opacity:{LIGHT_OPACITY}" />\n'
        f'      <stop offset="100%" style="stop-color:{base_color};stop-opacity:0" />\n'
        "    </radialGradient>\n"
        "  </defs>\n"
        f'  <rect width="{width}" height="{height}" fill="{base_color}" />\n'
        f'  <rect width="{width}" height="{height}" fill="url(#topLeft)" />\n'
        f'  <rect width="{width}" height="{height}" fill="url(#bottomRight)" />\n'
        "</svg>"
    )


def gradient_image(size: int, base_color: str) -> Image.Image:
    return svg_to_rgba(gradient_svg(size, size, base_color))


def android_drawable_xml(base_color: str) -> str:
    """Adaptive-icon background drawable with the same two radial lights."""
    v = gradient_variants(base_color)
    return f"""<?xml version="1.0" encoding="utf-8"?>
<layer-list xmlns:android="http://schemas.android.com/apk/res/android">
    <item>
        <shape>
            <solid android:color="{base_color}" />
        </shape>
    </item>
    <item>
        <shape>
            <gradient
                android:type="radial"
                android:gradientRadius="90%"
                android:centerX="0.0"
                android:centerY="0.1"
                android:startColor="{v.variant_a}"
                android:endColor="@android:color/transparent" />
        </shape>
    </item>
    <item>
        <shape>
            <gradient
                android:type="radial"
                android:gradientRadius="80%"
                android:centerX="1.0"
                android:centerY="1.0"
                android:startColor="{v.variant_b}"
                android:endColor="@android:color/transparent" />
        </shape>
    </item>
</layer-list>
"""
