#!/usr/bin/env python3
"""mask.py - padding geometry and tile masks

Masks are produced as SVG path descriptions and only turned into pixels by
rasterize_mask() (CairoSVG), so the shape math stays resolution independent.
"""

from __future__ import annotations

import math
from typing import List, Tuple

from PIL import Image

from .errors import IconGeometryError
from .raster import svg_to_rgba

__all__ = [
    "SQUIRCLE_STEPS",
    "SQUIRCLE_EXPONENT",
    "padding_px",
    "inner_edge",
    "corner_radius",
    "squircle_points",
    "squircle_svg",
    "rounded_rectangle_svg",
    "rasterize_mask",
]

SQUIRCLE_STEPS = 360
SQUIRCLE_EXPONENT = 3.7  # higher = more square-like


def padding_px(size: int, padding: float) -> int:
    """Padding in whole pixels on each side of a `size` canvas."""
    return int(math.floor(size * padding))


def inner_edge(size: int, padding: float) -> Tuple[int, int]:
    """
    Return (padding_px, edge) for a square of `size` with `padding` per side.
    Raises IconGeometryError when nothing is left for the content.
    """
    pad = padding_px(size, padding)
    edge = size - pad * 2
    if edge <= 0:
        raise IconGeometryError(
            f"Padding {padding} leaves no room on a {size}px canvas (edge={edge})"
        )
    return pad, edge


def corner_radius(edge: int, percent: float) -> int:
    return int(math.floor(edge * percent))


def _sign(v: float) -> float:
    if v > 0:
        return 1.0
    if v < 0:
        return -1.0
    return 0.0


def squircle_points(width: float, height: float) -> List[Tuple[float, float]]:
    """
    Sample the superellipse boundary at SQUIRCLE_STEPS equal angles.

    The polygon is closed: the last point repeats the first angle (2*pi).
    Coordinates are in canvas space, origin at the top-left corner.
    """
    a = width / 2
    b = height / 2
    e = 2 / SQUIRCLE_EXPONENT
    pts: List[Tuple[float, float]] = []
    for i in range(SQUIRCLE_STEPS + 1):
        angle = (i / SQUIRCLE_STEPS) * 2 * math.pi
        cos_t = math.cos(angle)
        sin_t = math.sin(angle)
        x = a * _sign(cos_t) * abs(cos_t) ** e
        y = b * _sign(sin_t) * abs(sin_t) ** e
        pts.append((a + x, b + y))
    return pts


def _fmt(v: float) -> str:
    # repr() keeps full precision and is stable across runs.
    return repr(round(v, 6))


def squircle_svg(width: int, height: int) -> str:
    cmds = []
    for i, (x, y) in enumerate(squircle_points(width, height)):
        cmds.append(f"{'M' if i == 0 else 'L'} {_fmt(x)},{_fmt(y)}")
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">'
        f'<path d="{" ".join(cmds)} Z" fill="white"/>'
        "</svg>"
    )


def rounded_rectangle_svg(width: int, height: int, radius: int) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">'
        f'<rect x="0" y="0" width="{width}" height="{height}" '
        f'rx="{radius}" ry="{radius}" fill="white"/>'
        "</svg>"
    )


def rasterize_mask(svg: str) -> Image.Image:
    """Render an SVG mask to an 'L' image (255 = keep, 0 = drop)."""
    return svg_to_rgba(svg).getchannel("A")
