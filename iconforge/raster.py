#!/usr/bin/env python3
"""raster.py - SVG rasterization and image loading shared by the generators"""

from __future__ import annotations

import sys
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

__all__ = [
    "svg_to_rgba",
    "load_image_any",
]


# =========================
# CairoSVG import handling
# =========================

def _try_import_cairosvg() -> Tuple[Optional[object], Optional[str]]:
    """
    Returns (cairosvg_module_or_None, error_message_or_None).
    Provides a clear diagnostic on failure.
    """
    try:
        import cairosvg  # type: ignore
        return cairosvg, None
    except Exception as e:
        prefix = getattr(sys, "prefix", "")
        base_prefix = getattr(sys, "base_prefix", "")
        venv_note = ""
        if base_prefix and prefix and (prefix != base_prefix):
            venv_note = " (venv detected)"

        msg = (
            "SVG rendering requires 'cairosvg' and the native cairo library.\n"
            f"Running Python: {sys.executable}{venv_note}\n"
            f"Import error: {type(e).__name__}: {e}\n"
            "Fix: install cairosvg into this interpreter and make sure libcairo is on the library path.\n"
        )
        return None, msg


def _cairosvg():
    mod, err = _try_import_cairosvg()
    if mod is None:
        raise RuntimeError(err or "CairoSVG not available")
    return mod


def svg_to_rgba(svg: str) -> Image.Image:
    """Render an in-memory SVG document to an RGBA image at its declared size."""
    png_bytes = _cairosvg().svg2png(bytestring=svg.encode("utf-8"))
    return Image.open(BytesIO(png_bytes)).convert("RGBA")


def _rasterize_svg_file(svg_path: Path, min_side: int) -> Image.Image:
    """
    Render an SVG file so its longer side is at least `min_side`.
    SVGs often declare a small viewport (e.g. 24x24); render once to learn it,
    then again at the scale that reaches min_side.
    """
    cairosvg = _cairosvg()
    png_bytes = cairosvg.svg2png(url=str(svg_path))
    im = Image.open(BytesIO(png_bytes))
    longest = max(im.size)
    if 0 < longest < min_side:
        png_bytes = cairosvg.svg2png(url=str(svg_path), scale=min_side / longest)
        im = Image.open(BytesIO(png_bytes))
    return im.convert("RGBA")


def load_image_any(path: Path, *, min_side: int = 1024) -> Image.Image:
    """
    Load raster images with Pillow.
    Load SVG via CairoSVG rasterization.
    """
    path = Path(path)
    if path.suffix.lower() == ".svg":
        return _rasterize_svg_file(path, min_side)
    with Image.open(path) as im:
        return im.convert("RGBA")
