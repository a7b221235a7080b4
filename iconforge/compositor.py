#!/usr/bin/env python3
"""compositor.py - builds the 1024x1024 PNG handed to the icon CLI

Layout (two nested padding stages):

  +---------------- target (1024) ----------------+
  |  outer padding (transparent)                  |
  |   +------------ tile ----------------------+  |
  |   |  inner padding (background / gradient) |  |
  |   |   +------ icon (contain) ---------+    |  |

No outer padding: the tile *is* the target and is written directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, ImageChops, ImageOps

from .config import MACOS_CORNER_RADIUS_PERCENT, TARGET_SIZE, validate_padding
from .gradient import gradient_image
from .mask import (
    corner_radius,
    inner_edge,
    rasterize_mask,
    rounded_rectangle_svg,
    squircle_svg,
)
from .raster import load_image_any

__all__ = [
    "SHAPES",
    "IconSpec",
    "resize_contain",
    "background_canvas",
    "shape_mask",
    "apply_mask",
    "render_icon",
    "make_icon",
]

SHAPES = ("rounded-rectangle", "squircle")

TRANSPARENT = (0, 0, 0, 0)


@dataclass(frozen=True)
class IconSpec:
    input_path: Path
    output_path: Path
    padding: float
    target_size: int = TARGET_SIZE
    background_color: Optional[str] = None
    use_gradient: bool = False
    shape: Optional[str] = None
    outer_padding: float = 0.0

    def __post_init__(self) -> None:
        validate_padding(self.padding)
        validate_padding(self.outer_padding)
        if self.shape is not None and self.shape not in SHAPES:
            raise ValueError(f"Unknown shape {self.shape!r}; expected one of {SHAPES}")


# =========================
# Primitives
# =========================

def resize_contain(im: Image.Image, size: int) -> Image.Image:
    """
    Fit `im` inside a size x size box keeping aspect ratio; the remainder is
    transparent. Never crops.
    """
    im = im.convert("RGBA")
    fitted = ImageOps.contain(im, (size, size), Image.LANCZOS)
    canvas = Image.new("RGBA", (size, size), TRANSPARENT)
    x = (size - fitted.width) // 2
    y = (size - fitted.height) // 2
    canvas.paste(fitted, (x, y), fitted)
    return canvas


def background_canvas(size: int, color: Optional[str] = None, use_gradient: bool = False) -> Image.Image:
    """Transparent, solid or gradient square. A gradient needs a base color."""
    if use_gradient and color:
        return gradient_image(size, color)
    if color:
        return Image.new("RGBA", (size, size), color)
    return Image.new("RGBA", (size, size), TRANSPARENT)


def shape_mask(shape: str, size: int) -> Image.Image:
    if shape == "squircle":
        svg = squircle_svg(size, size)
    else:
        svg = rounded_rectangle_svg(size, size, corner_radius(size, MACOS_CORNER_RADIUS_PERCENT))
    return rasterize_mask(svg)


def apply_mask(background: Image.Image, mask: Image.Image) -> Image.Image:
    """Destination-in: keep the background only where the mask is opaque."""
    out = background.convert("RGBA")
    alpha = ImageChops.multiply(out.getchannel("A"), mask.convert("L"))
    out.putalpha(alpha)
    return out


# =========================
# Pipeline
# =========================

def render_icon(spec: IconSpec, source: Optional[Image.Image] = None) -> Image.Image:
    """Compose the final RGBA image for `spec` (no file I/O when `source` is given)."""
    target = spec.target_size

    outer, tile = inner_edge(target, spec.outer_padding)
    pad, icon_size = inner_edge(tile, spec.padding)

    if source is None:
        source = load_image_any(spec.input_path, min_side=target)
    icon = resize_contain(source, icon_size)

    canvas = background_canvas(tile, spec.background_color, spec.use_gradient)
    if spec.shape is not None:
        canvas = apply_mask(canvas, shape_mask(spec.shape, tile))

    layer = Image.new("RGBA", (tile, tile), TRANSPARENT)
    layer.paste(icon, (pad, pad))
    canvas = Image.alpha_composite(canvas, layer)

    if outer == 0:
        return canvas

    final = Image.new("RGBA", (target, target), TRANSPARENT)
    final.paste(canvas, (outer, outer))
    return final


def make_icon(spec: IconSpec, *, logfn: Callable[[str], None] | None = None) -> Path:
    """Render `spec` and write it as PNG to spec.output_path."""
    out = Path(spec.output_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    im = render_icon(spec)
    im.save(out, format="PNG")

    if logfn:
        extra = []
        if spec.background_color:
            extra.append(("gradient " if spec.use_gradient else "") + spec.background_color)
        if spec.shape:
            extra.append(spec.shape)
        detail = f" ({', '.join(extra)})" if extra else ""
        logfn(f"OK: {out.name} {im.width}x{im.height}{detail}")
    return out
