#!/usr/bin/env python3
"""config.py - static configuration for iconforge (no I/O)

Everything here is read-only and built once at import time:
- platform table (padding + prerequisite path per platform)
- project layout resolved against a project root
- compositing constants shared by the generators
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

__all__ = [
    "TARGET_SIZE",
    "MACOS_OUTER_PADDING",
    "MACOS_CORNER_RADIUS_PERCENT",
    "PADDING_RANGE",
    "INPUT_ICON_CANDIDATES",
    "ANDROID_ADAPTIVE_DIRS",
    "ANDROID_BACKGROUND_XML",
    "ANDROID_BACKGROUND_DRAWABLE",
    "GENERATED_ICNS",
    "MACOS_ICNS",
    "TAURI_ICON_COMMAND",
    "LIGHT_COLOR",
    "DARK_COLOR",
    "HEX_COLOR_RE",
    "PlatformConfig",
    "PLATFORMS",
    "Layout",
    "validate_padding",
    "is_hex_color",
]

# =========================
# Compositing constants
# =========================

TARGET_SIZE = 1024

# macOS "floating tile": transparent margin around the tile, per side.
MACOS_OUTER_PADDING = 0.12

# Corner radius of the macOS tile as a fraction of the tile edge.
MACOS_CORNER_RADIUS_PERCENT = 0.2237

# Accepted padding fraction (per side), inclusive.
PADDING_RANGE: Tuple[float, float] = (0.0, 0.3)

# First existing file wins.
INPUT_ICON_CANDIDATES: Tuple[str, ...] = ("icon.svg", "icon.png", "icon.jpg", "icon.jpeg")

# =========================
# Platform-owned files
# =========================

ANDROID_ADAPTIVE_DIRS: Tuple[str, ...] = (
    "mipmap-anydpi-v26",
    "mipmap-hdpi",
    "mipmap-mdpi",
    "mipmap-xhdpi",
    "mipmap-xxhdpi",
    "mipmap-xxxhdpi",
)

ANDROID_BACKGROUND_XML = Path("values") / "ic_launcher_background.xml"
ANDROID_BACKGROUND_DRAWABLE = Path("drawable") / "ic_launcher_background.xml"

GENERATED_ICNS = "icon.icns"
MACOS_ICNS = "icon.macOS.icns"

TAURI_ICON_COMMAND: Tuple[str, ...] = ("pnpm", "tauri", "icon")

# =========================
# Colors
# =========================

LIGHT_COLOR = "#FFFFFF"
DARK_COLOR = "#171717"

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_RE.match(value or ""))


# =========================
# Platform table
# =========================

@dataclass(frozen=True)
class PlatformConfig:
    key: str
    name: str
    padding: float
    prerequisite: Optional[str] = None

    def prerequisite_met(self, root: Path) -> bool:
        if not self.prerequisite:
            return True
        return (Path(root) / self.prerequisite).exists()


PLATFORMS: Mapping[str, PlatformConfig] = MappingProxyType({
    "android": PlatformConfig("android", "Android", 0.25, "src-tauri/gen/android"),
    "ios": PlatformConfig("ios", "iOS", 0.1, "src-tauri/gen/apple"),
    "macos": PlatformConfig("macos", "macOS", 0.1, "src-tauri/tauri.macos.conf.json"),
    "windows": PlatformConfig("windows", "Windows", 0.05),
})


def validate_padding(padding: float) -> float:
    """Return padding as float, or raise ValueError if outside PADDING_RANGE."""
    lo, hi = PADDING_RANGE
    p = float(padding)
    if not (lo <= p <= hi):
        raise ValueError(f"Padding {p} is outside the accepted range {lo}..{hi}")
    return p


# =========================
# Project layout
# =========================

@dataclass(frozen=True)
class Layout:
    """All project paths, resolved against one project root."""

    root: Path

    @property
    def assets(self) -> Path:
        return self.root / "assets"

    @property
    def temp(self) -> Path:
        return self.assets / ".temp-icons"

    @property
    def recovery(self) -> Path:
        return self.assets / ".icon-recovery"

    @property
    def tauri_icons(self) -> Path:
        return self.root / "src-tauri" / "icons"

    @property
    def android_res(self) -> Path:
        return self.root / "src-tauri" / "gen" / "android" / "app" / "src" / "main" / "res"

    @property
    def ios_icons(self) -> Path:
        return self.root / "src-tauri" / "gen" / "apple" / "Assets.xcassets" / "AppIcon.appiconset"

    def temp_icon(self, platform: str) -> Path:
        return self.temp / f"icon-{platform}.png"
