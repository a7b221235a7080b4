"""Shared fixtures for the iconforge tests."""

from __future__ import annotations

import io
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from iconforge.config import PLATFORMS, Layout
from iconforge.errors import ExternalToolError
from iconforge.reporter import Reporter


def make_png(path: Path, size: Tuple[int, int] = (64, 64), color=(255, 0, 0, 255)) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, format="PNG")
    return path


def write(path: Path, text: str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def quiet_reporter() -> Tuple[Reporter, io.StringIO]:
    buf = io.StringIO()
    return Reporter(stream=buf, log_file=None), buf


class FakeIconTool:
    """
    Stands in for `tauri icon`: like the real tool it rewrites every platform
    tree on each call. Each written file holds the platform name taken from
    the PNG file name (icon-<platform>.png). With `skip_missing_projects`
    the mobile trees are only written when their generated project exists.
    """

    def __init__(self, layout: Layout, fail_on: Optional[str] = None, *, skip_missing_projects: bool = False):
        self.layout = layout
        self.fail_on = fail_on
        self.skip_missing_projects = skip_missing_projects
        self.calls: List[str] = []
        self.images: List[Image.Image] = []

    def generate(self, icon_path: Path) -> None:
        src = self.layout.root / icon_path
        platform = src.stem.split("-", 1)[1]
        if platform == self.fail_on:
            raise ExternalToolError(["tauri", "icon", str(icon_path)], 1)
        self.calls.append(platform)
        with Image.open(src) as im:
            self.images.append(im.copy())

        write(self.layout.tauri_icons / "32x32.png", platform)
        write(self.layout.tauri_icons / "icon.icns", platform)
        write(self.layout.tauri_icons / "icon.ico", platform)
        if self._has_project("ios"):
            write(self.layout.ios_icons / "AppIcon-512@2x.png", platform)
        if self._has_project("android"):
            write(self.layout.android_res / "mipmap-hdpi" / "ic_launcher.png", platform)
            write(self.layout.android_res / "mipmap-hdpi" / "ic_launcher_foreground.png", platform)

    def _has_project(self, platform: str) -> bool:
        return not self.skip_missing_projects or PLATFORMS[platform].prerequisite_met(self.layout.root)
