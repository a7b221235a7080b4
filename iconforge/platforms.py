#!/usr/bin/env python3
"""platforms.py - protect / reconcile the icon trees that `tauri icon` overwrites

`tauri icon` rewrites every platform's icons on each call, whatever PNG it is
given. Each ProtectedDir snapshots one tree before the tool runs and merges
the snapshot back afterwards.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .config import (
    ANDROID_ADAPTIVE_DIRS,
    ANDROID_BACKGROUND_DRAWABLE,
    ANDROID_BACKGROUND_XML,
    GENERATED_ICNS,
    MACOS_ICNS,
    Layout,
)
from .fileops import backup, ensure_dir, move, restore
from .gradient import android_drawable_xml

__all__ = [
    "ProtectedDir",
    "WindowsIcons",
    "IOSIcons",
    "AndroidAdaptive",
    "protected_dirs",
    "adopt_macos_icns",
    "Solid",
    "Gradient",
    "AndroidBackground",
    "apply_android_background",
]

LogFn = Callable[[str], None]


# =========================
# Protected directories
# =========================

class ProtectedDir:
    """One directory tree guarded across `tauri icon` runs."""

    key: str = ""
    platform: str = ""

    def __init__(self, layout: Layout):
        self.layout = layout

    def sources(self) -> List[Tuple[Path, str]]:
        """(live path, relative name inside the backup) pairs."""
        raise NotImplementedError

    def exclude(self) -> Tuple[str, ...]:
        return ()

    def protect(self, backups: Path) -> bool:
        """Copy existing live trees under backups/<key>. Missing trees are skipped."""
        taken = False
        for live, rel in self.sources():
            dst = backups / self.key / rel if rel else backups / self.key
            taken = backup(live, dst, exclude=self.exclude()) or taken
        return taken

    def snapshot(self, backups: Path) -> bool:
        """Replace the stored backup with the current live state."""
        shutil.rmtree(backups / self.key, ignore_errors=True)
        return self.protect(backups)

    def reconcile(self, backups: Path) -> bool:
        """Merge backups/<key> over the live trees. Missing backup is a no-op."""
        restored = False
        for live, rel in self.sources():
            src = backups / self.key / rel if rel else backups / self.key
            restored = restore(src, live) or restored
        return restored


class WindowsIcons(ProtectedDir):
    key = "windows-icons"
    platform = "windows"

    def sources(self) -> List[Tuple[Path, str]]:
        return [(self.layout.tauri_icons, "")]

    def exclude(self) -> Tuple[str, ...]:
        # Never written by `tauri icon`; a stale copy would overwrite the current one.
        return (MACOS_ICNS,)


class IOSIcons(ProtectedDir):
    key = "ios-icons"
    platform = "ios"

    def sources(self) -> List[Tuple[Path, str]]:
        return [(self.layout.ios_icons, "")]


class AndroidAdaptive(ProtectedDir):
    key = "android-adaptive"
    platform = "android"

    def sources(self) -> List[Tuple[Path, str]]:
        res = self.layout.android_res
        return [(res / d, d) for d in ANDROID_ADAPTIVE_DIRS]


def protected_dirs(layout: Layout) -> Dict[str, ProtectedDir]:
    """Handlers keyed by platform, in final-restore order."""
    handlers = (WindowsIcons(layout), IOSIcons(layout), AndroidAdaptive(layout))
    return {h.platform: h for h in handlers}


def adopt_macos_icns(layout: Layout, logfn: LogFn | None = None) -> bool:
    """Rename the freshly generated icon.icns to the macOS-only variant."""
    src = layout.tauri_icons / GENERATED_ICNS
    if not src.exists():
        return False
    dst = move(src, layout.tauri_icons / MACOS_ICNS)
    if logfn:
        logfn(f"Moved {src.name} -> {dst.name}")
    return True


# =========================
# Android background
# =========================

@dataclass(frozen=True)
class Solid:
    color: str


@dataclass(frozen=True)
class Gradient:
    color: str


AndroidBackground = Union[Solid, Gradient]

COLOR_REF = "@color/ic_launcher_background"
DRAWABLE_REF = "@drawable/ic_launcher_background"

_COLOR_NODE_RE = re.compile(r'(<color name="ic_launcher_background">).*?(</color>)')

_COLOR_RESOURCES = """<?xml version="1.0" encoding="utf-8"?>
<resources>
  <color name="ic_launcher_background">{color}</color>
</resources>
"""


def _adaptive_descriptors(layout: Layout) -> List[Path]:
    anydpi = next((d for d in ANDROID_ADAPTIVE_DIRS if d.startswith("mipmap-anydpi")), None)
    if anydpi is None:
        return []
    base = layout.android_res / anydpi
    return [base / "ic_launcher.xml", base / "ic_launcher_round.xml"]


def _repoint_descriptors(layout: Layout, old: str, new: str) -> int:
    changed = 0
    for p in _adaptive_descriptors(layout):
        if not p.is_file():
            continue
        text = p.read_text(encoding="utf-8")
        updated = text.replace(old, new)
        if updated != text:
            p.write_text(updated, encoding="utf-8")
            changed += 1
    return changed


def _write_color(layout: Layout, color: str) -> Optional[Path]:
    xml_path = layout.android_res / ANDROID_BACKGROUND_XML
    if xml_path.is_file():
        text = xml_path.read_text(encoding="utf-8")
        if _COLOR_NODE_RE.search(text):
            text = _COLOR_NODE_RE.sub(lambda m: f"{m.group(1)}{color}{m.group(2)}", text, count=1)
            xml_path.write_text(text, encoding="utf-8")
            return xml_path
    # Missing file or node: only write one if an adaptive icon points at it.
    if not any(COLOR_REF in p.read_text(encoding="utf-8") for p in _adaptive_descriptors(layout) if p.is_file()):
        return None
    ensure_dir(xml_path.parent)
    xml_path.write_text(_COLOR_RESOURCES.format(color=color), encoding="utf-8")
    return xml_path


def apply_android_background(
    layout: Layout, background: AndroidBackground, logfn: LogFn | None = None
) -> Optional[Path]:
    """
    Solid: set the launcher background color and point the adaptive icons at it.
    Gradient: write the layer-list drawable and point the adaptive icons at it.

    Returns the resource file that the descriptors now reference, or None when
    there is nothing to patch (no generated Android project, or no color
    resource and nothing referencing one). Never creates the res tree.
    """
    if not isinstance(background, (Solid, Gradient)):
        raise TypeError(f"Unsupported Android background: {background!r}")

    if not layout.android_res.is_dir():
        if logfn:
            logfn("Android project not found, background left unchanged")
        return None

    if isinstance(background, Gradient):
        target = layout.android_res / ANDROID_BACKGROUND_DRAWABLE
        ensure_dir(target.parent)
        target.write_text(android_drawable_xml(background.color), encoding="utf-8")
        n = _repoint_descriptors(layout, COLOR_REF, DRAWABLE_REF)
    else:
        n = _repoint_descriptors(layout, DRAWABLE_REF, COLOR_REF)
        target = _write_color(layout, background.color)
        if target is None:
            if logfn:
                logfn(f"No {ANDROID_BACKGROUND_XML} to update")
            return None

    if logfn:
        logfn(f"Android background -> {target.relative_to(layout.android_res)} ({n} descriptor(s) updated)")
    return target
