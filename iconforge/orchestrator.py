#!/usr/bin/env python3
"""orchestrator.py - end-to-end icon generation run

setup dirs -> resolve input icon -> collect options -> back up platform trees
  -> per platform: render PNG -> `tauri icon` -> adopt / snapshot output
  -> restore every tree + Android background -> remove temp root

Platforms run strictly one after another: `tauri icon` rewrites the whole
icon tree, so two runs at once would race on the same directories.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, Tuple

from .compositor import IconSpec, make_icon
from .config import MACOS_OUTER_PADDING, PLATFORMS, TARGET_SIZE, Layout
from .fileops import RunWorkspace, ensure_dir, find_input_icon
from .platforms import (
    Gradient,
    ProtectedDir,
    Solid,
    adopt_macos_icns,
    apply_android_background,
    protected_dirs,
)
from .reporter import Reporter
from .state_memory import Answers

__all__ = [
    "RunOptions",
    "IconGenerator",
    "platform_spec",
    "recover_pending",
    "Orchestrator",
]


class IconGenerator(Protocol):
    def generate(self, icon_path: Path) -> None: ...


@dataclass(frozen=True)
class RunOptions:
    platforms: Tuple[str, ...]
    background_color: str
    shape: str = "rounded-rectangle"
    use_gradient: bool = False
    windows_solid: bool = False

    def __post_init__(self) -> None:
        unknown = [p for p in self.platforms if p not in PLATFORMS]
        if unknown:
            raise ValueError(f"Unknown platform(s): {', '.join(unknown)}")
        if not self.platforms:
            raise ValueError("At least one platform is required")

    @classmethod
    def from_answers(cls, answers: Answers) -> "RunOptions":
        return cls(
            platforms=tuple(answers.platforms or ()),
            background_color=answers.background_color,
            shape=answers.shape,
            use_gradient=answers.use_gradient,
            windows_solid=answers.windows_solid,
        )

    def ordered_platforms(self) -> Tuple[str, ...]:
        """Selected platforms in platform-table order."""
        return tuple(p for p in PLATFORMS if p in self.platforms)


def platform_spec(platform: str, input_path: Path, output_path: Path, opts: RunOptions) -> IconSpec:
    """
    android: transparent foreground (background lives in the adaptive-icon XML)
    ios:     full-bleed opaque tile, no mask
    macos:   floating tile with transparent margin and rounded/squircle mask
    windows: transparent, or solid background when asked for
    """
    cfg = PLATFORMS[platform]
    base = dict(input_path=input_path, output_path=output_path, padding=cfg.padding, target_size=TARGET_SIZE)

    if platform == "ios":
        return IconSpec(**base, background_color=opts.background_color, use_gradient=opts.use_gradient)
    if platform == "macos":
        return IconSpec(
            **base,
            background_color=opts.background_color,
            use_gradient=opts.use_gradient,
            shape=opts.shape,
            outer_padding=MACOS_OUTER_PADDING,
        )
    if platform == "windows" and opts.windows_solid:
        return IconSpec(**base, background_color=opts.background_color, use_gradient=opts.use_gradient)
    return IconSpec(**base)


def recover_pending(layout: Layout, handlers: Dict[str, ProtectedDir], logfn: Callable[[str], None] | None = None) -> bool:
    """Restore backups left behind by a failed run, then drop them."""
    if not layout.recovery.exists():
        return False
    for h in handlers.values():
        if h.reconcile(layout.recovery) and logfn:
            logfn(f"Recovered {h.key} from previous run")
    shutil.rmtree(layout.recovery)
    return True


class Orchestrator:
    def __init__(
        self,
        layout: Layout,
        tool: IconGenerator,
        collect_options: Callable[[], RunOptions],
        reporter: Optional[Reporter] = None,
    ):
        self.layout = layout
        self.tool = tool
        self.collect_options = collect_options
        self.reporter = reporter or Reporter()
        self.handlers = protected_dirs(layout)

    def run(self) -> None:
        """Raises on the first fatal error; the temp root is removed either way."""
        rep = self.reporter
        layout = self.layout

        rep.start("Setting up")
        ensure_dir(layout.assets)
        with RunWorkspace(layout, logfn=rep.logfn) as ws:
            recover_pending(layout, self.handlers, rep.logfn)
            input_icon = find_input_icon(layout.assets)
            rep.succeed(f"Using {input_icon.relative_to(layout.root)}")

            opts = self.collect_options()

            rep.start("Backing up platform icons")
            for h in self.handlers.values():
                if h.protect(ws.backups):
                    rep.info(f"Backed up {h.key}")
            rep.succeed("Platform icons backed up")

            for platform in opts.ordered_platforms():
                self._generate_platform(platform, input_icon, opts, ws)

            rep.start("Restoring platform icons")
            for h in self.handlers.values():
                if h.reconcile(ws.backups):
                    rep.info(f"Restored {h.key}")
            if "android" in opts.platforms:
                bg = Gradient(opts.background_color) if opts.use_gradient else Solid(opts.background_color)
                apply_android_background(layout, bg, rep.logfn)
            rep.succeed("Platform icons restored")

            rep.start("Cleaning up temporary files")
        rep.succeed("All icons generated successfully!")

    def _generate_platform(self, platform: str, input_icon: Path, opts: RunOptions, ws: RunWorkspace) -> None:
        rep = self.reporter
        name = PLATFORMS[platform].name

        rep.start(f"Generating {name} icons")
        spec = platform_spec(platform, input_icon, self.layout.temp_icon(platform), opts)
        make_icon(spec, logfn=rep.logfn)
        self.tool.generate(spec.output_path.relative_to(self.layout.root))

        if platform == "macos":
            adopt_macos_icns(self.layout, rep.logfn)
        elif platform in self.handlers:
            self.handlers[platform].snapshot(ws.backups)
        rep.succeed(f"{name} icons generated")

