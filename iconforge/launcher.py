#!/usr/bin/env python3
"""
launcher.py - `iconforge` entry point

Run from the Tauri project root:
    iconforge
    python -m iconforge

Exit status: 0 on success, 1 on any fatal error, 130 when interrupted.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

from .config import Layout
from .errors import IconForgeError
from .orchestrator import Orchestrator, RunOptions
from .prompts import Prompter, collect_answers
from .reporter import Reporter, default_log_file
from .state_memory import StateMemory
from .tauri_cli import IconTool


# ============================================================
# Windows Cairo DLL patch
# ============================================================

def _patch_cairo_dll_path() -> None:
    """Ensure libcairo (needed by CairoSVG) is discoverable on Windows."""
    if os.name != "nt":
        return

    cairo_bin = r"C:\msys64\ucrt64\bin"
    if not os.path.isdir(cairo_bin):
        return

    try:
        os.add_dll_directory(cairo_bin)  # type: ignore[attr-defined]
    except OSError:
        pass

    os.environ["PATH"] = cairo_bin + os.pathsep + os.environ.get("PATH", "")


# ============================================================
# Wiring
# ============================================================

def _options_collector(layout: Layout, prompter: Prompter, memory: StateMemory) -> Callable[[], RunOptions]:
    def collect() -> RunOptions:
        answers = collect_answers(prompter, layout.root, memory.load())
        memory.save(answers)
        return RunOptions.from_answers(answers)

    return collect


def main(
    root: Optional[Path] = None,
    *,
    prompter: Optional[Prompter] = None,
    memory: Optional[StateMemory] = None,
    tool=None,
    reporter: Optional[Reporter] = None,
) -> int:
    _patch_cairo_dll_path()

    layout = Layout(Path(root or Path.cwd()).resolve())
    reporter = reporter or Reporter(log_file=default_log_file())
    orchestrator = Orchestrator(
        layout,
        tool or IconTool(layout.root, logfn=reporter.logfn),
        _options_collector(layout, prompter or Prompter(), memory or StateMemory()),
        reporter,
    )

    try:
        orchestrator.run()
        return 0
    except IconForgeError as e:
        reporter.fail(str(e))
        return 1
    except KeyboardInterrupt:
        reporter.fail("Interrupted")
        return 130
    except Exception as e:
        reporter.fail(f"{type(e).__name__}: {e}")
        return 1


def main_exit() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    main_exit()
