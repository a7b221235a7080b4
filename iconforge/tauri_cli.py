#!/usr/bin/env python3
"""tauri_cli.py - the external `tauri icon` command"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from .config import TAURI_ICON_COMMAND
from .errors import ExternalToolError

__all__ = ["IconTool"]


class IconTool:
    """
    Runs `<command> <png>` in the project root, one call at a time.

    The tool rewrites the whole icon tree, so callers must wait for each call
    to finish before starting the next one.
    """

    def __init__(
        self,
        cwd: Path,
        *,
        command: Sequence[str] = TAURI_ICON_COMMAND,
        logfn: Callable[[str], None] | None = None,
    ):
        self.cwd = Path(cwd)
        self.command = tuple(command)
        self.logfn = logfn

    def generate(self, icon_path: Path) -> None:
        args = [*self.command, str(icon_path)]
        # Resolves pnpm.cmd and friends on Windows.
        args[0] = shutil.which(args[0]) or args[0]
        if self.logfn:
            self.logfn(f"Running: {' '.join(args)}")
        try:
            proc = subprocess.run(args, cwd=str(self.cwd))
        except OSError as e:
            raise ExternalToolError(args, None, str(e)) from e

        if proc.returncode != 0:
            raise ExternalToolError(args, proc.returncode)

    def __repr__(self) -> str:
        return f"IconTool(cwd={self.cwd!s}, command={self.command!r})"
