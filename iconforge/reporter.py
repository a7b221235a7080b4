#!/usr/bin/env python3
"""reporter.py - phase progress on the console + timestamped log file"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

__all__ = ["LOG_MAX_BYTES", "default_log_file", "Reporter"]

LOG_MAX_BYTES = 2_000_000


def default_log_file() -> Path:
    return Path.home() / ".iconforge" / "Logs" / "iconforge.log"


class Reporter:
    """
    Console lines:
      start("Generating macOS icon")  ->  "… Generating macOS icon"
      succeed("macOS icon generated") ->  "✔ macOS icon generated"
      fail("boom")                    ->  "✘ boom"   (replaces the pending phase)

    Each line is also appended to `log_file` with a timestamp. Log file errors
    are ignored.
    """

    def __init__(self, stream: Optional[TextIO] = None, log_file: Optional[Path] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.log_file = Path(log_file) if log_file else None
        self.phase: Optional[str] = None

    # ----------------------------
    # Log file
    # ----------------------------

    def _rotate_log_if_needed(self) -> None:
        assert self.log_file is not None
        try:
            if self.log_file.exists() and self.log_file.stat().st_size > LOG_MAX_BYTES:
                bak = self.log_file.with_name(self.log_file.name + ".1")
                bak.unlink(missing_ok=True)
                self.log_file.rename(bak)
        except OSError:
            pass

    def _log(self, msg: str) -> None:
        if self.log_file is None:
            return
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._rotate_log_if_needed()
            ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            with self.log_file.open("a", encoding="utf-8", errors="ignore") as f:
                f.write(f"[{ts}] {msg}\n")
        except OSError:
            pass

    # ----------------------------
    # Console
    # ----------------------------

    def _emit(self, line: str) -> None:
        print(line, file=self.stream, flush=True)
        self._log(line)

    def start(self, phase: str) -> None:
        self.phase = phase
        self._emit(f"… {phase}")

    def succeed(self, msg: Optional[str] = None) -> None:
        text = msg or self.phase or "Done"
        self.phase = None
        self._emit(f"✔ {text}")

    def fail(self, msg: str) -> None:
        if self.phase:
            msg = f"{self.phase} failed: {msg}"
        self.phase = None
        self._emit(f"✘ {msg}")

    def info(self, msg: str) -> None:
        self._emit(f"  {msg}")

    @property
    def logfn(self) -> Callable[[str], None]:
        """Callback for engine functions that take a `logfn`."""
        return self.info
