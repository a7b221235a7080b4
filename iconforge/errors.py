"""errors.py - exception types raised by the pipeline and caught by the launcher"""

from __future__ import annotations

from typing import Optional, Sequence


class IconForgeError(Exception):
    """Base class for every fatal pipeline error."""


class InputIconNotFound(IconForgeError):
    pass


class IconGeometryError(IconForgeError):
    """Padding leaves no room for the icon (edge length <= 0)."""


class ExternalToolError(IconForgeError):
    """The external icon CLI could not be launched or exited non-zero."""

    def __init__(self, command: Sequence[str], returncode: Optional[int], detail: str = ""):
        self.command = list(command)
        self.returncode = returncode
        msg = f"Command failed: {' '.join(self.command)}"
        if returncode is not None:
            msg += f" (exit code {returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
