from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from PySide6 import QtCore

from .config import DARK_COLOR, LIGHT_COLOR, PLATFORMS, is_hex_color


APP_ORG = "iconforge"
APP_NAME = "iconforge"


@dataclass(frozen=True)
class StateKeys:
    platforms: str = "last_platforms"
    color_choice: str = "last_color_choice"   # "light" | "dark" | "custom"
    custom_color: str = "last_custom_color"
    shape: str = "last_shape"                 # "rounded-rectangle" | "squircle"
    use_gradient: str = "last_use_gradient"
    windows_solid: str = "last_windows_solid"


@dataclass
class Answers:
    """Prompt defaults / last answers. `platforms` None means "pre-check by prerequisite"."""

    platforms: Optional[List[str]] = None
    color_choice: str = "dark"
    custom_color: str = DARK_COLOR
    shape: str = "rounded-rectangle"
    use_gradient: bool = True
    windows_solid: bool = False

    @property
    def background_color(self) -> str:
        if self.color_choice == "light":
            return LIGHT_COLOR
        if self.color_choice == "dark":
            return DARK_COLOR
        return self.custom_color


class StateMemory:
    """
    Remembers the last prompt answers with QSettings.

    Pass `path` to use an INI file (tests, portable runs); otherwise the
    native per-user store for APP_ORG/APP_NAME is used.
    """

    COLOR_CHOICES: Tuple[str, ...] = ("light", "dark", "custom")
    SHAPES: Tuple[str, ...] = ("rounded-rectangle", "squircle")

    def __init__(self, path: Optional[Path] = None, org: str = APP_ORG, app: str = APP_NAME):
        if path is not None:
            self.settings = QtCore.QSettings(str(path), QtCore.QSettings.IniFormat)
        else:
            self.settings = QtCore.QSettings(org, app)
        self.k = StateKeys()

    # ----------------- Helpers -----------------

    def _str(self, key: str, default: str) -> str:
        raw = self.settings.value(key, default)
        return str(raw).strip() if raw is not None else default

    def _bool(self, key: str, default: bool) -> bool:
        raw = self.settings.value(key, default)
        if isinstance(raw, bool):
            return raw
        s = str(raw).strip().lower()
        if s in ("true", "1", "yes"):
            return True
        if s in ("false", "0", "no"):
            return False
        return default

    def _platforms(self) -> Optional[List[str]]:
        if not self.settings.contains(self.k.platforms):
            return None
        raw = self.settings.value(self.k.platforms, [])
        # INI round-trips a one-element list as a plain string.
        if isinstance(raw, str):
            raw = [raw] if raw else []
        out: List[str] = []
        for x in raw or []:
            s = str(x).strip()
            if s in PLATFORMS and s not in out:
                out.append(s)
        return out or None

    # ----------------- Load / Save -----------------

    def load(self) -> Answers:
        d = Answers()
        color_choice = self._str(self.k.color_choice, d.color_choice)
        custom = self._str(self.k.custom_color, d.custom_color)
        shape = self._str(self.k.shape, d.shape)
        return Answers(
            platforms=self._platforms(),
            color_choice=color_choice if color_choice in self.COLOR_CHOICES else d.color_choice,
            custom_color=custom if is_hex_color(custom) else d.custom_color,
            shape=shape if shape in self.SHAPES else d.shape,
            use_gradient=self._bool(self.k.use_gradient, d.use_gradient),
            windows_solid=self._bool(self.k.windows_solid, d.windows_solid),
        )

    def save(self, answers: Answers) -> None:
        self.settings.setValue(self.k.platforms, list(answers.platforms or []))
        self.settings.setValue(self.k.color_choice, answers.color_choice)
        self.settings.setValue(self.k.custom_color, answers.custom_color)
        self.settings.setValue(self.k.shape, answers.shape)
        self.settings.setValue(self.k.use_gradient, bool(answers.use_gradient))
        self.settings.setValue(self.k.windows_solid, bool(answers.windows_solid))
        self.settings.sync()
