#!/usr/bin/env python3
"""prompts.py - interactive option collection (terminal)

Every question has a default (from StateMemory); pressing Enter accepts it.
Invalid answers re-ask the same question, they never raise.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO, Tuple, TypeVar

from .config import DARK_COLOR, LIGHT_COLOR, PLATFORMS, is_hex_color
from .state_memory import Answers

__all__ = ["Prompter", "collect_answers"]

T = TypeVar("T")
Choice = Tuple[str, T]


class Prompter:
    """Small numbered-menu prompt toolkit over an input function and a stream."""

    def __init__(self, input_fn: Callable[[str], str] = input, stream: Optional[TextIO] = None):
        self.input_fn = input_fn
        self.stream = stream if stream is not None else sys.stdout

    def _say(self, line: str) -> None:
        print(line, file=self.stream, flush=True)

    def _ask(self, prompt: str) -> str:
        return self.input_fn(prompt).strip()

    # ----------------------------
    # Primitives
    # ----------------------------

    def select(self, message: str, choices: Sequence[Choice], default: T) -> T:
        values = [v for _, v in choices]
        default_idx = values.index(default) + 1 if default in values else 1
        self._say(f"? {message}")
        for i, (label, _) in enumerate(choices, 1):
            marker = ">" if i == default_idx else " "
            self._say(f" {marker} {i}) {label}")
        while True:
            raw = self._ask(f"  Choice [{default_idx}]: ")
            if not raw:
                return values[default_idx - 1]
            if raw.isdigit() and 1 <= int(raw) <= len(values):
                return values[int(raw) - 1]
            self._say(f"  Please enter a number between 1 and {len(values)}")

    def checkbox(
        self,
        message: str,
        choices: Sequence[Choice],
        checked: Sequence[T],
        *,
        required_msg: str = "Please select at least one option",
    ) -> List[T]:
        values = [v for _, v in choices]
        self._say(f"? {message}")
        for i, (label, value) in enumerate(choices, 1):
            mark = "x" if value in checked else " "
            self._say(f"  [{mark}] {i}) {label}")
        while True:
            raw = self._ask("  Numbers, comma separated [Enter = marked]: ")
            if not raw:
                picked = [v for v in values if v in checked]
            else:
                picked = self._parse_numbers(raw, len(values))
                if picked is None:
                    self._say(f"  Please enter numbers between 1 and {len(values)}")
                    continue
                picked = [values[i - 1] for i in picked]
            if picked:
                return picked
            self._say(f"  {required_msg}")

    def text(self, message: str, default: str, validate: Callable[[str], Optional[str]]) -> str:
        """`validate` returns an error message, or None when the value is accepted."""
        while True:
            raw = self._ask(f"? {message} [{default}]: ") or default
            err = validate(raw)
            if err is None:
                return raw
            self._say(f"  {err}")

    @staticmethod
    def _parse_numbers(raw: str, upper: int) -> Optional[List[int]]:
        out: List[int] = []
        for piece in raw.replace(" ", ",").split(","):
            piece = piece.strip()
            if not piece:
                continue
            if not piece.isdigit() or not (1 <= int(piece) <= upper):
                return None
            n = int(piece)
            if n not in out:
                out.append(n)
        return sorted(out)

    # ----------------------------
    # Questions
    # ----------------------------

    def platforms(self, root: Path, remembered: Optional[Sequence[str]] = None) -> List[str]:
        choices: List[Choice] = []
        checked: List[str] = []
        for key, cfg in PLATFORMS.items():
            available = cfg.prerequisite_met(root)
            label = cfg.name if available else f"{cfg.name} ({cfg.prerequisite} not found)"
            choices.append((label, key))
            wanted = key in remembered if remembered else True
            if available and wanted:
                checked.append(key)
        return self.checkbox(
            "Select platforms to generate icons for:",
            choices,
            checked,
            required_msg="Please select at least one platform",
        )

    def background_color(self, default_choice: str = "dark", default_custom: str = DARK_COLOR) -> Tuple[str, str]:
        """Return (choice, hex)."""
        choice = self.select(
            "Choose a background color:",
            [("Light", "light"), ("Dark", "dark"), ("Custom hex code", "custom")],
            default_choice,
        )
        if choice == "light":
            return choice, LIGHT_COLOR
        if choice == "dark":
            return choice, DARK_COLOR
        value = self.text(
            "Enter a custom hex color:",
            default_custom if is_hex_color(default_custom) else DARK_COLOR,
            lambda v: None if is_hex_color(v) else "Please enter a valid hex color (e.g., #171717)",
        )
        return choice, value

    def background_shape(self, default: str = "rounded-rectangle") -> str:
        return self.select(
            "Choose background shape:",
            [("Rounded Rectangle", "rounded-rectangle"), ("Squircle", "squircle")],
            default,
        )

    def use_gradient(self, default: bool = True) -> bool:
        return self.select(
            "Use a subtle gradient background?",
            [("Yes - Subtle gradient", True), ("No - Solid color", False)],
            default,
        )

    def windows_solid_background(self, default: bool = False) -> bool:
        return self.select(
            "Windows icon background:",
            [("Transparent", False), ("Solid", True)],
            default,
        )


def collect_answers(prompter: Prompter, root: Path, defaults: Answers) -> Answers:
    """Ask every question in order; the Windows question only when Windows is picked."""
    platforms = prompter.platforms(root, defaults.platforms)
    color_choice, color = prompter.background_color(defaults.color_choice, defaults.custom_color)
    shape = prompter.background_shape(defaults.shape)
    gradient = prompter.use_gradient(defaults.use_gradient)
    windows_solid = defaults.windows_solid
    if "windows" in platforms:
        windows_solid = prompter.windows_solid_background(defaults.windows_solid)

    return Answers(
        platforms=platforms,
        color_choice=color_choice,
        custom_color=color if color_choice == "custom" else defaults.custom_color,
        shape=shape,
        use_gradient=gradient,
        windows_solid=windows_solid,
    )
