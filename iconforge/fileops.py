#!/usr/bin/env python3
"""fileops.py - filesystem helpers: input discovery, backup/restore, run workspace

Backup and restore both use merge semantics (copytree with dirs_exist_ok):
files present in both places are overwritten, extras are never deleted.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, Iterable, Optional

from .config import INPUT_ICON_CANDIDATES, Layout
from .errors import InputIconNotFound

__all__ = [
    "ensure_dir",
    "find_input_icon",
    "backup",
    "restore",
    "move",
    "RunWorkspace",
]


def ensure_dir(path: Path) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def find_input_icon(assets_dir: Path, candidates: Iterable[str] = INPUT_ICON_CANDIDATES) -> Path:
    """Return the first existing candidate under assets_dir."""
    names = list(candidates)
    for name in names:
        p = Path(assets_dir) / name
        if p.is_file():
            return p
    raise InputIconNotFound(f"No input icon found in {assets_dir}. Please add one of: {', '.join(names)}")


def backup(source: Path, backup_path: Path, *, exclude: Iterable[str] = ()) -> bool:
    """
    Copy `source` (file or directory) into `backup_path`.
    Names in `exclude` are skipped at the top level of a directory source.
    Returns False (no-op) when source does not exist.
    """
    source = Path(source)
    backup_path = Path(backup_path)
    if not source.exists():
        return False

    ensure_dir(backup_path.parent)
    if source.is_dir():
        skip = set(exclude)

        def _ignore(directory: str, names: list) -> set:
            if Path(directory) == source:
                return skip.intersection(names)
            return set()

        shutil.copytree(source, backup_path, ignore=_ignore, dirs_exist_ok=True)
    else:
        shutil.copy2(source, backup_path)
    return True


def restore(backup_path: Path, original: Path) -> bool:
    """Merge `backup_path` back over `original`. Missing backup is a no-op."""
    backup_path = Path(backup_path)
    original = Path(original)
    if not backup_path.exists():
        return False

    ensure_dir(original.parent)
    if backup_path.is_dir():
        shutil.copytree(backup_path, original, dirs_exist_ok=True)
    else:
        shutil.copy2(backup_path, original)
    return True


def move(source: Path, destination: Path) -> Path:
    destination = Path(destination)
    ensure_dir(destination.parent)
    Path(source).replace(destination)
    return destination


# =========================
# Per-run workspace
# =========================

class RunWorkspace:
    """
    Context manager owning the per-run temporary root (assets/.temp-icons).

    - __enter__ creates a fresh temp root.
    - __exit__ always removes it. When the block raised and backups were taken,
      the backups are first moved to the recovery directory so nothing is lost.
    """

    BACKUPS = "backups"

    def __init__(self, layout: Layout, *, logfn: Callable[[str], None] | None = None):
        self.layout = layout
        self.logfn = logfn

    @property
    def root(self) -> Path:
        return self.layout.temp

    @property
    def backups(self) -> Path:
        return self.root / self.BACKUPS

    def backup_path(self, key: str) -> Path:
        return self.backups / key

    def temp_path(self, name: str) -> Path:
        return self.root / name

    def __enter__(self) -> "RunWorkspace":
        if self.root.exists():
            shutil.rmtree(self.root)
        ensure_dir(self.backups)
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        try:
            if exc_type is not None:
                self._preserve_backups()
        finally:
            shutil.rmtree(self.root, ignore_errors=True)
        return None

    def _preserve_backups(self) -> None:
        if not self.backups.exists() or not any(self.backups.iterdir()):
            return
        target = self.layout.recovery
        if target.exists():
            # Only left over when restoring it failed earlier in this run.
            self._log(f"Unrestored recovery still at {target}; keeping it and dropping this run's backups")
            return
        ensure_dir(target.parent)
        shutil.move(str(self.backups), str(target))
        self._log(f"Backups preserved at {target}; they are restored on the next run")

    def _log(self, msg: str) -> None:
        if self.logfn:
            self.logfn(msg)
