from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass
class StatusBar:
    label: str
    enabled: bool = True
    _last_percent: int = -1

    def __enter__(self) -> "StatusBar":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Leave the bar where it stopped when the file was rejected.
        if exc_type is None:
            self.finish()
        elif self.enabled and self._last_percent >= 0:
            sys.stderr.write("\n")
            sys.stderr.flush()

    def update(self, percent: int) -> None:
        if not self.enabled:
            return
        percent = max(0, min(100, percent))
        if percent == self._last_percent:
            return
        self._last_percent = percent
        sys.stderr.write(f"\r{self.label} {percent:3d}%")
        sys.stderr.flush()

    def finish(self) -> None:
        if not self.enabled:
            return
        if self._last_percent < 100:
            self.update(100)
        sys.stderr.write("\n")
        sys.stderr.flush()


def should_show_statusbar() -> bool:
    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


def build_statusbar(path: Path, enabled: bool = True) -> StatusBar:
    label = f"Reading {path.name}"
    return StatusBar(label=label, enabled=enabled and should_show_statusbar())
