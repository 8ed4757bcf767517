from __future__ import annotations

import os
import sys
from typing import TextIO


ANSI_RESET = "\x1b[0m"
ANSI_BOLD = "\x1b[1m"
ANSI_DIM = "\x1b[2m"
ANSI_RED = "\x1b[31m"
ANSI_GREEN = "\x1b[32m"
ANSI_YELLOW = "\x1b[33m"
ANSI_CYAN = "\x1b[36m"
ANSI_WHITE = "\x1b[37m"

_COLOR_OVERRIDE: bool | None = None


def use_color(enabled: bool | None = None, stream: TextIO | None = None) -> bool:
    if enabled is not None:
        return enabled
    if _COLOR_OVERRIDE is not None:
        return _COLOR_OVERRIDE
    if os.environ.get("NO_COLOR") is not None:
        return False
    target = stream if stream is not None else sys.stdout
    try:
        return target.isatty()
    except (AttributeError, ValueError):
        return False


def colorize(
    text: str,
    color: str | None,
    enabled: bool | None = None,
    bold: bool = False,
    dim: bool = False,
    stream: TextIO | None = None,
) -> str:
    if color is None or not use_color(enabled, stream):
        return text
    parts = []
    if bold:
        parts.append(ANSI_BOLD)
    if dim:
        parts.append(ANSI_DIM)
    parts.append(color)
    parts.append(text)
    parts.append(ANSI_RESET)
    return "".join(parts)


def set_color_override(enabled: bool | None) -> None:
    global _COLOR_OVERRIDE
    _COLOR_OVERRIDE = enabled


def header(text: str, enabled: bool | None = None, stream: TextIO | None = None) -> str:
    return colorize(text, ANSI_CYAN, enabled, bold=True, stream=stream)


def ok(text: str, enabled: bool | None = None, stream: TextIO | None = None) -> str:
    return colorize(text, ANSI_GREEN, enabled, stream=stream)


def warn(text: str, enabled: bool | None = None, stream: TextIO | None = None) -> str:
    return colorize(text, ANSI_YELLOW, enabled, stream=stream)


def danger(text: str, enabled: bool | None = None, stream: TextIO | None = None) -> str:
    return colorize(text, ANSI_RED, enabled, bold=True, stream=stream)


def muted(text: str, enabled: bool | None = None, stream: TextIO | None = None) -> str:
    return colorize(text, ANSI_WHITE, enabled, dim=True, stream=stream)
