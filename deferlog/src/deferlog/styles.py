"""Terminal styling and duration formatting."""

import math

from colorama import Fore, Style

ROLE_STYLES = {
    "timestamp": Style.DIM,
    "label": Fore.WHITE,
    "pid": Style.DIM,
    "message": Fore.YELLOW,
    "meta": Fore.LIGHTBLACK_EX,
    "inspect": Fore.CYAN,
    "elapsed": Style.DIM,
    "dim": Style.DIM,
    "level.error": Fore.RED,
    "level.warn": Fore.YELLOW,
    "level.info": Fore.CYAN,
    "level.debug": Fore.GREEN,
    "level.verbose": Fore.WHITE,
    "level.silly": Fore.MAGENTA,
}


class AnsiPalette:
    """Wrap text in ANSI escape codes by role."""
    def __init__(self, styles=None):
        self._styles = dict(ROLE_STYLES if styles is None else styles)

    def colorize(self, text, role):
        style = self._styles.get(role)
        if not style:
            return text
        return f"{style}{text}{Style.RESET_ALL}"

    def level_role(self, level):
        role = f"level.{level}"
        return role if role in self._styles else "dim"


class PlainPalette:
    """Palette that leaves text untouched."""
    def colorize(self, text, role):  # pylint: disable=unused-argument
        return text

    def level_role(self, level):
        return f"level.{level}"


ANSI = AnsiPalette()
PLAIN = PlainPalette()

_UNITS = (
    ("y", 365 * 24 * 60 * 60 * 1000),
    ("d", 24 * 60 * 60 * 1000),
    ("h", 60 * 60 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
)


def format_duration(ms):
    """Render milliseconds using only the largest unit, e.g. ``340ms`` or ``2m``."""
    if not isinstance(ms, (int, float)) or not math.isfinite(ms):
        raise ValueError(f"duration must be a finite number, got {ms!r}")
    sign = "-" if ms < 0 else ""
    ms = abs(ms)
    for suffix, size in _UNITS:
        if ms >= size:
            return f"{sign}{int(ms // size)}{suffix}"
    return f"{sign}{int(ms)}ms"
