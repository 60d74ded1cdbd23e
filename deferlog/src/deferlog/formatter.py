"""Render log entries as single text lines."""

import logging
import math
import os

from .entry import ErrorValue, LogEntry, Primitive, Structured
from .serialize import dump_json, inspect_value, safe_str
from .styles import ANSI, PLAIN, format_duration

DATEFMT = "%Y.%m.%d %H:%M:%S %p"


def _render_metadata(item, palette):
    if isinstance(item, Primitive):
        return palette.colorize(dump_json(item.value), "meta")
    if isinstance(item, ErrorValue):
        return palette.colorize(inspect_value(item.as_dict()), "inspect")
    if isinstance(item, Structured):
        return palette.colorize(inspect_value(item.value), "inspect")
    return palette.colorize(inspect_value(item), "inspect")


def render_line(entry, timestamp, pid=None, palette=PLAIN):
    """Build ``<timestamp> <LEVEL> [<label>] (<pid>): <message> ...`` for ``entry``."""
    if pid is None:
        pid = os.getpid()
    level = safe_str(entry.level)
    header = [
        palette.colorize(timestamp, "timestamp"),
        palette.colorize(level.upper(), palette.level_role(level)),
        palette.colorize(f"[{safe_str(entry.label)}]", "label"),
        palette.colorize(f"({pid}):", "pid"),
    ]
    body = [" ".join(header), palette.colorize(safe_str(entry.message), "message")]

    for item in entry.metadata or ():
        body.append(_render_metadata(item, palette))

    elapsed = entry.elapsed_ms
    if isinstance(elapsed, (int, float)) and math.isfinite(elapsed):
        body.append(palette.colorize(f"+{format_duration(elapsed)}", "elapsed"))

    return " ".join(body)


def _levelname(levelno):
    for name, value in (("error", 40), ("warn", 30), ("info", 20), ("verbose", 15), ("debug", 10)):
        if levelno >= value:
            return name
    return "silly"


class LineFormatter(logging.Formatter):
    """``logging.Formatter`` that renders deferlog entries."""
    def __init__(self, use_color=False, datefmt=DATEFMT, palette=None):
        super().__init__(datefmt=datefmt)
        if palette is None:
            palette = ANSI if use_color else PLAIN
        self.palette = palette

    def entry_for(self, record):
        """Return the entry carried by ``record``, or build one for foreign records."""
        entry = getattr(record, "entry", None)
        if isinstance(entry, LogEntry):
            return entry
        message = record.getMessage()
        args = ()
        if record.exc_info and record.exc_info[1] is not None:
            args = (record.exc_info[1],)
        return LogEntry.build(_levelname(record.levelno), record.name, message, None, args)

    def format(self, record):
        entry = self.entry_for(record)
        timestamp = self.formatTime(record, self.datefmt)
        return render_line(entry, timestamp, pid=record.process, palette=self.palette)
