"""Sink construction on top of stdlib logging handlers."""

import itertools
import logging
import logging.handlers

import colorama

from .formatter import LineFormatter
from .settings import LEVELS

_ids = itertools.count(1)


class Sink:
    """Deliver entries to a private, non-propagating ``logging.Logger``.

    Handler errors are reported by ``logging.Handler.handleError`` and never
    raised back to the caller.
    """
    def __init__(self, handlers, level="info", name=None):
        self.name = name or f"deferlog.sink.{next(_ids)}"
        self._logger = logging.Logger(self.name, LEVELS[level])
        self._logger.propagate = False
        for handler in handlers:
            self._logger.addHandler(handler)

    @property
    def handlers(self):
        return list(self._logger.handlers)

    def emit(self, entry):
        """Deliver one entry."""
        levelno = LEVELS.get(entry.level, logging.INFO)
        self._logger.log(levelno, "%s", entry.message, extra={"entry": entry})

    def close(self):
        """Flush and close every handler."""
        for handler in self.handlers:
            try:
                handler.flush()
                handler.close()
            except Exception:  # pylint: disable=broad-exception-caught
                pass
            self._logger.removeHandler(handler)


def _file_handler(options):
    handler = logging.handlers.RotatingFileHandler(
        options["filename"],
        maxBytes=options["max_size"],
        backupCount=options["max_files"],
        encoding=options["encoding"],
    )
    handler.setFormatter(LineFormatter(use_color=options["use_color"], datefmt=options["datefmt"]))
    if options["level"] is not None:
        handler.setLevel(LEVELS[options["level"]])
    return handler


def _console_handler(options):
    if options["use_color"]:
        colorama.just_fix_windows_console()
    handler = logging.StreamHandler(options["stream"])
    handler.setFormatter(LineFormatter(use_color=options["use_color"], datefmt=options["datefmt"]))
    if options["level"] is not None:
        handler.setLevel(LEVELS[options["level"]])
    return handler


def build_sink(settings):
    """Create the sink described by ``settings``.

    Validation happens before any handler is created.
    """
    file_options, console_options = settings.validate()
    handlers = [_file_handler(file_options)]
    try:
        if not console_options["silent"]:
            handlers.append(_console_handler(console_options))
    except Exception:
        handlers[0].close()
        raise
    for transport in settings.transports:
        if transport.formatter is None:
            transport.setFormatter(LineFormatter())
        handlers.append(transport)
    return Sink(handlers, level=settings.level)
