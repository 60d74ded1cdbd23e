from .logger import ainit, create_logger, default_context, init
from .core import Logger, LoggingContext, State
from .entry import LogEntry
from .formatter import LineFormatter, render_line
from .queue import DeferredQueue
from .settings import ConfigurationError, LogSettings

__all__ = [
    "ainit",
    "default_context",
    "create_logger",
    "init",
    "Logger",
    "LoggingContext",
    "State",
    "LogEntry",
    "LineFormatter",
    "render_line",
    "DeferredQueue",
    "ConfigurationError",
    "LogSettings",
]
