"""Logging context and per-label logger facade."""

import asyncio
import enum
import logging
import sys
import threading
import time
import traceback

from .entry import LogEntry
from .lifecycle import register_excepthook
from .queue import DeferredQueue
from .serialize import safe_str
from .settings import LogSettings
from .sink import build_sink


def monotonic_ms():
    return time.monotonic() * 1000.0


class State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"


class DeferredDispatch:  # pylint: disable=too-few-public-methods
    """Queued delivery of one entry through a named sink operation."""
    __slots__ = ("context", "entry", "operation")

    def __init__(self, context, entry, operation="emit"):
        self.context = context
        self.entry = entry
        self.operation = operation

    def __call__(self):
        self.context.deliver(self.entry, self.operation)

    def __repr__(self):
        return f"<DeferredDispatch {self.operation} {self.entry.level}:{self.entry.message!r}>"


class LoggingContext:
    """Owns the sink and the queue of calls made before the sink existed."""
    def __init__(self, clock=None):
        self._lock = threading.RLock()
        self.queue = DeferredQueue(lock=self._lock)
        self.clock = clock or monotonic_ms
        self._sink = None
        self._state = State.UNINITIALIZED
        self._unhook = None

    def __repr__(self):
        return f"<LoggingContext state={self._state.value} pending={len(self.queue)}>"

    @property
    def state(self):
        return self._state

    @property
    def sink(self):
        return self._sink

    def submit(self, entry):
        """Deliver ``entry`` now, or queue it until ``init`` has finished."""
        with self._lock:
            if self._state is not State.INITIALIZED:
                self.queue.push(DeferredDispatch(self, entry))
                return
        self.deliver(entry)

    def deliver(self, entry, operation="emit"):
        """Hand ``entry`` to the installed sink.

        Failures are reported on stderr, as ``logging.Handler.handleError``
        does, and never reach the caller.
        """
        try:
            getattr(self._sink, operation)(entry)
        except Exception:  # pylint: disable=broad-exception-caught
            if logging.raiseExceptions:
                sys.stderr.write(
                    f"--- deferlog: failed to deliver {entry.level} entry from [{entry.label}] ---\n"
                )
                traceback.print_exc(file=sys.stderr)

    def _mark_initialized(self):
        self._state = State.INITIALIZED

    def init(self, settings=None):
        """Install the sink once and replay queued entries in call order.

        Raises ``ConfigurationError`` before anything is created when the
        settings are invalid. Calls after the first successful one are ignored.
        Returns the number of replayed entries.
        """
        settings = LogSettings.from_mapping(settings)
        settings.validate()
        if self._state is not State.UNINITIALIZED:
            return 0
        sink = build_sink(settings)
        with self._lock:
            installed = self._state is State.UNINITIALIZED
            if installed:
                self._sink = sink
                self._state = State.INITIALIZING
        if not installed:
            sink.close()
            return 0
        if settings.handle_exceptions:
            self._unhook = register_excepthook(self)
        return self.queue.flush(on_empty=self._mark_initialized)

    def log_uncaught(self, exc, label="process"):
        """Record an uncaught exception at error level."""
        message = f"uncaughtException: {safe_str(exc)}"
        self.submit(LogEntry.build("error", label, message, None, (exc,)))

    async def ainit(self, settings=None):
        """Awaitable ``init``; validation still happens before the first await."""
        settings = LogSettings.from_mapping(settings)
        settings.validate()
        return await asyncio.to_thread(self.init, settings)

    def close(self):
        """Flush and close the sink handlers."""
        with self._lock:
            sink = self._sink
            unhook, self._unhook = self._unhook, None
        if unhook is not None:
            unhook()
        if sink is not None:
            sink.close()


class Logger:
    """Per-label logger; tracks the time since its own previous call."""
    def __init__(self, label, context):
        self.label = label
        self.context = context
        self.last_call = context.clock()

    def __repr__(self):
        return f"<Logger label={self.label!r}>"

    def log(self, level, message, *args):
        """Record one entry; returns ``self`` for chaining."""
        now = self.context.clock()
        elapsed = now - self.last_call
        self.last_call = now
        entry = LogEntry.build(level, self.label, message, elapsed, args)
        self.context.submit(entry)
        return self

    def info(self, message, *args):
        return self.log("info", message, *args)

    def debug(self, message, *args):
        return self.log("debug", message, *args)

    def warn(self, message, *args):
        return self.log("warn", message, *args)

    warning = warn

    def verbose(self, message, *args):
        return self.log("verbose", message, *args)

    def silly(self, message, *args):
        return self.log("silly", message, *args)

    def error(self, message, err=None):
        if err is None:
            return self.log("error", message)
        return self.log("error", message, err)
