"""Lazy proxy for the process-wide logging context."""

import threading

from .core import monotonic_ms


class LazyContext:
    """Proxy that builds the context on first use.

    ``clock`` answers without building the context, so loggers can be
    created at import time for free. ``reset`` swaps in a fresh factory and
    returns the context it replaced, which lets tests isolate the
    process-wide default.
    """
    def __init__(self, factory, clock=monotonic_ms):
        self._factory = factory
        self._clock = clock
        self._lock = threading.Lock()
        self._context = None

    @property
    def loaded(self):
        return self._context is not None

    def clock(self):
        """Read the clock shared with the context this proxy builds."""
        return self._clock()

    def get(self):
        """Return the context, creating it on first access."""
        context = self._context
        if context is None:
            with self._lock:
                if self._context is None:
                    self._context = self._factory()
                context = self._context
        return context

    def reset(self, factory=None):
        """Drop the current context and optionally replace the factory."""
        with self._lock:
            previous, self._context = self._context, None
            if factory is not None:
                self._factory = factory
        return previous

    def __getattr__(self, name):
        return getattr(self.get(), name)

    def __repr__(self):
        return f"<LazyContext loaded={self.loaded}>"
