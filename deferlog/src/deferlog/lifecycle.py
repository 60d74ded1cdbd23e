"""Process lifecycle hooks that close a context's sink."""

import atexit
import signal
import sys


def register_exit_hooks(context, enable_signals=False, enable_atexit=True):
    """Close ``context`` at interpreter exit and, optionally, on SIGTERM/SIGINT.

    Returns a callable that removes the atexit hook again.
    """
    def _cleanup():
        try:
            context.close()
        except Exception:  # pylint: disable=broad-exception-caught
            pass

    def _handle_signal(_signum, _frame):
        _cleanup()
        sys.exit(0)

    if enable_atexit:
        atexit.register(_cleanup)

    if enable_signals:
        for signum in (signal.SIGTERM, signal.SIGINT):
            signal.signal(signum, _handle_signal)

    def _unregister():
        if enable_atexit:
            atexit.unregister(_cleanup)

    return _unregister


def register_excepthook(context, label="process"):
    """Log uncaught exceptions through ``context`` before the previous hook runs.

    Returns a callable that restores the previous ``sys.excepthook``.
    """
    previous = sys.excepthook

    def _hook(exc_type, exc, tb):
        try:
            context.log_uncaught(exc, label=label)
        except Exception:  # pylint: disable=broad-exception-caught
            pass
        previous(exc_type, exc, tb)

    sys.excepthook = _hook

    def _unregister():
        if sys.excepthook is _hook:
            sys.excepthook = previous

    return _unregister
