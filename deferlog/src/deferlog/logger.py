from .core import Logger, LoggingContext
from .lazy import LazyContext
from .lifecycle import register_exit_hooks
from .settings import LogSettings


def _build_context():
    settings = LogSettings.from_env()
    instance = LoggingContext()
    register_exit_hooks(
        instance,
        enable_signals=settings.enable_signals,
        enable_atexit=settings.enable_atexit,
    )
    return instance


default_context = LazyContext(_build_context)


def create_logger(label, context=None):
    """Return a logger for ``label``, usable before ``init`` is called."""
    return Logger(label, default_context if context is None else context)


def init(settings=None):
    """Install the default sink and replay buffered entries.

    Without ``settings`` the configuration is read from ``DEFERLOG_*``
    environment variables.
    """
    if settings is None:
        settings = LogSettings.from_env()
    return default_context.init(settings)


async def ainit(settings=None):
    """Awaitable form of :func:`init`."""
    if settings is None:
        settings = LogSettings.from_env()
    return await default_context.ainit(settings)
