"""Settings and environment parsing for deferlog."""

import logging
import os
import sys

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "verbose": 15,
    "debug": logging.DEBUG,
    "silly": 5,
}

FILE_DEFAULTS = {
    "max_size": 5242880,  # 5 MiB
    "max_files": 5,
    "encoding": "utf-8",
    "level": None,
    "use_color": False,
    "datefmt": "%Y.%m.%d %H:%M:%S %p",
}

CONSOLE_DEFAULTS = {
    "stream": None,
    "level": None,
    "use_color": True,
    "datefmt": "%Y.%m.%d %H:%M:%S %p",
    "silent": False,
}


class ConfigurationError(ValueError):
    """Raised when logging settings cannot produce a sink."""


def _parse_bool(value):
    """Parse a boolean from environment-like values."""
    if isinstance(value, bool):
        return value
    if value is None:
        raise ValueError("bool value is None")
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def _parse_level(value):
    """Parse a level name from string values."""
    text = str(value).strip().lower()
    if text in LEVELS:
        return text
    raise ValueError(f"invalid level: {value!r}")


def _merge_options(section, defaults, overrides):
    """Merge caller overrides onto defaults, rejecting unknown keys."""
    overrides = dict(overrides or {})
    allowed = set(defaults) | ({"filename"} if section == "file" else set())
    unknown = sorted(set(overrides) - allowed)
    if unknown:
        raise ConfigurationError(f"unsupported {section} option(s): {', '.join(unknown)}")
    merged = {**defaults, **overrides}
    level = merged.get("level")
    if level is not None and level not in LEVELS:
        raise ConfigurationError(f"unsupported {section} level: {level!r}")
    return merged


class LogSettings:  # pylint: disable=too-many-instance-attributes
    """Configuration container for a logging context."""
    def __init__(  # pylint: disable=too-many-arguments
        self,
        file=None,
        console=None,
        transports=None,
        level="info",
        enable_atexit=True,
        enable_signals=False,
        handle_exceptions=False,
    ):
        self.file = dict(file or {})
        self.console = dict(console or {})
        self.transports = list(transports or [])
        self.level = level
        self.enable_atexit = enable_atexit
        self.enable_signals = enable_signals
        self.handle_exceptions = handle_exceptions

    def __repr__(self):
        return (
            f"<LogSettings file={self.file.get('filename')!r} level={self.level!r} "
            f"transports={len(self.transports)}>"
        )

    @classmethod
    def from_mapping(cls, config):
        """Build settings from a ``{"file": ..., "console": ..., "transports": ...}`` mapping."""
        if isinstance(config, cls):
            return config
        if config is None:
            return cls()
        return cls(
            file=config.get("file"),
            console=config.get("console"),
            transports=config.get("transports"),
            level=config.get("level", "info"),
            enable_atexit=config.get("enable_atexit", True),
            enable_signals=config.get("enable_signals", False),
            handle_exceptions=config.get("handle_exceptions", False),
        )

    def validate(self):
        """Check the settings and return merged ``(file, console)`` options.

        Raises :class:`ConfigurationError` before anything is created.
        """
        if not self.file.get("filename"):
            raise ConfigurationError("file.filename is required")
        if self.level not in LEVELS:
            raise ConfigurationError(f"unsupported level: {self.level!r}")
        for transport in self.transports:
            if not isinstance(transport, logging.Handler):
                raise ConfigurationError(
                    f"transports must be logging.Handler instances, got {type(transport).__name__}"
                )
        file_options = _merge_options("file", FILE_DEFAULTS, self.file)
        console_options = _merge_options("console", CONSOLE_DEFAULTS, self.console)
        if console_options["stream"] is None:
            console_options["stream"] = sys.stdout
        return file_options, console_options

    @classmethod
    def from_env(cls):
        """Load settings from environment variables."""
        return cls.from_env_with_defaults()

    @classmethod
    def from_env_with_defaults(  # pylint: disable=too-many-arguments
        cls,
        filename=None,
        max_size=FILE_DEFAULTS["max_size"],
        max_files=FILE_DEFAULTS["max_files"],
        level="info",
        console=True,
        console_level=None,
        enable_atexit=True,
        enable_signals=False,
        handle_exceptions=False,
        strict=False,
    ):
        """Load settings from env, falling back to supplied defaults."""
        strict_env = os.getenv("DEFERLOG_STRICT_ENV")
        if strict_env is not None and strict_env != "":
            try:
                strict = strict or _parse_bool(strict_env)
            except ValueError:
                if strict:
                    raise
                strict = False

        def _get(name, cast, default):
            val = os.getenv(name)
            if val is None or val == "":
                return default
            try:
                return cast(val)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                if strict:
                    raise ValueError(f"invalid value for {name}: {val!r}") from exc
                return default

        file_options = {
            "max_size": _get("DEFERLOG_MAX_SIZE", int, max_size),
            "max_files": _get("DEFERLOG_MAX_FILES", int, max_files),
        }
        filename = _get("DEFERLOG_FILENAME", str, filename)
        if filename:
            file_options["filename"] = filename

        console_options = {"silent": not _get("DEFERLOG_CONSOLE", _parse_bool, console)}
        console_level = _get("DEFERLOG_CONSOLE_LEVEL", _parse_level, console_level)
        if console_level is not None:
            console_options["level"] = console_level

        return cls(
            file=file_options,
            console=console_options,
            level=_get("DEFERLOG_LEVEL", _parse_level, level),
            enable_atexit=_get("DEFERLOG_ENABLE_ATEXIT", _parse_bool, enable_atexit),
            enable_signals=_get("DEFERLOG_ENABLE_SIGNALS", _parse_bool, enable_signals),
            handle_exceptions=_get("DEFERLOG_HANDLE_EXCEPTIONS", _parse_bool, handle_exceptions),
        )
