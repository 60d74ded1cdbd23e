"""Serialization helpers that never raise."""

import copy
import json
import pprint
import traceback
from collections.abc import Mapping

PRIMITIVES = (str, int, float, bool, type(None))

CIRCULAR = "[Circular]"
TRUNCATED = "[Object]"
MAX_DEPTH = 32


def safe_repr(value):
    """Return ``repr(value)`` or a placeholder when ``__repr__`` fails."""
    try:
        return repr(value)
    except Exception:  # pylint: disable=broad-exception-caught
        return f"<unrepresentable {type(value).__name__} object>"


def safe_str(value):
    """Return ``str(value)`` or a placeholder when ``__str__`` fails."""
    try:
        return str(value)
    except Exception:  # pylint: disable=broad-exception-caught
        return f"<unprintable {type(value).__name__} object>"


def _own_fields(value):
    try:
        fields = vars(value)
    except Exception:  # pylint: disable=broad-exception-caught
        return {}
    return dict(fields) if isinstance(fields, Mapping) else {}


def format_stack(exc):
    """Format an exception and its traceback."""
    try:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()
    except Exception:  # pylint: disable=broad-exception-caught
        return f"{type(exc).__name__}: {safe_str(exc)}"


def _destructure(value, seen):
    if isinstance(value, PRIMITIVES):
        return value
    marker = id(value)
    if marker in seen:
        return CIRCULAR
    if len(seen) >= MAX_DEPTH:
        return TRUNCATED
    seen = seen | {marker}
    try:
        return _walk(value, seen)
    except Exception:  # pylint: disable=broad-exception-caught
        return safe_repr(value)


def _walk(value, seen):
    if isinstance(value, BaseException):
        data = {
            "name": type(value).__name__,
            "message": safe_str(value),
            "stack": format_stack(value),
        }
        for key, item in _own_fields(value).items():
            data[safe_str(key)] = _destructure(item, seen)
        cause = getattr(value, "__cause__", None)
        if cause is not None:
            data["cause"] = _destructure(cause, seen)
        return data
    if isinstance(value, Mapping):
        return {safe_str(k): _destructure(v, seen) for k, v in list(value.items())}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_destructure(item, seen) for item in value]
    fields = _own_fields(value)
    if fields:
        return {k: _destructure(v, seen) for k, v in fields.items()}
    return safe_repr(value)


def serialize_error(value):
    """Turn an error (or anything else) into plain data.

    Exceptions become a mapping with ``name``, ``message`` and ``stack``
    followed by their instance attributes. Containers are walked recursively,
    with cycles replaced by ``"[Circular]"`` and anything nested deeper than
    ``MAX_DEPTH`` replaced by ``"[Object]"``. Containers that fail to iterate
    fall back to their repr.
    """
    return _destructure(value, frozenset())


def snapshot(value):
    """Deep-copy ``value`` so later mutation does not leak into the log line.

    Values that cannot be copied are reduced to plain data instead.
    """
    try:
        return copy.deepcopy(value)
    except Exception:  # pylint: disable=broad-exception-caught
        return serialize_error(value)


def inspect_value(value, width=100):
    """Pretty-print ``value`` for humans; falls back to a safe repr."""
    try:
        return pprint.pformat(value, width=width, sort_dicts=False)
    except Exception:  # pylint: disable=broad-exception-caught
        return safe_repr(value)


def dump_json(value):
    """JSON-encode a primitive with two-space indentation."""
    try:
        return json.dumps(value, indent=2, ensure_ascii=False, default=safe_repr)
    except Exception:  # pylint: disable=broad-exception-caught
        return safe_repr(value)
