"""Log entry record and metadata variants."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .serialize import PRIMITIVES, safe_str, serialize_error, snapshot


@dataclass(frozen=True)
class Primitive:
    value: Any


@dataclass(frozen=True)
class Structured:
    value: Any


@dataclass(frozen=True)
class ErrorValue:
    name: str
    message: str
    stack: str
    fields: dict

    @classmethod
    def from_exception(cls, exc):
        data = serialize_error(exc)
        if not isinstance(data, dict):
            data = {"name": type(exc).__name__, "message": safe_str(exc), "stack": data}
        fields = {k: v for k, v in data.items() if k not in ("name", "message", "stack")}
        return cls(name=data["name"], message=data["message"], stack=data["stack"], fields=fields)

    def as_dict(self):
        return {"name": self.name, "message": self.message, "stack": self.stack, **self.fields}


def classify(item, level):
    """Tag one metadata argument for rendering."""
    if isinstance(item, PRIMITIVES):
        return Primitive(item)
    if isinstance(item, BaseException):
        return ErrorValue.from_exception(item)
    if level == "error":
        return Structured(serialize_error(item))
    return Structured(snapshot(item))


@dataclass(frozen=True)
class LogEntry:
    """One log call, captured when it was made."""

    level: str
    label: str
    message: str
    elapsed_ms: Optional[float] = None
    metadata: Optional[Tuple[Any, ...]] = None

    @classmethod
    def build(cls, level, label, message, elapsed_ms, args=()):
        metadata = tuple(classify(item, level) for item in args) if args else None
        return cls(level, label, message, elapsed_ms, metadata)
