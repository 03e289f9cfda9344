"""Transportable error variants.

A :class:`WireError` subclass is a tagged variant: its ``error_tag`` names it
on the wire and its fields form the payload. Subclasses are usually
dataclasses::

    @dataclass(eq=False)
    class QuotaExceeded(WireError):
        error_tag = "billing.quota_exceeded"

        limit: int
        used: int

Non-dataclass subclasses override :meth:`WireError.to_payload` and
:meth:`WireError.from_payload` themselves.
"""

from __future__ import annotations

import dataclasses
import typing
from functools import lru_cache
from typing import Any, ClassVar

from pydantic import TypeAdapter
from pydantic_core import to_jsonable_python

__all__ = ["WireError", "RemoteError", "type_tag", "supports_payload"]


@lru_cache(maxsize=None)
def _field_adapters(cls: type) -> tuple[tuple[str, TypeAdapter], ...]:
    hints = typing.get_type_hints(cls)
    return tuple(
        (f.name, TypeAdapter(hints.get(f.name, Any)))
        for f in dataclasses.fields(cls)
        if f.init
    )


class WireError(Exception):
    """Base for application errors that can cross the wire with their data."""

    error_tag: ClassVar[str | None] = None

    @classmethod
    def tag(cls) -> str:
        return cls.error_tag or f"{cls.__module__}.{cls.__qualname__}"

    def to_payload(self) -> dict[str, Any]:
        if not dataclasses.is_dataclass(self):
            raise NotImplementedError(f"{type(self).__name__} must implement to_payload()")
        return {
            f.name: to_jsonable_python(getattr(self, f.name))
            for f in dataclasses.fields(self)
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]):
        """Build an instance from wire data, coercing each field to its declared type."""
        if not dataclasses.is_dataclass(cls):
            raise NotImplementedError(f"{cls.__name__} must implement from_payload()")
        kwargs = {
            name: adapter.validate_python(payload[name])
            for name, adapter in _field_adapters(cls)
            if name in payload
        }
        return cls(**kwargs)

    def __str__(self) -> str:
        if dataclasses.is_dataclass(self):
            fields = ", ".join(f"{f.name}={getattr(self, f.name)!r}" for f in dataclasses.fields(self))
            return f"{type(self).__name__}({fields})"
        return super().__str__() or type(self).__name__


class RemoteError(Exception):
    """Generic error rebuilt from an envelope whose type is not known locally.

    Only the message survives; the original type tag and any payload are
    kept for inspection (and for re-wrapping when proxying).
    """

    def __init__(self, message: str, *, type_name: str = "", payload: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.type_name = type_name
        self.payload = payload

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"RemoteError({self.message!r}, type_name={self.type_name!r})"


def type_tag(err: BaseException | type[BaseException]) -> str:
    """Stable name for an error type as written into envelopes."""
    cls = err if isinstance(err, type) else type(err)
    if issubclass(cls, WireError):
        return cls.tag()
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def supports_payload(cls: type) -> bool:
    """True when ``cls`` can produce and consume structured payloads."""
    if not (isinstance(cls, type) and issubclass(cls, WireError)):
        return False
    if dataclasses.is_dataclass(cls):
        return True
    return cls.to_payload is not WireError.to_payload and cls.from_payload.__func__ is not WireError.from_payload.__func__
