"""Registry mapping error type tags to reconstruction factories."""

from __future__ import annotations

import logging
from typing import Any, Callable

from mimekit.registry.base import BaseRegistry
from .exceptions import (
    BlacklistedErrorTypeError,
    DuplicateErrorTypeError,
    UnknownErrorTypeError,
)
from .types import RemoteError, WireError, supports_payload, type_tag

logger = logging.getLogger(__name__)

__all__ = ["ErrorFactory", "ErrorTypeRegistry"]

ErrorFactory = Callable[[dict[str, Any]], BaseException]

# Reserved: these carry no structured payload of their own.
_BLACKLIST: tuple[type, ...] = (WireError, RemoteError, Exception, BaseException)


def _coerce_tag(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, BaseException) or (isinstance(value, type) and issubclass(value, BaseException)):
        return type_tag(value)
    raise TypeError(f"cannot derive an error type tag from {value!r}")


class ErrorTypeRegistry(BaseRegistry[str, ErrorFactory]):
    """Type tag -> factory building a concrete error from envelope payloads.

    Both ends of a connection must register the same types; the binary codec
    has no other way to recover them.
    """

    duplicate_error = DuplicateErrorTypeError
    lookup_error = UnknownErrorTypeError
    empty_error = UnknownErrorTypeError

    def __init__(self) -> None:
        super().__init__(coerce_key=_coerce_tag)

    def register_error_type(self, prototype: type[WireError] | WireError) -> str:
        """Register an error class (or an instance of one) for reconstruction.

        :return: The tag the type is registered under.
        :raises BlacklistedErrorTypeError: For reserved types and types that
            cannot produce structured payloads.
        :raises DuplicateErrorTypeError: If the tag is already registered.
        """
        cls = prototype if isinstance(prototype, type) else type(prototype)
        if cls in _BLACKLIST or getattr(cls, "__module__", None) == "builtins":
            raise BlacklistedErrorTypeError(f"{cls.__qualname__} is reserved and cannot be registered")
        if not supports_payload(cls):
            raise BlacklistedErrorTypeError(
                f"{cls.__module__}.{cls.__qualname__} is not encodable / decodable; "
                "subclass WireError as a dataclass or implement to_payload/from_payload"
            )

        tag = cls.tag()
        self.register(tag, cls.from_payload)
        return tag

    def is_registered(self, tag: str | None) -> bool:
        return bool(tag) and tag in self

    def create(self, tag: str, payload: dict[str, Any]) -> BaseException:
        """Instantiate the registered type ``tag`` from ``payload``."""
        factory = self._store.get(tag)
        if factory is None:
            raise UnknownErrorTypeError(f"error type {tag!r} has not been registered")
        return factory(payload)
