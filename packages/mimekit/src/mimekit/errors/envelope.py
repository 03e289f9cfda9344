"""Error envelope: the tagged wrapper that carries errors across codecs.

Every codec writes the same three logical fields using its own structured
facilities:

========  ============  ===============  ==========================
Field     JSON key      XML element      MessagePack (ext array)
========  ============  ===============  ==========================
type      ``type``      ``type``         item 0
message   ``errorString`` ``error-string`` item 1
payload   ``error``     ``error``        item 2
========  ============  ===============  ==========================

A payload is only written for types registered in the
:class:`~mimekit.errors.registry.ErrorTypeRegistry`; everything else degrades
to its message text.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import ErrorReconstructionError, UnknownErrorTypeError
from .registry import ErrorTypeRegistry
from .types import RemoteError, WireError, type_tag

logger = logging.getLogger(__name__)

__all__ = ["ErrorEnvelope", "wrap_error", "unwrap_envelope"]

_FALLBACK_MESSAGE = "remote error"
_ENVELOPE_KEYS = frozenset({"type", "errorString", "type_name", "message"})


class ErrorEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type_name: str = Field(default="", alias="type")
    message: str = Field(default="", alias="errorString")
    payload: dict[str, Any] | None = Field(default=None, alias="error")

    @model_validator(mode="before")
    @classmethod
    def _require_envelope_fields(cls, data: Any) -> Any:
        # an envelope names at least its type or its message
        if isinstance(data, dict) and not _ENVELOPE_KEYS.intersection(data):
            raise ValueError("not an error envelope: no type or message field")
        return data

    @model_validator(mode="after")
    def _ensure_message(self) -> "ErrorEnvelope":
        if not self.message:
            self.message = self.type_name or _FALLBACK_MESSAGE
        return self

    def to_wire(self) -> dict[str, Any]:
        """Alias-keyed dict with an absent payload left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


def wrap_error(err: BaseException, registry: ErrorTypeRegistry) -> ErrorEnvelope:
    """Build an envelope for ``err``.

    The payload is included only when the error's type tag is registered.
    A :class:`RemoteError` keeps the tag and payload it arrived with, so
    errors pass through proxies unchanged.
    """
    if isinstance(err, RemoteError):
        return ErrorEnvelope(type_name=err.type_name, message=err.message, payload=err.payload)

    tag = type_tag(err)
    message = str(err) or tag
    if not isinstance(err, WireError) or not registry.is_registered(tag):
        logger.debug("wrap_error: %s not registered, sending message only", tag)
        return ErrorEnvelope(type_name=tag, message=message)

    return ErrorEnvelope(type_name=tag, message=message, payload=err.to_payload())


def unwrap_envelope(
        envelope: ErrorEnvelope,
        registry: ErrorTypeRegistry,
        *,
        strict: bool = False,
) -> BaseException:
    """Rebuild the error described by ``envelope``.

    Registered tags with a payload come back as their concrete type. Anything
    else comes back as a :class:`RemoteError` carrying the message, unless
    ``strict`` is set, in which case an unregistered or missing tag raises.

    :raises UnknownErrorTypeError: In strict mode, for unknown tags.
    :raises ErrorReconstructionError: In strict mode, when a registered type
        rejects its payload.
    """
    tag = envelope.type_name
    if not registry.is_registered(tag):
        if strict:
            raise UnknownErrorTypeError(f"error type {tag!r} has not been registered")
        return RemoteError(envelope.message, type_name=tag, payload=envelope.payload)

    if envelope.payload is None:
        logger.debug("unwrap_envelope: %s registered but no payload was sent", tag)
        return RemoteError(envelope.message, type_name=tag)

    try:
        return registry.create(tag, envelope.payload)
    except (ValidationError, TypeError, ValueError) as exc:
        if strict:
            raise ErrorReconstructionError(f"unable to rebuild {tag!r} from its payload") from exc
        logger.warning("unwrap_envelope: payload for %s rejected, degrading to message", tag, exc_info=True)
        return RemoteError(envelope.message, type_name=tag, payload=envelope.payload)
