"""MessagePack codec: compact binary, error envelopes as an extension type.

The binary form carries no field types, so both peers must register the same
error types in their :class:`~mimekit.errors.ErrorTypeRegistry` for payloads
to come back as concrete errors.
"""

from typing import Any, ClassVar

import msgpack
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .base import BaseCodec, adapter_for
from ...errors import ErrorEnvelope

__all__ = ["MsgPackCodec", "ENVELOPE_EXT_TYPE"]

#: msgpack extension code reserved for error envelopes
ENVELOPE_EXT_TYPE = 69


class MsgPackCodec(BaseCodec):
    format_ids = ("application/msgpack", "application/x-msgpack")
    sniff_hints = None

    encode_exceptions: ClassVar[tuple[type[BaseException], ...]] = (
        PydanticSerializationError, TypeError, ValueError, OverflowError,
    )
    decode_exceptions: ClassVar[tuple[type[BaseException], ...]] = (
        msgpack.exceptions.UnpackException, TypeError, ValueError,
    )

    def _pack(self, value: Any) -> bytes:
        return msgpack.packb(value, use_bin_type=True)

    def _unpack(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False, strict_map_key=False, ext_hook=self._ext_hook)

    def _ext_hook(self, code: int, data: bytes) -> Any:
        if code != ENVELOPE_EXT_TYPE:
            return msgpack.ExtType(code, data)
        fields = msgpack.unpackb(data, raw=False, strict_map_key=False)
        if not isinstance(fields, list) or len(fields) != 3:
            raise ValueError("malformed error envelope extension")
        type_name, message, payload = fields
        return ErrorEnvelope(type_name=type_name or "", message=message or "", payload=payload)

    def _dumps(self, value: Any) -> bytes:
        return self._pack(to_jsonable_python(value))

    def _loads(self, data: bytes, into: Any) -> Any:
        return adapter_for(into).validate_python(self._unpack(data))

    def _dumps_envelope(self, envelope: ErrorEnvelope) -> bytes:
        inner = self._pack([envelope.type_name, envelope.message, envelope.payload])
        return self._pack(msgpack.ExtType(ENVELOPE_EXT_TYPE, inner))

    def _loads_envelope(self, data: bytes) -> ErrorEnvelope:
        value = self._unpack(data)
        if not isinstance(value, ErrorEnvelope):
            raise ValueError(f"expected an error envelope extension, got {type(value).__name__}")
        return value
