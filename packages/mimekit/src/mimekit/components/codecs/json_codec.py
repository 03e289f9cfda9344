"""JSON codec: self-describing text, field names from model fields/aliases."""

from typing import Any, ClassVar

from pydantic_core import PydanticSerializationError, to_json

from .base import BaseCodec, adapter_for
from ...errors import ErrorEnvelope

__all__ = ["JSONCodec"]


class JSONCodec(BaseCodec):
    format_ids = ("application/json", "text/json")
    sniff_hints = frozenset("{[")

    encode_exceptions: ClassVar[tuple[type[BaseException], ...]] = (
        PydanticSerializationError, TypeError, ValueError,
    )

    def _dumps(self, value: Any) -> bytes:
        return to_json(value)

    def _loads(self, data: bytes, into: Any) -> Any:
        return adapter_for(into).validate_json(data)

    def _dumps_envelope(self, envelope: ErrorEnvelope) -> bytes:
        return envelope.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

    def _loads_envelope(self, data: bytes) -> ErrorEnvelope:
        return ErrorEnvelope.model_validate_json(data)
