"""Wire-format codecs sharing the four-operation contract."""

from .base import PLAIN_TEXT, BaseCodec, adapter_for, make_error_encoder
from .exceptions import (
    CodecDecodeError,
    CodecDuplicateRegistrationError,
    CodecEncodeError,
    CodecError,
    CodecNotFoundError,
    CodecRegistrationError,
    EncodingNotSupportedError,
    EncodingUnavailableError,
    MimeNotSpecifiedError,
    NoCodecsRegisteredError,
    PayloadTooLargeError,
    UnableToDetermineMimeError,
)
from .json_codec import JSONCodec
from .msgpack_codec import ENVELOPE_EXT_TYPE, MsgPackCodec
from .xml_codec import XMLCodec

BUILTIN_CODECS: dict[str, type[BaseCodec]] = {
    "json": JSONCodec,
    "xml": XMLCodec,
    "msgpack": MsgPackCodec,
}

__all__ = [
    "BaseCodec",
    "BUILTIN_CODECS",
    "ENVELOPE_EXT_TYPE",
    "JSONCodec",
    "MsgPackCodec",
    "PLAIN_TEXT",
    "XMLCodec",
    "adapter_for",
    "make_error_encoder",
    "CodecError",
    "CodecEncodeError",
    "CodecDecodeError",
    "CodecRegistrationError",
    "CodecDuplicateRegistrationError",
    "CodecNotFoundError",
    "NoCodecsRegisteredError",
    "MimeNotSpecifiedError",
    "UnableToDetermineMimeError",
    "EncodingNotSupportedError",
    "EncodingUnavailableError",
    "PayloadTooLargeError",
]
