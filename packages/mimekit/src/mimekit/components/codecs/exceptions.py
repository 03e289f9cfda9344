# mimekit/components/codecs/exceptions.py
from mimekit.exceptions.base import MimeKitError
from mimekit.registry.exceptions import (
    RegistryDuplicateError,
    RegistryEmptyError,
    RegistryError,
    RegistryLookupError,
)

__all__ = [
    "CodecError", "CodecEncodeError", "CodecDecodeError",
    "CodecRegistrationError", "CodecDuplicateRegistrationError",
    "CodecNotFoundError", "NoCodecsRegisteredError",
    "MimeNotSpecifiedError", "UnableToDetermineMimeError",
    "EncodingNotSupportedError", "EncodingUnavailableError",
    "PayloadTooLargeError",
]


class CodecError(MimeKitError):
    """Base error for all codec-related failures."""


class CodecEncodeError(CodecError):
    """Failed to serialize a message or an error envelope."""


class CodecDecodeError(CodecError):
    """Failed to parse or validate a body in the codec's wire format."""


class CodecRegistrationError(RegistryError, CodecError):
    """Unable to register codec in registry."""


class CodecDuplicateRegistrationError(CodecRegistrationError, RegistryDuplicateError):
    """That mime type has already been registered."""


class CodecNotFoundError(CodecError, RegistryLookupError):
    """That mime type does not have an associated codec."""


class NoCodecsRegisteredError(CodecError, RegistryEmptyError):
    """Nothing has been registered, nothing to use for encoding/decoding."""


class MimeNotSpecifiedError(CodecError):
    """No information was given to help determine the mime type."""


class UnableToDetermineMimeError(CodecDecodeError):
    """Falling back to automatic mime type detection has failed."""


class EncodingNotSupportedError(CodecError, NotImplementedError):
    """This operation is not implemented by the codec (decode-only resolvers)."""


class EncodingUnavailableError(CodecError):
    """The configured default format has no registered codec.

    This is a startup misconfiguration, not a per-request condition.
    """


class PayloadTooLargeError(CodecDecodeError):
    """Declared body length exceeds the buffering ceiling."""
