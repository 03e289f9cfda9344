"""Cross-format error transport."""

from .envelope import ErrorEnvelope, unwrap_envelope, wrap_error
from .exceptions import (
    BlacklistedErrorTypeError,
    DuplicateErrorTypeError,
    ErrorReconstructionError,
    ErrorTypeRegistrationError,
    UnknownErrorTypeError,
)
from .registry import ErrorTypeRegistry
from .types import RemoteError, WireError, type_tag

__all__ = [
    "ErrorEnvelope",
    "ErrorTypeRegistry",
    "RemoteError",
    "WireError",
    "type_tag",
    "wrap_error",
    "unwrap_envelope",
    "ErrorTypeRegistrationError",
    "DuplicateErrorTypeError",
    "BlacklistedErrorTypeError",
    "UnknownErrorTypeError",
    "ErrorReconstructionError",
]
