# mimekit/errors/exceptions.py
from mimekit.exceptions.base import MimeKitError
from mimekit.registry.exceptions import RegistryDuplicateError, RegistryError, RegistryLookupError

__all__ = [
    "ErrorTypeRegistrationError",
    "DuplicateErrorTypeError",
    "BlacklistedErrorTypeError",
    "UnknownErrorTypeError",
    "ErrorReconstructionError",
]


class ErrorTypeRegistrationError(RegistryError):
    """Unable to register an error type for transport."""


class DuplicateErrorTypeError(ErrorTypeRegistrationError, RegistryDuplicateError):
    """You tried to register a duplicate error type."""


class BlacklistedErrorTypeError(ErrorTypeRegistrationError):
    """This error type cannot be registered, as it is not encodable / decodable."""


class UnknownErrorTypeError(RegistryLookupError):
    """The error type named by an envelope hasn't been registered."""


class ErrorReconstructionError(MimeKitError):
    """A registered error type could not be rebuilt from its payload."""
