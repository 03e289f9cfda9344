# mimekit/registry/exceptions.py
"""Registry exceptions"""
from mimekit.exceptions.base import MimeKitError


# ----------------------------------------------------------------------------
# Registry errors
# ----------------------------------------------------------------------------
class RegistryError(MimeKitError): ...


class RegistryDuplicateError(RegistryError): ...


class RegistryLookupError(RegistryError, LookupError): ...


class RegistryEmptyError(RegistryLookupError): ...


class RegistryFrozenError(RuntimeError, RegistryError): ...
