"""Registries, constructed explicitly and passed by reference.

``CodecRegistry`` lives in :mod:`mimekit.registry.codecs`; it is not imported
here because it depends on the codec exception hierarchy.
"""

from .base import BaseRegistry
from .exceptions import (
    RegistryDuplicateError,
    RegistryEmptyError,
    RegistryError,
    RegistryFrozenError,
    RegistryLookupError,
)

__all__ = [
    "BaseRegistry",
    "RegistryError",
    "RegistryDuplicateError",
    "RegistryLookupError",
    "RegistryEmptyError",
    "RegistryFrozenError",
]
