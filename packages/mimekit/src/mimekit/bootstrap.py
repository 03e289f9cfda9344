"""Startup helpers: build registries, register built-in codecs, return a dispatcher."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from .components.codecs import BUILTIN_CODECS
from .components.codecs.exceptions import CodecRegistrationError
from .conf import Settings
from .dispatch import Dispatcher
from .errors import ErrorTypeRegistry
from .registry.codecs import CodecRegistry

logger = logging.getLogger(__name__)

__all__ = ["register_builtin_codecs", "create_dispatcher"]


def register_builtin_codecs(
        registry: CodecRegistry,
        error_types: ErrorTypeRegistry,
        *,
        families: Iterable[str] = ("json", "xml", "msgpack"),
        strict_errors: bool = False,
) -> None:
    """Register every FormatID of each named built-in codec family.

    Families register in the order given, which is also the order the sniff
    resolver tries them in.

    :raises CodecRegistrationError: For an unknown family name.
    """
    for family in families:
        try:
            codec_cls = BUILTIN_CODECS[family]
        except KeyError as err:
            raise CodecRegistrationError(
                f"unknown codec family {family!r}; choose from {', '.join(BUILTIN_CODECS)}"
            ) from err
        for format_id in codec_cls.format_ids:
            codec = codec_cls(format_id, error_types=error_types, strict_errors=strict_errors)
            registry.register(format_id, codec, hints=codec_cls.sniff_hints)


def create_dispatcher(
        settings: Mapping[str, Any] | None = None,
        *,
        error_types: ErrorTypeRegistry | None = None,
) -> Dispatcher:
    """Build a ready-to-use :class:`Dispatcher` from ``settings``.

    Pass ``error_types`` to share one error registry between several
    dispatchers, or to register application errors before traffic starts.
    """
    if settings is None:
        settings = Settings()
        settings.update_from_envvar()
        settings.update_from_env()

    error_types = error_types if error_types is not None else ErrorTypeRegistry()
    codecs = CodecRegistry()
    register_builtin_codecs(
        codecs,
        error_types,
        families=settings["BUILTIN_CODECS"],
        strict_errors=bool(settings["STRICT_ERROR_TYPES"]),
    )
    if settings["FREEZE_REGISTRIES"]:
        codecs.freeze()

    dispatcher = Dispatcher(codecs, settings=settings)
    logger.info("mimekit dispatcher ready: %r", dispatcher)
    return dispatcher
