"""Codec registry keyed by FormatID (``type/subtype``) with optional sniff hints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from mimekit.components.codecs.exceptions import (
    CodecDuplicateRegistrationError,
    CodecNotFoundError,
    NoCodecsRegisteredError,
)
from mimekit.headers.media_type import normalize_format_id
from .base import BaseRegistry

if TYPE_CHECKING:
    from mimekit.components.codecs.base import BaseCodec

logger = logging.getLogger(__name__)

__all__ = ["CodecRegistry", "normalize_format_id"]


class CodecRegistry(BaseRegistry[str, "BaseCodec"]):
    """Maps FormatID -> codec instance, plus FormatID -> sniff hint set.

    Iteration order is registration order; the sniff resolver relies on it.
    """

    duplicate_error = CodecDuplicateRegistrationError
    lookup_error = CodecNotFoundError
    empty_error = NoCodecsRegisteredError

    def __init__(self) -> None:
        super().__init__(coerce_key=normalize_format_id)
        self._hints: dict[str, frozenset[str]] = {}

    def register(
            self,
            format_id: str,
            codec: BaseCodec,
            hints: Iterable[str] | None = None,
    ) -> None:
        """Register ``codec`` for ``format_id``.

        :param hints: Leading code points that make this format worth trying
            first when sniffing. Each hint must be a single character.
        :raises CodecDuplicateRegistrationError: If ``format_id`` exists.
        """
        hint_set = None
        if hints is not None:
            hint_set = frozenset(hints)
            bad = [h for h in hint_set if not isinstance(h, str) or len(h) != 1]
            if bad:
                raise ValueError(f"sniff hints must be single characters: {bad!r}")

        with self._lock:
            key = self._register(format_id, codec)
            if hint_set:
                self._hints = {**self._hints, key: hint_set}
        logger.debug("codec registered: %s -> %s (hints=%s)",
                     key, type(codec).__name__, "".join(sorted(hint_set or ())))

    def hints(self, format_id: str) -> frozenset[str]:
        """Return the sniff hints registered for ``format_id`` (empty if none)."""
        return self._hints.get(self._coerce(format_id), frozenset())

    def hinted(self, code_point: str) -> tuple[str, ...]:
        """Return registered FormatIDs whose hints contain ``code_point``."""
        return tuple(fid for fid, hints in self._hints.items() if code_point in hints)

    def is_registered(self, format_id: str | None) -> bool:
        """True when ``format_id`` is non-empty and has a codec."""
        return bool(format_id) and format_id in self

    def clear(self) -> None:
        with self._lock:
            self._check_mutable()
            self._store = {}
            self._hints = {}
