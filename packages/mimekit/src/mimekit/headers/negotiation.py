"""Format selection shared by the dispatcher and the sniff resolver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .accept import highest, parse_accept

if TYPE_CHECKING:
    from mimekit.registry.codecs import CodecRegistry

logger = logging.getLogger(__name__)

__all__ = ["preferred_format"]


def preferred_format(registry: CodecRegistry, fallback: str, accept: str | None) -> str:
    """Pick the FormatID a decoded message should remember.

    The Accept header's highest-quality entry wins when it is registered;
    otherwise ``fallback`` (the format the body actually arrived in) is kept.
    Only the single top entry is considered: a registered runner-up does not
    replace an unregistered winner.
    """
    entries = parse_accept(accept)
    if entries:
        best = highest(entries)
        if registry.is_registered(best):
            return best
        logger.debug("negotiation: accept preference %r not registered, keeping %r", best, fallback)
    return fallback
