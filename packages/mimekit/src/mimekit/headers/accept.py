"""Accept header parsing and preference selection."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from .media_type import MediaTypeError, parse_media_type

logger = logging.getLogger(__name__)

__all__ = ["AcceptEntry", "parse_accept", "highest"]


@dataclass(frozen=True, slots=True)
class AcceptEntry:
    """One media range from an Accept header with its quality weight."""

    format_id: str
    quality: float = 1.0


def _parse_quality(raw: str) -> float | None:
    try:
        q = float(raw)
    except ValueError:
        return None
    if math.isnan(q):
        return None
    return min(max(q, 0.0), 1.0)


def parse_accept(raw: str | None) -> list[AcceptEntry]:
    """Parse an Accept header into entries, in header order.

    Segments that are not media types, or whose ``q`` is not a number, are
    dropped silently. A missing ``q`` means 1.0; out-of-range values are
    clamped into [0, 1].
    """
    entries: list[AcceptEntry] = []
    if not raw:
        return entries

    for segment in raw.split(","):
        try:
            media_type, params = parse_media_type(segment)
        except MediaTypeError:
            logger.debug("accept: dropping malformed segment %r", segment)
            continue

        if "q" not in params or params["q"] == "":
            entries.append(AcceptEntry(media_type, 1.0))
            continue

        q = _parse_quality(params["q"])
        if q is None:
            logger.debug("accept: dropping segment with bad quality %r", segment)
            continue
        entries.append(AcceptEntry(media_type, q))

    return entries


def highest(entries: Iterable[AcceptEntry]) -> str:
    """Return the FormatID with the strictly greatest quality.

    Ties keep the first maximum in header order, so the result is
    deterministic for a given header but depends on its ordering. Entries
    with quality 0 are never selected. No entries yields ``""``.
    """
    score = 0.0
    best = ""
    for entry in entries:
        if entry.quality > score:
            score = entry.quality
            best = entry.format_id
    return best
