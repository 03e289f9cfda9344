"""Best-effort format detection for bodies without a usable Content-Type."""

from .resolver import SniffResolver

__all__ = ["SniffResolver"]
