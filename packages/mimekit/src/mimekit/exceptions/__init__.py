from .base import MimeKitError

__all__ = ["MimeKitError"]
