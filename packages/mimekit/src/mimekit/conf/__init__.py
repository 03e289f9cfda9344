from .defaults import DEFAULTS
from .settings import Settings

__all__ = ["DEFAULTS", "Settings"]
