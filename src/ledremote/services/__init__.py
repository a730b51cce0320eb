"""Services layer: configuration and pattern editing."""

from .config_service import ConfigService
from .pattern_service import PatternService

__all__ = [
    "ConfigService",
    "PatternService",
]
