"""CLI commands for ledremote."""

from .config import config
from .device import color, info, off, pattern, probe
from .firmware import firmware

__all__ = ["color", "config", "firmware", "info", "off", "pattern", "probe"]
