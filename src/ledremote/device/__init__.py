"""Device communication over local HTTP."""

from . import client
from .client import (
    check_connection,
    check_latest_firmware,
    get_device_info,
    set_color,
    set_pattern,
    trigger_update,
)

__all__ = [
    "check_connection",
    "check_latest_firmware",
    "client",
    "get_device_info",
    "set_color",
    "set_pattern",
    "trigger_update",
]
