"""Enumerations for the LED remote."""

from enum import Enum


class ConnectionState(str, Enum):
    """Client-side belief about the device link (last probe result)."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ControlMode(str, Enum):
    """What the remote is currently editing."""

    SOLID = "solid"      # Single static color, debounced updates
    PATTERN = "pattern"  # Timed step sequence, sent explicitly
    SYSTEM = "system"    # Firmware version and updates (requires connection)


class StatusKind(str, Enum):
    """Kind of transient status feedback."""

    IDLE = "idle"
    SENDING = "sending"
    SUCCESS = "success"
    ERROR = "error"
