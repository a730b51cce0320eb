"""Domain events for observer pattern.

- Connection events: Lifecycle state machine transitions
- Pattern events: Pattern store edits and selection changes
- Controller events: Application state the UI renders
- Config events: Configuration changes and persistence
"""

from enum import Enum


class ConnectionEvent(Enum):
    """Connection lifecycle transitions."""

    CONNECTING = "connecting"        # Probe of a candidate address started
    CONNECTED = "connected"          # Probe succeeded
    CONNECT_FAILED = "connect_failed"  # Probe failed, back to disconnected
    DISCONNECTED = "disconnected"    # Explicit disconnect or link presumed lost


class PatternEvent(Enum):
    """Edits to the pattern being authored."""

    STEP_ADDED = "step_added"
    STEP_UPDATED = "step_updated"
    STEP_DELETED = "step_deleted"
    PATTERN_REPLACED = "pattern_replaced"  # Rainbow/random generation
    PATTERN_CLEARED = "pattern_cleared"
    SELECTION_CHANGED = "selection_changed"


class ControllerEvent(Enum):
    """State changes of the application controller."""

    STATUS_CHANGED = "status_changed"
    MODE_CHANGED = "mode_changed"
    POWER_CHANGED = "power_changed"
    COLOR_CHANGED = "color_changed"
    CONNECTION_CHANGED = "connection_changed"
    CONNECTION_REQUIRED = "connection_required"  # UI should open the connection dialog
    DEVICE_INFO_CHANGED = "device_info_changed"
    FIRMWARE_INFO_CHANGED = "firmware_info_changed"
    UPDATE_STARTED = "update_started"  # Firmware update request about to be sent
    UPDATE_SENT = "update_sent"  # Firmware update triggered; device is rebooting


class ConfigEvent(Enum):
    """Configuration changes."""

    CONFIG_UPDATED = "config_updated"
    CONFIG_RESET = "config_reset"
    CONFIG_SAVED = "config_saved"
