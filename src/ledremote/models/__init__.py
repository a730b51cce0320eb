"""Data models for the LED remote."""

from .color import DEFAULT_COLOR, OFF_COLOR, PRESET_COLORS, Color
from .config import AppConfig
from .device import DeviceInfo, FirmwareInfo, StatusMessage
from .enums import ConnectionState, ControlMode, StatusKind
from .pattern import (
    MAX_PATTERN_STEPS,
    PatternStep,
    generate_rainbow,
    generate_random,
    pattern_payload,
)

__all__ = [
    "AppConfig",
    # Models
    "Color",
    "DeviceInfo",
    "FirmwareInfo",
    "PatternStep",
    "StatusMessage",
    # Enums
    "ConnectionState",
    "ControlMode",
    "StatusKind",
    # Constants
    "DEFAULT_COLOR",
    "MAX_PATTERN_STEPS",
    "OFF_COLOR",
    "PRESET_COLORS",
    # Pattern helpers
    "generate_rainbow",
    "generate_random",
    "pattern_payload",
]
