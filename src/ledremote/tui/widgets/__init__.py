"""Reusable UI widgets for the TUI."""

from .color_preview import ColorPreview
from .confirmation_modal import ConfirmationModal
from .connection_modal import ConnectionModal
from .pattern_panel import PatternPanel
from .solid_panel import SolidPanel
from .status_bar import StatusBar
from .system_panel import SystemPanel

__all__ = [
    "ColorPreview",
    "ConfirmationModal",
    "ConnectionModal",
    "PatternPanel",
    "SolidPanel",
    "StatusBar",
    "SystemPanel",
]
