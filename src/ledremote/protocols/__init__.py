"""Protocol definitions for domain-specific observer patterns.

- Events: connection, pattern, controller and config events
- Observers: Protocols for components that react to these events
"""

from .events import ConfigEvent, ConnectionEvent, ControllerEvent, PatternEvent
from .observers import (
    ConfigObserver,
    ConnectionObserver,
    ControllerObserver,
    PatternObserver,
)

__all__ = [
    # Events
    "ConfigEvent",
    "ConnectionEvent",
    "ControllerEvent",
    "PatternEvent",
    # Observers
    "ConfigObserver",
    "ConnectionObserver",
    "ControllerObserver",
    "PatternObserver",
]
