"""Core application logic: connection lifecycle, debouncing and the controller."""

from .coalescer import UpdateCoalescer
from .controller import RemoteController
from .state_machine import ConnectionStateMachine

__all__ = [
    "ConnectionStateMachine",
    "RemoteController",
    "UpdateCoalescer",
]
