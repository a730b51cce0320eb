"""Connection lifecycle and editing exceptions."""

from typing import TYPE_CHECKING

from .base import LedRemoteError

if TYPE_CHECKING:
    from ledremote.models import ConnectionState


class ConnectionStateError(LedRemoteError):
    """Operation is not allowed in the current connection state."""
    pass


class InvalidTransitionError(ConnectionStateError):
    """The connection state machine was asked for a transition it does not allow."""

    def __init__(self, current: "ConnectionState", target: "ConnectionState"):
        super().__init__(
            user_message=f"Cannot go from {current.value} to {target.value}.",
            technical_message=f"Invalid connection transition {current.name} -> {target.name}",
        )
        self.current = current
        self.target = target


class NotConnectedError(ConnectionStateError):
    """A device operation was requested while not connected."""

    def __init__(self, operation: str):
        super().__init__(
            user_message=f"Connect to a device before you {operation}.",
            recoverable=True,
        )
        self.operation = operation


class PatternEditError(LedRemoteError):
    """A pattern edit was rejected (e.g., deleting the last remaining step)."""

    def __init__(self, user_message: str):
        super().__init__(user_message=user_message, recoverable=True)
