"""Observer protocol definitions for domain-specific events."""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .events import ConfigEvent, ConnectionEvent, ControllerEvent, PatternEvent

if TYPE_CHECKING:
    from ledremote.models import ConnectionState


@runtime_checkable
class ConnectionObserver(Protocol):
    """Observer that receives connection lifecycle transitions."""

    def on_connection_event(
        self,
        event: ConnectionEvent,
        previous: "ConnectionState",
        current: "ConnectionState",
        address: str | None,
    ) -> None:
        """
        Handle a state machine transition.

        Args:
            event: Which transition happened
            previous: State before the transition
            current: State after the transition
            address: Candidate or active device address, if any
        """
        ...


@runtime_checkable
class PatternObserver(Protocol):
    """Observer that receives pattern store edits."""

    def on_pattern_event(self, event: PatternEvent, index: int) -> None:
        """
        Handle a pattern edit.

        Args:
            event: The edit that occurred
            index: Affected step index (the selection after the edit for
                replace/clear events)
        """
        ...


@runtime_checkable
class ControllerObserver(Protocol):
    """
    Observer that receives application controller events.

    This is how a UI stays in sync: it renders from the controller's
    properties whenever an event arrives.
    """

    def on_controller_event(self, event: ControllerEvent, **kwargs: Any) -> None:
        """
        Handle a controller event.

        Args:
            event: The event that occurred
            **kwargs: Event-specific data (e.g., status=StatusMessage)

        Note:
            Called on the asyncio loop thread.
        """
        ...


@runtime_checkable
class ConfigObserver(Protocol):
    """Observer that receives configuration change events."""

    def on_config_event(self, event: ConfigEvent, **kwargs: Any) -> None:
        """
        Handle configuration changes.

        Args:
            event: The configuration event that occurred
            **kwargs: keys/values for CONFIG_UPDATED, path for CONFIG_SAVED
        """
        ...
