"""State machine for the device connection lifecycle."""

import logging
from threading import Lock
from typing import Optional

from ledremote.exceptions import InvalidTransitionError
from ledremote.model_manager import ObserverManager
from ledremote.models import ConnectionState
from ledremote.protocols import ConnectionEvent, ConnectionObserver

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.DISCONNECTED: frozenset({ConnectionState.CONNECTING}),
    ConnectionState.CONNECTING: frozenset({ConnectionState.CONNECTED, ConnectionState.DISCONNECTED}),
    ConnectionState.CONNECTED: frozenset({ConnectionState.DISCONNECTED, ConnectionState.CONNECTING}),
}


class ConnectionStateMachine:
    """
    Tracks whether the remote believes the device is reachable.

    CONNECTED is a heuristic, not a session: it means the last probe
    succeeded and no command has failed since. Any network failure
    while connected drops straight back to DISCONNECTED; there is no
    automatic reconnection.

    Transitions:
    - DISCONNECTED -> CONNECTING: a candidate address was submitted
    - CONNECTING -> CONNECTED: the probe succeeded
    - CONNECTING -> DISCONNECTED: the probe failed
    - CONNECTED -> DISCONNECTED: explicit disconnect or a failed command
    - CONNECTED -> CONNECTING: re-targeting to another address

    Anything else raises InvalidTransitionError.
    """

    def __init__(self) -> None:
        """Initialize in the DISCONNECTED state."""
        self._lock = Lock()
        self._state = ConnectionState.DISCONNECTED
        self._address: Optional[str] = None
        self._candidate: Optional[str] = None
        self._generation = 0
        # ObserverManager has its own lock - don't share to avoid deadlock when notifying while holding _lock
        self._observers = ObserverManager[ConnectionObserver](observer_type_name="connection")

    def register_observer(self, observer: ConnectionObserver) -> None:
        """
        Register an observer to receive connection events.

        Args:
            observer: Object implementing ConnectionObserver protocol
        """
        self._observers.register(observer)

    def unregister_observer(self, observer: ConnectionObserver) -> None:
        """
        Unregister an observer.

        Args:
            observer: Previously registered observer
        """
        self._observers.unregister(observer)

    @property
    def state(self) -> ConnectionState:
        with self._lock:
            return self._state

    @property
    def address(self) -> Optional[str]:
        """Address of the device while CONNECTED, otherwise None."""
        with self._lock:
            return self._address if self._state is ConnectionState.CONNECTED else None

    @property
    def generation(self) -> int:
        """
        Counts successful probes.

        A request that captured the generation before awaiting can tell
        whether the link it was sent on is still the current one.
        """
        with self._lock:
            return self._generation

    def is_current(self, generation: int) -> bool:
        """True if CONNECTED and no probe has succeeded since `generation` was read."""
        with self._lock:
            return self._state is ConnectionState.CONNECTED and self._generation == generation

    @property
    def candidate_address(self) -> Optional[str]:
        """Address being probed while CONNECTING."""
        with self._lock:
            return self._candidate

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def is_connecting(self) -> bool:
        return self.state is ConnectionState.CONNECTING

    def begin_connect(self, address: str) -> None:
        """
        A candidate address was submitted; the probe is about to start.

        Raises:
            InvalidTransitionError: If a probe is already in progress
        """
        previous = self._transition(ConnectionState.CONNECTING)
        with self._lock:
            self._candidate = address
        logger.info(f"Connecting to {address}")
        self._notify(ConnectionEvent.CONNECTING, previous, ConnectionState.CONNECTING, address)

    def mark_connected(self) -> str:
        """
        The probe succeeded; the candidate becomes the active address.

        Returns:
            The now-active device address

        Raises:
            InvalidTransitionError: If no probe was in progress
        """
        previous = self._transition(ConnectionState.CONNECTED)
        with self._lock:
            self._address = self._candidate
            self._generation += 1
            self._candidate = None
            address = self._address
        logger.info(f"Connected to {address}")
        self._notify(ConnectionEvent.CONNECTED, previous, ConnectionState.CONNECTED, address)
        return address

    def mark_failed(self) -> None:
        """
        The probe failed.

        Raises:
            InvalidTransitionError: If no probe was in progress
        """
        previous = self._transition(ConnectionState.DISCONNECTED)
        with self._lock:
            address = self._candidate
            self._candidate = None
        logger.info(f"Connection to {address} failed")
        self._notify(ConnectionEvent.CONNECT_FAILED, previous, ConnectionState.DISCONNECTED, address)

    def disconnect(self) -> bool:
        """
        Drop the link (explicit disconnect or a failed command).

        Idempotent: disconnecting while already DISCONNECTED is a no-op.
        A disconnect during CONNECTING counts as a failed probe.

        Returns:
            True if the state changed
        """
        with self._lock:
            previous = self._state
        if previous is ConnectionState.DISCONNECTED:
            return False
        if previous is ConnectionState.CONNECTING:
            self.mark_failed()
            return True

        self._transition(ConnectionState.DISCONNECTED)
        with self._lock:
            address = self._address
        logger.info(f"Disconnected from {address}")
        self._notify(ConnectionEvent.DISCONNECTED, previous, ConnectionState.DISCONNECTED, address)
        return True

    def _transition(self, target: ConnectionState) -> ConnectionState:
        with self._lock:
            current = self._state
            if target not in _ALLOWED_TRANSITIONS[current]:
                raise InvalidTransitionError(current, target)
            self._state = target
        logger.debug(f"Connection state {current.name} -> {target.name}")
        return current

    def _notify(
        self,
        event: ConnectionEvent,
        previous: ConnectionState,
        current: ConnectionState,
        address: Optional[str],
    ) -> None:
        """Notify observers; called after releasing self._lock."""
        self._observers.notify("on_connection_event", event, previous, current, address)
