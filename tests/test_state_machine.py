"""Tests for the connection state machine."""

import unittest
from unittest.mock import Mock

from ledremote.core.state_machine import ConnectionStateMachine
from ledremote.exceptions import InvalidTransitionError
from ledremote.models import ConnectionState
from ledremote.protocols import ConnectionEvent, ConnectionObserver


class TestConnectionStateMachine(unittest.TestCase):
    """Test state machine functionality."""

    def setUp(self):
        self.machine = ConnectionStateMachine()
        self.observer = Mock(spec=ConnectionObserver)
        self.machine.register_observer(self.observer)

    def test_starts_disconnected(self):
        assert self.machine.state is ConnectionState.DISCONNECTED
        assert self.machine.address is None
        assert not self.machine.is_connected

    def test_successful_probe(self):
        self.machine.begin_connect("192.168.1.50")
        assert self.machine.is_connecting
        assert self.machine.candidate_address == "192.168.1.50"
        assert self.machine.address is None

        address = self.machine.mark_connected()

        assert address == "192.168.1.50"
        assert self.machine.is_connected
        assert self.machine.address == "192.168.1.50"
        assert self.machine.candidate_address is None

    def test_failed_probe(self):
        self.machine.begin_connect("192.168.1.50")
        self.machine.mark_failed()

        assert self.machine.state is ConnectionState.DISCONNECTED
        assert self.machine.address is None

    def test_observer_receives_transitions(self):
        self.machine.begin_connect("10.0.0.2")
        self.machine.mark_connected()
        self.machine.disconnect()

        calls = [c.args for c in self.observer.on_connection_event.call_args_list]
        assert calls == [
            (ConnectionEvent.CONNECTING, ConnectionState.DISCONNECTED, ConnectionState.CONNECTING, "10.0.0.2"),
            (ConnectionEvent.CONNECTED, ConnectionState.CONNECTING, ConnectionState.CONNECTED, "10.0.0.2"),
            (ConnectionEvent.DISCONNECTED, ConnectionState.CONNECTED, ConnectionState.DISCONNECTED, "10.0.0.2"),
        ]

    def test_connect_failed_event(self):
        self.machine.begin_connect("10.0.0.2")
        self.machine.mark_failed()
        self.observer.on_connection_event.assert_called_with(
            ConnectionEvent.CONNECT_FAILED,
            ConnectionState.CONNECTING,
            ConnectionState.DISCONNECTED,
            "10.0.0.2",
        )

    def test_retarget_while_connected(self):
        self.machine.begin_connect("10.0.0.2")
        self.machine.mark_connected()

        self.machine.begin_connect("10.0.0.3")
        assert self.machine.is_connecting
        self.machine.mark_connected()
        assert self.machine.address == "10.0.0.3"

    def test_cannot_connect_without_probe(self):
        with self.assertRaises(InvalidTransitionError):
            self.machine.mark_connected()
        with self.assertRaises(InvalidTransitionError):
            self.machine.mark_failed()

    def test_cannot_begin_twice(self):
        self.machine.begin_connect("10.0.0.2")
        with self.assertRaises(InvalidTransitionError) as ctx:
            self.machine.begin_connect("10.0.0.3")
        assert ctx.exception.current is ConnectionState.CONNECTING
        assert ctx.exception.target is ConnectionState.CONNECTING

    def test_disconnect_is_idempotent(self):
        assert self.machine.disconnect() is False
        self.observer.on_connection_event.assert_not_called()

    def test_disconnect_during_probe_counts_as_failure(self):
        self.machine.begin_connect("10.0.0.2")
        assert self.machine.disconnect() is True
        assert self.machine.state is ConnectionState.DISCONNECTED
        self.observer.on_connection_event.assert_called_with(
            ConnectionEvent.CONNECT_FAILED,
            ConnectionState.CONNECTING,
            ConnectionState.DISCONNECTED,
            "10.0.0.2",
        )

    def test_unregister_observer(self):
        self.machine.unregister_observer(self.observer)
        self.machine.begin_connect("10.0.0.2")
        self.observer.on_connection_event.assert_not_called()

    def test_failing_observer_does_not_block_others(self):
        failing = Mock(spec=ConnectionObserver)
        failing.on_connection_event.side_effect = RuntimeError("boom")
        machine = ConnectionStateMachine()
        machine.register_observer(failing)
        machine.register_observer(self.observer)

        machine.begin_connect("10.0.0.2")

        self.observer.on_connection_event.assert_called_once()
        assert machine.is_connecting


if __name__ == '__main__':
    unittest.main()


class TestConnectionGeneration(unittest.TestCase):
    """Every successful probe starts a new generation."""

    def setUp(self):
        self.machine = ConnectionStateMachine()

    def _connect(self, address: str = "192.168.1.50") -> int:
        self.machine.begin_connect(address)
        self.machine.mark_connected()
        return self.machine.generation

    def test_generation_advances_on_connect(self):
        assert self.machine.generation == 0
        first = self._connect()
        second = self._connect("192.168.1.51")
        assert second == first + 1

    def test_failed_probe_keeps_generation(self):
        first = self._connect()
        self.machine.begin_connect("192.168.1.51")
        self.machine.mark_failed()
        assert self.machine.generation == first

    def test_is_current_while_connected(self):
        generation = self._connect()
        assert self.machine.is_current(generation)

    def test_not_current_after_disconnect(self):
        generation = self._connect()
        self.machine.disconnect()
        assert not self.machine.is_current(generation)

    def test_not_current_after_reconnect_to_same_address(self):
        generation = self._connect()
        self.machine.disconnect()
        self._connect()
        assert not self.machine.is_current(generation)

    def test_not_current_while_retargeting(self):
        generation = self._connect()
        self.machine.begin_connect("192.168.1.51")
        assert not self.machine.is_current(generation)
