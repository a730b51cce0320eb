"""Tests for the exception hierarchy and error handling helpers."""

import logging

import pytest
from pydantic import ValidationError

from ledremote.exceptions import (
    ConfigFileInvalidError,
    ConfigValidationError,
    DeviceConnectionError,
    DeviceError,
    DeviceRequestError,
    ErrorContext,
    FirmwareServerError,
    HttpStatusError,
    LedRemoteError,
    NotConnectedError,
    format_error_for_display,
    handle_errors,
    wrap_pydantic_error,
)
from ledremote.models import AppConfig


@pytest.mark.unit
class TestHierarchy:
    """Messages and classification."""

    def test_connection_error_messages(self):
        error = DeviceConnectionError("192.168.1.50", original_error="Connection refused")

        assert str(error) == "Could not connect to the device at 192.168.1.50."
        assert error.technical_message == "Probe of 192.168.1.50 failed: Connection refused"
        assert "Suggestion:" in error.get_full_message()
        assert isinstance(error, DeviceError)
        assert isinstance(error, LedRemoteError)

    def test_network_failure_classification(self):
        assert DeviceConnectionError("1.2.3.4").is_network_failure
        assert DeviceRequestError("color", "1.2.3.4").is_network_failure
        assert not HttpStatusError("http://1.2.3.4/info", 404).is_network_failure

    def test_firmware_server_error_messages(self):
        error = FirmwareServerError("https://example.com/version.json", original_error="Name resolution failed")

        assert str(error) == "Could not reach the firmware update server."
        assert "device" not in error.user_message
        assert error.technical_message == (
            "Firmware metadata request to https://example.com/version.json failed: Name resolution failed"
        )
        assert "firmware_metadata_url" in error.get_full_message()
        assert error.address == "https://example.com/version.json"

    def test_not_connected(self):
        error = NotConnectedError("send a pattern")
        assert error.user_message == "Connect to a device before you send a pattern."
        assert error.recoverable


@pytest.mark.unit
class TestHandleErrors:
    """The handle_errors decorator."""

    def test_reraises_by_default(self):
        @handle_errors(operation_name="probe")
        def probe():
            raise DeviceConnectionError("1.2.3.4")

        with pytest.raises(DeviceConnectionError):
            probe()

    def test_fallback_and_notification(self):
        messages = []

        @handle_errors(operation_name="probe", user_notification=messages.append,
                       fallback_value="fallback", re_raise=False)
        def probe():
            raise DeviceConnectionError("1.2.3.4")

        assert probe() == "fallback"
        assert messages[0].startswith("Could not connect to the device at 1.2.3.4.")

    def test_unexpected_error_notification(self):
        messages = []

        @handle_errors(operation_name="parse", user_notification=messages.append, re_raise=False)
        def parse():
            raise KeyError("x")

        assert parse() is None
        assert messages == ["Error: 'x'"]

    @pytest.mark.asyncio
    async def test_async_function(self):
        messages = []

        @handle_errors(operation_name="send", user_notification=messages.append, re_raise=False)
        async def send():
            raise DeviceRequestError("pattern", "1.2.3.4")

        assert await send() is None
        assert messages == ["Could not send pattern to the device."]

    @pytest.mark.asyncio
    async def test_async_success_passes_through(self):
        @handle_errors(operation_name="send")
        async def send():
            return 42

        assert await send() == 42


@pytest.mark.unit
class TestErrorContext:
    """The ErrorContext context manager."""

    def test_suppresses_when_asked(self, caplog):
        with caplog.at_level(logging.ERROR):
            with ErrorContext("close controller", re_raise=False) as ctx:
                raise DeviceRequestError("color", "1.2.3.4", "boom")

        assert isinstance(ctx.error, DeviceRequestError)
        assert "Failed to close controller" in caplog.text

    def test_reraises(self):
        with pytest.raises(RuntimeError):
            with ErrorContext("close controller"):
                raise RuntimeError("bad")

    def test_no_error(self):
        with ErrorContext("noop") as ctx:
            pass
        assert ctx.error is None


@pytest.mark.unit
class TestFormatting:
    """Display formatting and pydantic conversion."""

    def test_format_custom_error(self):
        message, hint = format_error_for_display(DeviceConnectionError("1.2.3.4"))
        assert message == "Could not connect to the device at 1.2.3.4."
        assert hint is not None

    def test_format_plain_error(self):
        assert format_error_for_display(ValueError("nope")) == ("nope", None)
        assert format_error_for_display(TimeoutError()) == ("TimeoutError", None)

    def test_wrap_single_field_error(self):
        with pytest.raises(ValidationError) as exc_info:
            AppConfig(last_address="esp32.local")

        wrapped = wrap_pydantic_error(exc_info.value, "config.json")

        assert isinstance(wrapped, ConfigValidationError)
        assert wrapped.field == "last_address"
        assert "IPv4" in wrapped.recovery_hint

    def test_wrap_multiple_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            AppConfig(last_address="x", debounce_delay=0)

        wrapped = wrap_pydantic_error(exc_info.value, "config.json")
        assert wrapped.field == "multiple fields"

    def test_wrap_invalid_json(self):
        with pytest.raises(ValidationError) as exc_info:
            AppConfig.model_validate_json("{oops")

        assert isinstance(wrap_pydantic_error(exc_info.value, "config.json"), ConfigFileInvalidError)
