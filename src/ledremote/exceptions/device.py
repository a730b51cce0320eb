"""Device communication exceptions.

Every failure of the device client maps to one of these types. The
controller turns them into a single status message; network-level
failures additionally demote the connection to DISCONNECTED.
"""

from typing import Optional

from .base import LedRemoteError


class DeviceError(LedRemoteError):
    """A request to the LED device or the firmware server failed."""

    def __init__(
        self,
        user_message: str,
        address: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize device error.

        Args:
            user_message: User-friendly error message
            address: Device address (or URL) the request targeted
        """
        super().__init__(user_message, **kwargs)
        self.address = address

    @property
    def is_network_failure(self) -> bool:
        """True when the link itself failed (the device may be gone)."""
        return False


class DeviceConnectionError(DeviceError):
    """The liveness probe failed or timed out."""

    def __init__(self, address: str, original_error: Optional[str] = None):
        user_msg = f"Could not connect to the device at {address}."
        tech_msg = f"Probe of {address} failed"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            address=address,
            recoverable=True,
            recovery_hint="Check the IP address and that the device is on the same network.",
        )

    @property
    def is_network_failure(self) -> bool:
        return True


class DeviceRequestError(DeviceError):
    """A command request failed at the transport level (DNS, connect, timeout)."""

    def __init__(
        self,
        operation: str,
        address: Optional[str] = None,
        original_error: Optional[str] = None,
    ):
        """
        Initialize request error.

        Args:
            operation: What was being sent (e.g., "color", "pattern")
            address: Target address or URL
            original_error: The aiohttp/timeout error text
        """
        user_msg = f"Could not send {operation} to the device."
        tech_msg = f"Request '{operation}' to {address} failed"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            address=address,
            recoverable=True,
        )
        self.operation = operation

    @property
    def is_network_failure(self) -> bool:
        return True


class FirmwareServerError(DeviceRequestError):
    """The firmware metadata server could not be reached."""

    def __init__(self, url: str, original_error: Optional[str] = None):
        super().__init__("firmware info", url, original_error)
        self.user_message = "Could not reach the firmware update server."
        self.technical_message = f"Firmware metadata request to {url} failed"
        if original_error:
            self.technical_message += f": {original_error}"
        self.recovery_hint = "Check the internet connection and the firmware_metadata_url setting."
        self.args = (self.user_message,)


class HttpStatusError(DeviceError):
    """A response-bearing call returned a non-success HTTP status."""

    def __init__(self, url: str, status: int):
        super().__init__(
            user_message=f"The server answered with HTTP {status}.",
            technical_message=f"GET {url} returned HTTP {status}",
            address=url,
            recoverable=True,
        )
        self.status = status


class ResponseValidationError(DeviceError):
    """A response body was not JSON or lacked the required fields."""

    def __init__(self, url: str, detail: str):
        super().__init__(
            user_message="Received invalid data from the server.",
            technical_message=f"Invalid response from {url}: {detail}",
            address=url,
            recoverable=True,
        )
        self.detail = detail


class InvalidAddressError(DeviceError):
    """The user supplied an address that is not an IPv4 address."""

    def __init__(self, address: str):
        super().__init__(
            user_message=f"'{address}' is not a valid IP address.",
            address=address,
            recoverable=True,
            recovery_hint="Enter the device address as four numbers, e.g. 192.168.1.100",
        )
