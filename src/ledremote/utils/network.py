"""Address helpers for talking to the device over local HTTP."""

import ipaddress

from ledremote.exceptions import InvalidAddressError


def normalize_address(address: str) -> str:
    """
    Validate a user-supplied device address.

    Accepts a dotted-quad IPv4 address with an optional `:port`
    (e.g. "192.168.1.50" or "192.168.1.50:8080"). Surrounding whitespace
    and a leading "http://" are stripped.

    Args:
        address: Raw address as typed by the user

    Returns:
        The cleaned address

    Raises:
        InvalidAddressError: If the address is not IPv4[:port]
    """
    cleaned = address.strip()
    if cleaned.lower().startswith("http://"):
        cleaned = cleaned[len("http://"):]
    cleaned = cleaned.rstrip("/")

    host, sep, port = cleaned.partition(":")
    if sep:
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise InvalidAddressError(address)

    try:
        ipaddress.IPv4Address(host)
    except ValueError as e:
        raise InvalidAddressError(address) from e

    return cleaned


def device_url(address: str, path: str) -> str:
    """Build the URL of a device endpoint (e.g. `/status`)."""
    return f"http://{address}{path}"
