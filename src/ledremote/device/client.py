"""HTTP client for the LED device and the firmware metadata server.

Stateless coroutines: each call takes the device address (and payload)
and either returns or raises a DeviceError subclass. Every request is
bounded by a timeout.

The device is treated as opaque: command endpoints are fire-and-forget
and their responses are never read. Only `/info` and the firmware
metadata URL return data the client validates.

A caller may pass its own `aiohttp.ClientSession` to reuse connections;
otherwise a short-lived session is opened for the call.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Optional, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from ledremote.exceptions import (
    DeviceConnectionError,
    DeviceRequestError,
    FirmwareServerError,
    HttpStatusError,
    ResponseValidationError,
)
from ledremote.models import Color, DeviceInfo, FirmwareInfo, PatternStep, pattern_payload
from ledremote.utils.network import device_url

logger = logging.getLogger(__name__)

# Seconds
STATUS_TIMEOUT = 3.0
COLOR_TIMEOUT = 2.0
PATTERN_TIMEOUT = 5.0  # larger payload, device parses and stores every step
INFO_TIMEOUT = 3.0
FIRMWARE_TIMEOUT = 10.0
UPDATE_TIMEOUT = 10.0  # device may be busy before it answers

_NETWORK_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)

M = TypeVar("M", bound=BaseModel)


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


def _timeout(seconds: float) -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=seconds)


@asynccontextmanager
async def _session_scope(session: Optional[aiohttp.ClientSession]) -> AsyncIterator[aiohttp.ClientSession]:
    """Yield the caller's session, or a temporary one closed on exit."""
    if session is not None:
        yield session
        return
    async with aiohttp.ClientSession() as owned:
        yield owned


async def check_connection(
    address: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = STATUS_TIMEOUT,
) -> None:
    """
    Probe the device's `/status` endpoint.

    Success only means the request completed without a network-level
    error; the status code and body are not inspected.

    Args:
        address: Device address (IPv4[:port])
        session: Optional shared client session
        timeout: Seconds before the probe counts as failed

    Raises:
        DeviceConnectionError: DNS/connect failure or timeout
    """
    url = device_url(address, "/status")
    try:
        async with _session_scope(session) as s:
            async with s.get(url, timeout=_timeout(timeout)) as response:
                logger.debug(f"Probe {url} answered HTTP {response.status}")
    except _NETWORK_ERRORS as e:
        logger.warning(f"Connection check failed for {address}: {_describe(e)}")
        raise DeviceConnectionError(address, original_error=_describe(e)) from e


async def set_color(
    address: str,
    color: Color,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = COLOR_TIMEOUT,
) -> None:
    """
    Set a solid color: `GET /setcolor?r=&g=&b=`.

    Raises:
        DeviceRequestError: On network failure or timeout
    """
    url = device_url(address, "/setcolor")
    params = {"r": str(color.r), "g": str(color.g), "b": str(color.b)}
    try:
        async with _session_scope(session) as s:
            async with s.get(url, params=params, timeout=_timeout(timeout)):
                pass
    except _NETWORK_ERRORS as e:
        logger.error(f"Failed to send color {color.to_hex()} to {address}: {_describe(e)}")
        raise DeviceRequestError("color", address, _describe(e)) from e

    logger.debug(f"Sent color {color.to_hex()} to {address}")


async def set_pattern(
    address: str,
    steps: Sequence[PatternStep],
    *,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = PATTERN_TIMEOUT,
) -> None:
    """
    Replace the device pattern: `POST /setpattern` with `{"steps": [...]}`.

    Raises:
        DeviceRequestError: On network failure or timeout
    """
    url = device_url(address, "/setpattern")
    body = pattern_payload(list(steps))
    try:
        async with _session_scope(session) as s:
            async with s.post(url, json=body, timeout=_timeout(timeout)):
                pass
    except _NETWORK_ERRORS as e:
        logger.error(f"Failed to send {len(steps)}-step pattern to {address}: {_describe(e)}")
        raise DeviceRequestError("pattern", address, _describe(e)) from e

    logger.debug(f"Sent {len(steps)}-step pattern to {address}")


async def _fetch_model(
    url: str,
    model_type: type[M],
    *,
    operation: str,
    session: Optional[aiohttp.ClientSession],
    timeout: float,
    params: Optional[dict[str, str]] = None,
    headers: Optional[dict[str, str]] = None,
    network_error: Optional[Callable[[str], DeviceRequestError]] = None,
) -> M:
    """
    GET a JSON document and validate it against `model_type`.

    `network_error` builds the exception for transport failures from the
    error text; by default a DeviceRequestError naming `operation`.
    """
    try:
        async with _session_scope(session) as s:
            async with s.get(url, params=params, headers=headers, timeout=_timeout(timeout)) as response:
                if not 200 <= response.status < 300:
                    raise HttpStatusError(url, response.status)
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise ResponseValidationError(url, f"body is not JSON: {e}") from e
    except _NETWORK_ERRORS as e:
        logger.error(f"Failed to {operation} from {url}: {_describe(e)}")
        if network_error is not None:
            raise network_error(_describe(e)) from e
        raise DeviceRequestError(operation, url, _describe(e)) from e

    try:
        return model_type.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) or "body" for err in e.errors())
        logger.error(f"Invalid {model_type.__name__} from {url}: {fields}")
        raise ResponseValidationError(url, f"missing or mistyped: {fields}") from e


async def get_device_info(
    address: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = INFO_TIMEOUT,
) -> DeviceInfo:
    """
    Read the firmware version from the device's `/info` endpoint.

    Raises:
        DeviceRequestError: On network failure or timeout
        HttpStatusError: On a non-2xx status
        ResponseValidationError: If `version` is missing or not a string
    """
    info = await _fetch_model(
        device_url(address, "/info"),
        DeviceInfo,
        operation="device info",
        session=session,
        timeout=timeout,
    )
    logger.info(f"Device {address} runs firmware {info.version}")
    return info


async def check_latest_firmware(
    metadata_url: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = FIRMWARE_TIMEOUT,
) -> FirmwareInfo:
    """
    Fetch the latest firmware metadata, bypassing caches.

    A millisecond timestamp is appended as `t` and `Cache-Control: no-cache`
    is sent so a stale version.json is never returned.

    Raises:
        FirmwareServerError: On network failure or timeout
        HttpStatusError: On a non-2xx status
        ResponseValidationError: If version/url/changelog are missing or not strings
    """
    firmware = await _fetch_model(
        metadata_url,
        FirmwareInfo,
        operation="firmware info",
        session=session,
        timeout=timeout,
        params={"t": str(int(time.time() * 1000))},
        headers={"Cache-Control": "no-cache", "Pragma": "no-cache"},
        network_error=lambda detail: FirmwareServerError(metadata_url, detail),
    )
    logger.info(f"Latest firmware is {firmware.version}")
    return firmware


async def trigger_update(
    address: str,
    firmware_url: str,
    *,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = UPDATE_TIMEOUT,
    raise_on_error: bool = False,
) -> bool:
    """
    Ask the device to fetch and flash new firmware: `POST /update {"url": ...}`.

    The device reboots while handling this request, so a dropped
    connection or timeout is the expected outcome of a successful
    trigger. By default transport errors are logged and swallowed.

    Args:
        address: Device address
        firmware_url: URL of the firmware image the device downloads
        session: Optional shared client session
        timeout: Seconds to wait for the device
        raise_on_error: Raise DeviceRequestError instead of swallowing

    Returns:
        True if the request completed, False if the transport failed
    """
    url = device_url(address, "/update")
    try:
        async with _session_scope(session) as s:
            async with s.post(url, json={"url": firmware_url}, timeout=_timeout(timeout)):
                pass
    except _NETWORK_ERRORS as e:
        if raise_on_error:
            raise DeviceRequestError("update command", address, _describe(e)) from e
        logger.warning(
            f"Update request to {address} ended with {_describe(e)} (expected while the device reboots)"
        )
        return False

    logger.info(f"Update command sent to {address} for {firmware_url}")
    return True
