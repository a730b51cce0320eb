"""Pytest fixtures for tests."""

import asyncio
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from ledremote.core import RemoteController
from ledremote.models import AppConfig
from ledremote.services import ConfigService


class FakeDevice:
    """
    In-process stand-in for the LED controller's HTTP API.

    Records every request as (path, payload) and serves `/version.json`
    so the firmware metadata URL can point at the same server.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.address = ""
        self.info_status = 200
        self.info_body: Any = {"version": "1.0.0"}
        self.info_raw: str | None = None
        self.firmware_body: Any = {
            "version": "1.1.0",
            "url": "http://firmware.example/led-1.1.0.bin",
            "changelog": "- Smoother fades",
        }
        self.delay = 0.0
        self.last_headers: dict[str, str] = {}
        self.last_query: dict[str, str] = {}

        self.app = web.Application()
        self.app.router.add_get("/status", self._status)
        self.app.router.add_get("/setcolor", self._setcolor)
        self.app.router.add_post("/setpattern", self._setpattern)
        self.app.router.add_get("/info", self._info)
        self.app.router.add_post("/update", self._update)
        self.app.router.add_get("/version.json", self._version)

    def calls_to(self, path: str) -> list[Any]:
        """Payloads of all requests to `path`, oldest first."""
        return [payload for call_path, payload in self.calls if call_path == path]

    async def _pause(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)

    async def _status(self, request: web.Request) -> web.Response:
        await self._pause()
        self.calls.append(("/status", None))
        return web.Response(text="OK")

    async def _setcolor(self, request: web.Request) -> web.Response:
        await self._pause()
        self.calls.append(("/setcolor", dict(request.query)))
        return web.Response(text="OK")

    async def _setpattern(self, request: web.Request) -> web.Response:
        await self._pause()
        self.calls.append(("/setpattern", await request.json()))
        return web.Response(text="OK")

    async def _info(self, request: web.Request) -> web.Response:
        await self._pause()
        self.calls.append(("/info", None))
        if self.info_raw is not None:
            return web.Response(text=self.info_raw, status=self.info_status)
        return web.json_response(self.info_body, status=self.info_status)

    async def _update(self, request: web.Request) -> web.Response:
        await self._pause()
        self.calls.append(("/update", await request.json()))
        return web.Response(text="Updating")

    async def _version(self, request: web.Request) -> web.Response:
        self.last_headers = dict(request.headers)
        self.last_query = dict(request.query)
        self.calls.append(("/version.json", None))
        return web.json_response(self.firmware_body)


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_path(temp_dir):
    """Config file location inside the temp dir."""
    return temp_dir / "config.json"


@pytest.fixture
async def fake_device():
    """Start a fake device on 127.0.0.1 with a random port."""
    device = FakeDevice()
    server = TestServer(device.app)
    await server.start_server()
    device.address = f"{server.host}:{server.port}"
    yield device
    await server.close()


@pytest.fixture
def unreachable_address():
    """An address where nothing listens (connection refused)."""
    return "127.0.0.1:1"


@pytest.fixture
def config_service(config_path):
    """Config service with short timings so tests run fast."""
    config = AppConfig(debounce_delay=0.05, status_reset_delay=0.1, update_notice_delay=0.01)
    return ConfigService[AppConfig](AppConfig, config, config_path)


@pytest.fixture
async def controller(config_service):
    """Controller without a shared session; closed after the test."""
    controller = RemoteController(config_service)
    yield controller
    await controller.aclose()
