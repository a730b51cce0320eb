"""Smoke tests for the command line interface.

Device requests are replaced with AsyncMocks: CliRunner drives
`asyncio.run` itself, so an in-process server can't share its loop.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from ledremote import __version__
from ledremote.cli.main import cli
from ledremote.exceptions import DeviceConnectionError, DeviceRequestError
from ledremote.models import AppConfig, Color, DeviceInfo, FirmwareInfo

CLIENT = "ledremote.device.client"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fast_config(config_path):
    """Config file with short delays so device commands return quickly."""
    AppConfig(
        last_address="10.0.0.5",
        debounce_delay=0.01,
        status_reset_delay=0.01,
        update_notice_delay=0,
    ).save(config_path)
    return config_path


def invoke(runner, config_path, *args):
    return runner.invoke(cli, ["--config", str(config_path), *args])


@pytest.mark.unit
class TestCLIBasics:
    """Help, version and config commands."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "LED Remote" in result.output
        for command in ("probe", "color", "pattern", "firmware", "config"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_path(self, runner, config_path):
        result = invoke(runner, config_path, "config", "path")
        assert result.exit_code == 0
        assert str(config_path) in result.output

    def test_config_show_defaults(self, runner, config_path):
        result = invoke(runner, config_path, "config", "show")
        assert result.exit_code == 0
        assert "last_address" in result.output
        assert "192.168.1.100" in result.output

    def test_config_set(self, runner, config_path):
        result = invoke(runner, config_path, "config", "set", "last_address", "10.0.0.7")

        assert result.exit_code == 0
        assert "[OK] last_address = 10.0.0.7" in result.output
        assert json.loads(config_path.read_text())["last_address"] == "10.0.0.7"

    def test_config_set_unknown_key(self, runner, config_path):
        result = invoke(runner, config_path, "config", "set", "brightness", "5")
        assert result.exit_code == 2
        assert "Unknown setting 'brightness'" in result.output

    def test_config_set_invalid_value(self, runner, config_path):
        result = invoke(runner, config_path, "config", "set", "last_address", "esp32.local")
        assert result.exit_code == 1
        assert "Invalid configuration value for 'last_address'" in result.output
        assert not config_path.exists()

    def test_config_reset_needs_confirmation(self, runner, fast_config):
        result = runner.invoke(cli, ["--config", str(fast_config), "config", "reset"], input="n\n")
        assert result.exit_code == 1
        assert json.loads(fast_config.read_text())["last_address"] == "10.0.0.5"

    def test_config_reset(self, runner, fast_config):
        result = invoke(runner, fast_config, "config", "reset", "--yes")
        assert result.exit_code == 0
        assert json.loads(fast_config.read_text())["last_address"] == "192.168.1.100"

    def test_invalid_config_file(self, runner, config_path):
        config_path.write_text("{not json")
        result = invoke(runner, config_path, "config", "show")
        assert result.exit_code == 1
        assert "invalid syntax" in result.output


@pytest.mark.unit
class TestDeviceCommands:
    """Commands that talk to the device."""

    def test_probe_saves_address(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()) as check:
            result = invoke(runner, fast_config, "probe", "10.0.0.9")

        assert result.exit_code == 0, result.output
        assert "[OK] Device at 10.0.0.9 is reachable" in result.output
        assert check.call_args.args[0] == "10.0.0.9"
        assert json.loads(fast_config.read_text())["last_address"] == "10.0.0.9"

    def test_probe_failure(self, runner, fast_config):
        error = DeviceConnectionError("10.0.0.5", original_error="Connection refused")
        with patch(f"{CLIENT}.check_connection", new=AsyncMock(side_effect=error)):
            result = invoke(runner, fast_config, "probe")

        assert result.exit_code == 1
        assert "[FAIL] Could not connect to the device at 10.0.0.5." in result.output

    def test_global_address_option(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()) as check:
            result = invoke(runner, fast_config, "--address", "10.0.0.3", "probe")

        assert result.exit_code == 0, result.output
        assert check.call_args.args[0] == "10.0.0.3"

    def test_color(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.set_color", new=AsyncMock()) as set_color:
            result = invoke(runner, fast_config, "color", "255", "0", "0")

        assert result.exit_code == 0, result.output
        assert "[OK] Color set to #FF0000" in result.output
        set_color.assert_awaited_once()
        assert set_color.call_args.args == ("10.0.0.5", Color(r=255, g=0, b=0))

    def test_color_out_of_range(self, runner, fast_config):
        result = invoke(runner, fast_config, "color", "256", "0", "0")
        assert result.exit_code == 2

    def test_color_send_failure(self, runner, fast_config):
        error = DeviceRequestError("color", "10.0.0.5", "timed out")
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.set_color", new=AsyncMock(side_effect=error)):
            result = invoke(runner, fast_config, "color", "1", "2", "3")

        assert result.exit_code == 1
        assert "Could not send color to the device." in result.output

    def test_off(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.set_color", new=AsyncMock()) as set_color:
            result = invoke(runner, fast_config, "off")

        assert result.exit_code == 0, result.output
        assert "[OK] LEDs off" in result.output
        assert set_color.call_args.args[1] == Color(r=0, g=0, b=0)

    def test_rainbow_pattern(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.set_pattern", new=AsyncMock()) as set_pattern:
            result = invoke(runner, fast_config, "pattern", "rainbow")

        assert result.exit_code == 0, result.output
        assert "[OK] Sent rainbow pattern with 24 steps" in result.output
        assert len(set_pattern.call_args.args[1]) == 24

    def test_random_pattern_with_seed(self, runner, fast_config):
        sent = []
        for _ in range(2):
            with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                    patch(f"{CLIENT}.set_pattern", new=AsyncMock()) as set_pattern:
                result = invoke(runner, fast_config, "pattern", "random", "--seed", "4")
            assert result.exit_code == 0, result.output
            sent.append(set_pattern.call_args.args[1])
        assert sent[0] == sent[1]

    def test_info(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.get_device_info", new=AsyncMock(return_value=DeviceInfo(version="2.1.0"))):
            result = invoke(runner, fast_config, "info")

        assert result.exit_code == 0, result.output
        assert "Address:  10.0.0.5" in result.output
        assert "Firmware: 2.1.0" in result.output


@pytest.mark.unit
class TestFirmwareCommands:
    """firmware check / update."""

    latest = FirmwareInfo(version="1.1.0", url="http://fw.example/1.1.0.bin", changelog="- Faster fades")

    def test_check_update_available(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.get_device_info", new=AsyncMock(return_value=DeviceInfo(version="1.0.0"))), \
                patch(f"{CLIENT}.check_latest_firmware", new=AsyncMock(return_value=self.latest)):
            result = invoke(runner, fast_config, "firmware", "check")

        assert result.exit_code == 0, result.output
        assert "Current version: 1.0.0" in result.output
        assert "Latest version:  1.1.0" in result.output
        assert "- Faster fades" in result.output

    def test_check_up_to_date(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.get_device_info", new=AsyncMock(return_value=DeviceInfo(version="1.1.0"))), \
                patch(f"{CLIENT}.check_latest_firmware", new=AsyncMock(return_value=self.latest)):
            result = invoke(runner, fast_config, "firmware", "check")

        assert result.exit_code == 0, result.output
        assert "The device is up to date." in result.output

    def test_update(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.get_device_info", new=AsyncMock(return_value=DeviceInfo(version="1.0.0"))), \
                patch(f"{CLIENT}.check_latest_firmware", new=AsyncMock(return_value=self.latest)), \
                patch(f"{CLIENT}.trigger_update", new=AsyncMock(return_value=False)) as trigger:
            result = invoke(runner, fast_config, "firmware", "update", "--yes")

        assert result.exit_code == 0, result.output
        assert "[OK] Update to 1.1.0 sent." in result.output
        assert trigger.call_args.args == ("10.0.0.5", "http://fw.example/1.1.0.bin")

    def test_update_declined(self, runner, fast_config):
        with patch(f"{CLIENT}.check_connection", new=AsyncMock()), \
                patch(f"{CLIENT}.get_device_info", new=AsyncMock(return_value=DeviceInfo(version="1.0.0"))), \
                patch(f"{CLIENT}.check_latest_firmware", new=AsyncMock(return_value=self.latest)), \
                patch(f"{CLIENT}.trigger_update", new=AsyncMock()) as trigger:
            result = runner.invoke(
                cli, ["--config", str(fast_config), "firmware", "update"], input="n\n"
            )

        assert result.exit_code == 0, result.output
        assert "Update cancelled." in result.output
        trigger.assert_not_awaited()
