"""Tests for ConfigService and config persistence."""

import json
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from ledremote.exceptions import ConfigFileInvalidError, ConfigValidationError
from ledremote.model_manager import PydanticPersistence
from ledremote.models import AppConfig
from ledremote.protocols import ConfigEvent, ConfigObserver
from ledremote.services import ConfigService


@pytest.fixture
def service(config_path):
    return ConfigService[AppConfig](AppConfig, AppConfig(), config_path)


@pytest.fixture
def observer(service):
    observer = Mock(spec=ConfigObserver)
    service.register_observer(observer)
    return observer


@pytest.mark.unit
class TestConfigService:
    """Get, set, reset and save."""

    def test_get(self, service):
        assert service.get("last_address") == "192.168.1.100"
        assert service.get("missing", "fallback") == "fallback"

    def test_get_config_is_a_copy(self, service):
        copy = service.get_config()
        copy.debounce_delay = 3.0
        assert service.get("debounce_delay") == 0.2

    def test_set_emits_update(self, service, observer):
        service.set("last_address", "10.0.0.7")

        assert service.get("last_address") == "10.0.0.7"
        observer.on_config_event.assert_called_once_with(
            ConfigEvent.CONFIG_UPDATED, keys=["last_address"], values={"last_address": "10.0.0.7"}
        )

    def test_set_runs_validators(self, service):
        service.set("last_address", "http://10.0.0.7/")
        assert service.get("last_address") == "10.0.0.7"

    def test_set_coerces_strings(self, service):
        service.set("debounce_delay", "0.5")
        assert service.get("debounce_delay") == 0.5

    def test_set_invalid_value_keeps_old_config(self, service, observer):
        with pytest.raises(ValidationError):
            service.set("last_address", "not-an-ip")
        assert service.get("last_address") == "192.168.1.100"
        observer.on_config_event.assert_not_called()

    def test_set_unknown_key(self, service):
        with pytest.raises(AttributeError, match="no field 'colour'"):
            service.set("colour", "red")

    def test_update_is_all_or_nothing(self, service):
        with pytest.raises(ValidationError):
            service.update({"last_address": "10.0.0.8", "debounce_delay": -1})
        assert service.get("last_address") == "192.168.1.100"

    def test_reset(self, service, observer):
        service.set("last_address", "10.0.0.7")
        service.reset()

        assert service.get_config() == AppConfig()
        assert observer.on_config_event.call_args.args[0] is ConfigEvent.CONFIG_RESET

    def test_save(self, service, observer, config_path):
        service.set("last_address", "10.0.0.9")

        assert service.save() == config_path

        assert json.loads(config_path.read_text())["last_address"] == "10.0.0.9"
        observer.on_config_event.assert_called_with(ConfigEvent.CONFIG_SAVED, path=config_path)

    def test_save_keeps_backup(self, service, config_path):
        service.save()
        service.set("last_address", "10.0.0.9")
        service.save()

        backup = config_path.with_suffix(".json.bak")
        assert json.loads(backup.read_text())["last_address"] == "192.168.1.100"

    def test_save_without_path(self):
        service = ConfigService[AppConfig](AppConfig, AppConfig())
        with pytest.raises(ValueError, match="No path specified"):
            service.save()


@pytest.mark.unit
class TestPersistence:
    """Loading config files from disk."""

    def test_invalid_json(self, config_path):
        config_path.write_text('{"last_address": "10.0.0.1",}')
        with pytest.raises(ConfigFileInvalidError):
            AppConfig.load_or_default(config_path)

    def test_empty_file(self, config_path):
        config_path.write_text("   ")
        with pytest.raises(ConfigFileInvalidError, match="invalid syntax"):
            PydanticPersistence.load_json(config_path, AppConfig)

    def test_invalid_value(self, config_path):
        config_path.write_text(json.dumps({"debounce_delay": 0}))
        with pytest.raises(ConfigValidationError) as exc_info:
            AppConfig.load_or_default(config_path)
        assert exc_info.value.field == "debounce_delay"

    def test_missing_file_uses_factory(self, temp_dir):
        loaded = PydanticPersistence.load_json_or_default(
            temp_dir / "nope.json", AppConfig, lambda: AppConfig(last_address="10.1.1.1")
        )
        assert loaded.last_address == "10.1.1.1"

    def test_no_temp_file_left_behind(self, config_path):
        AppConfig().save(config_path)
        assert not config_path.with_suffix(".json.tmp").exists()
