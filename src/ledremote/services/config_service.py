"""Configuration service for managing application configuration."""

import logging
from pathlib import Path
from threading import Lock
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ledremote.model_manager import ObserverManager, PydanticPersistence
from ledremote.protocols import ConfigEvent, ConfigObserver

logger = logging.getLogger(__name__)

ConfigType = TypeVar("ConfigType", bound=BaseModel)


class ConfigService(Generic[ConfigType]):
    """
    Validated access to a Pydantic configuration model, with persistence.

    Every mutation goes through full model validation and emits a
    ConfigEvent. The lock is released before observers are notified.

    Usage Example:
        ```python
        config = AppConfig.load_or_default()
        service = ConfigService[AppConfig](AppConfig, config, default_config_path())

        service.set("last_address", "192.168.1.50")
        service.save()
        ```
    """

    def __init__(
        self,
        config_type: Type[ConfigType],
        initial_config: ConfigType,
        default_path: Optional[Path] = None,
    ):
        """
        Initialize the configuration service.

        Args:
            config_type: The Pydantic model class (e.g., AppConfig)
            initial_config: The initial configuration instance
            default_path: Default path for save/load operations (optional)
        """
        self._config_type = config_type
        self._config = initial_config
        self._default_path = default_path
        self._lock = Lock()

        self._observers = ObserverManager[ConfigObserver](
            lock=self._lock,
            observer_type_name="config",
        )

        logger.info(f"ConfigService initialized with {config_type.__name__}")

    @property
    def default_path(self) -> Optional[Path]:
        return self._default_path

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: ConfigObserver) -> None:
        """
        Register an observer to receive configuration events.

        Args:
            observer: Object implementing ConfigObserver protocol
        """
        self._observers.register(observer)

    def unregister_observer(self, observer: ConfigObserver) -> None:
        self._observers.unregister(observer)

    def _notify_observers(self, event: ConfigEvent, **kwargs: Any) -> None:
        self._observers.notify("on_config_event", event, **kwargs)

    # =================================================================
    # Configuration Access
    # =================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.

        Args:
            key: Configuration field name
            default: Default value if key doesn't exist
        """
        with self._lock:
            return getattr(self._config, key, default)

    def get_all(self) -> dict[str, Any]:
        """Snapshot of all configuration values."""
        with self._lock:
            return self._config.model_dump()

    def get_config(self) -> ConfigType:
        """Deep copy of the configuration object."""
        with self._lock:
            return self._config.model_copy(deep=True)

    # =================================================================
    # Configuration Mutation
    # =================================================================

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by key.

        Raises:
            AttributeError: If key doesn't exist in config model
            ValidationError: If value fails Pydantic validation

        Events:
            Emits CONFIG_UPDATED with keys=[key], values={key: value}
        """
        self.update({key: value})

    def update(self, values: dict[str, Any]) -> None:
        """
        Update several values at once (all or nothing).

        Raises:
            AttributeError: If any key doesn't exist in config model
            ValidationError: If any value fails Pydantic validation

        Events:
            Emits a single CONFIG_UPDATED with all changed keys/values
        """
        with self._lock:
            for key in values:
                if key not in self._config_type.model_fields:
                    raise AttributeError(f"'{self._config_type.__name__}' has no field '{key}'")

            # Rebuild the model so validators run on the new values
            try:
                current = self._config.model_dump()
                current.update(values)
                self._config = self._config_type.model_validate(current)
            except ValidationError as e:
                logger.error(f"Validation error updating {list(values)}: {e}")
                raise
            applied = {key: getattr(self._config, key) for key in values}

        self._notify_observers(ConfigEvent.CONFIG_UPDATED, keys=list(applied), values=applied)
        logger.debug(f"Config updated: {applied}")

    def reset(self) -> None:
        """
        Reset configuration to default values.

        Events:
            Emits CONFIG_RESET with the new default config
        """
        with self._lock:
            self._config = self._config_type()
            snapshot = self._config.model_copy(deep=True)

        self._notify_observers(ConfigEvent.CONFIG_RESET, config=snapshot)
        logger.info(f"Config reset to defaults: {self._config_type.__name__}")

    # =================================================================
    # Persistence
    # =================================================================

    def save(self, path: Optional[Path] = None) -> Path:
        """
        Save configuration to file.

        Args:
            path: Path to save config to (uses default_path if None)

        Returns:
            The path written

        Raises:
            ValueError: If no path specified and no default_path set

        Events:
            Emits CONFIG_SAVED with the file path
        """
        file_path = path or self._default_path
        if file_path is None:
            raise ValueError("No path specified and no default_path set")
        file_path = Path(file_path)

        with self._lock:
            config_copy = self._config.model_copy(deep=True)

        # I/O outside the lock
        PydanticPersistence.save_json(config_copy, file_path)

        self._notify_observers(ConfigEvent.CONFIG_SAVED, path=file_path)
        logger.info(f"Config saved to {file_path}")
        return file_path
