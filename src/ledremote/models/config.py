"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from ledremote.exceptions import InvalidAddressError
from ledremote.model_manager.persistence import PydanticPersistence
from ledremote.utils.network import normalize_address

DEFAULT_DEVICE_ADDRESS = "192.168.1.100"
DEFAULT_FIRMWARE_METADATA_URL = (
    "https://raw.githubusercontent.com/user/repo/main/firmware/version.json"
)


def default_config_path() -> Path:
    """Location of the config file (~/.ledremote/config.json)."""
    return Path.home() / ".ledremote" / "config.json"


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Session settings
    last_address: str = Field(
        default=DEFAULT_DEVICE_ADDRESS,
        description="Last device address that answered a probe; default connection target",
    )

    # Firmware updates
    firmware_metadata_url: str = Field(
        default=DEFAULT_FIRMWARE_METADATA_URL,
        description="URL of the version.json describing the latest firmware",
    )

    # Timing
    debounce_delay: float = Field(
        default=0.2,
        gt=0,
        le=5.0,
        description="Quiet period before a solid color change is sent (seconds)",
    )
    status_reset_delay: float = Field(
        default=2.0,
        ge=0,
        description="How long the 'connected' message stays before returning to idle (seconds)",
    )
    update_notice_delay: float = Field(
        default=2.0,
        ge=0,
        description="Wait after triggering a firmware update before reporting it (seconds)",
    )

    @field_validator("last_address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Only IPv4[:port] addresses are stored."""
        try:
            return normalize_address(v)
        except InvalidAddressError as e:
            raise ValueError(e.user_message) from e

    @field_validator("firmware_metadata_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.ledremote/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or default_config_path(), cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or default_config_path())
