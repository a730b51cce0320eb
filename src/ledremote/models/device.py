"""Ephemeral values exchanged with the device and the firmware server."""

from pydantic import BaseModel, ConfigDict, StrictStr

from .enums import StatusKind


class DeviceInfo(BaseModel):
    """Response of the device's `/info` endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: StrictStr


class FirmwareInfo(BaseModel):
    """Latest firmware metadata published by the firmware server."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: StrictStr
    url: StrictStr
    changelog: StrictStr


class StatusMessage(BaseModel):
    """Transient UI feedback; every operation overwrites the previous one."""

    model_config = ConfigDict(frozen=True)

    kind: StatusKind = StatusKind.IDLE
    text: str = "Ready"

    @classmethod
    def idle(cls, text: str = "Ready") -> "StatusMessage":
        return cls(kind=StatusKind.IDLE, text=text)

    @classmethod
    def sending(cls, text: str) -> "StatusMessage":
        return cls(kind=StatusKind.SENDING, text=text)

    @classmethod
    def success(cls, text: str) -> "StatusMessage":
        return cls(kind=StatusKind.SUCCESS, text=text)

    @classmethod
    def error(cls, text: str) -> "StatusMessage":
        return cls(kind=StatusKind.ERROR, text=text)

    @property
    def is_error(self) -> bool:
        return self.kind is StatusKind.ERROR
