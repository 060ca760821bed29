"""Data models for AccessiHome."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class DeviceType(str, Enum):
    LIGHT = "LIGHT"
    FAN = "FAN"
    LOCK = "LOCK"
    THERMOSTAT = "THERMOSTAT"
    TV = "TV"


class LogSource(str, Enum):
    """Input modality an event is attributed to."""

    MANUAL = "MANUAL"
    VOICE = "VOICE"
    SCANNING = "SCANNING"


class CommandAction(str, Enum):
    TURN_ON = "TURN_ON"
    TURN_OFF = "TURN_OFF"
    TOGGLE = "TOGGLE"
    UNKNOWN = "UNKNOWN"


# Device models


class Device(BaseModel):
    """Simulated smart-home device."""

    model_config = {"extra": "forbid"}

    id: str = Field(min_length=1)
    name: str
    type: DeviceType
    location: str
    is_on: bool = False
    value: float | None = None  # brightness or temperature
    icon_name: str = ""

    @property
    def state_label(self) -> str:
        return "ON" if self.is_on else "OFF"


DEFAULT_DEVICES: tuple[Device, ...] = (
    Device(
        id="1",
        name="Main Light",
        type=DeviceType.LIGHT,
        location="Living Room",
        is_on=False,
        icon_name="Lightbulb",
    ),
    Device(
        id="2",
        name="Ceiling Fan",
        type=DeviceType.FAN,
        location="Bedroom",
        is_on=True,
        icon_name="Fan",
    ),
    Device(
        id="3",
        name="Door Lock",
        type=DeviceType.LOCK,
        location="Entrance",
        is_on=False,
        icon_name="Lock",
    ),
    Device(
        id="4",
        name="TV",
        type=DeviceType.TV,
        location="Living Room",
        is_on=False,
        icon_name="Tv",
    ),
    Device(
        id="5",
        name="Thermostat",
        type=DeviceType.THERMOSTAT,
        location="Hallway",
        is_on=True,
        icon_name="Thermometer",
    ),
    Device(
        id="6",
        name="Desk Lamp",
        type=DeviceType.LIGHT,
        location="Office",
        is_on=False,
        icon_name="Lightbulb",
    ),
)


class DeviceCatalog(BaseModel):
    """Seed file contents (devices.yaml)."""

    model_config = {"extra": "forbid"}

    devices: list[Device] = Field(default_factory=list)


# Action log


def _new_entry_id() -> str:
    return uuid.uuid4().hex[:12]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActionLogEntry(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(default_factory=_new_entry_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    message: str
    source: LogSource


# Interpreter response


class CommandIntent(BaseModel):
    """Structured reply from the natural-language interpreter."""

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    target_device_id: str | None = Field(default=None, alias="targetDeviceId")
    action: CommandAction
    reasoning: str
    conversational_response: str | None = Field(
        default=None, alias="conversationalResponse"
    )

    @property
    def is_device_command(self) -> bool:
        return bool(self.target_device_id) and self.action is not CommandAction.UNKNOWN
