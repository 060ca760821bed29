"""In-memory device registry."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import ValidationError

from accessihome.models import DEFAULT_DEVICES, Device, DeviceCatalog

logger = logging.getLogger(__name__)


class DuplicateDeviceError(ValueError):
    """Raised when a device id is already registered."""


class DeviceRegistry:
    """Authoritative, ordered collection of devices.

    Order only matters for scanning traversal. Callers get copies, so state
    changes go through `set_on`.
    """

    def __init__(self, devices: Iterable[Device] = ()) -> None:
        self._devices: list[Device] = []
        for device in devices:
            self.add(device)

    @classmethod
    def with_defaults(cls) -> DeviceRegistry:
        return cls(device.model_copy() for device in DEFAULT_DEVICES)

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        return self._find(device_id) is not None

    def _find(self, device_id: object) -> Device | None:
        for device in self._devices:
            if device.id == device_id:
                return device
        return None

    def get(self, device_id: str) -> Device | None:
        device = self._find(device_id)
        return device.model_copy() if device else None

    def at(self, index: int) -> Device | None:
        """Device at a scanning position, or None when out of range."""
        if 0 <= index < len(self._devices):
            return self._devices[index].model_copy()
        return None

    def all(self) -> list[Device]:
        return [device.model_copy() for device in self._devices]

    snapshot = all

    def set_on(self, device_id: str, value: bool) -> bool | None:
        """Set power state, returning the previous one (None if unknown id)."""
        device = self._find(device_id)
        if device is None:
            logger.debug("set_on ignored for unknown device %s", device_id)
            return None
        previous = device.is_on
        device.is_on = value
        return previous

    def add(self, device: Device) -> None:
        if self._find(device.id) is not None:
            raise DuplicateDeviceError(f"Device id '{device.id}' already registered")
        self._devices.append(device.model_copy())

    def remove(self, device_id: str) -> bool:
        device = self._find(device_id)
        if device is None:
            return False
        self._devices.remove(device)
        return True


def load_catalog(path: Path) -> DeviceRegistry:
    """Seed a registry from a devices.yaml catalog."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    try:
        catalog = DeviceCatalog.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid devices file: {path}\n{e}") from e

    try:
        registry = DeviceRegistry(catalog.devices)
    except DuplicateDeviceError as e:
        raise ValueError(f"Invalid devices file: {path}\n{e}") from e

    logger.info("Loaded %d devices from %s", len(registry), path)
    return registry


def save_catalog(registry: DeviceRegistry, path: Path) -> None:
    """Write a catalog file that `load_catalog` accepts."""
    path.parent.mkdir(parents=True, exist_ok=True)
    catalog = DeviceCatalog(devices=registry.all())
    with open(path, "w") as f:
        f.write("# AccessiHome device catalog\n\n")
        yaml.dump(
            catalog.model_dump(mode="json", exclude_none=True),
            f,
            default_flow_style=False,
            sort_keys=False,
        )
