"""Tests for the device registry."""

from __future__ import annotations

import pytest

from accessihome.core import DeviceRegistry, DuplicateDeviceError, load_catalog
from accessihome.core.registry import save_catalog
from accessihome.models import Device, DeviceType


def _device(device_id: str, name: str = "Lamp", is_on: bool = False) -> Device:
    return Device(
        id=device_id, name=name, type=DeviceType.LIGHT, location="Office", is_on=is_on
    )


def test_defaults_are_ordered():
    registry = DeviceRegistry.with_defaults()
    assert [d.id for d in registry.all()] == ["1", "2", "3", "4", "5", "6"]
    assert registry.get("3").name == "Door Lock"
    assert registry.get("2").is_on is True


def test_get_unknown_returns_none(registry):
    assert registry.get("99") is None
    assert "99" not in registry
    assert "1" in registry


def test_set_on_returns_previous_state(registry):
    assert registry.set_on("1", True) is False
    assert registry.get("1").is_on is True
    assert registry.set_on("1", True) is True


def test_set_on_unknown_is_noop(registry):
    before = registry.all()
    assert registry.set_on("missing", True) is None
    assert registry.all() == before


def test_returned_devices_are_copies(registry):
    device = registry.get("1")
    device.is_on = True
    registry.all()[0].is_on = True
    assert registry.get("1").is_on is False


def test_duplicate_ids_rejected():
    registry = DeviceRegistry([_device("a")])
    with pytest.raises(DuplicateDeviceError):
        registry.add(_device("a", name="Other"))
    assert len(registry) == 1


def test_remove_and_at():
    registry = DeviceRegistry([_device("a"), _device("b", name="Fan")])
    assert registry.at(1).id == "b"
    assert registry.at(2) is None
    assert registry.at(-1) is None

    assert registry.remove("a") is True
    assert registry.remove("a") is False
    assert registry.at(0).id == "b"


def test_catalog_roundtrip(tmp_path):
    path = tmp_path / "devices.yaml"
    save_catalog(DeviceRegistry.with_defaults(), path)

    loaded = load_catalog(path)
    assert [d.name for d in loaded.all()] == [
        d.name for d in DeviceRegistry.with_defaults().all()
    ]


def test_catalog_with_duplicate_ids_is_invalid(tmp_path):
    path = tmp_path / "devices.yaml"
    path.write_text(
        "devices:\n"
        "  - {id: '1', name: A, type: LIGHT, location: Hall}\n"
        "  - {id: '1', name: B, type: FAN, location: Hall}\n"
    )
    with pytest.raises(ValueError, match="already registered"):
        load_catalog(path)


def test_catalog_with_unknown_type_is_invalid(tmp_path):
    path = tmp_path / "devices.yaml"
    path.write_text(
        "devices:\n  - {id: '1', name: A, type: TOASTER, location: Hall}\n"
    )
    with pytest.raises(ValueError, match="Invalid devices file"):
        load_catalog(path)
