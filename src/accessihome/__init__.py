"""accessihome - assistive smart-home control by touch, switch scanning and voice."""

from __future__ import annotations

from importlib.metadata import version

from .config import Settings, get_settings
from .core import CommandResolver, DeviceRegistry, ScanningSequencer, VoiceIntakePipeline
from .home import Home, build_home
from .models import ActionLogEntry, CommandIntent, Device, DeviceType, LogSource

__all__ = [
    "ActionLogEntry",
    "CommandIntent",
    "CommandResolver",
    "Device",
    "DeviceRegistry",
    "DeviceType",
    "Home",
    "LogSource",
    "ScanningSequencer",
    "Settings",
    "VoiceIntakePipeline",
    "__version__",
    "build_home",
    "get_settings",
]

__version__ = version("accessihome")
