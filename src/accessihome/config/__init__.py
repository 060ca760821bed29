from __future__ import annotations

from .paths import APP_NAME, CONFIG_FILENAME, default_config_path, expand_path
from .settings import (
    CONFIG_ENV_VAR,
    DEFAULT_PREFERRED_VOICES,
    DevicesConfig,
    InterpreterConfig,
    ScanningConfig,
    Settings,
    SpeechConfig,
    VoiceConfig,
    catalog_path_from_settings,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_PREFERRED_VOICES",
    "DevicesConfig",
    "InterpreterConfig",
    "ScanningConfig",
    "Settings",
    "SpeechConfig",
    "VoiceConfig",
    "catalog_path_from_settings",
    "default_config_path",
    "expand_path",
    "get_settings",
    "load_settings",
    "render_settings_toml",
    "resolve_config_path",
    "write_settings",
]
