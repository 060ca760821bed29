from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "ACCESSIHOME_CONFIG"

DEFAULT_PREFERRED_VOICES = ("Google US English", "Samantha", "Zira")


class DevicesConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    # empty means the built-in demo catalog
    catalog: str = ""


class ScanningConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    interval: float = Field(default=2.0, gt=0)


class InterpreterConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    endpoint: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"
    api_key_env: str = "GOOGLE_API_KEY"
    timeout: float = Field(default=15.0, gt=0)
    retries: int = Field(default=1, ge=0, le=5)


class SpeechConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    language: str = "en-US"
    pitch: float = Field(default=1.05, gt=0, le=2)
    rate: float = Field(default=1.0, gt=0, le=10)
    preferred_voices: tuple[str, ...] = DEFAULT_PREFERRED_VOICES


class VoiceConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    transcript_clear_delay: float = Field(default=3.0, ge=0)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    devices: DevicesConfig = Field(default_factory=DevicesConfig)
    scanning: ScanningConfig = Field(default_factory=ScanningConfig)
    interpreter: InterpreterConfig = Field(default_factory=InterpreterConfig)
    speech: SpeechConfig = Field(default_factory=SpeechConfig)
    voice: VoiceConfig = Field(default_factory=VoiceConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def catalog_path_from_settings(settings: Settings) -> Path | None:
    if not settings.devices.catalog:
        return None
    return expand_path(settings.devices.catalog)


def _toml_string(value: str) -> str:
    return json.dumps(value)


def _toml_list(values: tuple[str, ...]) -> str:
    return "[" + ", ".join(_toml_string(value) for value in values) + "]"


def render_settings_toml(settings: Settings) -> str:
    lines = [
        "# AccessiHome configuration",
        "",
        "[devices]",
        f"catalog = {_toml_string(settings.devices.catalog)}",
        "",
        "[scanning]",
        f"interval = {settings.scanning.interval}",
        "",
        "[interpreter]",
        f"endpoint = {_toml_string(settings.interpreter.endpoint)}",
        f"model = {_toml_string(settings.interpreter.model)}",
        f"api_key_env = {_toml_string(settings.interpreter.api_key_env)}",
        f"timeout = {settings.interpreter.timeout}",
        f"retries = {settings.interpreter.retries}",
        "",
        "[speech]",
        f"language = {_toml_string(settings.speech.language)}",
        f"pitch = {settings.speech.pitch}",
        f"rate = {settings.speech.rate}",
        f"preferred_voices = {_toml_list(settings.speech.preferred_voices)}",
        "",
        "[voice]",
        f"transcript_clear_delay = {settings.voice.transcript_clear_delay}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
