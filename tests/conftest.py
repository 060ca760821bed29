from __future__ import annotations

from collections.abc import Sequence

import pytest

from accessihome.config import Settings, VoiceConfig, get_settings
from accessihome.core import (
    ActionLogger,
    CommandResolver,
    DeviceRegistry,
    FeedbackEmitter,
    InterpreterError,
    SpeechRequest,
    Voice,
)
from accessihome.home import Home, build_home
from accessihome.models import CommandIntent, Device


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("ACCESSIHOME_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeSpeech:
    def __init__(self, voices: Sequence[Voice] = ()) -> None:
        self._voices = tuple(voices)
        self.calls: list[str] = []
        self.spoken: list[SpeechRequest] = []

    def voices(self) -> Sequence[Voice]:
        return self._voices

    def cancel(self) -> None:
        self.calls.append("cancel")

    def speak(self, request: SpeechRequest) -> None:
        self.calls.append("speak")
        self.spoken.append(request)

    @property
    def texts(self) -> list[str]:
        return [request.text for request in self.spoken]


class StubInterpreter:
    """Returns a canned intent, or raises the canned error."""

    def __init__(
        self, intent: CommandIntent | None = None, error: Exception | None = None
    ) -> None:
        self.intent = intent
        self.error = error
        self.requests: list[tuple[str, list[Device]]] = []

    async def interpret(self, command: str, devices: Sequence[Device]) -> CommandIntent:
        self.requests.append((command, list(devices)))
        if self.error is not None:
            raise self.error
        if self.intent is None:
            raise InterpreterError("no intent configured")
        return self.intent


@pytest.fixture
def registry() -> DeviceRegistry:
    return DeviceRegistry.with_defaults()


@pytest.fixture
def speech() -> FakeSpeech:
    return FakeSpeech()


@pytest.fixture
def action_log() -> ActionLogger:
    return ActionLogger()


@pytest.fixture
def resolver(registry, action_log, speech) -> CommandResolver:
    return CommandResolver(registry, FeedbackEmitter(action_log, speech))


@pytest.fixture
def interpreter() -> StubInterpreter:
    return StubInterpreter()


@pytest.fixture
def home(registry, speech, interpreter) -> Home:
    settings = Settings(voice=VoiceConfig(transcript_clear_delay=0))
    return build_home(
        settings, registry=registry, speech=speech, interpreter=interpreter
    )


@pytest.fixture
def make_speech():
    return FakeSpeech


@pytest.fixture
def make_interpreter():
    return StubInterpreter
