"""Fan-out of resolver outcomes to the action log and the speech transport."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from accessihome.config import SpeechConfig
from accessihome.models import ActionLogEntry, LogSource

from .action_log import ActionLogger

logger = logging.getLogger(__name__)

SPOKEN_SOURCES = frozenset({LogSource.VOICE, LogSource.SCANNING})


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


@dataclass(frozen=True)
class SpeechRequest:
    text: str
    voice: Voice | None
    pitch: float
    rate: float


class SpeechTransport(Protocol):
    def voices(self) -> Sequence[Voice]: ...

    def cancel(self) -> None: ...

    def speak(self, request: SpeechRequest) -> None: ...


def should_speak(source: LogSource) -> bool:
    """Manual taps stay silent; voice and scanning get spoken feedback."""
    return source in SPOKEN_SOURCES


def select_voice(
    voices: Sequence[Voice], preferred: Sequence[str], language: str
) -> Voice | None:
    """Pick the friendliest available voice.

    The first voice whose name contains any preferred name wins; otherwise
    the first voice for the language's primary subtag ("en" for "en-US").
    """
    for voice in voices:
        if any(name in voice.name for name in preferred):
            return voice

    primary = language.split("-")[0].lower()
    for voice in voices:
        if voice.lang.lower().startswith(primary):
            return voice
    return None


class FeedbackEmitter:
    def __init__(
        self,
        action_log: ActionLogger,
        speech: SpeechTransport | None = None,
        config: SpeechConfig | None = None,
    ) -> None:
        self.action_log = action_log
        self.speech = speech
        self.config = config or SpeechConfig()

    def record(self, message: str, source: LogSource) -> ActionLogEntry:
        """Log without speaking (transcripts, capture diagnostics)."""
        return self.action_log.append(message, source)

    def announce(self, message: str, source: LogSource) -> ActionLogEntry:
        entry = self.record(message, source)
        if should_speak(source):
            self.speak(message)
        return entry

    def speak(self, text: str) -> None:
        if self.speech is None:
            logger.debug("No speech transport, dropping utterance: %s", text)
            return

        self.speech.cancel()
        voice = select_voice(
            self.speech.voices(), self.config.preferred_voices, self.config.language
        )
        request = SpeechRequest(
            text=text, voice=voice, pitch=self.config.pitch, rate=self.config.rate
        )
        logger.debug("Speaking with voice %s", voice.name if voice else "default")
        self.speech.speak(request)
