from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape

from accessihome.core import SpeechRequest, Voice

CONSOLE_VOICES = (Voice(name="Console Narrator", lang="en-US"),)


class ConsoleSpeech:
    """Speech transport that prints utterances instead of playing audio."""

    def __init__(
        self, console: Console, voices: Sequence[Voice] = CONSOLE_VOICES
    ) -> None:
        self.console = console
        self._voices = tuple(voices)

    def voices(self) -> Sequence[Voice]:
        return self._voices

    def cancel(self) -> None:
        # printing is synchronous, nothing is ever still playing
        pass

    def speak(self, request: SpeechRequest) -> None:
        self.console.print(f"[magenta]🔊 {escape(request.text)}[/magenta]")
