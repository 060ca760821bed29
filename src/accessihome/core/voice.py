"""Voice command round trip: capture, interpret, resolve, narrate."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from accessihome.models import CommandIntent, LogSource

from .feedback import FeedbackEmitter
from .interpreter import Interpreter, InterpreterError
from .registry import DeviceRegistry
from .resolver import CommandResolver

logger = logging.getLogger(__name__)

NOT_UNDERSTOOD = "I'm not sure what you mean."
PROCESSING_FAILED = "Sorry, I had trouble processing that."
CAPTURE_UNSUPPORTED = (
    "Speech recognition is not supported here. Please enter the command manually."
)


class CaptureTransport(Protocol):
    """Speech-to-text capability.

    Implementations report back through the pipeline's `on_capture_*`
    handlers and deliver one final transcript per activation.
    """

    def start(self) -> None: ...

    def stop(self) -> None: ...


ManualEntry = Callable[[], Awaitable[str | None]]


class VoiceIntakePipeline:
    def __init__(
        self,
        registry: DeviceRegistry,
        resolver: CommandResolver,
        feedback: FeedbackEmitter,
        interpreter: Interpreter,
        capture: CaptureTransport | None = None,
        manual_entry: ManualEntry | None = None,
        notify: Callable[[str], None] | None = None,
        transcript_clear_delay: float = 3.0,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.feedback = feedback
        self.interpreter = interpreter
        self.capture = capture
        self.manual_entry = manual_entry
        self.notify = notify
        self.transcript_clear_delay = transcript_clear_delay

        self.listening = False
        self.processing = False
        self.transcript = ""
        self._discard_result = False
        self._clear_handle: asyncio.TimerHandle | None = None
        self._in_flight: set[asyncio.Task[bool]] = set()

    @property
    def capture_supported(self) -> bool:
        return self.capture is not None

    # Activation

    async def toggle_listening(self) -> None:
        """The voice button: start or stop capture, or fall back to typing."""
        if self.processing:
            logger.info("Voice request already in flight, ignoring activation")
            return

        if self.capture is None:
            self._notify(CAPTURE_UNSUPPORTED)
            if self.manual_entry is None:
                return
            command = await self.manual_entry()
            if command and command.strip():
                await self.submit(command.strip())
            return

        if self.listening:
            self._discard_result = True
            self.capture.stop()
            return

        self._discard_result = False
        try:
            self.capture.start()
        except RuntimeError as exc:
            logger.error("Could not start capture: %s", exc)

    # Capture events

    def on_capture_start(self) -> None:
        self.listening = True

    def on_capture_result(self, transcript: str) -> asyncio.Task[bool] | None:
        if self._discard_result:
            logger.debug("Capture stopped by user, dropping transcript")
            return None
        task = asyncio.get_running_loop().create_task(self.submit(transcript))
        # the loop only keeps weak references to tasks
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    def on_capture_error(self, code: str) -> None:
        logger.error("Speech recognition error: %s", code)
        self.listening = False
        self.feedback.record(f"Voice error: {code}", LogSource.VOICE)

    def on_capture_end(self) -> None:
        self.listening = False

    # Round trip

    async def submit(self, transcript: str) -> bool:
        """Run one command through the interpreter.

        Returns False when rejected because another request is in flight.
        """
        if self.processing:
            logger.warning("Rejected voice command while processing: %r", transcript)
            return False

        self.processing = True
        self._cancel_clear()
        self.transcript = transcript
        try:
            self.feedback.record(f'Heard: "{transcript}"', LogSource.VOICE)
            try:
                intent = await self.interpreter.interpret(
                    transcript, self.registry.snapshot()
                )
            except InterpreterError as exc:
                logger.error("Interpreter failed: %s", exc)
                self.feedback.announce(PROCESSING_FAILED, LogSource.VOICE)
            except Exception:
                logger.exception("Unexpected interpreter failure")
                self.feedback.announce(PROCESSING_FAILED, LogSource.VOICE)
            else:
                self._handle_intent(intent)
        finally:
            self.processing = False
            self._schedule_clear()
        return True

    def _handle_intent(self, intent: CommandIntent) -> None:
        logger.debug("Interpreter reasoning: %s", intent.reasoning)
        reply = (intent.conversational_response or "").strip()
        if reply:
            self.feedback.record(f'AI says: "{reply}"', LogSource.VOICE)
            self.feedback.speak(reply)

        if intent.is_device_command:
            resolution = self.resolver.apply_intent(intent, LogSource.VOICE)
            if resolution is not None and not resolution.found:
                logger.debug(
                    "Interpreter picked unknown device %s", intent.target_device_id
                )
        elif not reply:
            self.feedback.announce(NOT_UNDERSTOOD, LogSource.VOICE)

    # Presentation helpers

    def _notify(self, message: str) -> None:
        if self.notify is not None:
            self.notify(message)
        else:
            logger.warning(message)

    def _schedule_clear(self) -> None:
        if self.transcript_clear_delay <= 0:
            self.transcript = ""
            return
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(
            self.transcript_clear_delay, self._clear_transcript
        )

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None

    def _clear_transcript(self) -> None:
        self._clear_handle = None
        self.transcript = ""
