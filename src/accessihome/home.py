"""Wiring of the core components into one owned context."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from accessihome.config import Settings, catalog_path_from_settings
from accessihome.core import (
    ActionLogger,
    CaptureTransport,
    CommandResolver,
    DeviceRegistry,
    FeedbackEmitter,
    GeminiInterpreter,
    Interpreter,
    ScanningSequencer,
    SpeechTransport,
    VoiceIntakePipeline,
    load_catalog,
)
from accessihome.core.voice import ManualEntry
from accessihome.models import Device


@dataclass
class Home:
    settings: Settings
    registry: DeviceRegistry
    action_log: ActionLogger
    feedback: FeedbackEmitter
    resolver: CommandResolver
    scanner: ScanningSequencer
    voice: VoiceIntakePipeline


def build_registry(settings: Settings) -> DeviceRegistry:
    path = catalog_path_from_settings(settings)
    if path is None:
        return DeviceRegistry.with_defaults()
    return load_catalog(path)


def build_home(
    settings: Settings,
    *,
    registry: DeviceRegistry | None = None,
    speech: SpeechTransport | None = None,
    interpreter: Interpreter | None = None,
    capture: CaptureTransport | None = None,
    manual_entry: ManualEntry | None = None,
    notify: Callable[[str], None] | None = None,
    on_tick: Callable[[int, Device | None], None] | None = None,
) -> Home:
    registry = registry if registry is not None else build_registry(settings)
    action_log = ActionLogger()
    feedback = FeedbackEmitter(action_log, speech, settings.speech)
    resolver = CommandResolver(registry, feedback)
    scanner = ScanningSequencer(
        registry, resolver, interval=settings.scanning.interval, on_tick=on_tick
    )
    voice = VoiceIntakePipeline(
        registry,
        resolver,
        feedback,
        interpreter or GeminiInterpreter(settings.interpreter),
        capture=capture,
        manual_entry=manual_entry,
        notify=notify,
        transcript_clear_delay=settings.voice.transcript_clear_delay,
    )
    return Home(
        settings=settings,
        registry=registry,
        action_log=action_log,
        feedback=feedback,
        resolver=resolver,
        scanner=scanner,
        voice=voice,
    )
