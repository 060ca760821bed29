from __future__ import annotations

from .action_log import ActionLogger
from .feedback import (
    FeedbackEmitter,
    SpeechRequest,
    SpeechTransport,
    Voice,
    select_voice,
    should_speak,
)
from .interpreter import (
    GeminiInterpreter,
    Interpreter,
    InterpreterError,
    build_device_context,
    build_prompt,
    parse_intent,
    strip_code_fences,
)
from .registry import DeviceRegistry, DuplicateDeviceError, load_catalog, save_catalog
from .resolver import CommandResolver, Resolution
from .sequencer import INACTIVE, ScanningSequencer
from .voice import CaptureTransport, VoiceIntakePipeline

__all__ = [
    "INACTIVE",
    "ActionLogger",
    "CaptureTransport",
    "CommandResolver",
    "DeviceRegistry",
    "DuplicateDeviceError",
    "FeedbackEmitter",
    "GeminiInterpreter",
    "Interpreter",
    "InterpreterError",
    "Resolution",
    "ScanningSequencer",
    "SpeechRequest",
    "SpeechTransport",
    "Voice",
    "VoiceIntakePipeline",
    "build_device_context",
    "build_prompt",
    "load_catalog",
    "parse_intent",
    "save_catalog",
    "select_voice",
    "should_speak",
    "strip_code_fences",
]
