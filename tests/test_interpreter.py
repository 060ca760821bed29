"""Tests for the interpreter contract."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from accessihome.config import InterpreterConfig
from accessihome.core import (
    DeviceRegistry,
    GeminiInterpreter,
    InterpreterError,
    build_device_context,
    build_prompt,
    parse_intent,
    strip_code_fences,
)
from accessihome.models import CommandAction


def test_device_context_lines():
    context = build_device_context(DeviceRegistry.with_defaults().all())
    lines = context.splitlines()

    assert len(lines) == 6
    assert lines[0] == (
        "ID: 1, Name: Main Light, Type: LIGHT, Location: Living Room, Status: OFF"
    )
    assert lines[1].endswith("Status: ON")


def test_prompt_embeds_command_and_devices():
    prompt = build_prompt("hello there", DeviceRegistry.with_defaults().all())
    assert 'User Command: "hello there"' in prompt
    assert "ID: 3, Name: Door Lock" in prompt
    assert "AccessiHome" in prompt


@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}```  ',
    ],
)
def test_strip_code_fences(text):
    assert json.loads(strip_code_fences(text)) == {"a": 1}


def test_parse_intent_camel_case_payload():
    intent = parse_intent(
        '```json\n{"targetDeviceId": "3", "action": "TOGGLE", '
        '"reasoning": "door lock", "conversationalResponse": ""}\n```'
    )
    assert intent.target_device_id == "3"
    assert intent.action is CommandAction.TOGGLE
    assert intent.is_device_command is True


def test_parse_intent_greeting():
    intent = parse_intent(
        '{"targetDeviceId": null, "action": "UNKNOWN", "reasoning": "greeting", '
        '"conversationalResponse": "Hi there! Ready to help."}'
    )
    assert intent.target_device_id is None
    assert intent.is_device_command is False
    assert intent.conversational_response == "Hi there! Ready to help."


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not json",
        "[1, 2]",
        '{"action": "TOGGLE"}',
        '{"action": "DANCE", "reasoning": "x"}',
    ],
)
def test_parse_intent_rejects_bad_payloads(text):
    with pytest.raises(InterpreterError):
        parse_intent(text)


def _reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _interpreter(handler, retries: int = 1) -> GeminiInterpreter:
    return GeminiInterpreter(
        InterpreterConfig(retries=retries, timeout=1.0),
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


def test_gemini_request_and_response():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=_reply(
                '{"targetDeviceId": "1", "action": "TURN_ON", "reasoning": "light"}'
            ),
        )

    devices = DeviceRegistry.with_defaults().all()
    intent = asyncio.run(_interpreter(handler).interpret("light on", devices))

    assert intent.target_device_id == "1"
    assert intent.action is CommandAction.TURN_ON

    request = seen[0]
    assert request.url.path.endswith("/models/gemini-2.5-flash:generateContent")
    assert request.url.params["key"] == "test-key"
    body = json.loads(request.content)
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert "light on" in body["contents"][0]["parts"][0]["text"]


def test_gemini_retries_once_on_server_error():
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            return httpx.Response(503)
        return httpx.Response(
            200,
            json=_reply(
                '{"targetDeviceId": null, "action": "UNKNOWN", "reasoning": "?"}'
            ),
        )

    intent = asyncio.run(_interpreter(handler).interpret("hmm", []))
    assert intent.action is CommandAction.UNKNOWN
    assert len(calls) == 2


def test_gemini_gives_up_after_retries():
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ConnectError("offline", request=request)

    with pytest.raises(InterpreterError):
        asyncio.run(_interpreter(handler, retries=1).interpret("hi", []))
    assert len(calls) == 2


def test_gemini_does_not_retry_client_errors():
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(400, json={"error": "bad request"})

    with pytest.raises(InterpreterError):
        asyncio.run(_interpreter(handler).interpret("hi", []))
    assert len(calls) == 1


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": []},
        {"unexpected": True},
        {"candidates": [{"content": {"parts": ["x"]}}]},
        {"candidates": [{"content": {"parts": "x"}}]},
        _reply("I think you want the lights on"),
    ],
)
def test_gemini_unusable_replies(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(InterpreterError):
        asyncio.run(_interpreter(handler).interpret("hi", []))


def test_gemini_requires_api_key():
    interpreter = GeminiInterpreter(InterpreterConfig(), api_key=None)
    with pytest.raises(InterpreterError, match="GOOGLE_API_KEY"):
        asyncio.run(interpreter.interpret("hi", []))


def test_gemini_timeout_bounds_whole_attempt():
    calls: list[int] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        # trickles past the deadline without any single read timing out
        await asyncio.sleep(1)
        return httpx.Response(200, json=_reply("{}"))

    interpreter = GeminiInterpreter(
        InterpreterConfig(timeout=0.05, retries=1),
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(InterpreterError):
        asyncio.run(interpreter.interpret("hi", []))
    assert len(calls) == 2
