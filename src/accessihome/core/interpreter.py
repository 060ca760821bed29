"""Request/response contract with the natural-language interpreter."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from collections.abc import Sequence
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from accessihome.config import InterpreterConfig
from accessihome.models import CommandAction, CommandIntent, Device

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?")

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "targetDeviceId": {"type": "STRING", "nullable": True},
        "action": {
            "type": "STRING",
            "enum": [action.value for action in CommandAction],
        },
        "reasoning": {"type": "STRING"},
        "conversationalResponse": {"type": "STRING", "nullable": True},
    },
    "required": ["targetDeviceId", "action", "reasoning"],
}

PROMPT_TEMPLATE = """\
You are "AccessiHome", a warm, casual, and friendly assistive home assistant.
Your Persona:
- Speak like a helpful friend.
- NEVER use formal titles like "Sir", "Madam", "Mr.", or "Ms.".
- Be concise and soft-spoken.

User Command: "{command}"

Available Devices:
{devices}

Instructions:
1. Identify the device and action (TURN_ON, TURN_OFF, TOGGLE).
2. If the user just says a greeting (e.g., "Hello", "Hi", "Good morning"),
   set targetDeviceId to null, action to UNKNOWN, and provide a warm
   conversationalResponse (e.g., "Hi there! Ready to help.").
3. If the command is valid, set the device ID and action.
   Leave conversationalResponse EMPTY.
4. If unclear, ask kindly for clarification.
"""


class InterpreterError(Exception):
    """Interpreter unreachable or its reply unusable."""


class Interpreter(Protocol):
    async def interpret(
        self, command: str, devices: Sequence[Device]
    ) -> CommandIntent: ...


def build_device_context(devices: Sequence[Device]) -> str:
    return "\n".join(
        f"ID: {d.id}, Name: {d.name}, Type: {d.type.value}, "
        f"Location: {d.location}, Status: {d.state_label}"
        for d in devices
    )


def build_prompt(command: str, devices: Sequence[Device]) -> str:
    return PROMPT_TEMPLATE.format(
        command=command, devices=build_device_context(devices)
    )


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def parse_intent(text: str) -> CommandIntent:
    cleaned = strip_code_fences(text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise InterpreterError(f"Interpreter reply is not JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise InterpreterError("Interpreter reply is not a JSON object")

    try:
        return CommandIntent.model_validate(data)
    except ValidationError as exc:
        raise InterpreterError(f"Interpreter reply failed validation: {exc}") from exc


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, TimeoutError):
        return True
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


class GeminiInterpreter:
    """Interpreter backed by the Generative Language `generateContent` API.

    Calls are bounded by `config.timeout`; transport failures, timeouts and
    5xx replies are retried `config.retries` times. Reply parsing is not
    retried.
    """

    def __init__(
        self,
        config: InterpreterConfig | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or InterpreterConfig()
        self.api_key = api_key or os.environ.get(self.config.api_key_env, "")
        self._transport = transport

    @property
    def url(self) -> str:
        endpoint = self.config.endpoint.rstrip("/")
        return f"{endpoint}/models/{self.config.model}:generateContent"

    def build_payload(self, command: str, devices: Sequence[Device]) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_prompt(command, devices)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    async def interpret(
        self, command: str, devices: Sequence[Device]
    ) -> CommandIntent:
        if not self.api_key:
            raise InterpreterError(
                f"No API key; set the {self.config.api_key_env} environment variable"
            )

        payload = self.build_payload(command, devices)
        body = await self._post(payload)
        return parse_intent(self._extract_text(body))

    async def _post(self, payload: dict[str, Any]) -> Any:
        attempts = self.config.retries + 1
        async with httpx.AsyncClient(
            timeout=self.config.timeout, transport=self._transport
        ) as client:
            for attempt in range(1, attempts + 1):
                try:
                    # bounds the whole attempt, not each socket operation
                    async with asyncio.timeout(self.config.timeout):
                        response = await client.post(
                            self.url,
                            params={"key": self.api_key},
                            json=payload,
                        )
                        response.raise_for_status()
                        return response.json()
                except (httpx.HTTPError, TimeoutError) as exc:
                    if attempt < attempts and _is_retryable(exc):
                        logger.warning(
                            "Interpreter call failed (attempt %d/%d): %r",
                            attempt,
                            attempts,
                            exc,
                        )
                        continue
                    raise InterpreterError(f"Interpreter call failed: {exc!r}") from exc
                except ValueError as exc:
                    raise InterpreterError("Interpreter returned invalid JSON") from exc
        raise InterpreterError("Interpreter call failed")

    @staticmethod
    def _extract_text(body: Any) -> str:
        try:
            parts = body["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise InterpreterError("Interpreter reply has no candidate text") from exc
        if not isinstance(parts, list) or not all(isinstance(p, dict) for p in parts):
            raise InterpreterError("Interpreter reply parts are malformed")
        return "".join(str(part.get("text", "")) for part in parts)
