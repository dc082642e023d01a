"""Client for OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from tui_coder.config import LlmConfig

NO_CONTENT = "No response content available."


class LlmError(Exception):
    """Raised when a chat completion request does not succeed."""


class RequestFailed(LlmError):
    """The HTTP request could not be completed."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(f"Request failed: {error}")


class ApiError(LlmError):
    """The API answered with a non-success status."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"API error: {message}")


class ParseError(LlmError):
    """The API's answer could not be understood."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Parse error: {message}")


@dataclass(frozen=True)
class Message:
    """A single chat message."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


def _parse_message(raw: Any) -> Message:
    if not isinstance(raw, dict):
        raise ValueError("invalid type for `message`: expected an object")
    for key in ("role", "content"):
        if key not in raw:
            raise ValueError(f"missing field `{key}`")
        if not isinstance(raw[key], str):
            raise ValueError(f"invalid type for `{key}`: expected a string")
    return Message(role=raw["role"], content=raw["content"])


def _extract_content(text: str) -> str:
    try:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        if "choices" not in data:
            raise ValueError("missing field `choices`")
        choices = data["choices"]
        if not isinstance(choices, list):
            raise ValueError("invalid type for `choices`: expected an array")
        messages = []
        for choice in choices:
            if not isinstance(choice, dict):
                raise ValueError("invalid type for choice: expected an object")
            if "message" not in choice:
                raise ValueError("missing field `message`")
            messages.append(_parse_message(choice["message"]))
    except ValueError as exc:
        raise ParseError(f"Failed to parse API response: {exc}") from exc
    return messages[0].content if messages else NO_CONTENT


async def ask_llm_with_messages(config: LlmConfig, messages: Iterable[Message]) -> str:
    """Send the conversation and return the first choice's content."""
    body = {
        "model": config.model_name,
        "messages": [message.to_dict() for message in messages],
    }
    headers = {"Authorization": f"Bearer {config.api_key}"}
    url = f"{config.api_base_url}/chat/completions"
    try:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.post(url, json=body, headers=headers)
            text = response.text
    except httpx.HTTPError as exc:
        raise RequestFailed(exc) from exc

    if not response.is_success:
        status = f"{response.status_code} {response.reason_phrase}".rstrip()
        raise ApiError(f"HTTP {status}: {text}")

    return _extract_content(text)