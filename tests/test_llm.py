import json

import httpx
import pytest
import respx

from tui_coder.config import LlmConfig
from tui_coder.llm import (
    ApiError,
    LlmError,
    Message,
    ParseError,
    RequestFailed,
    ask_llm_with_messages,
)

BASE = "https://llm.example.com/v1"
URL = f"{BASE}/chat/completions"
CONFIG = LlmConfig(api_key="placeholder", api_base_url=BASE, model_name="test-model")
MESSAGES = [Message("system", "be helpful"), Message("user", "hi")]


def _reply(*contents):
    return {
        "choices": [
            {"message": {"role": "assistant", "content": c}} for c in contents
        ]
    }


def test_message_to_dict_round_trip():
    message = Message(role="user", content="hello")
    assert Message(**message.to_dict()) == message


def test_error_messages_carry_prefixes():
    assert str(ApiError("x")).startswith("API error: ")
    assert str(ParseError("x")).startswith("Parse error: ")
    assert str(RequestFailed(OSError("x"))).startswith("Request failed: ")


@pytest.mark.asyncio
async def test_returns_first_choice_and_sends_request():
    with respx.mock:
        route = respx.post(URL).mock(
            return_value=httpx.Response(200, json=_reply("first", "second"))
        )
        result = await ask_llm_with_messages(CONFIG, MESSAGES)
    assert result == "first"
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer placeholder"
    assert json.loads(request.content) == {
        "model": "test-model",
        "messages": [m.to_dict() for m in MESSAGES],
    }


@pytest.mark.asyncio
async def test_empty_choices_gives_default_text():
    with respx.mock:
        respx.post(URL).mock(return_value=httpx.Response(200, json={"choices": []}))
        result = await ask_llm_with_messages(CONFIG, MESSAGES)
    assert result == "No response content available."


@pytest.mark.asyncio
async def test_error_status_raises_api_error():
    with respx.mock:
        respx.post(URL).mock(return_value=httpx.Response(500, text="boom"))
        with pytest.raises(ApiError) as info:
            await ask_llm_with_messages(CONFIG, MESSAGES)
    assert str(info.value).startswith("API error: HTTP 500")
    assert str(info.value).endswith(": boom")


@pytest.mark.asyncio
async def test_invalid_json_raises_parse_error():
    with respx.mock:
        respx.post(URL).mock(return_value=httpx.Response(200, text="not json"))
        with pytest.raises(ParseError, match="Failed to parse API response"):
            await ask_llm_with_messages(CONFIG, MESSAGES)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"choices": "nope"},
        {"choices": [{}]},
        {"choices": [{"message": {"content": "no role"}}]},
        {"choices": [{"message": {"role": "assistant", "content": None}}]},
        [1, 2],
    ],
)
async def test_malformed_payload_raises_parse_error(payload):
    with respx.mock:
        respx.post(URL).mock(return_value=httpx.Response(200, json=payload))
        with pytest.raises(ParseError):
            await ask_llm_with_messages(CONFIG, MESSAGES)


@pytest.mark.asyncio
async def test_connection_failure_raises_request_failed():
    with respx.mock:
        respx.post(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(RequestFailed) as info:
            await ask_llm_with_messages(CONFIG, MESSAGES)
    assert isinstance(info.value, LlmError)
    assert isinstance(info.value.error, httpx.ConnectError)