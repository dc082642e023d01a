import curses

import httpx
import pytest
import respx

from tui_coder.agent import Agent
from tui_coder.app import App
from tui_coder.config import Config, LlmConfig
from tui_coder.main import handle_key, main, run_app

BASE_URL = "http://llm.example.com/v1"


class ScriptedScreen:
    def __init__(self, keys, height=24, width=80):
        self.keys = list(keys)
        self.height = height
        self.width = width
        self.draws = 0

    def getmaxyx(self):
        return self.height, self.width

    def erase(self):
        pass

    def addnstr(self, y, x, text, n, attr=0):
        pass

    def refresh(self):
        self.draws += 1

    def get_wch(self):
        if not self.keys:
            raise RuntimeError("no more keys")
        return self.keys.pop(0)


def _config():
    return Config(llm=LlmConfig(api_key="placeholder", api_base_url=BASE_URL,
                                model_name="model"))


def _keys(text):
    return list(text)


def test_handle_key_typing_and_backspace():
    app = App()
    for key in "abc":
        assert handle_key(app, key) is None
    assert app.user_input == "abc"
    handle_key(app, "\x7f")
    assert app.user_input == "ab"
    handle_key(app, curses.KEY_BACKSPACE)
    assert app.user_input == "a"


def test_handle_key_enter_drains_input():
    app = App(user_input="hello")
    assert handle_key(app, "\n") == "hello"
    assert app.user_input == ""
    app.user_input = "again"
    assert handle_key(app, curses.KEY_ENTER) == "again"
    assert app.user_input == ""


def test_handle_key_ignores_other_keys():
    app = App(user_input="x")
    assert handle_key(app, curses.KEY_LEFT) is None
    assert handle_key(app, "\t") is None
    assert app.user_input == "x"


@pytest.mark.asyncio
async def test_run_app_quit_immediately():
    app = App()
    screen = ScriptedScreen(_keys("  /quit \n"))
    await run_app(screen, app, Agent(), _config())
    assert app.conversation == []
    assert screen.keys == []


@pytest.mark.asyncio
async def test_run_app_sends_prompt_and_shows_reply():
    app = App()
    agent = Agent()
    screen = ScriptedScreen(_keys("hi\n/quit\n"))
    payload = {"choices": [{"message": {"role": "assistant", "content": "Hello"}}]}
    with respx.mock:
        route = respx.post(f"{BASE_URL}/chat/completions").mock(
            return_value=httpx.Response(200, json=payload)
        )
        await run_app(screen, app, agent, _config())
    assert route.called
    assert app.conversation == ["User: hi", "Agent: Hello"]
    assert app.status_message == "Done."
    assert app.tool_logs == []
    assert agent.messages[-1].content == "Hello"


@pytest.mark.asyncio
async def test_run_app_reports_api_error():
    app = App()
    screen = ScriptedScreen(_keys("hi\n/quit\n"))
    with respx.mock:
        respx.post(f"{BASE_URL}/chat/completions").mock(
            return_value=httpx.Response(500, text="boom")
        )
        await run_app(screen, app, Agent(), _config())
    assert app.conversation[0] == "User: hi"
    assert app.conversation[1].startswith("Error: API error: HTTP 500")
    assert app.conversation[1].endswith("boom")
    assert app.status_message == "Error."


def test_main_without_config_fails(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 1
    assert "config.toml" in capsys.readouterr().err


def test_main_with_invalid_config_fails(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.toml").write_text("[llm]\napi_key = \"placeholder\"\n")
    assert main([]) == 1
    assert "api_base_url" in capsys.readouterr().err