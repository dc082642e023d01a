"""Terminal front end: read keys, send prompts to the agent, redraw."""

from __future__ import annotations

import argparse
import asyncio
import curses
import locale
import sys
from typing import Any

from tui_coder.agent import Agent
from tui_coder.app import App
from tui_coder.config import Config
from tui_coder.llm import LlmError
from tui_coder.ui import draw

CONFIG_PATH = "config.toml"
QUIT_COMMAND = "/quit"

_ENTER_KEYS = {"\n", "\r", curses.KEY_ENTER}
_BACKSPACE_KEYS = {"\x7f", "\b", curses.KEY_BACKSPACE}


def handle_key(app: App, key: str | int) -> str | None:
    """Apply a key press to the input line; return the submitted line on Enter."""
    if key in _ENTER_KEYS:
        submitted, app.user_input = app.user_input, ""
        return submitted
    if key in _BACKSPACE_KEYS:
        app.user_input = app.user_input[:-1]
    elif isinstance(key, str) and key.isprintable():
        app.user_input += key
    return None


async def run_app(screen: Any, app: App, agent: Agent, config: Config) -> None:
    """Run the interface until the user submits ``/quit``."""
    while True:
        draw(screen, app)
        try:
            key = screen.get_wch()
        except curses.error:
            continue
        submitted = handle_key(app, key)
        if submitted is None:
            continue
        if submitted.strip() == QUIT_COMMAND:
            return

        app.conversation.append(f"User: {submitted}")
        app.status_message = "Thinking..."
        draw(screen, app)

        try:
            response, tool_logs = await agent.run(config.llm, submitted)
        except LlmError as exc:
            app.conversation.append(f"Error: {exc}")
            app.status_message = "Error."
        else:
            for log in tool_logs:
                app.add_tool_log(log)
            app.conversation.append(f"Agent: {response}")
            app.status_message = "Done."


def _session(screen: Any, config: Config) -> Exception | None:
    curses.raw()
    curses.mousemask(curses.ALL_MOUSE_EVENTS)
    try:
        asyncio.run(run_app(screen, App(), Agent(), config))
    except (OSError, curses.error) as exc:
        return exc
    return None


def main(argv: list[str] | None = None) -> int:
    """Load ``config.toml`` from the working directory and start the interface."""
    parser = argparse.ArgumentParser(
        description="Terminal coding assistant driven by a chat completion API."
    )
    parser.parse_args(argv)

    try:
        config = Config.from_file(CONFIG_PATH)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    locale.setlocale(locale.LC_ALL, "")
    error = curses.wrapper(_session, config)
    if error is not None:
        print(repr(error))
    return 0


if __name__ == "__main__":
    sys.exit(main())