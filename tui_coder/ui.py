"""Layout and drawing of the terminal interface."""

from __future__ import annotations

import curses
from dataclasses import dataclass
from functools import cache
from typing import Any, NamedTuple

from tui_coder.app import App

USER_PREFIX = "User: "
AGENT_PREFIX = "Agent: "
NO_TOOL_LOGS = "No tool executions yet..."

# Vertical split of the screen: conversation, tool logs, input, status.
_PERCENTAGES = (60, 20, 10, 10)

# style name -> (colour pair number, colour, bold)
_STYLES: dict[str, tuple[int, int, bool]] = {
    "user_label": (1, curses.COLOR_BLUE, True),
    "user": (1, curses.COLOR_BLUE, False),
    "agent_label": (2, curses.COLOR_GREEN, True),
    "agent": (2, curses.COLOR_GREEN, False),
    "body": (3, curses.COLOR_WHITE, False),
    "notice": (4, curses.COLOR_YELLOW, False),
}


class _Rect(NamedTuple):
    y: int
    x: int
    height: int
    width: int


@dataclass(frozen=True)
class StyledLine:
    """One screen line made of ``(text, style)`` spans."""

    spans: tuple[tuple[str, str], ...]

    @property
    def text(self) -> str:
        return "".join(text for text, _ in self.spans)


def wrap_text(text: str, max_width: int) -> list[str]:
    """Greedily wrap whitespace-separated words into lines of at most ``max_width``.

    A word longer than the width gets a line of its own; text with no words
    comes back unchanged as a single line.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        if len(current) + len(word) + 1 <= max_width:
            current = f"{current} {word}" if current else word
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines or [text]


def _labelled(content: str, prefix: str, style: str, max_width: int) -> list[StyledLine]:
    wrapped = wrap_text(content, max(max_width - len(prefix), 0))
    indent = " " * len(prefix)
    return [
        StyledLine(
            ((prefix, f"{style}_label"), (line, "body"))
            if index == 0
            else ((indent, style), (line, "body"))
        )
        for index, line in enumerate(wrapped)
    ]


def conversation_lines(conversation: list[str], max_width: int) -> list[StyledLine]:
    """Format conversation entries as wrapped, styled lines with a blank line after each."""
    result: list[StyledLine] = []
    for message in conversation:
        if message.startswith(USER_PREFIX):
            result.extend(
                _labelled(message[len(USER_PREFIX):], USER_PREFIX, "user", max_width)
            )
        elif message.startswith(AGENT_PREFIX):
            result.extend(
                _labelled(message[len(AGENT_PREFIX):], AGENT_PREFIX, "agent", max_width)
            )
        else:
            result.extend(
                StyledLine(((line, "notice"),)) for line in wrap_text(message, max_width)
            )
        result.append(StyledLine((("", "plain"),)))
    return result


def tool_logs_text(app: App) -> str:
    """The text of the tool log panel."""
    return "\n".join(app.tool_logs) if app.tool_logs else NO_TOOL_LOGS


def tool_logs_title(app: App) -> str:
    """The title of the tool log panel."""
    if app.is_executing_tool:
        return f"Tool Logs - Currently executing: {app.current_tool}"
    return "Tool Logs"


def layout(height: int, width: int) -> list[_Rect]:
    """Split the screen, inside a one-cell margin, into the four panels."""
    inner_height = max(height - 2, 0)
    inner_width = max(width - 2, 0)
    rects: list[_Rect] = []
    start = 0
    cumulative = 0
    for percentage in _PERCENTAGES:
        cumulative += percentage
        end = (inner_height * cumulative + 50) // 100
        rects.append(_Rect(1 + start, 1, end - start, inner_width))
        start = end
    return rects


def _text_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


@cache
def _colours_ready() -> bool:
    try:
        if not curses.has_colors():
            return False
        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        for pair, colour, _ in _STYLES.values():
            curses.init_pair(pair, colour, background)
    except curses.error:
        return False
    return True


def _attr(style: str) -> int:
    pair, _, bold = _STYLES.get(style, (0, 0, False))
    attr = curses.A_BOLD if bold else 0
    if pair and _colours_ready():
        try:
            attr |= curses.color_pair(pair)
        except curses.error:
            pass
    return attr


def _put(screen: Any, y: int, x: int, text: str, attr: int = 0) -> None:
    if not text:
        return
    try:
        screen.addnstr(y, x, text, len(text), attr)
    except curses.error:
        # Writing the bottom-right cell moves the cursor off-screen.
        pass


def _block(screen: Any, rect: _Rect, title: str) -> None:
    if rect.height < 2 or rect.width < 2:
        return
    right = rect.x + rect.width - 1
    bottom = rect.y + rect.height - 1
    horizontal = "─" * (rect.width - 2)
    _put(screen, rect.y, rect.x, "┌" + horizontal + "┐")
    for row in range(rect.y + 1, bottom):
        _put(screen, row, rect.x, "│")
        _put(screen, row, right, "│")
    _put(screen, bottom, rect.x, "└" + horizontal + "┘")
    _put(screen, rect.y, rect.x + 1, title[: rect.width - 2])


def _paragraph(screen: Any, rect: _Rect, lines: list[StyledLine]) -> None:
    inner_width = rect.width - 2
    for row, line in zip(range(rect.height - 2), lines):
        column = 0
        for text, style in line.spans:
            remaining = inner_width - column
            if remaining <= 0:
                break
            piece = text[:remaining]
            _put(screen, rect.y + 1 + row, rect.x + 1 + column, piece, _attr(style))
            column += len(piece)


def _scrollbar(screen: Any, rect: _Rect, content_length: int, position: int) -> None:
    if rect.height < 3 or rect.width < 1 or content_length == 0:
        return
    column = rect.x + rect.width - 1
    track = rect.height - 2
    thumb_len = max(1, track * track // (content_length + track))
    thumb_start = min(track - thumb_len, position * track // content_length)
    _put(screen, rect.y, column, "▲")
    for offset in range(track):
        inside = thumb_start <= offset < thumb_start + thumb_len
        _put(screen, rect.y + 1 + offset, column, "█" if inside else "║")
    _put(screen, rect.y + rect.height - 1, column, "▼")


def _plain(lines: list[str]) -> list[StyledLine]:
    return [StyledLine(((line, "plain"),)) for line in lines]


def draw(screen: Any, app: App) -> None:
    """Draw the whole interface for ``app`` on a curses window."""
    height, width = screen.getmaxyx()
    screen.erase()
    conversation_rect, logs_rect, input_rect, status_rect = layout(height, width)

    lines = conversation_lines(app.conversation, max(conversation_rect.width - 4, 0))
    scroll = max(len(lines) - conversation_rect.height, 0)
    _block(screen, conversation_rect, "Conversation")
    _paragraph(screen, conversation_rect, lines[scroll:])
    _scrollbar(screen, conversation_rect, len(lines), scroll)

    log_lines = _text_lines(tool_logs_text(app))
    log_scroll = max(len(log_lines) - logs_rect.height, 0)
    _block(screen, logs_rect, tool_logs_title(app))
    _paragraph(screen, logs_rect, _plain(log_lines[log_scroll:]))
    _scrollbar(screen, logs_rect, len(log_lines), log_scroll)

    _block(screen, input_rect, "Input")
    _paragraph(screen, input_rect, _plain(_text_lines(app.user_input)))

    _block(screen, status_rect, "Status")
    _paragraph(screen, status_rect, _plain(_text_lines(app.status_message)))

    screen.refresh()