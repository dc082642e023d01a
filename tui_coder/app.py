"""State shown by the terminal interface."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class App:
    """Everything the interface draws: input, conversation, logs and status."""

    user_input: str = ""
    conversation: list[str] = field(default_factory=list)
    status_message: str = "Type in /quit to exit"
    tool_logs: list[str] = field(default_factory=list)
    is_executing_tool: bool = False
    current_tool: str = ""

    def add_tool_log(self, log: str) -> None:
        self.tool_logs.append(log)