"""Tools the assistant can run and the loop that drives them from model replies."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path

from tui_coder.config import LlmConfig
from tui_coder.llm import Message, ask_llm_with_messages

MAX_ATTEMPTS = 8

SUPPORTED_LANGUAGES = "python, bash, rust"

_CARGO_MANIFEST = """[package]
name = "temp_code"
version = "0.1.0"
edition = "2021"

[dependencies]
"""

SYSTEM_PROMPT = """You are a helpful AI assistant with access to various tools. You MUST use tools to complete tasks - do not just describe what you would do.

AVAILABLE TOOLS:
1. READ_FILE <path> - Read the contents of a file
2. WRITE_FILE <path> <content> - Create or modify a file with the specified content
3. RUN_COMMAND <command> - Execute shell commands
4. LIST_FILES <path> - List files in a directory
5. CREATE_DIRECTORY <path> - Create directories
6. DELETE_FILE <path> - Delete files or directories
7. EXECUTE_CODE <language> <code> - Execute code in Python, Bash, or Rust

CRITICAL RULES:
- ALWAYS use tools to complete tasks, never just describe actions
- Use the exact format: TOOL: <tool_name> <parameters>
- For WRITE_FILE, separate path and content with a space
- For EXECUTE_CODE, specify language first, then code
- If a task requires multiple steps, use tools for each step
- Verify results by using READ_FILE or LIST_FILES after creating/modifying files
- If a tool fails, try a different approach or retry with corrected parameters
- Always check if files/directories exist before trying to read/delete them
- Use LIST_FILES to explore directory structure before operations

ERROR HANDLING:
- If READ_FILE fails, try LIST_FILES first to check if the file exists
- If WRITE_FILE fails, try CREATE_DIRECTORY for the parent directory first
- If RUN_COMMAND fails, try a simpler version of the command
- If EXECUTE_CODE fails, check the syntax and try again
- Always verify your work by reading back files or listing directories

EXAMPLES:
TOOL: READ_FILE /path/to/file.txt
TOOL: WRITE_FILE /path/to/file.txt This is the file content
TOOL: RUN_COMMAND ls -la
TOOL: LIST_FILES /path/to/directory
TOOL: CREATE_DIRECTORY /path/to/new/directory
TOOL: DELETE_FILE /path/to/file.txt
TOOL: EXECUTE_CODE python print("Hello World")

TASK COMPLETION STRATEGY:
1. Break complex tasks into steps
2. Use appropriate tools for each step
3. If a step fails, try alternative approaches
4. Verify results with READ_FILE or LIST_FILES
5. Continue until the task is fully completed
6. Provide a summary of what was accomplished

WORKFLOW FOR COMPLEX TASKS:
1. LIST_FILES to understand current directory structure
2. CREATE_DIRECTORY if needed
3. WRITE_FILE to create files
4. READ_FILE to verify file contents
5. RUN_COMMAND or EXECUTE_CODE to execute code
6. LIST_FILES again to confirm everything is in place

Remember: You have access to real tools - USE THEM to actually complete tasks, don't just describe what you would do. If something fails, try a different approach!"""


def _run(args: list[str], cwd: str | None = None) -> str:
    """Run a process; return its stdout, or its stderr prefixed with ``Error:``."""
    result = subprocess.run(
        args, cwd=cwd, stdin=subprocess.DEVNULL, capture_output=True, check=False
    )
    if result.returncode == 0:
        return result.stdout.decode("utf-8", errors="replace")
    return "Error: " + result.stderr.decode("utf-8", errors="replace")


class Tool(ABC):
    """An action the model may request. ``execute`` raises ``OSError`` on failure."""

    @abstractmethod
    def execute(self) -> str:
        """Perform the action and return its textual result."""

    @abstractmethod
    def describe(self) -> str:
        """Short description used in the tool log."""


@dataclass(frozen=True)
class ReadFile(Tool):
    path: str

    def execute(self) -> str:
        try:
            return Path(self.path).read_bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise OSError("stream did not contain valid UTF-8") from exc

    def describe(self) -> str:
        return f"READ_FILE {self.path}"


@dataclass(frozen=True)
class WriteFile(Tool):
    path: str
    content: str

    def execute(self) -> str:
        target = Path(self.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.content.encode("utf-8"))
        return f"File '{self.path}' written successfully."

    def describe(self) -> str:
        return f"WRITE_FILE {self.path}"


@dataclass(frozen=True)
class RunCommand(Tool):
    command: str

    def execute(self) -> str:
        return _run(["sh", "-c", self.command])

    def describe(self) -> str:
        return f"RUN_COMMAND {self.command}"


@dataclass(frozen=True)
class ListFiles(Tool):
    path: str

    def execute(self) -> str:
        with os.scandir(self.path) as entries:
            names = [
                ("[DIR] " if entry.is_dir(follow_symlinks=False) else "") + entry.name
                for entry in entries
            ]
        return "\n".join(names)

    def describe(self) -> str:
        return f"LIST_FILES {self.path}"


@dataclass(frozen=True)
class CreateDirectory(Tool):
    path: str

    def execute(self) -> str:
        Path(self.path).mkdir(parents=True, exist_ok=True)
        return f"Directory '{self.path}' created successfully."

    def describe(self) -> str:
        return f"CREATE_DIRECTORY {self.path}"


@dataclass(frozen=True)
class DeleteFile(Tool):
    path: str

    def execute(self) -> str:
        target = Path(self.path)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        return f"'{self.path}' deleted successfully."

    def describe(self) -> str:
        return f"DELETE_FILE {self.path}"


@dataclass(frozen=True)
class ExecuteCode(Tool):
    language: str
    code: str

    def execute(self) -> str:
        match self.language.lower():
            case "python" | "py":
                return self._run_python()
            case "bash" | "sh":
                return _run(["bash", "-c", self.code])
            case "rust":
                return self._run_rust()
            case _:
                return (
                    f"Unsupported language: {self.language}. "
                    f"Supported: {SUPPORTED_LANGUAGES}"
                )

    def _run_python(self) -> str:
        fd, name = tempfile.mkstemp(prefix="temp_code_", suffix=".py")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(self.code.encode("utf-8"))
            return _run(["python3", name])
        finally:
            with suppress(OSError):
                os.remove(name)

    def _run_rust(self) -> str:
        project = Path(tempfile.mkdtemp(prefix="rust_code_"))
        try:
            (project / "Cargo.toml").write_text(_CARGO_MANIFEST, encoding="utf-8")
            (project / "src").mkdir(parents=True, exist_ok=True)
            (project / "src" / "main.rs").write_bytes(self.code.encode("utf-8"))
            return _run(["cargo", "run"], cwd=str(project))
        finally:
            shutil.rmtree(project, ignore_errors=True)

    def describe(self) -> str:
        return f"EXECUTE_CODE {self.language}"


def _split_first_space(params: str) -> tuple[str, str] | None:
    head, sep, tail = params.partition(" ")
    return (head, tail) if sep else None


def _build_tool(name: str, params: str) -> Tool | None:
    match name:
        case "READ_FILE":
            return ReadFile(params)
        case "WRITE_FILE":
            split = _split_first_space(params)
            return WriteFile(*split) if split else None
        case "RUN_COMMAND":
            return RunCommand(params)
        case "LIST_FILES":
            return ListFiles(params)
        case "CREATE_DIRECTORY":
            return CreateDirectory(params)
        case "DELETE_FILE":
            return DeleteFile(params)
        case "EXECUTE_CODE":
            split = _split_first_space(params)
            return ExecuteCode(*split) if split else None
        case _:
            return None


def parse_tool_call(response: str) -> Tool | None:
    """Find the first ``TOOL: <name> <params>`` line in a reply and build its tool.

    Lines whose tool name has no parameters are skipped; the first line that
    has both decides the result, which is ``None`` for an unknown tool.
    """
    for raw_line in response.split("\n"):
        line = raw_line.removesuffix("\r")
        if not line.startswith("TOOL:"):
            continue
        parts = line[6:].strip().split(" ", 1)
        if len(parts) >= 2:
            return _build_tool(parts[0], parts[1])
    return None


@dataclass
class Agent:
    """Keeps the conversation and lets the model call tools until it answers."""

    messages: list[Message] = field(default_factory=list)

    async def run(self, config: LlmConfig, user_prompt: str) -> tuple[str, list[str]]:
        """Handle one user prompt; return the final reply and the tool log lines.

        Errors from the model API propagate as ``LlmError``.
        """
        if not self.messages:
            self.messages.append(Message(role="system", content=SYSTEM_PROMPT))
        self.messages.append(Message(role="user", content=user_prompt))

        logs: list[str] = []
        attempts = 0
        while True:
            attempts += 1
            response = await ask_llm_with_messages(config, self.messages)
            tool = parse_tool_call(response)

            if tool is None:
                self.messages.append(Message(role="assistant", content=response))
                if attempts > 1:
                    logs.append(f"✅ Task completed after {attempts} attempts")
                return response, logs

            logs.append(f"🔧 Attempt {attempts}: Executing {tool.describe()}")
            try:
                result = tool.execute()
            except OSError as exc:
                logs.append(f"❌ Error: {exc}")
                result = (
                    f"Tool failed: {exc}. Please try a different approach "
                    "or check if the path/command is correct."
                )
            else:
                logs.append(f"✅ Success: {result}")

            self.messages.append(Message(role="assistant", content=response))
            self.messages.append(Message(role="user", content=f"Tool result: {result}"))

            if attempts >= MAX_ATTEMPTS:
                final = await ask_llm_with_messages(config, self.messages)
                self.messages.append(Message(role="assistant", content=final))
                logs.append(f"⚠️  Reached maximum attempts ({MAX_ATTEMPTS})")
                return final, logs