# tui_coder

`tui_coder` is a terminal chat assistant for coding. It talks to any chat-completions
API that follows the OpenAI format. The model can work on your machine through a small
set of tools:

- `READ_FILE <path>`: read a UTF-8 text file
- `WRITE_FILE <path> <content>`: create or overwrite a file, creating any missing parent directories
- `RUN_COMMAND <command>`: run a shell command with `sh -c`
- `LIST_FILES <path>`: list a directory; subdirectories are marked `[DIR] `
- `CREATE_DIRECTORY <path>`: create a directory and any missing parents
- `DELETE_FILE <path>`: delete a file, or a whole directory tree
- `EXECUTE_CODE <language> <code>`: run a snippet of Python (`python`/`py`, run with
  `python3`), Bash (`bash`/`sh`) or Rust (`rust`, built and run with `cargo run` in a
  temporary project)

The model calls a tool by writing a line of the form `TOOL: <NAME> <parameters>`; only
the first such line of a reply is used. The agent runs the tool and sends the result back
to the model as `Tool result: ...`. A command that exits with a non-zero status gives
`Error: ` followed by its standard error. This repeats until the model replies without a
tool call. After eight tool calls the agent asks the model once more and returns that
reply.

**Warning:** the tools act on your real filesystem and shell. Run the assistant only in a
directory where you can accept that.

## Installation

```
pip install .
```

The interface uses the standard `curses` module, so it needs a POSIX system.

## Configuration

The program reads `config.toml` from the current directory:

```toml
[llm]
api_key = "placeholder"
api_base_url = "https://api.example.com/v1"
model_name = "your-model-name"
```

All three fields are required strings. Requests go to `<api_base_url>/chat/completions`,
with the key sent as a bearer token. If the file is missing or invalid, the command prints
the error and exits with status 1.

## Usage

```
tui-coder
```

The screen has four panels: the conversation, the tool log, your input line and a status
line. Type a request and press Enter. Backspace deletes the last character. To leave,
type `/quit` and press Enter. Errors from the API appear in the conversation as
`Error: ...`.

## Using it as a library

```python
import asyncio

from tui_coder.agent import Agent
from tui_coder.config import Config

config = Config.from_file("config.toml")
agent = Agent()
response, tool_logs = asyncio.run(agent.run(config.llm, "List the files in the current directory"))
print("\n".join(tool_logs))
print(response)
```

An `Agent` keeps the whole conversation between calls to `run`, starting with a system
prompt that describes the tools. Failures of the API raise `tui_coder.llm.LlmError`,
whose subclasses are `RequestFailed`, `ApiError` and `ParseError`. A tool that fails with
an `OSError` does not stop the run: the error goes into the tool log and back to the model.

Other pieces can be used on their own:

- `tui_coder.agent.parse_tool_call(text)` returns the tool named in a reply, or `None`.
  Each tool (`ReadFile`, `WriteFile`, `RunCommand`, `ListFiles`, `CreateDirectory`,
  `DeleteFile`, `ExecuteCode`) has `execute()` and `describe()`.
- `tui_coder.llm.ask_llm_with_messages(config, messages)` sends a list of `Message`
  objects and returns the content of the first choice.
- `tui_coder.ui.wrap_text(text, max_width)` wraps text by words.

## Limitations

- The conversation and tool log panels always show their latest lines; there are no keys
  to scroll back through them.
- The screen is not updated while the agent is working; it shows `Thinking...` until the
  whole run has finished.
- The command takes no options, and the configuration is always read from `config.toml`
  in the current directory.
- The conversation is kept only in memory and is lost when the program exits.

## Development

```
pip install -e ".[test]"
pytest
```