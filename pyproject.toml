[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tui_coder"
version = "0.1.0"
description = "Terminal coding assistant that lets a chat model read, write and run code through simple tool calls"
requires-python = ">=3.11"
keywords = ["llm", "agent", "terminal", "curses", "coding-assistant", "openai-compatible"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "httpx>=0.24",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[project.scripts]
tui-coder = "tui_coder.main:main"

[tool.hatch.build.targets.wheel]
packages = ["tui_coder"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
