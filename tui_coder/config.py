"""Loading of the assistant's configuration from a TOML file."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any


def _require_str(table: Mapping[str, Any], key: str, section: str) -> str:
    if key not in table:
        raise ValueError(f"missing field `{key}` in [{section}]")
    value = table[key]
    if not isinstance(value, str):
        raise ValueError(
            f"invalid type for `{section}.{key}`: expected a string, "
            f"got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class LlmConfig:
    """Connection settings for an OpenAI-compatible chat completion API."""

    api_key: str
    api_base_url: str
    model_name: str

    @classmethod
    def _from_mapping(cls, table: Any) -> "LlmConfig":
        if not isinstance(table, Mapping):
            raise ValueError("invalid type for `llm`: expected a table")
        values = {field.name: _require_str(table, field.name, "llm") for field in fields(cls)}
        return cls(**values)


@dataclass(frozen=True)
class Config:
    """Top-level configuration; holds the ``[llm]`` section."""

    llm: LlmConfig

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Read and validate a TOML configuration file.

        Raises ``OSError`` if the file cannot be read and ``ValueError`` if
        its contents are not valid TOML or lack required fields.
        """
        contents = Path(path).read_text(encoding="utf-8")
        data = tomllib.loads(contents)
        if "llm" not in data:
            raise ValueError("missing field `llm`")
        return cls(llm=LlmConfig._from_mapping(data["llm"]))