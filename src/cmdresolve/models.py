"""
Configuration and target state models.

These pydantic models describe the externally supplied state the
resolvers read: the configured command aliases, the global executable
and format commands, and the target selected for each role.
"""

import json
from pathlib import Path

from pydantic import BaseModel, Field


class CommandAlias(BaseModel):
    """
    A named command template that ``<name>`` placeholders refer to.

    Params:
        name: Name looked up by exact match; the first alias with a name wins
        command: Template expanded and executed when the alias is referenced
        memoized: Reuse the first captured output for the rest of one run
    """

    name: str
    command: str
    memoized: bool = False


class TargetState(BaseModel):
    """Selected target for one role together with its arguments."""

    build_path: str
    run_args: list[str] = Field(default_factory=list)
    config_args: list[str] = Field(default_factory=list)
    bazel_args: list[str] = Field(default_factory=list)
    env_vars: dict[str, str] = Field(default_factory=dict)

    def env_var_tokens(self) -> list[str]:
        """Environment variables rendered as ``KEY=VALUE`` tokens."""
        return [f"{key}={value}" for key, value in self.env_vars.items()]


class UserCommandsSettings(BaseModel):
    """Global settings used by keyword resolution and the orchestrator."""

    executable_command: str = ""
    format_command: str = ""
    shell_commands: list[CommandAlias] = Field(default_factory=list)
    clear_terminal_before_action: bool = False
    max_alias_depth: int = Field(default=32, ge=1)

    @classmethod
    def from_file(cls, path: str | Path) -> "UserCommandsSettings":
        """
        Load settings from a JSON document.

        Params:
            path: Location of the JSON settings file

        Returns:
            Validated settings

        Raises:
            pydantic.ValidationError: If the document does not match the model
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)
