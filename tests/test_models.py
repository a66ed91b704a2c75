"""
Tests for configuration and target state models.
"""

import json

import pytest
from pydantic import ValidationError

from cmdresolve.models import CommandAlias, TargetState, UserCommandsSettings


class TestUserCommandsSettings:
    """Test user command settings validation and loading."""

    def test_defaults(self):
        """Test that settings default to empty commands and the standard alias depth."""
        settings = UserCommandsSettings()
        assert settings.executable_command == ""
        assert settings.shell_commands == []
        assert settings.clear_terminal_before_action is False
        assert settings.max_alias_depth == 32

    def test_from_file(self, tmp_path):
        """Test loading settings from a JSON file."""
        path = tmp_path / "settings.json"
        path.write_text(
            json.dumps(
                {
                    "executable_command": "bazel",
                    "shell_commands": [
                        {"name": "tests", "command": "list", "memoized": True},
                        {"name": "branch", "command": "git branch"},
                    ],
                }
            )
        )

        settings = UserCommandsSettings.from_file(path)

        assert settings.executable_command == "bazel"
        assert settings.shell_commands == [
            CommandAlias(name="tests", command="list", memoized=True),
            CommandAlias(name="branch", command="git branch", memoized=False),
        ]

    def test_alias_requires_command(self):
        """Test that an alias without a command is rejected."""
        with pytest.raises(ValidationError):
            UserCommandsSettings.model_validate({"shell_commands": [{"name": "x"}]})

    def test_depth_must_be_positive(self):
        """Test that a non-positive alias depth is rejected."""
        with pytest.raises(ValidationError):
            UserCommandsSettings(max_alias_depth=0)


class TestTargetState:
    """Test target state helpers."""

    def test_env_var_tokens(self):
        """Test rendering environment variables as NAME=value tokens."""
        target = TargetState(build_path="//a", env_vars={"A": "1", "B": "two"})
        assert target.env_var_tokens() == ["A=1", "B=two"]

    def test_argument_lists_default_empty(self):
        """Test that argument lists default to empty."""
        target = TargetState(build_path="//a")
        assert target.run_args == []
        assert target.config_args == []
        assert target.bazel_args == []
