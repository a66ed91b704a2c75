"""
Keyword table for ``${name}`` placeholders.

Keywords are read-only views of the currently selected build, run and
test targets and of the global settings. The table maps each fully
qualified keyword name to a zero-argument provider so values are read
at substitution time, never cached.
"""

import logging
import re
from collections.abc import Callable, Mapping
from enum import Enum

from cmdresolve.core.types import TargetRole
from cmdresolve.execution.collaborators import TargetProvider
from cmdresolve.models import TargetState, UserCommandsSettings
from cmdresolve.parsing import KeywordToken, TokenKind, tokenize

logger = logging.getLogger(__name__)

KEYWORD_PREFIX = "cmdresolve"

# Every long flag gets forwarded to the test binary
TEST_ARG_FLAG_PATTERN = re.compile(r"(--\S+)")

KeywordTable = Mapping[str, Callable[[], str]]


class Keyword(Enum):
    """Fixed set of keywords, valued by their unqualified name."""

    EXECUTABLE = "executable"
    RUN_TARGET = "runTarget"
    BUILD_TARGET = "buildTarget"
    TEST_TARGET = "testTarget"
    RUN_ARGS = "runArgs"
    TEST_ARGS = "testArgs"
    BUILD_CONFIGS = "buildConfigs"
    RUN_CONFIGS = "runConfigs"
    TEST_CONFIGS = "testConfigs"
    BAZEL_BUILD_ARGS = "bazelBuildArgs"
    BAZEL_RUN_ARGS = "bazelRunArgs"
    BAZEL_TEST_ARGS = "bazelTestArgs"
    BUILD_ENV_VARS = "buildEnvVars"
    RUN_ENV_VARS = "runEnvVars"
    TEST_ENV_VARS = "testEnvVars"
    FORMAT_COMMAND = "formatCommand"

    @property
    def qualified_name(self) -> str:
        return f"{KEYWORD_PREFIX}.{self.value}"


def format_test_args(test_args: str) -> str:
    """
    Prefix every ``--flag`` token with ``--test_arg``.

    ``-k smoke --maxfail=1`` becomes ``-k smoke --test_arg --maxfail=1``.
    """
    return TEST_ARG_FLAG_PATTERN.sub(r"--test_arg \1", test_args)


def build_keyword_table(
    targets: TargetProvider, settings: UserCommandsSettings
) -> dict[str, Callable[[], str]]:
    """
    Build the provider table for every keyword.

    Target providers look up the selected target when called, so a role
    without a selection only fails when one of its keywords is used.

    Params:
        targets: Source of the selected build, run and test targets
        settings: Global settings holding the executable and format commands

    Returns:
        Fully qualified keyword name -> value provider
    """

    def target_value(
        role: TargetRole, read: Callable[[TargetState], str]
    ) -> Callable[[], str]:
        return lambda: read(targets.get_selected_target(role))

    def joined(attribute: str) -> Callable[[TargetState], str]:
        return lambda target: " ".join(getattr(target, attribute))

    def env_vars(target: TargetState) -> str:
        return " ".join(target.env_var_tokens())

    providers: dict[Keyword, Callable[[], str]] = {
        Keyword.RUN_TARGET: target_value(TargetRole.RUN, lambda t: t.build_path),
        Keyword.BUILD_TARGET: target_value(TargetRole.BUILD, lambda t: t.build_path),
        Keyword.TEST_TARGET: target_value(TargetRole.TEST, lambda t: t.build_path),
        Keyword.RUN_ARGS: target_value(TargetRole.RUN, joined("run_args")),
        Keyword.TEST_ARGS: target_value(
            TargetRole.TEST, lambda t: format_test_args(" ".join(t.run_args))
        ),
        Keyword.BUILD_CONFIGS: target_value(TargetRole.BUILD, joined("config_args")),
        Keyword.RUN_CONFIGS: target_value(TargetRole.RUN, joined("config_args")),
        Keyword.TEST_CONFIGS: target_value(TargetRole.TEST, joined("config_args")),
        Keyword.BAZEL_BUILD_ARGS: target_value(TargetRole.BUILD, joined("bazel_args")),
        Keyword.BAZEL_RUN_ARGS: target_value(TargetRole.RUN, joined("bazel_args")),
        Keyword.BAZEL_TEST_ARGS: target_value(TargetRole.TEST, joined("bazel_args")),
        Keyword.BUILD_ENV_VARS: target_value(TargetRole.BUILD, env_vars),
        Keyword.RUN_ENV_VARS: target_value(TargetRole.RUN, env_vars),
        Keyword.TEST_ENV_VARS: target_value(TargetRole.TEST, env_vars),
        Keyword.EXECUTABLE: lambda: settings.executable_command,
        Keyword.FORMAT_COMMAND: lambda: settings.format_command,
    }
    return {keyword.qualified_name: provider for keyword, provider in providers.items()}


def substitute_keywords(template: str, table: KeywordTable) -> str:
    """
    Replace every known ``${name}`` placeholder with its current value.

    Unknown names keep their literal placeholder text. Errors raised by a
    provider propagate unchanged.

    Params:
        template: Template text
        table: Keyword name -> value provider

    Returns:
        Template with known keywords substituted
    """
    parts = []
    for token in tokenize(template, {TokenKind.KEYWORD}):
        if isinstance(token, KeywordToken):
            provider = table.get(token.name)
            if provider is None:
                logger.debug("Unknown keyword '%s' left unresolved", token.name)
                parts.append(token.raw)
                continue
            parts.append(provider())
        else:
            parts.append(token.raw)
    return "".join(parts)
