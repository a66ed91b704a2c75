"""
Shared test fixtures and fakes for the cmdresolve test suite.
"""

import pytest

from cmdresolve.core.types import TargetRole
from cmdresolve.exceptions import CommandExecutionError, TargetNotSelectedError
from cmdresolve.execution import (
    CommandResult,
    MemoryStateStore,
    ResolutionContext,
    Resolver,
)
from cmdresolve.execution.keywords import build_keyword_table
from cmdresolve.models import CommandAlias, TargetState, UserCommandsSettings


class RecordingCommandRunner:
    """Returns canned stdout per command and records every command it runs.

    Commands without a canned output echo themselves back with a trailing
    newline, like ``echo`` would.
    """

    def __init__(self, outputs=None, failing=()):
        self.outputs = dict(outputs or {})
        self.failing = set(failing)
        self.calls = []

    async def run(self, command):
        self.calls.append(command)
        if command in self.failing:
            raise CommandExecutionError(command, 1, "boom")
        return CommandResult(stdout=self.outputs.get(command, f"{command}\n"))


class ScriptedInteraction:
    """Answers prompts from per-operation queues and records what was shown.

    ``tree_toggles`` holds, per tree pick, a list of widget selections that
    are fed to the session before the checked paths are accepted. Prompts
    named in ``failing`` record what they were shown and then raise
    ``failure``.
    """

    def __init__(
        self,
        picks=(),
        multi_picks=(),
        tree_toggles=(),
        inputs=(),
        failing=(),
        failure=None,
    ):
        self.failing = set(failing)
        self.failure = failure or RuntimeError("prompt closed unexpectedly")
        self.picks = list(picks)
        self.multi_picks = list(multi_picks)
        self.tree_toggles = list(tree_toggles)
        self.inputs = list(inputs)
        self.shown = []
        self.sessions = []
        self.errors = []

    async def pick(self, items):
        self.shown.append(("pick", [(item.label, item.picked) for item in items]))
        self._fail_if_scripted("pick")
        label = self.picks.pop(0) if self.picks else None
        return next((item for item in items if item.label == label), None)

    async def pick_many(self, items):
        self.shown.append(("pick_many", [(item.label, item.picked) for item in items]))
        self._fail_if_scripted("pick_many")
        labels = self.multi_picks.pop(0) if self.multi_picks else None
        if labels is None:
            return None
        return [item for item in items if item.label in labels]

    async def pick_tree(self, session):
        self.sessions.append(session)
        self.shown.append(
            ("pick_tree", [(item.label, item.picked) for item in session.items])
        )
        self._fail_if_scripted("pick_tree")
        toggles = self.tree_toggles.pop(0) if self.tree_toggles else None
        if toggles is None:
            return None
        for selection in toggles:
            session.apply_selection(selection)
        return session.selected_paths()

    async def input_box(self, default):
        self.shown.append(("input", default))
        self._fail_if_scripted("input_box")
        return self.inputs.pop(0) if self.inputs else None

    def _fail_if_scripted(self, prompt):
        if prompt in self.failing:
            raise self.failure

    def show_error(self, message):
        self.errors.append(message)


class FixedTargetProvider:
    """Serves a fixed target per role; roles without one raise."""

    def __init__(self, targets=None):
        self.targets = dict(targets or {})

    def get_selected_target(self, role):
        if role not in self.targets:
            raise TargetNotSelectedError(role.value)
        return self.targets[role]


class RecordingTaskRunner:
    """Records started tasks and optionally fails to start them."""

    def __init__(self, error=None):
        self.error = error
        self.tasks = []

    async def run_task(self, name, command, clear_terminal, cancel_event=None):
        self.tasks.append((name, command, clear_terminal, cancel_event))
        if self.error is not None:
            raise self.error


@pytest.fixture
def targets():
    return FixedTargetProvider(
        {
            TargetRole.BUILD: TargetState(
                build_path="//app:lib",
                config_args=["--config=opt"],
                bazel_args=["--jobs=8"],
                env_vars={"CC": "clang"},
            ),
            TargetRole.RUN: TargetState(
                build_path="//app:main",
                run_args=["--port", "8080"],
                config_args=["--config=dbg"],
                bazel_args=["--color=yes"],
                env_vars={"LOG": "debug", "MODE": "dev"},
            ),
            TargetRole.TEST: TargetState(
                build_path="//app:tests",
                run_args=["-k", "smoke", "--maxfail=1"],
                config_args=["--config=ci"],
                bazel_args=["--test_output=errors"],
                env_vars={"PYTHONHASHSEED": "0"},
            ),
        }
    )


@pytest.fixture
def settings():
    return UserCommandsSettings(
        executable_command="bazel",
        format_command="buildifier -r .",
        shell_commands=[
            CommandAlias(name="tests", command="list-tests", memoized=True),
            CommandAlias(name="branch", command="git branch --show-current"),
        ],
    )


@pytest.fixture
def runner():
    return RecordingCommandRunner()


@pytest.fixture
def interaction():
    return ScriptedInteraction()


@pytest.fixture
def task_runner():
    return RecordingTaskRunner()


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def context():
    return ResolutionContext()


@pytest.fixture
def make_resolver(targets, settings, runner, interaction):
    """Build a resolver over the shared fakes, optionally with other aliases."""

    def factory(commands=None, max_alias_depth=32):
        return Resolver(
            keywords=build_keyword_table(targets, settings),
            commands=settings.shell_commands if commands is None else commands,
            runner=runner,
            interaction=interaction,
            max_alias_depth=max_alias_depth,
        )

    return factory
