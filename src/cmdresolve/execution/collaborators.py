"""
External collaborators consumed by the resolvers and the orchestrator.

The engine never talks to a shell, a widget toolkit or a settings store
directly. Everything it needs from the host is described here as a
``Protocol``; a host supplies concrete implementations. A shell-based
command runner and two key-value stores are provided for hosts that do
not bring their own.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from attrs import frozen

from cmdresolve.core.types import TargetRole
from cmdresolve.exceptions import CommandExecutionError
from cmdresolve.models import TargetState

if TYPE_CHECKING:
    from cmdresolve.execution.extensions import PickItem, TreePickSession

logger = logging.getLogger(__name__)


@frozen
class CommandResult:
    stdout: str
    stderr: str = ""
    returncode: int = 0


class CommandRunner(Protocol):
    """Runs a fully resolved command and captures its output."""

    async def run(self, command: str) -> CommandResult: ...


class Interaction(Protocol):
    """
    Interactive collaborator behind the extension directives.

    Every prompt returns ``None`` when the user dismisses it without a choice.
    """

    async def pick(self, items: list["PickItem"]) -> "PickItem | None": ...

    async def pick_many(self, items: list["PickItem"]) -> list["PickItem"] | None: ...

    async def pick_tree(self, session: "TreePickSession") -> list[str] | None: ...

    async def input_box(self, default: str) -> str | None: ...

    def show_error(self, message: str) -> None: ...


class StateStore(Protocol):
    """Key-value store surviving across invocations."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def update(self, key: str, value: Any) -> None: ...


class TargetProvider(Protocol):
    """Read access to the target selected for each role."""

    def get_selected_target(self, role: TargetRole) -> TargetState: ...


class TaskRunner(Protocol):
    """Executes the final resolved command as a task."""

    async def run_task(
        self,
        name: str,
        command: str,
        clear_terminal: bool,
        cancel_event: asyncio.Event | None = None,
    ) -> None: ...


class ShellCommandRunner:
    """Runs commands through the system shell with ``asyncio`` subprocesses."""

    def __init__(self, cwd: str | Path | None = None, encoding: str = "utf-8"):
        self._cwd = str(cwd) if cwd is not None else None
        self._encoding = encoding

    async def run(self, command: str) -> CommandResult:
        """
        Run ``command`` and capture standard output and standard error.

        Params:
            command: Shell command line with every placeholder resolved

        Returns:
            Captured output of a successful run

        Raises:
            CommandExecutionError: If the process exits with a non-zero status
        """
        logger.debug("Running shell command: %s", command)
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=self._cwd,
        )
        stdout_bytes, stderr_bytes = await proc.communicate()
        stdout = (stdout_bytes or b"").decode(self._encoding, errors="replace")
        stderr = (stderr_bytes or b"").decode(self._encoding, errors="replace")
        if proc.returncode != 0:
            raise CommandExecutionError(command, proc.returncode, stderr)
        return CommandResult(stdout=stdout, stderr=stderr, returncode=proc.returncode)


class MemoryStateStore:
    """In-process key-value store; state lives as long as the instance."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self._values[key] = value


class JsonFileStateStore:
    """
    Key-value store persisted as a single JSON document.

    The file is read lazily on first access and rewritten in full on
    every ``update``. Each rewrite goes to a sibling ``.tmp`` file that
    atomically replaces the document. A missing file reads as an empty
    store.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._values: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._values is None:
            if self._path.exists():
                self._values = json.loads(self._path.read_text(encoding="utf-8"))
            else:
                self._values = {}
        return self._values

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def update(self, key: str, value: Any) -> None:
        values = self._load()
        values[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temporary = self._path.with_suffix(self._path.suffix + ".tmp")
        temporary.write_text(json.dumps(values, indent=2), encoding="utf-8")
        temporary.replace(self._path)
