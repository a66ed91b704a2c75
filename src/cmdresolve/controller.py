"""
Entry point for running user-defined command templates as tasks.
"""

import asyncio
import logging

from cmdresolve.core.types import PickStateMap
from cmdresolve.execution.collaborators import (
    CommandRunner,
    Interaction,
    StateStore,
    TargetProvider,
    TaskRunner,
)
from cmdresolve.execution.context import ResolutionContext
from cmdresolve.execution.keywords import build_keyword_table
from cmdresolve.execution.resolution import Resolver
from cmdresolve.models import UserCommandsSettings

logger = logging.getLogger(__name__)

PICK_STATE_KEY = "cmdresolve.pickStateMap"


class UserCommandsController:
    """
    Resolves a command template and hands the result to a task runner.

    Every call to ``run_custom_task`` builds a fresh resolver and context.
    The pick-state map is the only state carried between calls; it is
    read from the state store before resolution and written back after
    it, whether or not the run succeeded.

    Params:
        settings: Aliases and global commands; may be replaced between runs
        targets: Source of the selected build, run and test targets
        runner: Executes aliased commands during resolution
        interaction: Prompts for extension directives and shows errors
        task_runner: Runs the final command
        state_store: Persists the pick-state map
    """

    def __init__(
        self,
        settings: UserCommandsSettings,
        targets: TargetProvider,
        runner: CommandRunner,
        interaction: Interaction,
        task_runner: TaskRunner,
        state_store: StateStore,
    ):
        self.settings = settings
        self._targets = targets
        self._runner = runner
        self._interaction = interaction
        self._task_runner = task_runner
        self._state_store = state_store

    def create_resolver(self) -> Resolver:
        return Resolver(
            keywords=build_keyword_table(self._targets, self.settings),
            commands=self.settings.shell_commands,
            runner=self._runner,
            interaction=self._interaction,
            max_alias_depth=self.settings.max_alias_depth,
        )

    async def run_custom_task(
        self, command: str, cancel_event: asyncio.Event | None = None
    ) -> str | None:
        """
        Resolve ``command`` and run it as a task.

        Failures are logged and reported through the interaction
        collaborator instead of being raised. ``cancel_event`` is only
        forwarded to the task runner; prompts and aliased commands started
        during resolution always run to completion.

        Params:
            command: Template to resolve
            cancel_event: Cancellation signal for the task itself

        Returns:
            The resolved command, or ``None`` if resolution or task start failed
        """
        pick_state: PickStateMap = self._state_store.get(PICK_STATE_KEY, {})
        context = ResolutionContext(pick_state=pick_state)
        resolver = self.create_resolver()
        try:
            resolved = resolver.resolve_keywords(command)
            logger.info("Running %s", resolved)
            resolved = await resolver.resolve_extension_commands(resolved, context)
            resolved = await resolver.resolve_commands(resolved, context)
            await self._task_runner.run_task(
                resolved,
                resolved,
                self.settings.clear_terminal_before_action,
                cancel_event,
            )
            return resolved
        except Exception as error:
            logger.exception("Custom task '%s' failed", command)
            self._interaction.show_error(f"Error running custom task: {error}")
            return None
        finally:
            self._state_store.update(PICK_STATE_KEY, context.pick_state)
