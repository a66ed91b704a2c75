"""
Recursive resolution of command templates.

A template is resolved in three stages, each a single left-to-right
pass over its own placeholder kind:

1. keywords ``${name}`` are substituted from live target and settings state,
2. extension directives ``[Op(args)]`` are evaluated interactively,
3. aliases ``<name>`` are expanded by running the aliased command.

Alias bodies and directive arguments are templates themselves, so the
stages re-enter each other: an alias body goes through all three stages
before it is executed, and directive arguments go through alias
expansion before they are shown to the user. Values produced by a stage
are inserted as literal text and are not rescanned by that stage.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence

from cmdresolve.core.types import PickStateRecord
from cmdresolve.exceptions import AliasRecursionError, CmdResolveError, TreeFlattenError
from cmdresolve.execution.collaborators import CommandRunner, Interaction
from cmdresolve.execution.context import ResolutionContext
from cmdresolve.execution.extensions import (
    ExtensionOperator,
    TreePickSession,
    build_pick_items,
    build_test_case_tree,
    flatten_test_case_tree,
)
from cmdresolve.execution.keywords import KeywordTable, substitute_keywords
from cmdresolve.models import CommandAlias
from cmdresolve.parsing import AliasToken, ExtensionToken, TokenKind, render, tokenize

logger = logging.getLogger(__name__)

DEFAULT_MAX_ALIAS_DEPTH = 32

ExtensionHandler = Callable[[str, str, ResolutionContext], Awaitable[str]]


class Resolver:
    """
    Evaluator for the three placeholder kinds.

    A resolver holds only its collaborators; everything that changes
    during a run lives on the ``ResolutionContext`` passed to each call.

    Params:
        keywords: Fully qualified keyword name -> value provider
        commands: Configured aliases, searched in order
        runner: Executes expanded alias commands
        interaction: Shows the prompts behind extension directives
        max_alias_depth: Deepest allowed chain of nested alias expansions
    """

    def __init__(
        self,
        keywords: KeywordTable,
        commands: Sequence[CommandAlias],
        runner: CommandRunner,
        interaction: Interaction,
        max_alias_depth: int = DEFAULT_MAX_ALIAS_DEPTH,
    ):
        self._keywords = keywords
        self._commands = list(commands)
        self._runner = runner
        self._interaction = interaction
        self._max_alias_depth = max_alias_depth
        self._extensions: dict[ExtensionOperator, ExtensionHandler] = {
            ExtensionOperator.PICK: self._pick,
            ExtensionOperator.MULTI_PICK: self._multi_pick,
            ExtensionOperator.TREE_PICK: self._tree_pick,
            ExtensionOperator.INPUT: self._input,
        }

    def find_command(self, name: str) -> CommandAlias | None:
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def resolve_keywords(self, template: str) -> str:
        """Substitute ``${name}`` placeholders; unknown names are left as written."""
        return substitute_keywords(template, self._keywords)

    async def resolve_command(self, command: str, context: ResolutionContext) -> str:
        """
        Fully expand a template into a plain command line.

        Params:
            command: Template to expand
            context: State of the current run

        Returns:
            ``command`` after keyword, extension and alias resolution
        """
        resolved = self.resolve_keywords(command)
        resolved = await self.resolve_extension_commands(resolved, context)
        return await self.resolve_commands(resolved, context)

    async def resolve_commands(self, template: str, context: ResolutionContext) -> str:
        """
        Expand every ``<name>`` placeholder, left to right.

        Unknown aliases expand to an empty string without running
        anything. A memoized alias runs at most once per context.

        The output inserted for an alias is final: it is not scanned again,
        so a ``<name>`` appearing in a command's stdout stays literal text
        in the result. Only the alias's own command template is resolved
        before it runs.

        Params:
            template: Template text
            context: State of the current run

        Returns:
            Template with every alias replaced by its command's output

        Raises:
            AliasRecursionError: If an alias refers back to itself or nests too deep
            CommandExecutionError: If an aliased command fails
        """
        parts = []
        for token in tokenize(template, {TokenKind.ALIAS}):
            if isinstance(token, AliasToken):
                parts.append(await self._expand_alias(token.name, context))
            else:
                parts.append(token.raw)
        return "".join(parts)

    async def _expand_alias(self, name: str, context: ResolutionContext) -> str:
        alias = self.find_command(name)
        if alias is None:
            logger.warning("Unknown command alias '%s' resolved to empty string", name)
            return ""

        if alias.memoized and alias.name in context.cache:
            logger.debug("Reusing memoized output of '%s'", alias.name)
            return context.cache[alias.name]

        if alias.name in context.alias_stack:
            raise AliasRecursionError([*context.alias_stack, alias.name])
        if len(context.alias_stack) >= self._max_alias_depth:
            raise AliasRecursionError(
                [*context.alias_stack, alias.name],
                reason=f"nesting deeper than {self._max_alias_depth} levels",
            )

        context.alias_stack.append(alias.name)
        try:
            command = await self.resolve_command(alias.command, context)
        finally:
            context.alias_stack.pop()

        logger.debug("Running alias '%s': %s", alias.name, command)
        result = await self._runner.run(command)
        if alias.memoized:
            context.cache[alias.name] = result.stdout
        return result.stdout

    async def resolve_extension_commands(
        self, template: str, context: ResolutionContext
    ) -> str:
        """
        Evaluate every ``[Op(args)]`` directive, left to right.

        Each directive's pick state is keyed by the output as it stands
        when the directive is reached: the resolved text before it
        followed by the unresolved text from the directive onwards.
        Unknown operators evaluate to an empty string.

        Params:
            template: Template text
            context: State of the current run

        Returns:
            Template with every directive replaced by the user's answer
        """
        tokens = tokenize(template, {TokenKind.EXTENSION})
        parts: list[str] = []
        for position, token in enumerate(tokens):
            if not isinstance(token, ExtensionToken):
                parts.append(token.raw)
                continue
            output_key = "".join(parts) + render(tokens[position:])
            operator = ExtensionOperator.lookup(token.operator)
            if operator is None:
                logger.warning(
                    "Unknown extension command '%s' resolved to empty string",
                    token.operator,
                )
                parts.append("")
                continue
            handler = self._extensions[operator]
            parts.append(await handler(token.args, output_key, context))
        return "".join(parts)

    async def _pick(
        self, args: str, output_key: str, context: ResolutionContext
    ) -> str:
        text = await self.resolve_commands(args, context)
        items = build_pick_items(text, lambda label: False)
        choice = await self._interaction.pick(items)
        return choice.label if choice is not None else ""

    async def _multi_pick(
        self, args: str, output_key: str, context: ResolutionContext
    ) -> str:
        state = context.pick_state.get(output_key, {})
        text = await self.resolve_commands(args, context)
        items = build_pick_items(text, lambda label: state.get(label, False))
        chosen = await self._interaction.pick_many(items) or []
        labels = [item.label for item in chosen]
        context.pick_state[output_key] = _picked(labels)
        return "\n".join(labels)

    async def _tree_pick(
        self, args: str, output_key: str, context: ResolutionContext
    ) -> str:
        state = context.pick_state.get(output_key, {})
        text = await self.resolve_commands(args, context)
        tree = build_test_case_tree(text)
        try:
            items = flatten_test_case_tree(tree, lambda path: state.get(path, False))
        except (CmdResolveError, RecursionError) as error:
            failure = TreeFlattenError(str(error))
            self._interaction.show_error(str(failure))
            raise failure from error

        paths = await self._interaction.pick_tree(TreePickSession(tree, items)) or []
        context.pick_state[output_key] = _picked(paths)
        return "\n".join(paths)

    async def _input(
        self, args: str, output_key: str, context: ResolutionContext
    ) -> str:
        text = await self.resolve_commands(args, context)
        # Only the first line seeds the input box
        default = text.split("\n")[0]
        value = await self._interaction.input_box(default)
        return value if value is not None else ""


def _picked(labels: Sequence[str]) -> PickStateRecord:
    return {label: True for label in labels}
