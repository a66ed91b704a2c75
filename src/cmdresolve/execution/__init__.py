"""
Template resolution for cmdresolve.

This package provides the resolver that expands keywords, extension
directives and command aliases, the per-run context it threads through
every call, and the collaborator interfaces it depends on.
"""

from cmdresolve.execution.collaborators import (
    CommandResult,
    CommandRunner,
    Interaction,
    JsonFileStateStore,
    MemoryStateStore,
    ShellCommandRunner,
    StateStore,
    TargetProvider,
    TaskRunner,
)
from cmdresolve.execution.context import ResolutionContext
from cmdresolve.execution.extensions import (
    ExtensionOperator,
    PickItem,
    TreePickItem,
    TreePickSession,
)
from cmdresolve.execution.keywords import (
    KEYWORD_PREFIX,
    Keyword,
    build_keyword_table,
    format_test_args,
)
from cmdresolve.execution.resolution import Resolver

__all__ = [
    "CommandResult",
    "CommandRunner",
    "Interaction",
    "JsonFileStateStore",
    "MemoryStateStore",
    "ShellCommandRunner",
    "StateStore",
    "TargetProvider",
    "TaskRunner",
    "ResolutionContext",
    "ExtensionOperator",
    "PickItem",
    "TreePickItem",
    "TreePickSession",
    "KEYWORD_PREFIX",
    "Keyword",
    "build_keyword_table",
    "format_test_args",
    "Resolver",
]
