"""
cmdresolve - Resolve user command templates into runnable command lines

cmdresolve expands templates that mix literal text with keyword
placeholders, references to other configured commands and interactive
pick/input directives, then hands the result to a task runner.
"""

from importlib.metadata import version

from cmdresolve.controller import UserCommandsController
from cmdresolve.core import SelectionTree, TargetRole
from cmdresolve.execution import ResolutionContext, Resolver
from cmdresolve.models import CommandAlias, TargetState, UserCommandsSettings

__version__ = version("cmdresolve")

__all__ = [
    "__version__",
    "UserCommandsController",
    "Resolver",
    "ResolutionContext",
    "SelectionTree",
    "TargetRole",
    "CommandAlias",
    "TargetState",
    "UserCommandsSettings",
]
