"""
cmdresolve exception classes.

This package provides all exception types used throughout cmdresolve
for consistent error handling and reporting.
"""

from cmdresolve.exceptions.core import (
    AliasRecursionError,
    CmdResolveError,
    CommandExecutionError,
    DuplicateNodeError,
    MissingNodeError,
    TargetNotSelectedError,
    TreeFlattenError,
)

__all__ = [
    "CmdResolveError",
    "DuplicateNodeError",
    "MissingNodeError",
    "TargetNotSelectedError",
    "CommandExecutionError",
    "AliasRecursionError",
    "TreeFlattenError",
]
