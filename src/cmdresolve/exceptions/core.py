"""
Exception classes for cmdresolve template resolution.

This module defines specific exception types for the error conditions
that can occur while building selection trees, reading target state,
executing aliased commands and running interactive directives.
"""


class CmdResolveError(Exception):
    """Base exception for all cmdresolve errors."""

    pass


class DuplicateNodeError(CmdResolveError):
    """Raised when a child segment is explicitly added twice to the same node."""

    def __init__(self, segment: str, path: str):
        """
        Initialize the exception.

        Params:
            segment: The segment that already exists
            path: Path of the node the segment was added to
        """
        self.segment = segment
        self.path = path
        super().__init__(f"Duplicate node '{segment}' on '{path}'")


class MissingNodeError(CmdResolveError):
    """Raised when a child segment is looked up on a node that does not have it."""

    def __init__(self, segment: str, path: str):
        self.segment = segment
        self.path = path
        super().__init__(f"No such edge '{segment}' at '{path}'")


class TargetNotSelectedError(CmdResolveError):
    """Raised when a keyword needs a target but none is selected for its role."""

    def __init__(self, role: str):
        """
        Initialize the exception.

        Params:
            role: The role (build, run or test) without a selected target
        """
        self.role = role
        super().__init__(f"No {role} target selected")


class CommandExecutionError(CmdResolveError):
    """Raised when an external command exits unsuccessfully."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        """
        Initialize the exception.

        Params:
            command: The fully resolved command that was run
            returncode: Exit status reported by the process
            stderr: Captured standard error, if any
        """
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command '{command}' failed with exit code {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)


class AliasRecursionError(CmdResolveError):
    """Raised when alias expansion cycles or nests deeper than allowed."""

    def __init__(self, chain: list[str], reason: str = "cycle detected"):
        """
        Initialize the exception.

        Params:
            chain: Alias names in expansion order, ending with the offending one
            reason: Why expansion was stopped
        """
        self.chain = list(chain)
        self.reason = reason
        super().__init__(f"Alias {reason}: {' -> '.join(self.chain)}")


class TreeFlattenError(CmdResolveError):
    """Raised when a selection tree cannot be turned into selectable rows."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error flattening tree: {reason}")
