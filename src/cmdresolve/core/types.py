"""
Core type definitions for the cmdresolve template engine.

This module contains the type aliases and small enumerations shared by
the tree, the resolvers and the orchestrator.
"""

from enum import Enum

# Previously selected label/path -> whether it was checked
PickStateRecord = dict[str, bool]

# In-progress output string -> pick state recorded for the directive found there
PickStateMap = dict[str, PickStateRecord]


class TargetRole(Enum):
    """Role a selected target plays for keyword lookups."""

    BUILD = "build"
    RUN = "run"
    TEST = "test"
