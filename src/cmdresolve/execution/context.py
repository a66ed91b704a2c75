"""
Per-run resolution state.

A ``ResolutionContext`` is created for every top-level invocation and
passed explicitly to each asynchronous resolution call. It carries the
alias output cache, the pick-state map loaded from persistent storage
and the stack of aliases currently being expanded.
"""

from dataclasses import dataclass, field

from cmdresolve.core.types import PickStateMap


@dataclass
class ResolutionContext:
    """
    Mutable state for a single top-level resolution run.

    Params:
        pick_state: Previously selected rows keyed by in-progress output text
        cache: Alias name -> captured standard output for this run
        alias_stack: Aliases whose bodies are being expanded, outermost first
    """

    pick_state: PickStateMap = field(default_factory=dict)
    cache: dict[str, str] = field(default_factory=dict)
    alias_stack: list[str] = field(default_factory=list)
