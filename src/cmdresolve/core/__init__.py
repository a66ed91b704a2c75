"""
Core cmdresolve components.

This package provides the selection tree and the type definitions
shared by the resolvers.
"""

from cmdresolve.core.tree_node import ROOT_INDEX, SelectionTree, TreeNode
from cmdresolve.core.types import PickStateMap, PickStateRecord, TargetRole

__all__ = [
    "ROOT_INDEX",
    "SelectionTree",
    "TreeNode",
    "PickStateMap",
    "PickStateRecord",
    "TargetRole",
]
