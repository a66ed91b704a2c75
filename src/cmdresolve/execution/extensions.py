"""
Building blocks for the ``[Op(args)]`` extension directives.

The resolver expands a directive's arguments into plain text; the
helpers here turn that text into the rows an interactive collaborator
shows, and for tree picks keep the row state consistent while the user
toggles rows.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from cmdresolve.core.tree_node import SelectionTree, TreeNode

# Leaf rows are drawn indented under their container
TEST_CASE_MARKER = "⤷"

# `path/file.ext::case` -> `path/file.ext/::case` so the case nests under its file
TEST_CASE_SUFFIX_PATTERN = re.compile(r"(\.\w+)(::[^:/]+)$")


class ExtensionOperator(Enum):
    """Operators accepted in ``[Op(args)]`` directives."""

    PICK = "Pick"
    MULTI_PICK = "MultiPick"
    TREE_PICK = "TreePick"
    INPUT = "Input"

    @classmethod
    def lookup(cls, name: str) -> "ExtensionOperator | None":
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass
class PickItem:
    label: str
    picked: bool = False


@dataclass
class TreePickItem:
    """
    One selectable row of a tree pick.

    Params:
        label: Text shown for the row
        path: Path of the node the row stands for
        node: The node itself
        picked: Whether the row is currently checked
    """

    label: str
    path: str
    node: TreeNode
    picked: bool = False


def split_lines(text: str) -> list[str]:
    """Trimmed, non-blank lines of ``text``."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def build_pick_items(text: str, picker: Callable[[str], bool]) -> list[PickItem]:
    return [PickItem(label=label, picked=picker(label)) for label in split_lines(text)]


def nest_test_case_label(label: str) -> str:
    return TEST_CASE_SUFFIX_PATTERN.sub(r"\1/\2", label)


def build_test_case_tree(text: str) -> SelectionTree:
    """
    Build a selection tree from newline-separated test identifiers.

    Params:
        text: One slash-delimited identifier per line

    Returns:
        Tree with one leaf per identifier
    """
    tree = SelectionTree()
    for label in split_lines(text):
        tree.create_path_to_test_case(nest_test_case_label(label))
    return tree


def flatten_test_case_tree(
    tree: SelectionTree, picker: Callable[[str], bool]
) -> list[TreePickItem]:
    """
    Turn a selection tree into rows in traversal order.

    Containers show their full path, leaves show an indented segment.
    Nodes that are neither produce no row.

    Params:
        tree: Tree to flatten
        picker: Whether the row for a given path starts checked

    Returns:
        Rows for every container and leaf node
    """
    items: list[TreePickItem] = []

    def visit(node: TreeNode) -> bool:
        if node.is_test:
            path = tree.get_path(node)
            items.append(
                TreePickItem(label=path, path=path, node=node, picked=picker(path))
            )
        elif node.is_test_case:
            path = tree.get_path(node)
            items.append(
                TreePickItem(
                    label=f"{TEST_CASE_MARKER}{node.value}",
                    path=path,
                    node=node,
                    picked=picker(path),
                )
            )
        return True

    tree.dfs(visit)
    return items


class TreePickSession:
    """
    Row state of one hierarchical multi-select.

    An interactive collaborator shows ``items``, forwards every change of
    the widget's selection to ``apply_selection`` and redraws the checked
    rows it returns. Checking or unchecking a row applies the same state
    to every row whose ancestor chain contains that row's path.
    """

    title = "Select Test Cases"

    def __init__(self, tree: SelectionTree, items: list[TreePickItem]):
        self.tree = tree
        self.items = items
        self._previous = {item.path for item in items if item.picked}

    @property
    def selected_items(self) -> list[TreePickItem]:
        return [item for item in self.items if item.picked]

    def selected_paths(self) -> list[str]:
        return [item.path for item in self.selected_items]

    def apply_selection(self, selected_paths: Iterable[str]) -> list[TreePickItem]:
        """
        Reconcile row state with a new widget selection.

        Params:
            selected_paths: Paths of every row the widget now shows as checked

        Returns:
            The rows that are checked afterwards
        """
        selected = set(selected_paths)
        checked = selected - self._previous
        unchecked = self._previous - selected

        for item in self.items:
            chain = [item.path]
            chain.extend(
                self.tree.get_path(ancestor)
                for ancestor in self.tree.ancestors(item.node)
            )
            for path in chain:
                if path in checked:
                    item.picked = True
                elif path in unchecked:
                    item.picked = False

        self._previous = {item.path for item in self.items if item.picked}
        return self.selected_items
