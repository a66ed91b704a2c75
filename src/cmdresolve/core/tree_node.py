"""
Selection tree for hierarchical multi-select.

Slash-delimited identifiers such as ``tests/unit/test_io.py/::test_read``
are decomposed into a tree so that a user can check or uncheck whole
groups at once. Nodes live in a flat arena owned by ``SelectionTree``;
each node records its own index and the index of its parent, so walking
up the tree never needs an owning back-reference.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from cmdresolve.exceptions import DuplicateNodeError, MissingNodeError

ROOT_INDEX = 0
PATH_SEPARATOR = "/"

# A segment starting with this names a case inside its parent file
CASE_SEPARATOR = "::"


@dataclass
class TreeNode:
    """
    Single node record inside a ``SelectionTree`` arena.

    Params:
        value: Path segment this node represents
        index: Position of this node in the owning arena
        parent: Arena index of the parent node, ``None`` for the root
        children: Segment -> arena index, in insertion order
        is_test_case: Node is a selectable leaf
        is_test: Node directly contains at least one leaf
    """

    value: str
    index: int
    parent: int | None = None
    children: dict[str, int] = field(default_factory=dict)
    is_test_case: bool = False
    is_test: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent is None


class SelectionTree:
    """Arena-backed tree of path segments with a single distinguished root."""

    def __init__(self):
        self._nodes: list[TreeNode] = [TreeNode(value="", index=ROOT_INDEX)]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self._nodes)

    @property
    def root(self) -> TreeNode:
        return self._nodes[ROOT_INDEX]

    def node(self, index: int) -> TreeNode:
        return self._nodes[index]

    def parent_of(self, node: TreeNode) -> TreeNode | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def get_path(self, node: TreeNode) -> str:
        """
        Reconstruct the path of a node from its ancestor segments.

        The root path is empty. Intermediate nodes end with a separator,
        leaves and containers of leaves do not. A case segment is joined to
        its parent without a separator, so the path of a leaf inserted as
        ``dir/file.py/::case`` reads ``dir/file.py::case``.

        Params:
            node: Node whose path is wanted

        Returns:
            Concatenated ancestor segments down to ``node``
        """
        if node.is_root:
            return ""
        prefix = self.get_path(self._nodes[node.parent])
        if (
            prefix
            and not prefix.endswith(PATH_SEPARATOR)
            and not node.value.startswith(CASE_SEPARATOR)
        ):
            prefix += PATH_SEPARATOR
        suffix = "" if (node.is_test or node.is_test_case) else PATH_SEPARATOR
        return prefix + node.value + suffix

    def has_child(self, node: TreeNode, edge: str) -> bool:
        return edge in node.children

    def get_child(self, node: TreeNode, edge: str) -> TreeNode:
        if edge not in node.children:
            raise MissingNodeError(edge, self.get_path(node))
        return self._nodes[node.children[edge]]

    def add_child(self, node: TreeNode, edge: str) -> TreeNode:
        """
        Create a fresh child under ``node``.

        Raises:
            DuplicateNodeError: If ``node`` already has a child named ``edge``
        """
        if edge in node.children:
            raise DuplicateNodeError(edge, self.get_path(node))
        child = TreeNode(value=edge, index=len(self._nodes), parent=node.index)
        self._nodes.append(child)
        node.children[edge] = child.index
        return child

    def get_or_add_child(self, node: TreeNode, edge: str) -> TreeNode:
        if edge in node.children:
            return self._nodes[node.children[edge]]
        return self.add_child(node, edge)

    def set_test_case(self, node: TreeNode) -> TreeNode:
        """Mark ``node`` as a leaf and its direct parent as a container."""
        node.is_test_case = True
        parent = self.parent_of(node)
        if parent is not None:
            parent.is_test = True
        return node

    def create_path_to_test_case(
        self, path: str, start: TreeNode | None = None
    ) -> TreeNode:
        """
        Insert a leaf path, reusing any segments that already exist.

        Params:
            path: Slash-delimited identifier of the leaf
            start: Node to insert under, the root when omitted

        Returns:
            The leaf node at the end of ``path``
        """
        node = start if start is not None else self.root
        for part in path.split(PATH_SEPARATOR):
            node = self.get_or_add_child(node, part)
        return self.set_test_case(node)

    def find_descendant_by_path(
        self, path: str, start: TreeNode | None = None
    ) -> TreeNode | None:
        node = start if start is not None else self.root
        for edge in path.split(PATH_SEPARATOR):
            if edge not in node.children:
                return None
            node = self._nodes[node.children[edge]]
        return node

    def ancestors(self, node: TreeNode) -> Iterator[TreeNode]:
        """Yield the ancestors of ``node`` from its parent up to the root."""
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def dfs(
        self, visitor: Callable[[TreeNode], bool], start: TreeNode | None = None
    ) -> None:
        """
        Preorder traversal below ``start`` in lexicographic segment order.

        The start node itself is not visited. The visitor returns whether
        to descend into the subtree of the node it was given.

        Params:
            visitor: Called once per visited node
            start: Node whose descendants are walked, the root when omitted
        """
        node = start if start is not None else self.root
        for edge in sorted(node.children):
            child = self._nodes[node.children[edge]]
            if visitor(child):
                self.dfs(visitor, child)
