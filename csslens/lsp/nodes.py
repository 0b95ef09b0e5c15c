"""Stylesheet syntax nodes and node path queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeType(Enum):
    STYLESHEET = "stylesheet"
    RULESET = "ruleset"
    DECLARATIONS = "declarations"
    SELECTOR = "selector"
    SIMPLE_SELECTOR = "simple_selector"
    PSEUDO_SELECTOR = "pseudo_selector"
    DECLARATION = "declaration"
    UNKNOWN_AT_RULE = "unknown_at_rule"
    OTHER = "other"


@dataclass
class Node:
    """A node of a parsed stylesheet.

    ``offset`` and ``end`` are character offsets into the document text;
    ``text`` is the source slice they cover.
    """

    type: NodeType
    offset: int
    end: int
    text: str
    name: str = ""  # property name for declarations, @keyword for at-rules
    children: list[Node] = field(default_factory=list, repr=False)
    parent: Node | None = field(default=None, repr=False, compare=False)

    @property
    def length(self) -> int:
        return self.end - self.offset

    def get_text(self) -> str:
        return self.text

    def get_full_property_name(self) -> str:
        return self.name

    def add_child(self, child: Node) -> Node:
        child.parent = self
        self.children.append(child)
        return child

    def contains(self, offset: int) -> bool:
        # Both bounds are inclusive so a cursor right after a token still hits it.
        return self.offset <= offset <= self.end


def get_node_at_offset(root: Node | None, offset: int) -> Node | None:
    """Return the smallest node containing ``offset``.

    Nodes are visited in document order and the last one of equal length
    wins, so a child beats a parent covering the same span.
    """
    if root is None or not root.contains(offset):
        return None

    candidate = root
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        if not node.contains(offset):
            continue
        if node.length <= candidate.length:
            candidate = node
        stack.extend(reversed(node.children))
    return candidate


def get_node_path(root: Node | None, offset: int) -> list[Node]:
    """Return the chain of nodes from ``root`` down to the node at ``offset``.

    The list is ordered outermost first and is empty when the offset
    lies outside the tree.
    """
    path: list[Node] = []
    node = get_node_at_offset(root, offset)
    while node is not None:
        path.append(node)
        node = node.parent
    path.reverse()
    return path
