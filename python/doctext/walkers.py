"""Generic pre-order traversal over :class:`~doctext.syntax.Node` trees."""

from __future__ import annotations

from typing import Callable

from .syntax import Node

Visitor = Callable[[Node, list[Node]], None]
Predicate = Callable[[Node, list[Node]], bool]


def walk(root: Node, visitor: Visitor) -> None:
    """Call ``visitor(node, ancestors)`` for every node, parents first."""
    stack: list[tuple[Node, list[Node]]] = [(root, [])]
    while stack:
        node, ancestors = stack.pop()
        visitor(node, ancestors)
        path = ancestors + [node]
        for child in reversed(node.children):
            stack.append((child, path))


def find_node(root: Node, test: Predicate) -> Node | None:
    """Return the first node in pre-order for which ``test`` is true."""
    stack: list[tuple[Node, list[Node]]] = [(root, [])]
    while stack:
        node, ancestors = stack.pop()
        if test(node, ancestors):
            return node
        path = ancestors + [node]
        for child in reversed(node.children):
            stack.append((child, path))
    return None
