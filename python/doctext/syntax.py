"""Source adapter -- turns Python source into the abstract node tree and comment tokens.

The attribution engine only ever sees :class:`Node` values: a kind, a line span,
an optional name and children. Calls additionally expose their arguments.
"""

from __future__ import annotations

import ast
import io
import tokenize
from dataclasses import dataclass, field
from enum import Enum

from .types import CommentKind, CommentToken


class NodeKind(Enum):
    CALL = "call"
    MAPPING = "mapping"
    ENTRY = "entry"
    OTHER = "other"


@dataclass
class Node:
    """A syntax node reduced to what the attribution engine needs.

    - ``CALL``: ``name`` is the callee identifier, ``line`` the line of that
      identifier, ``arguments`` the positional and keyword argument values.
    - ``MAPPING``: children are ``ENTRY`` nodes in source order.
    - ``ENTRY``: ``name`` is the string key (``None`` for other keys and
      ``**`` spreads); the single child is the value.
    """

    kind: NodeKind
    line: int
    end_line: int
    name: str | None = None
    children: list[Node] = field(default_factory=list)
    arguments: list[Node] = field(default_factory=list)


_SKIPPED = (ast.expr_context, ast.boolop, ast.operator, ast.unaryop, ast.cmpop)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_python(source: str) -> tuple[Node, list[CommentToken]]:
    """Parse Python source into a node tree and its comment tokens.

    Raises SyntaxError or tokenize.TokenError on invalid source.
    """
    module = ast.parse(source)
    end_line = max(source.count("\n") + 1, 1)
    root = Node(
        kind=NodeKind.OTHER,
        line=1,
        end_line=end_line,
        children=[_convert(child, 1) for child in _child_nodes(module)],
    )
    return root, read_comments(source)


def read_comments(source: str) -> list[CommentToken]:
    """Collect ``#`` comments in source order."""
    comments: list[CommentToken] = []
    for tok in tokenize.generate_tokens(io.StringIO(source).readline):
        if tok.type == tokenize.COMMENT:
            comments.append(CommentToken(
                start_line=tok.start[0],
                end_line=tok.end[0],
                kind=CommentKind.LINE,
                text=tok.string[1:],
            ))
    return comments


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _child_nodes(node: ast.AST) -> list[ast.AST]:
    return [c for c in ast.iter_child_nodes(node) if not isinstance(c, _SKIPPED)]


def _span(node: ast.AST, parent_line: int) -> tuple[int, int]:
    line = getattr(node, "lineno", None) or parent_line
    end_line = getattr(node, "end_lineno", None) or line
    return line, end_line


def _convert(node: ast.AST, parent_line: int) -> Node:
    line, end_line = _span(node, parent_line)

    if isinstance(node, ast.Call):
        return _convert_call(node, line, end_line)

    if isinstance(node, ast.Dict):
        entries = [
            _convert_entry(key, value, line)
            for key, value in zip(node.keys, node.values)
        ]
        return Node(kind=NodeKind.MAPPING, line=line, end_line=end_line, children=entries)

    return Node(
        kind=NodeKind.OTHER,
        line=line,
        end_line=end_line,
        children=[_convert(c, line) for c in _child_nodes(node)],
    )


def _convert_call(node: ast.Call, line: int, end_line: int) -> Node:
    func = node.func
    name: str | None = None
    anchor = line
    # Method calls are reported on the line of the attribute name.
    if isinstance(func, ast.Name):
        name = func.id
        anchor = func.lineno
    elif isinstance(func, ast.Attribute):
        name = func.attr
        anchor = func.end_lineno or func.lineno

    arguments = [_convert(a, line) for a in node.args]
    arguments += [_convert(k.value, line) for k in node.keywords]
    return Node(
        kind=NodeKind.CALL,
        line=anchor,
        end_line=end_line,
        name=name,
        children=[_convert(func, line)] + arguments,
        arguments=arguments,
    )


def _convert_entry(key: ast.expr | None, value: ast.expr, parent_line: int) -> Node:
    name: str | None = None
    if key is None:
        line, _ = _span(value, parent_line)
    else:
        line, _ = _span(key, parent_line)
        if isinstance(key, ast.Constant) and isinstance(key.value, str):
            name = key.value
    _, end_line = _span(value, line)
    return Node(
        kind=NodeKind.ENTRY,
        line=line,
        end_line=end_line,
        name=name,
        children=[_convert(value, line)],
    )
