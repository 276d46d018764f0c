"""Doctext types -- comment tokens, blocks, entries and parsed documents."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class CommentKind(Enum):
    LINE = "line"
    BLOCK = "block"


@dataclass(frozen=True)
class CommentToken:
    """A single comment as reported by the source adapter.

    ``text`` excludes the comment opener (``#`` for Python).
    """

    start_line: int
    end_line: int
    kind: CommentKind
    text: str


@dataclass
class CommentBlock:
    """A run of adjacent comment tokens, normalized into plain lines."""

    lineno: int
    lines: list[str] = field(default_factory=list)
    separate: bool = False
    tokens: list[CommentToken] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"lineno": self.lineno, "lines": list(self.lines)}


@dataclass(frozen=True)
class Entry:
    """A documentable key of the literal: dotted path plus source line."""

    key: str
    line: int


@dataclass
class Link:
    href: str
    caption: str

    def to_dict(self) -> dict:
        return {"href": self.href, "caption": self.caption}


@dataclass
class Document:
    """The structured result of one comment block."""

    lineno: int
    summary: str = ""
    body: str = ""
    entities: dict[str, Any] = field(default_factory=dict)
    tokens: list[CommentToken] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "lineno": self.lineno,
            "summary": self.summary,
            "body": self.body,
            "entities": _plain(self.entities),
        }


@dataclass
class EntitySpec:
    """Describes one ``@directive``.

    Specs carry no name: an entity table maps each directive name (without
    the ``@``) to its spec. ``handler(builder, args, lines)`` receives the
    document accumulator, exactly ``args`` positional arguments, and the
    content lines.
    """

    args: int
    content: bool
    handler: Callable[..., None]


@dataclass
class Callsite:
    path: str | None
    lineno: int
    function_name: str | None = None


@dataclass
class ResultSet:
    matched: dict[str, Document] = field(default_factory=dict)
    unmatched: list[Document] = field(default_factory=list)
    undocumented_keys: list[str] = field(default_factory=list)
    callsite: Callsite | None = None

    def to_dict(self) -> dict:
        """Serialize to plain dicts and lists."""
        return {
            "matched": {k: d.to_dict() for k, d in self.matched.items()},
            "unmatched": [d.to_dict() for d in self.unmatched],
            "undocumented_keys": list(self.undocumented_keys),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


def _plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
