"""Document parser -- split a comment block into summary, body and entities.

Directives start with ``@name`` followed by a fixed number of arguments.
Directives that accept content take either the rest of the header line, or
the lines below it indented by at least two spaces::

    Summary line.

    More body text.

    @link https://example.com Inline caption
    @property host
      The host name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import InvalidEntity, UnknownEntity
from .types import CommentBlock, Document, EntitySpec

ENTITY_RE = re.compile(r"^\s*@(\w+)(?:\s+(.*?))?\s*$")
CONTENT_RE = re.compile(r"^\s{2,}\S")
_ARG_RE = re.compile(r"\s*(\S+)(?:\s+(.*)|$)")
_WHITESPACE_RE = re.compile(r"\s+")


class DocumentBuilder:
    """Accumulates entity values for one document; handed to entity handlers."""

    def __init__(self, block: CommentBlock) -> None:
        self.block = block
        self.entities: dict[str, Any] = {}

    def set(self, name: str, value: Any) -> None:
        self.entities[name] = value

    def append(self, name: str, value: Any) -> None:
        self.entities.setdefault(name, []).append(value)

    def put(self, name: str, key: str, value: Any) -> None:
        self.entities.setdefault(name, {})[key] = value

    def merge(self, lines: list[str]) -> str:
        """Join lines into a single whitespace-collapsed string."""
        return merge_lines(lines)

    def nested(self, lines: list[str]) -> CommentBlock:
        """Wrap content lines as a block of their own, for later parsing."""
        return CommentBlock(
            lineno=self.block.lineno,
            lines=list(lines),
            separate=False,
            tokens=self.block.tokens,
        )


@dataclass
class _OpenEntity:
    name: str
    spec: EntitySpec
    args: list[str]
    lines: list[str] = field(default_factory=list)


class DoctextParser:
    """Parses comment blocks using a table of entity specs."""

    def __init__(self, entities: Mapping[str, EntitySpec]) -> None:
        self.entities = dict(entities)

    def parse(self, block: CommentBlock) -> Document:
        builder = DocumentBuilder(block)
        rest = self._extract_entities(block, builder)
        summary, body = summarize(rest)
        return Document(
            lineno=block.lineno,
            summary=summary,
            body=body,
            entities=builder.entities,
            tokens=block.tokens,
        )

    def _extract_entities(self, block: CommentBlock, builder: DocumentBuilder) -> list[str]:
        rest: list[str] = []
        current: _OpenEntity | None = None
        # Name of a directive that was completed on its own header line.
        closed: str | None = None

        for line in block.lines:
            if current is not None:
                if line == "" or CONTENT_RE.match(line):
                    current.lines.append(line[2:])
                    continue
                self._finish(current, builder)
                current = None
            elif closed is not None and CONTENT_RE.match(line):
                raise InvalidEntity(f"Unexpected content for @{closed}", block, entity=closed)

            match = ENTITY_RE.match(line)
            if match is None:
                rest.append(line)
                if line != "":
                    closed = None
                continue

            current = self._open(match, block, builder)
            closed = match.group(1) if current is None else None

        if current is not None:
            self._finish(current, builder)

        return rest

    def _open(self, match: re.Match, block: CommentBlock, builder: DocumentBuilder) -> _OpenEntity | None:
        """Start a directive; returns None if it completed on the header line."""
        name = match.group(1)
        spec = self.entities.get(name)
        if spec is None:
            raise UnknownEntity(name, block)

        remainder = match.group(2) or ""
        args: list[str] = []
        for _ in range(spec.args):
            arg = _ARG_RE.match(remainder)
            if arg is None:
                raise InvalidEntity(f"Missing argument for @{name}", block, entity=name)
            args.append(arg.group(1))
            remainder = arg.group(2) or ""

        entity = _OpenEntity(name=name, spec=spec, args=args)
        if remainder.strip():
            if not spec.content:
                raise InvalidEntity(f"Unexpected content for @{name}", block, entity=name)
            entity.lines = [remainder.strip()]
            self._finish(entity, builder)
            return None
        if not spec.content:
            self._finish(entity, builder)
            return None
        return entity

    def _finish(self, entity: _OpenEntity, builder: DocumentBuilder) -> None:
        lines = list(entity.lines)
        while lines and lines[-1].strip() == "":
            lines.pop()
        entity.spec.handler(builder, entity.args, lines)


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def merge_lines(lines: list[str]) -> str:
    return _WHITESPACE_RE.sub(" ", " ".join(lines)).strip()


def summarize(lines: list[str]) -> tuple[str, str]:
    """Return ``(summary, body)``; the summary stops at the first blank line."""
    body = merge_lines(lines)
    if "" not in lines:
        return body, body
    return merge_lines(lines[:lines.index("")]), body
