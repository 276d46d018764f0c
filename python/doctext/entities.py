"""Built-in entities: ``@link``, ``@copy`` and ``@property``."""

from __future__ import annotations

from .parser import DocumentBuilder
from .types import EntitySpec, Link


def _add_link(builder: DocumentBuilder, args: list[str], lines: list[str]) -> None:
    href = args[0]
    caption = builder.merge(lines) if lines else href
    builder.append("links", Link(href=href, caption=caption))


def _add_copy(builder: DocumentBuilder, args: list[str], lines: list[str]) -> None:
    builder.set("copy", args[0])


def _add_property(builder: DocumentBuilder, args: list[str], lines: list[str]) -> None:
    builder.put("properties", args[0], builder.nested(lines))


def default_entities() -> dict[str, EntitySpec]:
    """Return a fresh copy of the built-in entity table."""
    return {
        "link": EntitySpec(args=1, content=True, handler=_add_link),
        "copy": EntitySpec(args=1, content=False, handler=_add_copy),
        "property": EntitySpec(args=1, content=True, handler=_add_property),
    }
