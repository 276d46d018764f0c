"""Entry enumeration -- the documentable keys of a dict literal.

Nested dict values produce dotted key paths (``parent.child``). Keys are
filtered by the whitelist/blacklist of the reader options.
"""

from __future__ import annotations

import re
from typing import Sequence

from .options import KeyPattern
from .syntax import Node, NodeKind
from .types import Entry
from .walkers import walk


def enumerate_entries(
    mapping: Node,
    whitelist: Sequence[KeyPattern] = (),
    blacklist: Sequence[KeyPattern] = (),
) -> list[Entry]:
    """List the entries of ``mapping`` in source order."""
    entries: list[Entry] = []

    def visit(node: Node, ancestors: list[Node]) -> None:
        if node.kind != NodeKind.ENTRY:
            return
        key = _key_path(ancestors + [node])
        if key is None or not is_key_included(key, whitelist, blacklist):
            return
        entries.append(Entry(key=key, line=node.line))

    walk(mapping, visit)
    return entries


def is_key_included(
    key: str,
    whitelist: Sequence[KeyPattern],
    blacklist: Sequence[KeyPattern],
) -> bool:
    """Blacklist wins; an empty whitelist includes everything else."""
    if any(_matches(p, key) for p in blacklist):
        return False
    if not whitelist:
        return True
    return any(_matches(p, key) for p in whitelist)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _matches(pattern: KeyPattern, key: str) -> bool:
    if isinstance(pattern, re.Pattern):
        return pattern.search(key) is not None
    return pattern == key


def _key_path(path: list[Node]) -> str | None:
    """Join entry names along ``path``; None if anything but dicts intervenes."""
    keys: list[str] = []
    for node in path:
        if node.kind == NodeKind.ENTRY:
            if node.name is None:
                return None
            keys.append(node.name)
        elif node.kind != NodeKind.MAPPING:
            return None
    return ".".join(keys)
