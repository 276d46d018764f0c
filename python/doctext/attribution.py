"""Attribution -- locate the dict literal and match comment blocks to its entries.

A block documents the entry that immediately follows it: it must start after
the previous entry's line and before this entry's line. Blocks that fit no
entry, and blocks ending in the ``---`` separator, are reported as unmatched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .comments import extract_blocks
from .entries import enumerate_entries
from .errors import TargetNotFound
from .options import DoctextOptions
from .syntax import Node, NodeKind, parse_python
from .types import Callsite, CommentBlock, Entry
from .walkers import find_node

logger = logging.getLogger(__name__)


@dataclass
class RawResult:
    """Attribution outcome before the blocks are parsed into documents."""

    matched: dict[str, CommentBlock] = field(default_factory=dict)
    unmatched: list[CommentBlock] = field(default_factory=list)
    undocumented_keys: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def read_raw(source: str, callsite: Callsite, options: DoctextOptions) -> RawResult:
    """Run the full attribution pass over Python ``source``."""
    root, comments = parse_python(source)
    mapping = locate_mapping(root, callsite)

    entries = enumerate_entries(mapping, options.whitelist, options.blacklist)
    in_range = [
        c for c in comments
        if c.start_line >= mapping.line and c.end_line <= mapping.end_line
    ]
    blocks = extract_blocks(in_range, options.marker)
    logger.debug(
        "Found %d entries and %d comment blocks in lines %d-%d",
        len(entries), len(blocks), mapping.line, mapping.end_line,
    )

    pairs, leftover = attribute(entries, blocks)

    result = RawResult(unmatched=leftover)
    for entry, block in pairs:
        if block is None:
            result.undocumented_keys.append(entry.key)
        else:
            result.matched[entry.key] = block
    logger.debug(
        "Attributed %d blocks; %d unmatched, %d undocumented keys",
        len(result.matched), len(result.unmatched), len(result.undocumented_keys),
    )
    return result


def locate_mapping(root: Node, callsite: Callsite) -> Node:
    """Find the call at the callsite and return its single dict argument."""

    def is_target(node: Node, _ancestors: list[Node]) -> bool:
        if node.kind != NodeKind.CALL or node.line != callsite.lineno:
            return False
        if callsite.function_name is not None and node.name != callsite.function_name:
            return False
        return True

    call = find_node(root, is_target)
    if call is None:
        raise TargetNotFound("Could not find the call expression", callsite)
    logger.debug("Located call %s() at line %d", call.name, call.line)

    if len(call.arguments) != 1:
        raise TargetNotFound(f"{call.name}() must be called with a single argument", callsite)
    if call.arguments[0].kind != NodeKind.MAPPING:
        raise TargetNotFound(f"The argument of {call.name}() must be a dict literal", callsite)

    return call.arguments[0]


def attribute(
    entries: Sequence[Entry],
    blocks: Sequence[CommentBlock],
) -> tuple[list[tuple[Entry, CommentBlock | None]], list[CommentBlock]]:
    """Match each entry to at most one block.

    Returns ``(pairs, unmatched)``: one ``(entry, block-or-None)`` pair per
    entry in order, and the blocks no entry claimed (in source order).
    """
    candidates = sorted(
        (b for b in blocks if not b.separate),
        key=lambda b: b.lineno,
        reverse=True,
    )
    claimed: list[CommentBlock] = []
    pairs: list[tuple[Entry, CommentBlock | None]] = []

    prev_line = -1
    for entry in entries:
        block = _closest_block(candidates, entry.line, prev_line)
        if block is not None:
            candidates = [b for b in candidates if b is not block]
            claimed.append(block)
        pairs.append((entry, block))
        prev_line = entry.line

    unmatched = [b for b in blocks if not any(b is c for c in claimed)]
    return pairs, unmatched


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _closest_block(
    candidates: list[CommentBlock],
    line: int,
    prev_line: int,
) -> CommentBlock | None:
    # candidates are sorted by descending line
    for block in candidates:
        if block.lineno < prev_line:
            return None
        if block.lineno < line:
            return block
    return None
