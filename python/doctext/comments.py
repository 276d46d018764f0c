"""Comment extraction -- merge adjacent comment tokens into normalized blocks.

With the default marker, a run of line comments is doctext when it opens with
``#:`` or ``##``::

    config = doctext.read({
        #: The port to listen on.
        #:
        #: @link https://example.com/ports
        "port": 8080,
    })

Any other marker string delimits the doctext inside the run, e.g. with
``marker="!!"`` the comment ``# !! Port. !!`` yields ``Port.``.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from .options import DEFAULT_MARKER
from .types import CommentBlock, CommentKind, CommentToken

logger = logging.getLogger(__name__)

SEPARATOR = "---"

_DEFAULT_LINE_RE = re.compile(r"^[#:]")
_DEFAULT_BLOCK_RE = re.compile(r"^\*(.*?)\*?$", re.DOTALL)
_LINE_PREFIX_RE = re.compile(r"^\s*(?:#{1,2}|:)")
_BLOCK_PREFIX_RE = re.compile(r"^\s*\*")
_INTERIOR_SPACES_RE = re.compile(r"(?<=\S)\s{2,}(?=\S)")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_blocks(tokens: Sequence[CommentToken], marker: str = DEFAULT_MARKER) -> list[CommentBlock]:
    """Group tokens into runs and normalize each run into a block.

    A token joins the current run when it starts at most one line after the
    previous token ends. Runs that are not doctext for ``marker`` are dropped.
    """
    blocks: list[CommentBlock] = []
    current: list[CommentToken] = []
    last_end = 0

    for token in tokens:
        if current and token.start_line > last_end + 1:
            _append_block(blocks, merge_tokens(current, marker))
            current = []
        current.append(token)
        last_end = token.end_line

    if current:
        _append_block(blocks, merge_tokens(current, marker))

    return blocks


def merge_tokens(tokens: Sequence[CommentToken], marker: str = DEFAULT_MARKER) -> CommentBlock | None:
    """Merge one run of tokens into a block, or None if it is not doctext."""
    if not tokens:
        return None

    text = "\n".join(t.text for t in tokens)
    kind = tokens[0].kind
    body = _match_marker(text, kind, marker)
    if body is None:
        return None

    lines = body.split("\n")
    if kind == CommentKind.BLOCK:
        lines = [_BLOCK_PREFIX_RE.sub("", line, count=1) for line in lines]
    elif marker == DEFAULT_MARKER:
        lines = [_LINE_PREFIX_RE.sub("", line, count=1) for line in lines]

    lines = normalize_lines(lines)

    separate = bool(lines) and lines[-1].strip() == SEPARATOR
    if separate:
        lines.pop()
        _trim_trailing_blanks(lines)

    return CommentBlock(
        lineno=tokens[0].start_line,
        lines=lines,
        separate=separate,
        tokens=list(tokens),
    )


def normalize_lines(lines: Sequence[str]) -> list[str]:
    """Strip the common indent, collapse interior spaces, trim blank edges."""
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    indent = min(indents, default=0)

    result = [_INTERIOR_SPACES_RE.sub(" ", line[indent:]).rstrip() for line in lines]

    while result and result[0] == "":
        result.pop(0)
    _trim_trailing_blanks(result)
    return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _match_marker(text: str, kind: CommentKind, marker: str) -> str | None:
    if marker == DEFAULT_MARKER:
        if kind == CommentKind.BLOCK:
            match = _DEFAULT_BLOCK_RE.match(text)
            return match.group(1) if match else None
        return text if _DEFAULT_LINE_RE.match(text) else None

    escaped = re.escape(marker)
    match = re.search(f"{escaped}(.*?)(?:{escaped}|$)", text, re.DOTALL)
    return match.group(1) if match else None


def _trim_trailing_blanks(lines: list[str]) -> None:
    while lines and lines[-1] == "":
        lines.pop()


def _append_block(blocks: list[CommentBlock], block: CommentBlock | None) -> None:
    if block is None:
        logger.debug("Skipping comment run without doctext marker")
        return
    blocks.append(block)
