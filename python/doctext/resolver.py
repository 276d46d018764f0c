"""Resolution of ``@copy`` references and ``@property`` sub-documents.

Both passes mutate ``matched`` in place and run once, in dict order:

- ``@copy`` is not followed transitively. If ``a`` copies ``b`` and ``b``
  copies ``c``, ``a`` receives whatever ``b`` holds when ``a`` is visited.
- ``@property`` documents are expanded from a snapshot of the documents as
  they were before the pass; properties declared inside an inserted
  property document are not expanded again.
"""

from __future__ import annotations

import copy
import logging

from .errors import ReferencedKeyNotFound
from .parser import DoctextParser
from .types import Document

logger = logging.getLogger(__name__)


def resolve_copies(matched: dict[str, Document]) -> None:
    """Replace the text and entities of every copying document with its source's."""
    for key, document in matched.items():
        source_key = document.entities.get("copy")
        if source_key is None:
            continue

        original = matched.get(source_key)
        if original is None:
            raise ReferencedKeyNotFound(source_key, document)

        logger.debug("Copying doctext of %s into %s", source_key, key)
        document.summary = original.summary
        document.body = original.body
        document.entities = copy.deepcopy(original.entities)


def resolve_properties(
    matched: dict[str, Document],
    unmatched: list[Document],
    parser: DoctextParser,
) -> None:
    """Insert a document for every ``@property`` under ``parent.name``.

    Properties of unmatched documents are inserted under their bare name.
    """
    snapshot: list[tuple[str | None, Document]] = list(matched.items())
    snapshot += [(None, document) for document in unmatched]

    for parent, document in snapshot:
        properties = document.entities.get("properties") or {}
        for name, block in properties.items():
            key = name if parent is None else f"{parent}.{name}"
            logger.debug("Expanding @property %s", key)
            matched[key] = parser.parse(block)
