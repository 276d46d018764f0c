"""doctext -- structured doc comments for the entries of a dict literal."""

from __future__ import annotations

from typing import Any

from .errors import (
    CallsiteUnresolvable,
    DoctextError,
    InvalidEntity,
    ReferencedKeyNotFound,
    TargetNotFound,
    UnknownEntity,
)
from .options import DoctextOptions, load_options
from .parser import DocumentBuilder, DoctextParser
from .reader import DoctextReader
from .types import (
    Callsite,
    CommentBlock,
    CommentKind,
    CommentToken,
    Document,
    Entry,
    EntitySpec,
    Link,
    ResultSet,
)


def read(obj: Any) -> ResultSet:
    """Read the doctext of the dict literal passed to this call.

    The literal must be the only argument of the call, so this helper takes
    no options; use ``DoctextReader.create(options=...)`` for those.
    """
    return DoctextReader.create(callee=read).read(obj)


__all__ = [
    "DoctextReader", "DoctextParser", "DocumentBuilder",
    "DoctextOptions", "load_options", "read",
    "Callsite", "CommentBlock", "CommentKind", "CommentToken",
    "Document", "Entry", "EntitySpec", "Link", "ResultSet",
    "DoctextError", "CallsiteUnresolvable", "TargetNotFound",
    "UnknownEntity", "InvalidEntity", "ReferencedKeyNotFound",
]
