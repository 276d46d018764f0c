"""Errors raised while reading doctext.

Every error carries the source ``lineno`` it originates from; the reader
fills in ``path`` before the error leaves the call.
"""

from __future__ import annotations

from typing import Any

from .types import Callsite, CommentBlock, Document


class DoctextError(Exception):
    """Base class for all doctext failures."""

    def __init__(self, message: str, path: str | None = None, lineno: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.lineno = lineno

    def __str__(self) -> str:
        if self.path is not None and self.lineno is not None:
            return f"{self.path}:{self.lineno}: {self.message}"
        if self.lineno is not None:
            return f"line {self.lineno}: {self.message}"
        return self.message


class CallsiteUnresolvable(DoctextError):
    """The invoking source position could not be determined."""

    def __init__(self, frame: Any = None) -> None:
        super().__init__("Could not determine the callsite of the doctext reader")
        self.frame = frame


class TargetNotFound(DoctextError):
    """The call expression or its single dict literal argument is missing."""

    def __init__(self, message: str, callsite: Callsite) -> None:
        super().__init__(message, path=callsite.path, lineno=callsite.lineno)
        self.callsite = callsite


class UnknownEntity(DoctextError):
    def __init__(self, entity: str, block: CommentBlock) -> None:
        super().__init__(f"Unknown entity: @{entity}", lineno=block.lineno)
        self.entity = entity
        self.block = block


class InvalidEntity(DoctextError):
    def __init__(self, message: str, block: CommentBlock, entity: str | None = None) -> None:
        super().__init__(message, lineno=block.lineno)
        self.entity = entity
        self.block = block


class ReferencedKeyNotFound(DoctextError):
    def __init__(self, key: str, document: Document) -> None:
        super().__init__(f"Referenced key not found: {key}", lineno=document.lineno)
        self.key = key
        self.document = document
