"""DoctextReader -- read the doctext of a dict literal passed to a call.

Usage::

    reader = DoctextReader.create()
    result = reader.read({
        #: The port to listen on.
        "port": 8080,
    })
    result.matched["port"].summary  # "The port to listen on."

The value passed to :meth:`DoctextReader.read` is ignored; the reader finds
the call in its own source file and inspects the literal's comments.
"""

from __future__ import annotations

import asyncio
import logging
import tokenize
from pathlib import Path
from typing import Any, Callable, Coroutine, Mapping

from .attribution import RawResult, read_raw
from .callsite import derive_callsite
from .entities import default_entities
from .errors import DoctextError
from .options import DoctextOptions
from .parser import DoctextParser
from .resolver import resolve_copies, resolve_properties
from .types import Callsite, EntitySpec, ResultSet

logger = logging.getLogger(__name__)


class DoctextReader:
    """Reads doctext with a fixed entity table and options."""

    def __init__(
        self,
        callee: Callable | None = None,
        entities: Mapping[str, EntitySpec] | None = None,
        options: DoctextOptions | None = None,
    ) -> None:
        self.callee = callee
        self.options = options if options is not None else DoctextOptions()

        table = default_entities()
        table.update(self.options.entities)
        table.update(entities or {})
        self.parser = DoctextParser(table)

    @classmethod
    def create(cls, callee: Callable | None = None, options: DoctextOptions | None = None) -> DoctextReader:
        """Create a reader with the built-in entities.

        Pass ``callee`` when the reader is wrapped in a function of your own;
        the callsite is then taken to be the call of that function.
        """
        return cls(callee=callee, options=options)

    @classmethod
    def create_with_entities(
        cls,
        entities: Mapping[str, EntitySpec],
        callee: Callable | None = None,
        options: DoctextOptions | None = None,
    ) -> DoctextReader:
        """Create a reader with extra (or overriding) entities."""
        return cls(callee=callee, entities=entities, options=options)

    # -----------------------------------------------------------------------
    # Reading
    # -----------------------------------------------------------------------

    def read(self, obj: Any) -> ResultSet:
        """Read the doctext of the literal passed to this call."""
        callsite = derive_callsite(self.callee or self.read)
        return self._read_at(self._load(callsite), callsite)

    def read_async(self, obj: Any) -> Coroutine[Any, Any, ResultSet]:
        """Like :meth:`read`, but the source file is read in a worker thread.

        The callsite is captured when this method is called, not when the
        returned coroutine is awaited.
        """
        callsite = derive_callsite(self.callee or self.read_async)
        return self._read_deferred(callsite)

    def read_file(self, path: str | Path, lineno: int, function_name: str | None = None) -> ResultSet:
        """Read the doctext of the call at ``lineno`` in the file at ``path``."""
        callsite = Callsite(path=str(path), lineno=lineno, function_name=function_name)
        return self._read_at(self._load(callsite), callsite)

    def read_source(
        self,
        source: str,
        lineno: int,
        function_name: str | None = None,
        path: str | None = None,
    ) -> ResultSet:
        """Read the doctext of the call at ``lineno`` in ``source``."""
        callsite = Callsite(path=path, lineno=lineno, function_name=function_name)
        return self._read_at(source, callsite)

    # -----------------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------------

    async def _read_deferred(self, callsite: Callsite) -> ResultSet:
        try:
            source = await asyncio.to_thread(Path(callsite.path).read_text, encoding="utf-8")
        except OSError as e:
            raise DoctextError(f"Could not read source: {e}", callsite.path, callsite.lineno) from e
        return self._read_at(source, callsite)

    def _load(self, callsite: Callsite) -> str:
        try:
            return Path(callsite.path).read_text(encoding="utf-8")
        except OSError as e:
            raise DoctextError(f"Could not read source: {e}", callsite.path, callsite.lineno) from e

    def _read_at(self, source: str, callsite: Callsite) -> ResultSet:
        logger.debug("Reading doctext at %s:%d", callsite.path or "<source>", callsite.lineno)
        try:
            raw = read_raw(source, callsite, self.options)
            result = self._parse_and_resolve(raw)
        except DoctextError as e:
            if e.path is None:
                e.path = callsite.path
            raise
        except (SyntaxError, tokenize.TokenError) as e:
            raise DoctextError(f"Could not parse source: {e}", callsite.path, callsite.lineno) from e

        result.callsite = callsite
        return result

    def _parse_and_resolve(self, raw: RawResult) -> ResultSet:
        matched = {key: self.parser.parse(block) for key, block in raw.matched.items()}
        unmatched = [self.parser.parse(block) for block in raw.unmatched]

        resolve_copies(matched)
        resolve_properties(matched, unmatched, self.parser)

        return ResultSet(
            matched=matched,
            unmatched=unmatched,
            undocumented_keys=list(raw.undocumented_keys),
        )
