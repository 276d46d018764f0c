"""Callsite derivation -- find the source line that invoked the reader."""

from __future__ import annotations

import inspect
from typing import Callable

from .errors import CallsiteUnresolvable
from .types import Callsite


def derive_callsite(callee: Callable) -> Callsite:
    """Return the file and line from which ``callee`` is currently being called.

    ``callee`` must be on the current stack. Code that was not loaded from a
    file (``<stdin>``, ``<string>``) has no readable source and is rejected.
    """
    code = getattr(callee, "__code__", None)
    if code is None:
        raise CallsiteUnresolvable()

    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_code is not code:
            frame = frame.f_back
        if frame is None or frame.f_back is None:
            raise CallsiteUnresolvable(frame)

        caller = frame.f_back
        path = caller.f_code.co_filename
        if not path or path.startswith("<"):
            raise CallsiteUnresolvable(caller)

        return Callsite(path=path, lineno=caller.f_lineno, function_name=callee.__name__)
    finally:
        del frame
