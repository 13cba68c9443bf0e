"""Adapter turning a plain callable into a handler."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from damnit.handler.base import Disposition, Handler

HandlerCallback = Callable[..., Any]

_MAX_ARGS = 3
_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def _positional_arity(func: HandlerCallback) -> int:
    """Count how many of (exception, inspector, run) the callable accepts."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 1
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return _MAX_ARGS
        if parameter.kind in _POSITIONAL_KINDS:
            count += 1
    return min(count, _MAX_ARGS)


class CallbackHandler(Handler):
    """Forward dispatch to a callable.

    The callable receives ``exception``, then optionally ``inspector`` and
    ``run``, depending on how many positional parameters it declares.
    """

    def __init__(self, callback: HandlerCallback) -> None:
        if not callable(callback):
            msg = f"CallbackHandler expects a callable, got {type(callback).__name__}"
            raise TypeError(msg)
        super().__init__()
        self._callback = callback
        self._arity = _positional_arity(callback)

    @property
    def callback(self) -> HandlerCallback:
        return self._callback

    def handle(self) -> Disposition | None:
        args = (self.exception, self.inspector, self.run)[: self._arity]
        return self._callback(*args)

    def __repr__(self) -> str:
        return f"CallbackHandler({self._callback!r})"
