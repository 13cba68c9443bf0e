"""Ordered, mutable collection of handlers."""

from __future__ import annotations

from typing import Any

from damnit.errors import InvalidHandlerError
from damnit.handler.base import HandlerInterface
from damnit.handler.callback import CallbackHandler


def as_handler(handler: Any) -> HandlerInterface:
    """Return ``handler`` as a handler-contract object.

    Contract-conforming objects are returned unchanged; plain callables are
    wrapped in a :class:`CallbackHandler`.
    """
    if isinstance(handler, type):
        msg = f"Handler must be an instance, got the class {handler.__qualname__}"
        raise InvalidHandlerError(msg)
    if isinstance(handler, HandlerInterface):
        return handler
    if callable(handler):
        return CallbackHandler(handler)
    msg = (
        "Handler must be a callable or implement HandlerInterface, "
        f"got {type(handler).__name__}"
    )
    raise InvalidHandlerError(msg)


class HandlerStack:
    """Handlers in insertion order; dispatch walks them newest first."""

    def __init__(self) -> None:
        self._handlers: list[HandlerInterface] = []

    def push(self, handler: Any) -> HandlerStack:
        """Append a handler, adapting plain callables."""
        self._handlers.append(as_handler(handler))
        return self

    def pop(self) -> HandlerInterface | None:
        """Remove and return the most recently pushed handler, or None when empty."""
        if not self._handlers:
            return None
        return self._handlers.pop()

    def list(self) -> tuple[HandlerInterface, ...]:
        """Return the handlers in insertion order."""
        return tuple(self._handlers)

    def clear(self) -> HandlerStack:
        self._handlers.clear()
        return self

    def __len__(self) -> int:
        return len(self._handlers)
