"""Error types raised by the dispatcher itself."""

from __future__ import annotations


class DamnitError(Exception):
    """Base class for errors raised by damnit."""


class InvalidHandlerError(DamnitError, TypeError):
    """Raised when a value pushed onto the handler stack is not a usable handler."""
