"""Dispatcher that owns the handler stack and the process-wide failure hooks."""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any

from damnit.config import Settings, load_settings
from damnit.exception.error_exception import ErrorLevel, normalize
from damnit.exception.inspector import Inspector
from damnit.handler.base import Disposition
from damnit.handler.log import LogHandler
from damnit.handler.stack import HandlerStack
from damnit.hooks import HostHooks, SysHostHooks

if TYPE_CHECKING:
    from damnit.handler.base import HandlerInterface

logger = logging.getLogger(__name__)

_UNSET: Any = object()

# Attribute on dispatched exceptions naming the Runs that handled them
_DISPATCHED_BY = "__damnit_dispatched_by__"


class _DispatchMarks(weakref.WeakSet):
    """Runs that dispatched an exception; pickles as empty."""

    def __reduce__(self) -> tuple:
        return (type(self), ())


def _is_fatal(level: int) -> bool:
    try:
        return ErrorLevel(level).is_fatal
    except ValueError:
        return False


class Run:
    """Route uncaught exceptions, warnings and fatal shutdown errors to handlers.

    Handlers are consulted newest first. Each returns a :class:`Disposition`:
    CONTINUE (or anything unrecognized) moves on to the next older handler,
    STOP ends the walk, and QUIT ends the process when quitting is allowed
    and otherwise behaves like STOP.

    Args:
        hooks: Host hook registry. Defaults to the interpreter's own hooks.
        settings: Dispatcher settings. Defaults to ``load_settings()``.
    """

    def __init__(self, hooks: HostHooks | None = None, settings: Settings | None = None) -> None:
        self._settings = settings if settings is not None else load_settings()
        self._hooks: HostHooks = hooks if hooks is not None else SysHostHooks()
        self._stack = HandlerStack()
        self._is_registered = False
        self._shutdown_registered = False
        self._allow_quit = self._settings.allow_quit
        # Exceptions currently being dispatched, outermost first
        self._dispatching: list[BaseException] = []
        if self._settings.log_uncaught:
            self._stack.push(LogHandler())

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def hooks(self) -> HostHooks:
        return self._hooks

    @property
    def is_registered(self) -> bool:
        """Whether this instance's hooks are the active global handlers."""
        return self._is_registered

    def push_handler(self, handler: Any) -> Run:
        """Push a handler or plain callable onto the end of the stack.

        Raises:
            InvalidHandlerError: If ``handler`` is neither callable nor a handler.
        """
        self._stack.push(handler)
        return self

    def pop_handler(self) -> HandlerInterface | None:
        """Remove and return the last pushed handler, or None if the stack is empty."""
        return self._stack.pop()

    def get_handlers(self) -> tuple[HandlerInterface, ...]:
        """Return all handlers in the order they were pushed."""
        return self._stack.list()

    def clear_handlers(self) -> Run:
        """Remove every handler, including the default one installed at construction."""
        self._stack.clear()
        return self

    def get_inspector(self, exception: BaseException) -> Inspector:
        return Inspector(exception)

    def register(self) -> Run:
        """Install this instance as the process-wide exception, error and shutdown handler."""
        if self._is_registered:
            return self
        self._hooks.set_error_handler(self.handle_error)
        self._hooks.set_exception_handler(self.handle_exception)
        # atexit callbacks cannot be removed, so one registration serves every cycle
        if not self._shutdown_registered:
            self._hooks.register_shutdown_function(self.handle_shutdown)
            self._shutdown_registered = True
        self._is_registered = True
        logger.debug("Registered %r as global exception handler", self)
        return self

    def unregister(self) -> Run:
        """Restore the exception and error handlers that were active before register()."""
        if not self._is_registered:
            return self
        self._hooks.restore_exception_handler()
        self._hooks.restore_error_handler()
        self._is_registered = False
        logger.debug("Unregistered %r", self)
        return self

    def allow_quit(self, value: Any = _UNSET) -> bool:
        """Get, or set when ``value`` is given, whether handlers may end the process."""
        if value is not _UNSET:
            self._allow_quit = bool(value)
        return self._allow_quit

    def handle_exception(self, exception: BaseException) -> None:
        """Walk the handler stack newest first and apply each handler's disposition.

        The stack is snapshotted on entry, so handlers pushed or popped by a
        handler take effect from the next dispatch. Errors raised by a handler
        propagate to the caller.
        """
        if any(active is exception for active in self._dispatching):
            logger.warning(
                "Skipping re-entrant dispatch of %s already being handled",
                type(exception).__name__,
            )
            return
        if len(self._dispatching) >= self._settings.max_dispatch_depth:
            logger.warning(
                "Dropping %s: nested dispatch depth limit (%d) reached",
                type(exception).__name__,
                self._settings.max_dispatch_depth,
            )
            return

        handlers = self._stack.list()
        inspector = self.get_inspector(exception)
        self._dispatching.append(exception)
        self._mark_dispatched(exception)
        try:
            for handler in reversed(handlers):
                handler.set_run(self)
                handler.set_inspector(inspector)
                handler.set_exception(exception)

                disposition = handler.handle()

                if disposition is Disposition.STOP:
                    break
                if disposition is Disposition.QUIT:
                    if self._allow_quit:
                        logger.debug("Handler %r requested quit", handler)
                        self._hooks.terminate(self._settings.quit_status)
                    break
        finally:
            self._dispatching.pop()

    def has_dispatched(self, exception: BaseException) -> bool:
        """Whether this instance has already dispatched ``exception``."""
        runs = vars(exception).get(_DISPATCHED_BY)
        return runs is not None and self in runs

    def _mark_dispatched(self, exception: BaseException) -> None:
        vars(exception).setdefault(_DISPATCHED_BY, _DispatchMarks()).add(self)

    def handle_error(
        self,
        level: int,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        """Promote a runtime error signal to an ErrorException and dispatch it."""
        self.handle_exception(normalize(level, message, file, line))

    def handle_shutdown(self) -> None:
        """Dispatch the fatal error the host recorded, if this instance is still registered."""
        if not self._is_registered:
            return
        error = self._hooks.last_error()
        if error is None or not _is_fatal(error.level):
            return
        if error.exception is not None and self.has_dispatched(error.exception):
            return
        self.handle_error(error.level, error.message, error.file, error.line)

    def __repr__(self) -> str:
        return f"Run(handlers={len(self._stack)}, registered={self._is_registered})"
