"""Process-wide hook registry the dispatcher installs itself through.

``Run`` never touches ``sys``, ``warnings`` or ``atexit`` directly. It talks
to a :class:`HostHooks` implementation, which makes the register/unregister
lifecycle testable with a fake registry.
"""

from __future__ import annotations

import atexit
import contextlib
import logging
import os
import sys
import traceback
import warnings
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn, Protocol

from damnit.exception.error_exception import ErrorLevel, level_for_category

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

ExceptionCallback = Callable[[BaseException], None]
ErrorCallback = Callable[[int, str, str | None, int | None], None]
ShutdownCallback = Callable[[], None]


@dataclass(frozen=True)
class ErrorRecord:
    """Last fatal error known to the host runtime."""

    level: int
    message: str
    file: str | None = None
    line: int | None = None
    exception: BaseException | None = None

    @classmethod
    def from_exception(cls, exception: BaseException, level: int = ErrorLevel.E_ERROR) -> ErrorRecord:
        """Build a record located at the innermost frame of the exception's traceback."""
        file = line = None
        if exception.__traceback__ is not None:
            frames = traceback.extract_tb(exception.__traceback__)
            if frames:
                file, line = frames[-1].filename, frames[-1].lineno
        return cls(level=level, message=str(exception), file=file, line=line, exception=exception)


class HostHooks(Protocol):
    """Registration points the host runtime offers for failure notifications."""

    def set_exception_handler(self, handler: ExceptionCallback) -> None: ...

    def restore_exception_handler(self) -> None: ...

    def set_error_handler(self, handler: ErrorCallback) -> None: ...

    def restore_error_handler(self) -> None: ...

    def register_shutdown_function(self, handler: ShutdownCallback) -> None: ...

    def record_error(self, record: ErrorRecord) -> None: ...

    def last_error(self) -> ErrorRecord | None: ...

    def terminate(self, status: int) -> NoReturn: ...


class SysHostHooks:
    """HostHooks backed by ``sys.excepthook``, ``warnings.showwarning`` and ``atexit``.

    Each ``set_*`` call remembers one previous hook; the matching ``restore_*``
    puts that hook back. The ``atexit`` registration cannot be undone.
    """

    def __init__(self) -> None:
        self._previous_excepthook: Callable[..., object] | None = None
        self._previous_showwarning: Callable[..., object] | None = None
        self._recorded: ErrorRecord | None = None

    def set_exception_handler(self, handler: ExceptionCallback) -> None:
        previous = sys.excepthook

        def excepthook(
            exc_type: type[BaseException],
            exc_value: BaseException | None,
            exc_tb: TracebackType | None,
        ) -> None:
            if issubclass(exc_type, KeyboardInterrupt):
                previous(exc_type, exc_value, exc_tb)
                return
            if exc_value is None:
                exc_value = exc_type()
            if exc_tb is not None and exc_value.__traceback__ is None:
                exc_value = exc_value.with_traceback(exc_tb)
            handler(exc_value)

        self._previous_excepthook = previous
        sys.excepthook = excepthook

    def restore_exception_handler(self) -> None:
        if self._previous_excepthook is None:
            return
        sys.excepthook = self._previous_excepthook
        self._previous_excepthook = None

    def set_error_handler(self, handler: ErrorCallback) -> None:
        def showwarning(
            message: Warning | str,
            category: type[Warning],
            filename: str,
            lineno: int,
            file: object = None,
            line: str | None = None,
        ) -> None:
            handler(level_for_category(category), str(message), filename, lineno)

        self._previous_showwarning = warnings.showwarning
        warnings.showwarning = showwarning

    def restore_error_handler(self) -> None:
        if self._previous_showwarning is None:
            return
        warnings.showwarning = self._previous_showwarning
        self._previous_showwarning = None

    def register_shutdown_function(self, handler: ShutdownCallback) -> None:
        atexit.register(handler)

    def record_error(self, record: ErrorRecord) -> None:
        """Remember a fatal condition so shutdown handling can report it."""
        self._recorded = record

    def last_error(self) -> ErrorRecord | None:
        """Return the explicitly recorded error, else the interpreter's last unhandled one.

        Interrupts such as ``KeyboardInterrupt`` are not errors and are never reported.
        """
        if self._recorded is not None:
            return self._recorded
        exception = getattr(sys, "last_exc", None) or getattr(sys, "last_value", None)
        if not isinstance(exception, Exception):
            return None
        return ErrorRecord.from_exception(exception)

    def terminate(self, status: int) -> NoReturn:
        """End the process immediately; no further Python code runs."""
        logger.debug("Terminating process with status %d", status)
        for stream in (sys.stdout, sys.stderr):
            with contextlib.suppress(AttributeError, OSError, ValueError):
                stream.flush()
        logging.shutdown()
        os._exit(status)
