"""Normalized representation of non-exception runtime errors.

Warnings and fatal conditions reported by the interpreter carry a severity
level, a message and a source location but no exception object. They are
promoted to :class:`ErrorException` so every failure reaches handlers through
the same path as a genuine uncaught exception.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorLevel(IntEnum):
    """Severity levels for runtime error signals."""

    E_ERROR = 1
    E_WARNING = 2
    E_PARSE = 4
    E_NOTICE = 8
    E_CORE_ERROR = 16
    E_CORE_WARNING = 32
    E_COMPILE_ERROR = 64
    E_COMPILE_WARNING = 128
    E_USER_ERROR = 256
    E_USER_WARNING = 512
    E_USER_NOTICE = 1024
    E_STRICT = 2048
    E_RECOVERABLE_ERROR = 4096
    E_DEPRECATED = 8192
    E_USER_DEPRECATED = 16384

    @property
    def is_fatal(self) -> bool:
        """Whether the level describes an error the process cannot continue from."""
        return self in _FATAL_LEVELS


_FATAL_LEVELS = frozenset(
    {
        ErrorLevel.E_ERROR,
        ErrorLevel.E_PARSE,
        ErrorLevel.E_CORE_ERROR,
        ErrorLevel.E_COMPILE_ERROR,
        ErrorLevel.E_USER_ERROR,
    }
)

# Checked in order; the first matching base class wins.
_CATEGORY_LEVELS: tuple[tuple[type[Warning], ErrorLevel], ...] = (
    (DeprecationWarning, ErrorLevel.E_DEPRECATED),
    (PendingDeprecationWarning, ErrorLevel.E_DEPRECATED),
    (FutureWarning, ErrorLevel.E_USER_DEPRECATED),
    (SyntaxWarning, ErrorLevel.E_COMPILE_WARNING),
    (UserWarning, ErrorLevel.E_USER_WARNING),
)


def level_for_category(category: type[Warning]) -> ErrorLevel:
    """Map a ``warnings`` category to the severity level it is dispatched with."""
    for base, level in _CATEGORY_LEVELS:
        if issubclass(category, base):
            return level
    return ErrorLevel.E_WARNING


class ErrorException(Exception):
    """Exception promoted from a runtime error signal.

    All attributes are read-only once constructed.
    """

    def __init__(
        self,
        message: str = "",
        code: int = 0,
        severity: int = ErrorLevel.E_ERROR,
        filename: str | None = None,
        lineno: int | None = None,
        previous: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._code = code
        self._severity = severity
        self._filename = filename
        self._lineno = lineno
        self._previous = previous
        if previous is not None:
            self.__cause__ = previous

    @property
    def message(self) -> str:
        return self._message

    @property
    def code(self) -> int:
        return self._code

    @property
    def severity(self) -> int:
        """Level the error was promoted from."""
        return self._severity

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def lineno(self) -> int | None:
        return self._lineno

    @property
    def previous(self) -> BaseException | None:
        return self._previous

    def __reduce__(self) -> tuple:
        return (
            type(self),
            (self._message, self._code, self._severity, self._filename, self._lineno, self._previous),
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._message!r}, severity={self._severity!r}, "
            f"filename={self._filename!r}, lineno={self._lineno!r})"
        )


def normalize(
    level: int,
    message: str,
    file: str | None = None,
    line: int | None = None,
) -> ErrorException:
    """Convert a raw runtime error signal into an :class:`ErrorException`."""
    try:
        severity: int = ErrorLevel(level)
    except ValueError:
        severity = level
    return ErrorException(message, 0, severity, file, line)
