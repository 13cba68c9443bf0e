"""Per-dispatch view of an exception handed to every handler."""

from __future__ import annotations

import traceback

from damnit.exception.error_exception import ErrorException


class Inspector:
    """Read-only accessors over the exception being dispatched."""

    def __init__(self, exception: BaseException) -> None:
        self._exception = exception
        self._frames: list[traceback.FrameSummary] | None = None

    @property
    def exception(self) -> BaseException:
        return self._exception

    @property
    def exception_name(self) -> str:
        """Fully qualified class name of the exception."""
        cls = type(self._exception)
        if cls.__module__ == "builtins":
            return cls.__qualname__
        return f"{cls.__module__}.{cls.__qualname__}"

    @property
    def exception_message(self) -> str:
        return str(self._exception)

    @property
    def previous(self) -> BaseException | None:
        """The exception this one wraps, if any."""
        return self._exception.__cause__ or self._exception.__context__

    def frames(self) -> list[traceback.FrameSummary]:
        """Return the traceback frames, innermost last.

        An ``ErrorException`` raised from a warning has no traceback; it gets a
        single frame pointing at the location it was reported from.
        """
        if self._frames is None:
            self._frames = self._build_frames()
        return list(self._frames)

    def _build_frames(self) -> list[traceback.FrameSummary]:
        tb = self._exception.__traceback__
        if tb is not None:
            return list(traceback.extract_tb(tb))
        if isinstance(self._exception, ErrorException) and self._exception.filename:
            return [
                traceback.FrameSummary(
                    self._exception.filename,
                    self._exception.lineno or 0,
                    "<unknown>",
                    lookup_line=False,
                )
            ]
        return []
