"""Handler that reports exceptions through the logging module."""

from __future__ import annotations

import logging

from damnit.handler.base import Disposition, Handler


class LogHandler(Handler):
    """Log the dispatched exception with its traceback.

    Args:
        logger: Logger to write to. Defaults to the ``damnit.uncaught`` logger.
        level: Log level for the record.
        disposition: Value returned after logging; CONTINUE lets older handlers run.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int = logging.ERROR,
        disposition: Disposition = Disposition.CONTINUE,
    ) -> None:
        super().__init__()
        self._logger = logger or logging.getLogger("damnit.uncaught")
        self._level = level
        self._disposition = disposition

    def handle(self) -> Disposition | None:
        exception = self.exception
        if exception is None:
            return self._disposition
        name = self.inspector.exception_name if self.inspector else type(exception).__name__
        self._logger.log(
            self._level,
            "Uncaught %s: %s",
            name,
            exception,
            exc_info=(type(exception), exception, exception.__traceback__),
        )
        return self._disposition
