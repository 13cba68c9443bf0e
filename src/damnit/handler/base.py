"""Handler contract shared by the dispatcher and handler implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from damnit.exception.inspector import Inspector
    from damnit.run import Run


class Disposition(Enum):
    """Value a handler returns to steer the dispatch loop."""

    CONTINUE = "continue"
    STOP = "stop"
    QUIT = "quit"


@runtime_checkable
class HandlerInterface(Protocol):
    """Capability every entry on the handler stack satisfies."""

    def set_run(self, run: Run) -> None: ...

    def set_inspector(self, inspector: Inspector) -> None: ...

    def set_exception(self, exception: BaseException) -> None: ...

    def handle(self) -> Disposition | None: ...


class Handler(ABC):
    """Base class for handlers that keep their dispatch context as attributes.

    The dispatcher binds ``run``, ``inspector`` and ``exception`` right before
    calling :meth:`handle`.
    """

    def __init__(self) -> None:
        self._run: Run | None = None
        self._inspector: Inspector | None = None
        self._exception: BaseException | None = None

    def set_run(self, run: Run) -> None:
        self._run = run

    def set_inspector(self, inspector: Inspector) -> None:
        self._inspector = inspector

    def set_exception(self, exception: BaseException) -> None:
        self._exception = exception

    @property
    def run(self) -> Run | None:
        return self._run

    @property
    def inspector(self) -> Inspector | None:
        return self._inspector

    @property
    def exception(self) -> BaseException | None:
        return self._exception

    @abstractmethod
    def handle(self) -> Disposition | None:
        """Handle the bound exception and return a disposition."""
