from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NoReturn

import pytest

from damnit import ErrorRecord, Run, Settings


@dataclass
class FakeHostHooks:
    """In-memory HostHooks that never touches interpreter globals."""

    exception_handler: Any = None
    error_handler: Any = None
    shutdown_functions: list[Any] = field(default_factory=list)
    recorded: ErrorRecord | None = None
    terminated_with: int | None = None
    calls: list[str] = field(default_factory=list)

    def set_exception_handler(self, handler: Any) -> None:
        self.calls.append("set_exception_handler")
        self.exception_handler = handler

    def restore_exception_handler(self) -> None:
        self.calls.append("restore_exception_handler")
        self.exception_handler = None

    def set_error_handler(self, handler: Any) -> None:
        self.calls.append("set_error_handler")
        self.error_handler = handler

    def restore_error_handler(self) -> None:
        self.calls.append("restore_error_handler")
        self.error_handler = None

    def register_shutdown_function(self, handler: Any) -> None:
        self.calls.append("register_shutdown_function")
        self.shutdown_functions.append(handler)

    def record_error(self, record: ErrorRecord) -> None:
        self.recorded = record

    def last_error(self) -> ErrorRecord | None:
        return self.recorded

    def terminate(self, status: int) -> NoReturn:
        self.terminated_with = status
        raise SystemExit(status)


@pytest.fixture(autouse=True)
def _clear_damnit_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DAMNIT_ALLOW_QUIT",
        "DAMNIT_QUIT_STATUS",
        "DAMNIT_MAX_DISPATCH_DEPTH",
        "DAMNIT_LOG_UNCAUGHT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def hooks() -> FakeHostHooks:
    return FakeHostHooks()


@pytest.fixture
def run(hooks: FakeHostHooks) -> Run:
    return Run(hooks=hooks, settings=Settings())
