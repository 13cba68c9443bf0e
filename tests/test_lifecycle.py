from __future__ import annotations

import pickle
from typing import TYPE_CHECKING

from damnit import ErrorException, ErrorLevel, ErrorRecord, Run, Settings

if TYPE_CHECKING:
    from conftest import FakeHostHooks


def test_register_installs_all_three_hooks(run: Run, hooks: FakeHostHooks) -> None:
    assert run.register() is run

    assert run.is_registered
    assert hooks.exception_handler == run.handle_exception
    assert hooks.error_handler == run.handle_error
    assert hooks.shutdown_functions == [run.handle_shutdown]


def test_register_twice_does_not_double_install(run: Run, hooks: FakeHostHooks) -> None:
    run.register()
    run.register()

    assert run.is_registered
    assert hooks.calls.count("set_exception_handler") == 1
    assert hooks.calls.count("set_error_handler") == 1
    assert len(hooks.shutdown_functions) == 1


def test_unregister_restores_and_is_idempotent(run: Run, hooks: FakeHostHooks) -> None:
    run.unregister()
    assert hooks.calls == []

    run.register()
    run.unregister()
    run.unregister()

    assert not run.is_registered
    assert hooks.calls.count("restore_exception_handler") == 1
    assert hooks.calls.count("restore_error_handler") == 1
    assert hooks.exception_handler is None
    assert hooks.error_handler is None


def test_shutdown_hook_is_registered_once_across_cycles(run: Run, hooks: FakeHostHooks) -> None:
    for _ in range(3):
        run.register()
        run.unregister()
    run.register()

    assert len(hooks.shutdown_functions) == 1
    assert hooks.calls.count("set_exception_handler") == 4


def test_installed_error_hook_dispatches(run: Run, hooks: FakeHostHooks) -> None:
    received: list[BaseException] = []
    run.push_handler(received.append).register()

    hooks.error_handler(ErrorLevel.E_USER_NOTICE, "note", "a.py", 4)
    hooks.exception_handler(KeyError("k"))

    assert isinstance(received[0], ErrorException)
    assert received[0].severity == ErrorLevel.E_USER_NOTICE
    assert isinstance(received[1], KeyError)


def test_shutdown_while_unregistered_is_a_no_op(run: Run, hooks: FakeHostHooks) -> None:
    received: list[BaseException] = []
    run.push_handler(received.append)
    hooks.record_error(ErrorRecord(ErrorLevel.E_ERROR, "fatal", "a.py", 1))

    run.handle_shutdown()
    run.register().unregister()
    run.handle_shutdown()

    assert received == []


def test_shutdown_dispatches_recorded_fatal_error(run: Run, hooks: FakeHostHooks) -> None:
    received: list[BaseException] = []
    run.push_handler(received.append).register()
    hooks.record_error(ErrorRecord(ErrorLevel.E_ERROR, "out of memory", "big.py", 99))

    run.handle_shutdown()

    (error,) = received
    assert isinstance(error, ErrorException)
    assert error.severity == ErrorLevel.E_ERROR
    assert error.message == "out of memory"
    assert error.filename == "big.py"
    assert error.lineno == 99


def test_shutdown_without_recorded_error_is_a_no_op(run: Run) -> None:
    received: list[BaseException] = []
    run.push_handler(received.append).register()

    run.handle_shutdown()

    assert received == []


def test_shutdown_ignores_non_fatal_records(run: Run, hooks: FakeHostHooks) -> None:
    received: list[BaseException] = []
    run.push_handler(received.append).register()
    hooks.record_error(ErrorRecord(ErrorLevel.E_WARNING, "just a warning"))

    run.handle_shutdown()

    assert received == []


def test_shutdown_skips_exception_already_dispatched(run: Run, hooks: FakeHostHooks) -> None:
    received: list[BaseException] = []
    run.push_handler(received.append).register()
    error = RuntimeError("uncaught")

    hooks.exception_handler(error)
    hooks.record_error(ErrorRecord.from_exception(error))
    run.handle_shutdown()

    assert received == [error]


def test_error_record_from_exception_uses_innermost_frame() -> None:
    def fail() -> None:
        msg = "inner"
        raise ValueError(msg)

    try:
        fail()
    except ValueError as exc:
        record = ErrorRecord.from_exception(exc)

    assert record.level == ErrorLevel.E_ERROR
    assert record.message == "inner"
    assert record.file is not None
    assert record.file.endswith("test_lifecycle.py")
    assert record.exception is not None
    assert record.line is not None


def test_shutdown_skips_exception_dispatched_before_other_errors(
    run: Run, hooks: FakeHostHooks
) -> None:
    received: list[BaseException] = []
    run.push_handler(received.append).register()
    error = RuntimeError("uncaught")

    hooks.exception_handler(error)
    hooks.error_handler(ErrorLevel.E_WARNING, "cleanup", "a.py", 2)
    hooks.record_error(ErrorRecord.from_exception(error))
    run.handle_shutdown()

    assert len(received) == 2
    assert received[0] is error
    assert isinstance(received[1], ErrorException)
    assert received[1].message == "cleanup"


def test_dispatch_marks_are_per_run(hooks: FakeHostHooks) -> None:
    first = Run(hooks=hooks, settings=Settings())
    second = Run(hooks=hooks, settings=Settings())
    error = ValueError("once")

    first.handle_exception(error)

    assert first.has_dispatched(error)
    assert not second.has_dispatched(error)
    assert not first.has_dispatched(ValueError("other"))


def test_dispatched_exception_still_pickles(run: Run) -> None:
    error = ValueError("portable")
    run.handle_exception(error)

    restored = pickle.loads(pickle.dumps(error))  # noqa: S301

    assert str(restored) == "portable"
    assert not run.has_dispatched(restored)
