import os
import signal
import sys
from unittest import mock

import pytest

from femtolog.handlers import (
    register_signal_handlers,
    register_terminate_handler,
    signal_handler,
    signal_to_string,
    terminate_handler,
)


@pytest.mark.parametrize(
    "number, text",
    [
        (signal.SIGSEGV, "SIGSEGV (Invalid access to storage)"),
        (signal.SIGABRT, "SIGABRT (Abnormal termination)"),
        (signal.SIGFPE, "SIGFPE (Floating point exception)"),
        (signal.SIGILL, "SIGILL (Illegal instruction)"),
        (signal.SIGINT, "SIGINT (Interactive attention signal)"),
        (signal.SIGTERM, "SIGTERM (Termination request)"),
    ],
)
def test_signal_to_string_known(number, text):
    assert signal_to_string(number) == text


def test_signal_to_string_unknown():
    assert signal_to_string(9999) == "Unknown signal"


def test_signal_handler_reports_and_exits(capsys):
    with pytest.raises(SystemExit) as info:
        signal_handler(signal.SIGABRT, None)
    assert info.value.code == 1
    out = capsys.readouterr().out
    assert out.startswith("Aborted at ")
    assert "in unix time)" in out
    assert f"SIGABRT (Abnormal termination) received by PID {os.getpid()}(TID " in out
    assert "test_signal_handler_reports_and_exits" in out


def _restore(previous):
    for number, handler in previous.items():
        signal.signal(number, handler)


def test_register_signal_handlers_installs_fatal_only():
    before_int = signal.getsignal(signal.SIGINT)
    previous = register_signal_handlers(False)
    try:
        assert set(previous) == {
            signal.SIGSEGV,
            signal.SIGABRT,
            signal.SIGFPE,
            signal.SIGILL,
        }
        assert signal.getsignal(signal.SIGABRT) is signal_handler
        assert signal.getsignal(signal.SIGINT) is before_int
    finally:
        _restore(previous)
    assert signal.getsignal(signal.SIGABRT) is not signal_handler


def test_register_signal_handlers_debug_includes_sigint():
    previous = register_signal_handlers(True)
    try:
        assert signal.SIGINT in previous
        assert signal.getsignal(signal.SIGINT) is signal_handler
    finally:
        _restore(previous)


def _fail_deeply():
    raise RuntimeError("boom")


def test_terminate_handler_reports_traceback(capsys):
    try:
        _fail_deeply()
    except RuntimeError:
        exc_type, exc, tb = sys.exc_info()
    with mock.patch("os._exit", side_effect=SystemExit) as fake_exit:
        with pytest.raises(SystemExit):
            terminate_handler(exc_type, exc, tb)
    fake_exit.assert_called_once_with(1)
    out = capsys.readouterr().out
    assert out.startswith("\nProgram terminated unexpectedly\n")
    assert "Stack trace (most recent call last):" in out
    lines = [line for line in out.splitlines() if line.startswith("@")]
    assert "test_terminate_handler_reports_traceback" in lines[0]
    assert "_fail_deeply" in lines[-1]


def test_terminate_handler_without_traceback(capsys):
    with mock.patch("os._exit", side_effect=SystemExit) as fake_exit:
        with pytest.raises(SystemExit):
            terminate_handler(None, None, None)
    fake_exit.assert_called_once_with(1)
    assert "Program terminated unexpectedly" in capsys.readouterr().out


def test_register_terminate_handler_sets_excepthook():
    previous = register_terminate_handler()
    try:
        assert sys.excepthook is terminate_handler
    finally:
        sys.excepthook = previous
    assert sys.excepthook is previous