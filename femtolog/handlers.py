"""Crash reporting for fatal signals and uncaught exceptions."""

from __future__ import annotations

import os
import signal
import sys
import threading
import time
from types import FrameType, TracebackType
from typing import Any

from femtolog.stack_trace import (
    StackTraceEntry,
    format_stack_trace,
    stack_trace_from_current_context,
)
from femtolog.strings import format_address

_SIGNAL_NAMES = {
    signal.SIGSEGV: "SIGSEGV (Invalid access to storage)",
    signal.SIGABRT: "SIGABRT (Abnormal termination)",
    signal.SIGFPE: "SIGFPE (Floating point exception)",
    signal.SIGILL: "SIGILL (Illegal instruction)",
    signal.SIGINT: "SIGINT (Interactive attention signal)",
    signal.SIGTERM: "SIGTERM (Termination request)",
}

_FATAL_SIGNALS = (signal.SIGSEGV, signal.SIGABRT, signal.SIGFPE, signal.SIGILL)


def signal_to_string(signal_number: int) -> str:
    """Human-readable description of a signal number."""
    return _SIGNAL_NAMES.get(signal_number, "Unknown signal")


def signal_handler(signal_number: int, frame: FrameType | None = None) -> None:
    """Report the signal with a stack trace on stdout, then exit with failure."""
    now = int(time.time())
    report = (
        f"Aborted at {time.ctime(now)}\n\n"
        f"({now} in unix time)\n"
        f"{signal_to_string(signal_number)} received by PID {os.getpid()}"
        f"(TID {threading.get_ident()})\n"
        f"{stack_trace_from_current_context()}\n"
    )
    sys.stdout.write(report)
    sys.stdout.flush()
    sys.exit(1)


def register_signal_handlers(debug: bool = False) -> dict[int, Any]:
    """Install :func:`signal_handler` for fatal signals (and SIGINT if ``debug``).

    Returns the previous handlers so that they can be restored.
    """
    signals = list(_FATAL_SIGNALS)
    if debug:
        signals.append(signal.SIGINT)
    previous: dict[int, Any] = {}
    for number in signals:
        old = signal.signal(number, signal_handler)
        previous[number] = signal.SIG_DFL if old is None else old
    return previous


def _entries_from_traceback(tb: TracebackType) -> list[StackTraceEntry]:
    entries: list[StackTraceEntry] = []
    current: TracebackType | None = tb
    while current is not None:
        code = current.tb_frame.f_code
        entries.append(
            StackTraceEntry(
                index=len(entries),
                address=format_address(id(code)),
                function=getattr(code, "co_qualname", code.co_name),
                file=code.co_filename,
                line=current.tb_lineno or 0,
                offset=max(current.tb_lasti, 0),
                use_index=True,
            )
        )
        current = current.tb_next
    return entries


def terminate_handler(
    exc_type: type[BaseException] | None,
    exc: BaseException | None,
    tb: TracebackType | None,
) -> None:
    """Report an uncaught exception's stack on stdout and end the process."""
    trace = (
        format_stack_trace(_entries_from_traceback(tb))
        if tb is not None
        else stack_trace_from_current_context()
    )
    sys.stdout.write(
        "\nProgram terminated unexpectedly\n"
        "Stack trace (most recent call last):\n"
        f"{trace}\n"
    )
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(1)


def register_terminate_handler() -> Any:
    """Install :func:`terminate_handler` as ``sys.excepthook``; return the old hook."""
    previous = sys.excepthook
    sys.excepthook = terminate_handler
    return previous


__all__ = [
    "register_signal_handlers",
    "register_terminate_handler",
    "signal_handler",
    "signal_to_string",
    "terminate_handler",
]