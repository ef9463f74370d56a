"""Capture and render the call stack of the running program."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from types import CodeType, FrameType

from femtolog.strings import format_address, pad

PLATFORM_MAX_FRAMES = 64
INDEX_ALIGN_LENGTH = 4
ADDRESS_ALIGN_LENGTH = 20
FUNCTION_ALIGN_LENGTH = 32
UNKNOWN_FUNCTION = "<unknown>"
TRACE_BUFFER_SIZE = 4096


@dataclass
class StackTraceEntry:
    """One frame of a stack trace."""

    index: int = 0
    address: str = ""
    function: str = ""
    file: str = ""
    line: int = 0
    offset: int = 0
    use_index: bool = True

    def to_string(self) -> str:
        """Render the frame as one aligned line without a trailing newline."""
        parts: list[str] = []
        if self.use_index:
            parts.append(pad(f"@{self.index}", INDEX_ALIGN_LENGTH))
        if self.address:
            parts.append(pad(self.address, ADDRESS_ALIGN_LENGTH))
        function = self.function or UNKNOWN_FUNCTION
        if self.offset > 0:
            function += f"+0x{self.offset:x}"
        parts.append(pad(function, FUNCTION_ALIGN_LENGTH))
        if self.file:
            location = f" at {self.file}"
            if self.line > 0:
                location += f":{self.line}"
            parts.append(location)
        return "".join(parts)


def _function_name(code: CodeType) -> str:
    return getattr(code, "co_qualname", code.co_name)


def _entry_for_frame(frame: FrameType, index: int, use_index: bool) -> StackTraceEntry:
    code = frame.f_code
    return StackTraceEntry(
        index=index if use_index else 0,
        address=format_address(id(code)),
        function=_function_name(code),
        file=code.co_filename,
        line=frame.f_lineno or 0,
        offset=max(frame.f_lasti, 0),
        use_index=use_index,
    )


def collect_stack_trace(
    use_index: bool = True,
    first_frame: int = 0,
    max_frames: int = PLATFORM_MAX_FRAMES,
) -> list[StackTraceEntry]:
    """Collect the frames of the caller's stack, innermost first.

    Frame 0 is the function that calls this one. At most ``max_frames``
    frames are walked (capped at :data:`PLATFORM_MAX_FRAMES`), and the first
    ``first_frame`` of them are skipped.
    """
    max_frames = min(max_frames, PLATFORM_MAX_FRAMES)
    first_frame = min(first_frame, max_frames)
    if first_frame >= max_frames:
        return []

    entries: list[StackTraceEntry] = []
    frame: FrameType | None = sys._getframe(1)
    position = 0
    while frame is not None and position < max_frames:
        if position >= first_frame:
            entries.append(_entry_for_frame(frame, position - first_frame, use_index))
        frame = frame.f_back
        position += 1
    return entries


def _format_limited(entries: list[StackTraceEntry], limit: int | None) -> str:
    lines: list[str] = []
    written = 0
    for entry in entries:
        line = entry.to_string()
        if limit is not None and written + len(line) + 1 >= limit:
            break
        lines.append(line + "\n")
        written += len(line) + 1
    return "".join(lines)


def format_stack_trace(entries: list[StackTraceEntry]) -> str:
    """Render entries one per line, each line ending with a newline."""
    return _format_limited(entries, None)


def stack_trace_from_current_context(
    use_index: bool = True,
    first_frame: int = 0,
    max_frames: int = PLATFORM_MAX_FRAMES,
) -> str:
    """The caller's stack trace as text, limited to :data:`TRACE_BUFFER_SIZE`."""
    entries = collect_stack_trace(use_index, first_frame + 1, max_frames)
    return _format_limited(entries, TRACE_BUFFER_SIZE)


__all__ = [
    "ADDRESS_ALIGN_LENGTH",
    "FUNCTION_ALIGN_LENGTH",
    "INDEX_ALIGN_LENGTH",
    "PLATFORM_MAX_FRAMES",
    "StackTraceEntry",
    "TRACE_BUFFER_SIZE",
    "UNKNOWN_FUNCTION",
    "collect_stack_trace",
    "format_stack_trace",
    "stack_trace_from_current_context",
]