# femtolog

Small building blocks for a logging library, using only the standard library.

- `femtolog.strings`: escape encoding and decoding, ASCII-only case
  conversion, UTF-8 aware truncation, splitting, bracket removal, address
  formatting, padding and prefix tests.
- `femtolog.stack_trace`: capture the current call stack as
  `StackTraceEntry` records and format them as aligned text.
- `femtolog.handlers`: a signal handler and an uncaught-exception handler
  that print a report with a stack trace to standard output and end the
  process with exit status 1.

## Installation

```
pip install .
```

## Strings

```python
from femtolog.strings import (
    decode_escape, encode_escape, format_address, pad,
    remove_bracket, split_string, starts_with, to_lower, utf8_truncate,
)

encode_escape("hello\nworld\t")        # 'hello\\nworld\\t'
decode_escape("hello\\nworld\\t")      # 'hello\nworld\t'
to_lower("HeLLo")                      # 'hello' (ASCII letters only)
utf8_truncate("あいうえお", 2)          # 'あい'; bytes in, bytes out
split_string("a,b,c", ",")             # ['a', 'b', 'c']
remove_bracket("start[test] and end")  # 'start and end'
format_address(0x1234)                 # '0x1234'
pad("abc", 8)                          # 'abc     '
starts_with("hello", "lo", 3)          # True
```

`split_string` drops a trailing empty token, and an empty delimiter splits
into single characters. `remove_bracket` removes `()`, `{}`, `[]` and `<>`
together with everything between them; `format_address` raises `ValueError`
for a negative address.

## Stack traces

```python
from femtolog.stack_trace import (
    collect_stack_trace, format_stack_trace, stack_trace_from_current_context,
)

entries = collect_stack_trace()          # innermost frame (the caller) first
print(format_stack_trace(entries))
print(stack_trace_from_current_context())
```

Each `StackTraceEntry` holds an index, an address, the function's name, the
file, the line and an offset; `to_string()` renders one aligned line. At most
`PLATFORM_MAX_FRAMES` (64) frames are collected, and
`stack_trace_from_current_context` limits its text to `TRACE_BUFFER_SIZE`
(4096) characters.

## Crash handlers

```python
from femtolog.handlers import register_signal_handlers, register_terminate_handler

previous_handlers = register_signal_handlers()   # SIGSEGV, SIGABRT, SIGFPE, SIGILL
previous_hook = register_terminate_handler()     # replaces sys.excepthook
```

`register_signal_handlers(debug=True)` also handles SIGINT. Both functions
return what they replaced so it can be restored. `signal_to_string` gives a
readable name for a signal number.

## What it does not do

This package has no logger, sinks or output formatting of log records, no
file or directory helpers and no assertion helpers. It provides no command to
run.

## Running the tests

```
pip install .[test]
pytest
```