"""String helpers: escaping, ASCII case mapping, UTF-8 truncation and more."""

from __future__ import annotations

import re

_ESCAPE_TABLE = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\\": "\\\\"})
_UNESCAPE_PATTERN = re.compile(r"\\([nrt\\])")
_UNESCAPE_MAP = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\"}

_ASCII_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_ASCII_LOWER = "abcdefghijklmnopqrstuvwxyz"
_LOWER_TABLE = str.maketrans(_ASCII_UPPER, _ASCII_LOWER)
_UPPER_TABLE = str.maketrans(_ASCII_LOWER, _ASCII_UPPER)

_BRACKETS = {"(": 1, ")": -1, "{": 2, "}": -2, "[": 3, "]": -3, "<": 4, ">": -4}

DEFAULT_MAX_NEST_SIZE = 256


def encode_escape(text: str) -> str:
    """Escape newlines, carriage returns, tabs and backslashes."""
    return text.translate(_ESCAPE_TABLE)


def decode_escape(text: str) -> str:
    """Undo :func:`encode_escape`; unknown escapes are left as they are."""
    return _UNESCAPE_PATTERN.sub(lambda m: _UNESCAPE_MAP[m.group(1)], text)


def to_lower(text: str) -> str:
    """Lower-case ASCII letters only."""
    return text.translate(_LOWER_TABLE)


def to_upper(text: str) -> str:
    """Upper-case ASCII letters only."""
    return text.translate(_UPPER_TABLE)


def utf8_char_length(lead: int) -> int:
    """Byte length of a UTF-8 sequence given its lead byte (1 if invalid)."""
    if lead < 0x80:
        return 1
    if lead & 0xE0 == 0xC0:
        return 2
    if lead & 0xF0 == 0xE0:
        return 3
    if lead & 0xF8 == 0xF0:
        return 4
    return 1


def _truncate_bytes(data: bytes, max_chars: int) -> bytes:
    position = 0
    chars = 0
    size = len(data)
    while position < size and chars < max_chars:
        length = utf8_char_length(data[position])
        if position + length > size:
            break
        position += length
        chars += 1
    return data[:position]


def utf8_truncate(data: str | bytes, max_chars: int) -> str | bytes:
    """Keep at most ``max_chars`` UTF-8 characters, never splitting one.

    Bytes are truncated as raw UTF-8; strings are returned as strings.
    """
    if isinstance(data, str):
        return _truncate_bytes(data.encode("utf-8"), max_chars).decode("utf-8")
    return _truncate_bytes(bytes(data), max_chars)


def split_string(text: str, delimiter: str) -> list[str]:
    """Split on ``delimiter``; a trailing delimiter yields no empty token.

    An empty delimiter splits the text into single characters.
    """
    if not delimiter:
        return list(text)
    if not text:
        return []
    parts = text.split(delimiter)
    if text.endswith(delimiter):
        parts.pop()
    return parts


def remove_bracket(text: str, max_nest_size: int = DEFAULT_MAX_NEST_SIZE) -> str:
    """Drop every bracket and everything enclosed in brackets.

    Nesting deeper than ``max_nest_size`` is tracked by depth only, without
    checking that bracket kinds match.
    """
    stack: list[int] = []
    overflow = 0
    kept: list[str] = []
    for char in text:
        kind = _BRACKETS.get(char, 0)
        if kind > 0:
            if overflow == 0 and len(stack) < max_nest_size:
                stack.append(kind)
            else:
                overflow += 1
        elif kind < 0:
            if overflow:
                overflow -= 1
            elif stack and stack[-1] == -kind:
                stack.pop()
        elif not stack and not overflow:
            kept.append(char)
    return "".join(kept)


def format_address(address: int) -> str:
    """Render an address as lower-case hexadecimal with a ``0x`` prefix."""
    if address < 0:
        raise ValueError("address must not be negative")
    return f"0x{address:x}"


def pad(text: str, width: int) -> str:
    """Append spaces so that the result is at least ``width`` characters."""
    return text.ljust(width)


def starts_with(text: str, prefix: str, start: int = 0) -> bool:
    """Whether ``text`` from position ``start`` begins with ``prefix``."""
    return text.startswith(prefix, start)