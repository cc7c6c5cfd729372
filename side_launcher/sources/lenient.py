"""Lenient JSON reader for editor settings files.

Accepts ``//`` line comments, ``/* */`` block comments and trailing commas
before ``}`` or ``]``. The scanner tracks string literals, so comment markers
and commas inside quoted values are left untouched (``"http://host"`` stays
intact). Documents that are already strict JSON parse exactly as with
``json.loads``.
"""

import json
from typing import Any

from side_launcher.core.errors import ParseError

_WHITESPACE = " \t\r\n"


def _string_end(text: str, start: int) -> int:
    """Return the index just past the string literal opening at ``start``."""
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    # Unterminated strings are left for json.loads to report
    return n


def strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside string literals."""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
            continue
        if ch == "/" and i + 1 < n:
            nxt = text[i + 1]
            if nxt == "/":
                newline = text.find("\n", i)
                i = n if newline == -1 else newline
                continue
            if nxt == "*":
                close = text.find("*/", i + 2)
                if close == -1:
                    raise ParseError("Unterminated block comment", i)
                # keep tokens on either side apart
                out.append(" ")
                i = close + 2
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Remove commas that directly precede a closing ``}`` or ``]``."""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
            continue
        if ch == ",":
            j = i + 1
            while j < n and text[j] in _WHITESPACE:
                j += 1
            if j < n and text[j] in "}]":
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def loads(text: str) -> Any:
    """Parse a JSON-with-comments document.

    Raises:
        ParseError: If the cleaned document is still not valid JSON.

    Example:
        >>> loads('{"a": [1, 2,], // note\\n}')
        {'a': [1, 2]}
    """
    cleaned = strip_trailing_commas(strip_comments(text))
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(e.msg, e.pos) from e
