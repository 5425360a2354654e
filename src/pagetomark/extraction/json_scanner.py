"""
Extraction of JSON values embedded in non-JSON markup.

Pages often assign a large configuration object inside a ``<script>`` tag
(``var ytInitialPlayerResponse = {...};``). Regexes cannot find where such an
object ends: a lazy match stops at the first ``};`` and a greedy one runs to
the last. The scanner below walks the text once, tracking nesting depth and
string literals, so braces inside strings never count.
"""

import json
from typing import Any, Optional

_CLOSERS = {"{": "}", "[": "]"}


class JsonScanError(ValueError):
    """The embedded value is missing, unbalanced, truncated or not valid JSON."""


def find_balanced_end(text: str, start: int) -> int:
    """
    Return the index just past the bracket that closes the one at ``start``.

    ``text[start]`` must be ``{`` or ``[``. Brackets inside double-quoted
    strings are ignored and backslash escapes inside strings are honoured.

    Raises:
        JsonScanError: if ``start`` is not an opening bracket, the nesting
            is inconsistent, or the text ends before the value closes
    """
    if start < 0 or start >= len(text) or text[start] not in _CLOSERS:
        raise JsonScanError(f"No JSON object or array starts at offset {start}")

    stack: list[str] = []
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ("}", "]"):
            if not stack or stack.pop() != char:
                raise JsonScanError(f"Unbalanced {char!r} at offset {index}")
            if not stack:
                return index + 1

    raise JsonScanError("Input ended before the embedded JSON value was closed")


def extract_balanced(text: str, marker: str, opener: str = "{") -> Optional[str]:
    """
    Return the raw JSON text that follows ``marker``, or None if the marker is absent.

    The value is taken to start at the first ``opener`` after the marker,
    with only whitespace or ``=``/``:`` in between.

    Raises:
        JsonScanError: marker found but no well-formed value follows it
    """
    marker_index = text.find(marker)
    if marker_index == -1:
        return None

    position = marker_index + len(marker)
    while position < len(text) and text[position] in " \t\r\n=:":
        position += 1

    if position >= len(text) or text[position] != opener:
        raise JsonScanError(f"Expected {opener!r} after {marker!r}")

    end = find_balanced_end(text, position)
    return text[position:end]


def extract_embedded_json(text: str, marker: str, opener: str = "{") -> Optional[Any]:
    """
    Locate, delimit and decode a JSON value assigned after ``marker``.

    Returns:
        The decoded value, or None when the marker does not occur

    Raises:
        JsonScanError: marker present but the value is truncated or invalid
    """
    raw = extract_balanced(text, marker, opener)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise JsonScanError(f"Embedded value after {marker!r} is not valid JSON: {e}") from e
