"""
Java .properties parsing.

Gradle's java.util.Properties reads local.properties and key.properties; this
module parses the same syntax so values match what the build would see.
"""

from __future__ import annotations

from collections.abc import Iterator

from ...core.exceptions import PropertiesError

_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _ends_with_continuation(line: str) -> bool:
    # An odd run of trailing backslashes escapes the line break
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line number, logical line), joining continuations and dropping comments."""
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        start = i
        line = lines[i].lstrip(" \t\f")
        i += 1
        if not line or line[0] in "#!":
            continue
        while _ends_with_continuation(line) and i < len(lines):
            line = line[:-1] + lines[i].lstrip(" \t\f")
            i += 1
        if _ends_with_continuation(line):
            line = line[:-1]
        yield start + 1, line


def _unescape(raw: str, source: str, line_number: int) -> str:
    out: list[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch != "\\" or i + 1 == len(raw):
            out.append(ch)
            i += 1
            continue
        nxt = raw[i + 1]
        if nxt == "u":
            digits = raw[i + 2 : i + 6]
            try:
                if len(digits) != 4:
                    raise ValueError(digits)
                out.append(chr(int(digits, 16)))
            except ValueError as e:
                raise PropertiesError(
                    f"Malformed \\uxxxx escape: \\u{digits}",
                    file_path=source,
                    line_number=line_number,
                    cause=e,
                ) from e
            i += 6
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into raw (key, value) at the first unescaped separator."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _SEPARATORS or ch in " \t\f":
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(" \t\f")
    return key, rest


def parse_properties(text: str, source: str = "") -> dict[str, str]:
    """Parse the contents of a .properties file.

    Args:
        text: File contents.
        source: File path, used in error messages.

    Returns:
        Mapping of keys to values. Later duplicates win.

    Raises:
        PropertiesError: On a malformed unicode escape.
    """
    properties: dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_entry(line)
        key = _unescape(raw_key, source, line_number)
        properties[key] = _unescape(raw_value, source, line_number)
    return properties
