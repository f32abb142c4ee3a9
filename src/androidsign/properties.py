"""
Reader for Java ``.properties`` files such as key.properties and local.properties.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from androidsign.exceptions import ConfigFileError, PropertiesFormatError

PROPERTIES_ENCODING = "latin-1"

_WHITESPACE = " \t\f"
_KEY_TERMINATORS = "=:" + _WHITESPACE
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_SIMPLE_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """
    Yield (line_number, logical_line) pairs, joining backslash continuations.

    Comment and blank lines are skipped unless they continue a previous line.
    """
    pending: Optional[str] = None
    start = 0
    for number, raw in enumerate(_LINE_BREAK.split(text), start=1):
        stripped = raw.lstrip(_WHITESPACE)
        if pending is None:
            if not stripped or stripped[0] in "#!":
                continue
            start = number
            pending = ""
        if _continues(stripped):
            pending += stripped[:-1]
            continue
        yield start, pending + stripped
        pending = None

    if pending is not None:
        yield start, pending


def _split_entry(line: str) -> Tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _KEY_TERMINATORS:
            break
        index += 1

    key, rest = line[:index], line[index:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def _unescape(value: str, line_number: int, path: Optional[str]) -> str:
    chars = []
    index = 0
    while index < len(value):
        char = value[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index >= len(value):
            break
        char = value[index]
        index += 1
        if char == "u":
            digits = value[index : index + 4]
            if not _HEX4.fullmatch(digits):
                raise PropertiesFormatError(
                    "Malformed \\uxxxx encoding",
                    path=path,
                    line=line_number,
                    details=f"\\u{digits}",
                )
            chars.append(chr(int(digits, 16)))
            index += 4
            continue
        chars.append(_SIMPLE_ESCAPES.get(char, char))
    return "".join(chars)


def parse_properties(text: str, path: Optional[str] = None) -> Dict[str, str]:
    """
    Parse the contents of a Java properties file.

    Follows the rules of ``java.util.Properties.load``: ``#``/``!`` comments,
    ``=``, ``:`` or whitespace separators, backslash line continuations, and
    ``\\t \\n \\r \\f \\uXXXX`` escapes. Later duplicate keys win.

    Parameters:
        text: The file contents.
        path: Source path, used only for error reporting.

    Returns:
        Dict[str, str]: Property keys mapped to their unescaped values.

    Raises:
        PropertiesFormatError: If a ``\\u`` escape is malformed.
    """
    properties: Dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_entry(line)
        key = _unescape(raw_key, line_number, path)
        properties[key] = _unescape(raw_value, line_number, path)
    return properties


def load_properties(path: Union[str, Path]) -> Dict[str, str]:
    """
    Read and parse a properties file using ISO-8859-1, as Java does.

    Raises:
        ConfigFileError: If the file cannot be read.
        PropertiesFormatError: If the contents are malformed.
    """
    try:
        with open(path, "r", encoding=PROPERTIES_ENCODING) as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigFileError(
            "Could not read properties file", path=str(path), details=str(exc)
        ) from exc
    return parse_properties(text, path=str(path))
