# src/shtola/core/frontmatter.py
"""
Front-matter handling.

`lexer` only splits text; it never fails. Parsing the extracted block is a
separate step (`to_yaml`) so that a malformed block surfaces as a parse error.
"""
from typing import Any, Iterator, Tuple

import yaml

from shtola.config import FENCE


def _lines(text: str) -> Iterator[str]:
    """Yields lines with their '\\n' terminator kept. Only '\\n' splits lines."""
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end == -1:
            yield text[start:]
            return
        yield text[start:end + 1]
        start = end + 1


def _strip_terminator(text: str) -> str:
    if text.endswith("\n"):
        text = text[:-1]
    if text.endswith("\r"):
        text = text[:-1]
    return text


def _is_fence(line: str, fence: str) -> bool:
    return _strip_terminator(line) == fence


def lexer(text: str, fence: str = FENCE) -> Tuple[str, str]:
    """
    Splits `text` into (front matter, body).

    The text must open with a fence line and contain a later closing fence
    line; otherwise the front matter is empty and the body is `text` as-is.
    """
    lines = _lines(text)
    opening = next(lines, None)
    if opening is None or not _is_fence(opening, fence):
        return "", text

    offset = len(opening)
    for line in lines:
        if _is_fence(line, fence):
            matter = _strip_terminator(text[len(opening):offset])
            return matter, text[offset + len(line):]
        offset += len(line)

    # Unterminated block: nothing is consumed.
    return "", text


def to_yaml(matter: str) -> Tuple[Any, ...]:
    """Parses a front-matter block into its YAML documents. Raises yaml.YAMLError."""
    if not matter.strip():
        return ()
    return tuple(yaml.safe_load_all(matter))
