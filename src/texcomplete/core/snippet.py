"""Snippet template expansion.

Templates use ``${1}``, ``${1:default}`` or ``$1`` tab stops and a final
``${0}`` cursor marker. A backslash escapes ``$``, ``}`` and itself.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

_TOKEN = re.compile(r"\\([$}\\])|\$\{(\d+)(?::([^}]*))?\}|\$(\d+)")


@dataclass(frozen=True)
class TabStop:
    """A placeholder found in a template."""

    index: int
    default: str = ""


@dataclass(frozen=True)
class ExpandedSnippet:
    """Template text with every tab stop filled in."""

    text: str
    cursor: int


def parse_placeholders(template: str) -> list[TabStop]:
    """List tab stops in order of first appearance, one per index."""
    seen: dict[int, TabStop] = {}
    for match in _TOKEN.finditer(template):
        if match.group(1) is not None:
            continue
        index = int(match.group(2) or match.group(4))
        if index not in seen:
            seen[index] = TabStop(index=index, default=match.group(3) or "")
    return list(seen.values())


def expand_snippet(
    template: str,
    values: Mapping[int, str] | None = None,
) -> ExpandedSnippet:
    """Fill tab stops and locate the final cursor.

    Tab stops without a value fall back to their default. Repeated indices
    mirror the same text. The cursor lands on the first ``${0}`` marker, or at
    the end of the text when the template has none.
    """
    values = dict(values or {})
    defaults = {stop.index: stop.default for stop in parse_placeholders(template)}
    parts: list[str] = []
    length = 0
    cursor: int | None = None
    last = 0

    for match in _TOKEN.finditer(template):
        literal = template[last:match.start()]
        parts.append(literal)
        length += len(literal)
        last = match.end()

        if match.group(1) is not None:
            parts.append(match.group(1))
            length += 1
            continue

        index = int(match.group(2) or match.group(4))
        if index == 0:
            if cursor is None:
                cursor = length
            continue

        filled = values.get(index, defaults.get(index, ""))
        parts.append(filled)
        length += len(filled)

    tail = template[last:]
    parts.append(tail)
    length += len(tail)

    return ExpandedSnippet(text="".join(parts), cursor=length if cursor is None else cursor)
