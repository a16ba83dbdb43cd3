"""Offset to line/column mapping and snippet extraction."""

from __future__ import annotations

import bisect
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """1-based line and column of a character offset."""

    line: int
    column: int


def offset_to_position(content: str, offset: int) -> SourcePosition:
    """Map a character offset to a 1-based position.

    Offsets outside ``[0, len(content))`` resolve to line 1, column 1.
    """
    if offset < 0 or offset >= len(content):
        return SourcePosition(line=1, column=1)
    line = content.count("\n", 0, offset) + 1
    last_newline = content.rfind("\n", 0, offset)
    return SourcePosition(line=line, column=offset - last_newline)


def line_count(content: str) -> int:
    """Return the number of newline-separated lines (an empty file has one)."""
    return content.count("\n") + 1


def extract_snippet(
    content: str,
    start_line: int,
    end_line: int,
    context_lines: int = 2,
) -> str:
    """Return lines ``start_line..end_line`` plus context, joined verbatim."""
    lines = content.split("\n")
    first = max(0, start_line - context_lines - 1)
    last = min(len(lines), end_line + context_lines)
    return "\n".join(lines[first:last])


class LineIndex:
    """Precomputed line starts for repeated offset lookups over one text."""

    __slots__ = ("_content", "_starts")

    def __init__(self, content: str) -> None:
        self._content = content
        starts = [0]
        index = content.find("\n")
        while index != -1:
            starts.append(index + 1)
            index = content.find("\n", index + 1)
        self._starts = starts

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def position(self, offset: int) -> SourcePosition:
        if offset < 0 or offset >= len(self._content):
            return SourcePosition(line=1, column=1)
        line_index = bisect.bisect_right(self._starts, offset) - 1
        return SourcePosition(line=line_index + 1, column=offset - self._starts[line_index] + 1)

    def offset(self, line: int, column: int) -> int:
        """Inverse of :meth:`position`, clamped to the content bounds."""
        if line < 1:
            return 0
        if line > len(self._starts):
            return len(self._content)
        return min(len(self._content), self._starts[line - 1] + max(column, 1) - 1)
