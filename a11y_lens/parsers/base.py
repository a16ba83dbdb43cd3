"""Shared parser records and protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from a11y_lens.locator import LineIndex, SourcePosition, extract_snippet


@dataclass(frozen=True, slots=True)
class ParseError:
    """A syntax problem recorded instead of raised."""

    message: str
    line: int
    column: int
    code: str


@dataclass(slots=True)
class ParseResult:
    """Outcome of parsing one file."""

    tree: Any | None
    errors: list[ParseError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class SourceParser(Protocol):
    """Structural parser over one file's content."""

    file_path: str
    content: str

    def parse(self) -> ParseResult:
        """Parse the content, recording errors instead of raising."""

    def get_node_location(self, node: Any) -> SourcePosition:
        """Return the 1-based position of ``node``."""

    def get_node_code(self, node: Any) -> str:
        """Return the literal source text of ``node``."""


class BaseParser:
    """Common state for the structural parsers."""

    def __init__(self, content: str, file_path: str) -> None:
        self.content = content
        self.file_path = file_path
        self.index = LineIndex(content)
        self.errors: list[ParseError] = []

    def position(self, offset: int) -> SourcePosition:
        return self.index.position(offset)

    def record_error_at(self, message: str, offset: int) -> None:
        """Record an error at a character offset; end-of-file maps past the last line."""
        if offset < len(self.content):
            position = self.position(offset)
            self.record_error(message, position.line, position.column)
            return
        last_line = self.content.rsplit("\n", 1)[-1]
        self.record_error(message, self.index.line_count, len(last_line) + 1)

    def record_error(self, message: str, line: int, column: int) -> None:
        line = min(max(line, 1), self.index.line_count)
        column = max(column, 1)
        self.errors.append(
            ParseError(
                message=message,
                line=line,
                column=column,
                code=extract_snippet(self.content, line, line),
            )
        )
