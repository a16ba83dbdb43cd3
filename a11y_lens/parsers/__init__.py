"""Structural parsers keyed by file kind."""

from __future__ import annotations

from a11y_lens.file_kinds import FileKind, is_script_kind, is_stylesheet_kind
from a11y_lens.parsers.base import ParseError, ParseResult, SourceParser
from a11y_lens.parsers.markup import MarkupParser
from a11y_lens.parsers.script import ScriptParser
from a11y_lens.parsers.stylesheet import StylesheetParser

__all__ = [
    "MarkupParser",
    "ParseError",
    "ParseResult",
    "ScriptParser",
    "SourceParser",
    "StylesheetParser",
    "create_parser",
]


def create_parser(content: str, file_path: str, kind: FileKind) -> SourceParser | None:
    """Return the structural parser for ``kind``; unknown kinds have none."""
    if is_script_kind(kind):
        return ScriptParser(content, file_path, kind)
    if is_stylesheet_kind(kind):
        return StylesheetParser(content, file_path, kind)
    if kind is FileKind.HTML:
        return MarkupParser(content, file_path)
    return None
