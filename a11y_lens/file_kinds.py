"""File kind classification by extension."""

from __future__ import annotations

from enum import StrEnum
from pathlib import PurePath


class FileKind(StrEnum):
    JS = "js"
    TS = "ts"
    JSX = "jsx"
    TSX = "tsx"
    HTML = "html"
    CSS = "css"
    SCSS = "scss"
    UNKNOWN = "unknown"


_EXTENSIONS: dict[str, FileKind] = {
    ".js": FileKind.JS,
    ".ts": FileKind.TS,
    ".jsx": FileKind.JSX,
    ".tsx": FileKind.TSX,
    ".html": FileKind.HTML,
    ".htm": FileKind.HTML,
    ".css": FileKind.CSS,
    ".scss": FileKind.SCSS,
}

SCRIPT_KINDS = frozenset({FileKind.JS, FileKind.TS, FileKind.JSX, FileKind.TSX})
MARKUP_KINDS = frozenset({FileKind.JSX, FileKind.TSX})
STYLESHEET_KINDS = frozenset({FileKind.CSS, FileKind.SCSS})
# Kinds whose structural tree holds elements.
ELEMENT_KINDS = MARKUP_KINDS | {FileKind.HTML}
# Kinds scanned by the markup pattern detectors; plain .ts is excluded.
TEXT_MARKUP_KINDS = frozenset({FileKind.JS, FileKind.JSX, FileKind.TSX, FileKind.HTML})
SUPPORTED_EXTENSIONS = tuple(sorted(_EXTENSIONS))


def classify(path: str) -> FileKind:
    """Return the file kind for ``path``; extension match is case-insensitive."""
    suffix = PurePath(path).suffix.lower()
    return _EXTENSIONS.get(suffix, FileKind.UNKNOWN)


def is_script_kind(kind: FileKind) -> bool:
    return kind in SCRIPT_KINDS


def is_markup_kind(kind: FileKind) -> bool:
    return kind in MARKUP_KINDS


def is_stylesheet_kind(kind: FileKind) -> bool:
    return kind in STYLESHEET_KINDS
