"""Tool-call contract: JSON-ready dictionaries for agent integrations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from a11y_lens import fixes
from a11y_lens.models import SourceFile
from a11y_lens.scanner import Scanner


def check(file_path: str, content: str, *, scanner: Scanner | None = None) -> dict[str, Any]:
    """Scan one file and return its analysis payload."""
    active = scanner if scanner is not None else Scanner()
    return active.scan_file(file_path, content).to_dict()


def check_batch(
    files: Iterable[Mapping[str, str]], *, scanner: Scanner | None = None
) -> dict[str, Any]:
    """Scan ``[{"path": ..., "content": ...}]`` entries in order."""
    sources = [_as_source_file(item) for item in files]
    active = scanner if scanner is not None else Scanner()
    return active.scan_files(sources).to_dict()


def suggest_fix(violation_id: str, code: str) -> dict[str, Any]:
    return fixes.suggest_fix(violation_id, code).to_dict()


def _as_source_file(item: Mapping[str, str]) -> SourceFile:
    path = item.get("path")
    content = item.get("content")
    if not isinstance(path, str) or not isinstance(content, str):
        raise ValueError("each file entry needs string 'path' and 'content' fields")
    return SourceFile(path=path, content=content)
