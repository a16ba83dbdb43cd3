"""Collect source files from CLI paths."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from a11y_lens.file_kinds import SUPPORTED_EXTENSIONS
from a11y_lens.models import SourceFile

logger = logging.getLogger(__name__)

IGNORED_DIRS = frozenset({".git", "node_modules", "dist", "build", "__pycache__", ".venv"})


class SourceReadError(OSError):
    """A requested path could not be read."""


def collect_paths(
    paths: Iterable[Path],
    *,
    root: Path,
    includes: list[str],
    excludes: list[str],
) -> list[Path]:
    """Expand files and directories into supported files, sorted per directory.

    Explicit file arguments are always kept; include/exclude globs only filter
    files discovered by walking a directory.
    """
    collected: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        if not path.exists():
            raise SourceReadError(f"Path does not exist: {path}")
        if path.is_file():
            candidates = [path]
        else:
            candidates = [
                item
                for item in _walk(path)
                if _matches(_display_path(item, root), includes=includes, excludes=excludes)
            ]
        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            collected.append(candidate)
    return collected


def read_sources(paths: Iterable[Path], *, root: Path) -> list[SourceFile]:
    sources: list[SourceFile] = []
    for path in paths:
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise SourceReadError(f"Unable to read {path}: {exc}") from exc
        sources.append(SourceFile(path=_display_path(path, root), content=content))
    logger.debug("read %d source files", len(sources))
    return sources


def _walk(directory: Path) -> list[Path]:
    found: list[Path] = []
    for current, dirnames, filenames in os.walk(directory):
        dirnames[:] = sorted(name for name in dirnames if name not in IGNORED_DIRS)
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1].lower() in SUPPORTED_EXTENSIONS:
                found.append(Path(current) / filename)
    return found


def _matches(path: str, *, includes: list[str], excludes: list[str]) -> bool:
    if includes and not any(fnmatch.fnmatch(path, pattern) for pattern in includes):
        return False
    if excludes and any(fnmatch.fnmatch(path, pattern) for pattern in excludes):
        return False
    return True


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()
