"""Value objects produced by a scan and their JSON shapes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Severity = Literal["error", "warning", "info"]
SEVERITY_RANK: dict[str, int] = {"error": 3, "warning": 2, "info": 1}


@dataclass(frozen=True, slots=True)
class FixSuggestion:
    """Structured remediation hint."""

    title: str
    description: str
    code: str | None = None
    priority: Literal["high", "medium", "low"] = "medium"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
        }
        if self.code is not None:
            payload["code"] = self.code
        return payload


@dataclass(frozen=True, slots=True)
class Violation:
    """A single accessibility finding positioned in a source file.

    ``code`` is either empty or a literal substring of the scanned content.
    File-level findings sit at line 1, column 1.
    """

    id: str
    severity: Severity
    wcag_criteria: tuple[str, ...]
    title: str
    description: str
    help: str
    line: int
    column: int
    code: str
    fix_suggestions: tuple[str | FixSuggestion, ...] = ()
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity,
            "wcagCriteria": list(self.wcag_criteria),
            "title": self.title,
            "description": self.description,
            "help": self.help,
            "line": self.line,
            "column": self.column,
            "code": self.code,
            "fixSuggestions": [
                item.to_dict() if isinstance(item, FixSuggestion) else item
                for item in self.fix_suggestions
            ],
            "tags": list(self.tags),
        }


@dataclass(frozen=True, slots=True)
class FileStatistics:
    total_violations: int
    errors: int
    warnings: int
    info: int
    estimated_fix_minutes: int

    @property
    def estimated_fix_time(self) -> str:
        return format_fix_time(self.estimated_fix_minutes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalViolations": self.total_violations,
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
            "estimatedFixTime": self.estimated_fix_time,
        }


@dataclass(frozen=True, slots=True)
class FileMetadata:
    line_count: int
    analyzed_at: str
    component_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"lineCount": self.line_count, "analyzedAt": self.analyzed_at}
        if self.component_count is not None:
            payload["componentCount"] = self.component_count
        return payload


@dataclass(frozen=True, slots=True)
class FileAnalysis:
    """Result of scanning one file."""

    file_path: str
    file_type: str
    content: str
    violations: tuple[Violation, ...]
    statistics: FileStatistics
    metadata: FileMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "fileType": self.file_type,
            "content": self.content,
            "violations": [item.to_dict() for item in self.violations],
            "statistics": self.statistics.to_dict(),
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class CategoryCount:
    category: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "count": self.count}


@dataclass(frozen=True, slots=True)
class ScanSummary:
    total_files: int
    total_violations: int
    files_with_violations: int
    compliance_score: int
    estimated_total_fix_minutes: int
    top_categories: tuple[CategoryCount, ...] = field(default_factory=tuple)

    @property
    def estimated_total_fix_time(self) -> str:
        return format_fix_time(self.estimated_total_fix_minutes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "totalViolations": self.total_violations,
            "filesWithViolations": self.files_with_violations,
            "complianceScore": self.compliance_score,
            "estimatedTotalFixTime": self.estimated_total_fix_time,
            "topCategories": [item.to_dict() for item in self.top_categories],
        }


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Result of scanning a batch of files."""

    files: tuple[FileAnalysis, ...]
    summary: ScanSummary
    suggestions: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [item.to_dict() for item in self.files],
            "summary": self.summary.to_dict(),
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True, slots=True)
class FixSuggestionResult:
    violation_id: str
    code: str
    suggestions: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "violationId": self.violation_id,
            "code": self.code,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A file path with its already-read content."""

    path: str
    content: str


def format_fix_time(minutes: int) -> str:
    """Format minutes as ``0 minutes``, ``N minutes`` or ``Hh Mm``."""
    if minutes <= 0:
        return "0 minutes"
    if minutes < 60:
        return f"{minutes} minutes"
    hours, remainder = divmod(minutes, 60)
    return f"{hours}h {remainder}m"
