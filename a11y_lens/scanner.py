"""Per-file and batch scanning.

The scanner ties the pipeline together: classify the file, parse it, run the
rule engine, validate design-system components and fold the violations into
statistics. Callers pass content in; nothing here touches the filesystem.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from types import TracebackType

from a11y_lens.components import ComponentValidator, validate_components
from a11y_lens.config import AppConfig
from a11y_lens.engine import RuleEngine
from a11y_lens.file_kinds import FileKind, classify, is_markup_kind
from a11y_lens.locator import line_count
from a11y_lens.models import (
    CategoryCount,
    FileAnalysis,
    FileMetadata,
    FileStatistics,
    ScanResult,
    ScanSummary,
    SourceFile,
    Violation,
)
from a11y_lens.parsers import ParseError, ScriptParser, SourceParser, create_parser
from a11y_lens.rules import RuleRegistry, build_registry
from a11y_lens.rules.base import RuleContext

logger = logging.getLogger(__name__)

FIX_MINUTES = {"error": 5, "warning": 2, "info": 1}
TOP_CATEGORY_LIMIT = 5
COMPONENT_TAG_RE = re.compile(r"<[A-Z][a-zA-Z]*\b")

# First matching tag wins.
CATEGORY_BY_TAG: tuple[tuple[str, str], ...] = (
    ("aria", "ARIA"),
    ("keyboard", "Keyboard Navigation"),
    ("alt-text", "Alternative Text"),
    ("images", "Alternative Text"),
    ("semantic", "Semantic HTML"),
    ("semantic-html", "Semantic HTML"),
    ("heading", "Heading Structure"),
    ("headings", "Heading Structure"),
    ("form", "Form Labels"),
    ("forms", "Form Labels"),
    ("focus", "Focus Management"),
    ("design-system", "Design System Components"),
    ("parse-error", "Parse Errors"),
    ("scan-error", "Scan Errors"),
)
CATEGORY_SUGGESTIONS: tuple[tuple[str, str], ...] = (
    (
        "ARIA",
        "Review ARIA attribute usage to ensure proper accessibility roles and relationships",
    ),
    (
        "Alternative Text",
        "Add descriptive alt text to images or mark decorative images appropriately",
    ),
    (
        "Keyboard Navigation",
        "Ensure all interactive elements are keyboard accessible with proper focus management",
    ),
    (
        "Semantic HTML",
        "Use semantic HTML elements instead of generic divs/buttons for better accessibility",
    ),
    (
        "Form Labels",
        "Associate every form control with a visible label or an accessible name",
    ),
    (
        "Focus Management",
        "Keep a visible focus indicator on every interactive element",
    ),
    (
        "Design System Components",
        "Use approved design system components to ensure accessibility compliance",
    ),
)
GENERAL_SUGGESTIONS = (
    "Consider running automated accessibility testing as part of your development workflow",
    "Review WCAG 2.2 AA guidelines for comprehensive accessibility best practices",
)


class ScanError(RuntimeError):
    """Scanning a single file failed unexpectedly."""


class Scanner:
    """Scans source files against a rule registry."""

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        *,
        validator: ComponentValidator | None = None,
        design_system_enabled: bool = False,
        validator_timeout_seconds: float = 5.0,
    ) -> None:
        self.registry = registry if registry is not None else build_registry()
        self.engine = RuleEngine(self.registry)
        self.validator = validator
        self.design_system_enabled = design_system_enabled
        self.validator_timeout_seconds = validator_timeout_seconds
        self._executor: ThreadPoolExecutor | None = None

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        validator: ComponentValidator | None = None,
        design_system_enabled: bool | None = None,
    ) -> Scanner:
        """Build a scanner from resolved config; raises ValueError on unknown rule ids."""
        registry = build_registry(
            enabled_rule_ids=config.rule_enable,
            disabled_rule_ids=config.rule_disable,
        )
        return cls(
            registry,
            validator=validator,
            design_system_enabled=(
                config.design_system.enabled
                if design_system_enabled is None
                else design_system_enabled
            ),
            validator_timeout_seconds=config.design_system.timeout_seconds,
        )

    def __enter__(self) -> Scanner:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def scan_file(self, file_path: str, content: str) -> FileAnalysis:
        """Scan one file's content; unknown file kinds yield an empty analysis."""
        kind = classify(file_path)
        if kind is FileKind.UNKNOWN:
            return build_file_analysis(file_path, kind, content, [])

        violations: list[Violation] = []
        parser = create_parser(content, file_path, kind)
        parsed: SourceParser | None = None
        if parser is not None:
            result = parser.parse()
            if result.has_errors:
                logger.debug(
                    "skipping structural rules for %s: %d parse errors",
                    file_path,
                    len(result.errors),
                )
                violations.extend(parse_error_violations(result.errors))
            else:
                parsed = parser

        context = RuleContext(
            content=content,
            file_path=file_path,
            file_kind=kind,
            parser=parsed,
            design_system_enabled=self.design_system_enabled,
        )
        violations.extend(self.engine.check_file(context))

        if (
            self.design_system_enabled
            and self.validator is not None
            and is_markup_kind(kind)
            and isinstance(parsed, ScriptParser)
        ):
            checked = validate_components(
                parsed,
                self.validator,
                self._validator_executor(),
                timeout_seconds=self.validator_timeout_seconds,
            )
            logger.debug(
                "validated components in %s in %dms with %d validator failures",
                file_path,
                checked.elapsed_ms,
                len(checked.failures),
            )
            violations.extend(checked.violations)

        return build_file_analysis(file_path, kind, content, violations)

    def scan_files(self, files: Iterable[SourceFile]) -> ScanResult:
        """Scan files in order; a failing file becomes a single scan-error analysis."""
        analyses: list[FileAnalysis] = []
        for source in files:
            try:
                analyses.append(self.scan_file(source.path, source.content))
            except Exception as exc:
                error = ScanError(f"{exc.__class__.__name__}: {exc}")
                logger.warning("Failed to scan %s: %s", source.path, error, exc_info=exc)
                analyses.append(scan_error_analysis(source, error))
        return build_scan_result(analyses)

    def _validator_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="a11y-lens-validator"
            )
        return self._executor


def parse_error_violations(errors: Iterable[ParseError]) -> list[Violation]:
    """One violation per distinct (message, line, column)."""
    seen: set[tuple[str, int, int]] = set()
    violations: list[Violation] = []
    for error in errors:
        key = (error.message, error.line, error.column)
        if key in seen:
            continue
        seen.add(key)
        violations.append(
            Violation(
                id="parse-error",
                severity="error",
                wcag_criteria=(),
                title="Parse Error",
                description=f"Failed to parse file: {error.message}",
                help="Check file syntax and structure",
                line=error.line,
                column=error.column,
                code=error.code,
                tags=("parse-error",),
            )
        )
    return violations


def scan_error_analysis(source: SourceFile, error: Exception) -> FileAnalysis:
    violation = Violation(
        id="scan-error",
        severity="error",
        wcag_criteria=(),
        title="Scan Error",
        description=f"Failed to scan file: {error}",
        help="Check file structure and syntax",
        line=1,
        column=1,
        code="",
        tags=("scan-error",),
    )
    return build_file_analysis(source.path, classify(source.path), source.content, [violation])


def build_file_analysis(
    file_path: str,
    kind: FileKind,
    content: str,
    violations: list[Violation],
) -> FileAnalysis:
    errors = sum(1 for item in violations if item.severity == "error")
    warnings = sum(1 for item in violations if item.severity == "warning")
    info = sum(1 for item in violations if item.severity == "info")
    return FileAnalysis(
        file_path=file_path,
        file_type=kind.value,
        content=content,
        violations=tuple(violations),
        statistics=FileStatistics(
            total_violations=len(violations),
            errors=errors,
            warnings=warnings,
            info=info,
            estimated_fix_minutes=estimate_fix_minutes(violations),
        ),
        metadata=FileMetadata(
            line_count=line_count(content),
            analyzed_at=_utc_timestamp(),
            component_count=count_components(content, kind),
        ),
    )


def build_scan_result(analyses: list[FileAnalysis]) -> ScanResult:
    violations = [item for analysis in analyses for item in analysis.violations]
    errors = sum(1 for item in violations if item.severity == "error")
    warnings = sum(1 for item in violations if item.severity == "warning")
    categories = category_counts(violations)
    summary = ScanSummary(
        total_files=len(analyses),
        total_violations=len(violations),
        files_with_violations=sum(1 for analysis in analyses if analysis.violations),
        compliance_score=max(0, 100 - (errors * 5 + warnings)),
        estimated_total_fix_minutes=sum(
            analysis.statistics.estimated_fix_minutes for analysis in analyses
        ),
        top_categories=tuple(categories[:TOP_CATEGORY_LIMIT]),
    )
    return ScanResult(
        files=tuple(analyses),
        summary=summary,
        suggestions=tuple(generate_suggestions(categories)),
    )


def estimate_fix_minutes(violations: Iterable[Violation]) -> int:
    return sum(FIX_MINUTES[item.severity] for item in violations)


def count_components(content: str, kind: FileKind) -> int | None:
    """Count capitalised tags in markup files; other kinds report no count."""
    if not is_markup_kind(kind):
        return None
    return len(COMPONENT_TAG_RE.findall(content))


def violation_category(violation: Violation) -> str:
    for tag, category in CATEGORY_BY_TAG:
        if tag in violation.tags:
            return category
    return "Other"


def category_counts(violations: Iterable[Violation]) -> list[CategoryCount]:
    """Counts per category, largest first; ties keep first-seen order."""
    counts: dict[str, int] = {}
    for violation in violations:
        category = violation_category(violation)
        counts[category] = counts.get(category, 0) + 1
    ordered = sorted(counts.items(), key=lambda item: -item[1])
    return [CategoryCount(category=category, count=count) for category, count in ordered]


def generate_suggestions(categories: Iterable[CategoryCount]) -> list[str]:
    present = {item.category for item in categories if item.count > 0}
    suggestions = [text for category, text in CATEGORY_SUGGESTIONS if category in present]
    suggestions.extend(GENERAL_SUGGESTIONS)
    return suggestions


def _utc_timestamp() -> str:
    return datetime.now(tz=UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
