"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from a11y_lens import __version__
from a11y_lens.models import FileAnalysis, ScanResult, Violation

SEVERITY_COLORS = {"error": "red", "warning": "yellow", "info": "blue"}


def render_human(result: ScanResult) -> str:
    """Render a compact colorized report."""
    summary = result.summary
    lines: list[str] = [
        click.style(
            f"Compliance score: {summary.compliance_score}/100",
            fg=_score_color(summary.compliance_score),
            bold=True,
        ),
        (
            f"{summary.total_violations} violations in {summary.files_with_violations} of "
            f"{summary.total_files} files, estimated fix time "
            f"{summary.estimated_total_fix_time}"
        ),
    ]

    for analysis in result.files:
        if analysis.violations:
            lines.extend(render_file_lines(analysis))

    if summary.top_categories:
        lines.append(click.style("Top categories:", bold=True))
        for item in summary.top_categories:
            lines.append(f"- {item.category}: {item.count}")

    lines.append(click.style("Suggestions:", bold=True))
    for index, suggestion in enumerate(result.suggestions, start=1):
        lines.append(f"{index}. {suggestion}")
    return "\n".join(lines)


def render_file_human(analysis: FileAnalysis) -> str:
    lines = render_file_lines(analysis)
    if not analysis.violations:
        lines.append(click.style("No accessibility violations found.", fg="green"))
    return "\n".join(lines)


def render_file_lines(analysis: FileAnalysis) -> list[str]:
    stats = analysis.statistics
    lines = [
        click.style(
            f"{analysis.file_path} ({analysis.file_type}): {stats.errors} errors, "
            f"{stats.warnings} warnings, {stats.info} info",
            bold=True,
        )
    ]
    for violation in analysis.violations:
        lines.extend(_violation_lines(analysis.file_path, violation))
    return lines


def _violation_lines(file_path: str, violation: Violation) -> list[str]:
    severity = click.style(
        violation.severity.upper(), fg=SEVERITY_COLORS.get(violation.severity)
    )
    criteria = ", ".join(violation.wcag_criteria)
    header = f"  {file_path}:{violation.line}:{violation.column} {severity} [{violation.id}]"
    if criteria:
        header = f"{header} WCAG {criteria}"
    lines = [header, f"    {violation.title}: {violation.description}"]
    if violation.code:
        lines.append(f"    code: {violation.code.splitlines()[0].strip()}")
    lines.append(f"    help: {violation.help}")
    return lines


def render_json(result: ScanResult, *, input_source: str, config_source: str | None) -> str:
    """Render stable JSON output for CI and automation."""
    payload = build_json_payload(result, input_source=input_source, config_source=config_source)
    return json.dumps(payload, sort_keys=True)


def render_file_json(analysis: FileAnalysis, *, config_source: str | None) -> str:
    payload = analysis.to_dict()
    payload["meta"] = _meta(input_source=analysis.file_path, config_source=config_source)
    return json.dumps(payload, sort_keys=True)


def build_json_payload(
    result: ScanResult,
    *,
    input_source: str,
    config_source: str | None,
) -> dict[str, Any]:
    payload = result.to_dict()
    payload["meta"] = _meta(input_source=input_source, config_source=config_source)
    return payload


def _meta(*, input_source: str, config_source: str | None) -> dict[str, Any]:
    return {
        "generated_at": datetime.now(tz=UTC)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z"),
        "input_source": input_source,
        "config_source": config_source,
        "version": __version__,
    }


def _score_color(score: int) -> str:
    if score >= 90:
        return "green"
    if score >= 70:
        return "yellow"
    return "red"
