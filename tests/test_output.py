"""Output rendering tests."""

from __future__ import annotations

import json

import click

from a11y_lens.file_kinds import FileKind
from a11y_lens.models import Violation
from a11y_lens.output import render_file_human, render_human, render_json
from a11y_lens.scanner import build_file_analysis, build_scan_result


def _violation(violation_id: str, severity: str, line: int, *tags: str) -> Violation:
    return Violation(
        id=violation_id,
        severity=severity,  # type: ignore[arg-type]
        wcag_criteria=("1.1.1",) if severity == "error" else (),
        title=violation_id.replace("-", " ").title(),
        description=f"{violation_id} description",
        help=f"{violation_id} help",
        line=line,
        column=3,
        code="<img src='a.png'>\n  more" if severity == "error" else "",
        tags=tags,
    )


def _result():
    broken = build_file_analysis(
        "src/App.jsx",
        FileKind.JSX,
        "x\n" * 12,
        [
            _violation("img-missing-alt", "error", 4, "images"),
            _violation("heading-empty", "warning", 9, "heading"),
        ],
    )
    clean = build_file_analysis("src/ok.css", FileKind.CSS, "a {}", [])
    return build_scan_result([broken, clean])


def test_render_human_summary_files_and_suggestions() -> None:
    output = click.unstyle(render_human(_result()))

    assert "Compliance score: 94/100" in output
    assert "2 violations in 1 of 2 files, estimated fix time 7 minutes" in output
    assert "src/App.jsx (jsx): 1 errors, 1 warnings, 0 info" in output
    assert "  src/App.jsx:4:3 ERROR [img-missing-alt] WCAG 1.1.1" in output
    assert "  src/App.jsx:9:3 WARNING [heading-empty]\n" in output
    assert "    code: <img src='a.png'>\n" in output
    assert "src/ok.css" not in output
    assert "- Alternative Text: 1" in output
    assert "- Heading Structure: 1" in output
    assert "1. Add descriptive alt text" in output


def test_render_human_colors_score_by_band() -> None:
    assert click.style("Compliance score: 94/100", fg="green", bold=True) in render_human(
        _result()
    )
    assert click.style("Compliance score: 100/100", fg="green", bold=True) in render_human(
        build_scan_result([])
    )


def test_render_file_human_for_clean_file() -> None:
    clean = build_file_analysis("index.html", FileKind.HTML, "<p>ok</p>", [])

    output = click.unstyle(render_file_human(clean))
    assert output.splitlines() == [
        "index.html (html): 0 errors, 0 warnings, 0 info",
        "No accessibility violations found.",
    ]


def test_render_json_is_stable_and_camel_cased() -> None:
    payload = json.loads(
        render_json(_result(), input_source="src", config_source="/repo/.a11y-lens.toml")
    )

    assert set(payload) == {"files", "summary", "suggestions", "meta"}
    assert payload["meta"]["input_source"] == "src"
    assert payload["meta"]["config_source"] == "/repo/.a11y-lens.toml"
    assert payload["meta"]["generated_at"].endswith("Z")
    first = payload["files"][0]
    assert first["metadata"]["lineCount"] == 13
    assert first["metadata"]["componentCount"] == 0
    assert "componentCount" not in payload["files"][1]["metadata"]
    assert first["violations"][0]["fixSuggestions"] == []
    assert payload["summary"]["estimatedTotalFixTime"] == "7 minutes"
