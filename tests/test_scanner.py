"""Tests for per-file and batch scanning."""

from __future__ import annotations

import logging

import pytest

from a11y_lens import scanner as scanner_module
from a11y_lens.components import RequiredPropsValidator
from a11y_lens.config import AppConfig, DesignSystemConfig
from a11y_lens.models import SourceFile, Violation
from a11y_lens.parsers import ParseError
from a11y_lens.scanner import (
    Scanner,
    build_scan_result,
    category_counts,
    generate_suggestions,
    parse_error_violations,
)

IMG_WITHOUT_ALT = 'const A = () => <img src="a.png" />;\n'


def _violation(violation_id: str, severity: str, *tags: str) -> Violation:
    return Violation(
        id=violation_id,
        severity=severity,  # type: ignore[arg-type]
        wcag_criteria=(),
        title=violation_id,
        description="",
        help="",
        line=1,
        column=1,
        code="",
        tags=tags,
    )


def test_scan_file_reports_missing_alt_with_statistics() -> None:
    analysis = Scanner().scan_file("src/App.jsx", IMG_WITHOUT_ALT)

    assert [(item.id, item.line, item.column) for item in analysis.violations] == [
        ("img-missing-alt", 1, 17)
    ]
    assert analysis.file_type == "jsx"
    assert analysis.statistics.errors == 1
    assert analysis.statistics.estimated_fix_time == "5 minutes"
    assert analysis.metadata.line_count == 2
    assert analysis.metadata.component_count == 0
    assert analysis.metadata.analyzed_at.endswith("Z")


def test_parse_errors_become_violations_and_skip_structural_rules() -> None:
    analysis = Scanner().scan_file("util.js", "const x = (1, 2;")

    assert [(item.id, item.line, item.column) for item in analysis.violations] == [
        ("parse-error", 1, 11)
    ]
    assert analysis.violations[0].description == "Failed to parse file: Unclosed '('"
    assert analysis.violations[0].tags == ("parse-error",)


def test_pattern_rules_still_run_on_unparsable_markup() -> None:
    source = 'const A = () => <div><img src="a.png"></span></div>;\n'
    analysis = Scanner().scan_file("App.jsx", source)

    ids = [item.id for item in analysis.violations]
    assert ids[0] == "parse-error"
    assert "img-missing-alt" in ids


def test_parse_error_violations_are_deduplicated() -> None:
    errors = [
        ParseError("Unexpected token", 2, 4, "x"),
        ParseError("Unexpected token", 2, 4, "x"),
        ParseError("Unexpected token", 3, 1, "y"),
    ]

    assert [(item.line, item.column) for item in parse_error_violations(errors)] == [
        (2, 4),
        (3, 1),
    ]


def test_unknown_file_kind_yields_empty_analysis() -> None:
    analysis = Scanner().scan_file("notes.md", "<img src='a.png'>")

    assert analysis.violations == ()
    assert analysis.file_type == "unknown"
    assert analysis.metadata.component_count is None


def test_failing_file_becomes_scan_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(scanner_module, "create_parser", boom)
    result = Scanner().scan_files(
        [SourceFile("broken.jsx", "<div />"), SourceFile("notes.md", "plain")]
    )

    broken = result.files[0]
    assert [item.id for item in broken.violations] == ["scan-error"]
    assert broken.violations[0].description == "Failed to scan file: RuntimeError: boom"
    assert (broken.violations[0].line, broken.violations[0].column) == (1, 1)
    assert result.summary.total_files == 2
    assert result.summary.files_with_violations == 1


def test_scan_files_summarises_score_and_categories() -> None:
    result = Scanner().scan_files(
        [
            SourceFile("App.jsx", IMG_WITHOUT_ALT),
            SourceFile("clean.jsx", "const B = () => <p>Hello</p>;\n"),
        ]
    )

    summary = result.summary
    assert (summary.total_files, summary.total_violations, summary.files_with_violations) == (
        2,
        1,
        1,
    )
    assert summary.compliance_score == 95
    assert summary.estimated_total_fix_time == "5 minutes"
    assert [(item.category, item.count) for item in summary.top_categories] == [
        ("Alternative Text", 1)
    ]
    assert result.suggestions[0].startswith("Add descriptive alt text")
    assert len(result.suggestions) == 3


def test_empty_batch_scores_full_marks() -> None:
    result = build_scan_result([])

    assert result.summary.compliance_score == 100
    assert result.summary.estimated_total_fix_time == "0 minutes"
    assert len(result.suggestions) == 2


def test_category_counts_order_and_fallback() -> None:
    violations = [
        _violation("a", "error", "aria"),
        _violation("b", "warning", "focus"),
        _violation("c", "info", "focus"),
        _violation("d", "error", "custom"),
        _violation("e", "error", "keyboard", "aria"),
    ]

    counts = [(item.category, item.count) for item in category_counts(violations)]
    assert counts == [("ARIA", 2), ("Focus Management", 2), ("Other", 1)]
    suggestions = generate_suggestions(category_counts(violations))
    assert suggestions[0].startswith("Review ARIA attribute usage")
    assert suggestions[1].startswith("Keep a visible focus indicator")


def test_component_count_for_markup_files() -> None:
    source = "const A = () => <Layout><Button>Go</Button><div /></Layout>;\n"

    assert Scanner().scan_file("A.tsx", source).metadata.component_count == 2


def test_design_system_rule_and_validator() -> None:
    source = "const A = () => <div><Modal open>Body</Modal><Widget /></div>;\n"
    with Scanner(validator=RequiredPropsValidator(), design_system_enabled=True) as scanner:
        analysis = scanner.scan_file("A.jsx", source)

    assert [(item.id, item.severity) for item in analysis.violations] == [
        ("ds-non-standard-component", "warning"),
        ("ds-component-error", "error"),
    ]
    modal = analysis.violations[1]
    assert modal.description == "Modal needs a title, aria-label or aria-labelledby"
    assert modal.code == "<Modal open>"


def test_validator_is_ignored_when_design_system_disabled() -> None:
    source = "const A = () => <Modal open>Body</Modal>;\n"
    with Scanner(validator=RequiredPropsValidator()) as scanner:
        assert scanner.scan_file("A.jsx", source).violations == ()


def test_from_config_applies_rule_filters_and_design_system() -> None:
    config = AppConfig(
        rule_enable=["img-missing-alt"],
        design_system=DesignSystemConfig(enabled=True, timeout_seconds=1.5),
    )
    scanner = Scanner.from_config(config)

    assert scanner.registry.rule_ids == ("img-missing-alt",)
    assert scanner.design_system_enabled is True
    assert scanner.validator_timeout_seconds == 1.5
    assert Scanner.from_config(config, design_system_enabled=False).design_system_enabled is False

    with pytest.raises(ValueError, match="Unknown rule ids"):
        Scanner.from_config(AppConfig(rule_disable=["missing"]))


def test_validator_timing_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    source = "const A = () => <Modal open>Body</Modal>;\n"
    with caplog.at_level(logging.DEBUG, logger="a11y_lens.scanner"):
        with Scanner(validator=RequiredPropsValidator(), design_system_enabled=True) as scanner:
            scanner.scan_file("A.jsx", source)

    assert "validated components in A.jsx in" in caplog.text
    assert "with 0 validator failures" in caplog.text


def test_html_files_get_element_rules() -> None:
    source = (
        '<html lang="en"><title>x</title>'
        '<div role="btn" tabindex="3">x</div><h1></h1></html>'
    )
    analysis = Scanner().scan_file("x.html", source)

    ids = {item.id for item in analysis.violations}
    assert {"aria-invalid-role", "tabindex-positive", "heading-empty"} <= ids
    assert "parse-error" not in ids


@pytest.mark.parametrize("line_break", ["\r", "\f"])
def test_stylesheet_lines_ignore_lone_cr_and_form_feed(line_break: str) -> None:
    source = f"a:focus {{{line_break}  outline: none;{line_break}}}{line_break}"
    analysis = Scanner().scan_file("app.css", source)

    by_id = {item.id: (item.line, item.column) for item in analysis.violations}
    assert analysis.metadata.line_count == 1
    assert by_id["focus-style-removed"] == by_id["outline-none-no-alternative"] == (1, 13)
