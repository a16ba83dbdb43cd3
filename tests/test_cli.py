"""CLI tests for check, scan and suggest-fix."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from a11y_lens import __version__
from a11y_lens.cli import VIOLATIONS_EXIT_CODE, app

runner = CliRunner()

IMG_WITHOUT_ALT = 'const A = () => <img src="a.png" />;\n'
CLEAN = "const B = () => <p>Hello</p>;\n"


def _project(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    (src / "legacy").mkdir(parents=True)
    (src / "App.jsx").write_text(IMG_WITHOUT_ALT, encoding="utf-8")
    (src / "Clean.jsx").write_text(CLEAN, encoding="utf-8")
    (src / "legacy" / "Old.jsx").write_text(IMG_WITHOUT_ALT, encoding="utf-8")
    (src / "README.md").write_text("<img src='x.png'>", encoding="utf-8")
    return tmp_path


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_check_reports_violation_and_exits_nonzero(tmp_path: Path) -> None:
    repo = _project(tmp_path)

    result = runner.invoke(app, ["check", str(repo / "src" / "App.jsx"), "--repo", str(repo)])
    assert result.exit_code == VIOLATIONS_EXIT_CODE
    assert "src/App.jsx (jsx): 1 errors, 0 warnings, 0 info" in result.stdout
    assert "  src/App.jsx:1:17 ERROR [img-missing-alt] WCAG 1.1.1" in result.stdout
    assert '    code: <img src="a.png" />' in result.stdout


def test_check_clean_file_exits_zero(tmp_path: Path) -> None:
    repo = _project(tmp_path)

    result = runner.invoke(app, ["check", str(repo / "src" / "Clean.jsx"), "--repo", str(repo)])
    assert result.exit_code == 0
    assert "No accessibility violations found." in result.stdout


def test_check_fail_on_never_and_json(tmp_path: Path) -> None:
    repo = _project(tmp_path)

    result = runner.invoke(
        app,
        [
            "check",
            str(repo / "src" / "App.jsx"),
            "--repo",
            str(repo),
            "--fail-on",
            "never",
            "--format",
            "json",
        ],
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["filePath"] == "src/App.jsx"
    assert payload["statistics"]["estimatedFixTime"] == "5 minutes"
    assert payload["violations"][0]["wcagCriteria"] == ["1.1.1"]
    assert payload["meta"]["version"] == __version__
    assert payload["meta"]["config_source"] is None


def test_check_respects_config_fail_on(tmp_path: Path) -> None:
    repo = _project(tmp_path)
    (repo / ".a11y-lens.toml").write_text('fail_on = "never"\n', encoding="utf-8")

    result = runner.invoke(app, ["check", str(repo / "src" / "App.jsx"), "--repo", str(repo)])
    assert result.exit_code == 0


def test_check_with_design_system_flag(tmp_path: Path) -> None:
    page = tmp_path / "Page.tsx"
    page.write_text("const P = () => <Modal open>Body</Modal>;\n", encoding="utf-8")

    plain = runner.invoke(app, ["check", str(page), "--repo", str(tmp_path)])
    assert plain.exit_code == 0

    checked = runner.invoke(
        app, ["check", str(page), "--repo", str(tmp_path), "--design-system", "--format", "json"]
    )
    assert checked.exit_code == VIOLATIONS_EXIT_CODE
    ids = [item["id"] for item in json.loads(checked.stdout)["violations"]]
    assert ids == ["ds-component-error"]


def test_check_rejects_bad_format_and_missing_file(tmp_path: Path) -> None:
    repo = _project(tmp_path)

    bad_format = runner.invoke(
        app, ["check", str(repo / "src" / "App.jsx"), "--repo", str(repo), "--format", "xml"]
    )
    assert bad_format.exit_code == 2

    missing = runner.invoke(app, ["check", str(repo / "nope.jsx"), "--repo", str(repo)])
    assert missing.exit_code == 2


def test_scan_directory_with_exclude_json(tmp_path: Path) -> None:
    repo = _project(tmp_path)

    result = runner.invoke(
        app,
        [
            "scan",
            str(repo / "src"),
            "--repo",
            str(repo),
            "--exclude",
            "src/legacy/**",
            "--format",
            "json",
        ],
    )
    assert result.exit_code == VIOLATIONS_EXIT_CODE
    payload = json.loads(result.stdout)
    assert [item["filePath"] for item in payload["files"]] == ["src/App.jsx", "src/Clean.jsx"]
    summary = payload["summary"]
    assert summary["totalFiles"] == 2
    assert summary["filesWithViolations"] == 1
    assert summary["complianceScore"] == 95
    assert summary["topCategories"] == [{"category": "Alternative Text", "count": 1}]
    assert payload["meta"]["input_source"] == (repo / "src").as_posix()


def test_scan_human_summary(tmp_path: Path) -> None:
    repo = _project(tmp_path)

    result = runner.invoke(app, ["scan", str(repo / "src"), "--repo", str(repo)])
    assert result.exit_code == VIOLATIONS_EXIT_CODE
    assert "Compliance score: 90/100" in result.stdout
    assert "2 violations in 2 of 3 files, estimated fix time 10 minutes" in result.stdout
    assert "- Alternative Text: 2" in result.stdout


def test_scan_missing_path_is_bad_parameter(tmp_path: Path) -> None:
    result = runner.invoke(app, ["scan", str(tmp_path / "missing"), "--repo", str(tmp_path)])
    assert result.exit_code == 2


def test_suggest_fix_known_and_unknown_ids() -> None:
    known = runner.invoke(
        app, ["suggest-fix", "img-missing-alt", "--code", "<img src='a.png'>", "--format", "json"]
    )
    assert known.exit_code == 0
    payload = json.loads(known.stdout)
    assert payload["violationId"] == "img-missing-alt"
    assert payload["code"] == "<img src='a.png'>"
    assert len(payload["suggestions"]) == 3

    unknown = runner.invoke(app, ["suggest-fix", "made-up-id"])
    assert unknown.exit_code == 0
    assert "1. Review WCAG 2.2 documentation for this violation" in unknown.stdout
    assert "2. Consult with accessibility team for specific guidance" in unknown.stdout
