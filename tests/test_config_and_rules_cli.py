"""Tests for config loading and the rules/config CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from a11y_lens.cli import app
from a11y_lens.config import DEFAULT_EXCLUDE, load_app_config

runner = CliRunner()


def _write(path: Path, *lines: str) -> Path:
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def test_load_app_config_prefers_dot_file_over_pyproject(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", "[tool.a11y_lens]", 'format = "human"', 'fail_on = "info"')
    _write(
        tmp_path / ".a11y-lens.toml",
        'format = "json"',
        'fail_on = "warning"',
        'include = ["src/**"]',
        "",
        "[rules]",
        'enable = ["alt-text"]',
        'disable = ["skip-links"]',
        "",
        "[design_system]",
        "enabled = true",
        "timeout_seconds = 2",
    )

    config = load_app_config(tmp_path)
    assert config.format == "json"
    assert config.fail_on == "warning"
    assert config.include == ["src/**"]
    assert config.exclude == DEFAULT_EXCLUDE
    assert config.rule_enable == ["alt-text"]
    assert config.rule_disable == ["skip-links"]
    assert config.design_system.enabled is True
    assert config.design_system.timeout_seconds == 2.0
    assert config.source == str(tmp_path.resolve() / ".a11y-lens.toml")


def test_load_app_config_reads_pyproject_hyphenated_key(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", "[tool.a11y-lens]", 'fail_on = "never"', "exclude = []")

    config = load_app_config(tmp_path)
    assert config.fail_on == "never"
    assert config.exclude == []
    assert config.source == str(tmp_path.resolve() / "pyproject.toml")


def test_load_app_config_defaults_without_files(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", "[project]", 'name = "site"')

    config = load_app_config(tmp_path)
    assert config.source is None
    assert config.format == "human"
    assert config.rule_enable is None
    assert config.design_system.enabled is False


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ('fail_on = "sometimes"', "fail_on must be one of"),
        ("[design_system]\ntimeout_seconds = 0", "timeout_seconds must be > 0"),
        ('[design_system]\nenabled = "yes"', "design_system.enabled must be a boolean"),
        ("include = 3", "include must be a list of strings"),
        ("rules = 1", "rules must be a table"),
        ("format = [", "Invalid TOML"),
    ],
)
def test_invalid_config_values_raise(tmp_path: Path, body: str, message: str) -> None:
    _write(tmp_path / ".a11y-lens.toml", body)

    with pytest.raises(ValueError, match=message):
        load_app_config(tmp_path)


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Config file does not exist"):
        load_app_config(tmp_path, config_path=Path("missing.toml"))


def test_rules_command_json_marks_disabled_rules(tmp_path: Path) -> None:
    _write(tmp_path / ".a11y-lens.toml", "[rules]", 'disable = ["alt-text"]')

    result = runner.invoke(app, ["rules", "--repo", str(tmp_path), "--format", "json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    by_id = {item["rule_id"]: item for item in payload["rules"]}
    assert len(by_id) == 28
    assert by_id["alt-text"]["enabled"] is False
    assert by_id["aria-required"]["enabled"] is True
    assert by_id["aria-required"]["wcag_criteria"] == ["1.3.1", "4.1.2", "4.1.3"]
    assert payload["meta"]["config_source"].endswith(".a11y-lens.toml")


def test_config_command_reports_active_rules(tmp_path: Path) -> None:
    _write(tmp_path / ".a11y-lens.toml", "[rules]", 'enable = ["font-size", "aria-required"]')

    result = runner.invoke(app, ["config", "--repo", str(tmp_path), "--format", "json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["active_rule_ids"] == ["aria-required", "font-size"]
    assert payload["design_system"] == {"enabled": False, "timeout_seconds": 5.0}

    human = runner.invoke(app, ["config", "--repo", str(tmp_path)])
    assert "- design_system.enabled: False" in human.stdout


def test_config_init_writes_template_and_refuses_overwrite(tmp_path: Path) -> None:
    out = tmp_path / ".a11y-lens.toml"

    first = runner.invoke(app, ["config-init", "--out", str(out)])
    assert first.exit_code == 0
    assert "[design_system]" in out.read_text(encoding="utf-8")
    assert load_app_config(tmp_path).fail_on == "error"

    second = runner.invoke(app, ["config-init", "--out", str(out)])
    assert second.exit_code == 2

    forced = runner.invoke(app, ["config-init", "--out", str(out), "--force"])
    assert forced.exit_code == 0


def test_config_validate_rejects_unknown_rule_ids(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "strict.toml", "[rules]", 'enable = ["bogus"]')

    result = runner.invoke(
        app, ["config-validate", "--repo", str(tmp_path), "--config", str(config_path)]
    )
    assert result.exit_code == 2
    assert "Unknown rule ids: bogus" in result.output


def test_config_validate_json(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "ok.toml", "[rules]", 'enable = ["alt-text"]')

    result = runner.invoke(
        app,
        [
            "config-validate",
            "--repo",
            str(tmp_path),
            "--config",
            str(config_path),
            "--format",
            "json",
        ],
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "active_rule_ids": ["alt-text"],
        "ok": True,
        "source": str(config_path),
    }
