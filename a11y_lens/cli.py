"""CLI entrypoint for a11y-lens."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Annotated, Any

import typer

from a11y_lens import __version__
from a11y_lens.components import RequiredPropsValidator
from a11y_lens.config import (
    FAIL_ON_CHOICES,
    OUTPUT_FORMATS,
    AppConfig,
    default_config_template,
    load_app_config,
)
from a11y_lens.fixes import suggest_fix
from a11y_lens.models import SEVERITY_RANK, SourceFile, Violation
from a11y_lens.output import render_file_human, render_file_json, render_human, render_json
from a11y_lens.rules import RuleRegistry, build_registry, list_rule_info
from a11y_lens.scanner import Scanner
from a11y_lens.sources import SourceReadError, collect_paths, read_sources

VIOLATIONS_EXIT_CODE = 3
LOG_LEVELS = {"debug", "info", "warning", "error"}

RepoOption = Annotated[
    Path, typer.Option("--repo", help="Project root for config lookup and relative paths.")
]
ConfigOption = Annotated[
    Path | None, typer.Option("--config", help="Config TOML to use instead of the lookup.")
]
FormatOption = Annotated[
    str | None, typer.Option("--format", help="human|json (config default: human).")
]
FailOnOption = Annotated[
    str | None,
    typer.Option(
        "--fail-on", help="Exit 3 when a violation reaches error|warning|info; never to disable."
    ),
]
DesignSystemOption = Annotated[
    bool | None,
    typer.Option(
        "--design-system/--no-design-system",
        help="Validate design-system components (overrides config).",
    ),
]

app = typer.Typer(
    name="a11y-lens",
    no_args_is_help=True,
    help="Check web source files against WCAG 2.2 AA accessibility rules.",
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Print the a11y-lens version.", callback=_print_version),
    ] = False,
    log_level: Annotated[
        str, typer.Option("--log-level", help="debug|info|warning|error, written to stderr.")
    ] = "warning",
) -> None:
    """Accessibility checks for JS/TS/JSX/TSX, HTML and CSS/SCSS."""
    _ = version
    level = _choice_or_default(
        value=log_level, default="warning", allowed=LOG_LEVELS, field_name="--log-level"
    )
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("check")
def check_command(
    file: Annotated[Path, typer.Argument(help="File to check.")],
    repo: RepoOption = Path("."),
    format: FormatOption = None,
    fail_on: FailOnOption = None,
    design_system: DesignSystemOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Check a single file for accessibility violations."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = _output_format(format, app_config)
    threshold = _fail_threshold(fail_on, app_config)
    if not file.is_file():
        raise typer.BadParameter(f"File does not exist: {file}", param_hint="FILE")
    try:
        sources = read_sources([file], root=repo)
    except SourceReadError as exc:
        raise typer.BadParameter(str(exc), param_hint="FILE") from exc

    with _build_scanner(app_config, design_system) as scanner:
        analysis = scanner.scan_files(sources).files[0]

    if output_format == "json":
        typer.echo(render_file_json(analysis, config_source=app_config.source))
    else:
        typer.echo(render_file_human(analysis))
    _exit_on_violations(analysis.violations, threshold)


@app.command("scan")
def scan_command(
    paths: Annotated[list[Path], typer.Argument(help="Files or directories to scan.")],
    repo: RepoOption = Path("."),
    format: FormatOption = None,
    fail_on: FailOnOption = None,
    include: Annotated[
        list[str] | None, typer.Option(help="Glob a walked file must match (repeatable).")
    ] = None,
    exclude: Annotated[
        list[str] | None, typer.Option(help="Glob that drops a walked file (repeatable).")
    ] = None,
    design_system: DesignSystemOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Scan files and directories and print a compliance report."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = _output_format(format, app_config)
    threshold = _fail_threshold(fail_on, app_config)
    sources = _collect_sources_or_raise(
        paths,
        repo=repo,
        includes=app_config.include if include is None else include,
        excludes=app_config.exclude if exclude is None else exclude,
    )

    with _build_scanner(app_config, design_system) as scanner:
        result = scanner.scan_files(sources)

    if output_format == "json":
        input_source = ",".join(path.as_posix() for path in paths)
        typer.echo(render_json(result, input_source=input_source, config_source=app_config.source))
    else:
        typer.echo(render_human(result))
    _exit_on_violations(
        (item for analysis in result.files for item in analysis.violations), threshold
    )


@app.command("suggest-fix")
def suggest_fix_command(
    violation_id: Annotated[str, typer.Argument(help="Violation id, e.g. img-missing-alt.")],
    code: Annotated[str, typer.Option(help="Offending code snippet, echoed back.")] = "",
    format: FormatOption = None,
) -> None:
    """Print remediation suggestions for a violation id."""
    result = suggest_fix(violation_id, code)
    if _output_format(format) == "json":
        typer.echo(json.dumps(result.to_dict(), sort_keys=True))
        return
    lines = [f"Suggestions for {violation_id}:"]
    lines.extend(f"{index}. {text}" for index, text in enumerate(result.suggestions, start=1))
    typer.echo("\n".join(lines))


@app.command("rules")
def rules_command(
    repo: RepoOption = Path("."),
    format: FormatOption = None,
    config_file: ConfigOption = None,
) -> None:
    """List the rule catalogue and which rules the config enables."""
    output_format = _output_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    active_ids = set(_build_registry_or_raise(app_config).rule_ids)

    entries = [
        {
            "rule_id": item.rule_id,
            "name": item.name,
            "description": item.description,
            "mode": item.mode,
            "severity": item.severity,
            "wcag_criteria": list(item.wcag_criteria),
            "applies_to": list(item.applies_to),
            "enabled": item.rule_id in active_ids,
        }
        for item in list_rule_info()
    ]
    if output_format == "json":
        payload = {"rules": entries, "meta": {"config_source": app_config.source}}
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [f"{len(active_ids)} of {len(entries)} rules enabled:"]
    for entry in entries:
        marker = "x" if entry["enabled"] else " "
        criteria = ", ".join(entry["wcag_criteria"]) or "-"
        lines.append(
            f"[{marker}] {entry['rule_id']} ({entry['mode']}, WCAG {criteria}): "
            f"{entry['description']}"
        )
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    repo: RepoOption = Path("."),
    format: FormatOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Show the resolved configuration and the active rule ids."""
    output_format = _output_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    payload = app_config.to_dict()
    payload["active_rule_ids"] = list(_build_registry_or_raise(app_config).rule_ids)

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    if payload["source"] is None:
        payload["source"] = "defaults"
    lines = ["Resolved configuration:"]
    lines.extend(f"- {key}: {value}" for key, value in _flatten(payload))
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Where to write the starter config.")] = Path(
        ".a11y-lens.toml"
    ),
    force: Annotated[bool, typer.Option("--force", help="Replace an existing file.")] = False,
) -> None:
    """Write a starter .a11y-lens.toml."""
    target = out.resolve()
    if target.exists() and not force:
        raise typer.BadParameter(f"{target} already exists; pass --force to replace it.")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {target}")


@app.command("config-validate")
def config_validate_command(
    repo: RepoOption = Path("."),
    config_file: Annotated[
        Path, typer.Option("--config", help="Config TOML to validate.")
    ] = Path(".a11y-lens.toml"),
    format: FormatOption = None,
) -> None:
    """Validate a config file, including its rule ids."""
    output_format = _output_format(format)
    app_config = _load_config_or_raise(repo, config_file)
    active_rule_ids = list(_build_registry_or_raise(app_config).rule_ids)
    if output_format == "json":
        payload = {"ok": True, "source": app_config.source, "active_rule_ids": active_rule_ids}
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    typer.echo(
        f"Config is valid: {app_config.source}\n"
        f"- active_rule_ids: {active_rule_ids}"
    )


def main() -> None:
    """Console script entrypoint."""
    app()


def _exit_on_violations(violations: Iterable[Violation], threshold: str) -> None:
    if _should_fail(violations, threshold):
        raise typer.Exit(code=VIOLATIONS_EXIT_CODE)


def _should_fail(violations: Iterable[Violation], threshold: str) -> bool:
    if threshold == "never":
        return False
    floor = SEVERITY_RANK[threshold]
    return any(SEVERITY_RANK[item.severity] >= floor for item in violations)


def _flatten(payload: dict[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    for key, value in payload.items():
        if isinstance(value, dict):
            yield from _flatten(value, f"{prefix}{key}.")
        else:
            yield f"{prefix}{key}", value


def _build_scanner(app_config: AppConfig, design_system: bool | None) -> Scanner:
    enabled = app_config.design_system.enabled if design_system is None else design_system
    try:
        return Scanner.from_config(
            app_config,
            validator=RequiredPropsValidator() if enabled else None,
            design_system_enabled=enabled,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc


def _collect_sources_or_raise(
    paths: list[Path], *, repo: Path, includes: list[str], excludes: list[str]
) -> list[SourceFile]:
    try:
        found = collect_paths(paths, root=repo, includes=includes, excludes=excludes)
        return read_sources(found, root=repo)
    except SourceReadError as exc:
        raise typer.BadParameter(str(exc), param_hint="PATHS") from exc


def _load_config_or_raise(repo: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(repo, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_registry_or_raise(app_config: AppConfig) -> RuleRegistry:
    try:
        return build_registry(
            enabled_rule_ids=app_config.rule_enable,
            disabled_rule_ids=app_config.rule_disable,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc


def _output_format(value: str | None, app_config: AppConfig | None = None) -> str:
    default = app_config.format if app_config is not None else "human"
    return _choice_or_default(
        value=value, default=default, allowed=OUTPUT_FORMATS, field_name="--format"
    )


def _fail_threshold(value: str | None, app_config: AppConfig) -> str:
    return _choice_or_default(
        value=value, default=app_config.fail_on, allowed=FAIL_ON_CHOICES, field_name="--fail-on"
    )


def _choice_or_default(
    *,
    value: str | None,
    default: str,
    allowed: set[str],
    field_name: str,
) -> str:
    resolved = (value or default).lower()
    if resolved not in allowed:
        choices = ", ".join(sorted(allowed))
        raise typer.BadParameter(f"{field_name} must be one of: {choices}", param_hint=field_name)
    return resolved
