"""Configuration loading for a11y-lens.

Lookup order: an explicit ``--config`` path, then ``.a11y-lens.toml`` and
``a11y-lens.toml`` in the project root, then a ``[tool.a11y_lens]`` (or
``[tool."a11y-lens"]``) table in ``pyproject.toml``. Without any of these the
defaults apply.
"""

from __future__ import annotations

import tomllib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_FILENAMES = (".a11y-lens.toml", "a11y-lens.toml")
PYPROJECT_TOOL_KEYS = ("a11y_lens", "a11y-lens")
OUTPUT_FORMATS = {"human", "json"}
FAIL_ON_CHOICES = {"error", "warning", "info", "never"}
DEFAULT_EXCLUDE = ["**/node_modules/**", "**/dist/**", "**/build/**"]
DEFAULT_VALIDATOR_TIMEOUT = 5.0


@dataclass(slots=True)
class DesignSystemConfig:
    """Design-system enforcement controls."""

    enabled: bool = False
    timeout_seconds: float = DEFAULT_VALIDATOR_TIMEOUT

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "timeout_seconds": self.timeout_seconds}


@dataclass(slots=True)
class AppConfig:
    """Scan settings resolved from the project's config file."""

    format: str = "human"
    fail_on: str = "error"
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    rule_enable: list[str] | None = None
    rule_disable: list[str] = field(default_factory=list)
    design_system: DesignSystemConfig = field(default_factory=DesignSystemConfig)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "fail_on": self.fail_on,
            "include": [*self.include],
            "exclude": [*self.exclude],
            "rules": {
                "enable": None if self.rule_enable is None else [*self.rule_enable],
                "disable": [*self.rule_disable],
            },
            "design_system": self.design_system.to_dict(),
            "source": self.source,
        }


def load_app_config(root: Path, config_path: Path | None = None) -> AppConfig:
    """Resolve the project config; raises ValueError with the offending field."""
    root = root.resolve()
    if config_path is not None:
        explicit = config_path if config_path.is_absolute() else root / config_path
        if not explicit.exists():
            raise ValueError(f"Config file does not exist: {explicit}")
        return _build_config(_section_for(explicit), source=explicit)

    for candidate in _candidate_files(root):
        section = _section_for(candidate)
        if section is None:
            continue
        return _build_config(section, source=candidate)
    return AppConfig()


def default_config_template() -> str:
    """Starter ``.a11y-lens.toml`` written by ``config-init``."""
    return """\
format = "human"
fail_on = "error"
include = ["src/**"]
exclude = ["**/node_modules/**", "**/dist/**", "**/build/**"]

[rules]
# enable = [
#   "aria-required",
#   "keyboard-nav",
#   "alt-text",
#   "img-missing-alt",
# ]
disable = []

[design_system]
enabled = false
timeout_seconds = 5.0
"""


def _candidate_files(root: Path) -> Iterator[Path]:
    for filename in (*CONFIG_FILENAMES, "pyproject.toml"):
        path = root / filename
        if path.is_file():
            yield path


def _section_for(path: Path) -> dict[str, Any] | None:
    """The settings table inside ``path``; None when pyproject has no tool table."""
    document = _read_toml(path)
    tool_table = document.get("tool")
    if isinstance(tool_table, dict):
        for key in PYPROJECT_TOOL_KEYS:
            if isinstance(tool_table.get(key), dict):
                return tool_table[key]
    if path.name == "pyproject.toml":
        return None
    return document


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc


def _build_config(section: dict[str, Any] | None, *, source: Path) -> AppConfig:
    section = section or {}
    rules = _table(section, "rules")
    design = _table(section, "design_system")

    output_format = str(section.get("format", "human")).lower()
    exclude = _string_list(section, "exclude", default=None)
    return AppConfig(
        format=output_format if output_format in OUTPUT_FORMATS else "human",
        fail_on=_choice(section, "fail_on", FAIL_ON_CHOICES, default="error"),
        include=_string_list(section, "include", default=[]) or [],
        exclude=list(DEFAULT_EXCLUDE) if exclude is None else exclude,
        rule_enable=_string_list(rules, "enable", default=None, prefix="rules"),
        rule_disable=_string_list(rules, "disable", default=[], prefix="rules") or [],
        design_system=_design_system(design),
        source=str(source),
    )


def _design_system(table: dict[str, Any]) -> DesignSystemConfig:
    enabled = table.get("enabled", False)
    if not isinstance(enabled, bool):
        raise ValueError("design_system.enabled must be a boolean")
    timeout = table.get("timeout_seconds", DEFAULT_VALIDATOR_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, int | float):
        raise ValueError("design_system.timeout_seconds must be a number")
    if timeout <= 0:
        raise ValueError("design_system.timeout_seconds must be > 0")
    return DesignSystemConfig(enabled=enabled, timeout_seconds=float(timeout))


def _table(section: dict[str, Any], key: str) -> dict[str, Any]:
    value = section.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a table/object")
    return value


def _string_list(
    section: dict[str, Any],
    key: str,
    *,
    default: list[str] | None,
    prefix: str | None = None,
) -> list[str] | None:
    name = f"{prefix}.{key}" if prefix else key
    value = section.get(key)
    if value is None:
        return None if default is None else [*default]
    if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
        raise ValueError(f"{name} must be a list of strings")
    return [*value]


def _choice(section: dict[str, Any], key: str, allowed: set[str], *, default: str) -> str:
    value = str(section.get(key, default)).lower()
    if value not in allowed:
        raise ValueError(f"{key} must be one of: {', '.join(sorted(allowed))}")
    return value
