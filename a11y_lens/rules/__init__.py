"""Rules package."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from a11y_lens.file_kinds import FileKind
from a11y_lens.rules.alt_text import AltTextRule
from a11y_lens.rules.aria import AriaRequiredRule
from a11y_lens.rules.base import Rule, RuleContext, RuleMode
from a11y_lens.rules.design_system import DesignSystemComponentsRule
from a11y_lens.rules.dom_scripting import DomScriptingRule
from a11y_lens.rules.focus import FocusVisibleRule
from a11y_lens.rules.forms import FormLabelsRule
from a11y_lens.rules.headings import HeadingHierarchyRule
from a11y_lens.rules.keyboard import KeyboardNavRule
from a11y_lens.rules.page_content import PageContentRule
from a11y_lens.rules.patterns import PatternRule, pattern_rules
from a11y_lens.rules.semantics import SemanticHtmlRule
from a11y_lens.rules.skip_links import SkipLinksRule

__all__ = [
    "Rule",
    "RuleContext",
    "RuleInfo",
    "RuleMode",
    "RuleRegistry",
    "build_registry",
    "list_rule_info",
]


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing and selection."""

    rule_id: str
    name: str
    description: str
    mode: str
    severity: str
    wcag_criteria: tuple[str, ...]
    applies_to: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RuleRegistry:
    """Ordered, read-only set of rules used by the engine."""

    rules: tuple[Rule, ...]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return tuple(rule.rule_id for rule in self.rules)

    def get(self, rule_id: str) -> Rule | None:
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def for_kind(self, kind: FileKind) -> tuple[Rule, ...]:
        return tuple(rule for rule in self.rules if kind in rule.applies_to)


@dataclass(frozen=True, slots=True)
class _RuleSpec:
    rule_id: str
    factory: Callable[[], Rule]
    name: str
    description: str


STRUCTURAL_RULES: tuple[type, ...] = (
    AriaRequiredRule,
    KeyboardNavRule,
    SemanticHtmlRule,
    AltTextRule,
    HeadingHierarchyRule,
    FormLabelsRule,
    SkipLinksRule,
    FocusVisibleRule,
    DesignSystemComponentsRule,
    DomScriptingRule,
    PageContentRule,
)


def build_registry(
    *,
    enabled_rule_ids: list[str] | None = None,
    disabled_rule_ids: list[str] | None = None,
) -> RuleRegistry:
    """Build the registry applying enable/disable filters.

    With ``enabled_rule_ids`` the registry holds exactly those rules, still in
    registration order; ``disabled_rule_ids`` always wins.
    """
    specs = _ordered_rule_specs()
    known = {spec.rule_id for spec in specs}
    requested_ids = set(enabled_rule_ids or []) | set(disabled_rule_ids or [])

    unknown = [rule_id for rule_id in requested_ids if rule_id not in known]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown rule ids: {joined}")

    enabled_set = set(enabled_rule_ids) if enabled_rule_ids is not None else known
    disabled_set = set(disabled_rule_ids or [])
    return RuleRegistry(
        rules=tuple(
            spec.factory()
            for spec in specs
            if spec.rule_id in enabled_set and spec.rule_id not in disabled_set
        )
    )


def list_rule_info() -> list[RuleInfo]:
    """Return metadata for all known rules in registration order."""
    info: list[RuleInfo] = []
    for spec in _ordered_rule_specs():
        rule = spec.factory()
        info.append(
            RuleInfo(
                rule_id=spec.rule_id,
                name=spec.name,
                description=spec.description,
                mode=rule.mode.value,
                severity=rule.severity,
                wcag_criteria=tuple(rule.wcag_criteria),
                applies_to=tuple(sorted(kind.value for kind in rule.applies_to)),
            )
        )
    return info


def _ordered_rule_specs() -> list[_RuleSpec]:
    specs = [_spec(rule_cls) for rule_cls in STRUCTURAL_RULES]
    specs.extend(_pattern_spec(rule) for rule in pattern_rules())
    return specs


def _spec(rule_cls: type) -> _RuleSpec:
    return _RuleSpec(
        rule_id=rule_cls.rule_id,
        factory=rule_cls,
        name=rule_cls.__name__,
        description=(rule_cls.__doc__ or "").strip(),
    )


def _pattern_spec(rule: PatternRule) -> _RuleSpec:
    return _RuleSpec(
        rule_id=rule.rule_id,
        factory=lambda: rule,
        name=rule.name,
        description=rule.description,
    )
