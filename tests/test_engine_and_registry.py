"""Tests for rule registration and engine dispatch."""

from __future__ import annotations

import logging

import pytest

from a11y_lens.engine import RuleEngine
from a11y_lens.file_kinds import FileKind
from a11y_lens.models import Violation
from a11y_lens.parsers import create_parser
from a11y_lens.rules import RuleRegistry, build_registry, list_rule_info
from a11y_lens.rules.base import RuleContext, RuleMode


class _ExplodingRule:
    rule_id = "exploding"
    wcag_criteria = ()
    severity = "error"
    applies_to = frozenset({FileKind.HTML})
    mode = RuleMode.PATTERN

    def check(self, context: RuleContext) -> list[Violation]:
        raise RuntimeError("kaboom")


class _StubRule:
    rule_id = "stub"
    wcag_criteria = ("1.1.1",)
    severity = "warning"
    applies_to = frozenset({FileKind.HTML, FileKind.CSS})

    def __init__(self, mode: RuleMode = RuleMode.PATTERN) -> None:
        self.mode = mode

    def check(self, context: RuleContext) -> list[Violation]:
        return [
            Violation(
                id="stub-finding",
                severity="warning",
                wcag_criteria=self.wcag_criteria,
                title="Stub",
                description=f"checked {context.file_path}",
                help="",
                line=1,
                column=1,
                code="",
            )
        ]


def test_default_registry_holds_every_rule_in_order() -> None:
    registry = build_registry()

    assert len(registry) == 28
    assert registry.rule_ids[:3] == ("aria-required", "keyboard-nav", "semantic-html")
    assert registry.rule_ids[-1] == "text-transparent"
    assert [item.rule_id for item in list_rule_info()] == list(registry.rule_ids)


def test_enable_keeps_registration_order_and_disable_wins() -> None:
    registry = build_registry(
        enabled_rule_ids=["img-missing-alt", "focus-visible", "alt-text"],
        disabled_rule_ids=["focus-visible"],
    )

    assert registry.rule_ids == ("alt-text", "img-missing-alt")
    assert registry.get("focus-visible") is None


def test_unknown_rule_ids_are_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown rule ids: bogus, nope"):
        build_registry(enabled_rule_ids=["nope"], disabled_rule_ids=["bogus"])


def test_for_kind_filters_by_file_kind() -> None:
    registry = build_registry()

    css_ids = {rule.rule_id for rule in registry.for_kind(FileKind.CSS)}
    assert {"keyboard-nav", "focus-visible", "font-size", "outline-none-no-alternative"} <= css_ids
    assert "img-missing-alt" not in css_ids
    assert "dom-scripting" in {rule.rule_id for rule in registry.for_kind(FileKind.TS)}


def test_rule_info_describes_structural_rules_from_docstrings() -> None:
    info = {item.rule_id: item for item in list_rule_info()}

    assert info["aria-required"].mode == "structural"
    assert info["aria-required"].description
    assert info["img-missing-alt"].mode == "pattern"
    assert info["font-size"].applies_to == ("css", "scss")


def test_failing_rule_is_isolated_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    engine = RuleEngine(RuleRegistry(rules=(_ExplodingRule(), _StubRule())))
    context = RuleContext(content="<p></p>", file_path="index.html", file_kind=FileKind.HTML)

    with caplog.at_level(logging.WARNING, logger="a11y_lens.engine"):
        result = engine.run(context)

    assert [item.id for item in result.violations] == ["stub-finding"]
    assert len(result.failures) == 1
    assert result.failures[0].rule_id == "exploding"
    assert "Rule 'exploding' failed on index.html: kaboom" in caplog.text


def test_tree_rules_need_a_parsed_file() -> None:
    engine = RuleEngine(RuleRegistry(rules=(_StubRule(RuleMode.STRUCTURAL),)))
    source = "a { color: red; }"
    bare = RuleContext(content=source, file_path="a.css", file_kind=FileKind.CSS)
    parser = create_parser(source, "a.css", FileKind.CSS)
    assert parser is not None
    parsed = RuleContext(
        content=source, file_path="a.css", file_kind=FileKind.CSS, parser=parser
    )

    assert engine.check_file(bare) == []
    assert [item.description for item in engine.check_file(parsed)] == ["checked a.css"]
