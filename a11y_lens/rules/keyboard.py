"""Keyboard operability rule."""

from __future__ import annotations

import re
from typing import Any

from a11y_lens.file_kinds import ELEMENT_KINDS, STYLESHEET_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.parsers.stylesheet import StylesheetParser
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

NATIVE_INTERACTIVE = frozenset({"a", "button", "input", "select", "textarea", "summary"})
INTERACTIVE_ROLES = frozenset(
    {
        "button",
        "checkbox",
        "link",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "option",
        "radio",
        "slider",
        "switch",
        "tab",
        "textbox",
    }
)
KEY_HANDLERS = ("onKeyDown", "onKeyUp", "onKeyPress")
TAB_INDEX_NAMES = ("tabIndex", "tabindex")

INTERACTIVE_SELECTOR_RE = re.compile(
    r"(?:^|[\s,>+~(])(?:a|button|input|select|textarea|summary)(?=$|[\s,.:#\[>+~)])"
    r"|\[role=[\"']?(?:button|link|checkbox|tab|menuitem)",
    re.IGNORECASE,
)
DISABLED_SELECTOR_RE = re.compile(r":disabled|\[disabled\]|\[aria-disabled", re.IGNORECASE)

POSITIVE_TABINDEX = Finding(
    violation_id="tabindex-positive",
    severity="warning",
    wcag_criteria=("2.4.3",),
    title="Avoid positive tabindex values",
    help='Remove positive tabIndex values or use tabIndex="0" only when necessary',
    tags=("tabindex", "keyboard", "wcag-2.4.3"),
    fix_suggestions=(
        FixSuggestion(
            title="Remove positive tabindex",
            description="Remove the tabIndex attribute to maintain natural tab order",
            priority="medium",
        ),
    ),
)
NEGATIVE_TABINDEX = Finding(
    violation_id="tabindex-negative",
    severity="info",
    wcag_criteria=("2.1.1",),
    title='Review tabindex="-1" usage',
    help='tabIndex="-1" is only appropriate for programmatic focus management',
    tags=("tabindex", "focus", "wcag-2.1.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Review tabindex usage",
            description='Ensure tabIndex="-1" is used only for programmatic focus management',
            priority="low",
        ),
    ),
)
MISSING_KEYBOARD = Finding(
    violation_id="custom-interactive-missing-keyboard",
    severity="error",
    wcag_criteria=("2.1.1",),
    title="Custom interactive element is not keyboard operable",
    help="Make the element focusable with tabIndex and respond to Enter and Space",
    tags=("keyboard", "interactive", "wcag-2.1.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Add keyboard support",
            description="Add tabIndex={0} and an onKeyDown handler for Enter and Space",
            code='<div role="button" tabIndex={0} onKeyDown={handleKeyDown}>',
            priority="high",
        ),
    ),
)
POINTER_EVENTS_NONE = Finding(
    violation_id="pointer-events-none",
    severity="warning",
    wcag_criteria=("2.1.1",),
    title="Interactive element ignores pointer events",
    help="Disable the control with the disabled attribute instead of pointer-events",
    tags=("keyboard", "css", "wcag-2.1.1"),
    fix_suggestions=(
        "Use the disabled attribute or aria-disabled to disable controls",
        "Keep keyboard and pointer behaviour consistent",
    ),
)


class KeyboardNavRule:
    """Ensures interactive elements stay reachable and operable from the keyboard."""

    rule_id = "keyboard-nav"
    wcag_criteria = ("2.1.1", "2.4.3", "2.4.7")
    severity = "error"
    applies_to = ELEMENT_KINDS | STYLESHEET_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if isinstance(parser, ElementParser):
            return _check_markup(parser)
        if isinstance(parser, StylesheetParser):
            return _check_stylesheet(parser)
        return []


def _check_markup(parser: ElementParser) -> list[Violation]:
    violations: list[Violation] = []
    for element in parser.find_elements():
        name = parser.element_name(element)
        tab_index = _tab_index(parser, element)
        if tab_index is not None and tab_index > 0:
            violations.append(
                POSITIVE_TABINDEX.at_element(
                    parser,
                    element,
                    f'Element "{name}" has tabIndex="{tab_index}". '
                    "Positive values disrupt natural tab order",
                )
            )
        elif tab_index == -1:
            violations.append(
                NEGATIVE_TABINDEX.at_element(
                    parser,
                    element,
                    f'Element "{name}" uses tabIndex="-1". '
                    "Ensure this is intentional for JavaScript focus management",
                )
            )

        role = (parser.attribute_value(element, "role") or "").strip().lower()
        if role not in INTERACTIVE_ROLES or name in NATIVE_INTERACTIVE or not name.islower():
            continue
        has_key_handler = parser.has_attribute(element, *KEY_HANDLERS)
        focusable = parser.has_attribute(element, *TAB_INDEX_NAMES)
        if not (has_key_handler and focusable):
            missing = []
            if not focusable:
                missing.append("tabIndex")
            if not has_key_handler:
                missing.append("a keyboard handler")
            violations.append(
                MISSING_KEYBOARD.at_element(
                    parser,
                    element,
                    f'<{name} role="{role}"> is missing {" and ".join(missing)}',
                )
            )
    return violations


def _tab_index(parser: ElementParser, element: Any) -> int | None:
    value = parser.attribute_value(element, *TAB_INDEX_NAMES)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _check_stylesheet(parser: StylesheetParser) -> list[Violation]:
    violations: list[Violation] = []
    for rule in parser.get_rules_containing(INTERACTIVE_SELECTOR_RE):
        if DISABLED_SELECTOR_RE.search(rule.selector):
            continue
        for declaration in rule.declarations:
            if declaration.property == "pointer-events" and declaration.value.lower() == "none":
                violations.append(
                    POINTER_EVENTS_NONE.at_node(
                        parser,
                        declaration,
                        f'"{rule.selector}" sets pointer-events: none on an interactive element',
                    )
                )
    return violations
