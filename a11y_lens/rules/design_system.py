"""Approved design-system component usage rule."""

from __future__ import annotations

from a11y_lens.file_kinds import MARKUP_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.parsers.script import ScriptParser
from a11y_lens.rules.base import Finding, RuleContext, RuleMode

APPROVED_COMPONENTS = frozenset(
    {
        "Button",
        "Input",
        "Modal",
        "Select",
        "Checkbox",
        "Radio",
        "Switch",
        "Textarea",
        "Label",
        "ErrorMessage",
        "Icon",
        "Tooltip",
        "Popover",
        "Dropdown",
        "Tabs",
        "Accordion",
    }
)

NON_STANDARD_COMPONENT = Finding(
    violation_id="ds-non-standard-component",
    severity="warning",
    wcag_criteria=(),
    title="Non-standard design system component",
    help="Use approved design system components for consistency and accessibility compliance",
    tags=("design-system", "deprecated"),
    fix_suggestions=(
        FixSuggestion(
            title="Use approved component",
            description="Replace with the equivalent component from the design system library",
            priority="medium",
        ),
    ),
)


def is_component_name(name: str) -> bool:
    """Custom components start with an uppercase letter and have more than one character."""
    return len(name) > 1 and name[0].isupper()


class DesignSystemComponentsRule:
    """Warns about custom components outside the approved design-system list."""

    rule_id = "design-system-components"
    wcag_criteria = ()
    severity = "warning"
    applies_to = MARKUP_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if not context.design_system_enabled or not isinstance(parser, ScriptParser):
            return []

        violations: list[Violation] = []
        for element in parser.find_elements():
            name = parser.element_name(element)
            if is_component_name(name) and name not in APPROVED_COMPONENTS:
                violations.append(
                    NON_STANDARD_COMPONENT.at_element(
                        parser,
                        element,
                        f"{name} is not part of the approved design system component library",
                    )
                )
        return violations
