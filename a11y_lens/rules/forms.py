"""Form control labelling rule.

``<input>`` labelling is covered by the input pattern detectors; this rule
handles the other form controls and dangling ``htmlFor`` references.
"""

from __future__ import annotations

from typing import Any

from a11y_lens.file_kinds import ELEMENT_KINDS
from a11y_lens.models import Violation
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

LABELLED_CONTROLS = ("select", "textarea")
LABEL_ATTRIBUTES = ("aria-label", "aria-labelledby", "title")

CONTROL_MISSING_LABEL = Finding(
    violation_id="form-control-missing-label",
    severity="error",
    wcag_criteria=("1.3.1", "3.3.2"),
    title="Form control missing label",
    help="Associate a <label> with the control or add aria-label",
    tags=("forms", "label", "wcag-3.3.2"),
    fix_suggestions=(
        'Add id="controlId" and <label htmlFor="controlId">Label</label>',
        "Wrap the control in a <label> element",
        'Add aria-label="description"',
    ),
)
LABEL_FOR_INVALID = Finding(
    violation_id="label-for-invalid",
    severity="error",
    wcag_criteria=("1.3.1",),
    title="Label points at a missing control",
    help="Make htmlFor match the id of the labelled control",
    tags=("forms", "label", "wcag-1.3.1"),
    fix_suggestions=("Update htmlFor to the id of an existing form control",),
)


class FormLabelsRule:
    """Ensures select and textarea controls are labelled and labels resolve."""

    rule_id = "form-labels"
    wcag_criteria = ("1.3.1", "3.3.2")
    severity = "error"
    applies_to = ELEMENT_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if not isinstance(parser, ElementParser):
            return []

        known_ids = parser.static_ids()
        label_targets = {
            target
            for label in parser.find_elements("label")
            if (target := parser.attribute_value(label, "htmlFor", "for"))
        }
        violations: list[Violation] = []
        for element in parser.find_elements():
            name = parser.element_name(element)
            if name in LABELLED_CONTROLS and not _is_labelled(parser, element, label_targets):
                violations.append(
                    CONTROL_MISSING_LABEL.at_element(
                        parser, element, f"<{name}> has no associated label"
                    )
                )
            elif name == "label":
                target = parser.attribute_value(element, "htmlFor", "for")
                if target and target not in known_ids:
                    violations.append(
                        LABEL_FOR_INVALID.at_element(
                            parser,
                            element,
                            f'Label htmlFor="{target}" does not match any element id',
                        )
                    )
        return violations


def _is_labelled(parser: ElementParser, element: Any, label_targets: set[str]) -> bool:
    if parser.has_attribute(element, *LABEL_ATTRIBUTES):
        return True
    # Spread props or a dynamic id may supply the label association at runtime.
    if parser.has_spread_attributes(element):
        return True
    if parser.has_attribute(element, "id"):
        value = parser.attribute_value(element, "id")
        if value is None or value in label_targets:
            return True
    return any(
        parser.element_name(ancestor) == "label" for ancestor in _element_ancestors(parser, element)
    )


def _element_ancestors(parser: ElementParser, element: Any) -> list[Any]:
    ancestors: list[Any] = []
    current = parser.parent_element(element)
    while current is not None:
        ancestors.append(current)
        current = parser.parent_element(current)
    return ancestors
