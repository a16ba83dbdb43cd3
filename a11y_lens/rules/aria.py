"""ARIA role and attribute usage rule."""

from __future__ import annotations

from typing import Any

from a11y_lens.file_kinds import ELEMENT_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

# Attributes each role must carry; an aria-label requirement is also met by aria-labelledby.
ROLE_REQUIRED_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    "alert": ("aria-live",),
    "application": ("aria-label",),
    "banner": ("aria-label",),
    "button": (),
    "checkbox": ("aria-checked",),
    "combobox": ("aria-controls", "aria-expanded"),
    "dialog": ("aria-labelledby",),
    "form": ("aria-label",),
    "img": (),
    "link": (),
    "list": (),
    "listitem": (),
    "menu": (),
    "menubar": (),
    "menuitem": (),
    "navigation": ("aria-label",),
    "option": (),
    "progressbar": ("aria-valuenow", "aria-valuemin", "aria-valuemax"),
    "radio": ("aria-checked",),
    "region": ("aria-label",),
    "search": ("aria-label",),
    "slider": ("aria-valuenow", "aria-valuemin", "aria-valuemax"),
    "status": (),
    "tab": (),
    "tablist": (),
    "tabpanel": ("aria-labelledby",),
    "textbox": ("aria-label",),
    "toolbar": ("aria-label",),
}

VALID_ROLES = frozenset(ROLE_REQUIRED_ATTRIBUTES) | {
    "alertdialog",
    "article",
    "cell",
    "columnheader",
    "complementary",
    "contentinfo",
    "definition",
    "document",
    "feed",
    "figure",
    "grid",
    "gridcell",
    "group",
    "heading",
    "log",
    "main",
    "marquee",
    "math",
    "menuitemcheckbox",
    "menuitemradio",
    "meter",
    "none",
    "note",
    "presentation",
    "radiogroup",
    "row",
    "rowgroup",
    "rowheader",
    "scrollbar",
    "searchbox",
    "separator",
    "spinbutton",
    "switch",
    "table",
    "term",
    "timer",
    "tooltip",
    "tree",
    "treegrid",
    "treeitem",
}

IMPLICIT_ROLES: dict[str, str] = {
    "article": "article",
    "aside": "complementary",
    "button": "button",
    "dialog": "dialog",
    "footer": "contentinfo",
    "form": "form",
    "header": "banner",
    "img": "img",
    "li": "listitem",
    "main": "main",
    "nav": "navigation",
    "ol": "list",
    "select": "combobox",
    "table": "table",
    "textarea": "textbox",
    "ul": "list",
}

REFERENCE_ATTRIBUTES = ("aria-labelledby", "aria-describedby")

INVALID_ROLE = Finding(
    violation_id="aria-invalid-role",
    severity="error",
    wcag_criteria=("4.1.2",),
    title="Invalid ARIA role",
    help="Use a role defined by WAI-ARIA or remove the role attribute",
    tags=("aria", "role", "wcag-4.1.2"),
)
MISSING_ATTRIBUTES = Finding(
    violation_id="aria-required",
    severity="error",
    wcag_criteria=("4.1.2",),
    title="Missing required ARIA attributes",
    help="Add the missing ARIA attributes to make the element properly accessible",
    tags=("aria", "role", "wcag-4.1.2"),
)
INVALID_REFERENCE = Finding(
    violation_id="aria-invalid-reference",
    severity="error",
    wcag_criteria=("4.1.2",),
    title="Invalid ARIA reference",
    help="Ensure the referenced element exists and has the correct ID",
    tags=("aria", "reference", "wcag-4.1.2"),
    fix_suggestions=(
        FixSuggestion(
            title="Fix ARIA reference",
            description="Update the attribute to reference an existing element id",
            priority="high",
        ),
    ),
)
REDUNDANT_ROLE = Finding(
    violation_id="aria-redundant",
    severity="warning",
    wcag_criteria=("4.1.2",),
    title="Redundant ARIA role",
    help="Remove the role attribute; the native element already provides it",
    tags=("aria", "redundant", "wcag-4.1.2"),
)


class AriaRequiredRule:
    """Checks ARIA roles, their required attributes and id references."""

    rule_id = "aria-required"
    wcag_criteria = ("1.3.1", "4.1.2", "4.1.3")
    severity = "error"
    applies_to = ELEMENT_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if not isinstance(parser, ElementParser):
            return []

        known_ids = parser.static_ids()
        violations: list[Violation] = []
        for element in parser.find_elements():
            violations.extend(_check_role(parser, element))
            violations.extend(_check_references(parser, element, known_ids))
        return violations


def _check_role(parser: ElementParser, element: Any) -> list[Violation]:
    role = parser.attribute_value(element, "role")
    if role is None:
        return []
    role = role.strip().lower()
    if not role:
        return []
    name = parser.element_name(element)
    if role not in VALID_ROLES:
        return [INVALID_ROLE.at_element(parser, element, f'"{role}" is not a valid ARIA role')]

    violations: list[Violation] = []
    missing = [
        attribute
        for attribute in ROLE_REQUIRED_ATTRIBUTES.get(role, ())
        if not _has_required(parser, element, attribute)
    ]
    if missing:
        joined = ", ".join(missing)
        example = " ".join(f'{attribute}="value"' for attribute in missing)
        violations.append(
            MISSING_ATTRIBUTES.at_element(
                parser,
                element,
                f'Element with role "{role}" requires ARIA attributes: {joined}',
                fix_suggestions=(
                    FixSuggestion(
                        title="Add required ARIA attributes",
                        description=f"Add the following ARIA attributes: {joined}",
                        code=f'<div role="{role}" {example}>Content</div>',
                        priority="high",
                    ),
                ),
            )
        )
    if IMPLICIT_ROLES.get(name) == role:
        violations.append(
            REDUNDANT_ROLE.at_element(
                parser,
                element,
                f'The {name} element already has the implicit role "{role}"',
                fix_suggestions=(
                    FixSuggestion(
                        title="Remove redundant role attribute",
                        description=f"Remove the role attribute from the {name} element",
                        code=f"<{name}>...</{name}>",
                        priority="medium",
                    ),
                ),
            )
        )
    return violations


def _check_references(
    parser: ElementParser, element: Any, known_ids: set[str]
) -> list[Violation]:
    violations: list[Violation] = []
    for attribute in REFERENCE_ATTRIBUTES:
        value = parser.attribute_value(element, attribute)
        if not value:
            continue
        for reference in value.split():
            if reference not in known_ids:
                violations.append(
                    INVALID_REFERENCE.at_element(
                        parser,
                        element,
                        f'The {attribute} attribute references an ID "{reference}" '
                        "that does not exist in the document",
                    )
                )
    return violations


def _has_required(parser: ElementParser, element: Any, attribute: str) -> bool:
    if attribute == "aria-label":
        return parser.has_attribute(element, "aria-label", "aria-labelledby")
    return parser.has_attribute(element, attribute)
