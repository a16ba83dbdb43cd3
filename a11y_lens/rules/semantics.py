"""Semantic element usage rule."""

from __future__ import annotations

from a11y_lens.file_kinds import ELEMENT_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

CLICKABLE_CONTAINERS = ("div", "span")
LIST_CONTAINERS = frozenset({"ul", "ol", "menu"})

NON_SEMANTIC_INTERACTIVE = Finding(
    violation_id="non-semantic-interactive",
    severity="error",
    wcag_criteria=("1.3.1",),
    title="Use semantic element for interaction",
    help="Use <button> for clickable elements to get keyboard and screen reader support",
    tags=("semantic", "button", "wcag-1.3.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Replace with button element",
            description="Replace the element with a <button> element",
            code="<button onClick={onClick}>Click me</button>",
            priority="high",
        ),
    ),
)
LI_OUTSIDE_LIST = Finding(
    violation_id="li-outside-list",
    severity="warning",
    wcag_criteria=("1.3.1",),
    title="List item outside of list container",
    help="Wrap li elements in ul or ol containers for proper semantic structure",
    tags=("list", "semantic", "wcag-1.3.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Wrap in list container",
            description="Place the li element inside a ul or ol element",
            code="<ul><li>Item</li></ul>",
            priority="medium",
        ),
    ),
)


class SemanticHtmlRule:
    """Flags click handlers on generic containers and orphaned list items."""

    rule_id = "semantic-html"
    wcag_criteria = ("1.3.1", "2.4.6")
    severity = "error"
    applies_to = ELEMENT_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if not isinstance(parser, ElementParser):
            return []

        violations: list[Violation] = []
        for element in parser.find_elements():
            name = parser.element_name(element)
            if name in CLICKABLE_CONTAINERS:
                if parser.has_attribute(element, "onClick") and not parser.has_attribute(
                    element, "role"
                ):
                    violations.append(
                        NON_SEMANTIC_INTERACTIVE.at_element(
                            parser,
                            element,
                            f"{name} with onClick should be a semantic button element",
                        )
                    )
            elif name == "li":
                parent = parser.parent_element(element)
                if parent is None:
                    continue
                parent_name = parser.element_name(parent)
                # Components and fragments may render the list themselves.
                if not parent_name.islower() or parent_name in LIST_CONTAINERS:
                    continue
                violations.append(
                    LI_OUTSIDE_LIST.at_element(
                        parser,
                        element,
                        f"li element is inside <{parent_name}> instead of ul or ol",
                    )
                )
        return violations
