"""Heading structure rule."""

from __future__ import annotations

import re

from a11y_lens.file_kinds import ELEMENT_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

HEADING_RE = re.compile(r"^h([1-6])$")

LEVEL_SKIP = Finding(
    violation_id="heading-level-skip",
    severity="warning",
    wcag_criteria=("1.3.1",),
    title="Skip in heading hierarchy",
    help="Avoid skipping heading levels",
    tags=("heading", "hierarchy", "wcag-1.3.1"),
)
EMPTY_HEADING = Finding(
    violation_id="heading-empty",
    severity="warning",
    wcag_criteria=("1.3.1", "2.4.6"),
    title="Heading has no content",
    help="Give the heading visible text or remove it",
    tags=("heading", "content", "wcag-2.4.6"),
    fix_suggestions=("Add descriptive text inside the heading",),
)


class HeadingHierarchyRule:
    """Checks that headings do not skip levels and are never empty."""

    rule_id = "heading-hierarchy"
    wcag_criteria = ("1.3.1", "2.4.6")
    severity = "warning"
    applies_to = ELEMENT_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if not isinstance(parser, ElementParser):
            return []

        violations: list[Violation] = []
        previous_level: int | None = None
        for element in parser.find_elements():
            match = HEADING_RE.match(parser.element_name(element))
            if match is None:
                continue
            level = int(match.group(1))
            if previous_level is not None and level > previous_level + 1:
                expected = previous_level + 1
                violations.append(
                    LEVEL_SKIP.at_element(
                        parser,
                        element,
                        f'Heading "h{level}" follows "h{previous_level}"; '
                        "skipping levels can confuse screen readers",
                        fix_suggestions=(
                            FixSuggestion(
                                title="Adjust heading level",
                                description=f"Use h{expected} instead of h{level}",
                                priority="medium",
                            ),
                        ),
                    )
                )
            if (
                not parser.text_content(element)
                and not parser.has_expression_content(element)
                and not parser.child_elements(element)
                and not parser.has_attribute(element, "aria-label", "aria-labelledby")
            ):
                violations.append(
                    EMPTY_HEADING.at_element(parser, element, f"<h{level}> renders no text")
                )
            previous_level = level
        return violations
