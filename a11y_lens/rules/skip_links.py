"""Bypass-block (skip link) rule."""

from __future__ import annotations

from typing import Any

from a11y_lens.file_kinds import ELEMENT_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

REPEATED_BLOCKS = ("nav", "header")

SKIP_LINK_MISSING = Finding(
    violation_id="skip-link-missing",
    severity="warning",
    wcag_criteria=("2.4.1",),
    title="Page layout has no skip link",
    help="Add a link to the main content before repeated navigation",
    tags=("navigation", "skip-link", "wcag-2.4.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Add a skip link",
            description="Place a skip link first in the layout and target the main element",
            code='<a href="#main-content">Skip to main content</a>',
            priority="medium",
        ),
    ),
)
SKIP_LINK_TARGET_MISSING = Finding(
    violation_id="skip-link-target-missing",
    severity="warning",
    wcag_criteria=("2.4.1",),
    title="Skip link target does not exist",
    help="Give the main content the id the skip link points at",
    tags=("navigation", "skip-link", "wcag-2.4.1"),
    fix_suggestions=('Add id="main-content" to the main content element',),
)


class SkipLinksRule:
    """Checks that layouts with repeated navigation offer a working skip link."""

    rule_id = "skip-links"
    wcag_criteria = ("2.4.1",)
    severity = "warning"
    applies_to = ELEMENT_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if not isinstance(parser, ElementParser):
            return []

        elements = parser.find_elements()
        known_ids = parser.static_ids()
        in_page_links = [link for link in parser.find_elements("a") if _fragment(parser, link)]

        violations: list[Violation] = []
        blocks = [item for item in elements if parser.element_name(item) in REPEATED_BLOCKS]
        has_main = any(parser.element_name(item) == "main" for item in elements)
        if blocks and has_main and not in_page_links:
            violations.append(
                SKIP_LINK_MISSING.at_element(
                    parser,
                    blocks[0],
                    "Navigation is repeated before the main content without a skip link",
                )
            )

        for link in in_page_links:
            target = _fragment(parser, link)
            if "skip" not in parser.text_content(link).lower():
                continue
            if target and target not in known_ids:
                violations.append(
                    SKIP_LINK_TARGET_MISSING.at_element(
                        parser, link, f'Skip link points at "#{target}" which does not exist'
                    )
                )
        return violations


def _fragment(parser: ElementParser, link: Any) -> str | None:
    href = parser.attribute_value(link, "href")
    if href is None or not href.startswith("#"):
        return None
    return href[1:]
