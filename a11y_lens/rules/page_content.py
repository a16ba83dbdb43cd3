"""Data tables, autoplaying media and empty links."""

from __future__ import annotations

from typing import Any

from a11y_lens.file_kinds import ELEMENT_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

HEADER_ELEMENTS = frozenset({"thead", "th"})
LAYOUT_ROLES = frozenset({"presentation", "none"})
MEDIA_ELEMENTS = ("video", "audio")
LINK_NAME_ATTRIBUTES = ("aria-label", "aria-labelledby", "title")

TABLE_MISSING_HEADERS = Finding(
    violation_id="table-missing-headers",
    severity="error",
    wcag_criteria=("1.3.1",),
    title="Data table has no header cells",
    help="Mark up column or row headers with <thead> and <th>",
    tags=("semantic", "table", "wcag-1.3.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Add table headers",
            description="Put the header row in <thead> and use <th scope> cells",
            code='<thead><tr><th scope="col">Name</th></tr></thead>',
            priority="high",
        ),
        'Add role="presentation" if the table is only used for layout',
    ),
)
AUTOPLAY_MEDIA = Finding(
    violation_id="autoplay-media",
    severity="error",
    wcag_criteria=("1.4.2", "2.2.2"),
    title="Media plays automatically with sound",
    help="Mute autoplaying media or give users controls to stop it",
    tags=("media", "autoplay", "wcag-1.4.2"),
    fix_suggestions=(
        "Remove autoplay and let the user start playback",
        "Add muted for background media, or add controls",
    ),
)
LINK_EMPTY = Finding(
    violation_id="link-empty",
    severity="error",
    wcag_criteria=("2.4.4",),
    title="Link has no accessible name",
    help="Give the link text content or an aria-label",
    tags=("links", "wcag-2.4.4"),
    fix_suggestions=(
        "Add text describing the link target",
        'Add aria-label="..." to icon-only links',
    ),
)


class PageContentRule:
    """Checks data tables for header cells, autoplaying media and empty links."""

    rule_id = "page-content"
    wcag_criteria = ("1.3.1", "1.4.2", "2.2.2", "2.4.4")
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
            if name == "table" and _lacks_headers(parser, element):
                violations.append(
                    TABLE_MISSING_HEADERS.at_element(
                        parser, element, "Table has no <thead> or <th> header cells"
                    )
                )
            elif name in MEDIA_ELEMENTS and _autoplays_with_sound(parser, element):
                violations.append(
                    AUTOPLAY_MEDIA.at_element(
                        parser, element, f"<{name}> autoplays without muted or controls"
                    )
                )
            elif name == "a" and _is_empty_link(parser, element):
                violations.append(
                    LINK_EMPTY.at_element(parser, element, "Link renders no text or label")
                )
        return violations


def _lacks_headers(parser: ElementParser, table: Any) -> bool:
    role = (parser.attribute_value(table, "role") or "").strip().lower()
    if role in LAYOUT_ROLES:
        return False
    for descendant in _descendants(parser, table):
        name = parser.element_name(descendant)
        # A component may render the header row.
        if name in HEADER_ELEMENTS or not name.islower():
            return False
    return True


def _autoplays_with_sound(parser: ElementParser, media: Any) -> bool:
    if not _flag_set(parser, media, "autoplay", "autoPlay"):
        return False
    return not (_flag_set(parser, media, "muted") or _flag_set(parser, media, "controls"))


def _flag_set(parser: ElementParser, element: Any, *names: str) -> bool:
    """Boolean attribute presence; an explicit JSX ``{false}`` turns it off."""
    if not parser.has_attribute(element, *names):
        return False
    return parser.attribute_value(element, *names) != "false"


def _is_empty_link(parser: ElementParser, link: Any) -> bool:
    if not parser.has_attribute(link, "href"):
        return False
    if parser.has_attribute(link, *LINK_NAME_ATTRIBUTES) or parser.has_spread_attributes(link):
        return False
    if parser.text_content(link) or parser.has_expression_content(link):
        return False
    for descendant in _descendants(parser, link):
        name = parser.element_name(descendant)
        if not name.islower():
            return False
        if name == "img" and (parser.attribute_value(descendant, "alt") or "").strip():
            return False
        if parser.has_attribute(descendant, "aria-label", "aria-labelledby"):
            return False
    return True


def _descendants(parser: ElementParser, element: Any) -> list[Any]:
    found: list[Any] = []
    stack = parser.child_elements(element)
    while stack:
        child = stack.pop()
        found.append(child)
        stack.extend(parser.child_elements(child))
    return found
