"""Alternative text quality rule.

Missing ``alt`` on ``<img>`` is reported by the ``img-missing-alt`` pattern
detector; this rule judges the alt text that is present and the names of
image-like controls.
"""

from __future__ import annotations

import re
from typing import Any

from a11y_lens.file_kinds import ELEMENT_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.rules.base import ElementParser, Finding, RuleContext, RuleMode

MIN_ALT_LENGTH = 5
REDUNDANT_ALT_RE = re.compile(
    r"\b(?:image|picture|photo|graphic|icon) of\b"
    r"|^(?:image|picture|photo|graphic|icon)$",
    re.IGNORECASE,
)
NAME_ATTRIBUTES = ("aria-label", "aria-labelledby", "title")

EMPTY_ALT_NO_ROLE = Finding(
    violation_id="img-empty-alt-no-role",
    severity="warning",
    wcag_criteria=("1.1.1",),
    title="Empty alt attribute without role",
    help='Add aria-hidden="true" to decorative images or provide descriptive alt text',
    tags=("alt-text", "decorative", "wcag-1.1.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Add aria-hidden for decorative images",
            description='Add aria-hidden="true" to indicate decorative purpose',
            code='<img src="..." alt="" aria-hidden="true" />',
            priority="medium",
        ),
    ),
)
REDUNDANT_ALT = Finding(
    violation_id="img-redundant-alt",
    severity="warning",
    wcag_criteria=("1.1.1",),
    title="Alt text contains redundant words",
    help='Screen readers already announce images; drop words like "image of"',
    tags=("alt-text", "quality", "wcag-1.1.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Describe the content",
            description="Describe what the image shows instead of that it is an image",
            priority="low",
        ),
    ),
)
ALT_TOO_SHORT = Finding(
    violation_id="img-alt-too-short",
    severity="warning",
    wcag_criteria=("1.1.1",),
    title="Alt text too short",
    help="Provide more descriptive alt text that conveys the image's meaning and context",
    tags=("alt-text", "quality", "wcag-1.1.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Improve alt text",
            description="Provide more descriptive alt text for the image",
            code='<img src="..." alt="More descriptive text about the image" />',
            priority="medium",
        ),
    ),
)
INPUT_IMAGE_MISSING_ALT = Finding(
    violation_id="input-image-missing-alt",
    severity="error",
    wcag_criteria=("1.1.1", "4.1.2"),
    title="Image input missing alt text",
    help="Image buttons need alt text describing their action",
    tags=("alt-text", "forms", "wcag-1.1.1"),
    fix_suggestions=('Add alt="Submit" (the button\'s action) to the input',),
)
ICON_BUTTON_MISSING_NAME = Finding(
    violation_id="icon-button-missing-aria",
    severity="error",
    wcag_criteria=("1.1.1", "4.1.2"),
    title="Icon button missing accessible name",
    help="Add aria-label attribute with descriptive text for the button's purpose",
    tags=("icon-button", "aria-label", "wcag-1.1.1"),
    fix_suggestions=(
        FixSuggestion(
            title="Add aria-label to icon button",
            description="Add aria-label attribute describing the button's function",
            code='<button aria-label="Close dialog">X</button>',
            priority="high",
        ),
    ),
)


class AltTextRule:
    """Checks that images and image controls carry meaningful alternative text."""

    rule_id = "alt-text"
    wcag_criteria = ("1.1.1",)
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
            if name == "img":
                violation = _check_img(parser, element)
                if violation is not None:
                    violations.append(violation)
            elif name == "input":
                input_type = (parser.attribute_value(element, "type") or "").lower()
                has_name = parser.has_attribute(element, "alt", *NAME_ATTRIBUTES)
                if input_type == "image" and not has_name:
                    violations.append(
                        INPUT_IMAGE_MISSING_ALT.at_element(
                            parser, element, 'Input with type="image" has no alt text'
                        )
                    )
            elif name == "button" and _is_unnamed_icon_button(parser, element):
                violations.append(
                    ICON_BUTTON_MISSING_NAME.at_element(
                        parser,
                        element,
                        "Button with icon-only content needs aria-label or aria-labelledby",
                    )
                )
        return violations


def _check_img(parser: ElementParser, element: Any) -> Violation | None:
    alt = parser.attribute_value(element, "alt")
    if alt is None:
        return None
    text = alt.strip()
    if not text:
        if parser.has_attribute(element, "aria-hidden", "role"):
            return None
        return EMPTY_ALT_NO_ROLE.at_element(
            parser,
            element,
            'Image with empty alt="" should have aria-hidden="true" or role="presentation"',
        )
    if REDUNDANT_ALT_RE.search(text):
        return REDUNDANT_ALT.at_element(
            parser, element, f'Alt text "{text}" describes the medium instead of the content'
        )
    if len(text) < MIN_ALT_LENGTH:
        return ALT_TOO_SHORT.at_element(
            parser,
            element,
            f'Alt text "{text}" is very short. Consider providing more descriptive text',
        )
    return None


def _is_unnamed_icon_button(parser: ElementParser, element: Any) -> bool:
    if parser.has_attribute(element, *NAME_ATTRIBUTES):
        return False
    if not parser.content_children(element):
        return False
    if parser.text_content(element) or parser.has_expression_content(element):
        return False
    return not _has_named_descendant(parser, element)


def _has_named_descendant(parser: ElementParser, element: Any) -> bool:
    stack = parser.child_elements(element)
    while stack:
        child = stack.pop()
        if parser.has_attribute(child, "aria-label", "aria-labelledby", "title"):
            return True
        child_name = parser.element_name(child)
        if child_name == "img" and (parser.attribute_value(child, "alt") or "").strip():
            return True
        if child_name == "title":
            return True
        stack.extend(parser.child_elements(child))
    return False
