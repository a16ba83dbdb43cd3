"""Regex detectors over raw source text.

Each ``detect_*`` function takes the full content and its file kind and returns
violations in source-occurrence order. Detectors never need a parsed tree, so
they keep working on files whose structural parse failed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from a11y_lens.file_kinds import STYLESHEET_KINDS, TEXT_MARKUP_KINDS, FileKind
from a11y_lens.locator import LineIndex
from a11y_lens.models import FixSuggestion, Severity, Violation

Detector = Callable[[str, FileKind], list[Violation]]

IMG_TAG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
DIV_CLICK_RE = re.compile(r"<div[^>]*(onclick|onClick)[^>]*>", re.IGNORECASE)
BUTTON_RE = re.compile(r"<button[^>]*>([\s\S]*?)</button>", re.IGNORECASE)
INPUT_TAG_RE = re.compile(r"<input[^>]*>", re.IGNORECASE)
INPUT_ID_RE = re.compile(r"id=[\"']([^\"']+)[\"']")
INPUT_TYPE_RE = re.compile(r"type=[\"']([^\"']+)[\"']")
LINK_RE = re.compile(r"<a[^>]*>(.*?)</a>", re.IGNORECASE)
HTML_TAG_RE = re.compile(r"<html[^>]*>", re.IGNORECASE)
HTML_LANG_RE = re.compile(r"<html[^>]*lang=", re.IGNORECASE)
TITLE_RE = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)
IFRAME_RE = re.compile(r"<iframe[^>]*>", re.IGNORECASE)
FOCUS_SELECTOR_RE = re.compile(r":focus")
OUTLINE_NONE_RE = re.compile(r"outline\s*:\s*none", re.IGNORECASE)
ELEMENT_ID_RE = re.compile(r"(?<![\w-])id=[\"']([^\"']+)[\"']", re.IGNORECASE)
FONT_SIZE_PX_RE = re.compile(r"font-size\s*:\s*(\d+(?:\.\d+)?)\s*px", re.IGNORECASE)
TRANSPARENT_TEXT_RE = re.compile(r"(?<![\w-])color\s*:\s*transparent", re.IGNORECASE)
PLACEHOLDER_INPUT_RE = re.compile(
    r"<input[^>]*placeholder=[\"']([^\"']+)[\"'][^>]*>", re.IGNORECASE
)
HEADING_TAG_RE = re.compile(r"<h([1-6])[^>]*>", re.IGNORECASE)
SIZE_PX_RE = re.compile(
    r"(?<![\w-])(width|height|min-width|min-height)\s*:\s*(\d+(?:\.\d+)?)\s*px", re.IGNORECASE
)
TOUCH_SELECTOR_RE = re.compile(
    r"button|btn|link|input|click|(?<![\w-])a(?![\w-])", re.IGNORECASE
)
DISPLAY_NONE_RE = re.compile(r"\.([\w-]+)\s*\{[^}]*display\s*:\s*none", re.IGNORECASE)
COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
TAG_RE = re.compile(r"<[^>]+>")

NON_DESCRIPTIVE_LINK_TEXT = frozenset({"click here", "here", "read more", "more", "link"})
UNLABELLED_INPUT_TYPES = frozenset({"hidden", "submit", "button"})
INTERACTIVE_CLASS_WORDS = ("button", "btn", "link", "menu", "nav", "interactive")
MIN_TOUCH_TARGET_PX = 44


@dataclass(frozen=True, slots=True)
class PatternCheck:
    """Metadata shared by every violation a detector emits for one check."""

    violation_id: str
    severity: Severity
    wcag_criteria: tuple[str, ...]
    title: str
    description: str
    help: str
    fix_suggestions: tuple[str | FixSuggestion, ...]
    tags: tuple[str, ...]

    def at(
        self,
        index: LineIndex | None,
        offset: int | None,
        code: str,
        *,
        description: str | None = None,
        fix_suggestions: tuple[str | FixSuggestion, ...] | None = None,
    ) -> Violation:
        line, column = 1, 1
        if index is not None and offset is not None:
            position = index.position(offset)
            line, column = position.line, position.column
        return Violation(
            id=self.violation_id,
            severity=self.severity,
            wcag_criteria=self.wcag_criteria,
            title=self.title,
            description=description or self.description,
            help=self.help,
            line=line,
            column=column,
            code=code,
            fix_suggestions=self.fix_suggestions if fix_suggestions is None else fix_suggestions,
            tags=self.tags,
        )


IMG_MISSING_ALT = PatternCheck(
    violation_id="img-missing-alt",
    severity="error",
    wcag_criteria=("1.1.1",),
    title="Image missing alt attribute",
    description="All images must have an alt attribute for screen readers",
    help="Add alt attribute with meaningful description",
    fix_suggestions=('Add alt="description" to the image tag', 'Use alt="" for decorative images'),
    tags=("wcag-a", "images"),
)
DIV_BUTTON = PatternCheck(
    violation_id="div-button",
    severity="error",
    wcag_criteria=("1.3.1", "4.1.2"),
    title="Interactive div should be a button",
    description="Div with click handler should be a semantic button element",
    help="Replace with <button> or add proper ARIA role and keyboard support",
    fix_suggestions=(
        "Replace <div onClick> with <button>",
        'Add role="button" tabIndex="0" and keyboard handlers if div is required',
    ),
    tags=("wcag-a", "semantic-html", "keyboard"),
)
BUTTON_MISSING_NAME = PatternCheck(
    violation_id="button-missing-accessible-name",
    severity="error",
    wcag_criteria=("4.1.2",),
    title="Button has no accessible name",
    description="Button must have text content or aria-label",
    help="Add visible text or aria-label attribute",
    fix_suggestions=("Add text inside the button", 'Add aria-label="description" attribute'),
    tags=("wcag-a", "buttons"),
)
INPUT_MISSING_LABEL = PatternCheck(
    violation_id="input-missing-label",
    severity="error",
    wcag_criteria=("1.3.1", "3.3.2"),
    title="Form input missing label",
    description="All form inputs must have an associated label",
    help="Add a <label> element or aria-label attribute",
    fix_suggestions=('Add aria-label="description" to the input',),
    tags=("wcag-a", "forms"),
)
INPUT_NO_ID_OR_LABEL = PatternCheck(
    violation_id="input-no-id-or-label",
    severity="error",
    wcag_criteria=("1.3.1", "3.3.2"),
    title="Form input has no label or id",
    description="Input needs an id with matching label or aria-label",
    help="Add id and <label for> or aria-label",
    fix_suggestions=(
        'Add id="inputId" and <label for="inputId">Label</label>',
        'Add aria-label="description"',
    ),
    tags=("wcag-a", "forms"),
)
LINK_NON_DESCRIPTIVE = PatternCheck(
    violation_id="link-non-descriptive",
    severity="warning",
    wcag_criteria=("2.4.4",),
    title="Link text not descriptive",
    description="Link text is not meaningful out of context",
    help="Use descriptive link text that makes sense when read alone",
    fix_suggestions=(
        'Use descriptive text like "Read the full article" instead of "Read more"',
        "Add aria-label with descriptive text",
    ),
    tags=("wcag-aa", "links"),
)
DUPLICATE_ID = PatternCheck(
    violation_id="duplicate-id",
    severity="error",
    wcag_criteria=("4.1.1",),
    title="Duplicate ID found",
    description="IDs must be unique within a document",
    help="Ensure each ID is unique",
    fix_suggestions=(
        "Change one of the duplicate IDs to a unique value",
        "Use class instead of id if uniqueness is not required",
    ),
    tags=("wcag-a", "html"),
)
HTML_MISSING_LANG = PatternCheck(
    violation_id="html-missing-lang",
    severity="error",
    wcag_criteria=("3.1.1",),
    title="HTML missing lang attribute",
    description="The <html> element must have a lang attribute",
    help="Add lang attribute to specify page language",
    fix_suggestions=('Add lang="en" to <html> tag',),
    tags=("wcag-a", "language"),
)
HTML_MISSING_TITLE = PatternCheck(
    violation_id="html-missing-title",
    severity="error",
    wcag_criteria=("2.4.2",),
    title="Page missing title",
    description="Every HTML page must have a descriptive <title>",
    help="Add <title> element in <head>",
    fix_suggestions=("Add <title>Page Title</title> in the <head> section",),
    tags=("wcag-a", "title"),
)
IFRAME_MISSING_TITLE = PatternCheck(
    violation_id="iframe-missing-title",
    severity="error",
    wcag_criteria=("2.4.1", "4.1.2"),
    title="Iframe missing title",
    description="All iframes must have a title attribute",
    help="Add title attribute describing iframe content",
    fix_suggestions=('Add title="description" to iframe',),
    tags=("wcag-a", "iframe"),
)
MISSING_FOCUS_STYLES = PatternCheck(
    violation_id="missing-focus-styles",
    severity="warning",
    wcag_criteria=("2.4.7",),
    title="No focus styles defined",
    description="CSS should include :focus styles for keyboard navigation",
    help="Add :focus and :focus-visible styles",
    fix_suggestions=(
        "Add :focus styles for interactive elements",
        "Use :focus-visible for better UX",
    ),
    tags=("wcag-aa", "focus", "keyboard"),
)
OUTLINE_NONE = PatternCheck(
    violation_id="outline-none-no-alternative",
    severity="error",
    wcag_criteria=("2.4.7",),
    title="Removed focus outline without alternative",
    description="outline: none removes keyboard focus indicator",
    help="Provide alternative focus indicator if removing outline",
    fix_suggestions=(
        "Add custom focus style (border, box-shadow, etc.)",
        "Use :focus-visible to show outline only for keyboard users",
    ),
    tags=("wcag-aa", "focus"),
)
FONT_SIZE_TOO_SMALL = PatternCheck(
    violation_id="font-size-too-small",
    severity="error",
    wcag_criteria=("1.4.4",),
    title="Font size too small for readability",
    description="Font size is below minimum readable size (12px minimum, 16px recommended)",
    help="Increase font size to at least 12px, preferably 16px",
    fix_suggestions=(
        "Change font-size to at least 12px: font-size: 12px;",
        "For body text, use 16px or larger",
        "Use relative units (rem, em) for better scalability",
    ),
    tags=("wcag-aa", "typography"),
)
FONT_SIZE_SMALL = PatternCheck(
    violation_id="font-size-small",
    severity="warning",
    wcag_criteria=("1.4.4",),
    title="Font size may be too small",
    description="Font size is below recommended minimum (12px minimum, 16px recommended)",
    help="Consider increasing font size for better readability",
    fix_suggestions=(
        "Increase to at least 12px: font-size: 12px;",
        "For body text, use 16px or larger",
    ),
    tags=("wcag-aa", "typography"),
)
TEXT_TRANSPARENT = PatternCheck(
    violation_id="text-transparent",
    severity="error",
    wcag_criteria=("1.4.3",),
    title="Text color is transparent",
    description="Transparent text color makes content invisible",
    help="Use visible text color or ensure content is accessible via other means",
    fix_suggestions=(
        "Use a visible color: color: #333;",
        "If hiding text visually, ensure it's available to screen readers",
    ),
    tags=("wcag-aa", "color"),
)
PLACEHOLDER_AS_LABEL = PatternCheck(
    violation_id="placeholder-as-label",
    severity="error",
    wcag_criteria=("3.3.2",),
    title="Placeholder used as label",
    description=(
        "Placeholders disappear when user types and are not accessible to screen readers"
    ),
    help="Use proper <label> element instead of placeholder",
    fix_suggestions=(
        "Add <label> element with for attribute",
        "Keep placeholder as hint, but add proper label",
    ),
    tags=("wcag-a", "forms"),
)
MISSING_H1 = PatternCheck(
    violation_id="missing-h1",
    severity="warning",
    wcag_criteria=("1.3.1", "2.4.6"),
    title="Missing h1 heading",
    description="Page should have a single h1 heading for main content",
    help="Add an h1 heading for the main page title",
    fix_suggestions=("Add <h1>Main Page Title</h1>",),
    tags=("wcag-aa", "headings"),
)
TOUCH_TARGET_TOO_SMALL = PatternCheck(
    violation_id="touch-target-too-small",
    severity="error",
    wcag_criteria=("2.5.5",),
    title="Touch target too small",
    description="Interactive element is smaller than the 44x44px touch target minimum",
    help="Increase touch target size to at least 44x44px",
    fix_suggestions=(
        "Add padding to increase effective touch target size",
        "Ensure both width and height meet 44px minimum",
    ),
    tags=("wcag-aa", "touch-targets"),
)
DISPLAY_NONE_ON_INTERACTIVE = PatternCheck(
    violation_id="display-none-on-interactive",
    severity="warning",
    wcag_criteria=("2.1.1", "4.1.2"),
    title="display: none may hide interactive content from screen readers",
    description="display: none hides content from assistive technologies",
    help="Use visually-hidden technique instead of display: none for screen reader content",
    fix_suggestions=(
        "Use .sr-only or visually-hidden class instead",
        "Example: .visually-hidden { position: absolute; width: 1px; height: 1px; "
        "clip: rect(0,0,0,0); overflow: hidden; }",
    ),
    tags=("wcag-a", "screen-readers"),
)


def detect_img_missing_alt(content: str, kind: FileKind) -> list[Violation]:
    if kind not in TEXT_MARKUP_KINDS:
        return []
    index = LineIndex(content)
    return [
        IMG_MISSING_ALT.at(index, match.start(), match.group(0))
        for match in IMG_TAG_RE.finditer(content)
        if "alt=" not in match.group(0)
    ]


def detect_div_button(content: str, kind: FileKind) -> list[Violation]:
    if kind not in TEXT_MARKUP_KINDS:
        return []
    index = LineIndex(content)
    return [
        DIV_BUTTON.at(index, match.start(), match.group(0))
        for match in DIV_CLICK_RE.finditer(content)
    ]


def detect_button_missing_name(content: str, kind: FileKind) -> list[Violation]:
    if kind not in TEXT_MARKUP_KINDS:
        return []
    index = LineIndex(content)
    violations: list[Violation] = []
    for match in BUTTON_RE.finditer(content):
        opening_tag = content[match.start() : match.start(1)]
        text = TAG_RE.sub("", COMMENT_RE.sub("", match.group(1))).strip()
        if not text and "aria-label" not in opening_tag:
            violations.append(BUTTON_MISSING_NAME.at(index, match.start(), match.group(0)))
    return violations


def detect_input_missing_label(content: str, kind: FileKind) -> list[Violation]:
    """Inputs need a ``<label for>`` match or aria labelling; hidden/submit/button are exempt."""
    if kind not in TEXT_MARKUP_KINDS:
        return []
    index = LineIndex(content)
    violations: list[Violation] = []
    for match in INPUT_TAG_RE.finditer(content):
        tag = match.group(0)
        type_match = INPUT_TYPE_RE.search(tag)
        input_type = type_match.group(1) if type_match else "text"
        if input_type in UNLABELLED_INPUT_TYPES:
            continue
        id_match = INPUT_ID_RE.search(tag)
        has_aria_label = "aria-label" in tag or "aria-labelledby" in tag
        if has_aria_label:
            continue
        if id_match is None:
            violations.append(INPUT_NO_ID_OR_LABEL.at(index, match.start(), tag))
            continue
        input_id = id_match.group(1)
        label_re = re.compile(
            rf"<label[^>]*for=[\"']{re.escape(input_id)}[\"'][^>]*>", re.IGNORECASE
        )
        if label_re.search(content) is None:
            violations.append(
                INPUT_MISSING_LABEL.at(
                    index,
                    match.start(),
                    tag,
                    fix_suggestions=(
                        f'Add <label for="{input_id}">Label text</label>',
                        'Add aria-label="description" to the input',
                    ),
                )
            )
    return violations


def detect_link_non_descriptive(content: str, kind: FileKind) -> list[Violation]:
    if kind not in TEXT_MARKUP_KINDS:
        return []
    index = LineIndex(content)
    violations: list[Violation] = []
    for match in LINK_RE.finditer(content):
        text = TAG_RE.sub("", match.group(1)).strip().lower()
        if text in NON_DESCRIPTIVE_LINK_TEXT:
            violations.append(
                LINK_NON_DESCRIPTIVE.at(
                    index,
                    match.start(),
                    match.group(0),
                    description=f'Link text "{text}" is not meaningful out of context',
                )
            )
    return violations


def detect_duplicate_id(content: str, kind: FileKind) -> list[Violation]:
    """Report every repeat of a literal ``id="..."`` after its first occurrence."""
    if kind not in TEXT_MARKUP_KINDS:
        return []
    index = LineIndex(content)
    seen: set[str] = set()
    violations: list[Violation] = []
    for match in ELEMENT_ID_RE.finditer(content):
        element_id = match.group(1)
        if element_id in seen:
            violations.append(
                DUPLICATE_ID.at(
                    index,
                    match.start(),
                    match.group(0),
                    description=f'ID "{element_id}" is used multiple times. IDs must be unique.',
                )
            )
        seen.add(element_id)
    return violations


def detect_html_missing_lang(content: str, kind: FileKind) -> list[Violation]:
    if kind is not FileKind.HTML or HTML_LANG_RE.search(content):
        return []
    tag = HTML_TAG_RE.search(content)
    return [HTML_MISSING_LANG.at(None, None, tag.group(0) if tag else "")]


def detect_html_missing_title(content: str, kind: FileKind) -> list[Violation]:
    if kind is not FileKind.HTML:
        return []
    if any(match.group(1).strip() for match in TITLE_RE.finditer(content)):
        return []
    return [HTML_MISSING_TITLE.at(None, None, "")]


def detect_iframe_missing_title(content: str, kind: FileKind) -> list[Violation]:
    if kind is not FileKind.HTML:
        return []
    index = LineIndex(content)
    return [
        IFRAME_MISSING_TITLE.at(index, match.start(), match.group(0))
        for match in IFRAME_RE.finditer(content)
        if "title=" not in match.group(0)
    ]


def detect_missing_focus_styles(content: str, kind: FileKind) -> list[Violation]:
    if kind not in STYLESHEET_KINDS or FOCUS_SELECTOR_RE.search(content):
        return []
    return [MISSING_FOCUS_STYLES.at(None, None, "")]


def detect_outline_none(content: str, kind: FileKind) -> list[Violation]:
    """Flag every ``outline: none``; alternative focus styles are not considered."""
    if kind not in STYLESHEET_KINDS:
        return []
    index = LineIndex(content)
    return [
        OUTLINE_NONE.at(index, match.start(), match.group(0))
        for match in OUTLINE_NONE_RE.finditer(content)
    ]


def detect_small_font_size(content: str, kind: FileKind) -> list[Violation]:
    if kind not in STYLESHEET_KINDS:
        return []
    index = LineIndex(content)
    violations: list[Violation] = []
    for match in FONT_SIZE_PX_RE.finditer(content):
        size = float(match.group(1))
        label = match.group(1)
        if size < 10:
            check = FONT_SIZE_TOO_SMALL
            description = (
                f"Font size {label}px is below minimum readable size "
                "(12px minimum, 16px recommended)"
            )
        elif size < 12:
            check = FONT_SIZE_SMALL
            description = (
                f"Font size {label}px is below recommended minimum "
                "(12px minimum, 16px recommended)"
            )
        else:
            continue
        violations.append(check.at(index, match.start(), match.group(0), description=description))
    return violations


def detect_transparent_text(content: str, kind: FileKind) -> list[Violation]:
    if kind not in STYLESHEET_KINDS:
        return []
    index = LineIndex(content)
    return [
        TEXT_TRANSPARENT.at(index, match.start(), match.group(0))
        for match in TRANSPARENT_TEXT_RE.finditer(content)
    ]


def detect_placeholder_as_label(content: str, kind: FileKind) -> list[Violation]:
    """Inputs whose only visible label is a placeholder."""
    if kind not in TEXT_MARKUP_KINDS:
        return []
    index = LineIndex(content)
    violations: list[Violation] = []
    for match in PLACEHOLDER_INPUT_RE.finditer(content):
        tag = match.group(0)
        if "aria-label" in tag or "aria-labelledby" in tag:
            continue
        id_match = INPUT_ID_RE.search(tag)
        if id_match is not None:
            label_re = re.compile(
                rf"<label[^>]*for=[\"']{re.escape(id_match.group(1))}[\"']", re.IGNORECASE
            )
            if label_re.search(content):
                continue
        violations.append(PLACEHOLDER_AS_LABEL.at(index, match.start(), tag))
    return violations


def detect_missing_h1(content: str, kind: FileKind) -> list[Violation]:
    if kind not in TEXT_MARKUP_KINDS:
        return []
    headings = list(HEADING_TAG_RE.finditer(content))
    if not headings or any(match.group(1) == "1" for match in headings):
        return []
    return [MISSING_H1.at(LineIndex(content), headings[0].start(), "")]


def detect_small_touch_target(content: str, kind: FileKind) -> list[Violation]:
    """Sizes under 44px inside rules whose selector names a button, link or input."""
    if kind not in STYLESHEET_KINDS:
        return []
    index = LineIndex(content)
    violations: list[Violation] = []
    for match in SIZE_PX_RE.finditer(content):
        prop, size = match.group(1), match.group(2)
        if float(size) >= MIN_TOUCH_TARGET_PX:
            continue
        if not TOUCH_SELECTOR_RE.search(_enclosing_selector(content, match.start())):
            continue
        violations.append(
            TOUCH_TARGET_TOO_SMALL.at(
                index,
                match.start(),
                match.group(0),
                description=(
                    f"{prop} of {size}px is below WCAG minimum of 44x44px for touch targets"
                ),
                fix_suggestions=(
                    f"Increase {prop} to at least 44px: {prop}: 44px;",
                    *TOUCH_TARGET_TOO_SMALL.fix_suggestions,
                ),
            )
        )
    return violations


def detect_display_none_on_interactive(content: str, kind: FileKind) -> list[Violation]:
    if kind not in STYLESHEET_KINDS:
        return []
    index = LineIndex(content)
    violations: list[Violation] = []
    for match in DISPLAY_NONE_RE.finditer(content):
        class_name = match.group(1)
        if not any(word in class_name.lower() for word in INTERACTIVE_CLASS_WORDS):
            continue
        violations.append(
            DISPLAY_NONE_ON_INTERACTIVE.at(
                index,
                match.start(),
                match.group(0),
                description=(
                    f'Using display: none on "{class_name}" may hide content '
                    "from assistive technologies"
                ),
            )
        )
    return violations


def _enclosing_selector(content: str, offset: int) -> str:
    """Selector text of the innermost block open at ``offset``; empty at top level."""
    depth = 0
    for position in range(offset - 1, -1, -1):
        char = content[position]
        if char == "}":
            depth += 1
        elif char == "{":
            if depth == 0:
                start = max(content.rfind(boundary, 0, position) for boundary in "{};") + 1
                return content[start:position].strip()
            depth -= 1
    return ""
