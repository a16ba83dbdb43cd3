"""Rules backed by the raw-text pattern detectors."""

from __future__ import annotations

from dataclasses import dataclass

from a11y_lens import patterns
from a11y_lens.file_kinds import STYLESHEET_KINDS, TEXT_MARKUP_KINDS, FileKind
from a11y_lens.models import Severity, Violation
from a11y_lens.rules.base import RuleContext, RuleMode


@dataclass(frozen=True, slots=True)
class PatternRule:
    """Adapts one ``patterns.detect_*`` function to the rule protocol."""

    rule_id: str
    name: str
    description: str
    detector: patterns.Detector
    applies_to: frozenset[FileKind]
    wcag_criteria: tuple[str, ...]
    severity: Severity
    mode: RuleMode = RuleMode.PATTERN

    def check(self, context: RuleContext) -> list[Violation]:
        return self.detector(context.content, context.file_kind)


HTML_ONLY = frozenset({FileKind.HTML})


def pattern_rules() -> list[PatternRule]:
    """Return the pattern rules in registration order."""
    return [
        _rule(patterns.IMG_MISSING_ALT, patterns.detect_img_missing_alt, TEXT_MARKUP_KINDS),
        _rule(patterns.DIV_BUTTON, patterns.detect_div_button, TEXT_MARKUP_KINDS),
        _rule(
            patterns.BUTTON_MISSING_NAME,
            patterns.detect_button_missing_name,
            TEXT_MARKUP_KINDS,
        ),
        PatternRule(
            rule_id="input-labels",
            name="Input Labels",
            description="Inputs need a matching <label for> or aria labelling.",
            detector=patterns.detect_input_missing_label,
            applies_to=TEXT_MARKUP_KINDS,
            wcag_criteria=patterns.INPUT_MISSING_LABEL.wcag_criteria,
            severity="error",
        ),
        _rule(
            patterns.LINK_NON_DESCRIPTIVE,
            patterns.detect_link_non_descriptive,
            TEXT_MARKUP_KINDS,
        ),
        _rule(
            patterns.PLACEHOLDER_AS_LABEL,
            patterns.detect_placeholder_as_label,
            TEXT_MARKUP_KINDS,
        ),
        _rule(patterns.MISSING_H1, patterns.detect_missing_h1, TEXT_MARKUP_KINDS),
        _rule(patterns.DUPLICATE_ID, patterns.detect_duplicate_id, TEXT_MARKUP_KINDS),
        _rule(patterns.HTML_MISSING_LANG, patterns.detect_html_missing_lang, HTML_ONLY),
        _rule(patterns.HTML_MISSING_TITLE, patterns.detect_html_missing_title, HTML_ONLY),
        _rule(patterns.IFRAME_MISSING_TITLE, patterns.detect_iframe_missing_title, HTML_ONLY),
        _rule(
            patterns.MISSING_FOCUS_STYLES,
            patterns.detect_missing_focus_styles,
            STYLESHEET_KINDS,
        ),
        _rule(patterns.OUTLINE_NONE, patterns.detect_outline_none, STYLESHEET_KINDS),
        PatternRule(
            rule_id="font-size",
            name="Font Size",
            description="Pixel font sizes below 12px are hard to read.",
            detector=patterns.detect_small_font_size,
            applies_to=STYLESHEET_KINDS,
            wcag_criteria=patterns.FONT_SIZE_TOO_SMALL.wcag_criteria,
            severity="error",
        ),
        _rule(
            patterns.TOUCH_TARGET_TOO_SMALL,
            patterns.detect_small_touch_target,
            STYLESHEET_KINDS,
        ),
        _rule(
            patterns.DISPLAY_NONE_ON_INTERACTIVE,
            patterns.detect_display_none_on_interactive,
            STYLESHEET_KINDS,
        ),
        _rule(patterns.TEXT_TRANSPARENT, patterns.detect_transparent_text, STYLESHEET_KINDS),
    ]


def _rule(
    check: patterns.PatternCheck,
    detector: patterns.Detector,
    applies_to: frozenset[FileKind],
) -> PatternRule:
    return PatternRule(
        rule_id=check.violation_id,
        name=check.title,
        description=check.description,
        detector=detector,
        applies_to=applies_to,
        wcag_criteria=check.wcag_criteria,
        severity=check.severity,
    )
