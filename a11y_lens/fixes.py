"""Remediation hints for a violation id."""

from __future__ import annotations

from a11y_lens.models import FixSuggestionResult

FIX_CATALOGUE: dict[str, tuple[str, ...]] = {
    "img-missing-alt": (
        'Add descriptive alt text: <img src="..." alt="Description of image content">',
        'For decorative images, use alt="": <img src="..." alt="">',
        "Consider if the image conveys meaningful information",
    ),
    "div-button": (
        "Replace with semantic button: <button onClick={handler}>Text</button>",
        "If div is required, add: role=\"button\" tabIndex={0} onKeyDown={keyHandler}",
        "Ensure keyboard accessibility with Enter and Space key handlers",
    ),
    "button-missing-accessible-name": (
        "Add text content: <button>Click me</button>",
        'Or add aria-label: <button aria-label="Description">...</button>',
        "For icon buttons, always include accessible text or label",
    ),
    "input-missing-label": (
        'Add label element: <label htmlFor="inputId">Label</label><input id="inputId" />',
        'Or use aria-label: <input aria-label="Field description" />',
        "Labels help all users understand form fields",
    ),
    "link-non-descriptive": (
        'Use descriptive text: <a href="...">Read the full privacy policy</a>',
        'Add aria-label for context: <a href="..." aria-label="Read more about...">Read more</a>',
        'Avoid generic text like "click here" or "read more"',
    ),
    "html-missing-lang": (
        'Add lang attribute to html tag: <html lang="en">',
        "Use appropriate language code (en, es, fr, etc.)",
        "This helps screen readers pronounce content correctly",
    ),
    "missing-focus-styles": (
        "Add focus styles: button:focus { outline: 2px solid blue; }",
        "Use :focus-visible for better UX: button:focus-visible { ... }",
        "Ensure focus indicators are clearly visible",
    ),
    "outline-none-no-alternative": (
        "Add custom focus style: button:focus { box-shadow: 0 0 0 3px rgba(0,0,255,0.3); }",
        "Or remove outline: none and keep default focus indicator",
        "Never remove focus styles without providing an alternative",
    ),
}

DEFAULT_FIXES: tuple[str, ...] = (
    "Review WCAG 2.2 documentation for this violation",
    "Consult with accessibility team for specific guidance",
)


def suggest_fix(violation_id: str, code: str) -> FixSuggestionResult:
    """Look up canned suggestions; unknown ids get the generic pair."""
    return FixSuggestionResult(
        violation_id=violation_id,
        code=code,
        suggestions=FIX_CATALOGUE.get(violation_id, DEFAULT_FIXES),
    )
