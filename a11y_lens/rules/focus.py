"""Visible focus indicator rule."""

from __future__ import annotations

from a11y_lens.file_kinds import ELEMENT_KINDS, STYLESHEET_KINDS
from a11y_lens.models import FixSuggestion, Violation
from a11y_lens.parsers.markup import MarkupParser
from a11y_lens.parsers.script import NodeKind, ScriptParser, SyntaxNode
from a11y_lens.parsers.stylesheet import (
    StyleDeclaration,
    StylesheetParser,
    parse_style_attribute,
)
from a11y_lens.rules.base import Finding, RuleContext, RuleMode

REMOVED_OUTLINE_VALUES = frozenset({"none", "0", "0px"})
INLINE_ALTERNATIVES = frozenset({"boxShadow", "border", "borderColor", "borderBottom"})

INLINE_OUTLINE_NONE = Finding(
    violation_id="inline-outline-none",
    severity="warning",
    wcag_criteria=("2.4.7",),
    title="Inline style removes the focus outline",
    help="Keep a visible focus indicator when removing the outline",
    tags=("focus", "inline-style", "wcag-2.4.7"),
    fix_suggestions=(
        FixSuggestion(
            title="Move focus styling to CSS",
            description=(
                "Style :focus-visible in a stylesheet instead of removing the outline inline"
            ),
            code=".control:focus-visible { outline: 2px solid #005fcc; }",
            priority="medium",
        ),
    ),
)
FOCUS_STYLE_REMOVED = Finding(
    violation_id="focus-style-removed",
    severity="error",
    wcag_criteria=("2.4.7",),
    title="Focus rule removes the outline without replacement",
    help="Add a box-shadow, border or outline that stays visible on focus",
    tags=("focus", "css", "wcag-2.4.7"),
    fix_suggestions=(
        FixSuggestion(
            title="Provide an alternative focus indicator",
            description="Replace the outline with another visible style",
            code=":focus-visible { outline: none; box-shadow: 0 0 0 3px #005fcc; }",
            priority="high",
        ),
    ),
)


class FocusVisibleRule:
    """Checks that keyboard focus stays visible."""

    rule_id = "focus-visible"
    wcag_criteria = ("2.4.7",)
    severity = "warning"
    applies_to = ELEMENT_KINDS | STYLESHEET_KINDS
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if isinstance(parser, ScriptParser):
            return _check_inline_styles(parser)
        if isinstance(parser, MarkupParser):
            return _check_style_attributes(parser)
        if isinstance(parser, StylesheetParser):
            return _check_focus_rules(parser)
        return []


def _check_inline_styles(parser: ScriptParser) -> list[Violation]:
    violations: list[Violation] = []
    for prop in parser.find_nodes(NodeKind.PROPERTY):
        if prop.name != "outline" or not _inside_style_attribute(prop):
            continue
        value = prop.child_by_field("value")
        literal = parser.literal_value(value) if value is not None else None
        if literal is None or literal.strip().lower() not in REMOVED_OUTLINE_VALUES:
            continue
        siblings = prop.parent.children_of_kind(NodeKind.PROPERTY) if prop.parent else []
        if any(sibling.name in INLINE_ALTERNATIVES for sibling in siblings):
            continue
        violations.append(
            INLINE_OUTLINE_NONE.at_node(
                parser, prop, f"style sets outline to {literal!r} with no replacement indicator"
            )
        )
    return violations


def _inside_style_attribute(node: SyntaxNode) -> bool:
    for ancestor in node.ancestors():
        if ancestor.kind is NodeKind.ATTRIBUTE:
            return ancestor.name == "style"
        if ancestor.kind is NodeKind.ELEMENT:
            return False
    return False


def _check_style_attributes(parser: MarkupParser) -> list[Violation]:
    violations: list[Violation] = []
    for element in parser.find_elements(required_attributes=("style",)):
        declarations = parse_style_attribute(parser.attribute_value(element, "style") or "")
        removed = [decl for decl in declarations if _removes_outline(decl)]
        if not removed or any(_is_alternative(decl) for decl in declarations):
            continue
        violations.append(
            INLINE_OUTLINE_NONE.at_element(
                parser,
                element,
                f"style sets {removed[0].property} to {removed[0].value!r} "
                "with no replacement indicator",
            )
        )
    return violations


def _check_focus_rules(parser: StylesheetParser) -> list[Violation]:
    violations: list[Violation] = []
    for rule in parser.get_rules_containing(":focus"):
        removed = [decl for decl in rule.declarations if _removes_outline(decl)]
        if not removed or any(_is_alternative(decl) for decl in rule.declarations):
            continue
        for declaration in removed:
            violations.append(
                FOCUS_STYLE_REMOVED.at_node(
                    parser,
                    declaration,
                    f'"{rule.selector}" removes the outline without another focus indicator',
                )
            )
    return violations


def _removes_outline(declaration: StyleDeclaration) -> bool:
    return (
        declaration.property in ("outline", "outline-style", "outline-width")
        and declaration.value.lower() in REMOVED_OUTLINE_VALUES
    )


def _is_alternative(declaration: StyleDeclaration) -> bool:
    value = declaration.value.lower()
    if value in REMOVED_OUTLINE_VALUES:
        return False
    return (
        declaration.property == "box-shadow"
        or declaration.property.startswith("border")
        or declaration.property in ("outline", "outline-style", "outline-width")
    )
