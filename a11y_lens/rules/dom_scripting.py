"""Accessibility regressions introduced by imperative DOM scripting."""

from __future__ import annotations

from a11y_lens.file_kinds import FileKind
from a11y_lens.models import Violation
from a11y_lens.parsers.script import NodeKind, ScriptParser, SyntaxNode
from a11y_lens.rules.base import Finding, RuleContext, RuleMode

OUTLINE_PROPERTIES = (".style.outline", ".style.outlineStyle", ".style.outlineWidth")
REMOVED_OUTLINE_VALUES = frozenset({"none", "0", "0px"})

SCRIPT_REMOVES_OUTLINE = Finding(
    violation_id="js-remove-focus-outline",
    severity="warning",
    wcag_criteria=("2.4.7",),
    title="Script removes the focus outline",
    help="Leave the outline alone or apply a visible focus style instead",
    tags=("focus", "scripting", "wcag-2.4.7"),
    fix_suggestions=(
        "Toggle a CSS class with a visible :focus-visible style instead",
        "Remove the inline outline assignment",
    ),
)
SCRIPT_POSITIVE_TABINDEX = Finding(
    violation_id="js-positive-tabindex",
    severity="warning",
    wcag_criteria=("2.4.3",),
    title="Script sets a positive tabindex",
    help="Use tabIndex 0 or -1 and rely on DOM order for focus order",
    tags=("keyboard", "scripting", "wcag-2.4.3"),
    fix_suggestions=("Set tabIndex to 0 and reorder the DOM instead",),
)
SCRIPT_AUTOPLAY = Finding(
    violation_id="js-autoplay-media",
    severity="warning",
    wcag_criteria=("1.4.2",),
    title="Script enables media autoplay",
    help="Let users start media themselves or provide an immediate pause control",
    tags=("media", "scripting", "wcag-1.4.2"),
    fix_suggestions=("Remove autoplay and start playback on user action",),
)


class DomScriptingRule:
    """Finds focus, tab order and autoplay changes made from plain scripts."""

    rule_id = "dom-scripting"
    wcag_criteria = ("1.4.2", "2.4.3", "2.4.7")
    severity = "warning"
    applies_to = frozenset({FileKind.JS, FileKind.TS})
    mode = RuleMode.STRUCTURAL

    def check(self, context: RuleContext) -> list[Violation]:
        parser = context.parser
        if not isinstance(parser, ScriptParser):
            return []

        violations: list[Violation] = []
        for node in parser.iter_nodes():
            if node.kind is NodeKind.ASSIGNMENT:
                violation = _check_assignment(parser, node)
            elif node.kind is NodeKind.CALL and (node.name or "").endswith(".setAttribute"):
                violation = _check_set_attribute(parser, node)
            else:
                continue
            if violation is not None:
                violations.append(violation)
        return violations


def _check_assignment(parser: ScriptParser, node: SyntaxNode) -> Violation | None:
    left = node.child_by_field("left")
    right = node.child_by_field("right")
    if left is None or right is None or left.kind is not NodeKind.MEMBER_EXPRESSION:
        return None
    target = left.name or ""
    value = parser.literal_value(right)
    if value is None:
        return None

    if target.endswith(OUTLINE_PROPERTIES) and value.strip().lower() in REMOVED_OUTLINE_VALUES:
        return SCRIPT_REMOVES_OUTLINE.at_node(
            parser, node, f"{target} is set to {value!r}, hiding the focus indicator"
        )
    if target.endswith(".tabIndex") and _positive_int(value):
        return SCRIPT_POSITIVE_TABINDEX.at_node(
            parser, node, f"{target} is set to {value}, which overrides the natural tab order"
        )
    if target.endswith(".autoplay") and value == "true":
        return SCRIPT_AUTOPLAY.at_node(parser, node, f"{target} is enabled from script")
    return None


def _check_set_attribute(parser: ScriptParser, node: SyntaxNode) -> Violation | None:
    arguments = [child for child in node.children if child.field_name == "argument"]
    if not arguments:
        return None
    name = parser.literal_value(arguments[0])
    if name is None:
        return None
    name = name.lower()
    value = parser.literal_value(arguments[1]) if len(arguments) > 1 else None

    if name == "tabindex" and value is not None and _positive_int(value):
        return SCRIPT_POSITIVE_TABINDEX.at_node(
            parser, node, f'setAttribute("tabindex", {value}) overrides the natural tab order'
        )
    if name == "autoplay" and value != "false":
        return SCRIPT_AUTOPLAY.at_node(parser, node, "autoplay attribute is added from script")
    return None


def _positive_int(value: str) -> bool:
    try:
        return int(value.strip()) > 0
    except ValueError:
        return False
