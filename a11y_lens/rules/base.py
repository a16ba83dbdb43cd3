"""Base rule protocol and the context handed to each rule."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from a11y_lens.file_kinds import FileKind
from a11y_lens.models import FixSuggestion, Severity, Violation
from a11y_lens.parsers.base import SourceParser
from a11y_lens.parsers.markup import MarkupParser
from a11y_lens.parsers.script import ScriptParser

# Parsers answering element queries (JSX and HTML); usable with isinstance.
ElementParser = ScriptParser | MarkupParser


class RuleMode(Enum):
    PATTERN = "pattern"
    STRUCTURAL = "structural"
    BOTH = "both"

    @property
    def needs_tree(self) -> bool:
        return self is not RuleMode.PATTERN


@dataclass(frozen=True, slots=True)
class RuleContext:
    """Everything a rule may look at for one file.

    ``parser`` is set only when the file parsed without errors.
    """

    content: str
    file_path: str
    file_kind: FileKind
    parser: SourceParser | None = None
    design_system_enabled: bool = False


class Rule(Protocol):
    """Protocol for accessibility rules."""

    rule_id: str
    wcag_criteria: tuple[str, ...]
    severity: Severity
    applies_to: frozenset[FileKind]
    mode: RuleMode

    def check(self, context: RuleContext) -> list[Violation]:
        """Inspect one file and return violations in source order."""


@dataclass(frozen=True, slots=True)
class Finding:
    """Rule-local description of one violation kind."""

    violation_id: str
    severity: Severity
    wcag_criteria: tuple[str, ...]
    title: str
    help: str
    tags: tuple[str, ...]
    fix_suggestions: tuple[str | FixSuggestion, ...] = ()

    def at_node(
        self,
        parser: Any,
        node: Any,
        description: str,
        *,
        code: str | None = None,
        fix_suggestions: tuple[str | FixSuggestion, ...] | None = None,
    ) -> Violation:
        """Position a violation on a parsed node; ``code`` defaults to the node's text."""
        position = parser.get_node_location(node)
        return Violation(
            id=self.violation_id,
            severity=self.severity,
            wcag_criteria=self.wcag_criteria,
            title=self.title,
            description=description,
            help=self.help,
            line=position.line,
            column=position.column,
            code=parser.get_node_code(node) if code is None else code,
            fix_suggestions=self.fix_suggestions if fix_suggestions is None else fix_suggestions,
            tags=self.tags,
        )

    def at_element(
        self,
        parser: Any,
        element: Any,
        description: str,
        *,
        fix_suggestions: tuple[str | FixSuggestion, ...] | None = None,
    ) -> Violation:
        """Position a violation on an element, quoting only its opening tag."""
        return self.at_node(
            parser,
            element,
            description,
            code=parser.opening_tag_code(element),
            fix_suggestions=fix_suggestions,
        )
