"""CSS/SCSS parser built on tinycss2."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import tinycss2
import tinycss2.ast

from a11y_lens.file_kinds import FileKind
from a11y_lens.locator import SourcePosition
from a11y_lens.parsers.base import BaseParser, ParseResult

logger = logging.getLogger(__name__)

_SCSS_LINE_COMMENT = re.compile(r"(?<![:\"'(\\])//[^\n]*")
_SCSS_VARIABLE = re.compile(r"\$[\w-]+\s*:[^;{}]*;")
_SCSS_INTERPOLATION = re.compile(r"#\{[^{}]*\}")
# tinycss2 counts a lone CR and a form feed as line breaks; LineIndex does not.
_FOREIGN_LINE_BREAK = re.compile(r"\r(?!\n)|\f")


@dataclass(slots=True, eq=False)
class StyleDeclaration:
    property: str
    value: str
    important: bool
    start: int
    line: int
    column: int


@dataclass(slots=True, eq=False)
class StyleRule:
    """A qualified rule; nested rules keep their raw (possibly ``&``-relative) selector."""

    selector: str
    start: int
    line: int
    column: int
    declarations: list[StyleDeclaration] = field(default_factory=list)
    children: list[StyleRule | StyleAtRule] = field(default_factory=list)


@dataclass(slots=True, eq=False)
class StyleAtRule:
    name: str
    params: str
    start: int
    line: int
    column: int
    declarations: list[StyleDeclaration] = field(default_factory=list)
    children: list[StyleRule | StyleAtRule] = field(default_factory=list)


StyleNode = StyleRule | StyleAtRule | StyleDeclaration


@dataclass(frozen=True, slots=True)
class FocusStyles:
    has_focus: bool
    has_focus_visible: bool
    has_focus_within: bool


@dataclass(frozen=True, slots=True)
class ColorDeclarations:
    color: tuple[StyleDeclaration, ...]
    background_color: tuple[StyleDeclaration, ...]
    border: tuple[StyleDeclaration, ...]


@dataclass(frozen=True, slots=True)
class ReducedMotionSupport:
    has_prefers_reduced_motion: bool
    has_animation_or_transition: bool
    media_queries: tuple[str, ...]


class StylesheetParser(BaseParser):
    """Parses a stylesheet into rules, at-rules and declarations."""

    def __init__(self, content: str, file_path: str, kind: FileKind = FileKind.CSS) -> None:
        super().__init__(content, file_path)
        self.kind = kind
        self.nodes: list[StyleRule | StyleAtRule] = []

    def parse(self) -> ParseResult:
        self.errors = []
        source = _FOREIGN_LINE_BREAK.sub(" ", self.content)
        if self.kind is FileKind.SCSS:
            source = _blank_scss_extensions(source)
        items = tinycss2.parse_stylesheet(source, skip_comments=True, skip_whitespace=True)
        self.nodes = self._build(items)
        return ParseResult(tree=self.nodes, errors=list(self.errors))

    # Queries

    def iter_nodes(self) -> Iterator[StyleRule | StyleAtRule]:
        stack = list(reversed(self.nodes))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get_all_rules(self) -> list[StyleRule]:
        return [node for node in self.iter_nodes() if isinstance(node, StyleRule)]

    def get_rules_by_selector(self, selector: str) -> list[StyleRule]:
        return [rule for rule in self.get_all_rules() if rule.selector == selector]

    def get_rules_containing(self, pattern: str | re.Pattern[str]) -> list[StyleRule]:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [rule for rule in self.get_all_rules() if compiled.search(rule.selector)]

    def get_all_declarations(self) -> list[StyleDeclaration]:
        declarations: list[StyleDeclaration] = []
        for node in self.iter_nodes():
            declarations.extend(node.declarations)
        return declarations

    def get_declarations_by_property(self, prop: str) -> list[StyleDeclaration]:
        return [decl for decl in self.get_all_declarations() if decl.property == prop.lower()]

    def has_focus_styles(self) -> FocusStyles:
        selectors = [rule.selector.lower() for rule in self.get_all_rules()]
        return FocusStyles(
            has_focus=any(":focus" in selector for selector in selectors),
            has_focus_visible=any(":focus-visible" in selector for selector in selectors),
            has_focus_within=any(":focus-within" in selector for selector in selectors),
        )

    def get_color_declarations(self) -> ColorDeclarations:
        declarations = self.get_all_declarations()
        return ColorDeclarations(
            color=tuple(decl for decl in declarations if decl.property == "color"),
            background_color=tuple(
                decl for decl in declarations if decl.property == "background-color"
            ),
            border=tuple(decl for decl in declarations if decl.property.startswith("border")),
        )

    def get_media_queries(self) -> list[StyleAtRule]:
        return [
            node
            for node in self.iter_nodes()
            if isinstance(node, StyleAtRule) and node.name == "media"
        ]

    def check_prefers_reduced_motion(self) -> ReducedMotionSupport:
        queries = tuple(node.params for node in self.get_media_queries())
        return ReducedMotionSupport(
            has_prefers_reduced_motion=any("prefers-reduced-motion" in query for query in queries),
            has_animation_or_transition=any(
                "animation" in decl.property or "transition" in decl.property
                for decl in self.get_all_declarations()
            ),
            media_queries=queries,
        )

    def get_node_location(self, node: StyleNode) -> SourcePosition:
        return SourcePosition(line=node.line, column=node.column)

    def get_node_code(self, node: StyleNode) -> str:
        """Return the selector/prelude of a rule, or the text of a declaration."""
        stops = ";}" if isinstance(node, StyleDeclaration) else "{;}"
        end = node.start
        while end < len(self.content) and self.content[end] not in stops:
            end += 1
        return self.content[node.start : end].rstrip()

    # Tree building

    def _build(self, items: list[Any]) -> list[StyleRule | StyleAtRule]:
        built: list[StyleRule | StyleAtRule] = []
        for item in items:
            if item.type == "error":
                self._record_css_error(item)
            elif item.type == "qualified-rule":
                rule = StyleRule(
                    selector=tinycss2.serialize(item.prelude).strip(),
                    **self._position_fields(item),
                )
                self._fill(rule, item.content)
                built.append(rule)
            elif item.type == "at-rule":
                at_rule = StyleAtRule(
                    name=item.lower_at_keyword,
                    params=tinycss2.serialize(item.prelude).strip(),
                    **self._position_fields(item),
                )
                if item.content is not None:
                    self._fill(at_rule, item.content)
                built.append(at_rule)
        return built

    def _fill(self, container: StyleRule | StyleAtRule, content: list[Any]) -> None:
        items = tinycss2.parse_blocks_contents(content, skip_comments=True, skip_whitespace=True)
        nested: list[Any] = []
        for item in items:
            if item.type == "declaration":
                container.declarations.append(
                    StyleDeclaration(
                        property=item.lower_name,
                        value=tinycss2.serialize(item.value).strip(),
                        important=item.important,
                        **self._position_fields(item),
                    )
                )
            else:
                nested.append(item)
        container.children.extend(self._build(nested))

    def _position_fields(self, item: Any) -> dict[str, int]:
        line = item.source_line or 1
        column = item.source_column or 1
        return {"start": self.index.offset(line, column), "line": line, "column": column}

    def _record_css_error(self, error: tinycss2.ast.ParseError) -> None:
        logger.debug("stylesheet parse error in %s: %s", self.file_path, error.message)
        self.record_error(error.message, error.source_line or 1, error.source_column or 1)


def _blank(match: re.Match[str]) -> str:
    return "".join("\n" if char == "\n" else " " for char in match.group(0))


def _blank_scss_extensions(source: str) -> str:
    """Hide SCSS-only syntax from the CSS tokenizer without moving any offsets."""
    source = _SCSS_LINE_COMMENT.sub(_blank, source)
    source = _SCSS_VARIABLE.sub(_blank, source)
    return _SCSS_INTERPOLATION.sub(lambda match: "_" * len(match.group(0)), source)


def parse_style_attribute(style: str) -> list[StyleDeclaration]:
    """Declarations of an inline ``style`` value; positions are relative to the value."""
    items = tinycss2.parse_blocks_contents(style, skip_comments=True, skip_whitespace=True)
    return [
        StyleDeclaration(
            property=item.lower_name,
            value=tinycss2.serialize(item.value).strip(),
            important=item.important,
            start=0,
            line=item.source_line,
            column=item.source_column,
        )
        for item in items
        if item.type == "declaration"
    ]
