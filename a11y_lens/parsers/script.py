"""Tolerant parser for JS/TS sources with embedded JSX markup.

The scanner walks the source once, lexing script code (strings, templates,
comments, regular expressions, brackets) and descending into JSX wherever a
``<`` appears in expression position. It produces an owned ``SyntaxNode``
tree whose node kinds form a closed enumeration:

* JSX elements with their attributes, text and ``{...}`` containers, and
* a light statement layer derived from the token stream of each code region:
  assignments, calls and object properties with their literal operands.

Syntax problems (unbalanced brackets, unterminated literals, mismatched
closing tags) are recorded as ``ParseError`` entries; scanning recovers and
continues, so the parser never raises on malformed input.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from a11y_lens.file_kinds import FileKind
from a11y_lens.locator import SourcePosition
from a11y_lens.parsers.base import BaseParser, ParseResult

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    PROGRAM = "program"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    SPREAD_ATTRIBUTE = "spread_attribute"
    EXPRESSION_CONTAINER = "expression_container"
    TEXT = "text"
    IDENTIFIER = "identifier"
    MEMBER_EXPRESSION = "member_expression"
    LITERAL = "literal"
    CALL = "call"
    ASSIGNMENT = "assignment"
    PROPERTY = "property"
    EXPRESSION = "expression"


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    TEMPLATE = "template"
    REGEX = "regex"
    PUNCTUATOR = "punctuator"
    JSX = "jsx"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int


class UnknownValue(Enum):
    """Marker for a component prop whose value is a runtime expression."""

    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


UNKNOWN = UnknownValue.UNKNOWN
PropValue = str | bool | UnknownValue


@dataclass(slots=True, eq=False)
class SyntaxNode:
    """Node of the owned syntax tree; offsets are character offsets."""

    kind: NodeKind
    start: int
    end: int
    name: str | None = None
    field_name: str | None = None
    tag_end: int | None = None
    tokens: tuple[Token, ...] = ()
    children: list[SyntaxNode] = field(default_factory=list)
    parent: SyntaxNode | None = field(default=None, repr=False)

    def add(self, child: SyntaxNode, field_name: str | None = None) -> SyntaxNode:
        if field_name is not None:
            child.field_name = field_name
        child.parent = self
        self.children.append(child)
        return child

    def child_by_field(self, name: str) -> SyntaxNode | None:
        for child in self.children:
            if child.field_name == name:
                return child
        return None

    def children_of_kind(self, kind: NodeKind) -> list[SyntaxNode]:
        return [child for child in self.children if child.kind is kind]

    def ancestors(self) -> Iterator[SyntaxNode]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent


_IDENT_CHARS = r"A-Za-z_$\u00a0-\uffff\U00010000-\U0010ffff"
_IDENTIFIER = re.compile(rf"[{_IDENT_CHARS}][\w{_IDENT_CHARS}]*")
_NUMBER = re.compile(r"\.?\d[\w.]*")
_JSX_NAME = re.compile(r"[A-Za-z_$][\w$\-]*(?:[.:][A-Za-z_$][\w$\-]*)*")
_JSX_ATTRIBUTE_NAME = re.compile(r"[A-Za-z_$][\w$\-]*(?::[A-Za-z_$][\w$\-]*)?")
_PUNCTUATOR = re.compile(
    r">>>=|\.\.\.|===|!==|\*\*=|<<=|>>=|>>>|\?\?=|&&=|\|\|=|=>|==|!=|<=|>=|&&|\|\||\?\?"
    r"|\?\.(?!\d)|\+\+|--|\+=|-=|\*=|/=|%=|&=|\|=|\^=|\*\*|<<|>>|[;,<>+\-*/%&|^!~?:=.@#]"
)
_NUMERIC_LITERAL = re.compile(r"[-+]?\d+(?:\.\d+)?")
_CLOSERS = {"(": ")", "[": "]", "{": "}"}
# Identifiers after which a `<` or `/` starts an expression rather than an operator.
_EXPRESSION_KEYWORDS = frozenset(
    {
        "return",
        "typeof",
        "instanceof",
        "in",
        "of",
        "new",
        "delete",
        "void",
        "throw",
        "case",
        "do",
        "else",
        "yield",
        "await",
        "default",
    }
)
_LITERAL_IDENTIFIERS = frozenset({"true", "false", "null", "undefined"})
_CONTROL_KEYWORDS = frozenset({"if", "while", "for", "with"})


class ScriptParser(BaseParser):
    """Parses JS/TS/JSX/TSX and answers element/attribute queries."""

    def __init__(self, content: str, file_path: str, kind: FileKind) -> None:
        super().__init__(content, file_path)
        self.kind = kind
        self.root: SyntaxNode | None = None

    def parse(self) -> ParseResult:
        self.errors = []
        scanner = _Scanner(self, allow_jsx=self.kind is not FileKind.TS)
        self.root = scanner.scan_program()
        logger.debug("parsed %s with %d syntax errors", self.file_path, len(self.errors))
        return ParseResult(tree=self.root, errors=list(self.errors))

    # Tree queries

    def iter_nodes(self) -> Iterator[SyntaxNode]:
        """Yield every node depth-first in source order."""
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def traverse(self, visitor: Callable[[SyntaxNode, SyntaxNode | None], None]) -> None:
        for node in self.iter_nodes():
            visitor(node, node.parent)

    def find_nodes(self, kind: NodeKind) -> list[SyntaxNode]:
        return [node for node in self.iter_nodes() if node.kind is kind]

    def find_nodes_matching(self, predicate: Callable[[SyntaxNode], bool]) -> list[SyntaxNode]:
        return [node for node in self.iter_nodes() if predicate(node)]

    def find_elements(
        self,
        tag_name: str | None = None,
        required_attributes: Iterable[str] | None = None,
    ) -> list[SyntaxNode]:
        """Return elements, optionally filtered by name and attribute presence."""
        required = list(required_attributes or [])
        found: list[SyntaxNode] = []
        for node in self.find_nodes(NodeKind.ELEMENT):
            if tag_name is not None and node.name != tag_name:
                continue
            if any(not self.has_attribute(node, name) for name in required):
                continue
            found.append(node)
        return found

    def get_node_location(self, node: SyntaxNode) -> SourcePosition:
        return self.position(node.start)

    def get_node_code(self, node: SyntaxNode) -> str:
        return self.content[node.start : node.end]

    # Element helpers

    def element_name(self, element: SyntaxNode) -> str:
        return element.name or ""

    def opening_tag_code(self, element: SyntaxNode) -> str:
        end = element.tag_end if element.tag_end is not None else element.end
        return self.content[element.start : end]

    def attributes(self, element: SyntaxNode) -> list[SyntaxNode]:
        return element.children_of_kind(NodeKind.ATTRIBUTE)

    def attribute_name(self, attribute: SyntaxNode) -> str:
        return attribute.name or ""

    def attribute_value_node(self, attribute: SyntaxNode) -> SyntaxNode | None:
        return attribute.child_by_field("value")

    def get_attribute(self, element: SyntaxNode, *names: str) -> SyntaxNode | None:
        for attribute in self.attributes(element):
            if attribute.name in names:
                return attribute
        return None

    def has_attribute(self, element: SyntaxNode, *names: str) -> bool:
        return self.get_attribute(element, *names) is not None

    def has_spread_attributes(self, element: SyntaxNode) -> bool:
        return bool(element.children_of_kind(NodeKind.SPREAD_ATTRIBUTE))

    def static_value(self, attribute: SyntaxNode | None) -> str | None:
        """Return the literal value of an attribute, or None when not static.

        ``alt="x"`` and ``tabIndex={-1}`` are static; ``alt={label}`` is not.
        """
        if attribute is None:
            return None
        value = self.attribute_value_node(attribute)
        if value is None:
            return None
        return self.literal_value(value)

    def attribute_value(self, element: SyntaxNode, *names: str) -> str | None:
        return self.static_value(self.get_attribute(element, *names))

    def literal_value(self, node: SyntaxNode) -> str | None:
        match node.kind:
            case NodeKind.LITERAL:
                return _unquote(self.get_node_code(node))
            case NodeKind.EXPRESSION_CONTAINER:
                return _literal_from_tokens(node.tokens)
            case (
                NodeKind.PROGRAM
                | NodeKind.ELEMENT
                | NodeKind.ATTRIBUTE
                | NodeKind.SPREAD_ATTRIBUTE
                | NodeKind.TEXT
                | NodeKind.IDENTIFIER
                | NodeKind.MEMBER_EXPRESSION
                | NodeKind.CALL
                | NodeKind.ASSIGNMENT
                | NodeKind.PROPERTY
                | NodeKind.EXPRESSION
            ):
                return None

    def component_props(self, element: SyntaxNode) -> dict[str, PropValue]:
        """Extract props: literal strings, ``True`` for bare attributes, UNKNOWN otherwise."""
        props: dict[str, PropValue] = {}
        for attribute in self.attributes(element):
            value = self.attribute_value_node(attribute)
            if value is None:
                props[self.attribute_name(attribute)] = True
            elif value.kind is NodeKind.LITERAL:
                props[self.attribute_name(attribute)] = _unquote(self.get_node_code(value))
            else:
                props[self.attribute_name(attribute)] = UNKNOWN
        return props

    def content_children(self, element: SyntaxNode) -> list[SyntaxNode]:
        return [
            child
            for child in element.children
            if child.kind in (NodeKind.TEXT, NodeKind.ELEMENT, NodeKind.EXPRESSION_CONTAINER)
        ]

    def child_elements(self, element: SyntaxNode) -> list[SyntaxNode]:
        return element.children_of_kind(NodeKind.ELEMENT)

    def parent_element(self, node: SyntaxNode) -> SyntaxNode | None:
        """Nearest enclosing element, not crossing into an attribute value."""
        for ancestor in node.ancestors():
            if ancestor.kind is NodeKind.ELEMENT:
                return ancestor
            if ancestor.kind is NodeKind.ATTRIBUTE:
                return None
        return None

    def text_content(self, element: SyntaxNode) -> str:
        """Concatenate the literal text rendered inside an element."""
        parts: list[str] = []
        stack = list(reversed(self.content_children(element)))
        while stack:
            node = stack.pop()
            if node.kind is NodeKind.TEXT:
                parts.append(self.get_node_code(node).strip())
            elif node.kind is NodeKind.ELEMENT:
                stack.extend(reversed(self.content_children(node)))
            elif node.kind is NodeKind.EXPRESSION_CONTAINER:
                literal = _literal_from_tokens(node.tokens)
                if literal:
                    parts.append(literal.strip())
        return " ".join(part for part in parts if part)

    def has_expression_content(self, element: SyntaxNode) -> bool:
        """True when an element renders a non-literal runtime expression inside it."""
        stack = list(self.content_children(element))
        while stack:
            node = stack.pop()
            if node.kind is NodeKind.EXPRESSION_CONTAINER:
                if node.tokens and _literal_from_tokens(node.tokens) is None:
                    return True
            elif node.kind is NodeKind.ELEMENT:
                stack.extend(self.content_children(node))
        return False

    def static_ids(self) -> set[str]:
        ids: set[str] = set()
        for element in self.find_nodes(NodeKind.ELEMENT):
            value = self.attribute_value(element, "id")
            if value:
                ids.add(value)
        return ids


class _Scanner:
    """Single-pass scanner building the owned tree for one source text."""

    def __init__(self, parser: ScriptParser, *, allow_jsx: bool) -> None:
        self.parser = parser
        self.text = parser.content
        self.length = len(self.text)
        self.pos = 0
        self.allow_jsx = allow_jsx
        self.typed = parser.kind in (FileKind.TS, FileKind.TSX)
        # Offsets of `)` tokens closing an if/while/for/with header.
        self.control_closers: set[int] = set()

    def scan_program(self) -> SyntaxNode:
        root = SyntaxNode(kind=NodeKind.PROGRAM, start=0, end=self.length)
        if self.text.startswith("#!"):
            newline = self.text.find("\n")
            self.pos = self.length if newline == -1 else newline
        tokens, nodes = self.scan_code(closer=None)
        root.tokens = tuple(tokens)
        _attach_sorted(root, nodes + _derive_nodes(tokens))
        return root

    def error(self, message: str, offset: int) -> None:
        self.parser.record_error_at(message, offset)

    def peek(self, distance: int = 1) -> str:
        index = self.pos + distance
        return self.text[index] if index < self.length else ""

    def skip_space(self) -> None:
        while self.pos < self.length and self.text[self.pos].isspace():
            self.pos += 1

    # Script code

    def scan_code(self, closer: str | None) -> tuple[list[Token], list[SyntaxNode]]:
        """Scan code until EOF or an unmatched ``closer``; pos is left on the closer."""
        text = self.text
        tokens: list[Token] = []
        nodes: list[SyntaxNode] = []
        brackets: list[tuple[str, int, bool]] = []
        while self.pos < self.length:
            char = text[self.pos]
            start = self.pos
            if char.isspace():
                self.pos += 1
            elif char == "/" and self.peek() == "/":
                newline = text.find("\n", self.pos)
                self.pos = self.length if newline == -1 else newline
            elif char == "/" and self.peek() == "*":
                self.skip_block_comment()
            elif char in "'\"":
                tokens.append(self.scan_string(char))
            elif char == "`":
                tokens.append(self.scan_template(nodes))
            elif (char.isdigit() or (char == "." and self.peek().isdigit())) and (
                match := _NUMBER.match(text, self.pos)
            ) is not None:
                self.pos = match.end()
                tokens.append(Token(TokenKind.NUMBER, match.group(0), start, self.pos))
            elif (match := _IDENTIFIER.match(text, self.pos)) is not None:
                self.pos = match.end()
                tokens.append(Token(TokenKind.IDENTIFIER, match.group(0), start, self.pos))
            elif (
                char == "<"
                and self.allow_jsx
                and _expression_position(tokens, self.control_closers)
                and self.looks_like_jsx()
            ):
                element = self.scan_element()
                nodes.append(element)
                tokens.append(Token(TokenKind.JSX, "", element.start, element.end))
            elif char == "/" and _expression_position(tokens, self.control_closers):
                tokens.append(self.scan_regex())
            elif char in _CLOSERS:
                brackets.append((char, start, char == "(" and _opens_control_header(tokens)))
                tokens.append(Token(TokenKind.PUNCTUATOR, char, start, start + 1))
                self.pos += 1
            elif char in ")]}":
                if brackets and _CLOSERS[brackets[-1][0]] == char:
                    if brackets.pop()[2]:
                        self.control_closers.add(start)
                    tokens.append(Token(TokenKind.PUNCTUATOR, char, start, start + 1))
                elif char == closer:
                    for opener, offset, _ in brackets:
                        self.error(f"Unclosed '{opener}'", offset)
                    return tokens, nodes
                else:
                    self.error(f"Unexpected '{char}'", start)
                self.pos += 1
            elif (match := _PUNCTUATOR.match(text, self.pos)) is not None:
                self.pos = match.end()
                tokens.append(Token(TokenKind.PUNCTUATOR, match.group(0), start, self.pos))
            else:
                self.error(f"Unexpected character '{char}'", start)
                self.pos += 1

        for opener, offset, _ in brackets:
            self.error(f"Unclosed '{opener}'", offset)
        if closer is not None:
            self.error(f"Expected '{closer}'", self.length)
        return tokens, nodes

    def skip_block_comment(self) -> None:
        end = self.text.find("*/", self.pos + 2)
        if end == -1:
            self.error("Unterminated comment", self.pos)
            self.pos = self.length
        else:
            self.pos = end + 2

    def scan_string(self, quote: str) -> Token:
        start = self.pos
        self.pos += 1
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == "\\":
                self.pos += 3 if self.text.startswith("\r\n", self.pos + 1) else 2
                continue
            if char == quote:
                self.pos += 1
                return Token(TokenKind.STRING, self.text[start : self.pos], start, self.pos)
            if char == "\n":
                break
            self.pos += 1
        self.error("Unterminated string literal", start)
        return Token(TokenKind.STRING, self.text[start : self.pos], start, self.pos)

    def scan_template(self, nodes: list[SyntaxNode]) -> Token:
        start = self.pos
        self.pos += 1
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == "\\":
                self.pos += 2
            elif char == "`":
                self.pos += 1
                return Token(TokenKind.TEMPLATE, self.text[start : self.pos], start, self.pos)
            elif char == "$" and self.peek() == "{":
                self.pos += 2
                inner_tokens, inner_nodes = self.scan_code(closer="}")
                nodes.extend(inner_nodes)
                nodes.extend(_derive_nodes(inner_tokens))
                if self.pos < self.length:
                    self.pos += 1
            else:
                self.pos += 1
        self.error("Unterminated template literal", start)
        return Token(TokenKind.TEMPLATE, self.text[start : self.pos], start, self.pos)

    def scan_regex(self) -> Token:
        start = self.pos
        self.pos += 1
        in_class = False
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == "\\":
                self.pos += 2
                continue
            if char == "\n":
                break
            if char == "[":
                in_class = True
            elif char == "]":
                in_class = False
            elif char == "/" and not in_class:
                self.pos += 1
                while self.pos < self.length and self.text[self.pos].isalpha():
                    self.pos += 1
                return Token(TokenKind.REGEX, self.text[start : self.pos], start, self.pos)
            self.pos += 1
        self.error("Unterminated regular expression", start)
        return Token(TokenKind.REGEX, self.text[start : self.pos], start, self.pos)

    # JSX

    def looks_like_jsx(self) -> bool:
        following = self.peek()
        if following == ">":
            return True
        match = _JSX_NAME.match(self.text, self.pos + 1)
        if match is None:
            return False
        index = match.end()
        while index < self.length and self.text[index].isspace():
            index += 1
        if index >= self.length:
            return False
        char = self.text[index]
        if char == ",":
            return False
        if self.typed and self.text.startswith("extends", index):
            return False
        return char in "/>{" or _IDENTIFIER.match(char) is not None

    def scan_element(self) -> SyntaxNode:
        """Scan one JSX element starting at ``<``."""
        start = self.pos
        self.pos += 1
        self.skip_space()
        name_match = _JSX_NAME.match(self.text, self.pos)
        name = ""
        if name_match is not None:
            name = name_match.group(0)
            self.pos = name_match.end()
        element = SyntaxNode(kind=NodeKind.ELEMENT, start=start, end=start, name=name)

        while True:
            self.skip_space()
            if self.pos >= self.length:
                self.error(f"Unterminated JSX tag <{name}>", start)
                element.end = element.tag_end = self.length
                return element
            char = self.text[self.pos]
            if char == "/" and self.peek() == ">":
                self.pos += 2
                element.end = element.tag_end = self.pos
                return element
            if char == ">":
                self.pos += 1
                element.tag_end = self.pos
                break
            if char == "{":
                spread = self.scan_expression_container()
                spread.kind = NodeKind.SPREAD_ATTRIBUTE
                element.add(spread)
            elif (match := _JSX_ATTRIBUTE_NAME.match(self.text, self.pos)) is not None:
                element.add(self.scan_attribute(match))
            else:
                self.error(f"Unexpected '{char}' in JSX tag <{name}>", self.pos)
                self.pos += 1

        self.scan_children(element)
        return element

    def scan_attribute(self, match: re.Match[str]) -> SyntaxNode:
        attribute = SyntaxNode(
            kind=NodeKind.ATTRIBUTE, start=self.pos, end=match.end(), name=match.group(0)
        )
        self.pos = match.end()
        self.skip_space()
        if self.pos >= self.length or self.text[self.pos] != "=":
            return attribute
        self.pos += 1
        self.skip_space()
        char = self.text[self.pos] if self.pos < self.length else ""
        value: SyntaxNode | None = None
        if char in ("'", '"'):
            value = self.scan_attribute_string(char)
        elif char == "{":
            value = self.scan_expression_container()
        elif char == "<":
            value = self.scan_element()
        else:
            self.error(f"Expected a value for attribute '{attribute.name}'", self.pos)
        if value is not None:
            attribute.add(value, "value")
            attribute.end = value.end
        return attribute

    def scan_attribute_string(self, quote: str) -> SyntaxNode:
        start = self.pos
        end = self.text.find(quote, start + 1)
        if end == -1:
            self.error("Unterminated attribute string", start)
            self.pos = self.length
        else:
            self.pos = end + 1
        return SyntaxNode(kind=NodeKind.LITERAL, start=start, end=self.pos)

    def scan_expression_container(self) -> SyntaxNode:
        start = self.pos
        self.pos += 1
        tokens, nodes = self.scan_code(closer="}")
        if self.pos < self.length:
            self.pos += 1
        container = SyntaxNode(
            kind=NodeKind.EXPRESSION_CONTAINER, start=start, end=self.pos, tokens=tuple(tokens)
        )
        _attach_sorted(container, nodes + _derive_nodes(tokens))
        return container

    def scan_children(self, element: SyntaxNode) -> None:
        text = self.text
        while self.pos < self.length:
            char = text[self.pos]
            if char == "<" and self.peek() == "/":
                closing_start = self.pos
                self.pos += 2
                self.skip_space()
                match = _JSX_NAME.match(text, self.pos)
                closing = ""
                if match is not None:
                    closing = match.group(0)
                    self.pos = match.end()
                self.skip_space()
                if self.pos < self.length and text[self.pos] == ">":
                    self.pos += 1
                else:
                    self.error("Expected '>'", self.pos)
                if closing != element.name:
                    self.error(
                        f"Expected corresponding closing tag for <{element.name}>",
                        closing_start,
                    )
                element.end = self.pos
                return
            if char == "<":
                element.add(self.scan_element())
            elif char == "{":
                element.add(self.scan_expression_container())
            else:
                end = self.pos
                while end < self.length and text[end] not in "<{":
                    end += 1
                if text[self.pos : end].strip():
                    element.add(SyntaxNode(kind=NodeKind.TEXT, start=self.pos, end=end))
                self.pos = end
        self.error(f"Unclosed JSX element <{element.name}>", element.start)
        element.end = self.length


def _expression_position(tokens: list[Token], control_closers: set[int]) -> bool:
    """True when a following ``<`` or ``/`` starts an operand rather than an operator."""
    if not tokens:
        return True
    last = tokens[-1]
    if last.kind is TokenKind.PUNCTUATOR:
        if last.text == ")":
            return last.start in control_closers
        if last.text in ("]", "}"):
            return False
        # Postfix `++`/`--` and the TS non-null `!` close an operand.
        if last.text in ("++", "--", "!") and len(tokens) > 1:
            return not _ends_operand(tokens[-2])
        return True
    if last.kind is TokenKind.IDENTIFIER:
        return last.text in _EXPRESSION_KEYWORDS
    return False


def _ends_operand(token: Token) -> bool:
    if token.kind is TokenKind.IDENTIFIER:
        return token.text not in _EXPRESSION_KEYWORDS
    return token.kind is TokenKind.PUNCTUATOR and token.text in (")", "]")


def _opens_control_header(tokens: list[Token]) -> bool:
    if not tokens or tokens[-1].kind is not TokenKind.IDENTIFIER:
        return False
    if tokens[-1].text == "await" and len(tokens) > 1:
        return tokens[-2].text == "for"
    return tokens[-1].text in _CONTROL_KEYWORDS


def _attach_sorted(parent: SyntaxNode, nodes: list[SyntaxNode]) -> None:
    for node in sorted(nodes, key=lambda item: item.start):
        parent.add(node)


def _derive_nodes(tokens: list[Token]) -> list[SyntaxNode]:
    """Build assignment, call and property nodes from one code region's tokens."""
    derived: list[SyntaxNode] = []
    count = len(tokens)
    index = 0
    while index < count:
        token = tokens[index]
        previous = tokens[index - 1].text if index > 0 else None
        following = tokens[index + 1] if index + 1 < count else None
        if (
            token.kind in (TokenKind.IDENTIFIER, TokenKind.STRING)
            and previous in ("{", ",")
            and following is not None
            and following.text == ":"
        ):
            key = SyntaxNode(kind=NodeKind.IDENTIFIER, start=token.start, end=token.end)
            if token.kind is TokenKind.STRING:
                key.kind = NodeKind.LITERAL
            key.name = _unquote(token.text)
            prop = SyntaxNode(kind=NodeKind.PROPERTY, start=token.start, end=following.end)
            prop.name = key.name
            prop.add(key, "key")
            value = _value_node(tokens, index + 2)
            if value is not None:
                prop.add(value, "value")
                prop.end = value.end
            derived.append(prop)
            index += 2
            continue

        if token.kind is not TokenKind.IDENTIFIER or previous in (".", "?."):
            index += 1
            continue

        chain_end = index
        while (
            chain_end + 2 < count
            and tokens[chain_end + 1].text in (".", "?.")
            and tokens[chain_end + 2].kind is TokenKind.IDENTIFIER
        ):
            chain_end += 2
        target = _chain_node(tokens, index, chain_end)
        following = tokens[chain_end + 1] if chain_end + 1 < count else None
        if following is not None and following.text == "=":
            assignment = SyntaxNode(kind=NodeKind.ASSIGNMENT, start=target.start, end=following.end)
            assignment.add(target, "left")
            value = _value_node(tokens, chain_end + 2)
            if value is not None:
                assignment.add(value, "right")
                assignment.end = value.end
            derived.append(assignment)
        elif following is not None and following.text == "(":
            derived.append(_call_node(tokens, target, chain_end + 1))
        index = chain_end + 1
    return derived


def _chain_node(tokens: list[Token], first: int, last: int) -> SyntaxNode:
    names = [tokens[position].text for position in range(first, last + 1, 2)]
    kind = NodeKind.IDENTIFIER if first == last else NodeKind.MEMBER_EXPRESSION
    return SyntaxNode(
        kind=kind, start=tokens[first].start, end=tokens[last].end, name=".".join(names)
    )


def _value_node(tokens: list[Token], at: int) -> SyntaxNode | None:
    if at >= len(tokens):
        return None
    token = tokens[at]
    if (
        token.text in ("-", "+")
        and at + 1 < len(tokens)
        and tokens[at + 1].kind is TokenKind.NUMBER
    ):
        return SyntaxNode(kind=NodeKind.LITERAL, start=token.start, end=tokens[at + 1].end)
    if _is_literal_token(token):
        return SyntaxNode(kind=NodeKind.LITERAL, start=token.start, end=token.end)
    return SyntaxNode(kind=NodeKind.EXPRESSION, start=token.start, end=token.end)


def _call_node(tokens: list[Token], callee: SyntaxNode, open_index: int) -> SyntaxNode:
    call = SyntaxNode(kind=NodeKind.CALL, start=callee.start, end=tokens[open_index].end)
    call.name = callee.name
    call.add(callee, "callee")
    depth = 0
    argument: list[Token] = []
    for position in range(open_index, len(tokens)):
        token = tokens[position]
        call.end = token.end
        if token.kind is TokenKind.PUNCTUATOR and token.text in ("(", "[", "{"):
            depth += 1
            if depth == 1:
                continue
        elif token.kind is TokenKind.PUNCTUATOR and token.text in (")", "]", "}"):
            depth -= 1
            if depth == 0:
                break
        elif depth == 1 and token.text == ",":
            _add_argument(call, argument)
            argument = []
            continue
        argument.append(token)
    _add_argument(call, argument)
    return call


def _add_argument(call: SyntaxNode, argument: list[Token]) -> None:
    if not argument:
        return
    literal = _literal_from_tokens(tuple(argument))
    kind = NodeKind.LITERAL if literal is not None else NodeKind.EXPRESSION
    call.add(SyntaxNode(kind=kind, start=argument[0].start, end=argument[-1].end), "argument")


def _is_literal_token(token: Token) -> bool:
    if token.kind in (TokenKind.STRING, TokenKind.NUMBER):
        return True
    if token.kind is TokenKind.TEMPLATE:
        return "${" not in token.text
    return token.kind is TokenKind.IDENTIFIER and token.text in _LITERAL_IDENTIFIERS


def _literal_from_tokens(tokens: tuple[Token, ...]) -> str | None:
    if len(tokens) == 1 and _is_literal_token(tokens[0]):
        return _unquote(tokens[0].text)
    if len(tokens) == 2 and tokens[0].text in ("-", "+") and tokens[1].kind is TokenKind.NUMBER:
        joined = tokens[0].text + tokens[1].text
        return joined if _NUMERIC_LITERAL.fullmatch(joined) else None
    return None


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text
