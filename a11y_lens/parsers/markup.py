"""HTML parser built on BeautifulSoup.

Uses the ``html.parser`` builder because it records where each tag starts
(``Tag.sourceline`` and ``Tag.sourcepos``); html5lib does not. The builder
recovers from any markup the way browsers do, so no parse errors are
recorded for HTML.

Attribute lookups are case-insensitive to match the lower-cased attribute
names the builder produces, so rules written against JSX names such as
``onKeyDown`` or ``tabIndex`` also match their HTML spellings.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PreformattedString, Tag

from a11y_lens.locator import SourcePosition
from a11y_lens.parsers.base import BaseParser, ParseResult

logger = logging.getLogger(__name__)


class MarkupParser(BaseParser):
    """Parses an HTML document and answers element/attribute queries."""

    def __init__(self, content: str, file_path: str) -> None:
        super().__init__(content, file_path)
        self.soup: BeautifulSoup | None = None

    def parse(self) -> ParseResult:
        self.errors = []
        try:
            self.soup = BeautifulSoup(self.content, "html.parser", multi_valued_attributes=None)
        except ParserRejectedMarkup as exc:
            logger.debug("html.parser rejected %s: %s", self.file_path, exc)
            self.soup = None
            self.record_error(f"Unparsable markup: {exc}", 1, 1)
        return ParseResult(tree=self.soup, errors=list(self.errors))

    # Tree queries

    def find_elements(
        self,
        tag_name: str | None = None,
        required_attributes: Iterable[str] | None = None,
    ) -> list[Tag]:
        """Return elements in document order, optionally filtered by name and attributes."""
        if self.soup is None:
            return []
        required = list(required_attributes or [])
        return [
            element
            for element in self.soup.find_all(tag_name.lower() if tag_name else True)
            if all(self.has_attribute(element, name) for name in required)
        ]

    def get_node_location(self, node: Tag) -> SourcePosition:
        if node.sourceline is None:
            return SourcePosition(line=1, column=1)
        return SourcePosition(line=node.sourceline, column=(node.sourcepos or 0) + 1)

    def get_node_code(self, node: Tag) -> str:
        return self.opening_tag_code(node)

    # Element helpers

    def element_name(self, element: Tag) -> str:
        return element.name or ""

    def opening_tag_code(self, element: Tag) -> str:
        position = self.get_node_location(element)
        start = self.index.offset(position.line, position.column)
        return self.content[start : _tag_end(self.content, start)]

    def has_attribute(self, element: Tag, *names: str) -> bool:
        return any(name.lower() in element.attrs for name in names)

    def attribute_value(self, element: Tag, *names: str) -> str | None:
        for name in names:
            value = element.attrs.get(name.lower())
            if value is not None:
                return value if isinstance(value, str) else " ".join(value)
        return None

    def has_spread_attributes(self, element: Tag) -> bool:
        return False

    def content_children(self, element: Tag) -> list[Tag | NavigableString]:
        return [
            child
            for child in element.children
            if isinstance(child, Tag)
            or (
                isinstance(child, NavigableString)
                and not isinstance(child, PreformattedString)
                and child.strip()
            )
        ]

    def child_elements(self, element: Tag) -> list[Tag]:
        return [child for child in element.children if isinstance(child, Tag)]

    def parent_element(self, node: Tag) -> Tag | None:
        parent = node.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return parent

    def text_content(self, element: Tag) -> str:
        return " ".join(element.stripped_strings)

    def has_expression_content(self, element: Tag) -> bool:
        return False

    def static_ids(self) -> set[str]:
        return {
            value
            for element in self.find_elements()
            if (value := self.attribute_value(element, "id"))
        }


def _tag_end(content: str, start: int) -> int:
    """Offset just past the ``>`` closing the tag that opens at ``start``."""
    quote: str | None = None
    previous = ""
    for index in range(start + 1, len(content)):
        char = content[index]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'" and previous == "=":
            quote = char
        elif char == ">":
            return index + 1
        if not char.isspace():
            previous = char
    return len(content)
