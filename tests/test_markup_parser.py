"""Tests for the HTML parser."""

from __future__ import annotations

from a11y_lens.file_kinds import FileKind
from a11y_lens.parsers import MarkupParser, create_parser

PAGE = """<!doctype html>
<html lang="en">
<body>
  <div id="root">
    <img src="a.png" alt="Team photo">
    <button onclick="go()" tabindex="-1">Go</button>
    <a href="/x" title="a > b">Read <b>the</b> report</a>
  </div>
</body>
</html>
"""


def _parse(source: str) -> MarkupParser:
    parser = MarkupParser(source, "index.html")
    assert parser.parse().errors == []
    return parser


def test_create_parser_returns_markup_parser_for_html() -> None:
    assert isinstance(create_parser(PAGE, "index.html", FileKind.HTML), MarkupParser)


def test_elements_attributes_and_text() -> None:
    parser = _parse(PAGE)

    elements = parser.find_elements()
    assert [parser.element_name(item) for item in elements] == [
        "html",
        "body",
        "div",
        "img",
        "button",
        "a",
        "b",
    ]
    img, button, link = parser.find_elements("img")[0], elements[4], elements[5]
    assert parser.attribute_value(img, "alt") == "Team photo"
    assert parser.attribute_value(button, "tabIndex") == "-1"
    assert parser.has_attribute(button, "onClick")
    assert parser.text_content(link) == "Read the report"
    assert parser.has_expression_content(link) is False
    assert parser.has_spread_attributes(link) is False
    assert parser.static_ids() == {"root"}
    assert [item.name for item in parser.find_elements(required_attributes=["href"])] == ["a"]


def test_positions_and_opening_tag_code() -> None:
    parser = _parse(PAGE)
    img = parser.find_elements("img")[0]
    link = parser.find_elements("a")[0]

    position = parser.get_node_location(img)
    assert (position.line, position.column) == (5, 5)
    assert parser.opening_tag_code(img) == '<img src="a.png" alt="Team photo">'
    assert parser.get_node_code(link) == '<a href="/x" title="a > b">'


def test_parent_and_children_skip_whitespace_and_comments() -> None:
    parser = _parse(PAGE.replace("<div id=\"root\">", "<div id=\"root\"><!-- note -->"))
    root = parser.find_elements("div")[0]

    assert [child.name for child in parser.content_children(root)] == ["img", "button", "a"]
    assert parser.parent_element(parser.find_elements("img")[0]) is root
    assert parser.parent_element(parser.find_elements("html")[0]) is None


def test_positions_count_only_line_feeds() -> None:
    source = '<p>one</p>\r\n<img src="a.png">\r<b>x</b>'
    parser = _parse(source)

    position = parser.get_node_location(parser.find_elements("b")[0])
    assert (position.line, position.column) == (2, 19)
    assert parser.opening_tag_code(parser.find_elements("b")[0]) == "<b>"
