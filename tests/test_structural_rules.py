"""Tests for the parser-backed rules."""

from __future__ import annotations

from a11y_lens.file_kinds import classify
from a11y_lens.models import Violation
from a11y_lens.parsers import create_parser
from a11y_lens.rules.alt_text import AltTextRule
from a11y_lens.rules.aria import AriaRequiredRule
from a11y_lens.rules.base import RuleContext
from a11y_lens.rules.design_system import DesignSystemComponentsRule
from a11y_lens.rules.dom_scripting import DomScriptingRule
from a11y_lens.rules.focus import FocusVisibleRule
from a11y_lens.rules.forms import FormLabelsRule
from a11y_lens.rules.headings import HeadingHierarchyRule
from a11y_lens.rules.keyboard import KeyboardNavRule
from a11y_lens.rules.page_content import PageContentRule
from a11y_lens.rules.semantics import SemanticHtmlRule
from a11y_lens.rules.skip_links import SkipLinksRule


def _run(rule, source: str, path: str = "App.jsx", **kwargs) -> list[Violation]:
    kind = classify(path)
    parser = create_parser(source, path, kind)
    assert parser is not None
    assert parser.parse().errors == []
    context = RuleContext(content=source, file_path=path, file_kind=kind, parser=parser, **kwargs)
    return rule.check(context)


def _ids(violations: list[Violation]) -> list[str]:
    return [item.id for item in violations]


def test_aria_roles_attributes_and_references() -> None:
    source = """const A = () => (
  <div>
    <div role="slider" aria-valuenow={5}>x</div>
    <div role="dialog" aria-labelledby="title">x</div>
    <h2 id="title">Title</h2>
    <span role="bogus">x</span>
    <nav role="navigation" aria-label="Main">x</nav>
    <div role="navigation" aria-labelledby="title">x</div>
    <p aria-describedby="hint missing">x</p>
    <p id="hint">hint</p>
  </div>
);
"""
    found = _run(AriaRequiredRule(), source)

    assert _ids(found) == [
        "aria-required",
        "aria-invalid-role",
        "aria-redundant",
        "aria-invalid-reference",
    ]
    missing = found[0]
    assert missing.description.endswith("requires ARIA attributes: aria-valuemin, aria-valuemax")
    assert (missing.line, missing.column) == (3, 5)
    assert missing.code == '<div role="slider" aria-valuenow={5}>'
    assert found[2].severity == "warning"
    assert '"missing"' in found[3].description


def test_aria_rule_skips_files_without_a_parse() -> None:
    context = RuleContext(
        content="<div role='bogus' />", file_path="a.jsx", file_kind=classify("a.jsx")
    )
    assert AriaRequiredRule().check(context) == []


def test_keyboard_tabindex_and_custom_controls() -> None:
    source = """const A = () => (
  <div>
    <a href="/x" tabIndex={3}>x</a>
    <div tabIndex="-1">x</div>
    <div role="button" onClick={go}>x</div>
    <span role="checkbox" tabIndex={0} onKeyDown={k} aria-checked="false">x</span>
    <button role="button">x</button>
    <Menu role="menuitem" />
  </div>
);
"""
    found = _run(KeyboardNavRule(), source)

    assert [(item.id, item.severity) for item in found] == [
        ("tabindex-positive", "warning"),
        ("tabindex-negative", "info"),
        ("custom-interactive-missing-keyboard", "error"),
    ]
    assert found[2].description == (
        '<div role="button"> is missing tabIndex and a keyboard handler'
    )


def test_keyboard_pointer_events_on_interactive_selectors() -> None:
    source = (
        "button { pointer-events: none; }\n"
        "button:disabled { pointer-events: none; }\n"
        ".card { pointer-events: none; }\n"
    )
    found = _run(KeyboardNavRule(), source, path="app.css")

    assert _ids(found) == ["pointer-events-none"]
    assert (found[0].line, found[0].code) == (1, "pointer-events: none")


def test_semantic_containers_and_list_items() -> None:
    source = """const A = () => (
  <div>
    <div onClick={go}>Go</div>
    <span onClick={go} role="button">Go</span>
    <section><li>Orphan</li></section>
    <ul><li>Fine</li></ul>
    <List><li>Component</li></List>
  </div>
);
const Item = () => <li>Top level</li>;
"""
    found = _run(SemanticHtmlRule(), source)

    assert _ids(found) == ["non-semantic-interactive", "li-outside-list"]
    assert found[1].line == 5


def test_alt_text_quality_and_icon_buttons() -> None:
    source = """const A = () => (
  <div>
    <img src="a.png" alt="" />
    <img src="b.png" alt="" aria-hidden="true" />
    <img src="c.png" alt="Image of a cat" />
    <img src="d.png" alt="Cat" />
    <img src="e.png" alt="Team at the offsite" />
    <img src="f.png" />
    <input type="image" src="go.png" />
    <button><svg /></button>
    <button aria-label="Close"><svg /></button>
    <button><Icon title="Close" /></button>
    <button>{label}</button>
  </div>
);
"""
    found = _run(AltTextRule(), source)

    assert [(item.id, item.line) for item in found] == [
        ("img-empty-alt-no-role", 3),
        ("img-redundant-alt", 5),
        ("img-alt-too-short", 6),
        ("input-image-missing-alt", 9),
        ("icon-button-missing-aria", 10),
    ]


def test_heading_skips_and_empty_headings() -> None:
    source = """const A = () => (
  <main>
    <h1>Title</h1>
    <h3>Skipped</h3>
    <h4></h4>
    <h2>{title}</h2>
  </main>
);
"""
    found = _run(HeadingHierarchyRule(), source)

    assert [(item.id, item.line) for item in found] == [
        ("heading-level-skip", 4),
        ("heading-empty", 5),
    ]
    suggestion = found[0].fix_suggestions[0]
    assert not isinstance(suggestion, str)
    assert suggestion.description == "Use h2 instead of h3"


def test_form_controls_and_label_targets() -> None:
    source = """const A = () => (
  <form>
    <label htmlFor="country">Country</label>
    <select id="country"><option>NL</option></select>
    <select><option>A</option></select>
    <label>Notes <textarea /></label>
    <textarea aria-label="Bio" />
    <textarea id={dynamicId} />
    <textarea {...field} />
    <label htmlFor="ghost">Ghost</label>
  </form>
);
"""
    found = _run(FormLabelsRule(), source)

    assert [(item.id, item.line) for item in found] == [
        ("form-control-missing-label", 5),
        ("label-for-invalid", 10),
    ]


def test_skip_link_missing_before_repeated_navigation() -> None:
    source = """const Layout = () => (
  <div>
    <header><nav><a href="/">Home</a></nav></header>
    <main>Content</main>
  </div>
);
"""
    found = _run(SkipLinksRule(), source)

    assert _ids(found) == ["skip-link-missing"]
    assert found[0].code == "<header>"


def test_skip_link_with_missing_target() -> None:
    source = """const Layout = () => (
  <div>
    <a href="#content">Skip to content</a>
    <nav>Links</nav>
    <main id="main">Content</main>
  </div>
);
"""
    found = _run(SkipLinksRule(), source)

    assert _ids(found) == ["skip-link-target-missing"]
    assert '"#content"' in found[0].description


def test_focus_inline_styles() -> None:
    source = """const A = () => (
  <div>
    <button style={{ outline: "none" }}>A</button>
    <button style={{ outline: "none", boxShadow: "0 0 0 2px" }}>B</button>
    <button data={{ outline: "none" }}>C</button>
  </div>
);
"""
    found = _run(FocusVisibleRule(), source)

    assert [(item.id, item.line) for item in found] == [("inline-outline-none", 3)]


def test_focus_rules_in_stylesheets() -> None:
    source = (
        ".a:focus { outline: none; }\n"
        ".b:focus { outline: none; box-shadow: 0 0 0 3px blue; }\n"
        ".c:focus-visible { outline: 0; border: 2px solid; }\n"
        ".d { outline: none; }\n"
    )
    found = _run(FocusVisibleRule(), source, path="app.css")

    assert [(item.id, item.severity, item.line) for item in found] == [
        ("focus-style-removed", "error", 1)
    ]


def test_design_system_components_only_when_enabled() -> None:
    source = "const A = () => <div><Widget /><Button>Go</Button></div>;\n"

    assert _run(DesignSystemComponentsRule(), source) == []
    found = _run(DesignSystemComponentsRule(), source, design_system_enabled=True)
    assert _ids(found) == ["ds-non-standard-component"]
    assert found[0].description.startswith("Widget is not part of")


def test_dom_scripting_assignments_and_set_attribute() -> None:
    source = """const el = document.getElementById("x");
el.style.outline = "none";
el.tabIndex = 2;
el.setAttribute("tabindex", "4");
video.autoplay = true;
el.setAttribute("tabindex", "0");
el.style.outline = "2px solid";
"""
    found = _run(DomScriptingRule(), source, path="widget.js")

    assert [(item.id, item.line) for item in found] == [
        ("js-remove-focus-outline", 2),
        ("js-positive-tabindex", 3),
        ("js-positive-tabindex", 4),
        ("js-autoplay-media", 5),
    ]
    assert found[0].code == 'el.style.outline = "none"'


HTML_PAGE = """<html lang="en">
<body>
  <div role="btn" tabindex="3">x</div>
  <div role="slider" aria-valuenow="5">x</div>
  <nav role="navigation" aria-label="Main">x</nav>
  <h1></h1>
  <img src="logo.png" alt="Image of logo">
  <label for="ghost">Ghost</label>
  <select><option>A</option></select>
  <div role="button" onclick="go()">Go</div>
</body>
</html>
"""


def test_element_rules_apply_to_html() -> None:
    def found(rule) -> list[tuple[str, int]]:
        return [(item.id, item.line) for item in _run(rule, HTML_PAGE, path="index.html")]

    assert found(AriaRequiredRule()) == [
        ("aria-invalid-role", 3),
        ("aria-required", 4),
        ("aria-redundant", 5),
    ]
    assert found(KeyboardNavRule()) == [
        ("tabindex-positive", 3),
        ("custom-interactive-missing-keyboard", 4),
        ("custom-interactive-missing-keyboard", 10),
    ]
    assert found(HeadingHierarchyRule()) == [("heading-empty", 6)]
    assert found(AltTextRule()) == [("img-redundant-alt", 7)]
    assert found(FormLabelsRule()) == [
        ("label-for-invalid", 8),
        ("form-control-missing-label", 9),
    ]


def test_html_violation_positions_quote_the_opening_tag() -> None:
    invalid_role = _run(AriaRequiredRule(), HTML_PAGE, path="index.html")[0]

    assert (invalid_role.line, invalid_role.column) == (3, 3)
    assert invalid_role.code == '<div role="btn" tabindex="3">'


def test_page_content_in_jsx() -> None:
    source = """const Page = () => (
  <main>
    <table><tr><td>1</td></tr></table>
    <table role="presentation"><tr><td>1</td></tr></table>
    <table><thead><tr><th>Name</th></tr></thead></table>
    <table><Rows /></table>
    <video src="a.mp4" autoPlay />
    <video src="b.mp4" autoPlay muted />
    <audio src="c.mp3" autoPlay={false} />
    <a href="/home"></a>
    <a href="/home"><img src="h.png" alt="Home" /></a>
    <a href="/x">{label}</a>
    <a href="/y"><Icon /></a>
    <a href="/z" aria-label="Settings"><svg /></a>
  </main>
);
"""
    found = _run(PageContentRule(), source)

    assert [(item.id, item.line) for item in found] == [
        ("table-missing-headers", 3),
        ("autoplay-media", 7),
        ("link-empty", 10),
    ]
    assert found[1].wcag_criteria == ("1.4.2", "2.2.2")
    assert found[2].code == '<a href="/home">'


def test_page_content_in_html() -> None:
    source = (
        "<table><tr><td>1</td></tr></table>\n"
        '<video src="a.mp4" autoplay controls></video>\n'
        '<audio src="b.mp3" autoplay></audio>\n'
        '<a href="/"><img src="logo.png" alt=""></a>\n'
        '<a href="/about">About</a>\n'
    )
    found = _run(PageContentRule(), source, path="index.html")

    assert [(item.id, item.line) for item in found] == [
        ("table-missing-headers", 1),
        ("autoplay-media", 3),
        ("link-empty", 4),
    ]
    assert found[1].description == "<audio> autoplays without muted or controls"


def test_focus_style_attributes_in_html() -> None:
    source = (
        '<button style="outline: none">A</button>\n'
        '<button style="outline: none; box-shadow: 0 0 0 2px blue">B</button>\n'
        '<button style="color: red">C</button>\n'
    )
    found = _run(FocusVisibleRule(), source, path="index.html")

    assert [(item.id, item.line, item.code) for item in found] == [
        ("inline-outline-none", 1, '<button style="outline: none">')
    ]
    assert found[0].description == "style sets outline to 'none' with no replacement indicator"
