"""Position and determinism guarantees that hold for every scanned file."""

from __future__ import annotations

import pytest

from a11y_lens.models import FileAnalysis
from a11y_lens.scanner import Scanner

SAMPLES = {
    "App.jsx": """const App = () => (
  <div>
    <img src="a.png" />
    <div role="btn" tabIndex={3} onClick={go}>x</div>
    <h3></h3>
    <input placeholder="Email" />
    <a href="/x"></a>
    <button style={{ outline: "none" }}></button>
  </div>
);
""",
    "Card.tsx": """type Props = { label: string };
export const Card = ({ label }: Props) => (
  <section>
    <label htmlFor="ghost">{label}</label>
    <select><option>A</option></select>
    <video src="a.mp4" autoPlay />
    <table><tr><td>1</td></tr></table>
  </section>
);
""",
    "dom.js": """const el = document.querySelector("#x");
el.style.outline = "none";
el.setAttribute("tabindex", "2");
const A = () => <img src="b.png" alt="image" />;
""",
    "index.html": """<!doctype html>
<html>
<head></head>
<body>
  <div role="btn" tabindex="3">x</div>
  <h1></h1>
  <img src="logo.png" alt="Image of logo">
  <input id="q" placeholder="Search">
  <p id="q">dup</p>
  <iframe src="/x"></iframe>
  <button style="outline: none"></button>
</body>
</html>
""",
    "app.css": """a:focus {
  outline: none;
}
.btn {
  width: 30px;
  font-size: 9px;
  color: transparent;
}
.menu-toggle { display: none; }
button { pointer-events: none; }
""",
    "theme.scss": """$primary: #333;
.nav {
  .link {
    height: 20px;
    outline: none;
  }
  &:focus { outline: 0; }
}
""",
}
LINE_ENDINGS = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}


def _cases() -> list:
    return [
        pytest.param(path, source.replace("\n", ending), id=f"{path}-{name}")
        for path, source in SAMPLES.items()
        for name, ending in LINE_ENDINGS.items()
    ]


def _scan(path: str, content: str) -> FileAnalysis:
    return Scanner().scan_file(path, content)


@pytest.mark.parametrize(("path", "content"), _cases())
def test_lines_stay_within_the_file(path: str, content: str) -> None:
    analysis = _scan(path, content)

    assert analysis.violations
    line_count = analysis.metadata.line_count
    for violation in analysis.violations:
        assert 1 <= violation.line <= line_count, violation.id
        assert violation.column >= 1, violation.id


@pytest.mark.parametrize(("path", "content"), _cases())
def test_code_is_quoted_from_the_source(path: str, content: str) -> None:
    analysis = _scan(path, content)

    for violation in analysis.violations:
        if violation.code:
            assert violation.code in content, violation.id


@pytest.mark.parametrize(("path", "content"), _cases())
def test_repeated_scans_are_identical(path: str, content: str) -> None:
    first = _scan(path, content)
    second = _scan(path, content)

    assert first.violations == second.violations
    assert "parse-error" not in {item.id for item in first.violations}
