"""Tests for the static client page shipped with the package.

The API suite checks that ``GET /`` serves the page; these checks read the
repository's actual ``index.html`` so regressions in the client wiring are
caught without a browser.
"""

from __future__ import annotations

from pathlib import Path


def _read_template() -> str:
    template_path = (
        Path(__file__).resolve().parents[2] / "src" / "photogen" / "templates" / "index.html"
    )
    return template_path.read_text(encoding="utf-8")


def test_template_has_controls() -> None:
    """The page exposes the Start and generate buttons, prompt and output areas."""
    html = _read_template()

    assert 'id="btn-start"' in html
    assert 'id="btn-generate"' in html
    assert 'id="prompt"' in html
    assert 'id="error-box"' in html
    assert 'id="spinner"' in html
    assert 'id="image-wrap"' in html


def test_template_calls_generate_endpoint() -> None:
    html = _read_template()

    assert "fetch('/api/generate'" in html
    assert "'data:image/png;base64,'" in html
    assert "link.download = json.fileName" in html


def test_template_uses_same_bangla_range() -> None:
    """Client-side language detection matches the server's U+0980-U+09FF rule."""
    html = _read_template()

    assert r"/[\u0980-\u09FF]/" in html
    assert "error.message_bn" in html
    assert "error.message_en" in html


def test_template_always_clears_busy_state() -> None:
    html = _read_template()

    assert "finally {\n      setBusy(false);" in html
