"""The markdown render boundary must never emit executable markup."""

from __future__ import annotations

from app.rendering import render_summary


def test_markdown_is_rendered() -> None:
    html = render_summary("A **bold** and *quiet* film.\n\n- tense\n- warm")

    assert "<strong>bold</strong>" in html
    assert "<em>quiet</em>" in html
    assert "<li>tense</li>" in html


def test_script_payload_is_removed() -> None:
    html = render_summary("Great movie <script>alert('xss')</script> **really**")

    assert "<script" not in html.lower()
    assert "alert(" not in html
    assert "<strong>really</strong>" in html


def test_event_handlers_and_javascript_links_are_stripped() -> None:
    html = render_summary(
        '<img src="x" onerror="alert(1)">\n\n[click](javascript:alert(1)) '
        '<a href="https://example.com" onclick="steal()">ok</a>'
    )

    assert "onerror" not in html
    assert "onclick" not in html
    assert "javascript:" not in html
    assert "<img" not in html
    assert 'href="https://example.com"' in html
    assert 'rel="noopener noreferrer"' in html


def test_empty_text_renders_empty() -> None:
    assert render_summary("") == ""
