"""Markdown to sanitized HTML for AI-generated text."""

from __future__ import annotations

import markdown
import nh3

ALLOWED_TAGS: frozenset[str] = frozenset(
    {
        "a",
        "blockquote",
        "br",
        "code",
        "em",
        "h3",
        "h4",
        "li",
        "ol",
        "p",
        "pre",
        "strong",
        "ul",
    }
)
ALLOWED_ATTRIBUTES: dict[str, set[str]] = {"a": {"href", "title"}}
ALLOWED_URL_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto"})


def render_summary(text: str) -> str:
    """Convert summary markdown into HTML that is safe to inject into a page.

    Generated text is untrusted: any raw HTML it contains goes through the
    sanitizer along with the markdown output, so scripts, event handlers and
    ``javascript:`` links never reach the browser.
    """

    html = markdown.markdown(text or "", output_format="html")
    return nh3.clean(
        html,
        tags=set(ALLOWED_TAGS),
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=set(ALLOWED_URL_SCHEMES),
        link_rel="noopener noreferrer",
    )
