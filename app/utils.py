"""Utility helpers for the MovieMitra service."""

from __future__ import annotations

import re
import unicodedata


FENCED_BLOCK_RE = re.compile(r"^```[a-zA-Z]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


def slugify(value: str) -> str:
    """Return a URL-friendly slug."""

    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-zA-Z0-9]+", "-", value)
    value = value.strip("-")
    value = re.sub(r"-+", "-", value)
    return value.lower()


def unwrap_code_fence(content: str) -> str:
    """Strip a single surrounding ``` fence some models wrap their prose in."""

    text = content.strip()
    match = FENCED_BLOCK_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


def truncate_words(text: str, limit: int) -> str:
    """Return ``text`` cut down to at most ``limit`` words."""

    words = text.split()
    if len(words) <= limit:
        return " ".join(words)
    return " ".join(words[:limit]) + "…"
