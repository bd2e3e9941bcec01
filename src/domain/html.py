"""
HTML helpers shared by the rich text field.

Regex based; operates on the well-formed subset the editor produces.
"""

from __future__ import annotations

import html
import re

# Elements that make content non-empty even without any text.
EMBED_TAGS = ("img", "iframe", "svg", "hr", "video", "audio", "object", "embed")

_EMBED_PATTERN = re.compile(r"<(?:" + "|".join(EMBED_TAGS) + r")\b", re.IGNORECASE)
_TAG_PATTERN = re.compile(r"<[^>]*>")
_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)


def is_html_empty(value: str | None) -> bool:
    """
    Whether the HTML has no visible content.

    Tags and comments are ignored; non-breaking spaces count as whitespace.
    Embedded media (images, iframes, SVGs, rules) count as content.
    """
    if not value:
        return True

    if _EMBED_PATTERN.search(value):
        return False

    text = _COMMENT_PATTERN.sub("", value)
    text = _TAG_PATTERN.sub("", text)
    text = html.unescape(text).replace("\u00a0", " ")
    return not text.strip()


def encode_mb4(value: str) -> str:
    """
    Encode characters outside the Basic Multilingual Plane as HTML entities.

    For storage backends that can only hold 3-byte UTF-8.
    """
    return "".join(f"&#x{ord(char):X};" if ord(char) > 0xFFFF else char for char in value)
