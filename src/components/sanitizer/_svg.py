"""
SVG guard - keeps inline SVGs away from the generic HTML sanitizer.

Each <svg> element is sanitized on its own, swapped for a random
placeholder while the rest of the content is cleaned, then put back.

Invariants:
- placeholders and fragments pair up in source order
- a placeholder found more than once on reinsertion is an error,
  never a silent mis-pairing
"""

from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass, field

from .ports import SvgSanitizerPort

logger = logging.getLogger(__name__)

SVG_PATTERN = re.compile(r"<svg\b.*?>.*?</svg>", re.IGNORECASE | re.DOTALL)

PLACEHOLDER_PREFIX = "svg:"
PLACEHOLDER_BYTES = 10


class SvgPlaceholderCollisionError(RuntimeError):
    """Raised when a placeholder cannot be matched to exactly one location."""


@dataclass
class ExtractedSvgs:
    """Content with SVGs swapped out, plus what to swap back in."""

    html: str
    placeholders: list[str] = field(default_factory=list)
    fragments: list[str] = field(default_factory=list)


def _new_placeholder(content: str, used: list[str]) -> str:
    while True:
        placeholder = PLACEHOLDER_PREFIX + secrets.token_hex(PLACEHOLDER_BYTES)
        if placeholder not in used and placeholder not in content:
            return placeholder


def extract_svgs(content: str, sanitizer: SvgSanitizerPort) -> ExtractedSvgs:
    """Sanitize and tokenize every SVG in the content."""
    extracted = ExtractedSvgs(html=content)

    def replace(match: re.Match[str]) -> str:
        extracted.fragments.append(sanitizer.sanitize_svg(match.group(0)))
        placeholder = _new_placeholder(content, extracted.placeholders)
        extracted.placeholders.append(placeholder)
        return placeholder

    extracted.html = SVG_PATTERN.sub(replace, content)
    return extracted


def reinsert_svgs(content: str, extracted: ExtractedSvgs) -> str:
    """Put the sanitized SVGs back in place of their placeholders."""
    for placeholder, fragment in zip(extracted.placeholders, extracted.fragments, strict=True):
        count = content.count(placeholder)
        if count > 1:
            raise SvgPlaceholderCollisionError(
                f"SVG placeholder {placeholder} appears {count} times"
            )
        if count == 0:
            logger.warning("SVG placeholder %s was removed during sanitizing", placeholder)
            continue
        content = content.replace(placeholder, fragment, 1)
    return content
