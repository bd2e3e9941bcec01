"""
Bleach HTML sanitizer adapter.

Implements HtmlSanitizerPort and SvgSanitizerPort on top of bleach's
allow-list Cleaner. Inline styles go through bleach's CSSSanitizer
(tinycss2), so `bleach[css]` is required.

Key behaviors:
- Disallowed tags are stripped (contents kept), comments removed
- `id` attributes follow policy.enable_id
- `a[target]` limited to policy.allowed_frame_targets
- `iframe[src]` must match policy.safe_iframe_regexp
- SVG `style` attributes are kept as written when every property is allowed
- Exceptions from bleach propagate to the caller
"""

from __future__ import annotations

import re
from collections.abc import Callable

from bleach.css_sanitizer import ALLOWED_CSS_PROPERTIES, ALLOWED_SVG_PROPERTIES, CSSSanitizer
from bleach.sanitizer import Cleaner

from src.rules.models import SanitizerPolicy

# SVG elements kept by the SVG cleaner (camelCase names as the parser reports them)
SVG_TAGS = frozenset(
    [
        "svg", "g", "defs", "symbol", "use", "title", "desc",
        "path", "circle", "ellipse", "line", "polyline", "polygon", "rect",
        "text", "tspan", "stop", "mask",
        "linearGradient", "lineargradient",
        "radialGradient", "radialgradient",
        "clipPath", "clippath",
    ]
)

SVG_ATTRIBUTES = {
    "*": [
        "id", "class", "style", "role", "aria-hidden", "aria-label",
        "fill", "fill-opacity", "fill-rule", "clip-rule", "clip-path", "mask",
        "stroke", "stroke-width", "stroke-linecap", "stroke-linejoin",
        "stroke-opacity", "stroke-dasharray", "opacity", "transform",
        "d", "cx", "cy", "r", "rx", "ry", "x", "y", "x1", "y1", "x2", "y2",
        "dx", "dy", "width", "height", "points", "offset",
        "stop-color", "stop-opacity", "font-size", "font-family", "text-anchor",
        "viewBox", "viewbox", "preserveAspectRatio", "preserveaspectratio",
        "gradientUnits", "gradientunits", "gradientTransform", "gradienttransform",
        "xmlns", "version", "href", "xlink:href",
    ],
}

AttributeFilter = Callable[[str, str, str], bool]


def _attribute_filter(policy: SanitizerPolicy) -> AttributeFilter:
    iframe_src = re.compile(policy.safe_iframe_regexp)
    everywhere = frozenset(policy.attributes.get("*", ()))

    def allow(tag: str, name: str, value: str) -> bool:
        if name == "id":
            return policy.enable_id
        if tag == "a" and name == "target":
            return value in policy.allowed_frame_targets
        if tag == "iframe" and name == "src":
            return bool(iframe_src.match(value))
        return name in everywhere or name in policy.attributes.get(tag, ())

    return allow


def _property_names(style: str) -> list[str]:
    return [
        part.partition(":")[0].strip().lower() for part in style.split(";") if part.strip()
    ]


class SvgCssSanitizer(CSSSanitizer):
    """
    CSS sanitizer that leaves a style attribute untouched when nothing in it
    would be removed; otherwise returns bleach's filtered declarations.
    """

    def sanitize_css(self, style: str) -> str:
        cleaned: str = super().sanitize_css(style)
        if _property_names(cleaned) == _property_names(style):
            return style
        return cleaned


class BleachHtmlSanitizer:
    """Allow-list sanitizer backed by bleach."""

    def __init__(self) -> None:
        self._svg_cleaner = Cleaner(
            tags=SVG_TAGS,
            attributes=SVG_ATTRIBUTES,
            protocols=frozenset(["http", "https"]),
            strip=True,
            strip_comments=True,
            css_sanitizer=SvgCssSanitizer(
                allowed_css_properties=ALLOWED_CSS_PROPERTIES,
                allowed_svg_properties=ALLOWED_SVG_PROPERTIES,
            ),
        )

    def cleaner_for(self, policy: SanitizerPolicy) -> Cleaner:
        """Build a bleach Cleaner for the policy."""
        tags = set(policy.tags)
        if not policy.safe_iframe:
            tags.discard("iframe")

        return Cleaner(
            tags=frozenset(tags),
            attributes=_attribute_filter(policy),
            protocols=frozenset(policy.protocols),
            strip=True,
            strip_comments=True,
            css_sanitizer=CSSSanitizer(
                allowed_css_properties=frozenset(policy.css_properties),
                allowed_svg_properties=frozenset(),
            ),
        )

    def sanitize(self, html: str, policy: SanitizerPolicy) -> str:
        return self.cleaner_for(policy).clean(html)

    def sanitize_svg(self, svg: str) -> str:
        return self._svg_cleaner.clean(svg)
