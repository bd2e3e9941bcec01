"""
Sanitization pipeline - cleans editor HTML before it is stored.

Functional Core - each stage is a pure string -> string function; the
pipeline only sequences them and calls out to its collaborators.

Stage order:
1. Resolve reference tags (so the sanitizer never sees `{...}`)
2. Swap SVGs for placeholders
3. Allow-list sanitize
4. Restore SVGs
5. Strip <font> tags
6. Filter inline styles down to what enabled plugins allow
7. Remove empty tags
8. Replace non-breaking spaces
9. Encode element URLs back into reference tags
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import ValidationError

from src.components.references import decode_references, encode_references
from src.components.references.ports import ReferenceResolverPort
from src.domain.entities import ElementContext
from src.domain.styles import resolve_allowed_styles
from src.rules.models import FieldSettings, SanitizerPolicy

from ._svg import extract_svgs, reinsert_svgs
from .ports import CapabilityProviderPort, HtmlSanitizerPort, SvgSanitizerPort

logger = logging.getLogger(__name__)

PolicyModifier = Callable[[SanitizerPolicy], SanitizerPolicy | None]


class SanitizerPolicyError(ValueError):
    """Raised when a sanitizer policy cannot be built."""


# --- Stages ---

STYLED_TAGS = (
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "div", "blockquote", "pre",
    "strong", "em", "b", "i", "u", "a", "span", "img",
)
EMPTY_REMOVABLE_TAGS = (
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "div", "blockquote", "pre",
    "strong", "em", "a", "b", "i", "u", "span",
)

FONT_TAG_PATTERN = re.compile(r"</?font\b[^>]*>")
STYLE_ATTR_PATTERN = re.compile(
    r"(<(?:" + "|".join(STYLED_TAGS) + r")\b[^>]*)\s+style=\"([^\"]*)\""
)
EMPTY_TAG_PATTERN = re.compile(r"<(" + "|".join(EMPTY_REMOVABLE_TAGS) + r")\s*></\1>")
NBSP_PATTERN = re.compile("(&nbsp;|&#160;|\u00a0)")
MULTI_SPACE_PATTERN = re.compile(r"  +")


def strip_font_tags(content: str) -> str:
    """Remove <font> opening and closing tags, keeping their contents."""
    return FONT_TAG_PATTERN.sub("", content)


def filter_inline_styles(content: str, allowed_styles: Iterable[str]) -> str:
    """
    Drop CSS declarations whose property is not allowed.

    The style attribute is removed entirely when nothing survives.
    """
    allowed_set = frozenset(allowed_styles)

    def replace(match: re.Match[str]) -> str:
        allowed = []
        for style in match.group(2).split(";"):
            name, _, value = style.partition(":")
            name = name.strip()
            if name in allowed_set:
                allowed.append(f"{name}: {value.strip()}")
        if allowed:
            return f'{match.group(1)} style="{"; ".join(allowed)}"'
        return match.group(1)

    return STYLE_ATTR_PATTERN.sub(replace, content)


def remove_empty_tags(content: str) -> str:
    """Remove elements whose opening tag is immediately followed by its closing tag."""
    return EMPTY_TAG_PATTERN.sub("", content)


def normalize_nbsp(content: str) -> str:
    """Replace non-breaking spaces with spaces and collapse runs of spaces."""
    content = NBSP_PATTERN.sub(" ", content)
    return MULTI_SPACE_PATTERN.sub(" ", content)


# --- Policy ---

# HTML Purifier option names accepted in policy config files
LEGACY_POLICY_KEYS: dict[str, str] = {
    "Attr.AllowedFrameTargets": "allowed_frame_targets",
    "Attr.EnableID": "enable_id",
    "HTML.SafeIframe": "safe_iframe",
    "URI.SafeIframeRegexp": "safe_iframe_regexp",
    "HTML.AllowedElements": "tags",
    "URI.AllowedSchemes": "protocols",
}

# The pagebreak comment is produced after sanitizing, so this has no effect
IGNORED_LEGACY_KEYS = frozenset(["HTML.AllowedComments"])

_DELIMITED_REGEX = re.compile(r"^([%#/~!@])(.*)\1([imsx]*)$", re.DOTALL)


def _strip_regex_delimiters(pattern: str) -> str:
    match = _DELIMITED_REGEX.match(pattern)
    if not match:
        return pattern
    flags = match.group(3)
    return (f"(?{flags})" if flags else "") + match.group(2)


def _translate_policy_config(config: dict[str, Any]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key, value in config.items():
        if key in IGNORED_LEGACY_KEYS:
            continue
        target = LEGACY_POLICY_KEYS.get(key, key)
        if target == "safe_iframe_regexp" and isinstance(value, str):
            value = _strip_regex_delimiters(value)
        elif target == "tags" and isinstance(value, str):
            value = [tag.strip() for tag in value.split(",") if tag.strip()]
        elif target == "protocols" and isinstance(value, dict):
            value = [scheme for scheme, enabled in value.items() if enabled]
        data[target] = value
    return data


def build_sanitizer_policy(
    config: dict[str, Any] | None = None,
    modifiers: Iterable[PolicyModifier] = (),
) -> SanitizerPolicy:
    """
    Build the sanitizer policy from a config dict, then apply modifiers in order.

    Raises SanitizerPolicyError for unknown options, invalid values or
    a modifier returning something other than a policy.
    """
    try:
        policy = (
            SanitizerPolicy.model_validate(_translate_policy_config(config))
            if config
            else SanitizerPolicy()
        )
    except ValidationError as e:
        raise SanitizerPolicyError(f"Invalid sanitizer policy:\n{e}") from e

    try:
        re.compile(policy.safe_iframe_regexp)
    except re.error as e:
        raise SanitizerPolicyError(f"Invalid safe iframe pattern: {e}") from e

    for modifier in modifiers:
        result = modifier(policy)
        if result is None:
            continue
        if not isinstance(result, SanitizerPolicy):
            raise SanitizerPolicyError(
                f"Policy modifier returned {type(result).__name__}, expected SanitizerPolicy"
            )
        policy = result

    return policy


# --- Pipeline ---


class SanitizationPipeline:
    """
    Save-time cleaning for one field.

    Stages are toggled by FieldSettings: purify_html (1-4),
    remove_inline_styles (5-6), remove_empty_tags (7), remove_nbsp (8).
    Reference encoding (9) always runs.
    """

    def __init__(
        self,
        settings: FieldSettings,
        *,
        resolver: ReferenceResolverPort,
        sanitizer: HtmlSanitizerPort,
        svg_sanitizer: SvgSanitizerPort,
        capabilities: CapabilityProviderPort,
        policy: SanitizerPolicy | None = None,
    ) -> None:
        self._settings = settings
        self._resolver = resolver
        self._sanitizer = sanitizer
        self._svg_sanitizer = svg_sanitizer
        self._capabilities = capabilities
        self._policy = policy or SanitizerPolicy()

    @property
    def policy(self) -> SanitizerPolicy:
        return self._policy

    def allowed_styles(self) -> frozenset[str]:
        """CSS properties allowed by the field's enabled capabilities."""
        return resolve_allowed_styles(self._capabilities.enabled_capabilities())

    def purify(self, content: str, element: ElementContext | None = None) -> str:
        """Stages 1-4."""
        # Resolve reference tags so the sanitizer doesn't mangle the curly braces
        content = decode_references(content, self._resolver, element)

        extracted = extract_svgs(content, self._svg_sanitizer)
        content = self._sanitizer.sanitize(extracted.html, self._policy)
        return reinsert_svgs(content, extracted)

    def clean(self, content: str, element: ElementContext | None = None) -> str:
        """Run every enabled stage over the content."""
        settings = self._settings

        if settings.purify_html:
            content = self.purify(content, element)
        else:
            logger.debug("HTML purifying disabled, skipping sanitizer")

        if settings.remove_inline_styles:
            content = strip_font_tags(content)
            content = filter_inline_styles(content, self.allowed_styles())

        if settings.remove_empty_tags:
            content = remove_empty_tags(content)

        if settings.remove_nbsp:
            content = normalize_nbsp(content)

        return encode_references(content, self._resolver)
