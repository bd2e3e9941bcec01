"""
Sanitizer component - Allow-list cleaning of rich text HTML.
"""

from ._impl import (
    PolicyModifier,
    SanitizationPipeline,
    SanitizerPolicyError,
    build_sanitizer_policy,
    filter_inline_styles,
    normalize_nbsp,
    remove_empty_tags,
    strip_font_tags,
)
from ._svg import (
    ExtractedSvgs,
    SvgPlaceholderCollisionError,
    extract_svgs,
    reinsert_svgs,
)
from .component import (
    run,
    run_allowed_styles,
    run_sanitize,
)
from .models import (
    AllowedStylesInput,
    AllowedStylesOutput,
    SanitizeContentInput,
    SanitizeContentOutput,
)
from .ports import (
    CapabilityProviderPort,
    ConfigSourcePort,
    HtmlSanitizerPort,
    SvgSanitizerPort,
)

__all__ = [
    # Entry points
    "run",
    "run_allowed_styles",
    "run_sanitize",
    # Input models
    "AllowedStylesInput",
    "SanitizeContentInput",
    # Output models
    "AllowedStylesOutput",
    "SanitizeContentOutput",
    # Ports
    "CapabilityProviderPort",
    "ConfigSourcePort",
    "HtmlSanitizerPort",
    "SvgSanitizerPort",
    # Pipeline
    "PolicyModifier",
    "SanitizationPipeline",
    "SanitizerPolicyError",
    "build_sanitizer_policy",
    "filter_inline_styles",
    "normalize_nbsp",
    "remove_empty_tags",
    "strip_font_tags",
    # SVG guard
    "ExtractedSvgs",
    "SvgPlaceholderCollisionError",
    "extract_svgs",
    "reinsert_svgs",
]
