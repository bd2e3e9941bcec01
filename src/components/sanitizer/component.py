"""
Sanitizer component - Save-time HTML cleaning.

Shell Layer - wraps the pipeline for callers.
"""

from __future__ import annotations

from src.domain.styles import resolve_allowed_styles

from ._impl import SanitizationPipeline
from .models import (
    AllowedStylesInput,
    AllowedStylesOutput,
    SanitizeContentInput,
    SanitizeContentOutput,
)


def run_sanitize(
    inp: SanitizeContentInput,
    *,
    pipeline: SanitizationPipeline,
) -> SanitizeContentOutput:
    """
    Clean editor HTML for storage.

    Sanitizer errors propagate; there is no partially-sanitized fallback.

    Args:
        inp: Input containing editor HTML and the owning element.
        pipeline: Configured pipeline for the field.

    Returns:
        SanitizeContentOutput with cleaned HTML.
    """
    result = pipeline.clean(inp.html, inp.element)
    return SanitizeContentOutput(html=result, changed=result != inp.html)


def run_allowed_styles(inp: AllowedStylesInput) -> AllowedStylesOutput:
    """Resolve the inline CSS properties enabled capabilities allow."""
    return AllowedStylesOutput(styles=resolve_allowed_styles(inp.capabilities))


def run(
    inp: SanitizeContentInput | AllowedStylesInput,
    *,
    pipeline: SanitizationPipeline | None = None,
) -> SanitizeContentOutput | AllowedStylesOutput:
    """Main entry point for the sanitizer component."""
    if isinstance(inp, SanitizeContentInput):
        if pipeline is None:
            raise ValueError("A pipeline is required to sanitize content")
        return run_sanitize(inp, pipeline=pipeline)
    elif isinstance(inp, AllowedStylesInput):
        return run_allowed_styles(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
