"""
Sanitizer component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.entities import ElementContext

# --- Input Models ---


@dataclass(frozen=True)
class SanitizeContentInput:
    """Input for cleaning editor HTML before storage."""

    html: str
    element: ElementContext | None = None


@dataclass(frozen=True)
class AllowedStylesInput:
    """Input for resolving allowed inline styles."""

    capabilities: frozenset[str] = field(default_factory=frozenset)


# --- Output Models ---


@dataclass(frozen=True)
class SanitizeContentOutput:
    """Output for cleaned HTML."""

    html: str
    changed: bool


@dataclass(frozen=True)
class AllowedStylesOutput:
    """Output for allowed inline styles."""

    styles: frozenset[str]
