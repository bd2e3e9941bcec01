"""
References component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities import ElementContext

# --- Input Models ---


@dataclass(frozen=True)
class DecodeReferencesInput:
    """Input for resolving reference tags into editable URLs."""

    html: str
    element: ElementContext | None = None


@dataclass(frozen=True)
class EncodeReferencesInput:
    """Input for converting editable URLs back into reference tags."""

    html: str


# --- Output Models ---


@dataclass(frozen=True)
class ReferencesOutput:
    """Output of a codec pass."""

    html: str
    references: frozenset[str]
    changed: bool
