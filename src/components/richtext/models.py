"""
Richtext component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import ElementContext, FieldData

# --- Validation Error ---


@dataclass(frozen=True)
class FieldSettingsValidationError:
    """Field settings validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ToEditableInput:
    """Input for preparing stored content for the editor."""

    value: FieldData | str | None
    element: ElementContext | None = None


@dataclass(frozen=True)
class ToStoredInput:
    """Input for cleaning editor content for storage."""

    value: FieldData | str | None
    element: ElementContext | None = None


@dataclass(frozen=True)
class ValidateSettingsInput:
    """Input for validating raw field settings."""

    data: dict[str, Any]


# --- Output Models ---


@dataclass(frozen=True)
class ContentOutput:
    """Output for a load/save transformation."""

    html: str | None
    is_empty: bool


@dataclass(frozen=True)
class ValidateSettingsOutput:
    """Output for settings validation."""

    is_valid: bool
    errors: list[FieldSettingsValidationError] = field(default_factory=list)
