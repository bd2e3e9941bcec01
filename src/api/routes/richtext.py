"""
Rich Text API Routes.

Load/save transformations for rich text field content.

Key behaviors:
- POST /editable: stored content -> editor HTML
- POST /stored: editor HTML -> stored content
- POST /settings/validate: field settings validation
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.deps import get_rich_text_field
from src.components.references import find_references
from src.components.richtext import (
    RichTextField,
    ToEditableInput,
    ToStoredInput,
    ValidateSettingsInput,
    run_to_editable,
    run_to_stored,
    run_validate_settings,
)
from src.domain.entities import ElementContext

router = APIRouter()


# --- Request/Response Models ---


class ContentRequest(BaseModel):
    """Field content plus the locale of the element it belongs to."""

    html: str | None = Field(default=None, description="Field content")
    locale_id: int | None = Field(default=None, description="Element locale")


class ContentResponse(BaseModel):
    """Transformed field content."""

    html: str | None
    is_empty: bool
    references: list[str]


class SettingsValidationRequest(BaseModel):
    """Raw field settings to validate."""

    settings: dict[str, Any]


class SettingsValidationError(BaseModel):
    code: str
    message: str
    field: str | None = None


class SettingsValidationResponse(BaseModel):
    is_valid: bool
    errors: list[SettingsValidationError]


# --- Routes ---


@router.post("/editable", response_model=ContentResponse)
def to_editable(
    request: ContentRequest,
    field: RichTextField = Depends(get_rich_text_field),
) -> ContentResponse:
    """Prepare stored content for the editor."""
    result = run_to_editable(
        ToEditableInput(value=request.html, element=ElementContext(request.locale_id)),
        field=field,
    )
    return ContentResponse(
        html=result.html,
        is_empty=result.is_empty,
        references=sorted(find_references(result.html or "")),
    )


@router.post("/stored", response_model=ContentResponse)
def to_stored(
    request: ContentRequest,
    field: RichTextField = Depends(get_rich_text_field),
) -> ContentResponse:
    """Clean editor content for storage."""
    result = run_to_stored(
        ToStoredInput(value=request.html, element=ElementContext(request.locale_id)),
        field=field,
    )
    return ContentResponse(
        html=result.html,
        is_empty=result.is_empty,
        references=sorted(find_references(result.html or "")),
    )


@router.post("/settings/validate", response_model=SettingsValidationResponse)
def validate_settings(request: SettingsValidationRequest) -> SettingsValidationResponse:
    """Validate field settings without saving them."""
    result = run_validate_settings(ValidateSettingsInput(data=request.settings))
    return SettingsValidationResponse(
        is_valid=result.is_valid,
        errors=[
            SettingsValidationError(code=e.code, message=e.message, field=e.field)
            for e in result.errors
        ],
    )
