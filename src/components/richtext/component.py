"""
Richtext component - Rich text field load/save.

Provides the editor-facing and storage-facing forms of field content.

Invariants:
- Reference tags present before a save/load cycle are present after it
- Saving already-stored content changes nothing
- Unresolvable references are kept as-is, never turned into broken URLs
- Sanitizer failures propagate; content is never stored half-cleaned
"""

from __future__ import annotations

from src.domain.html import is_html_empty

from ._impl import RichTextField, validate_field_settings
from .models import (
    ContentOutput,
    ToEditableInput,
    ToStoredInput,
    ValidateSettingsInput,
    ValidateSettingsOutput,
)

# --- Component Entry Points ---


def run_to_editable(
    inp: ToEditableInput,
    *,
    field: RichTextField,
) -> ContentOutput:
    """
    Prepare stored content for the editor.

    Args:
        inp: Input containing the stored value and owning element.
        field: Configured rich text field.

    Returns:
        ContentOutput with editable HTML.
    """
    html = field.to_editable(inp.value, inp.element)
    return ContentOutput(html=html, is_empty=is_html_empty(html))


def run_to_stored(
    inp: ToStoredInput,
    *,
    field: RichTextField,
) -> ContentOutput:
    """
    Clean editor content for storage.

    Args:
        inp: Input containing the submitted value and owning element.
        field: Configured rich text field.

    Returns:
        ContentOutput with storable HTML (None when empty).
    """
    html = field.to_stored(inp.value, inp.element)
    return ContentOutput(html=html, is_empty=is_html_empty(html))


def run_validate_settings(inp: ValidateSettingsInput) -> ValidateSettingsOutput:
    """
    Validate field settings.

    A manual editor config that isn't a JSON object is reported here,
    at configuration time, rather than during content transformation.
    """
    errors = validate_field_settings(inp.data)
    return ValidateSettingsOutput(is_valid=len(errors) == 0, errors=errors)


def run(
    inp: ToEditableInput | ToStoredInput | ValidateSettingsInput,
    *,
    field: RichTextField | None = None,
) -> ContentOutput | ValidateSettingsOutput:
    """
    Main entry point for the richtext component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ValidateSettingsInput):
        return run_validate_settings(inp)
    if field is None:
        raise ValueError("A rich text field is required for content transformations")
    if isinstance(inp, ToEditableInput):
        return run_to_editable(inp, field=field)
    elif isinstance(inp, ToStoredInput):
        return run_to_stored(inp, field=field)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
