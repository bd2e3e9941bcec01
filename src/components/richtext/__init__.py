"""
Richtext component - Rich text field load/save transformations.
"""

from ._impl import (
    BLANK_EDITOR_HTML,
    PAGEBREAK_HTML,
    PAGEBREAK_MARKER,
    EditorConfigCapabilityProvider,
    EditorConfigModifier,
    RichTextField,
    collapse_pagebreaks,
    expand_pagebreaks,
    validate_field_settings,
)
from .component import (
    run,
    run_to_editable,
    run_to_stored,
    run_validate_settings,
)
from .models import (
    ContentOutput,
    FieldSettingsValidationError,
    ToEditableInput,
    ToStoredInput,
    ValidateSettingsInput,
    ValidateSettingsOutput,
)
from .ports import (
    CapabilityProviderPort,
    ConfigSourcePort,
    HtmlSanitizerPort,
    ReferenceResolverPort,
    SvgSanitizerPort,
)

__all__ = [
    # Entry points
    "run",
    "run_to_editable",
    "run_to_stored",
    "run_validate_settings",
    # Input models
    "ToEditableInput",
    "ToStoredInput",
    "ValidateSettingsInput",
    # Output models
    "ContentOutput",
    "ValidateSettingsOutput",
    "FieldSettingsValidationError",
    # Ports
    "CapabilityProviderPort",
    "ConfigSourcePort",
    "HtmlSanitizerPort",
    "ReferenceResolverPort",
    "SvgSanitizerPort",
    # Field
    "BLANK_EDITOR_HTML",
    "PAGEBREAK_HTML",
    "PAGEBREAK_MARKER",
    "EditorConfigCapabilityProvider",
    "EditorConfigModifier",
    "RichTextField",
    "collapse_pagebreaks",
    "expand_pagebreaks",
    "validate_field_settings",
]
