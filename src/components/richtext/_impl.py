"""
Rich text field - load/save transformations for editor content.

Functional Core - sequences the reference codec and sanitization
pipeline; all I/O lives behind the injected ports.

Key behaviors:
- to_editable resolves reference tags and expands pagebreak markers
- to_stored cleans editor HTML and stores reference tags
- a blank editor (`<p><br></p>`) is stored as nothing
- repeated saves of stored content are stable
"""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import ValidationError

from src.components.references import decode_references
from src.components.references.ports import ReferenceResolverPort
from src.components.sanitizer import (
    PolicyModifier,
    SanitizationPipeline,
    build_sanitizer_policy,
)
from src.components.sanitizer.ports import ConfigSourcePort, HtmlSanitizerPort, SvgSanitizerPort
from src.domain.entities import ElementContext, FieldData
from src.domain.html import encode_mb4
from src.rules.models import FieldSettings, SanitizerPolicy

from .models import FieldSettingsValidationError

logger = logging.getLogger(__name__)

EDITOR_CONFIG_KIND = "redactor"
POLICY_CONFIG_KIND = "htmlpurifier"

PAGEBREAK_MARKER = "<!--pagebreak-->"
PAGEBREAK_HTML = (
    '<hr class="redactor_pagebreak" style="display:none" '
    'unselectable="on" contenteditable="false">'
)
PAGEBREAK_PATTERN = re.compile(r"<hr\b[^>]*\bclass=\"redactor_pagebreak\"[^>]*>")
PAGEBREAK_PLACEHOLDER_PREFIX = "pagebreak:"

# Submitted by the editor when text was typed and then deleted
BLANK_EDITOR_HTML = "<p><br></p>"

EditorConfigModifier = Callable[[dict[str, Any], FieldSettings], dict[str, Any] | None]


def expand_pagebreaks(content: str) -> str:
    """Swap stored pagebreak markers for the editor's pagebreak element."""
    return content.replace(PAGEBREAK_MARKER, PAGEBREAK_HTML)


def collapse_pagebreaks(content: str, marker: str = PAGEBREAK_MARKER) -> str:
    """Swap the editor's pagebreak elements (and stored markers) for `marker`."""
    if marker != PAGEBREAK_MARKER:
        content = content.replace(PAGEBREAK_MARKER, marker)
    return PAGEBREAK_PATTERN.sub(marker, content)


def _pagebreak_placeholder(content: str) -> str:
    while True:
        placeholder = PAGEBREAK_PLACEHOLDER_PREFIX + secrets.token_hex(10)
        if placeholder not in content:
            return placeholder


def validate_field_settings(data: dict[str, Any]) -> list[FieldSettingsValidationError]:
    """Validate raw field settings, returning errors instead of raising."""
    try:
        FieldSettings.model_validate(data)
    except ValidationError as e:
        return [
            FieldSettingsValidationError(
                code=error["type"],
                message=error["msg"],
                field=".".join(str(part) for part in error["loc"]) or None,
            )
            for error in e.errors()
        ]
    return []


class EditorConfigCapabilityProvider:
    """
    Editor config for a field, and the capabilities (plugins) it enables.

    Manual mode uses the field's own JSON; choose mode loads the named
    config, falling back to the default one.
    """

    def __init__(
        self,
        settings: FieldSettings,
        config_source: ConfigSourcePort | None = None,
        modifiers: Iterable[EditorConfigModifier] = (),
    ) -> None:
        self._settings = settings
        self._config_source = config_source
        self._modifiers = list(modifiers)

    def editor_config(self) -> dict[str, Any]:
        if self._settings.config_selection_mode == "manual":
            config = self._settings.manual_config_data()
        elif self._config_source is not None:
            config = (
                self._config_source.get_config(EDITOR_CONFIG_KIND, self._settings.editor_config)
                or {}
            )
        else:
            config = {}

        for modifier in self._modifiers:
            result = modifier(config, self._settings)
            if result is not None:
                config = result

        return config

    def enabled_capabilities(self) -> set[str]:
        return set(self.editor_config().get("plugins", []))


class RichTextField:
    """
    Load/save transformations for one rich text field.

    Collaborators and extension hooks are injected here; nothing is
    registered globally.
    """

    def __init__(
        self,
        settings: FieldSettings | None = None,
        *,
        resolver: ReferenceResolverPort,
        sanitizer: HtmlSanitizerPort,
        svg_sanitizer: SvgSanitizerPort,
        config_source: ConfigSourcePort | None = None,
        editor_config_modifiers: Iterable[EditorConfigModifier] = (),
        policy_modifiers: Iterable[PolicyModifier] = (),
    ) -> None:
        self.settings = settings or FieldSettings()
        self._resolver = resolver
        self.capabilities = EditorConfigCapabilityProvider(
            self.settings, config_source, editor_config_modifiers
        )

        policy_config = None
        if config_source is not None:
            policy_config = config_source.get_config(
                POLICY_CONFIG_KIND, self.settings.purifier_config
            )

        self.pipeline = SanitizationPipeline(
            self.settings,
            resolver=resolver,
            sanitizer=sanitizer,
            svg_sanitizer=svg_sanitizer,
            capabilities=self.capabilities,
            policy=build_sanitizer_policy(policy_config, policy_modifiers),
        )

    @property
    def policy(self) -> SanitizerPolicy:
        return self.pipeline.policy

    def to_editable(
        self,
        value: FieldData | str | None,
        element: ElementContext | None = None,
    ) -> str | None:
        """Prepare stored content for the editor. Stored content is not re-sanitized."""
        if isinstance(value, FieldData):
            value = value.raw_content
        if value is None:
            return None

        value = decode_references(value, self._resolver, element)
        return expand_pagebreaks(value)

    def to_stored(
        self,
        value: FieldData | str | None,
        element: ElementContext | None = None,
    ) -> str | None:
        """Clean editor content for storage. Returns None when nothing is left."""
        if isinstance(value, FieldData):
            value = value.raw_content
        if not value:
            return None

        if value == BLANK_EDITOR_HTML:
            value = ""

        if value:
            # Pagebreaks are kept away from the sanitizer, which strips
            # comments and may not allow <hr>
            placeholder = _pagebreak_placeholder(value)
            value = collapse_pagebreaks(value, placeholder)
            value = self.pipeline.clean(value, element)
            value = value.replace(placeholder, PAGEBREAK_MARKER)

        if value and self.settings.encode_mb4:
            value = encode_mb4(value)

        return value or None

    # --- Field value lifecycle ---

    def normalize_value(
        self,
        value: FieldData | str | None,
        element: ElementContext | None = None,
    ) -> FieldData | None:
        if isinstance(value, FieldData):
            return value
        if not value:
            return None
        return FieldData(value, element.locale_id if element else None)

    def serialize_value(
        self,
        value: FieldData | str | None,
        element: ElementContext | None = None,
    ) -> str | None:
        return self.to_stored(value, element)

    def is_value_empty(self, value: FieldData | str | None) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            value = FieldData(value)
        return value.is_empty()
