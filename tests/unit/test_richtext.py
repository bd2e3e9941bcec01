"""
Tests for the rich text field.

Covers:
- load (to_editable) and save (to_stored) transformations
- reference tags surviving edit cycles
- pagebreaks, blank editor content and non-breaking spaces
- editor config capabilities and sanitizer policy extension points
- field settings validation
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.adapters.bleach_sanitizer import BleachHtmlSanitizer
from src.adapters.config_files import FileConfigSource
from src.adapters.memory_resolver import InMemoryReferenceResolver
from src.components.richtext import (
    PAGEBREAK_HTML,
    PAGEBREAK_MARKER,
    EditorConfigCapabilityProvider,
    RichTextField,
    ToEditableInput,
    ToStoredInput,
    ValidateSettingsInput,
    collapse_pagebreaks,
    expand_pagebreaks,
    run,
    run_to_editable,
    run_to_stored,
    run_validate_settings,
    validate_field_settings,
)
from src.components.sanitizer import SanitizerPolicyError
from src.domain.entities import ElementContext, FieldData
from src.rules.models import FieldSettings, SanitizerPolicy

STORED = (
    '<p>See <a href="{entry:5:url||/blog/post}">the post</a> and '
    '<img src="{asset:3:thumb||/assets/_thumb/a.jpg}" alt="A"></p>'
)
EDITABLE = (
    '<p>See <a href="/blog/post#entry:5:url">the post</a> and '
    '<img src="/assets/_thumb/a.jpg#asset:3:thumb" alt="A"></p>'
)

# --- Fixtures ---


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Config directory with editor and purifier configs."""
    (tmp_path / "redactor").mkdir()
    (tmp_path / "htmlpurifier").mkdir()
    (tmp_path / "redactor" / "Default.json").write_text(json.dumps({"plugins": ["alignment"]}))
    (tmp_path / "redactor" / "Simple.json").write_text(json.dumps({"plugins": ["fontsize"]}))
    (tmp_path / "htmlpurifier" / "Strict.json").write_text(json.dumps({"Attr.EnableID": False}))
    (tmp_path / "htmlpurifier" / "Broken.json").write_text(json.dumps({"Core.Encoding": "UTF-8"}))
    return tmp_path


def make_field(
    resolver: InMemoryReferenceResolver,
    sanitizer: BleachHtmlSanitizer,
    settings: FieldSettings | None = None,
    **kwargs,
) -> RichTextField:
    return RichTextField(
        settings, resolver=resolver, sanitizer=sanitizer, svg_sanitizer=sanitizer, **kwargs
    )


# --- Load ---


class TestToEditable:
    """Stored content is prepared for the editor."""

    def test_references_resolved(self, field: RichTextField) -> None:
        assert field.to_editable(STORED) == EDITABLE

    def test_none(self, field: RichTextField) -> None:
        assert field.to_editable(None) is None

    def test_field_data(self, field: RichTextField) -> None:
        assert field.to_editable(FieldData(STORED)) == EDITABLE

    def test_element_locale(self, field: RichTextField) -> None:
        stored = '<a href="{entry:7:url}">About</a>'

        assert field.to_editable(stored) == '<a href="/en/about#entry:7:url">About</a>'
        assert field.to_editable(stored, ElementContext(locale_id=2)) == (
            '<a href="/de/ueber-uns#entry:7:url">About</a>'
        )

    def test_token_locale(self, field: RichTextField) -> None:
        assert field.to_editable('<a href="{entry:7@2:url}">x</a>') == (
            '<a href="/de/ueber-uns#entry:7@2:url">x</a>'
        )

    def test_unresolved_reference_kept(self, field: RichTextField) -> None:
        stored = '<a href="{entry:99:url||/gone}">x</a>'
        assert field.to_editable(stored) == stored

    def test_pagebreaks_expanded(self, field: RichTextField) -> None:
        assert field.to_editable(f"<p>1</p>{PAGEBREAK_MARKER}<p>2</p>") == (
            f"<p>1</p>{PAGEBREAK_HTML}<p>2</p>"
        )

    def test_stored_content_not_sanitized(self, field: RichTextField) -> None:
        stored = '<p onclick="x()">legacy</p>'
        assert field.to_editable(stored) == stored


# --- Save ---


class TestToStored:
    """Editor content is cleaned and references are stored as tags."""

    def test_references_encoded(self, field: RichTextField) -> None:
        assert field.to_stored(EDITABLE) == STORED

    def test_save_is_stable(self, field: RichTextField) -> None:
        once = field.to_stored(EDITABLE)
        assert field.to_stored(once) == once

    def test_edit_cycle_keeps_references(self, field: RichTextField) -> None:
        assert field.to_stored(field.to_editable(STORED)) == STORED

    def test_blank_editor_content_is_none(self, field: RichTextField) -> None:
        assert field.to_stored("<p><br></p>") is None

    @pytest.mark.parametrize("value", [None, ""])
    def test_nothing_is_none(self, field: RichTextField, value: str | None) -> None:
        assert field.to_stored(value) is None

    def test_whitespace_only_paragraph_is_empty(self, field: RichTextField) -> None:
        assert field.is_value_empty(field.to_stored("<p>&nbsp;</p>"))

    def test_nbsp_replaced(self, field: RichTextField) -> None:
        assert field.to_stored("<p>a&nbsp;b</p>") == "<p>a b</p>"

    def test_empty_tags_removed(self, field: RichTextField) -> None:
        assert field.to_stored("<p>x</p><p></p>") == "<p>x</p>"

    def test_font_tags_removed(self, field: RichTextField) -> None:
        assert field.to_stored('<p><font color="red">x</font></p>') == "<p>x</p>"

    def test_styles_limited_to_enabled_plugins(self, field: RichTextField) -> None:
        html = '<p style="color: red; text-align: center; font-size: 20px">x</p>'
        assert field.to_stored(html) == '<p style="color: red; text-align: center">x</p>'

    def test_unsafe_markup_removed(self, field: RichTextField) -> None:
        result = field.to_stored('<p onclick="x()">Hi<script>alert(1)</script></p>')

        assert result is not None
        assert "onclick" not in result
        assert "<script" not in result

    def test_svg_sanitized_separately(self, field: RichTextField) -> None:
        result = field.to_stored('<div fill="red"><svg><circle fill="red"></circle></svg></div>')

        assert result is not None
        assert result.startswith("<div><svg>")
        assert 'fill="red"' in result

    def test_svg_style_survives_while_stripped_elsewhere(self, field: RichTextField) -> None:
        svg = '<svg style="color:red" viewBox="0 0 10 10"><path style="fill:red" d="M0 0"></path></svg>'

        assert field.to_stored(f'<p style="fill:red">x</p>{svg}') == f"<p>x</p>{svg}"

    def test_unresolved_reference_kept(self, field: RichTextField) -> None:
        stored = '<a href="{entry:99:url||/gone}">x</a>'
        assert field.to_stored(stored) == stored

    def test_braces_in_text_untouched(self, field: RichTextField) -> None:
        html = "<p>Use {entry:5:url} here</p>"
        assert field.to_stored(html) == html

    def test_pagebreak_round_trip(self, field: RichTextField) -> None:
        stored = f"<p>One</p>{PAGEBREAK_MARKER}<p>Two</p>"

        assert field.to_stored(field.to_editable(stored)) == stored
        assert field.to_stored(stored) == stored

    def test_field_data(self, field: RichTextField) -> None:
        assert field.to_stored(FieldData("<p>x</p>")) == "<p>x</p>"

    def test_mb4_encoding(
        self, resolver: InMemoryReferenceResolver, sanitizer: BleachHtmlSanitizer
    ) -> None:
        field = make_field(resolver, sanitizer, FieldSettings(encode_mb4=True))
        assert field.to_stored("<p>Hi \U0001F600</p>") == "<p>Hi &#x1F600;</p>"

    def test_mb4_left_alone_by_default(self, field: RichTextField) -> None:
        assert field.to_stored("<p>Hi \U0001F600</p>") == "<p>Hi \U0001F600</p>"

    def test_sanitizer_errors_propagate(self, resolver: InMemoryReferenceResolver) -> None:
        class BrokenSanitizer:
            def sanitize(self, html: str, policy: SanitizerPolicy) -> str:
                raise RuntimeError("boom")

            def sanitize_svg(self, svg: str) -> str:
                return svg

        field = RichTextField(
            resolver=resolver, sanitizer=BrokenSanitizer(), svg_sanitizer=BrokenSanitizer()
        )

        with pytest.raises(RuntimeError, match="boom"):
            field.to_stored("<p>x</p>")

    def test_purify_disabled(
        self, resolver: InMemoryReferenceResolver, sanitizer: BleachHtmlSanitizer
    ) -> None:
        field = make_field(resolver, sanitizer, FieldSettings(purify_html=False))
        assert field.to_stored('<p onclick="x()">Hi</p>') == '<p onclick="x()">Hi</p>'


class TestPagebreaks:
    def test_expand_collapse(self) -> None:
        html = f"<p>a</p>{PAGEBREAK_MARKER}<p>b</p>"
        assert collapse_pagebreaks(expand_pagebreaks(html)) == html

    def test_collapse_to_placeholder(self) -> None:
        html = f"<p>a</p>{PAGEBREAK_MARKER}<p>b</p>{PAGEBREAK_HTML}"
        assert collapse_pagebreaks(html, "pb:1") == "<p>a</p>pb:1<p>b</p>pb:1"

    def test_survive_policy_without_hr(
        self, resolver: InMemoryReferenceResolver, sanitizer: BleachHtmlSanitizer
    ) -> None:
        field = make_field(
            resolver, sanitizer, policy_modifiers=[lambda policy: policy.tags.remove("hr")]
        )
        stored = f"<p>One</p>{PAGEBREAK_MARKER}<p>Two</p>"

        assert "hr" not in field.policy.tags
        assert field.to_stored(field.to_editable(stored)) == stored
        assert field.to_stored(stored) == stored

    def test_collapse_ignores_other_rules(self) -> None:
        html = '<hr class="divider">'
        assert collapse_pagebreaks(html) == html


# --- Field Value Lifecycle ---


class TestFieldValue:
    def test_normalize_value(self, field: RichTextField) -> None:
        value = field.normalize_value("<p>x</p>", ElementContext(locale_id=3))

        assert value == FieldData("<p>x</p>", 3)
        assert field.normalize_value(value) is value
        assert field.normalize_value("") is None

    def test_serialize_value(self, field: RichTextField) -> None:
        assert field.serialize_value(FieldData(EDITABLE)) == STORED

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, True),
            ("<p><br></p>", True),
            ("<p>&nbsp;</p>", True),
            ("<p>x</p>", False),
            ('<p><img src="/a.jpg"></p>', False),
        ],
    )
    def test_is_value_empty(self, field: RichTextField, value: str | None, expected: bool) -> None:
        assert field.is_value_empty(value) is expected


# --- Capabilities ---


class TestCapabilities:
    """Enabled plugins come from the field's editor config."""

    def test_manual_config(self, field: RichTextField) -> None:
        assert field.capabilities.enabled_capabilities() == {"alignment", "fontcolor"}

    def test_named_config(self, config_dir: Path) -> None:
        provider = EditorConfigCapabilityProvider(
            FieldSettings(editor_config="Simple.json"), FileConfigSource(config_dir)
        )
        assert provider.enabled_capabilities() == {"fontsize"}

    def test_missing_config_falls_back_to_default(self, config_dir: Path) -> None:
        provider = EditorConfigCapabilityProvider(
            FieldSettings(editor_config="Nope.json"), FileConfigSource(config_dir)
        )
        assert provider.enabled_capabilities() == {"alignment"}

    def test_no_config_source(self) -> None:
        provider = EditorConfigCapabilityProvider(FieldSettings())
        assert provider.editor_config() == {}
        assert provider.enabled_capabilities() == set()

    def test_modifiers(self, config_dir: Path) -> None:
        def add_font_family(config: dict, settings: FieldSettings) -> dict:
            return {**config, "plugins": [*config.get("plugins", []), "fontfamily"]}

        def mutate_in_place(config: dict, settings: FieldSettings) -> None:
            config["linkNewTab"] = True

        provider = EditorConfigCapabilityProvider(
            FieldSettings(),
            FileConfigSource(config_dir),
            [add_font_family, mutate_in_place],
        )

        assert provider.editor_config() == {
            "plugins": ["alignment", "fontfamily"],
            "linkNewTab": True,
        }

    def test_capabilities_drive_styles(
        self,
        resolver: InMemoryReferenceResolver,
        sanitizer: BleachHtmlSanitizer,
        config_dir: Path,
    ) -> None:
        field = make_field(
            resolver,
            sanitizer,
            FieldSettings(editor_config="Simple.json"),
            config_source=FileConfigSource(config_dir),
        )
        html = '<p style="color: red; font-size: 20px">x</p>'
        assert field.to_stored(html) == '<p style="font-size: 20px">x</p>'


# --- Sanitizer Policy ---


class TestPolicy:
    def test_default_policy(self, field: RichTextField) -> None:
        assert field.policy == SanitizerPolicy()

    def test_policy_modifier(
        self, resolver: InMemoryReferenceResolver, sanitizer: BleachHtmlSanitizer
    ) -> None:
        html = '<p><span data-redactor-type="var">x</span></p>'
        plain = make_field(resolver, sanitizer)
        extended = make_field(
            resolver,
            sanitizer,
            policy_modifiers=[lambda policy: policy.add_attribute("span", "data-redactor-type")],
        )

        assert plain.to_stored(html) == "<p><span>x</span></p>"
        assert extended.to_stored(html) == html

    def test_named_purifier_config(
        self,
        resolver: InMemoryReferenceResolver,
        sanitizer: BleachHtmlSanitizer,
        config_dir: Path,
    ) -> None:
        field = make_field(
            resolver,
            sanitizer,
            FieldSettings(purifier_config="Strict.json"),
            config_source=FileConfigSource(config_dir),
        )

        assert field.policy.enable_id is False
        assert field.to_stored('<p id="a">x</p>') == "<p>x</p>"

    def test_invalid_purifier_config(
        self,
        resolver: InMemoryReferenceResolver,
        sanitizer: BleachHtmlSanitizer,
        config_dir: Path,
    ) -> None:
        with pytest.raises(SanitizerPolicyError):
            make_field(
                resolver,
                sanitizer,
                FieldSettings(purifier_config="Broken.json"),
                config_source=FileConfigSource(config_dir),
            )


# --- Settings Validation ---


class TestValidateFieldSettings:
    def test_valid(self) -> None:
        assert validate_field_settings({}) == []
        assert validate_field_settings(
            {"config_selection_mode": "manual", "manual_config": ' {"plugins": []} '}
        ) == []

    def test_manual_config_must_be_object(self) -> None:
        (error,) = validate_field_settings(
            {"config_selection_mode": "manual", "manual_config": "[1, 2]"}
        )

        assert error.field == "manual_config"
        assert error.code == "value_error"
        assert "This must be a valid JSON object." in error.message

    def test_manual_config_must_be_json(self) -> None:
        (error,) = validate_field_settings({"manual_config": "{plugins"})
        assert error.field == "manual_config"

    def test_unknown_selection_mode(self) -> None:
        (error,) = validate_field_settings({"config_selection_mode": "auto"})
        assert error.field == "config_selection_mode"


# --- Component ---


class TestComponent:
    def test_run_to_editable(self, field: RichTextField) -> None:
        result = run_to_editable(ToEditableInput(value=STORED), field=field)

        assert result.html == EDITABLE
        assert result.is_empty is False

    def test_run_to_stored_blank(self, field: RichTextField) -> None:
        result = run_to_stored(ToStoredInput(value="<p><br></p>"), field=field)

        assert result.html is None
        assert result.is_empty is True

    def test_run_validate_settings(self) -> None:
        result = run_validate_settings(ValidateSettingsInput(data={"manual_config": "1"}))

        assert result.is_valid is False
        assert len(result.errors) == 1

    def test_run_dispatch(self, field: RichTextField) -> None:
        assert run(ValidateSettingsInput(data={})).is_valid is True  # type: ignore[union-attr]
        assert run(ToStoredInput(value=EDITABLE), field=field).html == STORED  # type: ignore[union-attr]

    def test_run_requires_field(self) -> None:
        with pytest.raises(ValueError, match="rich text field is required"):
            run(ToEditableInput(value="<p>x</p>"))

    def test_run_unknown_input(self, field: RichTextField) -> None:
        with pytest.raises(ValueError, match="Unknown input type"):
            run("nope", field=field)  # type: ignore[arg-type]
