import json
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_SAFE_IFRAME_REGEXP = r"^(https?:)?//(www\.youtube\.com/embed/|player\.vimeo\.com/video/)"

DEFAULT_TAGS = [
    "a", "abbr", "b", "blockquote", "br", "code", "del", "div", "em",
    "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i",
    "iframe", "img", "ins", "li", "ol", "p", "pre", "s", "span", "strike",
    "strong", "sub", "sup", "table", "tbody", "td", "tfoot", "th", "thead",
    "tr", "u", "ul",
]

DEFAULT_ATTRIBUTES = {
    "*": ["class", "style", "title", "dir", "lang"],
    "a": ["href", "target", "rel"],
    "img": ["src", "alt", "width", "height"],
    "iframe": ["src", "width", "height", "frameborder", "allowfullscreen"],
    "ol": ["start"],
    "td": ["colspan", "rowspan"],
    "th": ["colspan", "rowspan", "scope"],
}

# Broad set kept by the sanitizer; the inline style filter narrows it
# down to what the enabled editor plugins allow.
DEFAULT_CSS_PROPERTIES = [
    "color", "background-color", "font-family", "font-size", "font-style",
    "font-weight", "text-align", "text-decoration", "display",
]


class SanitizerPolicy(BaseModel):
    """Allow-list policy handed to the HTML sanitizer."""

    model_config = ConfigDict(extra="forbid")

    tags: list[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))
    attributes: dict[str, list[str]] = Field(
        default_factory=lambda: {tag: list(names) for tag, names in DEFAULT_ATTRIBUTES.items()}
    )
    protocols: list[str] = Field(default_factory=lambda: ["http", "https", "mailto", "tel"])
    css_properties: list[str] = Field(default_factory=lambda: list(DEFAULT_CSS_PROPERTIES))
    allowed_frame_targets: list[str] = Field(default_factory=lambda: ["_blank"])
    enable_id: bool = True
    safe_iframe: bool = True
    safe_iframe_regexp: str = DEFAULT_SAFE_IFRAME_REGEXP

    def add_attribute(self, tag: str, name: str) -> None:
        """Allow an extra attribute on a tag (for policy modifiers)."""
        names = self.attributes.setdefault(tag, [])
        if name not in names:
            names.append(name)


class FieldSettings(BaseModel):
    """Per-field settings controlling how content is cleaned on save."""

    model_config = ConfigDict(populate_by_name=True)

    purify_html: bool = True
    remove_inline_styles: bool = True
    remove_empty_tags: bool = True
    remove_nbsp: bool = True
    encode_mb4: bool = False

    editor_config: str | None = Field(
        default=None,
        validation_alias=AliasChoices("editor_config", "config_file", "configFile"),
    )
    purifier_config: str | None = None
    config_selection_mode: Literal["choose", "manual"] = "choose"
    manual_config: str = ""

    @field_validator("manual_config", mode="before")
    @classmethod
    def _trim_manual_config(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("manual_config")
    @classmethod
    def _check_manual_config(cls, value: str) -> str:
        if not value:
            return value
        try:
            decoded = json.loads(value)
        except ValueError as e:
            raise ValueError("This must be a valid JSON object.") from e
        if not isinstance(decoded, dict):
            raise ValueError("This must be a valid JSON object.")
        return value

    def manual_config_data(self) -> dict[str, Any]:
        """Decoded manual config ({} when blank)."""
        if not self.manual_config:
            return {}
        data: dict[str, Any] = json.loads(self.manual_config)
        return data
