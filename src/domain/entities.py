"""
Rich text field domain entities.

Key behaviors:
- FieldData wraps stored HTML plus the locale it was loaded for
- ReferenceToken parses and formats `type:id[@locale][:qualifier]`
- ElementContext carries the owning element's locale into resolution
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.domain.html import is_html_empty

# Handle pattern used for transform qualifiers (e.g. `thumb`, `heroImage`).
HANDLE_PATTERN = r"[a-zA-Z][a-zA-Z0-9_]*"

DEFAULT_QUALIFIER = "url"

_TOKEN_PATTERN = re.compile(
    r"^(?P<type>[\w\\]+):(?P<id>\d+)(?:@(?P<locale>\d+))?"
    r"(?::(?P<qualifier>(?:transform:)?" + HANDLE_PATTERN + r"))?$"
)


@dataclass(frozen=True)
class ElementContext:
    """The element a field value belongs to."""

    locale_id: int | None = None


@dataclass(frozen=True)
class ReferenceToken:
    """
    A portable reference to another content item.

    Serialized as `type:id[@locale][:qualifier]`. The qualifier is either
    `url` or a transform handle (optionally prefixed with `transform:`).
    """

    type: str
    id: int
    locale_id: int | None = None
    qualifier: str | None = None

    @classmethod
    def parse(cls, text: str) -> ReferenceToken:
        """Parse a bare token (no braces, no fallback). Raises ValueError."""
        match = _TOKEN_PATTERN.match(text)
        if not match:
            raise ValueError(f"Invalid reference token: {text!r}")
        locale = match.group("locale")
        return cls(
            type=match.group("type"),
            id=int(match.group("id")),
            locale_id=int(locale) if locale else None,
            qualifier=match.group("qualifier"),
        )

    def with_default_qualifier(self) -> ReferenceToken:
        """Return a token that always carries a qualifier."""
        if self.qualifier:
            return self
        return ReferenceToken(self.type, self.id, self.locale_id, DEFAULT_QUALIFIER)

    def __str__(self) -> str:
        text = f"{self.type}:{self.id}"
        if self.locale_id is not None:
            text += f"@{self.locale_id}"
        if self.qualifier:
            text += f":{self.qualifier}"
        return text

    def wrap(self, fallback: str | None = None) -> str:
        """Format as an editable-time reference tag, `{token||fallback}`."""
        if fallback:
            return f"{{{self}||{fallback}}}"
        return f"{{{self}}}"


class FieldData:
    """
    Stored rich text content for a single element/locale.

    Emptiness follows the HTML emptiness rule rather than string length,
    so a lone `<p><br></p>` counts as empty.
    """

    def __init__(self, content: str, locale_id: int | None = None) -> None:
        self._content = content
        self.locale_id = locale_id

    @property
    def raw_content(self) -> str:
        return self._content

    def is_empty(self) -> bool:
        return is_html_empty(self._content)

    def __str__(self) -> str:
        return self._content

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldData):
            return self._content == other._content and self.locale_id == other.locale_id
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._content, self.locale_id))

    def __repr__(self) -> str:
        return f"FieldData({self._content!r}, locale_id={self.locale_id!r})"
