"""
In-memory reference resolver.

Implements ReferenceResolverPort from a registry of known element URLs.
Used for local development and tests; production wires in the CMS's
element lookup instead.
"""

from __future__ import annotations

import re

from src.domain.entities import ReferenceToken

_TAG_PATTERN = re.compile(r"^\{([^|}]+)(?:\|\|([^}]*))?\}$")


class InMemoryReferenceResolver:
    """
    Resolves `{type:id[@locale][:qualifier]}` tags from registered URLs.

    A token's own locale wins over the locale passed in. Locale-specific
    URLs are tried first, then the locale-independent one.
    """

    def __init__(self) -> None:
        self._urls: dict[tuple[str, int | None], str] = {}

    def register(self, reference: str, url: str, locale_id: int | None = None) -> None:
        """Register the URL a reference resolves to (qualifier defaults to `url`)."""
        token = ReferenceToken.parse(reference).with_default_qualifier()
        self._urls[(self._key(token), locale_id)] = url

    def resolve(self, tag: str, locale_id: int | None = None) -> str:
        match = _TAG_PATTERN.match(tag)
        if not match:
            return tag

        try:
            token = ReferenceToken.parse(match.group(1)).with_default_qualifier()
        except ValueError:
            return tag

        locale = token.locale_id if token.locale_id is not None else locale_id
        key = self._key(token)

        if locale is not None and (key, locale) in self._urls:
            return self._urls[(key, locale)]
        return self._urls.get((key, None), tag)

    @staticmethod
    def _key(token: ReferenceToken) -> str:
        return str(ReferenceToken(token.type, token.id, None, token.qualifier))
