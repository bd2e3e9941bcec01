"""
References component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol


class ReferenceResolverPort(Protocol):
    """Resolves reference tags to URLs."""

    def resolve(self, tag: str, locale_id: int | None = None) -> str:
        """
        Resolve a wrapped reference tag (`{type:id[@locale][:qualifier][||fallback]}`).

        Returns the resolved URL, or `tag` unchanged if it could not be
        resolved. Must not raise for a well-formed but unknown reference.
        """
        ...
