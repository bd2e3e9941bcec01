"""
Sanitizer component - Port interfaces.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.rules.models import SanitizerPolicy


class HtmlSanitizerPort(Protocol):
    """Allow-list HTML sanitizer."""

    def sanitize(self, html: str, policy: SanitizerPolicy) -> str:
        """Strip tags/attributes/protocols not permitted by the policy."""
        ...


class SvgSanitizerPort(Protocol):
    """Sanitizer for a single SVG document fragment."""

    def sanitize_svg(self, svg: str) -> str:
        """Return the SVG with unsafe elements and attributes removed."""
        ...


class CapabilityProviderPort(Protocol):
    """Enabled editor capabilities (plugins) for a field."""

    def enabled_capabilities(self) -> set[str]:
        """Get enabled capability names."""
        ...


class ConfigSourcePort(Protocol):
    """Named JSON config lookup (editor configs, sanitizer policies)."""

    def get_config(self, kind: str, name: str | None = None) -> dict[str, Any] | None:
        """
        Get a config by kind and name.

        Falls back to the kind's default config when `name` is unknown;
        returns None when there is no default either.
        """
        ...
