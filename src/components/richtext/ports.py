"""
Richtext component port definitions.

The field depends on the reference resolver and sanitizer ports of the
references and sanitizer components; re-exported here for wiring.
"""

from __future__ import annotations

from src.components.references.ports import ReferenceResolverPort
from src.components.sanitizer.ports import (
    CapabilityProviderPort,
    ConfigSourcePort,
    HtmlSanitizerPort,
    SvgSanitizerPort,
)

__all__ = [
    "CapabilityProviderPort",
    "ConfigSourcePort",
    "HtmlSanitizerPort",
    "ReferenceResolverPort",
    "SvgSanitizerPort",
]
