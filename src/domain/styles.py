"""
Inline style allow-list.

Editor plugins unlock the CSS properties they write. Anything else found
in a `style` attribute is stripped on save.
"""

from __future__ import annotations

from collections.abc import Iterable

# Enabled editor capability -> CSS property it unlocks
CAPABILITY_STYLES: dict[str, str] = {
    "alignment": "text-align",
    "fontcolor": "color",
    "fontfamily": "font-family",
    "fontsize": "font-size",
}


def resolve_allowed_styles(capabilities: Iterable[str]) -> frozenset[str]:
    """Return the CSS property names permitted by the enabled capabilities."""
    return frozenset(
        CAPABILITY_STYLES[capability] for capability in capabilities if capability in CAPABILITY_STYLES
    )
