"""
References component - Reference tag codec.

Converts between stored reference tags and editable URLs inside
href/src attributes.

Shell Layer - wraps the functional core for callers.
"""

from __future__ import annotations

from ._impl import decode_references, encode_references, find_references
from .models import DecodeReferencesInput, EncodeReferencesInput, ReferencesOutput
from .ports import ReferenceResolverPort


def run_decode(
    inp: DecodeReferencesInput,
    *,
    resolver: ReferenceResolverPort,
) -> ReferencesOutput:
    """
    Resolve reference tags for the editor.

    Args:
        inp: Input containing stored HTML and the owning element.
        resolver: Reference resolver.

    Returns:
        ReferencesOutput with editable HTML.
    """
    result = decode_references(inp.html, resolver, inp.element)
    return ReferencesOutput(
        html=result,
        references=frozenset(find_references(result)),
        changed=result != inp.html,
    )


def run_encode(
    inp: EncodeReferencesInput,
    *,
    resolver: ReferenceResolverPort,
) -> ReferencesOutput:
    """
    Convert editable URLs back into reference tags for storage.

    Args:
        inp: Input containing editable HTML.
        resolver: Reference resolver (only consulted for query/hash attribution).

    Returns:
        ReferencesOutput with storable HTML.
    """
    result = encode_references(inp.html, resolver)
    return ReferencesOutput(
        html=result,
        references=frozenset(find_references(result)),
        changed=result != inp.html,
    )


def run(
    inp: DecodeReferencesInput | EncodeReferencesInput,
    *,
    resolver: ReferenceResolverPort,
) -> ReferencesOutput:
    """Main entry point for the references component."""
    if isinstance(inp, DecodeReferencesInput):
        return run_decode(inp, resolver=resolver)
    elif isinstance(inp, EncodeReferencesInput):
        return run_encode(inp, resolver=resolver)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
