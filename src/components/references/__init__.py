"""
References component - Reference tag encode/decode for rich text.
"""

from ._impl import (
    DECODE_PATTERN,
    ENCODE_PATTERN,
    decode_references,
    encode_references,
    find_references,
)
from .component import (
    run,
    run_decode,
    run_encode,
)
from .models import (
    DecodeReferencesInput,
    EncodeReferencesInput,
    ReferencesOutput,
)
from .ports import ReferenceResolverPort

__all__ = [
    # Entry points
    "run",
    "run_decode",
    "run_encode",
    # Input models
    "DecodeReferencesInput",
    "EncodeReferencesInput",
    # Output models
    "ReferencesOutput",
    # Ports
    "ReferenceResolverPort",
    # Functional core
    "DECODE_PATTERN",
    "ENCODE_PATTERN",
    "decode_references",
    "encode_references",
    "find_references",
]
