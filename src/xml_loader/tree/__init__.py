"""Tree layer for the XML loader.

Key Components:
    XMLTreeBuilder: Parses normalized bytes with lxml
    EmptyCdataGuard: Keeps empty CDATA elements as empty strings
    encode_tree / decode_structure: Two-phase conversion to plain data
"""

from .builder import (
    EmptyCdataGuard,
    XMLTreeBuilder,
    capture_parse_errors,
)
from .converter import (
    ATTRIBUTES_KEY,
    TEXT_KEY,
    decode_structure,
    encode_tree,
)

__all__ = [
    "EmptyCdataGuard",
    "XMLTreeBuilder",
    "capture_parse_errors",
    "ATTRIBUTES_KEY",
    "TEXT_KEY",
    "decode_structure",
    "encode_tree",
]
