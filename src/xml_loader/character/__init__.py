"""Character encoding layer for the XML loader."""

from .encoding import (
    CANONICAL_CHARSET,
    DetectionMethod,
    EncodingResult,
    XMLDeclarationParser,
    detect_encoding,
    normalize_encoding,
    transcode,
)

__all__ = [
    "CANONICAL_CHARSET",
    "DetectionMethod",
    "EncodingResult",
    "XMLDeclarationParser",
    "detect_encoding",
    "normalize_encoding",
    "transcode",
]
