"""Encoding detection and normalization for XML sources.

Detection reads the ``encoding`` pseudo-attribute of the XML declaration and
never fails: anything it cannot read or match yields the fallback charset.
Normalization transcodes raw document bytes to UTF-8 before parsing.
"""

import codecs
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from xml_loader.shared import EncodingError, get_logger
from xml_loader.shared.config import DEFAULT_CHARSET, DEFAULT_DETECTION_PEEK_BYTES

CANONICAL_CHARSET = "UTF-8"

# Codec name used for the transcoding target
_TARGET_CODEC = "utf-8"

# In-memory bytes are only scanned this far for a declaration
_DECLARATION_SCAN_LIMIT = 1024

DetectionInput = Union[str, bytes, "os.PathLike[str]"]


class DetectionMethod(Enum):
    """How the source charset of a document was determined."""
    EXPLICIT = "explicit"
    XML_DECLARATION = "xml_declaration"
    FALLBACK = "fallback"


@dataclass
class EncodingResult:
    """Outcome of encoding normalization.

    Attributes:
        data: Document bytes in UTF-8
        source_charset: Charset the bytes were decoded from
        method: How ``source_charset`` was chosen
        transcoded: False when the bytes passed through untouched
    """
    data: bytes
    source_charset: str
    method: DetectionMethod
    transcoded: bool


class XMLDeclarationParser:
    """Parser for XML encoding declarations."""

    # Anchored at the very start of the document, single match
    XML_DECLARATION_PATTERN = re.compile(
        r"""^<\?xml[^>]+encoding\s*=\s*["']([^"']*)""",
        re.IGNORECASE
    )

    def parse_declaration(self, text: str) -> Optional[str]:
        """Return the declared encoding upper-cased, or None when absent."""
        match = self.XML_DECLARATION_PATTERN.match(text)
        if match is None:
            return None
        return match.group(1).upper()


_declaration_parser = XMLDeclarationParser()


def _peek_file(path: Union[str, "os.PathLike[str]"], size: int) -> bytes:
    with open(path, "rb") as handle:
        return handle.read(size)


def detect_encoding(
    xml: Any,
    fallback: str = DEFAULT_CHARSET,
    peek_bytes: int = DEFAULT_DETECTION_PEEK_BYTES,
    correlation_id: Optional[str] = None,
) -> str:
    """Detect the charset declared by an XML document.

    Args:
        xml: XML text, XML bytes, or a path to an XML file
        fallback: Charset returned when no declaration can be found
        peek_bytes: How many bytes of a file to inspect
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The declared charset upper-cased, or ``fallback``

    Examples:
        >>> detect_encoding('<?xml version="1.0" encoding="gb2312"?><root/>')
        'GB2312'
        >>> detect_encoding('<root></root>', 'GB2312')
        'GB2312'
    """
    logger = get_logger(__name__, correlation_id, "encoding_detector")

    if isinstance(xml, os.PathLike):
        path: Optional[Union[str, "os.PathLike[str]"]] = xml
        text = ""
    elif isinstance(xml, bytes):
        stripped = xml.strip()
        if not stripped:
            return fallback
        if stripped[:1] == b"<":
            head = stripped[:_DECLARATION_SCAN_LIMIT].decode("latin-1")
            return _declaration_parser.parse_declaration(head) or fallback
        path = os.fsdecode(stripped)
        text = ""
    elif isinstance(xml, str):
        text = xml.strip()
        if not text:
            return fallback
        path = None if text[0] == "<" else text
    else:
        return fallback

    if path is not None:
        try:
            # Declaration names are ASCII, latin-1 keeps every byte intact
            text = _peek_file(path, peek_bytes).decode("latin-1")
        except (OSError, ValueError) as e:
            logger.warning(
                "Could not peek at XML file, using fallback charset",
                extra={"path": os.fspath(path), "error": str(e), "fallback": fallback}
            )
            return fallback

    declared = _declaration_parser.parse_declaration(text)
    logger.debug(
        "Encoding detection completed",
        extra={"declared": declared, "fallback": fallback}
    )
    return declared or fallback


def _declared_in_bytes(data: bytes) -> Optional[str]:
    head = data.lstrip()
    if head.startswith(codecs.BOM_UTF8):
        head = head[len(codecs.BOM_UTF8):].lstrip()
    return _declaration_parser.parse_declaration(
        head[:_DECLARATION_SCAN_LIMIT].decode("latin-1")
    )


def transcode(data: bytes, source_charset: str) -> bytes:
    """Transcode ``data`` from ``source_charset`` to UTF-8.

    Raises:
        EncodingError: The charset is unknown or the bytes are malformed for it
    """
    try:
        return data.decode(source_charset).encode(_TARGET_CODEC)
    except LookupError as e:
        raise EncodingError(source_charset, CANONICAL_CHARSET, f"unknown charset: {e}") from e
    except UnicodeError as e:
        raise EncodingError(source_charset, CANONICAL_CHARSET, str(e)) from e


def normalize_encoding(
    data: bytes,
    charset: Optional[str] = DEFAULT_CHARSET,
    fallback: str = DEFAULT_CHARSET,
    correlation_id: Optional[str] = None,
) -> EncodingResult:
    """Convert raw document bytes to UTF-8.

    A requested charset of exactly ``"UTF-8"`` passes the bytes through
    without touching them. An empty charset triggers detection from the XML
    declaration. Any other charset is used as the transcoding source.

    Args:
        data: Raw document bytes
        charset: Requested source charset
        fallback: Charset used when detection finds no declaration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        EncodingResult with the UTF-8 bytes

    Raises:
        EncodingError: Transcoding is not possible
    """
    logger = get_logger(__name__, correlation_id, "encoding_normalizer")
    requested = (charset or "").strip()

    if requested == CANONICAL_CHARSET:
        return EncodingResult(data, CANONICAL_CHARSET, DetectionMethod.EXPLICIT, False)

    if requested:
        source, method = requested, DetectionMethod.EXPLICIT
    else:
        # Document content is never handed to the path-aware detector
        declared = _declared_in_bytes(data)
        if declared:
            source, method = declared, DetectionMethod.XML_DECLARATION
        else:
            source, method = fallback, DetectionMethod.FALLBACK

    logger.debug(
        "Transcoding document",
        extra={"source_charset": source, "method": method.value, "size": len(data)}
    )
    return EncodingResult(transcode(data, source), source, method, True)
