"""Tree building on top of lxml.

Parsing always runs inside ``capture_parse_errors`` so every error lxml logs
for a rejected document ends up in ``InvalidXMLError.diagnostics`` and the
global error log is left clean on every exit path.
"""

import re
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from lxml import etree

from xml_loader.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    InvalidXMLError,
    ParseOptions,
    get_logger,
)
from xml_loader.shared.config import DEFAULT_PLACEHOLDER_PREFIX

_COMPONENT = "tree_builder"


def _diagnostics_from_log(
    error_log: "etree._ListErrorLog", correlation_id: Optional[str]
) -> List[DiagnosticEntry]:
    diagnostics = []
    for entry in error_log:
        diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.from_level_name(entry.level_name),
                message=(entry.message or "").strip() or entry.type_name,
                component=_COMPONENT,
                position={"line": entry.line, "column": entry.column},
                details={"domain": entry.domain_name, "type": entry.type_name},
                correlation_id=correlation_id,
            )
        )
    return diagnostics


@contextmanager
def capture_parse_errors(
    correlation_id: Optional[str] = None,
) -> Iterator[List[DiagnosticEntry]]:
    """Collect parser diagnostics for the enclosed parse.

    Yields the list that receives the diagnostics. An ``XMLSyntaxError``
    raised inside the block is converted to ``InvalidXMLError``.
    """
    diagnostics: List[DiagnosticEntry] = []
    etree.clear_error_log()
    try:
        yield diagnostics
    except etree.XMLSyntaxError as e:
        diagnostics.extend(_diagnostics_from_log(e.error_log, correlation_id))
        if not diagnostics:
            line, column = e.position
            diagnostics.append(
                DiagnosticEntry(
                    severity=DiagnosticSeverity.FATAL,
                    message=str(e) or "XML syntax error",
                    component=_COMPONENT,
                    position={"line": line, "column": column},
                    correlation_id=correlation_id,
                )
            )
        raise InvalidXMLError(diagnostics) from e
    finally:
        etree.clear_error_log()


class EmptyCdataGuard:
    """Protects elements whose only content is an empty CDATA section.

    With CDATA stripping enabled lxml turns ``<a><![CDATA[]]></a>`` into an
    element without text, which converts to an empty object instead of an
    empty string. The guard writes a placeholder into such sections before
    parsing and removes it again from the converted output.
    """

    EMPTY_CDATA_PATTERN = re.compile(rb">\s*<!\[CDATA\[\s*\]\]>\s*<")

    def __init__(
        self,
        prefix: str = DEFAULT_PLACEHOLDER_PREFIX,
        timestamp_ms: Optional[int] = None,
    ) -> None:
        # Millisecond timestamp keeps the placeholder apart from document text
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        self.placeholder = f"{prefix}{timestamp_ms}"
        self._replacement = b"><![CDATA[" + self.placeholder.encode("utf-8") + b"]]><"

    def protect(self, data: bytes) -> Tuple[bytes, int]:
        """Fill empty CDATA-only elements with the placeholder.

        Returns:
            The rewritten bytes and the number of substitutions made
        """
        return self.EMPTY_CDATA_PATTERN.subn(self._replacement, data)

    def restore(self, text: str) -> str:
        """Remove every placeholder occurrence from converted output."""
        return text.replace(self.placeholder, "")


class XMLTreeBuilder:
    """Parses document bytes into an lxml element tree."""

    def __init__(
        self,
        options: Optional[ParseOptions] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.options = options or ParseOptions()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, _COMPONENT)

    def _make_parser(self, encoding: Optional[str]) -> etree.XMLParser:
        return etree.XMLParser(encoding=encoding, **self.options.to_parser_kwargs())

    def build(self, data: bytes, encoding: Optional[str] = None) -> etree._Element:
        """Parse ``data`` and return the root element.

        Args:
            data: Document bytes
            encoding: Charset that overrides the XML declaration. None lets
                lxml decode the bytes by their declaration.

        Raises:
            InvalidXMLError: The parser rejected the document
        """
        parser = self._make_parser(encoding)
        with capture_parse_errors(self.correlation_id) as diagnostics:
            root = etree.fromstring(data, parser)
            if root is None:
                # Recovering parsers return None instead of raising
                diagnostics.extend(
                    _diagnostics_from_log(parser.error_log, self.correlation_id)
                )

        if root is None:
            self.logger.error(
                "Parser produced no document",
                extra={"diagnostic_count": len(diagnostics)}
            )
            raise InvalidXMLError(diagnostics)

        self.logger.debug(
            "Tree built",
            extra={
                "root_tag": root.tag,
                "size": len(data),
                "recovered_errors": len(parser.error_log),
            }
        )
        return root
