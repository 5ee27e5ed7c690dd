"""Exception hierarchy for XML loading.

Every failure raised by the loader derives from ``XMLLoaderError`` so callers
can catch the whole family with one ``except`` clause.
"""

from typing import List, Optional

from .result import DiagnosticEntry


class XMLLoaderError(Exception):
    """Base exception for all loader errors."""


class InvalidArgumentError(XMLLoaderError, TypeError):
    """Raised when the loader receives a source of an unsupported type."""

    def __init__(self, received_type: type) -> None:
        self.received_type = received_type
        super().__init__(
            f"Invalid XML source of type {received_type.__name__!r}, expected "
            "str, bytes, os.PathLike or an lxml element"
        )


class XMLIOError(XMLLoaderError):
    """Raised when an XML file cannot be opened or read."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason or "No such file or directory"
        super().__init__(f"Failed to read XML file {path!r}: {self.reason}")


class EncodingError(XMLLoaderError):
    """Raised when transcoding the source bytes to UTF-8 fails."""

    def __init__(
        self,
        source_charset: str,
        target_charset: str = "UTF-8",
        reason: Optional[str] = None,
    ) -> None:
        self.source_charset = source_charset
        self.target_charset = target_charset
        message = f"Failed to convert XML charset ({source_charset} => {target_charset})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidXMLError(XMLLoaderError):
    """Raised when the parser rejects the document.

    Carries the complete diagnostic list reported by the parser, not only the
    first error.
    """

    def __init__(self, diagnostics: List[DiagnosticEntry]) -> None:
        self.diagnostics = list(diagnostics)
        if self.diagnostics:
            summary = "; ".join(str(entry) for entry in self.diagnostics)
        else:
            summary = "parser reported no diagnostics"
        super().__init__(f"Invalid XML: {summary}")


class ConversionError(XMLLoaderError):
    """Raised when a parsed tree cannot be converted to plain data."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to convert XML tree to {target}: {reason}")
