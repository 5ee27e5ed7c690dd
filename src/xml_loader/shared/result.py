"""Diagnostic and metric types for XML loading.

Diagnostics carry the parser's error log in a structured form so callers of
``InvalidXMLError`` can inspect every reported problem with its position.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    WARNING = auto()    # Recoverable problems reported by the parser
    ERROR = auto()      # Errors that make the document unusable
    FATAL = auto()      # Fatal errors that abort parsing

    @classmethod
    def from_level_name(cls, level_name: str) -> "DiagnosticSeverity":
        """Map an lxml log level name onto a severity."""
        if level_name == "WARNING":
            return cls.WARNING
        if level_name == "FATAL":
            return cls.FATAL
        return cls.ERROR


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with position information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def __str__(self) -> str:
        if self.position:
            return (
                f"{self.severity.name} line {self.position.get('line', 0)}, "
                f"column {self.position.get('column', 0)}: {self.message}"
            )
        return f"{self.severity.name}: {self.message}"


@dataclass
class LoadMetrics:
    """Metrics collected while loading a single document."""

    bytes_read: int = 0
    processing_time_ms: float = 0.0
    transcoded: bool = False
    reparsed: bool = False

