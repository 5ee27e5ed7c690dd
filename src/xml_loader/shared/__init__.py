"""Shared utilities for XML loading.

This module provides configuration objects, the exception hierarchy,
diagnostic types, and logging helpers used across all loader layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    LoaderConfig,
    ParseOptions,
)
from .errors import (
    ConversionError,
    EncodingError,
    InvalidArgumentError,
    InvalidXMLError,
    XMLIOError,
    XMLLoaderError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    LoadMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "LoaderConfig",
    "ParseOptions",
    "ConversionError",
    "EncodingError",
    "InvalidArgumentError",
    "InvalidXMLError",
    "XMLIOError",
    "XMLLoaderError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "LoadMetrics",
]
