"""XML Loader.

Loads an XML document from a string, a file, or an lxml tree, normalizes its
charset to UTF-8, and converts it to plain dicts or records.

Progressive API Disclosure:
- Level 1: Simple functions - load(), load_string(), load_file()
- Level 2: Configured loader - XMLLoader class with LoaderConfig
"""

__version__ = "0.1.0"
__author__ = "XML Loader Team"

from .api import (
    FromBytes,
    FromPath,
    FromText,
    FromTree,
    XMLLoader,
    XMLLoaderInterface,
    load,
    load_file,
    load_string,
)
from .character import detect_encoding
from .shared import (
    ConversionError,
    EncodingError,
    InvalidArgumentError,
    InvalidXMLError,
    LoaderConfig,
    ParseOptions,
    XMLIOError,
    XMLLoaderError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple loading functions
    "load",
    "load_string",
    "load_file",
    "detect_encoding",

    # Level 2: Loader class and explicit sources
    "XMLLoader",
    "XMLLoaderInterface",
    "FromBytes",
    "FromPath",
    "FromText",
    "FromTree",

    # Configuration
    "LoaderConfig",
    "ParseOptions",

    # Errors
    "XMLLoaderError",
    "InvalidArgumentError",
    "XMLIOError",
    "EncodingError",
    "InvalidXMLError",
    "ConversionError",
]
