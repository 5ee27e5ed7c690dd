"""Public loader API."""

from .interface import XMLLoaderInterface
from .loader import XMLLoader, load, load_file, load_string
from .source import FromBytes, FromPath, FromText, FromTree, XMLSource, resolve_source

__all__ = [
    "XMLLoaderInterface",
    "XMLLoader",
    "load",
    "load_file",
    "load_string",
    "FromBytes",
    "FromPath",
    "FromText",
    "FromTree",
    "XMLSource",
    "resolve_source",
]
