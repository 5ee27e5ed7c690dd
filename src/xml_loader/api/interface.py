"""Abstract interface implemented by XML loaders."""

from abc import ABC, abstractmethod
from types import SimpleNamespace
from typing import Any, Dict

from lxml import etree


class XMLLoaderInterface(ABC):
    """Loads an XML document and exposes it as a tree or as plain data."""

    @staticmethod
    @abstractmethod
    def detect_encoding(xml: Any, fallback: str = "UTF-8") -> str:
        """Read the charset from the document's XML declaration.

        Args:
            xml: XML text or a path to an XML file
            fallback: Charset returned when no declaration is found

        Returns:
            The declared charset upper-cased, or ``fallback``
        """

    @abstractmethod
    def get_tree(self) -> "etree._Element":
        """Return the root element of the parsed document."""

    @abstractmethod
    def to_mapping(self) -> Dict[str, Any]:
        """Convert the document to nested dicts.

        Raises:
            ConversionError: The tree cannot be converted
        """

    @abstractmethod
    def to_record(self) -> SimpleNamespace:
        """Convert the document to nested ``SimpleNamespace`` records.

        Raises:
            ConversionError: The tree cannot be converted
        """
