"""Input resolution for the XML loader.

A loader source is one of four explicit variants. Plain values are mapped
onto a variant by ``resolve_source``: strings and bytes whose first
non-whitespace character is ``<`` are XML, other strings and bytes are paths.
"""

import os
from dataclasses import dataclass
from typing import Any, Union

from lxml import etree

from xml_loader.shared import InvalidArgumentError, XMLIOError


@dataclass(frozen=True)
class FromText:
    """Literal XML given as already decoded text."""

    text: str

    def read(self) -> bytes:
        return self.text.strip().encode("utf-8")


@dataclass(frozen=True)
class FromBytes:
    """Literal XML given as raw bytes in any charset."""

    data: bytes

    def read(self) -> bytes:
        return self.data.strip()


@dataclass(frozen=True)
class FromPath:
    """Path of an XML file."""

    path: Union[str, "os.PathLike[str]"]

    def read(self) -> bytes:
        """Read the whole file.

        Raises:
            XMLIOError: The file cannot be opened or read
        """
        try:
            with open(self.path, "rb") as handle:
                return handle.read()
        except OSError as e:
            raise XMLIOError(os.fspath(self.path), e.strerror or str(e)) from e


@dataclass(frozen=True)
class FromTree:
    """An already parsed lxml element or element tree."""

    tree: Any

    def root(self) -> "etree._Element":
        """Return the root element.

        Raises:
            InvalidArgumentError: ``tree`` is not an lxml element or tree
        """
        root = self.tree
        if isinstance(root, etree._ElementTree):
            root = root.getroot()
        if not etree.iselement(root):
            raise InvalidArgumentError(type(self.tree))
        return root


XMLSource = Union[FromText, FromBytes, FromPath, FromTree]


def resolve_source(value: Any) -> XMLSource:
    """Map a plain value onto an explicit source variant.

    Raises:
        InvalidArgumentError: ``value`` is of an unsupported type
    """
    if isinstance(value, (FromText, FromBytes, FromPath, FromTree)):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if stripped[:1] == "<":
            return FromText(stripped)
        return FromPath(stripped)
    if isinstance(value, bytes):
        stripped = value.strip()
        if stripped[:1] == b"<":
            return FromBytes(stripped)
        return FromPath(os.fsdecode(stripped))
    if isinstance(value, os.PathLike):
        return FromPath(value)
    if isinstance(value, etree._ElementTree) or etree.iselement(value):
        return FromTree(value)
    raise InvalidArgumentError(type(value))
