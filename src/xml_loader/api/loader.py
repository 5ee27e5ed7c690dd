"""XML loader with progressive disclosure.

Level 1 is the module functions ``load``, ``load_string`` and ``load_file``.
Level 2 is the ``XMLLoader`` class with explicit ``LoaderConfig`` control.

Loading runs resolver, encoding normalizer and parser in that order and fails
on the first error; conversion to plain data happens on demand.
"""

import os
import threading
import time
from types import SimpleNamespace
from typing import Any, Dict, Optional, Union

from lxml import etree

from xml_loader.api.interface import XMLLoaderInterface
from xml_loader.api.source import FromPath, FromText, FromTree, XMLSource, resolve_source
from xml_loader.character.encoding import (
    CANONICAL_CHARSET,
    detect_encoding,
    normalize_encoding,
)
from xml_loader.shared import (
    ConversionError,
    InvalidXMLError,
    LoaderConfig,
    LoadMetrics,
    ParseOptions,
    get_logger,
)
from xml_loader.tree.builder import EmptyCdataGuard, XMLTreeBuilder
from xml_loader.tree.converter import decode_structure, encode_tree

MS_PER_SECOND = 1000

# Codec forced on the parser once bytes are known to be UTF-8
_PARSE_ENCODING = "utf-8"


class XMLLoader(XMLLoaderInterface):
    """Loads an XML document from text, a file, or an lxml tree.

    The document is parsed immediately. When CDATA stripping is enabled,
    elements holding only an empty CDATA section convert to ``""`` rather
    than ``{}``; ``get_tree`` still returns the tree exactly as lxml parses
    the original input.

    Args:
        source: XML text, XML bytes, a file path, an lxml element, or one of
            the explicit ``FromText``/``FromBytes``/``FromPath``/``FromTree``
            variants
        charset: Source charset of byte input. ``"UTF-8"`` leaves the bytes
            untouched, ``""`` detects the charset from the XML declaration.
            Defaults to the config's charset.
        options: lxml parse options, defaults to the config's options
        config: Loader configuration
        correlation_id: Optional correlation ID for request tracking

    Raises:
        InvalidArgumentError: Unsupported source type
        XMLIOError: The file cannot be read
        EncodingError: The bytes cannot be transcoded to UTF-8
        InvalidXMLError: The parser rejected the document

    Examples:
        >>> loader = XMLLoader('<xml><a><![CDATA[]]></a><b>1</b></xml>')
        >>> loader.to_mapping()
        {'a': '', 'b': '1'}
    """

    detect_encoding = staticmethod(detect_encoding)

    def __init__(
        self,
        source: Any,
        charset: Optional[str] = None,
        options: Optional[ParseOptions] = None,
        config: Optional[LoaderConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        start_time = time.time()
        config = config or LoaderConfig()
        overrides: Dict[str, Any] = {}
        if charset is not None:
            overrides["charset"] = charset
        if options is not None:
            overrides["options"] = options
        if correlation_id is not None:
            overrides["correlation_id"] = correlation_id
        self._config = config.override(**overrides) if overrides else config

        self._logger = get_logger(__name__, self._config.correlation_id, "xml_loader")
        self._guard = EmptyCdataGuard(self._config.placeholder_prefix)
        self._builder = XMLTreeBuilder(self._config.options, self._config.correlation_id)
        self._lock = threading.Lock()
        self._raw: Optional[bytes] = None
        self._raw_tree: Optional["etree._Element"] = None
        self._charset: Optional[str] = None
        self._parse_encoding: Optional[str] = None
        self._preserve_empty_cdata = False
        self.metrics = LoadMetrics()

        resolved = resolve_source(source)
        self._logger.debug(
            "Source resolved",
            extra={"source_type": type(resolved).__name__}
        )

        if isinstance(resolved, FromTree):
            self._tree = resolved.root()
        else:
            self._tree = self._load(resolved)

        self.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self._logger.info(
            "XML document loaded",
            extra={
                "root_tag": self._tree.tag,
                "charset": self._charset,
                "bytes_read": self.metrics.bytes_read,
                "transcoded": self.metrics.transcoded,
                "processing_time_ms": self.metrics.processing_time_ms,
            }
        )

    def _load(self, source: XMLSource) -> "etree._Element":
        data = source.read()
        self.metrics.bytes_read = len(data)

        if isinstance(source, FromText):
            # Text is already decoded, UTF-8 is its only byte form
            self._charset = CANONICAL_CHARSET
            self._parse_encoding = _PARSE_ENCODING
        else:
            result = normalize_encoding(
                data,
                self._config.charset,
                self._config.fallback_encoding,
                self._config.correlation_id,
            )
            data = result.data
            self._charset = result.source_charset
            self.metrics.transcoded = result.transcoded
            if result.transcoded:
                # A transcoded document still carries its original declaration
                self._parse_encoding = _PARSE_ENCODING

        self._preserve_empty_cdata = self._config.preserve_empty_cdata
        if not self._preserve_empty_cdata:
            return self._builder.build(data, self._parse_encoding)

        protected, substitutions = self._guard.protect(data)
        if substitutions:
            # get_tree reparses the untouched bytes on first use
            self._raw = data
            self._logger.bind("empty_cdata_guard").debug(
                "Empty CDATA sections protected",
                extra={"substitutions": substitutions, "placeholder": self._guard.placeholder}
            )
        return self._builder.build(protected, self._parse_encoding)

    @property
    def config(self) -> LoaderConfig:
        return self._config

    @property
    def charset(self) -> Optional[str]:
        """Charset the source was decoded from, None for tree input."""
        return self._charset

    @property
    def placeholder(self) -> str:
        return self._guard.placeholder

    @property
    def preserve_empty_cdata(self) -> bool:
        return self._preserve_empty_cdata

    def get_tree(self) -> "etree._Element":
        """Return the root element as lxml parses the original input.

        Raises:
            ConversionError: The lazy reparse of the original bytes failed
        """
        if self._raw is None:
            return self._tree

        with self._lock:
            if self._raw_tree is None:
                try:
                    self._raw_tree = self._builder.build(self._raw, self._parse_encoding)
                except InvalidXMLError as e:
                    raise ConversionError("tree", str(e)) from e
                self.metrics.reparsed = True
            return self._raw_tree

    def to_mapping(self) -> Dict[str, Any]:
        """Convert the document to nested dicts.

        Raises:
            ConversionError: The tree cannot be converted
        """
        return self._convert(as_record=False)

    def to_record(self) -> SimpleNamespace:
        """Convert the document to nested ``SimpleNamespace`` records.

        Raises:
            ConversionError: The tree cannot be converted
        """
        return self._convert(as_record=True)

    def _convert(self, as_record: bool) -> Any:
        target = "record" if as_record else "mapping"
        text = encode_tree(self._tree, target)
        if self._preserve_empty_cdata:
            text = self._guard.restore(text)
        return decode_structure(text, as_record)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(root={self._tree.tag!r}, charset={self._charset!r}, "
            f"preserve_empty_cdata={self._preserve_empty_cdata})"
        )


def load(
    source: Any,
    charset: Optional[str] = None,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None,
) -> XMLLoader:
    """Load XML from text, bytes, a path, or an lxml tree.

    Examples:
        >>> load('<xml><item>value</item></xml>').to_mapping()
        {'item': 'value'}
    """
    return XMLLoader(source, charset, options, correlation_id=correlation_id)


def load_string(
    xml_text: str,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None,
) -> XMLLoader:
    """Load XML from a string that is always treated as XML, never as a path."""
    return XMLLoader(FromText(xml_text), options=options, correlation_id=correlation_id)


def load_file(
    file_path: Union[str, "os.PathLike[str]"],
    charset: Optional[str] = None,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None,
) -> XMLLoader:
    """Load XML from a file.

    Examples:
        >>> loader = load_file('legacy.xml', charset='')
        >>> loader.charset
        'GB2312'
    """
    return XMLLoader(FromPath(file_path), charset, options, correlation_id=correlation_id)

