"""Tests for input source resolution."""

from pathlib import Path

import pytest
from lxml import etree

from xml_loader.api.source import FromBytes, FromPath, FromText, FromTree, resolve_source
from xml_loader.shared import InvalidArgumentError, XMLIOError


class TestResolveSource:
    """Test discrimination of plain values."""

    def test_xml_text(self):
        source = resolve_source("  <root/>  ")

        assert source == FromText("<root/>")

    def test_text_path(self):
        source = resolve_source(" data/doc.xml ")

        assert source == FromPath("data/doc.xml")

    def test_empty_string_is_a_path(self):
        assert resolve_source("") == FromPath("")

    def test_xml_bytes(self):
        assert resolve_source(b"\n<root/>") == FromBytes(b"<root/>")

    def test_bytes_path(self):
        assert resolve_source(b"doc.xml") == FromPath("doc.xml")

    def test_path_like(self, tmp_path):
        path = tmp_path / "doc.xml"

        assert resolve_source(path) == FromPath(path)

    def test_element(self):
        element = etree.fromstring("<root/>")

        source = resolve_source(element)

        assert isinstance(source, FromTree)
        assert source.root() is element

    def test_element_tree(self):
        tree = etree.ElementTree(etree.fromstring("<root/>"))

        assert resolve_source(tree).root() is tree.getroot()

    def test_explicit_variant_passes_through(self):
        source = FromText("not starting with <")

        assert resolve_source(source) is source

    @pytest.mark.parametrize("value", [42, None, 1.5, ["<root/>"], {"a": 1}])
    def test_unsupported_types(self, value):
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_source(value)

        assert exc_info.value.received_type is type(value)
        assert type(value).__name__ in str(exc_info.value)


class TestSourceRead:
    """Test reading bytes from each variant."""

    def test_text_is_encoded_as_utf8(self):
        assert FromText(" <a>中</a> ").read() == "<a>中</a>".encode("utf-8")

    def test_bytes_are_trimmed(self):
        assert FromBytes(b"  <a/>\n").read() == b"<a/>"

    def test_path_reads_whole_file(self, tmp_path):
        path = tmp_path / "doc.xml"
        path.write_bytes(b"<a>" + b"x" * 1000 + b"</a>")

        assert FromPath(path).read() == path.read_bytes()

    def test_missing_path(self, tmp_path):
        missing = tmp_path / "missing.xml"

        with pytest.raises(XMLIOError) as exc_info:
            FromPath(str(missing)).read()

        assert exc_info.value.path == str(missing)
        assert str(missing) in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_directory_path(self, tmp_path):
        with pytest.raises(XMLIOError):
            FromPath(tmp_path).read()

    def test_tree_rejects_non_elements(self):
        with pytest.raises(InvalidArgumentError):
            FromTree("<root/>").root()
