"""Tests for tree to plain data conversion."""

import json
from types import SimpleNamespace

import pytest
from lxml import etree

from xml_loader.shared import ConversionError
from xml_loader.tree.converter import decode_structure, encode_tree


def _convert(xml: str):
    return json.loads(encode_tree(etree.fromstring(xml)))


class TestEncodeTree:
    """Test the intermediate JSON encoding."""

    def test_root_is_not_a_key(self):
        assert _convert("<xml><a>1</a></xml>") == {"a": "1"}

    def test_nested_elements(self):
        result = _convert("<xml><root><text>abc</text><other>123</other></root></xml>")

        assert result == {"root": {"text": "abc", "other": "123"}}

    def test_repeated_siblings_become_list(self):
        result = _convert("<xml><item>1</item><item>2</item><item>3</item><x>y</x></xml>")

        assert result == {"item": ["1", "2", "3"], "x": "y"}

    def test_repeated_composite_siblings(self):
        result = _convert("<xml><row><id>1</id></row><row><id>2</id></row></xml>")

        assert result == {"row": [{"id": "1"}, {"id": "2"}]}

    def test_key_order_follows_document(self):
        encoded = encode_tree(etree.fromstring("<xml><b>1</b><a>2</a><c>3</c></xml>"))

        assert list(json.loads(encoded)) == ["b", "a", "c"]

    def test_empty_element_becomes_empty_object(self):
        assert _convert("<xml><empty/></xml>") == {"empty": {}}

    def test_text_is_not_trimmed(self):
        assert _convert("<xml><a> padded </a></xml>") == {"a": " padded "}

    def test_mixed_content_drops_text(self):
        assert _convert("<xml><a>text<b>1</b>tail</a></xml>") == {"a": {"b": "1"}}

    def test_attributes(self):
        result = _convert('<xml id="7"><a lang="en">hello</a><b flag="1"/><c k="v"><d>1</d></c></xml>')

        assert result == {
            "@attributes": {"id": "7"},
            "a": {"@attributes": {"lang": "en"}, "0": "hello"},
            "b": {"@attributes": {"flag": "1"}},
            "c": {"@attributes": {"k": "v"}, "d": "1"},
        }

    def test_text_split_by_comment_is_joined(self):
        assert _convert("<xml><a>x<!--c-->y</a></xml>") == {"a": "xy"}

    def test_text_split_by_pi_is_joined(self):
        assert _convert("<xml><a>x<?pi data?>y<!--c-->z</a></xml>") == {"a": "xyz"}

    def test_unresolved_entity_is_substituted(self):
        parser = etree.XMLParser(resolve_entities=False)
        root = etree.fromstring(
            '<!DOCTYPE r [<!ENTITY e "E">]><r><a>x&e;y</a><b k="v">&e;</b></r>', parser
        )

        assert json.loads(encode_tree(root)) == {
            "a": "xEy",
            "b": {"": {"k": "v"}, "0": "E"},
        }

    def test_comment_only_element_is_empty(self):
        assert _convert("<xml><a><!--c--></a></xml>") == {"a": {}}

    def test_comments_and_pis_are_skipped(self):
        assert _convert("<xml><!-- c --><?pi data?><a>1</a></xml>") == {"a": "1"}

    def test_namespaces_use_local_names(self):
        result = _convert('<xml xmlns:n="urn:x"><n:a n:k="v">1</n:a></xml>')

        assert result == {"a": {"@attributes": {"k": "v"}, "0": "1"}}

    def test_text_only_root(self):
        assert _convert("<xml>abc</xml>") == {"0": "abc"}

    def test_empty_root(self):
        assert _convert("<xml/>") == {}

    def test_element_tree_is_unwrapped(self):
        tree = etree.ElementTree(etree.fromstring("<xml><a>1</a></xml>"))

        assert json.loads(encode_tree(tree)) == {"a": "1"}

    def test_non_ascii_is_kept(self):
        assert "中文" in encode_tree(etree.fromstring("<xml><a>中文</a></xml>"))


class TestDecodeStructure:
    """Test decoding of the intermediate form."""

    def test_decode_mapping(self):
        assert decode_structure('{"a": {"b": "1"}}') == {"a": {"b": "1"}}

    def test_decode_record(self):
        record = decode_structure('{"a": {"b": "1"}, "c": [{"d": "2"}]}', as_record=True)

        assert isinstance(record, SimpleNamespace)
        assert record.a.b == "1"
        assert record.c[0].d == "2"

    def test_decode_record_with_attribute_key(self):
        record = decode_structure('{"@attributes": {"id": "1"}}', as_record=True)

        assert getattr(record, "@attributes").id == "1"

    def test_malformed_mapping(self):
        with pytest.raises(ConversionError, match="mapping") as exc_info:
            decode_structure("{not json")

        assert exc_info.value.target == "mapping"

    def test_malformed_record(self):
        with pytest.raises(ConversionError) as exc_info:
            decode_structure("{not json", as_record=True)

        assert exc_info.value.target == "record"
