"""Tests for the loader exception hierarchy."""

import pytest

from xml_loader.shared import (
    ConversionError,
    DiagnosticEntry,
    DiagnosticSeverity,
    EncodingError,
    InvalidArgumentError,
    InvalidXMLError,
    XMLIOError,
    XMLLoaderError,
)


class TestErrorHierarchy:
    """Test that every error belongs to the loader family."""

    @pytest.mark.parametrize("error", [
        InvalidArgumentError(int),
        XMLIOError("missing.xml"),
        EncodingError("GB2312"),
        InvalidXMLError([]),
        ConversionError("mapping", "boom"),
    ])
    def test_all_errors_derive_from_base(self, error):
        assert isinstance(error, XMLLoaderError)

    def test_invalid_argument_is_type_error(self):
        error = InvalidArgumentError(int)

        assert isinstance(error, TypeError)
        assert error.received_type is int
        assert "'int'" in str(error)


class TestErrorMessages:
    """Test that error messages carry their context."""

    def test_io_error_names_path(self):
        error = XMLIOError("/tmp/missing.xml")

        assert error.path == "/tmp/missing.xml"
        assert "/tmp/missing.xml" in str(error)
        assert "No such file or directory" in str(error)

    def test_encoding_error_names_charset_pair(self):
        error = EncodingError("BIG5", reason="illegal multibyte sequence")

        assert error.source_charset == "BIG5"
        assert error.target_charset == "UTF-8"
        assert "BIG5 => UTF-8" in str(error)
        assert "illegal multibyte sequence" in str(error)

    def test_invalid_xml_keeps_all_diagnostics(self):
        diagnostics = [
            DiagnosticEntry(DiagnosticSeverity.ERROR, "first", "tree_builder",
                            position={"line": 1, "column": 5}),
            DiagnosticEntry(DiagnosticSeverity.FATAL, "second", "tree_builder",
                            position={"line": 1, "column": 9}),
        ]

        error = InvalidXMLError(diagnostics)

        assert error.diagnostics == diagnostics
        assert "first" in str(error)
        assert "second" in str(error)
        assert "line 1, column 9" in str(error)


class TestDiagnosticEntry:
    """Test DiagnosticEntry validation."""

    def test_empty_message_rejected(self):
        with pytest.raises(ValueError, match="Diagnostic message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.ERROR, "", "tree_builder")

    def test_severity_from_level_name(self):
        assert DiagnosticSeverity.from_level_name("WARNING") is DiagnosticSeverity.WARNING
        assert DiagnosticSeverity.from_level_name("FATAL") is DiagnosticSeverity.FATAL
        assert DiagnosticSeverity.from_level_name("ERROR") is DiagnosticSeverity.ERROR
