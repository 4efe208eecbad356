"""Tests for the custom exception hierarchy."""

import pytest

from sfokit.common.exceptions import (
    FileOperationError,
    FormatError,
    IndexOutOfRangeError,
    KeyNotFoundError,
    NotAFileError,
    ParseError,
    SfoError,
    SfoIOError,
    UnsupportedTypeError,
    format_exception_chain,
)


class TestBaseException:
    def test_basic_creation(self):
        exc = SfoError("test error")
        assert str(exc) == "test error"
        assert exc.message == "test error"
        assert exc.details == {}

    def test_with_details(self):
        exc = SfoError("test error", {"key": "value", "count": 42})
        assert "key=value" in str(exc)
        assert "count=42" in str(exc)


class TestFileErrors:
    def test_not_a_file(self):
        exc = NotAFileError("/some/dir")
        assert isinstance(exc, FileOperationError)
        assert exc.path == "/some/dir"
        assert "path=/some/dir" in str(exc)

    def test_io_error_offset(self):
        exc = SfoIOError("/f.sfo", "short read", offset=36)
        assert exc.offset == 36
        assert "offset=36" in str(exc)

    def test_io_error_without_offset(self):
        exc = SfoIOError("/f.sfo", "boom")
        assert "offset" not in exc.details


class TestAccessorErrors:
    def test_key_not_found_is_lookup_error(self):
        with pytest.raises(LookupError):
            raise KeyNotFoundError("TITLE")

    def test_index_error(self):
        exc = IndexOutOfRangeError(3, 3)
        assert isinstance(exc, IndexError)
        assert exc.details == {"index": 3, "length": 3}

    def test_parse_error_is_value_error(self):
        exc = ParseError("abc")
        assert isinstance(exc, ValueError)
        assert "'abc'" in str(exc)

    def test_unsupported_type_is_format_error(self):
        exc = UnsupportedTypeError(7, "KEY")
        assert isinstance(exc, FormatError)
        assert exc.data_type == 7
        assert "label=KEY" in str(exc)


class TestExceptionChainFormatting:
    def test_single_exception(self):
        assert "bad magic" in format_exception_chain(FormatError("bad magic"))

    def test_exception_chain(self):
        inner = OSError("disk gone")
        outer = SfoIOError("/f.sfo", "failed reading file")
        outer.__cause__ = inner

        formatted = format_exception_chain(outer)
        assert "failed reading file" in formatted
        assert "OSError: disk gone" in formatted
        assert " -> " in formatted

    def test_with_traceback(self):
        try:
            raise FormatError("test with traceback")
        except FormatError as e:
            formatted = format_exception_chain(e, include_traceback=True)
        assert "Traceback" in formatted
        assert "test with traceback" in formatted
