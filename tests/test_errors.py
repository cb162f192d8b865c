"""Tests for deregex.errors: exception hierarchy and error messages."""

import re

import pytest

from deregex.errors import (
    DeregexError,
    FieldConversionError,
    MissingFieldError,
    NoMatchError,
    PatternCompileError,
    RecordError,
    UnsupportedShapeError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [
            FieldConversionError,
            MissingFieldError,
            NoMatchError,
            PatternCompileError,
            RecordError,
            UnsupportedShapeError,
        ],
    )
    def test_direct_subclass_of_base(self, error_type: type[Exception]) -> None:
        assert error_type.__bases__ == (DeregexError,)


class TestMessages:
    def test_no_match(self) -> None:
        assert str(NoMatchError()) == "input does not match pattern"

    def test_field_conversion(self) -> None:
        err = FieldConversionError("foo", "aaa1")
        assert err.name == "foo"
        assert err.value == "aaa1"
        assert str(err) == "unable to convert value for group foo: aaa1"

    def test_missing_field(self) -> None:
        err = MissingFieldError("bar")
        assert err.name == "bar"
        assert "bar" in str(err)

    def test_pattern_compile_keeps_diagnostic(self) -> None:
        with pytest.raises(re.error) as exc_info:
            re.compile(r"(?P<foo\d*)")
        err = PatternCompileError(r"(?P<foo\d*)", exc_info.value)
        assert err.error is exc_info.value
        assert err.pattern == r"(?P<foo\d*)"
        assert str(exc_info.value) in str(err)
