"""Deregex exception hierarchy.

Every error raised while turning a line of text into a record derives
directly from ``DeregexError``, so one ``except`` clause covers a whole call.
"""

import re


class DeregexError(Exception):
    """Base for all deregex errors."""


class PatternCompileError(DeregexError):
    """Raised when the pattern source is not a valid regular expression."""

    def __init__(self, pattern: str, error: re.error) -> None:
        self.pattern = pattern
        self.error = error
        super().__init__(f"invalid pattern {pattern!r}: {error}")


class NoMatchError(DeregexError):
    """Raised when the input does not match the pattern."""

    def __init__(self) -> None:
        super().__init__("input does not match pattern")


class FieldConversionError(DeregexError):
    """Raised when a captured value can't be converted to its field type.

    ``name`` is the capture group, ``value`` the offending text.
    """

    def __init__(self, name: str, value: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"unable to convert value for group {name}: {value}")


class MissingFieldError(DeregexError):
    """Raised when a required field has no capture group in the match."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"missing field {name!r}")


class UnsupportedShapeError(DeregexError):
    """Raised when a type can't be built from a single flat string."""


class RecordError(DeregexError):
    """Raised when the record type itself rejects the converted values."""
