"""Public entry points.

Usage::

    from dataclasses import dataclass
    from deregex import from_str

    @dataclass(frozen=True, slots=True)
    class Dimension:
        width: int
        height: int

    dim = from_str(Dimension, "800x600", r"^(?P<width>\\d+)x(?P<height>\\d+)$")
    assert dim == Dimension(800, 600)

Named groups must be named like the fields they populate.
"""

import re
from typing import TypeVar

from deregex.captures import extract
from deregex.errors import PatternCompileError
from deregex.records import build_record

T = TypeVar("T")


def from_str(cls: type[T], text: str, pattern: str, flags: int | re.RegexFlag = 0) -> T:
    """Parse *text* into an instance of *cls* using the pattern source *pattern*.

    *flags* are passed to ``re.compile``.

    Raises ``PatternCompileError`` if *pattern* is not a valid regex, then
    anything ``from_regex`` raises.
    """
    try:
        regex = re.compile(pattern, flags)
    except re.error as exc:
        raise PatternCompileError(pattern, exc) from exc
    return from_regex(cls, text, regex)


def from_regex(cls: type[T], text: str, regex: re.Pattern[str]) -> T:
    """Parse *text* into an instance of *cls* using a compiled pattern.

    Raises:
        NoMatchError: *text* does not match *regex*.
        FieldConversionError: a captured value doesn't parse as its field type.
        MissingFieldError: a required field has no capture.
        UnsupportedShapeError: *cls* or one of its fields can't be built
            from flat text.
        RecordError: *cls* rejected the converted values.
    """
    return build_record(cls, extract(regex, text))
