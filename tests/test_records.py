"""Tests for deregex.records: building records from a capture mapping."""

import dataclasses
from dataclasses import dataclass, field
from typing import NamedTuple

import pytest

from deregex.errors import (
    FieldConversionError,
    MissingFieldError,
    RecordError,
    UnsupportedShapeError,
)
from deregex.records import build_record
from deregex.widths import Int32, UInt8


@dataclass(frozen=True, slots=True)
class Entry:
    level: str
    code: UInt8
    retries: int | None
    tag: str = "none"
    labels: tuple[str, ...] = field(default_factory=tuple)


class Coord(NamedTuple):
    x: Int32
    y: Int32
    z: Int32 = 0


@dataclass(frozen=True, slots=True)
class Ordered:
    first: int
    second: int


@dataclass(frozen=True)
class Positive:
    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            msg = "value must be positive"
            raise ValueError(msg)


@dataclass
class Derived:
    source: str
    length: int = field(init=False, default=0)


class TestDataclass:
    def test_all_fields(self) -> None:
        result = build_record(Entry, {"level": "warn", "code": "7", "retries": "3", "tag": "net"})
        assert result == Entry(level="warn", code=7, retries=3, tag="net")

    def test_missing_with_default_uses_default(self) -> None:
        result = build_record(Entry, {"level": "warn", "code": "7", "retries": "3"})
        assert result.tag == "none"
        assert result.labels == ()

    def test_missing_optional_is_none(self) -> None:
        result = build_record(Entry, {"level": "warn", "code": "7"})
        assert result.retries is None

    def test_empty_optional_is_none(self) -> None:
        result = build_record(Entry, {"level": "warn", "code": "7", "retries": ""})
        assert result.retries is None

    def test_missing_required_raises(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            build_record(Entry, {"level": "warn"})
        assert exc_info.value.name == "code"

    def test_extra_captures_ignored(self) -> None:
        result = build_record(Ordered, {"first": "1", "second": "2", "unused": "x"})
        assert result == Ordered(1, 2)

    def test_first_failure_in_field_order(self) -> None:
        with pytest.raises(FieldConversionError) as exc_info:
            build_record(Ordered, {"second": "b", "first": "a"})
        assert exc_info.value.name == "first"

    def test_init_false_fields_skipped(self) -> None:
        result = build_record(Derived, {"source": "abc", "length": "3"})
        assert result.source == "abc"
        assert result.length == 0

    def test_post_init_rejection_is_record_error(self) -> None:
        with pytest.raises(RecordError, match="value must be positive"):
            build_record(Positive, {"value": "-1"})

    def test_unresolvable_annotation(self) -> None:
        broken = dataclasses.make_dataclass("Broken", [("x", "DoesNotExist")])
        with pytest.raises(RecordError, match="cannot resolve annotations"):
            build_record(broken, {"x": "1"})

    def test_unsupported_field(self) -> None:
        @dataclass
        class Nested:
            items: list[int]

        with pytest.raises(UnsupportedShapeError):
            build_record(Nested, {"items": "1,2"})


class TestNamedTuple:
    def test_fields_and_defaults(self) -> None:
        assert build_record(Coord, {"x": "1", "y": "-2"}) == Coord(1, -2, 0)
        assert build_record(Coord, {"x": "1", "y": "-2", "z": "+3"}) == Coord(1, -2, 3)

    def test_missing_required(self) -> None:
        with pytest.raises(MissingFieldError):
            build_record(Coord, {"x": "1"})


class TestMappingTarget:
    def test_dict_of_str(self) -> None:
        assert build_record(dict, {"a": "1", "b": ""}) == {"a": "1", "b": ""}

    def test_dict_of_int(self) -> None:
        assert build_record(dict[str, int], {"a": "1", "b": "-2"}) == {"a": 1, "b": -2}

    def test_dict_value_failure(self) -> None:
        with pytest.raises(FieldConversionError) as exc_info:
            build_record(dict[str, int], {"a": "1", "b": "x"})
        assert exc_info.value.name == "b"


class TestNotARecord:
    @pytest.mark.parametrize("target", [int, str, list[int]])
    def test_raises_unsupported(self, target: object) -> None:
        with pytest.raises(UnsupportedShapeError, match="not a record type"):
            build_record(target, {"v": "1"})
