"""Field conversion: one captured string to one native value.

Dispatches on the ``Shape`` of the target field. Text is used exactly as
captured: no trimming, no locale handling. Integers and floats follow a
strict ASCII grammar rather than ``int()``/``float()`` alone, which would
also accept surrounding whitespace, underscores and non-ASCII digits.

Conversion is a pure function of the captured value and the shape.
"""

import decimal
import logging
import math
import re
import struct
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from deregex.errors import FieldConversionError, MissingFieldError, UnsupportedShapeError
from deregex.shapes import Shape, ShapeKind

logger = logging.getLogger("deregex")

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.ASCII | re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class CapturedValue:
    """The text captured by one named group."""

    name: str
    text: str

    def failure(self, shape: Shape) -> FieldConversionError:
        logger.debug("group %s: cannot convert %r to %s", self.name, self.text, shape.kind.value)
        return FieldConversionError(self.name, self.text)


def convert(value: CapturedValue, shape: Shape) -> Any:
    """Convert *value* to the native value *shape* asks for.

    Raises ``FieldConversionError`` if the text doesn't parse as the shape.
    Raises ``UnsupportedShapeError`` for shapes that need more structure
    than one string can carry.
    """
    return _CONVERTERS[shape.kind](value, shape)


def convert_missing(name: str, shape: Shape) -> None:
    """Resolve a field whose group is absent from the match.

    Only optional fields may be absent; they resolve to ``None``.
    """
    if shape.kind is ShapeKind.OPTIONAL:
        return None
    logger.debug("group %s: missing from match", name)
    raise MissingFieldError(name)


def _to_bool(value: CapturedValue, shape: Shape) -> bool:
    lowered = value.text.lower() if value.text.isascii() else ""
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise value.failure(shape)


def _to_int(value: CapturedValue, shape: Shape) -> int:
    grammar = _SIGNED if shape.kind is ShapeKind.SIGNED else _UNSIGNED
    if grammar.fullmatch(value.text) is None:
        raise value.failure(shape)
    try:
        number = int(value.text)
    except ValueError as exc:  # more digits than int() allows
        raise value.failure(shape) from exc
    if not shape.width.min <= number <= shape.width.max:
        raise value.failure(shape)
    return number


def _to_float(value: CapturedValue, shape: Shape) -> float:
    if _FLOAT.fullmatch(value.text) is None:
        raise value.failure(shape)
    number = float(value.text)
    if shape.width.bits == 32:
        return _to_single(value.text, number)
    return number


def _to_single(text: str, number: float) -> float:
    """Round *text* to the nearest single-precision value.

    *number* is *text* already rounded to a double. Narrowing it rounds a
    second time, which goes wrong only when the double lands exactly on the
    midpoint between two singles; the exact decimal then picks the side.
    Overflow gives infinity.
    """
    try:
        single = _unpack_single(struct.pack("<f", number))
    except OverflowError:
        return math.copysign(math.inf, number)
    if single == number or not math.isfinite(number):
        return single

    magnitude = abs(single)
    bits = struct.unpack("<I", struct.pack("<f", magnitude))[0]
    step = 1 if abs(number) > magnitude else -1
    neighbour = _unpack_single(struct.pack("<I", bits + step))
    midpoint = (magnitude + neighbour) / 2
    if math.isinf(neighbour) or abs(number) != midpoint:
        return single

    exact = abs(decimal.Decimal(text))
    if exact == decimal.Decimal(midpoint):
        return single  # a true tie; struct already rounded half to even
    above = exact > decimal.Decimal(midpoint)
    closer = neighbour if above == (neighbour > magnitude) else magnitude
    return math.copysign(closer, number)


def _unpack_single(packed: bytes) -> float:
    return struct.unpack("<f", packed)[0]


def _to_text(value: CapturedValue, shape: Shape) -> str:
    return value.text


def _to_optional(value: CapturedValue, shape: Shape) -> Any:
    # Empty capture means "no value"; the inner shape is never consulted.
    if value.text == "":
        return None
    return convert(value, shape.inner)


def _to_wrapper(value: CapturedValue, shape: Shape) -> Any:
    """Unwrap nested wrappers and optionals down to a leaf shape.

    The text never changes on the way down, so reaching the same wrapper
    twice means the type nests itself without end.
    """
    builders: list[Callable[[Any], Any]] = []
    seen: list[Any] = []
    result: Any = None
    while True:
        if shape.kind is ShapeKind.OPTIONAL:
            if value.text == "":
                break
            shape = shape.inner
        elif shape.kind is ShapeKind.WRAPPER:
            if shape.annotation in seen:
                msg = f"cannot convert group {value.name!r}: {shape.annotation!r} wraps itself"
                raise UnsupportedShapeError(msg)
            seen.append(shape.annotation)
            builders.append(shape.build)
            shape = shape.wrapped_shape()
        else:
            result = convert(value, shape)
            break
    for build in reversed(builders):
        result = build(result)
    return result


def _to_variant(value: CapturedValue, shape: Shape) -> Any:
    for name, variant in shape.variants:
        if name == value.text:
            return variant
    raise value.failure(shape)


def _unsupported(value: CapturedValue, shape: Shape) -> Any:
    msg = (
        f"cannot convert group {value.name!r} to {shape.annotation!r}: "
        "only flat values can be built from a single capture"
    )
    raise UnsupportedShapeError(msg)


_CONVERTERS: dict[ShapeKind, Callable[[CapturedValue, Shape], Any]] = {
    ShapeKind.BOOL: _to_bool,
    ShapeKind.UNSIGNED: _to_int,
    ShapeKind.SIGNED: _to_int,
    ShapeKind.FLOAT: _to_float,
    ShapeKind.TEXT: _to_text,
    ShapeKind.OPTIONAL: _to_optional,
    ShapeKind.WRAPPER: _to_wrapper,
    ShapeKind.ENUM: _to_variant,
    ShapeKind.UNSUPPORTED: _unsupported,
}
