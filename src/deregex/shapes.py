"""Type annotation to target shape resolution.

A ``Shape`` tells the field converter what kind of value a field expects.
Shapes are resolved from annotations one field at a time. Annotations that
can't be built from a single string resolve to ``UNSUPPORTED`` and only
raise once a value actually has to be converted.

Annotation → shape:

- ``bool`` → ``BOOL``
- ``int`` → ``SIGNED`` (64-bit), ``UInt8`` … ``UInt64`` / ``Int8`` … ``Int64``
  → ``UNSIGNED`` / ``SIGNED`` of that width
- ``float`` / ``Float64`` → ``FLOAT`` (64-bit), ``Float32`` → ``FLOAT`` (32-bit)
- ``str``, ``Any`` → ``TEXT``
- ``X | None`` → ``OPTIONAL``
- ``NewType``, single-field dataclass / NamedTuple / pydantic model,
  ``RootModel[X]``, ``tuple[X]`` → ``WRAPPER``
- ``Enum`` subclass, ``Literal["a", "b"]`` → ``ENUM``
- everything else → ``UNSUPPORTED``
"""

from __future__ import annotations

import enum
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import RootModel

from deregex.schema import construct, is_record, pydantic_annotation, record_fields
from deregex.widths import FloatWidth, IntWidth


class ShapeKind(enum.Enum):
    BOOL = "bool"
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    FLOAT = "float"
    TEXT = "text"
    OPTIONAL = "optional"
    WRAPPER = "wrapper"
    ENUM = "enum"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True, slots=True)
class Shape:
    """The value a field asks for.

    ``width`` is set for integer and float shapes, ``inner`` for optional
    shapes. A wrapper keeps the annotation of its wrapped value in
    ``wrapped`` and resolves it only when a value is converted, so
    self-referencing records resolve. ``build`` wraps the converted value.
    ``variants`` pairs each selectable name of an enum with its value.
    """

    kind: ShapeKind
    annotation: Any = None
    width: IntWidth | FloatWidth | None = None
    inner: Shape | None = None
    wrapped: Any = None
    build: Callable[[Any], Any] | None = None
    variants: tuple[tuple[str, Any], ...] = ()

    def wrapped_shape(self) -> Shape:
        return resolve_shape(self.wrapped)


def resolve_shape(annotation: Any) -> Shape:
    """Resolve a field annotation into the shape the converter dispatches on."""
    if annotation is bool:
        return Shape(ShapeKind.BOOL, annotation)
    if annotation is int:
        return Shape(ShapeKind.SIGNED, annotation, width=IntWidth(64))
    if annotation is float:
        return Shape(ShapeKind.FLOAT, annotation, width=FloatWidth(64))
    if annotation is str or annotation is Any:
        return Shape(ShapeKind.TEXT, annotation)

    origin = get_origin(annotation)

    if origin is Annotated:
        return _annotated_shape(annotation)

    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(args) == 2:
            return Shape(ShapeKind.OPTIONAL, annotation, inner=resolve_shape(non_none[0]))
        return Shape(ShapeKind.UNSUPPORTED, annotation)

    if origin is Literal:
        variants = tuple((arg, arg) for arg in get_args(annotation) if isinstance(arg, str))
        return Shape(ShapeKind.ENUM, annotation, variants=variants)

    if origin is tuple:
        args = get_args(annotation)
        if len(args) == 1:
            return Shape(ShapeKind.WRAPPER, annotation, wrapped=args[0], build=_one_tuple)
        return Shape(ShapeKind.UNSUPPORTED, annotation)

    if isinstance(annotation, typing.NewType):
        return Shape(ShapeKind.WRAPPER, annotation, wrapped=annotation.__supertype__, build=annotation)

    if isinstance(annotation, type):
        if issubclass(annotation, enum.Enum):
            return _enum_shape(annotation)
        if issubclass(annotation, RootModel):
            root = pydantic_annotation(annotation.model_fields["root"])
            return Shape(ShapeKind.WRAPPER, annotation, wrapped=root, build=annotation)
        if is_record(annotation):
            return _single_field_shape(annotation)

    return Shape(ShapeKind.UNSUPPORTED, annotation)


def _annotated_shape(annotation: Any) -> Shape:
    """Apply width markers from ``Annotated`` metadata; ignore the rest."""
    base, *metadata = get_args(annotation)
    shape = resolve_shape(base)
    for marker in metadata:
        if isinstance(marker, (IntWidth, FloatWidth)):
            shape = _with_width(shape, marker, annotation)
    return shape


def _with_width(shape: Shape, marker: IntWidth | FloatWidth, annotation: Any) -> Shape:
    # Annotated[int | None, IntWidth(8)] sizes the optional's inner value.
    if shape.kind is ShapeKind.OPTIONAL:
        return Shape(ShapeKind.OPTIONAL, annotation, inner=_with_width(shape.inner, marker, annotation))
    if isinstance(marker, IntWidth) and shape.kind in (ShapeKind.SIGNED, ShapeKind.UNSIGNED):
        kind = ShapeKind.SIGNED if marker.signed else ShapeKind.UNSIGNED
        return Shape(kind, annotation, width=marker)
    if isinstance(marker, FloatWidth) and shape.kind is ShapeKind.FLOAT:
        return Shape(ShapeKind.FLOAT, annotation, width=marker)
    return shape


def _enum_shape(cls: type[enum.Enum]) -> Shape:
    # Members with non-string values carry data and can't be named by a capture.
    variants = tuple((member.value, member) for member in cls if isinstance(member.value, str))
    return Shape(ShapeKind.ENUM, cls, variants=variants)


def _single_field_shape(cls: type) -> Shape:
    """A record with exactly one field wraps that field's value."""
    fields = record_fields(cls)
    if len(fields) != 1:
        return Shape(ShapeKind.UNSUPPORTED, cls)
    key = fields[0].key

    def build(value: Any) -> Any:
        return construct(cls, {key: value})

    return Shape(ShapeKind.WRAPPER, cls, wrapped=fields[0].annotation, build=build)


def _one_tuple(value: Any) -> tuple[Any]:
    return (value,)
