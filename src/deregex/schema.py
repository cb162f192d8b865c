"""Record introspection and construction.

Lists the fields of a target record type in declared order and builds the
record from converted values. Three record kinds are understood:

- dataclasses (frozen or not), using ``init=True`` fields
- ``typing.NamedTuple`` classes
- pydantic models, keyed by validation alias or alias when one is set

Uses field introspection only. The record classes are never modified.
"""

import dataclasses
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar, get_type_hints

from pydantic import BaseModel, RootModel
from pydantic.fields import FieldInfo

from deregex.errors import RecordError, UnsupportedShapeError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RecordField:
    """One field of a record type.

    ``key`` is the capture group name the field reads from and the keyword
    used to construct the record.
    """

    name: str
    key: str
    annotation: Any
    required: bool


def is_record(cls: Any) -> bool:
    """Return True if *cls* is a record type deregex can populate."""
    if not isinstance(cls, type):
        return False
    if issubclass(cls, RootModel):
        return False
    return dataclasses.is_dataclass(cls) or _is_namedtuple(cls) or issubclass(cls, BaseModel)


def record_fields(cls: type) -> tuple[RecordField, ...]:
    """Return the fields of *cls* in declared order.

    Raises ``UnsupportedShapeError`` if *cls* is not a record type.
    Raises ``RecordError`` if its annotations can't be resolved.
    """
    if not is_record(cls):
        msg = f"{_type_name(cls)} is not a record type; expected a dataclass, NamedTuple or pydantic model"
        raise UnsupportedShapeError(msg)

    if issubclass(cls, BaseModel):
        return tuple(
            RecordField(
                name=name,
                key=_group_name(name, info),
                annotation=pydantic_annotation(info),
                required=info.is_required(),
            )
            for name, info in cls.model_fields.items()
        )

    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        msg = f"cannot resolve annotations of {cls.__name__}: {exc}"
        raise RecordError(msg) from exc

    if dataclasses.is_dataclass(cls):
        return tuple(
            RecordField(
                name=f.name,
                key=f.name,
                annotation=hints.get(f.name, Any),
                required=(
                    f.default is dataclasses.MISSING
                    and f.default_factory is dataclasses.MISSING
                ),
            )
            for f in dataclasses.fields(cls)
            if f.init
        )

    defaults = cls._field_defaults  # type: ignore[attr-defined]
    return tuple(
        RecordField(name=name, key=name, annotation=hints.get(name, Any), required=name not in defaults)
        for name in cls._fields  # type: ignore[attr-defined]
    )


def construct(cls: type[T], values: dict[str, Any]) -> T:
    """Instantiate *cls* from a ``{field key: value}`` mapping.

    Fields left out of *values* take the class default. Whatever the class
    raises while validating its own input becomes a ``RecordError``.
    """
    try:
        if issubclass(cls, BaseModel):
            return cls.model_validate(values)
        return cls(**values)
    except (TypeError, ValueError) as exc:
        msg = f"failed to construct {cls.__name__}: {exc}"
        raise RecordError(msg) from exc


def pydantic_annotation(info: FieldInfo) -> Any:
    """Rebuild the full annotation of a pydantic field.

    Pydantic moves ``Annotated`` metadata off ``info.annotation`` into
    ``info.metadata``; width markers live there.
    """
    if info.metadata:
        return Annotated[(info.annotation, *info.metadata)]
    return info.annotation


def _is_namedtuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields") and hasattr(cls, "_field_defaults")


def _type_name(cls: Any) -> str:
    return getattr(cls, "__name__", None) or repr(cls)


def _group_name(name: str, info: FieldInfo) -> str:
    """The input key pydantic validates the field from: validation alias, alias, name."""
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name
