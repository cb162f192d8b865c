"""Record building: the ``{group: text}`` mapping to a typed record.

Walks the fields of the target type in declared order, converting each
field's capture against the shape of its annotation. The first failure
aborts the whole record. Captures with no matching field are ignored.

Missing captures:

- field has a default → the class default applies
- field is optional (``X | None``) → ``None``
- otherwise → ``MissingFieldError``

A ``dict[str, X]`` target converts every capture against ``X``.
"""

from collections.abc import Mapping
from typing import Any, TypeVar, get_args, get_origin

from deregex.convert import CapturedValue, convert, convert_missing
from deregex.schema import construct, record_fields
from deregex.shapes import resolve_shape

T = TypeVar("T")


def build_record(cls: type[T], captures: Mapping[str, str]) -> T:
    """Build an instance of *cls* from the captures of one match."""
    value_type = _mapping_value_type(cls)
    if value_type is not None:
        shape = resolve_shape(value_type)
        return {  # type: ignore[return-value]
            name: convert(CapturedValue(name, text), shape) for name, text in captures.items()
        }

    values: dict[str, Any] = {}
    for field in record_fields(cls):
        shape = resolve_shape(field.annotation)
        text = captures.get(field.key)
        if text is not None:
            values[field.key] = convert(CapturedValue(field.key, text), shape)
        elif field.required:
            values[field.key] = convert_missing(field.key, shape)
    return construct(cls, values)


def _mapping_value_type(cls: Any) -> Any:
    """Return ``X`` for ``dict[str, X]`` / ``Mapping[str, X]``, ``str`` for bare ``dict``."""
    if cls is dict:
        return str
    if get_origin(cls) in (dict, Mapping):
        key_type, value_type = get_args(cls)
        if key_type is str:
            return value_type
    return None
