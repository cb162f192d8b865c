"""Deregex: parse a line of text into a typed record with a regular expression.

Named capture groups populate the record fields of the same name; each
captured string is converted to the field's annotated type.

Basic usage::

    from dataclasses import dataclass
    from deregex import UInt16, from_str

    @dataclass(frozen=True, slots=True)
    class Endpoint:
        host: str
        port: UInt16
        secure: bool | None = None

    ep = from_str(Endpoint, "example.org:443", r"^(?P<host>[\\w.]+):(?P<port>\\d+)$")

Supported field types: ``bool``, ``int`` and the fixed-width integers,
``float``, ``Float32``, ``str``, ``X | None``, ``NewType``, single-field
records, ``RootModel[X]``, ``Enum`` and ``Literal``. Records can be
dataclasses, ``NamedTuple`` classes or pydantic models.
"""

__version__ = "0.1.0"
__all__ = [
    "DeregexError",
    "FieldConversionError",
    "Float32",
    "Float64",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntWidth",
    "MissingFieldError",
    "NoMatchError",
    "PatternCompileError",
    "RecordError",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedShapeError",
    "from_regex",
    "from_str",
]

# public name → defining module
_LAZY_IMPORTS: dict[str, str] = {
    "from_str": "deregex.api",
    "from_regex": "deregex.api",
    "DeregexError": "deregex.errors",
    "FieldConversionError": "deregex.errors",
    "MissingFieldError": "deregex.errors",
    "NoMatchError": "deregex.errors",
    "PatternCompileError": "deregex.errors",
    "RecordError": "deregex.errors",
    "UnsupportedShapeError": "deregex.errors",
    "FloatWidth": "deregex.widths",
    "IntWidth": "deregex.widths",
    "Int8": "deregex.widths",
    "Int16": "deregex.widths",
    "Int32": "deregex.widths",
    "Int64": "deregex.widths",
    "UInt8": "deregex.widths",
    "UInt16": "deregex.widths",
    "UInt32": "deregex.widths",
    "UInt64": "deregex.widths",
    "Float32": "deregex.widths",
    "Float64": "deregex.widths",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import deregex`` free of the pydantic import until a name that
    needs it is used.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
