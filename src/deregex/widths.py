"""Fixed-width numeric annotations.

Python has a single ``int`` and a single ``float``. Fields that need the
range of a machine type carry a width marker through ``typing.Annotated``::

    @dataclass(frozen=True, slots=True)
    class Packet:
        port: UInt16
        ttl: UInt8
        offset: Int32
        ratio: Float32

Plain ``int`` converts as ``Int64``, plain ``float`` as ``Float64``.
"""

from dataclasses import dataclass
from typing import Annotated, TypeAlias


@dataclass(frozen=True, slots=True)
class IntWidth:
    """Bit width and signedness of an integer field."""

    bits: int
    signed: bool = True

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True, slots=True)
class FloatWidth:
    """Bit width of a float field (32 or 64)."""

    bits: int = 64


Int8: TypeAlias = Annotated[int, IntWidth(8)]
Int16: TypeAlias = Annotated[int, IntWidth(16)]
Int32: TypeAlias = Annotated[int, IntWidth(32)]
Int64: TypeAlias = Annotated[int, IntWidth(64)]

UInt8: TypeAlias = Annotated[int, IntWidth(8, signed=False)]
UInt16: TypeAlias = Annotated[int, IntWidth(16, signed=False)]
UInt32: TypeAlias = Annotated[int, IntWidth(32, signed=False)]
UInt64: TypeAlias = Annotated[int, IntWidth(64, signed=False)]

Float32: TypeAlias = Annotated[float, FloatWidth(32)]
Float64: TypeAlias = Annotated[float, FloatWidth(64)]
