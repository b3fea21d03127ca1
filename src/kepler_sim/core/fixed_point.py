"""
Scaled fixed-point arithmetic for astronomical magnitudes.

A FixedPoint stores ``raw = value * PRECISION`` as a non-negative integer
bounded to INT_BITS bits. Every operation that combines two scaled values
renormalizes the scale, so callers never handle the factor by hand:

    raw(a * b) = raw(a) * raw(b) // P
    raw(a / b) = raw(a) * P // raw(b)
    raw(sqrt(a)) = isqrt(raw(a) * P)

Results are truncated toward zero. Leaving the unsigned domain (negative
results, or any raw value or intermediate product >= 2**INT_BITS) raises
OverflowError.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from kepler_sim.core.constants import INT_BITS, INT_LIMIT, PRECISION

Scalar = Union["FixedPoint", int]


def _checked(raw: int) -> int:
    if raw < 0:
        raise OverflowError(f"Fixed-point result is negative: {raw}")
    if raw >= INT_LIMIT:
        raise OverflowError(f"Fixed-point value exceeds {INT_BITS} bits.")
    return raw


@dataclass(frozen=True, order=True)
class FixedPoint:
    raw: int

    def __post_init__(self):
        _checked(self.raw)

    @classmethod
    def from_int(cls, value: int) -> FixedPoint:
        return cls(_checked(value * PRECISION))

    @classmethod
    def from_float(cls, value: float) -> FixedPoint:
        """Scale a float by PRECISION and truncate."""
        return cls(_checked(int(value * PRECISION)))

    @classmethod
    def parse(cls, text: str) -> FixedPoint:
        """Exact conversion from decimal text, e.g. ``"149598000.5"``."""
        return cls(_checked(int(Decimal(text) * PRECISION)))

    def to_float(self) -> float:
        return self.raw / PRECISION

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        return self.raw // PRECISION

    def __str__(self) -> str:
        whole, frac = divmod(self.raw, PRECISION)
        if frac == 0:
            return str(whole)
        digits = len(str(PRECISION)) - 1
        return f"{whole}.{frac:0{digits}d}".rstrip("0")

    def __add__(self, other: FixedPoint) -> FixedPoint:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return FixedPoint(_checked(self.raw + other.raw))

    def __sub__(self, other: FixedPoint) -> FixedPoint:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return FixedPoint(_checked(self.raw - other.raw))

    def __mul__(self, other: Scalar) -> FixedPoint:
        # Plain ints are unscaled counts; no renormalization needed
        if isinstance(other, int):
            return FixedPoint(_checked(self.raw * other))
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return FixedPoint(_checked(self.raw * other.raw) // PRECISION)

    __rmul__ = __mul__

    def __truediv__(self, other: Scalar) -> FixedPoint:
        if isinstance(other, int):
            return FixedPoint(self.raw // other)
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return FixedPoint(_checked(self.raw * PRECISION) // other.raw)

    def __mod__(self, other: FixedPoint) -> FixedPoint:
        if not isinstance(other, FixedPoint):
            return NotImplemented
        return FixedPoint(self.raw % other.raw)

    def __bool__(self) -> bool:
        return self.raw != 0

    def scale(self, factor: float) -> FixedPoint:
        """Multiply by a unitless float ratio (converted at PRECISION)."""
        return self * FixedPoint.from_float(factor)

    def sqrt(self) -> FixedPoint:
        """Floor square root; pre-multiplies by P to land back on a single P scale."""
        return FixedPoint(math.isqrt(_checked(self.raw * PRECISION)))


ZERO = FixedPoint(0)
ONE = FixedPoint(PRECISION)
