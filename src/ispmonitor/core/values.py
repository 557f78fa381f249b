"""Tagged-union measurement values.

A Value holds exactly one of five primitive representations and converts
between them on a best-effort basis. Every accessor is total: conversions
that make no sense (a string read as a number, say) return a zero value
instead of raising, so callers must not rely on them for anything
correctness-critical.
"""

import math
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1

NANOSECONDS_PER_MICROSECOND = 1_000
NANOSECONDS_PER_MILLISECOND = 1_000_000


class ValueKind(Enum):
    """Discriminant of a Value."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    DURATION = "duration"


def _wrap_int64(value: int) -> int:
    """Reinterpret an unsigned 64-bit integer as signed two's complement."""
    return value - 2**64 if value > _INT64_MAX else value


def _truncate_float(value: float) -> int:
    """Truncate toward zero, mapping NaN and infinities to 0."""
    if math.isnan(value) or math.isinf(value):
        return 0
    truncated = int(value)
    if _INT64_MIN <= truncated <= _INT64_MAX:
        return truncated
    # out of range: keep the low 64 bits
    return _wrap_int64(truncated & _UINT64_MAX)


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


def _check_int_range(value: int, low: int, high: int, kind: ValueKind) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{kind.value} value must be an int, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"{kind.value} value {value} out of range [{low}, {high}]")


def _timedelta_to_nanoseconds(value: timedelta) -> int:
    return (
        (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    ) * NANOSECONDS_PER_MICROSECOND


@dataclass(frozen=True)
class Value:
    """An immutable measurement value.

    Build instances with the ``from_*`` constructors; the dataclass fields are
    an implementation detail. Durations are stored as signed 64-bit
    nanosecond ticks.

    Attributes:
        kind: Which representation is populated.
        raw: The native payload (str, int or float).
    """

    kind: ValueKind
    raw: str | int | float

    @classmethod
    def from_string(cls, value: str) -> "Value":
        """Hold a string."""
        if not isinstance(value, str):
            raise TypeError(f"string value must be a str, got {type(value).__name__}")
        return cls(ValueKind.STRING, value)

    @classmethod
    def from_int(cls, value: int) -> "Value":
        """Hold a signed 64-bit integer."""
        _check_int_range(value, _INT64_MIN, _INT64_MAX, ValueKind.INT)
        return cls(ValueKind.INT, value)

    @classmethod
    def from_uint(cls, value: int) -> "Value":
        """Hold an unsigned 64-bit integer."""
        _check_int_range(value, 0, _UINT64_MAX, ValueKind.UINT)
        return cls(ValueKind.UINT, value)

    @classmethod
    def from_float(cls, value: float) -> "Value":
        """Hold a 64-bit float. Ints are accepted and widened."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"float value must be a float, got {type(value).__name__}")
        return cls(ValueKind.FLOAT, float(value))

    @classmethod
    def from_duration(cls, value: timedelta | int) -> "Value":
        """Hold a duration.

        Args:
            value: A ``timedelta``, or an int interpreted as nanoseconds.
        """
        if isinstance(value, timedelta):
            value = _timedelta_to_nanoseconds(value)
        _check_int_range(value, _INT64_MIN, _INT64_MAX, ValueKind.DURATION)
        return cls(ValueKind.DURATION, value)

    def as_string(self) -> str:
        """Return the value as text.

        Floats use six decimals; durations render as whole milliseconds
        followed by ``" ms"``.
        """
        if self.kind is ValueKind.STRING:
            return str(self.raw)
        if self.kind is ValueKind.FLOAT:
            return f"{self.raw:f}"
        if self.kind is ValueKind.DURATION:
            millis = _truncating_div(int(self.raw), NANOSECONDS_PER_MILLISECOND)
            return f"{millis} ms"
        return str(self.raw)

    def as_float(self) -> float:
        """Return the value as a float; strings read as 0.0."""
        if self.kind is ValueKind.STRING:
            return 0.0
        return float(self.raw)

    def as_int(self) -> int:
        """Return the value as a signed 64-bit int.

        Unsigned values wrap, floats truncate toward zero, strings read as 0.
        """
        if self.kind is ValueKind.STRING:
            return 0
        if self.kind is ValueKind.FLOAT:
            return _truncate_float(float(self.raw))
        if self.kind is ValueKind.UINT:
            return _wrap_int64(int(self.raw))
        return int(self.raw)

    def as_nanoseconds(self) -> int:
        """Return the value as a duration tick count (nanoseconds)."""
        # numeric variants are reinterpreted as ticks, same as as_int
        return self.as_int()

    def as_duration(self) -> timedelta:
        """Return the value as a ``timedelta``.

        Numeric variants are reinterpreted as nanosecond ticks. Precision
        below one microsecond is truncated. Strings read as zero.
        """
        micros = _truncating_div(self.as_nanoseconds(), NANOSECONDS_PER_MICROSECOND)
        return timedelta(microseconds=micros)

    def __str__(self) -> str:
        return self.as_string()
