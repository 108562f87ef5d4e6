"""Values, constraint violations and the validation error type."""

from __future__ import annotations

import datetime as _dt
import enum
import math
import struct
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional

__all__ = [
    "ValueKind",
    "Value",
    "Parameter",
    "Field",
    "ConstraintViolation",
    "InvalidValue",
    "InvalidRelation",
    "InvalidState",
    "ValidationError",
    "invalid_value",
    "invalid_optional_value",
    "invalid_relation",
    "invalid_state",
    "param",
]

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1

_NOT_AVAILABLE = "(n.a.)"


def _to_f32(number: float) -> float:
    """Round a float to single precision, saturating to infinity."""
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


def _plain_decimal(text: str) -> str:
    """Render a numeric literal without exponent and without trailing zeros."""
    rendered = format(Decimal(text), "f")
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered


def _format_non_finite(number: float) -> Optional[str]:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    return None


def _format_f32(number: float) -> str:
    special = _format_non_finite(number)
    if special is not None:
        return special
    for precision in range(1, 18):
        candidate = f"{number:.{precision}g}"
        if _to_f32(float(candidate)) == number:
            return _plain_decimal(candidate)
    return _plain_decimal(repr(number))


def _format_f64(number: float) -> str:
    special = _format_non_finite(number)
    if special is not None:
        return special
    return _plain_decimal(repr(number))


def _format_datetime(moment: _dt.datetime) -> str:
    text = moment.strftime("%Y-%m-%d %H:%M:%S")
    micros = moment.microsecond
    if micros:
        if micros % 1000 == 0:
            text += f".{micros // 1000:03d}"
        else:
            text += f".{micros:06d}"
    return text + " UTC"


def _check_range(number: int, low: int, high: int, what: str) -> int:
    if isinstance(number, bool) or not isinstance(number, int):
        raise TypeError(f"{what} value must be an int, got {type(number).__name__}")
    if not low <= number <= high:
        raise OverflowError(f"{number} is out of range for a {what} value")
    return number


class ValueKind(enum.Enum):
    """The kinds of values a :class:`Value` can hold."""

    STRING = "String"
    INTEGER = "Integer"
    LONG = "Long"
    FLOAT = "Float"
    DOUBLE = "Double"
    BOOLEAN = "Boolean"
    DECIMAL = "Decimal"
    DATE = "Date"
    DATETIME = "DateTime"
    BIG_INTEGER = "BigInteger"


@dataclass(frozen=True)
class Value:
    """A typed value carried by constraint violations and parameters."""

    kind: ValueKind
    value: Any

    @classmethod
    def string(cls, value: str) -> Value:
        return cls(ValueKind.STRING, str(value))

    @classmethod
    def integer(cls, value: int) -> Value:
        """A 32 bit signed integer value."""
        return cls(ValueKind.INTEGER, _check_range(value, _I32_MIN, _I32_MAX, "32 bit integer"))

    @classmethod
    def long(cls, value: int) -> Value:
        """A 64 bit signed integer value."""
        return cls(ValueKind.LONG, _check_range(value, _I64_MIN, _I64_MAX, "64 bit integer"))

    @classmethod
    def float(cls, value: float) -> Value:
        """A single precision float value; the number is rounded to 32 bits."""
        return cls(ValueKind.FLOAT, _to_f32(float(value)))

    @classmethod
    def double(cls, value: float) -> Value:
        """A double precision float value."""
        return cls(ValueKind.DOUBLE, float(value))

    @classmethod
    def boolean(cls, value: bool) -> Value:
        return cls(ValueKind.BOOLEAN, bool(value))

    @classmethod
    def decimal(cls, value: Any) -> Value:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, float):
            number = Decimal(repr(value))
        else:
            number = Decimal(value)
        return cls(ValueKind.DECIMAL, number)

    @classmethod
    def date(cls, value: _dt.date) -> Value:
        if isinstance(value, _dt.datetime):
            value = value.date()
        if not isinstance(value, _dt.date):
            raise TypeError(f"expected a date, got {type(value).__name__}")
        return cls(ValueKind.DATE, value)

    @classmethod
    def datetime(cls, value: _dt.datetime) -> Value:
        """A date and time converted to UTC; naive values are taken as UTC."""
        if not isinstance(value, _dt.datetime):
            raise TypeError(f"expected a datetime, got {type(value).__name__}")
        if value.tzinfo is None:
            moment = value.replace(tzinfo=_dt.timezone.utc)
        else:
            moment = value.astimezone(_dt.timezone.utc)
        return cls(ValueKind.DATETIME, moment)

    @classmethod
    def big_integer(cls, value: int) -> Value:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an int, got {type(value).__name__}")
        return cls(ValueKind.BIG_INTEGER, value)

    @classmethod
    def from_python(cls, value: Any) -> Value:
        """Convert a plain Python object into the fitting kind of value.

        Integers become ``INTEGER`` when they fit 32 bits, ``LONG`` when they
        fit 64 bits and ``BIG_INTEGER`` otherwise.
        """
        if isinstance(value, Value):
            return value
        if isinstance(value, bool):
            return cls.boolean(value)
        if isinstance(value, int):
            if _I32_MIN <= value <= _I32_MAX:
                return cls.integer(value)
            if _I64_MIN <= value <= _I64_MAX:
                return cls.long(value)
            return cls.big_integer(value)
        if isinstance(value, float):
            return cls.double(value)
        if isinstance(value, str):
            return cls.string(value)
        if isinstance(value, Decimal):
            return cls.decimal(value)
        if isinstance(value, _dt.datetime):
            return cls.datetime(value)
        if isinstance(value, _dt.date):
            return cls.date(value)
        raise TypeError(f"cannot convert {type(value).__name__} into a Value")

    @classmethod
    def from_unsigned(cls, value: int) -> Value:
        """Convert an unsigned integer of at most 64 bits.

        Values up to the 32 bit signed maximum become ``INTEGER``, larger ones
        ``LONG``; values beyond the 64 bit signed maximum are rejected.
        """
        number = _check_range(value, 0, _U64_MAX, "unsigned 64 bit integer")
        if number <= _I32_MAX:
            return cls.integer(number)
        if number <= _I64_MAX:
            return cls.long(number)
        raise OverflowError("u64 value too big to be converted to i64")

    @classmethod
    def try_from_size(cls, size: int) -> Value:
        """Convert a size or count, raising ValueError if it exceeds 64 bits."""
        if isinstance(size, bool) or not isinstance(size, int):
            raise TypeError(f"size must be an int, got {type(size).__name__}")
        if size < 0:
            raise ValueError("size must not be negative")
        if size <= _I32_MAX:
            return cls.integer(size)
        if size <= _I64_MAX:
            return cls.long(size)
        raise ValueError("usize value too big to be converted to i64")

    def __str__(self) -> str:
        kind = self.kind
        if kind is ValueKind.BOOLEAN:
            return "true" if self.value else "false"
        if kind is ValueKind.FLOAT:
            return _format_f32(self.value)
        if kind is ValueKind.DOUBLE:
            return _format_f64(self.value)
        if kind is ValueKind.DECIMAL:
            return format(self.value, "f")
        if kind is ValueKind.DATE:
            return self.value.isoformat()
        if kind is ValueKind.DATETIME:
            return _format_datetime(self.value)
        return str(self.value)


def _optional_to_string(value: Optional[Value]) -> str:
    return _NOT_AVAILABLE if value is None else str(value)


def _list_to_string(items: Iterable[Any]) -> str:
    rendered = [str(item) for item in items]
    if not rendered:
        return "[]"
    return "[ " + " / ".join(rendered) + " ]"


def _optional_value(value: Any) -> Optional[Value]:
    return None if value is None else Value.from_python(value)


@dataclass(frozen=True)
class Parameter:
    """A named value giving details about a constraint violation."""

    name: str
    value: Value

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "value", Value.from_python(self.value))

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


@dataclass(frozen=True)
class Field:
    """Name, actual value and an expected value of a validated field."""

    name: str
    actual: Optional[Value] = None
    expected: Optional[Value] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "actual", _optional_value(self.actual))
        object.__setattr__(self, "expected", _optional_value(self.expected))

    def __str__(self) -> str:
        return (
            f"field: {self.name}, actual: {_optional_to_string(self.actual)}, "
            f"expected: {_optional_to_string(self.expected)}"
        )


@dataclass(frozen=True)
class ConstraintViolation:
    """Base of the three kinds of constraint violations."""

    code: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", str(self.code))


@dataclass(frozen=True)
class InvalidValue(ConstraintViolation):
    """A violation found when validating a single field."""

    field: Field

    def __str__(self) -> str:
        return (
            f"{self.code} of {self.field.name} which is "
            f"{_optional_to_string(self.field.actual)}, expected to be "
            f"{_optional_to_string(self.field.expected)}"
        )


@dataclass(frozen=True)
class InvalidRelation(ConstraintViolation):
    """A violation found when validating a pair of related fields."""

    field1: Field
    field2: Field

    def __str__(self) -> str:
        return (
            f"{self.code} of {self.field1.name} which is "
            f"{_optional_to_string(self.field1.actual)} and {self.field2.name} "
            f"which is {_optional_to_string(self.field2.actual)}"
        )


@dataclass(frozen=True)
class InvalidState(ConstraintViolation):
    """A violation found when validating against application state."""

    params: tuple[Parameter, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "params", tuple(self.params))

    def __str__(self) -> str:
        return f"{self.code} for parameters: {_list_to_string(self.params)}"


class ValidationError(Exception):
    """Raised when validation finds constraint violations."""

    def __init__(
        self,
        message: Optional[str] = None,
        violations: Iterable[ConstraintViolation] = (),
    ) -> None:
        self.message = None if message is None else str(message)
        self.violations = list(violations)
        super().__init__(self.message, self.violations)

    def __str__(self) -> str:
        listing = _list_to_string(self.violations)
        if self.message is None:
            return listing
        return f"{self.message}: {listing}"

    def __repr__(self) -> str:
        return f"ValidationError(message={self.message!r}, violations={self.violations!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return self.message == other.message and self.violations == other.violations

    __hash__ = None  # type: ignore[assignment]

    def merge(self, other: ValidationError) -> ValidationError:
        """Return a new error holding the violations of both, this one's first.

        Messages present on both sides are joined with ``" / "``.
        """
        messages = [m for m in (self.message, other.message) if m is not None]
        message = " / ".join(messages) if messages else None
        return ValidationError(message, [*self.violations, *other.violations])


def invalid_value(
    code: str, field_name: Any, actual_value: Any, expected_value: Any
) -> ConstraintViolation:
    """Build the violation of a mandatory field's constraint."""
    return InvalidValue(
        code=code,
        field=Field(
            name=str(field_name),
            actual=Value.from_python(actual_value),
            expected=Value.from_python(expected_value),
        ),
    )


def invalid_optional_value(
    code: str, field_name: Any, actual: Optional[Any], expected: Optional[Any]
) -> ConstraintViolation:
    """Build the violation of a field's constraint where values may be absent."""
    return InvalidValue(
        code=code,
        field=Field(name=str(field_name), actual=actual, expected=expected),
    )


def invalid_relation(
    code: str,
    field_name1: Any,
    field_value1: Any,
    field_name2: Any,
    field_value2: Any,
) -> ConstraintViolation:
    """Build the violation of a constraint on two related fields."""
    return InvalidRelation(
        code=code,
        field1=Field(name=str(field_name1), actual=Value.from_python(field_value1)),
        field2=Field(name=str(field_name2), actual=Value.from_python(field_value2)),
    )


def invalid_state(code: str, params: Iterable[Parameter]) -> ConstraintViolation:
    """Build the violation of a constraint on application state."""
    return InvalidState(code=code, params=tuple(params))


def param(name: str, value: Any) -> Parameter:
    """Build a :class:`Parameter`."""
    return Parameter(name, value)