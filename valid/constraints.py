"""The built-in constraints and their error codes.

Error codes follow the convention ``invalid-<constraint>[-<variant>]``.
Field constraints take a field name (or :class:`FieldName`) as context;
relation constraints take a pair of names (or :class:`RelatedFields`) as
context and a pair of values to validate.
"""

from __future__ import annotations

import abc
import enum
import re
from dataclasses import dataclass
from typing import Any, ClassVar, NamedTuple, Optional, Union

from valid.properties import (
    char_count,
    fraction_digits,
    has_member,
    integer_digits,
    is_checked_value,
    is_empty_value,
    is_zero_value,
    length,
)
from valid.validation import FieldName, RelatedFields, Validation
from valid.values import (
    ConstraintViolation,
    Value,
    invalid_optional_value,
    invalid_relation,
    invalid_value,
)

__all__ = [
    "INVALID_ASSERT_TRUE",
    "INVALID_ASSERT_FALSE",
    "INVALID_NOT_EMPTY",
    "INVALID_LENGTH_EXACT",
    "INVALID_LENGTH_MAX",
    "INVALID_LENGTH_MIN",
    "INVALID_CHAR_COUNT_EXACT",
    "INVALID_CHAR_COUNT_MAX",
    "INVALID_CHAR_COUNT_MIN",
    "INVALID_BOUND_EXACT",
    "INVALID_BOUND_CLOSED_MAX",
    "INVALID_BOUND_CLOSED_MIN",
    "INVALID_BOUND_OPEN_MAX",
    "INVALID_BOUND_OPEN_MIN",
    "INVALID_NON_ZERO",
    "INVALID_DIGITS_INTEGER",
    "INVALID_DIGITS_FRACTION",
    "INVALID_CONTAINS_ELEMENT",
    "INVALID_MUST_MATCH",
    "INVALID_MUST_DEFINE_RANGE_INCLUSIVE",
    "INVALID_MUST_DEFINE_RANGE_EXCLUSIVE",
    "INVALID_PATTERN",
    "Constraint",
    "AssertTrue",
    "AssertFalse",
    "NotEmpty",
    "Length",
    "CharCount",
    "Bound",
    "NonZero",
    "Digits",
    "Contains",
    "MustMatch",
    "MustDefineRange",
    "Pattern",
]

INVALID_ASSERT_TRUE = "invalid-assert-true"
INVALID_ASSERT_FALSE = "invalid-assert-false"
INVALID_NOT_EMPTY = "invalid-not-empty"
INVALID_LENGTH_EXACT = "invalid-length-exact"
INVALID_LENGTH_MAX = "invalid-length-max"
INVALID_LENGTH_MIN = "invalid-length-min"
INVALID_CHAR_COUNT_EXACT = "invalid-char-count-exact"
INVALID_CHAR_COUNT_MAX = "invalid-char-count-max"
INVALID_CHAR_COUNT_MIN = "invalid-char-count-min"
INVALID_BOUND_EXACT = "invalid-bound-exact"
INVALID_BOUND_CLOSED_MAX = "invalid-bound-closed-max"
INVALID_BOUND_CLOSED_MIN = "invalid-bound-closed-min"
INVALID_BOUND_OPEN_MAX = "invalid-bound-open-max"
INVALID_BOUND_OPEN_MIN = "invalid-bound-open-min"
INVALID_NON_ZERO = "invalid-non-zero"
INVALID_DIGITS_INTEGER = "invalid-digits-integer"
INVALID_DIGITS_FRACTION = "invalid-digits-fraction"
INVALID_CONTAINS_ELEMENT = "invalid-contains-element"
INVALID_MUST_MATCH = "invalid-must-match"
INVALID_MUST_DEFINE_RANGE_INCLUSIVE = "invalid-must-define-range-inclusive"
INVALID_MUST_DEFINE_RANGE_EXCLUSIVE = "invalid-must-define-range-exclusive"
INVALID_PATTERN = "invalid-pattern"


def _field_name(context: Any) -> str:
    if isinstance(context, FieldName):
        return context.name
    return FieldName(context).name


def _related_names(context: Any) -> tuple[str, str]:
    fields = context if isinstance(context, RelatedFields) else RelatedFields(*context)
    return fields.unwrap()


def _size_value(size: int) -> Optional[Value]:
    try:
        return Value.try_from_size(size)
    except ValueError:
        return None


def _check_size(number: int, what: str) -> int:
    if isinstance(number, bool) or not isinstance(number, int):
        raise TypeError(f"{what} must be an int, got {type(number).__name__}")
    if number < 0:
        raise ValueError(f"{what} must not be negative")
    return number


class Constraint(abc.ABC):
    """A rule that values are validated against."""

    @abc.abstractmethod
    def validate(self, value: Any, context: Any) -> Validation:
        """Validate ``value`` in ``context`` and return the validation step."""


@dataclass(frozen=True)
class AssertTrue(Constraint):
    """The value must be checked (true)."""

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        if is_checked_value(value):
            return Validation.success(value)
        return Validation.failure([invalid_value(INVALID_ASSERT_TRUE, name, False, True)])


@dataclass(frozen=True)
class AssertFalse(Constraint):
    """The value must be unchecked (false)."""

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        if is_checked_value(value):
            return Validation.failure([invalid_value(INVALID_ASSERT_FALSE, name, True, False)])
        return Validation.success(value)


@dataclass(frozen=True)
class NotEmpty(Constraint):
    """The value must not be empty; ``None`` counts as empty."""

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        if is_empty_value(value):
            return Validation.failure(
                [invalid_optional_value(INVALID_NOT_EMPTY, name, None, None)]
            )
        return Validation.success(value)


class _LimitKind(enum.Enum):
    MAX = "max"
    MIN = "min"
    MIN_MAX = "min-max"
    EXACT = "exact"


class _LimitCodes(NamedTuple):
    minimum: str
    maximum: str
    exact: str


@dataclass(frozen=True)
class _SizeLimit(Constraint):
    """A limit on some measured size of a value."""

    kind: _LimitKind
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    _codes: ClassVar[_LimitCodes]

    @classmethod
    def _upper(cls, maximum: int):
        return cls(_LimitKind.MAX, maximum=_check_size(maximum, "maximum"))

    @classmethod
    def _lower(cls, minimum: int):
        return cls(_LimitKind.MIN, minimum=_check_size(minimum, "minimum"))

    @classmethod
    def _between(cls, minimum: int, maximum: int):
        return cls(
            _LimitKind.MIN_MAX,
            minimum=_check_size(minimum, "minimum"),
            maximum=_check_size(maximum, "maximum"),
        )

    @classmethod
    def _exactly(cls, exact: int):
        size = _check_size(exact, "exact size")
        return cls(_LimitKind.EXACT, minimum=size, maximum=size)

    @abc.abstractmethod
    def _measure(self, value: Any) -> int:
        """Return the size this limit applies to."""

    def _broken_limit(self, size: int) -> Optional[tuple[str, int]]:
        kind = self.kind
        if kind is _LimitKind.EXACT:
            if size != self.minimum:
                return self._codes.exact, self.minimum
            return None
        if kind in (_LimitKind.MIN, _LimitKind.MIN_MAX) and size < self.minimum:
            return self._codes.minimum, self.minimum
        if kind in (_LimitKind.MAX, _LimitKind.MIN_MAX) and size > self.maximum:
            return self._codes.maximum, self.maximum
        return None

    def _validate_size(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        size = self._measure(value)
        broken = self._broken_limit(size)
        if broken is None:
            return Validation.success(value)
        code, expected = broken
        return Validation.failure(
            [invalid_optional_value(code, name, _size_value(size), _size_value(expected))]
        )


@dataclass(frozen=True)
class Length(_SizeLimit):
    """The length of the value must be within some limits.

    The length of a string is the number of bytes of its UTF-8 encoding.
    """

    _codes: ClassVar[_LimitCodes] = _LimitCodes(
        INVALID_LENGTH_MIN, INVALID_LENGTH_MAX, INVALID_LENGTH_EXACT
    )

    @classmethod
    def max(cls, maximum: int) -> Length:
        """The length must be less than or equal to ``maximum``."""
        return cls._upper(maximum)

    @classmethod
    def min(cls, minimum: int) -> Length:
        """The length must be greater than or equal to ``minimum``."""
        return cls._lower(minimum)

    @classmethod
    def min_max(cls, minimum: int, maximum: int) -> Length:
        """The length must lie between ``minimum`` and ``maximum`` inclusive."""
        return cls._between(minimum, maximum)

    @classmethod
    def exact(cls, exact: int) -> Length:
        """The length must be exactly ``exact``."""
        return cls._exactly(exact)

    def _measure(self, value: Any) -> int:
        return length(value)

    def validate(self, value: Any, context: Any) -> Validation:
        """Validate the length of ``value`` against this limit."""
        return self._validate_size(value, context)


@dataclass(frozen=True)
class CharCount(_SizeLimit):
    """The number of characters must be within some limits."""

    _codes: ClassVar[_LimitCodes] = _LimitCodes(
        INVALID_CHAR_COUNT_MIN, INVALID_CHAR_COUNT_MAX, INVALID_CHAR_COUNT_EXACT
    )

    @classmethod
    def max(cls, maximum: int) -> CharCount:
        """The character count must be less than or equal to ``maximum``."""
        return cls._upper(maximum)

    @classmethod
    def min(cls, minimum: int) -> CharCount:
        """The character count must be greater than or equal to ``minimum``."""
        return cls._lower(minimum)

    @classmethod
    def min_max(cls, minimum: int, maximum: int) -> CharCount:
        """The character count must lie between ``minimum`` and ``maximum`` inclusive."""
        return cls._between(minimum, maximum)

    @classmethod
    def exact(cls, exact: int) -> CharCount:
        """The character count must be exactly ``exact``."""
        return cls._exactly(exact)

    def _measure(self, value: Any) -> int:
        return char_count(value)

    def validate(self, value: Any, context: Any) -> Validation:
        """Validate the character count of ``value`` against this limit."""
        return self._validate_size(value, context)


class _BoundKind(enum.Enum):
    CLOSED_RANGE = "closed"
    CLOSED_OPEN_RANGE = "closed-open"
    OPEN_CLOSED_RANGE = "open-closed"
    OPEN_RANGE = "open"
    EXACT = "exact"


_LOWER_CLOSED = frozenset({_BoundKind.CLOSED_RANGE, _BoundKind.CLOSED_OPEN_RANGE})
_UPPER_CLOSED = frozenset({_BoundKind.CLOSED_RANGE, _BoundKind.OPEN_CLOSED_RANGE})


@dataclass(frozen=True)
class Bound(Constraint):
    """The value must lie within some bounds or equal an exact value."""

    kind: _BoundKind
    minimum: Any
    maximum: Any

    @classmethod
    def closed_range(cls, minimum: Any, maximum: Any) -> Bound:
        """Minimum inclusive, maximum inclusive."""
        return cls(_BoundKind.CLOSED_RANGE, minimum, maximum)

    @classmethod
    def closed_open_range(cls, minimum: Any, maximum: Any) -> Bound:
        """Minimum inclusive, maximum exclusive."""
        return cls(_BoundKind.CLOSED_OPEN_RANGE, minimum, maximum)

    @classmethod
    def open_closed_range(cls, minimum: Any, maximum: Any) -> Bound:
        """Minimum exclusive, maximum inclusive."""
        return cls(_BoundKind.OPEN_CLOSED_RANGE, minimum, maximum)

    @classmethod
    def open_range(cls, minimum: Any, maximum: Any) -> Bound:
        """Minimum exclusive, maximum exclusive."""
        return cls(_BoundKind.OPEN_RANGE, minimum, maximum)

    @classmethod
    def exact(cls, value: Any) -> Bound:
        """The value must equal ``value``."""
        return cls(_BoundKind.EXACT, value, value)

    def _broken_bound(self, value: Any) -> Optional[tuple[str, Any]]:
        kind = self.kind
        if kind is _BoundKind.EXACT:
            if self.minimum != value:
                return INVALID_BOUND_EXACT, self.minimum
            return None
        if kind in _LOWER_CLOSED:
            if value < self.minimum:
                return INVALID_BOUND_CLOSED_MIN, self.minimum
        elif value <= self.minimum:
            return INVALID_BOUND_OPEN_MIN, self.minimum
        if kind in _UPPER_CLOSED:
            if value > self.maximum:
                return INVALID_BOUND_CLOSED_MAX, self.maximum
        elif value >= self.maximum:
            return INVALID_BOUND_OPEN_MAX, self.maximum
        return None

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        broken = self._broken_bound(value)
        if broken is None:
            return Validation.success(value)
        code, expected = broken
        return Validation.failure([invalid_value(code, name, value, expected)])


@dataclass(frozen=True)
class NonZero(Constraint):
    """The value must not be zero."""

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        if is_zero_value(value):
            return Validation.failure(
                [invalid_optional_value(INVALID_NON_ZERO, name, Value.from_python(value), None)]
            )
        return Validation.success(value)


@dataclass(frozen=True)
class Digits(Constraint):
    """Maximum numbers of integer digits and fraction digits of a decimal."""

    integer: int
    fraction: int

    def __post_init__(self) -> None:
        _check_size(self.integer, "integer digits")
        _check_size(self.fraction, "fraction digits")

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        integer = integer_digits(value)
        fraction = fraction_digits(value)
        violations: list[ConstraintViolation] = []
        if integer > self.integer:
            violations.append(
                invalid_value(
                    INVALID_DIGITS_INTEGER, name, Value.long(integer), Value.long(self.integer)
                )
            )
        if fraction > self.fraction:
            violations.append(
                invalid_value(
                    INVALID_DIGITS_FRACTION, name, Value.long(fraction), Value.long(self.fraction)
                )
            )
        if violations:
            return Validation.failure(violations)
        return Validation.success(value)


@dataclass(frozen=True)
class Contains(Constraint):
    """The value must contain ``element``.

    On failure both the value and the element are reported, so both must be
    convertible into a :class:`Value`.
    """

    element: Any

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        if has_member(value, self.element):
            return Validation.success(value)
        return Validation.failure(
            [invalid_value(INVALID_CONTAINS_ELEMENT, name, value, self.element)]
        )


@dataclass(frozen=True)
class MustMatch(Constraint):
    """The two values of a pair of related fields must be equal."""

    def validate(self, value: Any, context: Any) -> Validation:
        name1, name2 = _related_names(context)
        first, second = value
        if first == second:
            return Validation.success(value)
        return Validation.failure(
            [invalid_relation(INVALID_MUST_MATCH, name1, first, name2, second)]
        )


class MustDefineRange(enum.Enum):
    """The two values of a pair of related fields must define a range."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"

    def validate(self, value: Any, context: Any) -> Validation:
        """Validate that the first value lies below (or at) the second."""
        name1, name2 = _related_names(context)
        first, second = value
        if self is MustDefineRange.INCLUSIVE:
            compliant = first <= second
            code = INVALID_MUST_DEFINE_RANGE_INCLUSIVE
        else:
            compliant = first < second
            code = INVALID_MUST_DEFINE_RANGE_EXCLUSIVE
        if compliant:
            return Validation.success(value)
        return Validation.failure([invalid_relation(code, name1, first, name2, second)])


Constraint.register(MustDefineRange)


@dataclass(frozen=True)
class Pattern(Constraint):
    """A string value must match a regular expression somewhere."""

    pattern: re.Pattern

    def __init__(self, pattern: Union[str, re.Pattern]) -> None:
        compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
        object.__setattr__(self, "pattern", compiled)

    def validate(self, value: Any, context: Any) -> Validation:
        name = _field_name(context)
        if not isinstance(value, str):
            raise TypeError(f"a pattern can only validate strings, got {type(value).__name__}")
        if self.pattern.search(value):
            return Validation.success(value)
        return Validation.failure(
            [invalid_value(INVALID_PATTERN, name, value, self.pattern.pattern)]
        )