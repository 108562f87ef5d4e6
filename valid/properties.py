"""Property protocols and the lookups the built-in constraints rely on.

Each protocol describes one property of a value, such as its length or
whether it is empty. The module level functions read that property. A value
that implements the protocol decides for itself. Common built-in Python
types are handled directly. Any other value raises :class:`TypeError`.
"""

from __future__ import annotations

import numbers
from collections.abc import Container, Sized
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "HasCheckedValue",
    "HasEmptyValue",
    "HasLength",
    "HasCharCount",
    "HasZeroValue",
    "HasDecimalDigits",
    "HasMember",
    "is_checked_value",
    "is_empty_value",
    "length",
    "char_count",
    "is_zero_value",
    "integer_digits",
    "fraction_digits",
    "has_member",
]


@runtime_checkable
class HasCheckedValue(Protocol):
    """A value that can be "checked", like yes/no or agreed/rejected."""

    def is_checked_value(self) -> bool:
        """Return whether this value represents "checked"."""


@runtime_checkable
class HasEmptyValue(Protocol):
    """A value that can be empty, usually some kind of container."""

    def is_empty_value(self) -> bool:
        """Return whether the value is empty."""


@runtime_checkable
class HasLength(Protocol):
    """A value that has a length, usually some kind of container."""

    def length(self) -> int:
        """Return the length of the value."""


@runtime_checkable
class HasCharCount(Protocol):
    """A value made of characters that can be counted."""

    def char_count(self) -> int:
        """Return the number of characters."""


@runtime_checkable
class HasZeroValue(Protocol):
    """A value that can be zero."""

    def is_zero_value(self) -> bool:
        """Return whether this value is zero."""


@runtime_checkable
class HasDecimalDigits(Protocol):
    """A decimal number with integer and fraction digits."""

    def integer_digits(self) -> int:
        """Return the number of digits left of the decimal point."""

    def fraction_digits(self) -> int:
        """Return the number of digits right of the decimal point."""


@runtime_checkable
class HasMember(Protocol):
    """A value that contains elements or parts."""

    def has_member(self, element: Any) -> bool:
        """Return whether ``element`` is part or member of this value."""


def _unsupported(what: str, value: Any) -> TypeError:
    return TypeError(f"{type(value).__name__} has no {what} property")


def is_checked_value(value: Any) -> bool:
    """Return whether ``value`` represents "checked"."""
    if isinstance(value, HasCheckedValue):
        return bool(value.is_checked_value())
    if isinstance(value, bool):
        return value
    raise _unsupported("checked value", value)


def is_empty_value(value: Any) -> bool:
    """Return whether ``value`` is empty; ``None`` counts as empty."""
    if value is None:
        return True
    if isinstance(value, HasEmptyValue):
        return bool(value.is_empty_value())
    if isinstance(value, Sized):
        return len(value) == 0
    raise _unsupported("empty value", value)


def length(value: Any) -> int:
    """Return the length of ``value``.

    The length of a ``str`` is the number of bytes of its UTF-8 encoding; use
    :func:`char_count` to count characters.
    """
    if isinstance(value, HasLength):
        return int(value.length())
    if isinstance(value, str):
        return len(value.encode("utf-8"))
    if isinstance(value, Sized):
        return len(value)
    raise _unsupported("length", value)


def char_count(value: Any) -> int:
    """Return the number of characters of a string or a sequence of characters."""
    if isinstance(value, HasCharCount):
        return int(value.char_count())
    if isinstance(value, str):
        return len(value)
    if isinstance(value, (list, tuple)):
        if all(isinstance(item, str) and len(item) == 1 for item in value):
            return len(value)
        raise TypeError("a sequence must hold single characters to count them")
    raise _unsupported("character count", value)


def is_zero_value(value: Any) -> bool:
    """Return whether the number ``value`` is zero."""
    if isinstance(value, HasZeroValue):
        return bool(value.is_zero_value())
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        return value == 0
    raise _unsupported("zero value", value)


def _coefficient_and_scale(value: Decimal) -> tuple[int, int]:
    if not value.is_finite():
        raise ValueError(f"{value} has no decimal digits")
    sign_digits = value.as_tuple()
    return len(sign_digits.digits), -int(sign_digits.exponent)


def integer_digits(value: Any) -> int:
    """Return the number of digits left of the decimal point."""
    if isinstance(value, HasDecimalDigits):
        return int(value.integer_digits())
    if isinstance(value, Decimal):
        num_digits, scale = _coefficient_and_scale(value)
        if scale > 0:
            return max(num_digits - scale, 0)
        return num_digits - scale
    raise _unsupported("decimal digits", value)


def fraction_digits(value: Any) -> int:
    """Return the number of digits right of the decimal point."""
    if isinstance(value, HasDecimalDigits):
        return int(value.fraction_digits())
    if isinstance(value, Decimal):
        _, scale = _coefficient_and_scale(value)
        return scale if scale > 0 else 0
    raise _unsupported("decimal digits", value)


def has_member(container: Any, element: Any) -> bool:
    """Return whether ``element`` is part of ``container``.

    A string contains its substrings, a mapping its keys and any other
    container its members.
    """
    if isinstance(container, HasMember):
        return bool(container.has_member(element))
    if isinstance(container, str):
        if not isinstance(element, str):
            raise TypeError("a string can only contain strings")
        return element in container
    if isinstance(container, Container):
        return element in container
    raise _unsupported("member", container)