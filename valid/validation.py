"""The validation state, its result wrapper and the validation contexts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

from valid.values import ConstraintViolation, ValidationError

__all__ = [
    "Validated",
    "FieldName",
    "RelatedFields",
    "State",
    "Validation",
]

T = TypeVar("T")
U = TypeVar("U")
S = TypeVar("S")


class Validated(Generic[T]):
    """A value that has passed validation.

    Obtained from :meth:`Validation.result` or :meth:`Validation.with_message`.
    """

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    @property
    def value(self) -> T:
        """The validated value, without giving up the wrapper."""
        return self._value

    def unwrap(self) -> T:
        """Return the value that has been validated."""
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Validated):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Validated(_, {self._value!r})"


@dataclass(frozen=True)
class FieldName:
    """Context naming the single field being validated."""

    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.name))

    def unwrap(self) -> str:
        """Return the field name."""
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RelatedFields:
    """Context naming the two related fields being validated.

    Iterating yields both names, so ``RelatedFields(*context)`` accepts
    either a pair of names or another ``RelatedFields``.
    """

    name1: str
    name2: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name1", str(self.name1))
        object.__setattr__(self, "name2", str(self.name2))

    def unwrap(self) -> tuple[str, str]:
        """Return both field names as a pair."""
        return (self.name1, self.name2)

    def first(self) -> str:
        """Return the name of the first field."""
        return self.name1

    def second(self) -> str:
        """Return the name of the second field."""
        return self.name2

    def __iter__(self) -> Iterator[str]:
        yield self.name1
        yield self.name2


@dataclass(frozen=True)
class State(Generic[S]):
    """Context carrying application state needed by a validation.

    Attributes not found on the context are looked up on the state itself.
    """

    value: S

    def unwrap(self) -> S:
        """Return the state information."""
        return self.value

    def __getattr__(self, name: str) -> Any:
        if name == "value" or name.startswith("__"):
            raise AttributeError(name)
        return getattr(self.value, name)


class Validation(Generic[T]):
    """An ongoing validation that accumulates constraint violations.

    Build instances with :meth:`success` or :meth:`failure` and combine them
    with :meth:`and_`, :meth:`and_then`, :meth:`combine` and :meth:`map`.
    """

    __slots__ = ("_value", "_violations")

    def __init__(
        self, value: Any = None, violations: Optional[Iterable[ConstraintViolation]] = None
    ) -> None:
        self._value = value
        self._violations = None if violations is None else tuple(violations)

    @classmethod
    def success(cls, value: T) -> Validation[T]:
        """A successful validation step holding ``value``."""
        return cls(value, None)

    @classmethod
    def failure(cls, violations: Iterable[ConstraintViolation]) -> Validation[Any]:
        """A failed validation step holding the found violations."""
        return cls(None, violations)

    def is_success(self) -> bool:
        """Whether no constraint violation has been found."""
        return self._violations is None

    def result(self) -> Validated[T]:
        """Finish the validation; raise :class:`ValidationError` on failure."""
        if self._violations is None:
            return Validated(self._value)
        raise ValidationError(None, self._violations)

    def with_message(self, message: str) -> Validated[T]:
        """Finish the validation; a raised error carries ``message``."""
        if self._violations is None:
            return Validated(self._value)
        raise ValidationError(message, self._violations)

    def combine(self, value: U) -> Validation[tuple[U, T]]:
        """Pair a value needing no validation with the validated one."""
        if self._violations is None:
            return Validation.success((value, self._value))
        return Validation.failure(self._violations)

    def map(self, convert: Callable[[T], U]) -> Validation[U]:
        """Convert the validated value; failures pass through unchanged."""
        if self._violations is None:
            return Validation.success(convert(self._value))
        return Validation.failure(self._violations)

    def and_(self, other: Validation[U]) -> Validation[tuple[T, U]]:
        """Combine with another validation, accumulating violations of both."""
        if self._violations is None and other._violations is None:
            return Validation.success((self._value, other._value))
        return Validation.failure((*(self._violations or ()), *(other._violations or ())))

    def and_then(self, next_step: Callable[[T], Validation[U]]) -> Validation[U]:
        """Run ``next_step`` on the validated value only if this step succeeded."""
        if self._violations is None:
            return next_step(self._value)
        return Validation.failure(self._violations)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Validation):
            return NotImplemented
        if self._violations is None or other._violations is None:
            return (
                self._violations is None
                and other._violations is None
                and self._value == other._value
            )
        return self._violations == other._violations

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._violations is None:
            return f"Validation(Success({self._value!r}))"
        return f"Validation(Failure({list(self._violations)!r}))"