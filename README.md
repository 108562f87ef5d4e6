# valid

Small validation rules that you combine into bigger ones.

`valid` checks a value against a constraint. You get back either the
validated value or a `ValidationError`. The error lists every constraint
violation that was found. Each violation has a stable error code, the name of
the field, and the actual and expected values. You can use that data to write
messages for your users.

The package has no dependencies beyond the standard library.

## Installing

```
pip install .
```

To run the test suite, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Modules

| Module              | Contents |
|---------------------|----------|
| `valid.constraints` | the built-in constraints, the `Constraint` base class and the error code constants |
| `valid.validation`  | `Validation`, `Validated` and the contexts `FieldName`, `RelatedFields` and `State` |
| `valid.values`      | `Value`, `Parameter`, `Field`, the violation types, `ValidationError` and helpers that build violations |
| `valid.properties`  | the property protocols and the functions the constraints use to read them |

## Validating a value

Every constraint has a `validate(value, context)` method. It returns a
`Validation`. Call `result()` on it to finish:

```python
from valid.constraints import CharCount

validated = CharCount.min_max(2, 16).validate("the answer is 42", "text").result()
assert validated.unwrap() == "the answer is 42"
```

For a field-level constraint the context is the field name. You can pass it
as a plain string or as a `FieldName`.

## Validating two related values

Relation constraints take a pair of values and a pair of field names. The
names can be given as a tuple or as a `RelatedFields`:

```python
from valid.constraints import MustMatch

validated = MustMatch().validate(("secret", "secret"), ("password", "repeated")).result()
assert validated.unwrap() == ("secret", "secret")
```

## When validation fails

`result()` raises a `ValidationError` if any constraint was violated.
`with_message()` does the same, and the error also carries a message that
describes what was being validated:

```python
from valid.constraints import CharCount
from valid.values import ValidationError

try:
    CharCount.min_max(2, 15).validate("the answer is 42", "text").with_message(
        "validating `text`"
    )
except ValidationError as error:
    print(error)
    # validating `text`: [ invalid-char-count-max of text which is 16, expected to be 15 ]
    print(error.violations[0].code)
    # invalid-char-count-max
```

A `ValidationError` has a `message` (or `None`) and a list of `violations`.
Each violation is one of:

- `InvalidValue`: a `code` and a `field`.
- `InvalidRelation`: a `code`, `field1` and `field2`.
- `InvalidState`: a `code` and a tuple of `params`.

A `Field` holds a `name`, an `actual` value and an `expected` value. Either
value can be `None`. Values are wrapped in `Value`, which records the
`ValueKind` (string, integer, long, float, double, boolean, decimal, date,
datetime or big integer) and prints in a readable form.

`ValidationError.merge(other)` returns a new error with the violations of
both. This error's violations come first. If both errors have a message, the
messages are joined with `" / "`.

## Composing validations

A `Validation` can be combined with others:

- `and_(other)` keeps the results of both checks. It collects the violations
  of both and pairs the successful values as `(this, other)`.
- `and_then(next_step)` calls `next_step` with the validated value, but only
  if this check succeeded.
- `combine(value)` carries along a value that needs no checking. It pairs it
  as `(value, validated)`.
- `map(convert)` turns the validated value into something else, for example
  back into your own record.
- `is_success()` tells whether no violation has been found so far.

```python
from dataclasses import dataclass

from valid.constraints import Bound, CharCount, MustMatch


@dataclass
class RegisterUser:
    username: str
    password: str
    password2: str
    age: int


def check(command: RegisterUser) -> RegisterUser:
    return (
        CharCount.min_max(4, 20).validate(command.username, "name")
        .and_(CharCount.min_max(6, 20).validate(command.password, "password"))
        .and_then(
            lambda pair: MustMatch()
            .validate((pair[1], command.password2), ("password", "password2"))
            .combine(pair[0])
        )
        .and_(Bound.closed_range(13, 199).validate(command.age, "age"))
        .map(lambda v: RegisterUser(v[0][0], v[0][1][0], v[0][1][1], v[1]))
        .with_message("validating register user command")
        .unwrap()
    )
```

## Built-in constraints

All of these are in `valid.constraints`:

| Constraint                           | Checks                                           | Error codes |
|--------------------------------------|--------------------------------------------------|-------------|
| `AssertTrue()` / `AssertFalse()`     | a checked value is true / false                  | `invalid-assert-true`, `invalid-assert-false` |
| `NotEmpty()`                         | a string or collection is not empty; `None` counts as empty | `invalid-not-empty` |
| `Length.max/min/min_max/exact`       | the length of a value; for a string, the number of UTF-8 bytes | `invalid-length-exact`, `invalid-length-min`, `invalid-length-max` |
| `CharCount.max/min/min_max/exact`    | the number of characters in a string, or in a list or tuple of single characters | `invalid-char-count-exact`, `invalid-char-count-min`, `invalid-char-count-max` |
| `Bound.closed_range/closed_open_range/open_closed_range/open_range/exact` | a value lies within limits or equals a value | `invalid-bound-exact`, `invalid-bound-closed-min`, `invalid-bound-closed-max`, `invalid-bound-open-min`, `invalid-bound-open-max` |
| `NonZero()`                          | a number is not zero                             | `invalid-non-zero` |
| `Digits(integer, fraction)`          | a decimal has at most that many integer and fraction digits; both violations can be reported together | `invalid-digits-integer`, `invalid-digits-fraction` |
| `Contains(element)`                  | a string contains a substring, a mapping a key, or a container a member | `invalid-contains-element` |
| `Pattern(regex)`                     | a string matches a regular expression somewhere (a `str` or compiled `re.Pattern`) | `invalid-pattern` |
| `MustMatch()`                        | two related values are equal                     | `invalid-must-match` |
| `MustDefineRange.INCLUSIVE/EXCLUSIVE`| the first value is at most / below the second    | `invalid-must-define-range-inclusive`, `invalid-must-define-range-exclusive` |

Each code is also available as a constant, for example
`valid.constraints.INVALID_LENGTH_MAX`.

When a constraint fails, it reports the actual and expected values as
`Value`s. Plain Python values are converted by `Value.from_python`. `bool`,
`int`, `float`, `str`, `decimal.Decimal`, `datetime.date` and
`datetime.datetime` can be converted. Other types raise `TypeError`. This
matters for `Contains`, which reports both the value and the element.

## Writing your own constraint

Subclass `Constraint` and implement `validate(self, value, context)`. Return
`Validation.success(value)` or `Validation.failure([...])`. Build the
violations with `invalid_value`, `invalid_optional_value`, `invalid_relation`
or `invalid_state` from `valid.values`.

```python
from valid.constraints import Constraint
from valid.validation import Validation
from valid.values import invalid_value


class Workday(Constraint):
    def validate(self, value, context):
        if value in ("saturday", "sunday"):
            return Validation.failure(
                [invalid_value("invalid-workday", context, value, "monday - friday")]
            )
        return Validation.success(value)


assert Workday().validate("monday", "day of release").result().unwrap() == "monday"
```

A rule that depends on application state can take a `State` as its context.
Attributes that the `State` itself does not have are looked up on the
wrapped object, and `unwrap()` returns it. Use `invalid_state(code, params)`
with `param(name, value)` to report such a violation.

## Making your own types checkable

The built-in constraints read properties of a value through the functions in
`valid.properties`:

- `is_checked_value`
- `is_empty_value`
- `length`
- `char_count`
- `is_zero_value`
- `integer_digits`
- `fraction_digits`
- `has_member`

Common built-in types are handled already: `bool`, strings, sized
collections, numbers and `decimal.Decimal`. For your own types, implement the
matching method, for example `integer_digits()` and `fraction_digits()` of
`HasDecimalDigits`. A value that does not have the property raises
`TypeError`.

## What it does not do

`valid` only validates. It does not turn error codes into user-facing or
localized messages. It does not serialize `ValidationError` to JSON or any
other format. It has no command-line interface.