import datetime
import re
from decimal import Decimal

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from valid.constraints import (
    AssertFalse,
    AssertTrue,
    Bound,
    CharCount,
    Contains,
    Digits,
    Length,
    MustDefineRange,
    MustMatch,
    NonZero,
    NotEmpty,
    Pattern,
)
from valid.validation import FieldName, RelatedFields
from valid.values import Field, InvalidRelation, InvalidValue, ValidationError, Value

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

EMAIL_PATTERN = r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$"


def error_of(validation):
    with pytest.raises(ValidationError) as info:
        validation.result()
    return info.value


def field_error(code, name, actual, expected):
    return ValidationError(None, [InvalidValue(code=code, field=Field(name, actual, expected))])


def relation_error(code, name1, actual1, name2, actual2):
    return ValidationError(
        None,
        [InvalidRelation(code=code, field1=Field(name1, actual1), field2=Field(name2, actual2))],
    )


# assert true / false


def test_assert_true_on_true():
    assert AssertTrue().validate(True, "agreed").result().unwrap() is True


def test_assert_true_on_false():
    assert error_of(AssertTrue().validate(False, "agreed")) == field_error(
        "invalid-assert-true", "agreed", Value.boolean(False), Value.boolean(True)
    )


def test_assert_false_on_false():
    assert AssertFalse().validate(False, "unchecked").result().unwrap() is False


def test_assert_false_on_true():
    assert error_of(AssertFalse().validate(True, "unchecked")) == field_error(
        "invalid-assert-false", "unchecked", Value.boolean(True), Value.boolean(False)
    )


def test_assert_true_on_unsupported_value_raises():
    with pytest.raises(TypeError):
        AssertTrue().validate("yes", "agreed")


# not empty


@pytest.mark.parametrize(
    "value, name",
    [
        ("", "text_field"),
        ([], "collection"),
        (set(), "collection"),
        ({}, "collection"),
        (None, "optional_text"),
    ],
)
def test_not_empty_on_empty_values(value, name):
    assert error_of(NotEmpty().validate(value, name)) == field_error(
        "invalid-not-empty", name, None, None
    )


@given(st.text(min_size=1, max_size=100))
def test_not_empty_on_non_empty_string(text):
    assert NotEmpty().validate(text, "text_field").result().unwrap() == text


@given(st.lists(st.integers(0, 65535), min_size=1, max_size=100))
def test_not_empty_on_non_empty_list(items):
    assert NotEmpty().validate(items, "collection").result().unwrap() == items


@given(st.sets(st.integers(0, 65535), min_size=1, max_size=100))
def test_not_empty_on_non_empty_set(items):
    assert NotEmpty().validate(items, "collection").result().unwrap() == items


@given(st.dictionaries(st.integers(0, 65535), st.integers(I64_MIN, I64_MAX), min_size=1, max_size=100))
def test_not_empty_on_non_empty_dict(items):
    assert NotEmpty().validate(items, "collection").result().unwrap() == items


def test_not_empty_accepts_field_name_context():
    assert error_of(NotEmpty().validate("", FieldName("text_field"))) == field_error(
        "invalid-not-empty", "text_field", None, None
    )


# length


@given(st.integers(0, 1000))
def test_exact_length_on_list_of_correct_length(target_len):
    items = [1] * target_len
    assert Length.exact(target_len).validate(items, "text_field").result().unwrap() == items


@given(st.integers(0, I32_MAX), st.integers(0, 1000))
def test_exact_length_on_list_of_different_length(target_len, input_len):
    assume(target_len != input_len)
    error = error_of(Length.exact(target_len).validate([1] * input_len, "text_field"))
    assert error == field_error(
        "invalid-length-exact", "text_field", Value.integer(input_len), Value.integer(target_len)
    )


@given(st.data())
def test_max_length_on_list_of_valid_length(data):
    max_len = data.draw(st.integers(0, 1000))
    input_len = data.draw(st.integers(0, max_len))
    items = [1] * input_len
    assert Length.max(max_len).validate(items, "text_field").result().unwrap() == items


@given(st.data())
def test_max_length_on_list_of_invalid_length(data):
    max_len = data.draw(st.integers(0, 1000))
    input_len = data.draw(st.integers(max_len + 1, max_len + 100))
    error = error_of(Length.max(max_len).validate([1] * input_len, "text_field"))
    assert error == field_error(
        "invalid-length-max", "text_field", Value.integer(input_len), Value.integer(max_len)
    )


@given(st.data())
def test_min_length_on_list_of_valid_length(data):
    min_len = data.draw(st.integers(0, 1000))
    input_len = data.draw(st.integers(min_len, min_len + 100))
    items = [1] * input_len
    assert Length.min(min_len).validate(items, "text_field").result().unwrap() == items


@given(st.data())
def test_min_length_on_list_of_invalid_length(data):
    min_len = data.draw(st.integers(1, 1000))
    input_len = data.draw(st.integers(0, min_len - 1))
    error = error_of(Length.min(min_len).validate([1] * input_len, "text_field"))
    assert error == field_error(
        "invalid-length-min", "text_field", Value.integer(input_len), Value.integer(min_len)
    )


@given(st.data())
def test_min_max_length_on_list_of_valid_length(data):
    min_len = data.draw(st.integers(0, 100))
    max_len = data.draw(st.integers(min_len, min_len + 1000))
    input_len = data.draw(st.integers(min_len, max_len))
    items = [1] * input_len
    result = Length.min_max(min_len, max_len).validate(items, "text_field").result()
    assert result.unwrap() == items


@given(st.data())
def test_min_max_length_on_too_small_list(data):
    min_len = data.draw(st.integers(1, 100))
    max_len = data.draw(st.integers(min_len, min_len + 1000))
    input_len = data.draw(st.integers(0, min_len - 1))
    error = error_of(Length.min_max(min_len, max_len).validate([1] * input_len, "text_field"))
    assert error == field_error(
        "invalid-length-min", "text_field", Value.integer(input_len), Value.integer(min_len)
    )


@given(st.data())
def test_min_max_length_on_too_big_list(data):
    min_len = data.draw(st.integers(1, 100))
    max_len = data.draw(st.integers(min_len, min_len + 1000))
    input_len = data.draw(st.integers(max_len + 1, max_len + 99))
    error = error_of(Length.min_max(min_len, max_len).validate([1] * input_len, "text_field"))
    assert error == field_error(
        "invalid-length-max", "text_field", Value.integer(input_len), Value.integer(max_len)
    )


def test_length_of_string_counts_utf8_bytes():
    assert Length.exact(9).validate("I ❤ you", "message").result().unwrap() == "I ❤ you"


def test_length_rejects_negative_limit():
    with pytest.raises(ValueError):
        Length.max(-1)


# char count


def test_exact_char_count_on_compliant_string():
    assert CharCount.exact(7).validate("I ❤ you", "message").result().unwrap() == "I ❤ you"


def test_exact_char_count_on_too_short_string():
    assert error_of(CharCount.exact(7).validate("I ❤ u", "message")) == field_error(
        "invalid-char-count-exact", "message", Value.integer(5), Value.integer(7)
    )


def test_exact_char_count_on_too_long_string():
    assert error_of(CharCount.exact(7).validate("I ❤ you!", "message")) == field_error(
        "invalid-char-count-exact", "message", Value.integer(8), Value.integer(7)
    )


def test_max_char_count_on_compliant_string():
    assert CharCount.max(7).validate("I ❤ you", "message").result().unwrap() == "I ❤ you"


def test_max_char_count_on_too_long_string():
    assert error_of(CharCount.max(7).validate("I ❤ you!", "message")) == field_error(
        "invalid-char-count-max", "message", Value.integer(8), Value.integer(7)
    )


def test_min_char_count_on_compliant_string():
    assert CharCount.min(8).validate("I ❤ you!", "message").result().unwrap() == "I ❤ you!"


def test_min_char_count_on_too_short_string():
    assert error_of(CharCount.min(8).validate("I ❤ you", "message")) == field_error(
        "invalid-char-count-min", "message", Value.integer(7), Value.integer(8)
    )


def test_min_max_char_count_on_compliant_string():
    result = CharCount.min_max(6, 7).validate("I ❤ you", "message").result()
    assert result.unwrap() == "I ❤ you"


def test_min_max_char_count_on_too_long_string():
    assert error_of(CharCount.min_max(6, 7).validate("I ❤ you!", "message")) == field_error(
        "invalid-char-count-max", "message", Value.integer(8), Value.integer(7)
    )


def test_min_max_char_count_on_too_short_string():
    assert error_of(CharCount.min_max(6, 7).validate("I ❤ u", "message")) == field_error(
        "invalid-char-count-min", "message", Value.integer(5), Value.integer(6)
    )


# bound

finite_floats = st.floats(allow_nan=False, allow_infinity=False, width=32)


@given(finite_floats)
def test_bound_exact_on_compliant_float(bound):
    assert Bound.exact(bound).validate(bound, "float_value").result().unwrap() == bound


@given(finite_floats, st.booleans())
def test_bound_exact_on_different_float(bound, lower):
    value = bound * 0.999 - 0.001 if lower else bound * 1.001 + 0.001
    assume(value != bound)
    error = error_of(Bound.exact(bound).validate(value, "float_value"))
    assert error == field_error(
        "invalid-bound-exact", "float_value", Value.double(value), Value.double(bound)
    )


def assert_single_bound_violation(error, code, actual, expected):
    assert error.message is None
    (violation,) = error.violations
    assert violation.code == code
    assert violation.field.name == "long_value"
    assert violation.field.actual.value == actual
    assert violation.field.expected.value == expected


@given(st.data())
def test_closed_range_within_bounds(data):
    lower = data.draw(st.integers(I64_MIN, I64_MAX))
    upper = data.draw(st.integers(lower, I64_MAX))
    value = data.draw(st.integers(lower, upper))
    result = Bound.closed_range(lower, upper).validate(value, "long_value").result()
    assert result.unwrap() == value


@given(st.data())
def test_closed_range_below_lower_bound(data):
    lower = data.draw(st.integers(I64_MIN + 1, I64_MAX))
    upper = data.draw(st.integers(lower, I64_MAX))
    value = data.draw(st.integers(I64_MIN, lower - 1))
    error = error_of(Bound.closed_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-closed-min", value, lower)


@given(st.data())
def test_closed_range_above_upper_bound(data):
    upper = data.draw(st.integers(I64_MIN, I64_MAX - 2))
    lower = data.draw(st.integers(I64_MIN, upper))
    value = data.draw(st.integers(upper + 1, I64_MAX - 1))
    error = error_of(Bound.closed_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-closed-max", value, upper)


@given(st.data())
def test_closed_open_range_within_bounds(data):
    lower = data.draw(st.integers(I64_MIN, I64_MAX - 1))
    upper = data.draw(st.integers(lower + 1, I64_MAX))
    value = data.draw(st.integers(lower, upper - 1))
    result = Bound.closed_open_range(lower, upper).validate(value, "long_value").result()
    assert result.unwrap() == value


@given(st.data())
def test_closed_open_range_below_lower_bound(data):
    lower = data.draw(st.integers(I64_MIN + 1, I64_MAX))
    upper = data.draw(st.integers(lower, I64_MAX))
    value = data.draw(st.integers(I64_MIN, lower - 1))
    error = error_of(Bound.closed_open_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-closed-min", value, lower)


@given(st.data())
def test_closed_open_range_at_or_above_upper_bound(data):
    upper = data.draw(st.integers(I64_MIN, I64_MAX - 1))
    lower = data.draw(st.integers(I64_MIN, upper))
    value = data.draw(st.integers(upper, I64_MAX - 1))
    error = error_of(Bound.closed_open_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-open-max", value, upper)


@given(st.data())
def test_open_closed_range_within_bounds(data):
    lower = data.draw(st.integers(I64_MIN, I64_MAX - 1))
    upper = data.draw(st.integers(lower + 1, I64_MAX))
    value = data.draw(st.integers(lower + 1, upper))
    result = Bound.open_closed_range(lower, upper).validate(value, "long_value").result()
    assert result.unwrap() == value


@given(st.data())
def test_open_closed_range_at_or_below_lower_bound(data):
    lower = data.draw(st.integers(I64_MIN, I64_MAX))
    upper = data.draw(st.integers(lower, I64_MAX))
    value = data.draw(st.integers(I64_MIN, lower))
    error = error_of(Bound.open_closed_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-open-min", value, lower)


@given(st.data())
def test_open_closed_range_above_upper_bound(data):
    upper = data.draw(st.integers(I64_MIN + 1, I64_MAX - 2))
    lower = data.draw(st.integers(I64_MIN, upper - 1))
    value = data.draw(st.integers(upper + 1, I64_MAX - 1))
    error = error_of(Bound.open_closed_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-closed-max", value, upper)


@given(st.data())
def test_open_range_within_bounds(data):
    lower = data.draw(st.integers(I64_MIN, I64_MAX - 2))
    upper = data.draw(st.integers(lower + 2, I64_MAX))
    value = data.draw(st.integers(lower + 1, upper - 1))
    result = Bound.open_range(lower, upper).validate(value, "long_value").result()
    assert result.unwrap() == value


@given(st.data())
def test_open_range_at_or_below_lower_bound(data):
    lower = data.draw(st.integers(I64_MIN, I64_MAX))
    upper = data.draw(st.integers(lower, I64_MAX))
    value = data.draw(st.integers(I64_MIN, lower))
    error = error_of(Bound.open_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-open-min", value, lower)


@given(st.data())
def test_open_range_at_or_above_upper_bound(data):
    upper = data.draw(st.integers(I64_MIN + 1, I64_MAX - 1))
    lower = data.draw(st.integers(I64_MIN, upper - 1))
    value = data.draw(st.integers(upper, I64_MAX - 1))
    error = error_of(Bound.open_range(lower, upper).validate(value, "long_value"))
    assert_single_bound_violation(error, "invalid-bound-open-max", value, upper)


def test_bound_reports_small_integers_as_integer_values():
    error = error_of(Bound.closed_range(10, 20).validate(5, "age"))
    assert error == field_error(
        "invalid-bound-closed-min", "age", Value.integer(5), Value.integer(10)
    )


def test_bound_reports_large_integers_as_long_values():
    error = error_of(Bound.closed_range(2**40, 2**41).validate(3, "long_value"))
    assert error == field_error(
        "invalid-bound-closed-min", "long_value", Value.integer(3), Value.long(2**40)
    )


# non zero


def test_non_zero_on_zero_double():
    assert error_of(NonZero().validate(0.0, "field_value")) == field_error(
        "invalid-non-zero", "field_value", Value.double(0.0), None
    )


@given(st.floats(allow_nan=False).filter(lambda number: number != 0.0))
def test_non_zero_on_non_zero_double(number):
    assert NonZero().validate(number, "field_value").result().unwrap() == number


# digits


DIGITS_8_2 = Digits(integer=8, fraction=2)


def test_digits_of_compliant_decimal():
    result = DIGITS_8_2.validate(Decimal("12345678.99"), "account_balance").result()
    assert result.unwrap() == Decimal("12345678.99")


def test_digits_with_too_many_integer_digits():
    error = error_of(DIGITS_8_2.validate(Decimal("123456780.99"), "account_balance"))
    assert error == field_error(
        "invalid-digits-integer", "account_balance", Value.long(9), Value.long(8)
    )


def test_digits_with_too_many_fraction_digits():
    error = error_of(DIGITS_8_2.validate(Decimal("12345678.995"), "account_balance"))
    assert error == field_error(
        "invalid-digits-fraction", "account_balance", Value.long(3), Value.long(2)
    )


def test_digits_with_too_many_integer_and_fraction_digits():
    error = error_of(DIGITS_8_2.validate(Decimal("123456780.995"), "account_balance"))
    assert error == ValidationError(
        None,
        [
            InvalidValue(
                code="invalid-digits-integer",
                field=Field("account_balance", Value.long(9), Value.long(8)),
            ),
            InvalidValue(
                code="invalid-digits-fraction",
                field=Field("account_balance", Value.long(3), Value.long(2)),
            ),
        ],
    )


# contains


def test_contains_substring():
    assert Contains("42").validate("the answer is 42", "text").result().unwrap() == (
        "the answer is 42"
    )


def test_contains_missing_substring():
    error = error_of(Contains("43").validate("the answer is 42", "text"))
    assert error == field_error(
        "invalid-contains-element",
        "text",
        Value.string("the answer is 42"),
        Value.string("43"),
    )


# must match


@given(st.text())
def test_must_match_of_two_equal_strings(text):
    result = MustMatch().validate((text, text), ("password", "repeated")).result()
    assert result.unwrap() == (text, text)


@given(st.text(), st.text(min_size=1))
def test_must_match_of_two_different_strings(text, diff):
    repeated = text + diff
    error = error_of(MustMatch().validate((text, repeated), ("password", "repeated")))
    assert error == relation_error(
        "invalid-must-match",
        "password",
        Value.string(text),
        "repeated",
        Value.string(repeated),
    )


@given(st.integers(I32_MIN, I32_MAX))
def test_must_match_of_two_equal_integers(number):
    result = MustMatch().validate((number, number), ("code1", "code2")).result()
    assert result.unwrap() == (number, number)


@given(st.integers(I32_MIN // 2, I32_MAX // 2), st.integers(I32_MIN // 2, I32_MAX // 2))
def test_must_match_of_two_different_integers(code1, diff):
    assume(diff != 0)
    code2 = code1 + diff
    error = error_of(MustMatch().validate((code1, code2), ("code1", "code2")))
    assert error == relation_error(
        "invalid-must-match", "code1", Value.integer(code1), "code2", Value.integer(code2)
    )


def test_must_match_accepts_related_fields_context():
    error = error_of(MustMatch().validate(("a", "b"), RelatedFields("first", "second")))
    assert error == relation_error(
        "invalid-must-match", "first", Value.string("a"), "second", Value.string("b")
    )


# must define range


@given(st.data())
def test_must_define_range_inclusive_compliant(data):
    value1 = data.draw(st.integers(I32_MIN, I32_MAX))
    value2 = data.draw(st.integers(value1, I32_MAX))
    result = (
        MustDefineRange.INCLUSIVE.validate((value1, value2), ("value1", "value2")).result()
    )
    assert result.unwrap() == (value1, value2)


@given(st.data())
def test_must_define_range_inclusive_not_compliant(data):
    value2 = data.draw(st.integers(I32_MIN, I32_MAX - 1))
    value1 = data.draw(st.integers(value2 + 1, I32_MAX))
    error = error_of(MustDefineRange.INCLUSIVE.validate((value1, value2), ("value1", "value2")))
    assert error == relation_error(
        "invalid-must-define-range-inclusive",
        "value1",
        Value.integer(value1),
        "value2",
        Value.integer(value2),
    )


@given(st.data())
def test_must_define_range_exclusive_compliant(data):
    value1 = data.draw(st.integers(I32_MIN, I32_MAX - 1))
    value2 = data.draw(st.integers(value1 + 1, I32_MAX))
    result = (
        MustDefineRange.EXCLUSIVE.validate((value1, value2), ("value1", "value2")).result()
    )
    assert result.unwrap() == (value1, value2)


@given(st.data())
def test_must_define_range_exclusive_not_compliant(data):
    value2 = data.draw(st.integers(I32_MIN, I32_MAX))
    value1 = data.draw(st.integers(value2, I32_MAX))
    error = error_of(MustDefineRange.EXCLUSIVE.validate((value1, value2), ("value1", "value2")))
    assert error == relation_error(
        "invalid-must-define-range-exclusive",
        "value1",
        Value.integer(value1),
        "value2",
        Value.integer(value2),
    )


years = st.integers(1, 9999)
months = st.integers(1, 12)


@given(years, months, st.data())
def test_must_define_range_inclusive_dates_compliant(year, month, data):
    day1 = data.draw(st.integers(1, 28))
    day2 = data.draw(st.integers(day1, 28))
    dates = (datetime.date(year, month, day1), datetime.date(year, month, day2))
    result = MustDefineRange.INCLUSIVE.validate(dates, ("valid_from", "valid_until")).result()
    assert result.unwrap() == dates


@given(years, months, st.data())
def test_must_define_range_inclusive_dates_not_compliant(year, month, data):
    day2 = data.draw(st.integers(1, 27))
    day1 = data.draw(st.integers(day2 + 1, 28))
    valid_from = datetime.date(year, month, day1)
    valid_until = datetime.date(year, month, day2)
    error = error_of(
        MustDefineRange.INCLUSIVE.validate((valid_from, valid_until), ("valid_from", "valid_until"))
    )
    assert error == relation_error(
        "invalid-must-define-range-inclusive",
        "valid_from",
        Value.date(valid_from),
        "valid_until",
        Value.date(valid_until),
    )


@given(years, months, st.data())
def test_must_define_range_exclusive_dates_compliant(year, month, data):
    day1 = data.draw(st.integers(1, 27))
    day2 = data.draw(st.integers(day1 + 1, 28))
    dates = (datetime.date(year, month, day1), datetime.date(year, month, day2))
    result = MustDefineRange.EXCLUSIVE.validate(dates, ("valid_from", "valid_until")).result()
    assert result.unwrap() == dates


@given(years, months, st.data())
def test_must_define_range_exclusive_dates_not_compliant(year, month, data):
    day2 = data.draw(st.integers(1, 28))
    day1 = data.draw(st.integers(day2, 28))
    valid_from = datetime.date(year, month, day1)
    valid_until = datetime.date(year, month, day2)
    error = error_of(
        MustDefineRange.EXCLUSIVE.validate((valid_from, valid_until), ("valid_from", "valid_until"))
    )
    assert error == relation_error(
        "invalid-must-define-range-exclusive",
        "valid_from",
        Value.date(valid_from),
        "valid_until",
        Value.date(valid_until),
    )


# pattern


def test_pattern_on_compliant_string():
    email = "jane.doe@example.com"
    result = Pattern(EMAIL_PATTERN).validate(email, "email_address").result()
    assert result.unwrap() == email


def test_pattern_on_not_compliant_string():
    email = "jane*doe@example.com"
    error = error_of(Pattern(re.compile(EMAIL_PATTERN)).validate(email, "email_address"))
    assert error == field_error(
        "invalid-pattern", "email_address", Value.string(email), Value.string(EMAIL_PATTERN)
    )


def test_pattern_matches_anywhere_in_string():
    assert Pattern("[0-9]+").validate("abc123def", "code").result().unwrap() == "abc123def"


def test_pattern_on_non_string_raises():
    with pytest.raises(TypeError):
        Pattern("[0-9]+").validate(123, "code")


def test_pattern_compiled_and_text_are_equal():
    assert Pattern("^a$") == Pattern(re.compile("^a$"))