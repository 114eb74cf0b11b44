import pytest

from framekit.timing import NegativeTimeError, TimeFormatError, parse_time, round_frame


def test_numbers_are_frames():
    assert parse_time(45, 30) == 45
    assert parse_time(0, 60) == 0
    assert parse_time(12.5, 30) == 13


def test_unit_suffixes():
    assert parse_time("1s", 30) == 30
    assert parse_time("1.5s", 30) == 45
    assert parse_time("500ms", 60) == 30
    assert parse_time("0.5m", 30) == 900
    assert parse_time("2m", 24) == 2880


def test_exponent_literals():
    assert parse_time("1e1s", 30) == 300
    assert parse_time("2.5e2ms", 60) == 15
    assert parse_time("1E1", 30) == 10


def test_bare_numeric_string_is_frames():
    assert parse_time("30", 60) == 30
    assert parse_time("7.4", 60) == 7


def test_rounds_half_up():
    assert round_frame(2.5) == 3
    assert round_frame(0.5) == 1
    assert round_frame(2.49) == 2


@pytest.mark.parametrize("value", ["", "s", "ms", "m", "1..5s", "1.2.3ms", "abc", "10x", "1 s", "1e", "e5s", "1e1.5s"])
def test_malformed_strings_raise_format_error(value):
    with pytest.raises(TimeFormatError):
        parse_time(value, 30)


@pytest.mark.parametrize("value", [-1, -0.5, "-1s", "-500ms", "-0.5m", "-5"])
def test_negative_values_raise(value):
    with pytest.raises(NegativeTimeError):
        parse_time(value, 30)


def test_booleans_are_not_times():
    with pytest.raises(TimeFormatError):
        parse_time(True, 30)


def test_errors_are_value_errors():
    with pytest.raises(ValueError, match="Invalid time format"):
        parse_time("fast", 30)
