"""Time expression parsing.

A time value is either a frame count (number) or a string with a unit
suffix: ``"1.5s"`` seconds, ``"500ms"`` milliseconds, ``"0.5m"`` minutes.
A bare numeric string such as ``"30"`` is a frame count. Numbers may use
an exponent (``"1e1s"``).
"""
from __future__ import annotations

import math
import re
from typing import Union

TimeValue = Union[int, float, str]

_NUMBER_RE = re.compile(r"^-?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?$")

# Checked in order: "ms" must win over "m" and "s".
_UNITS = (
    ("ms", 0.001),
    ("m", 60.0),
    ("s", 1.0),
)


class TimeFormatError(ValueError):
    pass


class NegativeTimeError(ValueError):
    pass


def round_frame(value: float) -> int:
    """Round half up to a whole frame."""
    return int(math.floor(value + 0.5))


def _parse_number(text: str, original: str) -> float:
    if not _NUMBER_RE.match(text):
        raise TimeFormatError(
            f"Invalid time format: '{original}'. "
            "Expected a frame number or a value ending in 'ms', 's' or 'm' (e.g. '1.5s')."
        )
    amount = float(text)
    if amount < 0:
        raise NegativeTimeError(f"Time value cannot be negative: '{original}'")
    return amount


def parse_time(value: TimeValue, fps: float) -> int:
    """Convert a time value into an integer frame number at ``fps``."""
    if isinstance(value, bool):
        raise TimeFormatError(f"Invalid time format: {value!r}")

    if isinstance(value, (int, float)):
        if value < 0:
            raise NegativeTimeError(f"Time value cannot be negative: {value}")
        return round_frame(value)

    if not isinstance(value, str) or not value:
        raise TimeFormatError(f"Invalid time format: {value!r}")

    for suffix, seconds_per_unit in _UNITS:
        if value.endswith(suffix):
            amount = _parse_number(value[: -len(suffix)], value)
            return round_frame(amount * seconds_per_unit * fps)

    return round_frame(_parse_number(value, value))
