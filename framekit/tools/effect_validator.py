"""Easing and effect-value validation."""
from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple

EASING_PRESETS = ["linear", "ease-in", "ease-out", "ease-in-out", "bounce", "elastic"]

CUBIC_BEZIER_RE = re.compile(r"cubic-bezier\(([^,]+),([^,]+),([^,]+),([^)]+)\)")
PERCENT_RE = re.compile(r"^-?\d+(\.\d+)?%$")
_NUMERIC_STRING_RE = re.compile(r"^\s*-?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?\s*$")


class EasingValidationError(ValueError):
    pass


class EffectValueError(ValueError):
    pass


def keyframe_context(source: str, prop: str, index: int) -> str:
    """Human readable location of a keyframe, e.g. ``effect 'pop', property 'scale', keyframe 1``."""
    return f"{source}, property '{prop}', keyframe {index}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_x_range(x1: float, x2: float, context: str) -> None:
    if not (0 <= x1 <= 1 and 0 <= x2 <= 1):
        raise EasingValidationError(
            f"Invalid easing in {context}: "
            f"cubic-bezier x1 and x2 must be between 0 and 1. Got: x1={x1:g}, x2={x2:g}"
        )


def parse_cubic_bezier(easing: Any) -> Optional[Tuple[float, float, float, float]]:
    """Return ``(x1, y1, x2, y2)`` for either cubic-bezier form, else ``None``.

    Does not validate; malformed input yields ``None``.
    """
    if isinstance(easing, str):
        match = CUBIC_BEZIER_RE.fullmatch(easing.strip())
        if not match:
            return None
        try:
            x1, y1, x2, y2 = (float(part.strip()) for part in match.groups())
        except ValueError:
            return None
        return x1, y1, x2, y2
    if isinstance(easing, dict) and easing.get("type") == "cubic-bezier":
        points = easing.get("points")
        if isinstance(points, list) and len(points) == 4 and all(_is_number(p) for p in points):
            return tuple(float(p) for p in points)  # type: ignore[return-value]
    return None


def validate_easing(easing: Any, context: str) -> None:
    """Raise :class:`EasingValidationError` unless ``easing`` is usable.

    ``None`` (and empty string) means linear and is always valid.
    """
    if easing is None or easing == "":
        return

    if isinstance(easing, str):
        if easing in EASING_PRESETS:
            return
        if easing.startswith("cubic-bezier("):
            match = CUBIC_BEZIER_RE.fullmatch(easing)
            if not match:
                raise EasingValidationError(
                    f"Invalid easing in {context}: "
                    f'"{easing}" is not a valid cubic-bezier format. Expected: "cubic-bezier(x1, y1, x2, y2)"'
                )
            try:
                x1, _y1, x2, _y2 = (float(part.strip()) for part in match.groups())
            except ValueError:
                raise EasingValidationError(
                    f"Invalid easing in {context}: cubic-bezier parameters must be numbers"
                ) from None
            _check_x_range(x1, x2, context)
            return
        raise EasingValidationError(
            f"Invalid easing in {context}: "
            f'unknown easing "{easing}". Valid easings: {", ".join(EASING_PRESETS)}, or cubic-bezier(...)'
        )

    if isinstance(easing, dict) and easing.get("type") == "cubic-bezier":
        points = easing.get("points")
        if not isinstance(points, list) or len(points) != 4:
            raise EasingValidationError(
                f"Invalid easing in {context}: cubic-bezier object must have points array with 4 values"
            )
        if not all(_is_number(p) for p in points):
            raise EasingValidationError(f"Invalid easing in {context}: cubic-bezier points must be numbers")
        _check_x_range(points[0], points[2], context)
        return

    raise EasingValidationError(
        f"Invalid easing in {context}: "
        f"easing must be a string or cubic-bezier object, got {type(easing).__name__}"
    )


def is_percentage(value: Any) -> bool:
    return isinstance(value, str) and bool(PERCENT_RE.match(value))


def validate_effect_value(value: Any, context: str) -> None:
    """Effect values must be numbers or ``"N%"`` strings."""
    if _is_number(value):
        return
    if isinstance(value, str):
        if is_percentage(value):
            return
        if _NUMERIC_STRING_RE.match(value):
            raise EffectValueError(
                f"Invalid value in {context}: "
                f'value "{value}" is a string. Use a number instead (without quotes).'
            )
        raise EffectValueError(
            f"Invalid value in {context}: "
            f'"{value}" is not a valid value. Use a number or percentage string (e.g., "50%").'
        )
    raise EffectValueError(
        f"Invalid value in {context}: "
        f"value must be a number or percentage string, got {type(value).__name__}."
    )


def validate_keyframe_easings(keyframes: List[Any], source: str, prop: str) -> None:
    for index, keyframe in enumerate(keyframes):
        validate_easing(getattr(keyframe, "easing", None), keyframe_context(source, prop, index))
