"""Easing functions.

An easing maps linear progress ``t`` in [0, 1] to eased progress, which
may leave [0, 1] for overshoot (``elastic``, some cubic-béziers).
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Optional

from framekit.tools.effect_validator import parse_cubic_bezier
from framekit.utils.config import settings

logger = logging.getLogger(__name__)

EasingFn = Callable[[float], float]


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2 - t)


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


def bounce(t: float) -> float:
    if t < 1 / 2.75:
        return 7.5625 * t * t
    if t < 2 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    if t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


def elastic(t: float) -> float:
    if t == 0 or t == 1:
        return t
    return -math.pow(2, 10 * (t - 1)) * math.sin((t - 1.1) * 5 * math.pi)


PRESETS: Dict[str, EasingFn] = {
    "linear": linear,
    "ease-in": ease_in,
    "ease-out": ease_out,
    "ease-in-out": ease_in_out,
    "bounce": bounce,
    "elastic": elastic,
}


def cubic_bezier(
    t: float,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    max_iterations: Optional[int] = None,
    epsilon: Optional[float] = None,
) -> float:
    """CSS-style cubic Bézier with P0=(0,0) and P3=(1,1).

    Solves ``bezier_x(u) == t`` by Newton-Raphson starting at ``u = t``,
    then returns ``bezier_y(u)``.
    """
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0

    max_iterations = max_iterations or settings.bezier_max_iterations
    epsilon = epsilon or settings.bezier_epsilon

    def bezier(u: float, p1: float, p2: float) -> float:
        inv = 1 - u
        return 3 * inv * inv * u * p1 + 3 * inv * u * u * p2 + u * u * u

    def bezier_derivative(u: float, p1: float, p2: float) -> float:
        inv = 1 - u
        return 3 * inv * inv * p1 + 6 * inv * u * (p2 - p1) + 3 * u * u * (1 - p2)

    u = t
    for _ in range(max_iterations):
        residual = bezier(u, x1, x2) - t
        if abs(residual) < epsilon:
            break
        derivative = bezier_derivative(u, x1, x2)
        if abs(derivative) < epsilon:
            break
        u -= residual / derivative

    return bezier(u, y1, y2)


def resolve_easing(easing: Any) -> EasingFn:
    """Turn a keyframe ``easing`` value into a callable.

    ``None`` is linear. Unknown or malformed values also fall back to
    linear, with a warning; compilation rejects them earlier.
    """
    if easing is None or easing == "":
        return linear
    if isinstance(easing, str) and easing in PRESETS:
        return PRESETS[easing]
    points = parse_cubic_bezier(easing)
    if points is not None:
        x1, y1, x2, y2 = points
        return lambda t: cubic_bezier(t, x1, y1, x2, y2)
    logger.warning("Unknown easing %r, using linear", easing)
    return linear


def apply_easing(t: float, easing: Any) -> float:
    return resolve_easing(easing)(t)
