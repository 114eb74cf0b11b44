"""Sampling and composition of compiled timelines.

Components:
- easing: preset and cubic-bezier easing functions
- sampler: per-target keyframe tracks and interpolation
- composer: transform/opacity/clip composition into draw items
"""

from framekit.animation.easing import (
    PRESETS,
    apply_easing,
    cubic_bezier,
    resolve_easing,
)

from framekit.animation.sampler import (
    TimelineSampler,
    sample_keyframes,
)

from framekit.animation.composer import (
    Affine,
    BlurLayer,
    ClipRect,
    DrawItem,
    FrameComposer,
    anchor_offset,
)

__all__ = [
    # Easing
    "PRESETS",
    "apply_easing",
    "cubic_bezier",
    "resolve_easing",
    # Sampling
    "TimelineSampler",
    "sample_keyframes",
    # Composition
    "Affine",
    "BlurLayer",
    "ClipRect",
    "DrawItem",
    "FrameComposer",
    "anchor_offset",
]
