"""Effect expansion: named 0..1 keyframe bundles to frame-based tracks."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from framekit.object_tree import find_object
from framekit.schemas import BaseObject, EffectAnimation, EffectDefinition, Keyframe, PropertyAnimation
from framekit.timing import parse_time, round_frame
from framekit.tokens import substitute_effect_value
from framekit.tools.definition_store import EffectLibrary, default_library
from framekit.tools.effect_validator import keyframe_context, validate_easing, validate_effect_value

logger = logging.getLogger(__name__)


def effect_duration_frames(effect: EffectDefinition, animation: EffectAnimation, fps: float) -> int:
    if animation.duration is not None:
        return parse_time(animation.duration, fps)
    return round_frame(effect.duration * fps)


def effect_tracks(
    animation: EffectAnimation,
    fps: float,
    static_props: Optional[Dict[str, Any]],
    start_frame: int,
    library: Optional[EffectLibrary] = None,
) -> List[PropertyAnimation]:
    """Expand ``animation`` with its first keyframe at ``start_frame``.

    ``static_props`` are the target's declared properties (wire names) used
    for ``{prop}`` values; ``None`` when the target is unknown.
    """
    library = library if library is not None else default_library()
    effect = library.get(animation.effect)
    duration_frames = effect_duration_frames(effect, animation, fps)
    source = f"effect '{animation.effect}'"

    tracks: List[PropertyAnimation] = []
    for prop, time_keyframes in effect.properties.items():
        keyframes: List[Keyframe] = []
        for index, tk in enumerate(time_keyframes):
            context = keyframe_context(source, prop, index)
            validate_easing(tk.easing, context)
            value = substitute_effect_value(tk.value, static_props)
            validate_effect_value(value, context)
            keyframes.append(
                Keyframe(
                    start=round_frame(start_frame + tk.time * duration_frames),
                    value=value,
                    easing=tk.easing,
                )
            )
        tracks.append(PropertyAnimation(target=animation.target, property=prop, keyframes=keyframes))

    logger.debug(
        "Expanded effect '%s' on '%s' at frame %d over %d frames",
        animation.effect,
        animation.target,
        start_frame,
        duration_frames,
    )
    return tracks


def expand_effect(
    animation: EffectAnimation,
    fps: float,
    objects: Sequence[BaseObject] = (),
    library: Optional[EffectLibrary] = None,
) -> List[PropertyAnimation]:
    """Expand an effect animation into absolute-frame property animations.

    The target is looked up in ``objects`` (dotted path) to substitute
    ``{prop}`` values; a missing target falls back to property defaults.
    """
    target = find_object(objects, animation.target) if objects else None
    static_props = target.static_props() if target is not None else None
    return effect_tracks(animation, fps, static_props, parse_time(animation.start, fps), library)
