"""Keyframe sampling over a compiled timeline."""
from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Any, Dict, Iterable, List, Optional

from framekit.animation.easing import apply_easing
from framekit.schemas import Keyframe, PropertyAnimation

Tracks = Dict[str, List[Keyframe]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sample_keyframes(keyframes: List[Keyframe], frame: float) -> Any:
    """Value of a start-ordered keyframe track at ``frame``.

    Holds the first value before the track and the last value after it.
    The easing of the keyframe being approached shapes the segment.
    Non-numeric values step: the previous keyframe's value is held.
    """
    if not keyframes:
        return None
    starts = [kf.start for kf in keyframes]
    after = bisect_right(starts, frame)
    if after == 0:
        return keyframes[0].value
    prev = keyframes[after - 1]
    if prev.start == frame:
        return prev.value
    next_index = bisect_left(starts, frame)
    if next_index >= len(keyframes):
        return prev.value
    nxt = keyframes[next_index]

    if not (_is_number(prev.value) and _is_number(nxt.value)):
        return prev.value

    t = (frame - prev.start) / (nxt.start - prev.start)
    eased = apply_easing(t, nxt.easing)
    return prev.value + (nxt.value - prev.value) * eased


class TimelineSampler:
    """Per-target, per-property keyframe tracks built once from a flat list.

    Animations on the same target and property are merged into one track,
    stably ordered by start frame.
    """

    def __init__(self, animations: Iterable[PropertyAnimation]):
        self._tracks: Dict[str, Tracks] = {}
        for anim in animations:
            props = self._tracks.setdefault(anim.target, {})
            props.setdefault(anim.property, []).extend(anim.keyframes)
        for props in self._tracks.values():
            for prop, keyframes in props.items():
                props[prop] = sorted(keyframes, key=lambda kf: kf.start)

    def targets(self) -> List[str]:
        return list(self._tracks)

    def tracks_for(self, target: str) -> Tracks:
        return self._tracks.get(target, {})

    def sample_property(self, target: str, prop: str, frame: float) -> Optional[Any]:
        keyframes = self.tracks_for(target).get(prop)
        if not keyframes:
            return None
        return sample_keyframes(keyframes, frame)

    def sample_target(self, target: str, frame: float) -> Dict[str, Any]:
        """Animated overrides for ``target``; untouched properties are absent."""
        return {prop: sample_keyframes(kfs, frame) for prop, kfs in self.tracks_for(target).items() if kfs}
