"""Timeline flattening.

Walks an expanded object tree (no component/scene nodes left) and produces:

- the same tree with every id replaced by its full dotted path and every
  group's ``start``/``duration`` rewritten to absolute frames;
- one flat list of property animations whose targets are full paths and
  whose keyframe starts are absolute integer frames.

Each group maps group-relative frames to absolute ones through a
:class:`TimeScope`. Transitions ignore ``animationSpeed``; definition
animations carried by expanded groups are already absolute.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Set, Tuple

from framekit.effects import effect_tracks
from framekit.object_tree import find_descendants, find_object, join_path
from framekit.schemas import (
    AnimationEntry,
    BaseObject,
    EffectAnimation,
    GroupObject,
    Keyframe,
    PropertyAnimation,
)
from framekit.timing import parse_time, round_frame
from framekit.tools.animation_validator import AnimationValidationError
from framekit.tools.definition_store import EffectLibrary, default_library
from framekit.tools.object_validator import ObjectValidationError

logger = logging.getLogger(__name__)

FrameMap = Callable[[int], int]


class TargetResolutionError(AnimationValidationError):
    pass


@dataclass(frozen=True)
class TimeScope:
    """Absolute start frame and cumulative speed of a group."""

    start_frame: int = 0
    speed: float = 1.0

    def enter(self, group: GroupObject, fps: float) -> "TimeScope":
        start = group.start if group.start is not None else 0
        speed = group.animation_speed if group.animation_speed is not None else 1.0
        return TimeScope(self.start_frame + parse_time(start, fps), self.speed * speed)

    def to_absolute(self, relative_frame: int) -> int:
        return self.start_frame + round_frame(relative_frame / self.speed)


def _absolute(frame: int) -> int:
    return frame


@dataclass
class FlattenResult:
    objects: List[BaseObject]
    animations: List[PropertyAnimation] = field(default_factory=list)


def _local_id(raw_id: str, namespace: str) -> str:
    if namespace and raw_id.startswith(namespace):
        return raw_id[len(namespace):]
    return raw_id


class TimelineFlattener:
    def __init__(self, fps: float, library: Optional[EffectLibrary] = None):
        self.fps = fps
        self.library = library if library is not None else default_library()
        self._paths: Set[str] = set()
        self._animations: List[PropertyAnimation] = []

    def flatten(
        self,
        objects: Sequence[BaseObject],
        animations: Sequence[AnimationEntry] = (),
        animation_speed: Optional[float] = None,
    ) -> FlattenResult:
        self._paths = set()
        self._animations = []

        root_scope = TimeScope(0, animation_speed if animation_speed is not None else 1.0)
        compiled = self._qualify(objects, "", "", root_scope)

        root_animations: List[PropertyAnimation] = []
        for anim in animations:
            root_animations.extend(self._emit(anim, compiled, "", root_scope.to_absolute))

        result = FlattenResult(objects=compiled, animations=root_animations + self._animations)
        logger.debug(
            "Flattened %d objects into %d property animations",
            len(self._paths),
            len(result.animations),
        )
        return result

    # -- tree -------------------------------------------------------------

    def _qualify(
        self,
        objects: Sequence[BaseObject],
        parent_path: str,
        namespace: str,
        scope: TimeScope,
    ) -> List[BaseObject]:
        qualified: List[BaseObject] = []
        for obj in objects:
            full_id: Optional[str] = None
            if obj.id is not None:
                full_id = join_path(parent_path, _local_id(obj.id, namespace))
                if full_id in self._paths:
                    raise ObjectValidationError(f"Duplicate object path '{full_id}'.")
                self._paths.add(full_id)

            if isinstance(obj, GroupObject):
                qualified.append(self._qualify_group(obj, full_id, parent_path, namespace, scope))
            else:
                qualified.append(obj.model_copy(update={"id": full_id}))
        return qualified

    def _qualify_group(
        self,
        group: GroupObject,
        full_id: Optional[str],
        parent_path: str,
        namespace: str,
        scope: TimeScope,
    ) -> GroupObject:
        own_scope = scope.enter(group, self.fps)
        path = full_id or parent_path
        child_namespace = f"{group.id}." if group.expanded_from and group.id else namespace

        children = self._qualify(group.children, path, child_namespace, own_scope)

        update = {
            "id": full_id,
            "children": children,
            "animations": [],
            "resolved_animations": [],
        }
        if group.start is not None or group.duration is not None:
            update["start"] = own_scope.start_frame
        if group.duration is not None:
            update["duration"] = parse_time(group.duration, self.fps)
        compiled = group.model_copy(update=update)

        if group.transition is not None and full_id is not None:
            self._emit_transitions(compiled, own_scope.start_frame)

        for anim in group.animations:
            self._animations.extend(self._emit(anim, children, path, own_scope.to_absolute))

        for anim in group.resolved_animations:
            anim = anim.model_copy(update={"target": _local_id(anim.target, child_namespace)})
            self._animations.extend(self._emit(anim, children, path, _absolute))

        return compiled

    def _emit_transitions(self, group: GroupObject, start_frame: int) -> None:
        transition = group.transition
        if transition.in_ is not None:
            anim = EffectAnimation(
                target=group.id,
                effect=transition.in_.effect,
                start=start_frame,
                duration=transition.in_.duration,
            )
            self._animations.extend(self._effect(anim, group, start_frame, _absolute))
        if transition.out is not None:
            if group.duration is None:
                raise ObjectValidationError(f"Group '{group.id}' has an out transition but no duration.")
            out_start = start_frame + int(group.duration)
            anim = EffectAnimation(
                target=group.id,
                effect=transition.out.effect,
                start=out_start,
                duration=transition.out.duration,
            )
            self._animations.extend(self._effect(anim, group, out_start, _absolute))

    # -- animations -------------------------------------------------------

    def resolve_target(self, target: str, objects: Sequence[BaseObject], scope: str) -> BaseObject:
        """Resolve a target relative to ``scope``.

        Exact dotted-path descent first, then a unique descendant whose
        local id is ``target``.
        """
        found = find_object(objects, target, scope)
        if found is not None:
            return found
        matches = find_descendants(objects, target)
        if len(matches) == 1:
            return matches[0]
        where = f" in group '{scope}'" if scope else ""
        if matches:
            ids = ", ".join(m.id for m in matches)
            raise TargetResolutionError(f"Animation target '{target}'{where} is ambiguous: {ids}")
        raise TargetResolutionError(f"Animation target '{target}' not found{where}.")

    def _emit(
        self,
        anim: AnimationEntry,
        objects: Sequence[BaseObject],
        scope: str,
        frame_map: FrameMap,
    ) -> List[PropertyAnimation]:
        target = self.resolve_target(anim.target, objects, scope)
        if isinstance(anim, EffectAnimation):
            anim = anim.model_copy(update={"target": target.id})
            return self._effect(anim, target, parse_time(anim.start, self.fps), frame_map)
        keyframes = [
            kf.model_copy(update={"start": frame_map(parse_time(kf.start, self.fps))}) for kf in anim.keyframes
        ]
        return [anim.model_copy(update={"target": target.id, "keyframes": sort_keyframes(keyframes)})]

    def _effect(
        self,
        anim: EffectAnimation,
        target: BaseObject,
        start_frame: int,
        frame_map: FrameMap,
    ) -> List[PropertyAnimation]:
        tracks = effect_tracks(anim, self.fps, target.static_props(), start_frame, self.library)
        mapped: List[PropertyAnimation] = []
        for track in tracks:
            keyframes = [kf.model_copy(update={"start": frame_map(kf.start)}) for kf in track.keyframes]
            mapped.append(track.model_copy(update={"keyframes": sort_keyframes(keyframes)}))
        return mapped


def sort_keyframes(keyframes: Sequence[Keyframe]) -> List[Keyframe]:
    return sorted(keyframes, key=lambda kf: kf.start)


def flatten_timeline(
    objects: Sequence[BaseObject],
    animations: Sequence[AnimationEntry],
    fps: float,
    animation_speed: Optional[float] = None,
    library: Optional[EffectLibrary] = None,
) -> Tuple[List[BaseObject], List[PropertyAnimation]]:
    result = TimelineFlattener(fps, library).flatten(objects, animations, animation_speed)
    return result.objects, result.animations
