"""Animation legality checks against a compiled object tree."""
from __future__ import annotations

from typing import Sequence, Set

from framekit.object_tree import find_object
from framekit.schemas import BaseObject, PropertyAnimation
from framekit.tools.effect_validator import validate_keyframe_easings

COMMON_PROPERTIES = {
    "x",
    "y",
    "opacity",
    "rotation",
    "scale",
    "scaleX",
    "scaleY",
    "blur",
    "clip.x",
    "clip.y",
    "clip.width",
    "clip.height",
}

TYPE_PROPERTIES = {
    "rect": {"width", "height"},
    "image": {"width", "height"},
    "circle": {"radius"},
    "ellipse": {"radiusX", "radiusY"},
    "text": {"content", "size", "color", "font", "align"},
    "line": {"x2", "y2", "stroke", "strokeWidth"},
}


class AnimationValidationError(ValueError):
    pass


def valid_properties(obj: BaseObject) -> Set[str]:
    props = set(COMMON_PROPERTIES)
    props.update(TYPE_PROPERTIES.get(getattr(obj, "type", ""), set()))
    if getattr(obj, "fill", None) is not None:
        props.add("fill")
    if getattr(obj, "stroke", None) is not None:
        props.add("stroke")
    return props


def validate_animation_property(animation: PropertyAnimation, objects: Sequence[BaseObject]) -> BaseObject:
    """Check target and property; returns the resolved target object."""
    target = find_object(objects, animation.target)
    if target is None:
        raise AnimationValidationError(
            f"Animation target '{animation.target}' not found. "
            f"Cannot animate property '{animation.property}'."
        )

    allowed = valid_properties(target)
    if animation.property not in allowed:
        raise AnimationValidationError(
            f"Property '{animation.property}' is not valid for object '{animation.target}' "
            f"of type '{getattr(target, 'type', 'unknown')}'. "
            f"Valid properties: {', '.join(sorted(allowed))}"
        )
    return target


def validate_animations(animations: Sequence[PropertyAnimation], objects: Sequence[BaseObject]) -> None:
    for animation in animations:
        validate_animation_property(animation, objects)
        validate_keyframe_easings(animation.keyframes, f"animation '{animation.target}'", animation.property)
