"""Structural validation of object trees."""
from __future__ import annotations

from typing import Dict, List, Sequence

from framekit.schemas import BaseObject, ComponentObject, GroupObject

REQUIRED_FIELDS: Dict[str, List[str]] = {
    "rect": ["width", "height"],
    "circle": ["radius"],
    "ellipse": ["radius_x", "radius_y"],
    "text": ["content"],
    "image": ["source"],
    "line": ["x2", "y2"],
    "component": ["source"],
    "scene": ["source"],
}

NON_NEGATIVE_FIELDS = ["width", "height", "radius", "radius_x", "radius_y"]

_WIRE_NAMES = {"radius_x": "radiusX", "radius_y": "radiusY"}


class ObjectValidationError(ValueError):
    pass


def _wire(name: str) -> str:
    return _WIRE_NAMES.get(name, name)


def _article(name: str) -> str:
    return "an" if name[0] in "aeiox" else "a"


def object_errors(obj: BaseObject) -> List[str]:
    """Problems with a single object, children excluded."""
    errors: List[str] = []
    obj_id = obj.id or "unknown"
    obj_type = getattr(obj, "type", "unknown")

    for field in REQUIRED_FIELDS.get(obj_type, []):
        if getattr(obj, field, None) is None:
            wire = _wire(field)
            errors.append(
                f"Object '{obj_id}' of type '{obj_type}' must have {_article(wire)} '{wire}' property."
            )

    for field in NON_NEGATIVE_FIELDS:
        value = getattr(obj, field, None)
        if isinstance(value, (int, float)) and value < 0:
            wire = _wire(field)
            label = wire[0].upper() + wire[1:]
            errors.append(f"Object '{obj_id}' has invalid {wire}: {value}. {label} cannot be negative.")

    if obj.opacity is not None and not 0 <= obj.opacity <= 1:
        errors.append(
            f"Object '{obj_id}' has invalid opacity: {obj.opacity}. Opacity must be between 0 and 1."
        )

    if isinstance(obj, GroupObject):
        if obj.animation_speed is not None and obj.animation_speed <= 0:
            errors.append(
                f"Group '{obj_id}' has invalid animationSpeed: {obj.animation_speed}. It must be greater than 0."
            )
        if obj.transition is not None and obj.id is None:
            errors.append("Groups with a transition must have an id.")
        if obj.transition is not None and obj.transition.out is not None and obj.duration is None:
            errors.append(f"Group '{obj_id}' has an out transition but no duration.")

    if isinstance(obj, ComponentObject) and obj.id is None:
        errors.append("Component objects must have an id for namespacing.")

    return errors


def _sibling_errors(objects: Sequence[BaseObject], scope: str) -> List[str]:
    errors: List[str] = []
    seen = set()
    for obj in objects:
        if obj.id is None:
            continue
        if obj.id in seen:
            where = f" in '{scope}'" if scope else ""
            errors.append(f"Duplicate object id '{obj.id}'{where}.")
        seen.add(obj.id)
    return errors


def collect_errors(objects: Sequence[BaseObject], scope: str = "") -> List[str]:
    errors = _sibling_errors(objects, scope)
    for obj in objects:
        errors.extend(object_errors(obj))
        if isinstance(obj, GroupObject):
            child_scope = obj.id or scope
            errors.extend(collect_errors(obj.children, child_scope))
    return errors


def validate_objects(objects: Sequence[BaseObject]) -> None:
    """Validate a whole object tree, group children included.

    Component and scene references are checked for their ``source`` only;
    their contents are validated once expanded.
    """
    errors = collect_errors(objects)
    if errors:
        raise ObjectValidationError("; ".join(errors))