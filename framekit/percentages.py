"""Object measurement and percentage clip resolution.

Percentages are resolved once, against the object's declared (static)
size. Animating ``width`` does not change what ``"50%"`` means for the
same object's clip.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from framekit.object_tree import find_object
from framekit.schemas import BaseObject, GroupObject, PropertyAnimation
from framekit.tools.effect_validator import is_percentage
from framekit.tools.text_metrics import TextMeasurer, default_measurer
from framekit.utils.config import settings

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 100.0
DEFAULT_RADIUS = 50.0

CLIP_AXES = {"x": 0, "width": 0, "y": 1, "height": 1}


def measure(obj_type: str, props: Dict[str, Any], measurer: Optional[TextMeasurer] = None) -> Tuple[float, float]:
    """Natural ``(width, height)`` of an object from wire-named properties."""
    if obj_type in ("rect", "image"):
        width = props.get("width")
        height = props.get("height")
        return (
            float(width) if width is not None else DEFAULT_SIZE,
            float(height) if height is not None else DEFAULT_SIZE,
        )
    if obj_type == "text":
        measurer = measurer if measurer is not None else default_measurer()
        size = props.get("size") or settings.default_text_size
        width, height = measurer.measure(
            str(props.get("content") or ""),
            float(size),
            props.get("font"),
            bool(props.get("bold")),
        )
        return float(width), float(height)
    if obj_type == "circle":
        radius = props.get("radius")
        diameter = (float(radius) if radius is not None else DEFAULT_RADIUS) * 2
        return diameter, diameter
    if obj_type == "ellipse":
        rx = props.get("radiusX")
        ry = props.get("radiusY")
        return (
            (float(rx) if rx is not None else DEFAULT_RADIUS) * 2,
            (float(ry) if ry is not None else DEFAULT_RADIUS) * 2,
        )
    return DEFAULT_SIZE, DEFAULT_SIZE


def measure_object(obj: BaseObject, measurer: Optional[TextMeasurer] = None) -> Tuple[float, float]:
    return measure(getattr(obj, "type", ""), obj.static_props(), measurer)


def resolve_percentage(value: Any, dimension: float) -> Any:
    if is_percentage(value):
        return float(value[:-1]) / 100.0 * dimension
    return value


def _resolve_clip(obj: BaseObject, size: Tuple[float, float]) -> BaseObject:
    clip = obj.clip
    update = {}
    for axis, index in CLIP_AXES.items():
        value = getattr(clip, axis)
        if is_percentage(value):
            update[axis] = resolve_percentage(value, size[index])
    if not update:
        return obj
    return obj.model_copy(update={"clip": clip.model_copy(update=update)})


def _resolve_tree(objects: Sequence[BaseObject], measurer: Optional[TextMeasurer]) -> List[BaseObject]:
    resolved: List[BaseObject] = []
    for obj in objects:
        if isinstance(obj, GroupObject):
            obj = obj.model_copy(update={"children": _resolve_tree(obj.children, measurer)})
        if obj.clip is not None:
            obj = _resolve_clip(obj, measure_object(obj, measurer))
        resolved.append(obj)
    return resolved


def resolve_percentages(
    objects: Sequence[BaseObject],
    animations: Sequence[PropertyAnimation],
    measurer: Optional[TextMeasurer] = None,
) -> Tuple[List[BaseObject], List[PropertyAnimation]]:
    """Replace ``"N%"`` clip values (static and animated) with pixels."""
    resolved_objects = _resolve_tree(objects, measurer)
    sizes: Dict[str, Tuple[float, float]] = {}

    resolved_animations: List[PropertyAnimation] = []
    for anim in animations:
        axis = anim.property[len("clip."):] if anim.property.startswith("clip.") else None
        if axis not in CLIP_AXES or not any(is_percentage(kf.value) for kf in anim.keyframes):
            resolved_animations.append(anim)
            continue
        if anim.target not in sizes:
            target = find_object(objects, anim.target)
            sizes[anim.target] = measure_object(target, measurer) if target else (DEFAULT_SIZE, DEFAULT_SIZE)
        size = sizes[anim.target]
        keyframes = [
            kf.model_copy(update={"value": resolve_percentage(kf.value, size[CLIP_AXES[axis]])})
            for kf in anim.keyframes
        ]
        logger.debug("Resolved percentage keyframes for %s.%s", anim.target, anim.property)
        resolved_animations.append(anim.model_copy(update={"keyframes": keyframes}))
    return resolved_objects, resolved_animations
