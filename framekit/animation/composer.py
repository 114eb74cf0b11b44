"""Frame composition: sampled values to an ordered draw list.

Each object contributes translate -> scale -> rotate onto its parent's
transform, multiplies the inherited opacity, and may add a clip rectangle
that also constrains its children. Siblings are painted by ascending ``z``;
ties keep declaration order.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from framekit.animation.sampler import TimelineSampler
from framekit.percentages import measure
from framekit.schemas import BaseObject, CompiledTimeline, GroupObject
from framekit.tools.text_metrics import TextMeasurer

CLIP_PREFIX = "clip."

ANCHOR_FACTORS: Dict[str, Tuple[float, float]] = {
    "top-left": (0.0, 0.0),
    "top-center": (0.5, 0.0),
    "top-right": (1.0, 0.0),
    "center-left": (0.0, 0.5),
    "center": (0.5, 0.5),
    "center-right": (1.0, 0.5),
    "bottom-left": (0.0, 1.0),
    "bottom-center": (0.5, 1.0),
    "bottom-right": (1.0, 1.0),
}


@dataclass(frozen=True)
class Affine:
    """2D affine matrix ``[a c e; b d f; 0 0 1]``."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def multiply(self, other: "Affine") -> "Affine":
        return Affine(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def translate(self, tx: float, ty: float) -> "Affine":
        return self.multiply(Affine(e=tx, f=ty))

    def scale(self, sx: float, sy: float) -> "Affine":
        return self.multiply(Affine(a=sx, d=sy))

    def rotate(self, degrees: float) -> "Affine":
        radians = math.radians(degrees)
        cos, sin = math.cos(radians), math.sin(radians)
        return self.multiply(Affine(a=cos, b=sin, c=-sin, d=cos))

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f

    def as_tuple(self) -> Tuple[float, float, float, float, float, float]:
        return self.a, self.b, self.c, self.d, self.e, self.f


IDENTITY = Affine()


@dataclass(frozen=True)
class ClipRect:
    """Clip rectangle expressed in the local space of ``transform``."""

    x: float
    y: float
    width: float
    height: float
    transform: Affine = IDENTITY


@dataclass(frozen=True)
class BlurLayer:
    """Offscreen surface an object is drawn into before blurring."""

    radius: float
    padding: int
    width: int
    height: int


@dataclass
class DrawItem:
    object_id: Optional[str]
    type: str
    props: Dict[str, Any]
    transform: Affine
    opacity: float
    size: Tuple[float, float]
    anchor_offset: Tuple[float, float]
    clips: Tuple[ClipRect, ...] = ()
    blur: Optional[BlurLayer] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.object_id,
            "type": self.type,
            "props": self.props,
            "transform": list(self.transform.as_tuple()),
            "opacity": self.opacity,
            "size": list(self.size),
            "anchorOffset": list(self.anchor_offset),
            "clips": [
                {"x": c.x, "y": c.y, "width": c.width, "height": c.height, "transform": list(c.transform.as_tuple())}
                for c in self.clips
            ],
            "blur": None
            if self.blur is None
            else {
                "radius": self.blur.radius,
                "padding": self.blur.padding,
                "width": self.blur.width,
                "height": self.blur.height,
            },
        }


def anchor_offset(anchor: Optional[str], width: float, height: float) -> Tuple[float, float]:
    fx, fy = ANCHOR_FACTORS.get(anchor or "top-left", (0.0, 0.0))
    return -fx * width, -fy * height


def blur_layer(radius: float, width: float, height: float) -> BlurLayer:
    padding = math.ceil(radius * 2)
    return BlurLayer(
        radius=radius,
        padding=padding,
        width=math.ceil(width + padding * 2),
        height=math.ceil(height + padding * 2),
    )


def merge_props(static: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Apply sampled overrides (``clip.width`` style keys included) to static props."""
    props = dict(static)
    clip = dict(props.get("clip") or {})
    clip_animated = False
    for key, value in overrides.items():
        if key.startswith(CLIP_PREFIX):
            clip[key[len(CLIP_PREFIX):]] = value
            clip_animated = True
        else:
            props[key] = value
    if clip_animated or clip:
        props["clip"] = clip
    return props


def is_visible(group: GroupObject, frame: float) -> bool:
    """Group time window: drawn from ``start`` through ``start + duration``."""
    if group.start is None:
        return True
    start = float(group.start)
    if frame < start:
        return False
    if group.duration is not None and frame > start + float(group.duration):
        return False
    return True


def z_order(objects: Sequence[BaseObject]) -> List[BaseObject]:
    return sorted(objects, key=lambda obj: obj.z or 0)


class FrameComposer:
    def __init__(
        self,
        timeline: CompiledTimeline,
        measurer: Optional[TextMeasurer] = None,
        sampler: Optional[TimelineSampler] = None,
    ):
        self.timeline = timeline
        self.measurer = measurer
        self.sampler = sampler if sampler is not None else TimelineSampler(timeline.animations)

    def compose(self, frame: float) -> List[DrawItem]:
        items: List[DrawItem] = []
        self._compose_level(self.timeline.objects, frame, IDENTITY, 1.0, (), items)
        return items

    def resolve_props(self, obj: BaseObject, frame: float) -> Dict[str, Any]:
        overrides = self.sampler.sample_target(obj.id, frame) if obj.id else {}
        return merge_props(obj.static_props(), overrides)

    def _compose_level(
        self,
        objects: Sequence[BaseObject],
        frame: float,
        parent: Affine,
        parent_opacity: float,
        parent_clips: Tuple[ClipRect, ...],
        items: List[DrawItem],
    ) -> None:
        for obj in z_order(objects):
            if isinstance(obj, GroupObject) and not is_visible(obj, frame):
                continue

            props = self.resolve_props(obj, frame)
            scale = props.get("scale", 1)
            scale_x = props.get("scaleX", 1)
            scale_y = props.get("scaleY", 1)
            if scale <= 0 or scale_x <= 0 or scale_y <= 0:
                continue

            transform = (
                parent.translate(props.get("x", 0), props.get("y", 0))
                .scale(scale * scale_x, scale * scale_y)
                .rotate(props.get("rotation", 0))
            )
            opacity = parent_opacity * props.get("opacity", 1)
            obj_type = getattr(obj, "type", "unknown")
            size = measure(obj_type, props, self.measurer)
            offset = anchor_offset(props.get("anchor"), *size)

            clips = parent_clips
            clip = props.get("clip")
            if clip:
                clips = clips + (
                    ClipRect(
                        x=clip.get("x", 0) + offset[0],
                        y=clip.get("y", 0) + offset[1],
                        width=clip.get("width", size[0]),
                        height=clip.get("height", size[1]),
                        transform=transform,
                    ),
                )

            if isinstance(obj, GroupObject):
                self._compose_level(obj.children, frame, transform, opacity, clips, items)
                continue

            blur = props.get("blur", 0)
            items.append(
                DrawItem(
                    object_id=obj.id,
                    type=obj_type,
                    props=props,
                    transform=transform,
                    opacity=opacity,
                    size=size,
                    anchor_offset=offset,
                    clips=clips,
                    blur=blur_layer(blur, *size) if blur and blur > 0 else None,
                )
            )
