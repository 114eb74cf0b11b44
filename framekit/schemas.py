"""Pydantic schemas for animation documents and compiled timelines.

Attributes are snake_case in Python and camelCase on the wire
(``scale_x`` <-> ``scaleX``). Type-specific fields are optional here;
required-field checks live in :mod:`framekit.tools.object_validator` so
authors get a message naming the object.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TimeValue = Union[int, float, str]
Number = Union[int, float]

AnchorType = Literal[
    "top-left",
    "top-center",
    "top-right",
    "center-left",
    "center",
    "center-right",
    "bottom-left",
    "bottom-center",
    "bottom-right",
]

# Keys that are structure rather than drawable state.
STRUCTURAL_KEYS = {"children", "animations", "resolved_animations", "commands"}


class FramekitModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Keyframes and animations
# ---------------------------------------------------------------------------


class Keyframe(FramekitModel):
    start: TimeValue
    value: Union[int, float, str]
    easing: Optional[Any] = None


class PropertyAnimation(FramekitModel):
    target: str
    property: str
    keyframes: List[Keyframe]


class EffectAnimation(FramekitModel):
    target: str
    effect: str
    start: TimeValue = 0
    duration: Optional[TimeValue] = None


AnimationEntry = Union[PropertyAnimation, EffectAnimation]


class TimeKeyframe(FramekitModel):
    time: float  # 0.0 .. 1.0 of the effect duration
    value: Any
    easing: Optional[Any] = None


class EffectDefinition(FramekitModel):
    description: Optional[str] = None
    duration: float  # seconds
    properties: Dict[str, List[TimeKeyframe]] = Field(default_factory=dict)


class Transition(FramekitModel):
    effect: str
    duration: Optional[TimeValue] = None


class GroupTransition(FramekitModel):
    in_: Optional[Transition] = Field(default=None, alias="in")
    out: Optional[Transition] = None


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------


class ClipRegion(FramekitModel):
    """Clip rectangle in local space; values are pixels or ``"N%"`` strings."""

    x: Optional[Union[int, float, str]] = None
    y: Optional[Union[int, float, str]] = None
    width: Optional[Union[int, float, str]] = None
    height: Optional[Union[int, float, str]] = None


class BaseObject(FramekitModel):
    id: Optional[str] = None
    x: Optional[Number] = None
    y: Optional[Number] = None
    rotation: Optional[Number] = None
    opacity: Optional[Number] = None
    scale: Optional[Number] = None
    scale_x: Optional[Number] = None
    scale_y: Optional[Number] = None
    z: Optional[Number] = None
    anchor: Optional[AnchorType] = None
    clip: Optional[ClipRegion] = None
    blur: Optional[Number] = None

    def static_props(self) -> Dict[str, Any]:
        """Declared (un-animated) drawable properties keyed by wire name."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=STRUCTURAL_KEYS)


class TextObject(BaseObject):
    type: Literal["text"] = "text"
    content: Optional[str] = None
    font: Optional[str] = None
    size: Optional[Number] = None
    color: Optional[str] = None
    align: Optional[Literal["left", "center", "right"]] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None


class ImageObject(BaseObject):
    type: Literal["image"] = "image"
    source: Optional[str] = None
    width: Optional[Number] = None
    height: Optional[Number] = None


class RectObject(BaseObject):
    type: Literal["rect"] = "rect"
    width: Optional[Number] = None
    height: Optional[Number] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None


class LineObject(BaseObject):
    type: Literal["line"] = "line"
    x2: Optional[Number] = None
    y2: Optional[Number] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None


class PointObject(BaseObject):
    type: Literal["point"] = "point"
    radius: Optional[Number] = None
    fill: Optional[str] = None


class CircleObject(BaseObject):
    type: Literal["circle"] = "circle"
    radius: Optional[Number] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None


class EllipseObject(BaseObject):
    type: Literal["ellipse"] = "ellipse"
    radius_x: Optional[Number] = None
    radius_y: Optional[Number] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None


class MoveToCommand(FramekitModel):
    type: Literal["moveTo"] = "moveTo"
    x: float
    y: float


class LineToCommand(FramekitModel):
    type: Literal["lineTo"] = "lineTo"
    x: float
    y: float


class ClosePathCommand(FramekitModel):
    type: Literal["closePath"] = "closePath"


class QuadraticCurveToCommand(FramekitModel):
    type: Literal["quadraticCurveTo"] = "quadraticCurveTo"
    cpx: float
    cpy: float
    x: float
    y: float


class BezierCurveToCommand(FramekitModel):
    type: Literal["bezierCurveTo"] = "bezierCurveTo"
    cp1x: float
    cp1y: float
    cp2x: float
    cp2y: float
    x: float
    y: float


class ArcCommand(FramekitModel):
    type: Literal["arc"] = "arc"
    x: float
    y: float
    radius: float
    start_angle: float
    end_angle: float
    counterclockwise: Optional[bool] = None


class ArcToCommand(FramekitModel):
    type: Literal["arcTo"] = "arcTo"
    x1: float
    y1: float
    x2: float
    y2: float
    radius: float


PathCommand = Annotated[
    Union[
        MoveToCommand,
        LineToCommand,
        ClosePathCommand,
        QuadraticCurveToCommand,
        BezierCurveToCommand,
        ArcCommand,
        ArcToCommand,
    ],
    Field(discriminator="type"),
]


class PathObject(BaseObject):
    type: Literal["path"] = "path"
    commands: List[PathCommand] = Field(default_factory=list)
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None


class GroupObject(BaseObject):
    type: Literal["group"] = "group"
    children: List["AnimationObject"] = Field(default_factory=list)
    start: Optional[TimeValue] = None
    duration: Optional[TimeValue] = None
    animation_speed: Optional[float] = None
    animations: List[AnimationEntry] = Field(default_factory=list)
    transition: Optional[GroupTransition] = None
    # Set on groups produced from component/scene references.
    expanded_from: Optional[str] = None
    resolved_animations: List[AnimationEntry] = Field(default_factory=list)


class ComponentObject(BaseObject):
    type: Literal["component"] = "component"
    source: Optional[str] = None
    start: Optional[TimeValue] = None
    duration: Optional[TimeValue] = None
    params: Dict[str, Any] = Field(default_factory=dict)
    transition: Optional[GroupTransition] = None


class SceneObject(BaseObject):
    type: Literal["scene"] = "scene"
    source: Optional[str] = None
    start: Optional[TimeValue] = None
    duration: Optional[TimeValue] = None
    transition: Optional[GroupTransition] = None


AnimationObject = Annotated[
    Union[
        TextObject,
        ImageObject,
        RectObject,
        LineObject,
        PointObject,
        CircleObject,
        EllipseObject,
        PathObject,
        GroupObject,
        ComponentObject,
        SceneObject,
    ],
    Field(discriminator="type"),
]

ReferenceObject = Union[ComponentObject, SceneObject]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class ComponentParameter(FramekitModel):
    type: Optional[Literal["string", "number", "boolean"]] = None
    default: Any = None


class ComponentDefinition(FramekitModel):
    parameters: Dict[str, ComponentParameter] = Field(default_factory=dict)
    objects: List[AnimationObject] = Field(default_factory=list)
    animations: List[AnimationEntry] = Field(default_factory=list)
    width: Optional[Number] = None
    height: Optional[Number] = None


class SceneFile(FramekitModel):
    duration: Optional[TimeValue] = None
    objects: List[AnimationObject] = Field(default_factory=list)
    animations: List[AnimationEntry] = Field(default_factory=list)


class ProjectConfig(FramekitModel):
    width: int
    height: int
    fps: float = Field(gt=0)
    frames: int = Field(ge=0)


class AnimationFile(FramekitModel):
    project: ProjectConfig
    animation_speed: Optional[float] = None
    objects: List[AnimationObject] = Field(default_factory=list)
    animations: List[AnimationEntry] = Field(default_factory=list)


class CompiledTimeline(FramekitModel):
    """Flat, namespaced, frame-absolute result of compilation."""

    project: ProjectConfig
    objects: List[AnimationObject] = Field(default_factory=list)
    animations: List[PropertyAnimation] = Field(default_factory=list)

    def targets(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for anim in self.animations:
            counts[anim.target] = counts.get(anim.target, 0) + 1
        return counts


GroupObject.model_rebuild()
ComponentDefinition.model_rebuild()
SceneFile.model_rebuild()
AnimationFile.model_rebuild()
CompiledTimeline.model_rebuild()
