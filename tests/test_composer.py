import math

import pytest

from framekit.animation.composer import Affine, FrameComposer, anchor_offset, blur_layer
from framekit.schemas import CompiledTimeline

PROJECT = {"width": 640, "height": 360, "fps": 30, "frames": 60}


def _timeline(objects, animations=()):
    return CompiledTimeline.model_validate({"project": PROJECT, "objects": objects, "animations": list(animations)})


def _rect(rect_id, **extra):
    return {"type": "rect", "id": rect_id, "width": 100, "height": 50, **extra}


def _compose(timeline, frame=0, measurer=None):
    return FrameComposer(timeline, measurer).compose(frame)


def test_translate_scale_rotate_order():
    (item,) = _compose(_timeline([_rect("r", x=10, y=20, scale=2, scaleX=1.5, rotation=90)]))

    a, b, c, d, e, f = item.transform.as_tuple()
    assert (e, f) == (10, 20)
    assert a == pytest.approx(0, abs=1e-9)
    assert b == pytest.approx(2)
    assert c == pytest.approx(-3)
    assert d == pytest.approx(0, abs=1e-9)


def test_group_transform_and_opacity_compose():
    timeline = _timeline(
        [{"type": "group", "id": "g", "x": 100, "opacity": 0.5, "children": [_rect("g.r", x=10, opacity=0.5)]}]
    )

    (item,) = _compose(timeline)

    assert item.object_id == "g.r"
    assert item.transform.apply(0, 0) == (110, 0)
    assert item.opacity == pytest.approx(0.25)


def test_non_positive_scale_skips_subtree():
    timeline = _timeline(
        [
            _rect("hidden", scaleY=0),
            {"type": "group", "id": "g", "scale": 0, "children": [_rect("g.r")]},
            _rect("shown"),
        ]
    )

    assert [item.object_id for item in _compose(timeline)] == ["shown"]


def test_z_order_is_stable():
    timeline = _timeline([_rect("a", z=1), _rect("b"), _rect("c", z=0), _rect("d", z=-1)])

    assert [item.object_id for item in _compose(timeline)] == ["d", "b", "c", "a"]


def test_z_order_within_groups():
    timeline = _timeline(
        [
            {"type": "group", "id": "g", "z": 5, "children": [_rect("g.top", z=2), _rect("g.bottom")]},
            _rect("under"),
        ]
    )

    assert [item.object_id for item in _compose(timeline)] == ["under", "g.bottom", "g.top"]


def test_anchor_offsets():
    assert anchor_offset(None, 100, 50) == (0, 0)
    assert anchor_offset("center", 100, 50) == (-50, -25)
    assert anchor_offset("bottom-right", 100, 50) == (-100, -50)
    assert anchor_offset("top-center", 100, 50) == (-50, 0)


def test_clip_defaults_and_anchor():
    timeline = _timeline([_rect("r", anchor="center", clip={"x": 10})])

    (item,) = _compose(timeline)

    (clip,) = item.clips
    assert (clip.x, clip.y, clip.width, clip.height) == (-40, -25, 100, 50)
    assert clip.transform == item.transform


def test_animated_clip_width():
    timeline = _timeline(
        [_rect("r")],
        [
            {
                "target": "r",
                "property": "clip.width",
                "keyframes": [{"start": 0, "value": 0}, {"start": 30, "value": 100}],
            }
        ],
    )

    (item,) = _compose(timeline, 15)

    (clip,) = item.clips
    assert clip.width == pytest.approx(50)
    assert clip.height == 50


def test_group_clip_applies_to_children():
    timeline = _timeline([{"type": "group", "id": "g", "clip": {"width": 20, "height": 20}, "children": [_rect("g.r")]}])

    (item,) = _compose(timeline)

    assert len(item.clips) == 1
    assert item.clips[0].width == 20


def test_blur_layer_padding():
    layer = blur_layer(3, 100, 50)
    assert (layer.padding, layer.width, layer.height) == (6, 112, 62)
    assert blur_layer(1.3, 10.5, 10).padding == 3
    assert blur_layer(1.3, 10.5, 10).width == 17


def test_blur_only_when_positive():
    first, second = _compose(_timeline([_rect("a", blur=4), _rect("b", blur=0)]))
    assert first.blur is not None and first.blur.radius == 4
    assert second.blur is None


def test_group_visibility_window():
    timeline = _timeline([{"type": "group", "id": "g", "start": 10, "duration": 5, "children": [_rect("g.r")]}])
    composer = FrameComposer(timeline)

    visible = [frame for frame in range(20) if composer.compose(frame)]

    assert visible == list(range(10, 16))


def test_text_size_uses_measurer(measurer):
    timeline = _timeline([{"type": "text", "id": "t", "content": "abcd", "size": 10, "anchor": "center"}])

    (item,) = _compose(timeline, measurer=measurer)

    assert item.size == (20, pytest.approx(12))
    assert item.anchor_offset == (-10, pytest.approx(-6))


def test_animated_properties_override_static():
    timeline = _timeline(
        [_rect("r", x=5, fill="#000000")],
        [
            {"target": "r", "property": "x", "keyframes": [{"start": 0, "value": 0}, {"start": 10, "value": 100}]},
            {"target": "r", "property": "width", "keyframes": [{"start": 0, "value": 300}]},
        ],
    )

    (item,) = _compose(timeline, 5)

    assert item.props["x"] == pytest.approx(50)
    assert item.props["fill"] == "#000000"
    assert item.size == (300, 50)


def test_affine_rotation_maps_points():
    point = Affine().rotate(90).apply(1, 0)
    assert point[0] == pytest.approx(0, abs=1e-9)
    assert point[1] == pytest.approx(1)
    assert math.isclose(Affine().translate(3, 4).scale(2, 2).apply(1, 1)[0], 5)
