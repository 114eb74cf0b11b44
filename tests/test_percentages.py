import pytest

from framekit.percentages import measure, measure_object, resolve_percentages
from framekit.schemas import AnimationFile, PropertyAnimation


def _objects(raw):
    return AnimationFile.model_validate(
        {"project": {"width": 100, "height": 100, "fps": 30, "frames": 10}, "objects": raw}
    ).objects


def _clip_track(target, prop, values):
    return PropertyAnimation(
        target=target,
        property=prop,
        keyframes=[{"start": index * 10, "value": value} for index, value in enumerate(values)],
    )


def test_measure_shapes(measurer):
    rect, circle, ellipse, text, image = _objects(
        [
            {"type": "rect", "id": "r", "width": 200, "height": 50},
            {"type": "circle", "id": "c", "radius": 30},
            {"type": "ellipse", "id": "e", "radiusX": 40, "radiusY": 10},
            {"type": "text", "id": "t", "content": "abcd", "size": 20},
            {"type": "image", "id": "i", "source": "logo.png"},
        ]
    )
    assert measure_object(rect, measurer) == (200, 50)
    assert measure_object(circle, measurer) == (60, 60)
    assert measure_object(ellipse, measurer) == (80, 20)
    assert measure_object(text, measurer) == (40, pytest.approx(24))
    assert measure_object(image, measurer) == (100, 100)


def test_text_uses_default_size(measurer):
    width, height = measure("text", {"content": "ab"}, measurer)
    assert width == 16
    assert height == pytest.approx(19.2)


def test_static_clip_percentages(measurer):
    objects = _objects(
        [
            {
                "type": "rect",
                "id": "r",
                "width": 200,
                "height": 100,
                "clip": {"x": "10%", "y": "50%", "width": "50%", "height": 100},
            }
        ]
    )

    resolved, _ = resolve_percentages(objects, [], measurer)

    clip = resolved[0].clip
    assert (clip.x, clip.y, clip.width, clip.height) == (20, 50, 100, 100)
    assert objects[0].clip.x == "10%"


def test_clip_in_group_children(measurer):
    objects = _objects(
        [
            {
                "type": "group",
                "id": "g",
                "children": [{"type": "circle", "id": "g.c", "radius": 25, "clip": {"height": "40%"}}],
            }
        ]
    )

    resolved, _ = resolve_percentages(objects, [], measurer)

    assert resolved[0].children[0].clip.height == 20


def test_animated_clip_percentages(measurer):
    objects = _objects([{"type": "text", "id": "t", "content": "abcdefghij", "size": 20}])
    animations = [
        _clip_track("t", "clip.width", [0, "100%"]),
        _clip_track("t", "clip.height", ["50%", 12]),
        _clip_track("t", "x", [0, 10]),
    ]

    _, (width, height, x) = resolve_percentages(objects, animations, measurer)

    assert [kf.value for kf in width.keyframes] == [0, 100]
    assert [kf.value for kf in height.keyframes] == [pytest.approx(12), 12]
    assert x is animations[2]


def test_percentages_use_static_width(measurer):
    objects = _objects([{"type": "rect", "id": "r", "width": 80, "height": 10}])
    animations = [
        _clip_track("r", "width", [80, 400]),
        _clip_track("r", "clip.width", ["0%", "100%"]),
    ]

    _, (_, clip) = resolve_percentages(objects, animations, measurer)

    assert clip.keyframes[-1].value == 80
