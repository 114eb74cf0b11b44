import pytest

from framekit.effects import expand_effect
from framekit.schemas import AnimationFile, EffectAnimation
from framekit.tools.definition_store import BUNDLED_EFFECTS_DIR, EffectLibrary, EffectNotFoundError
from framekit.tools.effect_validator import EasingValidationError, EffectValueError

PROJECT = {"width": 1920, "height": 1080, "fps": 30, "frames": 90}


def _objects(raw):
    return AnimationFile.model_validate({"project": PROJECT, "objects": raw}).objects


def _track(tracks, prop):
    return next(track for track in tracks if track.property == prop)


def test_pop_expands_to_scale_and_opacity(library):
    tracks = expand_effect(EffectAnimation(target="box", effect="pop", start=0), 30, library=library)

    assert sorted(track.property for track in tracks) == ["opacity", "scale"]
    scale = _track(tracks, "scale")
    assert [kf.start for kf in scale.keyframes] == [0, 8, 12]
    assert [kf.value for kf in scale.keyframes] == [0, 1.15, 1.0]
    assert scale.keyframes[1].easing == "ease-out"
    opacity = _track(tracks, "opacity")
    assert [kf.start for kf in opacity.keyframes] == [0, 6]
    assert all(track.target == "box" for track in tracks)


def test_expansion_is_repeatable(library):
    anim = EffectAnimation(target="box", effect="pop", start="1s")

    first = expand_effect(anim, 30, library=library)
    second = expand_effect(anim, 30, library=library)

    assert [t.to_dict() for t in first] == [t.to_dict() for t in second]
    assert _track(first, "scale").keyframes[0].start == 30


def test_duration_override(library):
    anim = EffectAnimation(target="box", effect="fadeIn", start=10, duration="1s")

    (opacity,) = expand_effect(anim, 30, library=library)

    assert [kf.start for kf in opacity.keyframes] == [10, 40]


def test_tokens_take_target_static_values(library):
    objects = _objects([{"type": "text", "id": "title", "content": "Hi", "x": 150, "opacity": 0.8}])

    tracks = expand_effect(EffectAnimation(target="title", effect="slideInRight"), 60, objects, library)

    x = _track(tracks, "x")
    assert [kf.value for kf in x.keyframes] == [2880, 150]
    assert _track(tracks, "opacity").keyframes[-1].value == 0.8


def test_tokens_default_when_target_missing(library):
    tracks = expand_effect(EffectAnimation(target="ghost", effect="slideInRight"), 60, [], library)

    assert _track(tracks, "x").keyframes[-1].value == 0.0
    assert _track(tracks, "opacity").keyframes[-1].value == 1.0


def test_percentage_values_are_kept_for_later_resolution(library):
    (clip,) = expand_effect(EffectAnimation(target="box", effect="wipe"), 30, library=library)

    assert clip.property == "clip.width"
    assert [kf.value for kf in clip.keyframes] == [0, "100%"]
    assert [kf.start for kf in clip.keyframes] == [0, 30]


def test_unknown_effect(library):
    with pytest.raises(EffectNotFoundError, match="Effect 'nope' not found in effects library. Available effects: .*fadeIn"):
        expand_effect(EffectAnimation(target="box", effect="nope"), 30, library=library)


def test_quoted_number_rejected():
    library = EffectLibrary(search_dirs=[])
    library.register("broken", {"duration": 1, "properties": {"x": [{"time": 0, "value": "200"}]}})

    with pytest.raises(EffectValueError, match="Use a number instead"):
        expand_effect(EffectAnimation(target="box", effect="broken"), 30, library=library)


def test_invalid_easing_in_effect():
    library = EffectLibrary(search_dirs=[])
    library.register(
        "wobbly",
        {"duration": 1, "properties": {"x": [{"time": 0, "value": 0}, {"time": 1, "value": 5, "easing": "wobble"}]}},
    )

    with pytest.raises(EasingValidationError, match="effect 'wobbly', property 'x', keyframe 1"):
        expand_effect(EffectAnimation(target="box", effect="wobbly"), 30, library=library)


def test_search_dirs_take_precedence(tmp_path, write_json):
    write_json(
        "fadeIn.json",
        {"duration": 2, "properties": {"opacity": [{"time": 0, "value": 0}, {"time": 1, "value": 1}]}},
    )
    library = EffectLibrary(search_dirs=[tmp_path, BUNDLED_EFFECTS_DIR])

    (opacity,) = expand_effect(EffectAnimation(target="box", effect="fadeIn"), 30, library=library)

    assert opacity.keyframes[-1].start == 60
    assert "pop" in library.names()


def test_library_caches_by_name(library):
    first = library.get("fadeOut")
    assert library.get("fadeOut") is first
    library.clear()
    assert library.get("fadeOut") is not first


def test_names_list_registered_and_bundled(library):
    library.register("spin", {"duration": 1, "properties": {"rotation": [{"time": 0, "value": 0}]}})
    names = library.names()
    assert "spin" in names
    assert {"fadeIn", "fadeOut", "pop", "slideInLeft", "slideInRight", "slideUp", "wipe"} <= set(names)
    assert names == sorted(names)
