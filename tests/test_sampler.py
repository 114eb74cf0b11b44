import pytest

from framekit.animation.sampler import TimelineSampler, sample_keyframes
from framekit.schemas import Keyframe, PropertyAnimation


def _kfs(*points):
    return [Keyframe(start=start, value=value, easing=easing) for start, value, easing in points]


def test_linear_interpolation():
    keyframes = _kfs((0, 0, None), (30, 100, None))
    assert sample_keyframes(keyframes, 15) == pytest.approx(50)
    assert sample_keyframes(keyframes, 3) == pytest.approx(10)


def test_holds_before_and_after():
    keyframes = _kfs((10, 5, None), (20, 15, None))
    assert sample_keyframes(keyframes, 0) == 5
    assert sample_keyframes(keyframes, 99) == 15


def test_exact_keyframe_frame():
    keyframes = _kfs((0, 0, None), (10, 40, "ease-in"), (20, 0, None))
    assert sample_keyframes(keyframes, 10) == 40


def test_easing_of_approached_keyframe():
    keyframes = _kfs((0, 0, "bounce"), (10, 100, "ease-in"))
    assert sample_keyframes(keyframes, 5) == pytest.approx(25)


def test_overshoot_bezier_exceeds_target():
    keyframes = _kfs((0, 0, None), (30, 100, "cubic-bezier(0.34, 1.56, 0.64, 1)"))
    values = [sample_keyframes(keyframes, frame) for frame in range(31)]
    assert max(values) > 100
    assert values[-1] == 100


def test_non_numeric_values_step():
    keyframes = _kfs((0, "#ff0000", None), (10, "#0000ff", None))
    assert sample_keyframes(keyframes, 5) == "#ff0000"
    assert sample_keyframes(keyframes, 10) == "#0000ff"


def test_empty_track():
    assert sample_keyframes([], 3) is None


def test_sampler_merges_tracks_by_start():
    fade_out = PropertyAnimation(
        target="box", property="opacity", keyframes=_kfs((60, 1, None), (75, 0, "ease-in"))
    )
    fade_in = PropertyAnimation(target="box", property="opacity", keyframes=_kfs((0, 0, None), (15, 1, None)))

    sampler = TimelineSampler([fade_out, fade_in])

    track = sampler.tracks_for("box")["opacity"]
    assert [kf.start for kf in track] == [0, 15, 60, 75]
    assert sampler.sample_property("box", "opacity", 30) == 1
    assert sampler.sample_property("box", "opacity", 80) == 0


def test_sample_target_only_returns_animated_properties():
    sampler = TimelineSampler(
        [PropertyAnimation(target="box", property="x", keyframes=_kfs((0, 0, None), (10, 10, None)))]
    )

    assert sampler.sample_target("box", 5) == {"x": pytest.approx(5)}
    assert sampler.sample_target("other", 5) == {}
    assert sampler.sample_property("box", "y", 5) is None
    assert sampler.targets() == ["box"]
