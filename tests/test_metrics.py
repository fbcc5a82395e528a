import math

import pytest

from gaze_validation.errors import InsufficientDataError
from gaze_validation.models import NormalizedPoint2D, OutputMode
from gaze_validation.trackers import DummyGazeStream
from gaze_validation.validation import metrics

from .conftest import make_sample

CENTER = NormalizedPoint2D(0.5, 0.5)


def test_identical_samples_on_target(display_area):
    samples = [make_sample(gaze_origin=(0.0, 0.0, -100.0), gaze_point=(0.0, 0.0, 0.0))] * 3

    result = metrics.compute([(CENTER, samples)], 3, display_area)

    point, = result.points
    assert not point.timed_out
    assert point.accuracy_left_eye == pytest.approx(0.0, abs=1e-6)
    assert point.accuracy_right_eye == pytest.approx(0.0, abs=1e-6)
    assert point.precision_left_eye == pytest.approx(0.0, abs=1e-6)
    assert point.precision_right_eye == pytest.approx(0.0, abs=1e-6)
    assert point.precision_rms_left_eye == pytest.approx(0.0, abs=1e-6)
    assert point.precision_rms_right_eye == pytest.approx(0.0, abs=1e-6)
    assert point.gaze_data == tuple(samples)


def test_accuracy_known_offset(display_area):
    # Eyes 600 mm in front of the display center, target 1 degree to the right.
    offset_mm = 600.0 * math.tan(math.radians(1.0))
    target = NormalizedPoint2D(0.5 + offset_mm / 600.0, 0.5)
    samples = [make_sample(gaze_origin=(0.0, 0.0, 600.0), gaze_point=(0.0, 0.0, 0.0))] * 10

    point = metrics.compute_point(target, samples, 10, display_area)

    assert point.accuracy_left_eye == pytest.approx(1.0)
    assert point.accuracy_right_eye == pytest.approx(1.0)


def test_eyes_are_computed_independently(display_area):
    samples = [
        make_sample(
            gaze_origin=(0.0, 0.0, 600.0),
            gaze_point=(0.0, 0.0, 0.0),
            right_gaze_point=(600.0 * math.tan(math.radians(2.0)), 0.0, 0.0),
        )
    ] * 10

    point = metrics.compute_point(CENTER, samples, 10, display_area)

    assert point.accuracy_left_eye == pytest.approx(0.0, abs=1e-6)
    assert point.accuracy_right_eye == pytest.approx(2.0)


def test_precision_of_alternating_samples(display_area):
    # Gaze alternates between two points symmetric around the target.
    d = 10.0
    half_angle = math.degrees(math.atan(d / 600.0))
    samples = [
        make_sample(gaze_origin=(0.0, 0.0, 600.0), gaze_point=(d if i % 2 else -d, 0.0, 0.0))
        for i in range(10)
    ]

    point = metrics.compute_point(CENTER, samples, 10, display_area)

    assert point.accuracy_left_eye == pytest.approx(0.0, abs=1e-6)
    assert point.precision_left_eye == pytest.approx(half_angle)
    assert point.precision_rms_left_eye == pytest.approx(2 * half_angle)


def test_precision_is_never_negative(display_area):
    dummy = DummyGazeStream(display_area, noise_mm=5.0, seed=7, autostart=False)
    dummy.look_at(0.3, 0.6)
    samples = [dummy.generate_sample() for _ in range(30)]

    point = metrics.compute_point(NormalizedPoint2D(0.3, 0.6), samples, 30, display_area)

    assert point.precision_left_eye >= 0.0
    assert point.precision_right_eye >= 0.0
    assert point.precision_rms_left_eye >= 0.0
    assert point.precision_rms_right_eye >= 0.0
    assert point.accuracy_left_eye < 1.0


@pytest.mark.parametrize("n", [0, 1])
def test_precision_rms_needs_two_samples(n):
    with pytest.raises(InsufficientDataError):
        metrics.precision_rms([make_sample()] * n, metrics.left_eye)


def test_short_buffer_is_reported_as_timed_out(display_area):
    samples = [make_sample()] * 4

    point = metrics.compute_point(CENTER, samples, 10, display_area)

    assert point.timed_out
    assert point.gaze_data == tuple(samples)
    assert math.isnan(point.accuracy_left_eye)
    assert math.isnan(point.precision_rms_right_eye)


def test_averages_skip_timed_out_points(display_area):
    offset_mm = 600.0 * math.tan(math.radians(1.0))
    on_target = [make_sample(gaze_origin=(0.0, 0.0, 600.0), gaze_point=(0.0, 0.0, 0.0))] * 10
    off_target = [make_sample(gaze_origin=(0.0, 0.0, 600.0), gaze_point=(offset_mm, 0.0, 0.0))] * 10

    result = metrics.compute(
        [(CENTER, on_target), (NormalizedPoint2D(0.1, 0.1), []), (CENTER, off_target)],
        10,
        display_area,
    )

    assert [p.timed_out for p in result.points] == [False, True, False]
    assert result.average_accuracy_left_eye == pytest.approx(0.5)
    assert result.average_accuracy_right_eye == pytest.approx(0.5)
    assert result.average_precision_left_eye == pytest.approx(0.0, abs=1e-6)


def test_all_points_timed_out_gives_nan_averages(display_area):
    result = metrics.compute([(CENTER, []), (CENTER, [make_sample()])], 10, display_area)

    assert len(result.points) == 2
    assert not result.is_valid
    for value in (
        result.average_accuracy_left_eye,
        result.average_precision_right_eye,
        result.average_precision_rms_left_eye,
    ):
        assert math.isnan(value)


def test_empty_session(display_area):
    result = metrics.compute([], 10, display_area, OutputMode.COMBINED)
    assert result.points == ()
    assert result.mode is OutputMode.COMBINED
    assert math.isnan(result.average_accuracy)
