import math

import pytest

from gaze_validation import geometry
from gaze_validation.errors import DegenerateVectorError, InsufficientDataError
from gaze_validation.models import DisplayArea, NormalizedPoint2D, Point3D


def test_magnitude():
    assert geometry.magnitude(Point3D(3.0, 4.0, 12.0)) == pytest.approx(13.0)
    assert geometry.magnitude(NormalizedPoint2D(0.6, 0.8)) == pytest.approx(1.0)


def test_vector_arithmetic():
    a, b = Point3D(1.0, 2.0, 3.0), Point3D(4.0, 5.0, 6.0)
    assert geometry.add(a, b) == Point3D(5.0, 7.0, 9.0)
    assert geometry.sub(b, a) == Point3D(3.0, 3.0, 3.0)
    assert geometry.mul(a, 2.0) == Point3D(2.0, 4.0, 6.0)
    assert geometry.div(b, 2.0) == Point3D(2.0, 2.5, 3.0)
    assert geometry.dot(a, b) == pytest.approx(32.0)
    assert geometry.direction(a, b) == Point3D(3.0, 3.0, 3.0)


def test_normalize_returns_unit_vector():
    unit = geometry.normalized_direction(Point3D(1.0, 1.0, 1.0), Point3D(4.0, 5.0, 1.0))
    assert geometry.magnitude(unit) == pytest.approx(1.0)
    assert unit == Point3D(pytest.approx(0.6), pytest.approx(0.8), pytest.approx(0.0))


def test_normalize_zero_vector_raises():
    with pytest.raises(DegenerateVectorError):
        geometry.normalize(Point3D(0.0, 0.0, 0.0))

    # Also usable as a plain ZeroDivisionError.
    with pytest.raises(ZeroDivisionError):
        geometry.normalized_direction(Point3D(1.0, 2.0, 3.0), Point3D(1.0, 2.0, 3.0))


@pytest.mark.parametrize("u", [
    Point3D(1.0, 0.0, 0.0),
    Point3D(1.0, 2.0, 3.0),
    Point3D(-0.3, 1e-3, 250.0),
])
def test_angle_with_itself_and_opposite(u):
    assert geometry.angle(u, u) == pytest.approx(0.0, abs=1e-5)
    assert geometry.angle(u, geometry.mul(u, -1.0)) == pytest.approx(180.0)


def test_angle_is_clamped_for_parallel_vectors():
    # Rounding pushes the cosine slightly above 1 for these.
    u = Point3D(0.1, 0.2, 0.3)
    v = geometry.mul(u, 3.0)
    assert not math.isnan(geometry.angle(u, v))


def test_angle_right_angle():
    assert geometry.angle(Point3D(1.0, 0.0, 0.0), Point3D(0.0, 0.0, 5.0)) == pytest.approx(90.0)


def test_clamp():
    assert geometry.clamp(1.0000001) == 1.0
    assert geometry.clamp(-3.0) == -1.0
    assert geometry.clamp(0.25) == 0.25


def test_cross():
    assert geometry.cross(Point3D(1.0, 0.0, 0.0), Point3D(0.0, 1.0, 0.0)) == Point3D(0.0, 0.0, 1.0)


def test_average():
    points = [Point3D(0.0, 0.0, 0.0), Point3D(2.0, 4.0, 6.0), Point3D(4.0, 8.0, 12.0)]
    assert geometry.average(points) == Point3D(2.0, 4.0, 6.0)

    with pytest.raises(InsufficientDataError):
        geometry.average([])


def test_to_point3d_bilinear(display_area):
    assert geometry.to_point3d(NormalizedPoint2D(0.5, 0.5), display_area) == Point3D(0.0, 0.0, 0.0)
    assert geometry.to_point3d(NormalizedPoint2D(0.0, 0.0), display_area) == display_area.top_left
    assert geometry.to_point3d(NormalizedPoint2D(1.0, 0.0), display_area) == display_area.top_right
    assert geometry.to_point3d(NormalizedPoint2D(0.0, 1.0), display_area) == display_area.bottom_left
    assert geometry.to_point3d(NormalizedPoint2D(1.0, 1.0), display_area) == display_area.bottom_right


def test_to_point3d_tilted_display():
    area = DisplayArea.from_corners(
        top_left=(-100.0, 200.0, 50.0),
        top_right=(100.0, 200.0, 50.0),
        bottom_left=(-100.0, 0.0, 0.0),
    )
    assert geometry.to_point3d(NormalizedPoint2D(0.25, 0.5), area) == Point3D(-50.0, 100.0, 25.0)
