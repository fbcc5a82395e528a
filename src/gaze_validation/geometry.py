"""
Vector helpers used to turn gaze vectors into angles.

All functions are pure and operate on the immutable Point3D and
NormalizedPoint2D models. Angles are returned in degrees.
"""
import math
from typing import Sequence

from .errors import DegenerateVectorError, InsufficientDataError
from .models.gaze import DisplayArea, NormalizedPoint2D, Point3D


def magnitude(vec: Point3D | NormalizedPoint2D) -> float:
    return math.sqrt(sum(c * c for c in vec))


def add(a: Point3D, b: Point3D) -> Point3D:
    return Point3D(a.x + b.x, a.y + b.y, a.z + b.z)


def sub(a: Point3D, b: Point3D) -> Point3D:
    return Point3D(a.x - b.x, a.y - b.y, a.z - b.z)


def mul(vec: Point3D, factor: float) -> Point3D:
    return Point3D(vec.x * factor, vec.y * factor, vec.z * factor)


def div(vec: Point3D, divisor: float) -> Point3D:
    return Point3D(vec.x / divisor, vec.y / divisor, vec.z / divisor)


def normalize(vec: Point3D) -> Point3D:
    """Returns the unit vector of `vec`. Raises DegenerateVectorError for a zero vector."""
    mag = magnitude(vec)
    if mag == 0.0:
        raise DegenerateVectorError(f"Cannot normalize zero-length vector {vec}.")
    return div(vec, mag)


def direction(start: Point3D, end: Point3D) -> Point3D:
    return sub(end, start)


def normalized_direction(start: Point3D, end: Point3D) -> Point3D:
    return normalize(direction(start, end))


def dot(a: Point3D, b: Point3D) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross(a: Point3D, b: Point3D) -> Point3D:
    return Point3D(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


def clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def angle(a: Point3D, b: Point3D) -> float:
    """
    Angle between two vectors in degrees, in the range [0, 180].

    The cosine is clamped to [-1, 1] so that rounding errors on (anti)parallel
    vectors never produce NaN.
    """
    cos = dot(a, b) / (magnitude(a) * magnitude(b))
    return (math.degrees(math.acos(clamp(cos))) + 360.0) % 360.0


def average(points: Sequence[Point3D]) -> Point3D:
    """Component-wise arithmetic mean."""
    if not points:
        raise InsufficientDataError("Cannot average an empty set of points.")
    n = len(points)
    return Point3D(
        sum(p.x for p in points) / n,
        sum(p.y for p in points) / n,
        sum(p.z for p in points) / n,
    )


def to_point3d(point: NormalizedPoint2D, display_area: DisplayArea) -> Point3D:
    """Projects a normalized display coordinate onto the physical display."""
    dx = mul(sub(display_area.top_right, display_area.top_left), point.x)
    dy = mul(sub(display_area.bottom_left, display_area.top_left), point.y)
    return add(display_area.top_left, add(dx, dy))
