from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(slots=True, frozen=True)
class NormalizedPoint2D:
    """
    A point in the Active Display Coordinate System.

    (0, 0) is the top-left corner of the display area and (1, 1) the
    bottom-right one. Instances are compared and hashed by value so they can
    be used to look up collected data.
    """
    x: float
    y: float

    @classmethod
    def of(cls, point: "NormalizedPoint2D | tuple[float, float]") -> "NormalizedPoint2D":
        if isinstance(point, cls):
            return point
        x, y = point
        return cls(float(x), float(y))

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass(slots=True, frozen=True)
class Point3D:
    """A position or vector in the User Coordinate System, in millimeters."""
    x: float
    y: float
    z: float

    @classmethod
    def of(cls, values) -> "Point3D":
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z


@dataclass(slots=True, frozen=True)
class DisplayArea:
    """Corners of the physical display in the User Coordinate System."""
    top_left: Point3D
    top_right: Point3D
    bottom_left: Point3D
    bottom_right: Point3D

    @classmethod
    def from_corners(cls, top_left, top_right, bottom_left) -> "DisplayArea":
        """Builds a display area from three corners; the fourth one is implied."""
        tl, tr, bl = Point3D.of(top_left), Point3D.of(top_right), Point3D.of(bottom_left)
        br = Point3D(bl.x + tr.x - tl.x, bl.y + tr.y - tl.y, bl.z + tr.z - tl.z)
        return cls(tl, tr, bl, br)

    @classmethod
    def from_settings(cls, cfg) -> "DisplayArea":
        """
        Builds a display area from physical screen dimensions.

        `cfg` is any object exposing width_mm, height_mm, vertical_offset_mm,
        horizontal_offset_mm and depth_offset_mm (see DisplayAreaSettings).
        """
        w, h = cfg.width_mm, cfg.height_mm
        vo, ho, d = cfg.vertical_offset_mm, cfg.horizontal_offset_mm, cfg.depth_offset_mm

        return cls.from_corners(
            top_left=(-(w/2) + ho, h + vo, d),
            top_right=((w/2) + ho, h + vo, d),
            bottom_left=(-(w/2) + ho, vo, d),
        )


@dataclass(slots=True, frozen=True)
class EyeData:
    """Gaze measurements for a single eye."""
    gaze_point: Point3D
    gaze_point_validity: bool
    gaze_origin: Point3D
    gaze_origin_validity: bool
    gaze_point_on_display_area: Optional[tuple[float, float]] = None


@dataclass(slots=True, frozen=True)
class GazeSample:
    """
    A standardized, immutable container for a single gaze data sample.

    This is the shape the validation engine consumes; tracker adapters are
    responsible for converting their native events into it.
    """
    device_time_stamp: int
    system_time_stamp: int
    left_eye: EyeData
    right_eye: EyeData

    @property
    def is_valid(self) -> bool:
        """True if the tracker reported a valid gaze point for both eyes."""
        return self.left_eye.gaze_point_validity and self.right_eye.gaze_point_validity

    @classmethod
    def from_tobii_dict(cls, gaze_data: Mapping[str, Any]) -> "GazeSample":
        """Converts a Tobii Pro SDK gaze event delivered with as_dictionary=True."""
        return cls(
            device_time_stamp=gaze_data["device_time_stamp"],
            system_time_stamp=gaze_data["system_time_stamp"],
            left_eye=_eye_from_tobii_dict(gaze_data, "left"),
            right_eye=_eye_from_tobii_dict(gaze_data, "right"),
        )


def _eye_from_tobii_dict(gaze_data: Mapping[str, Any], eye: str) -> EyeData:
    on_display = gaze_data.get(f"{eye}_gaze_point_on_display_area")
    return EyeData(
        gaze_point=Point3D.of(gaze_data[f"{eye}_gaze_point_in_user_coordinate_system"]),
        gaze_point_validity=bool(gaze_data[f"{eye}_gaze_point_validity"]),
        gaze_origin=Point3D.of(gaze_data[f"{eye}_gaze_origin_in_user_coordinate_system"]),
        gaze_origin_validity=bool(gaze_data[f"{eye}_gaze_origin_validity"]),
        gaze_point_on_display_area=tuple(on_display) if on_display is not None else None,
    )
