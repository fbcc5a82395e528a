import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, PositiveFloat, field_validator

from .utils import LoggingConfig
from ..models.result import OutputMode

logger = logging.getLogger(__name__)

class DisplayAreaSettings(BaseModel):
    """
    Physical dimensions and position of the display relative to the tracker.
    All measurements are in millimeters (mm). Only used where the tracker
    itself does not report a display area (dummy mode).
    """
    width_mm: float = Field(344.0, gt=0, description="Width of the active display area.")
    height_mm: float = Field(193.0, gt=0, description="Height of the active display area.")
    vertical_offset_mm: float = Field(60.0, description="Vertical distance from tracker center to bottom edge of screen.")
    horizontal_offset_mm: float = Field(0.0, description="Horizontal distance from tracker center to screen center.")
    depth_offset_mm: float = Field(0.0, description="Depth distance from the tracker to the screen plane.")

class ValidationSettings(BaseModel):
    """Settings for the calibration validation procedure."""
    sample_count: int = Field(30, ge=10, le=3000, description="Valid samples to collect per point.")
    timeout_ms: int = Field(1000, ge=100, le=3000, description="Maximum collection time per point.")
    output_mode: OutputMode = Field(
        OutputMode.SPLIT,
        description="Report left/right eye separately ('split') or averaged ('combined')."
    )
    points_to_validate: list[tuple[float, float]] = Field(
        default=[
            (0.5, 0.5),
            (0.1, 0.1), (0.1, 0.9),
            (0.9, 0.1), (0.9, 0.9),
        ],
        description="List of normalized (0-1) screen coordinates to use as validation targets."
    )
    settle_s: float = Field(0.5, ge=0, description="Time the target is shown before collection starts.")
    poll_interval_s: PositiveFloat = Field(0.05, description="Interval for polling the collection state.")

    @field_validator("points_to_validate")
    @classmethod
    def validate_points(cls, points: list[tuple[float, float]]) -> list[tuple[float, float]]:
        if not points:
            raise ValueError("At least one validation point is required.")
        for x, y in points:
            if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
                raise ValueError(f"Point ({x}, {y}) is outside the normalized display area.")
        return points

class AppSettings(BaseSettings):
    """
    Main application settings, loaded from environment variables and defaults.
    """
    # Hardware
    use_dummy_mode: bool = False
    display_area: DisplayAreaSettings = Field(default_factory=DisplayAreaSettings)

    # Validation
    validation: ValidationSettings = Field(default_factory=ValidationSettings)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="GAZE__",
        env_file=".env",
        env_nested_delimiter='__',
        case_sensitive=False
    )
