import argparse
import asyncio
import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from pydantic import ValidationError
from screeninfo import ScreenInfoError, get_monitors

from gaze_validation.configs import AppSettings, DisplayAreaSettings
from gaze_validation.core import ValidationRunner
from gaze_validation.errors import CalibrationValidationError
from gaze_validation.models import DisplayArea, OutputMode
from gaze_validation.trackers import DummyGazeStream, GazeStream
from gaze_validation.ui import ConsoleValidationView
from gaze_validation.validation import ScreenBasedCalibrationValidation


def _package_version() -> str:
    try:
        return version("gaze-validation")
    except PackageNotFoundError:
        return "unknown"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Calibration validation for screen based eye trackers")
    parser.add_argument(
        "--dummy",
        action="store_true",
        help="Run with a simulated gaze stream instead of a real eye tracker."
    )
    parser.add_argument("--sample-count", type=int, help="Valid samples to collect per point (10-3000).")
    parser.add_argument("--timeout-ms", type=int, help="Collection timeout per point in ms (100-3000).")
    parser.add_argument(
        "--combined",
        action="store_true",
        help="Report a single value per metric instead of left/right eye values."
    )
    parser.add_argument(
        "--detect-display",
        action="store_true",
        help="Take the physical display size from the primary monitor (dummy mode)."
    )
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> AppSettings:
    """Applies command-line overrides on top of environment/default settings."""
    settings = AppSettings()

    validation = settings.validation.model_dump()
    if args.sample_count is not None:
        validation["sample_count"] = args.sample_count
    if args.timeout_ms is not None:
        validation["timeout_ms"] = args.timeout_ms
    if args.combined:
        validation["output_mode"] = OutputMode.COMBINED

    update = {"validation": type(settings.validation).model_validate(validation)}
    if args.dummy:
        update["use_dummy_mode"] = True
    if args.detect_display:
        update["display_area"] = detect_display_area(settings.display_area)

    return settings.model_copy(update=update)


def detect_display_area(fallback: DisplayAreaSettings) -> DisplayAreaSettings:
    logger = logging.getLogger("main")
    try:
        monitors = get_monitors()
    except ScreenInfoError:
        logger.warning("No monitor detected, using configured display area.")
        return fallback

    primary = next((m for m in monitors if m.is_primary), monitors[0] if monitors else None)
    if primary is None or not primary.width_mm or not primary.height_mm:
        logger.warning("Monitor does not report its physical size, using configured display area.")
        return fallback

    logger.info(f"Detected display {primary.name}: {primary.width_mm}x{primary.height_mm} mm")
    return fallback.model_copy(update={"width_mm": float(primary.width_mm), "height_mm": float(primary.height_mm)})


def create_stream(settings: AppSettings) -> GazeStream | None:
    logger = logging.getLogger("main")
    if settings.use_dummy_mode:
        logger.warning("Initializing DUMMY gaze stream (Simulation Mode)")
        return DummyGazeStream(DisplayArea.from_settings(settings.display_area))

    logger.info("Initializing TOBII gaze stream")
    from gaze_validation.trackers.tobii import TobiiGazeStream
    return TobiiGazeStream.find_first()


def main(argv=None) -> int:
    args = parse_args(argv)

    # 1. Load Configuration
    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Configuration Error: {e}")
        return 1

    # 2. Setup Logging
    logging.basicConfig(
        level=settings.logging.level.upper(),
        format=settings.logging.format,
        stream=sys.stderr
    )
    logger = logging.getLogger("main")
    logger.info(f"Starting Gaze Validation v{_package_version()}")

    # 3. Setup Tracker
    stream = create_stream(settings)
    if stream is None:
        return 1

    on_point = stream.look_at if isinstance(stream, DummyGazeStream) else None

    # 4. Run Validation
    cfg = settings.validation
    try:
        with ScreenBasedCalibrationValidation(
            stream,
            sample_count=cfg.sample_count,
            timeout_ms=cfg.timeout_ms,
            output_mode=cfg.output_mode,
        ) as validation:
            runner = ValidationRunner(
                validation,
                ConsoleValidationView(on_point=on_point),
                settle_s=cfg.settle_s,
                poll_interval_s=cfg.poll_interval_s,
            )
            result = asyncio.run(runner.run(cfg.points_to_validate))
    except CalibrationValidationError:
        logger.exception("Validation failed")
        return 1

    return 0 if result.is_valid else 2


if __name__ == "__main__":
    sys.exit(main())
