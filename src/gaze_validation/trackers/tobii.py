import logging
from typing import Optional

import tobii_research as tr

from .base import GazeCallback, GazeStream
from ..models.gaze import DisplayArea, GazeSample, Point3D

logger = logging.getLogger(__name__)


class TobiiGazeStream(GazeStream):
    """
    A GazeStream backed by a connected Tobii Pro eye tracker.

    The SDK calls back on a background thread with a dictionary per gaze
    event; each one is converted into a GazeSample before it reaches the
    subscriber.
    """

    def __init__(self, tracker: tr.EyeTracker):
        self.tracker = tracker
        self._bridges: dict[GazeCallback, object] = {}

    @classmethod
    def find_first(cls) -> Optional["TobiiGazeStream"]:
        """Finds the first available Tobii eye tracker. Blocking."""
        logger.info("Searching for eye trackers...")
        eyetrackers = tr.find_all_eyetrackers()

        if not eyetrackers:
            logger.error("No eye trackers found.")
            return None

        tracker = eyetrackers[0]
        logger.info(f"Found tracker: {tracker.device_name} ({tracker.serial_number})")
        return cls(tracker)

    @property
    def name(self) -> str:
        return self.tracker.device_name

    def subscribe(self, callback: GazeCallback) -> None:
        if callback in self._bridges:
            logger.warning("Callback is already subscribed to gaze data.")
            return

        def _gaze_data_callback(gaze_data: dict) -> None:
            # Runs on the SDK thread; never let an exception escape into it.
            try:
                callback(GazeSample.from_tobii_dict(gaze_data))
            except Exception:
                logger.exception("Error processing gaze data from Tobii callback.")

        logger.info("Subscribing to gaze data stream...")
        self.tracker.subscribe_to(tr.EYETRACKER_GAZE_DATA, _gaze_data_callback, as_dictionary=True)
        self._bridges[callback] = _gaze_data_callback

    def unsubscribe(self, callback: GazeCallback) -> None:
        bridge = self._bridges.pop(callback, None)
        if bridge is None:
            return

        logger.info("Unsubscribing from gaze data stream...")
        try:
            self.tracker.unsubscribe_from(tr.EYETRACKER_GAZE_DATA, bridge)
        except tr.EyeTrackerException as e:
            logger.error(f"A Tobii SDK error occurred while unsubscribing: {e}", exc_info=True)

    def get_display_area(self) -> DisplayArea:
        area = self.tracker.get_display_area()
        return DisplayArea(
            top_left=Point3D.of(area.top_left),
            top_right=Point3D.of(area.top_right),
            bottom_left=Point3D.of(area.bottom_left),
            bottom_right=Point3D.of(area.bottom_right),
        )
