from abc import ABC, abstractmethod
from typing import Callable

from ..models.gaze import DisplayArea, GazeSample

GazeCallback = Callable[[GazeSample], None]


class GazeStream(ABC):
    """
    Abstract boundary to an already connected eye tracker.

    A GazeStream pushes `GazeSample` objects to its subscribers, on a thread
    of its own choosing, and reports the physical geometry of the display the
    tracker is configured for. Connection lifecycle is not its concern.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Returns a human-readable name of the hardware."""
        ...

    @abstractmethod
    def subscribe(self, callback: GazeCallback) -> None:
        """Starts delivering gaze samples to `callback`."""
        ...

    @abstractmethod
    def unsubscribe(self, callback: GazeCallback) -> None:
        """Stops delivering gaze samples to `callback`."""
        ...

    @abstractmethod
    def get_display_area(self) -> DisplayArea:
        """Returns the display geometry in the User Coordinate System."""
        ...
