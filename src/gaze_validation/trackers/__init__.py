from .base import GazeCallback, GazeStream
from .dummy import DummyGazeStream
