from .protocols import ValidationView
from .runner import ValidationRunner
