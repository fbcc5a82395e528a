from .app import AppSettings, DisplayAreaSettings, ValidationSettings
from .utils import LoggingConfig
