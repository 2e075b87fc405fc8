"""
Configuration package for oswo.
"""

from .main import Config, CONFIG_FILENAME
from .dataclasses import (
    DEFAULT_SCALE,
    DaemonConfig,
    DesiredOutput,
    LoggingConfig,
    Profile,
    ProfileStore,
    SwayConfig,
)
