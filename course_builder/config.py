"""Defaults and run settings for the course builder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError, InvalidModeError

# Course defaults
DEFAULT_RASTER_S: int = 30
DEFAULT_SPORT_TYPE: str = "ride"
DEFAULT_AUTHOR: str = "Mathias Lieber"
DEFAULT_TIME_MODE: str = "time"
DEFAULT_ACCELERATION: float = 1.0
DEFAULT_SCALE: float = 1.0

# Text events snap to this grid instead of the section raster
ANNOTATION_RASTER_S: int = 5

TIME_FORMAT: str = "%H:%M:%S"
TIME_MODES = ("time", "duration")

# Expected CSV header
CSV_COLUMNS = ("time", "power", "text")


@dataclass
class CourseSettings:
    """Everything a single run needs, validated on construction."""
    name: str
    ftp_watts: int
    input_path: str
    description: Optional[str] = None
    author: str = DEFAULT_AUTHOR
    time_mode: str = DEFAULT_TIME_MODE
    sport_type: str = DEFAULT_SPORT_TYPE
    acceleration: float = DEFAULT_ACCELERATION
    scale: float = DEFAULT_SCALE
    raster_s: int = DEFAULT_RASTER_S
    output_path: Optional[str] = None  # None writes to stdout

    def __post_init__(self):
        if self.time_mode not in TIME_MODES:
            raise InvalidModeError(self.time_mode, TIME_MODES)
        if self.ftp_watts is None or self.ftp_watts <= 0:
            raise ConfigError(f"reference power must be positive, got {self.ftp_watts}")
        if self.acceleration <= 0:
            raise ConfigError(f"acceleration must be positive, got {self.acceleration}")
        if self.scale <= 0:
            raise ConfigError(f"scale must be positive, got {self.scale}")
        if self.raster_s <= 0:
            raise ConfigError(f"raster must be a positive number of seconds, got {self.raster_s}")
