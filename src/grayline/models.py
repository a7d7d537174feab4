"""Data model definitions — explicit boundaries between oracle, compute, and layer code."""

import math
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SolarReading:
    """One oracle answer for a (time, latitude, longitude) query. Never stored."""

    altitude: float  # Solar altitude above the horizon (radians)
    azimuth: float  # Solar azimuth (radians)

    @property
    def altitude_degrees(self) -> float:
        return math.degrees(self.altitude)

    @property
    def azimuth_degrees(self) -> float:
        return math.degrees(self.azimuth)


@dataclass(frozen=True)
class TerminatorPoint:
    """A point on the day/night boundary for one instant."""

    longitude: float  # Sample longitude (decimal degrees)
    latitude: float  # Latitude where solar altitude crosses zero (decimal degrees)

    def as_pair(self) -> tuple[float, float]:
        """Return ``(longitude, latitude)``, the order map layers expect."""
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class TimezoneSample:
    """Local time at one 15° ruler mark. Offset follows longitude, not politics."""

    longitude: float  # Ruler mark longitude (multiple of 15)
    utc_offset: float  # Hours from UTC (longitude / 15)
    local_time: datetime  # UTC instant shifted by utc_offset hours
    display_time: str  # "HH:MM", 24-hour, zero-padded

    @property
    def iso_local_time(self) -> str:
        """ISO-8601 with milliseconds and a ``Z`` suffix ("2024-03-20T13:00:00.000Z")."""
        return self.local_time.strftime("%Y-%m-%dT%H:%M:%S.") + (
            f"{self.local_time.microsecond // 1000:03d}Z"
        )

    def as_record(self) -> tuple[float, float, str, str]:
        return (self.longitude, self.utc_offset, self.iso_local_time, self.display_time)


@dataclass(frozen=True)
class City:
    """A labelled place on the map with its political timezone."""

    id: str  # Stable slug ("new-york")
    name: str  # Display name
    country: str
    longitude: float  # Decimal degrees
    latitude: float  # Decimal degrees
    timezone: str  # IANA zone name ("America/New_York")


@dataclass(frozen=True)
class CityTime:
    """Local wall-clock time at a city plus whether the sun is up there."""

    city: City
    display_time: str  # "HH:MM" in the city's political timezone
    is_daylight: bool


@dataclass(frozen=True)
class TerminatorPath:
    """Everything a path layer needs to draw the terminator. Empty path means draw nothing."""

    path: tuple[tuple[float, float], ...]  # (longitude, latitude) pairs
    color: tuple[int, int, int, int]  # RGBA bytes
    width: float  # Line width (pixels)
    opacity: float  # 0..1

    @property
    def is_empty(self) -> bool:
        return not self.path
