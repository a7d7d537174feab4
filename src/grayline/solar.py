"""Solar position oracles — skyfield ephemeris and a closed-form approximation.

Every oracle answers ``position(when, latitude, longitude)`` with a
SolarReading in radians. The terminator search only ever talks to this
interface, so a test stub or a higher precision model can be dropped in.
"""

import logging
import math
from datetime import datetime, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from pytz import utc
from skyfield import almanac
from skyfield.api import Loader, wgs84

from grayline.config import Settings, load_settings
from grayline.models import SolarReading

logger = logging.getLogger(__name__)

_J1970 = 2440587.5
_J2000 = 2451545.0


class EphemerisError(Exception):
    """Ephemeris data could not be loaded."""


class SolarOracle(Protocol):
    def position(
        self, when: datetime, latitude: float, longitude: float
    ) -> SolarReading: ...


def as_utc(when: datetime) -> datetime:
    """Return ``when`` as an aware UTC datetime. Naive values are taken to be UTC."""
    if when.tzinfo is None:
        return utc.localize(when)
    return when.astimezone(utc)


class SkyfieldSolarOracle:
    """Apparent sun altitude/azimuth from the JPL DE421 ephemeris via skyfield.

    The ephemeris file is opened on first use (downloaded into ``data_dir``
    when missing). Results depend only on the query arguments.
    """

    EPHEMERIS = "de421.bsp"

    def __init__(self, data_dir: Path):
        self._loader = Loader(str(data_dir))
        self._ts = None
        self._eph = None

    def _ephemeris(self):
        if self._eph is None:
            try:
                self._eph = self._loader(self.EPHEMERIS)
            except (OSError, ValueError) as exc:
                raise EphemerisError(
                    f"cannot load {self.EPHEMERIS} from {self._loader.directory}: {exc}"
                ) from exc
            self._ts = self._loader.timescale()
            logger.debug("Loaded ephemeris %s", self.EPHEMERIS)
        return self._eph

    def position(
        self, when: datetime, latitude: float, longitude: float
    ) -> SolarReading:
        eph = self._ephemeris()
        t = self._ts.from_datetime(as_utc(when))
        ground = eph["earth"] + wgs84.latlon(
            latitude_degrees=latitude, longitude_degrees=longitude
        )
        alt, az, _ = ground.at(t).observe(eph["sun"]).apparent().altaz()
        return SolarReading(altitude=float(alt.radians), azimuth=float(az.radians))

    def sun_times(
        self, when: datetime, latitude: float, longitude: float
    ) -> dict[str, datetime | None]:
        """Sunrise and sunset during the UTC day containing ``when``.

        Returns:
            ``{"sunrise": ..., "sunset": ...}`` as aware UTC datetimes; a value
            is None when the event does not happen that day (polar day/night).
        """
        eph = self._ephemeris()
        start = as_utc(when).replace(hour=0, minute=0, second=0, microsecond=0)
        t0 = self._ts.from_datetime(start)
        t1 = self._ts.from_datetime(start + timedelta(days=1))
        f = almanac.sunrise_sunset(
            eph, wgs84.latlon(latitude_degrees=latitude, longitude_degrees=longitude)
        )
        times, events = almanac.find_discrete(t0, t1, f)

        result: dict[str, datetime | None] = {"sunrise": None, "sunset": None}
        for t, is_day in zip(times, events):
            key = "sunrise" if is_day else "sunset"
            if result[key] is None:
                result[key] = t.utc_datetime()
        return result


class AnalyticSolarOracle:
    """Low-precision solar position from mean orbital elements.

    Good to a few hundredths of a degree over recent centuries, which is
    plenty for drawing a terminator. Needs no data files.
    """

    def position(
        self, when: datetime, latitude: float, longitude: float
    ) -> SolarReading:
        days = as_utc(when).timestamp() / 86400.0 + _J1970 - _J2000

        mean_lon = (280.460 + 0.9856474 * days) % 360.0
        anomaly = math.radians((357.528 + 0.9856003 * days) % 360.0)
        ecl_lon = math.radians(
            mean_lon + 1.915 * math.sin(anomaly) + 0.020 * math.sin(2 * anomaly)
        )
        obliquity = math.radians(23.439 - 0.0000004 * days)

        ra = math.atan2(math.cos(obliquity) * math.sin(ecl_lon), math.cos(ecl_lon))
        dec = math.asin(math.sin(obliquity) * math.sin(ecl_lon))

        gmst = (18.697374558 + 24.06570982441908 * days) % 24
        hour_angle = math.radians(gmst * 15.0 + longitude) - ra
        lat = math.radians(latitude)

        sin_alt = math.sin(lat) * math.sin(dec) + math.cos(lat) * math.cos(
            dec
        ) * math.cos(hour_angle)
        altitude = math.asin(max(-1.0, min(1.0, sin_alt)))
        # Measured from north, clockwise
        azimuth = math.atan2(
            -math.cos(dec) * math.sin(hour_angle),
            math.sin(dec) * math.cos(lat)
            - math.cos(dec) * math.cos(hour_angle) * math.sin(lat),
        ) % (2 * math.pi)
        return SolarReading(altitude=altitude, azimuth=azimuth)


@lru_cache(maxsize=None)
def _build_oracle(kind: str, data_dir: Path) -> SolarOracle:
    if kind == "skyfield":
        return SkyfieldSolarOracle(data_dir)
    return AnalyticSolarOracle()


def default_oracle(settings: Settings | None = None) -> SolarOracle:
    """Oracle selected by configuration. Instances are reused across calls."""
    settings = settings or load_settings()
    return _build_oracle(settings.oracle, settings.data_dir)
