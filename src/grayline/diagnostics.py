"""Debug helpers for checking the oracle and terminator output by eye."""

import logging
from datetime import datetime

from grayline.config import Settings, load_settings
from grayline.models import SolarReading
from grayline.solar import SkyfieldSolarOracle, SolarOracle, as_utc, default_oracle
from grayline.terminator import generate_terminator, validate_terminator

logger = logging.getLogger(__name__)

_LANDMARKS: tuple[tuple[str, float, float], ...] = (
    ("Greenwich", 0.0, 0.0),
    ("New York", 40.7, -74.0),
    ("London", 51.5, 0.0),
)

_DEBUG_RESOLUTION = 36


def get_solar_position(
    when: datetime,
    latitude: float,
    longitude: float,
    oracle: SolarOracle | None = None,
) -> dict:
    """Oracle reading converted to degrees, with the raw reading alongside."""
    if oracle is None:
        oracle = default_oracle()
    reading: SolarReading = oracle.position(when, latitude, longitude)
    return {
        "altitude": reading.altitude_degrees,
        "azimuth": reading.azimuth_degrees,
        "raw": reading,
    }


def debug_terminator(
    when: datetime,
    oracle: SolarOracle | None = None,
    settings: Settings | None = None,
) -> dict:
    """Log and return landmark sun altitudes and a coarse terminator sanity check.

    The curve uses the configured search parameters. Sunrise times are
    included when the oracle is skyfield-backed.
    """
    settings = settings or load_settings()
    if oracle is None:
        oracle = default_oracle(settings)
    logger.info("=== Terminator debug for %s ===", as_utc(when).isoformat())

    landmarks = []
    for name, lat, lng in _LANDMARKS:
        solar = get_solar_position(when, lat, lng, oracle)
        entry = {"name": name, "latitude": lat, "longitude": lng, "altitude": solar["altitude"]}
        if isinstance(oracle, SkyfieldSolarOracle):
            sunrise = oracle.sun_times(when, lat, lng)["sunrise"]
            entry["sunrise"] = sunrise.isoformat() if sunrise else None
        logger.info("%s: altitude=%.2f°", name, solar["altitude"])
        landmarks.append(entry)

    curve = generate_terminator(
        when,
        resolution=_DEBUG_RESOLUTION,
        oracle=oracle,
        tolerance=settings.tolerance,
        max_iterations=settings.max_iterations,
        bracket_check=settings.bracket_check,
    )
    valid = validate_terminator(curve)
    logger.info("Generated %d terminator points, valid=%s", len(curve), valid)
    logger.debug("First 5 points: %s", [p.as_pair() for p in curve[:5]])

    return {
        "time": as_utc(when).isoformat(),
        "landmarks": landmarks,
        "points": len(curve),
        "valid": valid,
    }
