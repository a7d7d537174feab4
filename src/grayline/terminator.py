"""Day/night terminator search and curve sampling."""

import logging
import math
from collections.abc import Sequence
from datetime import datetime

from grayline.models import TerminatorPoint
from grayline.solar import SolarOracle, default_oracle

logger = logging.getLogger(__name__)

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

DEFAULT_RESOLUTION = 360
DEFAULT_TOLERANCE = 0.1  # degrees of latitude
DEFAULT_MAX_ITERATIONS = 30  # oracle queries per longitude

_DEBUG_POINTS = 5


def _check_budget(max_iterations: int, bracket_check: bool) -> None:
    if bracket_check and max_iterations < 2:
        raise ValueError(
            f"Invalid max_iterations: {max_iterations}. The pole check needs at least 2"
        )


def _is_day(oracle: SolarOracle, when: datetime, latitude: float, longitude: float) -> bool:
    reading = oracle.position(when, latitude, longitude)
    return reading.altitude_degrees > 0


def locate_terminator_latitude(
    longitude: float,
    when: datetime,
    oracle: SolarOracle,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    bracket_check: bool = True,
) -> float | None:
    """Binary-search the latitude where the sun sits on the horizon.

    Altitude is assumed monotonic in latitude along the meridian. With
    ``bracket_check`` the two poles are checked first: if they are on the same
    side of the horizon there is no crossing to find and the longitude is
    reported as unresolved, otherwise their signs decide which half of the
    interval to keep. Without it, day at the midpoint always means the
    crossing lies to the south.

    Args:
        longitude: Meridian to search (decimal degrees, not normalized).
        when: Instant to evaluate. Naive values are UTC.
        oracle: Solar position source. Its exceptions propagate.
        tolerance: Stop once the search interval is this narrow (degrees).
        max_iterations: Hard cap on oracle queries, pole checks included.
        bracket_check: Check the poles before searching.

    Returns:
        Latitude in [-90, 90], or None when no crossing could be located.

    Raises:
        ValueError: If ``bracket_check`` is on and ``max_iterations`` cannot
            cover the two pole checks.
    """
    _check_budget(max_iterations, bracket_check)
    min_lat, max_lat = MIN_LATITUDE, MAX_LATITUDE
    queries = 0
    south_is_day = False

    if bracket_check:
        south_is_day = _is_day(oracle, when, min_lat, longitude)
        north_is_day = _is_day(oracle, when, max_lat, longitude)
        queries = 2
        if south_is_day == north_is_day:
            logger.debug(
                "No horizon crossing at lng=%.2f (poles both %s)",
                longitude,
                "day" if south_is_day else "night",
            )
            return None

    while max_lat - min_lat > tolerance and queries < max_iterations:
        mid_lat = (min_lat + max_lat) / 2
        if _is_day(oracle, when, mid_lat, longitude) != south_is_day:
            max_lat = mid_lat
        else:
            min_lat = mid_lat
        queries += 1

    result = (min_lat + max_lat) / 2
    if not math.isfinite(result) or result < MIN_LATITUDE or result > MAX_LATITUDE:
        return None
    return result


def generate_terminator(
    when: datetime,
    resolution: int = DEFAULT_RESOLUTION,
    oracle: SolarOracle | None = None,
    west: float = MIN_LONGITUDE,
    east: float = MAX_LONGITUDE,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    bracket_check: bool = True,
) -> tuple[TerminatorPoint, ...]:
    """Sample the terminator at ``resolution + 1`` evenly spaced longitudes.

    Longitudes where no crossing is found are left out, so the curve can be
    shorter than ``resolution + 1``. Points come back in increasing
    longitude order.

    Raises:
        ValueError: If ``resolution`` is below 1, ``west`` is not west of
            ``east``, or ``max_iterations`` is too small for the pole check.
    """
    _check_budget(max_iterations, bracket_check)
    if resolution < 1:
        raise ValueError(f"Invalid resolution: {resolution}. Must be at least 1")
    if west >= east:
        raise ValueError(f"Invalid longitude band: west={west} must be < east={east}")
    if oracle is None:
        oracle = default_oracle()

    logger.debug("Generating terminator for %s", when.isoformat())

    span = east - west
    points: list[TerminatorPoint] = []
    for i in range(resolution + 1):
        longitude = i * span / resolution + west
        latitude = locate_terminator_latitude(
            longitude,
            when,
            oracle,
            tolerance=tolerance,
            max_iterations=max_iterations,
            bracket_check=bracket_check,
        )
        if latitude is None:
            continue
        points.append(TerminatorPoint(longitude=longitude, latitude=latitude))
        if i < _DEBUG_POINTS:
            logger.debug("Point %d: lng=%.2f, lat=%.2f", i, longitude, latitude)

    logger.debug("Generated %d terminator points", len(points))
    if points:
        lats = [p.latitude for p in points]
        logger.debug("Latitude range: %.2f to %.2f", min(lats), max(lats))

    return tuple(points)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_terminator(curve: Sequence[TerminatorPoint]) -> bool:
    """True iff the curve is non-empty and every point is on the globe."""
    if not curve:
        return False
    return all(
        _is_number(p.longitude)
        and _is_number(p.latitude)
        and MIN_LONGITUDE <= p.longitude <= MAX_LONGITUDE
        and MIN_LATITUDE <= p.latitude <= MAX_LATITUDE
        for p in curve
    )


def terminator_to_path(
    curve: Sequence[TerminatorPoint],
) -> tuple[tuple[float, float], ...]:
    """Convert a curve to ``(longitude, latitude)`` pairs for a path layer."""
    return tuple(p.as_pair() for p in curve)
