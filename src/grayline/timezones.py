"""Timezone ruler: solar-hour local times every 15° of longitude.

Offsets are pure longitude arithmetic (15° per hour). Real political zones
live in grayline.cities.
"""

import math
from datetime import datetime, timedelta

from grayline.models import TimezoneSample
from grayline.solar import as_utc

DEGREES_PER_HOUR = 15.0


def format_time(dt: datetime) -> str:
    """Zero-padded 24-hour "HH:MM"."""
    return dt.strftime("%H:%M")


def _shift(when: datetime, utc_offset: float) -> datetime:
    return as_utc(when) + timedelta(hours=utc_offset)


def generate_timezone_data(
    west_longitude: float, east_longitude: float, when: datetime
) -> tuple[TimezoneSample, ...]:
    """One sample per 15° mark covering the visible band, plus one mark of slack each side.

    Marks are generated from one step beyond the 15° boundary enclosing
    ``west_longitude`` to one step beyond the boundary enclosing
    ``east_longitude``, then kept only if they lie within
    ``[west - 15, east + 15]`` so a scrolling ruler always has a partial
    label at either edge.

    Args:
        west_longitude: Western edge of the visible band (degrees).
        east_longitude: Eastern edge of the visible band (degrees).
        when: Current instant. Naive values are UTC.

    Returns:
        Samples ordered west to east. Empty if ``west_longitude > east_longitude + 30``.
    """
    start = math.floor(west_longitude / DEGREES_PER_HOUR) - 1
    end = math.ceil(east_longitude / DEGREES_PER_HOUR) + 1

    samples: list[TimezoneSample] = []
    for step in range(start, end + 1):
        longitude = step * DEGREES_PER_HOUR
        if (
            longitude < west_longitude - DEGREES_PER_HOUR
            or longitude > east_longitude + DEGREES_PER_HOUR
        ):
            continue
        utc_offset = longitude / DEGREES_PER_HOUR
        local_time = _shift(when, utc_offset)
        samples.append(
            TimezoneSample(
                longitude=longitude,
                utc_offset=utc_offset,
                local_time=local_time,
                display_time=format_time(local_time),
            )
        )
    return tuple(samples)


def get_time_at_longitude(longitude: float, when: datetime) -> str:
    """Solar-hour "HH:MM" at ``longitude``. No band filtering."""
    return format_time(_shift(when, longitude / DEGREES_PER_HOUR))


def get_time_offset(when: datetime) -> float:
    """Sub-hour part of the UTC clock as degrees of longitude, in [0, 15).

    0.25° per minute, so a ruler slides one full mark per hour.
    """
    t = as_utc(when)
    minutes = t.minute + t.second / 60.0 + t.microsecond / 60_000_000.0
    return minutes * DEGREES_PER_HOUR / 60.0
