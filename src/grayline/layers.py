"""Plain data records handed to the map's rendering layer."""

import logging
from datetime import datetime

from grayline.colors import parse_color_to_rgba
from grayline.config import Settings, load_settings
from grayline.models import TerminatorPath
from grayline.solar import EphemerisError, SolarOracle, default_oracle
from grayline.terminator import generate_terminator, terminator_to_path, validate_terminator
from grayline.timezones import generate_timezone_data, get_time_offset

logger = logging.getLogger(__name__)


def build_terminator_path(
    when: datetime,
    oracle: SolarOracle | None = None,
    settings: Settings | None = None,
) -> TerminatorPath:
    """Terminator path at the layer resolution, styled from settings.

    A curve that fails validation, or an ephemeris that cannot be loaded,
    produces an empty path so the map still renders. Any other oracle error
    propagates.
    """
    settings = settings or load_settings()
    style = settings.style
    empty = TerminatorPath(
        path=(),
        color=parse_color_to_rgba(style.color),
        width=style.width,
        opacity=style.opacity,
    )
    if oracle is None:
        oracle = default_oracle(settings)

    try:
        curve = generate_terminator(
            when,
            resolution=style.layer_resolution,
            oracle=oracle,
            tolerance=settings.tolerance,
            max_iterations=settings.max_iterations,
            bracket_check=settings.bracket_check,
        )
    except EphemerisError as exc:
        logger.warning("Terminator skipped: %s", exc)
        return empty

    if not validate_terminator(curve):
        logger.warning("Terminator skipped: invalid curve (%d points)", len(curve))
        return empty

    return TerminatorPath(
        path=terminator_to_path(curve),
        color=empty.color,
        width=empty.width,
        opacity=empty.opacity,
    )


def build_timezone_ruler(
    west_longitude: float, east_longitude: float, when: datetime
) -> dict:
    """Ruler marks for the visible band plus the sub-hour slide offset (degrees)."""
    samples = generate_timezone_data(west_longitude, east_longitude, when)
    return {
        "samples": [
            {
                "longitude": s.longitude,
                "utc_offset": s.utc_offset,
                "local_time": s.iso_local_time,
                "display_time": s.display_time,
            }
            for s in samples
        ],
        "offset": get_time_offset(when),
    }
