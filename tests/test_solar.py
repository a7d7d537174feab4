"""Tests for solar position oracles."""

import math
from datetime import datetime
from pathlib import Path

import pytest
from pytz import timezone, utc

from grayline.config import Settings
from grayline.models import SolarReading
from grayline.solar import (
    AnalyticSolarOracle,
    EphemerisError,
    SkyfieldSolarOracle,
    as_utc,
    default_oracle,
)

_DATA_DIR = Settings().data_dir
_HAS_EPHEMERIS = (_DATA_DIR / SkyfieldSolarOracle.EPHEMERIS).exists()
needs_ephemeris = pytest.mark.skipif(not _HAS_EPHEMERIS, reason="de421.bsp not downloaded")


def test_as_utc_treats_naive_as_utc() -> None:
    result = as_utc(datetime(2024, 3, 20, 12, 0))
    assert result == datetime(2024, 3, 20, 12, 0, tzinfo=utc)
    assert result.utcoffset().total_seconds() == 0


def test_as_utc_converts_aware() -> None:
    seoul = timezone("Asia/Seoul").localize(datetime(2024, 3, 20, 21, 0))
    assert as_utc(seoul) == datetime(2024, 3, 20, 12, 0, tzinfo=utc)
    assert as_utc(seoul).hour == 12


def test_reading_degree_conversion() -> None:
    reading = SolarReading(altitude=math.pi / 4, azimuth=math.pi)
    assert reading.altitude_degrees == pytest.approx(45.0)
    assert reading.azimuth_degrees == pytest.approx(180.0)


def test_analytic_equinox_noon_equator_sun_overhead() -> None:
    """Sun should be near the zenith at Greenwich noon around the March equinox."""
    reading = AnalyticSolarOracle().position(datetime(2024, 3, 20, 12, 0, tzinfo=utc), 0.0, 0.0)
    assert reading.altitude_degrees > 85.0
    assert 0.0 <= reading.azimuth < 2 * math.pi


def test_analytic_midnight_sun_below_horizon() -> None:
    reading = AnalyticSolarOracle().position(datetime(2024, 3, 20, 0, 0, tzinfo=utc), 0.0, 0.0)
    assert reading.altitude_degrees < -85.0


def test_analytic_poles_track_declination() -> None:
    """At the poles altitude equals ±declination, about 23.4° at the June solstice."""
    oracle = AnalyticSolarOracle()
    when = datetime(2024, 6, 21, 0, 0, tzinfo=utc)
    north = oracle.position(when, 90.0, 37.0).altitude_degrees
    south = oracle.position(when, -90.0, -120.0).altitude_degrees

    assert north == pytest.approx(23.44, abs=0.1)
    assert south == pytest.approx(-23.44, abs=0.1)


def test_analytic_morning_sun_is_in_the_east() -> None:
    """Azimuth is measured clockwise from north: 06:00 local at the equinox is due east."""
    reading = AnalyticSolarOracle().position(datetime(2024, 3, 20, 9, 0, tzinfo=utc), 0.0, 0.0)
    assert 60.0 < reading.azimuth_degrees < 120.0


def test_analytic_deterministic() -> None:
    when = datetime(2024, 12, 1, 0, 0, tzinfo=utc)
    oracle = AnalyticSolarOracle()
    assert oracle.position(when, -33.8688, 151.2093) == oracle.position(when, -33.8688, 151.2093)


def test_default_oracle_is_reused() -> None:
    settings = Settings()
    assert default_oracle(settings) is default_oracle(settings)
    assert isinstance(default_oracle(settings), AnalyticSolarOracle)


def test_default_oracle_skyfield_selection(tmp_path: Path) -> None:
    oracle = default_oracle(Settings(oracle="skyfield", data_dir=tmp_path))
    assert isinstance(oracle, SkyfieldSolarOracle)


class _BrokenLoader:
    directory = "/nowhere"

    def __call__(self, name):
        raise OSError(f"cannot download {name}")


def test_skyfield_load_failure_raises_ephemeris_error(tmp_path: Path) -> None:
    oracle = SkyfieldSolarOracle(tmp_path)
    oracle._loader = _BrokenLoader()

    with pytest.raises(EphemerisError, match="de421.bsp"):
        oracle.position(datetime(2024, 3, 20, 12, 0, tzinfo=utc), 0.0, 0.0)


@needs_ephemeris
def test_skyfield_agrees_with_analytic() -> None:
    when = datetime(2024, 6, 21, 15, 30, tzinfo=utc)
    precise = SkyfieldSolarOracle(_DATA_DIR).position(when, 51.5, -0.1)
    rough = AnalyticSolarOracle().position(when, 51.5, -0.1)

    assert precise.altitude_degrees == pytest.approx(rough.altitude_degrees, abs=0.5)
    assert precise.azimuth_degrees == pytest.approx(rough.azimuth_degrees, abs=0.5)


@needs_ephemeris
def test_skyfield_sun_times_london_summer() -> None:
    times = SkyfieldSolarOracle(_DATA_DIR).sun_times(
        datetime(2024, 6, 21, 12, 0, tzinfo=utc), 51.5, -0.1
    )
    assert times["sunrise"] is not None and times["sunset"] is not None
    assert 3 <= times["sunrise"].hour <= 4
    assert 20 <= times["sunset"].hour <= 21


@needs_ephemeris
def test_skyfield_sun_times_polar_day() -> None:
    times = SkyfieldSolarOracle(_DATA_DIR).sun_times(
        datetime(2024, 6, 21, 12, 0, tzinfo=utc), 80.0, 15.0
    )
    assert times == {"sunrise": None, "sunset": None}
