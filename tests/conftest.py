"""Shared fixtures: scripted solar oracles and fixed instants."""

import math
from datetime import datetime

import pytest
from pytz import utc

from grayline.models import SolarReading


class ScriptedOracle:
    """Returns altitude (degrees) from ``altitude_fn(latitude, longitude)`` and records each query."""

    def __init__(self, altitude_fn):
        self.altitude_fn = altitude_fn
        self.calls: list[tuple[float, float]] = []

    def position(self, when, latitude, longitude):
        self.calls.append((latitude, longitude))
        return SolarReading(
            altitude=math.radians(self.altitude_fn(latitude, longitude)), azimuth=0.0
        )


class FailingOracle:
    def __init__(self, exc: Exception):
        self.exc = exc

    def position(self, when, latitude, longitude):
        raise self.exc


@pytest.fixture
def scripted():
    return ScriptedOracle


@pytest.fixture
def june_solstice() -> datetime:
    return datetime(2024, 6, 21, 12, 0, tzinfo=utc)


@pytest.fixture
def december_solstice() -> datetime:
    return datetime(2024, 12, 21, 12, 0, tzinfo=utc)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "GRAYLINE_ORACLE",
        "GRAYLINE_DATA_DIR",
        "GRAYLINE_RESOLUTION",
        "GRAYLINE_TOLERANCE",
        "GRAYLINE_MAX_ITERATIONS",
        "GRAYLINE_BRACKET_CHECK",
        "GRAYLINE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
