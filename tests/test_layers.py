"""Tests for the layer records handed to the renderer."""

import pytest

from conftest import FailingOracle
from grayline.config import Settings, TerminatorStyle
from grayline.layers import build_terminator_path, build_timezone_ruler
from grayline.solar import AnalyticSolarOracle, EphemerisError


def test_terminator_path_default_style(june_solstice) -> None:
    layer = build_terminator_path(june_solstice, AnalyticSolarOracle(), Settings())

    assert len(layer.path) == 181
    assert layer.path[0] == (-180.0, pytest.approx(66.56, abs=1.0))
    assert layer.color == (255, 107, 53, 255)
    assert layer.width == 2
    assert layer.opacity == 0.9
    assert not layer.is_empty


def test_terminator_path_custom_style(june_solstice) -> None:
    settings = Settings(style=TerminatorStyle(color="#00FF0080", layer_resolution=10))
    layer = build_terminator_path(june_solstice, AnalyticSolarOracle(), settings)

    assert len(layer.path) == 11
    assert layer.color == (0, 255, 0, 128)


def test_terminator_path_empty_when_curve_invalid(scripted, june_solstice) -> None:
    layer = build_terminator_path(june_solstice, scripted(lambda lat, lng: 1.0), Settings())

    assert layer.is_empty
    assert layer.color == (255, 107, 53, 255)


def test_terminator_path_empty_when_ephemeris_missing(june_solstice, caplog) -> None:
    oracle = FailingOracle(EphemerisError("cannot load de421.bsp"))
    layer = build_terminator_path(june_solstice, oracle, Settings())

    assert layer.is_empty
    assert "de421.bsp" in caplog.text


def test_terminator_path_other_errors_propagate(june_solstice) -> None:
    with pytest.raises(ZeroDivisionError):
        build_terminator_path(june_solstice, FailingOracle(ZeroDivisionError()), Settings())


def test_timezone_ruler_record(june_solstice) -> None:
    ruler = build_timezone_ruler(-10, 10, june_solstice)

    assert [s["longitude"] for s in ruler["samples"]] == [-15.0, 0.0, 15.0]
    assert ruler["samples"][1] == {
        "longitude": 0.0,
        "utc_offset": 0.0,
        "local_time": "2024-06-21T12:00:00.000Z",
        "display_time": "12:00",
    }
    assert ruler["offset"] == 0.0
