import math

import pytest

from trip_carbon.errors import InvalidInputError
from trip_carbon.models import City
from trip_carbon.utils.calculations import (
    haversine_km, require_non_negative, require_number, round_half_up
)


def test_round_half_up_rounds_halves_up():
    # built-in round() would give 0.12 (half to even)
    assert round_half_up(0.125) == 0.13
    assert round_half_up(74.16666666) == 74.17
    assert round_half_up(12.0) == 12.0
    assert round_half_up(2.5, 0) == 3.0
    assert round_half_up(-1.5, 0) == -1.0


def test_round_half_up_respects_decimals():
    assert round_half_up(1.23456, 3) == 1.235
    assert round_half_up(1.25, 1) == 1.3
    assert round_half_up(599.6, 0) == 600.0


def test_haversine_sao_paulo_rio():
    sp = City("São Paulo", -23.5505, -46.6333)
    rj = City("Rio de Janeiro", -22.9068, -43.1729)
    assert haversine_km(sp, rj) == pytest.approx(360.7488, abs=1e-3)


def test_haversine_is_symmetric_and_zero_on_same_point():
    a = City("A", 10.0, 20.0)
    b = City("B", -35.5, 140.25)
    assert haversine_km(a, b) == haversine_km(b, a)
    assert haversine_km(a, a) == 0.0


def test_haversine_quarter_meridian():
    # Equator to pole along a meridian: a quarter of the circumference
    equator = City("Equator", 0.0, 0.0)
    pole = City("Pole", 90.0, 0.0)
    assert haversine_km(equator, pole) == pytest.approx(math.pi * 6371 / 2)


def test_require_number_rejects_non_numbers():
    for bad in ("10", None, True, float("nan"), float("inf"), -float("inf")):
        with pytest.raises(InvalidInputError):
            require_number(bad, "x")
    assert require_number(3, "x") == 3.0


def test_require_non_negative():
    assert require_non_negative(0, "x") == 0.0
    with pytest.raises(InvalidInputError):
        require_non_negative(-0.01, "x")


def test_round_half_up_passes_large_values_through():
    assert round_half_up(9.6e306) == 9.6e306
    assert round_half_up(2.0 ** 60, 0) == 2.0 ** 60
    assert round_half_up(1e305, 10) == 1e305
