import pytest

from trip_carbon.constants import TransportMode
from trip_carbon.emissions import EmissionEngine
from trip_carbon.errors import InvalidInputError
from trip_carbon.models import CalculatorConfig


@pytest.fixture
def engine(config):
    return EmissionEngine(config)


def test_car_100km(engine):
    assert engine.emission_for(100, "car") == 12.0
    assert engine.emission_for(100, TransportMode.CAR) == 12.0


def test_bicycle_is_zero(engine):
    for d in (0, 1, 100, 12345.678):
        assert engine.emission_for(d, "bicycle") == 0.0


def test_emission_rounded_to_two_decimals(engine):
    # 360.75 km * 0.089 = 32.10675
    assert engine.emission_for(360.75, "bus") == pytest.approx(32.11)


def test_linearity(engine):
    for mode in (TransportMode.CAR, TransportMode.BUS, TransportMode.TRUCK):
        for d in (0.5, 3.33, 100, 357.61, 2500.4):
            single = engine.emission_for(d, mode)
            double = engine.emission_for(2 * d, mode)
            # one rounding step of slack
            assert double == pytest.approx(2 * single, abs=0.01 + 1e-9)


def test_mode_key_is_validated(engine):
    with pytest.raises(InvalidInputError):
        engine.emission_for(10, "plane")
    with pytest.raises(InvalidInputError):
        engine.emission_for(10, None)
    # surrounding whitespace and case are tolerated
    assert engine.emission_for(10, " Truck ") == 9.6


def test_invalid_distance(engine):
    for bad in (-1, float("nan"), float("inf"), "100", None):
        with pytest.raises(InvalidInputError):
            engine.emission_for(bad, "car")


def test_compare_all_modes_100km(engine):
    result = engine.compare_all_modes(100)

    assert [e.mode for e in result] == [
        TransportMode.BICYCLE, TransportMode.BUS, TransportMode.CAR, TransportMode.TRUCK
    ]
    assert [e.emission for e in result] == pytest.approx([0.0, 8.9, 12.0, 96.0])
    assert [e.percentage_vs_car for e in result] == pytest.approx([0.0, 74.17, 100.0, 800.0])
    assert all(e.percentage_defined for e in result)


def test_compare_all_modes_sorted_ascending(engine):
    for d in (0.1, 7.5, 357.6, 4000):
        emissions = [e.emission for e in engine.compare_all_modes(d)]
        assert emissions == sorted(emissions)
        assert engine.compare_all_modes(d)[0].mode == TransportMode.BICYCLE


def test_ties_keep_declaration_order(tied_config):
    result = EmissionEngine(tied_config).compare_all_modes(100)
    assert [e.mode for e in result][:2] == [TransportMode.BICYCLE, TransportMode.BUS]
    assert result[0].emission == result[1].emission == 0.0


def test_zero_distance_marks_percentage_undefined(engine):
    result = engine.compare_all_modes(0)
    assert len(result) == len(TransportMode)
    for entry in result:
        assert entry.emission == 0.0
        assert entry.percentage_vs_car == 0.0
        assert entry.percentage_defined is False


def test_zero_car_factor_marks_percentage_undefined():
    from trip_carbon.config import build_config

    engine = EmissionEngine(build_config({"EMISSION_FACTOR_CAR": 0}))
    result = engine.compare_all_modes(50)
    assert not any(e.percentage_defined for e in result)
    assert [e.mode for e in result][-1] == TransportMode.TRUCK


def test_custom_baseline_mode():
    engine = EmissionEngine(CalculatorConfig(baseline_mode="bus"))
    by_mode = {e.mode: e for e in engine.compare_all_modes(100)}
    assert by_mode[TransportMode.BUS].percentage_vs_car == 100.0
    assert by_mode[TransportMode.CAR].percentage_vs_car == pytest.approx(134.83)


def test_huge_distance_keeps_finite_emission(engine):
    # far beyond any rounding precision, returned as computed
    assert engine.emission_for(1e307, "truck") == pytest.approx(9.6e306)


def test_overflowing_emission_rejected():
    from trip_carbon.config import build_config

    engine = EmissionEngine(build_config({"EMISSION_FACTOR_TRUCK": 10}))
    with pytest.raises(InvalidInputError):
        engine.emission_for(1e308, "truck")
