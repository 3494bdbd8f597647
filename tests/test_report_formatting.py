import os

import pandas as pd
import pytest
from matplotlib.colors import to_hex

from trip_carbon.calculator import TripCalculator
from trip_carbon.config import build_config
from trip_carbon.constants import TRANSPORT_MODE_INFO, TransportMode
from trip_carbon.errors import InvalidInputError
from trip_carbon.utils import input_helpers
from trip_carbon.utils.input_helpers import (
    COMPARISON_COLUMNS, comparison_dataframe, format_currency, format_number,
    parse_distance, print_trip_overview
)
from trip_carbon import visualization
from trip_carbon.visualization import BAR_COLOR_OVER, Visualizer, bar_color


@pytest.fixture
def plain_output():
    input_helpers.use_color(False)
    yield
    input_helpers.use_color(True)


def test_format_number_uses_brazilian_separators():
    assert format_number(1234.5) == "1.234,50"
    assert format_number(0) == "0,00"
    assert format_number(1234567.891, 1) == "1.234.567,9"
    assert format_number(-3.1) == "-3,10"


def test_format_currency():
    assert format_currency(1234.56) == "R$ 1.234,56"
    assert format_currency(3, "USD") == "USD 3,00"


@pytest.mark.parametrize("text,expected", [
    ("357.6", 357.6),
    ("357,6", 357.6),
    (" 1.234,5 ", 1234.5),
    ("12", 12.0),
])
def test_parse_distance(text, expected):
    assert parse_distance(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["abc", "", "0", "-4", "nan", "inf"])
def test_parse_distance_rejects(text):
    with pytest.raises(InvalidInputError):
        parse_distance(text)


def test_comparison_dataframe(calculator):
    entries = calculator.compare_modes(100)
    df = comparison_dataframe(entries, TransportMode.BUS)

    assert list(df.columns) == COMPARISON_COLUMNS
    assert list(df["Mode"]) == ["bicycle", "bus", "car", "truck"]
    assert df.loc[df["Selected"], "Mode"].tolist() == ["bus"]
    assert df["vs Baseline (%)"].tolist() == pytest.approx([0.0, 74.17, 100.0, 800.0])


def test_comparison_dataframe_undefined_percentage(calculator):
    df = comparison_dataframe(calculator.compare_modes(0))
    assert df["vs Baseline (%)"].isna().all()
    assert not df["Selected"].any()


def test_print_trip_overview(calculator, capsys, plain_output):
    report = calculator.analyze_trip("São Paulo", "Rio de Janeiro", "bus")
    print_trip_overview(report)
    out = capsys.readouterr().out

    assert "RESULT: SÃO PAULO -> RIO DE JANEIRO" in out
    assert "360,75 km (city registry)" in out
    assert "32,11" in out
    assert "Saved vs Carro:  11,18 kg CO2 (25,83%)" in out
    assert "vs Carro" in out
    assert "R$ 3,00 (R$ 1,50 - R$ 4,50)" in out
    assert "\x1b[" not in out


def test_print_trip_overview_extra_emission(calculator, capsys, plain_output):
    report = calculator.analyze_trip("A", "B", "truck", distance_km=100)
    print_trip_overview(report)
    out = capsys.readouterr().out

    assert "100,00 km (manual entry)" in out
    assert "Extra vs Carro:  84,00 kg CO2 (700,00%)" in out
    assert "800,0%" in out


def test_bar_color_thresholds():
    assert bar_color(0) == bar_color(25)
    assert bar_color(25) != bar_color(26)
    assert bar_color(100) != bar_color(75)
    assert bar_color(150) == BAR_COLOR_OVER


def test_visualizer_writes_png(calculator, tmp_path):
    vis = Visualizer(str(tmp_path))
    path = vis.plot_mode_comparison(calculator.compare_modes(360.75), TransportMode.BUS, title="SP -> RJ")

    assert path is not None
    assert os.path.isfile(path)
    assert path.startswith(str(tmp_path))
    assert path.endswith("mode_comparison.png")


def test_visualizer_handles_zero_and_empty(calculator, tmp_path):
    vis = Visualizer(str(tmp_path))
    assert vis.plot_mode_comparison([]) is None
    assert os.path.isfile(vis.plot_mode_comparison(calculator.compare_modes(0)))
    assert isinstance(comparison_dataframe([]), pd.DataFrame)


def test_print_trip_overview_custom_baseline(capsys, plain_output):
    calc = TripCalculator(build_config({"BASELINE_MODE": "bus"}))
    report = calc.analyze_trip("São Paulo", "Rio de Janeiro", "bicycle")
    assert report.baseline_mode == TransportMode.BUS

    print_trip_overview(report)
    out = capsys.readouterr().out

    assert "Saved vs Ônibus: 32,11 kg CO2 (100,00%)" in out
    assert "vs Ônibus" in out
    assert "134,8%" in out
    assert "vs Carro" not in out


def test_selected_bar_outlined_in_mode_colour(calculator, tmp_path, monkeypatch):
    figures = []
    monkeypatch.setattr(visualization.plt, "close", figures.append)

    vis = Visualizer(str(tmp_path))
    vis.plot_mode_comparison(calculator.compare_modes(100), TransportMode.BUS, TransportMode.BUS)

    ax = figures[0].axes[0]
    selected = ax.patches[1]  # bicycle, bus, car, truck
    assert to_hex(selected.get_edgecolor()) == TRANSPORT_MODE_INFO[TransportMode.BUS].color
    assert any("vs Ônibus" in t.get_text() for t in ax.texts)
    monkeypatch.undo()
    visualization.plt.close(figures[0])
