import matplotlib.pyplot as plt
import pandas as pd
import plotly.graph_objects as go
import pytest

from demandscope.eda.segmentation import ComputedAggregate
from demandscope.plots.charts.plot_abc_xyz import plot_abc_xyz
from demandscope.plots.charts.plot_static import (
    classification_matrix,
    plot_abc_xyz_static,
    plot_classification_matrix,
)
from demandscope.plots.charts.plot_sunburst import plot_sunburst
from demandscope.plots.charts.plot_timeseries import detail_summary, plot_timeseries_detail
from demandscope.plots.layout.sunburst import build_sunburst


@pytest.fixture
def aggs():
    return [
        ComputedAggregate("A-x", "A/x", 600.0, 10.0, "A", "X"),
        ComputedAggregate("B-y", "B/y", 300.0, 30.0, "B", "Y"),
        ComputedAggregate("C-z", "C/z", 100.0, 50.0, "C", "Z"),
    ]


@pytest.fixture
def detail():
    return pd.DataFrame({
        "period": ["2024-11", "2024-12", "2025-01"],
        "actual": [100.0, 120.0, 90.0],
        "lag1": [105.0, 118.0, 95.0],
        "lag5": [90.0, None, 80.0],
        "lag10": [None, None, None],
        "lag15": [130.0, 100.0, 70.0],
    })


# ---------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------

def test_matrix_figure_traces(aggs):
    fig = plot_abc_xyz(aggs, "monetary", hovered="B-y")
    assert isinstance(fig, go.Figure)
    boxes = [t for t in fig.data if t.fill == "toself"]
    assert [t.name for t in boxes] == ["A-x", "B-y", "C-z"]
    assert len(fig.data) == 3 + 9
    by = next(t for t in boxes if t.name == "B-y")
    assert by.opacity == pytest.approx(0.58)
    assert set(by.customdata) == {"B-y"}
    assert "BY · Variance: 30.0%" in by.text
    assert fig.layout.legend.title.text == "Cells (area = revenue)"


def test_matrix_axis_captions(aggs):
    texts = [a.text for a in plot_abc_xyz(aggs, "quantity").layout.annotations]
    assert "<b>Volume (qty) ↑</b>" in texts
    assert "<b>Variance %  →</b>" in texts
    assert "≤20%" in texts


def test_matrix_hidden_legend(aggs):
    fig = plot_abc_xyz(aggs, show_legend=False)
    assert fig.layout.showlegend is False


def test_matrix_no_data():
    fig = plot_abc_xyz([])
    assert len(fig.data) == 0
    assert fig.layout.annotations[0].text == "No data"


def test_only_plotly_engine(aggs, detail):
    with pytest.raises(NotImplementedError):
        plot_abc_xyz(aggs, engine="matplotlib")
    with pytest.raises(NotImplementedError):
        plot_sunburst(aggs, engine="bokeh")
    with pytest.raises(NotImplementedError):
        plot_timeseries_detail(detail, engine="matplotlib")


# ---------------------------------------------------------------------
# Sunburst
# ---------------------------------------------------------------------

def test_sunburst_one_trace_per_visible_node():
    tree = build_sunburst([("A/x", 300, 10), ("B/y", 100, 30), ("C/z", 0, 5)])
    fig = plot_sunburst([], "monetary", tree=tree)
    arcs = [t for t in fig.data if t.fill == "toself"]
    assert [t.name for t in arcs] == ["A", "A/x", "B", "B/y"]
    assert len(fig.data) == len(tree.visible_nodes()) + 1
    assert fig.layout.shapes[0].type == "circle"
    assert fig.layout.shapes[0].fillcolor == "#17112e"

    no_legend = plot_sunburst([], "monetary", tree=tree, show_legend=False)
    assert len(no_legend.data) == 4


def test_sunburst_hover_highlight_and_colorbar():
    tree = build_sunburst([("A/x", 300, 10), ("B/y", 100, 30)])
    fig = plot_sunburst([], tree=tree, hovered="B")
    b = next(t for t in fig.data if t.name == "B")
    assert b.opacity == pytest.approx(0.72)
    colorbar = fig.data[-1].marker.colorbar
    assert list(colorbar.ticktext) == ["30.0%", "25.0%", "20.0%", "15.0%", "10.0%"]


def test_sunburst_from_aggregates(aggs):
    fig = plot_sunburst(aggs, "quantity")
    assert fig.layout.title.text.startswith("ABC-XYZ Classified Time Series")
    assert len([t for t in fig.data if t.fill == "toself"]) == 6


# ---------------------------------------------------------------------
# Time-series detail
# ---------------------------------------------------------------------

def test_timeseries_traces(detail):
    fig = plot_timeseries_detail(detail, "monetary", title="Time Series: A/x")
    assert [t.name for t in fig.data] == ["Actual Sales", "Forecast (Lag 1)", "Forecast (Lag 5)"]
    assert list(fig.data[0].x) == ["11/24", "12/24", "01/25"]
    assert fig.layout.yaxis.tickprefix == "$"

    fig = plot_timeseries_detail(detail, "quantity", lags=["lag15"])
    assert len(fig.data) == 2
    assert fig.layout.yaxis.tickprefix == ""


def test_timeseries_unknown_lag(detail):
    with pytest.raises(ValueError):
        plot_timeseries_detail(detail, lags=["lag2"])


def test_detail_summary_cards(aggs):
    cards = detail_summary(aggs[0], "monetary")
    assert [c["title"] for c in cards] == ["Total Volume", "Variance", "ABC Class", "XYZ Class"]
    assert cards[0]["value"] == "$600"
    assert cards[1]["value"] == "10.0%"


# ---------------------------------------------------------------------
# Static renderings
# ---------------------------------------------------------------------

def test_classification_matrix_shares(aggs):
    matrix = classification_matrix(aggs)
    assert matrix.loc["A", "X"] == pytest.approx(60.0)
    assert matrix.loc["C", "Z"] == pytest.approx(10.0)
    assert matrix.values.sum() == pytest.approx(100.0)
    assert classification_matrix([]).values.sum() == 0


def test_static_figures(aggs):
    fig = plot_classification_matrix(aggs)
    assert isinstance(fig, plt.Figure)
    plt.close(fig)

    fig = plot_abc_xyz_static(aggs, "monetary")
    ax = fig.axes[0]
    assert len(ax.patches) >= 6
    plt.close(fig)

    fig = plot_abc_xyz_static([])
    assert fig.axes[0].texts[0].get_text() == "No data"
    plt.close(fig)
