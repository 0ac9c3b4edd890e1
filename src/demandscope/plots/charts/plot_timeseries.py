# =====================================================================
# demandscope.plots.charts.plot_timeseries
# Time-series detail of a selected aggregate: actuals vs. lagged forecasts
# =====================================================================

from __future__ import annotations

from typing import List, Optional

import pandas as pd
import plotly.graph_objects as go

from demandscope.eda.hierarchy import FORECAST_LAGS
from demandscope.plots.core.palette import ABC_COLORS, XYZ_COLORS
from demandscope.plots.core.theme import apply_legend, apply_theme
from demandscope.plots.interaction import format_volume

SERIES_STYLE = {
    "actual": dict(name="Actual Sales", color="#3b82f6", dash="solid"),
    "lag1": dict(name="Forecast (Lag 1)", color="#22c55e", dash="dash"),
    "lag5": dict(name="Forecast (Lag 5)", color="#f59e0b", dash="dash"),
    "lag10": dict(name="Forecast (Lag 10)", color="#8b5cf6", dash="dot"),
    "lag15": dict(name="Forecast (Lag 15)", color="#ef4444", dash="dot"),
}


def _period_tick(period: str) -> str:
    """'2025-03' → '03/25'."""
    year, _, month = period.partition("-")
    return f"{month}/{year[2:]}" if month else period


def plot_timeseries_detail(
    detail: pd.DataFrame,
    volume_type: str = "monetary",
    lags: Optional[List[str]] = None,
    title: Optional[str] = None,
    theme: str = "fa",
    engine: str = "plotly",
):
    """
    Line chart of a ``timeseries_detail`` frame.

    Parameters
    ----------
    detail : pd.DataFrame
        Columns period, actual and the forecast lags.
    volume_type : {'quantity', 'monetary'}
        Controls the y-axis tick prefix.
    lags : list of str, optional
        Forecast lags to draw (default: lag1 and lag5).
    title : str, optional
        Figure title, e.g. "Time Series: Apparel/Kids".
    theme : str
        Visual theme (default: "fa").
    engine : str
        Plotting engine (default: "plotly").

    Returns
    -------
    plotly.graph_objects.Figure
    """
    if engine != "plotly":
        raise NotImplementedError("Only Plotly engine is supported.")

    lags = ["lag1", "lag5"] if lags is None else lags
    unknown = [lag for lag in lags if lag not in FORECAST_LAGS]
    if unknown:
        raise ValueError(f"Unknown forecast lags {unknown}. Expected a subset of {FORECAST_LAGS}")

    x = [_period_tick(str(p)) for p in detail["period"]]
    fig = go.Figure()

    for col in ["actual"] + lags:
        style = SERIES_STYLE[col]
        fig.add_trace(go.Scatter(
            x=x,
            y=detail[col],
            mode="lines",
            name=style["name"],
            line=dict(color=style["color"], width=2, dash=style["dash"]),
            connectgaps=False,
            hovertemplate=f"{style['name']}: %{{y:,.0f}}<extra></extra>",
        ))

    prefix = "$" if volume_type == "monetary" else ""
    fig.update_layout(
        title=title,
        hovermode="x unified",
        height=350,
        margin=dict(l=60, r=20, t=60 if title else 30, b=40),
    )
    fig.update_xaxes(tickfont=dict(size=10), showgrid=True, griddash="dash")
    fig.update_yaxes(tickfont=dict(size=10), tickprefix=prefix, tickformat="~s", griddash="dash")

    apply_theme(fig, theme)
    apply_legend(fig, theme)
    return fig


def detail_summary(aggregate, volume_type: str = "monetary") -> List[dict]:
    """Header cards shown above the detail chart: volume, variance and classes."""
    return [
        {"title": "Total Volume", "value": format_volume(aggregate.volume_total, volume_type)},
        {"title": "Variance", "value": f"{aggregate.variance_percent:.1f}%"},
        {"title": "ABC Class", "value": aggregate.abc_class,
         "color": ABC_COLORS.get(aggregate.abc_class)},
        {"title": "XYZ Class", "value": aggregate.xyz_class,
         "color": XYZ_COLORS.get(aggregate.xyz_class)},
    ]
