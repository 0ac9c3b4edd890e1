# =====================================================================
# demandscope.plots.charts.plot_sunburst
# Hierarchical volume distribution as concentric rings
# =====================================================================

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

import plotly.graph_objects as go

from demandscope.eda.segmentation import ComputedAggregate, check_volume_type
from demandscope.plots.core.config import SUNBURST_LAYOUT
from demandscope.plots.core.palette import plasma_colorscale, rgb_to_str
from demandscope.plots.core.theme import apply_theme, get_theme, hide_axes
from demandscope.plots.interaction import arc_label, tooltip_content
from demandscope.plots.layout.sunburst import SunburstTree, arc_points, build_sunburst, ring_radii

DEFAULT_TITLE = "ABC-XYZ Classified Time Series: Hierarchical Volume Distribution"


def _legend_trace(tree: SunburstTree, cfg: Dict, theme: dict) -> go.Scatter:
    """Invisible marker carrying the plasma colorbar, placed like the canvas legend bar."""
    W, H = cfg["width"], cfg["height"]
    y1, y2 = cfg["legend_y1"], cfg["legend_y2"]
    ticks = cfg["legend_ticks"]
    values = [tree.variance_at(t) for t in ticks]
    lo, hi = tree.min_variance, tree.max_variance
    if hi == lo:
        # plotly needs a non-empty range; the single value is still labelled
        hi = lo + 1e-9

    return go.Scatter(
        x=[None], y=[None], mode="markers", hoverinfo="skip", showlegend=False,
        marker=dict(
            color=[lo],
            cmin=lo, cmax=hi,
            colorscale=plasma_colorscale(),
            showscale=True,
            colorbar=dict(
                title=dict(text="variance %", side="top",
                           font=dict(color=theme["axis_color"], size=11)),
                x=(cfg["legend_x"] + cfg["legend_w"]) / W, xanchor="right",
                y=1 - (y1 + y2) / 2 / H, yanchor="middle",
                len=(y2 - y1) / H, lenmode="fraction",
                thickness=cfg["legend_w"],
                tickmode="array",
                tickvals=values,
                ticktext=[f"{v:.1f}%" for v in values],
                tickfont=dict(color=theme["axis_color"], size=9),
                outlinewidth=0,
            ),
        ),
    )


def plot_sunburst(
    aggregates: Sequence[ComputedAggregate],
    volume_type: str = "monetary",
    tree: Optional[SunburstTree] = None,
    config: Optional[Dict] = None,
    show_legend: bool = True,
    hovered: Optional[str] = None,
    theme: str = "dark",
    title: Optional[str] = DEFAULT_TITLE,
    engine: str = "plotly",
    callbacks: Optional[Dict[str, Callable]] = None,
):
    """
    Sunburst of the hierarchy, colored by volume-weighted variance.

    Ring ``k`` holds the level-``k`` nodes; each arc's angle is its share of
    the parent's volume. Colors run through the plasma ramp from the lowest
    to the highest node variance.

    Parameters
    ----------
    aggregates : sequence of ComputedAggregate
        Usually level-4 aggregates so that every ring is populated.
    volume_type : {'quantity', 'monetary'}
        Only used for tooltips.
    tree : SunburstTree, optional
        Precomputed tree; built from ``aggregates`` when omitted.
    config : dict, optional
        Overrides for ``SUNBURST_LAYOUT``.
    show_legend : bool
        Show the variance colorbar.
    hovered : str, optional
        Node path drawn with the hover highlight.
    theme : str
        Visual theme (default: "dark").
    title : str, optional
        Figure title.
    engine : str
        Plotting engine (default: "plotly").
    callbacks : dict, optional
        Forwarded to ``build_sunburst``.

    Returns
    -------
    plotly.graph_objects.Figure
        Arc traces carry the node path in ``customdata``.
    """
    if engine != "plotly":
        raise NotImplementedError("Only Plotly engine is supported.")
    check_volume_type(volume_type)

    cfg = {**SUNBURST_LAYOUT, **(config or {})}
    if tree is None:
        tree = build_sunburst(aggregates, callbacks=callbacks)
    t = get_theme(theme)
    separator = t.get("separator_color", t["background"])

    fig = go.Figure()
    annotations = []

    for node in tree.visible_nodes():
        r1, r2 = ring_radii(node.level, cfg)
        xs, ys = arc_points(cfg["cx"], cfg["cy"], r1, r2, node.start_angle, node.end_angle,
                            cfg["arc_resolution"])
        if not xs:
            continue
        fig.add_trace(go.Scatter(
            x=xs, y=ys,
            mode="lines",
            fill="toself",
            fillcolor=rgb_to_str(node.color),
            line=dict(color=separator, width=0.6),
            opacity=0.72 if node.path == hovered else 1.0,
            hoveron="fills",
            hoverinfo="text",
            text=tooltip_content(node, volume_type, name_max_chars=None).to_html(),
            customdata=[node.path] * len(xs),
            name=node.path,
            showlegend=False,
        ))

        label = arc_label(node, cfg)
        if label is not None:
            annotations.append(dict(
                x=label.x, y=label.y, text=label.text, textangle=label.angle,
                showarrow=False, font=dict(color="white", size=label.font_size),
            ))

    hub_r = cfg["inner_radius"] - 1
    shapes = [dict(
        type="circle",
        x0=cfg["cx"] - hub_r, x1=cfg["cx"] + hub_r,
        y0=cfg["cy"] - hub_r, y1=cfg["cy"] + hub_r,
        fillcolor=t.get("hub_color", t["background"]), line=dict(width=0),
    )]

    if show_legend and len(tree) > 1:
        fig.add_trace(_legend_trace(tree, cfg, t))

    fig.update_layout(
        shapes=shapes,
        annotations=annotations,
        width=cfg["width"], height=cfg["height"],
        title=dict(text=title, font=dict(color=t["title_color"], size=13)) if title else None,
        showlegend=False,
    )
    hide_axes(fig, cfg["width"], cfg["height"])
    apply_theme(fig, theme)
    return fig
