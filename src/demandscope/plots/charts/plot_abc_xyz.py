# =====================================================================
# demandscope.plots.charts.plot_abc_xyz
# ABC×XYZ matrix chart: proportional cells, squarified sub-boxes
# =====================================================================

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

import plotly.graph_objects as go

from demandscope.eda.segmentation import ABC_CLASSES, XYZ_CLASSES, ComputedAggregate, check_volume_type
from demandscope.eda.thresholds import DEFAULT_THRESHOLDS, ClassificationThresholds, band_labels
from demandscope.plots.core.config import MATRIX_LAYOUT
from demandscope.plots.core.palette import CELL_COLOR, LABEL_FG
from demandscope.plots.core.theme import apply_legend, apply_theme, get_theme, hide_axes
from demandscope.plots.interaction import cell_label_visible, item_label, tooltip_content
from demandscope.plots.layout.matrix import MatrixLayout, layout_abc_xyz_matrix


def _rect_path(x, y, w, h):
    return [x, x + w, x + w, x, x], [y, y, y + h, y + h, y]


def plot_abc_xyz(
    aggregates: Sequence[ComputedAggregate],
    volume_type: str = "monetary",
    layout: Optional[MatrixLayout] = None,
    config: Optional[Dict] = None,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS,
    show_legend: bool = True,
    hovered: Optional[str] = None,
    theme: str = "fa",
    title: Optional[str] = None,
    engine: str = "plotly",
    callbacks: Optional[Dict[str, Callable]] = None,
):
    """
    ABC×XYZ matrix as a Plotly figure.

    Rows A/B/C are sized by their volume totals, columns X/Y/Z likewise. Each
    cell is filled with its ``CELL_COLOR`` and holds one squarified sub-box
    per aggregate. Sub-boxes hover with the aggregate's tooltip and carry the
    aggregate's ``element_id`` in ``customdata``.

    Parameters
    ----------
    aggregates : sequence of ComputedAggregate
        Output of ``compute_aggregates``.
    volume_type : {'quantity', 'monetary'}
        Only used for labels and tooltips.
    layout : MatrixLayout, optional
        Precomputed layout; computed from ``aggregates`` when omitted.
    config : dict, optional
        Overrides for ``MATRIX_LAYOUT``.
    thresholds : ClassificationThresholds
        Used for the column band captions.
    show_legend : bool
        Show the cell-color legend.
    hovered : str, optional
        ``element_id`` drawn with the hover highlight.
    theme : str
        Visual theme (default: "fa").
    title : str, optional
        Figure title.
    engine : str
        Plotting engine (default: "plotly").
    callbacks : dict, optional
        Forwarded to ``layout_abc_xyz_matrix``.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    if engine != "plotly":
        raise NotImplementedError("Only Plotly engine is supported.")
    check_volume_type(volume_type)

    if layout is None:
        layout = layout_abc_xyz_matrix(aggregates, config, callbacks)

    fig = go.Figure()
    t = get_theme(theme)

    if layout is None:
        cfg = {**MATRIX_LAYOUT, **(config or {})}
        fig.add_annotation(
            x=cfg["width"] / 2, y=cfg["height"] / 2, text="No data",
            showarrow=False, font=dict(color=t["muted_color"], size=13),
        )
        hide_axes(fig, cfg["width"], cfg["height"])
        return apply_theme(fig, theme)

    cfg = layout.config
    W, H = cfg["width"], cfg["height"]
    ml, mt = cfg["margin_left"], cfg["margin_top"]
    cw = W - ml - cfg["margin_right"]
    ch = H - mt - cfg["margin_bottom"]

    shapes = []
    annotations = []

    # -----------------------------
    # Cells
    # -----------------------------
    for cell in layout.cells:
        if not cell.drawable:
            continue
        r = cell.rect
        shapes.append(dict(
            type="rect", x0=r.x, y0=r.y, x1=r.x + r.w, y1=r.y + r.h,
            fillcolor=CELL_COLOR[cell.key], line=dict(color="white", width=1.5),
            layer="below",
        ))
        if cell_label_visible(r, cfg):
            annotations.append(dict(
                x=r.x + 5, y=r.y + 12, text=f"<b>{cell.key}</b>",
                xanchor="left", yanchor="middle", showarrow=False,
                font=dict(color=LABEL_FG[cell.key], size=11),
            ))

    # -----------------------------
    # Sub-boxes
    # -----------------------------
    for cell in layout.cells:
        for item in cell.items:
            if not item.drawable:
                continue
            agg, r = item.aggregate, item.rect
            xs, ys = _rect_path(r.x + 0.5, r.y + 0.5, max(0.0, r.w - 1), max(0.0, r.h - 1))
            fig.add_trace(go.Scatter(
                x=xs, y=ys,
                mode="lines",
                fill="toself",
                fillcolor=CELL_COLOR[cell.key],
                line=dict(color="rgba(255,255,255,0.65)", width=0.7),
                opacity=0.58 if agg.element_id == hovered else 0.85,
                hoveron="fills",
                hoverinfo="text",
                text=tooltip_content(agg, volume_type).to_html(),
                customdata=[agg.element_id] * len(xs),
                name=agg.element_id,
                showlegend=False,
            ))
            label = item_label(r, agg.label, cfg)
            if label is not None:
                annotations.append(dict(
                    x=label.x, y=label.y, text=label.text, showarrow=False,
                    font=dict(color="white", size=label.font_size),
                ))

    # -----------------------------
    # Grid lines
    # -----------------------------
    for i in (1, 2):
        shapes.append(dict(type="line", x0=ml, x1=ml + cw, y0=layout.row_y[i], y1=layout.row_y[i],
                           line=dict(color="white", width=2)))
        shapes.append(dict(type="line", x0=layout.col_x[i], x1=layout.col_x[i], y0=mt, y1=mt + ch,
                           line=dict(color="white", width=2)))

    # -----------------------------
    # Axes
    # -----------------------------
    unit = "$" if volume_type == "monetary" else "qty"
    annotations.append(dict(
        x=14, y=mt + ch / 2, text=f"<b>Volume ({unit}) ↑</b>", textangle=-90,
        showarrow=False, font=dict(color=t["muted_color"], size=11),
    ))
    annotations.append(dict(
        x=ml + cw / 2, y=H - 6, text="<b>Variance %  →</b>", yanchor="bottom",
        showarrow=False, font=dict(color=t["muted_color"], size=11),
    ))
    for ri, r in enumerate(ABC_CLASSES):
        annotations.append(dict(
            x=ml - 8, y=layout.row_y[ri] + layout.row_h[ri] / 2, text=f"<b>{r}</b>",
            showarrow=False, font=dict(color=t["axis_color"], size=13),
        ))
    bands = band_labels(thresholds)
    for ci, c in enumerate(XYZ_CLASSES):
        x = layout.col_x[ci] + layout.col_w[ci] / 2
        annotations.append(dict(x=x, y=mt + ch + 14, text=f"<b>{c}</b>", showarrow=False,
                                font=dict(color=t["axis_color"], size=13)))
        annotations.append(dict(x=x, y=mt + ch + 28, text=bands[c], showarrow=False,
                                font=dict(color="#9ca3af", size=9)))

    # -----------------------------
    # Legend (cell swatches)
    # -----------------------------
    for key, color in CELL_COLOR.items():
        fig.add_trace(go.Scatter(
            x=[None], y=[None], mode="markers", name=key,
            marker=dict(symbol="square", size=11, color=color),
            hoverinfo="skip", showlegend=True,
        ))
    area = "revenue" if volume_type == "monetary" else "quantity"

    fig.update_layout(
        shapes=shapes,
        annotations=annotations,
        width=W, height=H,
        title=title,
        legend_title_text=f"Cells (area = {area})",
    )
    hide_axes(fig, W, H)
    apply_theme(fig, theme)
    apply_legend(fig, theme, visible=show_legend)
    return fig
