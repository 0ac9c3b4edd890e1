# demandscope/plots/charts/plot_static.py
"""Static (matplotlib / seaborn) renditions of the classification views."""
from __future__ import annotations

import matplotlib.pyplot as plt
from matplotlib.patches import Patch, Rectangle
import seaborn as sns
import pandas as pd
from typing import Optional, Sequence, Tuple

from demandscope.eda.segmentation import ABC_CLASSES, XYZ_CLASSES, ComputedAggregate
from demandscope.eda.thresholds import CLASS_RECOMMENDATIONS, DEFAULT_THRESHOLDS, ClassificationThresholds, band_labels
from demandscope.plots.core.palette import CELL_COLOR, LABEL_FG
from demandscope.plots.interaction import cell_label_visible, item_label
from demandscope.plots.layout.matrix import MatrixLayout, layout_abc_xyz_matrix


def classification_matrix(aggregates: Sequence[ComputedAggregate], normalize: bool = True) -> pd.DataFrame:
    """
    ABC × XYZ crosstab of volume.

    Rows A/B/C, columns X/Y/Z, values the summed ``volume_total`` (as % of the
    total when ``normalize``). Empty cells are 0.
    """
    matrix = pd.DataFrame(0.0, index=list(ABC_CLASSES), columns=list(XYZ_CLASSES))
    for agg in aggregates:
        if agg.abc_class in matrix.index and agg.xyz_class in matrix.columns:
            matrix.loc[agg.abc_class, agg.xyz_class] += agg.volume_total
    matrix.index.name = 'ABC'
    matrix.columns.name = 'XYZ'
    total = matrix.values.sum()
    if normalize and total > 0:
        matrix = matrix / total * 100
    return matrix


def plot_classification_matrix(
    aggregates: Sequence[ComputedAggregate],
    figsize: Tuple[int, int] = (8, 6),
    show_recommendations: bool = True,
) -> plt.Figure:
    """
    Heatmap of the share of total volume in each ABC×XYZ cell.

    Parameters
    ----------
    aggregates : sequence of ComputedAggregate
        Output of ``compute_aggregates``.
    figsize : tuple
        Figure size
    show_recommendations : bool
        Print the planning recommendation under the share in each cell.

    Returns
    -------
    plt.Figure
    """
    matrix = classification_matrix(aggregates)

    annot = matrix.map(lambda v: f'{v:.1f}')
    if show_recommendations:
        for r in ABC_CLASSES:
            for c in XYZ_CLASSES:
                rec = CLASS_RECOMMENDATIONS.get(f'{r}{c}')
                if rec:
                    annot.loc[r, c] = f'{annot.loc[r, c]}\n{rec}'

    fig, ax = plt.subplots(figsize=figsize)

    sns.heatmap(
        matrix, annot=annot.values, fmt='', cmap='Blues',
        cbar_kws={'label': '% of Volume'}, ax=ax,
        linewidths=0.5, linecolor='white',
        annot_kws={'fontsize': 9},
    )

    ax.set_xlabel('XYZ (demand variability)', fontsize=12)
    ax.set_ylabel('ABC (volume contribution)', fontsize=12)
    ax.set_title('ABC-XYZ Classification: Share of Volume', fontsize=13, fontweight='bold')

    plt.tight_layout()
    return fig


def plot_abc_xyz_static(
    aggregates: Sequence[ComputedAggregate],
    volume_type: str = 'monetary',
    layout: Optional[MatrixLayout] = None,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS,
    figsize: Tuple[float, float] = (9.25, 7.375),
) -> plt.Figure:
    """
    Matrix treemap drawn with matplotlib patches (for reports / notebooks).

    Uses the same layout as the interactive chart, in canvas units with the
    y axis pointing down.
    """
    if layout is None:
        layout = layout_abc_xyz_matrix(aggregates)

    fig, ax = plt.subplots(figsize=figsize)
    ax.set_axis_off()
    if layout is None:
        ax.text(0.5, 0.5, 'No data', ha='center', va='center', color='gray', transform=ax.transAxes)
        return fig

    cfg = layout.config
    W, H = cfg['width'], cfg['height']
    ml, mt = cfg['margin_left'], cfg['margin_top']
    ch = H - mt - cfg['margin_bottom']

    for cell in layout.cells:
        if not cell.drawable:
            continue
        r = cell.rect
        ax.add_patch(Rectangle((r.x, r.y), r.w, r.h, facecolor=CELL_COLOR[cell.key],
                               edgecolor='white', lw=1.5))
        if cell_label_visible(r, cfg):
            ax.text(r.x + 5, r.y + 12, cell.key, color=LABEL_FG[cell.key],
                    fontsize=9, fontweight='bold', va='center')

        for item in cell.items:
            if not item.drawable:
                continue
            ir = item.rect
            ax.add_patch(Rectangle((ir.x + 0.5, ir.y + 0.5), max(0.0, ir.w - 1), max(0.0, ir.h - 1),
                                   facecolor=CELL_COLOR[cell.key], edgecolor='white',
                                   lw=0.5, alpha=0.85))
            label = item_label(ir, item.aggregate.label, cfg)
            if label is not None:
                ax.text(label.x, label.y, label.text, color='white',
                        fontsize=label.font_size * 0.75, ha='center', va='center')

    for ri, r in enumerate(ABC_CLASSES):
        ax.text(ml - 8, layout.row_y[ri] + layout.row_h[ri] / 2, r,
                fontsize=11, fontweight='bold', ha='center', va='center', color='#374151')
    bands = band_labels(thresholds)
    for ci, c in enumerate(XYZ_CLASSES):
        x = layout.col_x[ci] + layout.col_w[ci] / 2
        ax.text(x, mt + ch + 14, c, fontsize=11, fontweight='bold', ha='center', color='#374151')
        ax.text(x, mt + ch + 28, bands[c], fontsize=7, ha='center', color='#9ca3af')

    unit = '$' if volume_type == 'monetary' else 'qty'
    ax.text(14, mt + ch / 2, f'Volume ({unit}) ↑', rotation=90, ha='center', va='center',
            fontsize=9, fontweight='bold', color='#6b7280')

    handles = [Patch(facecolor=color, label=key) for key, color in CELL_COLOR.items()]
    ax.legend(handles=handles, title='Cells', bbox_to_anchor=(1.02, 1), loc='upper left', fontsize=8)

    ax.set_xlim(0, W)
    ax.set_ylim(H, 0)
    ax.set_aspect('equal')
    plt.tight_layout()
    return fig
