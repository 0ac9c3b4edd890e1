# =====================================================================
# demandscope.plots.layout.matrix
# ABC×XYZ matrix: proportional 3×3 grid with a treemap inside each cell
# =====================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from demandscope.eda.segmentation import ABC_CLASSES, XYZ_CLASSES, ComputedAggregate
from demandscope.plots.core.config import MATRIX_LAYOUT
from demandscope.plots.layout.treemap import Rect, squarify


@dataclass
class MatrixItem:
    aggregate: ComputedAggregate
    rect: Optional[Rect]

    @property
    def drawable(self) -> bool:
        return self.rect is not None and self.rect.w >= 1 and self.rect.h >= 1


@dataclass
class MatrixCell:
    key: str
    rect: Rect
    items: List[MatrixItem] = field(default_factory=list)

    @property
    def volume(self) -> float:
        return sum(it.aggregate.volume_total for it in self.items)

    @property
    def drawable(self) -> bool:
        return self.rect.w >= 2 and self.rect.h >= 2


@dataclass
class MatrixLayout:
    cells: List[MatrixCell]
    row_y: List[float]
    row_h: List[float]
    col_x: List[float]
    col_w: List[float]
    row_totals: List[float]
    col_totals: List[float]
    config: Dict = field(default_factory=lambda: dict(MATRIX_LAYOUT))

    def cell(self, key: str) -> MatrixCell:
        for c in self.cells:
            if c.key == key:
                return c
        raise KeyError(key)

    def items(self) -> List[MatrixItem]:
        return [it for c in self.cells for it in c.items]


def _proportional(totals: Sequence[float], start: float, extent: float):
    grand = sum(totals)
    sizes = [(v / grand) * extent if grand > 0 else 0.0 for v in totals]
    offsets = []
    pos = start
    for s in sizes:
        offsets.append(pos)
        pos += s
    return offsets, sizes


def layout_abc_xyz_matrix(
    aggregates: Sequence[ComputedAggregate],
    config: Optional[Dict] = None,
    callbacks: Optional[Dict[str, Callable]] = None,
) -> Optional[MatrixLayout]:
    """
    Place aggregates into the 3×3 ABC×XYZ matrix.

    Row heights follow the A/B/C volume totals and column widths the X/Y/Z
    totals. Inside each cell a strip of ``label_band`` is reserved for the cell
    key and the remainder (minus ``gap``) is squarified among the cell's
    aggregates by ``volume_total``.

    Parameters
    ----------
    aggregates : sequence of ComputedAggregate
        Output of ``compute_aggregates``.
    config : dict, optional
        Overrides for ``MATRIX_LAYOUT``.
    callbacks : dict, optional
        'on_layout_complete' receives ("abc_xyz", n_items, n_not_drawable).

    Returns
    -------
    MatrixLayout or None
        ``None`` when there is nothing to lay out.
    """
    if not aggregates:
        return None
    cfg = {**MATRIX_LAYOUT, **(config or {})}
    callbacks = callbacks or {}

    chart_w = cfg["width"] - cfg["margin_left"] - cfg["margin_right"]
    chart_h = cfg["height"] - cfg["margin_top"] - cfg["margin_bottom"]
    gap, band = cfg["gap"], cfg["label_band"]

    groups: Dict[str, List[ComputedAggregate]] = {
        f"{r}{c}": [] for r in ABC_CLASSES for c in XYZ_CLASSES
    }
    for agg in aggregates:
        key = f"{agg.abc_class}{agg.xyz_class}"
        if key in groups:
            groups[key].append(agg)

    def gvol(key):
        return sum(a.volume_total for a in groups[key])

    row_totals = [sum(gvol(f"{r}{c}") for c in XYZ_CLASSES) for r in ABC_CLASSES]
    col_totals = [sum(gvol(f"{r}{c}") for r in ABC_CLASSES) for c in XYZ_CLASSES]
    row_y, row_h = _proportional(row_totals, cfg["margin_top"], chart_h)
    col_x, col_w = _proportional(col_totals, cfg["margin_left"], chart_w)

    cells = []
    for ri, r in enumerate(ABC_CLASSES):
        for ci, c in enumerate(XYZ_CLASSES):
            key = f"{r}{c}"
            aggs = groups[key]
            outer = Rect(col_x[ci], row_y[ri], col_w[ci], row_h[ri])
            inner = outer.inset(left=gap, top=band, right=gap, bottom=gap)
            if aggs and inner.w > 1 and inner.h > 1:
                rects = squarify([a.volume_total for a in aggs], inner)
            else:
                rects = [None] * len(aggs)
            cells.append(MatrixCell(
                key=key,
                rect=outer,
                items=[MatrixItem(a, rect) for a, rect in zip(aggs, rects)],
            ))

    layout = MatrixLayout(
        cells=cells,
        row_y=row_y, row_h=row_h,
        col_x=col_x, col_w=col_w,
        row_totals=row_totals, col_totals=col_totals,
        config=cfg,
    )

    if 'on_layout_complete' in callbacks:
        items = layout.items()
        callbacks['on_layout_complete']("abc_xyz", len(items), sum(not it.drawable for it in items))

    return layout
