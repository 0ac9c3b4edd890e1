"""ABC-XYZ segmentation of a product hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from demandscope.eda.hierarchy import HierarchyIndex, check_level
from demandscope.eda.thresholds import ClassificationThresholds, DEFAULT_THRESHOLDS
from demandscope.evaluation.metrics import mape

VOLUME_TYPES = ('quantity', 'monetary')
ABC_CLASSES = ('A', 'B', 'C')
XYZ_CLASSES = ('X', 'Y', 'Z')


@dataclass
class ComputedAggregate:
    """One hierarchy node at the requested level with its classification."""

    element_id: str
    hierarchy_path: str
    volume_total: float
    variance_percent: float
    abc_class: str
    xyz_class: str
    aggregates: Dict[str, float] = field(default_factory=dict)
    product_ids: Tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return self.hierarchy_path.split('/')[-1]

    @property
    def level(self) -> int:
        return len(self.hierarchy_path.split('/'))

    @property
    def cell(self) -> str:
        return f"{self.abc_class}{self.xyz_class}"

    def to_dict(self) -> dict:
        return asdict(self)


def check_volume_type(volume_type: str) -> str:
    if volume_type not in VOLUME_TYPES:
        raise ValueError(f"volume_type must be 'quantity' or 'monetary', got '{volume_type}'")
    return volume_type


def element_id_for(path: str) -> str:
    return path.replace('/', '-')


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population std / mean × 100; 0.0 for empty input or a zero mean."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 0.0
    mean = values.mean()
    if mean == 0:
        return 0.0
    return float(values.std() / mean * 100)


def xyz_class(
    variance_percent: float,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS,
) -> str:
    """X up to ``xyz_x`` (inclusive), Y up to ``xyz_y`` (inclusive), Z above."""
    if variance_percent <= thresholds.xyz_x:
        return 'X'
    if variance_percent <= thresholds.xyz_y:
        return 'Y'
    return 'Z'


def abc_classification(
    df: pd.DataFrame,
    a_pct: float = DEFAULT_THRESHOLDS.abc_a,
    b_pct: float = DEFAULT_THRESHOLDS.abc_b,
    id_col: str = 'hierarchy_path',
    value_col: str = 'volume_total',
) -> pd.DataFrame:
    """
    Pareto classification on cumulative volume share.

    Parameters
    ----------
    df : pd.DataFrame
        One or more rows per id; values are summed per id.
    a_pct : float, default 0.20
        Cumulative share (inclusive) up to which an id is class A.
    b_pct : float, default 0.60
        Cumulative share (inclusive) up to which an id is class B.
    id_col : str, default 'hierarchy_path'
        Column name for the item identifier.
    value_col : str, default 'volume_total'
        Column name for the volume driving the ranking.

    Returns
    -------
    pd.DataFrame
        Ranked descending by volume, with columns:
        - {id_col}
        - {value_col}: total per id
        - cum_share: cumulative share of the grand total
        - abc_class: 'A', 'B', or 'C'

    Notes
    -----
    Ties keep the order in which ids first appear in ``df``. When the grand
    total is zero no id accumulates any share and all ids are class C.

    Examples
    --------
    >>> abc_df = abc_classification(frame, value_col='total_quantity')
    >>> abc_df['abc_class'].value_counts()
    """
    agg = df.groupby(id_col, sort=False)[value_col].sum().reset_index()

    # Sort by value descending (stable)
    agg = agg.sort_values(value_col, ascending=False, kind='mergesort').reset_index(drop=True)

    # Cumulative share
    total = agg[value_col].sum()
    agg['cum_share'] = agg[value_col].cumsum() / total if total > 0 else np.nan

    # ABC assignment
    agg['abc_class'] = np.where(
        agg['cum_share'] <= a_pct, 'A',
        np.where(agg['cum_share'] <= b_pct, 'B', 'C')
    )

    return agg


def _group_stats(rows: pd.DataFrame) -> Dict[str, dict]:
    """Window totals, pooled CoV and forecast errors per hierarchy path."""
    stats = {}
    for path, grp in rows.groupby('hierarchy_path', sort=False):
        qty = grp['sales_qty'].to_numpy()
        stats[path] = {
            'total_volume': float(grp['sales_volume'].sum()),
            'total_quantity': float(qty.sum()),
            'variance_percent': coefficient_of_variation(qty),
            'avg_lag1_error': mape(qty, grp['lag1'].to_numpy()),
            'avg_lag5_error': mape(qty, grp['lag5'].to_numpy()),
        }
    return stats


_EMPTY_STATS = {
    'total_volume': 0.0,
    'total_quantity': 0.0,
    'variance_percent': 0.0,
    'avg_lag1_error': 0.0,
    'avg_lag5_error': 0.0,
}


def compute_aggregates(
    products,
    facts=None,
    volume_type: str = 'monetary',
    hierarchy_level: int = 4,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS,
    callbacks: Optional[Dict[str, Callable]] = None,
) -> List[ComputedAggregate]:
    """
    Roll products up to a hierarchy level and classify each group ABC-XYZ.

    Every product lands in exactly one aggregate. Each member product
    contributes its trailing ``thresholds.window`` periods (all of them when
    fewer exist); quantities and monetary volumes are summed over those rows,
    and the coefficient of variation is taken over the pooled monthly
    quantities of the group.

    Parameters
    ----------
    products : HierarchyIndex, DataFrame or iterable of dict
        Product taxonomy, or a prepared ``HierarchyIndex`` (then ``facts`` is ignored).
    facts : DataFrame or iterable of dict, optional
        Monthly facts per product.
    volume_type : {'quantity', 'monetary'}, default 'monetary'
        Which total drives ``volume_total`` and the ABC ranking.
    hierarchy_level : {1, 2, 3, 4}, default 4
        Taxonomy depth to aggregate to.
    thresholds : ClassificationThresholds
        ABC / XYZ cut-offs and window length.
    callbacks : dict, optional
        Keys: 'on_compute_start', 'on_compute_complete', 'on_warning'
        (see ``get_analysis_callbacks``).

    Returns
    -------
    list of ComputedAggregate
        Sorted ascending by ``hierarchy_path``.

    Examples
    --------
    >>> products, facts = load_demand_demo()
    >>> aggs = compute_aggregates(products, facts, 'quantity', 2)
    >>> [a.cell for a in aggs][:3]
    """
    check_volume_type(volume_type)
    check_level(hierarchy_level)
    callbacks = callbacks or {}

    index = HierarchyIndex.coerce(products, facts)

    if 'on_compute_start' in callbacks:
        callbacks['on_compute_start'](hierarchy_level, volume_type, len(index.products), len(index.facts))

    groups = index.groups(hierarchy_level)
    window = index.trailing_window(thresholds.window)
    rows = window.merge(groups, on='product_id', how='inner')

    if 'on_warning' in callbacks:
        unknown = len(window) - len(rows)
        if unknown:
            callbacks['on_warning']('compute_aggregates', f"{unknown} fact rows reference unknown products and were ignored")
        no_facts = (~groups['product_id'].isin(window['product_id'])).sum()
        if no_facts:
            callbacks['on_warning']('compute_aggregates', f"{no_facts} products have no facts and contribute zero volume")

    stats = _group_stats(rows)
    members = groups.groupby('hierarchy_path', sort=False)['product_id'].agg(list)

    frame = pd.DataFrame([
        {'hierarchy_path': path, **stats.get(path, _EMPTY_STATS)}
        for path in members.index
    ])
    if frame.empty:
        if 'on_compute_complete' in callbacks:
            callbacks['on_compute_complete'](hierarchy_level, volume_type, {})
        return []

    frame['volume_total'] = frame['total_quantity'] if volume_type == 'quantity' else frame['total_volume']

    abc = abc_classification(frame, thresholds.abc_a, thresholds.abc_b)
    abc_by_path = dict(zip(abc['hierarchy_path'], abc['abc_class']))

    result = []
    for row in frame.sort_values('hierarchy_path', kind='mergesort').itertuples(index=False):
        result.append(ComputedAggregate(
            element_id=element_id_for(row.hierarchy_path),
            hierarchy_path=row.hierarchy_path,
            volume_total=float(row.volume_total),
            variance_percent=float(row.variance_percent),
            abc_class=str(abc_by_path[row.hierarchy_path]),
            xyz_class=xyz_class(row.variance_percent, thresholds),
            aggregates={
                'total-volume': float(row.total_volume),
                'total-quantity': float(row.total_quantity),
                'avg-lag1-error': float(row.avg_lag1_error),
                'avg-lag5-error': float(row.avg_lag5_error),
            },
            product_ids=tuple(members[row.hierarchy_path]),
        ))

    if 'on_compute_complete' in callbacks:
        counts = pd.Series([a.cell for a in result]).value_counts().to_dict()
        callbacks['on_compute_complete'](hierarchy_level, volume_type, counts)

    return result


def aggregates_to_frame(aggregates: Sequence[ComputedAggregate]) -> pd.DataFrame:
    """Flatten aggregates into a DataFrame (one row each, aggregate keys as columns)."""
    columns = ['element_id', 'hierarchy_path', 'volume_total', 'variance_percent',
               'abc_class', 'xyz_class', 'product_count']
    if not aggregates:
        return pd.DataFrame(columns=columns)
    rows = []
    for agg in aggregates:
        rows.append({
            'element_id': agg.element_id,
            'hierarchy_path': agg.hierarchy_path,
            'volume_total': agg.volume_total,
            'variance_percent': agg.variance_percent,
            'abc_class': agg.abc_class,
            'xyz_class': agg.xyz_class,
            'product_count': len(agg.product_ids),
            **agg.aggregates,
        })
    return pd.DataFrame(rows)
