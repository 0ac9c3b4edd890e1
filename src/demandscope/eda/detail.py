"""Per-period view of one hierarchy node: actuals vs. forecasts by lag."""

from __future__ import annotations

from typing import Union

import numpy as np
import pandas as pd

from demandscope.eda.hierarchy import FORECAST_LAGS, HierarchyIndex
from demandscope.eda.segmentation import ComputedAggregate, check_volume_type
from demandscope.evaluation.metrics import score_all

DETAIL_COLUMNS = ['period', 'actual'] + FORECAST_LAGS


def timeseries_detail(
    index: HierarchyIndex,
    target: Union[ComputedAggregate, str],
    volume_type: str = 'monetary',
    last_n: int = 24,
) -> pd.DataFrame:
    """
    Average product series under a hierarchy node.

    For each period, the mean over the node's member products of the actual
    (quantity or monetary) and of every forecast lag. Missing forecasts are
    skipped, so a lag column averages only the products that had a forecast
    at that horizon (NaN when none had). Forecasts are issued in units; for
    monetary detail each forecast is priced at its row's unit price
    (``sales_volume / sales_qty``).

    Parameters
    ----------
    index : HierarchyIndex
        Products and facts.
    target : ComputedAggregate or str
        Aggregate, or hierarchy path. Aggregates with ``product_ids`` use
        them; otherwise members are looked up by path.
    volume_type : {'quantity', 'monetary'}
        Which actual to show.
    last_n : int, default 24
        Keep only the most recent periods.

    Returns
    -------
    pd.DataFrame
        Columns: period, actual, lag1, lag5, lag10, lag15; ascending period.
    """
    check_volume_type(volume_type)
    if isinstance(target, ComputedAggregate):
        ids = list(target.product_ids) or index.members(target.hierarchy_path)
    else:
        ids = index.members(target)

    facts = index.facts[index.facts['product_id'].isin(ids)]
    if facts.empty:
        return pd.DataFrame({c: pd.Series(dtype=object if c == 'period' else float)
                             for c in DETAIL_COLUMNS})

    facts = facts.copy()
    if volume_type == 'monetary':
        facts['actual'] = facts['sales_volume']
        price = facts['sales_volume'] / facts['sales_qty'].replace(0, np.nan)
        for lag in FORECAST_LAGS:
            facts[lag] = facts[lag] * price
    else:
        facts['actual'] = facts['sales_qty']

    detail = (
        facts.groupby('period', sort=True)[['actual'] + FORECAST_LAGS]
        .mean()
        .reset_index()
    )
    return detail[DETAIL_COLUMNS].tail(last_n).reset_index(drop=True)


def detail_scores(detail: pd.DataFrame) -> pd.DataFrame:
    """Accuracy of the averaged actual against each forecast lag (one row per lag)."""
    rows = []
    for lag in FORECAST_LAGS:
        scores = score_all(detail['actual'].to_numpy(), detail[lag].to_numpy())
        rows.append({'lag': lag, **scores})
    return pd.DataFrame(rows)
