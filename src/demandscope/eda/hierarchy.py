"""Product taxonomy and monthly fact table."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union

import numpy as np
import pandas as pd

LEVEL_COLUMNS = ['level1', 'level2', 'level3', 'level4']
FORECAST_LAGS = ['lag1', 'lag5', 'lag10', 'lag15']

PRODUCT_COLUMNS = ['id'] + LEVEL_COLUMNS + ['launch_date', 'eol_date']
FACT_COLUMNS = ['product_id', 'period', 'sales_qty', 'sales_volume'] + FORECAST_LAGS

# camelCase record keys accepted from UI-shaped data
_RENAMES = {
    'launchDate': 'launch_date',
    'eolDate': 'eol_date',
    'productId': 'product_id',
    'salesQty': 'sales_qty',
    'salesVolume': 'sales_volume',
}

Records = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def check_level(hierarchy_level: int) -> int:
    if hierarchy_level not in (1, 2, 3, 4):
        raise ValueError(f"hierarchy_level must be one of 1, 2, 3, 4, got {hierarchy_level!r}")
    return hierarchy_level


def hierarchy_path(products: pd.DataFrame, hierarchy_level: int) -> pd.Series:
    """'/'-joined taxonomy prefix of every product at the requested depth."""
    check_level(hierarchy_level)
    cols = LEVEL_COLUMNS[:hierarchy_level]
    if products.empty:
        return pd.Series([], index=products.index, dtype=object)
    return products[cols].astype(str).agg('/'.join, axis=1)


def _flatten_forecasts(record: Mapping[str, Any]) -> dict:
    row = {_RENAMES.get(k, k): v for k, v in record.items() if k != 'forecasts'}
    forecasts = record.get('forecasts') or {}
    for lag in FORECAST_LAGS:
        value = forecasts.get(lag, row.get(lag))
        row[lag] = np.nan if value is None else value
    return row


def normalize_products(products: Records) -> pd.DataFrame:
    """Coerce product records into the canonical product frame."""
    if isinstance(products, pd.DataFrame):
        df = products.rename(columns=_RENAMES).copy()
    else:
        df = pd.DataFrame([{_RENAMES.get(k, k): v for k, v in p.items()} for p in products])

    if df.empty and len(df.columns) == 0:
        return pd.DataFrame(columns=PRODUCT_COLUMNS)

    for col in ['launch_date', 'eol_date']:
        if col not in df.columns:
            df[col] = None
    missing = [c for c in ['id'] + LEVEL_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Product data is missing required columns: {missing}")

    return df[PRODUCT_COLUMNS].reset_index(drop=True)


def normalize_facts(facts: Records) -> pd.DataFrame:
    """Coerce fact records into the canonical fact frame (absent forecasts → NaN)."""
    if isinstance(facts, pd.DataFrame):
        df = facts.rename(columns=_RENAMES).copy()
        if 'forecasts' in df.columns:
            df = pd.DataFrame([_flatten_forecasts(r) for r in df.to_dict('records')])
    else:
        df = pd.DataFrame([_flatten_forecasts(r) for r in facts])

    if df.empty:
        return pd.DataFrame({c: pd.Series(dtype=float if c not in ('product_id', 'period') else object)
                             for c in FACT_COLUMNS})

    for lag in FORECAST_LAGS:
        if lag not in df.columns:
            df[lag] = np.nan
    missing = [c for c in FACT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Fact data is missing required columns: {missing}")

    df = df[FACT_COLUMNS].copy()
    df['period'] = df['period'].astype(str)
    df[['sales_qty', 'sales_volume'] + FORECAST_LAGS] = (
        df[['sales_qty', 'sales_volume'] + FORECAST_LAGS].astype(float)
    )
    return df.reset_index(drop=True)


class HierarchyIndex:
    """
    Product taxonomy (4 levels) plus its monthly sales/forecast facts.

    Both tables are read-only once built; every query returns a new frame.

    Parameters
    ----------
    products : DataFrame or iterable of dict
        One row per product with ``id`` and ``level1``..``level4``.
    facts : DataFrame or iterable of dict
        One row per product per ``period`` (``YYYY-MM``) with ``sales_qty``,
        ``sales_volume`` and optional forecasts per lag.

    Examples
    --------
    >>> index = HierarchyIndex(products, facts)
    >>> index.paths(2).value_counts().head()
    >>> window = index.trailing_window(12)
    """

    def __init__(self, products: Records, facts: Records):
        self.products = normalize_products(products)
        self.facts = normalize_facts(facts)

    @classmethod
    def coerce(cls, products: Union["HierarchyIndex", Records], facts: Records = None) -> "HierarchyIndex":
        if isinstance(products, cls):
            return products
        return cls(products, facts if facts is not None else [])

    def __len__(self) -> int:
        return len(self.products)

    def paths(self, hierarchy_level: int) -> pd.Series:
        """Hierarchy path of each product, indexed like ``self.products``."""
        return hierarchy_path(self.products, hierarchy_level)

    def groups(self, hierarchy_level: int) -> pd.DataFrame:
        """Product id → hierarchy path at ``hierarchy_level``."""
        return pd.DataFrame({
            'product_id': self.products['id'].values,
            'hierarchy_path': self.paths(hierarchy_level).values,
        })

    def members(self, path: str) -> List[str]:
        """Ids of the products sitting under ``path`` (any depth)."""
        parts = path.split('/')
        check_level(len(parts))
        mask = np.ones(len(self.products), dtype=bool)
        for col, part in zip(LEVEL_COLUMNS, parts):
            mask &= (self.products[col].astype(str) == part).values
        return self.products.loc[mask, 'id'].tolist()

    def trailing_window(self, window: int = 12) -> pd.DataFrame:
        """Most recent ``window`` periods of each product (fewer if not available)."""
        facts = self.facts.sort_values(['product_id', 'period'], kind='mergesort')
        return facts.groupby('product_id', sort=False).tail(window)

    def periods(self) -> List[str]:
        return sorted(self.facts['period'].unique().tolist())
