"""Synthetic product hierarchy and monthly demand used by the demo dashboard."""

from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from demandscope.eda.hierarchy import FORECAST_LAGS

LEVEL1_CATEGORIES = ['Apparel', 'Footwear']
LEVEL2_CATEGORIES = {
    'Apparel': ["Men's Casual", "Women's Casual", "Men's Performance", "Women's Performance", "Kids"],
    'Footwear': ["Men's Running", "Women's Running", "Men's Training", "Women's Training", "Kids"],
}
LEVEL3_SUBCATEGORIES = [
    'T-Shirts', 'Polo Shirts', 'Shorts', 'Jackets', 'Pants',
    'Tanks', 'Sweatshirts', 'Hoodies', 'Compression', 'Baselayer',
]
SKU_SUFFIXES = ['Core', 'Pro', 'Elite', 'Lite', 'Max', 'Ultra', 'Basic', 'Premium', 'Plus', 'Nano']

# forecast error half-width per lag (uniform ±)
LAG_ERRORS = {'lag1': 0.10, 'lag5': 0.20, 'lag10': 0.30, 'lag15': 0.40}


def generate_product_hierarchy(count: int = 200) -> pd.DataFrame:
    """
    Deterministic 4-level taxonomy: category → subcategory → product line → SKU.

    Returns
    -------
    pd.DataFrame
        Columns: id, level1, level2, level3, level4, launch_date, eol_date.
        Ids look like ``prod-0001``, SKUs like ``SKU-0001-Core``.
    """
    rows = []
    for i in range(count):
        l1 = LEVEL1_CATEGORIES[i % 2]
        l2_list = LEVEL2_CATEGORIES[l1]
        rows.append({
            'id': f"prod-{i + 1:04d}",
            'level1': l1,
            'level2': l2_list[i % len(l2_list)],
            'level3': LEVEL3_SUBCATEGORIES[(i * 3) % len(LEVEL3_SUBCATEGORIES)],
            'level4': f"SKU-{i + 1:04d}-{SKU_SUFFIXES[i % len(SKU_SUFFIXES)]}",
            # launches spread over 2020-2024, end-of-life over 2026-2028
            'launch_date': f"{2020 + i % 5}-{1 + i % 12:02d}-{1 + i % 28:02d}",
            'eol_date': f"{2026 + i % 3}-{1 + (i + 3) % 12:02d}-{1 + (i + 7) % 28:02d}",
        })
    return pd.DataFrame(rows)


def _months(start_year: int, years: int) -> List[str]:
    return [f"{y}-{m:02d}" for y in range(start_year, start_year + years) for m in range(1, 13)]


def _volatility_band(n: int) -> Tuple[float, float]:
    # 30% stable, 50% moderate, 20% high variability
    idx = (n * 13) % 100
    if idx < 30:
        return 0.85, 1.15
    if idx < 80:
        return 0.6, 1.4
    return 0.3, 1.7


def _round_half_up(x):
    return np.floor(np.asarray(x, dtype=float) + 0.5)


def generate_timeseries(
    products: pd.DataFrame,
    start_year: int = 2024,
    years: int = 2,
    seed: Optional[int] = 42,
    missing_forecast_rate: float = 0.0,
) -> pd.DataFrame:
    """
    Monthly sales and lagged forecasts for every product.

    Parameters
    ----------
    products : pd.DataFrame
        Output of ``generate_product_hierarchy`` (ids must end in a number).
    start_year : int, default 2024
        First calendar year; periods run January..December.
    years : int, default 2
        Number of calendar years.
    seed : int or None, default 42
        Seed for ``numpy.random.default_rng``.
    missing_forecast_rate : float, default 0.0
        Share of forecast cells blanked out (NaN) at random, to mimic horizons
        for which no forecast was issued.

    Returns
    -------
    pd.DataFrame
        Columns: product_id, period, sales_qty, sales_volume, lag1, lag5, lag10, lag15.

    Notes
    -----
    - Base quantity ``100 + n % 500`` and price ``20 + (n * 7) % 80`` where
      ``n`` is the numeric part of the id.
    - Apparel peaks in May-August (+50%), footwear in March-June (+30%).
    - Forecast for lag k is the actual times ``1 + e`` with ``e`` uniform in
      ±10/20/30/40% for lags 1/5/10/15.
    """
    if not 0 <= missing_forecast_rate <= 1:
        raise ValueError(f"missing_forecast_rate must be within [0, 1], got {missing_forecast_rate}")

    rng = np.random.default_rng(seed)
    months = _months(start_year, years)
    month_num = np.array([int(m.split('-')[1]) for m in months])
    frames = []

    for product in products.itertuples(index=False):
        n = int(str(product.id).split('-')[-1])
        base_qty = 100 + n % 500
        base_price = 20 + (n * 7) % 80

        if product.level1 == 'Apparel':
            seasonal = 0.8 + np.where((month_num >= 5) & (month_num <= 8), 0.5, 0.0)
        else:
            seasonal = 0.9 + np.where((month_num >= 3) & (month_num <= 6), 0.3, 0.0)

        lo, hi = _volatility_band(n)
        random_factor = rng.uniform(lo, hi, size=len(months))
        qty = _round_half_up(base_qty * seasonal * random_factor)

        frame = pd.DataFrame({
            'product_id': product.id,
            'period': months,
            'sales_qty': qty,
            'sales_volume': qty * base_price,
        })
        for lag, half_width in LAG_ERRORS.items():
            err = rng.uniform(-half_width, half_width, size=len(months))
            frame[lag] = _round_half_up(qty * (1 + err))
        frames.append(frame)

    if not frames:
        return pd.DataFrame(columns=['product_id', 'period', 'sales_qty', 'sales_volume'] + FORECAST_LAGS)

    facts = pd.concat(frames, ignore_index=True)
    if missing_forecast_rate > 0:
        for lag in FORECAST_LAGS:
            mask = rng.random(len(facts)) < missing_forecast_rate
            facts.loc[mask, lag] = np.nan
    return facts


def load_demand_demo(
    count: int = 200,
    seed: Optional[int] = 42,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Products and facts for the demo dashboard.

    Returns
    -------
    (products, facts) : tuple of pd.DataFrame

    Examples
    --------
    >>> products, facts = load_demand_demo()
    >>> len(products), len(facts)
    (200, 4800)
    """
    products = generate_product_hierarchy(count)
    return products, generate_timeseries(products, seed=seed)


__all__ = [
    "generate_product_hierarchy",
    "generate_timeseries",
    "load_demand_demo",
    "LEVEL1_CATEGORIES",
    "LEVEL2_CATEGORIES",
    "LEVEL3_SUBCATEGORIES",
]
