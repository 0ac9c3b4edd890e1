import matplotlib

matplotlib.use("Agg")

import pytest

from demandscope.datasets import load_demand_demo


@pytest.fixture(scope="session")
def demo_data():
    return load_demand_demo(seed=7)


def make_months(n, start_year=2024):
    return [f"{start_year + i // 12}-{i % 12 + 1:02d}" for i in range(n)]


def make_facts(product_id, quantities, price=1.0, forecasts=None):
    """One fact record per quantity, on consecutive months from 2024-01."""
    forecasts = forecasts or {}
    rows = []
    for i, (period, qty) in enumerate(zip(make_months(len(quantities)), quantities)):
        rows.append({
            "productId": product_id,
            "period": period,
            "salesQty": qty,
            "salesVolume": qty * price,
            "forecasts": {lag: values[i] for lag, values in forecasts.items()},
        })
    return rows


def make_product(pid, l1, l2, l3, l4):
    return {"id": pid, "level1": l1, "level2": l2, "level3": l3, "level4": l4}
