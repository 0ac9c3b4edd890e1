import numpy as np
import pytest

from demandscope.eda.detail import DETAIL_COLUMNS, detail_scores, timeseries_detail
from demandscope.eda.hierarchy import FORECAST_LAGS, HierarchyIndex
from demandscope.eda.segmentation import compute_aggregates

from conftest import make_facts, make_product


@pytest.fixture
def index():
    products = [
        make_product("s1", "A", "B", "C", "D1"),
        make_product("s2", "A", "B", "C", "D2"),
        make_product("s3", "A", "X", "Y", "Z"),
    ]
    facts = (
        make_facts("s1", [10, 20], price=2.0, forecasts={"lag1": [12, None]})
        + make_facts("s2", [30, 40], price=1.0, forecasts={"lag1": [30, 40]})
        + make_facts("s3", [1000, 1000], price=1.0)
    )
    return HierarchyIndex(products, facts)


def test_quantity_detail_averages_members(index):
    detail = timeseries_detail(index, "A/B/C", "quantity")
    assert list(detail.columns) == DETAIL_COLUMNS
    assert detail["period"].tolist() == ["2024-01", "2024-02"]
    assert detail["actual"].tolist() == [20.0, 30.0]
    # s1 has no lag-1 forecast in February, so only s2 counts
    assert detail["lag1"].tolist() == [21.0, 40.0]
    assert detail["lag5"].isna().all()


def test_monetary_detail_prices_forecasts(index):
    detail = timeseries_detail(index, "A/B/C", "monetary")
    assert detail["actual"].tolist() == [25.0, 40.0]
    assert detail["lag1"].tolist() == pytest.approx([27.0, 40.0])


def test_aggregate_target_uses_its_members(index):
    (agg,) = [a for a in compute_aggregates(index, volume_type="quantity", hierarchy_level=3)
              if a.hierarchy_path == "A/B/C"]
    detail = timeseries_detail(index, agg, "quantity")
    assert detail["actual"].tolist() == [20.0, 30.0]


def test_last_n_keeps_latest_periods(index):
    detail = timeseries_detail(index, "A", "quantity", last_n=1)
    assert detail["period"].tolist() == ["2024-02"]
    assert detail["actual"].tolist() == [pytest.approx((20 + 40 + 1000) / 3)]


def test_node_without_facts_is_empty(index):
    detail = timeseries_detail(index, "Nope", "quantity")
    assert detail.empty
    assert list(detail.columns) == DETAIL_COLUMNS


def test_detail_scores_one_row_per_lag(index):
    scores = detail_scores(timeseries_detail(index, "A/B/C", "quantity"))
    assert scores["lag"].tolist() == FORECAST_LAGS
    lag1 = scores.set_index("lag").loc["lag1"]
    assert lag1["n_obs"] == 2
    assert lag1["mape"] == pytest.approx((5.0 + 100 / 3) / 2)
    lag5 = scores.set_index("lag").loc["lag5"]
    assert lag5["n_obs"] == 0
    assert lag5["mape"] == 0.0
    assert not np.isnan(lag5["bias"])
