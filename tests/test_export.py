import numpy as np
import pandas as pd
from pandas.io.formats.style import Styler

from demandscope.display.export import (
    AGGREGATE_CSV_COLUMNS,
    TIMESERIES_CSV_COLUMNS,
    aggregates_to_csv,
    timeseries_to_csv,
)
from demandscope.display.table import format_table_volume, master_table, style_master_table
from demandscope.eda.segmentation import ComputedAggregate


def _aggs():
    return [
        ComputedAggregate("A-B", "A/B", 2_345_678.0, 12.3456, "A", "X"),
        ComputedAggregate("A-C", "A/C", 999.4, 45.0, "C", "Z"),
    ]


def test_aggregates_csv():
    text = aggregates_to_csv(_aggs())
    lines = text.splitlines()
    assert lines[0] == ",".join(AGGREGATE_CSV_COLUMNS)
    assert lines[1] == "A/B,2345678.0,12.35,A,X"
    assert lines[2] == "A/C,999.4,45.00,C,Z"


def test_aggregates_csv_to_file(tmp_path):
    path = tmp_path / "aggregates.csv"
    assert aggregates_to_csv(_aggs(), path) is None
    df = pd.read_csv(path)
    assert list(df.columns) == AGGREGATE_CSV_COLUMNS
    assert len(df) == 2


def test_empty_aggregates_csv_has_header():
    assert aggregates_to_csv([]).strip() == ",".join(AGGREGATE_CSV_COLUMNS)


def test_timeseries_csv_leaves_missing_forecasts_empty():
    detail = pd.DataFrame({
        "period": ["2024-01", "2024-02"],
        "actual": [100.0, 120.4],
        "lag1": [110.0, np.nan],
        "lag5": [np.nan, 99.6],
        "lag10": [np.nan, np.nan],
        "lag15": [np.nan, np.nan],
    })
    lines = timeseries_to_csv(detail).splitlines()
    assert lines[0] == ",".join(TIMESERIES_CSV_COLUMNS)
    assert lines[1] == "2024-01,100,110,,,"
    assert lines[2] == "2024-02,120,,100,,"


def test_table_volume_format():
    assert format_table_volume(2_345_678) == "$2.35M"
    assert format_table_volume(48_200, "quantity") == "48K"
    assert format_table_volume(999.4) == "$999"


def test_master_table():
    table = master_table(_aggs(), "monetary")
    assert list(table.index) == ["A-B", "A-C"]
    assert table.loc["A-B", "Volume"] == "$2.35M"
    assert table.loc["A-B", "Variance"] == "12.3%"
    assert table.loc["A-C", "ABC"] == "C"


def test_style_master_table():
    sty = style_master_table(master_table(_aggs()))
    assert isinstance(sty, Styler)
    html = sty.to_html()
    assert "demandscope-master" in html
