# demandscope/display/export.py
"""CSV export of the master table and of the time-series detail."""

from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd

from demandscope.eda.hierarchy import FORECAST_LAGS
from demandscope.eda.segmentation import ComputedAggregate

AGGREGATE_CSV_COLUMNS = ["Hierarchy Path", "Volume", "Variance", "ABC", "XYZ"]
TIMESERIES_CSV_COLUMNS = [
    "Period", "Actual Sales",
    "Forecast Lag 1", "Forecast Lag 5", "Forecast Lag 10", "Forecast Lag 15",
]


def _write(df: pd.DataFrame, path: Optional[Union[str, Path]]) -> Optional[str]:
    if path is None:
        return df.to_csv(index=False, lineterminator="\n")
    df.to_csv(path, index=False, lineterminator="\n")
    return None


def aggregates_frame(aggregates: Sequence[ComputedAggregate]) -> pd.DataFrame:
    """Raw values of the master table; variance rounded to two decimals."""
    return pd.DataFrame(
        [
            {
                "Hierarchy Path": a.hierarchy_path,
                "Volume": a.volume_total,
                "Variance": f"{a.variance_percent:.2f}",
                "ABC": a.abc_class,
                "XYZ": a.xyz_class,
            }
            for a in aggregates
        ],
        columns=AGGREGATE_CSV_COLUMNS,
    )


def aggregates_to_csv(
    aggregates: Sequence[ComputedAggregate],
    path: Optional[Union[str, Path]] = None,
) -> Optional[str]:
    """
    Export aggregates, one row each.

    Parameters
    ----------
    aggregates : sequence of ComputedAggregate
    path : str or Path, optional
        Destination file. When omitted the CSV text is returned.

    Returns
    -------
    str or None
    """
    return _write(aggregates_frame(aggregates), path)


def timeseries_to_csv(
    detail: pd.DataFrame,
    path: Optional[Union[str, Path]] = None,
) -> Optional[str]:
    """
    Export a ``timeseries_detail`` frame with the dashboard's column headers.

    Values are rounded to whole units; missing forecasts are left empty.
    """
    out = pd.DataFrame({"Period": detail["period"].astype(str).values})
    out["Actual Sales"] = detail["actual"].round().astype("Int64").values
    for lag, col in zip(FORECAST_LAGS, TIMESERIES_CSV_COLUMNS[2:]):
        out[col] = detail[lag].round().astype("Int64").values
    return _write(out, path)
