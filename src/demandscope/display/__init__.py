from .table import master_table, style_master_table, format_table_volume
from .export import aggregates_to_csv, timeseries_to_csv, aggregates_frame

__all__ = [
    "master_table",
    "style_master_table",
    "format_table_volume",
    "aggregates_to_csv",
    "timeseries_to_csv",
    "aggregates_frame",
]
