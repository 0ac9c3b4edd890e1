from .hierarchy import (
    HierarchyIndex,
    hierarchy_path,
    LEVEL_COLUMNS,
    FORECAST_LAGS,
)
from .segmentation import (
    ComputedAggregate,
    compute_aggregates,
    abc_classification,
    xyz_class,
    coefficient_of_variation,
    aggregates_to_frame,
    VOLUME_TYPES,
)
from .detail import (
    timeseries_detail,
    detail_scores,
    DETAIL_COLUMNS,
)
from .thresholds import (
    ClassificationThresholds,
    DEFAULT_THRESHOLDS,
    CLASS_RECOMMENDATIONS,
    band_labels,
)

__all__ = [
    "HierarchyIndex",
    "hierarchy_path",
    "LEVEL_COLUMNS",
    "FORECAST_LAGS",
    "ComputedAggregate",
    "compute_aggregates",
    "abc_classification",
    "xyz_class",
    "coefficient_of_variation",
    "aggregates_to_frame",
    "VOLUME_TYPES",
    "ClassificationThresholds",
    "DEFAULT_THRESHOLDS",
    "CLASS_RECOMMENDATIONS",
    "band_labels",
    "timeseries_detail",
    "detail_scores",
    "DETAIL_COLUMNS",
]
