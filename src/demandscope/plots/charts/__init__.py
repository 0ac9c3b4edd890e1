"""
Charting functions (user-facing plotting APIs).
"""

from .plot_abc_xyz import plot_abc_xyz
from .plot_sunburst import plot_sunburst
from .plot_timeseries import plot_timeseries_detail, detail_summary
from .plot_static import plot_abc_xyz_static, plot_classification_matrix, classification_matrix

__all__ = [
    "plot_abc_xyz",
    "plot_sunburst",
    "plot_timeseries_detail",
    "detail_summary",
    "plot_abc_xyz_static",
    "plot_classification_matrix",
    "classification_matrix",
]
