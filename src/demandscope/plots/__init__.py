# demandscope/plots/__init__.py
"""
Visualization module for demandscope.

Structure:
- core/: Colors, themes, canvas geometry
- layout/: Squarified treemap, ABC×XYZ matrix, sunburst tree
- interaction.py: Hit-testing, tooltips, label fitting, events
- charts/: Plotly and matplotlib renderers
"""
from __future__ import annotations

# ============================================================================
# Styling exports (public API)
# ============================================================================
from .core import (
    THEMES,
    PLASMA_STOPS,
    CELL_COLOR,
    LABEL_FG,
    ABC_COLORS,
    XYZ_COLORS,
    plasma_color,
    plasma_colorscale,
    apply_theme,
    apply_legend,
    hex_to_rgba,
    rgb_to_str,
)

# ============================================================================
# Layout
# ============================================================================
from .layout import (
    Rect,
    squarify,
    worst_ratio,
    layout_abc_xyz_matrix,
    SunburstTree,
    SunburstNode,
    build_sunburst,
    arc_points,
)

# ============================================================================
# Interaction
# ============================================================================
from .interaction import (
    format_volume,
    truncate_label,
    tooltip_content,
    place_tooltip,
    hit_test_rect,
    hit_test_arc,
    node_aggregate,
    ChartInteraction,
    LegendState,
)

# ============================================================================
# Charts
# ============================================================================
from .charts import (
    plot_abc_xyz,
    plot_sunburst,
    plot_timeseries_detail,
    plot_abc_xyz_static,
    plot_classification_matrix,
)

# ============================================================================
# Public API
# ============================================================================
__all__ = [
    # Styling
    "THEMES",
    "PLASMA_STOPS",
    "CELL_COLOR",
    "LABEL_FG",
    "ABC_COLORS",
    "XYZ_COLORS",
    "plasma_color",
    "plasma_colorscale",
    "apply_theme",
    "apply_legend",
    "hex_to_rgba",
    "rgb_to_str",
    # Layout
    "Rect",
    "squarify",
    "worst_ratio",
    "layout_abc_xyz_matrix",
    "SunburstTree",
    "SunburstNode",
    "build_sunburst",
    "arc_points",
    # Interaction
    "format_volume",
    "truncate_label",
    "tooltip_content",
    "place_tooltip",
    "hit_test_rect",
    "hit_test_arc",
    "node_aggregate",
    "ChartInteraction",
    "LegendState",
    # Charts
    "plot_abc_xyz",
    "plot_sunburst",
    "plot_timeseries_detail",
    "plot_abc_xyz_static",
    "plot_classification_matrix",
]
