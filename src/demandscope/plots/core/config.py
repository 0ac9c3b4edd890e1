# demandscope/plots/core/config.py
"""Canvas geometry of the two demand charts (units are canvas pixels)."""
from __future__ import annotations

from typing import Any, Dict

MATRIX_LAYOUT: Dict[str, Any] = {
    "width": 740,
    "height": 590,
    "margin_left": 56,     # row labels + axis title
    "margin_bottom": 54,   # col labels + axis title
    "margin_top": 8,
    "margin_right": 10,
    "gap": 1.5,            # gutter around each cell's inner treemap
    "label_band": 16,      # reserved strip for the cell key (AX, BY, ...)

    # label visibility
    "cell_label_min_w": 22,
    "cell_label_min_h": 14,
    "item_label_min_w": 28,
    "item_label_min_h": 12,
    "item_label_max_font": 10,
    "item_label_max_chars": 13,
    "min_font": 5,

    # tooltip box
    "tooltip_w": 230,
    "tooltip_h": 76,
    "tooltip_offset": 12,
    "tooltip_margin": 6,
    "tooltip_min_y": 4,
}

SUNBURST_LAYOUT: Dict[str, Any] = {
    "width": 800,
    "height": 740,
    "cx": 315,
    "cy": 390,
    "inner_radius": 60,
    "ring_width": 66,
    "ring_inset": 0.8,
    "start_angle": -90.0,          # degrees, 12 o'clock on a y-down canvas
    "arc_resolution": 2.0,         # degrees per polygon segment

    # label visibility
    "label_font": {1: 13, 2: 11, 3: 9, 4: 8},
    "label_min_arc": 14,
    "min_font": 5,
    "char_width": 0.62,            # average glyph width / font size

    # legend bar
    "legend_x": 700,
    "legend_y1": 80,
    "legend_y2": 650,
    "legend_w": 18,
    "legend_ticks": [1, 0.75, 0.5, 0.25, 0],

    # tooltip box
    "tooltip_w": 220,
    "tooltip_h": 80,
    "tooltip_h_short": 64,
    "tooltip_offset": 14,
    "tooltip_margin": 8,
    "tooltip_min_y": 8,
}
