# demandscope/plots/core/palette.py
from __future__ import annotations

from typing import List, Tuple

RGB = Tuple[int, int, int]

# matplotlib "plasma", sampled at 10 evenly spaced points
PLASMA_STOPS: List[RGB] = [
    (13, 8, 135),
    (70, 3, 159),
    (114, 1, 168),
    (156, 23, 158),
    (189, 55, 134),
    (216, 87, 107),
    (237, 121, 83),
    (251, 159, 58),
    (253, 202, 38),
    (240, 249, 33),
]

# ABC×XYZ matrix cells: fill and label foreground
CELL_COLOR = {
    'AX': '#1d4ed8', 'AY': '#6d28d9', 'AZ': '#be185d',
    'BX': '#047857', 'BY': '#0369a1', 'BZ': '#4d7c0f',
    'CX': '#b91c1c', 'CY': '#b45309', 'CZ': '#c2410c',
}
LABEL_FG = {
    'AX': '#bfdbfe', 'AY': '#ddd6fe', 'AZ': '#fce7f3',
    'BX': '#a7f3d0', 'BY': '#bae6fd', 'BZ': '#ecfccb',
    'CX': '#fecaca', 'CY': '#fde68a', 'CZ': '#fed7aa',
}

# Table badges
ABC_COLORS = {
    'A': '#3b82f6',
    'B': '#22c55e',
    'C': '#9ca3af',
}
XYZ_COLORS = {
    'X': '#9ca3af',
    'Y': '#f59e0b',
    'Z': '#ef4444',
}


def hex_to_rgba(hex_color: str, alpha: float = 0.25) -> str:
    """Convert #RRGGBB to rgba(r,g,b,a)."""
    hex_color = hex_color.lstrip("#")
    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)
    return f"rgba({r},{g},{b},{alpha})"


def rgb_to_str(rgb: RGB) -> str:
    """Convert an (r, g, b) triple to rgb(r,g,b)."""
    r, g, b = rgb
    return f"rgb({r},{g},{b})"


def plasma_color(t: float, stops: List[RGB] = PLASMA_STOPS) -> RGB:
    """
    Piecewise-linear interpolation through ``stops``.

    ``t`` is clamped to [0, 1]; 0 maps to the first stop and 1 to the last.
    Channels are truncated to integers.
    """
    t = max(0.0, min(1.0, float(t)))
    n = len(stops) - 1
    i = min(int(t * n), n - 1)
    f = t * n - i
    r0, g0, b0 = stops[i]
    r1, g1, b1 = stops[i + 1]
    return (
        int(r0 + f * (r1 - r0)),
        int(g0 + f * (g1 - g0)),
        int(b0 + f * (b1 - b0)),
    )


def plasma_colorscale(stops: List[RGB] = PLASMA_STOPS) -> List[list]:
    """Plotly colorscale built from the same stops."""
    n = len(stops) - 1
    return [[i / n, rgb_to_str(rgb)] for i, rgb in enumerate(stops)]
