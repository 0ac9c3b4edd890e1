"""Palette, themes and canvas geometry shared by all charts."""

from .palette import (
    PLASMA_STOPS,
    CELL_COLOR,
    LABEL_FG,
    ABC_COLORS,
    XYZ_COLORS,
    plasma_color,
    plasma_colorscale,
    rgb_to_str,
    hex_to_rgba,
)
from .theme import THEMES, get_theme, apply_theme, apply_legend, hide_axes
from .config import MATRIX_LAYOUT, SUNBURST_LAYOUT

__all__ = [
    "PLASMA_STOPS",
    "CELL_COLOR",
    "LABEL_FG",
    "ABC_COLORS",
    "XYZ_COLORS",
    "plasma_color",
    "plasma_colorscale",
    "rgb_to_str",
    "hex_to_rgba",
    "THEMES",
    "get_theme",
    "apply_theme",
    "apply_legend",
    "hide_axes",
    "MATRIX_LAYOUT",
    "SUNBURST_LAYOUT",
]
