"""
Geometry builders (no rendering).
"""

from .treemap import Rect, squarify, worst_ratio
from .matrix import MatrixLayout, MatrixCell, MatrixItem, layout_abc_xyz_matrix
from .sunburst import SunburstTree, SunburstNode, build_sunburst, arc_points, ring_radii

__all__ = [
    "Rect",
    "squarify",
    "worst_ratio",
    "MatrixLayout",
    "MatrixCell",
    "MatrixItem",
    "layout_abc_xyz_matrix",
    "SunburstTree",
    "SunburstNode",
    "build_sunburst",
    "arc_points",
    "ring_radii",
]
