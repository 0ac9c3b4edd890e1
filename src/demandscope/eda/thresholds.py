from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ClassificationThresholds:
    """
    Cut-offs used by the ABC-XYZ classification.

    Attributes:
        abc_a: Cumulative volume share (0-1) up to which a group is class A.
        abc_b: Cumulative volume share (0-1) up to which a group is class B.
        xyz_x: Coefficient of variation (%) up to which a group is class X.
        xyz_y: Coefficient of variation (%) up to which a group is class Y.
        window: Number of trailing periods per product used for aggregation.

    All upper bounds are inclusive: a value sitting exactly on a boundary
    belongs to the lower band.

    Example:
        strict = ClassificationThresholds(abc_a=0.10, xyz_x=15.0)
        aggs = compute_aggregates(products, facts, "monetary", 3, thresholds=strict)
    """

    abc_a: float = 0.20
    abc_b: float = 0.60
    xyz_x: float = 20.0
    xyz_y: float = 40.0
    window: int = 12

    def __post_init__(self):
        if not 0 <= self.abc_a <= self.abc_b <= 1:
            raise ValueError(
                f"ABC thresholds must satisfy 0 <= abc_a <= abc_b <= 1, got {self.abc_a}, {self.abc_b}"
            )
        if not 0 <= self.xyz_x <= self.xyz_y:
            raise ValueError(
                f"XYZ thresholds must satisfy 0 <= xyz_x <= xyz_y, got {self.xyz_x}, {self.xyz_y}"
            )
        if self.window < 1:
            raise ValueError(f"window must be a positive number of periods, got {self.window}")


DEFAULT_THRESHOLDS = ClassificationThresholds()


# Planning guidance per ABC×XYZ cell, shown next to the matrix legend
CLASS_RECOMMENDATIONS: Dict[str, str] = {
    'AX': 'Standard forecasting',
    'AY': 'Improved forecasting needed',
    'AZ': 'Improved forecasting needed',
    'BX': 'Focus forecast efforts',
    'CX': 'Focus forecast efforts',
    'CZ': 'High variability - buffer stock',
}


def band_labels(thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS) -> Dict[str, str]:
    """Axis captions for the XYZ variance bands."""
    x, y = thresholds.xyz_x, thresholds.xyz_y
    return {
        'X': f"≤{x:g}%",
        'Y': f"{x:g}–{y:g}%",
        'Z': f">{y:g}%",
    }
