# demandscope/display/table.py

from typing import Sequence
import pandas as pd
from pandas.io.formats.style import Styler

from demandscope.eda.segmentation import ComputedAggregate, check_volume_type
from demandscope.plots.core.palette import ABC_COLORS, XYZ_COLORS, hex_to_rgba

MASTER_COLUMNS = ["Hierarchy Path", "Volume", "Variance", "ABC", "XYZ"]


# -------------------------------------------------------------------
# Formatting
# -------------------------------------------------------------------

def format_table_volume(value: float, volume_type: str = "monetary") -> str:
    """
    Table volume: two decimals for millions, none for thousands.

    Monetary values get a '$' prefix; values below 1,000 keep thousands
    separators.
    """
    check_volume_type(volume_type)
    prefix = "$" if volume_type == "monetary" else ""
    if value >= 1_000_000:
        return f"{prefix}{value / 1_000_000:.2f}M"
    if value >= 1_000:
        return f"{prefix}{value / 1_000:.0f}K"
    return f"{prefix}{value:,.0f}"


def master_table(aggregates: Sequence[ComputedAggregate], volume_type: str = "monetary") -> pd.DataFrame:
    """One display row per aggregate, in the order given."""
    check_volume_type(volume_type)
    rows = [
        {
            "Hierarchy Path": a.hierarchy_path,
            "Volume": format_table_volume(a.volume_total, volume_type),
            "Variance": f"{a.variance_percent:.1f}%",
            "ABC": a.abc_class,
            "XYZ": a.xyz_class,
        }
        for a in aggregates
    ]
    df = pd.DataFrame(rows, columns=MASTER_COLUMNS)
    df.index = [a.element_id for a in aggregates]
    return df


# -------------------------------------------------------------------
# Styler
# -------------------------------------------------------------------

def _badge(colors):
    def style(value):
        color = colors.get(value)
        if color is None:
            return ""
        return f"background-color: {hex_to_rgba(color, 0.18)}; color: {color}; font-weight: 700; text-align: center"
    return style


def style_master_table(table: pd.DataFrame) -> Styler:
    """
    Return a pandas Styler for ``master_table`` output: class badges tinted
    with ``ABC_COLORS`` / ``XYZ_COLORS`` and right-aligned numbers.
    """
    sty = table.style.set_table_attributes('class="dataframe demandscope-master"')
    sty = sty.map(_badge(ABC_COLORS), subset=["ABC"])
    sty = sty.map(_badge(XYZ_COLORS), subset=["XYZ"])
    sty = sty.set_properties(subset=["Volume", "Variance"], **{"text-align": "right", "font-family": "monospace"})
    return sty
