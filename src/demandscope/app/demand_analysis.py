from typing import Callable, Dict, Optional

import pandas as pd

from demandscope.datasets import load_demand_demo
from demandscope.display.export import aggregates_to_csv, timeseries_to_csv
from demandscope.display.table import master_table
from demandscope.eda.detail import detail_scores, timeseries_detail
from demandscope.eda.hierarchy import HierarchyIndex, check_level
from demandscope.eda.segmentation import ComputedAggregate, check_volume_type, compute_aggregates
from demandscope.eda.thresholds import CLASS_RECOMMENDATIONS, DEFAULT_THRESHOLDS, ClassificationThresholds
from demandscope.plots.charts.plot_abc_xyz import plot_abc_xyz
from demandscope.plots.charts.plot_sunburst import plot_sunburst
from demandscope.plots.charts.plot_timeseries import plot_timeseries_detail
from demandscope.plots.interaction import ChartInteraction
from demandscope.plots.layout.matrix import layout_abc_xyz_matrix
from demandscope.plots.layout.sunburst import build_sunburst

TABS = ('abc-xyz', 'sunburst')
SUNBURST_LEVEL = 4


class DemandAnalysis:
    """
    State of the Demand Analysis page.

    Holds the hierarchy level, volume type, active tab and selection, and
    recomputes aggregates synchronously whenever level or volume type
    change. Every chart is rebuilt from the current state on request.

    Parameters
    ----------
    products, facts : DataFrame or iterable of dict, optional
        Product taxonomy and monthly facts. The synthetic demo data is used
        when ``products`` is omitted.
    hierarchy_level : int, default 4
        Level of the matrix aggregates.
    volume_type : {'quantity', 'monetary'}, default 'monetary'
    thresholds : ClassificationThresholds
    theme : str, default "fa"
        Theme of the matrix and detail charts (the sunburst is always dark).
    callbacks : dict, optional
        Dictionary of callback functions with keys:
        - 'on_compute_start', 'on_compute_complete', 'on_warning': forwarded to compute_aggregates
        - 'on_layout_complete': forwarded to the layout builders

    Examples
    --------
    >>> page = DemandAnalysis()
    >>> page.set_hierarchy_level(2)
    >>> fig = page.figure()
    >>> page.select(page.aggregates[0])
    >>> page.detail_figure()
    """

    def __init__(
        self,
        products=None,
        facts=None,
        hierarchy_level: int = 4,
        volume_type: str = 'monetary',
        thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS,
        theme: str = "fa",
        callbacks: Optional[Dict[str, Callable]] = None,
    ):
        if products is None:
            products, facts = load_demand_demo()
        self.index = HierarchyIndex.coerce(products, facts)
        self.hierarchy_level = check_level(hierarchy_level)
        self.volume_type = check_volume_type(volume_type)
        self.thresholds = thresholds
        self.theme = theme
        self.callbacks = callbacks or {}

        self.tab = 'abc-xyz'
        self.selected: Optional[ComputedAggregate] = None
        self.show_detail = False
        self.show_legend = True
        self.hovered: Optional[str] = None

        self._recompute()

    # =====================================================================
    # State changes
    # =====================================================================
    def _recompute(self):
        self.aggregates = compute_aggregates(
            self.index, volume_type=self.volume_type, hierarchy_level=self.hierarchy_level,
            thresholds=self.thresholds, callbacks=self.callbacks,
        )
        if self.hierarchy_level == SUNBURST_LEVEL:
            self.sunburst_aggregates = self.aggregates
        else:
            self.sunburst_aggregates = compute_aggregates(
                self.index, volume_type=self.volume_type, hierarchy_level=SUNBURST_LEVEL,
                thresholds=self.thresholds, callbacks=self.callbacks,
            )
        self.matrix_layout = layout_abc_xyz_matrix(self.aggregates, callbacks=self.callbacks)
        self.sunburst_tree = build_sunburst(self.sunburst_aggregates, callbacks=self.callbacks)
        self.selected = None
        self.show_detail = False
        self.hovered = None

    def set_hierarchy_level(self, level: int) -> None:
        self.hierarchy_level = check_level(level)
        self._recompute()

    def set_volume_type(self, volume_type: str) -> None:
        self.volume_type = check_volume_type(volume_type)
        self._recompute()

    def set_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab '{tab}'. Expected one of {list(TABS)}")
        self.tab = tab
        self.hovered = None

    def select(self, aggregate: ComputedAggregate, open_detail: bool = True) -> None:
        self.selected = aggregate
        if open_detail:
            self.show_detail = True

    def close_detail(self) -> None:
        self.show_detail = False

    def toggle_legend(self) -> bool:
        self.show_legend = not self.show_legend
        return self.show_legend

    # =====================================================================
    # Interaction
    # =====================================================================
    def interaction(self) -> ChartInteraction:
        """Pointer handler for the active chart, wired to this page's selection."""
        if self.tab == 'sunburst':
            ui = ChartInteraction(self.sunburst_tree, self.volume_type, thresholds=self.thresholds)
        else:
            ui = ChartInteraction(self.matrix_layout, self.volume_type, thresholds=self.thresholds)
        ui.legend.visible = self.show_legend
        ui.subscribe('select', self.select)
        ui.subscribe('hover', self._on_hover)
        ui.subscribe('leave', self._on_leave)
        ui.subscribe('legend', self._on_legend)
        return ui

    def _on_hover(self, event):
        target = event.target
        self.hovered = target.path if self.tab == 'sunburst' else target.element_id

    def _on_leave(self, _):
        self.hovered = None

    def _on_legend(self, visible):
        self.show_legend = visible

    # =====================================================================
    # Views
    # =====================================================================
    def figure(self):
        """Plotly figure of the active tab."""
        if self.tab == 'sunburst':
            return plot_sunburst(
                self.sunburst_aggregates, self.volume_type, tree=self.sunburst_tree,
                show_legend=self.show_legend, hovered=self.hovered, theme="dark",
            )
        return plot_abc_xyz(
            self.aggregates, self.volume_type, layout=self.matrix_layout,
            thresholds=self.thresholds, show_legend=self.show_legend,
            hovered=self.hovered, theme=self.theme,
        )

    def master_table(self) -> pd.DataFrame:
        return master_table(self.aggregates, self.volume_type)

    def export_csv(self, path=None):
        return aggregates_to_csv(self.aggregates, path)

    def recommendation(self, aggregate: Optional[ComputedAggregate] = None) -> Optional[str]:
        aggregate = aggregate or self.selected
        if aggregate is None:
            return None
        return CLASS_RECOMMENDATIONS.get(aggregate.cell)

    def class_summary(self) -> pd.DataFrame:
        """Count and volume share per ABC×XYZ cell of the current aggregates."""
        if not self.aggregates:
            return pd.DataFrame(columns=['cell', 'count', 'volume', 'share', 'recommendation'])
        df = pd.DataFrame({
            'cell': [a.cell for a in self.aggregates],
            'volume': [a.volume_total for a in self.aggregates],
        })
        out = df.groupby('cell').agg(count=('volume', 'size'), volume=('volume', 'sum')).reset_index()
        total = out['volume'].sum()
        out['share'] = out['volume'] / total if total > 0 else 0.0
        out['recommendation'] = out['cell'].map(CLASS_RECOMMENDATIONS)
        return out.sort_values('cell').reset_index(drop=True)

    # -----------------------------------------------------------------
    # Detail of the selection
    # -----------------------------------------------------------------
    def _target(self, aggregate):
        aggregate = aggregate or self.selected
        if aggregate is None:
            raise ValueError("No aggregate selected")
        return aggregate

    def timeseries_detail(self, aggregate: Optional[ComputedAggregate] = None, last_n: int = 24) -> pd.DataFrame:
        return timeseries_detail(self.index, self._target(aggregate), self.volume_type, last_n)

    def detail_scores(self, aggregate: Optional[ComputedAggregate] = None) -> pd.DataFrame:
        return detail_scores(self.timeseries_detail(aggregate))

    def detail_figure(self, aggregate: Optional[ComputedAggregate] = None):
        aggregate = self._target(aggregate)
        return plot_timeseries_detail(
            self.timeseries_detail(aggregate), self.volume_type,
            title=f"Time Series: {aggregate.hierarchy_path}", theme=self.theme,
        )

    def export_timeseries_csv(self, aggregate: Optional[ComputedAggregate] = None, path=None):
        return timeseries_to_csv(self.timeseries_detail(aggregate), path)

    def timeseries_filename(self, aggregate: Optional[ComputedAggregate] = None) -> str:
        return f"timeseries-{self._target(aggregate).element_id}.csv"
