from .demand_analysis import DemandAnalysis, TABS

__all__ = ["DemandAnalysis", "TABS"]
