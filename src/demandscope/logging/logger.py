# src/demandscope/logging/logger.py

import time
import pandas as pd
from typing import Dict, Callable


class AnalysisLogger:
    """Simple logger for tracking aggregation and layout runs."""

    def __init__(self, verbose: int = 1):
        """
        Initialize logger.

        Parameters
        ----------
        verbose : int
            0 = silent, 1 = basic, 2 = detailed
        """
        self.verbose = verbose
        self._execution_times = {}
        self._start_times = {}
        self.layouts = {}
        self.warnings = []

    # ========================================
    # Aggregation Methods
    # ========================================

    def compute_start(self, hierarchy_level: int, volume_type: str, num_products: int, num_facts: int):
        """Log aggregation start."""
        if self.verbose >= 2:
            print(f"\n{'─'*60}")
            print(f"Aggregating level {hierarchy_level} by {volume_type}")
            print(f"Products: {num_products:,} | Facts: {num_facts:,}")
        self._start_times[f"compute_L{hierarchy_level}_{volume_type}"] = time.time()

    def compute_complete(self, hierarchy_level: int, volume_type: str, class_counts: Dict[str, int]):
        """Log aggregation completion with the ABC-XYZ cell counts."""
        key = f"compute_L{hierarchy_level}_{volume_type}"
        if key in self._start_times:
            elapsed = time.time() - self._start_times.pop(key)
            self._execution_times[key] = elapsed
            if self.verbose >= 1:
                total = sum(class_counts.values())
                print(f"✓ Level {hierarchy_level} ({volume_type}): {total:,} aggregates in {elapsed:.3f}s")
            if self.verbose >= 2:
                cells = " ".join(f"{k}={v}" for k, v in sorted(class_counts.items()))
                print(f"   Cells: {cells}")
                print(f"{'─'*60}")

    # ========================================
    # Layout Methods
    # ========================================

    def layout_complete(self, chart: str, num_shapes: int, num_hidden: int):
        """Log layout completion."""
        self.layouts[chart] = num_shapes
        if self.verbose >= 2:
            print(f"  Layout '{chart}': {num_shapes:,} shapes ({num_hidden:,} not drawable)")

    def warning(self, name: str, message: str):
        """Log warning."""
        self.warnings.append((name, message))
        if self.verbose >= 1:
            print(f"⚠️  {name}: {message}")

    # ========================================
    # Summary Methods
    # ========================================

    def get_summary_df(self) -> pd.DataFrame:
        """Get execution time summary as DataFrame."""
        if not self._execution_times:
            return pd.DataFrame(columns=['step', 'execution_time_s'])

        df = pd.DataFrame([
            {'step': name, 'execution_time_s': t}
            for name, t in self._execution_times.items()
        ])
        return df.sort_values('execution_time_s', ascending=False)


# ========================================
# Helper Functions
# ========================================

def get_analysis_callbacks(logger: AnalysisLogger) -> Dict[str, Callable]:
    """
    Create callbacks for compute_aggregates, the layout builders and DemandAnalysis.

    Parameters
    ----------
    logger : AnalysisLogger
        The logger instance to use

    Returns
    -------
    dict
        Dictionary of callback functions

    Examples
    --------
    >>> logger = AnalysisLogger(verbose=2)
    >>> callbacks = get_analysis_callbacks(logger)
    >>> aggs = compute_aggregates(products, facts, "monetary", 3, callbacks=callbacks)
    """
    return {
        'on_compute_start': logger.compute_start,
        'on_compute_complete': logger.compute_complete,
        'on_layout_complete': logger.layout_complete,
        'on_warning': logger.warning,
    }
