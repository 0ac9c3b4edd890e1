from .logger import AnalysisLogger, get_analysis_callbacks

__all__ = ["AnalysisLogger", "get_analysis_callbacks"]
