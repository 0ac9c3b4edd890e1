from .metrics import (
    abs_pct_errors,
    mape,
    wape,
    business_accuracy,
    bias,
    score_all,
)

__all__ = [
    "abs_pct_errors",
    "mape",
    "wape",
    "business_accuracy",
    "bias",
    "score_all",
]
