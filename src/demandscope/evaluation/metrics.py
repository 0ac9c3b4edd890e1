import numpy as np
import pandas as pd


def _valid(y, yhat):
    """Pairs with a positive actual and a forecast present."""
    y = np.asarray(y, dtype=float)
    yhat = np.asarray(yhat, dtype=float)
    mask = (y > 0) & ~np.isnan(yhat)
    return y[mask], yhat[mask]


# --- Percentage metrics ---
def abs_pct_errors(y, yhat):
    """
    Absolute percentage errors |y - yhat| / y.
    Periods without a positive actual or without a forecast are dropped,
    not counted as zero error.
    """
    y, yhat = _valid(y, yhat)
    return np.abs(y - yhat) / y


def mape(y, yhat):
    """Mean absolute percentage error in %, 0.0 when no period qualifies."""
    errors = abs_pct_errors(y, yhat)
    if errors.size == 0:
        return 0.0
    return float(np.mean(errors) * 100)


def wape(y, yhat):
    y, yhat = _valid(y, yhat)
    return float(np.sum(np.abs(y - yhat)) / (np.sum(np.abs(y)) + 1e-12))


def business_accuracy(y, yhat):
    """
    Business-style Accuracy.
    1 - sum(|error|)/sum(actuals).
    Equivalent to 1 - WAPE.
    """
    return float(1 - wape(y, yhat))


# --- Bias metrics ---
def bias(y, yhat):
    """
    Forecast bias (mean forecast error).
    Positive → over-forecasted, Negative → under-forecasted.
    """
    y, yhat = _valid(y, yhat)
    if y.size == 0:
        return 0.0
    return float(np.mean(yhat - y))


# --- Scoring utility ---
def score_all(y, yhat, as_dataframe=False):
    """
    Compute the forecast-error metrics and return as dict (default) or DataFrame row.
    """
    _, valid = _valid(y, yhat)
    scores = {
        "n_obs": int(valid.size),
        "mape": mape(y, yhat),
        "wape": wape(y, yhat),
        "accuracy": business_accuracy(y, yhat),
        "bias": bias(y, yhat),
    }

    if as_dataframe:
        return pd.DataFrame([scores])
    return scores
