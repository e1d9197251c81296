import numpy as np
import pandas as pd

from core.data_processing import empty_series, transform_data_base


def pearson(x, y) -> float:
    """
    Pearson product-moment correlation of two equally sized samples.

    Returns 0 when there are fewer than two pairs or when either side has no
    variance, so callers never see NaN.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"Samples have different lengths: {x.size} and {y.size}")

    if x.size < 2:
        return 0.0

    # A constant side has zero variance, checked exactly before any rounding
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt(np.dot(dx, dx) * np.dot(dy, dy))
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    return float(np.clip(np.dot(dx, dy) / denominator, -1.0, 1.0))


def pct_change(df: pd.DataFrame) -> pd.DataFrame:
    """Relative change between consecutive points, skipping moves off a zero."""
    df = transform_data_base(df)
    if len(df.index) < 2:
        return empty_series()

    prior = df["Value"].shift(1)
    keep = prior.notna() & (prior != 0)
    changes = (df["Value"] - prior) / prior

    return pd.DataFrame(
        {"Date": df["Date"][keep], "Value": changes[keep]}
    ).reset_index(drop=True)


def z_score(values) -> np.ndarray:
    """Population z-score. Degenerate input (n < 2 or constant) maps to zeros."""
    values = np.asarray(values, dtype=float)
    if values.size < 2 or np.ptp(values) == 0:
        return np.zeros(values.size)

    std = values.std(ddof=0)
    if std == 0:
        return np.zeros(values.size)

    return (values - values.mean()) / std
