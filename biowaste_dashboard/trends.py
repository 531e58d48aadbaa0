"""
Trend helpers: OLS slope over a short ordered series and tri-state
classification. Thresholds are supplied by each caller.
"""

import numpy as np

POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"


def regression_slope(values) -> float:
    """OLS slope of `values` against the index 0..n-1.

    Returns 0.0 for fewer than two points or a zero denominator.
    """
    y = np.asarray(list(values), dtype=float)
    n = len(y)
    if n < 2:
        return 0.0

    x = np.arange(n, dtype=float)
    dx = x - (n - 1) / 2
    denominator = float((dx * dx).sum())
    if denominator == 0:
        return 0.0
    return float((dx * (y - y.mean())).sum() / denominator)


def relative_slope(values) -> float:
    """Slope divided by the series mean, 0.0 when the mean is zero."""
    values = list(values)
    if not values:
        return 0.0
    mean = float(np.mean(values))
    if mean == 0:
        return 0.0
    return regression_slope(values) / mean


def classify_slope(slope: float, positive_above: float, negative_below: float) -> str:
    """'positive' above the first threshold, 'negative' below the second."""
    if slope > positive_above:
        return POSITIVE
    if slope < negative_below:
        return NEGATIVE
    return NEUTRAL


def classify_relative(values, band: float) -> str:
    """Classify the relative slope of `values` within a symmetric band."""
    return classify_slope(relative_slope(values), band, -band)
