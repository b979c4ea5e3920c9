"""
Third Place Index Map — Income Correlation
Pearson correlation between median household income and each index/count.
"""
import math

import numpy as np
import pandas as pd

STRENGTH_BANDS = [
    (0.1, "negligible"),
    (0.3, "weak"),
    (0.5, "moderate"),
    (0.7, "strong"),
]


def pearson_correlation(x, y) -> float:
    """
    Pearson r via the sums formula.

    Returns 0.0 when either series has no variance (or is empty).
    Raises ValueError when the series differ in length.
    """
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if len(xs) != len(ys):
        raise ValueError(f"Correlation inputs differ in length: {len(xs)} vs {len(ys)}")

    n = len(xs)
    sum_x = float(np.sum(xs))
    sum_y = float(np.sum(ys))
    sum_xy = float(np.sum(xs * ys))
    sum_x2 = float(np.sum(xs * xs))
    sum_y2 = float(np.sum(ys * ys))

    if _no_variance(n, sum_x, sum_x2) or _no_variance(n, sum_y, sum_y2):
        return 0.0

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x ** 2) * (n * sum_y2 - sum_y ** 2)
    r = numerator / math.sqrt(spread)
    return max(-1.0, min(1.0, r))


def _no_variance(n: int, total: float, total_sq: float) -> bool:
    """nΣv² equal to (Σv)² up to floating error means a constant series."""
    spread = n * total_sq - total ** 2
    return spread <= 0 or math.isclose(n * total_sq, total ** 2, rel_tol=1e-12)


def classify_correlation(r: float) -> str:
    """Strength label for the absolute value of r."""
    magnitude = abs(r)
    for limit, label in STRENGTH_BANDS:
        if magnitude < limit:
            return label
    return "very strong"


def income_correlations(tracts: pd.DataFrame, metrics: dict | None = None) -> list[dict]:
    """
    Correlate median income with each metric over tracts with income > 0.

    Returns one row per metric: field, label, r, strength, direction, n.
    """
    if metrics is None:
        from config import CORRELATION_METRICS
        metrics = CORRELATION_METRICS

    income = pd.to_numeric(tracts["median_income"], errors="coerce")
    with_income = tracts[income.fillna(0) > 0]
    x = pd.to_numeric(with_income["median_income"], errors="coerce").tolist()

    rows = []
    for field, label in metrics.items():
        if field in with_income.columns:
            y = pd.to_numeric(with_income[field], errors="coerce").fillna(0.0).tolist()
        else:
            y = [0.0] * len(x)
        r = pearson_correlation(x, y)
        rows.append({
            "field": field,
            "label": label,
            "r": r,
            "strength": classify_correlation(r),
            "direction": "positive" if r > 0 else ("negative" if r < 0 else "none"),
            "n": len(x),
        })
    return rows
