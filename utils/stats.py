"""
Third Place Index Map — Rankings and Distributions
Tract ranking by overall index, per-metric value arrays, histogram bins and
summary statistics for the distribution chart.
"""
import numpy as np
import pandas as pd

from utils.index_layers import IndexLayer


def build_rankings(tracts: pd.DataFrame) -> pd.DataFrame:
    """
    Rank tracts by overall index, highest first.

    Returns a new DataFrame with columns id, overall, traditional, community,
    modern and a 1-based rank. Ties keep their input order.
    """
    rankings = pd.DataFrame({"id": tracts["GEOID"].astype(str).to_numpy()})
    for layer in IndexLayer:
        rankings[layer.key] = pd.to_numeric(tracts[layer.metric], errors="coerce").fillna(0.0).to_numpy()

    rankings = rankings.sort_values("overall", ascending=False, kind="mergesort").reset_index(drop=True)
    rankings["rank"] = np.arange(1, len(rankings) + 1)
    return rankings


def get_tract_rank(rankings: pd.DataFrame, tract_id: str) -> int | None:
    """1-based rank of a tract, or None if it is not ranked."""
    matches = rankings.index[rankings["id"] == str(tract_id)]
    if len(matches) == 0:
        return None
    return int(rankings.at[matches[0], "rank"])


def build_distributions(tracts: pd.DataFrame) -> dict[str, list[float]]:
    """Flat per-metric value lists in original tract order, keyed by layer key."""
    return {
        layer.key: pd.to_numeric(tracts[layer.metric], errors="coerce").fillna(0.0).astype(float).tolist()
        for layer in IndexLayer
    }


def histogram_bins(values, num_bins: int = 20, domain: tuple = (0.0, 1.0)) -> list[dict]:
    """
    Equal-width bins over the index domain.

    Each bin is {"x0", "x1", "count"}. Values outside the domain are ignored.
    """
    edges = np.linspace(domain[0], domain[1], num_bins + 1)
    arr = np.asarray(list(values), dtype=float)
    arr = arr[~np.isnan(arr)]
    counts, _ = np.histogram(arr, bins=edges)
    return [
        {"x0": float(edges[i]), "x1": float(edges[i + 1]), "count": int(counts[i])}
        for i in range(num_bins)
    ]


def selected_bin(bins: list[dict], value: float) -> int | None:
    """Index of the bin holding value (x0 <= value < x1; last bin closed)."""
    if value is None or pd.isna(value):
        return None
    for i, b in enumerate(bins):
        last = i == len(bins) - 1
        if b["x0"] <= value < b["x1"] or (last and value == b["x1"]):
            return i
    return None


def summarize_metric(values) -> dict:
    """Count, mean, median, population std/variance, min and max of a series."""
    arr = pd.to_numeric(pd.Series(list(values), dtype=float), errors="coerce").dropna().to_numpy()
    if arr.size == 0:
        return {"count": 0, "mean": 0.0, "median": 0.0, "std": 0.0,
                "variance": 0.0, "min": 0.0, "max": 0.0}
    variance = float(np.var(arr))
    return {
        "count": int(arr.size),
        "mean": float(np.mean(arr)),
        "median": float(np.median(arr)),
        "std": float(np.sqrt(variance)),
        "variance": variance,
        "min": float(np.min(arr)),
        "max": float(np.max(arr)),
    }
