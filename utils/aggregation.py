"""
Third Place Index Map — Category Aggregation
Group tracts by a categorical dimension (density category, income bracket)
and compute per-group counts, sums and averages.
"""
import logging
from typing import Callable

import pandas as pd

from utils.data_prep import COUNT_FIELDS, classify_income_bracket
from utils.index_layers import IndexLayer

logger = logging.getLogger(__name__)


def _number(value) -> float:
    """Missing or non-numeric values count as zero."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if num != num else num


def _total_places(row: dict) -> float:
    """total_places when present, otherwise the sum of the three sub-counts."""
    value = row.get("total_places")
    if value is None or pd.isna(value):
        return sum(_number(row.get(field)) for field in COUNT_FIELDS)
    return _number(value)


def _empty_bucket(label: str) -> dict:
    bucket = {"category": label, "count": 0, "sum_total_places": 0.0, "tracts": []}
    for field in COUNT_FIELDS:
        bucket[f"sum_{field}"] = 0.0
    for layer in IndexLayer:
        bucket[f"_sum_{layer.key}"] = 0.0
    return bucket


def aggregate_by_category(
    tracts: pd.DataFrame,
    key_fn: Callable[[dict], str | None],
    categories: list[str],
) -> dict:
    """
    Single pass over the tracts, bucketing each under key_fn(row).

    Returns {"buckets": [...], "unclassified": int}. Buckets follow the
    order of categories; each carries count, sum/avg of total places and of
    each sub-count, avg of each index, and the member tracts. Tracts whose
    key is not one of categories go to no bucket and are counted as
    unclassified. Empty buckets report zero averages.
    """
    buckets = {label: _empty_bucket(label) for label in categories}
    unclassified = 0

    for row in tracts.to_dict("records"):
        label = key_fn(row)
        bucket = buckets.get(label)
        if bucket is None:
            unclassified += 1
            continue

        bucket["count"] += 1
        total_places = _total_places(row)
        bucket["sum_total_places"] += total_places
        for field in COUNT_FIELDS:
            bucket[f"sum_{field}"] += _number(row.get(field))
        for layer in IndexLayer:
            bucket[f"_sum_{layer.key}"] += _number(row.get(layer.metric))
        bucket["tracts"].append({
            "GEOID": str(row.get("GEOID")),
            "third_place_index": _number(row.get("third_place_index")),
            "total_places": total_places,
        })

    results = []
    for label in categories:
        bucket = buckets[label]
        n = bucket["count"]
        bucket["avg_total_places"] = bucket["sum_total_places"] / n if n > 0 else 0.0
        for field in COUNT_FIELDS:
            bucket[f"avg_{field}"] = bucket[f"sum_{field}"] / n if n > 0 else 0.0
        for layer in IndexLayer:
            total = bucket.pop(f"_sum_{layer.key}")
            bucket[f"avg_{layer.metric}"] = total / n if n > 0 else 0.0
        results.append(bucket)

    if unclassified > 0:
        logger.info(f"{unclassified} tracts did not match any category")

    return {"buckets": results, "unclassified": unclassified}


def aggregate_by_density(tracts: pd.DataFrame, categories: list[str] | None = None) -> dict:
    """Aggregate tracts by density_category."""
    if categories is None:
        from config import DENSITY_CATEGORIES
        categories = DENSITY_CATEGORIES
    return aggregate_by_category(tracts, lambda row: row.get("density_category"), categories)


def aggregate_by_income(tracts: pd.DataFrame, brackets: list[dict] | None = None) -> dict:
    """Aggregate tracts by median-income bracket; tracts without income are unclassified."""
    if brackets is None:
        from config import INCOME_BRACKETS
        brackets = INCOME_BRACKETS
    return aggregate_by_category(
        tracts,
        lambda row: classify_income_bracket(row.get("median_income"), brackets),
        [b["label"] for b in brackets],
    )


def buckets_to_frame(result: dict) -> pd.DataFrame:
    """Flat table of the bucket figures, without the member tract lists."""
    rows = [{k: v for k, v in b.items() if k != "tracts"} for b in result["buckets"]]
    return pd.DataFrame(rows)
