"""
Third Place Index Map — Place Type Allocation
Break a tract's official place counts down into specific place types.

Place records matched to the tract give a sampled mix of types per category;
that mix is scaled to the tract's official count with largest-remainder
rounding. Tracts with no matched places get a fixed heuristic split.
"""
import logging
import math

import pandas as pd

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to nearest integer, ties toward +infinity."""
    return int(math.floor(value + 0.5))


def allocate_proportional(sample_counts: dict, official_total: int) -> dict:
    """
    Scale sampled sub-type counts to official_total as integers.

    Each share is rounded half-up; the difference from official_total is
    then spread one unit at a time, to the largest rounding shortfalls when
    under, and off the largest overshoots when over. A sub-type is never
    reduced below 1, so a blocked unit is left unapplied and the result may
    exceed official_total. Zero counts are dropped. Empty samples or a zero
    total yield {}.
    """
    sample_total = sum(sample_counts.values())
    if sample_total <= 0 or official_total <= 0:
        return {}

    scaled = []
    rounded_total = 0
    for name, count in sample_counts.items():
        exact = count / sample_total * official_total
        rounded = round_half_up(exact)
        scaled.append({"name": name, "exact": exact, "rounded": rounded, "diff": exact - rounded})
        rounded_total += rounded

    remainder = official_total - rounded_total
    if remainder > 0:
        scaled.sort(key=lambda s: s["diff"], reverse=True)
        for item in scaled[:remainder]:
            item["rounded"] += 1
    elif remainder < 0:
        scaled.sort(key=lambda s: s["diff"])
        for item in scaled[:-remainder]:
            if item["rounded"] > 1:
                item["rounded"] -= 1

    final_total = sum(s["rounded"] for s in scaled)
    if final_total != official_total:
        logger.warning(
            f"Allocated {final_total} places against an official count of {official_total}; "
            f"sub-types at 1 were not reduced"
        )

    return {s["name"]: s["rounded"] for s in scaled if s["rounded"] > 0}


def fallback_place_types(traditional: int, community: int, modern: int,
                         splits: dict | None = None) -> list[dict]:
    """Heuristic sub-type split when no places could be matched to the tract."""
    if splits is None:
        from config import FALLBACK_SPLITS
        splits = FALLBACK_SPLITS

    totals = {"traditional": traditional, "community": community, "modern": modern}
    results = []
    for category, total in totals.items():
        if total <= 0:
            continue
        for name, share in splits.get(category, []):
            results.append({"name": name, "count": round_half_up(total * share), "category": category})
    return results


def format_place_type(osm_value: str) -> str:
    """'coffee_shop' -> 'Coffee Shop'."""
    words = str(osm_value).replace("_", " ").split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def places_in_tract(tract: dict, places: pd.DataFrame, buffer: float | None = None) -> pd.DataFrame:
    """
    Places belonging to a tract.

    Matches on the tract_id or GEOID link first; when nothing links, falls
    back to places inside the tract's bounding box grown by buffer degrees.
    """
    if buffer is None:
        from config import SPATIAL_BUFFER_DEG
        buffer = SPATIAL_BUFFER_DEG

    tract_id = str(tract.get("GEOID"))
    linked = pd.Series(False, index=places.index)
    for col in ["tract_id", "GEOID"]:
        if col in places.columns:
            linked |= places[col].astype(str) == tract_id
    matched = places[linked]
    if len(matched) > 0:
        return matched

    geometry = tract.get("geometry")
    if geometry is None or geometry.is_empty or "geometry" not in places.columns:
        return matched

    min_x, min_y, max_x, max_y = geometry.bounds
    xs = places.geometry.x
    ys = places.geometry.y
    inside = (
        (xs >= min_x - buffer) & (xs <= max_x + buffer)
        & (ys >= min_y - buffer) & (ys <= max_y + buffer)
    )
    return places[inside]


def place_type_breakdown(tract: dict, places: pd.DataFrame | None) -> list[dict]:
    """
    Detailed place types for a tract: [{"name", "count", "category"}, ...].

    Per-category totals are the tract's rounded official counts. Sorted by
    count, highest first. Returns [] until the place dataset is available.
    """
    if places is None:
        return []

    from config import PLACE_CATEGORIES

    official = {
        category: round_half_up(_count(tract.get(entry["count_field"])))
        for category, entry in PLACE_CATEGORIES.items()
    }
    if sum(official.values()) == 0:
        return []

    tract_places = places_in_tract(tract, places)

    breakdown = []
    if len(tract_places) > 0:
        for category, total in official.items():
            in_category = tract_places[tract_places["category"] == category]
            labels = [
                format_place_type(v) for v in in_category["osm_value"]
                if v is not None and not pd.isna(v) and str(v)
            ]
            sample = pd.Series(labels, dtype=object).value_counts(sort=False).to_dict()
            for name, count in allocate_proportional(sample, total).items():
                breakdown.append({"name": name, "count": count, "category": category})
    else:
        breakdown = fallback_place_types(
            official["traditional"], official["community"], official["modern"]
        )

    breakdown = [b for b in breakdown if b["count"] > 0]
    breakdown.sort(key=lambda b: b["count"], reverse=True)
    return breakdown


def _count(value) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if num != num else num
