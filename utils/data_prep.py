"""
Third Place Index Map — Data Preparation
Normalize tract and place records, derive totals, classify income brackets.
"""
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

INDEX_FIELDS = ["third_place_index", "traditional_index", "community_index", "modern_index"]
COUNT_FIELDS = ["traditional_count", "community_count", "modern_count"]
OPTIONAL_NUMERIC_FIELDS = ["median_income", "population_density", "total_population", "pct_bachelors"]


def classify_income_bracket(income: float, brackets: list[dict]) -> str | None:
    """
    Given a median income and the INCOME_BRACKETS config, return the bracket
    label, or None when income is absent or not positive.
    """
    if income is None or pd.isna(income) or income <= 0:
        return None

    for bracket in brackets:
        if bracket == brackets[-1]:
            if bracket["min"] <= income <= bracket["max"]:
                return bracket["label"]
        else:
            if bracket["min"] <= income < bracket["max"]:
                return bracket["label"]

    return None


def normalize_density_category(value, categories: list[str]) -> str | None:
    """Match a density label case-insensitively against the known categories."""
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    text = str(value).strip()
    for category in categories:
        if text.lower() == category.lower():
            return category
    # Unknown labels pass through and are left out of categorical aggregates
    return text or None


def _normalize_geoid(value) -> str | None:
    """
    GEOID as an 11-character string. Numeric ids read from a column with
    nulls arrive as floats, so integral floats lose their ".0" before padding.
    """
    if value is None or pd.isna(value):
        return None
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        value = int(value)
    text = str(value).strip()
    return text.zfill(11) if text else None


def prepare_tracts(
    tracts: pd.DataFrame,
    density_categories: list[str] | None = None,
    income_brackets: list[dict] | None = None,
) -> pd.DataFrame:
    """
    Return a normalized copy of the tract table.

    Index and count fields are coerced to numbers with missing values as 0.
    Median income stays NaN when absent so it can be excluded from income
    analyses. total_places is derived from the three counts when absent.
    """
    if density_categories is None or income_brackets is None:
        import config
        density_categories = density_categories or config.DENSITY_CATEGORIES
        income_brackets = income_brackets or config.INCOME_BRACKETS

    df = tracts.copy()

    if "GEOID" in df.columns:
        df["GEOID"] = pd.Series(
            [_normalize_geoid(v) for v in df["GEOID"]], index=df.index, dtype=object
        )
    else:
        df["GEOID"] = [str(i) for i in range(len(df))]

    for col in INDEX_FIELDS + COUNT_FIELDS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0)
        else:
            df[col] = 0.0

    if "total_places" in df.columns:
        df["total_places"] = pd.to_numeric(df["total_places"], errors="coerce")
        missing = df["total_places"].isna()
        df.loc[missing, "total_places"] = df.loc[missing, COUNT_FIELDS].sum(axis=1)
    else:
        df["total_places"] = df[COUNT_FIELDS].sum(axis=1)

    for col in OPTIONAL_NUMERIC_FIELDS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
        else:
            df[col] = np.nan

    out_of_range = ((df[INDEX_FIELDS] < 0) | (df[INDEX_FIELDS] > 1)).any(axis=1).sum()
    if out_of_range > 0:
        logger.warning(f"{out_of_range} tracts have index values outside [0, 1]")

    if "density_category" not in df.columns:
        df["density_category"] = None
    df["density_category"] = df["density_category"].apply(
        lambda v: normalize_density_category(v, density_categories)
    )
    unknown_density = (~df["density_category"].isin(density_categories)).sum()
    if unknown_density > 0:
        logger.warning(f"{unknown_density} tracts have an unrecognized density category")

    df["income_bracket"] = df["median_income"].apply(
        lambda x: classify_income_bracket(x, income_brackets)
    )

    logger.info(f"Prepared {len(df)} tracts")
    return df


def prepare_places(places: pd.DataFrame, categories: list[str] | None = None) -> pd.DataFrame:
    """Return a copy of the place table restricted to known categories."""
    if categories is None:
        import config
        categories = list(config.PLACE_CATEGORIES)

    df = places.copy()
    for col in ["name", "category", "osm_value", "tract_id", "GEOID"]:
        if col not in df.columns:
            df[col] = None

    df["category"] = df["category"].astype("string").str.strip().str.lower()
    known = df["category"].isin(categories).fillna(False).astype(bool)
    dropped = int((~known).sum())
    if dropped > 0:
        logger.warning(f"Dropping {dropped} places with an unknown category")
    df = df[known].copy()

    # Tract links compare as strings against GEOID
    for col in ["tract_id", "GEOID"]:
        df[col] = pd.Series([_normalize_geoid(v) for v in df[col]], index=df.index, dtype=object)

    logger.info(f"Prepared {len(df)} places")
    return df
