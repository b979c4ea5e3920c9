"""Tests for the Pearson correlation estimator and income correlations."""
import os
import sys

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import config
from utils.correlation import classify_correlation, income_correlations, pearson_correlation


def test_self_correlation_is_one():
    x = [12.0, 3.5, 7.0, 9.1, 0.4]
    assert pearson_correlation(x, x) == pytest.approx(1.0)


def test_negated_series_is_minus_one():
    x = [1.0, 2.0, 3.0, 4.0]
    assert pearson_correlation(x, [-v for v in x]) == pytest.approx(-1.0)


def test_constant_series_is_zero():
    assert pearson_correlation([1.0, 2.0, 3.0], [5.0, 5.0, 5.0]) == 0.0
    assert pearson_correlation([4.0, 4.0], [1.0, 2.0]) == 0.0


def test_empty_series_is_zero():
    assert pearson_correlation([], []) == 0.0


def test_symmetric():
    x = [30000, 45000, 52000, 80000, 110000]
    y = [0.2, 0.35, 0.3, 0.6, 0.55]
    assert pearson_correlation(x, y) == pytest.approx(pearson_correlation(y, x))


def test_matches_numpy():
    rng = np.random.default_rng(7)
    x = rng.normal(size=50)
    y = 0.5 * x + rng.normal(size=50)
    assert pearson_correlation(x, y) == pytest.approx(np.corrcoef(x, y)[0, 1])


def test_accepts_series_and_matches_pandas():
    x = pd.Series([30000, 45000, 52000, 80000, 110000])
    y = pd.Series([0.2, 0.35, 0.3, 0.6, 0.55])
    assert pearson_correlation(x, y) == pytest.approx(x.corr(y))


def test_length_mismatch_raises():
    with pytest.raises(ValueError):
        pearson_correlation([1.0, 2.0], [1.0])


@pytest.mark.parametrize("r,label", [
    (0.0, "negligible"),
    (0.09, "negligible"),
    (-0.1, "weak"),
    (0.29, "weak"),
    (0.3, "moderate"),
    (-0.45, "moderate"),
    (0.5, "strong"),
    (0.69, "strong"),
    (0.7, "very strong"),
    (-1.0, "very strong"),
])
def test_classify_correlation(r, label):
    assert classify_correlation(r) == label


def test_income_correlations_excludes_missing_income():
    df = pd.DataFrame({
        "median_income": [20000, 40000, 60000, 80000, np.nan, 0],
        "third_place_index": [0.1, 0.2, 0.3, 0.4, 0.99, 0.99],
        "traditional_index": [0.4, 0.3, 0.2, 0.1, 0.0, 0.0],
        "community_index": [0.5, 0.5, 0.5, 0.5, 0.1, 0.9],
        "modern_index": [0.1, 0.3, 0.2, 0.4, 0.0, 0.0],
        "traditional_count": [1, 2, 3, 4, 50, 50],
        "community_count": [0, 0, 0, 0, 0, 0],
        "modern_count": [4, 3, 2, 1, 0, 0],
        "total_places": [5, 5, 5, 5, 50, 50],
    })
    rows = {row["field"]: row for row in income_correlations(df)}
    assert set(rows) == set(config.CORRELATION_METRICS)
    assert rows["third_place_index"]["n"] == 4
    assert rows["third_place_index"]["r"] == pytest.approx(1.0)
    assert rows["third_place_index"]["direction"] == "positive"
    assert rows["traditional_index"]["r"] == pytest.approx(-1.0)
    assert rows["traditional_index"]["strength"] == "very strong"
    assert rows["community_index"]["r"] == 0.0
    assert rows["community_index"]["direction"] == "none"
    assert rows["total_places"]["strength"] == "negligible"
