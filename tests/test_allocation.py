"""Tests for proportional place-type allocation and the fallback split."""
import os
import sys

import geopandas as gpd
import pytest
from shapely.geometry import Point, box

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from utils.allocation import (
    allocate_proportional,
    fallback_place_types,
    format_place_type,
    place_type_breakdown,
    places_in_tract,
    round_half_up,
)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4999) == 2
    assert round_half_up(0.5) == 1
    assert round_half_up(0.0) == 0


def test_exact_shares():
    assert allocate_proportional({"A": 3, "B": 1}, 8) == {"A": 6, "B": 2}


def test_ties_corrected_to_official_total():
    # Shares 5.0 / 2.5 / 2.5 round to 5 / 3 / 3; one unit comes off the first tie
    result = allocate_proportional({"A": 2, "B": 1, "C": 1}, 10)
    assert sum(result.values()) == 10
    assert result == {"A": 5, "B": 2, "C": 3}


def test_shortfall_added_to_largest_remainders():
    # Shares 1.4 / 1.4 / 1.4 / 2.8 round to 1 / 1 / 1 / 3 = 6; one unit short
    result = allocate_proportional({"A": 1, "B": 1, "C": 1, "D": 2}, 7)
    assert sum(result.values()) == 7
    assert result["D"] == 3
    assert sorted(result.values()) == [1, 1, 2, 3]


def test_total_matches_for_many_mixes():
    samples = [
        ({"A": 5, "B": 3, "C": 2}, 17),
        ({"A": 1, "B": 1, "C": 1}, 10),
        ({"A": 7, "B": 2}, 3),
        ({"A": 4, "B": 4, "C": 1, "D": 1}, 23),
    ]
    for sample, total in samples:
        assert sum(allocate_proportional(sample, total).values()) == total


def test_zero_totals_skip():
    assert allocate_proportional({}, 5) == {}
    assert allocate_proportional({"A": 0}, 5) == {}
    assert allocate_proportional({"A": 2}, 0) == {}


def test_zero_allocations_dropped():
    result = allocate_proportional({"A": 9, "B": 1}, 2)
    assert result == {"A": 2}


def test_decrement_blocked_at_one():
    """Sub-types are never reduced below 1, so the total can overshoot.

    Shares of 2/3 each round to 1 / 1 / 1; the extra unit cannot be removed.
    """
    result = allocate_proportional({"A": 1, "B": 1, "C": 1}, 2)
    assert result == {"A": 1, "B": 1, "C": 1}
    assert sum(result.values()) == 3


def test_fallback_traditional_split():
    result = fallback_place_types(10, 0, 0)
    assert {r["name"]: r["count"] for r in result} == {"Restaurants": 6, "Cafes": 3, "Bars": 1}
    assert all(r["category"] == "traditional" for r in result)


def test_fallback_all_categories():
    result = {r["name"]: r["count"] for r in fallback_place_types(0, 10, 5)}
    assert result == {
        "Places of Worship": 5,
        "Community Centers": 3,
        "Libraries": 2,
        "Coworking Spaces": 3,
        "Marketplaces": 3,
    }


def test_format_place_type():
    assert format_place_type("coffee_shop") == "Coffee Shop"
    assert format_place_type("library") == "Library"
    assert format_place_type("place_of_worship") == "Place Of Worship"


@pytest.fixture
def tract():
    return {
        "GEOID": "48201000100",
        "traditional_count": 4.2,
        "community_count": 2.0,
        "modern_count": 0.0,
        "geometry": box(-95.40, 29.70, -95.38, 29.72),
    }


@pytest.fixture
def places():
    return gpd.GeoDataFrame(
        {
            "name": ["A", "B", "C", "D", "E"],
            "category": ["traditional", "traditional", "traditional", "community", "traditional"],
            "osm_value": ["cafe", "cafe", "bar", "library", "restaurant"],
            "tract_id": [None, None, None, None, None],
            "GEOID": [None, None, None, None, None],
        },
        geometry=[
            Point(-95.39, 29.71),
            Point(-95.385, 29.705),
            Point(-95.3995, 29.7195),
            Point(-95.381, 29.701),
            Point(-95.20, 29.90),  # far away
        ],
        crs="EPSG:4326",
    )


def test_places_in_tract_spatial_fallback(tract, places):
    assert places_in_tract(tract, places)["name"].tolist() == ["A", "B", "C", "D"]


def test_places_in_tract_buffer(tract, places):
    edge = places.copy()
    edge["geometry"] = gpd.GeoSeries(
        [Point(-95.3785, 29.71)] + list(places.geometry.iloc[1:]),  # A 0.0015 deg past the east edge
        index=places.index,
        crs="EPSG:4326",
    )
    assert "A" in places_in_tract(tract, edge)["name"].tolist()
    assert "A" not in places_in_tract(tract, edge, buffer=0.001)["name"].tolist()


def test_places_in_tract_prefers_links(tract, places):
    linked = places.copy()
    linked["tract_id"] = [None, None, None, None, "48201000100"]
    assert places_in_tract(tract, linked)["name"].tolist() == ["E"]


def test_breakdown_scales_to_official_counts(tract, places):
    breakdown = place_type_breakdown(tract, places)
    by_name = {b["name"]: b for b in breakdown}
    # Traditional: official 4 from sample cafe 2, bar 1
    assert by_name["Cafe"]["count"] == 3
    assert by_name["Bar"]["count"] == 1
    assert by_name["Library"]["count"] == 2
    assert by_name["Library"]["category"] == "community"
    counts = [b["count"] for b in breakdown]
    assert counts == sorted(counts, reverse=True)


def test_breakdown_fallback_without_places(tract, places):
    far_only = places[places["name"] == "E"]
    names = {b["name"] for b in place_type_breakdown(tract, far_only)}
    assert {"Restaurants", "Places of Worship"} <= names


def test_breakdown_waits_for_places(tract):
    assert place_type_breakdown(tract, None) == []


def test_breakdown_empty_tract(places):
    empty = {"GEOID": "x", "traditional_count": 0.2, "community_count": None, "modern_count": 0,
             "geometry": box(-95.40, 29.70, -95.38, 29.72)}
    assert place_type_breakdown(empty, places) == []
