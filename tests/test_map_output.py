"""Tests to validate the generated HTML map."""
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import config
from build_map import build_map, load_state

TRACT_ROWS = [
    # GEOID, overall, traditional, community, modern, counts, density, income
    ("48201000100", 0.82, 0.7, 0.9, 0.6, (8.0, 4.0, 2.0), "Dense Urban", 95000),
    ("48201000200", 0.35, 0.3, 0.4, 0.2, (2.0, 1.0, 0.0), "Suburban", 61000),
    ("48201000300", 0.55, 0.5, 0.6, 0.5, (4.4, 2.0, 1.0), "Urban", None),
    ("48201000400", 0.12, 0.1, 0.1, 0.0, (0.0, 0.0, 0.0), "Rural", 42000),
]


def _tracts_geojson():
    features = []
    for i, (geoid, overall, trad, comm, mod, counts, density, income) in enumerate(TRACT_ROWS):
        x, y = -95.40 + i * 0.02, 29.70
        features.append({
            "type": "Feature",
            "geometry": {"type": "Polygon", "coordinates": [[
                [x, y], [x + 0.02, y], [x + 0.02, y + 0.02], [x, y + 0.02], [x, y],
            ]]},
            "properties": {
                "GEOID": geoid,
                "third_place_index": overall,
                "traditional_index": trad,
                "community_index": comm,
                "modern_index": mod,
                "traditional_count": counts[0],
                "community_count": counts[1],
                "modern_count": counts[2],
                "density_category": density,
                "median_income": income,
            },
        })
    return {"type": "FeatureCollection", "features": features}


def _places_geojson():
    points = [
        ("Morning Brew", "traditional", "cafe", -95.395, 29.705),
        ("Corner Pub", "traditional", "bar", -95.392, 29.712),
        ("St. Mark", "community", "place_of_worship", -95.388, 29.715),
        ("Hub Works", "modern", "coworking_space", -95.385, 29.71),
    ]
    return {"type": "FeatureCollection", "features": [
        {"type": "Feature", "geometry": {"type": "Point", "coordinates": [lon, lat]},
         "properties": {"name": name, "category": cat, "osm_value": value}}
        for name, cat, value, lon, lat in points
    ]}


@pytest.fixture(scope="module")
def sources(tmp_path_factory):
    root = tmp_path_factory.mktemp("tpi")
    tracts_path = root / "tracts.geojson"
    places_path = root / "places.geojson"
    tracts_path.write_text(json.dumps(_tracts_geojson()))
    places_path.write_text(json.dumps(_places_geojson()))
    return root, str(tracts_path), str(places_path)


@pytest.fixture(scope="module")
def html_content(sources):
    root, tracts_path, places_path = sources
    output_path = build_map(tracts_path, places_path, str(root / "out" / config.OUTPUT_FILENAME))
    with open(output_path, "r") as f:
        return f.read()


def test_html_valid_structure(html_content):
    assert html_content.strip().startswith("<!DOCTYPE html>") or html_content.strip().startswith("<html")
    assert "</html>" in html_content


def test_html_contains_leaflet(html_content):
    assert "leaflet" in html_content.lower()


def test_html_contains_index_layers(html_content):
    for entry in config.INDEX_LAYERS.values():
        assert entry["title"] in html_content


def test_html_contains_place_layers(html_content):
    for entry in config.PLACE_CATEGORIES.values():
        assert f"{entry['label']} Places" in html_content
    assert "Morning Brew" in html_content


def test_html_contains_overall_colors(html_content):
    content_lower = html_content.lower()
    for color in config.INDEX_LAYERS["overall-index"]["colors"]:
        assert color.lower() in content_lower


def test_html_contains_rank(html_content):
    assert "Rank 1 of 4" in html_content
    assert "Rank 4 of 4" in html_content


def test_html_contains_analysis_panel(html_content):
    assert "Third Places by Density Category" in html_content
    assert "Correlation with Median Income" in html_content
    assert "3 tracts with income data" in html_content


def test_html_contains_branding(html_content):
    assert "THIRD PLACE INDEX MAP" in html_content
    assert "Reset View" in html_content


def test_html_contains_layer_control(html_content):
    assert (
        "LayerControl" in html_content
        or "leaflet-control-layers" in html_content.lower()
        or "control.layers" in html_content.lower()
    )


def test_html_no_python_errors(html_content):
    assert "Traceback" not in html_content
    assert "$nan" not in html_content.lower()
    assert "{row[" not in html_content


def test_build_without_places(sources):
    root, tracts_path, _ = sources
    output_path = build_map(tracts_path, str(root / "missing.geojson"), str(root / "noplaces.html"))
    with open(output_path, "r") as f:
        html = f.read()
    assert "Third Place Index" in html
    assert "Morning Brew" not in html


def test_state_from_sources(sources):
    _, tracts_path, places_path = sources
    state = load_state(tracts_path, places_path).state
    assert state.rankings["id"].tolist() == [
        "48201000100", "48201000300", "48201000200", "48201000400",
    ]
    assert len(state.places) == 4
