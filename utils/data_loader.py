"""
Third Place Index Map — Data Loading Utilities
Loads the tract and place feature collections from local files or URLs.
"""
import json
import logging
import os

import geopandas as gpd
import requests

logger = logging.getLogger(__name__)


def _is_remote(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def load_geojson(source: str, cache_path: str | None = None) -> dict:
    """
    Load a GeoJSON FeatureCollection from a local path or an http(s) URL.

    Remote sources are cached to cache_path after the first download and
    read from the cache afterwards.
    """
    if _is_remote(source):
        if cache_path and os.path.exists(cache_path):
            logger.info(f"Loading cached GeoJSON from {cache_path}")
            with open(cache_path, "r") as f:
                return json.load(f)

        logger.info(f"Downloading GeoJSON from {source}...")
        try:
            resp = requests.get(source, timeout=120)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise ValueError(f"Failed to download GeoJSON from {source}: {e}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ValueError(f"Response from {source} is not valid JSON: {e}")

        if cache_path:
            os.makedirs(os.path.dirname(cache_path), exist_ok=True)
            with open(cache_path, "w") as f:
                json.dump(data, f)
            logger.info(f"Cached GeoJSON to {cache_path}")
    else:
        logger.info(f"Loading GeoJSON from {source}")
        with open(source, "r") as f:
            data = json.load(f)

    if data.get("type") != "FeatureCollection" or "features" not in data:
        raise ValueError(f"{source} is not a GeoJSON FeatureCollection")
    return data


def _to_geodataframe(geojson: dict) -> gpd.GeoDataFrame:
    if not geojson["features"]:
        return gpd.GeoDataFrame(geometry=[], crs="EPSG:4326")
    return gpd.GeoDataFrame.from_features(geojson["features"], crs="EPSG:4326")


def load_tracts(source: str, cache_path: str | None = None) -> gpd.GeoDataFrame:
    """
    Load census tract polygons with their index and count properties.

    Raises ValueError when the collection has no GEOID property.
    """
    gdf = _to_geodataframe(load_geojson(source, cache_path=cache_path))
    if len(gdf) > 0 and "GEOID" not in gdf.columns:
        raise ValueError(f"No GEOID property found in {source}. Columns: {gdf.columns.tolist()}")
    logger.info(f"Loaded {len(gdf)} tracts from {source}")
    return gdf


def load_places(source: str, cache_path: str | None = None) -> gpd.GeoDataFrame:
    """Load third-place points (name, category, osm_value, optional tract link)."""
    gdf = _to_geodataframe(load_geojson(source, cache_path=cache_path))
    if len(gdf) > 0 and "category" not in gdf.columns:
        raise ValueError(f"No category property found in {source}. Columns: {gdf.columns.tolist()}")
    logger.info(f"Loaded {len(gdf)} places from {source}")
    return gdf
