"""
Third Place Index Map — Configuration
All configuration: data sources, colors, categories, map defaults, file paths.
"""
import os

# --- Data Sources ---
# Local paths or http(s) URLs. Remote sources are cached under CACHE_DIR.
TRACTS_SOURCE = os.environ.get("TPI_TRACTS_PATH", "data/houston_tpi.geojson")
PLACES_SOURCE = os.environ.get("TPI_PLACES_PATH", "data/houston_places.geojson")

# --- Index Layers ---
# Layer id -> metric field, ranking key, color scale, legend title
INDEX_LAYERS = {
    "overall-index": {
        "metric": "third_place_index",
        "key": "overall",
        "title": "Third Place Index",
        "colors": ["#e5f5f9", "#99d8c9", "#41b6c4", "#2c7fb8", "#253494"],
    },
    "traditional-score": {
        "metric": "traditional_index",
        "key": "traditional",
        "title": "Traditional Index",
        "colors": ["#fff5eb", "#fed8b1", "#fc8d59", "#e67e22", "#d35400"],
    },
    "community-score": {
        "metric": "community_index",
        "key": "community",
        "title": "Community Index",
        "colors": ["#eafaf1", "#a9dfbf", "#7dcea0", "#2ecc71", "#1e8449"],
    },
    "modern-score": {
        "metric": "modern_index",
        "key": "modern",
        "title": "Modern Index",
        "colors": ["#fde0dd", "#fa9fb5", "#f768a1", "#c51b8a", "#7a0177"],
    },
}
DEFAULT_LAYER = "overall-index"

# Breaks for the five color steps, and their legend labels
INDEX_BREAKS = [0.0, 0.2, 0.4, 0.6, 0.8]
INDEX_LEGEND_LABELS = ["Very Low", "Low", "Medium", "High", "Very High"]

# --- Place Categories ---
PLACE_CATEGORIES = {
    "traditional": {"label": "Traditional", "color": "#d35400", "count_field": "traditional_count"},
    "community":   {"label": "Community",   "color": "#2ecc71", "count_field": "community_count"},
    "modern":      {"label": "Modern",      "color": "#c51b8a", "count_field": "modern_count"},
}

# Sub-type split used when no place records can be matched to a tract
FALLBACK_SPLITS = {
    "traditional": [("Restaurants", 0.6), ("Cafes", 0.3), ("Bars", 0.1)],
    "community": [("Places of Worship", 0.5), ("Community Centers", 0.3), ("Libraries", 0.2)],
    "modern": [("Coworking Spaces", 0.5), ("Marketplaces", 0.5)],
}

# Bounding-box buffer (degrees, ~200m) for matching places to a tract spatially
SPATIAL_BUFFER_DEG = 0.002

# --- Density Categories ---
# Ordered from least to most urbanized
DENSITY_CATEGORIES = ["Rural", "Suburban", "Urban", "Dense Urban"]

# --- Income Brackets ---
# Median household income, same min/max convention as the tier tables
INCOME_BRACKETS = [
    {"label": "Under $35K",  "min": 0,       "max": 35000},
    {"label": "$35K–$50K",   "min": 35000,   "max": 50000},
    {"label": "$50K–$75K",   "min": 50000,   "max": 75000},
    {"label": "$75K–$100K",  "min": 75000,   "max": 100000},
    {"label": "$100K+",      "min": 100000,  "max": float("inf")},
]

# --- Correlation Analysis ---
# Metrics correlated against median income: {field: display name}
CORRELATION_METRICS = {
    "third_place_index": "Third Place Index",
    "traditional_index": "Traditional Index",
    "community_index": "Community Index",
    "modern_index": "Modern Index",
    "traditional_count": "Traditional Places",
    "community_count": "Community Places",
    "modern_count": "Modern Places",
    "total_places": "Total Places",
}

# --- Distribution Chart ---
HISTOGRAM_BINS = 20

# --- Map Defaults ---
DEFAULT_CENTER = [29.7604, -95.3698]  # Houston
DEFAULT_ZOOM = 10
TILE_PROVIDER = "cartodbpositron"
TRACT_FILL_OPACITY = 0.8
PLACE_MARKER_RADIUS = 3

# --- File Paths ---
CACHE_DIR = "data/cache"
OUTPUT_DIR = "output"
OUTPUT_FILENAME = "third_place_index_map.html"
TRACTS_CACHE = f"{CACHE_DIR}/tracts.geojson"
PLACES_CACHE = f"{CACHE_DIR}/places.geojson"
