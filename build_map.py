"""
Third Place Index Map — Build Script
Loads tracts and places, runs the rankings and analyses, and writes the map.
"""
import logging
import os
import sys

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import folium

from utils.data_loader import load_places, load_tracts
from utils.data_prep import prepare_places, prepare_tracts
from utils.app_state import StateStore, with_places, with_tracts
from utils.aggregation import aggregate_by_density, aggregate_by_income
from utils.allocation import place_type_breakdown
from utils.correlation import income_correlations
from utils.index_layers import IndexLayer
from utils.stats import summarize_metric
from layers.tract_index import build_tract_index_layer
from layers.places import build_place_layer
from utils.branding import (
    build_title_bar,
    build_legend,
    build_attribution,
    build_reset_view_button,
    build_popup_styles,
)
from utils.panels import build_analysis_panel
import config

logger = logging.getLogger(__name__)


def load_state(tracts_source: str, places_source: str) -> StateStore:
    """
    Load both datasets into a state store.

    Tracts are required. Places are optional: a failed load leaves them
    unset and the map is built without place layers.
    """
    store = StateStore()
    store.subscribe(lambda s: logger.info(
        f"State updated: {0 if s.tracts is None else len(s.tracts)} tracts, "
        f"{0 if s.places is None else len(s.places)} places"
    ))

    tracts = prepare_tracts(load_tracts(tracts_source, cache_path=config.TRACTS_CACHE))
    if len(tracts) > 500:
        # Simplify geometry to reduce file size
        tracts["geometry"] = tracts["geometry"].simplify(tolerance=0.0005, preserve_topology=True)
    store.dispatch(with_tracts, tracts)

    try:
        places = prepare_places(load_places(places_source, cache_path=config.PLACES_CACHE))
        store.dispatch(with_places, places)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load places data: {e}")

    return store


def build_map(tracts_source: str, places_source: str, output_path: str) -> str:
    """Build the dashboard HTML and return its path."""
    logger.info("=== Third Place Index Map — Data Pipeline ===")

    store = load_state(tracts_source, places_source)
    state = store.state
    tracts = state.tracts

    # Summary stats
    for layer in IndexLayer:
        summary = summarize_metric(state.distributions[layer.key])
        logger.info(
            f"  {layer.title}: mean {summary['mean']:.3f}, "
            f"std {summary['std']:.3f}, range {summary['min']:.2f}–{summary['max']:.2f}"
        )
    if len(state.rankings) > 0:
        top = state.rankings.iloc[0]
        logger.info(f"Top-ranked tract: {top['id']} ({top['overall']:.3f})")

    density = aggregate_by_density(tracts)
    for bucket in density["buckets"]:
        logger.info(f"  {bucket['category']}: {bucket['count']} tracts, "
                    f"avg {bucket['avg_total_places']:.1f} places")
    income = aggregate_by_income(tracts)
    correlations = income_correlations(tracts)
    for row in correlations:
        logger.info(f"  income vs {row['label']}: r={row['r']:+.3f} ({row['strength']})")

    logger.info("Computing place type breakdowns...")
    breakdowns = {
        str(row["GEOID"]): place_type_breakdown(row, state.places)
        for row in tracts.to_dict("records")
    }

    logger.info("Data pipeline complete. Building map...")

    # === Map Generation ===
    m = folium.Map(
        location=config.DEFAULT_CENTER,
        zoom_start=config.DEFAULT_ZOOM,
        tiles=config.TILE_PROVIDER,
        prefer_canvas=True,
    )

    # Layer z-order: index choropleths (bottom) → place markers (top)
    for layer in IndexLayer:
        build_tract_index_layer(
            tracts,
            layer,
            rankings=state.rankings,
            distributions=state.distributions,
            breakdowns=breakdowns,
            show=layer is state.active_layer,
        ).add_to(m)

    if state.places is not None:
        for category in config.PLACE_CATEGORIES:
            build_place_layer(state.places, category).add_to(m)
    else:
        logger.warning("Places not available; skipping place layers")

    folium.LayerControl(collapsed=False).add_to(m)

    # Inject popup CSS, branding elements and analysis panel
    m.get_root().html.add_child(build_popup_styles())
    m.get_root().html.add_child(build_title_bar(len(tracts)))
    m.get_root().html.add_child(build_legend(state.active_layer))
    m.get_root().html.add_child(build_attribution())
    m.get_root().html.add_child(
        build_reset_view_button(config.DEFAULT_CENTER, config.DEFAULT_ZOOM)
    )
    m.get_root().html.add_child(build_analysis_panel(density, income, correlations))

    # Save
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    m.save(output_path)

    file_size_mb = os.path.getsize(output_path) / (1024 * 1024)
    logger.info(f"Map saved to {output_path} ({file_size_mb:.1f} MB)")
    return output_path


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    build_map(
        tracts_source=config.TRACTS_SOURCE,
        places_source=config.PLACES_SOURCE,
        output_path=os.path.join(config.OUTPUT_DIR, config.OUTPUT_FILENAME),
    )
    logger.info("Build complete. Open the HTML file in a browser to review.")


if __name__ == "__main__":
    main()
