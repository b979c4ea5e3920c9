"""
Third Place Index Map — Tract Index Layers
Tract polygons colored by one index, with hover tooltips and detail popups.
"""
import folium
import pandas as pd
from shapely.geometry import mapping

import config
from utils.index_layers import IndexLayer
from utils.popup import build_popup_html, build_tooltip_html
from utils.stats import get_tract_rank, histogram_bins, selected_bin


def build_tract_index_layer(
    tracts: pd.DataFrame,
    layer: IndexLayer,
    rankings: pd.DataFrame,
    distributions: dict,
    breakdowns: dict,
    show: bool = False,
) -> folium.FeatureGroup:
    """
    Build the choropleth FeatureGroup for one index layer.

    Each tract is filled with the layer's stepped color scale. The popup is
    the full details card, with the distribution chart for this layer.
    """
    fg = folium.FeatureGroup(name=layer.title, show=show)

    bins = histogram_bins(distributions.get(layer.key, []), num_bins=config.HISTOGRAM_BINS)
    total = len(rankings)

    for row in tracts.to_dict("records"):
        geometry = row.get("geometry")
        if geometry is None or geometry.is_empty:
            continue

        geoid = str(row.get("GEOID"))
        value = row.get(layer.metric, 0.0)
        fill_color = layer.color_for(value)

        feature = {
            "type": "Feature",
            "geometry": mapping(geometry),
            "properties": {"GEOID": geoid},
        }
        popup_html = build_popup_html(
            row,
            layer,
            rank=get_tract_rank(rankings, geoid),
            total_tracts=total,
            breakdown=breakdowns.get(geoid, []),
            bins=bins,
            selected_index=selected_bin(bins, value),
        )

        geojson = folium.GeoJson(
            feature,
            style_function=lambda _, c=fill_color: {
                "fillColor": c,
                "fillOpacity": config.TRACT_FILL_OPACITY,
                "color": "#555",
                "weight": 1,
                "opacity": 0.5,
            },
            highlight_function=lambda _: {"color": "#000000", "weight": 3, "opacity": 1},
            tooltip=folium.Tooltip(build_tooltip_html(row, layer)),
        )
        geojson.add_child(folium.Popup(popup_html, max_width=340))
        geojson.add_to(fg)

    return fg
