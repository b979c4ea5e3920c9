"""
Third Place Index Map — Place Layers
Circle markers for third places, one toggleable group per category.
"""
import folium
import pandas as pd

import config
from utils.popup import build_place_popup_html


def build_place_layer(places: pd.DataFrame, category: str) -> folium.FeatureGroup:
    """
    Build the FeatureGroup of one place category, hidden by default.
    """
    entry = config.PLACE_CATEGORIES[category]
    fg = folium.FeatureGroup(name=f"{entry['label']} Places", show=False)

    subset = places[places["category"] == category]
    for row in subset.to_dict("records"):
        point = row.get("geometry")
        if point is None or point.is_empty:
            continue

        folium.CircleMarker(
            location=[point.y, point.x],
            radius=config.PLACE_MARKER_RADIUS,
            color="#fff",
            weight=1,
            fill=True,
            fill_color=entry["color"],
            fill_opacity=0.8,
            tooltip=folium.Tooltip(build_place_popup_html(row)),
        ).add_to(fg)

    return fg
