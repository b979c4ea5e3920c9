"""
Third Place Index Map — Branding & UI Chrome
Title bar, legend, attribution badge, reset view button, and popup CSS.
"""
import folium

import config
from utils.popup import POPUP_CSS


def build_popup_styles() -> folium.Element:
    """Inject shared CSS classes for popup/tooltip HTML to reduce file size."""
    return folium.Element(POPUP_CSS)


def build_title_bar(tract_count: int) -> folium.Element:
    """Fixed-position title bar at the top of the map."""
    html = f'''
    <div id="title-bar" style="
        position:fixed; top:0; left:0; right:0; z-index:1000;
        background:rgba(255,255,255,0.95);
        padding:10px 20px;
        box-shadow:0 2px 6px rgba(0,0,0,0.15);
        font-family:"Libre Franklin",Arial,sans-serif;
        max-height:65px; overflow:hidden;
    ">
        <div style="font-size:14px;font-weight:bold;letter-spacing:0.5px;color:#222">
            THIRD PLACE INDEX MAP
        </div>
        <div style="font-size:12px;color:#555;margin-top:2px">
            Where can people gather outside home and work? Access to third places
            across {tract_count:,} census tracts.
        </div>
        <div style="font-size:11px;color:#999;margin-top:1px">
            Hover to preview &middot; Click a tract for details &middot; Toggle indices and places in the layer control
        </div>
    </div>
    '''
    return folium.Element(html)


def build_legend(layer) -> folium.Element:
    """Five-step legend for an index layer, positioned bottom-left."""
    rows = ""
    values = [f"{b:g}" for b in config.INDEX_BREAKS]
    values[-1] += "+"
    for color, label, value in zip(layer.colors, config.INDEX_LEGEND_LABELS, values):
        rows += (
            f'<div style="margin:3px 0">'
            f'<span style="background:{color};display:inline-block;width:14px;height:14px;'
            f'vertical-align:middle;border:1px solid #ccc"></span> '
            f'<span style="vertical-align:middle">{label} ({value})</span></div>\n'
        )

    place_rows = ""
    for entry in config.PLACE_CATEGORIES.values():
        place_rows += (
            f'<div style="margin:3px 0">'
            f'<span style="color:{entry["color"]};font-size:16px;'
            f'vertical-align:middle">&#9679;</span> '
            f'<span style="vertical-align:middle">{entry["label"]} places</span></div>\n'
        )

    html = f'''
    <div id="legend" style="
        position:fixed; bottom:30px; left:10px; z-index:1000;
        background:white; padding:12px 16px; border-radius:6px;
        box-shadow:0 1px 4px rgba(0,0,0,0.2);
        font-family:Arial,sans-serif; font-size:12px;
        line-height:1.4; max-width:260px;
    ">
        <div style="font-weight:bold;margin-bottom:6px">{layer.title}</div>
        {rows}
        <div style="border-top:1px solid #eee;margin:6px 0"></div>
        {place_rows}
    </div>
    '''
    return folium.Element(html)


def build_attribution(text: str = "Data: Third Place Index &middot; OpenStreetMap") -> folium.Element:
    """Data source badge in the bottom-right corner."""
    html = f'''
    <div id="attribution" style="
        position:fixed; bottom:10px; right:10px; z-index:1000;
        background:white; padding:6px 12px; border-radius:4px;
        font-family:Arial,sans-serif; font-size:11px; color:#555;
        box-shadow:0 1px 3px rgba(0,0,0,0.2);
    ">{text}</div>
    '''
    return folium.Element(html)


def build_reset_view_button(center: list, zoom: int) -> folium.Element:
    """Button that resets the map to the default city view."""
    lat, lon = center
    html = f'''
    <button id="reset-view-btn" onclick="
        var maps = Object.values(window).filter(function(v) {{
            return v instanceof L.Map;
        }});
        if (maps.length > 0) maps[0].setView([{lat}, {lon}], {zoom});
    " style="
        position:fixed; top:75px; right:10px; z-index:1000;
        background:white; border:1px solid #ccc; border-radius:4px;
        padding:6px 12px; cursor:pointer;
        font-family:Arial,sans-serif; font-size:12px; color:#333;
    " onmouseover="this.style.background='#f0f0f0'"
       onmouseout="this.style.background='white'"
    >&#8635; Reset View</button>
    '''
    return folium.Element(html)
