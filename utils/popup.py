"""
Third Place Index Map — Tooltip and Popup HTML Generation
Transforms tract and place rows into styled HTML for Leaflet tooltips and popups.
"""
import math
from html import escape

from config import PLACE_CATEGORIES
from utils.allocation import round_half_up
from utils.index_layers import IndexLayer


# CSS classes injected once into the page (via branding.py build_popup_styles)
# to keep per-feature HTML small.
POPUP_CSS = """
<style>
.tp-p{font-family:"Libre Franklin",Arial,sans-serif;width:300px;font-size:13px;line-height:1.5;margin:0;padding:0}
.tp-h{color:#fff;padding:8px 12px;border-radius:6px 6px 0 0;font-size:11px;font-weight:bold;letter-spacing:.5px;text-transform:uppercase}
.tp-b{padding:10px 12px}
.tp-sl{font-size:11px;color:#555;text-transform:uppercase;letter-spacing:.5px;margin:6px 0 4px}
.tp-d{border-top:1px solid #eee;margin:8px 0}
.tp-v{font-size:12px;line-height:1.6}
.tp-m{color:#888;font-size:11px}
.tp-bar{background:#eee;height:8px;border-radius:3px;margin-bottom:4px}
.tp-row{display:flex;justify-content:space-between;font-size:12px}
.tp-hist{display:flex;align-items:flex-end;height:60px;gap:1px}
.tp-hist div{flex:1;background:#c7d4e0}
.tp-hist div.sel{background:#ff3b30}
.tp-tt{font-family:Arial,sans-serif;font-size:12px;padding:4px 8px;max-width:220px;line-height:1.4}
.tp-badge{display:inline-block;color:#fff;border-radius:3px;padding:1px 6px;font-size:11px}
</style>
"""


def format_number(value, decimals=0, prefix="", suffix="") -> str:
    """Format a number with thousands separators; None/NaN becomes N/A."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "N/A"
    try:
        num = float(value)
    except (ValueError, TypeError):
        return "N/A"
    if math.isnan(num):
        return "N/A"
    return f"{prefix}{num:,.{decimals}f}{suffix}"


def _score(row: dict, field: str) -> float:
    value = row.get(field, 0)
    try:
        num = float(value)
    except (ValueError, TypeError):
        return 0.0
    return 0.0 if math.isnan(num) else num


def build_tooltip_html(row: dict, layer) -> str:
    """Hover tooltip: tract id and the active layer's index value."""
    value = _score(row, layer.metric)
    return (
        f'<div class="tp-tt">'
        f'<b>Tract {_field(row, "GEOID")}</b><br>'
        f'<span style="color:{layer.color_for(value)};font-size:14px">&#9632;</span> '
        f'{layer.title}: {value:.2f}<br>'
        f'<span class="tp-m">{_field(row, "density_category") or "N/A"}</span></div>'
    )


def build_score_bar(label: str, value: float, color: str) -> str:
    width = max(0.0, min(value, 1.0)) * 100
    return (
        f'<div class="tp-row"><span>{label}</span><b>{value:.2f}</b></div>'
        f'<div class="tp-bar"><div style="background:{color};height:8px;'
        f'border-radius:3px;width:{width:.0f}%"></div></div>'
    )


def build_demographics_html(row: dict) -> str:
    """Demographic lines for the fields present on the row."""
    items = [
        ("Population Density", row.get("population_density"),
         lambda v: format_number(v, suffix=" people/sq mi") if v else "N/A"),
        ("Total Population", row.get("total_population"), lambda v: format_number(v)),
        ("Total Places", row.get("total_places"), lambda v: format_number(v)),
        ("Median Household Income", row.get("median_income"),
         lambda v: format_number(v, prefix="$") if v else "N/A"),
        ("Bachelor's Degree or Higher", row.get("pct_bachelors"),
         lambda v: format_number(v, suffix="%") if v else "N/A"),
    ]
    lines = []
    for label, value, formatter in items:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            continue
        lines.append(f"<b>{label}:</b> {formatter(value)}")
    if not lines:
        return '<div class="tp-m">No demographic data</div>'
    return '<div class="tp-v">' + "<br>".join(lines) + "</div>"


def build_places_chart_html(row: dict) -> str:
    """Horizontal bars of the three rounded place counts."""
    counts = {
        category: round_half_up(_score(row, entry["count_field"]))
        for category, entry in PLACE_CATEGORIES.items()
    }
    peak = max(counts.values()) or 1
    bars = ""
    for category, count in counts.items():
        entry = PLACE_CATEGORIES[category]
        bars += (
            f'<div class="tp-row"><span>{entry["label"]}</span><b>{count:,}</b></div>'
            f'<div class="tp-bar"><div style="background:{entry["color"]};height:8px;'
            f'border-radius:3px;width:{count / peak * 100:.0f}%"></div></div>'
        )
    return bars


def build_place_types_html(breakdown: list[dict], row: dict) -> str:
    """Detailed place types list with the category totals line."""
    if not breakdown:
        return '<div class="tp-m">No detailed place data available</div>'

    totals = {
        category: round_half_up(_score(row, entry["count_field"]))
        for category, entry in PLACE_CATEGORIES.items()
    }
    html = (
        f'<div class="tp-m">Total places: {sum(totals.values())} '
        f'(Traditional: {totals["traditional"]}, Community: {totals["community"]}, '
        f'Modern: {totals["modern"]})</div>'
    )
    for item in breakdown:
        color = PLACE_CATEGORIES.get(item["category"], {}).get("color", "#999")
        html += (
            f'<div class="tp-row"><span style="color:{color}">{escape(item["name"])}</span>'
            f'<b>{item["count"]}</b></div>'
        )
    return html


def build_distribution_html(bins: list[dict], selected_index: int | None, value: float) -> str:
    """Mini histogram with the selected tract's bin highlighted."""
    peak = max((b["count"] for b in bins), default=0) or 1
    cols = ""
    for i, b in enumerate(bins):
        cls = ' class="sel"' if i == selected_index else ""
        cols += (
            f'<div{cls} style="height:{b["count"] / peak * 100:.0f}%" '
            f'title="{b["x0"]:.2f}–{b["x1"]:.2f}: {b["count"]}"></div>'
        )
    return (
        f'<div class="tp-hist">{cols}</div>'
        f'<div class="tp-row tp-m"><span>0.0</span><span>This tract: {value:.2f}</span><span>1.0</span></div>'
    )


def build_popup_html(
    row: dict,
    layer,
    rank: int | None,
    total_tracts: int,
    breakdown: list[dict],
    bins: list[dict],
    selected_index: int | None,
) -> str:
    """Full tract details card shown on click."""
    overall = _score(row, IndexLayer.OVERALL.metric)
    header_color = IndexLayer.OVERALL.colors[-1]
    rank_text = f"Rank {rank:,} of {total_tracts:,}" if rank else "Unranked"

    scores = build_score_bar("Third Place Index", overall, IndexLayer.OVERALL.colors[-1])
    for sub in (IndexLayer.TRADITIONAL, IndexLayer.COMMUNITY, IndexLayer.MODERN):
        color = PLACE_CATEGORIES[sub.key]["color"]
        scores += build_score_bar(sub.title, _score(row, sub.metric), color)

    return (
        f'<div class="tp-p">'
        f'<div class="tp-h" style="background:{header_color}">{rank_text}</div>'
        f'<div class="tp-b">'
        f'<div class="tp-m">{_field(row, "density_category") or "N/A"}</div>'
        f'<div style="font-weight:bold;margin-bottom:8px">Tract {_field(row, "GEOID")}</div>'
        f'{scores}'
        f'<div class="tp-d"></div>'
        f'<div class="tp-sl">Demographics</div>'
        f'{build_demographics_html(row)}'
        f'<div class="tp-d"></div>'
        f'<div class="tp-sl">Places Breakdown</div>'
        f'{build_places_chart_html(row)}'
        f'<div class="tp-sl">Detailed Place Types</div>'
        f'{build_place_types_html(breakdown, row)}'
        f'<div class="tp-d"></div>'
        f'<div class="tp-sl">{layer.title} Distribution</div>'
        f'{build_distribution_html(bins, selected_index, _score(row, layer.metric))}'
        f'</div></div>'
    )


def _text(value) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value).strip()


def _field(row: dict, key: str) -> str:
    """Free-text row value escaped for HTML."""
    return escape(_text(row.get(key)))


def build_place_popup_html(row: dict) -> str:
    """Place card: name, readable type and category badge."""
    category = _text(row.get("category"))
    entry = PLACE_CATEGORIES.get(category, {"label": category.title(), "color": "#999"})
    name = escape(_text(row.get("name")) or "Unnamed Place")
    place_type = escape(_text(row.get("osm_value")).replace("_", " "))

    return (
        f'<div class="tp-tt">'
        f'<b>{name}</b><br>'
        f'{place_type}<br>'
        f'<span class="tp-badge" style="background:{entry["color"]}">{escape(entry["label"])}</span></div>'
    )
