"""
Third Place Index Map — Analysis Panels
Collapsible side panels with the density, income and correlation tables.
"""
import folium

from config import PLACE_CATEGORIES
from utils.popup import format_number


def _aggregate_table(result: dict, heading: str) -> str:
    rows = ""
    for b in result["buckets"]:
        rows += (
            f'<tr><td>{b["category"]}</td>'
            f'<td>{b["count"]:,}</td>'
            f'<td>{b["avg_third_place_index"]:.2f}</td>'
            f'<td>{format_number(b["avg_total_places"], decimals=1)}</td>'
        )
        for entry in PLACE_CATEGORIES.values():
            rows += f'<td>{format_number(b["avg_" + entry["count_field"]], decimals=1)}</td>'
        rows += "</tr>"

    sub_headers = "".join(f"<th>Avg {entry['label']}</th>" for entry in PLACE_CATEGORIES.values())
    footer = ""
    if result["unclassified"]:
        footer = f'<div class="tp-m">{result["unclassified"]:,} tracts unclassified</div>'

    return (
        f'<div class="tp-sl">{heading}</div>'
        f'<table class="tp-table"><tr><th></th><th>Tracts</th><th>Avg TPI</th>'
        f'<th>Avg Places</th>{sub_headers}</tr>{rows}</table>{footer}'
    )


def build_density_panel_html(result: dict) -> str:
    return _aggregate_table(result, "Third Places by Density Category")


def build_income_panel_html(result: dict) -> str:
    return _aggregate_table(result, "Third Places by Income Bracket")


def build_correlation_panel_html(rows: list[dict]) -> str:
    """Income correlation table: r, strength and direction per metric."""
    n = rows[0]["n"] if rows else 0
    body = ""
    for row in rows:
        body += (
            f'<tr><td>{row["label"]}</td><td>{row["r"]:+.3f}</td>'
            f'<td>{row["strength"]}</td><td>{row["direction"]}</td></tr>'
        )
    return (
        f'<div class="tp-sl">Correlation with Median Income</div>'
        f'<table class="tp-table"><tr><th>Metric</th><th>r</th><th>Strength</th>'
        f'<th>Direction</th></tr>{body}</table>'
        f'<div class="tp-m">{n:,} tracts with income data</div>'
    )


def build_analysis_panel(density: dict, income: dict, correlations: list[dict]) -> folium.Element:
    """Fixed, collapsible analysis panel on the right side of the map."""
    html = f'''
    <style>
    .tp-table{{border-collapse:collapse;width:100%;font-size:11px;margin-bottom:6px}}
    .tp-table th,.tp-table td{{border-bottom:1px solid #eee;padding:2px 4px;text-align:right}}
    .tp-table th:first-child,.tp-table td:first-child{{text-align:left}}
    </style>
    <details id="analysis-panel" style="
        position:fixed; top:115px; right:10px; z-index:1000;
        background:white; padding:10px 14px; border-radius:6px;
        box-shadow:0 1px 4px rgba(0,0,0,0.2);
        font-family:Arial,sans-serif; font-size:12px;
        max-width:440px; max-height:70vh; overflow:auto;
    ">
        <summary style="font-weight:bold;cursor:pointer">Analysis</summary>
        {build_density_panel_html(density)}
        {build_income_panel_html(income)}
        {build_correlation_panel_html(correlations)}
    </details>
    '''
    return folium.Element(html)
