"""Leaflet web map of carcass reports, colonies and outbreak sites.

Builds a standalone HTML page: boundary fill, one circle-marker layer per
category with a legend, a scale bar and per-point popups.  Popup HTML is
assembled client-side from structured marker data, so every value is escaped
in one place (the template's ``escapeHtml``).
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import geopandas as gpd

from carcass_watch.renderers import render_template
from carcass_watch.renderers.layer_styles import LayerStyle, ordered_layer_names, style_for

# Columns never shown in site popups
_SITE_HIDDEN = {"name", "site_kind", "latitude", "longitude", "geometry"}


def _present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return str(value).strip() not in {"", "NaT", "nan"}


def _format_date(value: object) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def _attribution(row: Mapping[str, Any]) -> str:
    name = row.get("user_name") if _present(row.get("user_name")) else None
    login = row.get("user_login") if _present(row.get("user_login")) else None
    if name and login:
        who = f"{name} ({login})"
    else:
        who = name or login or ""
    licence = row.get("license_code")
    if who and _present(licence):
        return f"{who}, {str(licence).upper()}"
    return str(who)


def observation_popup_fields(row: Mapping[str, Any]) -> dict[str, str]:
    """Popup data for one observation row; empty values are left out."""
    title = row.get("common_name") if _present(row.get("common_name")) else None
    fields: dict[str, str] = {
        "title": str(title or row.get("scientific_name") or "Observation"),
        "attribution": _attribution(row),
        "place": str(row.get("place_guess") or ""),
        "date": _format_date(row["observed_on"]) if _present(row.get("observed_on")) else "",
        "description": str(row.get("description") or ""),
        "tags": str(row.get("tag_list") or ""),
        "url": str(row.get("url") or ""),
        "thumbnail": str(row.get("thumbnail_url") or ""),
    }
    return {k: v for k, v in fields.items() if _present(v)}


def site_popup_fields(row: Mapping[str, Any]) -> dict[str, Any]:
    """Popup data for a reference site: its name plus any extra columns."""
    details = {
        str(k): str(v) for k, v in row.items() if k not in _SITE_HIDDEN and _present(v)
    }
    return {"title": str(row.get("name") or "Site"), "details": details}


def _markers(layer: gpd.GeoDataFrame) -> list[dict[str, Any]]:
    is_sites = "site_kind" in layer.columns
    markers: list[dict[str, Any]] = []
    rows = layer.drop(columns=layer.geometry.name).to_dict(orient="records")
    for row, geom in zip(rows, layer.geometry, strict=True):
        popup = site_popup_fields(row) if is_sites else observation_popup_fields(row)
        markers.append({"lat": round(geom.y, 6), "lon": round(geom.x, 6), "popup": popup})
    return markers


def build_web_map_html(
    boundary: gpd.GeoDataFrame,
    layers: Mapping[str, gpd.GeoDataFrame],
    *,
    title: str,
    styles: dict[str, LayerStyle] | None = None,
) -> str:
    """Build a complete HTML document with an interactive Leaflet map."""
    layer_data = []
    for name in ordered_layer_names(layers):
        style = style_for(name, styles)
        layer_data.append(
            {
                "key": name,
                "label": style.label,
                "color": style.color,
                "radius": style.radius,
                "count": len(layers[name]),
                "markers": _markers(layers[name]),
            }
        )

    minx, miny, maxx, maxy = (float(v) for v in boundary.total_bounds)
    return render_template(
        "web_map.html.j2",
        title=title,
        boundary=json.loads(boundary.to_json()),
        bounds=[[miny, minx], [maxy, maxx]],
        layers=layer_data,
    )
