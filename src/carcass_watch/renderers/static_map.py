"""Static PNG map: boundary fill plus one scatter per layer."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import geopandas as gpd
from matplotlib.figure import Figure

from carcass_watch.renderers.layer_styles import LayerStyle, ordered_layer_names, style_for

BOUNDARY_FILL = "#efe9df"
BOUNDARY_EDGE = "#6b6b6b"


def render_static_map(
    boundary: gpd.GeoDataFrame,
    layers: Mapping[str, gpd.GeoDataFrame],
    path: Path,
    *,
    title: str,
    styles: dict[str, LayerStyle] | None = None,
    figsize: tuple[float, float] = (8.0, 10.0),
    dpi: int = 150,
) -> Path:
    """
    Draw the boundary and point layers and save a PNG to ``path``.

    Each layer gets its own colour and marker; the legend lists every layer
    with its point count, including empty ones.
    """
    fig = Figure(figsize=figsize)
    ax = fig.subplots()

    boundary.plot(ax=ax, color=BOUNDARY_FILL, edgecolor=BOUNDARY_EDGE, linewidth=0.6)

    for name in ordered_layer_names(layers):
        layer = layers[name]
        style = style_for(name, styles)
        ax.scatter(
            layer.geometry.x,
            layer.geometry.y,
            s=style.size,
            c=style.color,
            marker=style.marker,
            edgecolors="black",
            linewidths=0.3,
            alpha=0.85,
            label=f"{style.label} ({len(layer)})",
            zorder=3,
        )

    ax.set_title(title)
    ax.set_axis_off()
    ax.set_aspect("equal")
    ax.legend(loc="upper left", frameon=True, fontsize="small")

    fig.savefig(path, dpi=dpi, bbox_inches="tight", format="png")
    return Path(path)
