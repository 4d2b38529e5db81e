"""Visual styling for the three map layers.

Shared by the static and web map renderers so both use the same colours.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

CARCASSES = "carcasses"
COLONIES = "colonies"
OUTBREAKS = "outbreaks"

#: Layer draw order (bottom to top).
LAYER_ORDER = (COLONIES, OUTBREAKS, CARCASSES)


@dataclass(frozen=True)
class LayerStyle:
    """How one point layer is drawn.

    ``size`` is the matplotlib marker area (points^2); ``radius`` is the
    Leaflet circle-marker radius in pixels.  Both scale with how much a
    single point should stand out.
    """

    label: str
    color: str
    marker: str
    size: float
    radius: int


DEFAULT_LAYER_STYLES: dict[str, LayerStyle] = {
    CARCASSES: LayerStyle(label="Carcass reports", color="#d62728", marker="o", size=16, radius=5),
    COLONIES: LayerStyle(label="Breeding colonies", color="#1f77b4", marker="^", size=70, radius=9),
    OUTBREAKS: LayerStyle(label="Outbreak sites", color="#ff7f0e", marker="X", size=70, radius=9),
}


def style_for(name: str, styles: dict[str, LayerStyle] | None = None) -> LayerStyle:
    """Style for layer ``name``, falling back to a neutral grey."""
    styles = styles or DEFAULT_LAYER_STYLES
    return styles.get(name) or LayerStyle(
        label=name.replace("_", " ").capitalize(), color="#888888", marker="o", size=16, radius=5
    )


def ordered_layer_names(layers: Iterable[str]) -> list[str]:
    """Layer names in draw order; unknown layers go on top in given order."""
    names = list(layers)
    known = [name for name in LAYER_ORDER if name in names]
    return known + [name for name in names if name not in known]
