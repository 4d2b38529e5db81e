"""Carcass Watch - map reported carcasses against colonies and outbreak sites.

Architecture::

    datasources/   iNaturalist observations, reference site CSVs, country boundaries
    store.py       Raw observation snapshots (JSON envelope with valid_until)
    analysis/      Lexical filter, point geometry builder, containment filter
    export.py      CSV / GeoJSON / GeoPackage writers with staged commit
    renderers/     Static PNG map and Leaflet web map
    flows/         Prefect orchestration (fetch saves snapshot, build renders outputs)
    services/      Shared HTTP session

Data flow: datasources → store (snapshot) → analysis → renderers/export → output/
"""

__version__ = "0.1.0"

from carcass_watch.config import Settings

__all__ = ["Settings", "__version__"]
