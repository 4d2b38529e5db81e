"""
Prefect flows for the data pipeline.

Flows:
- fetch: Query iNaturalist and save the raw observation snapshot
- build: Filter, build point layers, clip to the country, render and export

Usage (local):
    python -m carcass_watch.flows.fetch
    python -m carcass_watch.flows.build

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m carcass_watch.flows.fetch
"""
