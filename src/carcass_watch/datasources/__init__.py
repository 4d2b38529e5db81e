"""External and reference data sources.

Each subdirectory is one data source:

    datasources/
    ├── inaturalist/   # Observation API (client.py + observations.py)
    ├── sites/         # Hand-curated colony / outbreak CSVs
    └── boundaries/    # Country polygons (Natural Earth)

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with an ``__init__.py`` re-exporting its
   public functions via ``__all__``.

2. Return pandas/geopandas frames, or dataclasses that tabulate into one.
   Raise the matching ``carcass_watch.errors`` class on failure: remote
   failures are ``RemoteQueryFailure``, missing files
   ``MissingReferenceFileError``.

3. Wire into the pipeline (see ``flows/fetch.py`` or ``flows/build.py``).

4. Add tests in ``tests/test_{name}.py``.
"""
