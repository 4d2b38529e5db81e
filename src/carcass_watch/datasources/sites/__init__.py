"""Reference site data source.

Colony and outbreak-location tables are small CSVs curated by hand
(``data/reference/`` holds the defaults).  They skip lexical filtering and go
straight to the geometry builder.
"""

from carcass_watch.datasources.sites.loader import load_colonies, load_outbreaks, load_sites

__all__ = ["load_colonies", "load_outbreaks", "load_sites"]
