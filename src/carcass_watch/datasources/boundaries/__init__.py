"""Country boundary data source (Natural Earth admin-0 countries by default)."""

from carcass_watch.datasources.boundaries.natural_earth import (
    load_country_boundary,
    read_countries,
    select_country,
)

__all__ = ["load_country_boundary", "read_countries", "select_country"]
