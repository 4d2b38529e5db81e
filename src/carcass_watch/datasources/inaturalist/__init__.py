"""iNaturalist observation data source.

Public API:
  - client: Low-level HTTP (rate-limited, ``id_above`` pagination)
  - observations: ObservationRecord, build_query, fetch_observations,
    parse_observation(s), records_to_frame
"""

from carcass_watch.datasources.inaturalist.observations import (
    OBSERVATION_COLUMNS,
    ObservationRecord,
    build_query,
    fetch_observations,
    parse_observation,
    parse_observations,
    records_to_frame,
)

__all__ = [
    "OBSERVATION_COLUMNS",
    "ObservationRecord",
    "build_query",
    "fetch_observations",
    "parse_observation",
    "parse_observations",
    "records_to_frame",
]
