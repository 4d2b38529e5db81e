"""Filtering and geometry core.

Pure functions over in-memory frames; no I/O, no Prefect decorators.

  - keywords:    Lexical filter (KeywordRule, filter_records, record_passes)
  - points:      Geometry builder (ColumnMapping presets, build_points)
  - containment: Spatial containment filter (ensure_same_crs, clip_to_boundary)

Every function takes its rule table, CRS and boundary as arguments.
"""

from carcass_watch.analysis.containment import clip_to_boundary, ensure_same_crs
from carcass_watch.analysis.keywords import (
    FilterCounts,
    LexicalFilterResult,
    filter_records,
    record_passes,
)
from carcass_watch.analysis.points import PointBuildResult, build_point, build_points

__all__ = [
    "FilterCounts",
    "LexicalFilterResult",
    "PointBuildResult",
    "build_point",
    "build_points",
    "clip_to_boundary",
    "ensure_same_crs",
    "filter_records",
    "record_passes",
]
