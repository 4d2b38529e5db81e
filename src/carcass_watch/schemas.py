"""
Domain models for carcass-watch.

Pydantic models for the configurable rule tables that drive the pipeline.
Record-shaped data (observations, sites) travels as pandas/geopandas frames;
these models describe how those frames are interpreted.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Observations
# =============================================================================


class QualityGrade(StrEnum):
    """Observation verification level (iNaturalist)."""

    RESEARCH = "research"
    NEEDS_ID = "needs_id"
    CASUAL = "casual"


class SiteKind(StrEnum):
    """Reference site categories."""

    COLONY = "colony"
    OUTBREAK = "outbreak"


class ExportFormat(StrEnum):
    """Output file formats for a point layer."""

    CSV = "csv"
    GEOJSON = "geojson"
    GPKG = "gpkg"

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @property
    def is_geometry(self) -> bool:
        """True for geometry-interchange formats, False for plain tables."""
        return self is not ExportFormat.CSV


# =============================================================================
# Lexical filtering
# =============================================================================


class KeywordRule(BaseModel):
    """Inclusion/exclusion keyword table applied to free-text fields.

    Keywords are matched as lower-case substrings, so they are normalised to
    lower case here once rather than at every comparison.
    """

    model_config = {"frozen": True}

    include: frozenset[str] = Field(..., description="At least one must appear")
    exclude: frozenset[str] = Field(default_factory=frozenset, description="None may appear")
    fields: tuple[str, ...] = Field(
        default=("tag_list", "description"),
        description="Record columns searched for keywords",
    )

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _lowercase(cls, value: object) -> frozenset[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, Iterable):
            msg = "keywords must be a string or an iterable of strings"
            raise ValueError(msg)
        words = (str(v).strip().lower() for v in value)
        return frozenset(w for w in words if w)

    @field_validator("include")
    @classmethod
    def _non_empty(cls, value: frozenset[str]) -> frozenset[str]:
        if not value:
            msg = "include must contain at least one keyword"
            raise ValueError(msg)
        return value


# =============================================================================
# Geometry
# =============================================================================


class ColumnMapping(BaseModel):
    """Names of the longitude/latitude columns in a source table."""

    model_config = {"frozen": True}

    longitude: str = "longitude"
    latitude: str = "latitude"
