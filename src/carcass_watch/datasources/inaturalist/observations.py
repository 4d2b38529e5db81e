"""Observation fetching and parsing."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date
from typing import Any

import pandas as pd

from carcass_watch.datasources.inaturalist import client
from carcass_watch.schemas import QualityGrade

# =============================================================================
# Data Model
# =============================================================================


@dataclass(frozen=True)
class ObservationRecord:
    """A single observation from iNaturalist.

    Coordinates are kept as ``None`` when the API result has no usable
    location; the geometry builder decides what to do with those records.
    """

    id: int
    observed_on: date | None
    latitude: float | None
    longitude: float | None
    tag_list: str = ""
    description: str = ""
    scientific_name: str = ""
    common_name: str | None = None
    place_guess: str | None = None
    user_login: str | None = None
    user_name: str | None = None
    license_code: str | None = None
    quality_grade: str = QualityGrade.CASUAL.value
    url: str = ""
    image_url: str | None = None
    thumbnail_url: str | None = None


#: Column order of the observation table.
OBSERVATION_COLUMNS: tuple[str, ...] = tuple(f.name for f in fields(ObservationRecord))


# =============================================================================
# Parsing
# =============================================================================


def _parse_location(obs: dict[str, Any]) -> tuple[float | None, float | None]:
    """Return (latitude, longitude) from ``location`` or ``geojson``."""
    location = obs.get("location")
    if location:
        parts = str(location).split(",")
        if len(parts) == 2:  # noqa: PLR2004
            try:
                return float(parts[0]), float(parts[1])
            except ValueError:
                pass

    geojson = obs.get("geojson") or {}
    coords = geojson.get("coordinates")
    if isinstance(coords, list) and len(coords) == 2:  # noqa: PLR2004
        try:
            # GeoJSON order is [lon, lat]
            return float(coords[1]), float(coords[0])
        except (TypeError, ValueError):
            pass
    return None, None


def _parse_date(value: object) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _photo_sizes(photos: list[dict[str, Any]]) -> tuple[str | None, str | None]:
    """Return (medium, square) URLs for the first photo, if any.

    The API hands back the ``square`` size; other sizes share the same path.
    """
    if not photos:
        return None, None
    url = photos[0].get("url")
    if not url:
        return None, None
    return url.replace("/square.", "/medium."), url


def _join_tags(tags: object) -> str:
    if not tags:
        return ""
    if isinstance(tags, str):
        return tags
    names = []
    for tag in tags:  # type: ignore[attr-defined]
        if isinstance(tag, dict):
            tag = tag.get("tag") or tag.get("name") or ""
        if tag:
            names.append(str(tag))
    return ", ".join(names)


def parse_observation(obs: dict[str, Any]) -> ObservationRecord:
    """Parse a single ``/observations`` result into an ``ObservationRecord``."""
    lat, lon = _parse_location(obs)
    taxon = obs.get("taxon") or {}
    user = obs.get("user") or {}
    image_url, thumbnail_url = _photo_sizes(obs.get("photos") or [])

    return ObservationRecord(
        id=obs["id"],
        observed_on=_parse_date(obs.get("observed_on")),
        latitude=lat,
        longitude=lon,
        tag_list=_join_tags(obs.get("tags")),
        description=obs.get("description") or "",
        scientific_name=taxon.get("name", ""),
        common_name=taxon.get("preferred_common_name"),
        place_guess=obs.get("place_guess"),
        user_login=user.get("login"),
        user_name=user.get("name"),
        license_code=obs.get("license_code"),
        quality_grade=obs.get("quality_grade", QualityGrade.CASUAL.value),
        url=obs.get("uri") or f"{client.OBSERVATION_URL}/{obs['id']}",
        image_url=image_url,
        thumbnail_url=thumbnail_url,
    )


def records_to_frame(records: list[ObservationRecord]) -> pd.DataFrame:
    """Tabulate records in a fixed column order."""
    frame = pd.DataFrame([asdict(r) for r in records], columns=list(OBSERVATION_COLUMNS))
    frame["observed_on"] = pd.to_datetime(frame["observed_on"], errors="coerce")
    return frame


# =============================================================================
# API Fetching
# =============================================================================


def build_query(
    taxon_name: str,
    place_id: int,
    quality_grade: QualityGrade | str = QualityGrade.RESEARCH,
) -> dict[str, Any]:
    """Query parameters for georeferenced observations of a taxon in a place."""
    return {
        "taxon_name": taxon_name,
        "place_id": place_id,
        "quality_grade": str(quality_grade),
        "geo": "true",
        "verifiable": "true",
    }


def fetch_observations(
    taxon_name: str,
    place_id: int,
    *,
    quality_grade: QualityGrade | str = QualityGrade.RESEARCH,
    max_results: int = 2000,
) -> list[dict[str, Any]]:
    """
    Fetch raw observation results for a taxon within a place.

    Args:
        taxon_name: Scientific name, e.g. ``"Morus bassanus"``.
        place_id: iNaturalist place ID.
        quality_grade: Verification tier (defaults to research grade).
        max_results: Upper bound on returned results.

    Returns:
        Raw API result dicts, ordered by observation ID.  Use
        ``parse_observation`` to turn them into records.
    """
    params = build_query(taxon_name, place_id, quality_grade)
    return client.get_observations_paginated(params, max_results=max_results)


def parse_observations(raw: list[dict[str, Any]]) -> list[ObservationRecord]:
    """Parse every raw result, keeping API order."""
    return [parse_observation(obs) for obs in raw]
