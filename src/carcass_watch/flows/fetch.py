"""
Prefect flow for fetching the observation snapshot from iNaturalist.

Run locally:
    python -m carcass_watch.flows.fetch

Run with Prefect dashboard:
    prefect server start &
    python -m carcass_watch.flows.fetch
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from carcass_watch.config import Settings, get_settings
from carcass_watch.datasources import inaturalist
from carcass_watch.datasources.inaturalist import client
from carcass_watch.store import SnapshotStore

INAT_SOURCE = "inaturalist.org"


@task(name="fetch-observations", cache_policy=NO_CACHE)
def fetch_observations(
    taxon_name: str,
    place_id: int,
    quality_grade: str,
    max_results: int,
) -> list[dict[str, Any]]:
    """Query iNaturalist for georeferenced observations of one taxon."""
    return inaturalist.fetch_observations(
        taxon_name,
        place_id,
        quality_grade=quality_grade,
        max_results=max_results,
    )


@task(name="save-observations", cache_policy=NO_CACHE)
def save_observations(
    store: SnapshotStore,
    path: Path,
    raw: list[dict[str, Any]],
    settings: Settings,
) -> Path:
    """Save the raw results as a snapshot, tagged with the query that made them."""
    return store.write(
        path,
        raw,
        source=INAT_SOURCE,
        valid_until=datetime.now(UTC) + timedelta(hours=settings.snapshot_ttl_hours),
        endpoint=f"{client.API_BASE}/observations",
        query=inaturalist.build_query(
            settings.taxon_name, settings.place_id, settings.quality_grade
        ),
        max_results=settings.max_results,
    )


@flow(name="fetch-observations", log_prints=True)
def fetch_all(settings: Settings | None = None, force: bool = False) -> dict[str, Any]:
    """
    Fetch the observation snapshot unless a fresh one already exists.

    A query failure raises ``RemoteQueryFailure`` and leaves any previous
    snapshot in place.
    """
    settings = settings or get_settings()
    store = SnapshotStore(settings.data_dir)
    path = SnapshotStore.snapshot_path(settings.taxon_name, settings.place_id)

    if not force and store.is_fresh(path):
        print("Observation snapshot is fresh, skipping fetch.")
        raw = store.read(path) or []
        return {"observations": len(raw), "snapshot": str(store.base / path), "fetched": False}

    print(
        f"Fetching up to {settings.max_results} {settings.quality_grade}-grade "
        f"'{settings.taxon_name}' observations for place {settings.place_id}..."
    )
    raw = fetch_observations(
        settings.taxon_name,
        settings.place_id,
        str(settings.quality_grade),
        settings.max_results,
    )
    output_path = save_observations(store, path, raw, settings)
    print(f"Saved {len(raw)} observations to {output_path}")
    return {"observations": len(raw), "snapshot": str(output_path), "fetched": True}


if __name__ == "__main__":
    result = fetch_all()
    print(f"Flow complete: {result}")
