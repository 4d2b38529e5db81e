"""
Tests for the fetch flow module.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from carcass_watch.config import Settings
from carcass_watch.errors import RemoteQueryFailure
from carcass_watch.flows import fetch
from carcass_watch.store import SnapshotStore

if TYPE_CHECKING:
    from pathlib import Path

RAW = [
    {"id": 1, "location": "56.07,-2.64", "observed_on": "2022-06-01", "tags": ["dead"]},
    {"id": 2, "location": "60.0,-1.0", "observed_on": "2023-02-11", "description": "carcass"},
]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path / "data", snapshot_ttl_hours=1)


def snapshot_file(settings: Settings) -> Path:
    return settings.data_dir / SnapshotStore.snapshot_path(settings.taxon_name, settings.place_id)


class TestFetchObservationsTask:
    """Test the fetch task."""

    @patch("carcass_watch.datasources.inaturalist.client.get_observations_paginated")
    def test_query_params(self, mock_paginated: Mock) -> None:
        mock_paginated.return_value = RAW
        result = fetch.fetch_observations("Morus bassanus", 6857, "research", 100)
        assert result == RAW
        params = mock_paginated.call_args[0][0]
        assert params["taxon_name"] == "Morus bassanus"
        assert params["place_id"] == 6857
        assert params["quality_grade"] == "research"
        assert mock_paginated.call_args.kwargs["max_results"] == 100


class TestSaveObservations:
    """Test snapshot writing."""

    def test_envelope(self, settings: Settings) -> None:
        store = SnapshotStore(settings.data_dir)
        path = SnapshotStore.snapshot_path(settings.taxon_name, settings.place_id)
        fetch.save_observations(store, path, RAW, settings)

        data = json.loads(snapshot_file(settings).read_text())
        assert data["data"] == RAW
        meta = data["meta"]
        assert meta["source"] == fetch.INAT_SOURCE
        assert meta["endpoint"].endswith("/observations")
        assert meta["query"]["taxon_name"] == "Morus bassanus"
        assert meta["max_results"] == settings.max_results
        assert "valid_until" in meta


class TestFetchAll:
    """Test the fetch flow end to end with the API mocked."""

    @patch("carcass_watch.datasources.inaturalist.client.get_observations_paginated")
    def test_fetch_writes_snapshot(self, mock_paginated: Mock, settings: Settings) -> None:
        mock_paginated.return_value = RAW
        result = fetch.fetch_all(settings)
        assert result["fetched"] is True
        assert result["observations"] == 2
        assert snapshot_file(settings).exists()

    @patch("carcass_watch.datasources.inaturalist.client.get_observations_paginated")
    def test_fresh_snapshot_skips_query(self, mock_paginated: Mock, settings: Settings) -> None:
        mock_paginated.return_value = RAW
        fetch.fetch_all(settings)
        result = fetch.fetch_all(settings)
        assert result["fetched"] is False
        assert result["observations"] == 2
        mock_paginated.assert_called_once()

    @patch("carcass_watch.datasources.inaturalist.client.get_observations_paginated")
    def test_force_refetches(self, mock_paginated: Mock, settings: Settings) -> None:
        mock_paginated.return_value = RAW
        fetch.fetch_all(settings)
        result = fetch.fetch_all(settings, force=True)
        assert result["fetched"] is True
        assert mock_paginated.call_count == 2

    @patch("carcass_watch.datasources.inaturalist.client.get_observations_paginated")
    def test_failure_keeps_previous_snapshot(
        self, mock_paginated: Mock, settings: Settings
    ) -> None:
        mock_paginated.return_value = RAW
        fetch.fetch_all(settings)
        before = snapshot_file(settings).read_bytes()

        mock_paginated.side_effect = RemoteQueryFailure("503 Service Unavailable")
        with pytest.raises(RemoteQueryFailure):
            fetch.fetch_all(settings, force=True)
        assert snapshot_file(settings).read_bytes() == before

    @patch("carcass_watch.datasources.inaturalist.client.get_observations_paginated")
    def test_failure_without_snapshot(self, mock_paginated: Mock, settings: Settings) -> None:
        mock_paginated.side_effect = RemoteQueryFailure("connection refused")
        with pytest.raises(RemoteQueryFailure):
            fetch.fetch_all(settings)
        assert not snapshot_file(settings).exists()
