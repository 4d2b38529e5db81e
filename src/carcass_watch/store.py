"""Snapshot store for raw query results.

Raw API results are saved as JSON wrapped in a metadata envelope::

    {"meta": {"source": ..., "fetched_at": ..., "valid_until": ..., <query>},
     "data": [...]}

The build flow works only from a snapshot, so re-running it on the same
snapshot reproduces the same outputs.  ``valid_until`` lets the fetch flow
skip the remote query while a snapshot is still fresh.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003
from typing import Any


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_") or "all"


class SnapshotStore:
    """Read/write of enveloped JSON snapshots under one base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir

    @staticmethod
    def snapshot_path(taxon_name: str, place_id: int) -> Path:
        """Relative path of the observation snapshot for a taxon/place query."""
        return Path("raw") / f"inaturalist_{_slug(taxon_name)}_{place_id}.json"

    def read(self, path: Path) -> Any | None:
        """Return the ``data`` payload, or None if the file doesn't exist."""
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data")

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data)."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open(encoding="utf-8") as f:
            result: dict[str, Any] = json.load(f)
        return result

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under the base directory.
            data: JSON-serialisable payload stored under ``data``.
            source: Data source identifier (e.g. ``"inaturalist.org"``).
            valid_until: Expiry timestamp; None means never fresh.
            **params: Extra metadata (query parameters).

        Returns:
            Path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        meta.update(params)

        # Write then rename so a crash never leaves a truncated snapshot.
        tmp = full.with_suffix(full.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump({"meta": meta, "data": data}, f, indent=2)
        tmp.replace(full)
        return full

    def is_fresh(self, path: Path) -> bool:
        """True if the snapshot exists and its ``valid_until`` has not passed."""
        envelope = self.read_raw(path)
        if envelope is None:
            return False
        valid_until = envelope.get("meta", {}).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
