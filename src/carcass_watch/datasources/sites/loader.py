"""Hand-curated reference site tables (colonies, outbreak locations)."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from carcass_watch.errors import MissingReferenceFileError
from carcass_watch.schemas import ColumnMapping, SiteKind

logger = logging.getLogger(__name__)

NAME_COLUMN = "name"
KIND_COLUMN = "site_kind"


def _delimiter_for(path: Path) -> str:
    return "\t" if path.suffix.lower() in {".tsv", ".tab"} else ","


def load_sites(
    path: Path,
    kind: SiteKind | str,
    columns: ColumnMapping | None = None,
) -> pd.DataFrame:
    """
    Read a delimited reference table into a frame.

    The table must have a ``name`` column plus the longitude/latitude columns
    named by ``columns``.  Extra columns are kept.  Every row is tagged with
    ``kind`` in a ``site_kind`` column.

    Raises:
        MissingReferenceFileError: if the file is missing, unreadable, or
            lacks a required column.
    """
    columns = columns or ColumnMapping()
    path = Path(path)
    if not path.is_file():
        msg = f"Reference file not found: {path}"
        raise MissingReferenceFileError(msg)

    try:
        frame = pd.read_csv(path, sep=_delimiter_for(path), encoding="utf-8")
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        msg = f"Reference file {path} could not be read: {exc}"
        raise MissingReferenceFileError(msg) from exc

    required = [NAME_COLUMN, columns.longitude, columns.latitude]
    missing = [c for c in required if c not in frame.columns]
    if missing:
        msg = f"Reference file {path} is missing column(s): {', '.join(missing)}"
        raise MissingReferenceFileError(msg)

    frame[KIND_COLUMN] = str(kind)
    logger.info("Loaded %d %s site(s) from %s", len(frame), kind, path)
    return frame


def load_colonies(path: Path, columns: ColumnMapping | None = None) -> pd.DataFrame:
    """Load the breeding colony table."""
    return load_sites(path, SiteKind.COLONY, columns)


def load_outbreaks(path: Path, columns: ColumnMapping | None = None) -> pd.DataFrame:
    """Load the outbreak location table."""
    return load_sites(path, SiteKind.OUTBREAK, columns)
