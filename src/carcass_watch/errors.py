"""Domain errors.

Record-level defects (``InvalidCoordinateError``) are caught where records are
built and the record is dropped.  Everything else aborts the run.
"""

from __future__ import annotations


class CarcassWatchError(Exception):
    """Base class for pipeline failures."""

    error_code = "CARCASS_WATCH_ERROR"


class RemoteQueryFailure(CarcassWatchError):
    """The observation API could not be reached or returned an error."""

    error_code = "REMOTE_QUERY_FAILURE"


class InvalidCoordinateError(CarcassWatchError):
    """A record's longitude/latitude is missing, non-numeric or out of range."""

    error_code = "INVALID_COORDINATE"


class CrsMismatchError(CarcassWatchError):
    """Two layers declare different coordinate reference systems."""

    error_code = "CRS_MISMATCH"


class MissingReferenceFileError(CarcassWatchError):
    """A reference table or boundary source is missing or unreadable."""

    error_code = "MISSING_REFERENCE_FILE"


class BoundaryNotFoundError(CarcassWatchError):
    """No feature in the boundary source matches the requested country."""

    error_code = "BOUNDARY_NOT_FOUND"


class MissingSnapshotError(CarcassWatchError):
    """The build flow ran before any observation snapshot was fetched."""

    error_code = "MISSING_SNAPSHOT"
