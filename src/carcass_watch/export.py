"""Serialization of point layers to tabular and geometry-interchange files.

Every artifact of a run is written into a staging directory first and moved
into the output directory only once all of them have been written, so a
failed run leaves the previous outputs untouched::

    with staged_outputs(Path("output")) as staging:
        export_layer(carcasses, staging, "carcasses", ExportFormat.GEOJSON)
        ...
    # all files now in output/
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

import geopandas as gpd
import pandas as pd

from carcass_watch.schemas import ExportFormat

logger = logging.getLogger(__name__)

_DRIVERS = {
    ExportFormat.GEOJSON: "GeoJSON",
    ExportFormat.GPKG: "GPKG",
}


def write_table(frame: pd.DataFrame, path: Path) -> Path:
    """Write a plain table as CSV (UTF-8, ``\\n`` line endings, no index)."""
    if isinstance(frame, gpd.GeoDataFrame):
        frame = pd.DataFrame(frame.drop(columns=frame.geometry.name))
    frame.to_csv(path, index=False, encoding="utf-8", lineterminator="\n")
    return path


def export_layer(
    layer: gpd.GeoDataFrame,
    directory: Path,
    stem: str,
    fmt: ExportFormat | str,
) -> Path:
    """
    Write ``layer`` to ``directory/stem.<fmt>``, replacing any existing file.

    CSV output drops the geometry column (lon/lat columns carry the
    location).  Geometry formats are written in the layer's own CRS.
    """
    fmt = ExportFormat(fmt)
    path = Path(directory) / f"{stem}{fmt.suffix}"
    path.unlink(missing_ok=True)

    if not fmt.is_geometry:
        return write_table(layer, path)

    options = {"layer": stem} if fmt is ExportFormat.GPKG else {}
    layer.to_file(path, driver=_DRIVERS[fmt], **options)
    return path


def _remove_stale_layers(directory: Path, staged: list[Path]) -> None:
    names = {p.name for p in staged}
    stems = {p.stem for p in staged}
    layer_suffixes = {fmt.suffix for fmt in ExportFormat}
    for path in sorted(directory.iterdir()):
        if (
            path.is_file()
            and path.stem in stems
            and path.suffix in layer_suffixes
            and path.name not in names
        ):
            path.unlink()
            logger.debug("Removed stale %s", path)


@contextmanager
def staged_outputs(directory: Path) -> Iterator[Path]:
    """
    Yield a staging directory; on clean exit move its files into ``directory``.

    Layer files from an earlier run that share a stem with a staged file but
    are in a format this run did not write are removed, so ``directory``
    holds one run's layers only.  If the body raises, the staging directory
    is removed and ``directory`` is left as it was.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=".staging-", dir=directory))
    try:
        yield staging
        staged = sorted(staging.iterdir())
        _remove_stale_layers(directory, staged)
        for src in staged:
            os.replace(src, directory / src.name)
            logger.debug("Wrote %s", directory / src.name)
    finally:
        shutil.rmtree(staging, ignore_errors=True)


def export_all(
    layers: Mapping[str, gpd.GeoDataFrame],
    directory: Path,
    formats: Iterable[ExportFormat | str] = (ExportFormat.CSV, ExportFormat.GEOJSON),
    *,
    tables: Mapping[str, pd.DataFrame] | None = None,
) -> list[Path]:
    """
    Export every layer in every format, plus plain ``tables`` as CSV.

    Writes straight into ``directory``; wrap the call in ``staged_outputs``
    for all-or-nothing behaviour.  Returns the written paths in order.
    """
    directory = Path(directory)
    formats = [ExportFormat(f) for f in formats]
    paths: list[Path] = []
    for stem, table in (tables or {}).items():
        target = directory / f"{stem}.csv"
        target.unlink(missing_ok=True)
        paths.append(write_table(table, target))
    for stem, layer in layers.items():
        for fmt in formats:
            paths.append(export_layer(layer, directory, stem, fmt))
    logger.info("Exported %d file(s) to %s", len(paths), directory)
    return paths
