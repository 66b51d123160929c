from __future__ import annotations
from typing import Iterable, Iterator, List, Tuple
import logging
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
from shapely import from_wkb

from .envelope import Envelope

logger = logging.getLogger(__name__)

_CSV_COLUMNS = ["id", "minx", "miny", "maxx", "maxy"]


def is_parquet_path(path: str) -> bool:
    return str(path).lower().endswith((".parquet", ".geoparquet", ".pq"))


def boxes_from_csv(path: str) -> List[Tuple[str, Envelope]]:
    """Read an index CSV with columns id,minx,miny,maxx,maxy into (id, Envelope) pairs."""
    df = pd.read_csv(path)
    required = set(_CSV_COLUMNS)
    if not required.issubset(set(df.columns)):
        missing = required - set(df.columns)
        raise ValueError(f"Index CSV missing columns: {sorted(missing)}")

    out = [
        (str(r.id), Envelope([float(r.minx), float(r.miny)], [float(r.maxx), float(r.maxy)]))
        for r in df[_CSV_COLUMNS].itertuples(index=False)
    ]
    logger.info("Loaded %d boxes from %s", len(out), path)
    return out


def _iter_row_groups(path: str) -> Iterator[pa.Table]:
    pf = pq.ParquetFile(path)
    logger.info("Opened %s with %d row groups", path, pf.num_row_groups)
    for i in range(pf.num_row_groups):
        logger.debug("Reading row group %d/%d", i, pf.num_row_groups)
        yield pf.read_row_group(i)


def envelopes_from_tables(tables: Iterable[pa.Table], geom_col: str = "geometry") -> Iterator[Tuple[int, Envelope]]:
    """Yield (row_number, Envelope) from the WKB geometry column of Arrow tables."""
    row = 0
    skipped = 0
    for tbl in tables:
        if geom_col not in tbl.column_names:
            raise ValueError(f"Missing geometry column '{geom_col}'")
        geoms = from_wkb(tbl[geom_col].to_numpy(zero_copy_only=False))
        for g in geoms:
            if g is None or g.is_empty:
                skipped += 1
            else:
                minx, miny, maxx, maxy = g.bounds
                yield row, Envelope([minx, miny], [maxx, maxy])
            row += 1
    if skipped:
        logger.warning("Skipped %d null or empty geometries out of %d rows", skipped, row)


def boxes_from_geoparquet(path: str, geom_col: str = "geometry") -> List[Tuple[int, Envelope]]:
    out = list(envelopes_from_tables(_iter_row_groups(path), geom_col=geom_col))
    logger.info("Loaded %d boxes from %s", len(out), path)
    return out


def load_boxes(path: str, geom_col: str = "geometry") -> list:
    if is_parquet_path(path):
        return boxes_from_geoparquet(path, geom_col=geom_col)
    return boxes_from_csv(path)
