"""Access to the snapshot GeoPackage (a single-file SQLite database)"""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import List, Optional

import geopandas as gpd
import pandas as pd

logger = logging.getLogger(__name__)

INTERNAL_TABLE_PREFIXES = ("gpkg_", "rtree_", "sqlite_")


def get_connection(gpkg_path: Path) -> sqlite3.Connection:
    gpkg_path = Path(gpkg_path)
    if not gpkg_path.exists():
        raise FileNotFoundError(f"GeoPackage not found: {gpkg_path}")
    # Read-only: the snapshot is never modified in place
    return sqlite3.connect(f"{gpkg_path.resolve().as_uri()}?mode=ro", uri=True)


def list_tables(gpkg_path: Path) -> List[str]:
    """List user tables, hiding GeoPackage and SQLite bookkeeping tables"""
    with closing(get_connection(gpkg_path)) as conn:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        ).fetchall()
    tables = [name for (name,) in rows if not name.startswith(INTERNAL_TABLE_PREFIXES)]
    logger.debug(f"Found {len(tables)} tables in {Path(gpkg_path).name}")
    return tables


def list_feature_layers(gpkg_path: Path) -> List[str]:
    """List tables registered as geometry-bearing feature layers"""
    with closing(get_connection(gpkg_path)) as conn:
        has_contents = conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'gpkg_contents'"
        ).fetchone()
        if not has_contents:
            return []
        rows = conn.execute(
            "SELECT table_name FROM gpkg_contents WHERE data_type = 'features' ORDER BY table_name"
        ).fetchall()
    return [name for (name,) in rows]


def read_table(gpkg_path: Path, table: str, limit: Optional[int] = None) -> pd.DataFrame:
    """Scan the rows of a table into a DataFrame

    Args:
        gpkg_path: GeoPackage file
        table: Table name, as returned by list_tables
        limit: Maximum number of rows (default: all)
    """
    available = list_tables(gpkg_path)
    if table not in available:
        raise ValueError(f"Unknown table: {table}. Available tables: {available}")

    # Table name is validated above, so quoting it is safe
    query = f'SELECT * FROM "{table}"'
    params = ()
    if limit is not None:
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        query += " LIMIT ?"
        params = (limit,)

    with closing(get_connection(gpkg_path)) as conn:
        df = pd.read_sql_query(query, conn, params=params)

    logger.info(f"Read {len(df)} rows from {table}")
    return df


def read_feature_layer(gpkg_path: Path, layer: str) -> gpd.GeoDataFrame:
    """Read a geometry-bearing layer with its CRS"""
    available = list_feature_layers(gpkg_path)
    if layer not in available:
        raise ValueError(f"Unknown feature layer: {layer}. Available layers: {available}")

    gdf = gpd.read_file(gpkg_path, layer=layer)
    logger.info(f"Read {len(gdf)} features from {layer} ({gdf.crs})")
    return gdf
