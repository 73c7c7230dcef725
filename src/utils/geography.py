"""Geographic utilities for turning profile records into point geometries"""

import logging
from dataclasses import dataclass
from typing import Optional

import geopandas as gpd
import pandas as pd

from src.constants import WOSIS_CRS

logger = logging.getLogger(__name__)


@dataclass
class GeoBounds:
    """Geographic bounding box coordinates"""

    min_lon: float
    max_lon: float
    min_lat: float
    max_lat: float

    def __post_init__(self):
        if self.min_lon > self.max_lon or self.min_lat > self.max_lat:
            raise ValueError(f"Invalid bounds: {self}")

    def filter_points(self, gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        """Keep points inside the box (edges included), in geographic coordinates"""
        geographic = gdf if gdf.crs is None or gdf.crs == WOSIS_CRS else gdf.to_crs(WOSIS_CRS)
        inside = (
            geographic.geometry.x.between(self.min_lon, self.max_lon)
            & geographic.geometry.y.between(self.min_lat, self.max_lat)
        )
        return gdf[inside.values]


def profiles_to_geodataframe(
    profiles: pd.DataFrame,
    target_crs: Optional[str] = None,
    lon_col: str = "longitude",
    lat_col: str = "latitude",
) -> gpd.GeoDataFrame:
    """Convert profile records to points in WGS84, optionally reprojected

    Args:
        profiles: Profile table with longitude/latitude columns
        target_crs: CRS to reproject to (default: keep EPSG:4326)
        lon_col: Longitude column name
        lat_col: Latitude column name

    Returns:
        GeoDataFrame with one point per profile that has coordinates
    """
    for col in (lon_col, lat_col):
        if col not in profiles.columns:
            raise ValueError(f"Required column '{col}' not found in profiles")

    has_coords = profiles[lon_col].notna() & profiles[lat_col].notna()
    n_missing = int((~has_coords).sum())
    if n_missing:
        logger.warning(f"Dropping {n_missing} profiles without coordinates")

    located = profiles[has_coords]
    gdf = gpd.GeoDataFrame(
        located,
        geometry=gpd.points_from_xy(
            located[lon_col].astype(float), located[lat_col].astype(float)
        ),
        crs=WOSIS_CRS,
    )

    # Ensure requested CRS
    if target_crs and gdf.crs != target_crs:
        gdf = gdf.to_crs(target_crs)

    return gdf
