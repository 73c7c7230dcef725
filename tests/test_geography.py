"""Tests for profile point conversion and bounding boxes."""

import logging

import numpy as np
import pandas as pd
import pytest

from src.utils.geography import GeoBounds, profiles_to_geodataframe


@pytest.fixture
def profiles():
    return pd.DataFrame(
        {
            "profile_id": [1, 2, 3, 4],
            "longitude": [-47.8, -50.1, 36.8, np.nan],
            "latitude": [-15.5, -10.2, -1.3, 5.0],
        }
    )


class TestProfilesToGeoDataFrame:
    def test_points_in_wgs84(self, profiles):
        gdf = profiles_to_geodataframe(profiles)
        assert gdf.crs.to_epsg() == 4326
        assert gdf.geometry.iloc[0].x == pytest.approx(-47.8)
        assert gdf.geometry.iloc[0].y == pytest.approx(-15.5)

    def test_missing_coordinates_dropped_with_warning(self, profiles, caplog):
        with caplog.at_level(logging.WARNING):
            gdf = profiles_to_geodataframe(profiles)
        assert gdf["profile_id"].tolist() == [1, 2, 3]
        assert "Dropping 1 profiles without coordinates" in caplog.text

    def test_reprojection(self, profiles):
        gdf = profiles_to_geodataframe(profiles, target_crs="ESRI:54030")
        assert gdf.crs != "EPSG:4326"
        # Robinson eastings are metres, far outside degree range
        assert abs(gdf.geometry.iloc[2].x) > 1000

    def test_missing_column(self, profiles):
        with pytest.raises(ValueError, match="latitude"):
            profiles_to_geodataframe(profiles.drop(columns=["latitude"]))


class TestGeoBounds:
    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            GeoBounds(min_lon=10, max_lon=0, min_lat=0, max_lat=10)

    def test_filter_points_edges_included(self, profiles):
        gdf = profiles_to_geodataframe(profiles)
        south_america = GeoBounds(min_lon=-50.1, max_lon=-30.0, min_lat=-20.0, max_lat=0.0)
        assert south_america.filter_points(gdf)["profile_id"].tolist() == [1, 2]

    def test_filter_reprojected_points(self, profiles):
        gdf = profiles_to_geodataframe(profiles, target_crs="ESRI:54030")
        africa = GeoBounds(min_lon=-20.0, max_lon=50.0, min_lat=-35.0, max_lat=35.0)
        kept = africa.filter_points(gdf)
        assert kept["profile_id"].tolist() == [3]
        assert kept.crs == gdf.crs
