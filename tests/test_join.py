"""Tests for joining profiles to layers."""

import logging

import pandas as pd
import pytest

from src.downloader.wosis.models import WosisTable
from src.processing.wosis.join import join_profiles_layers, select_property
from src.processing.wosis.reader import read_snapshot_table


@pytest.fixture
def profiles():
    return pd.DataFrame(
        {
            "profile_id": ["P1", "P2"],
            "dataset_id": ["D", "D"],
            "country_name": ["Brazil", "Brazil"],
            "latitude": [-15.0, -10.0],
            "longitude": [-47.0, -50.0],
            "geom_accuracy": [0.01, 0.01],
        }
    )


@pytest.fixture
def layers():
    return pd.DataFrame(
        {
            "profile_id": ["P1", "P1"],
            "profile_layer_id": [2, 1],
            "upper_depth": [10.0, 0.0],
            "lower_depth": [30.0, 10.0],
            "clay_value_avg": [30.0, 20.0],
        }
    )


class TestJoinProfilesLayers:
    def test_layerless_profile_dropped(self, profiles, layers):
        joined = join_profiles_layers(profiles, layers, profile_ids={"P1", "P2"})
        assert len(joined) == 2
        assert (joined["profile_id"] == "P1").all()

    def test_drop_is_logged(self, profiles, layers, caplog):
        with caplog.at_level(logging.WARNING):
            join_profiles_layers(profiles, layers)
        assert "Dropped 1 of 2 selected profiles" in caplog.text

    def test_keep_unmatched(self, profiles, layers):
        joined = join_profiles_layers(profiles, layers, keep_unmatched=True)
        assert len(joined) == 3
        p2 = joined[joined["profile_id"] == "P2"]
        assert len(p2) == 1
        assert pd.isna(p2["profile_layer_id"].iloc[0])
        assert pd.isna(p2["clay_value_avg"].iloc[0])

    def test_sorted_by_depth(self, profiles, layers):
        joined = join_profiles_layers(profiles, layers)
        assert joined["profile_layer_id"].tolist() == [1, 2]

    def test_profile_columns_carried(self, profiles, layers):
        joined = join_profiles_layers(profiles, layers, profile_columns=["country_name"])
        assert list(joined.columns[:2]) == ["profile_id", "country_name"]
        assert "latitude" not in joined.columns

    def test_profile_id_selection(self, profiles, layers):
        joined = join_profiles_layers(profiles, layers, profile_ids=["P2"])
        assert joined.empty

    def test_unknown_profile_column(self, profiles, layers):
        with pytest.raises(ValueError, match="elevation"):
            join_profiles_layers(profiles, layers, profile_columns=["elevation"])

    def test_one_row_per_layer_key(self, snapshot_dir, snapshot):
        profiles = read_snapshot_table(snapshot_dir, snapshot, WosisTable.PROFILES)
        layers = read_snapshot_table(snapshot_dir, snapshot, WosisTable.CHEMICAL)
        joined = join_profiles_layers(profiles, layers)

        expected = set(zip(layers["profile_id"], layers["profile_layer_id"]))
        actual = list(zip(joined["profile_id"], joined["profile_layer_id"]))
        assert len(actual) == len(expected)
        assert set(actual) == expected
        assert 102 not in set(joined["profile_id"])


class TestSelectProperty:
    def test_keeps_key_depth_and_property(self, snapshot_dir, snapshot):
        profiles = read_snapshot_table(snapshot_dir, snapshot, WosisTable.PROFILES)
        layers = read_snapshot_table(snapshot_dir, snapshot, WosisTable.CHEMICAL)
        joined = join_profiles_layers(profiles, layers)

        orgc = select_property(joined, "ORGC")
        assert len(orgc) == 2
        assert "phaq_value" not in orgc.columns
        for col in ("profile_id", "profile_layer_id", "upper_depth", "orgc_value", "orgc_licence"):
            assert col in orgc.columns

    def test_unknown_property(self, profiles, layers):
        joined = join_profiles_layers(profiles, layers)
        with pytest.raises(ValueError, match="sand"):
            select_property(joined, "sand")
