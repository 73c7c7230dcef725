"""Tests for the multi-valued measurement cell parser."""

import math

import numpy as np
import pandas as pd
import pytest

from src.processing.wosis.cell_parser import (
    check_value_averages,
    expand_value_column,
    format_value_cell,
    parse_value_cell,
)


class TestParseValueCell:
    def test_two_measurements(self):
        assert parse_value_cell("{1:23.5;2:24.1}") == [(1, 23.5), (2, 24.1)]

    def test_single_measurement(self):
        assert parse_value_cell("{1:7}") == [(1, 7.0)]

    def test_comma_separator_and_whitespace(self):
        assert parse_value_cell(" { 1 : 5.2 , 2 : 5.4 } ") == [(1, 5.2), (2, 5.4)]

    def test_negative_and_exponent_values(self):
        assert parse_value_cell("{1:-0.5;2:1e-3}") == [(1, -0.5), (2, 0.001)]

    def test_non_contiguous_sequence_kept(self):
        assert parse_value_cell("{1:1.0;3:3.0}") == [(1, 1.0), (3, 3.0)]

    def test_duplicate_sequence_not_deduplicated(self):
        assert parse_value_cell("{1:55;1:56}") == [(1, 55.0), (1, 56.0)]

    def test_order_preserved(self):
        assert parse_value_cell("{2:2.0;1:1.0}") == [(2, 2.0), (1, 1.0)]

    @pytest.mark.parametrize(
        "cell",
        [None, float("nan"), "", "   ", "{}", "23.5", "{1:abc}", "{1:2", "1:2}", "{a:1}", "{1:2;;2:3}"],
    )
    def test_empty_or_malformed_gives_empty_list(self, cell):
        assert parse_value_cell(cell) == []


class TestFormatValueCell:
    def test_encodes_pairs(self):
        assert format_value_cell([(1, 23.5), (2, 24.1)]) == "{1:23.5;2:24.1}"

    def test_numpy_pairs_round_trip(self):
        pairs = list(zip(np.array([1, 2]), np.array([23.5, 24.1])))
        cell = format_value_cell(pairs)
        assert cell == "{1:23.5;2:24.1}"
        assert parse_value_cell(cell) == [(1, 23.5), (2, 24.1)]

    def test_pairs_from_dataframe(self, layers):
        expanded = expand_value_column(layers, "clay")
        first = expanded[expanded["profile_layer_id"] == 10]
        cell = format_value_cell(list(zip(first["sequence"], first["value"])))
        assert parse_value_cell(cell) == [(1, 20.0), (2, 22.0)]

    def test_empty_pairs(self):
        assert format_value_cell([]) == ""

    @pytest.mark.parametrize(
        "cell",
        ["{1:23.5;2:24.1}", "{1:0.1}", "{1:55;1:56}", "{4:-1.25;2:3.333}"],
    )
    def test_round_trip(self, cell):
        pairs = parse_value_cell(cell)
        assert parse_value_cell(format_value_cell(pairs)) == pairs


@pytest.fixture
def layers():
    return pd.DataFrame(
        {
            "profile_id": [1, 1, 2],
            "profile_layer_id": [10, 11, 20],
            "clay_value": ["{1:20;2:22}", None, "{1:30}"],
            "clay_value_avg": [21.0, None, 35.0],
        }
    )


class TestExpandValueColumn:
    def test_one_row_per_measurement(self, layers):
        expanded = expand_value_column(layers, "CLAY")
        assert list(expanded.columns) == [
            "profile_id",
            "profile_layer_id",
            "sequence",
            "value",
            "property",
        ]
        assert len(expanded) == 3
        assert expanded["sequence"].tolist() == [1, 2, 1]
        assert expanded["value"].tolist() == [20.0, 22.0, 30.0]
        assert (expanded["property"] == "clay").all()

    def test_missing_column_raises(self, layers):
        with pytest.raises(ValueError, match="sand_value"):
            expand_value_column(layers, "sand")

    def test_all_empty_gives_empty_frame(self):
        layers = pd.DataFrame(
            {"profile_id": [1], "profile_layer_id": [1], "clay_value": [""]}
        )
        expanded = expand_value_column(layers, "clay")
        assert expanded.empty
        assert "value" in expanded.columns


class TestCheckValueAverages:
    def test_reports_only_mismatches(self, layers):
        mismatches = check_value_averages(layers, "clay")
        assert mismatches["profile_layer_id"].tolist() == [20]
        assert math.isclose(mismatches["recomputed_avg"].iloc[0], 30.0)

    def test_consistent_table(self, layers):
        layers.loc[2, "clay_value_avg"] = 30.0
        assert check_value_averages(layers, "clay").empty
