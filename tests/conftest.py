"""Shared test fixtures: a miniature WoSIS snapshot on disk."""

import zipfile
from pathlib import Path

import pandas as pd
import pytest

from src.downloader.wosis.models import (
    ATTRIBUTE_COLUMNS,
    LAYER_KEY_COLUMNS,
    PROFILE_COLUMNS,
    WosisSnapshot,
    WosisTable,
)
from src.processing.wosis.reader import property_columns


def write_tsv(path: Path, columns, rows):
    """Write rows (dicts, missing keys left empty) as a TSV with header"""
    df = pd.DataFrame(rows, columns=list(columns))
    df.to_csv(path, sep="\t", index=False)
    return path


def property_block(code, cell, avg, method="lab method", date="2019-05-21"):
    values = [cell, avg, method, date, "DS1", f"{code}-profile", "CC-BY"]
    return dict(zip(property_columns(code), values))


PROFILE_ROWS = [
    {
        "profile_id": 101,
        "dataset_id": "DS1",
        "country_id": "BR",
        "country_name": "Brazil",
        "geom_accuracy": 0.0001,
        "latitude": -15.5,
        "longitude": -47.8,
        "cwrb_version": "2006",
        "cwrb_reference_soil_group": "Ferralsols",
    },
    {
        "profile_id": 102,
        "dataset_id": "DS1",
        "country_id": "BR",
        "country_name": "Brazil",
        "geom_accuracy": 0.01,
        "latitude": -10.2,
        "longitude": -50.1,
    },
    {
        "profile_id": 103,
        "dataset_id": "DS2",
        "country_id": "KE",
        "country_name": "Kenya",
        "geom_accuracy": 0.001,
        "latitude": -1.3,
        "longitude": 36.8,
        "cstx_version": "1999",
        "cstx_order_name": "Oxisols",
    },
]

ATTRIBUTE_ROWS = [
    {"code": "CLAY", "attribute": "Clay total", "description": "Clay", "type": "Layer",
     "unit": "g/100g", "accuracy": 5.0, "profiles": 2, "layers": 3},
    {"code": "SAND", "attribute": "Sand total", "description": "Sand", "type": "Layer",
     "unit": "g/100g", "accuracy": 5.0, "profiles": 2, "layers": 3},
    {"code": "PHAQ", "attribute": "pH H2O", "description": "pH in water", "type": "Layer",
     "unit": "pH", "accuracy": 0.3, "profiles": 2, "layers": 3},
    {"code": "ORGC", "attribute": "Organic carbon", "description": "Organic C", "type": "Layer",
     "unit": "g/kg", "accuracy": 2.0, "profiles": 2, "layers": 2},
    {"code": "CWRB", "attribute": "WRB classification", "description": "WRB", "type": "Site",
     "unit": "", "accuracy": None, "profiles": 1, "layers": 0},
]


def layer_row(profile_id, layer_id, upper, lower, **blocks):
    row = {
        "profile_id": profile_id,
        "profile_layer_id": layer_id,
        "upper_depth": upper,
        "lower_depth": lower,
        "layer_name": f"H{layer_id}",
        "litter": "no",
    }
    for block in blocks.values():
        row.update(block)
    return row


PHYSICAL_ROWS = [
    layer_row(101, 1, 0, 10,
              clay=property_block("clay", "{1:23.5;2:24.1}", 23.8),
              sand=property_block("sand", "{1:40}", 40.0)),
    layer_row(101, 2, 10, 30,
              clay=property_block("clay", "{1:30}", 30.0),
              sand=property_block("sand", "", None, method="", date="")),
    layer_row(103, 3, 0, 20,
              clay=property_block("clay", "{1:55;1:56}", 55.5),
              sand=property_block("sand", "{1:20}", 20.0)),
]

CHEMICAL_ROWS = [
    layer_row(101, 1, 0, 10,
              phaq=property_block("phaq", "{1:5.2}", 5.2),
              orgc=property_block("orgc", "{1:12.0;2:14.0}", 13.0)),
    layer_row(101, 2, 10, 30,
              phaq=property_block("phaq", "{1:5.5}", 5.5),
              orgc=property_block("orgc", "", None, method="", date="")),
    layer_row(103, 3, 0, 20,
              phaq=property_block("phaq", "{1:6.1}", 6.1),
              orgc=property_block("orgc", "{1:20.0}", 20.0)),
]


def layer_columns(codes):
    columns = list(LAYER_KEY_COLUMNS)
    for code in codes:
        columns.extend(property_columns(code))
    return columns


def write_snapshot_tables(snapshot_dir: Path, snapshot: WosisSnapshot) -> Path:
    snapshot_dir.mkdir(parents=True, exist_ok=True)
    write_tsv(snapshot_dir / snapshot.table_filename(WosisTable.PROFILES), PROFILE_COLUMNS, PROFILE_ROWS)
    write_tsv(snapshot_dir / snapshot.table_filename(WosisTable.ATTRIBUTES), ATTRIBUTE_COLUMNS, ATTRIBUTE_ROWS)
    write_tsv(
        snapshot_dir / snapshot.table_filename(WosisTable.PHYSICAL),
        layer_columns(["clay", "sand"]),
        PHYSICAL_ROWS,
    )
    write_tsv(
        snapshot_dir / snapshot.table_filename(WosisTable.CHEMICAL),
        layer_columns(["phaq", "orgc"]),
        CHEMICAL_ROWS,
    )
    return snapshot_dir


@pytest.fixture
def snapshot():
    return WosisSnapshot("2019_September")


@pytest.fixture
def snapshot_dir(tmp_path, snapshot):
    """Snapshot tables written into a standalone directory"""
    return write_snapshot_tables(tmp_path / snapshot.directory_name, snapshot)


@pytest.fixture
def data_dir(tmp_path, snapshot):
    """Data directory with an already extracted snapshot"""
    data_dir = tmp_path / "data"
    write_snapshot_tables(data_dir / "wosis" / "raw" / snapshot.directory_name, snapshot)
    return data_dir


@pytest.fixture
def snapshot_archive(tmp_path, snapshot):
    """Bytes of a snapshot zip with a top-level release directory"""
    source = write_snapshot_tables(tmp_path / "source" / snapshot.directory_name, snapshot)
    archive = tmp_path / "archive.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        for path in sorted(source.iterdir()):
            zf.write(path, f"{snapshot.directory_name}/{path.name}")
    return archive.read_bytes()
