"""Typed reader for the WoSIS snapshot TSV tables

Column types are declared with one code per column, following the readr
convention:

    i  integer (nullable)
    d  double
    c  character
    D  date
    l  logical
    _  skip (``-`` is accepted too)
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.constants import TSV_NA_VALUES, TSV_SEPARATOR
from src.downloader.wosis.models import (
    ATTRIBUTE_COLUMNS,
    LAYER_KEY_COLUMNS,
    PROFILE_COLUMNS,
    PROPERTY_COLUMN_SUFFIXES,
    SCOPE_LAYER,
    WosisSnapshot,
    WosisTable,
)

logger = logging.getLogger(__name__)

SKIP_CODES = {"_", "-"}
VALID_TYPE_CODES = {"i", "d", "c", "D", "l"} | SKIP_CODES

TRUE_VALUES = {"true", "t", "yes", "1"}
FALSE_VALUES = {"false", "f", "no", "0"}


class SchemaMismatchError(ValueError):
    """A table's content does not match its declared column types"""


def property_columns(code: str) -> List[str]:
    """The seven published column names of a property code (CLAY -> clay_*)"""
    code = code.lower()
    return [f"{code}_{suffix}" for suffix, _ in PROPERTY_COLUMN_SUFFIXES]


def properties_in_table(columns: Iterable[str]) -> List[str]:
    """Property codes present in a layer table header, in column order"""
    codes = []
    for col in columns:
        if col.endswith("_value_avg"):
            codes.append(col[: -len("_value_avg")])
    return codes


def infer_column_types(table: WosisTable, columns: List[str]) -> str:
    """Derive the type string for a known table from its header

    Columns that are not part of the known schema are read as character.
    """
    if table == WosisTable.PROFILES:
        known = PROFILE_COLUMNS
    elif table == WosisTable.ATTRIBUTES:
        known = ATTRIBUTE_COLUMNS
    else:
        known = dict(LAYER_KEY_COLUMNS)
        for code in properties_in_table(columns):
            for suffix, type_code in PROPERTY_COLUMN_SUFFIXES:
                known[f"{code}_{suffix}"] = type_code

    return "".join(known.get(col, "c") for col in columns)


def _convert_column(series: pd.Series, type_code: str, column: str) -> pd.Series:
    """Convert a text column to its declared type, raising on conflicts"""
    if type_code == "c":
        return series

    present = series.dropna()

    if type_code in ("i", "d"):
        try:
            numeric = pd.to_numeric(series, errors="raise")
        except (ValueError, TypeError) as e:
            raise SchemaMismatchError(
                f"Column '{column}' declared as '{type_code}' holds non-numeric values: {e}"
            ) from e
        if type_code == "d":
            return numeric.astype("float64")
        non_integral = numeric.dropna() % 1 != 0
        if non_integral.any():
            sample = numeric.dropna()[non_integral].iloc[0]
            raise SchemaMismatchError(
                f"Column '{column}' declared as 'i' holds non-integer value {sample}"
            )
        return numeric.astype("Int64")

    if type_code == "D":
        try:
            return pd.to_datetime(series, errors="raise", format="ISO8601")
        except (ValueError, TypeError) as e:
            raise SchemaMismatchError(
                f"Column '{column}' declared as 'D' holds values that are not dates: {e}"
            ) from e

    if type_code == "l":
        lowered = present.str.strip().str.lower()
        unknown = ~lowered.isin(TRUE_VALUES | FALSE_VALUES)
        if unknown.any():
            raise SchemaMismatchError(
                f"Column '{column}' declared as 'l' holds non-logical value {present[unknown].iloc[0]!r}"
            )
        result = pd.Series(pd.NA, index=series.index, dtype="boolean")
        result.loc[lowered.index] = lowered.isin(TRUE_VALUES)
        return result

    raise SchemaMismatchError(f"Unknown type code '{type_code}' for column '{column}'")


def read_wosis_table(path: Path, col_types: str) -> pd.DataFrame:
    """Read a tab-separated table with one declared type code per column

    Args:
        path: TSV file with a header row
        col_types: Type string, one code per header column (e.g., 'iccdd')

    Returns:
        DataFrame with converted columns; skipped columns are dropped
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table not found: {path}")

    header = pd.read_csv(path, sep=TSV_SEPARATOR, nrows=0).columns.tolist()
    if len(col_types) != len(header):
        raise SchemaMismatchError(
            f"{path.name} has {len(header)} columns but {len(col_types)} types were declared"
        )

    unknown = sorted(set(col_types) - VALID_TYPE_CODES)
    if unknown:
        raise SchemaMismatchError(
            f"Unknown type codes {unknown}. Valid codes: {sorted(VALID_TYPE_CODES)}"
        )

    types: Dict[str, str] = dict(zip(header, col_types))
    keep = [col for col in header if types[col] not in SKIP_CODES]

    logger.debug(f"Reading {path.name}: {len(keep)} of {len(header)} columns")
    raw = pd.read_csv(
        path,
        sep=TSV_SEPARATOR,
        usecols=keep,
        dtype=str,
        na_values=TSV_NA_VALUES,
        keep_default_na=False,
    )

    df = pd.DataFrame(
        {col: _convert_column(raw[col], types[col], col) for col in keep},
        index=raw.index,
    )
    logger.info(f"Loaded {len(df)} rows from {path.name}")
    return df


def read_snapshot_table(
    snapshot_dir: Path,
    snapshot: WosisSnapshot,
    table: WosisTable,
    col_types: Optional[str] = None,
) -> pd.DataFrame:
    """Read one of the snapshot tables, inferring column types unless given"""
    path = Path(snapshot_dir) / snapshot.table_filename(table)
    if not path.exists():
        raise FileNotFoundError(f"{table.code} table not found: {path}")

    if col_types is None:
        header = pd.read_csv(path, sep=TSV_SEPARATOR, nrows=0).columns.tolist()
        col_types = infer_column_types(table, header)

    return read_wosis_table(path, col_types)


def validate_attribute_scope(
    attributes: pd.DataFrame,
    profiles: pd.DataFrame,
    layer_tables: List[pd.DataFrame],
) -> None:
    """Check that layer-scoped attributes live in layer tables only

    Raises:
        SchemaMismatchError: A layer attribute appears in the profile table,
            or in none of the layer tables
    """
    layer_codes = attributes.loc[attributes["type"] == SCOPE_LAYER, "code"]
    layer_columns = set()
    for layers in layer_tables:
        layer_columns.update(layers.columns)

    problems = []
    for code in layer_codes:
        columns = property_columns(code)
        in_profiles = [col for col in columns if col in profiles.columns]
        if in_profiles:
            problems.append(f"{code} found in profile table ({in_profiles[0]})")
        if columns[0] not in layer_columns:
            problems.append(f"{code} missing from layer tables")

    if problems:
        raise SchemaMismatchError(
            "Attribute scope violations: " + "; ".join(problems)
        )
    logger.debug(f"Validated scope of {len(layer_codes)} layer attributes")
