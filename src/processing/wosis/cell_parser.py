"""Parser for the multi-valued measurement cells of the WoSIS layer tables

Raw measurements are published as ``{seq:value;seq:value...}`` where each
sequence number tags one repeated lab measurement, starting at 1.
"""

import logging
import math
import re
from typing import Any, List, Tuple

import numpy as np
import pandas as pd

from src.constants import DEFAULT_AVERAGE_TOLERANCE

logger = logging.getLogger(__name__)

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_PAIR = rf"\s*(\d+)\s*:\s*({_NUMBER})\s*"
PAIR_PATTERN = re.compile(_PAIR)
CELL_PATTERN = re.compile(rf"^\s*\{{{_PAIR}(?:[;,]{_PAIR})*\}}\s*$")


def parse_value_cell(cell: Any) -> List[Tuple[int, float]]:
    """Parse a ``{seq:value;...}`` cell into ordered (sequence, value) pairs

    Missing, empty or malformed cells give an empty list. Pairs keep their
    published order; gaps and repeated sequence numbers are kept as-is.

    Example:
        parse_value_cell("{1:23.5;2:24.1}") -> [(1, 23.5), (2, 24.1)]
    """
    if cell is None:
        return []
    if isinstance(cell, float) and math.isnan(cell):
        return []

    text = str(cell)
    if not CELL_PATTERN.match(text):
        if text.strip():
            logger.debug(f"Ignoring malformed value cell: {text!r}")
        return []

    inner = text.strip()[1:-1]
    return [
        (int(seq), float(value))
        for seq, value in PAIR_PATTERN.findall(inner)
    ]


def format_value_cell(pairs: List[Tuple[int, float]]) -> str:
    """Encode (sequence, value) pairs back into the ``{seq:value;...}`` form"""
    if not pairs:
        return ""
    # Plain Python numbers, numpy scalars would repr as np.float64(...)
    return "{" + ";".join(f"{int(seq)}:{float(value)!r}" for seq, value in pairs) + "}"


def value_columns(code: str) -> Tuple[str, str]:
    """Raw and average column names for a property code"""
    code = code.lower()
    return f"{code}_value", f"{code}_value_avg"


def expand_value_column(layers: pd.DataFrame, code: str) -> pd.DataFrame:
    """Explode a property's raw value column into one row per measurement

    Args:
        layers: Layer table holding ``<code>_value``
        code: Property code (e.g., 'clay')

    Returns:
        Long DataFrame with profile_id, profile_layer_id, sequence and value
    """
    value_col, _ = value_columns(code)
    if value_col not in layers.columns:
        raise ValueError(f"Column '{value_col}' not found in layer table")

    records = []
    for profile_id, layer_id, cell in zip(
        layers["profile_id"], layers["profile_layer_id"], layers[value_col]
    ):
        for seq, value in parse_value_cell(cell):
            records.append(
                {
                    "profile_id": profile_id,
                    "profile_layer_id": layer_id,
                    "sequence": seq,
                    "value": value,
                }
            )

    expanded = pd.DataFrame(
        records, columns=["profile_id", "profile_layer_id", "sequence", "value"]
    )
    expanded["property"] = code.lower()
    logger.debug(f"Expanded {len(layers)} layers into {len(expanded)} {code} measurements")
    return expanded


def check_value_averages(
    layers: pd.DataFrame, code: str, tolerance: float = DEFAULT_AVERAGE_TOLERANCE
) -> pd.DataFrame:
    """Find layers whose stored average disagrees with their raw measurements

    Args:
        layers: Layer table holding ``<code>_value`` and ``<code>_value_avg``
        code: Property code
        tolerance: Absolute difference allowed between the two averages

    Returns:
        Rows of ``layers`` with an extra ``recomputed_avg`` column, limited to
        mismatches (cells that do not parse are not reported)
    """
    value_col, avg_col = value_columns(code)
    for col in (value_col, avg_col):
        if col not in layers.columns:
            raise ValueError(f"Column '{col}' not found in layer table")

    def _mean(cell):
        pairs = parse_value_cell(cell)
        if not pairs:
            return float("nan")
        return float(np.mean([value for _, value in pairs]))

    recomputed = layers[value_col].map(_mean)
    stored = pd.to_numeric(layers[avg_col], errors="coerce")
    mismatch = recomputed.notna() & ((recomputed - stored).abs() > tolerance)
    mismatch |= recomputed.notna() & stored.isna()

    result = layers.loc[mismatch].copy()
    result["recomputed_avg"] = recomputed[mismatch]

    if len(result) > 0:
        logger.warning(
            f"{len(result)} layers have a {avg_col} that differs from their raw values"
        )
    return result
