"""Join profile records to their layer records"""

import logging
from typing import Iterable, List, Optional

import pandas as pd

from src.downloader.wosis.models import LAYER_KEY_COLUMNS
from src.processing.wosis.reader import property_columns

logger = logging.getLogger(__name__)

JOIN_KEY = "profile_id"
DEFAULT_PROFILE_COLUMNS = [
    "profile_id",
    "dataset_id",
    "country_name",
    "latitude",
    "longitude",
    "geom_accuracy",
]


def join_profiles_layers(
    profiles: pd.DataFrame,
    layers: pd.DataFrame,
    profile_ids: Optional[Iterable] = None,
    profile_columns: Optional[List[str]] = None,
    keep_unmatched: bool = False,
) -> pd.DataFrame:
    """Attach every layer of each selected profile to that profile's columns

    The join is keyed on ``profile_id`` only, so a profile fans out into one
    row per layer.

    Args:
        profiles: Profile table
        layers: Layer table (chemical or physical)
        profile_ids: Profiles to keep (default: all)
        profile_columns: Profile columns to carry over (default: id, dataset,
            country and coordinates)
        keep_unmatched: Keep profiles without layers, with empty layer fields

    Returns:
        One row per (profile_id, profile_layer_id) of the selected profiles,
        plus one row per layerless profile when keep_unmatched is set
    """
    columns = list(profile_columns or DEFAULT_PROFILE_COLUMNS)
    if JOIN_KEY not in columns:
        columns.insert(0, JOIN_KEY)

    missing = [col for col in columns if col not in profiles.columns]
    if missing:
        raise ValueError(f"Profile columns not found: {missing}")
    if JOIN_KEY not in layers.columns:
        raise ValueError(f"Layer table has no '{JOIN_KEY}' column")

    selected = profiles[columns]
    if profile_ids is not None:
        selected = selected[selected[JOIN_KEY].isin(list(profile_ids))]

    # Profile columns win; layer tables only repeat the key
    layer_cols = [JOIN_KEY] + [
        col for col in layers.columns if col not in columns
    ]
    how = "left" if keep_unmatched else "inner"
    joined = selected.merge(layers[layer_cols], on=JOIN_KEY, how=how)

    unmatched = ~selected[JOIN_KEY].isin(layers[JOIN_KEY])
    n_unmatched = int(unmatched.sum())
    if n_unmatched:
        if keep_unmatched:
            logger.info(f"Kept {n_unmatched} profiles without layers (empty layer fields)")
        else:
            logger.warning(
                f"Dropped {n_unmatched} of {len(selected)} selected profiles that have no layers"
            )

    sort_cols = [col for col in (JOIN_KEY, "upper_depth", "profile_layer_id") if col in joined.columns]
    joined = joined.sort_values(sort_cols).reset_index(drop=True)

    logger.info(f"Joined {len(selected)} profiles into {len(joined)} layer rows")
    return joined


def select_property(joined: pd.DataFrame, code: str) -> pd.DataFrame:
    """Keep key, depth and one property's columns, dropping rows without an average"""
    prop_cols = [col for col in property_columns(code) if col in joined.columns]
    if not prop_cols:
        raise ValueError(f"Property '{code}' not found in joined table")

    key_cols = [col for col in joined.columns if col not in prop_cols and (
        col in DEFAULT_PROFILE_COLUMNS or col in LAYER_KEY_COLUMNS
    )]
    avg_col = f"{code.lower()}_value_avg"
    subset = joined[key_cols + prop_cols]
    if avg_col in subset.columns:
        subset = subset.dropna(subset=[avg_col])
    return subset.reset_index(drop=True)
