"""Summary tables built from the parsed and joined snapshot"""

import logging
from typing import Dict

import pandas as pd

from src.downloader.wosis.models import CLASSIFICATION_SYSTEMS, SCOPE_LAYER
from src.processing.wosis.reader import properties_in_table

logger = logging.getLogger(__name__)

# Standard depth intervals in cm: (key, upper, lower)
DEPTH_INTERVALS = [
    ("0_5cm", 0, 5),
    ("5_15cm", 5, 15),
    ("15_30cm", 15, 30),
    ("30_60cm", 30, 60),
    ("60_100cm", 60, 100),
    ("100_200cm", 100, 200),
]


class WosisFormatter:
    """Builds profile, attribute and depth summaries for output"""

    def __init__(self):
        logger.debug(f"{self.__class__.__name__} initialized")

    def profiles_per_country(self, profiles: pd.DataFrame) -> pd.DataFrame:
        """Count profiles per country, largest first"""
        if "country_name" not in profiles.columns:
            raise ValueError("Required column 'country_name' not found in profiles")

        counts = (
            profiles.groupby("country_name", dropna=False)
            .size()
            .reset_index(name="profiles")
            .sort_values(["profiles", "country_name"], ascending=[False, True])
            .reset_index(drop=True)
        )
        return counts

    def attribute_summary(
        self, attributes: pd.DataFrame, layer_tables: Dict[str, pd.DataFrame]
    ) -> pd.DataFrame:
        """Attach to each layer attribute the table it lives in and its filled layer count

        Args:
            attributes: Attribute descriptor table
            layer_tables: Layer tables keyed by name (e.g., 'chemical')
        """
        rows = []
        for table_name, layers in layer_tables.items():
            for code in properties_in_table(layers.columns):
                rows.append(
                    {
                        "code": code.upper(),
                        "table": table_name,
                        "layers_with_value": int(layers[f"{code}_value_avg"].notna().sum()),
                    }
                )
        located = pd.DataFrame(rows, columns=["code", "table", "layers_with_value"])

        layer_attributes = attributes[attributes["type"] == SCOPE_LAYER].copy()
        layer_attributes["code"] = layer_attributes["code"].str.upper()
        summary = layer_attributes.merge(located, on="code", how="left")
        summary["layers_with_value"] = summary["layers_with_value"].fillna(0).astype(int)
        return summary.sort_values("code").reset_index(drop=True)

    def classification_summary(self, profiles: pd.DataFrame) -> pd.DataFrame:
        """Count profiles per top-level soil group in each classification system"""
        frames = []
        for system, label_cols in CLASSIFICATION_SYSTEMS.items():
            group_col = label_cols[0]
            if group_col not in profiles.columns:
                logger.debug(f"No {system} classification in profiles")
                continue
            counts = (
                profiles[group_col]
                .dropna()
                .value_counts()
                .rename_axis("group")
                .reset_index(name="profiles")
            )
            if counts.empty:
                continue
            counts.insert(0, "system", system)
            frames.append(counts)

        if not frames:
            return pd.DataFrame(columns=["system", "group", "profiles"])
        summary = pd.concat(frames, ignore_index=True)
        return summary.sort_values(
            ["system", "profiles", "group"], ascending=[True, False, True]
        ).reset_index(drop=True)

    def assign_depth_interval(self, joined: pd.DataFrame) -> pd.Series:
        """Standard depth interval holding each layer's midpoint (None below 200 cm)"""
        midpoint = (joined["upper_depth"] + joined["lower_depth"]) / 2

        def _interval(depth):
            if pd.isna(depth):
                return None
            for key, upper, lower in DEPTH_INTERVALS:
                if upper <= depth < lower:
                    return key
            return None

        return midpoint.map(_interval)

    def depth_summary(self, joined: pd.DataFrame, code: str) -> pd.DataFrame:
        """Describe a property's layer averages per standard depth interval"""
        avg_col = f"{code.lower()}_value_avg"
        for col in (avg_col, "upper_depth", "lower_depth"):
            if col not in joined.columns:
                raise ValueError(f"Required column '{col}' not found in joined table")

        df = joined[["upper_depth", "lower_depth", avg_col]].dropna(subset=[avg_col]).copy()
        df["depth"] = self.assign_depth_interval(df)
        df = df.dropna(subset=["depth"])

        summary = (
            df.groupby("depth")[avg_col]
            .agg(["count", "mean", "std", "min", "max"])
            .reset_index()
        )

        # Sort in depth order, not alphabetically
        order = [key for key, _, _ in DEPTH_INTERVALS]
        summary["depth"] = pd.Categorical(summary["depth"], categories=order, ordered=True)
        summary = summary.sort_values("depth").reset_index(drop=True)
        summary["depth"] = summary["depth"].astype(str)
        summary.insert(0, "property", code.lower())

        logger.debug(f"Depth summary for {code}: {len(summary)} intervals")
        return summary
