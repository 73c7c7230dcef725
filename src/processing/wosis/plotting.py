"""Maps and charts of the snapshot profiles"""

import logging
from pathlib import Path

import geopandas as gpd
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd

from src.constants import DEFAULT_TOP_COUNTRIES

logger = logging.getLogger(__name__)

plt.rcParams["figure.dpi"] = 100
plt.rcParams["savefig.dpi"] = 150


def plot_profile_map(
    gdf: gpd.GeoDataFrame, output_path: Path, title: str = "WoSIS soil profiles"
) -> Path:
    """Scatter the profile locations and save the figure

    Args:
        gdf: Profile points (any CRS)
        output_path: Image file to write (format from suffix)
        title: Figure title

    Returns:
        Path to the saved figure
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(14, 8))
    gdf.plot(ax=ax, markersize=1, color="saddlebrown", alpha=0.6)
    ax.set_title(f"{title} (n={len(gdf)})", fontsize=14, fontweight="bold")
    ax.set_xlabel(f"x ({gdf.crs.name if gdf.crs else 'unknown CRS'})")
    ax.set_ylabel("y")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"Saved profile map to {output_path}")
    return output_path


def plot_profiles_per_country(
    counts: pd.DataFrame, output_path: Path, top_n: int = DEFAULT_TOP_COUNTRIES
) -> Path:
    """Horizontal bar chart of the countries with the most profiles"""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    top = counts.head(top_n).iloc[::-1]

    fig, ax = plt.subplots(figsize=(10, max(4, 0.35 * len(top))))
    ax.barh(top["country_name"].astype(str), top["profiles"], color="peru")
    ax.set_xlabel("Number of profiles")
    ax.set_title(f"Profiles per country (top {len(top)})", fontsize=14, fontweight="bold")

    plt.tight_layout()
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"Saved country chart to {output_path}")
    return output_path
