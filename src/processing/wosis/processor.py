"""WoSIS processor - acquires the snapshot, joins profiles to layers and writes outputs"""

import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd
from tqdm import tqdm

from src.constants import MAP_CRS
from src.downloader.wosis.downloader import WosisDownloader
from src.downloader.wosis.models import WosisProperty, WosisTable
from src.processing.base.processor import BaseProcessor
from src.processing.wosis.cell_parser import check_value_averages, expand_value_column
from src.processing.wosis.config import WosisConfig
from src.processing.wosis.formatter import WosisFormatter
from src.processing.wosis.join import join_profiles_layers, select_property
from src.processing.wosis.plotting import plot_profile_map, plot_profiles_per_country
from src.processing.wosis.reader import read_snapshot_table, validate_attribute_scope
from src.utils.geography import profiles_to_geodataframe

logger = logging.getLogger(__name__)


class WosisProcessor(BaseProcessor):
    """Runs the acquire, parse, join and present steps for one snapshot"""

    def __init__(self, config: WosisConfig):
        super().__init__(config)
        self.config = config
        self.snapshot = config.snapshot
        self.downloader = WosisDownloader(str(config.data_dir), self.snapshot)
        self.formatter = WosisFormatter()

        logger.info(f"WosisProcessor initialized for snapshot {self.snapshot.release}")

    def load_tables(self, snapshot_dir: Path) -> Dict[WosisTable, pd.DataFrame]:
        """Read all four snapshot tables"""
        tables = {}
        for table in tqdm(list(WosisTable), desc="Reading tables", unit="table"):
            tables[table] = read_snapshot_table(snapshot_dir, self.snapshot, table)
        return tables

    def filter_countries(self, profiles: pd.DataFrame) -> pd.DataFrame:
        """Restrict profiles to the configured countries (names or ISO codes)"""
        if not self.config.countries:
            return profiles

        wanted = {c.upper() for c in self.config.countries}
        mask = profiles["country_name"].str.upper().isin(wanted)
        if "country_id" in profiles.columns:
            mask |= profiles["country_id"].str.upper().isin(wanted)

        selected = profiles[mask]
        if selected.empty:
            raise ValueError(f"No profiles found for countries: {self.config.countries}")

        logger.info(f"Selected {len(selected)} profiles in {sorted(wanted)}")
        return selected

    def process(self) -> List[Path]:
        """Process the snapshot into joined tables, summaries and figures"""
        snapshot_dir = self.downloader.acquire(force=self.config.force_download)
        intermediate_dir = self.get_intermediate_directory()
        output_format = self.config.output_format
        prefix = self.snapshot.file_prefix

        # Step 1: Parse the four tables
        tables = self.load_tables(snapshot_dir)
        profiles = tables[WosisTable.PROFILES]
        attributes = tables[WosisTable.ATTRIBUTES]
        layer_tables = {
            "chemical": tables[WosisTable.CHEMICAL],
            "physical": tables[WosisTable.PHYSICAL],
        }

        # Step 2: Check the attribute table agrees with the layer tables
        validate_attribute_scope(attributes, profiles, list(layer_tables.values()))

        # Step 3: Select profiles
        profiles = self.filter_countries(profiles)
        profile_ids = profiles["profile_id"]

        output_files = []

        # Step 4: Join each layer table and extract requested properties
        joined_tables = {}
        for name, layers in layer_tables.items():
            joined = join_profiles_layers(
                profiles,
                layers,
                profile_ids=profile_ids,
                keep_unmatched=self.config.keep_unmatched,
            )
            joined_tables[name] = joined
            output_files.append(
                self.save_output(
                    joined, f"{prefix}_{name}_joined.{output_format}", output_format, intermediate_dir
                )
            )

        for code in self.config.properties:
            prop = WosisProperty.from_code(code)
            joined = joined_tables[prop.table.key]
            output_files.extend(self._process_property(joined, code, prefix, intermediate_dir))

        # Step 5: Summaries
        counts = self.formatter.profiles_per_country(profiles)
        output_files.append(
            self.save_output(
                counts, f"{prefix}_profiles_per_country.{output_format}", output_format, intermediate_dir
            )
        )
        attribute_summary = self.formatter.attribute_summary(attributes, layer_tables)
        output_files.append(
            self.save_output(
                attribute_summary, f"{prefix}_attribute_summary.{output_format}", output_format, intermediate_dir
            )
        )
        classification = self.formatter.classification_summary(profiles)
        output_files.append(
            self.save_output(
                classification, f"{prefix}_classification_summary.{output_format}", output_format, intermediate_dir
            )
        )

        # Step 6: Figures
        if self.config.make_plots:
            figure_dir = self.config.get_figure_directory()
            gdf = profiles_to_geodataframe(profiles, target_crs=MAP_CRS)
            output_files.append(plot_profile_map(gdf, figure_dir / f"{prefix}_profiles_map.png"))
            output_files.append(
                plot_profiles_per_country(counts, figure_dir / f"{prefix}_profiles_per_country.png")
            )

        return output_files

    def _process_property(
        self, joined: pd.DataFrame, code: str, prefix: str, intermediate_dir: Path
    ) -> List[Path]:
        """Write the tidy table, raw measurements and depth summary of one property"""
        output_format = self.config.output_format
        logger.info(f"Processing property: {code}")

        tidy = select_property(joined, code)
        measurements = expand_value_column(tidy, code)
        depth_summary = self.formatter.depth_summary(tidy, code)

        # Stored averages are redundant with the raw values; report drift only
        check_value_averages(tidy, code)

        files = []
        for suffix, df in (
            ("layers", tidy),
            ("measurements", measurements),
            ("depth_summary", depth_summary),
        ):
            files.append(
                self.save_output(df, f"{prefix}_{code}_{suffix}.{output_format}", output_format, intermediate_dir)
            )
        logger.debug(f"Completed processing for {code}: {len(tidy)} layers")
        return files
