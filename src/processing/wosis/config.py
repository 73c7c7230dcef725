"""WoSIS-specific configuration"""

from pathlib import Path
from typing import List, Optional

from src.downloader.wosis.models import WosisProperty, WosisSnapshot, parse_snapshot
from src.processing.base.config import ProcessingConfig


class WosisConfig(ProcessingConfig):
    """Configuration for WoSIS snapshot processing"""

    def __init__(
        self,
        snapshot: Optional[str],
        countries: Optional[List[str]],
        properties: List[str],
        keep_unmatched: bool,
        make_plots: bool,
        data_dir: Optional[Path],
        output_format: str,
        debug: bool,
        force_download: bool = False,
    ):
        super().__init__(data_dir, output_format, debug)
        self.snapshot_release = snapshot
        self.countries = countries or []
        self.properties = [p.lower() for p in properties]
        self.keep_unmatched = keep_unmatched
        self.make_plots = make_plots
        self.force_download = force_download

    @property
    def snapshot(self) -> WosisSnapshot:
        return parse_snapshot(self.snapshot_release)

    def validate(self) -> None:
        """Validate WoSIS-specific configuration"""
        super().validate()

        # Raises on malformed release names
        self.snapshot

        valid_properties = [prop.code for prop in WosisProperty]
        invalid_props = [p for p in self.properties if p not in valid_properties]
        if invalid_props:
            raise ValueError(
                f"Invalid properties: {invalid_props}. Valid options: {valid_properties}"
            )

    def get_snapshot_directory(self) -> Path:
        """Get the extracted snapshot directory"""
        return self.get_raw_directory() / self.snapshot.directory_name

    def get_figure_directory(self) -> Path:
        """Get the directory for rendered figures"""
        return self.get_processed_subdirectory("figures")
