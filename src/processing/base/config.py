"""Base configuration class for processing pipelines"""

from pathlib import Path
from typing import Optional

from src.constants import (
    DATA_DIR,
    OUTPUT_FORMAT_CSV,
    OUTPUT_FORMAT_PARQUET,
    WOSIS_SUBDIR,
)


class ProcessingConfig:
    """Base configuration class with shared parameters"""

    def __init__(
        self,
        data_dir: Optional[Path],
        output_format: str,
        debug: bool,
    ):
        self.data_dir = Path(data_dir or DATA_DIR)
        self.output_format = output_format
        self.debug = debug

    def validate(self) -> None:
        """Validate base configuration parameters"""
        valid_formats = [OUTPUT_FORMAT_CSV, OUTPUT_FORMAT_PARQUET]
        if self.output_format not in valid_formats:
            raise ValueError(
                f"Invalid output_format: {self.output_format}. Must be one of {valid_formats}"
            )

    def get_raw_directory(self) -> Path:
        """Get the directory holding downloaded archives"""
        return self.data_dir / WOSIS_SUBDIR / "raw"

    def get_intermediate_directory(self) -> Path:
        """Get intermediate directory"""
        return self.data_dir / WOSIS_SUBDIR / "intermediate"

    def get_processed_subdirectory(self, subdir: str) -> Path:
        """Get a subdirectory within intermediate"""
        processed_dir = self.get_intermediate_directory() / subdir
        processed_dir.mkdir(parents=True, exist_ok=True)
        return processed_dir
