"""Base processor class with shared output handling"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

import pandas as pd

from src.processing.base.config import ProcessingConfig

logger = logging.getLogger(__name__)


class BaseProcessor(ABC):
    """Base class for pipelines that write tabular outputs"""

    def __init__(self, config: ProcessingConfig):
        """Initialize processor

        Args:
            config: Processing configuration (data directory, format, debug)
        """
        self.config = config
        self.data_dir = config.data_dir
        self.debug = config.debug

        # Setup logging
        self._setup_logging()

        logger.info(f"Initialized {self.__class__.__name__} in {self.data_dir}")

    def _setup_logging(self):
        """Setup logging configuration"""
        log_level = logging.DEBUG if self.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    def get_intermediate_directory(self) -> Path:
        return self.config.get_intermediate_directory()

    def process_with_validation(self) -> List[Path]:
        """Template method that validates config before processing"""
        self.config.validate()
        return self.process()

    @abstractmethod
    def process(self) -> List[Path]:
        """Process data - to be implemented by subclasses"""
        pass

    def save_output(
        self,
        df: pd.DataFrame,
        filename: str,
        output_format: str,
        intermediate_dir: Path,
    ) -> Path:
        """Save dataframe to appropriate output format and directory

        Args:
            df: DataFrame to save
            filename: Name of the output file (including extension)
            output_format: Output format ('csv' or 'parquet')
            intermediate_dir: Base intermediate directory

        Returns:
            Path to saved file
        """
        # Create output directory based on format
        if output_format == "csv":
            output_dir = intermediate_dir / "aggregated"
            output_dir.mkdir(parents=True, exist_ok=True)
            output_file = output_dir / filename
            df.to_csv(output_file, index=False)

            # Check for NaN values after saving CSV
            self._check_nan_values(df, filename)
        elif output_format == "parquet":
            intermediate_dir.mkdir(parents=True, exist_ok=True)
            output_file = intermediate_dir / filename
            df.to_parquet(output_file, index=False)
        else:
            raise ValueError(f"Unsupported output format: {output_format}")

        return output_file

    def _check_nan_values(self, df: pd.DataFrame, filename: str):
        """Log how sparse each column of an output is"""
        nan_counts = df.isnull().sum()
        total_nans = nan_counts.sum()

        if total_nans > 0:
            # Sparse property columns are normal in WoSIS, so this is informational
            cols_with_nans = nan_counts[nan_counts > 0]
            logger.info(
                f"{filename}: {total_nans} missing values across {len(cols_with_nans)} columns"
            )
            for col, count in cols_with_nans.items():
                pct_nan = (count / len(df)) * 100
                logger.debug(f"  - {col}: {count} NaN values ({pct_nan:.1f}%)")
        else:
            logger.info(f"Data quality check passed for {filename}: No NaN values found")
