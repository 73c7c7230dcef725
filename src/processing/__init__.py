"""Processing module for turning WoSIS snapshot tables into analysis outputs

This module follows a clean inheritance hierarchy:
- Base classes in src/processing/base/ provide shared functionality
- WoSIS-specific classes in src/processing/wosis/ inherit from base classes
"""

# Import base classes
from src.processing.base.processor import BaseProcessor
from src.processing.base.config import ProcessingConfig
from src.processing.base.zip_extractor import ZipExtractor

__all__ = [
    "BaseProcessor",
    "ProcessingConfig",
    "ZipExtractor",
]
