"""Base processing classes shared by the snapshot pipelines"""

from src.processing.base.config import ProcessingConfig
from src.processing.base.processor import BaseProcessor
from src.processing.base.zip_extractor import ZipExtractor

__all__ = [
    "ProcessingConfig",
    "BaseProcessor",
    "ZipExtractor",
]
