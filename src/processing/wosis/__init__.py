"""WoSIS processing module for parsing, joining and summarising snapshot tables"""

from src.processing.wosis.config import WosisConfig
from src.processing.wosis.processor import WosisProcessor
from src.processing.wosis.formatter import WosisFormatter

__all__ = ["WosisConfig", "WosisProcessor", "WosisFormatter"]
