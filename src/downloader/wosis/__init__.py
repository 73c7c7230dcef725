"""WoSIS snapshot downloader package"""

from .downloader import WosisDownloader
from .models import (
    WosisSnapshot,
    WosisTable,
    WosisProperty,
    PROPERTY_COLUMN_SUFFIXES,
)

__all__ = [
    "WosisDownloader",
    "WosisSnapshot",
    "WosisTable",
    "WosisProperty",
    "PROPERTY_COLUMN_SUFFIXES",
]
