"""Constants used throughout the project"""

# Data directory
DATA_DIR = "data"
WOSIS_SUBDIR = "wosis"

# WoSIS snapshot source
WOSIS_BASE_URL = "https://files.isric.org/public/wosis_snapshot"
DEFAULT_SNAPSHOT = "2019_September"

# Coordinate reference systems
WOSIS_CRS = "EPSG:4326"  # Profiles are published in geographic WGS84
MAP_CRS = "ESRI:54030"  # Robinson, used for world maps

# File processing
DOWNLOAD_CHUNK_SIZE = 8192  # Bytes for file downloads
DOWNLOAD_TIMEOUT = 60  # Seconds before a stalled connection fails
TSV_SEPARATOR = "\t"
TSV_NA_VALUES = ["", "NA"]

# Output formats
OUTPUT_FORMAT_CSV = "csv"
OUTPUT_FORMAT_PARQUET = "parquet"

# Default values for CLI (only place defaults are allowed)
DEFAULT_OUTPUT_FORMAT = OUTPUT_FORMAT_CSV
DEFAULT_TOP_COUNTRIES = 20
DEFAULT_AVERAGE_TOLERANCE = 0.01
