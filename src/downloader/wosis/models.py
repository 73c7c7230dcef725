"""WoSIS snapshot models, table definitions and measured property codes"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from src.constants import DEFAULT_SNAPSHOT, WOSIS_BASE_URL

SNAPSHOT_PATTERN = re.compile(r"^(\d{4})_([A-Z][a-z]+)$")


@dataclass(frozen=True)
class WosisSnapshot:
    """A dated WoSIS release such as ``2019_September``"""

    release: str = DEFAULT_SNAPSHOT

    def __post_init__(self):
        match = SNAPSHOT_PATTERN.match(self.release)
        if not match:
            raise ValueError(
                f"Invalid snapshot '{self.release}'. Expected <year>_<Month>, e.g. {DEFAULT_SNAPSHOT}"
            )
        # Will raise if the month name is not a real month
        datetime.strptime(match.group(2), "%B")

    @property
    def year(self) -> int:
        return int(self.release.split("_")[0])

    @property
    def month(self) -> int:
        return datetime.strptime(self.release.split("_")[1], "%B").month

    @property
    def archive_name(self) -> str:
        return f"WoSIS_{self.release}.zip"

    @property
    def directory_name(self) -> str:
        return f"WoSIS_{self.release}"

    @property
    def url(self) -> str:
        return f"{WOSIS_BASE_URL}/{self.archive_name}"

    @property
    def file_prefix(self) -> str:
        """File prefix used inside the archive (e.g., wosis_201909)"""
        return f"wosis_{self.year}{self.month:02d}"

    @property
    def geopackage_name(self) -> str:
        return f"{self.file_prefix}.gpkg"

    def table_filename(self, table: "WosisTable") -> str:
        return f"{self.file_prefix}_{table.code}.tsv"


class WosisTable(Enum):
    """Tab-separated tables shipped in a snapshot"""

    PROFILES = ("profiles", "Soil profile sites with location and classification")
    ATTRIBUTES = ("attributes", "Descriptors of the measured soil properties")
    CHEMICAL = ("layers_chemical", "Chemical layer measurements")
    PHYSICAL = ("layers_physical", "Physical layer measurements")

    def __init__(self, code: str, description: str):
        self.code = code
        self.description = description

    @property
    def key(self):
        return self.name.lower()

    @property
    def is_layer_table(self) -> bool:
        return self in (WosisTable.CHEMICAL, WosisTable.PHYSICAL)


class WosisProperty(Enum):
    """Measured soil properties and the layer table that carries them"""

    # Physical: bulk density
    BDFI33 = ("bdfi33", "Bulk density fine earth, 33 kPa", WosisTable.PHYSICAL)
    BDFIAD = ("bdfiad", "Bulk density fine earth, air dry", WosisTable.PHYSICAL)
    BDFIFM = ("bdfifm", "Bulk density fine earth, field moist", WosisTable.PHYSICAL)
    BDFIOD = ("bdfiod", "Bulk density fine earth, oven dry", WosisTable.PHYSICAL)
    BDWS33 = ("bdws33", "Bulk density whole soil, 33 kPa", WosisTable.PHYSICAL)
    BDWSAD = ("bdwsad", "Bulk density whole soil, air dry", WosisTable.PHYSICAL)
    BDWSFM = ("bdwsfm", "Bulk density whole soil, field moist", WosisTable.PHYSICAL)
    BDWSOD = ("bdwsod", "Bulk density whole soil, oven dry", WosisTable.PHYSICAL)
    # Physical: coarse fragments and particle size
    CFGR = ("cfgr", "Coarse fragments gravimetric", WosisTable.PHYSICAL)
    CFVO = ("cfvo", "Coarse fragments volumetric", WosisTable.PHYSICAL)
    CLAY = ("clay", "Clay total", WosisTable.PHYSICAL)
    SAND = ("sand", "Sand total", WosisTable.PHYSICAL)
    SILT = ("silt", "Silt total", WosisTable.PHYSICAL)
    # Physical: water retention, gravimetric
    WG0006 = ("wg0006", "Water retention gravimetric, 6 kPa", WosisTable.PHYSICAL)
    WG0010 = ("wg0010", "Water retention gravimetric, 10 kPa", WosisTable.PHYSICAL)
    WG0033 = ("wg0033", "Water retention gravimetric, 33 kPa", WosisTable.PHYSICAL)
    WG0100 = ("wg0100", "Water retention gravimetric, 100 kPa", WosisTable.PHYSICAL)
    WG0200 = ("wg0200", "Water retention gravimetric, 200 kPa", WosisTable.PHYSICAL)
    WG0500 = ("wg0500", "Water retention gravimetric, 500 kPa", WosisTable.PHYSICAL)
    WG1500 = ("wg1500", "Water retention gravimetric, 1500 kPa", WosisTable.PHYSICAL)
    # Physical: water retention, volumetric
    WV0006 = ("wv0006", "Water retention volumetric, 6 kPa", WosisTable.PHYSICAL)
    WV0010 = ("wv0010", "Water retention volumetric, 10 kPa", WosisTable.PHYSICAL)
    WV0033 = ("wv0033", "Water retention volumetric, 33 kPa", WosisTable.PHYSICAL)
    WV0100 = ("wv0100", "Water retention volumetric, 100 kPa", WosisTable.PHYSICAL)
    WV0200 = ("wv0200", "Water retention volumetric, 200 kPa", WosisTable.PHYSICAL)
    WV0500 = ("wv0500", "Water retention volumetric, 500 kPa", WosisTable.PHYSICAL)
    WV1500 = ("wv1500", "Water retention volumetric, 1500 kPa", WosisTable.PHYSICAL)

    # Chemical: exchange capacity and salinity
    CECPH7 = ("cecph7", "Cation exchange capacity, pH 7", WosisTable.CHEMICAL)
    CECPH8 = ("cecph8", "Cation exchange capacity, pH 8", WosisTable.CHEMICAL)
    ECEC = ("ecec", "Effective cation exchange capacity", WosisTable.CHEMICAL)
    ELCO20 = ("elco20", "Electrical conductivity, 1:2", WosisTable.CHEMICAL)
    ELCO50 = ("elco50", "Electrical conductivity, 1:5", WosisTable.CHEMICAL)
    ELCOSP = ("elcosp", "Electrical conductivity, saturated paste", WosisTable.CHEMICAL)
    # Chemical: carbon and nitrogen
    NITKJD = ("nitkjd", "Total nitrogen (N)", WosisTable.CHEMICAL)
    ORGC = ("orgc", "Organic carbon", WosisTable.CHEMICAL)
    TOTC = ("totc", "Total carbon (C)", WosisTable.CHEMICAL)
    # Chemical: pH
    PHAQ = ("phaq", "pH H2O", WosisTable.CHEMICAL)
    PHCA = ("phca", "pH CaCl2", WosisTable.CHEMICAL)
    PHKC = ("phkc", "pH KCl", WosisTable.CHEMICAL)
    PHNF = ("phnf", "pH NaF", WosisTable.CHEMICAL)
    # Chemical: phosphorus
    PHPBYI = ("phpbyi", "Phosphorus, Bray I", WosisTable.CHEMICAL)
    PHPMH3 = ("phpmh3", "Phosphorus, Mehlich 3", WosisTable.CHEMICAL)
    PHPOLS = ("phpols", "Phosphorus, Olsen", WosisTable.CHEMICAL)
    PHPRTN = ("phprtn", "Phosphorus retention", WosisTable.CHEMICAL)
    PHPTOT = ("phptot", "Phosphorus, total", WosisTable.CHEMICAL)
    PHPWSL = ("phpwsl", "Phosphorus, water soluble", WosisTable.CHEMICAL)
    # Chemical: carbonates and gypsum
    TCEQ = ("tceq", "Calcium carbonate equivalent total", WosisTable.CHEMICAL)
    GYPS = ("gyps", "Gypsum", WosisTable.CHEMICAL)

    def __init__(self, code: str, description: str, table: WosisTable):
        self.code = code
        self.description = description
        self.table = table

    @property
    def key(self):
        return self.code

    @classmethod
    def from_code(cls, code: str) -> "WosisProperty":
        """Look up a property by its code, case-insensitively (CLAY == clay)"""
        for prop in cls:
            if prop.code == code.lower():
                return prop
        raise ValueError(
            f"Unknown property code: {code}. Available: {[p.code for p in cls]}"
        )


def properties_for_table(table: WosisTable) -> List[WosisProperty]:
    """Properties published in the given layer table"""
    return [prop for prop in WosisProperty if prop.table == table]


# Suffixes of the seven columns published for every measured property,
# with the column type code used to read them
PROPERTY_COLUMN_SUFFIXES: List[Tuple[str, str]] = [
    ("value", "c"),  # {seq:value;...} raw measurements
    ("value_avg", "d"),
    ("method", "c"),
    ("date", "D"),
    ("dataset_id", "c"),
    ("profile_code", "c"),
    ("licence", "c"),
]

# Profile table (one row per site)
PROFILE_COLUMNS: Dict[str, str] = {
    "profile_id": "i",
    "dataset_id": "c",
    "country_id": "c",
    "country_name": "c",
    "geom_accuracy": "d",
    "latitude": "d",
    "longitude": "d",
    "cwrb_version": "c",
    "cwrb_reference_soil_group": "c",
    "cwrb_prefix_qualifier": "c",
    "cwrb_suffix_qualifier": "c",
    "cfao_version": "c",
    "cfao_major_group": "c",
    "cfao_soil_unit": "c",
    "cstx_version": "c",
    "cstx_order_name": "c",
    "cstx_suborder": "c",
    "cstx_great_group": "c",
    "cstx_subgroup": "c",
}

# Attribute reference table (one row per measured property)
ATTRIBUTE_COLUMNS: Dict[str, str] = {
    "code": "c",
    "attribute": "c",
    "description": "c",
    "type": "c",
    "unit": "c",
    "accuracy": "d",
    "profiles": "i",
    "layers": "i",
}

# Columns leading every layer table before the per-property blocks
LAYER_KEY_COLUMNS: Dict[str, str] = {
    "profile_id": "i",
    "profile_layer_id": "i",
    "upper_depth": "d",
    "lower_depth": "d",
    "layer_name": "c",
    "litter": "c",
}

# Scope flag of layer-level properties in the attribute table (site-level ones are "Site")
SCOPE_LAYER = "Layer"

# Classification systems carried by profiles: (prefix, label columns)
CLASSIFICATION_SYSTEMS: Dict[str, List[str]] = {
    "wrb": ["cwrb_reference_soil_group", "cwrb_prefix_qualifier", "cwrb_suffix_qualifier"],
    "fao": ["cfao_major_group", "cfao_soil_unit"],
    "usda": ["cstx_order_name", "cstx_suborder", "cstx_great_group", "cstx_subgroup"],
}


def parse_snapshot(release: Optional[str]) -> WosisSnapshot:
    """Build a snapshot from a CLI string, falling back to the default release"""
    return WosisSnapshot(release or DEFAULT_SNAPSHOT)
