"""Application constants."""

from types import MappingProxyType

OUTPUT_VERSION = "1.0"
DEFAULT_SOURCE_LABEL = "Air Services Australia DAH"
DEFAULT_COORDINATE_PRECISION = 6
WGS84_EPSG = 4326

SOURCE_HINTS = ("csv", "json", "text", "pdf-extracted")
COMMANDS = ("detect", "convert", "validate")

# Spellings read as true in conditional-status fields.
TRUE_FLAGS = frozenset({"true", "yes", "y", "1", "c"})

EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "format",
    "event",
    "status",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)

AIRSPACE_TYPE_CODES = MappingProxyType(
    {
        "CLASS A": "A",
        "CLASS B": "B",
        "CLASS C": "C",
        "CLASS D": "D",
        "CLASS E": "E",
        "CLASS F": "F",
        "CLASS G": "G",
        "CONTROL ZONE": "CTR",
        "CTR": "CTR",
        "CONTROL AREA": "CTA",
        "CTA": "CTA",
        "TERMINAL CONTROL AREA": "TMA",
        "TMA": "TMA",
        "RESTRICTED": "R",
        "PROHIBITED": "P",
        "DANGER": "D",
        "MILITARY": "M",
    }
)

# Seed data; conversion.yml may replace both tables.
POSITION_CODES_BY_NAME = (
    ("CORAL", "COL"),
    ("FLINDERS", "FLD"),
    ("HOWE", "HWE"),
    ("TASMAN", "TSN"),
    ("INDIAN EAST", "INE"),
    ("INDIAN SOUTH", "INS"),
    ("INDIAN", "IND"),
    ("HONIARA", "AGGG"),
    ("NAURU", "ANAU"),
)

POSITION_PREFIX_BY_LOCATION = MappingProxyType(
    {
        "YBBB": "BN",
        "YBBO": "BN",
        "YMMM": "ML",
        "YMMO": "ML",
        "YSSY": "SY",
        "YSSO": "SY",
        "YPAD": "AD",
        "YPPH": "PH",
    }
)
