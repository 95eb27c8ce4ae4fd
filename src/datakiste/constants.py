"""Project wide constants."""

from importlib.resources import files

# Magic number at the start of every binary container (stored little-endian)
MAGIC_NUMBER = 0xE2A1_642A_ACB5_C4C9
# Container format version understood by this build (major, minor, patch)
FORMAT_VERSION = (0, 2, 0)

# Schema path
SCHEMA_PATH = files("datakiste") / "schemas"
# Path to cut definition file schema
CUT_FILE_SCHEMA = SCHEMA_PATH / "cut_file.schema.yml"
# Path to calibration file schema
CALIBRATION_FILE_SCHEMA = SCHEMA_PATH / "calibration_file.schema.yml"

# Sentinel bit marking an absent detector id or corrected value
ABSENT_VALUE_BIT = 0x8000
# Encoded detector id of a hit without detector id
ABSENT_DET_ID = (ABSENT_VALUE_BIT, ABSENT_VALUE_BIT)

# File suffixes used by the text codec
HIST_TEXT_SUFFIX = ".dkht"
POINTS_TEXT_SUFFIX = ".dkpt"
# File suffix of binary containers
CONTAINER_SUFFIX = ".dk"
