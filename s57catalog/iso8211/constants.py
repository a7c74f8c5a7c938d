"""ISO 8211 framing constants, fixed sizes, and reserved S-57 names."""
from __future__ import annotations

from dataclasses import dataclass

# Delimiters
RECORD_SEPARATOR = 0x1E   # Field terminator (FT)
UNIT_SEPARATOR = 0x1F     # Unit terminator (UT)
SEPARATORS = frozenset({RECORD_SEPARATOR, UNIT_SEPARATOR})

# Record layout
LENGTH_PREFIX_SIZE = 5    # ASCII record length, counts itself
LEADER_SIZE = 24          # Includes the length prefix
LEADER_BODY_SIZE = LEADER_SIZE - LENGTH_PREFIX_SIZE
FIELD_CONTROLS_SIZE = 9   # dsc(1) + dtc(1) + aux(2) + prt(2) + tes(3)

# Array descriptor / format control punctuation
ARRAY_DESCRIPTOR_DELIMITER = "!"
FORMAT_CONTROL_DELIMITER = ","

# Leader identifiers
LEADER_ID_DDR = "L"

# S-57 catalog tags
DRID = "DRID"             # Synthesized name of the unnamed record identifier subfield
TOPLVL = "0001"           # Record identifier field
FILE_CONTROL = "0000"     # File control field of the DDR
CATD = "CATD"             # Catalog directory field


@dataclass(frozen=True, slots=True)
class ReservedNames:
    """Reserved names used while building the schema and resolving record ids."""
    record_id_subfield: str = DRID
    top_level_tag: str = TOPLVL
    file_control_tag: str = FILE_CONTROL


DEFAULT_NAMES = ReservedNames()
