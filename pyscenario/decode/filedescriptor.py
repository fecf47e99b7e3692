"""
File descriptors for decoded AIS data files.

The default values follow the column names of
decoded EMSA exports. If you are using a different
data set, please change the values accordingly.
"""
from enum import Enum

class BaseColumns(Enum):
    """
    Columns shared by dynamic
    and static source files.
    """
    __order__ = (
        "TIMESTAMP MESSAGE_ID MMSI RAW_MESSAGE"
    )
    TIMESTAMP: str = "timestamp"
    MESSAGE_ID: str = "message_id"
    MMSI: str = "MMSI"
    RAW_MESSAGE: str = "raw_message" # Optional, kept for failures

class PositionColumns(Enum):
    """
    Data columns for message 1,2,3,18 and 19
    source files.
    """
    __order__ = (
        "LAT LON SPEED COURSE "
        "HEADING"
    )
    LAT: str = "lat"
    LON: str = "lon"
    SPEED: str = "speed"     # [knots]
    COURSE: str = "course"   # [degrees]
    HEADING: str = "heading" # [degrees], 511 if not available

class StaticColumns(Enum):
    """
    Data columns for message 5
    source files.
    """
    __order__ = (
        "SHIPNAME CALLSIGN SHIPTYPE "
        "TO_BOW TO_STERN TO_PORT TO_STARBOARD"
    )
    SHIPNAME: str = "shipname"
    CALLSIGN: str = "callsign"
    SHIPTYPE: str = "ship_type"
    TO_BOW: str = "to_bow"
    TO_STERN: str = "to_stern"
    TO_PORT: str = "to_port"
    TO_STARBOARD: str = "to_starboard"
