"""
Decoded AIS message variants.

Bit-level decoding of the NMEA payload happens
upstream. What arrives here are plain records, one
per message, falling into three kinds:

    1. Position reports (messages 1,2,3,18,19)
    2. Static and voyage related data (message 5)
    3. Anything else, tracked only by its sender

A failed upstream decode is not an exception but a
:class:`DecodeFailure` value, which consumers are
expected to skip.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..structs import (
    MMSI, Millis, Position, Latitude, Longitude,
    HEADING_NOT_AVAILABLE
)

# Message type tuples
POSITION_TYPES = (1,2,3,18,19,)
STATIC_TYPES = (5,)

@dataclass(frozen=True)
class PositionReport:
    """
    Position report of a vessel.

    Course and speed over ground are kept in the
    integer tenths the AIS payload carries them in.
    """
    mmsi: MMSI
    timestamp: Millis # Best available time of the report
    lat: Latitude
    lon: Longitude
    cog: int # Course over ground [1/10 degrees]
    sog: int # Speed over ground [1/10 knots]
    heading: int = HEADING_NOT_AVAILABLE # True heading [degrees]
    valid: bool = True # Position flag as declared by the decoder
    msg_type: int = 1

    @property
    def is_position_valid(self) -> bool:
        """
        Valid if flagged so and lat/lon lie within
        their ranges. The not-available values
        91/181 are out of range.
        """
        return (
            self.valid and
            -90 <= self.lat <= 90 and
            -180 <= self.lon <= 180
        )

    @property
    def position(self) -> Position:
        return Position(self.lat,self.lon)

@dataclass(frozen=True)
class StaticVoyageReport:
    """
    Static and voyage related data.
    `name` is the raw string as decoded,
    still padded with the '@' filler.
    """
    mmsi: MMSI
    timestamp: Millis
    name: str
    to_bow: int
    to_stern: int
    to_port: int
    to_starboard: int
    ship_type: int = 0
    callsign: str = ""
    msg_type: int = 5

@dataclass(frozen=True)
class OtherMessage:
    """
    Any message not carrying position
    or static data.
    """
    mmsi: MMSI
    timestamp: Millis
    msg_type: int

@dataclass(frozen=True)
class DecodeFailure:
    """
    Result of an upstream decode that failed.
    """
    raw: str
    reason: str = ""

# Type aliases
DecodedMessage = PositionReport | StaticVoyageReport | OtherMessage
Decoded = DecodedMessage | DecodeFailure
