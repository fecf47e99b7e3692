from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

Latitude  = float
Longitude = float
MMSI = int
Millis = int # UNIX time in milliseconds

# AIS "not available" values carried through unchanged
HEADING_NOT_AVAILABLE = 511
LAT_NOT_AVAILABLE = 91.
LON_NOT_AVAILABLE = 181.
SOG_NOT_AVAILABLE = 1023 # [1/10 knots]
COG_NOT_AVAILABLE = 3600 # [1/10 degrees]

# Padding character of AIS six-bit strings
NAME_FILLER = "@"

# Ship dimensions not yet reported
DIMENSION_UNKNOWN = -1

def _mflatten(l):
    """
    Flatten a mixed list
    of numbers and lists
    """
    for el in l:
        if isinstance(el, (list,range)):
            yield from _mflatten(el)
        else:
            yield el

class ShipType(Enum):
    """
    Dataclass to store the type of vessel
    as defined by the AIS standard.
    See here for more information:
    https://coast.noaa.gov/data/marinecadastre/ais/VesselTypeCodes2018.pdf
    """
    __order__ = (
        "NOTAVAILABLE WIG FISHING TUGTOW MILITARY "
        "SAILING PLEASURE HSC PASSENGER "
        "CARGO TANKER OTHER"
    )
    NOTAVAILABLE = 0
    WIG = range(20,30) # Wing in ground
    FISHING = 30
    TUGTOW = [31,32,52]
    MILITARY = 35
    SAILING = 36
    PLEASURE = 37
    HSC = range(40,50) # High speed craft
    PASSENGER = range(60,70)
    CARGO = range(70,80)
    TANKER = range(80,90)
    OTHER = list(_mflatten([33,34,50,51,list(range(53,60)),list(range(90,100))]))

    @staticmethod
    def from_value(value: int) -> ShipType:
        """
        Return the ship type from a value
        """
        for st in ShipType:
            if isinstance(st.value, (list,range)):
                if value in st.value:
                    return st
            else:
                if value == st.value:
                    return st
        raise ValueError(f"Ship type {value} not found.")

@dataclass(frozen=True)
class Position:
    """
    Position object for a geographical point.
    """
    lat: Latitude
    lon: Longitude

@dataclass(frozen=True)
class BoundingBox:
    """
    Geographical frame
    containing longitudinal
    and lateral bounds to a
    geographical area.

    Boxes are immutable. Growing a box
    returns a new one.
    """
    LATMIN: Latitude
    LATMAX: Latitude
    LONMIN: Longitude
    LONMAX: Longitude

    def __repr__(self) -> str:
        return (
            "<BoundingBox("
            f"LATMIN={self.LATMIN:.3f},"
            f"LATMAX={self.LATMAX:.3f},"
            f"LONMIN={self.LONMIN:.3f},"
            f"LONMAX={self.LONMAX:.3f})>"
        )

    @classmethod
    def around(cls, position: Position) -> BoundingBox:
        """
        Zero-area box located at `position`
        """
        return cls(
            LATMIN=position.lat, LATMAX=position.lat,
            LONMIN=position.lon, LONMAX=position.lon
        )

    def include(self, position: Position) -> BoundingBox:
        """
        Smallest box containing both this
        box and `position`.
        """
        return BoundingBox(
            LATMIN=min(self.LATMIN, position.lat),
            LATMAX=max(self.LATMAX, position.lat),
            LONMIN=min(self.LONMIN, position.lon),
            LONMAX=max(self.LONMAX, position.lon)
        )

    @property
    def center(self) -> Position:
        """
        Return the center of the bounding box
        """
        return Position(
            (self.LATMIN+self.LATMAX)/2,
            (self.LONMIN+self.LONMAX)/2
        )

    def contains(self, position: Position) -> bool:
        """
        Check if a position is within the bounding box
        """
        return (
            self.LATMIN <= position.lat <= self.LATMAX and
            self.LONMIN <= position.lon <= self.LONMAX
        )
