"""
Utility functions for pyscenario
"""
from __future__ import annotations

from datetime import datetime, timezone
import numpy as np
import pandas as pd

from .structs import Latitude, Longitude, Millis

# Mean earth radius [m]
EARTH_RADIUS = 6_371_000

TimeLike = int | float | datetime | str | pd.Timestamp

def nm2m(nm: float) -> float:
    """Convert nautical miles to meters"""
    return nm*1852

def ms2h(ms: float) -> float:
    """Convert milliseconds to hours"""
    return ms/3_600_000

def to_millis(ts: TimeLike) -> Millis:
    """
    Convert a timestamp to UNIX milliseconds.

    Integers and floats are taken as UNIX milliseconds
    already. Datetimes and ISO 8601 strings without
    timezone information are interpreted as UTC.
    """
    if isinstance(ts, bool):
        raise TypeError("Boolean is not a valid timestamp.")
    if isinstance(ts, (int, np.integer)):
        return int(ts)
    if isinstance(ts, (float, np.floating)):
        return int(round(ts))
    try:
        stamp = pd.Timestamp(ts)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"Provided date '{ts}' is neither "
            "ISO 8601 compliant nor UNIX milliseconds."
        ) from e
    if stamp is pd.NaT:
        raise ValueError("Timestamp must not be NaT.")
    if stamp.tzinfo is None:
        stamp = stamp.tz_localize("UTC")
    return int(stamp.value // 1_000_000)

def from_millis(ms: Millis) -> datetime:
    """UNIX milliseconds to a timezone-aware UTC datetime"""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)

def destination(lat: Latitude,
                lon: Longitude,
                bearing: float,
                distance: float) -> tuple[Latitude, Longitude]:
    """
    Point reached from (lat, lon) when travelling
    `distance` meters along the great circle
    starting at `bearing` degrees (clockwise from north).

    Returns the (lat, lon) tuple of the destination,
    with longitude wrapped to [-180, 180).
    """
    if distance == 0:
        return lat, lon
    phi1, lam1 = np.radians(lat), np.radians(lon)
    theta = np.radians(bearing)
    delta = distance / EARTH_RADIUS

    phi2 = np.arcsin(
        np.sin(phi1) * np.cos(delta) +
        np.cos(phi1) * np.sin(delta) * np.cos(theta)
    )
    lam2 = lam1 + np.arctan2(
        np.sin(theta) * np.sin(delta) * np.cos(phi1),
        np.cos(delta) - np.sin(phi1) * np.sin(phi2)
    )
    lon2 = (np.degrees(lam2) + 540) % 360 - 180
    return float(np.degrees(phi2)), float(lon2)

def dead_reckon(lat: Latitude,
                lon: Longitude,
                cog: float,
                sog: float,
                elapsed: Millis) -> tuple[Latitude, Longitude]:
    """
    Project a position forward in time assuming
    constant course over ground [degrees] and
    speed over ground [knots] for `elapsed` milliseconds.
    """
    distance = nm2m(sog * ms2h(elapsed))
    return destination(lat, lon, cog, distance)

def interpolate_position(t: Millis,
                         t1: Millis, lat1: Latitude, lon1: Longitude,
                         t2: Millis, lat2: Latitude, lon2: Longitude
                         ) -> tuple[Latitude, Longitude]:
    """
    Linear interpolation of latitude and longitude
    between two timed positions with t1 < t < t2.
    """
    times = [t1, t2]
    lat = np.interp(t, times, [lat1, lat2])
    lon = np.interp(t, times, [lon1, lon2])
    return float(lat), float(lon)
