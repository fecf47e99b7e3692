"""
Time-ordered history of the positions of one vessel.

A :class:`Timeline` stores :class:`PositionSample` objects
keyed by their timestamp and answers the question
"where was the vessel at time t?":

    - exactly, if a sample exists at t,
    - by linear interpolation, if samples exist
      before and after t,
    - by dead reckoning from the last sample, if t
      lies after the last observation.

Before the first observation there is no answer and
:class:`NoPriorSample` is raised.

Samples are kept forever by default. Windowing is left
to a retention hook (see :func:`keep_all`), which is the
only place allowed to remove samples.
"""
from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Callable, Iterator

import pandas as pd

from ..decode.messages import PositionReport
from ..structs import (
    COG_NOT_AVAILABLE, SOG_NOT_AVAILABLE,
    Latitude, Longitude, Millis, Position
)
from ..utils import (
    TimeLike, dead_reckon, from_millis,
    interpolate_position, to_millis
)

# Exceptions
class NoPriorSample(LookupError):
    pass

class SampleKind(Enum):
    """
    Whether a sample was observed or estimated.
    """
    OBSERVED = "observed"
    INTERPOLATED = "interpolated"
    EXTRAPOLATED = "extrapolated"

@dataclass(frozen=True)
class PositionSample:
    """
    Position of a vessel at one instant.
    """
    timestamp: Millis
    lat: Latitude
    lon: Longitude
    cog: float # Course over ground [degrees]
    sog: float # Speed over ground [knots]
    heading: int # True heading [degrees], 511 if not available
    kind: SampleKind = SampleKind.OBSERVED

    @classmethod
    def from_report(cls, report: PositionReport) -> PositionSample:
        """
        Sample from a position report, with course
        and speed scaled down from tenths.
        """
        return cls(
            timestamp=report.timestamp,
            lat=report.lat,
            lon=report.lon,
            cog=report.cog / 10.0,
            sog=report.sog / 10.0,
            heading=report.heading
        )

    @property
    def position(self) -> Position:
        return Position(self.lat,self.lon)

    @property
    def time(self) -> datetime:
        return from_millis(self.timestamp)

    @property
    def is_estimated(self) -> bool:
        return self.kind is not SampleKind.OBSERVED

    @property
    def has_motion(self) -> bool:
        """
        Course and speed are both available.
        """
        return (
            round(self.sog * 10) < SOG_NOT_AVAILABLE and
            round(self.cog * 10) < COG_NOT_AVAILABLE
        )

# Retention hooks receive the timeline after every insert
RetentionPolicy = Callable[["Timeline"], None]

def keep_all(timeline: Timeline) -> None:
    """
    Default retention: never discard anything.
    """
    return None

class Timeline:
    """
    Ordered map from timestamp to position sample.

    Timestamps are unique. Inserting a sample at an
    already known timestamp replaces the old one.
    Iteration yields samples in ascending time.

    Parameters:
    - retention (RetentionPolicy): Callable invoked with
        the timeline after each insert. Defaults to
        :func:`keep_all`.
    """
    def __init__(self, retention: RetentionPolicy = keep_all) -> None:
        self._times: list[Millis] = []
        self._samples: dict[Millis, PositionSample] = {}
        self.retention = retention

    def __len__(self) -> int:
        return len(self._times)

    def __iter__(self) -> Iterator[PositionSample]:
        return (self._samples[t] for t in list(self._times))

    def __contains__(self, timestamp: TimeLike) -> bool:
        return to_millis(timestamp) in self._samples

    def __repr__(self) -> str:
        return f"<Timeline(samples={len(self)})>"

    def insert(self, sample: PositionSample) -> None:
        """
        Insert a sample, replacing any sample
        at the same timestamp.
        """
        ts = sample.timestamp
        if ts not in self._samples:
            # Reports mostly arrive in order
            if not self._times or ts > self._times[-1]:
                self._times.append(ts)
            else:
                self._times.insert(bisect_left(self._times, ts), ts)
        self._samples[ts] = sample
        self.retention(self)

    def first(self) -> PositionSample | None:
        """
        Earliest sample or None if empty.
        """
        if not self._times:
            return None
        return self._samples[self._times[0]]

    def last(self) -> PositionSample | None:
        """
        Latest sample or None if empty.
        """
        if not self._times:
            return None
        return self._samples[self._times[-1]]

    def samples(self) -> tuple[PositionSample, ...]:
        """
        Snapshot of all samples in ascending time.
        """
        return tuple(self._samples[t] for t in self._times)

    def discard_before(self, timestamp: TimeLike) -> int:
        """
        Remove all samples strictly older than `timestamp`
        and return how many were removed.
        Meant for retention hooks only.
        """
        cut = bisect_left(self._times, to_millis(timestamp))
        for ts in self._times[:cut]:
            del self._samples[ts]
        del self._times[:cut]
        return cut

    def query(self, at: TimeLike) -> PositionSample:
        """
        Position at time `at`.

        Returns the stored sample on an exact hit.
        Otherwise the position is interpolated between
        the neighbouring samples, or dead reckoned from
        the last sample if `at` lies beyond it. A last
        sample without course or speed is held in place.

        Course, speed and heading of an estimate are
        those of the preceding sample. Only the position
        is estimated; kinematics are not interpolated.
        """
        ts = to_millis(at)
        exact = self._samples.get(ts)
        if exact is not None:
            return exact

        idx = bisect_left(self._times, ts)
        if idx == 0:
            raise NoPriorSample(
                f"No position known at or before {ts}."
            )
        before = self._samples[self._times[idx-1]]

        if idx < len(self._times):
            after = self._samples[self._times[idx]]
            lat, lon = interpolate_position(
                ts,
                before.timestamp, before.lat, before.lon,
                after.timestamp, after.lat, after.lon
            )
            kind = SampleKind.INTERPOLATED
        elif before.has_motion:
            lat, lon = dead_reckon(
                before.lat, before.lon,
                before.cog, before.sog,
                ts - before.timestamp
            )
            kind = SampleKind.EXTRAPOLATED
        else:
            # Nothing to reckon with, stay put
            lat, lon = before.lat, before.lon
            kind = SampleKind.EXTRAPOLATED

        return replace(
            before, timestamp=ts, lat=lat, lon=lon, kind=kind
        )

    def to_frame(self) -> pd.DataFrame:
        """
        All samples as a DataFrame, one row
        per sample in ascending time.
        """
        return pd.DataFrame(
            [
                (s.timestamp, s.lat, s.lon, s.cog, s.sog, s.heading)
                for s in self.samples()
            ],
            columns=["timestamp", "lat", "lon", "COG", "SOG", "heading"]
        )
