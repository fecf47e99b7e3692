"""
Per-vessel state of a scenario.
"""
from __future__ import annotations

from threading import RLock
from typing import Hashable

from ..decode.messages import (
    DecodedMessage, OtherMessage,
    PositionReport, StaticVoyageReport
)
from ..logger import logger
from ..structs import (
    MMSI, ShipType, NAME_FILLER, DIMENSION_UNKNOWN
)
from ..utils import TimeLike
from .timeline import (
    PositionSample, RetentionPolicy, Timeline, keep_all
)

# Exceptions
class IdentityConflict(ValueError):
    pass

def normalize_name(ais_string: str) -> str:
    """
    AIS six-bit string to a plain name:
    filler characters become blanks and
    surrounding whitespace is removed.
    """
    return ais_string.replace(NAME_FILLER, " ").strip()

class Target:
    """
    A single vessel observed in a scenario.

    The MMSI of a target is fixed by the first
    message it is updated with. Every later message
    must come from the same MMSI, otherwise
    :class:`IdentityConflict` is raised.

    Attributes:
        - mmsi: Maritime Mobile Service Identity, None
                before the first update
        - name: Vessel name, or the MMSI as string if
                no (non-blank) name was reported
        - to_bow, to_stern, to_port, to_starboard:
                Dimensions from the reference point [m],
                -1 until reported
        - ship_type: Ship type from the last static report
        - callsign: Radio call sign, empty until reported
        - timeline: History of observed positions

    All public methods take the target's lock, so a
    reader never observes a half-applied update.
    """
    def __init__(self, retention: RetentionPolicy = keep_all) -> None:
        self._mmsi: MMSI | None = None
        self._name: str | None = None
        self.to_bow = DIMENSION_UNKNOWN
        self.to_stern = DIMENSION_UNKNOWN
        self.to_port = DIMENSION_UNKNOWN
        self.to_starboard = DIMENSION_UNKNOWN
        self.ship_type = ShipType.NOTAVAILABLE
        self.callsign = ""
        self._tags: set[Hashable] = set()
        self.timeline = Timeline(retention)
        self._lock = RLock()

    def __repr__(self) -> str:
        return (
            f"<Target(mmsi={self._mmsi},"
            f"name={self.name!r},"
            f"samples={len(self.timeline)})>"
        )

    @property
    def mmsi(self) -> MMSI | None:
        return self._mmsi

    @property
    def name(self) -> str:
        if self._name:
            return self._name
        return str(self._mmsi)

    @property
    def tags(self) -> frozenset[Hashable]:
        with self._lock:
            return frozenset(self._tags)

    def update(self, message: DecodedMessage) -> None:
        """
        Apply a decoded message to this target.

        - Position reports with a valid position are
          added to the timeline.
        - Static/voyage reports overwrite name, call
          sign, dimensions and ship type.
        - Other messages only fix the identity.
        """
        if not isinstance(message, (PositionReport, StaticVoyageReport, OtherMessage)):
            raise TypeError(
                f"Cannot update target from {type(message).__name__}."
            )
        with self._lock:
            self._check_or_set_mmsi(message.mmsi)
            if isinstance(message, PositionReport):
                if message.is_position_valid:
                    self.timeline.insert(PositionSample.from_report(message))
            elif isinstance(message, StaticVoyageReport):
                self._name = normalize_name(message.name)
                self.callsign = normalize_name(message.callsign)
                self.to_bow = message.to_bow
                self.to_stern = message.to_stern
                self.to_port = message.to_port
                self.to_starboard = message.to_starboard
                try:
                    self.ship_type = ShipType.from_value(message.ship_type)
                except ValueError:
                    self.ship_type = ShipType.NOTAVAILABLE

    def _check_or_set_mmsi(self, mmsi: MMSI) -> None:
        if self._mmsi is None:
            self._mmsi = mmsi
        elif self._mmsi != mmsi:
            msg = (
                f"Message from mmsi {mmsi} cannot "
                f"update target with mmsi {self._mmsi}"
            )
            logger.error(msg)
            raise IdentityConflict(msg)

    def position_at(self, at: TimeLike) -> PositionSample:
        """
        Observed or estimated position at `at`.
        Raises NoPriorSample if `at` precedes the
        first known position.
        """
        with self._lock:
            return self.timeline.query(at)

    def position_reports(self) -> tuple[PositionSample, ...]:
        with self._lock:
            return self.timeline.samples()

    def has_position(self) -> bool:
        with self._lock:
            return len(self.timeline) > 0

    def first_update(self) -> PositionSample | None:
        with self._lock:
            return self.timeline.first()

    def last_update(self) -> PositionSample | None:
        with self._lock:
            return self.timeline.last()

    def tag(self, label: Hashable) -> None:
        with self._lock:
            self._tags.add(label)

    def is_tagged(self, label: Hashable) -> bool:
        with self._lock:
            return label in self._tags
