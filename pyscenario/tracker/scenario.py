"""
Scenario tracking.

The :class:`ScenarioTracker` consumes a stream of decoded
AIS messages and builds a scenario from it: every vessel
seen becomes a :class:`Target` with its movement history,
and the area covered by all valid positions is kept as a
:class:`BoundingBox`.

Malformed input is routine on a live feed. It arrives as
:class:`DecodeFailure` values, is counted and then skipped;
it never stops the stream.
"""
from __future__ import annotations

from pathlib import Path
from threading import Lock, RLock
from typing import Any, Callable, Hashable, Iterable, TextIO

from ..decode.messages import (
    Decoded, DecodedMessage, DecodeFailure, PositionReport
)
from ..decode.reader import read_messages
from ..logger import logger
from ..structs import BoundingBox, MMSI, Millis, Position
from .target import Target
from .timeline import RetentionPolicy, keep_all

# Exceptions
class UnknownTarget(KeyError):
    pass

class BoundingBoxAccumulator:
    """
    Smallest box covering all positions observed so far.

    The box is replaced on growth, never mutated,
    so `current()` always hands out a consistent
    snapshot.
    """
    def __init__(self) -> None:
        self._box: BoundingBox | None = None
        self._lock = Lock()

    def observe(self, position: Position) -> None:
        with self._lock:
            if self._box is None:
                self._box = BoundingBox.around(position)
            else:
                self._box = self._box.include(position)

    def current(self) -> BoundingBox | None:
        return self._box

class ScenarioTracker:
    """
    Registry of all targets of a scenario.

    Targets are created on first sighting and kept
    for the lifetime of the tracker. They live in an
    arena; `get_or_create` returns a stable index into
    it, lookups by MMSI go through an index map.

    Intended for one writer (the ingesting stream)
    and any number of concurrent readers.

    Parameters:
    - retention (RetentionPolicy): Retention hook handed
        to the timeline of every new target. Defaults
        to keeping all samples.
    """
    def __init__(self, retention: RetentionPolicy = keep_all) -> None:
        self.retention = retention
        self._arena: list[Target] = []
        self._index: dict[MMSI, int] = {}
        self._box = BoundingBoxAccumulator()
        self._lock = RLock()

        # Number of decode failures skipped
        self.malformed = 0

    def __len__(self) -> int:
        return len(self._arena)

    def __contains__(self, mmsi: MMSI) -> bool:
        return mmsi in self._index

    def __repr__(self) -> str:
        return (
            f"<ScenarioTracker(targets={len(self)},"
            f"bounding_box={self._box.current()!r})>"
        )

    # Ingestion ---------------------------------------------------------
    def ingest(self, item: Decoded) -> bool:
        """
        Ingest one decoded message or decode failure.

        Failures are skipped. Returns True if a
        message was applied, False otherwise.
        """
        if isinstance(item, DecodeFailure):
            self.malformed += 1
            logger.debug(
                f"Skipping malformed input {item.raw!r}: {item.reason}"
            )
            return False
        self.update(item)
        return True

    def update(self, message: DecodedMessage) -> None:
        """
        Route a message to its target, creating the
        target on first sighting, and grow the bounding
        box with valid positions.
        """
        idx = self.get_or_create(message.mmsi)
        if isinstance(message, PositionReport) and message.is_position_valid:
            self._box.observe(message.position)
        self._arena[idx].update(message)

    def get_or_create(self, mmsi: MMSI) -> int:
        """
        Arena index of the target with `mmsi`,
        creating the target if unseen.
        """
        idx = self._index.get(mmsi)
        if idx is not None:
            return idx
        with self._lock:
            idx = self._index.get(mmsi)
            if idx is None:
                self._arena.append(Target(self.retention))
                idx = len(self._arena) - 1
                self._index[mmsi] = idx
                logger.debug(f"New target {mmsi}")
            return idx

    def read_from_stream(self, stream: Iterable[Decoded]) -> int:
        """
        Ingest all items of an iterable.
        Returns the number of messages applied.
        """
        applied = 0
        for item in stream:
            if self.ingest(item):
                applied += 1
        logger.info(
            f"Read {applied} messages, skipped {self.malformed} "
            f"malformed in total. Tracking {len(self)} targets."
        )
        return applied

    def read_from_file(self, source: str | Path | TextIO) -> int:
        """
        Ingest a decoded CSV file.
        """
        return self.read_from_stream(read_messages(source))

    def subscribe(self, stream: Any) -> Any:
        """
        Register this tracker with a push stream.

        `stream` must provide `subscribe(callback)`;
        whatever it returns (usually a subscription
        handle) is handed back to the caller.
        """
        callback: Callable[[Decoded], bool] = self.ingest
        return stream.subscribe(callback)

    # Queries -----------------------------------------------------------
    def _bound(self, pick: Callable[[Target], Any], better: Callable[[Millis, Millis], bool]) -> Millis | None:
        bound = None
        for target in self.targets():
            sample = pick(target)
            if sample is None:
                continue
            if bound is None or better(sample.timestamp, bound):
                bound = sample.timestamp
        return bound

    def scenario_begin(self) -> Millis | None:
        """
        Time of the first position update
        in this scenario [UNIX ms].
        """
        return self._bound(Target.first_update, lambda a, b: a < b)

    def scenario_end(self) -> Millis | None:
        """
        Time of the last position update
        in this scenario [UNIX ms].
        """
        return self._bound(Target.last_update, lambda a, b: a > b)

    def bounding_box(self) -> BoundingBox | None:
        """
        Bounding box containing all valid
        positions observed, None before the first.
        """
        return self._box.current()

    def targets(self) -> frozenset[Target]:
        """
        Snapshot of all targets in this scenario.
        """
        with self._lock:
            return frozenset(self._arena)

    def targets_with_position(self) -> frozenset[Target]:
        """
        Snapshot of all targets with at least
        one position in their timeline.
        """
        return frozenset(t for t in self.targets() if t.has_position())

    def target(self, mmsi: MMSI) -> Target:
        idx = self._index.get(mmsi)
        if idx is None:
            raise UnknownTarget(mmsi)
        return self._arena[idx]

    def tag_target(self, mmsi: MMSI, label: Hashable) -> None:
        """
        Tag a known target. Unlike ingestion,
        this never creates a target.
        """
        self.target(mmsi).tag(label)

# Alias
TargetRegistry = ScenarioTracker
