"""
Scenario tracking (:mod:`pyscenario.tracker`)
=============================================

This module builds a scenario from a stream of decoded
AIS messages:
    1. A registry of all vessels seen (:class:`ScenarioTracker`)
    2. Per vessel, a time-ordered history of positions that
       can be queried at any time after the first observation
       (:class:`Target`, :class:`Timeline`)
    3. The bounding box of all valid positions observed

Messages come from the :mod:`pyscenario.decode` module.
"""
from .timeline import (
    NoPriorSample, PositionSample, SampleKind,
    Timeline, RetentionPolicy, keep_all
)
from .target import IdentityConflict, Target, normalize_name
from .scenario import (
    BoundingBoxAccumulator, ScenarioTracker,
    TargetRegistry, UnknownTarget
)
