"""
Decoded AIS messages (:mod:`pyscenario.decode`)
===============================================

The tracker does not decode NMEA payloads itself.
This module defines the decoded message records it
consumes and a reader for decoded CSV exports.
"""
from .messages import (
    PositionReport, StaticVoyageReport, OtherMessage,
    DecodeFailure, DecodedMessage, Decoded
)
from .reader import read_messages, from_frame
