"""
Read decoded AIS messages from CSV files.

Files are expected to carry the columns defined in
:mod:`pyscenario.decode.filedescriptor`. Dynamic and
static messages may be mixed within one file, rows
are emitted in file order.

Rows that cannot be turned into a message are not
dropped silently here. They come out as
:class:`DecodeFailure` values so that the consumer
decides what to do with them.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, TextIO

import pandas as pd

from ..logger import logger
from ..structs import (
    COG_NOT_AVAILABLE, HEADING_NOT_AVAILABLE, LAT_NOT_AVAILABLE,
    LON_NOT_AVAILABLE, SOG_NOT_AVAILABLE
)
from ..utils import to_millis
from .filedescriptor import BaseColumns, PositionColumns, StaticColumns
from .messages import (
    POSITION_TYPES, STATIC_TYPES,
    Decoded, DecodeFailure, OtherMessage,
    PositionReport, StaticVoyageReport
)

# Default value for missing dimensions and ship types
_NA_INT = 0

def _is_missing(value: Any) -> bool:
    return value is None or (not isinstance(value, str) and pd.isna(value))

def _int_or(value: Any, default: int) -> int:
    return default if _is_missing(value) else int(value)

def _str_or_empty(value: Any) -> str:
    return "" if _is_missing(value) else str(value)

def _tenths(value: Any, default: int) -> int:
    """
    Decoded speed/course back to the
    integer tenths of the AIS payload.
    Missing values become `default`.
    """
    if _is_missing(value):
        return default
    return int(round(float(value) * 10))

def _position_report(row: dict, mmsi: int, msg_type: int, timestamp: int) -> PositionReport:
    lat = row[PositionColumns.LAT.value]
    lon = row[PositionColumns.LON.value]
    valid = not (_is_missing(lat) or _is_missing(lon))
    return PositionReport(
        mmsi=mmsi,
        timestamp=timestamp,
        lat=float(lat) if valid else LAT_NOT_AVAILABLE,
        lon=float(lon) if valid else LON_NOT_AVAILABLE,
        cog=_tenths(row[PositionColumns.COURSE.value], COG_NOT_AVAILABLE),
        sog=_tenths(row[PositionColumns.SPEED.value], SOG_NOT_AVAILABLE),
        heading=_int_or(
            row.get(PositionColumns.HEADING.value), HEADING_NOT_AVAILABLE
        ),
        valid=valid,
        msg_type=msg_type
    )

def _static_report(row: dict, mmsi: int, msg_type: int, timestamp: int) -> StaticVoyageReport:
    return StaticVoyageReport(
        mmsi=mmsi,
        timestamp=timestamp,
        name=_str_or_empty(row.get(StaticColumns.SHIPNAME.value)),
        to_bow=_int_or(row.get(StaticColumns.TO_BOW.value), _NA_INT),
        to_stern=_int_or(row.get(StaticColumns.TO_STERN.value), _NA_INT),
        to_port=_int_or(row.get(StaticColumns.TO_PORT.value), _NA_INT),
        to_starboard=_int_or(row.get(StaticColumns.TO_STARBOARD.value), _NA_INT),
        ship_type=_int_or(row.get(StaticColumns.SHIPTYPE.value), _NA_INT),
        callsign=_str_or_empty(row.get(StaticColumns.CALLSIGN.value)),
        msg_type=msg_type
    )

def _convert_row(row: dict) -> Decoded:
    """
    Turn one CSV row into a message.
    """
    try:
        msg_type = int(row[BaseColumns.MESSAGE_ID.value])
        mmsi = int(row[BaseColumns.MMSI.value])
        timestamp = to_millis(row[BaseColumns.TIMESTAMP.value])
        if msg_type in POSITION_TYPES:
            return _position_report(row, mmsi, msg_type, timestamp)
        if msg_type in STATIC_TYPES:
            return _static_report(row, mmsi, msg_type, timestamp)
        return OtherMessage(mmsi=mmsi, timestamp=timestamp, msg_type=msg_type)
    except (KeyError, TypeError, ValueError) as e:
        raw = row.get(BaseColumns.RAW_MESSAGE.value)
        return DecodeFailure(
            raw=str(row) if _is_missing(raw) else str(raw),
            reason=f"{type(e).__name__}: {e}"
        )

def from_frame(df: pd.DataFrame) -> Iterator[Decoded]:
    """
    Convert the rows of an already loaded
    DataFrame into decoded messages.
    """
    for row in df.to_dict(orient="records"):
        yield _convert_row(row)

def read_messages(source: str | Path | TextIO) -> Iterator[Decoded]:
    """
    Read a decoded CSV file or buffer and yield
    one message (or decode failure) per row.
    """
    df = pd.read_csv(source,sep=",",quotechar='"',
                     encoding="utf-8",index_col=False)
    logger.debug(f"Read {len(df)} rows from {source}")
    yield from from_frame(df)
