"""
Packet tagging: the well-known comment block tags
describing when and where a packet was received.
"""
from __future__ import annotations

from dataclasses import dataclass, fields

from ..logger import logger
from ..structs import Millis
from .commentblock import CommentBlock, TIMESTAMP_KEY
from .packet import AisPacket

# Field name -> comment block key, in encoding order
TAG_KEYS = {
    "timestamp": TIMESTAMP_KEY,
    "source_id": "si",
    "source_bs": "sb",
    "source_country": "sc",
    "source_type": "st",
}

def _int_or_none(value: str | None, key: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.debug(f"Ignoring non-integer tag {key}:{value}")
        return None

@dataclass
class PacketTagging:
    """
    Tagging of a packet.

    Attributes:
        - timestamp: Reception time [UNIX ms], tag "c"
        - source_id: Source identifier, tag "si"
        - source_bs: MMSI of the receiving base station, tag "sb"
        - source_country: Three letter country code, tag "sc"
        - source_type: Source type, e.g. "LIVE" or "SAT", tag "st"

    Unset fields are None and not encoded.
    """
    timestamp: Millis | None = None
    source_id: str | None = None
    source_bs: int | None = None
    source_country: str | None = None
    source_type: str | None = None

    @classmethod
    def parse(cls, packet: AisPacket) -> PacketTagging:
        """
        Tagging found in the comment block of `packet`.
        Empty if the packet has no (readable) comment block.
        """
        cb = packet.comment_block()
        if cb is None:
            return cls()
        return cls(
            timestamp=cb.get_timestamp(),
            source_id=cb.get(TAG_KEYS["source_id"]),
            source_bs=_int_or_none(cb.get(TAG_KEYS["source_bs"]), TAG_KEYS["source_bs"]),
            source_country=cb.get(TAG_KEYS["source_country"]),
            source_type=cb.get(TAG_KEYS["source_type"]),
        )

    def copy(self) -> PacketTagging:
        return PacketTagging(**{f.name: getattr(self, f.name) for f in fields(self)})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def merge_missing(self, other: PacketTagging) -> PacketTagging:
        """
        Fill the unset fields of this tagging from `other`.

        Returns a tagging holding only the
        fields that were added.
        """
        added = PacketTagging()
        for f in fields(self):
            value = getattr(other, f.name)
            if getattr(self, f.name) is None and value is not None:
                setattr(self, f.name, value)
                setattr(added, f.name, value)
        return added

    def _tags(self):
        for name, key in TAG_KEYS.items():
            value = getattr(self, name)
            if value is None:
                continue
            if name == "timestamp":
                value = value // 1000
            yield key, str(value)

    def comment_block(self, cb: CommentBlock | None = None) -> CommentBlock:
        """
        Write the tags into `cb` (a new comment block
        if not given), replacing values of existing keys.
        """
        if cb is None:
            cb = CommentBlock()
        for key, value in self._tags():
            cb.add_string(key, value)
        return cb

    def comment_block_preserve(self, cb: CommentBlock) -> CommentBlock:
        """
        Write only those tags into `cb`
        whose key it does not contain yet.
        """
        for key, value in self._tags():
            if not cb.contains(key):
                cb.add_string(key, value)
        return cb
