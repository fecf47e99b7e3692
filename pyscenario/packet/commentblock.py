"""
NMEA 4.0 tag blocks ("comment blocks").

A comment block is a comma separated list of
`key:value` fields between two backslashes, closed by
an XOR checksum over the field text:

    \\c:1617264000,s:AISHUB*hh\\!AIVDM,1,1,,B,...*hh

It either precedes a sentence on the same line or
stands on a line of its own before the sentences.
"""
from __future__ import annotations

from functools import reduce
from typing import Iterable, Iterator

from ..structs import Millis

# Exceptions
class CommentBlockError(ValueError):
    pass

# Tag block delimiter
DELIMITER = "\\"

# Timestamp key, value in UNIX seconds
TIMESTAMP_KEY = "c"

# Larger "c" values are taken as milliseconds
_MAX_SECONDS = 10**11

def checksum(text: str) -> str:
    """
    Two-digit upper-case hex XOR
    over all characters of `text`.
    """
    return f"{reduce(lambda acc, ch: acc ^ ord(ch), text, 0):02X}"

class CommentBlock:
    """
    Ordered mapping of tag keys to string values.

    Adding an existing key replaces its value
    but keeps its position.
    """
    def __init__(self) -> None:
        self._tags: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"<CommentBlock({self._tags!r})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommentBlock):
            return NotImplemented
        return self._tags == other._tags

    def __contains__(self, key: str) -> bool:
        return key in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def items(self):
        return self._tags.items()

    def contains(self, key: str) -> bool:
        return key in self._tags

    def is_empty(self) -> bool:
        return not self._tags

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._tags.get(key, default)

    def add_string(self, key: str, value: str) -> None:
        if not key or any(c in key for c in ",:*\\"):
            raise CommentBlockError(f"Invalid tag key {key!r}.")
        value = str(value)
        if any(c in value for c in ",\\"):
            raise CommentBlockError(f"Invalid value {value!r} for tag {key!r}.")
        self._tags[key] = value

    def add_int(self, key: str, value: int) -> None:
        self.add_string(key, str(int(value)))

    def add_timestamp(self, timestamp: Millis) -> None:
        self.add_int(TIMESTAMP_KEY, timestamp // 1000)

    def get_timestamp(self) -> Millis | None:
        """
        Timestamp of the "c" tag in milliseconds,
        None if absent or not a number.
        """
        value = self._tags.get(TIMESTAMP_KEY)
        if value is None:
            return None
        try:
            ts = int(value)
        except ValueError:
            return None
        return ts if ts >= _MAX_SECONDS else ts * 1000

    def copy(self) -> CommentBlock:
        cb = CommentBlock()
        cb._tags = dict(self._tags)
        return cb

    def encode(self) -> str:
        """
        Encode as a single tag block including
        delimiters and checksum.
        """
        body = ",".join(f"{k}:{v}" for k, v in self._tags.items())
        return f"{DELIMITER}{body}*{checksum(body)}{DELIMITER}"

    def _parse_block(self, block: str) -> None:
        body, star, given = block.rpartition("*")
        if not star:
            raise CommentBlockError(f"Missing checksum in {block!r}.")
        if given.upper() != checksum(body):
            raise CommentBlockError(
                f"Checksum mismatch in {block!r}: "
                f"expected {checksum(body)}, got {given}."
            )
        if not body:
            return
        for field in body.split(","):
            key, colon, value = field.partition(":")
            if not colon or not key:
                raise CommentBlockError(f"Malformed field {field!r}.")
            self._tags[key] = value

    @classmethod
    def parse(cls, lines: Iterable[str]) -> CommentBlock | None:
        """
        Collect the tag blocks leading any of `lines`
        into one comment block. Returns None if no
        line starts with a tag block.
        """
        cb = cls()
        found = False
        for line in lines:
            pos = 0
            while line.startswith(DELIMITER, pos):
                end = line.find(DELIMITER, pos + 1)
                if end < 0:
                    raise CommentBlockError(
                        f"Unterminated tag block in {line!r}."
                    )
                cb._parse_block(line[pos + 1:end])
                found = True
                pos = end + 1
        return cb if found else None
