"""
Raw AIS packets.

A packet is the text of one AIS message as received:
optional comment block lines followed by one or more
sentences, together with the time it was received.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property

from ..logger import logger
from ..structs import Millis
from .commentblock import CommentBlock, CommentBlockError

# Encapsulated sentence, e.g. !AIVDM,1,1,,B,...,0*7C
_ENCAPSULATED = re.compile(r"![A-Z]{2}[A-Z]{3},[^*]*\*[0-9A-Fa-f]{2}")

_LINE_BREAK = re.compile(r"\r?\n")

@dataclass(frozen=True)
class SentenceFrame:
    """
    The interpretable part of a packet: its
    encapsulated sentences and comment block.
    """
    sentences: tuple[str, ...]
    comment_block: CommentBlock | None

class AisPacket:
    """
    Immutable raw packet.

    Parameters:
    - raw (str): Packet text, lines separated by CRLF or LF.
    - receive_timestamp (Millis): Time of reception [UNIX ms].
    """
    def __init__(self, raw: str, receive_timestamp: Millis) -> None:
        self._raw = raw
        self._receive_timestamp = receive_timestamp

    @classmethod
    def from_text(cls, text: str, receive_timestamp: Millis) -> AisPacket:
        return cls(text, receive_timestamp)

    def __repr__(self) -> str:
        return (
            f"<AisPacket(raw={self._raw!r},"
            f"receive_timestamp={self._receive_timestamp})>"
        )

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def receive_timestamp(self) -> Millis:
        return self._receive_timestamp

    @cached_property
    def lines(self) -> tuple[str, ...]:
        return tuple(l for l in _LINE_BREAK.split(self._raw) if l)

    @cached_property
    def _frame(self) -> SentenceFrame | None:
        sentences = []
        for line in self.lines:
            match = _ENCAPSULATED.search(line)
            if match is not None:
                sentences.append(match.group(0))
        if not sentences:
            return None
        try:
            cb = CommentBlock.parse(self.lines)
        except CommentBlockError as e:
            logger.debug(f"Uninterpretable comment block: {e}")
            return None
        return SentenceFrame(tuple(sentences), cb)

    def vdm(self) -> SentenceFrame | None:
        """
        Sentence frame of this packet, or None if
        the packet holds no encapsulated sentence or
        its comment block is malformed.

        The comment block of the frame is a copy and
        may be modified freely.
        """
        frame = self._frame
        if frame is None:
            return None
        cb = frame.comment_block
        return SentenceFrame(
            frame.sentences, None if cb is None else cb.copy()
        )

    def comment_block(self) -> CommentBlock | None:
        frame = self.vdm()
        return None if frame is None else frame.comment_block

    @property
    def timestamp(self) -> Millis:
        """
        Best timestamp: the comment block time if
        present, else the time of reception.
        """
        cb = self.comment_block()
        if cb is not None:
            ts = cb.get_timestamp()
            if ts is not None:
                return ts
        return self._receive_timestamp
