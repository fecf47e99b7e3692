"""
Rewrite the comment block of AIS packets.

A :class:`TaggingTransformer` is built with a policy and
a :class:`PacketTagging` template. Each call to
:meth:`TaggingTransformer.transform` produces a new packet
whose comment block follows the policy:

    PREPEND_MISSING
        Prepend a comment block line holding the tags the
        packet lacks. The packet is returned as is if
        nothing is missing.
    REPLACE
        Drop the packet's comment block, tag it anew with
        the template and the packet's own timestamp, and
        strip proprietary sentences.
    MERGE_OVERRIDE
        Merge the template into the packet's comment block,
        template values win.
    MERGE_PRESERVE
        Merge the template into the packet's comment block,
        existing values win.

Extra tags (plain key/value pairs) are applied on top,
overriding existing tags under REPLACE and MERGE_OVERRIDE
only.
"""
from __future__ import annotations

from enum import Enum
from threading import Lock
from typing import Callable, Iterable, Mapping

from ..packet import AisPacket, CommentBlock, PacketTagging

# Line separator of rewritten packets
CRLF = "\r\n"

class Policy(Enum):
    """
    Policy used when tagging a packet
    """
    PREPEND_MISSING = "prepend_missing"
    REPLACE = "replace"
    MERGE_OVERRIDE = "merge_override"
    MERGE_PRESERVE = "merge_preserve"

def crop_sentences(lines: Iterable[str], remove_proprietary: bool) -> list[str]:
    """
    Keep only the sentences of `lines`.

    Each line is cut from its first '!' (or, lacking
    one, its first '$') up to and including the two
    checksum digits after the next '*'. Lines without
    start marker, without '*' or too short for a
    checksum are dropped, as are proprietary '$P'
    sentences if `remove_proprietary` is set.
    """
    cropped = []
    for line in lines:
        start = line.find("!")
        if start < 0:
            start = line.find("$")
            if remove_proprietary and start >= 0 and line.startswith("$P", start):
                continue
        if start < 0:
            # Not a sentence line
            continue
        end = line.find("*", start)
        if end < 0:
            # Not a valid sentence line
            continue
        end += 3
        if end > len(line):
            # Not a valid sentence line
            continue
        cropped.append(line[start:end])
    return cropped

def join_sentences(lines: Iterable[str]) -> str:
    return CRLF.join(lines)

class TaggingTransformer:
    """
    Transformer that, given a tagging and a policy,
    rewrites the tagging of AIS packets.

    Parameters:
    - policy (Policy | str): Tagging policy. Strings are
        matched against the policy names.
    - tagging (PacketTagging): Template applied to every packet.
        The transformer keeps its own copy.

    Extra tags can be passed to each `transform` call, or
    set on the transformer to apply to every call that does
    not pass its own. The transformer's extra tags are
    guarded by a lock and read once per call.
    """
    def __init__(self, policy: Policy | str, tagging: PacketTagging) -> None:
        if policy is None or tagging is None:
            raise TypeError("Policy and tagging are required.")
        self.policy = self._to_policy(policy)
        self._tagging = tagging.copy()
        self._extra_tags: dict[str, str] = {}
        self._lock = Lock()
        self._handlers: dict[Policy, Callable[[AisPacket, Mapping[str, str]], AisPacket | None]] = {
            Policy.PREPEND_MISSING: self._prepend_transform,
            Policy.REPLACE: self._replace_transform,
            Policy.MERGE_OVERRIDE: self._merge_override_transform,
            Policy.MERGE_PRESERVE: self._merge_preserve_transform,
        }

    @staticmethod
    def _to_policy(policy: Policy | str) -> Policy:
        if isinstance(policy, Policy):
            return policy
        try:
            return Policy[str(policy).upper()]
        except KeyError:
            raise ValueError(f"Unknown tagging policy {policy!r}.") from None

    def __repr__(self) -> str:
        return (
            f"<TaggingTransformer(policy={self.policy.name},"
            f"tagging={self._tagging!r})>"
        )

    @property
    def tagging(self) -> PacketTagging:
        return self._tagging.copy()

    # Extra tags --------------------------------------------------------
    @property
    def extra_tags(self) -> dict[str, str]:
        """
        Snapshot of the transformer's extra tags.
        """
        with self._lock:
            return dict(self._extra_tags)

    def set_extra_tag(self, key: str, value: str) -> None:
        with self._lock:
            self._extra_tags[key] = str(value)

    def remove_extra_tag(self, key: str) -> None:
        with self._lock:
            self._extra_tags.pop(key, None)

    def clear_extra_tags(self) -> None:
        with self._lock:
            self._extra_tags.clear()

    # Transformation ----------------------------------------------------
    def transform(self,
                  packet: AisPacket,
                  extra_tags: Mapping[str, str] | None = None) -> AisPacket | None:
        """
        Rewrite the tagging of `packet`.

        Returns None if the policy does not apply
        to the packet (merge policies on a packet
        without sentence frame).
        """
        if extra_tags is None:
            extra_tags = self.extra_tags
        handler = self._handlers.get(self.policy)
        if handler is None:
            raise ValueError(f"Policy {self.policy} not implemented.")
        return handler(packet, extra_tags)

    def _prepend_transform(self, packet: AisPacket, extra_tags: Mapping[str, str]) -> AisPacket:
        # What is missing
        added = PacketTagging.parse(packet).merge_missing(self._tagging)
        cb = added.comment_block()
        self._add_extra_tags(cb, packet.comment_block(), extra_tags, override=False)
        # Only make a new packet if there is something to prepend
        if cb.is_empty():
            return packet
        return self._new_packet(packet, cb.encode() + CRLF + packet.raw)

    def _replace_transform(self, packet: AisPacket, extra_tags: Mapping[str, str]) -> AisPacket:
        tagging = self._tagging.copy()
        tagging.timestamp = packet.timestamp
        cb = tagging.comment_block()
        self._add_extra_tags(cb, None, extra_tags, override=True)
        return self._new_packet(packet, self._with_comment_block(
            cb, crop_sentences(packet.lines, remove_proprietary=True)
        ))

    def _merge_override_transform(self, packet: AisPacket, extra_tags: Mapping[str, str]) -> AisPacket | None:
        return self._merge_transform(packet, extra_tags, override=True)

    def _merge_preserve_transform(self, packet: AisPacket, extra_tags: Mapping[str, str]) -> AisPacket | None:
        return self._merge_transform(packet, extra_tags, override=False)

    def _merge_transform(self,
                         packet: AisPacket,
                         extra_tags: Mapping[str, str],
                         override: bool) -> AisPacket | None:
        frame = packet.vdm()
        if frame is None:
            return None
        cb = frame.comment_block
        # Without a block of its own everything counts as missing
        present = cb
        if cb is None:
            cb = CommentBlock()
        if override:
            self._tagging.comment_block(cb)
        else:
            self._tagging.comment_block_preserve(cb)
        self._add_extra_tags(cb, present, extra_tags, override=override)
        return self._new_packet(packet, self._with_comment_block(
            cb, crop_sentences(packet.lines, remove_proprietary=False)
        ))

    @staticmethod
    def _add_extra_tags(cb: CommentBlock,
                        present: CommentBlock | None,
                        extra_tags: Mapping[str, str],
                        override: bool) -> None:
        """
        Add extra tags to `cb`. Without `override`, keys
        already in `present` are skipped.
        """
        for key, value in extra_tags.items():
            if override or present is None or not present.contains(key):
                cb.add_string(key, value)

    @staticmethod
    def _with_comment_block(cb: CommentBlock, sentences: list[str]) -> str:
        text = join_sentences(sentences)
        if not cb.is_empty():
            text = cb.encode() + CRLF + text
        return text

    @staticmethod
    def _new_packet(old: AisPacket, raw: str) -> AisPacket:
        return AisPacket.from_text(raw, old.receive_timestamp)
