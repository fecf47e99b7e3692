"""
Raw AIS packets and their comment blocks (:mod:`pyscenario.packet`)
"""
from .commentblock import CommentBlock, CommentBlockError, checksum
from .packet import AisPacket, SentenceFrame
from .tagging import PacketTagging
