from .logger import logger

from .structs import BoundingBox, Position, ShipType
from .decode import (
    PositionReport, StaticVoyageReport, OtherMessage,
    DecodeFailure, read_messages
)
from .tracker import (
    ScenarioTracker, TargetRegistry, Target, Timeline,
    PositionSample, SampleKind, BoundingBoxAccumulator,
    NoPriorSample, IdentityConflict, UnknownTarget
)
from .packet import AisPacket, CommentBlock, CommentBlockError, PacketTagging
from .transform import Policy, TaggingTransformer, crop_sentences

__version__ = "0.1.0"
logger.info(f"You are using pyscenario version {__version__}")
