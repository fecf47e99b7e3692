"""
Packet transformers (:mod:`pyscenario.transform`)
"""
from .tagging import (
    Policy, TaggingTransformer,
    crop_sentences, join_sentences
)
