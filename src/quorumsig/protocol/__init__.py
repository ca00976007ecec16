"""
quorumsig/protocol/

Wire format of multisig aggregates: canonical encoding, combining and decoding.
"""

from .bcs import Serializer, Deserializer
from .messages import MultiSigPublicKey, MultiSigAggregate
from .combiner import (
    combine_partial_signatures,
    build_aggregate,
    build_multisig_public_key,
    to_pk_map,
)
from .decoder import decode_multisig, parse_multisig

__all__ = [
    # Canonical encoding
    "Serializer",
    "Deserializer",
    "MultiSigPublicKey",
    "MultiSigAggregate",
    # Combining
    "combine_partial_signatures",
    "build_aggregate",
    "build_multisig_public_key",
    "to_pk_map",
    # Decoding
    "decode_multisig",
    "parse_multisig",
]
