"""
quorumsig/protocol/decoder.py

Decode a serialized multisig signature back into its partial signatures.

Each stored signature carries its own scheme flag; the signer's public key
comes from pk_map[bitmap[i]] with the trailing weight byte removed. Results
are returned in stored order, which is the order the partials were combined
in, not bitmap order.
"""

import base64
import binascii
import logging
from typing import List, Union

from ..errors import BitmapIndexOutOfRangeError, InvalidEncodingError
from ..publickey import PublicKey
from ..scheme import MULTISIG_FLAG
from ..signature import PartialSignature, split_compressed
from .messages import MultiSigAggregate

logger = logging.getLogger("quorumsig.protocol.decoder")


def _b64decode(value: Union[str, bytes]) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Multisig signature is not valid base64: {e}") from e


def parse_multisig(value: Union[str, bytes]) -> MultiSigAggregate:
    """
    Check the MULTISIG flag and decode the aggregate structure.

    Raises:
        InvalidEncodingError: If value is not base64, is empty, or does not
            start with the MULTISIG flag
        MalformedAggregateError: If the remaining bytes are not an aggregate
    """
    raw = _b64decode(value)
    if not raw:
        raise InvalidEncodingError("Multisig signature is empty")
    if raw[0] != MULTISIG_FLAG:
        raise InvalidEncodingError(
            f"Invalid MultiSig flag: expected {MULTISIG_FLAG:#04x}, got {raw[0]:#04x}"
        )
    return MultiSigAggregate.from_bytes(raw[1:])


def decode_multisig(value: Union[str, bytes]) -> List[PartialSignature]:
    """
    Decode a serialized multisig signature.

    Returns:
        One PartialSignature per stored signature, in stored order

    Raises:
        InvalidEncodingError: Bad base64, empty input or wrong leading flag
        MalformedAggregateError: Structural mismatch in the aggregate bytes
        BitmapIndexOutOfRangeError: A bitmap entry is past the end of pk_map
        UnknownSchemeFlagError: A stored signature has an unknown scheme flag
    """
    aggregate = parse_multisig(value)
    pk_map = aggregate.multisig_pk.pk_map

    result: List[PartialSignature] = []
    for compressed, pk_index in zip(aggregate.sigs, aggregate.bitmap):
        if pk_index >= len(pk_map):
            raise BitmapIndexOutOfRangeError(pk_index, len(pk_map))

        scheme, signature = split_compressed(compressed)
        public_key = PublicKey(scheme, pk_map[pk_index][:-1])
        result.append(PartialSignature(scheme=scheme, signature=signature, public_key=public_key))

    logger.debug(f"Decoded {len(result)} signatures from multisig")
    return result
