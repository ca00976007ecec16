"""
quorumsig/protocol/combiner.py

Combine partial signatures into one multisig aggregate.

Flow:
1. Map the committee to pk_map entries (raw key || weight)
2. For each partial, in the caller's order, find the signer in the committee
3. Record the signer's committee index in the bitmap and its compressed
   signature (flag || raw signature) in sigs
4. Serialize the aggregate and prefix the MULTISIG flag; return base64

The combiner does not check that the collected weight reaches the threshold.
That is left to the verifier on the ledger.
"""

import base64
import logging
from typing import List, Sequence, Set, Union

from ..config import DEFAULT_CONFIG, MultiSigConfig
from ..errors import DuplicateSignerError, UnknownSignerError
from ..publickey import (
    BytesLike,
    WeightedKey,
    check_committee_capacity,
    coerce_threshold,
    find_member,
)
from ..scheme import MULTISIG_FLAG
from ..signature import PartialSignature
from .messages import MultiSigAggregate, MultiSigPublicKey

logger = logging.getLogger("quorumsig.protocol.combiner")

PartialInput = Union[PartialSignature, str]


def to_pk_map(committee: Sequence[WeightedKey]) -> List[bytes]:
    """pk_map entries for a committee, in committee order."""
    return [member.to_pk_map_entry() for member in committee]


def build_multisig_public_key(
    committee: Sequence[WeightedKey],
    threshold: Union[int, BytesLike],
    config: MultiSigConfig = DEFAULT_CONFIG,
) -> MultiSigPublicKey:
    check_committee_capacity(committee, config)
    return MultiSigPublicKey(
        pk_map=to_pk_map(committee),
        threshold=coerce_threshold(threshold),
    )


def build_aggregate(
    partials: Sequence[PartialInput],
    committee: Sequence[WeightedKey],
    threshold: Union[int, BytesLike],
    config: MultiSigConfig = DEFAULT_CONFIG,
) -> MultiSigAggregate:
    """
    Assemble a MultiSigAggregate without encoding it.

    Raises:
        UnknownSignerError: If a partial's public key is not in the committee
        DuplicateSignerError: If two partials come from the same member
        CapacityExceededError: If the committee exceeds the configured ceilings
    """
    multisig_pk = build_multisig_public_key(committee, threshold, config)

    sigs: List[bytes] = []
    bitmap: List[int] = []
    seen: Set[int] = set()

    for position, partial in enumerate(partials):
        if isinstance(partial, str):
            partial = PartialSignature.from_serialized(partial)

        index = find_member(committee, partial.public_key)
        if index < 0:
            raise UnknownSignerError(
                f"Signer of partial signature {position} is not in the committee: "
                f"{partial.public_key!r}"
            )
        if index in seen:
            raise DuplicateSignerError(index)
        seen.add(index)

        bitmap.append(index)
        sigs.append(partial.to_compressed())

    return MultiSigAggregate(sigs=sigs, bitmap=bitmap, multisig_pk=multisig_pk)


def combine_partial_signatures(
    partials: Sequence[PartialInput],
    committee: Sequence[WeightedKey],
    threshold: Union[int, BytesLike],
    config: MultiSigConfig = DEFAULT_CONFIG,
) -> str:
    """
    Combine partial signatures into a serialized multisig signature.

    Args:
        partials: PartialSignature objects or serialized signature strings,
            in the order they should appear in the aggregate
        committee: Ordered committee the account was derived from
        threshold: Threshold as little-endian bytes, or an int encoded as u16
        config: Capacity ceilings to enforce

    Returns:
        base64(MULTISIG_FLAG || canonical aggregate bytes)
    """
    aggregate = build_aggregate(partials, committee, threshold, config)
    payload = bytes([MULTISIG_FLAG]) + aggregate.to_bytes()

    logger.debug(
        f"Combined {len(aggregate.sigs)} of {len(committee)} signatures, "
        f"bitmap={aggregate.bitmap}, {len(payload)} bytes"
    )
    return base64.b64encode(payload).decode("ascii")
