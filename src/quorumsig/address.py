"""
quorumsig/address.py

Multisig account address derivation.

The address commits to the committee in order, so the same keys and weights
listed in a different order give a different account:

    blake2b-256(MULTISIG_FLAG || threshold || (flag_i || pk_i || weight_i)...)

hex encoded, truncated to ADDRESS_LENGTH bytes and prefixed with "0x".

Usage:
    from quorumsig.address import derive_multisig_address

    address = derive_multisig_address(
        [WeightedKey(pk1, 2), WeightedKey(pk2, 3)],
        threshold=b"\\x04\\x00",
    )
"""

import hashlib
import logging
import re
from typing import Sequence, Union

from .config import DEFAULT_CONFIG, DEFAULT_HASH_DIGEST_SIZE, MultiSigConfig
from .publickey import BytesLike, WeightedKey, check_committee_capacity, coerce_threshold
from .scheme import MULTISIG_FLAG

logger = logging.getLogger("quorumsig.address")

_HEX_RE = re.compile(r"\A[0-9a-f]*\Z")


def derive_multisig_address(
    committee: Sequence[WeightedKey],
    threshold: Union[int, BytesLike],
    config: MultiSigConfig = DEFAULT_CONFIG,
) -> str:
    """
    Derive the account address of a weighted committee.

    Args:
        committee: Ordered committee members
        threshold: Threshold as little-endian bytes, or an int encoded as u16
        config: Capacity ceilings to enforce

    Returns:
        "0x"-prefixed lowercase hex address

    Raises:
        ValueError: If the committee or threshold is empty
        CapacityExceededError: If the committee exceeds the configured ceilings
    """
    check_committee_capacity(committee, config)
    threshold_bytes = coerce_threshold(threshold)

    # Sized to this committee on every call
    buffer = bytearray([MULTISIG_FLAG])
    buffer.extend(threshold_bytes)
    for member in committee:
        buffer.append(member.public_key.flag)
        buffer.extend(member.public_key.to_bytes())
        buffer.append(member.weight)

    digest = hashlib.blake2b(bytes(buffer), digest_size=DEFAULT_HASH_DIGEST_SIZE).hexdigest()
    address = "0x" + digest[:config.address_length * 2]
    logger.debug(f"Derived multisig address {address} for {len(committee)} members")
    return address


def normalize_address(value: str, length: int = DEFAULT_CONFIG.address_length) -> str:
    """
    Lower-case an address and left-pad it with zeros to the full length.

    Raises:
        ValueError: If value is not hex or is longer than the address length
    """
    body = value.strip().lower()
    if body.startswith("0x"):
        body = body[2:]
    if not _HEX_RE.match(body):
        raise ValueError(f"Address is not hex: {value!r}")
    if len(body) > length * 2:
        raise ValueError(f"Address longer than {length} bytes: {value!r}")
    return "0x" + body.rjust(length * 2, "0")


def is_valid_address(value: str, length: int = DEFAULT_CONFIG.address_length) -> bool:
    """Check for an already-normalized "0x" address of the full length."""
    if not isinstance(value, str) or not value.startswith("0x"):
        return False
    body = value[2:]
    return len(body) == length * 2 and bool(_HEX_RE.match(body))
