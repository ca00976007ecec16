"""
quorumsig/publickey.py

Public keys as a tagged union of (scheme, raw bytes), plus the weighted
committee members built from them.

Nothing in the multisig core needs scheme-specific behaviour from a key:
only its flag, its raw bytes, their length, and byte-exact equality. Actual
verification lives in quorumsig.signing.
"""

import base64
import binascii
import hashlib
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from .config import (
    DEFAULT_CONFIG,
    DEFAULT_HASH_DIGEST_SIZE,
    MAX_WEIGHT,
    MIN_WEIGHT,
    PUBLIC_KEY_SIZES,
    THRESHOLD_LENGTH,
    MultiSigConfig,
)
from .errors import CapacityExceededError, UnknownSchemeError
from .scheme import SignatureScheme, flag_for_scheme, scheme_for_flag

BytesLike = Union[bytes, bytearray, memoryview, Sequence[int]]


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (int, str)):
        raise ValueError(f"Expected a byte sequence, got {type(data).__name__}")
    try:
        return bytes(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Expected a byte sequence: {e}") from e


@dataclass(frozen=True)
class PublicKey:
    """
    A committee member's public key.

    Equality and hashing are over (scheme, raw bytes), which is the same as
    comparing the flagged byte encoding.
    """
    scheme: SignatureScheme
    data: bytes

    def __post_init__(self):
        if not isinstance(self.scheme, SignatureScheme):
            raise UnknownSchemeError(f"Unknown signature scheme: {self.scheme!r}")
        if not self.scheme.is_member_scheme:
            raise ValueError("A MultiSig key cannot be used as a committee member key")
        raw = _to_bytes(self.data)
        if not raw:
            raise ValueError("Public key bytes must not be empty")
        object.__setattr__(self, "data", raw)

    def __repr__(self) -> str:
        return f"PublicKey({self.scheme.name}, {self.data.hex()})"

    def __len__(self) -> int:
        return len(self.data)

    @property
    def flag(self) -> int:
        return flag_for_scheme(self.scheme)

    @property
    def has_expected_length(self) -> bool:
        """Whether the raw key has the usual size for its scheme."""
        return len(self.data) == PUBLIC_KEY_SIZES[self.scheme.name]

    def to_bytes(self) -> bytes:
        """Raw key bytes, without the scheme flag."""
        return self.data

    def to_flagged_bytes(self) -> bytes:
        """Scheme flag followed by the raw key bytes."""
        return bytes([self.flag]) + self.data

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_address(self) -> str:
        """Single-key account address: blake2b-256 over flag || raw key."""
        digest = hashlib.blake2b(self.to_flagged_bytes(), digest_size=DEFAULT_HASH_DIGEST_SIZE)
        return "0x" + digest.hexdigest()

    @classmethod
    def from_flagged_bytes(cls, data: BytesLike) -> "PublicKey":
        """
        Parse flag || raw key bytes.

        Raises:
            ValueError: If data is empty
            UnknownSchemeFlagError: If the leading flag is not registered
        """
        raw = _to_bytes(data)
        if len(raw) < 2:
            raise ValueError("Flagged public key must hold a flag and key bytes")
        return cls(scheme_for_flag(raw[0]), raw[1:])

    @classmethod
    def from_base64(cls, scheme: SignatureScheme, value: str) -> "PublicKey":
        try:
            raw = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 public key: {e}") from e
        return cls(scheme, raw)

    @classmethod
    def from_hex(cls, scheme: SignatureScheme, value: str) -> "PublicKey":
        if value.startswith("0x"):
            value = value[2:]
        return cls(scheme, bytes.fromhex(value))


@dataclass(frozen=True)
class WeightedKey:
    """A committee member: a public key and its voting weight (1-255)."""
    public_key: PublicKey
    weight: int

    def __post_init__(self):
        if not isinstance(self.public_key, PublicKey):
            raise ValueError(f"Expected a PublicKey, got {type(self.public_key).__name__}")
        if isinstance(self.weight, bool) or not isinstance(self.weight, int):
            raise ValueError(f"Weight must be an integer, got {self.weight!r}")
        if not MIN_WEIGHT <= self.weight <= MAX_WEIGHT:
            raise ValueError(
                f"Weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}, got {self.weight}"
            )

    def to_pk_map_entry(self) -> bytes:
        """Raw key bytes followed by the weight byte, as stored in pk_map."""
        return self.public_key.to_bytes() + bytes([self.weight])


Committee = List[WeightedKey]


def make_committee(members: Iterable[Union[WeightedKey, Tuple[PublicKey, int]]]) -> Committee:
    """
    Build a committee from WeightedKey objects or (PublicKey, weight) pairs.

    Order is preserved; it is part of the committee's identity.
    """
    committee: Committee = []
    for member in members:
        if isinstance(member, WeightedKey):
            committee.append(member)
        else:
            public_key, weight = member
            committee.append(WeightedKey(public_key, weight))
    return committee


def total_weight(committee: Sequence[WeightedKey]) -> int:
    return sum(member.weight for member in committee)


def find_member(committee: Sequence[WeightedKey], public_key: PublicKey) -> int:
    """Index of public_key in committee, or -1 if it is not a member."""
    for index, member in enumerate(committee):
        if member.public_key == public_key:
            return index
    return -1


def check_committee_capacity(committee: Sequence[WeightedKey], config: MultiSigConfig = DEFAULT_CONFIG) -> None:
    """
    Check a committee against the configured ceilings.

    Raises:
        ValueError: If the committee is empty
        CapacityExceededError: If the committee or one of its keys is too large
    """
    if not committee:
        raise ValueError("Committee must have at least one member")

    if config.max_signers is not None and len(committee) > config.max_signers:
        raise CapacityExceededError(
            f"Committee has {len(committee)} members, maximum is {config.max_signers}"
        )
    if len(committee) - 1 > config.max_bitmap_index:
        raise CapacityExceededError(
            f"Committee has {len(committee)} members, bitmap can index {config.max_bitmap_index + 1}"
        )

    if config.max_public_key_length is not None:
        for index, member in enumerate(committee):
            if len(member.public_key) > config.max_public_key_length:
                raise CapacityExceededError(
                    f"Public key at index {index} is {len(member.public_key)} bytes, "
                    f"maximum is {config.max_public_key_length}"
                )


# ============================================================================
# THRESHOLD
# ============================================================================

def threshold_to_bytes(value: int, length: int = THRESHOLD_LENGTH) -> bytes:
    """Encode a threshold as a little-endian integer of the given width."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Threshold must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"Threshold must not be negative, got {value}")
    try:
        return value.to_bytes(length, "little")
    except OverflowError:
        raise ValueError(f"Threshold {value} does not fit in {length} bytes") from None


def threshold_from_bytes(data: BytesLike) -> int:
    raw = _to_bytes(data)
    if not raw:
        raise ValueError("Threshold bytes must not be empty")
    return int.from_bytes(raw, "little")


def coerce_threshold(threshold: Union[int, BytesLike]) -> bytes:
    """Accept an integer threshold or its little-endian bytes."""
    if isinstance(threshold, int) and not isinstance(threshold, bool):
        return threshold_to_bytes(threshold)
    raw = _to_bytes(threshold)
    if not raw:
        raise ValueError("Threshold bytes must not be empty")
    return raw
