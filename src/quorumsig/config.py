"""
quorumsig/config.py

Configuration constants and data classes for quorumsig.
"""

from dataclasses import dataclass
from typing import Optional


# Derived addresses are the first ADDRESS_LENGTH bytes of the digest
ADDRESS_LENGTH = 32

# blake2b digest size used for address derivation
DEFAULT_HASH_DIGEST_SIZE = 32

# Committee ceiling enforced by the ledger
MAX_SIGNERS = 10

# Largest raw public key among the supported schemes (compressed secp256k1/r1)
MAX_PUBLIC_KEY_LENGTH = 33

# Thresholds are encoded as a little-endian u16
THRESHOLD_LENGTH = 2

# Bitmap entries are fixed-width little-endian integers
BITMAP_INDEX_WIDTH = 2

# Weight is a single byte and zero-weight members are meaningless
MIN_WEIGHT = 1
MAX_WEIGHT = 255

# Raw public key sizes per scheme name
PUBLIC_KEY_SIZES = {
    "ED25519": 32,
    "SECP256K1": 33,
    "SECP256R1": 33,
}

# Raw signature sizes per scheme name (r || s for the ECDSA curves)
SIGNATURE_SIZES = {
    "ED25519": 64,
    "SECP256K1": 64,
    "SECP256R1": 64,
}


@dataclass(frozen=True)
class MultiSigConfig:
    """
    Capacity ceilings applied when deriving addresses and combining signatures.

    A ceiling of None disables that check. The committee size is still
    bounded by what a bitmap entry can index.
    """
    max_signers: Optional[int] = MAX_SIGNERS
    max_public_key_length: Optional[int] = MAX_PUBLIC_KEY_LENGTH
    address_length: int = ADDRESS_LENGTH

    def __post_init__(self):
        if self.max_signers is not None and self.max_signers < 1:
            raise ValueError("max_signers must be at least 1")
        if self.max_public_key_length is not None and self.max_public_key_length < 1:
            raise ValueError("max_public_key_length must be at least 1")
        if not 1 <= self.address_length <= DEFAULT_HASH_DIGEST_SIZE:
            raise ValueError(
                f"address_length must be between 1 and {DEFAULT_HASH_DIGEST_SIZE}"
            )

    @property
    def max_bitmap_index(self) -> int:
        """Largest committee index a bitmap entry can carry."""
        return (1 << (8 * BITMAP_INDEX_WIDTH)) - 1


DEFAULT_CONFIG = MultiSigConfig()
