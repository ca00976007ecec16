"""
Tests for quorumsig/address.py

Tests multisig address derivation against known vectors and the
capacity rules for committees.
"""

import hashlib

import pytest

from quorumsig.address import derive_multisig_address, normalize_address, is_valid_address
from quorumsig.config import MultiSigConfig
from quorumsig.errors import CapacityExceededError
from quorumsig.publickey import PublicKey, WeightedKey
from quorumsig.scheme import SignatureScheme


# ============================================================================
# TEST DATA
# ============================================================================

ED25519_PK_BYTES = bytes([
    13, 125, 171, 53, 140, 141, 173, 170, 78, 250, 0, 73, 167, 91, 7, 67,
    101, 85, 177, 10, 54, 130, 25, 187, 104, 15, 112, 87, 19, 73, 215, 117,
])
SECP256K1_PK_BYTES = bytes([
    2, 14, 23, 205, 89, 57, 228, 107, 25, 102, 65, 150, 140, 215, 89, 145, 11,
    162, 87, 126, 39, 250, 115, 253, 227, 135, 109, 185, 190, 197, 188, 235, 43,
])
VECTOR_1_ADDRESS = "0x877aa5c525c5662060e9f01c6f8a931cdc4917ac926666ac9b61562ead3e3238"

# Keys derived from the same secret (Ed25519 and Secp256k1) plus an
# Ed25519 key from an all-zero seed
VECTOR_2_KEYS = [
    PublicKey.from_hex(SignatureScheme.ED25519, "5ae220b4b2f65e977c12ede61579ff5170b6c22c006168c37b5e7c61af018083"),
    PublicKey.from_hex(SignatureScheme.SECP256K1, "021d152307c6b72b0ed0418b0e70cd80e7f5295b8d86f5722d3f5213fbd2394f36"),
    PublicKey.from_hex(SignatureScheme.ED25519, "3b6a27bcceb6a42d62a3a8d02a6f0d73653215771de243a63ac048a18b59da29"),
]
VECTOR_2_ADDRESS = "0x37b048598ca569756146f4e8ea41666c657406db154a31f11bb5c1cbaf0b98d7"


def vector_1_committee():
    return [
        WeightedKey(PublicKey(SignatureScheme.ED25519, ED25519_PK_BYTES), 2),
        WeightedKey(PublicKey(SignatureScheme.SECP256K1, SECP256K1_PK_BYTES), 3),
    ]


def vector_2_committee():
    return [WeightedKey(pk, weight) for pk, weight in zip(VECTOR_2_KEYS, [1, 2, 3])]


# ============================================================================
# KNOWN VECTORS
# ============================================================================

class TestKnownVectors:
    """Addresses that must match the ledger's own derivation."""

    def test_vector_1(self):
        """Two keys, weights 2 and 3, threshold 4."""
        address = derive_multisig_address(vector_1_committee(), bytes([4, 0]))
        assert address == VECTOR_1_ADDRESS

    def test_vector_2(self):
        """Three keys, weights 1, 2, 3, threshold 3."""
        address = derive_multisig_address(vector_2_committee(), bytes([3, 0]))
        assert address == VECTOR_2_ADDRESS

    def test_integer_threshold_matches_bytes(self):
        """An int threshold is encoded as little-endian u16."""
        assert derive_multisig_address(vector_1_committee(), 4) == VECTOR_1_ADDRESS

    def test_list_threshold_matches_bytes(self):
        """A list of ints is accepted as threshold bytes."""
        assert derive_multisig_address(vector_1_committee(), [4, 0]) == VECTOR_1_ADDRESS

    def test_matches_manual_hash(self):
        """Address is blake2b-256 over the flagged committee layout."""
        buffer = bytes([0x03, 4, 0, 0x00]) + ED25519_PK_BYTES + bytes([2, 0x01]) + SECP256K1_PK_BYTES + bytes([3])
        expected = "0x" + hashlib.blake2b(buffer, digest_size=32).hexdigest()
        assert derive_multisig_address(vector_1_committee(), bytes([4, 0])) == expected


# ============================================================================
# DETERMINISM
# ============================================================================

class TestDeterminism:
    """Address depends on every input, including order."""

    def test_same_input_same_address(self):
        """Repeated derivation gives the same address."""
        first = derive_multisig_address(vector_2_committee(), bytes([3, 0]))
        second = derive_multisig_address(vector_2_committee(), bytes([3, 0]))
        assert first == second

    def test_permuted_committee_changes_address(self):
        """Committee order is part of the account identity."""
        committee = vector_1_committee()
        reversed_committee = list(reversed(committee))
        assert (
            derive_multisig_address(committee, bytes([4, 0]))
            != derive_multisig_address(reversed_committee, bytes([4, 0]))
        )

    def test_weight_changes_address(self):
        """Changing a weight changes the address."""
        committee = vector_1_committee()
        committee[0] = WeightedKey(committee[0].public_key, 1)
        assert derive_multisig_address(committee, bytes([4, 0])) != VECTOR_1_ADDRESS

    def test_threshold_changes_address(self):
        """Changing the threshold changes the address."""
        assert derive_multisig_address(vector_1_committee(), bytes([5, 0])) != VECTOR_1_ADDRESS

    def test_scheme_changes_address(self):
        """Same raw bytes under a different scheme give a different address."""
        committee = vector_1_committee()
        committee[1] = WeightedKey(PublicKey(SignatureScheme.SECP256R1, SECP256K1_PK_BYTES), 3)
        assert derive_multisig_address(committee, bytes([4, 0])) != VECTOR_1_ADDRESS

    def test_address_format(self):
        """Addresses are 0x plus 64 lowercase hex characters."""
        address = derive_multisig_address(vector_2_committee(), bytes([3, 0]))
        assert address.startswith("0x")
        assert len(address) == 66
        assert address == address.lower()
        assert is_valid_address(address)


# ============================================================================
# CAPACITY
# ============================================================================

class TestCapacity:
    """Committees are never truncated; ceilings fail loudly."""

    def test_empty_committee_rejected(self):
        """An empty committee has no address."""
        with pytest.raises(ValueError, match="at least one member"):
            derive_multisig_address([], bytes([1, 0]))

    def test_empty_threshold_rejected(self):
        """Threshold bytes must not be empty."""
        with pytest.raises(ValueError, match="Threshold"):
            derive_multisig_address(vector_1_committee(), b"")

    def test_max_signers_allowed(self):
        """A committee at the ceiling is accepted."""
        committee = [
            WeightedKey(PublicKey(SignatureScheme.ED25519, bytes([i]) * 32), 1)
            for i in range(10)
        ]
        assert is_valid_address(derive_multisig_address(committee, 5))

    def test_too_many_signers(self):
        """One member past the ceiling raises CapacityExceededError."""
        committee = [
            WeightedKey(PublicKey(SignatureScheme.ED25519, bytes([i]) * 32), 1)
            for i in range(11)
        ]
        with pytest.raises(CapacityExceededError, match="11 members"):
            derive_multisig_address(committee, 5)

    def test_raised_ceiling(self):
        """A config with a larger ceiling accepts a larger committee."""
        committee = [
            WeightedKey(PublicKey(SignatureScheme.ED25519, bytes([i]) * 32), 1)
            for i in range(40)
        ]
        config = MultiSigConfig(max_signers=64)
        assert is_valid_address(derive_multisig_address(committee, 20, config=config))

    def test_unbounded_committee_uses_every_member(self):
        """Without a ceiling, the last member still affects the address."""
        config = MultiSigConfig(max_signers=None)
        committee = [
            WeightedKey(PublicKey(SignatureScheme.ED25519, bytes([i % 256]) * 32), 1)
            for i in range(100)
        ]
        changed = committee[:-1] + [WeightedKey(committee[-1].public_key, 2)]
        assert (
            derive_multisig_address(committee, 50, config=config)
            != derive_multisig_address(changed, 50, config=config)
        )

    def test_key_too_long(self):
        """Keys longer than the configured maximum raise CapacityExceededError."""
        committee = [WeightedKey(PublicKey(SignatureScheme.ED25519, bytes(64)), 1)]
        with pytest.raises(CapacityExceededError, match="64 bytes"):
            derive_multisig_address(committee, 1)

    def test_long_key_with_raised_limit(self):
        """Long keys are hashed in full when the limit allows them."""
        config = MultiSigConfig(max_public_key_length=96)
        short = [WeightedKey(PublicKey(SignatureScheme.SECP256R1, bytes(64) + b"\x01"), 1)]
        longer = [WeightedKey(PublicKey(SignatureScheme.SECP256R1, bytes(64) + b"\x02"), 1)]
        assert (
            derive_multisig_address(short, 1, config=config)
            != derive_multisig_address(longer, 1, config=config)
        )


# ============================================================================
# NORMALIZATION
# ============================================================================

class TestNormalizeAddress:
    """Tests for normalize_address and is_valid_address."""

    def test_pads_short_address(self):
        """Short addresses are left-padded with zeros."""
        assert normalize_address("0x2") == "0x" + "0" * 63 + "2"

    def test_lowercases_and_adds_prefix(self):
        """Upper-case input without prefix is normalized."""
        upper = VECTOR_1_ADDRESS[2:].upper()
        assert normalize_address(upper) == VECTOR_1_ADDRESS

    def test_rejects_non_hex(self):
        """Non-hex characters are rejected."""
        with pytest.raises(ValueError, match="not hex"):
            normalize_address("0xzz")

    def test_rejects_too_long(self):
        """Addresses longer than 32 bytes are rejected."""
        with pytest.raises(ValueError, match="longer"):
            normalize_address("0x" + "1" * 65)

    def test_is_valid_address(self):
        """Only full-length 0x lowercase hex is valid."""
        assert is_valid_address(VECTOR_1_ADDRESS)
        assert not is_valid_address(VECTOR_1_ADDRESS[2:])
        assert not is_valid_address("0x1234")
        assert not is_valid_address(VECTOR_1_ADDRESS.upper().replace("0X", "0x"))


# ============================================================================
# CONCURRENCY
# ============================================================================

class TestConcurrency:
    """Derivation holds no shared state between calls."""

    def test_parallel_derivation(self):
        """Threads deriving different committees get their own results."""
        from concurrent.futures import ThreadPoolExecutor

        committees = [vector_1_committee(), vector_2_committee()] * 50
        thresholds = [bytes([4, 0]), bytes([3, 0])] * 50

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(derive_multisig_address, committees, thresholds))

        assert results == [VECTOR_1_ADDRESS, VECTOR_2_ADDRESS] * 50
