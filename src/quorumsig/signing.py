"""
quorumsig/signing.py

Keypairs for the member signature schemes, built on the cryptography library.

The multisig core treats signing as an opaque capability; this module is
that capability for callers and tests that need to produce or check real
partial signatures.

- Ed25519 signs the data as given.
- Secp256k1 and Secp256r1 sign SHA-256(data) with RFC 6979 deterministic
  ECDSA and emit the 64-byte r || s form with a low s value.

Usage:
    from quorumsig.signing import Ed25519Keypair, verify_partial

    keypair = Ed25519Keypair.from_secret_key(secret_bytes)
    partial = keypair.sign_partial(digest)

    is_valid = verify_partial(digest, partial)
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Type

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from .publickey import PublicKey
from .scheme import SignatureScheme
from .signature import PartialSignature

logger = logging.getLogger("quorumsig.signing")

SECRET_KEY_LENGTH = 32
ECDSA_SCALAR_LENGTH = 32

# Group orders, used to bring s into the lower half
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256R1_ORDER = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551


class Keypair(ABC):
    """Common interface of the per-scheme keypairs."""

    scheme: SignatureScheme

    @classmethod
    @abstractmethod
    def from_secret_key(cls, secret_key: bytes) -> "Keypair":
        pass

    @classmethod
    def generate(cls) -> "Keypair":
        """Create a keypair from fresh OS randomness."""
        return cls.from_secret_key(os.urandom(SECRET_KEY_LENGTH))

    @property
    @abstractmethod
    def public_key(self) -> PublicKey:
        pass

    @abstractmethod
    def sign_data(self, data: bytes) -> bytes:
        """Raw signature over data."""
        pass

    def sign_partial(self, data: bytes) -> PartialSignature:
        """Sign data and wrap the result with this keypair's public key."""
        return PartialSignature(
            scheme=self.scheme,
            signature=self.sign_data(data),
            public_key=self.public_key,
        )

    @staticmethod
    def _check_secret(secret_key: bytes) -> bytes:
        secret_key = bytes(secret_key)
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise ValueError(f"Secret key must be exactly {SECRET_KEY_LENGTH} bytes")
        return secret_key


# ============================================================================
# ED25519
# ============================================================================

class Ed25519Keypair(Keypair):
    """Ed25519 keypair; signatures are deterministic."""

    scheme = SignatureScheme.ED25519

    def __init__(self, private_key: ed25519.Ed25519PrivateKey):
        self._private_key = private_key
        raw = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self._public_key = PublicKey(self.scheme, raw)

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "Ed25519Keypair":
        seed = cls._check_secret(secret_key)
        return cls(ed25519.Ed25519PrivateKey.from_private_bytes(seed))

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    def sign_data(self, data: bytes) -> bytes:
        return self._private_key.sign(data)


# ============================================================================
# ECDSA (SECP256K1 / SECP256R1)
# ============================================================================

class _EcdsaKeypair(Keypair):
    """ECDSA keypair over SHA-256 with deterministic, compact, low-s signatures."""

    curve: ec.EllipticCurve
    order: int

    def __init__(self, private_key: ec.EllipticCurvePrivateKey):
        self._private_key = private_key
        raw = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )
        self._public_key = PublicKey(self.scheme, raw)

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "_EcdsaKeypair":
        scalar = int.from_bytes(cls._check_secret(secret_key), "big")
        if not 0 < scalar < cls.order:
            raise ValueError(f"Secret key is not a valid {cls.scheme.value} scalar")
        return cls(ec.derive_private_key(scalar, cls.curve))

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    def sign_data(self, data: bytes) -> bytes:
        der = self._private_key.sign(data, ec.ECDSA(hashes.SHA256(), deterministic_signing=True))
        r, s = decode_dss_signature(der)
        if s > self.order // 2:
            s = self.order - s
        return r.to_bytes(ECDSA_SCALAR_LENGTH, "big") + s.to_bytes(ECDSA_SCALAR_LENGTH, "big")


class Secp256k1Keypair(_EcdsaKeypair):
    scheme = SignatureScheme.SECP256K1
    curve = ec.SECP256K1()
    order = SECP256K1_ORDER


class Secp256r1Keypair(_EcdsaKeypair):
    scheme = SignatureScheme.SECP256R1
    curve = ec.SECP256R1()
    order = SECP256R1_ORDER


KEYPAIR_TYPES: Dict[SignatureScheme, Type[Keypair]] = {
    SignatureScheme.ED25519: Ed25519Keypair,
    SignatureScheme.SECP256K1: Secp256k1Keypair,
    SignatureScheme.SECP256R1: Secp256r1Keypair,
}

ECDSA_CURVES: Dict[SignatureScheme, ec.EllipticCurve] = {
    SignatureScheme.SECP256K1: ec.SECP256K1(),
    SignatureScheme.SECP256R1: ec.SECP256R1(),
}


def keypair_from_secret_key(scheme: SignatureScheme, secret_key: bytes) -> Keypair:
    """
    Create a keypair of the given scheme from a 32-byte secret.

    Raises:
        ValueError: If the scheme cannot sign (MULTISIG) or the secret is invalid
    """
    try:
        keypair_type = KEYPAIR_TYPES[scheme]
    except KeyError:
        raise ValueError(f"No keypair for scheme {scheme!r}") from None
    return keypair_type.from_secret_key(secret_key)


# ============================================================================
# VERIFICATION
# ============================================================================

def verify_signature(data: bytes, signature: bytes, public_key: PublicKey) -> bool:
    """
    Verify a raw signature against a public key.

    Returns:
        True if the signature is valid; False for a bad signature, a
        malformed key, or a signature of the wrong size
    """
    try:
        if public_key.scheme is SignatureScheme.ED25519:
            verifier = ed25519.Ed25519PublicKey.from_public_bytes(public_key.to_bytes())
            verifier.verify(signature, data)
            return True

        curve = ECDSA_CURVES[public_key.scheme]
        if len(signature) != 2 * ECDSA_SCALAR_LENGTH:
            return False
        verifier = ec.EllipticCurvePublicKey.from_encoded_point(curve, public_key.to_bytes())
        r = int.from_bytes(signature[:ECDSA_SCALAR_LENGTH], "big")
        s = int.from_bytes(signature[ECDSA_SCALAR_LENGTH:], "big")
        verifier.verify(encode_dss_signature(r, s), data, ec.ECDSA(hashes.SHA256()))
        return True
    except InvalidSignature:
        return False
    except ValueError as e:
        logger.debug(f"Could not verify {public_key.scheme.name} signature: {e}")
        return False


def verify_partial(data: bytes, partial: PartialSignature) -> bool:
    """Verify a partial signature over data with its own public key."""
    return verify_signature(data, partial.signature, partial.public_key)
