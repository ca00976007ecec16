"""
quorumsig/signature.py

Partial signatures: one committee member's signature, self-describing its
scheme, together with the signer's public key.

Two byte encodings are used:
- compressed signature: flag || raw signature (what an aggregate stores)
- serialized signature: base64(flag || raw signature || raw public key),
  the form produced by external signers
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Tuple, Union

from .config import PUBLIC_KEY_SIZES
from .errors import InvalidEncodingError, MalformedAggregateError, UnknownSchemeFlagError
from .publickey import BytesLike, PublicKey, _to_bytes
from .scheme import SignatureScheme, flag_for_scheme, scheme_for_flag


@dataclass(frozen=True)
class PartialSignature:
    """A single signer's contribution to a multisig aggregate."""
    scheme: SignatureScheme
    signature: bytes
    public_key: PublicKey

    def __post_init__(self):
        if not isinstance(self.scheme, SignatureScheme) or not self.scheme.is_member_scheme:
            raise ValueError(f"Partial signatures cannot use scheme {self.scheme!r}")
        if not isinstance(self.public_key, PublicKey):
            raise ValueError(f"Expected a PublicKey, got {type(self.public_key).__name__}")
        if self.public_key.scheme is not self.scheme:
            raise ValueError(
                f"Signature scheme {self.scheme.name} does not match "
                f"public key scheme {self.public_key.scheme.name}"
            )
        raw = _to_bytes(self.signature)
        if not raw:
            raise ValueError("Signature bytes must not be empty")
        object.__setattr__(self, "signature", raw)

    def __repr__(self) -> str:
        return (
            f"PartialSignature({self.scheme.name}, sig={self.signature.hex()[:16]}..., "
            f"pk={self.public_key.data.hex()[:16]}...)"
        )

    @property
    def flag(self) -> int:
        return flag_for_scheme(self.scheme)

    def to_compressed(self) -> bytes:
        """Flag-prefixed signature as stored in an aggregate's sigs list."""
        return bytes([self.flag]) + self.signature

    def to_serialized(self) -> str:
        """base64(flag || signature || public key)."""
        payload = bytes([self.flag]) + self.signature + self.public_key.to_bytes()
        return base64.b64encode(payload).decode("ascii")

    @classmethod
    def from_serialized(cls, value: Union[str, bytes]) -> "PartialSignature":
        """
        Parse a serialized signature.

        The public key length is taken from the scheme named by the flag.

        Raises:
            InvalidEncodingError: If value is not base64 or is too short
            UnknownSchemeFlagError: If the flag is not a member scheme
        """
        try:
            raw = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidEncodingError(f"Serialized signature is not valid base64: {e}") from e
        if not raw:
            raise InvalidEncodingError("Serialized signature is empty")

        scheme = scheme_for_flag(raw[0])
        if not scheme.is_member_scheme:
            raise UnknownSchemeFlagError(raw[0])

        pk_size = PUBLIC_KEY_SIZES[scheme.name]
        if len(raw) <= 1 + pk_size:
            raise InvalidEncodingError(
                f"Serialized {scheme.name} signature too short: {len(raw)} bytes"
            )
        return cls(
            scheme=scheme,
            signature=raw[1:-pk_size],
            public_key=PublicKey(scheme, raw[-pk_size:]),
        )


def split_compressed(compressed: BytesLike) -> Tuple[SignatureScheme, bytes]:
    """
    Split a compressed signature into (scheme, raw signature).

    Raises:
        MalformedAggregateError: If compressed has no signature bytes
        UnknownSchemeFlagError: If the flag is unknown or names MULTISIG
    """
    raw = _to_bytes(compressed)
    if len(raw) < 2:
        raise MalformedAggregateError(f"Compressed signature is {len(raw)} bytes, need flag and signature")
    scheme = scheme_for_flag(raw[0])
    if not scheme.is_member_scheme:
        raise UnknownSchemeFlagError(raw[0])
    return scheme, raw[1:]
