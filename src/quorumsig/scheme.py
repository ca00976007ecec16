"""
quorumsig/scheme.py

Signature schemes and their one-byte wire flags.

The flag table is a bijection: every scheme has exactly one flag and every
flag names exactly one scheme. MULTISIG has a flag of its own so that the
first byte of an aggregate identifies it as a multisig object.

Usage:
    from quorumsig.scheme import SignatureScheme, flag_for_scheme, scheme_for_flag

    flag_for_scheme(SignatureScheme.SECP256K1)    # 0x01
    scheme_for_flag(0x03)                         # SignatureScheme.MULTISIG
"""

from enum import Enum
from typing import Dict

from .errors import UnknownSchemeError, UnknownSchemeFlagError


class SignatureScheme(Enum):
    """Signature schemes understood by the ledger."""
    ED25519 = "ED25519"
    SECP256K1 = "Secp256k1"
    SECP256R1 = "Secp256r1"
    MULTISIG = "MultiSig"

    @property
    def flag(self) -> int:
        return flag_for_scheme(self)

    @property
    def is_member_scheme(self) -> bool:
        """Whether keys of this scheme may sit in a committee."""
        return self is not SignatureScheme.MULTISIG


SCHEME_TO_FLAG: Dict[SignatureScheme, int] = {
    SignatureScheme.ED25519: 0x00,
    SignatureScheme.SECP256K1: 0x01,
    SignatureScheme.SECP256R1: 0x02,
    SignatureScheme.MULTISIG: 0x03,
}

FLAG_TO_SCHEME: Dict[int, SignatureScheme] = {
    flag: scheme for scheme, flag in SCHEME_TO_FLAG.items()
}

MULTISIG_FLAG = SCHEME_TO_FLAG[SignatureScheme.MULTISIG]


def flag_for_scheme(scheme: SignatureScheme) -> int:
    """
    Get the wire flag for a scheme.

    Raises:
        UnknownSchemeError: If scheme is not a registered SignatureScheme
    """
    try:
        return SCHEME_TO_FLAG[scheme]
    except (KeyError, TypeError):
        raise UnknownSchemeError(f"Unknown signature scheme: {scheme!r}") from None


def scheme_for_flag(flag: int) -> SignatureScheme:
    """
    Get the scheme for a wire flag.

    Raises:
        UnknownSchemeFlagError: If no scheme uses this flag
    """
    try:
        return FLAG_TO_SCHEME[flag]
    except (KeyError, TypeError):
        raise UnknownSchemeFlagError(flag) from None


def scheme_from_name(name: str) -> SignatureScheme:
    """Look up a scheme by name, case-insensitively ("ed25519", "Secp256k1", ...)."""
    for scheme in SignatureScheme:
        if name.lower() in (scheme.value.lower(), scheme.name.lower()):
            return scheme
    raise UnknownSchemeError(f"Unknown signature scheme name: {name!r}")
