"""
quorumsig - Weighted-threshold multisig for ledger accounts

Provides:
- Deterministic multisig account addresses from an ordered, weighted committee
- Combining partial signatures into one canonical, base64 multisig signature
- Decoding that signature back into (scheme, signature, public key) triples
- Ed25519 / Secp256k1 / Secp256r1 keypairs for producing partial signatures

Usage:
    from quorumsig import (
        Ed25519Keypair,
        Secp256k1Keypair,
        WeightedKey,
        derive_multisig_address,
        combine_partial_signatures,
        decode_multisig,
    )

    k1 = Ed25519Keypair.generate()
    k2 = Secp256k1Keypair.generate()
    committee = [WeightedKey(k1.public_key, 1), WeightedKey(k2.public_key, 2)]

    address = derive_multisig_address(committee, threshold=2)

    multisig = combine_partial_signatures(
        [k2.sign_partial(digest)],
        committee,
        threshold=2,
    )
    partials = decode_multisig(multisig)

Threshold weight is not checked here; the ledger verifies it.
"""

from .scheme import (
    SignatureScheme,
    flag_for_scheme,
    scheme_for_flag,
    scheme_from_name,
    MULTISIG_FLAG,
)
from .publickey import (
    PublicKey,
    WeightedKey,
    make_committee,
    total_weight,
    threshold_to_bytes,
    threshold_from_bytes,
)
from .signature import PartialSignature
from .address import derive_multisig_address, normalize_address, is_valid_address
from .protocol import (
    MultiSigPublicKey,
    MultiSigAggregate,
    combine_partial_signatures,
    decode_multisig,
    parse_multisig,
)
from .signing import (
    Ed25519Keypair,
    Secp256k1Keypair,
    Secp256r1Keypair,
    keypair_from_secret_key,
    verify_signature,
    verify_partial,
)
from .config import (
    MultiSigConfig,
    DEFAULT_CONFIG,
    ADDRESS_LENGTH,
    MAX_SIGNERS,
)
from .errors import (
    MultiSigError,
    UnknownSchemeError,
    UnknownSchemeFlagError,
    CapacityExceededError,
    UnknownSignerError,
    DuplicateSignerError,
    InvalidEncodingError,
    MalformedAggregateError,
    BitmapIndexOutOfRangeError,
)

__version__ = "1.0.0"
__all__ = [
    # Schemes
    "SignatureScheme",
    "flag_for_scheme",
    "scheme_for_flag",
    "scheme_from_name",
    "MULTISIG_FLAG",
    # Keys & committees
    "PublicKey",
    "WeightedKey",
    "make_committee",
    "total_weight",
    "threshold_to_bytes",
    "threshold_from_bytes",
    # Signatures
    "PartialSignature",
    "MultiSigPublicKey",
    "MultiSigAggregate",
    # Operations
    "derive_multisig_address",
    "normalize_address",
    "is_valid_address",
    "combine_partial_signatures",
    "decode_multisig",
    "parse_multisig",
    # Signing
    "Ed25519Keypair",
    "Secp256k1Keypair",
    "Secp256r1Keypair",
    "keypair_from_secret_key",
    "verify_signature",
    "verify_partial",
    # Config
    "MultiSigConfig",
    "DEFAULT_CONFIG",
    "ADDRESS_LENGTH",
    "MAX_SIGNERS",
    # Errors
    "MultiSigError",
    "UnknownSchemeError",
    "UnknownSchemeFlagError",
    "CapacityExceededError",
    "UnknownSignerError",
    "DuplicateSignerError",
    "InvalidEncodingError",
    "MalformedAggregateError",
    "BitmapIndexOutOfRangeError",
]
